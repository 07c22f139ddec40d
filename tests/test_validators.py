"""Tests for ID and label validation helpers."""

from __future__ import annotations

from concept_graph.core.validators import (
    clean_label,
    generate_id,
    is_valid_record_id,
)


class TestRecordIds:
    """Test record ID generation and validation."""

    def test_generated_ids_are_valid(self) -> None:
        for _ in range(20):
            assert is_valid_record_id(generate_id())

    def test_generated_ids_unique(self) -> None:
        assert len({generate_id() for _ in range(200)}) == 200

    def test_rejects_wrong_length_or_case(self) -> None:
        assert not is_valid_record_id("abc")
        assert not is_valid_record_id("ABCDEF012345")
        assert not is_valid_record_id("abcdef0123456")
        assert not is_valid_record_id("")
        assert not is_valid_record_id("../etc/passw")


class TestCleanLabel:
    """Test label normalization."""

    def test_strips_whitespace(self) -> None:
        assert clean_label("  supports  ") == "supports"

    def test_strips_control_characters(self) -> None:
        assert clean_label("sup\x00ports\x07") == "supports"

    def test_none_becomes_empty(self) -> None:
        assert clean_label(None) == ""

    def test_whitespace_only_becomes_empty(self) -> None:
        assert clean_label(" \t\n ") == ""

    def test_inner_spaces_kept(self) -> None:
        assert clean_label("supported by") == "supported by"
