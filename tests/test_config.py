"""Tests for application configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from concept_graph.core.config import Settings, get_settings


class TestSettings:
    """Test Settings class."""

    def test_default_values(self) -> None:
        """Test that defaults are sensible."""
        settings = Settings(_env_file=None)
        assert settings.data_path == Path("data")
        assert settings.database_name == "concept_graph.db"
        assert settings.db_timeout == 5.0
        assert settings.log_level == "INFO"
        assert settings.seed_default_link_names is True
        assert settings.trash_retention_days == 30
        assert settings.purge_link_policy == "cascade"
        assert settings.proposal_high_confidence == 0.8
        assert settings.proposal_medium_confidence == 0.6
        assert settings.proposal_cache_max_size == 100

    def test_database_path(self, tmp_path: Path) -> None:
        """Database file lives under the data path."""
        settings = Settings(data_path=tmp_path, database_name="g.db")
        assert settings.database_path == tmp_path / "g.db"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that env vars override defaults."""
        monkeypatch.setenv("CONCEPT_GRAPH_TRASH_RETENTION_DAYS", "7")
        monkeypatch.setenv("CONCEPT_GRAPH_PURGE_LINK_POLICY", "block")
        monkeypatch.setenv("CONCEPT_GRAPH_SEED_DEFAULT_LINK_NAMES", "false")

        get_settings.cache_clear()
        try:
            settings = get_settings()
            assert settings.trash_retention_days == 7
            assert settings.purge_link_policy == "block"
            assert settings.seed_default_link_names is False
        finally:
            get_settings.cache_clear()

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the CONCEPT_GRAPH_ prefix is required."""
        monkeypatch.setenv("TRASH_RETENTION_DAYS", "1")

        get_settings.cache_clear()
        try:
            assert get_settings().trash_retention_days == 30
        finally:
            get_settings.cache_clear()

    def test_invalid_purge_policy_rejected(self) -> None:
        """Only cascade and block are accepted."""
        with pytest.raises(ValidationError):
            Settings(purge_link_policy="ignore")

    def test_get_settings_cached(self) -> None:
        """get_settings returns the same instance."""
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
