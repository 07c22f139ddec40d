"""
Relationship-type vocabulary rules.

Holds the seed link name pairs and the single coupling rule for symmetric
pairs. Symmetry is a validation rule on one record, not a kind of pair, so
it lives in one function applied on every create and rename.
"""

from __future__ import annotations

from typing import NamedTuple


class DefaultPair(NamedTuple):
    """A seed link name pair."""

    forward: str
    reverse: str

    @property
    def is_symmetric(self) -> bool:
        return self.forward == self.reverse


DEFAULT_LINK_NAME_PAIRS: tuple[DefaultPair, ...] = (
    DefaultPair("belongs to", "contains"),
    DefaultPair("references", "referenced by"),
    DefaultPair("is a subset of", "is a superset of"),
    DefaultPair("builds on", "built on by"),
    DefaultPair("contradicts", "contradicted by"),
    DefaultPair("related to", "related to"),
    DefaultPair("example of", "exemplified by"),
    DefaultPair("prerequisite for", "requires"),
    DefaultPair("extends", "extended by"),
    DefaultPair("similar to", "similar to"),
    DefaultPair("part of", "contains"),
    DefaultPair("contains", "part of"),
    DefaultPair("inspired by", "inspired"),
    DefaultPair("opposes", "opposed by"),
)


def apply_symmetry(
    forward_name: str, reverse_name: str, is_symmetric: bool
) -> tuple[str, str]:
    """
    Enforce the symmetric coupling rule on a pair's labels.

    Args:
        forward_name: Forward label (already cleaned)
        reverse_name: Reverse label requested by the caller
        is_symmetric: Symmetric flag of the record being written

    Returns:
        (forward_name, reverse_name) with reverse forced to forward when
        the pair is symmetric
    """
    if is_symmetric:
        return forward_name, forward_name
    return forward_name, reverse_name
