"""
Centralized validation utilities for ID patterns and labels.

This module provides a single source of truth for validation patterns used
throughout the codebase, preventing duplication and ensuring consistency.
"""

from __future__ import annotations

import re
from uuid import uuid4

# Record ID pattern (12 hex characters, used for concepts, links, link names)
# Generated via uuid4().hex[:12] which produces lowercase
RECORD_ID_PATTERN = re.compile(r"^[0-9a-f]{12}$")

# Maximum length for link labels and concept titles
MAX_LABEL_LENGTH = 200

# Control character pattern (C0 and C1 control chars, common whitespace kept)
CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def generate_id() -> str:
    """Generate a 12-character hex ID from UUID4."""
    return uuid4().hex[:12]


def is_valid_record_id(value: str) -> bool:
    """
    Check if a string is a valid record ID (12 hex characters).

    Args:
        value: The string to validate

    Returns:
        True if the value matches the record ID format, False otherwise
    """
    return bool(RECORD_ID_PATTERN.match(value))


def clean_label(value: str | None) -> str:
    """
    Normalize a user-supplied label.

    Strips control characters and surrounding whitespace. ``None`` becomes
    an empty string so callers only need a single emptiness check.

    Args:
        value: Raw label text

    Returns:
        The cleaned label (possibly empty)
    """
    if value is None:
        return ""
    return CONTROL_CHAR_PATTERN.sub("", value).strip()


def label_key(value: str) -> str:
    """
    Case-folded comparison key for a label.

    Used both for the stored uniqueness key of forward names and for
    matching proposed labels, so the two never disagree on non-ASCII text.
    """
    return value.strip().casefold()
