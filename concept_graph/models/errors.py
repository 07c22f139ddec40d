"""
Unified error schema for the Concept Graph API.

Provides consistent error codes, messages, and hints for all API responses.
All errors include retryability information and optional debugging details.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Graph errors
    REFERENCE_NOT_FOUND = "REFERENCE_NOT_FOUND"
    PAIR_IN_USE = "PAIR_IN_USE"
    INVALID_INPUT = "INVALID_INPUT"
    CONCEPT_IN_USE = "CONCEPT_IN_USE"

    # Validation errors (VALIDATION_*)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"

    # Capacity errors
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class APIError:
    """
    Structured error response for API endpoints.

    Attributes:
        code: Standardized error code from ErrorCode enum
        message: Human-readable error message
        detail: Optional technical details for debugging
        hint: Optional suggestion for resolving the error
        retryable: Whether the client should retry the request
    """

    code: ErrorCode
    message: str
    detail: str | None = None
    hint: str | None = None
    retryable: bool = False

    def to_dict(self) -> dict[str, dict[str, str | bool]]:
        """
        Convert error to dictionary format for JSON responses.

        Returns:
            Dictionary with 'error' key containing error details
        """
        error_dict: dict[str, str | bool] = {
            "code": self.code.value,
            "message": self.message,
            "retryable": self.retryable,
        }

        if self.detail is not None:
            error_dict["detail"] = self.detail

        if self.hint is not None:
            error_dict["hint"] = self.hint

        return {"error": error_dict}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Predefined Error Factories
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def reference_not_found_error(message: str, detail: str | None = None) -> APIError:
    """Create error for an id that does not resolve."""
    return APIError(
        code=ErrorCode.REFERENCE_NOT_FOUND,
        message=message,
        detail=detail,
        hint="Check the ID; the record may have been deleted or purged",
        retryable=False,
    )


def pair_in_use_error(detail: str | None = None) -> APIError:
    """Create error for deleting a link name that links still reference."""
    return APIError(
        code=ErrorCode.PAIR_IN_USE,
        message="Link name is in use",
        detail=detail,
        hint="Pass replacement_id to move the referencing links before deleting",
        retryable=False,
    )


def invalid_input_error(message: str, detail: str | None = None) -> APIError:
    """Create error for a request the graph rejects."""
    return APIError(
        code=ErrorCode.INVALID_INPUT,
        message=message,
        detail=detail,
        hint="Check the input parameters and try again",
        retryable=False,
    )


def concept_in_use_error(detail: str | None = None) -> APIError:
    """Create error for a purge blocked by linked concepts."""
    return APIError(
        code=ErrorCode.CONCEPT_IN_USE,
        message="Concepts are still linked",
        detail=detail,
        hint="Delete the links of these concepts or restore them before purging",
        retryable=False,
    )


def invalid_id_format_error(field: str) -> APIError:
    """Create error for a malformed record ID."""
    return APIError(
        code=ErrorCode.INVALID_FORMAT,
        message=f"Invalid {field} format",
        detail="IDs are 12 lowercase hex characters",
        hint="Check the ID and try again",
        retryable=False,
    )


def validation_error(field: str, reason: str) -> APIError:
    """Create error for validation failures."""
    return APIError(
        code=ErrorCode.VALIDATION_ERROR,
        message=f"Validation failed for field: {field}",
        detail=reason,
        hint="Check the input format and try again",
        retryable=False,
    )


def service_unavailable_error(detail: str | None = None) -> APIError:
    """Create error for service unavailability."""
    return APIError(
        code=ErrorCode.SERVICE_UNAVAILABLE,
        message="Service temporarily unavailable",
        detail=detail,
        hint="Please try again in a moment",
        retryable=True,
    )


def internal_error(detail: str | None = None) -> APIError:
    """Create generic internal error."""
    return APIError(
        code=ErrorCode.INTERNAL_ERROR,
        message="An internal error occurred",
        detail=detail,
        hint="Please try again. If the problem persists, check the server logs.",
        retryable=True,
    )
