"""
Request models for API endpoints.

Defines Pydantic models for validating incoming HTTP requests. Label
content rules (trimming, emptiness, symmetry) are enforced by the services
so that the same rules apply to every caller; these models only bound the
raw input.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from concept_graph.graph.models import LinkCandidate, LinkUpdate

# Upper bound on raw text accepted before cleaning
MAX_RAW_LABEL_LENGTH = 1000
MAX_NOTES_LENGTH = 10000


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Concept Request Models
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class CreateConceptRequest(BaseModel):
    """Request model for creating a concept."""

    title: str = Field(..., max_length=MAX_RAW_LABEL_LENGTH, description="Concept title")


class PurgeTrashRequest(BaseModel):
    """Request model for purging expired concepts from the trash."""

    days_old: int | None = Field(
        default=None,
        description="Purge concepts trashed at least this many days ago "
        "(defaults to the configured retention window)",
    )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Link Request Models
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class CreateLinkRequest(BaseModel):
    """Request model for creating a link."""

    source_id: str = Field(..., description="Concept the link starts from")
    target_id: str = Field(..., description="Concept the link points to")
    link_name_id: str = Field(..., description="Link name pair")
    notes: str | None = Field(default=None, max_length=MAX_NOTES_LENGTH)


class UpdateLinkRequest(BaseModel):
    """
    Request model for partially updating a link.

    Omitted fields are left unchanged; ``"notes": null`` clears the notes.
    """

    link_name_id: str | None = None
    notes: str | None = Field(default=None, max_length=MAX_NOTES_LENGTH)

    def to_update(self) -> LinkUpdate:
        """Convert to a LinkUpdate carrying only the fields that were sent."""
        return LinkUpdate.model_validate(self.model_dump(exclude_unset=True))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Link Name Request Models
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class CreateLinkNameRequest(BaseModel):
    """Request model for creating a link name pair."""

    forward_name: str = Field(..., max_length=MAX_RAW_LABEL_LENGTH)
    reverse_name: str | None = Field(default=None, max_length=MAX_RAW_LABEL_LENGTH)
    is_symmetric: bool | None = Field(
        default=None,
        description="Omit to infer symmetry from the labels",
    )


class RenameLinkNameRequest(BaseModel):
    """Request model for renaming a link name pair."""

    forward_name: str = Field(..., max_length=MAX_RAW_LABEL_LENGTH)
    reverse_name: str | None = Field(default=None, max_length=MAX_RAW_LABEL_LENGTH)
    is_symmetric: bool | None = Field(
        default=None,
        description="Omit to keep the stored flag",
    )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Link Proposal Request Models
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class ProposeLinksRequest(BaseModel):
    """Request model for submitting generated link candidates."""

    candidates: list[LinkCandidate] = Field(default_factory=list)


class ConfirmProposalRequest(BaseModel):
    """Request model for confirming a pending link proposal."""

    link_name_id: str | None = Field(
        default=None,
        description="Overrides the pre-selected link name pair",
    )
    notes: str | None = Field(default=None, max_length=MAX_NOTES_LENGTH)
