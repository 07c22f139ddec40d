"""
Pydantic response models for the Concept Graph API.

Graph records (Concept, Link, LinkNamePair, ...) are returned as-is; the
models here wrap lists and acknowledge deletions.
"""

from __future__ import annotations

from pydantic import BaseModel

from concept_graph.graph.models import (
    Concept,
    Link,
    LinkDetail,
    LinkNamePair,
    LinkProposal,
    LinkSummary,
)


class HealthResponse(BaseModel):
    """Response for /health endpoint."""

    status: str
    version: str
    link_name_count: int


class ConceptListResponse(BaseModel):
    """Response for GET /concepts."""

    concepts: list[Concept]
    total: int


class LinkListResponse(BaseModel):
    """Response for GET /links (summary or joined detail rows)."""

    links: list[LinkDetail] | list[LinkSummary]
    total: int


class LinksBetweenResponse(BaseModel):
    """Response for GET /links/between."""

    source_id: str
    target_id: str
    links: list[Link]


class LinkNameListResponse(BaseModel):
    """Response for GET /link-names."""

    link_names: list[LinkNamePair]
    total: int


class ProposalListResponse(BaseModel):
    """Response for link proposal listings."""

    source_id: str
    proposals: list[LinkProposal]
    total: int


class DeleteResponse(BaseModel):
    """Acknowledgement for a successful delete or dismiss."""

    status: str = "deleted"
    id: str
