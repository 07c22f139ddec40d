"""
Concepts API endpoints.

Provides endpoints for the minimal concept store the link graph sits on:
- Concept creation, lookup and listing
- Trash, restore and purge of expired trash
- A concept's outgoing and incoming links
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from concept_graph.api.deps import (
    ValidatedConceptId,
    get_concept_store,
    get_link_graph_service,
)
from concept_graph.graph.models import Concept, ConceptLinks, ConceptStatus, PurgeResult
from concept_graph.models.api import ConceptListResponse
from concept_graph.models.requests import CreateConceptRequest, PurgeTrashRequest
from concept_graph.services import ConceptStore, LinkGraphService

router = APIRouter(prefix="/concepts", tags=["concepts"])


# List route must come before parameterized routes
@router.get("", response_model=ConceptListResponse)
async def list_concepts(
    status: ConceptStatus | None = Query(None, description="Filter by status"),
    concepts: ConceptStore = Depends(get_concept_store),
) -> ConceptListResponse:
    """List concepts, oldest first, optionally filtered by status."""
    items = await concepts.list(status)
    return ConceptListResponse(concepts=items, total=len(items))


@router.post("", response_model=Concept, status_code=201)
async def create_concept(
    request: CreateConceptRequest,
    concepts: ConceptStore = Depends(get_concept_store),
) -> Concept:
    """
    Create a concept.

    Args:
        request: Concept creation request with title
        concepts: Injected concept store

    Returns:
        The new active concept
    """
    return await concepts.create(request.title)


@router.post("/purge-trash", response_model=PurgeResult)
async def purge_trash(
    request: PurgeTrashRequest,
    concepts: ConceptStore = Depends(get_concept_store),
) -> PurgeResult:
    """
    Permanently remove concepts trashed longer than the retention window.

    Under the ``cascade`` policy their links are deleted in the same
    transaction; under ``block`` the purge fails with 409 CONCEPT_IN_USE
    if any of them is still linked.
    """
    return await concepts.purge_trash(request.days_old)


@router.get("/{concept_id}", response_model=Concept)
async def get_concept(
    concept_id: str = Depends(ValidatedConceptId()),
    concepts: ConceptStore = Depends(get_concept_store),
) -> Concept:
    """Get a concept by ID (active or trashed)."""
    return await concepts.get(concept_id)


@router.post("/{concept_id}/trash", response_model=Concept)
async def trash_concept(
    concept_id: str = Depends(ValidatedConceptId()),
    concepts: ConceptStore = Depends(get_concept_store),
) -> Concept:
    """Move a concept to the trash. Its links are kept."""
    return await concepts.trash(concept_id)


@router.post("/{concept_id}/restore", response_model=Concept)
async def restore_concept(
    concept_id: str = Depends(ValidatedConceptId()),
    concepts: ConceptStore = Depends(get_concept_store),
) -> Concept:
    """Restore a trashed concept."""
    return await concepts.restore(concept_id)


@router.get("/{concept_id}/links", response_model=ConceptLinks)
async def get_concept_links(
    concept_id: str = Depends(ValidatedConceptId()),
    links: LinkGraphService = Depends(get_link_graph_service),
) -> ConceptLinks:
    """
    Get a concept's links split by direction.

    Outgoing links are labelled with the forward name and carry the target
    as peer; incoming links are labelled with the reverse name and carry
    the source as peer.

    Args:
        concept_id: 12-character concept identifier
        links: Injected link graph service

    Returns:
        ConceptLinks with outgoing and incoming views, oldest first
    """
    return await links.get_by_concept(concept_id)
