"""
Link Names API endpoints.

Provides endpoints for the relationship-type vocabulary:
- Listing, creation and rename of link name pairs
- Live usage (count plus referencing links)
- Safe delete with an optional replacement pair

Follows existing router patterns (concepts.py, links.py).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from concept_graph.api.deps import (
    ValidatedLinkNameId,
    get_link_name_registry,
    validate_record_id,
)
from concept_graph.graph.models import LinkNameDeletion, LinkNamePair, LinkNameUsage
from concept_graph.models.api import LinkNameListResponse
from concept_graph.models.requests import CreateLinkNameRequest, RenameLinkNameRequest
from concept_graph.services import LinkNameRegistry

router = APIRouter(prefix="/link-names", tags=["link-names"])


@router.get("", response_model=LinkNameListResponse)
async def list_link_names(
    registry: LinkNameRegistry = Depends(get_link_name_registry),
) -> LinkNameListResponse:
    """List live link name pairs, defaults first, then custom pairs."""
    pairs = await registry.list_all()
    return LinkNameListResponse(link_names=pairs, total=len(pairs))


@router.post("", response_model=LinkNamePair, status_code=201)
async def create_link_name(
    request: CreateLinkNameRequest,
    registry: LinkNameRegistry = Depends(get_link_name_registry),
) -> LinkNamePair:
    """
    Create a custom link name pair.

    Symmetric pairs always store the forward name as the reverse name.
    When ``is_symmetric`` is omitted, a pair without a distinct reverse
    name is treated as symmetric.

    Args:
        request: Labels and optional symmetric flag
        registry: Injected link name registry

    Returns:
        The new pair
    """
    return await registry.create(
        request.forward_name,
        request.reverse_name,
        request.is_symmetric,
    )


@router.get("/{link_name_id}", response_model=LinkNamePair)
async def get_link_name(
    link_name_id: str = Depends(ValidatedLinkNameId()),
    registry: LinkNameRegistry = Depends(get_link_name_registry),
) -> LinkNamePair:
    """Get a live link name pair by ID."""
    return await registry.get(link_name_id)


@router.patch("/{link_name_id}", response_model=LinkNamePair)
async def rename_link_name(
    request: RenameLinkNameRequest,
    link_name_id: str = Depends(ValidatedLinkNameId()),
    registry: LinkNameRegistry = Depends(get_link_name_registry),
) -> LinkNamePair:
    """
    Rename a link name pair.

    Links reference the pair by ID, so they show the new labels at once.
    """
    return await registry.rename(
        link_name_id,
        request.forward_name,
        request.reverse_name,
        request.is_symmetric,
    )


@router.get("/{link_name_id}/usage", response_model=LinkNameUsage)
async def get_link_name_usage(
    link_name_id: str = Depends(ValidatedLinkNameId()),
    registry: LinkNameRegistry = Depends(get_link_name_registry),
) -> LinkNameUsage:
    """Count and list the links currently using a pair."""
    return await registry.usage(link_name_id)


@router.delete("/{link_name_id}", response_model=LinkNameDeletion)
async def delete_link_name(
    link_name_id: str = Depends(ValidatedLinkNameId()),
    replacement_id: str | None = Query(
        None, description="Pair that referencing links are moved to"
    ),
    registry: LinkNameRegistry = Depends(get_link_name_registry),
) -> LinkNameDeletion:
    """
    Safely delete a link name pair.

    A pair in use needs ``replacement_id``: every referencing link is moved
    to the replacement and the pair removed in one transaction. Without it
    the request fails with 409 PAIR_IN_USE and nothing changes.

    Args:
        link_name_id: Pair to delete
        replacement_id: Optional replacement pair
        registry: Injected link name registry

    Returns:
        LinkNameDeletion with the number of links moved
    """
    if replacement_id is not None:
        validate_record_id(replacement_id, "replacement link name ID")
    return await registry.delete(link_name_id, replacement_id)
