"""
Links API endpoints.

Provides endpoints for directed, typed links between concepts:
- Link creation, partial update and deletion (keyed by link ID)
- Global listing in summary or joined form
- Navigation between an ordered pair of concepts
- Graph stats and export (GraphML/JSON)

Follows existing router patterns (concepts.py, link_names.py).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from concept_graph.api.deps import (
    ValidatedLinkId,
    get_link_graph_service,
    validate_record_id,
)
from concept_graph.graph.errors import ReferenceNotFoundError
from concept_graph.graph.models import GraphStats, Link
from concept_graph.models.api import (
    DeleteResponse,
    LinkListResponse,
    LinksBetweenResponse,
)
from concept_graph.models.requests import CreateLinkRequest, UpdateLinkRequest
from concept_graph.services import LinkGraphService
from concept_graph.services.link_graph_service import ExportFormat

router = APIRouter(prefix="/links", tags=["links"])


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# COLLECTION ENDPOINTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@router.get("", response_model=LinkListResponse)
async def list_links(
    summary: bool = Query(False, description="Return identifiers only"),
    links: LinkGraphService = Depends(get_link_graph_service),
) -> LinkListResponse:
    """
    List every link, newest first.

    Args:
        summary: True for id/source/target/link name only, False for links
            joined with concept titles and both labels
        links: Injected link graph service

    Returns:
        LinkListResponse with links and total count
    """
    items = await links.get_all(summary=summary)
    return LinkListResponse(links=items, total=len(items))


@router.post("", response_model=Link, status_code=201)
async def create_link(
    request: CreateLinkRequest,
    links: LinkGraphService = Depends(get_link_graph_service),
) -> Link:
    """
    Create a link from one concept to another.

    Returns 404 if a concept or the link name does not resolve and 400 for
    a self link or a missing ID.
    """
    return await links.create_link(
        request.source_id,
        request.target_id,
        request.link_name_id,
        request.notes,
    )


@router.get("/between", response_model=LinksBetweenResponse)
async def get_links_between(
    source_id: str = Query(..., description="Concept the links start from"),
    target_id: str = Query(..., description="Concept the links point to"),
    links: LinkGraphService = Depends(get_link_graph_service),
) -> LinksBetweenResponse:
    """Links on an ordered (source, target) pair, for navigation."""
    validate_record_id(source_id, "source concept ID")
    validate_record_id(target_id, "target concept ID")

    items = await links.get_between(source_id, target_id)
    return LinksBetweenResponse(source_id=source_id, target_id=target_id, links=items)


@router.get("/stats", response_model=GraphStats)
async def get_stats(
    links: LinkGraphService = Depends(get_link_graph_service),
) -> GraphStats:
    """Summary counts for dashboards."""
    return await links.stats()


@router.get("/export", response_model=None)
async def export_graph(
    export_format: ExportFormat = Query("graphml", alias="format"),
    links: LinkGraphService = Depends(get_link_graph_service),
) -> Any:
    """
    Export the whole concept graph.

    Args:
        export_format: "graphml" (XML document) or "json" (node-link data)
        links: Injected link graph service

    Returns:
        GraphML as application/xml, or node-link JSON
    """
    exported = await links.export_graph(export_format)
    if isinstance(exported, str):
        return Response(
            content=exported,
            media_type="application/xml",
            headers={
                "Content-Disposition": 'attachment; filename="concept_graph.graphml"'
            },
        )
    return exported


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ITEM ENDPOINTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@router.get("/{link_id}", response_model=Link)
async def get_link(
    link_id: str = Depends(ValidatedLinkId()),
    links: LinkGraphService = Depends(get_link_graph_service),
) -> Link:
    """Get a link by ID."""
    return await links.get_link(link_id)


@router.patch("/{link_id}", response_model=Link)
async def update_link(
    request: UpdateLinkRequest,
    link_id: str = Depends(ValidatedLinkId()),
    links: LinkGraphService = Depends(get_link_graph_service),
) -> Link:
    """
    Partially update a link.

    Only fields present in the body are changed; ``"notes": null`` clears
    the notes.
    """
    return await links.update_link(link_id, request.to_update())


@router.delete("/{link_id}", response_model=DeleteResponse)
async def delete_link(
    link_id: str = Depends(ValidatedLinkId()),
    links: LinkGraphService = Depends(get_link_graph_service),
) -> DeleteResponse:
    """
    Delete a link by its ID.

    Raises:
        ReferenceNotFoundError: 404 if the link does not exist
    """
    if not await links.delete_link(link_id):
        raise ReferenceNotFoundError("Link", link_id)
    return DeleteResponse(id=link_id)
