"""Health check endpoint for monitoring."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from concept_graph import __version__
from concept_graph.api.deps import get_link_name_registry
from concept_graph.models.api import HealthResponse
from concept_graph.services import LinkNameRegistry

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(
    registry: LinkNameRegistry = Depends(get_link_name_registry),
) -> HealthResponse:
    """Report liveness; the vocabulary query doubles as a database check."""
    pairs = await registry.list_all()
    return HealthResponse(status="ok", version=__version__, link_name_count=len(pairs))
