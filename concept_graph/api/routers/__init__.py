"""
API router modules.

This package contains FastAPI routers organized by feature area:
- concepts: Concept store endpoints and per-concept links
- links: Link CRUD, listing, stats and export
- link_names: Relationship vocabulary and safe delete
- proposals: Link proposal confirmation workflow
- health: Health check for monitoring
"""

from concept_graph.api.routers.concepts import router as concepts_router
from concept_graph.api.routers.health import router as health_router
from concept_graph.api.routers.link_names import router as link_names_router
from concept_graph.api.routers.links import router as links_router
from concept_graph.api.routers.proposals import router as proposals_router

__all__ = [
    "concepts_router",
    "health_router",
    "link_names_router",
    "links_router",
    "proposals_router",
]
