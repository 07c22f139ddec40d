"""
Service Container and Lifecycle Management.

Provides a centralized container for all service instances with proper
startup/shutdown lifecycle management for FastAPI integration.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from concept_graph.core.config import Settings, get_settings
from concept_graph.core.database import Database
from concept_graph.services.concept_store import ConceptStore
from concept_graph.services.link_graph_service import LinkGraphService
from concept_graph.services.link_name_registry import LinkNameRegistry
from concept_graph.services.link_proposal_filter import LinkProposalFilter

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Dependency injection container for all services.

    Manages service lifecycle with startup/shutdown hooks for proper
    resource management in FastAPI applications.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize container with empty service references."""
        self.settings = settings or get_settings()
        self._db: Database | None = None
        self._concepts: ConceptStore | None = None
        self._link_names: LinkNameRegistry | None = None
        self._links: LinkGraphService | None = None
        self._proposals: LinkProposalFilter | None = None

    @property
    def db(self) -> Database:
        """Get database instance."""
        if self._db is None:
            raise RuntimeError(
                "ServiceContainer not initialized - call startup() first"
            )
        return self._db

    @property
    def concepts(self) -> ConceptStore:
        """Get concept store instance."""
        if self._concepts is None:
            raise RuntimeError(
                "ServiceContainer not initialized - call startup() first"
            )
        return self._concepts

    @property
    def link_names(self) -> LinkNameRegistry:
        """Get link name registry instance."""
        if self._link_names is None:
            raise RuntimeError(
                "ServiceContainer not initialized - call startup() first"
            )
        return self._link_names

    @property
    def links(self) -> LinkGraphService:
        """Get link graph service instance."""
        if self._links is None:
            raise RuntimeError(
                "ServiceContainer not initialized - call startup() first"
            )
        return self._links

    @property
    def proposals(self) -> LinkProposalFilter:
        """Get link proposal filter instance."""
        if self._proposals is None:
            raise RuntimeError(
                "ServiceContainer not initialized - call startup() first"
            )
        return self._proposals

    async def startup(self) -> None:
        """
        Initialize all services.

        Creates the database schema, builds services in dependency order and
        seeds the default link name vocabulary when enabled.
        """
        settings = self.settings
        logger.info("Starting service container")

        self._db = Database(settings.database_path, timeout=settings.db_timeout)
        await asyncio.to_thread(self._db.initialize)

        self._concepts = ConceptStore(
            self._db,
            retention_days=settings.trash_retention_days,
            purge_link_policy=settings.purge_link_policy,
        )
        self._link_names = LinkNameRegistry(self._db)
        self._links = LinkGraphService(self._db)
        self._proposals = LinkProposalFilter(
            self._concepts,
            self._links,
            self._link_names,
            high_confidence=settings.proposal_high_confidence,
            medium_confidence=settings.proposal_medium_confidence,
            max_pending_sources=settings.proposal_cache_max_size,
        )

        if settings.seed_default_link_names:
            await self._link_names.seed_defaults()

        logger.info("Service container started")

    async def shutdown(self) -> None:
        """Release service references."""
        logger.info("Shutting down service container")

        self._proposals = None
        self._links = None
        self._link_names = None
        self._concepts = None
        self._db = None

        logger.info("Service container shutdown complete")


# Global service container instance
_services: ServiceContainer | None = None


def get_services() -> ServiceContainer:
    """
    Get the global service container instance.

    Returns:
        Global ServiceContainer singleton

    Raises:
        RuntimeError: If container hasn't been initialized
    """
    if _services is None:
        raise RuntimeError(
            "Services not initialized - ensure services_lifespan() is used"
        )
    return _services


@asynccontextmanager
async def services_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    FastAPI lifespan context manager for service initialization.

    Args:
        app: FastAPI application instance

    Yields:
        None (context manager pattern)
    """
    global _services

    _services = ServiceContainer()
    await _services.startup()
    logger.info("FastAPI services initialized")

    try:
        yield
    finally:
        if _services:
            await _services.shutdown()
        _services = None
        logger.info("FastAPI services cleaned up")


__all__ = [
    "ServiceContainer",
    "get_services",
    "services_lifespan",
    "ConceptStore",
    "LinkGraphService",
    "LinkNameRegistry",
    "LinkProposalFilter",
]
