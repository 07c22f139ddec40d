"""
Pytest configuration and fixtures for backend tests.

Every test gets its own SQLite database under ``tmp_path``; API tests run
the real services behind ``app.dependency_overrides``.
"""

from __future__ import annotations

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from concept_graph.core.config import Settings
from concept_graph.core.database import Database
from concept_graph.graph.models import Concept, LinkNamePair
from concept_graph.services import (
    ConceptStore,
    LinkGraphService,
    LinkNameRegistry,
    LinkProposalFilter,
    ServiceContainer,
)

pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a per-test data directory."""
    return Settings(data_path=tmp_path / "data")


@pytest.fixture
def db(tmp_path: Path) -> Database:
    """Initialized empty database."""
    database = Database(tmp_path / "graph.db")
    database.initialize()
    return database


@pytest.fixture
def concept_store(db: Database) -> ConceptStore:
    return ConceptStore(db)


@pytest.fixture
def registry(db: Database) -> LinkNameRegistry:
    return LinkNameRegistry(db)


@pytest.fixture
def link_service(db: Database) -> LinkGraphService:
    return LinkGraphService(db)


@pytest.fixture
def proposal_filter(
    concept_store: ConceptStore,
    link_service: LinkGraphService,
    registry: LinkNameRegistry,
) -> LinkProposalFilter:
    return LinkProposalFilter(concept_store, link_service, registry)


@pytest_asyncio.fixture
async def concept_a(concept_store: ConceptStore) -> Concept:
    return await concept_store.create("Photosynthesis")


@pytest_asyncio.fixture
async def concept_b(concept_store: ConceptStore) -> Concept:
    return await concept_store.create("Chlorophyll")


@pytest_asyncio.fixture
async def concept_c(concept_store: ConceptStore) -> Concept:
    return await concept_store.create("Sunlight")


@pytest_asyncio.fixture
async def supports(registry: LinkNameRegistry) -> LinkNamePair:
    """Asymmetric 'supports' / 'supported by' pair."""
    return await registry.create("supports", "supported by")


@pytest_asyncio.fixture
async def services(settings: Settings) -> AsyncGenerator[ServiceContainer, None]:
    """Started service container (default vocabulary seeded)."""
    container = ServiceContainer(settings)
    await container.startup()
    yield container
    await container.shutdown()


@pytest_asyncio.fixture
async def client(services: ServiceContainer) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client wired to the services fixture via dependency overrides."""
    from concept_graph.api.deps import (
        get_concept_store,
        get_link_graph_service,
        get_link_name_registry,
        get_link_proposal_filter,
    )
    from concept_graph.main import app

    overrides = {
        get_concept_store: lambda: services.concepts,
        get_link_name_registry: lambda: services.link_names,
        get_link_graph_service: lambda: services.links,
        get_link_proposal_filter: lambda: services.proposals,
    }
    app.dependency_overrides.update(overrides)

    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as http:
            yield http
    finally:
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)
