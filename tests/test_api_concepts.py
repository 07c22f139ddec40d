"""
Concepts API Tests.

Tests for /concepts endpoints using httpx AsyncClient with ASGITransport,
backed by real services on a temporary database.
"""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from concept_graph.services import ServiceContainer


class TestConceptEndpoints:
    """Test concept CRUD-lite endpoints."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, client: AsyncClient) -> None:
        response = await client.post("/concepts", json={"title": "  Mitosis  "})
        assert response.status_code == 201
        created = response.json()
        assert created["title"] == "Mitosis"
        assert created["status"] == "active"
        assert len(created["id"]) == 12

        response = await client.get(f"/concepts/{created['id']}")
        assert response.status_code == 200
        assert response.json()["title"] == "Mitosis"

    @pytest.mark.asyncio
    async def test_create_blank_title_is_400(self, client: AsyncClient) -> None:
        response = await client.post("/concepts", json={"title": "   "})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"

    @pytest.mark.asyncio
    async def test_create_missing_title_is_422(self, client: AsyncClient) -> None:
        response = await client.post("/concepts", json={})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_get_unknown_is_404(self, client: AsyncClient) -> None:
        response = await client.get("/concepts/000000000000")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "REFERENCE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_malformed_id_is_400(self, client: AsyncClient) -> None:
        response = await client.get("/concepts/not-an-id")
        assert response.status_code == 400
        assert response.json()["detail"]["error"]["code"] == "INVALID_FORMAT"

    @pytest.mark.asyncio
    async def test_list_with_status_filter(self, client: AsyncClient) -> None:
        a = (await client.post("/concepts", json={"title": "A"})).json()
        b = (await client.post("/concepts", json={"title": "B"})).json()
        await client.post(f"/concepts/{b['id']}/trash")

        everything = (await client.get("/concepts")).json()
        active = (await client.get("/concepts", params={"status": "active"})).json()
        trashed = (await client.get("/concepts", params={"status": "trashed"})).json()

        assert everything["total"] == 2
        assert [c["id"] for c in active["concepts"]] == [a["id"]]
        assert [c["id"] for c in trashed["concepts"]] == [b["id"]]

    @pytest.mark.asyncio
    async def test_trash_and_restore(self, client: AsyncClient) -> None:
        concept = (await client.post("/concepts", json={"title": "A"})).json()

        trashed = (await client.post(f"/concepts/{concept['id']}/trash")).json()
        assert trashed["status"] == "trashed"
        assert trashed["trashed_at"] is not None

        restored = (await client.post(f"/concepts/{concept['id']}/restore")).json()
        assert restored["status"] == "active"
        assert restored["trashed_at"] is None


class TestPurgeTrash:
    """Test POST /concepts/purge-trash."""

    @pytest.mark.asyncio
    async def test_purge_cascades_links(
        self, client: AsyncClient, services: ServiceContainer
    ) -> None:
        a = await services.concepts.create("A")
        b = await services.concepts.create("B")
        pair = (await services.link_names.list_all())[0]
        await services.links.create_link(a.id, b.id, pair.id)
        await services.concepts.trash(a.id)

        response = await client.post("/concepts/purge-trash", json={"days_old": 0})

        assert response.status_code == 200
        assert response.json() == {"purged_ids": [a.id], "deleted_link_count": 1}
        b_view = (await client.get(f"/concepts/{b.id}/links")).json()
        assert b_view["incoming"] == []

    @pytest.mark.asyncio
    async def test_purge_default_retention_keeps_recent(
        self, client: AsyncClient, services: ServiceContainer
    ) -> None:
        a = await services.concepts.create("A")
        await services.concepts.trash(a.id)

        response = await client.post("/concepts/purge-trash", json={})

        assert response.status_code == 200
        assert response.json()["purged_ids"] == []

    @pytest.mark.asyncio
    async def test_negative_days_is_400(self, client: AsyncClient) -> None:
        response = await client.post("/concepts/purge-trash", json={"days_old": -5})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"


class TestConceptLinks:
    """Test GET /concepts/{id}/links."""

    @pytest.mark.asyncio
    async def test_links_split_by_direction(
        self, client: AsyncClient, services: ServiceContainer
    ) -> None:
        a = await services.concepts.create("A")
        b = await services.concepts.create("B")
        pair = await services.link_names.create("supports", "supported by")
        link = await services.links.create_link(a.id, b.id, pair.id)

        a_view = (await client.get(f"/concepts/{a.id}/links")).json()
        b_view = (await client.get(f"/concepts/{b.id}/links")).json()

        assert a_view["concept_id"] == a.id
        assert [v["id"] for v in a_view["outgoing"]] == [link.id]
        assert a_view["outgoing"][0]["label"] == "supports"
        assert a_view["outgoing"][0]["direction"] == "outgoing"
        assert a_view["incoming"] == []
        assert b_view["incoming"][0]["label"] == "supported by"
        assert b_view["incoming"][0]["peer_title"] == "A"

    @pytest.mark.asyncio
    async def test_unknown_concept_is_404(self, client: AsyncClient) -> None:
        response = await client.get("/concepts/000000000000/links")
        assert response.status_code == 404
