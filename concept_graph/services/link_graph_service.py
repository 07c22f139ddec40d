"""
Link Graph Service - directed, typed edges between concepts.

Manages links including:
- Creation and partial update, validated against the concept store and
  the link name registry inside the writing transaction
- Deletion keyed only by the link's own id
- Per-concept outgoing/incoming views with direction-appropriate labels
- Global listing (summary or fully joined), stats and export

Follows existing service patterns (ConceptStore, LinkNameRegistry).
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Literal

import networkx as nx  # type: ignore[import-untyped]

from concept_graph.core.database import Database
from concept_graph.core.validators import clean_label
from concept_graph.graph.errors import InvalidInputError, ReferenceNotFoundError
from concept_graph.graph.export import (
    build_graph,
    connected_node_count,
    to_graphml,
    to_node_link,
)
from concept_graph.graph.models import (
    ConceptLinks,
    GraphStats,
    Link,
    LinkDetail,
    LinkDirection,
    LinkSummary,
    LinkUpdate,
)
from concept_graph.graph.repository import (
    ConceptRepository,
    LinkNameRepository,
    LinkRepository,
)

logger = logging.getLogger(__name__)

ExportFormat = Literal["graphml", "json"]


def _clean_notes(notes: str | None) -> str | None:
    cleaned = clean_label(notes)
    return cleaned or None


class LinkGraphService:
    """
    Service for link operations.

    Every id a link references is checked in the same transaction that
    writes the link, so no dangling reference is ever persisted. SQLite
    foreign keys back the same rule at the storage level.
    """

    def __init__(self, db: Database) -> None:
        """
        Initialize Link Graph Service.

        Args:
            db: Database shared with the concept store and link name registry
        """
        self._db = db
        self._concepts = ConceptRepository()
        self._names = LinkNameRepository()
        self._links = LinkRepository()

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # MUTATIONS
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def create_link(
        self,
        source_id: str,
        target_id: str,
        link_name_id: str,
        notes: str | None = None,
    ) -> Link:
        """
        Create a link from one concept to another.

        Args:
            source_id: Concept the link starts from
            target_id: Concept the link points to
            link_name_id: Relationship type
            notes: Optional free text (blank is stored as no notes)

        Returns:
            The persisted link

        Raises:
            InvalidInputError: Missing id, or source equals target
            ReferenceNotFoundError: A concept or the link name does not resolve
        """
        for field, value in (
            ("source_id", source_id),
            ("target_id", target_id),
            ("link_name_id", link_name_id),
        ):
            if not value:
                raise InvalidInputError(f"{field} is required")
        if source_id == target_id:
            raise InvalidInputError("A concept cannot be linked to itself")

        cleaned_notes = _clean_notes(notes)

        def _create(conn: sqlite3.Connection) -> Link:
            if self._concepts.get(conn, source_id) is None:
                raise ReferenceNotFoundError("Source concept", source_id)
            if self._concepts.get(conn, target_id) is None:
                raise ReferenceNotFoundError("Target concept", target_id)
            if self._names.get(conn, link_name_id) is None:
                raise ReferenceNotFoundError("Link name", link_name_id)
            return self._links.insert(
                conn, source_id, target_id, link_name_id, cleaned_notes
            )

        link = await self._db.write(_create)
        logger.info(
            f"Created link {link.id}: {source_id} -> {target_id} ({link_name_id})"
        )
        return link

    async def update_link(self, link_id: str, changes: LinkUpdate) -> Link:
        """
        Partially update a link's relationship type and/or notes.

        Only fields present in ``changes.model_fields_set`` are applied.

        Raises:
            ReferenceNotFoundError: Link or new link name does not resolve
            InvalidInputError: link_name_id explicitly set to empty
        """
        fields = changes.model_fields_set
        if "link_name_id" in fields and not changes.link_name_id:
            raise InvalidInputError("link_name_id cannot be empty")

        def _update(conn: sqlite3.Connection) -> Link:
            current = self._links.get(conn, link_id)
            if current is None:
                raise ReferenceNotFoundError("Link", link_id)

            link_name_id = current.link_name_id
            if "link_name_id" in fields and changes.link_name_id != link_name_id:
                assert changes.link_name_id is not None
                if self._names.get(conn, changes.link_name_id) is None:
                    raise ReferenceNotFoundError("Link name", changes.link_name_id)
                link_name_id = changes.link_name_id

            notes = current.notes
            if "notes" in fields:
                notes = _clean_notes(changes.notes)

            self._links.update(conn, link_id, link_name_id, notes)
            updated = self._links.get(conn, link_id)
            assert updated is not None
            return updated

        link = await self._db.write(_update)
        logger.info(f"Updated link {link_id} (fields: {sorted(fields)})")
        return link

    async def delete_link(self, link_id: str) -> bool:
        """
        Delete a link by its id.

        Returns:
            True if the link was deleted, False if it did not exist
        """
        deleted = await self._db.write(lambda conn: self._links.delete(conn, link_id))
        if deleted:
            logger.info(f"Deleted link {link_id}")
        return deleted

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # QUERIES
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def get_link(self, link_id: str) -> Link:
        """
        Get a link by id.

        Raises:
            ReferenceNotFoundError: If the link does not exist
        """
        link = await self._db.read(lambda conn: self._links.get(conn, link_id))
        if link is None:
            raise ReferenceNotFoundError("Link", link_id)
        return link

    async def get_by_concept(self, concept_id: str) -> ConceptLinks:
        """
        Get a concept's outgoing and incoming links.

        Outgoing views carry the target as peer and the forward label;
        incoming views carry the source as peer and the reverse label.
        Both collections are ordered oldest first.

        Raises:
            ReferenceNotFoundError: If the concept does not exist
        """

        def _by_concept(conn: sqlite3.Connection) -> ConceptLinks | None:
            if self._concepts.get(conn, concept_id) is None:
                return None
            return ConceptLinks(
                concept_id=concept_id,
                outgoing=self._links.list_views(
                    conn, concept_id, LinkDirection.OUTGOING
                ),
                incoming=self._links.list_views(
                    conn, concept_id, LinkDirection.INCOMING
                ),
            )

        result = await self._db.read(_by_concept)
        if result is None:
            raise ReferenceNotFoundError("Concept", concept_id)
        return result

    async def get_between(self, source_id: str, target_id: str) -> list[Link]:
        """Links on the ordered (source, target) pair, for navigation only."""
        return await self._db.read(
            lambda conn: self._links.list_between(conn, source_id, target_id)
        )

    async def get_all(self, summary: bool = False) -> list[LinkSummary] | list[LinkDetail]:
        """
        List every link, newest first.

        Args:
            summary: True for identifiers only, False for links joined with
                concept titles and relationship labels

        Returns:
            LinkSummary list or LinkDetail list
        """
        if summary:
            return await self._db.read(self._links.list_summaries)
        return await self._db.read(self._links.list_details)

    async def linked_peer_ids(self, concept_id: str) -> set[str]:
        """Concepts sharing any link with ``concept_id``, in either direction."""
        return await self._db.read(lambda conn: self._links.peer_ids(conn, concept_id))

    async def stats(self) -> GraphStats:
        """Summary counts for dashboards."""

        def _stats(conn: sqlite3.Connection) -> GraphStats:
            concepts = self._concepts.list_all(conn)
            links = self._links.list_all(conn)
            graph = build_graph(concepts, links, {})
            connected = connected_node_count(graph)
            total = len(concepts)
            return GraphStats(
                concept_count=total,
                link_count=len(links),
                link_name_count=self._names.count_live(conn),
                connected_concept_count=connected,
                connected_percentage=round(100.0 * connected / total, 1) if total else 0.0,
            )

        return await self._db.read(_stats)

    async def export_graph(self, fmt: ExportFormat = "graphml") -> str | dict[str, Any]:
        """
        Export the whole concept graph.

        Args:
            fmt: "graphml" for a GraphML document, "json" for node-link data

        Returns:
            GraphML string or node-link dict

        Raises:
            InvalidInputError: Unknown format
        """
        if fmt not in ("graphml", "json"):
            raise InvalidInputError(f"Unsupported export format: {fmt}")

        def _load(conn: sqlite3.Connection) -> nx.MultiDiGraph:
            concepts = self._concepts.list_all(conn)
            links = self._links.list_all(conn)
            names = {pair.id: pair for pair in self._names.list_live(conn)}
            return build_graph(concepts, links, names)

        graph = await self._db.read(_load)
        logger.info(
            f"Exported graph as {fmt}: {graph.number_of_nodes()} concepts, "
            f"{graph.number_of_edges()} links"
        )
        if fmt == "graphml":
            return to_graphml(graph)
        return to_node_link(graph)
