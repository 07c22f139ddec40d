"""
Concept Store - the concept nodes the link graph connects.

Concept content editing lives outside the graph engine; this service covers
only what the engine needs from concepts: creation, lookup by id, the
active/trashed lifecycle, and purging expired trash together with the links
that reference purged concepts.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta, timezone

from concept_graph.core.database import Database, utc_timestamp
from concept_graph.core.validators import MAX_LABEL_LENGTH, clean_label
from concept_graph.graph.errors import (
    ConceptInUseError,
    InvalidInputError,
    ReferenceNotFoundError,
)
from concept_graph.graph.models import Concept, ConceptStatus, PurgeResult
from concept_graph.graph.repository import ConceptRepository, LinkRepository

logger = logging.getLogger(__name__)


class ConceptStore:
    """
    Durable store of concept nodes.

    Exposes the ``exists`` / ``is_active`` / ``get_title`` contract the
    link graph validates against, plus the trash lifecycle.

    Purge policy:
        ``cascade`` deletes links touching purged concepts in the same
        transaction; ``block`` refuses the purge while any link references
        a concept that would be purged.
    """

    def __init__(
        self,
        db: Database,
        retention_days: int = 30,
        purge_link_policy: str = "cascade",
    ) -> None:
        """
        Initialize Concept Store.

        Args:
            db: Database shared with the link graph services
            retention_days: Default age (days) before trashed concepts are purged
            purge_link_policy: "cascade" or "block"
        """
        if purge_link_policy not in ("cascade", "block"):
            raise ValueError(f"Unknown purge link policy: {purge_link_policy}")

        self._db = db
        self._concepts = ConceptRepository()
        self._links = LinkRepository()
        self.retention_days = retention_days
        self.purge_link_policy = purge_link_policy

    async def create(self, title: str) -> Concept:
        """
        Create an active concept.

        Raises:
            InvalidInputError: If the title is empty or too long
        """
        cleaned = clean_label(title)
        if not cleaned:
            raise InvalidInputError("Concept title cannot be empty")
        if len(cleaned) > MAX_LABEL_LENGTH:
            raise InvalidInputError(
                f"Concept title exceeds {MAX_LABEL_LENGTH} characters"
            )

        concept = await self._db.write(
            lambda conn: self._concepts.insert(conn, cleaned)
        )
        logger.info(f"Created concept {concept.id}")
        return concept

    async def get(self, concept_id: str) -> Concept:
        """
        Get a concept by id.

        Raises:
            ReferenceNotFoundError: If the concept does not exist
        """
        concept = await self._db.read(lambda conn: self._concepts.get(conn, concept_id))
        if concept is None:
            raise ReferenceNotFoundError("Concept", concept_id)
        return concept

    async def list(self, status: ConceptStatus | None = None) -> list[Concept]:
        """List concepts in creation order, optionally filtered by status."""
        return await self._db.read(lambda conn: self._concepts.list_all(conn, status))

    async def exists(self, concept_id: str) -> bool:
        """True if the concept has not been purged (active or trashed)."""
        concept = await self._db.read(lambda conn: self._concepts.get(conn, concept_id))
        return concept is not None

    async def is_active(self, concept_id: str) -> bool:
        """True if the concept exists and is not in the trash."""
        concept = await self._db.read(lambda conn: self._concepts.get(conn, concept_id))
        return concept is not None and concept.status == ConceptStatus.ACTIVE

    async def get_title(self, concept_id: str) -> str:
        """
        Get a concept's title.

        Raises:
            ReferenceNotFoundError: If the concept does not exist
        """
        return (await self.get(concept_id)).title

    async def trash(self, concept_id: str) -> Concept:
        """
        Move a concept to the trash (soft delete).

        Links are kept; a trashed concept still resolves as a link endpoint
        until it is purged. Trashing an already trashed concept keeps its
        original trashed_at.

        Raises:
            ReferenceNotFoundError: If the concept does not exist
        """

        def _trash(conn: sqlite3.Connection) -> Concept | None:
            concept = self._concepts.get(conn, concept_id)
            if concept is None:
                return None
            if concept.status != ConceptStatus.TRASHED:
                self._concepts.set_status(
                    conn, concept_id, ConceptStatus.TRASHED, utc_timestamp()
                )
            return self._concepts.get(conn, concept_id)

        concept = await self._db.write(_trash)
        if concept is None:
            raise ReferenceNotFoundError("Concept", concept_id)
        logger.info(f"Trashed concept {concept_id}")
        return concept

    async def restore(self, concept_id: str) -> Concept:
        """
        Restore a trashed concept to active.

        Raises:
            ReferenceNotFoundError: If the concept does not exist
        """

        def _restore(conn: sqlite3.Connection) -> Concept | None:
            if self._concepts.get(conn, concept_id) is None:
                return None
            self._concepts.set_status(conn, concept_id, ConceptStatus.ACTIVE, None)
            return self._concepts.get(conn, concept_id)

        concept = await self._db.write(_restore)
        if concept is None:
            raise ReferenceNotFoundError("Concept", concept_id)
        logger.info(f"Restored concept {concept_id}")
        return concept

    async def purge_trash(self, days_old: int | None = None) -> PurgeResult:
        """
        Permanently delete concepts trashed at least ``days_old`` days ago.

        Args:
            days_old: Minimum age in the trash (defaults to retention_days)

        Returns:
            PurgeResult with purged ids and the number of links removed

        Raises:
            InvalidInputError: If days_old is negative
            ConceptInUseError: Under the "block" policy, if any concept to
                purge is still referenced by a link (nothing is purged)
        """
        age = self.retention_days if days_old is None else days_old
        if age < 0:
            raise InvalidInputError("days_old cannot be negative")
        cutoff = (datetime.now(timezone.utc) - timedelta(days=age)).isoformat(
            timespec="microseconds"
        )

        def _purge(conn: sqlite3.Connection) -> PurgeResult:
            expired = self._concepts.expired_trash_ids(conn, cutoff)
            if not expired:
                return PurgeResult()

            if self.purge_link_policy == "block":
                linked = self._links.linked_concept_ids(conn, expired)
                if linked:
                    raise ConceptInUseError(linked)
                deleted_links = 0
            else:
                deleted_links = self._links.delete_touching(conn, expired)

            self._concepts.delete_many(conn, expired)
            return PurgeResult(purged_ids=expired, deleted_link_count=deleted_links)

        result = await self._db.write(_purge)
        if result.purged_ids:
            logger.info(
                f"Purged {len(result.purged_ids)} concept(s) from trash, "
                f"removed {result.deleted_link_count} link(s)"
            )
        return result
