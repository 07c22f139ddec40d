"""
Row-level SQL for concepts, link names and links.

Repositories never open or commit transactions: every method receives the
connection of the unit of work the calling service opened through
``Database.write`` / ``Database.read``. This is what lets the link name
registry repoint links and remove a pair inside one transaction.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable

from concept_graph.core.database import utc_timestamp
from concept_graph.core.validators import generate_id, label_key
from concept_graph.graph.models import (
    Concept,
    ConceptStatus,
    Link,
    LinkDetail,
    LinkDirection,
    LinkNamePair,
    LinkSummary,
    LinkUsageEntry,
    LinkView,
)


def _placeholders(values: list[str]) -> str:
    return ", ".join("?" for _ in values)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONCEPTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class ConceptRepository:
    """SQL access for the concepts table."""

    def insert(self, conn: sqlite3.Connection, title: str) -> Concept:
        created_at = utc_timestamp()
        concept = Concept(id=generate_id(), title=title, created_at=created_at)
        conn.execute(
            "INSERT INTO concepts (id, title, status, created_at) VALUES (?, ?, ?, ?)",
            (
                concept.id,
                concept.title,
                concept.status.value,
                created_at,
            ),
        )
        return concept

    def get(self, conn: sqlite3.Connection, concept_id: str) -> Concept | None:
        row = conn.execute(
            "SELECT * FROM concepts WHERE id = ?", (concept_id,)
        ).fetchone()
        return Concept.model_validate(dict(row)) if row else None

    def list_all(
        self, conn: sqlite3.Connection, status: ConceptStatus | None = None
    ) -> list[Concept]:
        if status is None:
            rows = conn.execute(
                "SELECT * FROM concepts ORDER BY created_at, rowid"
            ).fetchall()
        else:
            rows = conn.execute(
                "SELECT * FROM concepts WHERE status = ? ORDER BY created_at, rowid",
                (status.value,),
            ).fetchall()
        return [Concept.model_validate(dict(r)) for r in rows]

    def set_status(
        self,
        conn: sqlite3.Connection,
        concept_id: str,
        status: ConceptStatus,
        trashed_at: str | None,
    ) -> None:
        conn.execute(
            "UPDATE concepts SET status = ?, trashed_at = ? WHERE id = ?",
            (status.value, trashed_at, concept_id),
        )

    def expired_trash_ids(self, conn: sqlite3.Connection, cutoff: str) -> list[str]:
        """IDs of trashed concepts whose trashed_at is at or before ``cutoff``."""
        rows = conn.execute(
            """
            SELECT id FROM concepts
            WHERE status = ? AND trashed_at IS NOT NULL AND trashed_at <= ?
            ORDER BY trashed_at, rowid
            """,
            (ConceptStatus.TRASHED.value, cutoff),
        ).fetchall()
        return [r["id"] for r in rows]

    def delete_many(self, conn: sqlite3.Connection, concept_ids: list[str]) -> int:
        if not concept_ids:
            return 0
        cursor = conn.execute(
            f"DELETE FROM concepts WHERE id IN ({_placeholders(concept_ids)})",
            concept_ids,
        )
        return cursor.rowcount


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# LINK NAMES
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class LinkNameRepository:
    """SQL access for the link_names table."""

    def insert(
        self,
        conn: sqlite3.Connection,
        forward_name: str,
        reverse_name: str,
        is_symmetric: bool,
        is_default: bool = False,
    ) -> LinkNamePair:
        created_at = utc_timestamp()
        pair = LinkNamePair(
            id=generate_id(),
            forward_name=forward_name,
            reverse_name=reverse_name,
            is_symmetric=is_symmetric,
            is_default=is_default,
            created_at=created_at,
        )
        conn.execute(
            """
            INSERT INTO link_names
                (id, forward_name, forward_key, reverse_name, is_symmetric,
                 is_default, is_deleted, created_at)
            VALUES (?, ?, ?, ?, ?, ?, 0, ?)
            """,
            (
                pair.id,
                pair.forward_name,
                label_key(pair.forward_name),
                pair.reverse_name,
                int(pair.is_symmetric),
                int(pair.is_default),
                created_at,
            ),
        )
        return pair

    def get(
        self,
        conn: sqlite3.Connection,
        link_name_id: str,
        include_deleted: bool = False,
    ) -> LinkNamePair | None:
        """Fetch a pair; tombstoned pairs only when ``include_deleted``."""
        row = conn.execute(
            "SELECT * FROM link_names WHERE id = ?", (link_name_id,)
        ).fetchone()
        if row is None:
            return None
        pair = LinkNamePair.model_validate(dict(row))
        if pair.is_deleted and not include_deleted:
            return None
        return pair

    def find_by_forward_name(
        self,
        conn: sqlite3.Connection,
        forward_name: str,
        include_deleted: bool = False,
    ) -> LinkNamePair | None:
        """Case-insensitive lookup by forward label (see ``label_key``)."""
        query = "SELECT * FROM link_names WHERE forward_key = ?"
        if not include_deleted:
            query += " AND is_deleted = 0"
        row = conn.execute(
            query + " ORDER BY is_deleted, rowid", (label_key(forward_name),)
        ).fetchone()
        return LinkNamePair.model_validate(dict(row)) if row else None

    def list_live(self, conn: sqlite3.Connection) -> list[LinkNamePair]:
        """Live pairs: seed entries first, then custom, each in creation order."""
        rows = conn.execute(
            """
            SELECT * FROM link_names
            WHERE is_deleted = 0
            ORDER BY is_default DESC, created_at, rowid
            """
        ).fetchall()
        return [LinkNamePair.model_validate(dict(r)) for r in rows]

    def update_labels(
        self,
        conn: sqlite3.Connection,
        link_name_id: str,
        forward_name: str,
        reverse_name: str,
        is_symmetric: bool,
    ) -> None:
        conn.execute(
            """
            UPDATE link_names
            SET forward_name = ?, forward_key = ?, reverse_name = ?, is_symmetric = ?
            WHERE id = ?
            """,
            (
                forward_name,
                label_key(forward_name),
                reverse_name,
                int(is_symmetric),
                link_name_id,
            ),
        )

    def tombstone(self, conn: sqlite3.Connection, link_name_id: str) -> None:
        conn.execute(
            "UPDATE link_names SET is_deleted = 1 WHERE id = ?", (link_name_id,)
        )

    def delete(self, conn: sqlite3.Connection, link_name_id: str) -> None:
        conn.execute("DELETE FROM link_names WHERE id = ?", (link_name_id,))

    def count_live(self, conn: sqlite3.Connection) -> int:
        return conn.execute(
            "SELECT COUNT(*) FROM link_names WHERE is_deleted = 0"
        ).fetchone()[0]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# LINKS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


_VIEW_QUERIES = {
    LinkDirection.OUTGOING: """
        SELECT l.*, c.id AS peer_id, c.title AS peer_title,
               n.forward_name AS label
        FROM links l
        JOIN concepts c ON c.id = l.target_id
        JOIN link_names n ON n.id = l.link_name_id
        WHERE l.source_id = ?
        ORDER BY l.created_at, l.rowid
    """,
    LinkDirection.INCOMING: """
        SELECT l.*, c.id AS peer_id, c.title AS peer_title,
               n.reverse_name AS label
        FROM links l
        JOIN concepts c ON c.id = l.source_id
        JOIN link_names n ON n.id = l.link_name_id
        WHERE l.target_id = ?
        ORDER BY l.created_at, l.rowid
    """,
}


class LinkRepository:
    """SQL access for the links table."""

    def insert(
        self,
        conn: sqlite3.Connection,
        source_id: str,
        target_id: str,
        link_name_id: str,
        notes: str | None,
    ) -> Link:
        created_at = utc_timestamp()
        link = Link(
            id=generate_id(),
            source_id=source_id,
            target_id=target_id,
            link_name_id=link_name_id,
            notes=notes,
            created_at=created_at,
        )
        conn.execute(
            """
            INSERT INTO links
                (id, source_id, target_id, link_name_id, notes, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                link.id,
                link.source_id,
                link.target_id,
                link.link_name_id,
                link.notes,
                created_at,
            ),
        )
        return link

    def get(self, conn: sqlite3.Connection, link_id: str) -> Link | None:
        row = conn.execute("SELECT * FROM links WHERE id = ?", (link_id,)).fetchone()
        return Link.model_validate(dict(row)) if row else None

    def update(
        self,
        conn: sqlite3.Connection,
        link_id: str,
        link_name_id: str,
        notes: str | None,
    ) -> None:
        conn.execute(
            "UPDATE links SET link_name_id = ?, notes = ? WHERE id = ?",
            (link_name_id, notes, link_id),
        )

    def delete(self, conn: sqlite3.Connection, link_id: str) -> bool:
        cursor = conn.execute("DELETE FROM links WHERE id = ?", (link_id,))
        return cursor.rowcount > 0

    def count_by_link_name(self, conn: sqlite3.Connection, link_name_id: str) -> int:
        """Live usage count of a link name pair."""
        return conn.execute(
            "SELECT COUNT(*) FROM links WHERE link_name_id = ?", (link_name_id,)
        ).fetchone()[0]

    def repoint(
        self, conn: sqlite3.Connection, from_link_name_id: str, to_link_name_id: str
    ) -> int:
        """Move every link from one pair to another; returns links moved."""
        cursor = conn.execute(
            "UPDATE links SET link_name_id = ? WHERE link_name_id = ?",
            (to_link_name_id, from_link_name_id),
        )
        return cursor.rowcount

    def list_views(
        self, conn: sqlite3.Connection, concept_id: str, direction: LinkDirection
    ) -> list[LinkView]:
        rows = conn.execute(_VIEW_QUERIES[direction], (concept_id,)).fetchall()
        return [
            LinkView.model_validate({**dict(r), "direction": direction}) for r in rows
        ]

    def list_between(
        self, conn: sqlite3.Connection, source_id: str, target_id: str
    ) -> list[Link]:
        rows = conn.execute(
            """
            SELECT * FROM links
            WHERE source_id = ? AND target_id = ?
            ORDER BY created_at, rowid
            """,
            (source_id, target_id),
        ).fetchall()
        return [Link.model_validate(dict(r)) for r in rows]

    def list_all(self, conn: sqlite3.Connection) -> list[Link]:
        rows = conn.execute("SELECT * FROM links ORDER BY created_at, rowid").fetchall()
        return [Link.model_validate(dict(r)) for r in rows]

    def list_summaries(self, conn: sqlite3.Connection) -> list[LinkSummary]:
        rows = conn.execute(
            """
            SELECT id, source_id, target_id, link_name_id FROM links
            ORDER BY created_at DESC, rowid DESC
            """
        ).fetchall()
        return [LinkSummary.model_validate(dict(r)) for r in rows]

    def list_details(self, conn: sqlite3.Connection) -> list[LinkDetail]:
        rows = conn.execute(
            """
            SELECT l.*,
                   s.title AS source_title,
                   t.title AS target_title,
                   n.forward_name AS forward_name,
                   n.reverse_name AS reverse_name
            FROM links l
            JOIN concepts s ON s.id = l.source_id
            JOIN concepts t ON t.id = l.target_id
            JOIN link_names n ON n.id = l.link_name_id
            ORDER BY l.created_at DESC, l.rowid DESC
            """
        ).fetchall()
        return [LinkDetail.model_validate(dict(r)) for r in rows]

    def usage_entries(
        self, conn: sqlite3.Connection, link_name_id: str
    ) -> list[LinkUsageEntry]:
        rows = conn.execute(
            """
            SELECT l.id, l.source_id, l.target_id,
                   s.title AS source_title, t.title AS target_title
            FROM links l
            JOIN concepts s ON s.id = l.source_id
            JOIN concepts t ON t.id = l.target_id
            WHERE l.link_name_id = ?
            ORDER BY l.created_at, l.rowid
            """,
            (link_name_id,),
        ).fetchall()
        return [LinkUsageEntry.model_validate(dict(r)) for r in rows]

    def peer_ids(self, conn: sqlite3.Connection, concept_id: str) -> set[str]:
        """Concepts sharing at least one link with ``concept_id``, either direction."""
        rows = conn.execute(
            """
            SELECT target_id AS peer FROM links WHERE source_id = ?
            UNION
            SELECT source_id AS peer FROM links WHERE target_id = ?
            """,
            (concept_id, concept_id),
        ).fetchall()
        return {r["peer"] for r in rows}

    def linked_concept_ids(
        self, conn: sqlite3.Connection, concept_ids: Iterable[str]
    ) -> list[str]:
        """Subset of ``concept_ids`` that appear as an endpoint of any link."""
        ids = list(concept_ids)
        if not ids:
            return []
        marks = _placeholders(ids)
        rows = conn.execute(
            f"""
            SELECT source_id AS cid FROM links WHERE source_id IN ({marks})
            UNION
            SELECT target_id AS cid FROM links WHERE target_id IN ({marks})
            """,
            ids + ids,
        ).fetchall()
        found = {r["cid"] for r in rows}
        return [cid for cid in ids if cid in found]

    def delete_touching(
        self, conn: sqlite3.Connection, concept_ids: Iterable[str]
    ) -> int:
        """Delete every link with an endpoint in ``concept_ids``."""
        ids = list(concept_ids)
        if not ids:
            return 0
        marks = _placeholders(ids)
        cursor = conn.execute(
            f"DELETE FROM links WHERE source_id IN ({marks}) OR target_id IN ({marks})",
            ids + ids,
        )
        return cursor.rowcount
