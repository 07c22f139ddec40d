"""
Link Name Registry - the relationship-type vocabulary.

Manages link name pairs (forward/reverse labels) including:
- Creation with the symmetric coupling rule applied
- Renames that re-apply the coupling rule
- Live usage counts (never stored, always counted)
- Safe delete: a pair in use is removed only after every referencing link
  is repointed to a replacement, inside the same transaction
- Idempotent seeding of the default vocabulary
"""

from __future__ import annotations

import logging
import sqlite3

from concept_graph.core.database import Database
from concept_graph.core.validators import MAX_LABEL_LENGTH, clean_label
from concept_graph.graph.errors import (
    InvalidInputError,
    PairInUseError,
    ReferenceNotFoundError,
)
from concept_graph.graph.models import (
    LinkNameDeletion,
    LinkNamePair,
    LinkNameUsage,
)
from concept_graph.graph.repository import LinkNameRepository, LinkRepository
from concept_graph.graph.vocabulary import DEFAULT_LINK_NAME_PAIRS, apply_symmetry

logger = logging.getLogger(__name__)


def _check_label(label: str, field: str) -> None:
    if not label:
        raise InvalidInputError(f"{field} cannot be empty")
    if len(label) > MAX_LABEL_LENGTH:
        raise InvalidInputError(f"{field} exceeds {MAX_LABEL_LENGTH} characters")


class LinkNameRegistry:
    """
    Registry of link name pairs.

    Thread Safety:
        Every mutation is a single Database.write transaction, so the
        repoint-then-remove sequence of a replacing delete is never
        observable half-applied.
    """

    def __init__(self, db: Database) -> None:
        """
        Initialize Link Name Registry.

        Args:
            db: Database shared with the link graph service
        """
        self._db = db
        self._names = LinkNameRepository()
        self._links = LinkRepository()

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # QUERIES
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def get(self, link_name_id: str) -> LinkNamePair:
        """
        Get a live link name pair.

        Raises:
            ReferenceNotFoundError: If the pair does not exist or was deleted
        """
        pair = await self._db.read(lambda conn: self._names.get(conn, link_name_id))
        if pair is None:
            raise ReferenceNotFoundError("Link name", link_name_id)
        return pair

    async def list_all(self) -> list[LinkNamePair]:
        """List live pairs, seed entries first, then custom pairs."""
        return await self._db.read(self._names.list_live)

    async def usage_count(self, link_name_id: str) -> int:
        """
        Count links currently referencing a pair.

        Computed live on every call. Unknown or removed ids count 0.
        """
        return await self._db.read(
            lambda conn: self._links.count_by_link_name(conn, link_name_id)
        )

    async def usage(self, link_name_id: str) -> LinkNameUsage:
        """
        Get a pair with every link that references it.

        Raises:
            ReferenceNotFoundError: If the pair does not exist or was deleted
        """

        def _usage(conn: sqlite3.Connection) -> LinkNameUsage | None:
            pair = self._names.get(conn, link_name_id)
            if pair is None:
                return None
            entries = self._links.usage_entries(conn, link_name_id)
            return LinkNameUsage(link_name=pair, count=len(entries), links=entries)

        result = await self._db.read(_usage)
        if result is None:
            raise ReferenceNotFoundError("Link name", link_name_id)
        return result

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # MUTATIONS
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def create(
        self,
        forward_name: str,
        reverse_name: str | None = None,
        is_symmetric: bool | None = None,
    ) -> LinkNamePair:
        """
        Create a custom link name pair.

        Args:
            forward_name: Label for source -> target (required)
            reverse_name: Label for target -> source
            is_symmetric: True forces reverse to equal forward; None infers
                symmetry from the labels (omitted or identical reverse);
                False requires an explicit reverse label

        Returns:
            The new pair, or the existing live pair when one with exactly
            the same labels and symmetry already exists

        Raises:
            InvalidInputError: Empty forward name, asymmetric pair without a
                reverse name, or a forward name already used by a different pair
        """
        forward = clean_label(forward_name)
        reverse = clean_label(reverse_name)
        _check_label(forward, "Forward name")

        if is_symmetric is None:
            is_symmetric = not reverse or reverse == forward
        elif not is_symmetric and not reverse:
            raise InvalidInputError("Reverse name is required for an asymmetric pair")

        forward, reverse = apply_symmetry(forward, reverse, is_symmetric)
        _check_label(reverse, "Reverse name")

        def _create(conn: sqlite3.Connection) -> tuple[LinkNamePair, bool]:
            existing = self._names.find_by_forward_name(conn, forward)
            if existing is None:
                return self._names.insert(conn, forward, reverse, is_symmetric), True
            if (
                existing.forward_name == forward
                and existing.reverse_name == reverse
                and existing.is_symmetric == is_symmetric
            ):
                return existing, False
            raise InvalidInputError(f"Link name '{forward}' already exists")

        pair, created = await self._db.write(_create)
        if not created:
            logger.debug(f"Link name {pair.id} already exists, returning it")
            return pair
        logger.info(
            f"Created link name {pair.id}: '{pair.forward_name}' / "
            f"'{pair.reverse_name}' (symmetric={pair.is_symmetric})"
        )
        return pair

    async def rename(
        self,
        link_name_id: str,
        forward_name: str,
        reverse_name: str | None = None,
        is_symmetric: bool | None = None,
    ) -> LinkNamePair:
        """
        Rename an existing pair.

        Links reference the pair by id, so every link picks up the new
        labels without being touched.

        Args:
            link_name_id: Pair to rename
            forward_name: New forward label (required)
            reverse_name: New reverse label; an asymmetric pair keeps its
                stored reverse label when this is omitted
            is_symmetric: New symmetric flag; None keeps the stored flag

        Returns:
            The updated pair

        Raises:
            ReferenceNotFoundError: If the pair does not exist or was deleted
            InvalidInputError: Empty or duplicate forward name
        """
        forward = clean_label(forward_name)
        requested_reverse = clean_label(reverse_name)
        _check_label(forward, "Forward name")

        def _rename(conn: sqlite3.Connection) -> LinkNamePair:
            current = self._names.get(conn, link_name_id)
            if current is None:
                raise ReferenceNotFoundError("Link name", link_name_id)

            symmetric = current.is_symmetric if is_symmetric is None else is_symmetric
            reverse = requested_reverse or current.reverse_name
            new_forward, new_reverse = apply_symmetry(forward, reverse, symmetric)
            _check_label(new_reverse, "Reverse name")

            duplicate = self._names.find_by_forward_name(conn, new_forward)
            if duplicate is not None and duplicate.id != link_name_id:
                raise InvalidInputError(f"Link name '{new_forward}' already exists")

            self._names.update_labels(
                conn, link_name_id, new_forward, new_reverse, symmetric
            )
            updated = self._names.get(conn, link_name_id)
            assert updated is not None
            return updated

        pair = await self._db.write(_rename)
        logger.info(
            f"Renamed link name {pair.id} to '{pair.forward_name}' / "
            f"'{pair.reverse_name}'"
        )
        return pair

    async def delete(
        self, link_name_id: str, replacement_id: str | None = None
    ) -> LinkNameDeletion:
        """
        Safely delete a pair.

        - Usage 0: the pair is removed immediately.
        - Usage > 0 with a replacement: every referencing link is repointed
          to the replacement and the pair removed, in one transaction.
        - Usage > 0 without a replacement: PairInUseError, nothing changes.

        Custom pairs are removed outright; seed pairs are tombstoned so that
        reseeding never brings them back. Either way the id no longer
        resolves afterwards.

        Args:
            link_name_id: Pair to delete
            replacement_id: Pair that referencing links move to

        Returns:
            LinkNameDeletion describing what happened

        Raises:
            ReferenceNotFoundError: Pair or replacement does not resolve
            InvalidInputError: Replacement is the pair being deleted
            PairInUseError: Pair is in use and no replacement was given
        """
        if replacement_id is not None and replacement_id == link_name_id:
            raise InvalidInputError("Replacement link name must differ from the deleted one")

        def _delete(conn: sqlite3.Connection) -> LinkNameDeletion:
            pair = self._names.get(conn, link_name_id)
            if pair is None:
                raise ReferenceNotFoundError("Link name", link_name_id)
            if replacement_id is not None and self._names.get(conn, replacement_id) is None:
                raise ReferenceNotFoundError("Replacement link name", replacement_id)

            usage = self._links.count_by_link_name(conn, link_name_id)
            repointed = 0
            if usage > 0:
                if replacement_id is None:
                    raise PairInUseError(link_name_id, usage)
                repointed = self._links.repoint(conn, link_name_id, replacement_id)

            if pair.is_default:
                self._names.tombstone(conn, link_name_id)
            else:
                self._names.delete(conn, link_name_id)

            return LinkNameDeletion(
                deleted_id=link_name_id,
                replacement_id=replacement_id if repointed else None,
                repointed_count=repointed,
                tombstoned=pair.is_default,
            )

        result = await self._db.write(_delete)
        if result.repointed_count:
            logger.info(
                f"Deleted link name {link_name_id}, repointed "
                f"{result.repointed_count} link(s) to {result.replacement_id}"
            )
        else:
            logger.info(f"Deleted link name {link_name_id}")
        return result

    async def seed_defaults(self) -> int:
        """
        Insert the default vocabulary.

        A default is skipped when any pair (live or tombstoned) already has
        its forward name, so retired defaults stay retired.

        Returns:
            Number of pairs inserted
        """

        def _seed(conn: sqlite3.Connection) -> int:
            inserted = 0
            for default in DEFAULT_LINK_NAME_PAIRS:
                existing = self._names.find_by_forward_name(
                    conn, default.forward, include_deleted=True
                )
                if existing is not None:
                    continue
                forward, reverse = apply_symmetry(
                    default.forward, default.reverse, default.is_symmetric
                )
                self._names.insert(
                    conn, forward, reverse, default.is_symmetric, is_default=True
                )
                inserted += 1
            return inserted

        inserted = await self._db.write(_seed)
        if inserted:
            logger.info(f"Seeded {inserted} default link name(s)")
        return inserted
