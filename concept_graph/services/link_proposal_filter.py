"""
Link Proposal Filter - turns generated candidate edges into confirmable proposals.

Candidates come from an external recommendation step (out of scope here).
This service:
- Drops candidates that would duplicate an existing connection
- Tiers confidence for presentation (never for filtering)
- Pre-selects a link name pair for each proposal
- Holds pending proposals until they are confirmed (at most once) or dismissed

Nothing here touches the graph until a proposal is confirmed, and a
confirmation is exactly one LinkGraphService.create_link call.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict

from concept_graph.core.validators import generate_id, label_key
from concept_graph.graph.errors import (
    InvalidInputError,
    ReferenceNotFoundError,
)
from concept_graph.graph.models import (
    ConceptStatus,
    ConfidenceTier,
    Link,
    LinkCandidate,
    LinkNamePair,
    LinkProposal,
)
from concept_graph.services.concept_store import ConceptStore
from concept_graph.services.link_graph_service import LinkGraphService
from concept_graph.services.link_name_registry import LinkNameRegistry

logger = logging.getLogger(__name__)


class LinkProposalFilter:
    """
    Filters candidate edges and manages pending link proposals.

    Pending proposals are held in memory per source concept, with LRU
    eviction once more than ``max_pending_sources`` concepts have pending
    batches. Proposing again for a concept replaces its previous batch.
    """

    def __init__(
        self,
        concepts: ConceptStore,
        links: LinkGraphService,
        link_names: LinkNameRegistry,
        high_confidence: float = 0.8,
        medium_confidence: float = 0.6,
        max_pending_sources: int = 100,
    ) -> None:
        """
        Initialize Link Proposal Filter.

        Args:
            concepts: Concept store used to resolve candidate targets
            links: Link graph service that owns existing edges
            link_names: Registry used to resolve proposed labels
            high_confidence: Lower bound of the "high" tier
            medium_confidence: Lower bound of the "medium" tier
            max_pending_sources: Concepts with pending batches kept in memory
        """
        if not 0.0 <= medium_confidence <= high_confidence <= 1.0:
            raise ValueError("Confidence thresholds must satisfy 0 <= medium <= high <= 1")

        self._concepts = concepts
        self._links = links
        self._link_names = link_names
        self.high_confidence = high_confidence
        self.medium_confidence = medium_confidence
        self._max_pending_sources = max_pending_sources

        # source_id -> {proposal_id -> proposal}
        self._pending: OrderedDict[str, dict[str, LinkProposal]] = OrderedDict()
        # proposal_id -> source_id
        self._proposal_sources: dict[str, str] = {}
        self._lock = asyncio.Lock()

    def tier(self, confidence: float) -> ConfidenceTier:
        """Presentation tier for a confidence score."""
        if confidence >= self.high_confidence:
            return ConfidenceTier.HIGH
        if confidence >= self.medium_confidence:
            return ConfidenceTier.MEDIUM
        return ConfidenceTier.LOW

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # FILTERING
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    async def _filter_with_titles(
        self, source_id: str, candidates: list[LinkCandidate]
    ) -> tuple[list[LinkCandidate], dict[str, str]]:
        if not await self._concepts.exists(source_id):
            raise ReferenceNotFoundError("Concept", source_id)

        peers = await self._links.linked_peer_ids(source_id)
        active = {
            c.id: c.title for c in await self._concepts.list(ConceptStatus.ACTIVE)
        }

        kept: list[LinkCandidate] = []
        seen: set[str] = set()
        for candidate in candidates:
            target = candidate.target_id
            if target == source_id or target in peers or target in seen:
                continue
            if target not in active:
                continue
            seen.add(target)
            kept.append(candidate)

        dropped = len(candidates) - len(kept)
        if dropped:
            logger.debug(f"Dropped {dropped} of {len(candidates)} candidates for {source_id}")
        return kept, active

    async def filter(
        self, source_id: str, candidates: list[LinkCandidate]
    ) -> list[LinkCandidate]:
        """
        Remove candidates that must not be proposed.

        Dropped: targets already connected to the source in either direction
        (whatever the relationship type), the source itself, targets that are
        not active concepts, and repeats of a target already kept. Order is
        preserved and confidence plays no part, so the same inputs always
        give the same output.

        Raises:
            ReferenceNotFoundError: If the source concept does not exist
        """
        kept, _ = await self._filter_with_titles(source_id, candidates)
        return kept

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # PROPOSALS
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    @staticmethod
    def _resolve_link_name(
        forward_name: str, pairs: list[LinkNamePair]
    ) -> tuple[LinkNamePair, bool]:
        wanted = label_key(forward_name)
        for pair in pairs:
            if label_key(pair.forward_name) == wanted:
                return pair, True
        return pairs[0], False

    async def propose(
        self, source_id: str, candidates: list[LinkCandidate]
    ) -> list[LinkProposal]:
        """
        Filter candidates and register them as pending proposals.

        Each proposal pre-selects the link name whose forward name matches the
        proposed label (case-insensitive); otherwise the first available pair
        is pre-selected with ``label_matched=False`` so the user must confirm
        or change it.

        Returns:
            Proposals in candidate order (replaces earlier pending ones)

        Raises:
            ReferenceNotFoundError: If the source concept does not exist
            InvalidInputError: If proposals exist but no link names do
        """
        kept, titles = await self._filter_with_titles(source_id, candidates)
        pairs = await self._link_names.list_all() if kept else []
        if kept and not pairs:
            raise InvalidInputError("No link names available to pre-select")

        proposals: list[LinkProposal] = []
        for candidate in kept:
            pair, matched = self._resolve_link_name(candidate.forward_name, pairs)
            proposals.append(
                LinkProposal(
                    id=generate_id(),
                    source_id=source_id,
                    target_id=candidate.target_id,
                    target_title=titles[candidate.target_id],
                    forward_name=candidate.forward_name,
                    confidence=candidate.confidence,
                    tier=self.tier(candidate.confidence),
                    rationale=candidate.rationale,
                    link_name_id=pair.id,
                    label_matched=matched,
                )
            )

        async with self._lock:
            self._replace_batch(source_id, proposals)

        logger.info(
            f"Registered {len(proposals)} link proposal(s) for {source_id} "
            f"from {len(candidates)} candidate(s)"
        )
        return proposals

    async def pending(self, source_id: str) -> list[LinkProposal]:
        """Pending proposals for a source concept, in proposal order."""
        async with self._lock:
            batch = self._pending.get(source_id)
            return list(batch.values()) if batch else []

    async def confirm(
        self,
        proposal_id: str,
        link_name_id: str | None = None,
        notes: str | None = None,
    ) -> Link:
        """
        Accept a pending proposal by creating its link.

        The proposal leaves the pending list before the link is created, so
        a second confirmation of the same instance fails with
        ReferenceNotFoundError. If link creation fails the proposal is put
        back into its batch (unless a newer proposal round replaced that
        batch meanwhile) and the error propagates.

        Args:
            proposal_id: Pending proposal to accept
            link_name_id: Pair chosen by the user (defaults to the pre-selection)
            notes: Optional link notes

        Returns:
            The created link

        Raises:
            ReferenceNotFoundError: Unknown or already handled proposal, or
                a reference that no longer resolves
        """
        async with self._lock:
            taken = self._take(proposal_id)
        if taken is None:
            raise ReferenceNotFoundError("Link proposal", proposal_id)
        proposal, batch = taken

        try:
            link = await self._links.create_link(
                proposal.source_id,
                proposal.target_id,
                link_name_id or proposal.link_name_id,
                notes,
            )
        except Exception:
            async with self._lock:
                self._put_back(proposal, batch)
            raise

        logger.info(f"Confirmed link proposal {proposal_id} as link {link.id}")
        return link

    async def dismiss(self, proposal_id: str) -> bool:
        """
        Drop a pending proposal without creating a link.

        Returns:
            True if the proposal was pending, False otherwise
        """
        async with self._lock:
            return self._take(proposal_id) is not None

    # Pending-state helpers; callers hold self._lock.

    def _replace_batch(self, source_id: str, proposals: list[LinkProposal]) -> None:
        for old_id in self._pending.pop(source_id, {}):
            self._proposal_sources.pop(old_id, None)
        if not proposals:
            return
        self._pending[source_id] = {p.id: p for p in proposals}
        for p in proposals:
            self._proposal_sources[p.id] = source_id
        while len(self._pending) > self._max_pending_sources:
            _, evicted = self._pending.popitem(last=False)
            for old_id in evicted:
                self._proposal_sources.pop(old_id, None)

    def _take(
        self, proposal_id: str
    ) -> tuple[LinkProposal, dict[str, LinkProposal]] | None:
        # Emptied batches stay registered until replaced or evicted.
        source_id = self._proposal_sources.pop(proposal_id, None)
        if source_id is None:
            return None
        batch = self._pending[source_id]
        return batch.pop(proposal_id), batch

    def _put_back(
        self, proposal: LinkProposal, batch: dict[str, LinkProposal]
    ) -> None:
        if self._pending.get(proposal.source_id) is not batch:
            logger.debug(
                f"Not restoring proposal {proposal.id}: batch for "
                f"{proposal.source_id} was replaced or evicted"
            )
            return
        batch[proposal.id] = proposal
        self._proposal_sources[proposal.id] = proposal.source_id
