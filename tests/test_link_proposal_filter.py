"""
Tests for LinkProposalFilter.

Covers candidate filtering (idempotence, either-direction drop), confidence
tiers, label resolution and the at-most-once confirmation workflow.
"""

from __future__ import annotations

import asyncio
import sqlite3

import pytest

from concept_graph.graph.errors import InvalidInputError, ReferenceNotFoundError
from concept_graph.graph.models import (
    Concept,
    ConfidenceTier,
    Link,
    LinkCandidate,
    LinkNamePair,
    LinkProposal,
)
from concept_graph.services import (
    ConceptStore,
    LinkGraphService,
    LinkNameRegistry,
    LinkProposalFilter,
)


def candidate(target_id: str, name: str = "supports", confidence: float = 0.9) -> LinkCandidate:
    return LinkCandidate(
        target_id=target_id,
        forward_name=name,
        confidence=confidence,
        rationale="shared terminology",
    )


class TestFilter:
    """Test candidate filtering."""

    @pytest.mark.asyncio
    async def test_drops_existing_connection_either_direction(
        self,
        proposal_filter: LinkProposalFilter,
        link_service: LinkGraphService,
        registry: LinkNameRegistry,
        concept_store: ConceptStore,
        concept_a: Concept,
        concept_b: Concept,
        concept_c: Concept,
        supports: LinkNamePair,
    ) -> None:
        """B -> A exists: a candidate A -> B is dropped, whatever its type."""
        d = await concept_store.create("Glucose")
        await link_service.create_link(concept_b.id, concept_a.id, supports.id)

        kept = await proposal_filter.filter(
            concept_a.id,
            [candidate(concept_b.id, "contradicts"), candidate(concept_c.id), candidate(d.id)],
        )

        assert [c.target_id for c in kept] == [concept_c.id, d.id]

    @pytest.mark.asyncio
    async def test_drops_self_duplicates_and_inactive(
        self,
        proposal_filter: LinkProposalFilter,
        concept_store: ConceptStore,
        concept_a: Concept,
        concept_b: Concept,
        concept_c: Concept,
    ) -> None:
        await concept_store.trash(concept_c.id)

        kept = await proposal_filter.filter(
            concept_a.id,
            [
                candidate(concept_a.id),
                candidate(concept_b.id, confidence=0.3),
                candidate(concept_b.id, confidence=0.95),
                candidate(concept_c.id),
                candidate("000000000000"),
            ],
        )

        assert len(kept) == 1
        assert kept[0].target_id == concept_b.id
        assert kept[0].confidence == 0.3

    @pytest.mark.asyncio
    async def test_low_confidence_never_filtered(
        self,
        proposal_filter: LinkProposalFilter,
        concept_a: Concept,
        concept_b: Concept,
    ) -> None:
        kept = await proposal_filter.filter(concept_a.id, [candidate(concept_b.id, confidence=0.0)])
        assert len(kept) == 1

    @pytest.mark.asyncio
    async def test_filter_is_idempotent(
        self,
        proposal_filter: LinkProposalFilter,
        link_service: LinkGraphService,
        concept_a: Concept,
        concept_b: Concept,
        concept_c: Concept,
        supports: LinkNamePair,
    ) -> None:
        await link_service.create_link(concept_a.id, concept_b.id, supports.id)
        candidates = [candidate(concept_b.id), candidate(concept_c.id), candidate(concept_c.id)]

        once = await proposal_filter.filter(concept_a.id, candidates)
        twice = await proposal_filter.filter(concept_a.id, once)

        assert twice == once
        assert await proposal_filter.filter(concept_a.id, candidates) == once

    @pytest.mark.asyncio
    async def test_unknown_source_raises(self, proposal_filter: LinkProposalFilter) -> None:
        with pytest.raises(ReferenceNotFoundError):
            await proposal_filter.filter("000000000000", [])


class TestTier:
    """Test confidence tiers."""

    def test_default_thresholds(self, proposal_filter: LinkProposalFilter) -> None:
        assert proposal_filter.tier(0.95) == ConfidenceTier.HIGH
        assert proposal_filter.tier(0.8) == ConfidenceTier.HIGH
        assert proposal_filter.tier(0.79) == ConfidenceTier.MEDIUM
        assert proposal_filter.tier(0.6) == ConfidenceTier.MEDIUM
        assert proposal_filter.tier(0.59) == ConfidenceTier.LOW
        assert proposal_filter.tier(0.0) == ConfidenceTier.LOW

    def test_custom_thresholds(
        self,
        concept_store: ConceptStore,
        link_service: LinkGraphService,
        registry: LinkNameRegistry,
    ) -> None:
        custom = LinkProposalFilter(
            concept_store, link_service, registry, high_confidence=0.9, medium_confidence=0.5
        )
        assert custom.tier(0.85) == ConfidenceTier.MEDIUM
        assert custom.tier(0.5) == ConfidenceTier.MEDIUM

    def test_inverted_thresholds_rejected(
        self,
        concept_store: ConceptStore,
        link_service: LinkGraphService,
        registry: LinkNameRegistry,
    ) -> None:
        with pytest.raises(ValueError):
            LinkProposalFilter(
                concept_store, link_service, registry, high_confidence=0.4, medium_confidence=0.6
            )


class TestPropose:
    """Test proposal creation and label resolution."""

    @pytest.mark.asyncio
    async def test_label_matched_case_insensitive(
        self,
        proposal_filter: LinkProposalFilter,
        concept_a: Concept,
        concept_b: Concept,
        supports: LinkNamePair,
    ) -> None:
        proposals = await proposal_filter.propose(concept_a.id, [candidate(concept_b.id, "Supports")])

        assert len(proposals) == 1
        proposal = proposals[0]
        assert proposal.link_name_id == supports.id
        assert proposal.label_matched is True
        assert proposal.target_title == "Chlorophyll"
        assert proposal.tier == ConfidenceTier.HIGH

    @pytest.mark.asyncio
    async def test_label_matched_with_unicode_case(
        self,
        proposal_filter: LinkProposalFilter,
        registry: LinkNameRegistry,
        concept_a: Concept,
        concept_b: Concept,
        supports: LinkNamePair,
    ) -> None:
        pupil = await registry.create("élève de", "maître de")
        [proposal] = await proposal_filter.propose(
            concept_a.id, [candidate(concept_b.id, "ÉLÈVE DE")]
        )
        assert proposal.link_name_id == pupil.id
        assert proposal.label_matched is True

    @pytest.mark.asyncio
    async def test_unmatched_label_falls_back_to_first_pair(
        self,
        proposal_filter: LinkProposalFilter,
        registry: LinkNameRegistry,
        concept_a: Concept,
        concept_b: Concept,
        supports: LinkNamePair,
    ) -> None:
        await registry.create("cites", "cited by")
        proposals = await proposal_filter.propose(
            concept_a.id, [candidate(concept_b.id, "illuminates", confidence=0.65)]
        )

        assert proposals[0].link_name_id == supports.id
        assert proposals[0].label_matched is False
        assert proposals[0].forward_name == "illuminates"
        assert proposals[0].tier == ConfidenceTier.MEDIUM

    @pytest.mark.asyncio
    async def test_no_link_names_rejected(
        self,
        proposal_filter: LinkProposalFilter,
        concept_a: Concept,
        concept_b: Concept,
    ) -> None:
        with pytest.raises(InvalidInputError):
            await proposal_filter.propose(concept_a.id, [candidate(concept_b.id)])

    @pytest.mark.asyncio
    async def test_empty_after_filter_needs_no_link_names(
        self, proposal_filter: LinkProposalFilter, concept_a: Concept
    ) -> None:
        assert await proposal_filter.propose(concept_a.id, [candidate(concept_a.id)]) == []
        assert await proposal_filter.pending(concept_a.id) == []

    @pytest.mark.asyncio
    async def test_propose_replaces_pending_batch(
        self,
        proposal_filter: LinkProposalFilter,
        concept_a: Concept,
        concept_b: Concept,
        concept_c: Concept,
        supports: LinkNamePair,
    ) -> None:
        first = await proposal_filter.propose(concept_a.id, [candidate(concept_b.id)])
        second = await proposal_filter.propose(concept_a.id, [candidate(concept_c.id)])

        pending = await proposal_filter.pending(concept_a.id)
        assert [p.id for p in pending] == [second[0].id]
        with pytest.raises(ReferenceNotFoundError):
            await proposal_filter.confirm(first[0].id)

    @pytest.mark.asyncio
    async def test_pending_cache_evicts_oldest_source(
        self,
        concept_store: ConceptStore,
        link_service: LinkGraphService,
        registry: LinkNameRegistry,
        concept_a: Concept,
        concept_b: Concept,
        concept_c: Concept,
        supports: LinkNamePair,
    ) -> None:
        small = LinkProposalFilter(
            concept_store, link_service, registry, max_pending_sources=1
        )
        await small.propose(concept_a.id, [candidate(concept_c.id)])
        await small.propose(concept_b.id, [candidate(concept_c.id)])

        assert await small.pending(concept_a.id) == []
        assert len(await small.pending(concept_b.id)) == 1


class TestConfirm:
    """Test the confirmation workflow."""

    @pytest.mark.asyncio
    async def test_confirm_creates_exactly_one_link(
        self,
        proposal_filter: LinkProposalFilter,
        link_service: LinkGraphService,
        concept_a: Concept,
        concept_b: Concept,
        supports: LinkNamePair,
    ) -> None:
        """Confirming the same proposal twice creates one link; the second fails."""
        [proposal] = await proposal_filter.propose(concept_a.id, [candidate(concept_b.id)])

        link = await proposal_filter.confirm(proposal.id, notes="from suggestions")
        with pytest.raises(ReferenceNotFoundError):
            await proposal_filter.confirm(proposal.id)

        assert link.source_id == concept_a.id
        assert link.target_id == concept_b.id
        assert link.link_name_id == supports.id
        assert link.notes == "from suggestions"
        assert len(await link_service.get_between(concept_a.id, concept_b.id)) == 1
        assert await proposal_filter.pending(concept_a.id) == []

    @pytest.mark.asyncio
    async def test_concurrent_confirms_create_one_link(
        self,
        proposal_filter: LinkProposalFilter,
        link_service: LinkGraphService,
        concept_a: Concept,
        concept_b: Concept,
        supports: LinkNamePair,
    ) -> None:
        [proposal] = await proposal_filter.propose(concept_a.id, [candidate(concept_b.id)])

        results = await asyncio.gather(
            proposal_filter.confirm(proposal.id),
            proposal_filter.confirm(proposal.id),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, ReferenceNotFoundError)]
        assert len(errors) == 1
        assert len(await link_service.get_all(summary=True)) == 1

    @pytest.mark.asyncio
    async def test_confirm_with_chosen_link_name(
        self,
        proposal_filter: LinkProposalFilter,
        registry: LinkNameRegistry,
        concept_a: Concept,
        concept_b: Concept,
        supports: LinkNamePair,
    ) -> None:
        cites = await registry.create("cites", "cited by")
        [proposal] = await proposal_filter.propose(concept_a.id, [candidate(concept_b.id)])
        link = await proposal_filter.confirm(proposal.id, link_name_id=cites.id)
        assert link.link_name_id == cites.id

    @pytest.mark.asyncio
    async def test_failed_confirm_restores_proposal(
        self,
        proposal_filter: LinkProposalFilter,
        concept_a: Concept,
        concept_b: Concept,
        supports: LinkNamePair,
    ) -> None:
        [proposal] = await proposal_filter.propose(concept_a.id, [candidate(concept_b.id)])

        with pytest.raises(ReferenceNotFoundError):
            await proposal_filter.confirm(proposal.id, link_name_id="000000000000")

        assert [p.id for p in await proposal_filter.pending(concept_a.id)] == [proposal.id]
        link = await proposal_filter.confirm(proposal.id)
        assert link.link_name_id == supports.id

    @pytest.mark.asyncio
    async def test_store_failure_restores_proposal(
        self,
        proposal_filter: LinkProposalFilter,
        link_service: LinkGraphService,
        concept_a: Concept,
        concept_b: Concept,
        supports: LinkNamePair,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        [proposal] = await proposal_filter.propose(concept_a.id, [candidate(concept_b.id)])

        async def locked(*args: object, **kwargs: object) -> Link:
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(link_service, "create_link", locked)
        with pytest.raises(sqlite3.OperationalError):
            await proposal_filter.confirm(proposal.id)
        monkeypatch.undo()

        assert [p.id for p in await proposal_filter.pending(concept_a.id)] == [proposal.id]
        assert await link_service.get_all(summary=True) == []
        link = await proposal_filter.confirm(proposal.id)
        assert link.target_id == concept_b.id

    @pytest.mark.asyncio
    async def test_failed_confirm_does_not_restore_into_newer_batch(
        self,
        proposal_filter: LinkProposalFilter,
        link_service: LinkGraphService,
        concept_a: Concept,
        concept_b: Concept,
        concept_c: Concept,
        supports: LinkNamePair,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A batch replaced while the link was being created keeps only its own proposals."""
        [stale] = await proposal_filter.propose(concept_a.id, [candidate(concept_b.id)])
        fresh: list[LinkProposal] = []

        async def repropose_then_fail(*args: object, **kwargs: object) -> Link:
            fresh.extend(
                await proposal_filter.propose(concept_a.id, [candidate(concept_c.id)])
            )
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(link_service, "create_link", repropose_then_fail)
        with pytest.raises(sqlite3.OperationalError):
            await proposal_filter.confirm(stale.id)
        monkeypatch.undo()

        pending = await proposal_filter.pending(concept_a.id)
        assert [p.id for p in pending] == [fresh[0].id]
        with pytest.raises(ReferenceNotFoundError):
            await proposal_filter.confirm(stale.id)

    @pytest.mark.asyncio
    async def test_dismiss(
        self,
        proposal_filter: LinkProposalFilter,
        link_service: LinkGraphService,
        concept_a: Concept,
        concept_b: Concept,
        supports: LinkNamePair,
    ) -> None:
        [proposal] = await proposal_filter.propose(concept_a.id, [candidate(concept_b.id)])

        assert await proposal_filter.dismiss(proposal.id) is True
        assert await proposal_filter.dismiss(proposal.id) is False
        with pytest.raises(ReferenceNotFoundError):
            await proposal_filter.confirm(proposal.id)
        assert await link_service.get_all(summary=True) == []
