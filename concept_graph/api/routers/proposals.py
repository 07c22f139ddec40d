"""
Link Proposals API endpoints.

Provides the confirmation workflow for externally generated link candidates:
- Submit candidates for a concept (filtered, tiered, label pre-selected)
- List a concept's pending proposals
- Confirm a proposal (creates exactly one link) or dismiss it
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from concept_graph.api.deps import (
    ValidatedConceptId,
    ValidatedProposalId,
    get_link_proposal_filter,
)
from concept_graph.graph.errors import ReferenceNotFoundError
from concept_graph.graph.models import Link
from concept_graph.models.api import DeleteResponse, ProposalListResponse
from concept_graph.models.requests import ConfirmProposalRequest, ProposeLinksRequest
from concept_graph.services import LinkProposalFilter

router = APIRouter(tags=["link-proposals"])


@router.post(
    "/concepts/{concept_id}/link-proposals", response_model=ProposalListResponse
)
async def propose_links(
    request: ProposeLinksRequest,
    concept_id: str = Depends(ValidatedConceptId()),
    proposals: LinkProposalFilter = Depends(get_link_proposal_filter),
) -> ProposalListResponse:
    """
    Turn generated candidates into pending proposals for a concept.

    Candidates already connected to the concept (in either direction, any
    relationship type) are dropped. Submitting again replaces the concept's
    pending batch.

    Args:
        request: Candidate edges from the recommendation step
        concept_id: Source concept
        proposals: Injected link proposal filter

    Returns:
        ProposalListResponse in candidate order
    """
    items = await proposals.propose(concept_id, request.candidates)
    return ProposalListResponse(source_id=concept_id, proposals=items, total=len(items))


@router.get(
    "/concepts/{concept_id}/link-proposals", response_model=ProposalListResponse
)
async def list_pending_proposals(
    concept_id: str = Depends(ValidatedConceptId()),
    proposals: LinkProposalFilter = Depends(get_link_proposal_filter),
) -> ProposalListResponse:
    """List a concept's pending proposals."""
    items = await proposals.pending(concept_id)
    return ProposalListResponse(source_id=concept_id, proposals=items, total=len(items))


@router.post(
    "/link-proposals/{proposal_id}/confirm", response_model=Link, status_code=201
)
async def confirm_proposal(
    request: ConfirmProposalRequest,
    proposal_id: str = Depends(ValidatedProposalId()),
    proposals: LinkProposalFilter = Depends(get_link_proposal_filter),
) -> Link:
    """
    Confirm a pending proposal, creating its link.

    A proposal can be confirmed once; repeating the request returns 404.
    """
    return await proposals.confirm(proposal_id, request.link_name_id, request.notes)


@router.delete("/link-proposals/{proposal_id}", response_model=DeleteResponse)
async def dismiss_proposal(
    proposal_id: str = Depends(ValidatedProposalId()),
    proposals: LinkProposalFilter = Depends(get_link_proposal_filter),
) -> DeleteResponse:
    """Dismiss a pending proposal without creating a link."""
    if not await proposals.dismiss(proposal_id):
        raise ReferenceNotFoundError("Link proposal", proposal_id)
    return DeleteResponse(status="dismissed", id=proposal_id)
