"""
Dependency injection providers for API endpoints.

Provides FastAPI dependencies that inject service instances into route
handlers, enabling loose coupling and testability.
"""

from __future__ import annotations

from fastapi import HTTPException

from concept_graph.core.validators import is_valid_record_id
from concept_graph.models.errors import invalid_id_format_error
from concept_graph.services import (
    ConceptStore,
    LinkGraphService,
    LinkNameRegistry,
    LinkProposalFilter,
    get_services,
)


def get_concept_store() -> ConceptStore:
    """
    Dependency provider for ConceptStore.

    Returns:
        ConceptStore instance from the global container
    """
    return get_services().concepts


def get_link_name_registry() -> LinkNameRegistry:
    """
    Dependency provider for LinkNameRegistry.

    Returns:
        LinkNameRegistry instance from the global container
    """
    return get_services().link_names


def get_link_graph_service() -> LinkGraphService:
    """
    Dependency provider for LinkGraphService.

    Returns:
        LinkGraphService instance from the global container
    """
    return get_services().links


def get_link_proposal_filter() -> LinkProposalFilter:
    """
    Dependency provider for LinkProposalFilter.

    Returns:
        LinkProposalFilter instance from the global container
    """
    return get_services().proposals


def validate_record_id(value: str, field_name: str = "ID") -> str:
    """
    Validate that a string is a valid record ID (12 hex characters).

    Args:
        value: The string to validate
        field_name: Name of the field for error messages

    Returns:
        The validated value

    Raises:
        HTTPException: If the value is not a valid record ID
    """
    if not is_valid_record_id(value):
        raise HTTPException(
            status_code=400, detail=invalid_id_format_error(field_name).to_dict()
        )
    return value


class ValidatedConceptId:
    """
    Dependency class for validated concept ID path parameters.

    Usage:
        @router.get("/{concept_id}")
        async def endpoint(concept_id: str = Depends(ValidatedConceptId())):
            ...
    """

    def __call__(self, concept_id: str) -> str:
        """Validate and return the concept ID."""
        return validate_record_id(concept_id, "concept ID")


class ValidatedLinkId:
    """Dependency class for validated link ID path parameters."""

    def __call__(self, link_id: str) -> str:
        """Validate and return the link ID."""
        return validate_record_id(link_id, "link ID")


class ValidatedLinkNameId:
    """Dependency class for validated link name ID path parameters."""

    def __call__(self, link_name_id: str) -> str:
        """Validate and return the link name ID."""
        return validate_record_id(link_name_id, "link name ID")


class ValidatedProposalId:
    """Dependency class for validated link proposal ID path parameters."""

    def __call__(self, proposal_id: str) -> str:
        """Validate and return the proposal ID."""
        return validate_record_id(proposal_id, "proposal ID")
