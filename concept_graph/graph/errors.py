"""
Domain exceptions for the concept link graph.

Every failure in the graph core is synchronous, typed and scoped to the
single requested operation. The API layer maps each type to a status code
and an APIError envelope (see concept_graph/api/errors.py).
"""

from __future__ import annotations


class GraphError(Exception):
    """Base class for all graph-domain failures."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ReferenceNotFoundError(GraphError, LookupError):
    """A concept, link, link name or proposal id does not resolve."""

    def __init__(self, kind: str, ref_id: str) -> None:
        super().__init__(f"{kind} not found", detail=f"{kind} ID: {ref_id}")
        self.kind = kind
        self.ref_id = ref_id


class InvalidInputError(GraphError, ValueError):
    """Empty required label, missing id, or otherwise malformed request."""


class PairInUseError(GraphError):
    """A link name pair still referenced by links was deleted without a replacement."""

    def __init__(self, link_name_id: str, usage_count: int) -> None:
        super().__init__(
            "Link name is in use",
            detail=f"Link name {link_name_id} is referenced by {usage_count} link(s)",
        )
        self.link_name_id = link_name_id
        self.usage_count = usage_count


class ConceptInUseError(GraphError):
    """Purge refused because trashed concepts are still referenced by links."""

    def __init__(self, concept_ids: list[str]) -> None:
        super().__init__(
            "Concepts are still linked",
            detail=f"Linked concept IDs: {', '.join(concept_ids)}",
        )
        self.concept_ids = concept_ids
