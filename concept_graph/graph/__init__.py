"""
Concept link graph core.

Data models, domain errors, the default vocabulary, row-level repositories
and NetworkX export for the concept link graph.
"""

from concept_graph.graph.errors import (
    ConceptInUseError,
    GraphError,
    InvalidInputError,
    PairInUseError,
    ReferenceNotFoundError,
)
from concept_graph.graph.models import (
    Concept,
    ConceptLinks,
    ConceptStatus,
    ConfidenceTier,
    Link,
    LinkCandidate,
    LinkDirection,
    LinkNamePair,
    LinkProposal,
    LinkUpdate,
    LinkView,
)

__all__ = [
    "Concept",
    "ConceptInUseError",
    "ConceptLinks",
    "ConceptStatus",
    "ConfidenceTier",
    "GraphError",
    "InvalidInputError",
    "Link",
    "LinkCandidate",
    "LinkDirection",
    "LinkNamePair",
    "LinkProposal",
    "LinkUpdate",
    "LinkView",
    "PairInUseError",
    "ReferenceNotFoundError",
]
