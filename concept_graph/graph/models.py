"""
Concept link graph data models: Concept, LinkNamePair, Link and read views.

These are the records the repositories return and the services hand to the
API layer. Stored rows are converted with ``model_validate(dict(row))``.

Read views (LinkView, LinkDetail, LinkSummary) are resolved server-side so
the presentation layer never performs per-row lookups.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ConceptStatus(str, Enum):
    """Lifecycle status of a concept."""

    ACTIVE = "active"
    TRASHED = "trashed"


class LinkDirection(str, Enum):
    """Direction of a link relative to the concept being viewed."""

    OUTGOING = "outgoing"
    INCOMING = "incoming"


class Concept(BaseModel):
    """
    A knowledge-base node the graph connects.

    Attributes:
        id: Unique 12-character identifier
        title: Display title
        status: active or trashed (soft-deleted)
        created_at: When the concept was created
        trashed_at: When the concept was moved to trash, if it was
    """

    id: str
    title: str
    status: ConceptStatus = ConceptStatus.ACTIVE
    created_at: datetime
    trashed_at: datetime | None = None


class LinkNamePair(BaseModel):
    """
    A relationship-type definition.

    The forward name reads source -> target ("supports"), the reverse name
    reads target -> source ("supported by"). Symmetric pairs always carry
    identical labels.

    Attributes:
        id: Unique 12-character identifier
        forward_name: Label for the source -> target direction
        reverse_name: Label for the target -> source direction
        is_symmetric: Whether both labels are always identical
        is_default: Whether the pair is a protected seed entry
        is_deleted: Tombstone for retired seed entries
        created_at: When the pair was created
    """

    id: str
    forward_name: str
    reverse_name: str
    is_symmetric: bool = False
    is_default: bool = False
    is_deleted: bool = False
    created_at: datetime


class Link(BaseModel):
    """
    A directed, typed edge between two concepts.

    Attributes:
        id: Unique 12-character identifier
        source_id: Concept the link starts from
        target_id: Concept the link points to
        link_name_id: LinkNamePair describing the relationship
        notes: Optional free text
        created_at: When the link was created
    """

    id: str
    source_id: str
    target_id: str
    link_name_id: str
    notes: str | None = None
    created_at: datetime


class LinkUpdate(BaseModel):
    """
    Partial update for a link.

    Only fields explicitly provided are applied (see ``model_fields_set``),
    so ``notes=None`` clears the notes while omitting it leaves them alone.
    """

    link_name_id: str | None = None
    notes: str | None = None


class LinkView(BaseModel):
    """A link as seen from one of its endpoint concepts."""

    id: str
    direction: LinkDirection
    source_id: str
    target_id: str
    peer_id: str
    peer_title: str
    link_name_id: str
    label: str
    notes: str | None = None
    created_at: datetime


class ConceptLinks(BaseModel):
    """Outgoing and incoming links of one concept, oldest first."""

    concept_id: str
    outgoing: list[LinkView] = Field(default_factory=list)
    incoming: list[LinkView] = Field(default_factory=list)


class LinkSummary(BaseModel):
    """Lightweight link identifiers for counting and dashboards."""

    id: str
    source_id: str
    target_id: str
    link_name_id: str


class LinkDetail(Link):
    """A link joined with both concept titles and both pair labels."""

    source_title: str
    target_title: str
    forward_name: str
    reverse_name: str


class LinkUsageEntry(BaseModel):
    """One link referencing a link name, with endpoint titles."""

    id: str
    source_id: str
    target_id: str
    source_title: str
    target_title: str


class LinkNameUsage(BaseModel):
    """A link name pair together with every link referencing it."""

    link_name: LinkNamePair
    count: int
    links: list[LinkUsageEntry] = Field(default_factory=list)


class LinkNameDeletion(BaseModel):
    """
    Outcome of a safe link name delete.

    Attributes:
        deleted_id: The pair that no longer resolves
        replacement_id: Pair the links were moved to, if any
        repointed_count: Number of links moved to the replacement
        tombstoned: True when a seed pair was retired instead of removed
    """

    deleted_id: str
    replacement_id: str | None = None
    repointed_count: int = 0
    tombstoned: bool = False


class PurgeResult(BaseModel):
    """Outcome of purging expired concepts from the trash."""

    purged_ids: list[str] = Field(default_factory=list)
    deleted_link_count: int = 0


class GraphStats(BaseModel):
    """Dashboard summary of the link graph."""

    concept_count: int
    link_count: int
    link_name_count: int
    connected_concept_count: int
    connected_percentage: float


class ConfidenceTier(str, Enum):
    """Presentation tier for a proposal's confidence score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LinkCandidate(BaseModel):
    """
    An externally generated candidate edge from a source concept.

    Attributes:
        target_id: Concept the candidate would link to
        forward_name: Proposed forward label, matched against the vocabulary
        confidence: Score in [0, 1], used only for tiering
        rationale: Why the generator proposed the link
    """

    target_id: str
    forward_name: str
    confidence: float = Field(ge=0.0, le=1.0)
    rationale: str = ""


class LinkProposal(BaseModel):
    """
    A filtered candidate ready for the user to confirm or change.

    Attributes:
        id: Proposal instance identifier (confirmable at most once)
        source_id: Concept the link would start from
        target_id: Concept the link would point to
        target_title: Title of the target concept
        forward_name: Label proposed by the generator
        confidence: Generator confidence score
        tier: Presentation tier derived from confidence
        rationale: Generator rationale
        link_name_id: Pre-selected link name pair
        label_matched: False when the pre-selection is only a fallback default
    """

    id: str
    source_id: str
    target_id: str
    target_title: str
    forward_name: str
    confidence: float
    tier: ConfidenceTier
    rationale: str = ""
    link_name_id: str
    label_matched: bool
