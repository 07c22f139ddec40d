"""
Graph export: NetworkX construction, GraphML and node-link JSON.

The link graph is a multigraph: two concepts may be joined by several links
(different relationship types, or the same type noted twice), so exports
build an ``nx.MultiDiGraph`` keyed by link id.
"""

from __future__ import annotations

from typing import Any

import networkx as nx  # type: ignore[import-untyped]

from concept_graph.graph.models import Concept, Link, LinkNamePair


def build_graph(
    concepts: list[Concept],
    links: list[Link],
    link_names: dict[str, LinkNamePair],
) -> nx.MultiDiGraph:
    """
    Build a NetworkX multigraph of concepts and links.

    Node attributes:
        - title: Concept title
        - status: active or trashed

    Edge attributes (edge key is the link id):
        - link_name_id: Relationship type id
        - forward_name / reverse_name: Relationship labels
        - notes: Link notes ("" when absent, GraphML has no null)
        - created_at: ISO timestamp

    Args:
        concepts: All concepts (isolated concepts become isolated nodes)
        links: All links
        link_names: Pairs referenced by the links, keyed by id

    Returns:
        Populated MultiDiGraph
    """
    G: nx.MultiDiGraph = nx.MultiDiGraph()

    for concept in concepts:
        G.add_node(concept.id, title=concept.title, status=concept.status.value)

    for link in links:
        pair = link_names.get(link.link_name_id)
        G.add_edge(
            link.source_id,
            link.target_id,
            key=link.id,
            link_name_id=link.link_name_id,
            forward_name=pair.forward_name if pair else "",
            reverse_name=pair.reverse_name if pair else "",
            notes=link.notes or "",
            created_at=link.created_at.isoformat(),
        )

    return G


def connected_node_count(G: nx.MultiDiGraph) -> int:
    """Number of concepts with at least one link in either direction."""
    return sum(1 for _, degree in G.degree() if degree > 0)


def to_graphml(G: nx.MultiDiGraph) -> str:
    """Serialize a graph to a GraphML document."""
    return "\n".join(nx.generate_graphml(G))


def to_node_link(G: nx.MultiDiGraph) -> dict[str, Any]:
    """Serialize a graph to NetworkX node-link JSON data."""
    return nx.node_link_data(G, edges="links")
