"""
Aggregate Network Statistics
"""

import logging

from contact_network.models.entities import NetworkStatistics
from contact_network.models.graph import ContactGraph

logger = logging.getLogger(__name__)


def clustering_coefficient(graph: ContactGraph) -> float:
    """Average local clustering over people with at least two neighbors."""
    total = 0.0
    counted = 0

    for node_id in graph.node_ids:
        neighbors = graph.neighbors(node_id)
        k = len(neighbors)
        if k < 2:
            continue

        triangles = sum(
            1
            for i in range(k)
            for j in range(i + 1, k)
            if graph.has_edge(neighbors[i], neighbors[j])
        )
        total += triangles / (k * (k - 1) / 2)
        counted += 1

    return total / counted if counted else 0.0


def diameter(graph: ContactGraph) -> int:
    """Largest finite shortest-path distance between any two people."""
    longest = 0
    for node_id in graph.node_ids:
        distances = graph.bfs_distances(node_id)
        longest = max(longest, max(distances.values(), default=0))
    return longest


def calculate_statistics(
    graph: ContactGraph,
    degrees: dict[str, int],
) -> NetworkStatistics:
    """Calculate whole-graph statistics.

    Args:
        graph: Analysed graph
        degrees: Degree per node

    Returns:
        NetworkStatistics (all zero for an empty graph)
    """
    total_nodes = len(graph)
    total_edges = graph.edge_count
    possible_edges = total_nodes * (total_nodes - 1) / 2

    stats = NetworkStatistics(
        total_nodes=total_nodes,
        total_edges=total_edges,
        avg_degree=sum(degrees.values()) / total_nodes if total_nodes else 0.0,
        density=total_edges / possible_edges if possible_edges > 0 else 0.0,
        clustering_coefficient=clustering_coefficient(graph),
        diameter=diameter(graph),
    )

    logger.info(
        f"Network statistics: {stats.total_nodes} people, {stats.total_edges} links, "
        f"density {stats.density:.3f}, diameter {stats.diameter}"
    )

    return stats
