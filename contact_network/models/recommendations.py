"""
Connection Recommendations and Paths

Suggests new connections, identifies hub persons and explains how to reach them.
"""

import logging
from collections import deque

from contact_network.models.centrality import CentralityScores
from contact_network.models.entities import HubPath, Recommendation
from contact_network.models.graph import ContactGraph

logger = logging.getLogger(__name__)


def _check_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


class ConnectionRecommender:
    """Recommendation and path queries over an analysed graph.

    Recommendation score:
        10 * shared_neighbors + 20 * same_company
        + 5 * importance + network_value / 10
    """

    def __init__(
        self,
        graph: ContactGraph,
        scores: CentralityScores,
        network_values: dict[str, int],
        shared_neighbor_weight: float = 10.0,
        same_company_bonus: float = 20.0,
        importance_weight: float = 5.0,
        network_value_divisor: float = 10.0,
        min_page_rank: float = 0.02,
        min_betweenness: float = 0.1,
    ):
        """Initialize recommender.

        Args:
            graph: Analysed graph
            scores: Centrality scores for the graph
            network_values: Network value per node
            shared_neighbor_weight: Points per shared neighbor
            same_company_bonus: Points for working at the same company
            importance_weight: Points per importance level of the candidate
            network_value_divisor: Candidate network value is divided by this
            min_page_rank: Hub threshold (exclusive)
            min_betweenness: Hub threshold (exclusive)
        """
        if network_value_divisor <= 0:
            raise ValueError("network_value_divisor must be positive")

        self.graph = graph
        self.scores = scores
        self.network_values = network_values
        self.shared_neighbor_weight = shared_neighbor_weight
        self.same_company_bonus = same_company_bonus
        self.importance_weight = importance_weight
        self.network_value_divisor = network_value_divisor
        self.min_page_rank = min_page_rank
        self.min_betweenness = min_betweenness

    def _require_node(self, node_id: str) -> None:
        if node_id not in self.graph:
            raise ValueError(f"Unknown person: {node_id}")

    def recommend(self, node_id: str, limit: int = 10) -> list[Recommendation]:
        """Suggest people node_id is not yet connected to.

        Args:
            node_id: Person to recommend for
            limit: Maximum number of recommendations

        Returns:
            Recommendations sorted by score, ties in node order

        Raises:
            ValueError: If limit is negative or node_id is unknown
        """
        _check_non_negative("limit", limit)
        self._require_node(node_id)

        person = self.graph.get_person(node_id)
        own_neighbors = self.graph.neighbors(node_id)
        excluded = set(own_neighbors)
        excluded.add(node_id)

        recommendations = []
        for candidate_id in self.graph.node_ids:
            if candidate_id in excluded:
                continue

            candidate = self.graph.get_person(candidate_id)
            shared = [n for n in own_neighbors if self.graph.has_edge(candidate_id, n)]
            same_company = bool(person.company) and person.company == candidate.company

            score = len(shared) * self.shared_neighbor_weight
            if same_company:
                score += self.same_company_bonus
            score += candidate.importance * self.importance_weight
            score += self.network_values.get(candidate_id, 0) / self.network_value_divisor

            if score > 0:
                recommendations.append(Recommendation(
                    person_id=candidate_id,
                    score=score,
                    shared_neighbors=shared,
                    same_company=same_company,
                ))

        recommendations.sort(key=lambda r: r.score, reverse=True)
        return recommendations[:limit]

    def find_hub_persons(self, limit: int = 5) -> list[str]:
        """People with both high PageRank and high betweenness.

        Returns at most limit IDs sorted by page_rank * betweenness; fewer
        when not enough people pass both thresholds.
        """
        _check_non_negative("limit", limit)

        page_rank = self.scores.page_rank
        betweenness = self.scores.betweenness

        hubs = [
            node_id for node_id in self.graph.node_ids
            if page_rank.get(node_id, 0.0) > self.min_page_rank
            and betweenness.get(node_id, 0.0) > self.min_betweenness
        ]
        hubs.sort(key=lambda h: page_rank[h] * betweenness[h], reverse=True)

        return hubs[:limit]

    def shortest_path(self, source: str, target: str) -> list[str]:
        """One shortest path from source to target, endpoints included.

        Returns an empty list when the target is unreachable, either ID is
        unknown, or source == target for an isolated person.
        """
        if source not in self.graph or target not in self.graph:
            return []
        if source == target:
            return [source] if self.graph.degree(source) > 0 else []

        parents = {source: None}
        queue = deque([source])

        while queue:
            current = queue.popleft()
            for neighbor in self.graph.neighbors(current):
                if neighbor in parents:
                    continue
                parents[neighbor] = current
                if neighbor == target:
                    path = [target]
                    while parents[path[-1]] is not None:
                        path.append(parents[path[-1]])
                    return list(reversed(path))
                queue.append(neighbor)

        return []

    def reachable_contacts(self, node_id: str, max_depth: int = 3) -> int:
        """Number of people reachable within max_depth hops (excluding node_id)."""
        _check_non_negative("max_depth", max_depth)
        self._require_node(node_id)
        return len(self.graph.bfs_distances(node_id, max_depth=max_depth)) - 1

    def second_degree_connections(self, node_id: str) -> list[str]:
        """Friends of friends, highest network value first."""
        self._require_node(node_id)

        distances = self.graph.bfs_distances(node_id, max_depth=2)
        second = [n for n, distance in distances.items() if distance == 2]
        second.sort(key=lambda n: self.network_values.get(n, 0), reverse=True)

        return second

    def paths_to_hubs(
        self,
        node_id: str,
        limit: int = 5,
        max_distance: int = 4,
    ) -> list[HubPath]:
        """Shortest paths from node_id to each hub within max_distance hops."""
        _check_non_negative("max_distance", max_distance)
        self._require_node(node_id)

        paths = []
        for hub_id in self.find_hub_persons(limit):
            if hub_id == node_id:
                continue
            path = self.shortest_path(node_id, hub_id)
            distance = len(path) - 1
            if 0 < distance <= max_distance:
                paths.append(HubPath(hub_id=hub_id, path=path, distance=distance))

        paths.sort(key=lambda p: p.distance)
        return paths
