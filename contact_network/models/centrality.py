"""
Centrality Engine

Degree, closeness, betweenness and PageRank centrality over a contact graph.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from pydantic import BaseModel, Field

from contact_network.models.graph import ContactGraph, enumerate_paths

logger = logging.getLogger(__name__)


class CentralityScores(BaseModel):
    """All centrality maps for one graph, keyed by node ID."""
    degree: dict[str, int] = Field(default_factory=dict)
    closeness: dict[str, float] = Field(default_factory=dict)
    betweenness: dict[str, float] = Field(default_factory=dict)
    page_rank: dict[str, float] = Field(default_factory=dict)
    page_rank_iterations: int = 0


class CentralityCalculator:
    """Computes centrality metrics for every node of a ContactGraph.

    Betweenness enumerates every shortest path of every node pair, which
    is quadratic in the number of nodes times the path-search cost. It is
    meant for graphs of at most a few hundred people.
    """

    def __init__(
        self,
        graph: ContactGraph,
        damping_factor: float = 0.85,
        max_iterations: int = 100,
        tolerance: float = 0.001,
        workers: int = 1,
    ):
        """Initialize calculator.

        Args:
            graph: Graph to analyse
            damping_factor: PageRank damping factor
            max_iterations: PageRank iteration cap
            tolerance: PageRank convergence threshold (max per-node change)
            workers: Threads used for the betweenness pair loop
        """
        if not 0.0 <= damping_factor <= 1.0:
            raise ValueError(f"damping_factor must be within [0, 1], got {damping_factor}")
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")

        self.graph = graph
        self.damping_factor = damping_factor
        self.max_iterations = max_iterations
        self.tolerance = tolerance
        self.workers = workers
        self.last_iterations = 0

    def degree_centrality(self) -> dict[str, int]:
        """Number of distinct neighbors per node."""
        return {node_id: self.graph.degree(node_id) for node_id in self.graph.node_ids}

    def closeness_centrality(self) -> dict[str, float]:
        """(reachable - 1) / sum of hop distances, 0 for nodes that reach no one.

        Unreachable nodes add to neither the count nor the distance sum.
        """
        closeness = {}

        for node_id in self.graph.node_ids:
            distances = self.graph.bfs_distances(node_id)
            reachable = len(distances)
            total_distance = sum(distances.values())

            if reachable > 1:
                closeness[node_id] = (reachable - 1) / total_distance
            else:
                closeness[node_id] = 0.0

        return closeness

    def _accumulate_betweenness(self, sources: list[int]) -> dict[str, float]:
        """Raw betweenness credit for pairs (node_ids[i], node_ids[j]), j > i."""
        node_ids = self.graph.node_ids
        partial: dict[str, float] = {}

        for i in sources:
            source = node_ids[i]
            distances, predecessors = self.graph.shortest_path_dag(source)

            for target in node_ids[i + 1:]:
                # Adjacent or unreachable pairs have no interior nodes
                if distances.get(target, 0) < 2:
                    continue

                paths = enumerate_paths(predecessors, source, target)
                credit = 1.0 / len(paths)
                for path in paths:
                    for interior in path[1:-1]:
                        partial[interior] = partial.get(interior, 0.0) + credit

        return partial

    def betweenness_centrality(self) -> dict[str, float]:
        """Normalised share of shortest paths passing through each node.

        Every shortest path of every unordered pair is enumerated and its
        interior nodes credited 1 / (number of shortest paths for the pair).
        Totals are divided by (n-1)(n-2)/2.
        """
        node_ids = self.graph.node_ids
        n = len(node_ids)
        betweenness = {node_id: 0.0 for node_id in node_ids}

        if n < 3:
            return betweenness

        indices = list(range(n))
        if self.workers > 1:
            chunks = [indices[k::self.workers] for k in range(self.workers)]
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                partials = list(executor.map(self._accumulate_betweenness, chunks))
        else:
            partials = [self._accumulate_betweenness(indices)]

        for partial in partials:
            for node_id, value in partial.items():
                betweenness[node_id] += value

        normalizer = (n - 1) * (n - 2) / 2
        return {node_id: value / normalizer for node_id, value in betweenness.items()}

    def page_rank(self) -> dict[str, float]:
        """PageRank by power iteration on the undirected graph.

        Rank held by isolated nodes is spread evenly over all nodes each
        iteration so that the ranks always sum to 1.
        """
        node_ids = self.graph.node_ids
        n = len(node_ids)
        self.last_iterations = 0

        if n == 0:
            return {}

        d = self.damping_factor
        rank = {node_id: 1.0 / n for node_id in node_ids}

        for iteration in range(1, self.max_iterations + 1):
            dangling = sum(rank[node_id] for node_id in node_ids if self.graph.degree(node_id) == 0)
            base = (1 - d) / n + d * dangling / n

            new_rank = {}
            for node_id in node_ids:
                incoming = sum(
                    rank[neighbor] / max(self.graph.degree(neighbor), 1)
                    for neighbor in self.graph.neighbors(node_id)
                )
                new_rank[node_id] = base + d * incoming

            max_change = max(abs(new_rank[node_id] - rank[node_id]) for node_id in node_ids)
            rank = new_rank
            self.last_iterations = iteration

            logger.debug(f"PageRank iteration {iteration}: max change {max_change:.6f}")
            if max_change <= self.tolerance:
                break

        return rank

    def calculate_all(self) -> CentralityScores:
        """Run every centrality pass."""
        scores = CentralityScores(
            degree=self.degree_centrality(),
            closeness=self.closeness_centrality(),
            betweenness=self.betweenness_centrality(),
            page_rank=self.page_rank(),
            page_rank_iterations=self.last_iterations,
        )

        logger.info(
            f"Calculated centrality for {len(self.graph)} people "
            f"(PageRank converged after {self.last_iterations} iterations)"
        )

        return scores


def top_nodes(metric: dict[str, float], n: int = 5, exclude: Optional[set[str]] = None) -> list[str]:
    """Node IDs with the highest metric values, ties in insertion order."""
    exclude = exclude or set()
    ranked = sorted(
        (node_id for node_id in metric if node_id not in exclude),
        key=lambda node_id: metric[node_id],
        reverse=True,
    )
    return ranked[:n]
