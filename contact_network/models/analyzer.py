"""
Network Analyzer

Runs the full analysis pipeline over one snapshot of people and relationships.
"""

import logging
from collections import deque
from typing import Iterable, Optional

from contact_network.models.centrality import CentralityCalculator, CentralityScores
from contact_network.models.communities import CommunityDetector
from contact_network.models.entities import (
    ContactAnalysis,
    ContactStatistics,
    DirectConnection,
    NetworkAnalysisResult,
    Person,
    Recommendation,
    HubPath,
    Relationship,
)
from contact_network.models.graph import build_graph
from contact_network.models.industries import IndustryClassifier
from contact_network.models.network_value import NetworkValueScorer
from contact_network.models.recommendations import ConnectionRecommender
from contact_network.models.statistics import calculate_statistics
from contact_network.utils.config import Config

logger = logging.getLogger(__name__)


class NetworkAnalyzer:
    """Analyses one immutable snapshot of the contact network.

    The graph is built once on construction. Centrality (and the network
    values derived from it) is computed lazily and reused by the
    recommendation and path queries. Each analyzer owns its own state, so
    independent snapshots can be analysed concurrently.
    """

    def __init__(
        self,
        people: Iterable[Person],
        relationships: Iterable[Relationship],
        config: Optional[Config] = None,
    ):
        """Initialize analyzer.

        Args:
            people: Contacts (nodes)
            relationships: Relationships (edges), either direction
            config: Analysis configuration (defaults when omitted)
        """
        self.config = config or Config()
        self.relationships = list(relationships)
        self.graph = build_graph(people, self.relationships)

        self._scores: Optional[CentralityScores] = None
        self._network_values: Optional[dict[str, int]] = None
        self._recommender: Optional[ConnectionRecommender] = None

    @property
    def scores(self) -> CentralityScores:
        """Centrality scores, computed on first access."""
        if self._scores is None:
            cfg = self.config.centrality
            calculator = CentralityCalculator(
                self.graph,
                damping_factor=cfg.damping_factor,
                max_iterations=cfg.max_iterations,
                tolerance=cfg.tolerance,
                workers=self.config.processing.workers,
            )
            self._scores = calculator.calculate_all()
        return self._scores

    @property
    def network_values(self) -> dict[str, int]:
        """Network value per person, computed on first access."""
        if self._network_values is None:
            cfg = self.config.network_value
            scorer = NetworkValueScorer(
                degree_weight=cfg.degree_weight,
                betweenness_weight=cfg.betweenness_weight,
                page_rank_weight=cfg.page_rank_weight,
                importance_weight=cfg.importance_weight,
            )
            self._network_values = scorer.score_network(self.graph, self.scores)
        return self._network_values

    @property
    def recommender(self) -> ConnectionRecommender:
        if self._recommender is None:
            rec_cfg = self.config.recommendations
            hub_cfg = self.config.hubs
            self._recommender = ConnectionRecommender(
                self.graph,
                self.scores,
                self.network_values,
                shared_neighbor_weight=rec_cfg.shared_neighbor_weight,
                same_company_bonus=rec_cfg.same_company_bonus,
                importance_weight=rec_cfg.importance_weight,
                network_value_divisor=rec_cfg.network_value_divisor,
                min_page_rank=hub_cfg.min_page_rank,
                min_betweenness=hub_cfg.min_betweenness,
            )
        return self._recommender

    @property
    def industry_classifier(self) -> IndustryClassifier:
        cfg = self.config.industries
        return IndustryClassifier(
            rules=[(rule.name, rule.keywords) for rule in cfg.rules],
            fallback=cfg.fallback,
        )

    def _enriched_person(self, node_id: str) -> Person:
        scores = self.scores
        return self.graph.get_person(node_id).model_copy(update={
            "degree": scores.degree[node_id],
            "betweenness": scores.betweenness[node_id],
            "closeness": scores.closeness[node_id],
            "page_rank": scores.page_rank[node_id],
            "network_value": self.network_values[node_id],
        })

    def analyze(self) -> NetworkAnalysisResult:
        """Run every analysis pass.

        Returns:
            Enriched people, the input relationships, communities and statistics
        """
        cfg = self.config.communities
        detector = CommunityDetector(
            self.graph,
            strong_tie_threshold=cfg.strong_tie_threshold,
            fallback_name=cfg.fallback_name,
            max_central_members=cfg.max_central_members,
        )

        result = NetworkAnalysisResult(
            nodes=[self._enriched_person(node_id) for node_id in self.graph.node_ids],
            edges=list(self.relationships),
            communities=detector.detect(),
            statistics=calculate_statistics(self.graph, self.scores.degree),
        )

        logger.info(
            f"Analysis complete: {len(result.nodes)} people, "
            f"{len(result.communities)} communities"
        )

        return result

    def recommend(self, node_id: str, limit: Optional[int] = None) -> list[Recommendation]:
        """Suggest new connections for node_id."""
        if limit is None:
            limit = self.config.recommendations.default_limit
        return self.recommender.recommend(node_id, limit)

    def find_hub_persons(self, limit: Optional[int] = None) -> list[str]:
        """IDs of people with both high PageRank and high betweenness."""
        if limit is None:
            limit = self.config.hubs.default_limit
        return self.recommender.find_hub_persons(limit)

    def shortest_path(self, source: str, target: str) -> list[str]:
        """One shortest path between two people, or an empty list."""
        return self.recommender.shortest_path(source, target)

    def paths_to_hubs(self, node_id: str) -> list[HubPath]:
        return self.recommender.paths_to_hubs(
            node_id,
            limit=self.config.hubs.default_limit,
            max_distance=self.config.hubs.max_path_length,
        )

    def _direct_connections(self, node_id: str) -> list[DirectConnection]:
        """Neighbors paired with their strongest relationship to node_id."""
        strongest: dict[str, Relationship] = {}
        for rel in self.relationships:
            if node_id not in (rel.source, rel.target) or rel.source == rel.target:
                continue
            other = rel.other(node_id)
            if other not in self.graph:
                continue
            if other not in strongest or rel.strength > strongest[other].strength:
                strongest[other] = rel

        connections = [
            DirectConnection(person=self._enriched_person(other), relationship=rel)
            for other, rel in strongest.items()
        ]
        connections.sort(key=lambda c: c.relationship.strength, reverse=True)
        return connections

    def analyze_contact(self, node_id: str) -> ContactAnalysis:
        """Network analysis centred on one person.

        Raises:
            ValueError: If node_id is not in the graph
        """
        if node_id not in self.graph:
            raise ValueError(f"Unknown person: {node_id}")

        processing = self.config.processing
        direct = self._direct_connections(node_id)
        second_degree_ids = self.recommender.second_degree_connections(node_id)

        companies = {c.person.company for c in direct if c.person.company}
        avg_strength = (
            sum(c.relationship.strength for c in direct) / len(direct)
            if direct else 0.0
        )

        return ContactAnalysis(
            contact=self._enriched_person(node_id),
            direct_connections=direct,
            second_degree=[
                self._enriched_person(other)
                for other in second_degree_ids[:processing.second_degree_limit]
            ],
            recommended=self.recommend(node_id),
            paths_to_hubs=self.paths_to_hubs(node_id),
            industries=self.industry_classifier.breakdown(direct),
            statistics=ContactStatistics(
                total_direct_connections=len(direct),
                total_second_degree_connections=len(second_degree_ids),
                average_connection_strength=avg_strength,
                companies_count=len(companies),
                reachable_contacts=self.recommender.reachable_contacts(
                    node_id, processing.reachable_depth
                ),
            ),
        )


def focus_result(
    result: NetworkAnalysisResult,
    focus_id: str,
    depth: int = 2,
) -> NetworkAnalysisResult:
    """Restrict a result to the neighborhood of one person.

    Keeps people within depth hops of focus_id and the relationships
    touching any person expanded along the way.

    Raises:
        ValueError: If depth is negative or focus_id is not in the result
    """
    if depth < 0:
        raise ValueError(f"depth must be non-negative, got {depth}")
    if result.get_node(focus_id) is None:
        raise ValueError(f"Unknown person: {focus_id}")

    known = {node.id for node in result.nodes}
    relevant_nodes = {focus_id}
    relevant_edges = set()
    queue = deque([(focus_id, 0)])

    while queue:
        current, current_depth = queue.popleft()
        if current_depth >= depth:
            continue

        for edge in result.edges:
            if current not in (edge.source, edge.target):
                continue
            neighbor = edge.other(current)
            if neighbor not in known:
                continue
            relevant_edges.add(edge.id)
            if neighbor not in relevant_nodes:
                relevant_nodes.add(neighbor)
                queue.append((neighbor, current_depth + 1))

    return result.model_copy(update={
        "nodes": [node for node in result.nodes if node.id in relevant_nodes],
        "edges": [edge for edge in result.edges if edge.id in relevant_edges],
        "focus": focus_id,
    })
