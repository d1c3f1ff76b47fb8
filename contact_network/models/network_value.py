"""
Network Value Scorer

Blends centrality and importance into a single per-person score.
"""

import logging
import math

from contact_network.models.centrality import CentralityScores
from contact_network.models.entities import Person
from contact_network.models.graph import ContactGraph

logger = logging.getLogger(__name__)


class NetworkValueScorer:
    """Heuristic network value score.

    Formula:
        value = degree * avg_neighbor_importance * 10
              + betweenness * 100
              + page_rank * 200
              + importance * 20

    The coefficients are product-tuned defaults, not derived quantities.
    """

    def __init__(
        self,
        degree_weight: float = 10.0,
        betweenness_weight: float = 100.0,
        page_rank_weight: float = 200.0,
        importance_weight: float = 20.0,
    ):
        self.degree_weight = degree_weight
        self.betweenness_weight = betweenness_weight
        self.page_rank_weight = page_rank_weight
        self.importance_weight = importance_weight

    def score(
        self,
        person: Person,
        degree: int,
        betweenness: float,
        page_rank: float,
        neighbor_importances: list[int],
    ) -> int:
        """Calculate the network value of one person.

        Args:
            person: The person being scored
            degree: Distinct neighbor count
            betweenness: Normalised betweenness
            page_rank: PageRank
            neighbor_importances: Importance ratings of the neighbors

        Returns:
            Value rounded half-up to an integer
        """
        avg_importance = sum(neighbor_importances) / max(len(neighbor_importances), 1)

        value = (
            degree * avg_importance * self.degree_weight
            + betweenness * self.betweenness_weight
            + page_rank * self.page_rank_weight
            + person.importance * self.importance_weight
        )

        return int(math.floor(value + 0.5))

    def score_network(
        self,
        graph: ContactGraph,
        scores: CentralityScores,
    ) -> dict[str, int]:
        """Calculate network value for every person in the graph."""
        values = {}

        for node_id in graph.node_ids:
            person = graph.get_person(node_id)
            values[node_id] = self.score(
                person,
                degree=scores.degree.get(node_id, 0),
                betweenness=scores.betweenness.get(node_id, 0.0),
                page_rank=scores.page_rank.get(node_id, 0.0),
                neighbor_importances=[
                    graph.get_person(neighbor).importance
                    for neighbor in graph.neighbors(node_id)
                ],
            )

        logger.info(f"Calculated network value for {len(values)} people")

        return values
