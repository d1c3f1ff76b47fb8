"""
Community Detection

Greedy neighborhood expansion over shared companies and strong ties.
"""

import logging
from collections import deque

from contact_network.models.entities import Community
from contact_network.models.graph import ContactGraph

logger = logging.getLogger(__name__)


class CommunityDetector:
    """Detects loosely coupled communities in a single greedy pass.

    A neighbor joins the community of the node it was reached from when
    both work for the same company, or when their relationship strength
    exceeds the strong-tie threshold.
    """

    def __init__(
        self,
        graph: ContactGraph,
        strong_tie_threshold: float = 50.0,
        fallback_name: str = "Group {index}",
        max_central_members: int = 2,
    ):
        """Initialize detector.

        Args:
            graph: Graph to analyse
            strong_tie_threshold: Strength above which a tie joins a community
            fallback_name: Name template when no member has a company
            max_central_members: Number of central members reported
        """
        self.graph = graph
        self.strong_tie_threshold = strong_tie_threshold
        self.fallback_name = fallback_name
        self.max_central_members = max_central_members

    def _should_join(self, current: str, neighbor: str) -> bool:
        current_company = self.graph.get_person(current).company
        neighbor_company = self.graph.get_person(neighbor).company
        # Two people without a company are never colleagues
        if current_company and current_company == neighbor_company:
            return True

        strength = self.graph.pair_strength(current, neighbor)
        return strength is not None and strength > self.strong_tie_threshold

    def _expand(self, seed: str, visited: set[str]) -> list[str]:
        """BFS from seed over qualifying neighbors."""
        members = [seed]
        queue = deque([seed])
        visited.add(seed)

        while queue:
            current = queue.popleft()
            for neighbor in self.graph.neighbors(current):
                if neighbor in visited:
                    continue
                if self._should_join(current, neighbor):
                    visited.add(neighbor)
                    members.append(neighbor)
                    queue.append(neighbor)

        return members

    def _internal_degrees(self, members: list[str]) -> dict[str, int]:
        member_set = set(members)
        return {
            member: sum(1 for n in self.graph.neighbors(member) if n in member_set)
            for member in members
        }

    def density(self, members: list[str]) -> float:
        """Internal links divided by possible internal links."""
        size = len(members)
        possible = size * (size - 1) / 2
        if possible == 0:
            return 0.0
        internal_edges = sum(self._internal_degrees(members).values()) / 2
        return internal_edges / possible

    def central_members(self, members: list[str]) -> list[str]:
        """Members with the highest internal degree, ties in membership order."""
        degrees = self._internal_degrees(members)
        ranked = sorted(members, key=lambda m: degrees[m], reverse=True)
        return ranked[:self.max_central_members]

    def _community_name(self, members: list[str], index: int) -> str:
        counts: dict[str, int] = {}
        for member in members:
            company = self.graph.get_person(member).company
            if company:
                counts[company] = counts.get(company, 0) + 1

        if not counts:
            return self.fallback_name.format(index=index)

        # max() keeps the first company seen among equal counts
        return max(counts, key=lambda c: counts[c])

    def detect(self) -> list[Community]:
        """Partition the graph into communities of two or more people."""
        communities: list[Community] = []
        visited: set[str] = set()

        for node_id in self.graph.node_ids:
            if node_id in visited:
                continue

            members = self._expand(node_id, visited)
            if len(members) < 2:
                continue

            index = len(communities)
            communities.append(Community(
                id=f"community-{index}",
                name=self._community_name(members, index + 1),
                members=members,
                size=len(members),
                density=self.density(members),
                central_members=self.central_members(members),
            ))

        logger.info(f"Detected {len(communities)} communities")

        return communities
