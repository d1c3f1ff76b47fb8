"""
Graph Builder

Builds an immutable, undirected adjacency structure from people and relationships.
"""

import logging
from collections import deque
from types import MappingProxyType
from typing import Iterable, Optional

from contact_network.models.entities import Person, Relationship

logger = logging.getLogger(__name__)


def _pair_key(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a <= b else (b, a)


class ContactGraph:
    """Read-only adjacency view over one snapshot of the network.

    Neighbor lists are de-duplicated (first-seen order is kept) and
    self-loops are dropped, so degree(v) == len(neighbors(v)) for every
    metric computed on the graph.
    """

    def __init__(
        self,
        people: dict[str, Person],
        adjacency: dict[str, tuple[str, ...]],
        pair_strengths: dict[tuple[str, str], float],
    ):
        self._people = MappingProxyType(dict(people))
        self._adjacency = MappingProxyType(dict(adjacency))
        self._neighbor_sets = MappingProxyType(
            {node_id: frozenset(neighbors) for node_id, neighbors in adjacency.items()}
        )
        self._pair_strengths = MappingProxyType(dict(pair_strengths))
        self._node_ids = tuple(people.keys())

    def __len__(self) -> int:
        return len(self._node_ids)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._people

    @property
    def node_ids(self) -> tuple[str, ...]:
        """Node IDs in input order."""
        return self._node_ids

    @property
    def edge_count(self) -> int:
        """Number of distinct linked pairs."""
        return len(self._pair_strengths)

    def get_person(self, node_id: str) -> Optional[Person]:
        return self._people.get(node_id)

    def neighbors(self, node_id: str) -> tuple[str, ...]:
        return self._adjacency.get(node_id, ())

    def degree(self, node_id: str) -> int:
        return len(self.neighbors(node_id))

    def has_edge(self, a: str, b: str) -> bool:
        return b in self._neighbor_sets.get(a, frozenset())

    def pair_strength(self, a: str, b: str) -> Optional[float]:
        """Strongest relationship strength between a and b, if linked."""
        return self._pair_strengths.get(_pair_key(a, b))

    def bfs_distances(self, source: str, max_depth: Optional[int] = None) -> dict[str, int]:
        """Hop distances from source to every reachable node (source included)."""
        if source not in self._people:
            return {}

        distances = {source: 0}
        queue = deque([source])

        while queue:
            current = queue.popleft()
            depth = distances[current]
            if max_depth is not None and depth >= max_depth:
                continue
            for neighbor in self._adjacency[current]:
                if neighbor not in distances:
                    distances[neighbor] = depth + 1
                    queue.append(neighbor)

        return distances

    def shortest_path_dag(self, source: str) -> tuple[dict[str, int], dict[str, list[str]]]:
        """BFS from source recording every predecessor on a shortest path.

        Returns:
            Tuple of (distances, predecessors)
        """
        if source not in self._people:
            return {}, {}

        distances = {source: 0}
        predecessors: dict[str, list[str]] = {source: []}
        queue = deque([source])

        while queue:
            current = queue.popleft()
            next_depth = distances[current] + 1
            for neighbor in self._adjacency[current]:
                if neighbor not in distances:
                    distances[neighbor] = next_depth
                    predecessors[neighbor] = [current]
                    queue.append(neighbor)
                elif distances[neighbor] == next_depth:
                    predecessors[neighbor].append(current)

        return distances, predecessors

    def all_shortest_paths(self, source: str, target: str) -> list[list[str]]:
        """Enumerate every minimum-length path from source to target."""
        distances, predecessors = self.shortest_path_dag(source)
        if target not in distances:
            return []
        return enumerate_paths(predecessors, source, target)


def enumerate_paths(
    predecessors: dict[str, list[str]],
    source: str,
    target: str,
) -> list[list[str]]:
    """Walk a predecessor DAG back from target, yielding source-to-target paths."""
    paths = []
    stack = [(target, [target])]

    while stack:
        node, suffix = stack.pop()
        if node == source:
            paths.append(list(reversed(suffix)))
            continue
        for pred in reversed(predecessors[node]):
            stack.append((pred, suffix + [pred]))

    return paths


def build_graph(
    people: Iterable[Person],
    relationships: Iterable[Relationship],
) -> ContactGraph:
    """Build the undirected contact graph.

    Relationships that reference unknown people are ignored, as are
    self-loops. Multiple relationships between the same pair contribute a
    single adjacency entry; the strongest strength is kept for the pair.

    Args:
        people: Contacts (node IDs must be unique; later duplicates are ignored)
        relationships: Relationships in either direction

    Returns:
        Immutable ContactGraph
    """
    people_by_id: dict[str, Person] = {}
    for person in people:
        if person.id in people_by_id:
            logger.warning(f"Duplicate person id {person.id}, keeping first occurrence")
            continue
        people_by_id[person.id] = person

    adjacency: dict[str, list[str]] = {node_id: [] for node_id in people_by_id}
    pair_strengths: dict[tuple[str, str], float] = {}
    ignored = 0

    for rel in relationships:
        if rel.source not in people_by_id or rel.target not in people_by_id:
            logger.debug(f"Ignoring relationship {rel.id}: unknown endpoint")
            ignored += 1
            continue
        if rel.source == rel.target:
            logger.debug(f"Ignoring self-loop relationship {rel.id}")
            ignored += 1
            continue

        key = _pair_key(rel.source, rel.target)
        if key in pair_strengths:
            pair_strengths[key] = max(pair_strengths[key], rel.strength)
            continue

        pair_strengths[key] = rel.strength
        adjacency[rel.source].append(rel.target)
        adjacency[rel.target].append(rel.source)

    logger.info(
        f"Built graph with {len(people_by_id)} people and {len(pair_strengths)} links"
        + (f" ({ignored} relationships ignored)" if ignored else "")
    )

    return ContactGraph(
        people=people_by_id,
        adjacency={node_id: tuple(neighbors) for node_id, neighbors in adjacency.items()},
        pair_strengths=pair_strengths,
    )
