"""
Pytest Configuration and Shared Fixtures
"""

import pytest

from contact_network.models.entities import Person, Relationship, RelationshipType

from tests.helpers import make_edge, make_person


@pytest.fixture
def path_network() -> tuple[list[Person], list[Relationship]]:
    """Path graph A - B - C - D."""
    people = [make_person(p) for p in ("a", "b", "c", "d")]
    edges = [make_edge("a", "b"), make_edge("b", "c"), make_edge("c", "d")]
    return people, edges


@pytest.fixture
def star_network() -> tuple[list[Person], list[Relationship]]:
    """Star graph with centre 'hub' and four leaves."""
    leaves = ["l1", "l2", "l3", "l4"]
    people = [make_person("hub")] + [make_person(leaf) for leaf in leaves]
    edges = [make_edge("hub", leaf) for leaf in leaves]
    return people, edges


@pytest.fixture
def cycle_network() -> tuple[list[Person], list[Relationship]]:
    """Four-cycle A - B - C - D - A (two shortest paths between opposite corners)."""
    people = [make_person(p) for p in ("a", "b", "c", "d")]
    edges = [
        make_edge("a", "b"),
        make_edge("b", "c"),
        make_edge("c", "d"),
        make_edge("d", "a"),
    ]
    return people, edges


@pytest.fixture
def same_company_network() -> tuple[list[Person], list[Relationship]]:
    """Three colleagues at company X linked A - B - C."""
    people = [make_person(p, company="X") for p in ("a", "b", "c")]
    edges = [
        make_edge("a", "b", strength=80, rel_type=RelationshipType.COLLEAGUE),
        make_edge("b", "c", strength=80, rel_type=RelationshipType.COLLEAGUE),
    ]
    return people, edges


@pytest.fixture
def sample_network() -> tuple[list[Person], list[Relationship]]:
    """A mixed network of two company clusters, a bridge chain and an isolated contact.

    Acme:    alice - bob - carol - alice (triangle)
    Bridge:  carol - dave
    Globex:  dave - erin, dave - frank (Initech, strong tie), erin - frank
    Tail:    frank - grace (no company, weak tie)
    Alone:   heidi
    """
    people = [
        make_person("alice", company="Acme", importance=5),
        make_person("bob", company="Acme", importance=3),
        make_person("carol", company="Acme", importance=4),
        make_person("dave", company="Globex", importance=2),
        make_person("erin", company="Globex", importance=3),
        make_person("frank", company="Initech", importance=1),
        make_person("grace", importance=2),
        make_person("heidi", company="Umbrella", importance=1),
    ]
    edges = [
        make_edge("alice", "bob", 80, RelationshipType.COLLEAGUE),
        make_edge("bob", "carol", 60, RelationshipType.COLLEAGUE),
        make_edge("alice", "carol", 40, RelationshipType.COLLEAGUE),
        make_edge("carol", "dave", 30),
        make_edge("dave", "erin", 70, RelationshipType.COLLEAGUE),
        make_edge("erin", "frank", 20, RelationshipType.SOCIAL),
        make_edge("dave", "frank", 55, RelationshipType.INTRODUCTION),
        make_edge("grace", "frank", 10, RelationshipType.SOCIAL),
        # Reverse duplicate of alice-bob and an edge to an unknown contact
        make_edge("bob", "alice", 90, RelationshipType.SOCIAL, edge_id="bob-alice-dup"),
        make_edge("alice", "zed", 99),
    ]
    return people, edges
