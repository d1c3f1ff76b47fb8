"""
Test Helpers

Builders for people and relationships used across the test suite.
"""

from contact_network.models.entities import Person, Relationship, RelationshipType


def make_person(person_id: str, company: str = None, importance: int = 1, **kwargs) -> Person:
    """Create a person with a readable default name."""
    return Person(
        id=person_id,
        full_name=kwargs.pop("full_name", person_id.title()),
        company=company,
        importance=importance,
        **kwargs,
    )


def make_edge(
    source: str,
    target: str,
    strength: float = 50.0,
    rel_type: RelationshipType = RelationshipType.BUSINESS,
    edge_id: str = None,
) -> Relationship:
    """Create a relationship between two people."""
    return Relationship(
        id=edge_id or f"{source}-{target}",
        source=source,
        target=target,
        type=rel_type,
        strength=strength,
    )
