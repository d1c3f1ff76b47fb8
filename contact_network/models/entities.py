"""
Core Data Models

Pydantic models representing contacts, their relationships and analysis results.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class RelationshipType(str, Enum):
    """Kinds of relationship between two contacts."""
    INTRODUCTION = "introduction"
    COLLEAGUE = "colleague"
    BUSINESS = "business"
    SOCIAL = "social"
    FAMILY = "family"


class Person(BaseModel):
    """A contact in the relationship graph."""
    id: str = Field(description="Unique contact identifier")
    full_name: str = ""
    company: Optional[str] = None
    position: Optional[str] = None
    importance: int = Field(default=1, ge=1, le=5)
    email: Optional[str] = None
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    introduced_by: Optional[str] = Field(
        default=None,
        description="ID of the contact who made the introduction",
    )
    tags: set[str] = Field(default_factory=set)

    # Analysis results
    degree: int = Field(default=0, ge=0)
    betweenness: float = 0.0
    closeness: float = 0.0
    page_rank: float = 0.0
    network_value: int = 0

    @field_validator("tags", mode="before")
    @classmethod
    def _parse_tags(cls, value: Any) -> Any:
        """Accept tags stored as a JSON-encoded list."""
        if value is None:
            return set()
        if isinstance(value, str):
            try:
                parsed = json.loads(value) if value.strip() else []
            except json.JSONDecodeError:
                logger.warning(f"Ignoring malformed tags value: {value!r}")
                return set()
            if not isinstance(parsed, list):
                return set()
            return {str(tag) for tag in parsed}
        return value

    @property
    def display_name(self) -> str:
        """Human-readable name for display."""
        return self.full_name or self.id


class Relationship(BaseModel):
    """A typed, weighted connection between two contacts.

    The source/target ordering is kept for the caller; analysis treats
    every relationship as undirected.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: str = Field(alias="from")
    target: str = Field(alias="to")
    type: RelationshipType = RelationshipType.BUSINESS
    strength: float = Field(default=0.0, ge=0.0, le=100.0)
    shared_projects: int = 0
    meeting_count: int = 0
    email_exchanges: int = 0
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    last_interaction: Optional[datetime] = None

    def other(self, person_id: str) -> str:
        """Return the endpoint opposite to person_id."""
        return self.target if person_id == self.source else self.source


class Community(BaseModel):
    """An affiliation-linked or strongly connected group of contacts."""
    id: str
    name: str
    members: list[str] = Field(default_factory=list)
    size: int = 0
    density: float = Field(default=0.0, ge=0.0, le=1.0)
    central_members: list[str] = Field(default_factory=list)


class NetworkStatistics(BaseModel):
    """Aggregate statistics for a whole graph."""
    total_nodes: int = 0
    total_edges: int = 0
    avg_degree: float = 0.0
    density: float = 0.0
    clustering_coefficient: float = 0.0
    diameter: int = 0


class NetworkAnalysisResult(BaseModel):
    """Output of a full analysis run."""
    nodes: list[Person] = Field(default_factory=list)
    edges: list[Relationship] = Field(default_factory=list)
    communities: list[Community] = Field(default_factory=list)
    statistics: NetworkStatistics = Field(default_factory=NetworkStatistics)
    focus: Optional[str] = None

    def get_node(self, person_id: str) -> Optional[Person]:
        """Get an analysed person by ID."""
        for node in self.nodes:
            if node.id == person_id:
                return node
        return None

    def get_top_nodes(self, n: int = 10) -> list[Person]:
        """Get top N people by network value."""
        return sorted(self.nodes, key=lambda p: p.network_value, reverse=True)[:n]


class Recommendation(BaseModel):
    """A suggested new connection."""
    person_id: str
    score: float
    shared_neighbors: list[str] = Field(default_factory=list)
    same_company: bool = False


class HubPath(BaseModel):
    """Shortest path from a contact to a hub person."""
    hub_id: str
    path: list[str] = Field(default_factory=list)
    distance: int = 0


class DirectConnection(BaseModel):
    """A neighbor together with the strongest relationship to it."""
    person: Person
    relationship: Relationship


class ContactStatistics(BaseModel):
    """Neighborhood statistics for a single contact."""
    total_direct_connections: int = 0
    total_second_degree_connections: int = 0
    average_connection_strength: float = 0.0
    companies_count: int = 0
    reachable_contacts: int = 0


class IndustryBreakdown(BaseModel):
    """Direct connections grouped by the industry of their company."""
    name: str
    count: int = 0
    average_strength: float = 0.0
    contacts: list[str] = Field(default_factory=list)


class ContactAnalysis(BaseModel):
    """Network analysis centred on one contact."""
    contact: Person
    direct_connections: list[DirectConnection] = Field(default_factory=list)
    second_degree: list[Person] = Field(default_factory=list)
    recommended: list[Recommendation] = Field(default_factory=list)
    paths_to_hubs: list[HubPath] = Field(default_factory=list)
    industries: list[IndustryBreakdown] = Field(default_factory=list)
    statistics: ContactStatistics = Field(default_factory=ContactStatistics)


class NetworkSnapshot(BaseModel):
    """Input snapshot of people and relationships."""
    people: list[Person] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)

    # Metadata
    source: Optional[str] = None
    loaded_files: list[str] = Field(default_factory=list)
    skipped_files: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def has_relationships(self) -> bool:
        return len(self.relationships) > 0

    def get_person(self, person_id: str) -> Optional[Person]:
        """Get a person by ID."""
        for person in self.people:
            if person.id == person_id:
                return person
        return None
