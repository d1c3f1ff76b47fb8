"""
Relationship Strength Estimator

Scores how strongly two contacts are related and infers relationships from contact data.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from contact_network.models.entities import Person, Relationship, RelationshipType

logger = logging.getLogger(__name__)


class SharedActivity(BaseModel):
    """Counters describing what two contacts have done together."""
    shared_projects: int = 0
    meeting_count: int = 0
    email_exchanges: int = 0


class RelationshipStrengthEstimator:
    """Estimates relationship strength on a 0-100 scale.

    Formula:
        strength = introduction (40) + same company (30)
                 + min(20, 5 * shared_projects)
                 + min(10, 2 * meeting_count)
                 + min(10, 1 * email_exchanges)
                 + min(10, 2 * shared_tags)
        capped at 100
    """

    DEFAULT_WEIGHTS = {
        "introduction": 40.0,
        "same_company": 30.0,
        "shared_project": 5.0,
        "meeting": 2.0,
        "email_exchange": 1.0,
        "shared_tag": 2.0,
    }

    DEFAULT_CAPS = {
        "shared_project": 20.0,
        "meeting": 10.0,
        "email_exchange": 10.0,
        "shared_tag": 10.0,
    }

    MAX_STRENGTH = 100.0

    def __init__(
        self,
        weights: Optional[dict[str, float]] = None,
        caps: Optional[dict[str, float]] = None,
        min_inferred_strength: float = 20.0,
    ):
        """Initialize estimator with configuration.

        Args:
            weights: Custom points per signal
            caps: Custom maximum points for counted signals
            min_inferred_strength: Strength a pair must exceed to be inferred
        """
        self.weights = self.DEFAULT_WEIGHTS.copy()
        if weights:
            for key, value in weights.items():
                if key not in self.weights:
                    logger.warning(f"Unknown strength signal: {key}")
                    continue
                self.weights[key] = value

        self.caps = self.DEFAULT_CAPS.copy()
        if caps:
            for key, value in caps.items():
                if key not in self.caps:
                    logger.warning(f"Unknown strength cap: {key}")
                    continue
                self.caps[key] = value

        self.min_inferred_strength = min_inferred_strength

    @staticmethod
    def _introduced(a: Person, b: Person) -> bool:
        return a.introduced_by == b.id or b.introduced_by == a.id

    @staticmethod
    def _same_company(a: Person, b: Person) -> bool:
        return bool(a.company) and a.company == b.company

    def _capped(self, signal: str, count: int) -> float:
        return min(self.caps[signal], count * self.weights[signal])

    def get_strength_breakdown(
        self,
        a: Person,
        b: Person,
        activity: Optional[SharedActivity] = None,
    ) -> dict[str, float]:
        """Points contributed by each signal, before the overall cap."""
        activity = activity or SharedActivity()

        return {
            "introduction": self.weights["introduction"] if self._introduced(a, b) else 0.0,
            "same_company": self.weights["same_company"] if self._same_company(a, b) else 0.0,
            "shared_projects": self._capped("shared_project", activity.shared_projects),
            "meetings": self._capped("meeting", activity.meeting_count),
            "email_exchanges": self._capped("email_exchange", activity.email_exchanges),
            "shared_tags": self._capped("shared_tag", len(a.tags & b.tags)),
        }

    def estimate(
        self,
        a: Person,
        b: Person,
        activity: Optional[SharedActivity] = None,
    ) -> float:
        """Estimate relationship strength between two contacts.

        Args:
            a: First contact
            b: Second contact
            activity: Shared activity counters, if known

        Returns:
            Strength in [0, 100]
        """
        total = sum(self.get_strength_breakdown(a, b, activity).values())
        return min(self.MAX_STRENGTH, total)

    def infer_relationships(self, people: list[Person]) -> list[Relationship]:
        """Create relationships for every pair whose estimated strength is high enough.

        Args:
            people: Contacts to pair up

        Returns:
            Inferred relationships, typed introduction, colleague or business
        """
        relationships = []

        for i, a in enumerate(people):
            for b in people[i + 1:]:
                strength = self.estimate(a, b)
                if strength <= self.min_inferred_strength:
                    continue

                if self._introduced(a, b):
                    rel_type, confidence = RelationshipType.INTRODUCTION, 0.9
                elif self._same_company(a, b):
                    rel_type, confidence = RelationshipType.COLLEAGUE, 0.8
                else:
                    rel_type, confidence = RelationshipType.BUSINESS, 0.6

                relationships.append(Relationship(
                    id=f"inferred-{a.id}-{b.id}",
                    source=a.id,
                    target=b.id,
                    type=rel_type,
                    strength=strength,
                    confidence=confidence,
                ))

        logger.info(f"Inferred {len(relationships)} relationships from {len(people)} contacts")

        return relationships
