"""
Industry Breakdown

Classifies contacts into industries by company name and summarises a
contact's direct connections per industry.
"""

import logging
from typing import Iterable, Optional

from contact_network.models.entities import DirectConnection, IndustryBreakdown

logger = logging.getLogger(__name__)

DEFAULT_RULES = [
    ("Medical", ["病院", "クリニック", "Hospital", "Clinic"]),
    ("Education", ["大学", "学校", "University", "School"]),
    ("Corporate", ["株式会社", "Inc", "Corp"]),
]


class IndustryClassifier:
    """Keyword classifier over company names.

    Rules are (industry, keywords) pairs checked in order; a company
    belongs to the first industry with a keyword contained in its name.
    Matching is case-sensitive.
    """

    def __init__(
        self,
        rules: Optional[Iterable[tuple[str, list[str]]]] = None,
        fallback: str = "Other",
    ):
        """Initialize classifier.

        Args:
            rules: Ordered (industry, keywords) pairs (defaults when omitted)
            fallback: Industry for companies that match no rule
        """
        if rules is None:
            rules = DEFAULT_RULES
        self.rules = [(name, list(keywords)) for name, keywords in rules]
        self.fallback = fallback

    def classify(self, company: str) -> str:
        for name, keywords in self.rules:
            if any(keyword in company for keyword in keywords):
                return name
        return self.fallback

    def breakdown(self, connections: list[DirectConnection]) -> list[IndustryBreakdown]:
        """Group direct connections by industry.

        Connections without a company are left out. Industries are ordered
        by connection count, largest first, ties kept in order of first
        appearance.
        """
        groups: dict[str, list[DirectConnection]] = {}
        for connection in connections:
            company = connection.person.company
            if not company:
                continue
            groups.setdefault(self.classify(company), []).append(connection)

        industries = [
            IndustryBreakdown(
                name=name,
                count=len(members),
                average_strength=sum(m.relationship.strength for m in members) / len(members),
                contacts=[m.person.display_name for m in members],
            )
            for name, members in groups.items()
        ]
        industries.sort(key=lambda i: i.count, reverse=True)

        logger.debug(f"Classified {len(connections)} connections into {len(industries)} industries")

        return industries
