"""
Data Models and Analytical Components

Pydantic models for contacts and the graph analysis passes built on them.
"""

from contact_network.models.entities import (
    Person,
    Relationship,
    RelationshipType,
    Community,
    NetworkStatistics,
    NetworkAnalysisResult,
    NetworkSnapshot,
    ContactAnalysis,
    Recommendation,
    HubPath,
    IndustryBreakdown,
)
from contact_network.models.graph import ContactGraph, build_graph
from contact_network.models.centrality import CentralityCalculator, CentralityScores
from contact_network.models.network_value import NetworkValueScorer
from contact_network.models.communities import CommunityDetector
from contact_network.models.recommendations import ConnectionRecommender
from contact_network.models.industries import IndustryClassifier
from contact_network.models.statistics import calculate_statistics
from contact_network.models.strength import RelationshipStrengthEstimator, SharedActivity
from contact_network.models.analyzer import NetworkAnalyzer, focus_result

__all__ = [
    "Person",
    "Relationship",
    "RelationshipType",
    "Community",
    "NetworkStatistics",
    "NetworkAnalysisResult",
    "NetworkSnapshot",
    "ContactAnalysis",
    "Recommendation",
    "HubPath",
    "IndustryBreakdown",
    "ContactGraph",
    "build_graph",
    "CentralityCalculator",
    "CentralityScores",
    "NetworkValueScorer",
    "CommunityDetector",
    "ConnectionRecommender",
    "IndustryClassifier",
    "calculate_statistics",
    "RelationshipStrengthEstimator",
    "SharedActivity",
    "NetworkAnalyzer",
    "focus_result",
]
