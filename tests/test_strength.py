"""
Tests for Relationship Strength Estimation
"""

import pytest

from contact_network.models.entities import RelationshipType
from contact_network.models.strength import RelationshipStrengthEstimator, SharedActivity

from tests.helpers import make_person


class TestRelationshipStrengthEstimator:
    """Tests for RelationshipStrengthEstimator."""

    @pytest.fixture
    def estimator(self):
        """Create estimator with default weights."""
        return RelationshipStrengthEstimator()

    def test_no_signals(self, estimator):
        """Test that unrelated contacts have zero strength."""
        a = make_person("a", company="Acme")
        b = make_person("b", company="Globex")

        assert estimator.estimate(a, b) == 0.0

    def test_introduction_and_company(self, estimator):
        """Test the fixed introduction and same-company signals."""
        a = make_person("a", company="Acme")
        b = make_person("b", company="Acme", introduced_by="a")

        breakdown = estimator.get_strength_breakdown(a, b)

        assert breakdown["introduction"] == 40.0
        assert breakdown["same_company"] == 30.0
        assert estimator.estimate(a, b) == 70.0

    def test_introduction_is_symmetric(self, estimator):
        """Test that the introduction signal works in either direction."""
        a = make_person("a", introduced_by="b")
        b = make_person("b")

        assert estimator.estimate(a, b) == estimator.estimate(b, a) == 40.0

    def test_missing_company_does_not_match(self, estimator):
        """Test that two contacts without a company get no company points."""
        assert estimator.estimate(make_person("a"), make_person("b")) == 0.0

    def test_counted_signals_capped(self, estimator):
        """Test that activity counters are capped per signal."""
        a = make_person("a")
        b = make_person("b")
        activity = SharedActivity(shared_projects=10, meeting_count=3, email_exchanges=50)

        breakdown = estimator.get_strength_breakdown(a, b, activity)

        assert breakdown["shared_projects"] == 20.0
        assert breakdown["meetings"] == 6.0
        assert breakdown["email_exchanges"] == 10.0

    def test_shared_tags(self, estimator):
        """Test points for shared tags."""
        a = make_person("a", tags={"golf", "vc", "ai"})
        b = make_person("b", tags={"golf", "ai", "music"})

        assert estimator.get_strength_breakdown(a, b)["shared_tags"] == 4.0

    def test_total_capped_at_100(self, estimator):
        """Test that strength never exceeds 100."""
        tags = {f"tag{i}" for i in range(8)}
        a = make_person("a", company="Acme", tags=tags)
        b = make_person("b", company="Acme", introduced_by="a", tags=tags)
        activity = SharedActivity(shared_projects=5, meeting_count=10, email_exchanges=20)

        assert estimator.estimate(a, b, activity) == 100.0

    def test_custom_weights(self):
        """Test overriding weights and ignoring unknown keys."""
        estimator = RelationshipStrengthEstimator(
            weights={"same_company": 50.0, "unknown_signal": 99.0},
            caps={"meeting": 4.0},
        )
        a = make_person("a", company="Acme")
        b = make_person("b", company="Acme")

        assert estimator.estimate(a, b) == 50.0
        assert "unknown_signal" not in estimator.weights
        assert estimator.caps["meeting"] == 4.0


class TestInferRelationships:
    """Tests for inferring relationships from contact data."""

    @pytest.fixture
    def people(self):
        """Contacts with an introduction, colleagues and a stranger."""
        return [
            make_person("a", company="Acme"),
            make_person("b", company="Acme"),
            make_person("c", company="Globex", introduced_by="a"),
            make_person("d", company="Initech"),
        ]

    def test_inferred_pairs(self, people):
        """Test which pairs are inferred and how they are typed."""
        relationships = RelationshipStrengthEstimator().infer_relationships(people)

        by_id = {r.id: r for r in relationships}
        assert set(by_id) == {"inferred-a-b", "inferred-a-c"}

        colleague = by_id["inferred-a-b"]
        assert colleague.type == RelationshipType.COLLEAGUE
        assert colleague.confidence == pytest.approx(0.8)
        assert colleague.strength == 30.0

        introduction = by_id["inferred-a-c"]
        assert introduction.type == RelationshipType.INTRODUCTION
        assert introduction.confidence == pytest.approx(0.9)
        assert introduction.source == "a"
        assert introduction.target == "c"

    def test_business_type_from_shared_tags(self):
        """Test that a pair linked only by activity is typed business."""
        tags = {f"t{i}" for i in range(15)}
        people = [make_person("a", tags=tags), make_person("b", tags=tags)]

        estimator = RelationshipStrengthEstimator(
            caps={"shared_tag": 30.0}, min_inferred_strength=20.0
        )
        relationships = estimator.infer_relationships(people)

        assert len(relationships) == 1
        assert relationships[0].type == RelationshipType.BUSINESS
        assert relationships[0].confidence == pytest.approx(0.6)

    def test_threshold_is_exclusive(self):
        """Test that strength equal to the threshold is not inferred."""
        people = [make_person("a", company="Acme"), make_person("b", company="Acme")]

        estimator = RelationshipStrengthEstimator(min_inferred_strength=30.0)

        assert estimator.infer_relationships(people) == []

    def test_no_people(self):
        """Test inference on an empty contact list."""
        assert RelationshipStrengthEstimator().infer_relationships([]) == []
