"""
Tests for Network Snapshot Ingestion
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from contact_network.models.entities import RelationshipType
from contact_network.pipeline.ingest import (
    _normalize_key,
    _parse_date,
    load_network_snapshot,
)

CONTACTS_CSV = """id,fullName,company,importance,introducedBy,tags
p1,Alice Tanaka,Acme,5,,"[""golf"", ""vc""]"
p2,Bob Sato,Acme,3,p1,
p3,Carol Ito,,2,,
,No Id,Acme,1,,
"""

RELATIONSHIPS_CSV = """id,from,to,type,strength,lastInteraction
r1,p1,p2,Colleague,80,2024-01-15
r2,p2,p3,social,40,
r3,p3,,business,10,
"""


class TestNormalizeKey:
    """Tests for column name normalization."""

    def test_camel_case(self):
        """Test camelCase to snake_case conversion."""
        assert _normalize_key("fullName") == "full_name"
        assert _normalize_key("lastInteraction") == "last_interaction"
        assert _normalize_key("profileImage") == "profile_image"

    def test_aliases(self):
        """Test alternative column names."""
        assert _normalize_key("from") == "source"
        assert _normalize_key("to") == "target"
        assert _normalize_key("Name") == "full_name"
        assert _normalize_key("introducedById") == "introduced_by"

    def test_spaces_and_case(self):
        """Test spaces and upper case."""
        assert _normalize_key(" Company Name ") == "company"


class TestParseDate:
    """Tests for date parsing."""

    def test_iso_date(self):
        """Test ISO date format."""
        assert _parse_date("2024-01-15") == datetime(2024, 1, 15)

    def test_iso_datetime(self):
        """Test ISO datetime format."""
        assert _parse_date("2024-01-15T10:30:00") == datetime(2024, 1, 15, 10, 30)

    def test_iso_utc_suffix(self):
        """Test ISO timestamps with a Z suffix and no fraction."""
        parsed = _parse_date("2024-05-01T10:00:00Z")

        assert parsed == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_iso_offset(self):
        """Test ISO timestamps with a UTC offset."""
        parsed = _parse_date("2024-05-01T10:00:00+09:00")

        assert parsed.utcoffset() == timedelta(hours=9)
        assert parsed.hour == 10

    def test_missing(self):
        """Test missing values."""
        assert _parse_date(None) is None
        assert _parse_date(float("nan")) is None

    def test_unparseable(self):
        """Test that unknown formats give None."""
        assert _parse_date("sometime last week") is None


class TestLoadDirectory:
    """Tests for loading CSV snapshots."""

    @pytest.fixture
    def snapshot_dir(self, tmp_path):
        """Directory with contacts and relationships CSVs."""
        (tmp_path / "contacts.csv").write_text(CONTACTS_CSV)
        (tmp_path / "relationships.csv").write_text(RELATIONSHIPS_CSV)
        return tmp_path

    def test_loads_people(self, snapshot_dir):
        """Test that well-formed contact rows become people."""
        snapshot = load_network_snapshot(snapshot_dir)

        assert [p.id for p in snapshot.people] == ["p1", "p2", "p3"]
        alice = snapshot.get_person("p1")
        assert alice.full_name == "Alice Tanaka"
        assert alice.importance == 5
        assert alice.tags == {"golf", "vc"}
        assert snapshot.get_person("p2").introduced_by == "p1"
        assert snapshot.get_person("p3").company is None

    def test_loads_relationships(self, snapshot_dir):
        """Test that well-formed relationship rows become relationships."""
        snapshot = load_network_snapshot(snapshot_dir)

        assert [r.id for r in snapshot.relationships] == ["r1", "r2"]
        r1 = snapshot.relationships[0]
        assert r1.source == "p1"
        assert r1.target == "p2"
        assert r1.type == RelationshipType.COLLEAGUE
        assert r1.strength == 80.0
        assert r1.last_interaction == datetime(2024, 1, 15)

    def test_malformed_rows_reported(self, snapshot_dir):
        """Test that malformed rows are skipped and recorded."""
        snapshot = load_network_snapshot(snapshot_dir)

        assert len(snapshot.errors) == 2
        assert any("contact row 3" in e for e in snapshot.errors)
        assert any("relationship row 2" in e for e in snapshot.errors)

    def test_metadata(self, snapshot_dir):
        """Test loaded file bookkeeping."""
        snapshot = load_network_snapshot(snapshot_dir)

        assert snapshot.loaded_files == ["contacts.csv", "relationships.csv"]
        assert snapshot.skipped_files == []
        assert snapshot.source == str(snapshot_dir)

    def test_missing_relationships_file(self, tmp_path):
        """Test that a contacts-only directory loads without relationships."""
        (tmp_path / "contacts.csv").write_text(CONTACTS_CSV)

        snapshot = load_network_snapshot(tmp_path)

        assert len(snapshot.people) == 3
        assert snapshot.has_relationships is False
        assert snapshot.skipped_files == ["relationships.csv"]

    def test_alternative_file_names(self, tmp_path):
        """Test nodes.csv / edges.csv naming."""
        (tmp_path / "nodes.csv").write_text(CONTACTS_CSV)
        (tmp_path / "edges.csv").write_text(RELATIONSHIPS_CSV)

        snapshot = load_network_snapshot(tmp_path)

        assert snapshot.loaded_files == ["nodes.csv", "edges.csv"]

    def test_generated_relationship_ids(self, tmp_path):
        """Test that rows without an id get one from their endpoints."""
        (tmp_path / "contacts.csv").write_text(CONTACTS_CSV)
        (tmp_path / "relationships.csv").write_text("from,to,strength\np1,p3,25\n")

        snapshot = load_network_snapshot(tmp_path)

        assert snapshot.relationships[0].id == "p1-p3-0"

    def test_empty_contacts_file(self, tmp_path):
        """Test that an empty contacts file gives no people."""
        (tmp_path / "contacts.csv").write_text("")

        snapshot = load_network_snapshot(tmp_path)

        assert snapshot.people == []

    def test_missing_contacts_file(self, tmp_path):
        """Test that a directory without contacts is rejected."""
        (tmp_path / "relationships.csv").write_text(RELATIONSHIPS_CSV)

        with pytest.raises(FileNotFoundError):
            load_network_snapshot(tmp_path)

    def test_missing_path(self, tmp_path):
        """Test that a missing path is rejected."""
        with pytest.raises(FileNotFoundError):
            load_network_snapshot(tmp_path / "nope")


class TestLoadJson:
    """Tests for loading JSON snapshots."""

    def test_nodes_and_edges(self, tmp_path):
        """Test the nodes/edges layout with camelCase keys."""
        data = {
            "nodes": [
                {"id": "a", "fullName": "Alice", "company": "Acme", "importance": 4,
                 "tags": ["golf"]},
                {"id": "b", "fullName": "Bob"},
            ],
            "edges": [
                {"id": "e1", "from": "a", "to": "b", "type": "family", "strength": 95},
            ],
        }
        path = tmp_path / "network.json"
        path.write_text(json.dumps(data))

        snapshot = load_network_snapshot(path)

        assert [p.id for p in snapshot.people] == ["a", "b"]
        assert snapshot.people[0].tags == {"golf"}
        assert snapshot.relationships[0].type == RelationshipType.FAMILY
        assert snapshot.loaded_files == ["network.json"]

    def test_people_and_relationships(self, tmp_path):
        """Test the people/relationships layout."""
        data = {
            "people": [{"id": "a"}, {"id": "b"}],
            "relationships": [{"source": "a", "target": "b", "strength": 20}],
        }
        path = tmp_path / "network.json"
        path.write_text(json.dumps(data))

        snapshot = load_network_snapshot(path)

        assert len(snapshot.people) == 2
        assert snapshot.relationships[0].id == "a-b-0"

    def test_invalid_records_reported(self, tmp_path):
        """Test that out-of-range values are skipped and recorded."""
        data = {
            "nodes": [{"id": "a", "importance": 9}, {"id": "b"}],
            "edges": [{"id": "e1", "from": "a", "to": "b", "strength": 150}],
        }
        path = tmp_path / "network.json"
        path.write_text(json.dumps(data))

        snapshot = load_network_snapshot(path)

        assert [p.id for p in snapshot.people] == ["b"]
        assert snapshot.relationships == []
        assert len(snapshot.errors) == 2

    def test_invalid_json(self, tmp_path):
        """Test that unparseable JSON is rejected."""
        path = tmp_path / "network.json"
        path.write_text("{not json")

        with pytest.raises(ValueError):
            load_network_snapshot(path)

    def test_non_object(self, tmp_path):
        """Test that a JSON list is rejected."""
        path = tmp_path / "network.json"
        path.write_text("[]")

        with pytest.raises(ValueError):
            load_network_snapshot(path)

    def test_null_section_rejected(self, tmp_path):
        """Test that a nodes value that is not a list is rejected."""
        path = tmp_path / "network.json"
        path.write_text(json.dumps({"nodes": None, "edges": []}))

        with pytest.raises(ValueError, match="nodes"):
            load_network_snapshot(path)

    def test_object_section_rejected(self, tmp_path):
        """Test that an edges value that is an object is rejected."""
        path = tmp_path / "network.json"
        path.write_text(json.dumps({"people": [], "relationships": {"from": "a"}}))

        with pytest.raises(ValueError, match="relationships"):
            load_network_snapshot(path)

    def test_non_object_rows_reported(self, tmp_path):
        """Test that rows that are not objects are skipped and recorded."""
        data = {
            "nodes": ["alice", {"id": "b"}, {"id": "c"}],
            "edges": [["b", "c"], {"from": "b", "to": "c"}],
        }
        path = tmp_path / "network.json"
        path.write_text(json.dumps(data))

        snapshot = load_network_snapshot(path)

        assert [p.id for p in snapshot.people] == ["b", "c"]
        assert [r.id for r in snapshot.relationships] == ["b-c-1"]
        assert len(snapshot.errors) == 2
        assert any("contact row 0" in e for e in snapshot.errors)
        assert any("relationship row 0" in e for e in snapshot.errors)
