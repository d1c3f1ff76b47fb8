"""
Network Snapshot Ingestion

Loads contacts and relationships from CSV exports or a JSON snapshot.
"""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import pandas as pd
from pydantic import ValidationError

from contact_network.models.entities import NetworkSnapshot, Person, Relationship

logger = logging.getLogger(__name__)

# Alternative column names mapped to model field names
COLUMN_ALIASES = {
    "name": "full_name",
    "introduced_by_id": "introduced_by",
    "legacy_tags": "tags",
    "company_name": "company",
    "from": "source",
    "from_id": "source",
    "to": "target",
    "to_id": "target",
}

PERSON_FIELDS = (
    "id", "full_name", "company", "position", "importance",
    "email", "phone", "profile_image", "introduced_by", "tags",
)

RELATIONSHIP_FIELDS = (
    "id", "source", "target", "type", "strength", "shared_projects",
    "meeting_count", "email_exchanges", "confidence", "last_interaction",
)


def _normalize_key(key: str) -> str:
    """Normalize a column name: camelCase and spaces become snake_case."""
    key = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", str(key).strip())
    key = key.lower().replace(" ", "_").replace("-", "_")
    return COLUMN_ALIASES.get(key, key)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, set, tuple, dict)):
        return False
    return bool(pd.isna(value))


def _parse_date(date_str: Optional[str], formats: list[str] = None) -> Optional[datetime]:
    """Parse date string with multiple format support."""
    if _is_missing(date_str):
        return None
    if isinstance(date_str, datetime):
        return date_str

    formats = formats or [
        "%Y-%m-%d",
        "%Y-%m-%dT%H:%M:%S",
        "%Y-%m-%dT%H:%M:%S.%fZ",
        "%Y-%m-%d %H:%M:%S",
        "%m/%d/%Y",
        "%d %b %Y",
    ]

    date_str = str(date_str).strip()

    for fmt in formats:
        try:
            return datetime.strptime(date_str, fmt)
        except ValueError:
            continue

    # ISO 8601 with offsets, e.g. 2024-05-01T10:00:00Z or ...+09:00
    iso_str = date_str[:-1] + "+00:00" if date_str.endswith("Z") else date_str
    try:
        return datetime.fromisoformat(iso_str)
    except ValueError:
        pass

    logger.warning(f"Could not parse date: {date_str}")
    return None


def _clean_record(raw: dict, fields: tuple[str, ...]) -> dict:
    """Normalize keys, keep known fields and drop missing values."""
    if not isinstance(raw, dict):
        raise TypeError(f"expected an object, got {type(raw).__name__}")
    record = {}
    for key, value in raw.items():
        field = _normalize_key(key)
        if field in fields and not _is_missing(value):
            record[field] = value.strip() if isinstance(value, str) else value
    return record


def _person_from_record(raw: dict) -> Person:
    record = _clean_record(raw, PERSON_FIELDS)
    record["id"] = str(record.get("id", "")).strip()
    if not record["id"]:
        raise ValueError("missing id")
    if "importance" in record:
        record["importance"] = int(float(record["importance"]))
    for field in ("phone", "introduced_by"):
        if field in record:
            record[field] = str(record[field])
    return Person(**record)


def _relationship_from_record(raw: dict, index: int) -> Relationship:
    record = _clean_record(raw, RELATIONSHIP_FIELDS)
    for field in ("source", "target"):
        if field not in record:
            raise ValueError(f"missing {field}")
        record[field] = str(record[field])
    record.setdefault("id", f"{record['source']}-{record['target']}-{index}")
    record["id"] = str(record["id"])
    if "last_interaction" in record:
        record["last_interaction"] = _parse_date(record["last_interaction"])
    if isinstance(record.get("type"), str):
        record["type"] = record["type"].lower()
    return Relationship(**record)


def _load_people(records: list[dict], snapshot: NetworkSnapshot) -> None:
    for i, raw in enumerate(records):
        try:
            snapshot.people.append(_person_from_record(raw))
        except (ValidationError, ValueError, TypeError) as e:
            message = f"Skipping malformed contact row {i}: {e}"
            logger.warning(message)
            snapshot.errors.append(message)


def _load_relationships(records: list[dict], snapshot: NetworkSnapshot) -> None:
    for i, raw in enumerate(records):
        try:
            snapshot.relationships.append(_relationship_from_record(raw, i))
        except (ValidationError, ValueError, TypeError) as e:
            message = f"Skipping malformed relationship row {i}: {e}"
            logger.warning(message)
            snapshot.errors.append(message)


def _read_csv_records(filepath: Path) -> list[dict]:
    try:
        df = pd.read_csv(filepath, dtype=str)
    except pd.errors.EmptyDataError:
        logger.warning(f"{filepath.name} is empty")
        return []
    return df.to_dict(orient="records")


def _find_file(directory: Path, patterns: list[str]) -> Optional[Path]:
    """Find a file matching one of the patterns (case-insensitive)."""
    for pattern in patterns:
        exact_path = directory / pattern
        if exact_path.exists():
            return exact_path

        for f in directory.iterdir():
            if f.name.lower() == pattern.lower():
                return f

    return None


def _load_directory(directory: Path) -> NetworkSnapshot:
    snapshot = NetworkSnapshot(source=str(directory))

    contacts_file = _find_file(directory, ["contacts.csv", "people.csv", "nodes.csv"])
    if contacts_file is None:
        raise FileNotFoundError(f"contacts.csv not found in {directory}")

    _load_people(_read_csv_records(contacts_file), snapshot)
    snapshot.loaded_files.append(contacts_file.name)
    logger.info(f"Loaded {len(snapshot.people)} contacts from {contacts_file.name}")

    relationships_file = _find_file(
        directory, ["relationships.csv", "connections.csv", "edges.csv"]
    )
    if relationships_file:
        _load_relationships(_read_csv_records(relationships_file), snapshot)
        snapshot.loaded_files.append(relationships_file.name)
        logger.info(
            f"Loaded {len(snapshot.relationships)} relationships from {relationships_file.name}"
        )
    else:
        snapshot.skipped_files.append("relationships.csv")
        logger.warning("relationships.csv not found, analysing contacts without relationships")

    return snapshot


def _json_records(data: dict, key: str, alias: str) -> list:
    """Row list stored under key (or alias) of a JSON snapshot."""
    name = key if key in data else alias
    records = data.get(name, [])
    if not isinstance(records, list):
        raise ValueError(f'"{name}" must be a list, got {type(records).__name__}')
    return records


def _load_json(filepath: Path) -> NetworkSnapshot:
    try:
        data = json.loads(filepath.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON snapshot {filepath}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"JSON snapshot must be an object, got {type(data).__name__}")

    snapshot = NetworkSnapshot(source=str(filepath), loaded_files=[filepath.name])
    _load_people(_json_records(data, "nodes", "people"), snapshot)
    _load_relationships(_json_records(data, "edges", "relationships"), snapshot)

    logger.info(
        f"Loaded {len(snapshot.people)} contacts and {len(snapshot.relationships)} "
        f"relationships from {filepath.name}"
    )

    return snapshot


def load_network_snapshot(path: str | Path) -> NetworkSnapshot:
    """Load a network snapshot.

    Args:
        path: Directory with contacts.csv (and optionally relationships.csv),
            or a JSON file with "nodes" and "edges" lists

    Returns:
        NetworkSnapshot with every well-formed contact and relationship

    Raises:
        FileNotFoundError: If the path or contacts.csv is missing
        ValueError: If a JSON snapshot cannot be parsed
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Snapshot not found: {path}")

    if path.is_dir():
        return _load_directory(path)
    return _load_json(path)
