"""
Configuration Management

Loads configuration from YAML files with environment variable resolution.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


class CentralityConfig(BaseModel):
    """PageRank and centrality configuration."""
    damping_factor: float = Field(default=0.85, ge=0.0, le=1.0)
    max_iterations: int = Field(default=100, ge=0)
    tolerance: float = 0.001


class NetworkValueConfig(BaseModel):
    """Network value formula coefficients."""
    degree_weight: float = 10.0
    betweenness_weight: float = 100.0
    page_rank_weight: float = 200.0
    importance_weight: float = 20.0


class CommunitiesConfig(BaseModel):
    """Community detection configuration."""
    strong_tie_threshold: float = 50.0
    fallback_name: str = "Group {index}"
    max_central_members: int = 2


class RecommendationsConfig(BaseModel):
    """Connection recommendation scoring."""
    shared_neighbor_weight: float = 10.0
    same_company_bonus: float = 20.0
    importance_weight: float = 5.0
    network_value_divisor: float = 10.0
    default_limit: int = 10


class HubsConfig(BaseModel):
    """Hub person thresholds."""
    min_page_rank: float = 0.02
    min_betweenness: float = 0.1
    default_limit: int = 5
    max_path_length: int = 4


class StrengthConfig(BaseModel):
    """Relationship strength estimation configuration."""
    weights: dict[str, float] = Field(default_factory=lambda: {
        "introduction": 40.0,
        "same_company": 30.0,
        "shared_project": 5.0,
        "meeting": 2.0,
        "email_exchange": 1.0,
        "shared_tag": 2.0,
    })
    caps: dict[str, float] = Field(default_factory=lambda: {
        "shared_project": 20.0,
        "meeting": 10.0,
        "email_exchange": 10.0,
        "shared_tag": 10.0,
    })
    min_inferred_strength: float = 20.0


class IndustryRule(BaseModel):
    """Company-name keywords that place a contact in an industry."""
    name: str
    keywords: list[str] = Field(default_factory=list)


class IndustriesConfig(BaseModel):
    """Industry classification of contacts by company name.

    Rules are checked in order and the first matching rule wins.
    """
    rules: list[IndustryRule] = Field(default_factory=lambda: [
        IndustryRule(name="Medical", keywords=["病院", "クリニック", "Hospital", "Clinic"]),
        IndustryRule(name="Education", keywords=["大学", "学校", "University", "School"]),
        IndustryRule(name="Corporate", keywords=["株式会社", "Inc", "Corp"]),
    ])
    fallback: str = "Other"


class OutputConfig(BaseModel):
    """Output generation configuration."""
    directory: str = "./outputs"
    formats: list[str] = Field(default_factory=lambda: ["csv", "markdown", "json"])
    timestamp_filenames: bool = True
    markdown: dict[str, Any] = Field(default_factory=lambda: {
        "include_methodology": True,
        "max_items_per_section": 20,
    })


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    timestamps: bool = True


class ProcessingConfig(BaseModel):
    """Analysis processing configuration."""
    workers: int = Field(default=1, ge=1)
    focus_depth: int = Field(default=2, ge=0)
    reachable_depth: int = Field(default=3, ge=0)
    second_degree_limit: int = 10


class Config(BaseModel):
    """Root configuration object."""
    centrality: CentralityConfig = Field(default_factory=CentralityConfig)
    network_value: NetworkValueConfig = Field(default_factory=NetworkValueConfig)
    communities: CommunitiesConfig = Field(default_factory=CommunitiesConfig)
    recommendations: RecommendationsConfig = Field(default_factory=RecommendationsConfig)
    hubs: HubsConfig = Field(default_factory=HubsConfig)
    strength: StrengthConfig = Field(default_factory=StrengthConfig)
    industries: IndustriesConfig = Field(default_factory=IndustriesConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)


def _resolve_env_vars(data: Any) -> Any:
    """Recursively resolve environment variables in config values.

    Supports ${VAR_NAME} and ${VAR_NAME:-default} syntax.
    """
    if isinstance(data, str):
        if data.startswith("${") and data.endswith("}"):
            var_expr = data[2:-1]
            if ":-" in var_expr:
                var_name, default = var_expr.split(":-", 1)
                return os.environ.get(var_name, default)
            return os.environ.get(var_expr, data)
        return data
    elif isinstance(data, dict):
        return {k: _resolve_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars(item) for item in data]
    return data


def load_config(
    config_path: Optional[Path] = None,
    local_config_path: Optional[Path] = None,
) -> Config:
    """Load configuration from YAML files.

    Args:
        config_path: Path to main config file (default: config.yaml)
        local_config_path: Path to local overrides (default: config.local.yaml
            next to the main config file)

    Returns:
        Merged and validated Config object
    """
    project_root = Path(__file__).parent.parent.parent

    if config_path is None:
        config_path = project_root / "config.yaml"
    config_path = Path(config_path)
    if local_config_path is None:
        local_config_path = config_path.parent / "config.local.yaml"
    local_config_path = Path(local_config_path)

    config_data: dict[str, Any] = {}

    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}

    if local_config_path.exists():
        with open(local_config_path, encoding="utf-8") as f:
            local_data = yaml.safe_load(f) or {}
            config_data = _deep_merge(config_data, local_data)

    config_data = _resolve_env_vars(config_data)

    return Config(**config_data)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
