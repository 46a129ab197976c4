"""
Query Configuration - Settings for fetching and aggregating parking data.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

import yaml

from .vocabulary import Vocabulary

DEFAULT_ACCEPT = (
    "application/trig;q=1.0, text/turtle;q=0.9, application/n-quads;q=0.8, "
    "application/n-triples;q=0.7, application/ld+json;q=0.6, "
    "application/rdf+xml;q=0.5, text/n3;q=0.4"
)


@dataclass
class QueryConfig:
    """
    Main query configuration.

    Controls the HTTP client, interval paging, and which catalogs,
    datasets and fast paths are loaded at bootstrap.
    """
    timeout_seconds: float = 30.0
    user_agent: str = "parking-data-query/0.3.0"
    accept: str = DEFAULT_ACCEPT
    max_interval_pages: int = 100

    # Bootstrap
    catalogs: list[str] = field(default_factory=list)
    datasets: list[str] = field(default_factory=list)
    fast_paths: dict[str, str] = field(default_factory=dict)

    vocabulary: Vocabulary = field(default_factory=Vocabulary)

    def __post_init__(self):
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")
        if self.max_interval_pages < 1:
            raise ValueError(f"max_interval_pages must be at least 1, got {self.max_interval_pages}")

    @classmethod
    def from_dict(cls, data: dict) -> "QueryConfig":
        """Create config from dictionary."""
        defaults = cls()
        return cls(
            timeout_seconds=float(data.get("timeout_seconds", data.get("timeoutSeconds", defaults.timeout_seconds))),
            user_agent=data.get("user_agent", data.get("userAgent", defaults.user_agent)),
            accept=data.get("accept", defaults.accept),
            max_interval_pages=int(data.get("max_interval_pages", data.get("maxIntervalPages", defaults.max_interval_pages))),
            catalogs=list(data.get("catalogs") or []),
            datasets=list(data.get("datasets") or []),
            fast_paths=dict(data.get("fast_paths", data.get("fastPaths")) or {}),
            vocabulary=Vocabulary.from_dict(data.get("vocabulary")),
        )

    @classmethod
    def from_yaml(cls, path: str) -> "QueryConfig":
        """Load config from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, base: Optional["QueryConfig"] = None) -> "QueryConfig":
        """Apply PARKING_QUERY_* environment overrides on top of ``base``."""
        config = base or cls()
        data = config.to_dict()

        if os.environ.get("PARKING_QUERY_TIMEOUT"):
            data["timeoutSeconds"] = float(os.environ["PARKING_QUERY_TIMEOUT"])
        if os.environ.get("PARKING_QUERY_USER_AGENT"):
            data["userAgent"] = os.environ["PARKING_QUERY_USER_AGENT"]
        if os.environ.get("PARKING_QUERY_MAX_PAGES"):
            data["maxIntervalPages"] = int(os.environ["PARKING_QUERY_MAX_PAGES"])
        if os.environ.get("PARKING_QUERY_CATALOGS"):
            extra = [c.strip() for c in os.environ["PARKING_QUERY_CATALOGS"].split(",") if c.strip()]
            data["catalogs"] = data["catalogs"] + [c for c in extra if c not in data["catalogs"]]

        return cls.from_dict(data)

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "timeoutSeconds": self.timeout_seconds,
            "userAgent": self.user_agent,
            "accept": self.accept,
            "maxIntervalPages": self.max_interval_pages,
            "catalogs": list(self.catalogs),
            "datasets": list(self.datasets),
            "fastPaths": dict(self.fast_paths),
            "vocabulary": self.vocabulary.to_dict(),
        }
