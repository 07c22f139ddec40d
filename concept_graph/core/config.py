"""Centralized application configuration."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CONCEPT_GRAPH_", env_file=".env", extra="ignore"
    )

    # Data storage path
    data_path: Path = Path("data")
    database_name: str = "concept_graph.db"

    # SQLite busy timeout (seconds)
    db_timeout: float = 5.0

    log_level: str = "INFO"

    # Link name vocabulary
    seed_default_link_names: bool = True

    # Concept trash lifecycle
    trash_retention_days: int = 30
    purge_link_policy: Literal["cascade", "block"] = "cascade"

    # Link proposal tiering and pending cache
    proposal_high_confidence: float = 0.8
    proposal_medium_confidence: float = 0.6
    proposal_cache_max_size: int = 100

    @property
    def database_path(self) -> Path:
        """Full path of the SQLite database file."""
        return self.data_path / self.database_name


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
