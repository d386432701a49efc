"""Lightweight configuration for the skirmish engine."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Minimal engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="SKIRMISH_", env_file=".env", env_file_encoding="utf-8"
    )

    data_dir: Path = Field(default=Path("battles"), description="Where battle results are stored")
    battle_log_limit: int = Field(
        default=200, gt=0, description="Maximum entries kept in the battle log"
    )
    description_cache_limit: int = Field(
        default=100, gt=0, description="Maximum cached narration phrasings"
    )
    ai_skill_probability: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Chance the enemy policy uses a known skill instead of attacking",
    )
    rng_seed: str | None = Field(
        default=None, description="Fixed seed for reproducible battles; random when unset"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
