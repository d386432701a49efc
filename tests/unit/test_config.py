"""Tests for settings and rule configuration."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest
from pydantic import ValidationError

from skirmish.config import Settings, get_settings
from skirmish.domain.rules_config import DEFAULT_RULES


def test_defaults():
    settings = Settings()

    assert settings.data_dir == Path("battles")
    assert settings.battle_log_limit == 200
    assert settings.description_cache_limit == 100
    assert settings.ai_skill_probability == 0.6
    assert settings.rng_seed is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SKIRMISH_AI_SKILL_PROBABILITY", "0.25")
    monkeypatch.setenv("SKIRMISH_RNG_SEED", "replay-7")

    settings = Settings()

    assert settings.ai_skill_probability == 0.25
    assert settings.rng_seed == "replay-7"


def test_probability_is_bounded():
    with pytest.raises(ValidationError):
        Settings(ai_skill_probability=1.5)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_rules_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_RULES.combat.min_damage = 0  # type: ignore[misc]

    assert DEFAULT_RULES.combat.min_hit_chance == 0.05
    assert DEFAULT_RULES.combat.erosion_damage_fraction == 0.1
    assert DEFAULT_RULES.stats.crit_multiplier == 1.5
