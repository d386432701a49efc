"""Declarative rule configuration for the combat domain."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# Hit rate per level, copied from the level-up table.  These are tuned values
# and intentionally exceed 1.0.
LEVEL_HIT_RATE_TABLE: Mapping[int, float] = MappingProxyType(
    {
        1: 100.5,
        2: 101.0,
        3: 101.5,
        4: 102.5,
        5: 103.5,
        6: 105.0,
        7: 106.5,
        8: 108.5,
        9: 110.5,
        10: 113.0,
        11: 115.5,
        12: 118.5,
        13: 121.5,
        14: 125.0,
        15: 128.5,
        16: 132.5,
        17: 136.5,
        18: 141.0,
        19: 145.5,
        20: 150.0,
    }
)

MIN_LEVEL = 1
MAX_LEVEL = 20


@dataclass(frozen=True, slots=True)
class StatRules:
    """Weights mapping raw attributes onto combat stats."""

    attack_per_strength: float = 2.0
    magic_attack_per_charisma: float = 2.0
    defense_per_defense: float = 2.0
    crit_rate_per_luck: float = 0.002
    willpower_per_erosion: float = 50.0
    hp_per_constitution: int = 20
    mp_per_intelligence: int = 5
    crit_multiplier: float = 1.5
    min_max_hp: int = 1


@dataclass(frozen=True, slots=True)
class CombatRules:
    """Constants used by the resolver."""

    min_hit_chance: float = 0.05
    max_crit_chance: float = 0.95
    max_magic_defense: float = 0.9
    erosion_damage_fraction: float = 0.1
    min_damage: int = 1


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Aggregate of every rule group plus the level hit table."""

    stats: StatRules = field(default_factory=StatRules)
    combat: CombatRules = field(default_factory=CombatRules)
    level_hit_table: Mapping[int, float] = field(default_factory=lambda: LEVEL_HIT_RATE_TABLE)


DEFAULT_RULES = RulesConfig()
