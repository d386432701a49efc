"""Mapping of raw character attributes onto combat stats."""

from __future__ import annotations

import math
from collections.abc import Mapping

from skirmish.domain.models import CombatStats
from skirmish.domain.rules_config import DEFAULT_RULES, MAX_LEVEL, MIN_LEVEL, RulesConfig

# Keys used by the host's variable store before attributes were renamed.
ATTRIBUTE_ALIASES: dict[str, str] = {
    "力量": "strength",
    "智力": "intelligence",
    "敏捷": "agility",
    "防御": "defense",
    "体质": "constitution",
    "魅力": "charisma",
    "意志": "willpower",
    "幸运": "luck",
}


def clamp_level(level: object) -> int:
    """Clamp ``level`` into the supported 1-20 range."""

    value = _coerce(level)
    return max(MIN_LEVEL, min(MAX_LEVEL, int(value)))


def hit_rate_for_level(level: object, *, rules: RulesConfig = DEFAULT_RULES) -> float:
    """Return the hit rate for ``level`` from the level table."""

    table = rules.level_hit_table
    hit = table.get(clamp_level(level))
    if hit is None:
        # Sparse custom tables fall back to their lowest level.
        hit = table[min(table)] if table else 0.0
    return hit


def normalize_attributes(attributes: Mapping[str, object] | None) -> dict[str, float]:
    """Translate legacy keys and coerce every value to a non-negative float."""

    normalized: dict[str, float] = {}
    for key, value in (attributes or {}).items():
        name = ATTRIBUTE_ALIASES.get(key, key)
        normalized[name] = _coerce(value)
    return normalized


def derive_stats(
    attributes: Mapping[str, object] | None,
    level: object = MIN_LEVEL,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> CombatStats:
    """Derive combat stats from raw attributes and level.

    Missing attributes count as zero and invalid values are coerced to zero, so
    this never raises.

    Args:
        attributes: Raw attribute mapping (English or legacy keys)
        level: Character level, clamped to 1-20 for the hit table
        rules: Rule set providing weights and the level table

    Returns:
        CombatStats including the derived max HP and max MP
    """
    attrs = normalize_attributes(attributes)
    weights = rules.stats

    def get(name: str) -> float:
        return attrs.get(name, 0.0)

    return CombatStats(
        attack=max(0.0, weights.attack_per_strength * get("strength")),
        magic_attack=max(0.0, weights.magic_attack_per_charisma * get("charisma")),
        defense=max(0.0, weights.defense_per_defense * get("defense")),
        magic_defense=0.0,
        hit=hit_rate_for_level(level, rules=rules),
        evade=0.0,
        crit_rate=max(0.0, weights.crit_rate_per_luck * get("luck")),
        crit_multiplier=weights.crit_multiplier,
        erosion_hp=max(0.0, get("willpower") / weights.willpower_per_erosion),
        max_hp=max(weights.min_max_hp, int(get("constitution") * weights.hp_per_constitution)),
        max_mp=max(0, int(get("intelligence") * weights.mp_per_intelligence)),
    )


def _coerce(value: object) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return max(0.0, number)
