"""Skill catalog: default skill definitions and lookup helpers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from types import MappingProxyType

from skirmish.domain.enums import SkillCategory, SkillTarget
from skirmish.domain.models import Skill, SkillID

# Plain attacks resolve as a physical strike with neutral modifiers.
BASIC_ATTACK = Skill(
    id=SkillID("basic_attack"),
    name="Attack",
    category=SkillCategory.PHYSICAL,
    description="Plain weapon strike",
)

DEFAULT_SKILLS: tuple[Skill, ...] = (
    Skill(
        id=SkillID("power_strike"),
        name="Power Strike",
        description="High power, slightly lower accuracy",
        category=SkillCategory.PHYSICAL,
        power_multiplier=1.5,
        hit_modifier=-0.1,
        crit_bonus=0.05,
        tags=("basic", "physical"),
    ),
    Skill(
        id=SkillID("precise_strike"),
        name="Precise Strike",
        description="Low power, high accuracy",
        category=SkillCategory.PHYSICAL,
        power_multiplier=0.9,
        hit_modifier=0.15,
        tags=("basic", "physical"),
    ),
    Skill(
        id=SkillID("fireball"),
        name="Fireball",
        description="Standard magical damage",
        category=SkillCategory.MAGICAL,
        power_multiplier=1.2,
        flat_power=5,
        crit_bonus=0.05,
        mp_cost=10,
        tags=("basic", "magical", "fire"),
    ),
    Skill(
        id=SkillID("ice_shard"),
        name="Ice Shard",
        description="Ice magic attack",
        category=SkillCategory.MAGICAL,
        power_multiplier=1.1,
        flat_power=3,
        crit_bonus=0.03,
        mp_cost=8,
        tags=("magical", "ice"),
    ),
    Skill(
        id=SkillID("lightning_bolt"),
        name="Lightning Bolt",
        description="Lightning magic attack",
        category=SkillCategory.MAGICAL,
        power_multiplier=1.3,
        flat_power=4,
        crit_bonus=0.08,
        mp_cost=12,
        tags=("magical", "lightning"),
    ),
    Skill(
        id=SkillID("magic_missile"),
        name="Magic Missile",
        description="Basic magic attack",
        category=SkillCategory.MAGICAL,
        power_multiplier=1.0,
        flat_power=2,
        hit_modifier=0.1,
        mp_cost=5,
        tags=("magical", "basic"),
    ),
    Skill(
        id=SkillID("multi_shot"),
        name="Multi Shot",
        description="Volley of arrows",
        category=SkillCategory.PHYSICAL,
        target=SkillTarget.ALL,
        power_multiplier=0.7,
        hit_modifier=-0.05,
        crit_bonus=0.02,
        tags=("physical", "ranged"),
    ),
    Skill(
        id=SkillID("nature_arrow"),
        name="Nature Arrow",
        description="Ranged nature attack",
        category=SkillCategory.PHYSICAL,
        power_multiplier=1.1,
        flat_power=2,
        hit_modifier=0.05,
        crit_bonus=0.03,
        tags=("physical", "ranged", "nature"),
    ),
    Skill(
        id=SkillID("nature_bolt"),
        name="Nature's Wrath",
        description="Nature magic attack",
        category=SkillCategory.MAGICAL,
        power_multiplier=1.2,
        flat_power=3,
        crit_bonus=0.04,
        mp_cost=9,
        tags=("magical", "nature"),
    ),
    Skill(
        id=SkillID("shield_bash"),
        name="Shield Bash",
        description="Strike the enemy with a shield",
        category=SkillCategory.PHYSICAL,
        power_multiplier=0.8,
        hit_modifier=0.1,
        tags=("physical", "defensive"),
    ),
    Skill(
        id=SkillID("dragon_breath"),
        name="Dragon Breath",
        description="Signature attack of dragonkind",
        category=SkillCategory.MAGICAL,
        target=SkillTarget.ALL,
        power_multiplier=1.4,
        flat_power=8,
        crit_bonus=0.1,
        mp_cost=25,
        tags=("magical", "dragon", "breath"),
    ),
    Skill(
        id=SkillID("charge"),
        name="Charge",
        description="Rush the enemy",
        category=SkillCategory.PHYSICAL,
        power_multiplier=1.3,
        hit_modifier=0.05,
        crit_bonus=0.06,
        tags=("physical", "movement"),
    ),
)

# Per-level overrides; fields not listed keep the catalog value.
SKILL_LEVEL_OVERRIDES: dict[str, dict[int, dict[str, float]]] = {
    "power_strike": {
        1: {"power_multiplier": 1.5, "hit_modifier": -0.1},
        2: {"power_multiplier": 1.7, "hit_modifier": -0.08},
        3: {"power_multiplier": 1.9, "hit_modifier": -0.05},
    },
    "fireball": {
        1: {"power_multiplier": 1.2, "flat_power": 5},
        2: {"power_multiplier": 1.4, "flat_power": 8},
        3: {"power_multiplier": 1.6, "flat_power": 12},
    },
}


def build_skill_map(skills: Iterable[Skill] = DEFAULT_SKILLS) -> Mapping[SkillID, Skill]:
    """Return a read-only id -> skill snapshot.

    Later entries win when ids repeat.
    """

    return MappingProxyType({skill.id: skill for skill in skills})


def skills_by_tag(tag: str, skills: Iterable[Skill] = DEFAULT_SKILLS) -> list[Skill]:
    """Return every skill carrying ``tag``, in catalog order."""

    return [skill for skill in skills if tag in skill.tags]


def skill_at_level(skill: Skill, level: int) -> Skill:
    """Apply the level override for ``skill`` if one exists."""

    overrides = SKILL_LEVEL_OVERRIDES.get(skill.id, {}).get(level)
    if not overrides:
        return skill
    return replace(skill, **overrides)
