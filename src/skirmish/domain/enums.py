"""Enumerations shared by the combat domain."""

from __future__ import annotations

from enum import StrEnum


class Side(StrEnum):
    """Faction a participant fights for."""

    PLAYER = "player"
    ENEMY = "enemy"

    @property
    def opponent(self) -> Side:
        return Side.ENEMY if self is Side.PLAYER else Side.PLAYER


class ActionKind(StrEnum):
    """Kinds of action a participant can submit."""

    ATTACK = "attack"
    USE_SKILL = "use_skill"


class SkillCategory(StrEnum):
    """Damage family a skill belongs to."""

    PHYSICAL = "physical"
    MAGICAL = "magical"


class SkillTarget(StrEnum):
    """Targeting mode declared by a skill."""

    SINGLE = "single"
    SELF = "self"
    ALL = "all"


class EventKind(StrEnum):
    """Discriminator carried by every battle event."""

    SKILL_USED = "skill-used"
    MP_CONSUMED = "mp-consumed"
    INSUFFICIENT_MP = "insufficient-mp"
    MISS = "miss"
    CRITICAL = "critical"
    DAMAGE = "damage"
    EROSION_CHANGED = "erosion-changed"
    STATE_UPDATED = "state-updated"
