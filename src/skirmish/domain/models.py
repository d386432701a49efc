"""Dataclasses describing a battle and everything fighting in it.

The resolver works exclusively on these types.  Boundary input (battle
configuration, submitted actions) is validated by the pydantic schemas in
:mod:`skirmish.schemas` and converted into these dataclasses once, so the rules
layer never has to second-guess its inputs.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, NewType

from .enums import ActionKind, Side, SkillCategory, SkillTarget

# --- Strongly typed identifiers -------------------------------------------------

ParticipantID = NewType("ParticipantID", str)
SkillID = NewType("SkillID", str)


# --- Core dataclasses -----------------------------------------------------------


@dataclass(slots=True)
class CombatStats:
    """Combat numbers derived from raw attributes at battle start."""

    attack: float = 10.0
    magic_attack: float = 10.0
    defense: float = 0.0
    magic_defense: float = 0.0
    hit: float = 0.8
    evade: float = 0.1
    crit_rate: float = 0.05
    crit_multiplier: float = 1.5
    erosion_hp: float = 0.0
    max_hp: int = 1
    max_mp: int = 0


@dataclass(slots=True)
class Participant:
    """One combatant in a battle."""

    id: ParticipantID
    name: str
    side: Side
    level: int = 1
    hp: int = 1
    max_hp: int = 1
    mp: int = 0
    max_mp: int = 0
    stats: CombatStats = field(default_factory=CombatStats)
    skills: list[SkillID] = field(default_factory=list)
    attributes: dict[str, float] = field(default_factory=dict)
    initialized: bool = False

    @property
    def alive(self) -> bool:
        return self.hp > 0


@dataclass(slots=True)
class BattleState:
    """Snapshot of a battle between two sides."""

    participants: list[Participant]
    turn: Side = Side.PLAYER
    ended: bool = False
    winner: Side | None = None
    round: int = 1

    def find(self, participant_id: str) -> Participant | None:
        """Return the participant with ``participant_id`` or ``None``."""

        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def living(self, side: Side) -> list[Participant]:
        return [p for p in self.participants if p.side == side and p.alive]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class Action:
    """A request submitted by (or on behalf of) a participant."""

    kind: ActionKind
    actor_id: ParticipantID
    target_id: ParticipantID
    skill_id: SkillID | None = None


@dataclass(frozen=True, slots=True)
class Skill:
    """Static skill definition (catalog entry)."""

    id: SkillID
    name: str
    category: SkillCategory
    description: str = ""
    target: SkillTarget = SkillTarget.SINGLE
    power_multiplier: float = 1.0
    flat_power: float = 0.0
    hit_modifier: float = 0.0
    crit_bonus: float = 0.0
    crit_damage_override: float | None = None
    mp_cost: int = 0
    tags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class BattleResult:
    """Final outcome handed to persistence once a battle has ended."""

    winner: Side
    rounds: int
    summary: str
