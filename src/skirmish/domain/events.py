"""Typed events emitted while resolving an action.

Each event kind is its own frozen dataclass so consumers can dispatch on the
class (or on ``kind``) instead of probing loosely shaped payloads.  Events
are created by the resolver with an empty ``description``; the battle
service attaches narration afterwards via :func:`dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar

from .enums import EventKind
from .models import BattleState, ParticipantID, SkillID


@dataclass(frozen=True, slots=True, kw_only=True)
class BattleEvent:
    """Base class for every event."""

    kind: ClassVar[EventKind]
    description: str = ""

    def to_payload(self) -> dict[str, Any]:
        """Flatten the event into a JSON-friendly dict."""

        payload = asdict(self)
        payload["kind"] = str(self.kind)
        return payload


@dataclass(frozen=True, slots=True, kw_only=True)
class SkillUsed(BattleEvent):
    kind: ClassVar[EventKind] = EventKind.SKILL_USED
    actor_id: ParticipantID
    target_id: ParticipantID
    skill_id: SkillID


@dataclass(frozen=True, slots=True, kw_only=True)
class MpConsumed(BattleEvent):
    kind: ClassVar[EventKind] = EventKind.MP_CONSUMED
    actor_id: ParticipantID
    skill_id: SkillID
    mp_cost: int
    remaining_mp: int


@dataclass(frozen=True, slots=True, kw_only=True)
class InsufficientMp(BattleEvent):
    kind: ClassVar[EventKind] = EventKind.INSUFFICIENT_MP
    actor_id: ParticipantID
    skill_id: SkillID
    required_mp: int
    current_mp: int


@dataclass(frozen=True, slots=True, kw_only=True)
class Missed(BattleEvent):
    kind: ClassVar[EventKind] = EventKind.MISS
    actor_id: ParticipantID
    target_id: ParticipantID
    skill_id: SkillID | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CriticalHit(BattleEvent):
    kind: ClassVar[EventKind] = EventKind.CRITICAL
    actor_id: ParticipantID
    target_id: ParticipantID
    damage: int


@dataclass(frozen=True, slots=True, kw_only=True)
class DamageDealt(BattleEvent):
    kind: ClassVar[EventKind] = EventKind.DAMAGE
    actor_id: ParticipantID
    target_id: ParticipantID
    damage: int
    critical: bool = False
    skill_id: SkillID | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ErosionChanged(BattleEvent):
    kind: ClassVar[EventKind] = EventKind.EROSION_CHANGED
    actor_id: ParticipantID
    target_id: ParticipantID
    change: float
    remaining: float


@dataclass(frozen=True, slots=True, kw_only=True)
class StateUpdated(BattleEvent):
    kind: ClassVar[EventKind] = EventKind.STATE_UPDATED
    state: BattleState = field(repr=False)
