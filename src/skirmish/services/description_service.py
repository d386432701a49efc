"""Battle narration and the bounded battle log.

Purely cosmetic: nothing here feeds back into combat resolution.
"""

from __future__ import annotations

from collections import OrderedDict, deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

from skirmish.domain.description_templates import (
    CUSTOM_TEMPLATES,
    FIXED_TEMPLATES,
    GENERIC_POOLS,
    TEMPLATE_ALIASES,
)
from skirmish.domain.enums import EventKind, SkillCategory
from skirmish.domain.events import BattleEvent
from skirmish.domain.models import Skill, SkillID
from skirmish.domain.skills import BASIC_ATTACK, build_skill_map
from skirmish.utils.rng import RandomSource, SeededRandom

CacheKey = tuple[str | None, str | None, str | None, bool, bool]


@dataclass(frozen=True, slots=True)
class BattleLogEntry:
    """One narrated event in the battle log."""

    id: int
    timestamp: datetime
    kind: EventKind
    actor_id: str | None
    target_id: str | None
    skill_id: str | None
    damage: int | None
    critical: bool
    miss: bool
    description: str


@dataclass(frozen=True, slots=True)
class BattleLogStats:
    """Aggregate view over the battle log."""

    total_events: int
    critical_hits: int
    misses: int
    average_damage: float
    participants: list[str] = field(default_factory=list)


class DescriptionService:
    """Attach narration to events and keep a bounded log of them."""

    def __init__(
        self,
        *,
        skills: Mapping[SkillID, Skill] | None = None,
        rng: RandomSource | None = None,
        cache_limit: int = 100,
        log_limit: int = 200,
    ) -> None:
        if cache_limit <= 0:
            raise ValueError(f"cache_limit must be positive, got {cache_limit}")
        if log_limit <= 0:
            raise ValueError(f"log_limit must be positive, got {log_limit}")
        self.skills: Mapping[SkillID, Skill] = skills if skills is not None else build_skill_map()
        self.rng: RandomSource = rng or SeededRandom()
        self._cache_limit = cache_limit
        self._cache: OrderedDict[CacheKey, str] = OrderedDict()
        self._log: deque[BattleLogEntry] = deque(maxlen=log_limit)
        self._next_id = 1

    @property
    def log(self) -> list[BattleLogEntry]:
        return list(self._log)

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def describe(
        self,
        event: BattleEvent,
        *,
        actor_name: str | None = None,
        target_name: str | None = None,
    ) -> str:
        """Return narration text for ``event``.

        Hits, criticals and misses draw from a phrasing pool (or the skill's
        signature phrasing); the first pick for a given actor, target, skill
        and outcome is cached and reused.
        """

        actor_id = getattr(event, "actor_id", None)
        target_id = getattr(event, "target_id", None)
        skill_id = getattr(event, "skill_id", None)
        skill = self._skill(skill_id)
        values = {
            "actor": actor_name or actor_id or "",
            "target": target_name or target_id or "",
            "skill": skill.name,
            "damage": getattr(event, "damage", ""),
            "cost": getattr(event, "mp_cost", ""),
            "amount": _format_amount(getattr(event, "change", 0)),
        }

        if event.kind == EventKind.DAMAGE:
            critical = bool(getattr(event, "critical", False))
            template = self._narration(actor_id, target_id, skill, critical=critical, miss=False)
            return f"{template.format(**values)}, dealing {values['damage']} damage."
        if event.kind == EventKind.MISS:
            template = self._narration(actor_id, target_id, skill, critical=False, miss=True)
            return f"{template.format(**values)}."
        return FIXED_TEMPLATES.get(event.kind, "").format(**values)

    def record(self, event: BattleEvent, description: str) -> BattleLogEntry | None:
        """Append ``event`` to the log; state snapshots are not logged."""

        if event.kind == EventKind.STATE_UPDATED:
            return None
        entry = BattleLogEntry(
            id=self._next_id,
            timestamp=datetime.now(UTC),
            kind=event.kind,
            actor_id=getattr(event, "actor_id", None),
            target_id=getattr(event, "target_id", None),
            skill_id=getattr(event, "skill_id", None),
            damage=getattr(event, "damage", None),
            critical=bool(getattr(event, "critical", event.kind == EventKind.CRITICAL)),
            miss=event.kind == EventKind.MISS,
            description=description,
        )
        self._next_id += 1
        self._log.append(entry)
        return entry

    def stats(self) -> BattleLogStats:
        entries = list(self._log)
        damages = [e.damage for e in entries if e.kind == EventKind.DAMAGE and e.damage is not None]
        participants = {pid for e in entries for pid in (e.actor_id, e.target_id) if pid}
        return BattleLogStats(
            total_events=len(entries),
            critical_hits=sum(1 for e in entries if e.kind == EventKind.CRITICAL),
            misses=sum(1 for e in entries if e.miss),
            average_damage=sum(damages) / len(damages) if damages else 0.0,
            participants=sorted(participants),
        )

    def clear(self) -> None:
        self._cache.clear()
        self._log.clear()
        self._next_id = 1

    def _skill(self, skill_id: str | None) -> Skill:
        if skill_id is None:
            return BASIC_ATTACK
        return self.skills.get(SkillID(skill_id)) or Skill(
            id=SkillID(skill_id), name=skill_id, category=SkillCategory.PHYSICAL
        )

    def _narration(
        self,
        actor_id: str | None,
        target_id: str | None,
        skill: Skill,
        *,
        critical: bool,
        miss: bool,
    ) -> str:
        skill_key = None if skill is BASIC_ATTACK else skill.id
        key: CacheKey = (actor_id, target_id, skill_key, critical, miss)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        template = self._pick_template(skill, critical=critical, miss=miss)
        self._cache[key] = template
        while len(self._cache) > self._cache_limit:
            self._cache.popitem(last=False)
        return template

    def _pick_template(self, skill: Skill, *, critical: bool, miss: bool) -> str:
        custom = CUSTOM_TEMPLATES.get(TEMPLATE_ALIASES.get(skill.id, skill.id))
        if custom is not None:
            if miss:
                return custom.miss
            return custom.critical if critical else custom.hit

        pool = GENERIC_POOLS[SkillCategory(skill.category)]
        if miss:
            options = pool.miss
        elif critical:
            options = pool.critical
        else:
            options = pool.hit
        return self.rng.choice(options)


def _format_amount(value: object) -> str:
    try:
        number = abs(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return ""
    return f"{number:g}"
