"""Combat resolution rules.

``resolve_action`` is a pure transform: it takes a battle state and one action
and returns the next state together with the ordered events describing what
happened.  The input state is never modified and all randomness comes from
the injected :class:`~skirmish.utils.rng.RandomSource`.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from skirmish.domain.enums import ActionKind, Side, SkillCategory
from skirmish.domain.events import (
    BattleEvent,
    CriticalHit,
    DamageDealt,
    ErosionChanged,
    InsufficientMp,
    Missed,
    MpConsumed,
    SkillUsed,
)
from skirmish.domain.models import (
    Action,
    BattleResult,
    BattleState,
    CombatStats,
    Participant,
    Skill,
    SkillID,
)
from skirmish.domain.rules_config import DEFAULT_RULES, RulesConfig
from skirmish.domain.skills import BASIC_ATTACK, build_skill_map
from skirmish.utils.rng import RandomSource, SeededRandom

VICTORY_SUMMARY = "You defeated the enemy."
DEFEAT_SUMMARY = "You were defeated."

DEFAULT_SKILL_MAP = build_skill_map()


@dataclass(slots=True)
class Resolution:
    """Next state plus the events produced while reaching it."""

    state: BattleState
    events: list[BattleEvent] = field(default_factory=list)


def resolve_action(
    state: BattleState,
    action: Action,
    *,
    skills: Mapping[SkillID, Skill] | None = None,
    rng: RandomSource | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> Resolution:
    """Resolve a single action against ``state``."""

    if state.ended:
        return Resolution(state=state)

    skills = DEFAULT_SKILL_MAP if skills is None else skills
    rng = rng or SeededRandom()
    next_state = copy.deepcopy(state)

    actor = next_state.find(action.actor_id)
    target = next_state.find(action.target_id)
    if actor is None or target is None:
        return Resolution(state=next_state)

    events: list[BattleEvent] = []
    skill, skill_id = _select_skill(action, skills)

    if skill_id is not None:
        events.append(SkillUsed(actor_id=actor.id, target_id=target.id, skill_id=skill_id))

        if skill.mp_cost > 0:
            if actor.mp < skill.mp_cost:
                events.append(
                    InsufficientMp(
                        actor_id=actor.id,
                        skill_id=skill_id,
                        required_mp=skill.mp_cost,
                        current_mp=actor.mp,
                    )
                )
                _pass_turn(next_state)
                return Resolution(state=next_state, events=events)

            actor.mp = max(0, actor.mp - skill.mp_cost)
            events.append(
                MpConsumed(
                    actor_id=actor.id,
                    skill_id=skill_id,
                    mp_cost=skill.mp_cost,
                    remaining_mp=actor.mp,
                )
            )

    if rng.random() > hit_chance(actor.stats, target.stats, skill, rules=rules):
        events.append(Missed(actor_id=actor.id, target_id=target.id, skill_id=skill_id))
        _pass_turn(next_state)
        return Resolution(state=next_state, events=events)

    critical = rng.random() < crit_chance(actor.stats, skill, rules=rules)
    damage = compute_damage(actor.stats, target.stats, skill, critical=critical, rules=rules)

    if critical:
        events.append(CriticalHit(actor_id=actor.id, target_id=target.id, damage=damage))

    target.hp = min(max(0, target.hp - damage), target.max_hp)

    erosion = _erode(target, damage, skill, rules)
    if erosion:
        events.append(
            ErosionChanged(
                actor_id=actor.id,
                target_id=target.id,
                change=-erosion,
                remaining=target.stats.erosion_hp,
            )
        )

    events.append(
        DamageDealt(
            actor_id=actor.id,
            target_id=target.id,
            damage=damage,
            critical=critical,
            skill_id=skill_id,
        )
    )

    _pass_turn(next_state)
    _check_victory(next_state)
    return Resolution(state=next_state, events=events)


def hit_chance(
    attacker: CombatStats,
    defender: CombatStats,
    skill: Skill,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    """Chance to hit: attacker hit minus defender evade plus the skill modifier.

    Overflow above 1.0 is allowed; the floor keeps every attack hittable.
    """

    raw = attacker.hit - defender.evade + skill.hit_modifier
    return max(rules.combat.min_hit_chance, raw)


def crit_chance(
    attacker: CombatStats,
    skill: Skill,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    return min(rules.combat.max_crit_chance, max(0.0, attacker.crit_rate + skill.crit_bonus))


def compute_damage(
    attacker: CombatStats,
    defender: CombatStats,
    skill: Skill,
    *,
    critical: bool = False,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Damage dealt by ``skill``; never below ``rules.combat.min_damage``.

    Physical: ``atk * multiplier + flat - def / 2``.
    Magical: ``(matk * multiplier + flat) * (1 - clamped magic defense)``.
    """

    floor = rules.combat.min_damage
    if skill.category == SkillCategory.PHYSICAL:
        raw = attacker.attack * skill.power_multiplier + skill.flat_power - defender.defense / 2
    else:
        resist = min(rules.combat.max_magic_defense, max(0.0, defender.magic_defense))
        raw = (attacker.magic_attack * skill.power_multiplier + skill.flat_power) * (1 - resist)

    damage = max(floor, round_half_up(raw))
    if critical:
        multiplier = (
            skill.crit_damage_override
            if skill.crit_damage_override is not None
            else attacker.crit_multiplier
        )
        damage = max(floor, round_half_up(damage * multiplier))
    return damage


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""

    return math.floor(value + 0.5)


def battle_result(state: BattleState) -> BattleResult | None:
    """Return the final result, or ``None`` while the battle is running."""

    if not state.ended or state.winner is None:
        return None
    winner = Side(state.winner)
    return BattleResult(
        winner=winner,
        rounds=state.round,
        summary=VICTORY_SUMMARY if winner is Side.PLAYER else DEFEAT_SUMMARY,
    )


def _select_skill(action: Action, skills: Mapping[SkillID, Skill]) -> tuple[Skill, SkillID | None]:
    if action.kind != ActionKind.USE_SKILL or not action.skill_id:
        return BASIC_ATTACK, None
    skill = skills.get(action.skill_id)
    if skill is None:
        # Unknown ids still animate; they resolve as a neutral strike.
        skill = replace(BASIC_ATTACK, id=action.skill_id, name=action.skill_id)
    return skill, action.skill_id


def _erode(target: Participant, damage: int, skill: Skill, rules: RulesConfig) -> float:
    if skill.category != SkillCategory.MAGICAL or target.stats.erosion_hp <= 0:
        return 0
    current = target.stats.erosion_hp
    amount = min(current, max(1, round_half_up(damage * rules.combat.erosion_damage_fraction)))
    target.stats.erosion_hp = max(0.0, current - amount)
    return amount


def _pass_turn(state: BattleState) -> None:
    previous = Side(state.turn)
    state.turn = previous.opponent
    # A round is one action from each side; it closes when the enemy hands back.
    if previous is Side.ENEMY:
        state.round += 1


def _check_victory(state: BattleState) -> None:
    players_alive = bool(state.living(Side.PLAYER))
    enemies_alive = bool(state.living(Side.ENEMY))
    if players_alive and enemies_alive:
        return
    state.ended = True
    state.winner = Side.PLAYER if players_alive else Side.ENEMY
