"""Tests for the combat resolver."""

from __future__ import annotations

import copy

import pytest

from skirmish.domain.combat import (
    DEFEAT_SUMMARY,
    VICTORY_SUMMARY,
    battle_result,
    compute_damage,
    crit_chance,
    hit_chance,
    resolve_action,
    round_half_up,
)
from skirmish.domain.enums import ActionKind, EventKind, Side, SkillCategory
from skirmish.domain.events import (
    CriticalHit,
    DamageDealt,
    ErosionChanged,
    InsufficientMp,
    Missed,
    MpConsumed,
    SkillUsed,
    StateUpdated,
)
from skirmish.domain.models import (
    Action,
    BattleState,
    CombatStats,
    Participant,
    ParticipantID,
    Skill,
    SkillID,
)
from skirmish.domain.skills import BASIC_ATTACK, build_skill_map

# First draw decides the hit, second the critical.
HIT = 0.0
NO_CRIT = 0.99


def _fighter(pid: str, side: Side, *, hp: int = 100, mp: int = 0, **stats) -> Participant:
    return Participant(
        id=ParticipantID(pid),
        name=pid.title(),
        side=side,
        hp=hp,
        max_hp=max(hp, 100),
        mp=mp,
        max_mp=max(mp, 50),
        stats=CombatStats(**stats),
    )


def _state(hero: Participant | None = None, foe: Participant | None = None) -> BattleState:
    return BattleState(
        participants=[
            hero or _fighter("hero", Side.PLAYER),
            foe or _fighter("goblin", Side.ENEMY),
        ]
    )


def _attack(actor: str = "hero", target: str = "goblin") -> Action:
    return Action(
        kind=ActionKind.ATTACK,
        actor_id=ParticipantID(actor),
        target_id=ParticipantID(target),
    )


def _use(skill_id: str, actor: str = "hero", target: str = "goblin") -> Action:
    return Action(
        kind=ActionKind.USE_SKILL,
        actor_id=ParticipantID(actor),
        target_id=ParticipantID(target),
        skill_id=SkillID(skill_id),
    )


class TestDamageFormula:
    def test_physical_skill_scenario(self):
        """atk 20 with a 1.5x skill into def 10 gives round(30 - 5) = 25."""
        skill = Skill(
            id=SkillID("heavy"),
            name="Heavy",
            category=SkillCategory.PHYSICAL,
            power_multiplier=1.5,
        )
        attacker = CombatStats(attack=20, defense=0)
        defender = CombatStats(defense=10)

        assert compute_damage(attacker, defender, skill) == 25

    def test_magical_damage_uses_magic_defense_ratio(self):
        fireball = build_skill_map()[SkillID("fireball")]
        attacker = CombatStats(magic_attack=10)
        defender = CombatStats(magic_defense=0.5)

        # (10 * 1.2 + 5) * 0.5 = 8.5, rounded half up
        assert compute_damage(attacker, defender, fireball) == 9

    def test_magic_defense_is_capped(self):
        attacker = CombatStats(magic_attack=100)
        defender = CombatStats(magic_defense=5.0)
        skill = Skill(id=SkillID("zap"), name="Zap", category=SkillCategory.MAGICAL)

        assert compute_damage(attacker, defender, skill) == 10

    def test_damage_never_below_one(self):
        attacker = CombatStats(attack=0)
        defender = CombatStats(defense=500)

        assert compute_damage(attacker, defender, BASIC_ATTACK) == 1
        assert compute_damage(attacker, defender, BASIC_ATTACK, critical=True) == 1

    def test_critical_uses_attacker_multiplier(self):
        attacker = CombatStats(attack=10, crit_multiplier=1.5)
        defender = CombatStats(defense=0)

        assert compute_damage(attacker, defender, BASIC_ATTACK, critical=True) == 15

    def test_critical_override_wins_over_attacker_multiplier(self):
        skill = Skill(
            id=SkillID("execute"),
            name="Execute",
            category=SkillCategory.PHYSICAL,
            crit_damage_override=2.0,
        )
        attacker = CombatStats(attack=10, crit_multiplier=1.5)

        assert compute_damage(attacker, CombatStats(defense=0), skill, critical=True) == 20

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.5, 1), (1.49, 1), (2.5, 3), (-0.5, 0), (24.0, 24)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestChances:
    def test_hit_chance_floor(self):
        """Deeply negative hit - evade still leaves a 5% chance."""
        attacker = CombatStats(hit=0.0)
        defender = CombatStats(evade=10.0)

        assert hit_chance(attacker, defender, BASIC_ATTACK) == pytest.approx(0.05)

    def test_hit_chance_may_exceed_one(self):
        attacker = CombatStats(hit=150.0)
        defender = CombatStats(evade=0.0)

        assert hit_chance(attacker, defender, BASIC_ATTACK) == pytest.approx(150.0)

    def test_hit_chance_includes_skill_modifier(self):
        skill = build_skill_map()[SkillID("precise_strike")]
        attacker = CombatStats(hit=0.8)
        defender = CombatStats(evade=0.1)

        assert hit_chance(attacker, defender, skill) == pytest.approx(0.85)

    def test_crit_chance_is_clamped(self):
        lucky = CombatStats(crit_rate=3.0)
        cursed = CombatStats(crit_rate=-1.0)

        assert crit_chance(lucky, BASIC_ATTACK) == pytest.approx(0.95)
        assert crit_chance(cursed, BASIC_ATTACK) == 0.0


class TestResolveAction:
    def test_plain_attack_hits(self, scripted_rng):
        state = _state()
        resolution = resolve_action(state, _attack(), rng=scripted_rng([HIT, NO_CRIT]))

        assert [type(e) for e in resolution.events] == [DamageDealt]
        damage = resolution.events[0]
        assert damage.damage == 10
        assert damage.critical is False
        assert damage.skill_id is None
        assert resolution.state.find("goblin").hp == 90
        assert resolution.state.turn == Side.ENEMY
        assert resolution.state.round == 1

    def test_input_state_is_not_mutated(self, scripted_rng):
        state = _state()
        snapshot = copy.deepcopy(state)

        resolution = resolve_action(state, _attack(), rng=scripted_rng([HIT, NO_CRIT]))

        assert state == snapshot
        assert resolution.state is not state
        assert resolution.state.participants[1] is not state.participants[1]

    def test_skill_scenario_through_resolver(self, scripted_rng):
        heavy = Skill(
            id=SkillID("heavy"),
            name="Heavy",
            category=SkillCategory.PHYSICAL,
            power_multiplier=1.5,
        )
        state = _state(
            _fighter("hero", Side.PLAYER, attack=20, defense=0),
            _fighter("goblin", Side.ENEMY, defense=10),
        )

        resolution = resolve_action(
            state,
            _use("heavy"),
            skills={heavy.id: heavy},
            rng=scripted_rng([HIT, NO_CRIT]),
        )

        kinds = [e.kind for e in resolution.events]
        assert kinds == [EventKind.SKILL_USED, EventKind.DAMAGE]
        assert resolution.events[-1].damage == 25
        assert resolution.state.find("goblin").hp == 75

    def test_insufficient_mp_refuses_and_passes_turn(self, scripted_rng):
        expensive = Skill(
            id=SkillID("meteor"),
            name="Meteor",
            category=SkillCategory.MAGICAL,
            mp_cost=10,
        )
        state = _state(_fighter("hero", Side.PLAYER, mp=5))
        rng = scripted_rng()

        resolution = resolve_action(state, _use("meteor"), skills={expensive.id: expensive}, rng=rng)

        assert [type(e) for e in resolution.events] == [SkillUsed, InsufficientMp]
        refusal = resolution.events[1]
        assert refusal.required_mp == 10
        assert refusal.current_mp == 5
        assert resolution.state.find("hero").mp == 5
        assert resolution.state.find("goblin").hp == 100
        assert resolution.state.turn == Side.ENEMY
        assert not any(e.kind == EventKind.DAMAGE for e in resolution.events)
        assert rng.draws == 0

    def test_mp_is_spent_before_the_hit_roll(self, scripted_rng):
        state = _state(_fighter("hero", Side.PLAYER, mp=20))

        resolution = resolve_action(state, _use("fireball"), rng=scripted_rng([0.99]))

        assert [type(e) for e in resolution.events] == [SkillUsed, MpConsumed, Missed]
        spent = resolution.events[1]
        assert spent.mp_cost == 10
        assert spent.remaining_mp == 10
        assert resolution.state.find("hero").mp == 10

    def test_miss_leaves_hp_untouched(self, scripted_rng):
        state = _state()

        resolution = resolve_action(state, _attack(), rng=scripted_rng([0.99]))

        assert [type(e) for e in resolution.events] == [Missed]
        assert resolution.state.find("goblin").hp == 100
        assert resolution.state.turn == Side.ENEMY

    def test_critical_hit_precedes_damage(self, scripted_rng):
        state = _state()

        resolution = resolve_action(state, _attack(), rng=scripted_rng([HIT, 0.0]))

        assert [type(e) for e in resolution.events] == [CriticalHit, DamageDealt]
        crit, damage = resolution.events
        assert crit.damage == damage.damage == 15
        assert damage.critical is True

    def test_magical_hit_erodes_secondary_resource(self, scripted_rng):
        state = _state(
            _fighter("hero", Side.PLAYER, mp=20, magic_attack=10),
            _fighter("goblin", Side.ENEMY, magic_defense=0.0, erosion_hp=2.0),
        )

        resolution = resolve_action(state, _use("fireball"), rng=scripted_rng([HIT, NO_CRIT]))

        assert [type(e) for e in resolution.events] == [
            SkillUsed,
            MpConsumed,
            ErosionChanged,
            DamageDealt,
        ]
        erosion = resolution.events[2]
        # 10% of 17 damage is 1.7, rounded to 2 and capped by what is left
        assert erosion.change == -2
        assert erosion.remaining == 0.0
        assert resolution.state.find("goblin").stats.erosion_hp == 0.0
        assert resolution.events[-1].damage == 17

    def test_physical_hit_does_not_erode(self, scripted_rng):
        state = _state(foe=_fighter("goblin", Side.ENEMY, erosion_hp=2.0))

        resolution = resolve_action(state, _attack(), rng=scripted_rng([HIT, NO_CRIT]))

        assert not any(isinstance(e, ErosionChanged) for e in resolution.events)
        assert resolution.state.find("goblin").stats.erosion_hp == 2.0

    def test_unknown_skill_resolves_as_plain_strike(self, scripted_rng):
        state = _state()

        resolution = resolve_action(state, _use("mystery"), rng=scripted_rng([HIT, NO_CRIT]))

        assert [type(e) for e in resolution.events] == [SkillUsed, DamageDealt]
        assert resolution.events[0].skill_id == "mystery"
        assert resolution.events[1].damage == 10

    def test_killing_blow_ends_battle(self, scripted_rng):
        state = _state(foe=_fighter("goblin", Side.ENEMY, hp=1))

        resolution = resolve_action(state, _attack(), rng=scripted_rng([HIT, NO_CRIT]))

        assert resolution.state.find("goblin").hp == 0
        assert resolution.state.ended is True
        assert resolution.state.winner == Side.PLAYER

    def test_enemy_victory(self, scripted_rng):
        state = _state(hero=_fighter("hero", Side.PLAYER, hp=1))
        state.turn = Side.ENEMY

        resolution = resolve_action(
            state, _attack("goblin", "hero"), rng=scripted_rng([HIT, NO_CRIT])
        )

        assert resolution.state.ended is True
        assert resolution.state.winner == Side.ENEMY

    def test_ended_battle_is_terminal(self, scripted_rng):
        state = _state()
        state.ended = True
        state.winner = Side.PLAYER
        rng = scripted_rng()

        resolution = resolve_action(state, _attack(), rng=rng)

        assert resolution.state is state
        assert resolution.events == []
        assert rng.draws == 0

    def test_full_round_increments_round_once(self, scripted_rng):
        state = _state()
        rng = scripted_rng([HIT, NO_CRIT, HIT, NO_CRIT])

        after_player = resolve_action(state, _attack(), rng=rng).state
        assert after_player.round == 1
        assert after_player.turn == Side.ENEMY

        after_enemy = resolve_action(after_player, _attack("goblin", "hero"), rng=rng).state
        assert after_enemy.round == 2
        assert after_enemy.turn == Side.PLAYER

    def test_enemy_miss_still_closes_the_round(self, scripted_rng):
        state = _state()
        state.turn = Side.ENEMY

        resolution = resolve_action(state, _attack("goblin", "hero"), rng=scripted_rng([0.99]))

        assert resolution.state.round == 2
        assert resolution.state.turn == Side.PLAYER

    @pytest.mark.parametrize(("actor", "target"), [("ghost", "goblin"), ("hero", "ghost")])
    def test_unknown_participant_is_a_silent_no_op(self, scripted_rng, actor, target):
        state = _state()
        rng = scripted_rng()

        resolution = resolve_action(state, _attack(actor, target), rng=rng)

        assert resolution.events == []
        assert resolution.state == state
        assert rng.draws == 0


class TestBattleResult:
    def test_running_battle_has_no_result(self):
        assert battle_result(_state()) is None

    def test_player_victory_summary(self):
        state = _state()
        state.ended = True
        state.winner = Side.PLAYER
        state.round = 4

        result = battle_result(state)

        assert result.winner == Side.PLAYER
        assert result.rounds == 4
        assert result.summary == VICTORY_SUMMARY

    def test_defeat_summary(self):
        state = _state()
        state.ended = True
        state.winner = Side.ENEMY

        assert battle_result(state).summary == DEFEAT_SUMMARY


class TestEventPayloads:
    def test_damage_payload_is_flat(self):
        event = DamageDealt(actor_id="hero", target_id="goblin", damage=7, description="Ouch")

        assert event.to_payload() == {
            "kind": "damage",
            "description": "Ouch",
            "actor_id": "hero",
            "target_id": "goblin",
            "damage": 7,
            "critical": False,
            "skill_id": None,
        }

    def test_state_payload_carries_state_dict(self):
        state = _state()
        payload = StateUpdated(state=state).to_payload()

        assert payload["kind"] == "state-updated"
        assert payload["state"] == state.to_dict()
        assert payload["state"]["participants"][0]["id"] == "hero"
