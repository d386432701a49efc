"""Battle orchestration service.

Sequences a full exchange: validates the player's action, runs it through the
resolver, narrates and publishes every event, lets the enemy respond when
control passes to it and hands the final result to persistence once the
battle ends.  Also owns one-time battle setup.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from pydantic import ValidationError

from skirmish.config import Settings, get_settings
from skirmish.domain.combat import battle_result, resolve_action
from skirmish.domain.enums import ActionKind, Side
from skirmish.domain.events import BattleEvent, StateUpdated
from skirmish.domain.models import (
    Action,
    BattleResult,
    BattleState,
    Participant,
    ParticipantID,
    Skill,
    SkillID,
)
from skirmish.domain.rules_config import DEFAULT_RULES, RulesConfig
from skirmish.domain.skills import DEFAULT_SKILLS, build_skill_map
from skirmish.domain.stats import derive_stats, normalize_attributes
from skirmish.interfaces import AttributeStore, BattleRenderer, EventSink, ResultSink
from skirmish.schemas import ActionSchema, BattleConfigSchema, ParticipantConfig
from skirmish.services.description_service import (
    BattleLogEntry,
    BattleLogStats,
    DescriptionService,
)
from skirmish.utils.rng import RandomSource, SeededRandom, generate_seed

logger = logging.getLogger(__name__)


class InvalidBattleConfigError(ValueError):
    """Raised when a battle configuration fails schema validation."""


@dataclass(slots=True)
class PreparedBattle:
    """Initial state plus the pass-through visual configuration."""

    state: BattleState
    background: dict[str, Any] | None
    skills: Mapping[SkillID, Skill]


class BattleService:
    """Service coordinating setup and turn exchanges for a single battle."""

    def __init__(
        self,
        *,
        event_sink: EventSink,
        renderer: BattleRenderer,
        result_sink: ResultSink,
        attribute_store: AttributeStore | None = None,
        rng: RandomSource | None = None,
        descriptions: DescriptionService | None = None,
        settings: Settings | None = None,
        rules: RulesConfig = DEFAULT_RULES,
        catalog: Iterable[Skill] = DEFAULT_SKILLS,
    ) -> None:
        self._settings = settings or get_settings()
        self._seed = self._settings.rng_seed
        self._battle_id = 0
        self._events = event_sink
        self._renderer = renderer
        self._results = result_sink
        self._attributes = attribute_store
        self._fixed_rng = rng
        self._rng: RandomSource = rng or self._battle_rng("combat")
        self._rules = rules
        self._catalog = tuple(catalog)
        self._skills: Mapping[SkillID, Skill] = build_skill_map(self._catalog)
        self._owns_descriptions = descriptions is None
        self._descriptions = descriptions or DescriptionService(
            skills=self._skills,
            rng=self._battle_rng("narration"),
            cache_limit=self._settings.description_cache_limit,
            log_limit=self._settings.battle_log_limit,
        )
        self._prepared: PreparedBattle | None = None
        self._finalized = False
        self._lock = asyncio.Lock()

    @property
    def battle_id(self) -> int:
        """Number of battles initialised by this service so far."""
        return self._battle_id

    @property
    def skills(self) -> Mapping[SkillID, Skill]:
        return self._skills

    @property
    def battle_log(self) -> list[BattleLogEntry]:
        return self._descriptions.log

    def log_stats(self) -> BattleLogStats:
        return self._descriptions.stats()

    async def initialize_battle(
        self, config: BattleConfigSchema | Mapping[str, Any]
    ) -> PreparedBattle:
        """Validate ``config`` and build the initial battle state.

        Steps:
        1. Validate the configuration shape
        2. Snapshot the skill catalog
        3. Derive stats and initialise HP/MP once per participant
        4. Reset the narration cache, battle log and finalisation flag
        5. Reseed owned random sources per battle when ``rng_seed`` is set

        Args:
            config: Battle configuration (schema instance or raw mapping)

        Returns:
            PreparedBattle with the initial state and background metadata

        Raises:
            InvalidBattleConfigError: If the configuration fails validation
        """
        try:
            parsed = (
                config
                if isinstance(config, BattleConfigSchema)
                else BattleConfigSchema.model_validate(config)
            )
        except ValidationError as exc:
            logger.warning("rejected battle config: %s", exc.errors())
            raise InvalidBattleConfigError("Invalid battle config") from exc

        self._battle_id += 1
        if self._fixed_rng is None:
            self._rng = self._battle_rng("combat")
        if self._owns_descriptions:
            self._descriptions.rng = self._battle_rng("narration")
        self._skills = build_skill_map(self._catalog)
        self._descriptions.skills = self._skills
        self._descriptions.clear()
        self._finalized = False

        participants = [self._prepare_participant(cfg) for cfg in parsed.participants]
        prepared = PreparedBattle(
            state=BattleState(participants=participants),
            background=parsed.background,
            skills=self._skills,
        )
        self._prepared = prepared
        logger.info(
            "battle initialised with %d participants and %d skills",
            len(participants),
            len(self._skills),
        )
        return prepared

    async def start_battle(
        self, state: BattleState | None, prepared: PreparedBattle | None = None
    ) -> None:
        """Hand the initial state and background to the renderer."""

        if state is None:
            raise ValueError("Battle state not provided")
        prepared = prepared or self._require_prepared()
        payload = {**state.to_dict(), "background": prepared.background}
        await self._renderer.start(payload)
        logger.debug("battle start forwarded to renderer")

    async def process_player_action(
        self,
        action: ActionSchema | Action | Mapping[str, Any],
        state: BattleState,
    ) -> BattleState:
        """Resolve the player's action and, if it is then the enemy's turn, its reply.

        Malformed actions leave ``state`` untouched.

        Args:
            action: Action submitted by the player
            state: Current battle state

        Returns:
            Battle state after the player's action and any enemy response

        Raises:
            RuntimeError: If the service has not been initialised
        """
        self._require_prepared()
        try:
            parsed = _parse_action(action)
        except ValidationError as exc:
            logger.warning("rejected malformed action: %s", exc.errors())
            return state

        async with self._lock:
            next_state = self._run(parsed.to_action(), state)
            while not next_state.ended and next_state.turn == Side.ENEMY:
                enemy_action = self._enemy_action(next_state)
                if enemy_action is None:
                    break
                next_state = self._run(enemy_action, next_state)

            if next_state.ended:
                await self.finalize_battle(next_state)
        return next_state

    async def finalize_battle(self, state: BattleState) -> BattleResult | None:
        """Hand the result of an ended battle to persistence, once.

        A failed write is logged and left unmarked so it can be retried.
        """

        result = battle_result(state)
        if result is None or self._finalized:
            return result
        try:
            await self._results.record(result)
        except Exception:
            # Host sinks may raise anything; finalisation stays retryable.
            logger.warning("failed to persist battle result; will retry", exc_info=True)
            return result
        self._finalized = True
        logger.info("battle ended: %s won after %d rounds", result.winner, result.rounds)
        return result

    def _run(self, action: Action, state: BattleState) -> BattleState:
        resolution = resolve_action(
            state, action, skills=self._skills, rng=self._rng, rules=self._rules
        )
        if not resolution.events and not state.ended:
            logger.warning(
                "ignored action from %s to %s: unknown participant",
                action.actor_id,
                action.target_id,
            )
        for event in resolution.events:
            self._publish(event, resolution.state)
        self._publish(StateUpdated(state=resolution.state), resolution.state)
        return resolution.state

    def _publish(self, event: BattleEvent, state: BattleState) -> None:
        actor = state.find(getattr(event, "actor_id", ""))
        target = state.find(getattr(event, "target_id", ""))
        description = self._descriptions.describe(
            event,
            actor_name=actor.name if actor else None,
            target_name=target.name if target else None,
        )
        annotated = replace(event, description=description)
        self._descriptions.record(annotated, description)
        self._events.emit(annotated)

    def _enemy_action(self, state: BattleState) -> Action | None:
        enemies = state.living(Side.ENEMY)
        players = state.living(Side.PLAYER)
        if not enemies or not players:
            return None
        enemy, player = enemies[0], players[0]

        known = list(enemy.skills)
        if known and self._rng.random() < self._settings.ai_skill_probability:
            return Action(
                kind=ActionKind.USE_SKILL,
                actor_id=enemy.id,
                target_id=player.id,
                skill_id=SkillID(self._rng.choice(known)),
            )
        return Action(kind=ActionKind.ATTACK, actor_id=enemy.id, target_id=player.id)

    def _prepare_participant(self, cfg: ParticipantConfig) -> Participant:
        raw = cfg.attributes
        if raw is None and self._attributes is not None:
            raw = self._attributes.get_attributes(cfg.id)
        attributes = normalize_attributes(raw)
        derived = derive_stats(attributes, cfg.level, rules=self._rules)

        if cfg.initialized and cfg.hp is not None and cfg.max_hp is not None:
            # Already set up earlier in this battle: never re-level.
            max_hp, hp = cfg.max_hp, cfg.hp
        else:
            max_hp = cfg.max_hp if cfg.max_hp is not None else derived.max_hp
            hp = cfg.hp if cfg.hp is not None else max_hp
        max_mp = cfg.max_mp if cfg.max_mp is not None else derived.max_mp
        mp = cfg.mp if cfg.mp is not None else max_mp

        if hp > max_hp:
            logger.warning("hp %d exceeds max_hp %d for %s; clamping", hp, max_hp, cfg.id)
            hp = max_hp
        mp = min(mp, max_mp)

        stats = (
            cfg.stats.to_stats(max_hp=max_hp, max_mp=max_mp)
            if cfg.stats is not None
            else replace(derived, max_hp=max_hp, max_mp=max_mp)
        )
        return Participant(
            id=ParticipantID(cfg.id),
            name=cfg.name,
            side=cfg.side,
            level=cfg.level,
            hp=hp,
            max_hp=max_hp,
            mp=mp,
            max_mp=max_mp,
            stats=stats,
            skills=[SkillID(skill_id) for skill_id in cfg.skills],
            attributes=attributes,
            initialized=True,
        )

    def _battle_rng(self, context: str) -> RandomSource:
        """Random source for one draw context of the current battle."""
        if self._seed is None:
            return SeededRandom()
        return SeededRandom(generate_seed(self._battle_id, 1, f"{self._seed}:{context}"))

    def _require_prepared(self) -> PreparedBattle:
        if self._prepared is None:
            raise RuntimeError("Battle service not initialised; call initialize_battle first")
        return self._prepared


def _parse_action(action: ActionSchema | Action | Mapping[str, Any]) -> ActionSchema:
    if isinstance(action, ActionSchema):
        return action
    if isinstance(action, Action):
        return ActionSchema.model_validate(action, from_attributes=True)
    return ActionSchema.model_validate(action)
