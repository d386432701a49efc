"""HTTP routes for the skirmish API."""

from __future__ import annotations

from contextlib import suppress
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, Field

from skirmish.api.runtime import ApiState
from skirmish.domain.enums import Side
from skirmish.domain.rules_config import MAX_LEVEL, MIN_LEVEL
from skirmish.domain.skills import skill_at_level, skills_by_tag
from skirmish.domain.stats import derive_stats
from skirmish.repository import BattleRecord
from skirmish.schemas import SkillSchema

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class HealthResponse(BaseModel):
    status: str
    skills: int


class StatRulesResponse(BaseModel):
    attack_per_strength: float
    magic_attack_per_charisma: float
    defense_per_defense: float
    crit_rate_per_luck: float
    willpower_per_erosion: float
    hp_per_constitution: int
    mp_per_intelligence: int
    crit_multiplier: float
    min_max_hp: int


class CombatRulesResponse(BaseModel):
    min_hit_chance: float
    max_crit_chance: float
    max_magic_defense: float
    erosion_damage_fraction: float
    min_damage: int


class RulesResponse(BaseModel):
    stats: StatRulesResponse
    combat: CombatRulesResponse
    level_hit_table: dict[int, float]


class DeriveStatsRequest(BaseModel):
    attributes: dict[str, float] = Field(default_factory=dict)
    level: int = Field(default=MIN_LEVEL, ge=MIN_LEVEL, le=MAX_LEVEL)


class BattleRecordResponse(BaseModel):
    id: int
    recorded_at: datetime
    winner: Side
    rounds: int
    summary: str

    @classmethod
    def from_record(cls, record: BattleRecord) -> "BattleRecordResponse":
        return cls(
            id=record.id,
            recorded_at=record.recorded_at,
            winner=record.result.winner,
            rounds=record.result.rounds,
            summary=record.result.summary,
        )


class DerivedStatsResponse(BaseModel):
    attack: float
    magic_attack: float
    defense: float
    magic_defense: float
    hit: float
    evade: float
    crit_rate: float
    crit_multiplier: float
    erosion_hp: float
    max_hp: int
    max_mp: int


@router.get("/health", response_model=HealthResponse)
async def health(state: ApiStateDep) -> HealthResponse:
    return HealthResponse(status="ok", skills=len(state.skills))


@router.get("/rules", response_model=RulesResponse)
async def get_rules(state: ApiStateDep) -> RulesResponse:
    rules = state.rules
    return RulesResponse(
        stats=StatRulesResponse.model_validate(rules.stats, from_attributes=True),
        combat=CombatRulesResponse.model_validate(rules.combat, from_attributes=True),
        level_hit_table=dict(rules.level_hit_table),
    )


@router.get("/skills", response_model=list[SkillSchema])
async def list_skills(
    state: ApiStateDep,
    tag: Annotated[str | None, Query(description="Only skills carrying this tag")] = None,
) -> list[SkillSchema]:
    skills = list(state.skills.values())
    if tag is not None:
        skills = skills_by_tag(tag, skills)
    return [SkillSchema.model_validate(skill, from_attributes=True) for skill in skills]


@router.get("/skills/{skill_id}", response_model=SkillSchema)
async def get_skill(
    skill_id: str,
    state: ApiStateDep,
    level: Annotated[
        int | None, Query(ge=1, description="Skill level; applies per-level overrides")
    ] = None,
) -> SkillSchema:
    skill = state.skills.get(skill_id)
    if skill is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Skill {skill_id} not found")
    if level is not None:
        skill = skill_at_level(skill, level)
    return SkillSchema.model_validate(skill, from_attributes=True)


@router.post("/stats/derive", response_model=DerivedStatsResponse)
async def derive(payload: DeriveStatsRequest, state: ApiStateDep) -> DerivedStatsResponse:
    stats = derive_stats(payload.attributes, payload.level, rules=state.rules)
    return DerivedStatsResponse.model_validate(stats, from_attributes=True)


@router.get("/results", response_model=list[BattleRecordResponse])
async def list_results(state: ApiStateDep) -> list[BattleRecordResponse]:
    records: list[BattleRecordResponse] = []
    for record_id in state.results.list_records():
        with suppress(FileNotFoundError):
            records.append(BattleRecordResponse.from_record(state.results.load(record_id)))
    return records


@router.get("/results/latest", response_model=BattleRecordResponse)
async def latest_result(state: ApiStateDep) -> BattleRecordResponse:
    record = state.results.latest()
    if record is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="No battle results recorded")
    return BattleRecordResponse.from_record(record)


@router.get("/results/{record_id}", response_model=BattleRecordResponse)
async def get_result(record_id: int, state: ApiStateDep) -> BattleRecordResponse:
    try:
        record = state.results.load(record_id)
    except FileNotFoundError as exc:
        raise HTTPException(
            status.HTTP_404_NOT_FOUND, detail=f"Result {record_id} not found"
        ) from exc
    return BattleRecordResponse.from_record(record)
