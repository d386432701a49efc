from typing import Any

from pydantic import BaseModel, Field, model_validator

from skirmish.domain.enums import ActionKind, Side, SkillCategory, SkillTarget
from skirmish.domain.models import Action, CombatStats, ParticipantID, Skill, SkillID


class StatsConfig(BaseModel):
    attack: float = Field(default=10.0, ge=0.0, description="Physical attack")
    magic_attack: float = Field(default=10.0, ge=0.0, description="Magical attack")
    defense: float = Field(default=0.0, ge=0.0, description="Physical defense (absolute)")
    magic_defense: float = Field(
        default=0.0, ge=0.0, le=0.99, description="Magical defense as a 0-1 reduction"
    )
    hit: float = Field(default=0.8, ge=0.0, description="Hit rate, may exceed 1")
    evade: float = Field(default=0.1, ge=0.0, le=1.0, description="Evade rate 0-1")
    crit_rate: float = Field(default=0.05, ge=0.0, le=1.0, description="Crit chance 0-1")
    crit_multiplier: float = Field(default=1.5, ge=1.0, le=5.0, description="Crit damage multiplier")
    erosion_hp: float = Field(default=0.0, ge=0.0, description="Secondary erosion resource")

    def to_stats(self, *, max_hp: int, max_mp: int) -> CombatStats:
        return CombatStats(**self.model_dump(), max_hp=max_hp, max_mp=max_mp)


class ParticipantConfig(BaseModel):
    id: str = Field(..., min_length=1, description="Unique participant id")
    name: str = Field(default="Unknown", description="Display name")
    side: Side = Field(default=Side.ENEMY, description="player or enemy")
    level: int = Field(default=1, ge=1, le=20, description="Level 1-20")
    max_hp: int | None = Field(None, ge=0, description="Defaults to constitution * 20")
    hp: int | None = Field(None, ge=0, description="Defaults to max_hp")
    max_mp: int | None = Field(None, ge=0, description="Defaults to intelligence * 5")
    mp: int | None = Field(None, ge=0, description="Defaults to max_mp")
    stats: StatsConfig | None = Field(None, description="Pre-set stats; derived when omitted")
    skills: list[str] = Field(default_factory=list, description="Known skill ids")
    attributes: dict[str, float] | None = Field(
        None, description="Raw attributes (strength, constitution, ...)"
    )
    initialized: bool = Field(
        default=False, description="Set once HP/MP were initialised; never re-levelled"
    )


class BattleConfigSchema(BaseModel):
    background: dict[str, Any] | None = Field(
        None, description="Visual metadata passed through to the renderer untouched"
    )
    participants: list[ParticipantConfig] = Field(..., min_length=2)

    @model_validator(mode="after")
    def _check_roster(self) -> "BattleConfigSchema":
        ids = [p.id for p in self.participants]
        duplicates = sorted({pid for pid in ids if ids.count(pid) > 1})
        if duplicates:
            raise ValueError(f"duplicate participant ids: {', '.join(duplicates)}")
        sides = {p.side for p in self.participants}
        if sides != {Side.PLAYER, Side.ENEMY}:
            raise ValueError("a battle needs at least one player and one enemy participant")
        return self


class ActionSchema(BaseModel):
    kind: ActionKind = Field(..., description="attack or use_skill")
    actor_id: str = Field(..., min_length=1)
    target_id: str = Field(..., min_length=1)
    skill_id: str | None = Field(None, description="Required for use_skill")

    @model_validator(mode="after")
    def _check_skill(self) -> "ActionSchema":
        if self.kind == ActionKind.USE_SKILL and not self.skill_id:
            raise ValueError("use_skill actions require a skill_id")
        return self

    def to_action(self) -> Action:
        return Action(
            kind=self.kind,
            actor_id=ParticipantID(self.actor_id),
            target_id=ParticipantID(self.target_id),
            skill_id=SkillID(self.skill_id) if self.skill_id else None,
        )


class SkillSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    category: SkillCategory
    target: SkillTarget = SkillTarget.SINGLE
    power_multiplier: float = 1.0
    flat_power: float = 0.0
    hit_modifier: float = 0.0
    crit_bonus: float = 0.0
    crit_damage_override: float | None = Field(None, ge=1.0)
    mp_cost: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list)

    def to_skill(self) -> Skill:
        data = self.model_dump()
        data["id"] = SkillID(self.id)
        data["tags"] = tuple(self.tags)
        return Skill(**data)
