from .battle import ActionSchema, BattleConfigSchema, ParticipantConfig, SkillSchema, StatsConfig

__all__ = [
    "ActionSchema",
    "BattleConfigSchema",
    "ParticipantConfig",
    "SkillSchema",
    "StatsConfig",
]
