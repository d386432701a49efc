"""Services coordinating battles on top of the pure combat domain."""

from skirmish.services.battle_service import (
    BattleService,
    InvalidBattleConfigError,
    PreparedBattle,
)
from skirmish.services.description_service import (
    BattleLogEntry,
    BattleLogStats,
    DescriptionService,
)

__all__ = [
    "BattleLogEntry",
    "BattleLogStats",
    "BattleService",
    "DescriptionService",
    "InvalidBattleConfigError",
    "PreparedBattle",
]
