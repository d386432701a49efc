"""Runtime primitives backing the skirmish HTTP API."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from skirmish.config import Settings, get_settings
from skirmish.domain.models import Skill, SkillID
from skirmish.domain.rules_config import DEFAULT_RULES, RulesConfig
from skirmish.domain.skills import build_skill_map
from skirmish.repository import JsonBattleResultRepository

logger = logging.getLogger(__name__)


class ApiState:
    """Aggregated read-only services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        rules: RulesConfig = DEFAULT_RULES,
        skills: Mapping[SkillID, Skill] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules
        self.skills = skills if skills is not None else build_skill_map()
        self.results = JsonBattleResultRepository(self.settings.data_dir)
        logger.info("api state ready with %d skills", len(self.skills))

    async def shutdown(self) -> None:
        logger.debug("api state shut down")


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
