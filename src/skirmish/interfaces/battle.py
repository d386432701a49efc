"""Collaborator protocols consumed by the battle service.

The battle service never reaches for host globals.  Everything it talks to,
from attribute storage to rendering and persistence, is injected through the
protocols below so the engine stays host-agnostic and unit-testable.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from skirmish.domain.events import BattleEvent
from skirmish.domain.models import BattleResult


class AttributeStore(Protocol):
    """Read-only access to the host's stored character attributes."""

    def get_attributes(self, participant_id: str) -> Mapping[str, float] | None:
        """Return raw attributes for ``participant_id`` or ``None`` if unknown.

        Args:
            participant_id: Id of the participant from the battle config

        Returns:
            Attribute mapping (strength, constitution, ...) or None
        """
        ...


class EventSink(Protocol):
    """Receives every annotated event, in order (UI mirror, renderer bridge)."""

    def emit(self, event: BattleEvent) -> None:
        """Publish one event.

        Args:
            event: Annotated battle event
        """
        ...


class BattleRenderer(Protocol):
    """Rendering collaborator that draws the battle scene."""

    async def start(self, payload: Mapping[str, Any]) -> None:
        """Start the battle scene.

        Args:
            payload: Initial state dict plus ``background`` metadata
        """
        ...


class ResultSink(Protocol):
    """Persistence collaborator for finished battles."""

    async def record(self, result: BattleResult) -> None:
        """Store a final battle result.

        Args:
            result: Winner, round count and summary of the finished battle
        """
        ...
