"""Storage adapters for skirmish collaborators."""

from .attribute_store import InMemoryAttributeStore
from .json_store import BattleRecord, JsonBattleResultRepository

__all__ = ["BattleRecord", "InMemoryAttributeStore", "JsonBattleResultRepository"]
