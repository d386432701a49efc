"""JSON-based repository for finished battle results."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from pydantic import TypeAdapter

from skirmish.domain.models import BattleResult


@dataclass(slots=True)
class BattleRecord:
    """A stored battle result."""

    id: int
    recorded_at: datetime
    result: BattleResult


class JsonBattleResultRepository:
    """Persist battle results as JSON snapshots on disk.

    Implements the ``ResultSink`` protocol through :meth:`record`.
    """

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._adapter: TypeAdapter[BattleRecord] = TypeAdapter(BattleRecord)

    def _path_for(self, record_id: int) -> Path:
        return self.base_path / f"battle_{int(record_id)}.json"

    async def record(self, result: BattleResult) -> None:
        """Store ``result`` without blocking the event loop."""

        await asyncio.to_thread(self.save, result)

    def save(self, result: BattleResult) -> BattleRecord:
        """Serialize a result to disk under the next free identifier."""

        existing = self.list_records()
        record = BattleRecord(
            id=(existing[-1] + 1) if existing else 1,
            recorded_at=datetime.now(UTC),
            result=result,
        )
        self._path_for(record.id).write_bytes(self._adapter.dump_json(record, indent=2))
        return record

    def load(self, record_id: int) -> BattleRecord:
        """Load a previously saved record; raises ``FileNotFoundError`` if missing."""

        data = self._path_for(record_id).read_bytes()
        return self._adapter.validate_json(data)

    def latest(self) -> BattleRecord | None:
        existing = self.list_records()
        return self.load(existing[-1]) if existing else None

    def list_records(self) -> list[int]:
        """Return all record ids currently persisted, ascending."""

        ids: list[int] = []
        prefix = "battle_"
        suffix = ".json"
        for path in self.base_path.glob("battle_*.json"):
            stem = path.name
            if stem.startswith(prefix) and stem.endswith(suffix):
                raw = stem[len(prefix) : -len(suffix)]
                try:
                    ids.append(int(raw))
                except ValueError:  # pragma: no cover - ignored malformed file
                    continue
        return sorted(ids)
