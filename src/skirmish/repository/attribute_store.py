"""In-memory attribute storage implementing the ``AttributeStore`` protocol."""

from __future__ import annotations

from collections.abc import Mapping


class InMemoryAttributeStore:
    """Dictionary-backed attribute store, mainly for tools and tests."""

    def __init__(self, attributes: Mapping[str, Mapping[str, float]] | None = None) -> None:
        self._attributes: dict[str, dict[str, float]] = {
            pid: dict(values) for pid, values in (attributes or {}).items()
        }

    def get_attributes(self, participant_id: str) -> Mapping[str, float] | None:
        values = self._attributes.get(participant_id)
        return dict(values) if values is not None else None

    def set_attributes(self, participant_id: str, attributes: Mapping[str, float]) -> None:
        self._attributes[participant_id] = dict(attributes)
