"""Protocol-based interfaces for skirmish collaborators.

This module exports every collaborator protocol, providing a clear contract
for host adapters and enabling dependency injection and testing.
"""

from skirmish.interfaces.battle import AttributeStore, BattleRenderer, EventSink, ResultSink
from skirmish.utils.rng import RandomSource

__all__ = [
    "AttributeStore",
    "BattleRenderer",
    "EventSink",
    "RandomSource",
    "ResultSink",
]
