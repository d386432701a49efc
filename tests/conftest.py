"""Pytest configuration to ensure the `src` package layout is importable.

This adds the `src/` directory to `sys.path` so tests can import the
`skirmish` package (e.g., `from skirmish.api.app import create_app`) without
requiring an editable install in CI.  Also provides a scripted random source
so combat tests can force hits, misses and criticals.
"""

import sys
from collections.abc import Sequence
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


class ScriptedRandom:
    """RandomSource replaying fixed draws.

    ``random()`` returns ``values`` in order, then ``default`` forever; with no
    default an exhausted script fails the test.  ``choice()`` returns the
    option at each scripted index (first option once exhausted).
    """

    def __init__(
        self,
        values: Sequence[float] = (),
        *,
        default: float | None = None,
        choices: Sequence[int] = (),
    ) -> None:
        self._values = list(values)
        self._default = default
        self._choices = list(choices)
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        if self._values:
            return self._values.pop(0)
        if self._default is None:
            raise AssertionError("scripted random source exhausted")
        return self._default

    def choice(self, options):
        index = self._choices.pop(0) if self._choices else 0
        return options[index]


@pytest.fixture
def scripted_rng():
    """Factory for :class:`ScriptedRandom` instances."""

    return ScriptedRandom
