"""Injectable random number sources for combat resolution.

Every random draw made while resolving an action goes through a
:class:`RandomSource`.  Production code uses :class:`SeededRandom` with no
seed (fresh entropy); tests and replays pass a seed string so that

- Reproducibility: same seed always produces the same battle
- Bug reproduction: a reported fight can be replayed exactly
- Fairness: no hidden randomness outside the injected source

Examples:
    >>> seed = generate_seed(battle_id=7, round_number=1, context="player_turn")
    >>> rng = SeededRandom(seed)
    >>> 0.0 <= rng.random() < 1.0
    True
"""

from __future__ import annotations

import hashlib
import random
from collections.abc import Sequence
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Uniform random source used by the resolver and the enemy policy."""

    def random(self) -> float:
        """Return a float in ``[0.0, 1.0)``."""
        ...

    def choice(self, options: Sequence[T]) -> T:
        """Return one element of a non-empty sequence."""
        ...


def generate_seed(battle_id: int, round_number: int, context: str) -> str:
    """Generate a deterministic seed from battle progress.

    Format: "battle_id:round:context"

    Args:
        battle_id: Identifier of the battle (unique per session)
        round_number: Current round (starts at 1)
        context: What the draws are for (e.g., 'player_turn', 'enemy_policy')

    Returns:
        Seed string in format "battle_id:round:context"

    Examples:
        >>> generate_seed(1, 3, "enemy_policy")
        '1:3:enemy_policy'

    Raises:
        ValueError: If battle_id or round_number is negative
    """
    if battle_id < 0:
        raise ValueError(f"battle_id must be non-negative, got {battle_id}")
    if round_number < 0:
        raise ValueError(f"round_number must be non-negative, got {round_number}")

    return f"{battle_id}:{round_number}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random().

    Args:
        seed: Seed string

    Returns:
        64-bit integer derived from SHA-256(seed)
    """
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    # Use first 8 bytes for a 64-bit integer
    return int.from_bytes(digest[:8], "big", signed=False)


class SeededRandom:
    """``random.Random`` wrapper satisfying :class:`RandomSource`.

    A ``None`` seed draws fresh entropy from the OS.
    """

    def __init__(self, seed: str | None = None) -> None:
        self.seed = seed
        self._rng = random.Random(_seed_to_int(seed) if seed is not None else None)

    def random(self) -> float:
        return self._rng.random()

    def choice(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("options list cannot be empty")
        return options[self._rng.randrange(len(options))]
