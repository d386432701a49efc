"""Utility functions for the skirmish combat engine."""

from skirmish.utils.rng import RandomSource, SeededRandom, generate_seed

__all__ = [
    "RandomSource",
    "SeededRandom",
    "generate_seed",
]
