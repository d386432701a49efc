"""Turn-based skirmish combat engine."""

__version__ = "0.1.0"
