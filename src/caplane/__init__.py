"""caplane - capacity-aware task scheduling with daily load heat maps."""

__version__ = "0.1.0"
