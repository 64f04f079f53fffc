"""Estadísticas de ciclos de colección."""

from .cycle_stats import CycleStats

__all__ = ["CycleStats"]
