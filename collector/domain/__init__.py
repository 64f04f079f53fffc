"""Modelos de dominio del colector."""

from .datapoint import Datapoint, MetricSeries
from .event import MergedEvent
from .state import CollectionMode, CollectionState, SchedulerPhase
from .time_range import TimeRange, utc_now, validate_interval

__all__ = [
    "CollectionMode",
    "CollectionState",
    "Datapoint",
    "MergedEvent",
    "MetricSeries",
    "SchedulerPhase",
    "TimeRange",
    "utc_now",
    "validate_interval",
]
