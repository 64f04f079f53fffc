"""TimeRange y validación del intervalo de muestreo."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from ..errors import ConfigError

MIN_GRANULARITY_SECONDS = 60


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are interpreted as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_interval(interval: int) -> int:
    """Valida el intervalo de muestreo (segundos, múltiplo de 60)."""
    if isinstance(interval, bool) or not isinstance(interval, int):
        raise ConfigError(f"interval must be an integer number of seconds, got {interval!r}")
    if interval <= 0 or interval % MIN_GRANULARITY_SECONDS != 0:
        raise ConfigError(
            f"interval must be a positive multiple of {MIN_GRANULARITY_SECONDS}, got {interval}"
        )
    return interval


@dataclass(frozen=True)
class TimeRange:
    """Rango [start, end) en UTC."""
    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, "start", ensure_utc(self.start))
        object.__setattr__(self, "end", ensure_utc(self.end))
        if self.start > self.end:
            raise ValueError(f"start {self.start.isoformat()} is after end {self.end.isoformat()}")

    @property
    def span_seconds(self) -> float:
        return (self.end - self.start).total_seconds()

    def clamp(self, upper: datetime) -> TimeRange:
        """Recorta el final del rango a ``upper`` (nunca antes de start)."""
        upper = ensure_utc(upper)
        if self.end <= upper:
            return self
        return TimeRange(self.start, max(self.start, upper))

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"
