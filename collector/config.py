"""Configuración validada del colector.

Parte de los valores crudos de ``common.config.Settings`` (entorno + .env) y
de los overrides de la CLI. Cualquier valor inválido lanza ConfigError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from common.config import Settings

from .aligner import AlignmentPolicy
from .domain.time_range import ensure_utc, validate_interval
from .errors import ConfigError

DEFAULT_PERIOD = "300s"
DEFAULT_METRICS: Tuple[str, ...] = ("Invocations", "Errors", "Duration", "Throttles")
SINKS = ("redis", "memory")
LOG_LEVELS = ("CRITICAL", "FATAL", "ERROR", "WARNING", "WARN", "INFO", "DEBUG", "NOTSET")

# 0001-01-01T00:00:00Z equivale a "sin backfill"
ZERO_INSTANT = datetime.min.replace(tzinfo=timezone.utc)

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: str) -> float:
    """Duración estilo Go ("300s", "5m", "1h30m", "500ms") a segundos.

    Un número sin unidad se interpreta en segundos.
    """
    text = (value or "").strip()
    if not text:
        raise ConfigError("empty duration")
    try:
        seconds = float(text)
    except ValueError:
        pos = 0
        seconds = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != pos:
                break
            seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            pos = match.end()
        if pos != len(text):
            raise ConfigError(f"invalid duration: {value!r}")
    if seconds <= 0:
        raise ConfigError(f"duration must be positive: {value!r}")
    return seconds


def parse_timestamp(value: str) -> datetime:
    """ISO-8601 a datetime UTC. Acepta sufijo Z; sin zona se asume UTC."""
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError) as e:
        raise ConfigError(f"invalid backfill date {value!r}: {e}") from e


def parse_list(value: str) -> Tuple[str, ...]:
    return tuple(item.strip() for item in (value or "").split(",") if item.strip())


def _parse_int(name: str, value: Any) -> int:
    try:
        return int(str(value).strip())
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


def _parse_alignment(value: str) -> AlignmentPolicy:
    try:
        return AlignmentPolicy(value.strip().lower())
    except ValueError as e:
        raise ConfigError(f"invalid alignment policy {value!r}") from e


@dataclass(frozen=True)
class CollectorConfig:
    """Configuración del colector ya validada."""
    region: str
    period_seconds: float = 300.0
    interval: int = 60
    resources: Tuple[str, ...] = ()
    metrics: Tuple[str, ...] = DEFAULT_METRICS
    backfill_date: Optional[datetime] = None
    namespace: str = "AWS/Lambda"
    dimension: str = "FunctionName"
    sink: str = "redis"
    redis_url: str = "redis://localhost:6379/0"
    stream: str = "metrics:lambda"
    stream_maxlen: int = 100000
    workers: int = 1
    alignment: AlignmentPolicy = AlignmentPolicy.TRUNCATE
    status_port: int = 0
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.region:
            raise ConfigError("Must provide an AWS region.")
        validate_interval(self.interval)
        if self.period_seconds <= 0:
            raise ConfigError("period must be positive")
        if not self.metrics:
            raise ConfigError("at least one metric is required")
        if len(set(self.metrics)) != len(self.metrics):
            raise ConfigError(f"duplicate metrics: {', '.join(self.metrics)}")
        if self.backfill_date is not None and ensure_utc(self.backfill_date) == ZERO_INSTANT:
            object.__setattr__(self, "backfill_date", None)
        if self.sink not in SINKS:
            raise ConfigError(f"sink must be one of {', '.join(SINKS)}, got {self.sink!r}")
        if self.workers < 1:
            raise ConfigError("workers must be >= 1")
        if self.stream_maxlen < 1:
            raise ConfigError("stream maxlen must be >= 1")
        if not 0 <= self.status_port <= 65535:
            raise ConfigError(f"invalid status port {self.status_port}")
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"log level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")

    @property
    def backfill(self) -> bool:
        return self.backfill_date is not None

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> CollectorConfig:
        """Construye y valida la configuración.

        Un valor del entorno solo se parsea si no hay override para ese campo,
        así un COLLECTOR_PERIOD inválido no bloquea ``--period``.

        Args:
            settings: Valores crudos del entorno
            **overrides: Valores ya tipados (p.ej. desde la CLI); None se ignora

        Raises:
            ConfigError: si algún valor es inválido o falta la región
        """
        backfill = settings.backfill_date.strip()
        parsers: Dict[str, Callable[[], Any]] = dict(
            region=lambda: settings.region.strip(),
            period_seconds=lambda: parse_duration(settings.period or DEFAULT_PERIOD),
            interval=lambda: _parse_int("interval", settings.interval),
            resources=lambda: parse_list(settings.resources),
            metrics=lambda: parse_list(settings.metrics) or DEFAULT_METRICS,
            backfill_date=lambda: parse_timestamp(backfill) if backfill else None,
            namespace=lambda: settings.namespace,
            dimension=lambda: settings.dimension,
            sink=lambda: settings.sink.strip().lower(),
            redis_url=lambda: settings.redis_url,
            stream=lambda: settings.stream,
            stream_maxlen=lambda: _parse_int("stream maxlen", settings.stream_maxlen),
            workers=lambda: _parse_int("workers", settings.workers),
            alignment=lambda: _parse_alignment(settings.alignment),
            status_port=lambda: _parse_int("status port", settings.status_port),
            log_level=lambda: settings.log_level.strip().upper(),
        )
        values = {
            name: overrides[name] if overrides.get(name) is not None else parse()
            for name, parse in parsers.items()
        }
        return cls(**values)
