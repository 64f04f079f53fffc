"""Partición de rangos de tiempo.

El API remoto devuelve como mucho MAX_DATAPOINTS muestras por consulta, así que
cualquier rango largo (backfill) se divide en sub-rangos contiguos de
``MAX_DATAPOINTS * interval`` segundos.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List

from .domain.time_range import TimeRange, ensure_utc

MAX_DATAPOINTS = 1440


def _check_interval(interval: int) -> None:
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")


def exceeds_max_datapoints_threshold(
    start: datetime,
    end: datetime,
    interval: int,
    max_datapoints: int = MAX_DATAPOINTS,
) -> bool:
    """True si ``(end - start) / interval`` supera ``max_datapoints``."""
    _check_interval(interval)
    seconds_between = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    return seconds_between > max_datapoints * interval


def partition_date_range(
    start: datetime,
    end: datetime,
    interval: int,
    max_datapoints: int = MAX_DATAPOINTS,
) -> List[TimeRange]:
    """Divide [start, end) en rangos de como mucho ``max_datapoints`` muestras.

    Los rangos son contiguos y sin solapes. El último puede terminar después
    de ``end``: no se recorta aquí, quien consulta debe usar ``end`` como tope.

    Args:
        start: Inicio del rango
        end: Fin del rango (exclusivo)
        interval: Intervalo de muestreo en segundos

    Returns:
        Lista ordenada de TimeRange (vacía si start >= end)
    """
    _check_interval(interval)
    start = ensure_utc(start)
    end = ensure_utc(end)
    offset = timedelta(seconds=max_datapoints * interval)

    ranges: List[TimeRange] = []
    t = start
    while t < end:
        ranges.append(TimeRange(t, t + offset))
        t += offset
    return ranges
