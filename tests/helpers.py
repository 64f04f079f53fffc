"""Helpers de test: series sintéticas, cliente de métricas falso y reloj."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Sequence, Set, Tuple

from collector.domain.datapoint import Datapoint, MetricSeries
from collector.domain.time_range import TimeRange

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_series(
    metric: str,
    n: int,
    *,
    resource: str = "fn-a",
    start: datetime = T0,
    interval: int = 60,
    base: float = 0.0,
) -> MetricSeries:
    """Serie de ``n`` datapoints espaciados por ``interval``."""
    points = tuple(
        Datapoint(
            timestamp=start + timedelta(seconds=i * interval),
            average=base + i,
            maximum=base + i + 1,
            minimum=base + i - 1,
            sum=(base + i) * 2,
            sample_count=2.0,
            unit="Count",
        )
        for i in range(n)
    )
    time_range = TimeRange(start, start + timedelta(seconds=max(n, 1) * interval))
    return MetricSeries(resource=resource, metric=metric, time_range=time_range, datapoints=points)


class FakeQueryClient:
    """MetricsQueryClient en memoria.

    Genera un datapoint por periodo dentro de [start, end), devueltos en orden
    inverso para forzar el ordenado del fetcher.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, datetime, datetime, int]] = []
        self.failures: Set[Tuple[str, str]] = set()
        self.drop_last: Set[Tuple[str, str]] = set()
        self.empty: Set[Tuple[str, str]] = set()

    def get_statistics(
        self,
        resource: str,
        metric: str,
        start: datetime,
        end: datetime,
        period: int,
        statistics: Sequence[str],
    ) -> List[Dict[str, Any]]:
        self.calls.append((resource, metric, start, end, period))
        if (resource, metric) in self.failures:
            raise RuntimeError(f"throttled {resource}/{metric}")
        if (resource, metric) in self.empty:
            return []
        points: List[Dict[str, Any]] = []
        t = start
        while t < end:
            points.append({
                "Timestamp": t,
                "Average": 1.5,
                "Maximum": 3.0,
                "Minimum": 0.0,
                "Sum": 3.0,
                "SampleCount": 2.0,
                "Unit": "Count",
            })
            t += timedelta(seconds=period)
        if (resource, metric) in self.drop_last and points:
            points.pop()
        points.reverse()
        return points


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)
