"""Datapoint y MetricSeries.

Un Datapoint es una muestra estadística del API remoto (formato CloudWatch)
para una métrica en un timestamp. MetricSeries agrupa los datapoints de un
par (recurso, métrica) sobre un TimeRange, ordenados por timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, Optional, Tuple

from .time_range import TimeRange, ensure_utc


def _as_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


@dataclass(frozen=True)
class Datapoint:
    """Muestra estadística de una métrica en un timestamp."""
    timestamp: datetime
    average: Optional[float] = None
    maximum: Optional[float] = None
    minimum: Optional[float] = None
    sum: Optional[float] = None
    sample_count: Optional[float] = None
    unit: Optional[str] = None

    @classmethod
    def from_cloudwatch(cls, raw: Dict[str, Any]) -> Datapoint:
        """Construye un Datapoint desde un dict de ``get_metric_statistics``.

        Args:
            raw: Datapoint tal como lo devuelve boto3 (Timestamp, Average, ...)

        Returns:
            Datapoint con timestamp en UTC
        """
        return cls(
            timestamp=ensure_utc(raw["Timestamp"]),
            average=_as_float(raw.get("Average")),
            maximum=_as_float(raw.get("Maximum")),
            minimum=_as_float(raw.get("Minimum")),
            sum=_as_float(raw.get("Sum")),
            sample_count=_as_float(raw.get("SampleCount")),
            unit=raw.get("Unit"),
        )

    def statistics(self) -> Dict[str, Any]:
        """Estadísticos con las claves del documento de salida."""
        return {
            "average": self.average,
            "maximum": self.maximum,
            "minimum": self.minimum,
            "sum": self.sum,
            "sample-count": self.sample_count,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class MetricSeries:
    """Serie ordenada de datapoints para (recurso, métrica) en un rango."""
    resource: str
    metric: str
    time_range: TimeRange
    datapoints: Tuple[Datapoint, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.datapoints)

    def __iter__(self) -> Iterator[Datapoint]:
        return iter(self.datapoints)

    def __getitem__(self, index: int) -> Datapoint:
        return self.datapoints[index]
