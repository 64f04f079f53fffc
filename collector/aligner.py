"""SeriesAligner - merge de varias series de un recurso en MergedEvents.

El merge es posicional: el evento ``i`` toma el timestamp de la serie ancla
(primera métrica rastreada) en el índice ``i`` y los estadísticos de todas las
series en ese mismo índice. No se comparan timestamps entre series.

Precondición del API remoto: todas las series cubren el mismo TimeRange con
el mismo intervalo y un datapoint por intervalo, sin huecos. Si no se cumple,
la alineación se corrompe en silencio.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence

from .domain.datapoint import MetricSeries
from .domain.event import MergedEvent
from .errors import AlignmentInconsistency

logger = logging.getLogger(__name__)


class AlignmentPolicy(Enum):
    TRUNCATE = "truncate"  # recorta a la serie más corta
    STRICT = "strict"      # exige longitudes iguales


class SeriesAligner:
    """Alinea series por índice ordinal."""

    def __init__(self, metrics: Sequence[str], policy: AlignmentPolicy = AlignmentPolicy.TRUNCATE):
        if not metrics:
            raise ValueError("at least one metric is required")
        self._metrics = tuple(metrics)
        self._policy = policy

    @property
    def anchor(self) -> str:
        return self._metrics[0]

    def merge(
        self,
        resource: str,
        series_by_metric: Mapping[str, MetricSeries],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> List[MergedEvent]:
        """Construye un MergedEvent por índice compartido.

        Args:
            resource: Recurso al que pertenecen las series
            series_by_metric: Serie por nombre de métrica
            metadata: Campos descriptivos del recurso

        Returns:
            Eventos en orden creciente de timestamp

        Raises:
            AlignmentInconsistency: falta una métrica, una serie vacía frente a
                otras con datos, o longitudes distintas en modo STRICT
        """
        missing = [m for m in self._metrics if m not in series_by_metric]
        if missing:
            raise AlignmentInconsistency(resource, f"missing series for {', '.join(missing)}")

        series = [series_by_metric[m] for m in self._metrics]
        lengths = {s.metric: len(s) for s in series}
        shortest = min(lengths.values())
        longest = max(lengths.values())

        if longest == 0:
            return []

        if shortest != longest:
            if shortest == 0:
                empty = [m for m, n in lengths.items() if n == 0]
                raise AlignmentInconsistency(
                    resource, f"empty series for {', '.join(empty)} while others have data"
                )
            if self._policy is AlignmentPolicy.STRICT:
                raise AlignmentInconsistency(resource, f"series lengths differ: {lengths}")
            logger.warning(
                "alignment_truncated resource=%s lengths=%s kept=%d", resource, lengths, shortest
            )

        meta = dict(metadata or {})
        anchor = series[0]
        events: List[MergedEvent] = []
        for i in range(shortest):
            events.append(
                MergedEvent(
                    timestamp=anchor[i].timestamp,
                    resource=resource,
                    statistics={s.metric: s[i] for s in series},
                    metadata=meta,
                )
            )
        return events
