"""SeriesFetcher - obtiene una MetricSeries del API de métricas remoto."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Protocol, Sequence, Tuple

from .domain.datapoint import Datapoint, MetricSeries
from .domain.time_range import TimeRange
from .errors import RemoteQueryError

logger = logging.getLogger(__name__)

STANDARD_STATISTICS: Tuple[str, ...] = ("Average", "Maximum", "Minimum", "SampleCount", "Sum")


class MetricsQueryClient(Protocol):
    """Colaborador remoto: GetStatistics."""

    def get_statistics(
        self,
        resource: str,
        metric: str,
        start: datetime,
        end: datetime,
        period: int,
        statistics: Sequence[str],
    ) -> List[Dict[str, Any]]:
        """Devuelve los datapoints crudos (formato CloudWatch) del rango."""
        ...


class SeriesFetcher:
    """Una consulta por (recurso, métrica, rango). Sin retry ni batching.

    El orden ascendente por timestamp lo garantiza este componente, aunque el
    API remoto no lo haga.
    """

    def __init__(
        self,
        client: MetricsQueryClient,
        interval: int,
        statistics: Sequence[str] = STANDARD_STATISTICS,
    ):
        self._client = client
        self._interval = interval
        self._statistics = tuple(statistics)

    def fetch(self, resource: str, metric: str, time_range: TimeRange) -> MetricSeries:
        """Obtiene la serie de ``metric`` para ``resource`` en ``time_range``.

        Raises:
            RemoteQueryError: si el cliente remoto falla o devuelve basura
        """
        try:
            raw = self._client.get_statistics(
                resource,
                metric,
                time_range.start,
                time_range.end,
                self._interval,
                self._statistics,
            )
            datapoints = [Datapoint.from_cloudwatch(d) for d in raw or ()]
        except RemoteQueryError:
            raise
        except Exception as e:
            raise RemoteQueryError(resource, metric, str(e)) from e

        datapoints.sort(key=lambda d: d.timestamp)
        logger.debug(
            "fetched resource=%s metric=%s range=%s datapoints=%d",
            resource, metric, time_range, len(datapoints),
        )
        return MetricSeries(
            resource=resource,
            metric=metric,
            time_range=time_range,
            datapoints=tuple(datapoints),
        )
