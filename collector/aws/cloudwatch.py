"""Cliente de consulta CloudWatch (GetMetricStatistics)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import RemoteQueryError

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "AWS/Lambda"
DEFAULT_DIMENSION = "FunctionName"


class CloudWatchQueryClient:
    """Implementa MetricsQueryClient sobre un cliente boto3 de CloudWatch."""

    def __init__(
        self,
        cloudwatch_client: Any,
        namespace: str = DEFAULT_NAMESPACE,
        dimension_name: str = DEFAULT_DIMENSION,
    ):
        self.cloudwatch_client = cloudwatch_client
        self.namespace = namespace
        self.dimension_name = dimension_name

    def get_statistics(
        self,
        resource: str,
        metric: str,
        start: datetime,
        end: datetime,
        period: int,
        statistics: Sequence[str],
    ) -> List[Dict[str, Any]]:
        """Una llamada a get_metric_statistics; devuelve ``Datapoints`` sin ordenar.

        Raises:
            RemoteQueryError: si CloudWatch responde con error
        """
        params = {
            "Namespace": self.namespace,
            "MetricName": metric,
            "Dimensions": [{"Name": self.dimension_name, "Value": resource}],
            "StartTime": start,
            "EndTime": end,
            "Period": period,
            "Statistics": list(statistics),
        }
        try:
            response = self.cloudwatch_client.get_metric_statistics(**params)
        except (ClientError, BotoCoreError) as e:
            raise RemoteQueryError(resource, metric, f"[CLOUDWATCH] {e}") from e

        datapoints = response.get("Datapoints", [])
        logger.debug(
            "[CLOUDWATCH] %s %s=%s %s start=%s end=%s period=%d datapoints=%d",
            self.namespace, self.dimension_name, resource, metric,
            start.isoformat(), end.isoformat(), period, len(datapoints),
        )
        return datapoints
