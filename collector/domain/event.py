"""MergedEvent - un evento por timestamp con todas las métricas del recurso."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping

from .datapoint import Datapoint

DEFAULT_RESOURCE_FIELD = "function"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def metric_key(metric: str) -> str:
    """Invocations -> invocations, ConcurrentExecutions -> concurrent-executions."""
    return _CAMEL_BOUNDARY.sub("-", metric).replace("_", "-").lower()


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 UTC con milisegundos y sufijo Z."""
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class MergedEvent:
    """Evento combinado de todas las métricas de un recurso en un timestamp.

    ``statistics`` mantiene el orden de las métricas rastreadas; la primera
    es la métrica ancla que aporta el timestamp.
    """
    timestamp: datetime
    resource: str
    statistics: Mapping[str, Datapoint]
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def to_document(self, resource_field: str = DEFAULT_RESOURCE_FIELD) -> Dict[str, Any]:
        """Documento plano listo para el sink.

        Returns:
            Dict con @timestamp, type, recurso, metadata y
            ``<metric>-<statistic>`` por cada métrica
        """
        doc: Dict[str, Any] = {
            "@timestamp": format_timestamp(self.timestamp),
            "type": "metric",
            resource_field: self.resource,
        }
        doc.update(self.metadata)
        for metric, datapoint in self.statistics.items():
            prefix = metric_key(metric)
            for stat, value in datapoint.statistics().items():
                doc[f"{prefix}-{stat}"] = value
        return doc
