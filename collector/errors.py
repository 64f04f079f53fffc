"""Errores del colector."""

from __future__ import annotations


class CollectorError(Exception):
    """Base de todos los errores del colector."""


class ConfigError(CollectorError):
    """Configuración inválida o incompleta. Fatal al arrancar."""


class RemoteQueryError(CollectorError):
    """Fallo consultando una serie al API de métricas remoto."""

    def __init__(self, resource: str, metric: str, message: str):
        super().__init__(f"{resource}/{metric}: {message}")
        self.resource = resource
        self.metric = metric


class SinkError(CollectorError):
    """Fallo entregando un evento al sink."""


class AlignmentInconsistency(CollectorError):
    """Las series de un recurso no se pueden alinear por índice."""

    def __init__(self, resource: str, message: str):
        super().__init__(f"{resource}: {message}")
        self.resource = resource


class SchedulerTerminated(CollectorError):
    """El scheduler terminó (backfill agotado) y no acepta más ticks."""
