"""Interfaz abstracta del sink de eventos.

Desacopla el colector del destino concreto (Redis Streams, memoria).
"""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Protocol


class EventSink(Protocol):
    """Destino de los documentos de evento.

    ``publish`` entrega un documento y lanza excepción si no puede. Las
    garantías de entrega son responsabilidad de la implementación.
    """

    def publish(self, document: Dict[str, Any]) -> None:
        ...

    def is_connected(self) -> bool:
        ...


class InMemorySink:
    """Sink en memoria para tests y ejecuciones en seco."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: List[Dict[str, Any]] = []

    def publish(self, document: Dict[str, Any]) -> None:
        with self._lock:
            self._documents.append(document)

    def is_connected(self) -> bool:
        return True

    @property
    def documents(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._documents)
