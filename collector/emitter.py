"""EventEmitter - entrega MergedEvents al sink, uno por llamada."""

from __future__ import annotations

import logging

from .domain.event import DEFAULT_RESOURCE_FIELD, MergedEvent
from .errors import SinkError
from .sinks.base import EventSink

logger = logging.getLogger(__name__)


class EventEmitter:
    """Sin buffering ni retry: cada fallo se reporta al llamador."""

    def __init__(self, sink: EventSink, resource_field: str = DEFAULT_RESOURCE_FIELD):
        self._sink = sink
        self._resource_field = resource_field
        self.sent = 0
        self.failed = 0

    @property
    def sink(self) -> EventSink:
        return self._sink

    def emit(self, event: MergedEvent) -> None:
        """Envía un evento.

        Raises:
            SinkError: si el sink no acepta el evento
        """
        document = event.to_document(self._resource_field)
        try:
            self._sink.publish(document)
        except SinkError:
            self.failed += 1
            raise
        except Exception as e:
            self.failed += 1
            raise SinkError(f"publish failed for {event.resource}: {e}") from e
        self.sent += 1
        logger.debug("Event sent resource=%s ts=%s", event.resource, document["@timestamp"])
