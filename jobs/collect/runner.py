"""Collector wiring: builds clients, sink and scheduler from configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from collector.aligner import SeriesAligner
from collector.api import create_app, start_status_server
from collector.aws import CloudWatchQueryClient, FunctionMetadataLookup, create_client, list_all_functions
from collector.config import CollectorConfig
from collector.domain.state import CollectionState
from collector.emitter import EventEmitter
from collector.errors import ConfigError
from collector.fetcher import SeriesFetcher
from collector.scheduler import CollectionScheduler, initial_state
from collector.sinks import EventSink, InMemorySink, RedisConnection, RedisStreamSink

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, str], Any]


@dataclass
class Collector:
    scheduler: CollectionScheduler
    emitter: EventEmitter
    redis: Optional[RedisConnection] = None

    def close(self) -> None:
        if self.redis is not None:
            self.redis.disconnect()


def create_sink(config: CollectorConfig) -> tuple[EventSink, Optional[RedisConnection]]:
    """Sink según configuración. Redis inalcanzable es fatal al arrancar."""
    if config.sink == "memory":
        logger.info("[SINK] Using InMemory sink")
        return InMemorySink(), None

    conn = RedisConnection(config.redis_url)
    if not conn.connect():
        raise ConfigError(f"redis unavailable at {conn.safe_url}")
    logger.info("[SINK] Using Redis Streams sink: stream=%s", config.stream)
    return RedisStreamSink(conn, stream_name=config.stream, max_len=config.stream_maxlen), conn


def build_collector(
    config: CollectorConfig,
    client_factory: ClientFactory = create_client,
    sink: Optional[EventSink] = None,
) -> Collector:
    """Construye todos los componentes. Cualquier fallo aquí es fatal."""
    lambda_client = client_factory("lambda", config.region)

    resources = config.resources
    if not resources:
        resources = tuple(list_all_functions(lambda_client))
        logger.info("No functions configured, using: %s", ", ".join(resources))
    if not resources:
        raise ConfigError("no resources configured and none found in region %s" % config.region)

    metadata: Dict[str, Dict[str, Any]] = FunctionMetadataLookup(lambda_client).fetch_all(resources)

    query_client = CloudWatchQueryClient(
        client_factory("cloudwatch", config.region),
        namespace=config.namespace,
        dimension_name=config.dimension,
    )
    fetcher = SeriesFetcher(query_client, config.interval)
    aligner = SeriesAligner(config.metrics, policy=config.alignment)

    redis_conn = None
    if sink is None:
        sink, redis_conn = create_sink(config)
    emitter = EventEmitter(sink, resource_field=_resource_field(config.dimension))

    state: CollectionState = initial_state(
        resources, config.metrics, config.interval, backfill_start=config.backfill_date
    )
    scheduler = CollectionScheduler(
        state,
        fetcher,
        aligner,
        emitter,
        period=config.period_seconds,
        metadata=metadata,
        workers=config.workers,
    )

    logger.debug("Initializing collector")
    logger.debug("Period: %.1fs", config.period_seconds)
    logger.debug("Functions: %s", resources)
    logger.debug("Time: %s", state.watermark.isoformat())
    return Collector(scheduler=scheduler, emitter=emitter, redis=redis_conn)


def _resource_field(dimension: str) -> str:
    # FunctionName -> function
    if dimension.endswith("Name") and len(dimension) > 4:
        dimension = dimension[: -len("Name")]
    return dimension.lower()


def run_collector(collector: Collector, status_port: int = 0) -> CollectionState:
    """Corre el scheduler hasta que se cancele o termine el backfill."""
    if status_port:
        start_status_server(create_app(collector.scheduler, collector.emitter), status_port)
    try:
        return collector.scheduler.run()
    finally:
        collector.close()
