"""CollectionScheduler - máquina de estados del colector.

Fases: IDLE -> COLLECTING -> (IDLE | TERMINATED).

- PERIODIC: en cada tick colecciona [watermark, now), partido si supera
  MAX_DATAPOINTS muestras, emite y avanza el watermark a ``now``.
  Corre hasta que se cancela desde fuera.
- BACKFILL: en el primer tick parte [backfill_start, now) en sub-rangos de
  MAX_DATAPOINTS muestras, los recorre en orden y termina.

El estado (CollectionState) es inmutable: cada ciclo recibe el estado vigente
y al terminar se reemplaza por uno nuevo.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from .aligner import SeriesAligner
from .domain.event import MergedEvent
from .domain.state import CollectionMode, CollectionState, SchedulerPhase
from .domain.time_range import TimeRange, utc_now
from .emitter import EventEmitter
from .errors import AlignmentInconsistency, RemoteQueryError, SchedulerTerminated, SinkError
from .fetcher import SeriesFetcher
from .metrics.cycle_stats import CycleStats
from .partitioner import MAX_DATAPOINTS, exceeds_max_datapoints_threshold, partition_date_range

logger = logging.getLogger(__name__)

_Outcome = Union[List[MergedEvent], RemoteQueryError, AlignmentInconsistency]


def initial_state(
    resources: Sequence[str],
    metrics: Sequence[str],
    interval: int,
    backfill_start: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> CollectionState:
    """Estado de arranque: BACKFILL si hay fecha de backfill, si no PERIODIC desde now."""
    if backfill_start is not None:
        return CollectionState(
            watermark=backfill_start,
            mode=CollectionMode.BACKFILL,
            resources=tuple(resources),
            metrics=tuple(metrics),
            interval=interval,
        )
    return CollectionState(
        watermark=now or utc_now(),
        mode=CollectionMode.PERIODIC,
        resources=tuple(resources),
        metrics=tuple(metrics),
        interval=interval,
    )


class CollectionScheduler:
    """Conduce los ciclos de colección fetch -> align -> emit."""

    def __init__(
        self,
        state: CollectionState,
        fetcher: SeriesFetcher,
        aligner: SeriesAligner,
        emitter: EventEmitter,
        *,
        period: float,
        metadata: Optional[Mapping[str, Mapping[str, Any]]] = None,
        clock: Callable[[], datetime] = utc_now,
        workers: int = 1,
        max_datapoints: int = MAX_DATAPOINTS,
    ):
        self._state = state
        self._fetcher = fetcher
        self._aligner = aligner
        self._emitter = emitter
        self._period = period
        self._metadata: Dict[str, Mapping[str, Any]] = dict(metadata or {})
        self._clock = clock
        self._workers = max(1, workers)
        self._max_datapoints = max_datapoints
        self._stop_event = threading.Event()
        self._last_cycle: Optional[CycleStats] = None

    @property
    def state(self) -> CollectionState:
        return self._state

    @property
    def last_cycle(self) -> Optional[CycleStats]:
        return self._last_cycle

    @property
    def period(self) -> float:
        return self._period

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Cancela el loop antes del siguiente tick."""
        self._stop_event.set()

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def run(self) -> CollectionState:
        """Loop de ticks. Vuelve al cancelarse o al terminar un backfill."""
        logger.info(
            "collector running mode=%s period=%.1fs resources=%d metrics=%s",
            self._state.mode.value,
            self._period,
            len(self._state.resources),
            ",".join(self._state.metrics),
        )
        while not self._stop_event.wait(self._period):
            try:
                self.tick()
            except SchedulerTerminated:
                break
            except Exception as e:
                logger.exception("Error en tick: %s", e)
                self._state = self._state.with_phase(SchedulerPhase.IDLE)
                logger.info("Continuando con siguiente tick...")
                continue
            if self._state.terminated:
                logger.info("backfill complete, shutting down")
                break
        return self._state

    def tick(self) -> CollectionState:
        """Ejecuta un tick según el modo y devuelve el nuevo estado.

        Raises:
            SchedulerTerminated: si el backfill ya terminó
        """
        state = self._state
        if state.terminated:
            raise SchedulerTerminated("scheduler terminated, no further ticks accepted")

        now = self._clock()
        if state.mode is CollectionMode.BACKFILL:
            self._run_backfill(now)
        else:
            self._run_periodic(now)
        return self._state

    def _run_periodic(self, now: datetime) -> None:
        state = self._state.with_phase(SchedulerPhase.COLLECTING)
        self._state = state
        time_range = TimeRange(state.watermark, max(now, state.watermark))
        logger.info("Running periodically: %s", time_range)
        if exceeds_max_datapoints_threshold(
            time_range.start, time_range.end, state.interval, self._max_datapoints
        ):
            # ventana atrasada (tick demorado o period largo): se parte igual que un backfill
            ranges = partition_date_range(
                time_range.start, time_range.end, state.interval, max_datapoints=self._max_datapoints
            )
            logger.warning("periodic window split: %s ranges=%d", time_range, len(ranges))
            for r in ranges:
                self.run_cycle(state, r.clamp(now))
        else:
            self.run_cycle(state, time_range)
        self._state = state.advance(now)

    def _run_backfill(self, now: datetime) -> None:
        state = self._state
        ranges = partition_date_range(
            state.watermark, now, state.interval, max_datapoints=self._max_datapoints
        )
        logger.info(
            "Running backfill from date: %s ranges=%d", state.watermark.isoformat(), len(ranges)
        )

        for r in ranges:
            if self._stop_event.is_set():
                logger.warning("backfill cancelled at %s", r.start.isoformat())
                break
            logger.info("start: %s, end: %s", r.start.isoformat(), r.end.isoformat())
            state = dataclasses.replace(state, watermark=r.start, phase=SchedulerPhase.COLLECTING)
            self._state = state
            self.run_cycle(state, r.clamp(now))
            state = state.advance(r.start)
            self._state = state

        self._state = state.with_phase(SchedulerPhase.TERMINATED)

    # ------------------------------------------------------------------
    # Ciclo
    # ------------------------------------------------------------------

    def run_cycle(self, state: CollectionState, time_range: TimeRange) -> CycleStats:
        """Un ciclo completo para todos los recursos, en orden configurado.

        Fail-soft: un fallo de fetch o de alineación salta el recurso, un
        fallo del sink salta el evento. El ciclo nunca se aborta.
        """
        stats = CycleStats(
            time_range=time_range,
            mode=state.mode.value,
            resources=len(state.resources),
        )
        t0 = time.monotonic()

        for resource, outcome in self._outcomes(state, time_range):
            if isinstance(outcome, RemoteQueryError):
                stats.resources_failed += 1
                stats.fetch_failed += 1
                logger.error(
                    "fetch_failed resource=%s metric=%s err=%s", resource, outcome.metric, outcome
                )
                continue
            if isinstance(outcome, AlignmentInconsistency):
                stats.resources_failed += 1
                stats.alignment_failed += 1
                logger.error("alignment_failed resource=%s err=%s", resource, outcome)
                continue

            stats.resources_ok += 1
            for event in outcome:
                try:
                    self._emitter.emit(event)
                    stats.events += 1
                except SinkError as e:
                    stats.emit_failed += 1
                    logger.error("emit_failed resource=%s err=%s", resource, e)

        stats.duration_ms = (time.monotonic() - t0) * 1000
        stats.finished_at = utc_now()
        self._last_cycle = stats
        logger.info("%s", stats)
        return stats

    def _outcomes(
        self, state: CollectionState, time_range: TimeRange
    ) -> Iterator[Tuple[str, _Outcome]]:
        """(recurso, eventos | error) en el orden configurado de recursos."""
        if self._workers == 1 or len(state.resources) < 2:
            for resource in state.resources:
                yield resource, self._try_collect(state, resource, time_range)
            return

        with ThreadPoolExecutor(max_workers=self._workers) as pool:
            futures = [
                (resource, pool.submit(self._try_collect, state, resource, time_range))
                for resource in state.resources
            ]
            for resource, fut in futures:
                yield resource, fut.result()

    def _try_collect(self, state: CollectionState, resource: str, time_range: TimeRange) -> _Outcome:
        try:
            return self.collect_resource(state, resource, time_range)
        except (RemoteQueryError, AlignmentInconsistency) as e:
            return e

    def collect_resource(
        self, state: CollectionState, resource: str, time_range: TimeRange
    ) -> List[MergedEvent]:
        """Fetch de cada métrica del recurso y merge en eventos.

        Raises:
            RemoteQueryError: en la primera métrica que falle
            AlignmentInconsistency: si las series no se pueden alinear
        """
        series_by_metric = {
            metric: self._fetcher.fetch(resource, metric, time_range)
            for metric in state.metrics
        }
        return self._aligner.merge(resource, series_by_metric, self._metadata.get(resource))
