"""Colector de métricas CloudWatch → eventos → sink.

Módulos:
- partitioner: partición de rangos de tiempo (MAX_DATAPOINTS)
- fetcher: SeriesFetcher sobre el cliente de métricas remoto
- aligner: merge de series por índice en MergedEvents
- scheduler: CollectionScheduler (periodic / backfill)
- emitter: EventEmitter hacia el sink
"""

from .aligner import AlignmentPolicy, SeriesAligner
from .emitter import EventEmitter
from .fetcher import SeriesFetcher
from .partitioner import (
    MAX_DATAPOINTS,
    exceeds_max_datapoints_threshold,
    partition_date_range,
)
from .scheduler import CollectionScheduler

__all__ = [
    "AlignmentPolicy",
    "CollectionScheduler",
    "EventEmitter",
    "MAX_DATAPOINTS",
    "SeriesAligner",
    "SeriesFetcher",
    "exceeds_max_datapoints_threshold",
    "partition_date_range",
]
