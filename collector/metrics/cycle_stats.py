"""Estadísticas de un ciclo de colección."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..domain.time_range import TimeRange, utc_now


@dataclass
class CycleStats:
    """Contadores de un ciclo (un tick periódico o un sub-rango de backfill)."""

    time_range: TimeRange
    mode: str
    resources: int = 0
    resources_ok: int = 0
    resources_failed: int = 0
    fetch_failed: int = 0
    alignment_failed: int = 0
    events: int = 0
    emit_failed: int = 0
    duration_ms: float = 0.0
    finished_at: Optional[datetime] = None
    started_at: datetime = field(default_factory=utc_now)

    def __str__(self) -> str:
        return (
            f"collection_cycle mode={self.mode} start={self.time_range.start.isoformat()} "
            f"end={self.time_range.end.isoformat()} ms={self.duration_ms:.1f} "
            f"resources={self.resources} ok={self.resources_ok} fail={self.resources_failed} "
            f"events={self.events} emit_fail={self.emit_failed}"
        )

    def to_dict(self) -> dict:
        return {
            "mode": self.mode,
            "start": self.time_range.start.isoformat(),
            "end": self.time_range.end.isoformat(),
            "resources": self.resources,
            "resources_ok": self.resources_ok,
            "resources_failed": self.resources_failed,
            "fetch_failed": self.fetch_failed,
            "alignment_failed": self.alignment_failed,
            "events": self.events,
            "emit_failed": self.emit_failed,
            "duration_ms": round(self.duration_ms, 2),
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
