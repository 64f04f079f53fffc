from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CycleOut(BaseModel):
    mode: str
    start: datetime
    end: datetime
    resources: int
    resources_ok: int
    resources_failed: int
    fetch_failed: int
    alignment_failed: int
    events: int
    emit_failed: int
    duration_ms: float
    started_at: datetime
    finished_at: Optional[datetime] = None


class StatusOut(BaseModel):
    mode: str
    phase: str
    watermark: datetime
    cycles: int = Field(..., ge=0)
    interval: int
    period_seconds: float
    resources: List[str] = Field(default_factory=list)
    metrics: List[str] = Field(default_factory=list)
    events_sent: int = 0
    events_failed: int = 0
    last_cycle: Optional[CycleOut] = None
