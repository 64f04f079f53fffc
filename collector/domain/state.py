"""CollectionState - estado inmutable por ciclo del scheduler."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Tuple

from .time_range import ensure_utc


class CollectionMode(Enum):
    PERIODIC = "periodic"
    BACKFILL = "backfill"


class SchedulerPhase(Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class CollectionState:
    """Estado del colector.

    Se reemplaza (nunca se muta) al final de cada ciclo. ``watermark`` es el
    límite inferior exclusivo de la siguiente ventana y solo avanza.
    """
    watermark: datetime
    mode: CollectionMode
    resources: Tuple[str, ...]
    metrics: Tuple[str, ...]
    interval: int
    phase: SchedulerPhase = SchedulerPhase.IDLE
    cycles: int = 0

    def __post_init__(self):
        object.__setattr__(self, "watermark", ensure_utc(self.watermark))
        object.__setattr__(self, "resources", tuple(self.resources))
        object.__setattr__(self, "metrics", tuple(self.metrics))

    def with_phase(self, phase: SchedulerPhase) -> CollectionState:
        return dataclasses.replace(self, phase=phase)

    def advance(self, watermark: datetime) -> CollectionState:
        """Ciclo completado: nuevo watermark, contador +1, vuelta a IDLE."""
        watermark = ensure_utc(watermark)
        if watermark < self.watermark:
            watermark = self.watermark
        return dataclasses.replace(
            self,
            watermark=watermark,
            phase=SchedulerPhase.IDLE,
            cycles=self.cycles + 1,
        )

    @property
    def terminated(self) -> bool:
        return self.phase is SchedulerPhase.TERMINATED

    def to_dict(self) -> dict:
        return {
            "watermark": self.watermark.isoformat(),
            "mode": self.mode.value,
            "phase": self.phase.value,
            "cycles": self.cycles,
            "resources": list(self.resources),
            "metrics": list(self.metrics),
            "interval": self.interval,
        }
