"""Health, readiness y estado del scheduler."""

from fastapi import APIRouter, HTTPException, Request

from ..schemas import StatusOut

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Liveness probe, always returns ok if process is running."""
    return {"status": "ok"}


@router.get("/ready")
def ready(request: Request):
    """Readiness probe: el sink está conectado y el scheduler no terminó."""
    scheduler = request.app.state.scheduler
    emitter = request.app.state.emitter
    if scheduler.state.terminated or not emitter.sink.is_connected():
        raise HTTPException(status_code=503, detail="not ready")
    return {"status": "ready"}


@router.get("/status", response_model=StatusOut)
def status(request: Request):
    """Snapshot del estado de colección y del último ciclo."""
    scheduler = request.app.state.scheduler
    emitter = request.app.state.emitter
    state = scheduler.state
    last = scheduler.last_cycle
    return StatusOut(
        mode=state.mode.value,
        phase=state.phase.value,
        watermark=state.watermark,
        cycles=state.cycles,
        interval=state.interval,
        period_seconds=scheduler.period,
        resources=list(state.resources),
        metrics=list(state.metrics),
        events_sent=emitter.sent,
        events_failed=emitter.failed,
        last_cycle=last.to_dict() if last else None,
    )
