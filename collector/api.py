from __future__ import annotations

import logging
import threading

import uvicorn
from fastapi import FastAPI

from .emitter import EventEmitter
from .endpoints import health_router
from .scheduler import CollectionScheduler

logger = logging.getLogger(__name__)


def create_app(scheduler: CollectionScheduler, emitter: EventEmitter) -> FastAPI:
    app = FastAPI(title="Lambda Metrics Collector", version="0.1.0")
    app.state.scheduler = scheduler
    app.state.emitter = emitter
    app.include_router(health_router)
    return app


def start_status_server(app: FastAPI, port: int, host: str = "0.0.0.0") -> threading.Thread:
    """Sirve la app de estado en un hilo daemon (no bloquea el scheduler)."""
    config = uvicorn.Config(app, host=host, port=port, log_level="warning")
    server = uvicorn.Server(config)
    thread = threading.Thread(target=server.run, name="status-server", daemon=True)
    thread.start()
    logger.info("status server listening on %s:%d", host, port)
    return thread
