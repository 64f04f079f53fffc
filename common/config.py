from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _default_env_file() -> str:
    return str(Path.cwd() / ".env")


@dataclass(frozen=True)
class Settings:
    """Valores crudos del entorno; la validación vive en collector.config."""
    period: str
    interval: str
    resources: str
    metrics: str
    backfill_date: str
    region: str

    namespace: str
    dimension: str

    sink: str
    redis_url: str
    stream: str
    stream_maxlen: str

    workers: str
    alignment: str
    status_port: str
    log_level: str


def get_settings() -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("COLLECTOR_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    return Settings(
        period=os.getenv("COLLECTOR_PERIOD", "300s"),
        interval=os.getenv("COLLECTOR_INTERVAL", "60"),
        resources=os.getenv("COLLECTOR_RESOURCES", ""),
        metrics=os.getenv("COLLECTOR_METRICS", ""),
        backfill_date=os.getenv("COLLECTOR_BACKFILL_DATE", ""),
        # No default: the region must be explicit.
        region=os.getenv("AWS_REGION", ""),
        namespace=os.getenv("COLLECTOR_NAMESPACE", "AWS/Lambda"),
        dimension=os.getenv("COLLECTOR_DIMENSION", "FunctionName"),
        sink=os.getenv("COLLECTOR_SINK", "redis"),
        redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        stream=os.getenv("COLLECTOR_STREAM", "metrics:lambda"),
        stream_maxlen=os.getenv("COLLECTOR_STREAM_MAXLEN", "100000"),
        workers=os.getenv("COLLECTOR_WORKERS", "1"),
        alignment=os.getenv("COLLECTOR_ALIGNMENT", "truncate"),
        status_port=os.getenv("COLLECTOR_STATUS_PORT", "0"),
        log_level=os.getenv("COLLECTOR_LOG_LEVEL", "INFO"),
    )
