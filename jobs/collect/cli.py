"""CLI entry point for the metrics collector."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import List, Optional

from common.config import get_settings
from collector.aligner import AlignmentPolicy
from collector.config import CollectorConfig, parse_duration, parse_list, parse_timestamp
from collector.errors import CollectorError

from .runner import build_collector, run_collector

logger = logging.getLogger(__name__)


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="CloudWatch metrics collector (periodic + backfill)")
    p.add_argument("--region", help="AWS region (overrides AWS_REGION)")
    p.add_argument("--period", help="tick period, e.g. 300s or 5m")
    p.add_argument("--interval", type=int, help="sampling interval in seconds (multiple of 60)")
    p.add_argument("--resources", help="comma-separated resource names")
    p.add_argument("--metrics", help="comma-separated metric names")
    p.add_argument("--backfill-date", help="ISO-8601 start of a one-shot backfill")
    p.add_argument("--sink", choices=["redis", "memory"])
    p.add_argument("--workers", type=int)
    p.add_argument("--alignment", choices=[policy.value for policy in AlignmentPolicy])
    p.add_argument("--status-port", type=int)
    p.add_argument("--log-level")
    return p


def load_config(argv: Optional[List[str]] = None) -> CollectorConfig:
    """Entorno + .env, con los argumentos de la CLI por encima."""
    args = _parser().parse_args(argv)
    return CollectorConfig.from_settings(
        get_settings(),
        region=args.region,
        period_seconds=parse_duration(args.period) if args.period else None,
        interval=args.interval,
        resources=parse_list(args.resources) if args.resources else None,
        metrics=parse_list(args.metrics) if args.metrics else None,
        backfill_date=parse_timestamp(args.backfill_date) if args.backfill_date else None,
        sink=args.sink,
        workers=args.workers,
        alignment=AlignmentPolicy(args.alignment) if args.alignment else None,
        status_port=args.status_port,
        log_level=args.log_level.upper() if args.log_level else None,
    )


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    try:
        cfg = load_config(argv)
        logging.getLogger().setLevel(cfg.log_level)
        collector = build_collector(cfg)
    except CollectorError as e:
        logger.error("Error de configuración: %s", e)
        return 1

    def _stop(signum, _frame):
        logger.info("signal %d received, stopping", signum)
        collector.scheduler.stop()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)

    logger.info("collector is running! Hit CTRL-C to stop it.")
    logger.info(
        "Config: region=%s period=%.1fs interval=%ds metrics=%s backfill=%s",
        cfg.region,
        cfg.period_seconds,
        cfg.interval,
        ",".join(cfg.metrics),
        cfg.backfill_date.isoformat() if cfg.backfill_date else "-",
    )
    state = run_collector(collector, status_port=cfg.status_port)
    logger.info("collector stopped mode=%s cycles=%d", state.mode.value, state.cycles)
    return 0


if __name__ == "__main__":
    sys.exit(main())
