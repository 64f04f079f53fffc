"""Collector job: wiring and CLI entry point.

Modules:
- runner: build components from CollectorConfig and drive the scheduler
- cli: CLI entry point (main)
"""

from .runner import build_collector, run_collector
from .cli import main

__all__ = ["build_collector", "run_collector", "main"]
