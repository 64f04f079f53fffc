"""Sinks de eventos."""

from .base import EventSink, InMemorySink
from .redis_stream import RedisConnection, RedisStreamSink

__all__ = ["EventSink", "InMemorySink", "RedisConnection", "RedisStreamSink"]
