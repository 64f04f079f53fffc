"""Publicador de eventos a Redis Streams."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import redis

from ..errors import SinkError

logger = logging.getLogger(__name__)

DEFAULT_STREAM = "metrics:lambda"
DEFAULT_MAX_LEN = 100000


class RedisConnection:
    """Gestiona la conexión a Redis."""

    def __init__(self, url: Optional[str] = None):
        self._url = url or os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self._client: Optional[redis.Redis] = None
        self._connected = False

    @property
    def client(self) -> Optional[redis.Redis]:
        return self._client

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def safe_url(self) -> str:
        return self._url.split("@")[-1]

    def connect(self) -> bool:
        """Conecta a Redis."""
        try:
            self._client = redis.Redis.from_url(
                self._url,
                decode_responses=False,
                socket_timeout=5.0,
                socket_connect_timeout=5.0,
            )
            self._client.ping()
            self._connected = True
            logger.info("[REDIS] Connected: %s", self.safe_url)
            return True
        except (redis.RedisError, ValueError) as e:
            self._connected = False
            logger.warning("[REDIS] Connection failed: %s", e)
            return False

    def disconnect(self) -> None:
        """Desconecta de Redis."""
        if self._client is not None:
            try:
                self._client.close()
            except redis.RedisError as e:
                logger.debug("[REDIS] Close failed: %s", e)
        self._connected = False


class RedisStreamSink:
    """Publica documentos de evento a un Redis Stream.

    Responsabilidades:
    - XADD de cada evento como JSON en el campo ``event``
    - Backpressure por maxlen aproximado
    """

    def __init__(
        self,
        connection: RedisConnection,
        stream_name: str = DEFAULT_STREAM,
        max_len: int = DEFAULT_MAX_LEN,
    ):
        self._conn = connection
        self._stream = stream_name
        self._max_len = max_len

    def is_connected(self) -> bool:
        return self._conn.is_connected

    def publish(self, document: Dict[str, Any]) -> None:
        """Publica un documento al stream.

        Raises:
            SinkError: si no hay conexión o Redis rechaza el XADD
        """
        client = self._conn.client
        if client is None or not self._conn.is_connected:
            raise SinkError(f"redis not connected ({self._conn.safe_url})")

        payload = json.dumps(document, default=str)
        try:
            client.xadd(
                self._stream,
                {"event": payload},
                maxlen=self._max_len,
                approximate=True,
            )
        except redis.RedisError as e:
            raise SinkError(f"xadd to {self._stream} failed: {e}") from e

        logger.debug("[REDIS] Published: stream=%s ts=%s", self._stream, document.get("@timestamp"))
