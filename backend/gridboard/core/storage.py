"""Durable key-value storage for persisted dashboard state.

Keys: gridboard:<name> — dashboards, data_sources, hints_dismissed.

Best-effort on both paths: a Redis outage is logged and counted, never raised.
The in-memory state of the running process stays authoritative.
"""

import json
import logging
import time
from typing import Any

from redis.asyncio import Redis

from gridboard.core.config import settings
from gridboard.core.metrics import (
    storage_operation_duration_seconds,
    storage_operations_total,
)

logger = logging.getLogger(__name__)

DASHBOARDS_KEY = "dashboards"
DATA_SOURCES_KEY = "data_sources"
HINTS_DISMISSED_KEY = "hints_dismissed"


class LocalStorage:
    """JSON values in Redis, overwritten wholesale on every write."""

    def __init__(self, redis: Redis, key_prefix: str | None = None):
        self._redis = redis
        self._prefix = (
            key_prefix if key_prefix is not None else settings.storage.storage_key_prefix
        )

    def _key(self, name: str) -> str:
        return f"{self._prefix}{name}"

    async def get_json(self, name: str) -> Any | None:
        """Read and decode a value. Returns None on miss, decode error, or Redis error."""
        try:
            start = time.monotonic()
            raw = await self._redis.get(self._key(name))
            storage_operation_duration_seconds.labels(key=name, operation="get").observe(
                time.monotonic() - start
            )
        except Exception:
            storage_operations_total.labels(key=name, operation="get", status="error").inc()
            logger.warning("Storage read failed for key %s", name, exc_info=True)
            return None

        if raw is None:
            storage_operations_total.labels(key=name, operation="get", status="miss").inc()
            return None

        try:
            value = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            storage_operations_total.labels(key=name, operation="get", status="error").inc()
            logger.warning("Discarding undecodable value stored under key %s", name)
            return None

        storage_operations_total.labels(key=name, operation="get", status="hit").inc()
        return value

    async def set_json(self, name: str, value: Any) -> bool:
        """Encode and write a value. Errors logged, not raised. Returns success."""
        try:
            payload = json.dumps(value)
            start = time.monotonic()
            await self._redis.set(self._key(name), payload)
            storage_operation_duration_seconds.labels(key=name, operation="set").observe(
                time.monotonic() - start
            )
        except Exception:
            storage_operations_total.labels(key=name, operation="set", status="error").inc()
            logger.warning("Storage write failed for key %s", name, exc_info=True)
            return False

        storage_operations_total.labels(key=name, operation="set", status="ok").inc()
        return True

    async def get_flag(self, name: str) -> bool:
        return (await self.get_json(name)) is True

    async def set_flag(self, name: str, value: bool) -> bool:
        return await self.set_json(name, bool(value))
