"""
Adapters: Rate caches.

Implement the RateCache port. Keys map to Decimal values with a TTL.

- MemoryRateCache: process-local, for development and tests.
- RedisRateCache: shared between API workers.
"""

import logging
import threading
import time
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

import redis

from app.domain.trading.ports import RateCache

logger = logging.getLogger(__name__)


class MemoryRateCache(RateCache):
    """Dictionary-backed cache with monotonic-clock expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[Decimal, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Decimal]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Decimal, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)


class RedisRateCache(RateCache):
    """Redis-backed cache. Values are stored as decimal strings.

    A Redis outage degrades to cache misses; it never fails a request.
    """

    def __init__(self, client: redis.Redis, prefix: str = "rates:") -> None:
        self._client = client
        self._prefix = prefix

    def get(self, key: str) -> Optional[Decimal]:
        try:
            raw = self._client.get(self._prefix + key)
        except redis.RedisError as exc:
            logger.warning("Redis GET %s failed: %s", key, exc)
            return None
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return Decimal(raw)
        except InvalidOperation:
            logger.warning("Discarding malformed cached rate for %s", key)
            return None

    def set(self, key: str, value: Decimal, ttl_seconds: int) -> None:
        try:
            self._client.setex(self._prefix + key, ttl_seconds, str(value))
        except redis.RedisError as exc:
            logger.warning("Redis SETEX %s failed: %s", key, exc)
