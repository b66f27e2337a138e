from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]


def day_bucket_key(now: datetime) -> str:
    """Start of the calendar day in the process-local timezone."""
    return now.replace(hour=0, minute=0, second=0, microsecond=0).isoformat()


@dataclass
class CacheEntry(Generic[T]):
    bucket_key: str
    value: T


class TimeBucketCache(Generic[T]):
    """
    Compute-once-per-day memoization. Validity is checked lazily on access; an entry
    from an earlier day is recomputed before it is served.
    """

    def __init__(self, name: str, clock: Clock = datetime.now):
        self.name = name
        self._clock = clock
        self._entry: Optional[CacheEntry[T]] = None
        self._lock = asyncio.Lock()

    def current_bucket(self) -> str:
        return day_bucket_key(self._clock())

    def peek(self) -> Optional[T]:
        if self._entry is not None and self._entry.bucket_key == self.current_bucket():
            return self._entry.value
        return None

    async def get_or_compute(self, compute: Callable[[], Awaitable[T]]) -> T:
        cached = self.peek()
        if cached is not None:
            return cached
        # Callers arriving while a computation runs wait for it instead of recomputing.
        async with self._lock:
            cached = self.peek()
            if cached is not None:
                return cached
            bucket = self.current_bucket()
            value = await compute()
            self._entry = CacheEntry(bucket_key=bucket, value=value)
            logger.info("Refreshed %s cache for bucket %s", self.name, bucket)
            return value
