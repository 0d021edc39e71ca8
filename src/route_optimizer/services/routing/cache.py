"""In-process result cache keyed by the geographic input of a request."""

from __future__ import annotations

import base64
import hashlib
import json
import logging
import threading
import time
from collections import OrderedDict
from functools import lru_cache
from typing import Callable, Generic, Literal, Optional, TypeVar

from ...config import settings
from ...schemas.routing import OptimizeRouteRequest

logger = logging.getLogger(__name__)

V = TypeVar("V")


def build_cache_key(payload: OptimizeRouteRequest, scope: Literal["full", "locations"] = "full") -> str:
    """Derive a cache key from pickup, via points (caller order) and destination.

    Coordinates are fixed to 6 decimals; ``id`` fields never take part. With
    ``scope="full"`` a digest of any supplied pickup time and time windows is
    appended, so requests that differ only in schedule get separate entries.
    """
    stops = [payload.pickup, *payload.via_points, payload.destination]
    locations = "|".join(f"{stop.latitude:.6f},{stop.longitude:.6f}" for stop in stops)
    key = f"route_{base64.b64encode(locations.encode('utf-8')).decode('ascii')}"

    if scope == "full" and (payload.pickup_time is not None or payload.time_windows):
        schedule = payload.model_dump(mode="json", include={"pickup_time", "time_windows"})
        digest = hashlib.sha256(json.dumps(schedule, sort_keys=True).encode("utf-8")).hexdigest()
        key = f"{key}:{digest[:16]}"
    return key


class ResultCache(Generic[V]):
    """Thread-safe TTL cache with a bounded number of entries.

    A ``ttl_seconds`` of 0 keeps entries until they are evicted for space.
    """

    def __init__(
        self,
        ttl_seconds: int,
        max_entries: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, V]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self.ttl_seconds and self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (self._clock(), value)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted cached route {evicted}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


@lru_cache()
def get_result_cache() -> ResultCache:
    return ResultCache(ttl_seconds=settings.cache_ttl_seconds, max_entries=settings.cache_max_entries)
