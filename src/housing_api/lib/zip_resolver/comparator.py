"""National baselines for single-ZIP comparisons, with an optional TTL cache.

The housing table only changes through batch ingestion, so a short-lived
cache is safe; a TTL of zero disables it and recomputes per request.
"""

import threading
import time

from housing_api.lib.zip_resolver.base import BaseHousingStore, NationalAverages


class NationalAveragesCache:
    """TTL-based in-memory cache for a single NationalAverages value.

    Args:
        ttl_seconds: Cache time-to-live in seconds (0 disables caching).
    """

    def __init__(self, ttl_seconds: float) -> None:
        self._ttl_seconds = ttl_seconds
        self._data: NationalAverages | None = None
        self._cached_at: float | None = None
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    @property
    def enabled(self) -> bool:
        return self._ttl_seconds > 0

    def get(self) -> NationalAverages | None:
        """Return the cached averages if within TTL, else None."""
        with self._lock:
            if self._data is None or self.is_stale():
                return None
            return self._data

    def set(self, data: NationalAverages) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._data = data
            self._cached_at = time.monotonic()

    def is_stale(self) -> bool:
        if self._cached_at is None:
            return True
        return (time.monotonic() - self._cached_at) >= self._ttl_seconds


async def national_averages(
    store: BaseHousingStore,
    cache: NationalAveragesCache | None = None,
) -> NationalAverages:
    """Return national averages, served from ``cache`` while it is fresh.

    Args:
        store: Housing record store to compute from.
        cache: Optional TTL cache shared across requests.

    Returns:
        NationalAverages over rows with a non-null homeownership rate.
    """
    if cache is not None:
        cached = cache.get()
        if cached is not None:
            return cached

    averages = await store.global_averages()
    if cache is not None:
        cache.set(averages)
    return averages
