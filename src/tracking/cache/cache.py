"""Tracking Cache & Override Store.

One JSON map in the key-value store, keyed by tracking number (or order
identifier for cancellation marks)::

    {"<key>": {"data": {...TrackingResult...}, "timestamp": <epoch ms>}}
    {"<key>": {"miss": "<iso time>", "timestamp": <epoch ms>}}

Every entry, live result, manual override or remembered carrier miss,
is fresh for ``ttl`` seconds and then ignored. Overrides therefore win
over live lookups only inside their freshness window.

Reads and writes are best effort. A store that cannot be written leaves
the cache cold; it never fails the lookup that tried to fill it.
"""

import structlog

from shared.clock import Clock, system_clock
from shared.store.port import TRACKING_CACHE_KEY, KeyValueStore, read_json, write_json
from tracking.cache.records import TrackingResult

logger = structlog.get_logger(__name__)

DEFAULT_TTL = 300


class TrackingCache:
    def __init__(self, store: KeyValueStore, clock: Clock | None = None, ttl: int = DEFAULT_TTL) -> None:
        self.store = store
        self.clock = clock or system_clock
        self.ttl = ttl

    def _entries(self) -> dict:
        entries = read_json(self.store, TRACKING_CACHE_KEY, {})
        return entries if isinstance(entries, dict) else {}

    def _save(self, entries: dict) -> None:
        try:
            write_json(self.store, TRACKING_CACHE_KEY, entries)
        except OSError as exc:
            logger.warning("Tracking cache write failed", error=str(exc))

    def _fresh(self, key: str) -> dict | None:
        entry = self._entries().get(key)
        if not isinstance(entry, dict):
            return None
        age_ms = self.clock.timestamp_ms() - int(entry.get("timestamp") or 0)
        return entry if age_ms < self.ttl * 1000 else None

    def get(self, key: str) -> TrackingResult | None:
        """The fresh cached result for ``key``, or None."""
        entry = self._fresh(key)
        if entry is None or "data" not in entry:
            return None
        try:
            return TrackingResult.from_dict(entry["data"])
        except (ValueError, TypeError, AttributeError):
            logger.warning("Discarding malformed tracking cache entry", key=key)
            return None

    def put(self, key: str, result: TrackingResult) -> None:
        entries = self._entries()
        entries[key] = {"data": result.to_dict(), "timestamp": self.clock.timestamp_ms()}
        self._save(entries)

    def remember_miss(self, key: str, at: str) -> None:
        """Record that no carrier integration answered for ``key`` at ``at``."""
        entries = self._entries()
        entries[key] = {"miss": at, "timestamp": self.clock.timestamp_ms()}
        self._save(entries)

    def recent_miss(self, key: str) -> str | None:
        """When the last fresh carrier miss for ``key`` happened, if any."""
        entry = self._fresh(key)
        return entry.get("miss") if entry else None

    def clear(self, key: str) -> None:
        entries = self._entries()
        if entries.pop(key, None) is not None:
            self._save(entries)
