"""Bounded in-memory response cache with TTL expiry and LRU eviction.

One instance is created at startup and injected into every fetch client.
Memory is accounted with a deterministic size estimate per entry; when a
new entry would break the entry-count or memory bound, least-recently
accessed entries are evicted first.
"""

import json
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field

from src.fetch.config import CacheConfig
from src.fetch.constants import (
    BYTES_PER_MB,
    COMPONENT_CACHE,
    SIZE_BOOLEAN,
    SIZE_CONTAINER_OVERHEAD,
    SIZE_NONE,
    SIZE_NUMBER,
)


logger = structlog.get_logger()

T = TypeVar("T")

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


def _utf16_length(text: str) -> int:
    return len(text.encode("utf-16-le"))


def estimate_size(value: object) -> int:
    """Estimate the memory footprint of a cached payload in bytes.

    The estimate is approximate and exists only to bound memory. It is a
    pure function of the value:

    - None: 8
    - str: 2 bytes per UTF-16 code unit
    - bool: 4
    - int/float: 8
    - list/tuple: sum of elements + 24
    - anything else: compact JSON length x 2 + 24 (str() when not JSON-encodable)

    Args:
        value: Payload to size.

    Returns:
        Estimated size in bytes.
    """
    if value is None:
        return SIZE_NONE
    if isinstance(value, str):
        return _utf16_length(value)
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return SIZE_BOOLEAN
    if isinstance(value, int | float):
        return SIZE_NUMBER
    if isinstance(value, list | tuple):
        return sum(estimate_size(item) for item in value) + SIZE_CONTAINER_OVERHEAD

    # Serialized length does not depend on key order
    try:
        serialized = json.dumps(
            value,
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        )
    except (TypeError, ValueError):
        # Keys JSON cannot encode (tuples, ...) or circular references
        serialized = str(value)
    return _utf16_length(serialized) + SIZE_CONTAINER_OVERHEAD


@dataclass
class CacheEntry(Generic[T]):
    """A cached payload with expiry and access tracking."""

    value: T
    created_at_ms: float
    ttl_ms: int
    access_count: int
    last_accessed_ms: float
    size_bytes: int

    def is_expired(self, now_ms: float) -> bool:
        """Check whether the entry has outlived its TTL."""
        return now_ms - self.created_at_ms > self.ttl_ms


class MemoryUsage(BaseModel):
    """Memory accounting snapshot."""

    model_config = ConfigDict(frozen=True)

    current: int = Field(ge=0, description="Estimated bytes in use")
    max: int = Field(ge=0, description="Configured cap in bytes")
    percentage: float = Field(ge=0.0, description="current / max, in percent")


class CacheStats(BaseModel):
    """Point-in-time cache statistics, derived from running counters."""

    model_config = ConfigDict(frozen=True)

    entries: int
    hits: int
    misses: int
    evictions: int
    memory_usage: MemoryUsage
    hit_ratio: float = Field(ge=0.0, le=1.0)


class ResponseCache(Generic[T]):
    """Thread-safe TTL cache bounded by entry count and estimated memory.

    Expired entries are dropped lazily on ``get`` and periodically by a
    daemon cleanup thread. The cleanup thread never keeps the process
    alive and is stopped by ``destroy``.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        clock: Clock = monotonic_ms,
    ) -> None:
        """Initialize the cache and start background cleanup.

        Args:
            config: Cache bounds; defaults are used when omitted.
            clock: Millisecond clock, injectable for tests.
        """
        self._config = config or CacheConfig()
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._lock = threading.Lock()
        self._memory_usage = 0
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._destroyed = False
        self._stop_event = threading.Event()
        self._cleanup_thread: threading.Thread | None = None
        self._log = logger.bind(component=COMPONENT_CACHE)

        if self._config.cleanup_interval_ms is not None:
            self._start_cleanup_thread(self._config.cleanup_interval_ms)

        self._log.debug(
            "cache_initialized",
            max_entries=self._config.max_entries,
            max_memory_mb=self._config.max_memory_mb,
            default_ttl_ms=self._config.default_ttl_ms,
            cleanup_interval_ms=self._config.cleanup_interval_ms,
        )

    @property
    def config(self) -> CacheConfig:
        """Get the cache bounds."""
        return self._config

    @property
    def memory_usage(self) -> int:
        """Current estimated memory usage in bytes."""
        with self._lock:
            return self._memory_usage

    def set(self, key: str, value: T, ttl_ms: int | None = None) -> None:
        """Store a value, evicting least-recently-used entries as needed.

        Replacing an existing key releases its old size first. A value
        whose estimate alone exceeds the memory cap is not stored.

        Args:
            key: Cache key.
            value: Payload to store.
            ttl_ms: Time-to-live; the configured default when omitted.
        """
        entry_ttl = self._config.default_ttl_ms if ttl_ms is None else ttl_ms
        size = estimate_size(value)
        max_bytes = self._config.max_memory_bytes
        max_entries = self._config.max_entries

        with self._lock:
            now = self._clock()
            existing = self._entries.pop(key, None)
            if existing is not None:
                self._memory_usage -= existing.size_bytes

            if size > max_bytes:
                oversized = True
            else:
                oversized = False
                while self._entries and (
                    len(self._entries) >= max_entries
                    or self._memory_usage + size > max_bytes
                ):
                    self._evict_lru_locked()

                self._entries[key] = CacheEntry(
                    value=value,
                    created_at_ms=now,
                    ttl_ms=entry_ttl,
                    access_count=1,
                    last_accessed_ms=now,
                    size_bytes=size,
                )
                self._memory_usage += size

            total_entries = len(self._entries)
            memory_usage = self._memory_usage

        if oversized:
            self._log.warning(
                "cache_entry_too_large",
                key=key,
                estimated_size_bytes=size,
                max_memory_bytes=max_bytes,
            )
            return

        self._log.debug(
            "cache_entry_set",
            key=key,
            ttl_ms=entry_ttl,
            estimated_size_bytes=size,
            total_entries=total_entries,
            memory_usage_mb=round(memory_usage / BYTES_PER_MB, 2),
        )

    def get(self, key: str) -> T | None:
        """Return a live cached value, or None on miss or expiry.

        Expired entries are removed as a side effect. Hits refresh the
        entry's LRU position.

        Args:
            key: Cache key.

        Returns:
            The cached payload, or None.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            now = self._clock()
            if entry.is_expired(now):
                del self._entries[key]
                self._memory_usage -= entry.size_bytes
                self._misses += 1
                return None

            entry.access_count += 1
            entry.last_accessed_ms = now
            self._entries.move_to_end(key)
            self._hits += 1
            return entry.value

    def delete(self, key: str) -> bool:
        """Remove an entry.

        Args:
            key: Cache key.

        Returns:
            True if the key was present.
        """
        with self._lock:
            entry = self._entries.pop(key, None)
            if entry is None:
                return False
            self._memory_usage -= entry.size_bytes
            return True

    def clear(self) -> None:
        """Drop all entries. Statistics counters are left untouched."""
        with self._lock:
            self._entries.clear()
            self._memory_usage = 0
        self._log.debug("cache_cleared")

    def size(self) -> int:
        """Number of resident entries (expired ones included until swept)."""
        with self._lock:
            return len(self._entries)

    def stats(self) -> CacheStats:
        """Compute statistics from the running counters.

        Returns:
            CacheStats snapshot.
        """
        max_bytes = self._config.max_memory_bytes
        with self._lock:
            total_lookups = self._hits + self._misses
            hit_ratio = self._hits / total_lookups if total_lookups > 0 else 0.0
            percentage = (
                round(self._memory_usage / max_bytes * 100, 2) if max_bytes else 0.0
            )
            return CacheStats(
                entries=len(self._entries),
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                memory_usage=MemoryUsage(
                    current=self._memory_usage,
                    max=max_bytes,
                    percentage=percentage,
                ),
                hit_ratio=hit_ratio,
            )

    def reset_stats(self) -> None:
        """Zero the hit, miss and eviction counters."""
        with self._lock:
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def cleanup_expired(self) -> int:
        """Evict every expired entry.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            now = self._clock()
            expired = [
                key for key, entry in self._entries.items() if entry.is_expired(now)
            ]
            freed_bytes = 0
            for key in expired:
                entry = self._entries.pop(key)
                self._memory_usage -= entry.size_bytes
                freed_bytes += entry.size_bytes
            remaining = len(self._entries)

        if expired:
            self._log.debug(
                "cache_cleanup_completed",
                expired_entries=len(expired),
                freed_memory_bytes=freed_bytes,
                remaining_entries=remaining,
            )
        return len(expired)

    def destroy(self) -> None:
        """Stop background cleanup and release all entries. Idempotent."""
        with self._lock:
            if self._destroyed:
                return
            self._destroyed = True

        self._stop_event.set()
        thread = self._cleanup_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)
        self._cleanup_thread = None
        self.clear()
        self._log.debug("cache_destroyed")

    def _evict_lru_locked(self) -> None:
        """Evict the least recently accessed entry.

        Must be called while holding the lock.
        """
        key, entry = self._entries.popitem(last=False)
        self._memory_usage -= entry.size_bytes
        self._evictions += 1
        self._log.debug(
            "cache_entry_evicted",
            key=key,
            last_accessed_ms=entry.last_accessed_ms,
            freed_bytes=entry.size_bytes,
        )

    def _start_cleanup_thread(self, interval_ms: int) -> None:
        thread = threading.Thread(
            target=self._cleanup_loop,
            args=(interval_ms / 1000.0,),
            name="response-cache-cleanup",
            daemon=True,
        )
        self._cleanup_thread = thread
        thread.start()

    def _cleanup_loop(self, interval_seconds: float) -> None:
        while not self._stop_event.wait(interval_seconds):
            self.cleanup_expired()
