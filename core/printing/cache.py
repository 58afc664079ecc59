"""
In-memory cache for rendered marksheet PDFs.

Entries live for the lifetime of the owning service. Expired entries are
only detected on lookup; nothing sweeps them in the background.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional


logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 50
DEFAULT_TTL_SECONDS = 5 * 60


@dataclass(frozen=True)
class CacheEntry:
    pdf_bytes: bytes
    created_at: float


class PdfRenderCache:
    """
    Bounded cache of PDF bytes keyed by document id.

    Features:
    - TTL-based expiry, checked lazily on ``get``
    - Capacity bound with eviction of the oldest-inserted entry
      (insertion order, not access recency)

    The cache is not synchronised. Two concurrent misses for the same key
    both render and the last ``put`` wins.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    @staticmethod
    def build_key(document_id) -> str:
        return f"pdf_{document_id}"

    def get(self, key: str) -> Optional[bytes]:
        """
        Return cached bytes for ``key`` if present and younger than the TTL.

        Args:
            key: Cache key to look up

        Returns:
            Cached PDF bytes or None on miss/expiry
        """
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"PDF cache MISS for key: {key}")
            return None

        if self._clock() - entry.created_at >= self.ttl_seconds:
            logger.debug(f"PDF cache entry expired for key: {key}")
            return None

        logger.debug(f"PDF cache HIT for key: {key}")
        return entry.pdf_bytes

    def put(self, key: str, pdf_bytes: bytes) -> None:
        """
        Store bytes for ``key`` stamped with the current time.

        A new key arriving at capacity evicts the oldest-inserted entry first.
        Overwriting an existing key keeps its position in insertion order.
        """
        if key not in self._entries and len(self._entries) >= self.max_entries:
            oldest_key = next(iter(self._entries))
            del self._entries[oldest_key]
            logger.debug(f"PDF cache evicted oldest key: {oldest_key}")

        self._entries[key] = CacheEntry(pdf_bytes=pdf_bytes, created_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list:
        """Keys in insertion order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key) -> bool:
        return key in self._entries
