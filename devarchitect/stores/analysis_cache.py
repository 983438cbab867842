"""In-memory TTL cache for a single workspace snapshot."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..logging import get_logger
from ..models import WorkspaceSnapshot

DEFAULT_TTL_SECONDS = 30.0

logger = get_logger("cache")


@dataclass(frozen=True)
class CacheEntry:
    """The cached snapshot together with when and for which workspace it was built."""

    snapshot: WorkspaceSnapshot
    timestamp: float
    identity: str


class AnalysisCache:
    """Holds at most one snapshot, valid for one workspace identity within the TTL.

    The cache is an explicit object handed to the analyzer rather than module
    state, and its clock is injectable so expiry can be driven from tests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: Optional[CacheEntry] = None

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    def get(self, identity: str) -> Optional[WorkspaceSnapshot]:
        entry = self._entry
        if entry is None:
            logger.debug("Cache miss for %s: empty", identity)
            return None
        if entry.identity != identity:
            logger.debug("Cache miss for %s: cached workspace is %s", identity, entry.identity)
            return None
        if self._clock() - entry.timestamp >= self.ttl_seconds:
            logger.debug("Cache miss for %s: entry expired", identity)
            return None
        logger.debug("Cache hit for %s", identity)
        return entry.snapshot

    def store(self, identity: str, snapshot: WorkspaceSnapshot) -> None:
        self._entry = CacheEntry(snapshot=snapshot, timestamp=self._clock(), identity=identity)

    def invalidate(self) -> None:
        self._entry = None


__all__ = ["AnalysisCache", "CacheEntry", "DEFAULT_TTL_SECONDS"]
