"""Time-boxed read-through cache holding one immutable snapshot."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Generic, Iterable, Optional, TypeVar

from loguru import logger

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Snapshot(Generic[T]):
    items: tuple
    fetched_at: datetime
    expires_at: datetime


class SnapshotCache(Generic[T]):
    """Caches a whole dataset; refreshes replace it wholesale.

    Readers may see a stale snapshot while a refresh is in flight.
    """

    def __init__(self, ttl: timedelta = timedelta(hours=6), clock: Callable[[], datetime] = utc_now):
        self.ttl = ttl
        self.clock = clock
        self._snapshot: Optional[Snapshot] = None

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self._snapshot

    def is_fresh(self) -> bool:
        return self._snapshot is not None and self.clock() < self._snapshot.expires_at

    def get(self) -> Optional[tuple]:
        """Fresh items, or None when empty or expired."""
        if self.is_fresh():
            return self._snapshot.items
        return None

    def put(self, items: Iterable[T]) -> tuple:
        now = self.clock()
        self._snapshot = Snapshot(items=tuple(items), fetched_at=now, expires_at=now + self.ttl)
        return self._snapshot.items

    def clear(self):
        self._snapshot = None

    def get_or_load(self, loader: Callable[[], Iterable[T]], force_refresh: bool = False) -> tuple:
        """Return fresh items, loading on a miss.

        If the loader fails and an expired snapshot exists, the stale items
        are returned; otherwise the loader's error propagates.
        """
        if not force_refresh:
            cached = self.get()
            if cached is not None:
                return cached

        try:
            items = tuple(loader())
        except Exception as e:
            if self._snapshot is not None:
                logger.warning(f"Refresh failed, serving snapshot from {self._snapshot.fetched_at.isoformat()}: {e}")
                return self._snapshot.items
            raise

        if not items and self._snapshot is not None:
            logger.warning("Refresh returned no rows, keeping previous snapshot")
            return self._snapshot.items

        return self.put(items)
