"""In-process cache backend used when Redis is disabled or unreachable."""

from asyncio import CancelledError, Lock, Task, create_task
from asyncio import sleep as asyncio_sleep
from collections import OrderedDict
from collections.abc import AsyncGenerator
from contextlib import suppress
from fnmatch import fnmatch
from time import monotonic

from fanblog.monitoring import get_logger

logger = get_logger(__name__)


class MemoryClient:
    """
    Async key/value store with the subset of the Redis API the cache uses.

    Entries are kept in least-recently-used order and the oldest one is
    evicted once ``max_entries`` is reached. Expired keys are dropped lazily
    on access and by a periodic sweep started with :meth:`start_lifecycle`.
    """

    DEFAULT_MAX_ENTRIES: int = 10_000
    DEFAULT_CLEANUP_INTERVAL: int = 60  # seconds

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        cleanup_interval: int = DEFAULT_CLEANUP_INTERVAL,
    ) -> None:
        self._entries: OrderedDict[str, str] = OrderedDict()
        self._deadlines: dict[str, float] = {}
        self._max_entries = max_entries
        self._cleanup_interval = cleanup_interval
        self._cleanup_task: Task[None] | None = None
        self._lock = Lock()
        self.is_connected: bool = True

    async def start_lifecycle(self) -> None:
        """Start the background sweep of expired keys."""
        async with self._lock:
            if self._cleanup_task is None:
                self.is_connected = True
                self._cleanup_task = create_task(self._cleanup_loop())
                logger.info("Memory cache expiration task started")

    async def _cleanup_loop(self) -> None:
        while self.is_connected:
            try:
                await asyncio_sleep(self._cleanup_interval)
                async with self._lock:
                    expired = [k for k in self._deadlines if self._expired(k)]
                    removed = self._remove(*expired)
                if removed:
                    logger.debug("Memory cache sweep", removed=removed)
            except CancelledError:
                break

    def _expired(self, key: str) -> bool:
        deadline = self._deadlines.get(key)
        return deadline is not None and monotonic() >= deadline

    def _remove(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            self._deadlines.pop(key, None)
            if self._entries.pop(key, None) is not None:
                removed += 1
        return removed

    async def get(self, key: str) -> str | None:
        async with self._lock:
            if self._expired(key):
                self._remove(key)
                return None
            value = self._entries.get(key)
            if value is not None:
                self._entries.move_to_end(key)
            return value

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        async with self._lock:
            if key not in self._entries:
                while self._entries and len(self._entries) >= self._max_entries:
                    oldest, _ = self._entries.popitem(last=False)
                    self._deadlines.pop(oldest, None)
            self._entries[key] = value
            self._entries.move_to_end(key)
            if ex:
                self._deadlines[key] = monotonic() + ex
            else:
                # Plain SET clears any previous expiration, as Redis does
                self._deadlines.pop(key, None)
            return True

    async def delete(self, *keys: str) -> int:
        async with self._lock:
            return self._remove(*keys)

    async def exists(self, *keys: str) -> int:
        async with self._lock:
            return sum(1 for k in keys if k in self._entries and not self._expired(k))

    async def expire(self, key: str, seconds: int) -> bool:
        async with self._lock:
            if key not in self._entries:
                return False
            self._deadlines[key] = monotonic() + seconds
            return True

    async def ttl(self, key: str) -> int:
        """Remaining seconds, ``-1`` without expiration, ``-2`` when missing."""
        async with self._lock:
            if self._expired(key):
                self._remove(key)
            if key not in self._entries:
                return -2
            if key not in self._deadlines:
                return -1
            return int(self._deadlines[key] - monotonic())

    async def flush_all(self) -> bool:
        async with self._lock:
            self._entries.clear()
            self._deadlines.clear()
            return True

    async def ping(self) -> bool:
        return self.is_connected

    async def info(self) -> dict[str, str | int]:
        async with self._lock:
            return {
                "server": "In-Memory Cache",
                "total_keys": len(self._entries),
                "max_entries": self._max_entries,
            }

    async def scan_iter(self, pattern: str, count: int = 100) -> AsyncGenerator[str]:  # noqa: ARG002
        """Yield keys matching the glob ``pattern``."""
        async with self._lock:
            keys = list(self._entries)
        for key in keys:
            if fnmatch(key, pattern):
                yield key

    async def close(self) -> None:
        async with self._lock:
            self.is_connected = False
            task, self._cleanup_task = self._cleanup_task, None
        if task is not None:
            task.cancel()
            with suppress(CancelledError):
                await task
