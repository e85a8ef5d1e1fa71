"""Counters kept by the cache manager."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from threading import Lock


def _now() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")


@dataclass
class CacheStatistics:
    """Hit/miss and write counters, safe to bump from any task or thread."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    errors: int = 0
    created_at: str = field(default_factory=_now)
    _lock: Lock = field(default_factory=Lock, init=False, repr=False)

    def record_hit(self) -> None:
        with self._lock:
            self.hits += 1

    def record_miss(self) -> None:
        with self._lock:
            self.misses += 1

    def record_set(self) -> None:
        with self._lock:
            self.sets += 1

    def record_delete(self, count: int = 1) -> None:
        with self._lock:
            self.deletes += count

    def record_error(self) -> None:
        with self._lock:
            self.errors += 1

    @property
    def hit_rate(self) -> float:
        """Hit rate as a percentage (0-100)."""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0

    def reset(self) -> None:
        with self._lock:
            self.hits = self.misses = self.sets = self.deletes = self.errors = 0
            self.created_at = _now()

    def to_dict(self) -> dict[str, int | str]:
        with self._lock:
            return {
                "hits": self.hits,
                "misses": self.misses,
                "sets": self.sets,
                "deletes": self.deletes,
                "errors": self.errors,
                "hit_rate": f"{self.hit_rate:.2f}%",
                "created_at": self.created_at,
            }
