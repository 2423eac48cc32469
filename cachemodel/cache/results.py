from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EvictedLine:
    tag: int
    was_dirty: bool


@dataclass(frozen=True)
class AccessResult:
    """Outcome of a single load or store.

    ``way`` is None when the access touched no line (a no-allocate store
    miss). ``write_through`` is set whenever a store was forwarded to the
    backing store as part of this access.
    """
    hit: bool
    evicted_line: Optional[EvictedLine] = None
    write_back_triggered: bool = False
    write_through: bool = False
    index: Optional[int] = None
    way: Optional[int] = None


@dataclass(frozen=True)
class LoadResult:
    data: bytes
    result: AccessResult

    @property
    def hit(self):
        return self.result.hit


@dataclass(frozen=True)
class Statistics:
    """Read-only copy of a CacheModel's counters."""
    accesses: int = 0
    hits: int = 0
    misses: int = 0
    write_backs: int = 0
    loads: int = 0
    stores: int = 0
    evictions: int = 0
    write_throughs: int = 0

    @property
    def hit_rate(self) -> float:
        return self.hits / self.accesses if self.accesses > 0 else 0.0

    @property
    def miss_rate(self) -> float:
        return self.misses / self.accesses if self.accesses > 0 else 0.0
