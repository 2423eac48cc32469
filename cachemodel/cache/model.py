import numbers
import threading
from dataclasses import replace

import numpy as np

from cachemodel.cache.address import AddressDecoder
from cachemodel.cache.cache_set import CacheSet
from cachemodel.cache.errors import BackingStoreFailure, InvalidAddress
from cachemodel.cache.replacement import make_policy
from cachemodel.cache.results import AccessResult, EvictedLine, LoadResult, Statistics
from cachemodel.cache.write_policy import WritePolicyEngine

COUNTERS = ('accesses', 'hits', 'misses', 'write_backs',
            'loads', 'stores', 'evictions', 'write_throughs')


def amat(hit_time, miss_rate, miss_penalty):
    """Average memory access time: hit_time + miss_rate * miss_penalty."""
    return hit_time + miss_rate * miss_penalty


class CacheModel:
    """A set-associative cache in front of a line-granular backing store.

    Every ``load``/``store`` is resolved completely before it returns:
    decode, set lookup, and on a miss victim selection, optional
    write-back and fill. The new line is fetched before anything is
    written back or changed, and counters are committed last, so an
    exception from the backing store leaves the model as it was.

    Args:
        config: CacheConfig with geometry and policies
        backing_store: object with ``read(address) -> bytes`` returning one
            full line and ``write(address, data)``; addresses are line-aligned
    """

    def __init__(self, config, backing_store):
        self.config = config
        self.backing_store = backing_store
        self.decoder = AddressDecoder(config)
        self.write_engine = WritePolicyEngine(config, backing_store)
        self.rng = np.random.default_rng(config.seed)
        self.sets = [CacheSet(config.associativity, config.line_size_bytes,
                              make_policy(config.replacement_policy, config.associativity, self.rng))
                     for _ in range(config.num_sets)]
        self._counters = dict.fromkeys(COUNTERS, 0)
        # one lock for the whole model; sets never share lines
        self._lock = threading.Lock()

    def _decode(self, address, size):
        if size < 1:
            raise InvalidAddress(f"access size must be at least 1 byte (got {size})")
        address = self.decoder.check(address)
        decoded = self.decoder.decode(address)
        if decoded.offset + size > self.config.line_size_bytes:
            raise InvalidAddress(
                f"{size}-byte access at {address:#x} crosses a "
                f"{self.config.line_size_bytes}-byte line boundary")
        return decoded

    def _fetch(self, line_address):
        data = self.backing_store.read(line_address)
        if len(data) != self.config.line_size_bytes:
            raise BackingStoreFailure(
                f"backing store returned {len(data)} bytes for line {line_address:#x}, "
                f"expected {self.config.line_size_bytes}")
        return data

    def _allocate(self, index, tag, line_address):
        """Load miss path: fetch the line, then evict and fill."""
        return self._evict_and_fill(index, tag, self._fetch(line_address))

    def _evict_and_fill(self, index, tag, data):
        """Pick a victim, write it back if needed, fill it with ``data``.

        Returns (way, evicted_line, write_back_triggered).
        """
        cache_set = self.sets[index]
        way = cache_set.eviction_candidate()
        victim = cache_set.lines[way]
        evicted = None
        write_back = False
        if victim.valid:
            evicted = EvictedLine(victim.tag, victim.dirty)
            if self.write_engine.handle_eviction(victim):
                self.backing_store.write(self.decoder.encode(victim.tag, index), bytes(victim.data))
                write_back = True
        cache_set.fill(tag, way, data)
        return way, evicted, write_back

    def _record(self, result, is_store):
        c = self._counters
        c['accesses'] += 1
        c['hits' if result.hit else 'misses'] += 1
        c['stores' if is_store else 'loads'] += 1
        if result.write_back_triggered:
            c['write_backs'] += 1
        if result.evicted_line is not None:
            c['evictions'] += 1
        if result.write_through:
            c['write_throughs'] += 1

    def load(self, address, size=1) -> LoadResult:
        """Read ``size`` bytes at ``address``; the bytes must sit in one line."""
        with self._lock:
            tag, index, offset = self._decode(address, size)
            cache_set = self.sets[index]
            way = cache_set.lookup(tag)
            if way is not None:
                cache_set.touch(way)
                result = AccessResult(hit=True, index=index, way=way)
            else:
                line_address = self.decoder.line_address(address)
                way, evicted, write_back = self._allocate(index, tag, line_address)
                result = AccessResult(hit=False, evicted_line=evicted,
                                      write_back_triggered=write_back, index=index, way=way)
            data = bytes(cache_set.lines[way].data[offset:offset + size])
            self._record(result, is_store=False)
            return LoadResult(data, result)

    def store(self, address, data) -> AccessResult:
        """Write ``data`` (bytes, or a single int 0-255) at ``address``."""
        if isinstance(data, numbers.Integral):
            data = bytes([int(data)])
        data = bytes(data)
        with self._lock:
            tag, index, offset = self._decode(address, len(data))
            cache_set = self.sets[index]
            line_address = self.decoder.line_address(address)
            way = cache_set.lookup(tag)
            if way is not None:
                result = self.write_engine.handle_store(cache_set, way, True, line_address, offset, data)
            elif self.write_engine.allocates_on_write_miss:
                # build and write through the stored line before any eviction
                fetched = self._fetch(line_address)
                line_data, dirty, write_through = self.write_engine.merge_allocating_store(
                    line_address, offset, fetched, data)
                way, evicted, write_back = self._evict_and_fill(index, tag, line_data)
                cache_set.lines[way].dirty = dirty
                result = AccessResult(hit=False, evicted_line=evicted, write_back_triggered=write_back,
                                      write_through=write_through, way=way)
            else:
                result = self.write_engine.handle_store(cache_set, None, False, line_address, offset, data)
            result = replace(result, index=index)
            self._record(result, is_store=True)
            return result

    def is_hit(self, address) -> bool:
        """Whether ``address`` would hit right now; changes nothing."""
        tag, index, _ = self.decoder.decode(address)
        with self._lock:
            return self.sets[index].lookup(tag) is not None

    def flush(self) -> int:
        """Write back every dirty line and invalidate the whole cache.

        Returns the number of lines written back.
        """
        written = 0
        with self._lock:
            for index, cache_set in enumerate(self.sets):
                for way in cache_set.dirty_ways():
                    line = cache_set.lines[way]
                    if self.write_engine.handle_eviction(line):
                        self.backing_store.write(self.decoder.encode(line.tag, index), bytes(line.data))
                        line.dirty = False
                        written += 1
                        self._counters['write_backs'] += 1
            for cache_set in self.sets:
                for way in range(cache_set.associativity):
                    cache_set.invalidate(way)
        return written

    def statistics_snapshot(self) -> Statistics:
        with self._lock:
            return Statistics(**self._counters)

    def reset_statistics(self):
        with self._lock:
            self._counters = dict.fromkeys(COUNTERS, 0)

    def compute_amat(self, hit_time, miss_penalty):
        """AMAT from the counters so far; ``hit_time`` when nothing was accessed."""
        stats = self.statistics_snapshot()
        if stats.accesses == 0:
            return hit_time
        return hit_time + stats.misses * miss_penalty / stats.accesses
