from cachemodel.cache.results import AccessResult


class WritePolicyEngine:
    """Store handling for the four write-policy x allocate-policy combinations.

    - write-through, hit: update the line and forward it to backing storage;
      the line never becomes dirty
    - write-back, hit: update the line and mark it dirty
    - any policy, miss, no-allocate: read-modify-write the line in backing
      storage without touching the cache
    - any policy, miss, allocate: ``merge_allocating_store`` applies the
      store to the fetched line (writing it through if needed) before the
      caller evicts anything and fills a way with the result

    Args:
        config: the cache's CacheConfig
        backing_store: object with line-granular ``read(address)`` and
            ``write(address, data)``
    """

    def __init__(self, config, backing_store):
        self.config = config
        self.backing_store = backing_store

    @property
    def allocates_on_write_miss(self) -> bool:
        return self.config.is_write_allocate

    def handle_store(self, cache_set, way, hit, line_address, offset, data) -> AccessResult:
        end = offset + len(data)
        if way is None:
            # no-allocate miss: the cache is bypassed entirely
            line = bytearray(self.backing_store.read(line_address))
            line[offset:end] = data
            self.backing_store.write(line_address, bytes(line))
            return AccessResult(hit=False, write_through=True)

        line = cache_set.lines[way]
        if self.config.is_write_back:
            line.data[offset:end] = data
            line.dirty = True
            write_through = False
        else:
            # backing storage first, so a failed write leaves the line as it was
            updated = bytearray(line.data)
            updated[offset:end] = data
            self.backing_store.write(line_address, bytes(updated))
            line.data[:] = updated
            write_through = True

        if hit:
            cache_set.touch(way)
        return AccessResult(hit=hit, write_through=write_through, way=way)

    def merge_allocating_store(self, line_address, offset, fetched, data):
        """Apply a store to a freshly fetched line.

        Returns (line bytes to fill, dirty, write_through). Under
        write-through the merged line reaches backing storage here, so a
        failed write happens before the cache is touched.
        """
        merged = bytearray(fetched)
        merged[offset:offset + len(data)] = data
        if self.config.is_write_back:
            return bytes(merged), True, False
        self.backing_store.write(line_address, bytes(merged))
        return bytes(merged), False, True

    def handle_eviction(self, line) -> bool:
        """True when evicting ``line`` must write its data back first."""
        return self.config.is_write_back and line.valid and line.dirty
