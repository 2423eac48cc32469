import pytest

from cachemodel import BackingStoreFailure, CacheConfig, CacheModel, MainMemory

# Small geometry used across the suite: 16-byte lines (4 offset bits),
# 4 sets (2 index bits), 2 ways, 16-bit addresses.
LINE = 16
SETS = 4


def addr(tag, index=0, offset=0):
    return (tag << 6) | (index << 4) | offset


class RecordingStore(MainMemory):
    """MainMemory that logs every call and can be told to fail."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.log = []
        self.fail_reads = False
        self.fail_writes = False

    def read(self, address):
        if self.fail_reads:
            raise BackingStoreFailure(f"read of {address:#x} refused")
        self.log.append(('read', address))
        return super().read(address)

    def write(self, address, data):
        if self.fail_writes:
            raise BackingStoreFailure(f"write of {address:#x} refused")
        self.log.append(('write', address, bytes(data)))
        super().write(address, data)

    def writes_logged(self):
        return [entry for entry in self.log if entry[0] == 'write']


@pytest.fixture
def make_cache():
    def _make(**overrides):
        params = dict(line_size_bytes=LINE, num_sets=SETS, associativity=2, address_width=16)
        params.update(overrides)
        config = CacheConfig(**params)
        store = RecordingStore(size_bytes=1 << config.address_width,
                               line_size_bytes=config.line_size_bytes)
        return CacheModel(config, store), store
    return _make
