from cachemodel.cache.errors import BackingStoreFailure


class MainMemory:
    """Line-granular backing store for a CacheModel.

    Memory is sparse: lines that were never written read back as zeros.
    Every call must name a line-aligned address inside ``size_bytes``.
    ``reads`` and ``writes`` count the calls served, which makes the
    cache's traffic visible to callers.
    """

    def __init__(self, size_bytes=1 << 32, line_size_bytes=64):
        if size_bytes <= 0 or size_bytes % line_size_bytes != 0:
            raise ValueError("size_bytes must be a positive multiple of line_size_bytes")
        self.size_bytes = size_bytes
        self.line_size_bytes = line_size_bytes
        self.lines = {}
        self.reads = 0
        self.writes = 0

    def _check(self, address):
        if address < 0 or address >= self.size_bytes:
            raise BackingStoreFailure(f"address {address:#x} is outside memory of {self.size_bytes} bytes")
        if address % self.line_size_bytes:
            raise BackingStoreFailure(f"address {address:#x} is not aligned to {self.line_size_bytes}-byte lines")

    def read(self, address) -> bytes:
        self._check(address)
        self.reads += 1
        return bytes(self.lines.get(address, bytes(self.line_size_bytes)))

    def write(self, address, data):
        self._check(address)
        if len(data) != self.line_size_bytes:
            raise BackingStoreFailure(
                f"write of {len(data)} bytes at {address:#x}, expected a full {self.line_size_bytes}-byte line")
        self.writes += 1
        self.lines[address] = bytes(data)

    def peek(self, address, size=1) -> bytes:
        """Read bytes without counting traffic; may span lines."""
        out = bytearray()
        for addr in range(address, address + size):
            base = addr - addr % self.line_size_bytes
            line = self.lines.get(base)
            out.append(line[addr - base] if line is not None else 0)
        return bytes(out)

    def poke(self, address, data):
        """Write bytes without counting traffic; used to preload memory."""
        for i, value in enumerate(bytes(data)):
            addr = address + i
            base = addr - addr % self.line_size_bytes
            line = bytearray(self.lines.get(base, bytes(self.line_size_bytes)))
            line[addr - base] = value
            self.lines[base] = bytes(line)
