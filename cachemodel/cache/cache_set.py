from typing import List, Optional


class Line:
    """One storage slot of a set."""

    __slots__ = ('tag', 'valid', 'dirty', 'data')

    def __init__(self, line_size_bytes):
        self.tag = 0
        self.valid = False
        self.dirty = False
        self.data = bytearray(line_size_bytes)

    def __repr__(self):
        state = ('V' if self.valid else '-') + ('D' if self.dirty else '-')
        return f"Line(tag={self.tag:#x}, {state})"


class CacheSet:
    """Fixed number of ways sharing one index, plus their replacement state.

    - lines: list of ``associativity`` Line objects, way i at position i
    - policy: replacement policy instance owned by this set only

    A tag is valid in at most one way at a time.
    """

    def __init__(self, associativity, line_size_bytes, policy):
        self.associativity = associativity
        self.line_size_bytes = line_size_bytes
        self.lines: List[Line] = [Line(line_size_bytes) for _ in range(associativity)]
        self.policy = policy

    def lookup(self, tag) -> Optional[int]:
        """Return the way holding ``tag``, or None on a miss."""
        for way, line in enumerate(self.lines):
            if line.valid and line.tag == tag:
                return way
        return None

    def touch(self, way):
        self.policy.on_access(way)

    def eviction_candidate(self) -> int:
        return self.policy.select_victim(self.lines)

    def fill(self, tag, way, data=None):
        """Load ``tag`` into ``way``: valid, clean, and freshly ordered."""
        holder = self.lookup(tag)
        if holder is not None and holder != way:
            raise ValueError(f"tag {tag:#x} is already valid in way {holder}")
        line = self.lines[way]
        line.tag = tag
        line.valid = True
        line.dirty = False
        if data is None:
            line.data[:] = bytes(self.line_size_bytes)
        else:
            if len(data) != self.line_size_bytes:
                raise ValueError(
                    f"fill data is {len(data)} bytes, line size is {self.line_size_bytes}")
            line.data[:] = data
        self.policy.on_fill(way)

    def invalidate(self, way):
        line = self.lines[way]
        line.valid = False
        line.dirty = False

    def dirty_ways(self):
        return [way for way, line in enumerate(self.lines) if line.valid and line.dirty]

    def valid_tags(self):
        return [line.tag for line in self.lines if line.valid]
