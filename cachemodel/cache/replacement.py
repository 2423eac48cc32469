"""Per-set victim selection strategies.

Each set owns one policy instance. The set calls ``on_fill`` when a line
is (re)loaded and ``on_access`` on every hit; ``select_victim`` is asked
for a way when a miss needs room. Policies only see the set's lines to
check validity; their ordering state is private.
"""
import numpy as np

from cachemodel.cache.config import ReplacementKind


def _first_invalid(lines):
    for way, line in enumerate(lines):
        if not line.valid:
            return way
    return None


class LRUPolicy:
    """True LRU: recency order of ways, least recent first."""

    def __init__(self, associativity):
        self.order = list(range(associativity))

    def on_access(self, way):
        self.order.remove(way)
        self.order.append(way)

    def on_fill(self, way):
        self.on_access(way)

    def select_victim(self, lines):
        # invalid ways always win over valid ones
        way = _first_invalid(lines)
        return self.order[0] if way is None else way


class FIFOPolicy:
    """Evict by insertion order; re-accessing a line does not refresh it."""

    def __init__(self, associativity):
        self.inserted = [0] * associativity
        self.clock = 0

    def on_access(self, way):
        pass

    def on_fill(self, way):
        self.clock += 1
        self.inserted[way] = self.clock

    def select_victim(self, lines):
        way = _first_invalid(lines)
        if way is not None:
            return way
        return min(range(len(self.inserted)), key=self.inserted.__getitem__)


class RandomPolicy:
    """Uniform choice over every way, valid or not."""

    def __init__(self, associativity, rng=None):
        self.associativity = associativity
        self.rng = rng if rng is not None else np.random.default_rng()

    def on_access(self, way):
        pass

    def on_fill(self, way):
        pass

    def select_victim(self, lines):
        return int(self.rng.integers(0, self.associativity))


class PLRUPolicy:
    """Tree pseudo-LRU for power-of-two associativity.

    ``associativity - 1`` bits form a complete binary tree stored
    heap-style (children of node i are 2i+1 and 2i+2). Each bit names the
    subtree to visit when looking for a victim: 0 = left, 1 = right.

    For 4 ways::

              bit0
             /    \\
          bit1    bit2
          /  \\    /  \\
         w0  w1  w2  w3
    """

    def __init__(self, associativity):
        self.associativity = associativity
        self.levels = associativity.bit_length() - 1
        self.bits = [0] * (associativity - 1)

    def on_access(self, way):
        # point every node on the path away from the way just used
        node = 0
        for level in range(self.levels):
            direction = (way >> (self.levels - 1 - level)) & 1
            self.bits[node] = 1 - direction
            node = 2 * node + 1 + direction

    def on_fill(self, way):
        self.on_access(way)

    def select_victim(self, lines):
        node = 0
        way = 0
        for _ in range(self.levels):
            direction = self.bits[node]
            way = (way << 1) | direction
            node = 2 * node + 1 + direction
        return way


def make_policy(kind, associativity, rng=None):
    """Instantiate the policy for ``kind`` (a ReplacementKind)."""
    if kind is ReplacementKind.LRU:
        return LRUPolicy(associativity)
    if kind is ReplacementKind.FIFO:
        return FIFOPolicy(associativity)
    if kind is ReplacementKind.RANDOM:
        return RandomPolicy(associativity, rng)
    if kind is ReplacementKind.PLRU:
        return PLRUPolicy(associativity)
    raise ValueError(f"Unknown replacement policy: {kind}")
