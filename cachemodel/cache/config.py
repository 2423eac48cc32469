from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cachemodel.cache.errors import InvalidConfig


class WritePolicy(Enum):
    """What happens to backing storage when a store hits."""
    WRITE_THROUGH = "write_through"
    WRITE_BACK = "write_back"


class AllocatePolicy(Enum):
    """Whether a store miss brings the line into the cache."""
    ALLOCATE = "allocate"
    NO_ALLOCATE = "no_allocate"


class ReplacementKind(Enum):
    """Victim selection strategy used inside every set."""
    LRU = "lru"
    FIFO = "fifo"
    RANDOM = "random"
    PLRU = "plru"


def is_power_of_two(n):
    return isinstance(n, int) and n > 0 and (n & (n - 1)) == 0


def _coerce(enum_cls, value, field_name):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower().replace('-', '_'))
    except ValueError:
        choices = ', '.join(m.value for m in enum_cls)
        raise InvalidConfig(f"{field_name} must be one of: {choices} (got {value!r})") from None


@dataclass(frozen=True)
class CacheConfig:
    """Geometry and policies of one set-associative cache.

    The configuration is fixed for the lifetime of a CacheModel. Policy
    fields accept either the enum members or their string values, e.g.
    ``replacement_policy="fifo"`` or ``write_policy="write-back"``.

    Args:
        line_size_bytes: bytes per line, a power of two
        num_sets: number of sets, a power of two
        associativity: ways per set (>= 1)
        address_width: address size in bits
        write_policy: write-through or write-back
        allocate_policy: allocate or no-allocate on a store miss
        replacement_policy: LRU, FIFO, Random or pseudo-LRU
        seed: seed for the Random policy's generator (None = nondeterministic)
    """
    line_size_bytes: int = 64
    num_sets: int = 16
    associativity: int = 4
    address_width: int = 32
    write_policy: WritePolicy = WritePolicy.WRITE_BACK
    allocate_policy: AllocatePolicy = AllocatePolicy.ALLOCATE
    replacement_policy: ReplacementKind = ReplacementKind.LRU
    seed: Optional[int] = None

    def __post_init__(self):
        # frozen dataclass: coerced enums have to go through object.__setattr__
        object.__setattr__(self, 'write_policy',
                           _coerce(WritePolicy, self.write_policy, 'write_policy'))
        object.__setattr__(self, 'allocate_policy',
                           _coerce(AllocatePolicy, self.allocate_policy, 'allocate_policy'))
        object.__setattr__(self, 'replacement_policy',
                           _coerce(ReplacementKind, self.replacement_policy, 'replacement_policy'))

        if not is_power_of_two(self.line_size_bytes):
            raise InvalidConfig(f"line_size_bytes must be a power of two (got {self.line_size_bytes!r})")
        if not is_power_of_two(self.num_sets):
            raise InvalidConfig(f"num_sets must be a power of two (got {self.num_sets!r})")
        if not isinstance(self.associativity, int) or self.associativity < 1:
            raise InvalidConfig(f"associativity must be at least 1 (got {self.associativity!r})")
        if not isinstance(self.address_width, int) or self.address_width < 1:
            raise InvalidConfig(f"address_width must be a positive integer (got {self.address_width!r})")
        if self.offset_bits + self.index_bits >= self.address_width:
            raise InvalidConfig(
                f"offset bits ({self.offset_bits}) + index bits ({self.index_bits}) "
                f"leave no tag bits in a {self.address_width}-bit address")
        if self.replacement_policy is ReplacementKind.PLRU and not is_power_of_two(self.associativity):
            raise InvalidConfig(
                f"pseudo-LRU needs a power-of-two associativity (got {self.associativity})")

    @classmethod
    def from_capacity(cls, capacity_bytes, line_size_bytes=64, associativity=4, **kwargs):
        """Build a config from total capacity, deriving the number of sets."""
        if line_size_bytes <= 0 or associativity <= 0:
            raise InvalidConfig("line_size_bytes and associativity must be positive")
        ways_bytes = line_size_bytes * associativity
        if capacity_bytes <= 0 or capacity_bytes % ways_bytes != 0:
            raise InvalidConfig(
                f"capacity {capacity_bytes} is not a multiple of line_size_bytes x associativity ({ways_bytes})")
        return cls(line_size_bytes=line_size_bytes,
                   num_sets=capacity_bytes // ways_bytes,
                   associativity=associativity,
                   **kwargs)

    @property
    def offset_bits(self) -> int:
        return self.line_size_bytes.bit_length() - 1

    @property
    def index_bits(self) -> int:
        return self.num_sets.bit_length() - 1

    @property
    def tag_bits(self) -> int:
        return self.address_width - self.offset_bits - self.index_bits

    @property
    def capacity_bytes(self) -> int:
        return self.line_size_bytes * self.num_sets * self.associativity

    @property
    def is_write_back(self) -> bool:
        return self.write_policy is WritePolicy.WRITE_BACK

    @property
    def is_write_allocate(self) -> bool:
        return self.allocate_policy is AllocatePolicy.ALLOCATE
