import numbers
from typing import NamedTuple

from cachemodel.cache.errors import InvalidAddress


class DecodedAddress(NamedTuple):
    tag: int
    index: int
    offset: int


class AddressDecoder:
    """Split flat addresses into (tag, index, offset) for a given CacheConfig.

    Bit layout, low to high: ``offset`` takes log2(line_size_bytes) bits,
    ``index`` the next log2(num_sets) bits, and ``tag`` everything above.
    Decoding is pure arithmetic; the decoder holds only derived masks.
    """

    def __init__(self, config):
        self.address_width = config.address_width
        self.offset_bits = config.offset_bits
        self.index_bits = config.index_bits
        self.offset_mask = (1 << self.offset_bits) - 1
        self.index_mask = (1 << self.index_bits) - 1
        self.limit = 1 << self.address_width

    def check(self, address):
        # bool is an int subclass but never a meaningful address
        if not isinstance(address, numbers.Integral) or isinstance(address, bool):
            raise InvalidAddress(f"address must be an integer (got {address!r})")
        address = int(address)
        if address < 0 or address >= self.limit:
            raise InvalidAddress(
                f"address {address:#x} does not fit in {self.address_width} bits"
                if address >= 0 else f"address must be non-negative (got {address})")
        return address

    def decode(self, address) -> DecodedAddress:
        address = self.check(address)
        offset = address & self.offset_mask
        index = (address >> self.offset_bits) & self.index_mask
        tag = address >> (self.offset_bits + self.index_bits)
        return DecodedAddress(tag, index, offset)

    def encode(self, tag, index, offset=0) -> int:
        """Inverse of decode; rebuilds the address the fields came from."""
        address = (tag << (self.offset_bits + self.index_bits)) | (index << self.offset_bits) | offset
        return self.check(address)

    def line_address(self, address) -> int:
        """Align an address down to the start of its line."""
        return self.check(address) & ~self.offset_mask
