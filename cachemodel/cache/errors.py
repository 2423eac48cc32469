class CacheError(Exception):
    """Base class for errors raised by the cache model."""


class InvalidConfig(CacheError, ValueError):
    """Raised when a CacheConfig describes an impossible geometry or policy mix."""


class InvalidAddress(CacheError, ValueError):
    """Raised when an address does not fit the configured address width,
    or when an access would span more than one cache line."""


class BackingStoreFailure(CacheError, IOError):
    """Raised by a backing store that cannot serve a line read or write."""
