from cachemodel.cache.address import AddressDecoder, DecodedAddress
from cachemodel.cache.cache_set import CacheSet, Line
from cachemodel.cache.config import AllocatePolicy, CacheConfig, ReplacementKind, WritePolicy
from cachemodel.cache.errors import BackingStoreFailure, CacheError, InvalidAddress, InvalidConfig
from cachemodel.cache.memory import MainMemory
from cachemodel.cache.model import CacheModel, amat
from cachemodel.cache.results import AccessResult, EvictedLine, LoadResult, Statistics
from cachemodel.cache.write_policy import WritePolicyEngine

__all__ = [
    'AccessResult', 'AddressDecoder', 'AllocatePolicy', 'BackingStoreFailure', 'CacheConfig',
    'CacheError', 'CacheModel', 'CacheSet', 'DecodedAddress', 'EvictedLine', 'InvalidAddress',
    'InvalidConfig', 'Line', 'LoadResult', 'MainMemory', 'ReplacementKind', 'Statistics',
    'WritePolicy', 'WritePolicyEngine', 'amat',
]
