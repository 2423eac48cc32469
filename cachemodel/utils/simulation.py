from dataclasses import replace

from cachemodel.cache.config import ReplacementKind
from cachemodel.cache.memory import MainMemory
from cachemodel.cache.model import CacheModel
from cachemodel.utils.workload_loader import STORE, Access


def run_trace(model, accesses):
    """Feed a trace through ``model`` and return its statistics afterwards.

    ``accesses`` holds Access records or bare addresses (treated as loads).
    """
    for access in accesses:
        if isinstance(access, Access):
            if access.op == STORE:
                model.store(access.address, access.value or 0)
            else:
                model.load(access.address)
        else:
            model.load(int(access))
    return model.statistics_snapshot()


def make_model(config, memory_size=None):
    """CacheModel over a fresh MainMemory covering the whole address space."""
    size = memory_size if memory_size is not None else 1 << config.address_width
    return CacheModel(config, MainMemory(size_bytes=size, line_size_bytes=config.line_size_bytes))


def compare_policies(base_config, accesses, kinds=tuple(ReplacementKind)):
    """Run the same trace under each replacement policy.

    Returns a dict mapping the policy name to its Statistics.
    """
    accesses = list(accesses)
    results = {}
    for kind in kinds:
        config = replace(base_config, replacement_policy=kind)
        results[ReplacementKind(kind).value] = run_trace(make_model(config), accesses)
    return results
