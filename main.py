"""Run one trace through the cache under every replacement policy.

Run from project root:
    python main.py [trace_file]
"""
import sys

from config import Config
from cachemodel import CacheConfig, amat
from cachemodel.utils.simulation import compare_policies
from cachemodel.utils.trace_generator import (generate_conflict_trace, generate_operations,
                                              generate_sample_trace)
from cachemodel.utils.workload_loader import WorkloadLoader


def build_trace(cfg, path=None):
    path = path or cfg.trace_path
    if path:
        trace = WorkloadLoader().load_trace(path)
        print(f"Loaded {len(trace)} accesses from {path}")
        return trace

    if cfg.conflict:
        addresses = generate_conflict_trace(cfg.num_sets, hot=cfg.conflict_hotset,
                                            length=cfg.synthetic_length,
                                            block_size=cfg.line_size_bytes)
        print(f"Using conflict trace: length={len(addresses)}, hot={cfg.conflict_hotset}, "
              f"ways={cfg.associativity}")
    else:
        addresses = generate_sample_trace(size=cfg.synthetic_length,
                                          pattern_type=cfg.synthetic_pattern,
                                          block_size=cfg.line_size_bytes,
                                          seed=cfg.seed)
        print(f"Using synthetic trace: length={len(addresses)}, pattern={cfg.synthetic_pattern}")
    return generate_operations(addresses, write_ratio=cfg.write_ratio, seed=cfg.seed)


def run(path=None):
    cfg = Config()
    cache_cfg = CacheConfig(line_size_bytes=cfg.line_size_bytes,
                            num_sets=cfg.num_sets,
                            associativity=cfg.associativity,
                            address_width=cfg.address_width,
                            write_policy=cfg.write_policy,
                            allocate_policy=cfg.allocate_policy,
                            replacement_policy=cfg.replacement_policy,
                            seed=cfg.seed)
    print(f"Cache: {cache_cfg.capacity_bytes} bytes, {cache_cfg.num_sets} sets x "
          f"{cache_cfg.associativity} ways x {cache_cfg.line_size_bytes} B, "
          f"{cache_cfg.write_policy.value}/{cache_cfg.allocate_policy.value}")

    trace = build_trace(cfg, path)
    results = compare_policies(cache_cfg, trace)

    for name, stats in results.items():
        print(f"{name:>6}: hit rate {stats.hit_rate:.3f}, misses {stats.misses}, "
              f"write-backs {stats.write_backs}, AMAT {amat(cfg.hit_time, stats.miss_rate, cfg.miss_penalty):.2f} cycles")


if __name__ == '__main__':
    run(sys.argv[1] if len(sys.argv) > 1 else None)
