"""Quick CLI demo to compare write/allocate policy combinations.

Run from project root:
    python compare_demo.py
"""
from cachemodel import CacheConfig
from cachemodel.utils.simulation import make_model, run_trace
from cachemodel.utils.trace_generator import generate_operations, generate_sample_trace


def run_demo(trace_size=2000, num_sets=16, ways=4, line_size=64, hit_time=2, miss_penalty=200):
    addresses = generate_sample_trace(size=trace_size, pattern_type='loop', block_size=line_size // 4, seed=7)
    trace = generate_operations(addresses, write_ratio=0.4, seed=7)

    print(f"Trace size: {len(trace)}")
    for write_policy in ('write_through', 'write_back'):
        for allocate_policy in ('allocate', 'no_allocate'):
            cfg = CacheConfig(line_size_bytes=line_size, num_sets=num_sets, associativity=ways,
                              write_policy=write_policy, allocate_policy=allocate_policy)
            model = make_model(cfg)
            stats = run_trace(model, trace)
            flushed = model.flush()
            print(f"{write_policy}/{allocate_policy}: hit rate {stats.hit_rate * 100:.2f}%, "
                  f"memory reads {model.backing_store.reads}, writes {model.backing_store.writes} "
                  f"(flush wrote {flushed}), AMAT {model.compute_amat(hit_time, miss_penalty):.2f}")


if __name__ == '__main__':
    run_demo()
