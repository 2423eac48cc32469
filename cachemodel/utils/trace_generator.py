import numpy as np

from cachemodel.utils.workload_loader import LOAD, STORE, Access


def generate_sample_trace(size=10000, pattern_type='mixed', block_size=64, seed=None):
    """Generate a sample memory access trace (array of byte addresses)"""
    rng = np.random.default_rng(seed)
    if pattern_type == 'sequential':
        # Sequential access pattern, one access per block
        return np.arange(size) * block_size

    elif pattern_type == 'random':
        return rng.integers(0, size * block_size, size)

    elif pattern_type == 'mixed':
        # Half sequential, half random, shuffled together
        trace = np.concatenate([
            np.arange(size // 2) * block_size,
            rng.integers(0, size * block_size, size - size // 2),
        ])
        rng.shuffle(trace)
        return trace

    elif pattern_type == 'loop':
        # Loop pattern (simulating program loops)
        base_pattern = np.arange(100) * block_size
        repeats = max(1, size // 100)
        return np.tile(base_pattern, repeats)

    else:
        raise ValueError(f"Unknown pattern type: {pattern_type}")


def generate_conflict_trace(num_sets, hot=8, length=500, block_size=64, target_set=0):
    """Cycle over ``hot`` distinct blocks that all map to ``target_set``.

    With ``hot`` greater than the associativity every access after the
    first round can miss, which separates the replacement policies.
    """
    hot_blocks = [i * num_sets + target_set for i in range(hot)]
    blocks = [hot_blocks[i % len(hot_blocks)] for i in range(length)]
    return np.array(blocks, dtype=np.int64) * block_size


def generate_operations(addresses, write_ratio=0.3, seed=None):
    """Turn an address trace into Access records, a ``write_ratio`` share of them stores."""
    rng = np.random.default_rng(seed)
    ops = []
    for addr in addresses:
        if rng.random() < write_ratio:
            ops.append(Access(STORE, int(addr), int(rng.integers(0, 256))))
        else:
            ops.append(Access(LOAD, int(addr)))
    return ops


def save_trace(trace, filename):
    """Save trace to a file"""
    np.save(filename, np.asarray(trace))


def load_trace(filename):
    """Load trace from a file"""
    return np.load(filename)
