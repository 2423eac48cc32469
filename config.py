class Config:
    # Cache geometry
    line_size_bytes = 64       # bytes per line
    num_sets = 16              # sets (power of two)
    associativity = 4          # ways per set
    address_width = 32         # bits

    # Policies
    write_policy = 'write_back'        # or 'write_through'
    allocate_policy = 'allocate'       # or 'no_allocate'
    replacement_policy = 'lru'         # lru | fifo | random | plru
    seed = 1234                        # Random policy generator seed

    # Timing for AMAT (cycles)
    hit_time = 2
    miss_penalty = 200

    # Trace
    trace_path = None          # text trace file; None = synthetic
    synthetic_length = 5000
    synthetic_pattern = 'mixed'        # sequential | random | mixed | loop
    write_ratio = 0.3
    # Conflict trace: hot blocks all mapping to one set
    conflict = False
    conflict_hotset = 6
