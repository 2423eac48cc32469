import numpy as np

from cachemodel import EvictedLine
from conftest import LINE, addr


def test_write_back_hit_sets_dirty_without_memory_write(make_cache):
    model, store = make_cache(write_policy='write_back')
    model.load(addr(1))
    result = model.store(addr(1, offset=3), b'\xaa')
    assert result.hit
    assert not result.write_through
    assert model.sets[0].lines[result.way].dirty
    assert store.writes_logged() == []


def test_dirty_line_written_back_once_on_eviction(make_cache):
    model, store = make_cache(write_policy='write_back')
    model.load(addr(1))
    model.store(addr(1, offset=3), b'\xaa')
    model.load(addr(2))
    result = model.load(addr(3)).result

    assert result.evicted_line == EvictedLine(tag=1, was_dirty=True)
    assert result.write_back_triggered
    writes = store.writes_logged()
    assert len(writes) == 1
    _, address, data = writes[0]
    assert address == addr(1)
    expected = bytearray(LINE)
    expected[3] = 0xaa
    assert data == bytes(expected)
    assert model.statistics_snapshot().write_backs == 1


def test_clean_eviction_does_not_write_back(make_cache):
    model, store = make_cache(write_policy='write_back')
    for tag in (1, 2, 3):
        model.load(addr(tag))
    assert store.writes_logged() == []


def test_write_through_hit_forwards_line(make_cache):
    model, store = make_cache(write_policy='write_through')
    model.load(addr(4, index=2))
    result = model.store(addr(4, index=2, offset=1), b'\x11\x22')
    assert result.hit and result.write_through
    assert not model.sets[2].lines[result.way].dirty
    assert store.peek(addr(4, index=2), 4) == b'\x00\x11\x22\x00'
    assert len(store.writes_logged()) == 1


def test_write_through_never_dirty(make_cache):
    model, _ = make_cache(write_policy='write_through', associativity=2)
    rng = np.random.default_rng(11)
    for _ in range(300):
        address = int(rng.integers(0, 1 << 10))
        if rng.random() < 0.5:
            model.store(address, int(rng.integers(0, 256)))
        else:
            model.load(address)
        assert not any(line.dirty for s in model.sets for line in s.lines)


def test_write_through_miss_no_allocate_bypasses_cache(make_cache):
    model, store = make_cache(write_policy='write_through', allocate_policy='no_allocate')
    result = model.store(addr(5, index=1, offset=2), b'\x7f')
    assert not result.hit
    assert result.way is None
    assert result.write_through
    assert not model.is_hit(addr(5, index=1))
    assert all(not line.valid for s in model.sets for line in s.lines)
    assert store.peek(addr(5, index=1, offset=2)) == b'\x7f'


def test_write_through_miss_allocate_fills_and_writes(make_cache):
    model, store = make_cache(write_policy='write_through', allocate_policy='allocate')
    store.poke(addr(6), b'\x01\x02\x03')
    result = model.store(addr(6, offset=1), b'\xff')
    assert not result.hit and result.write_through
    assert model.is_hit(addr(6))
    assert not model.sets[0].lines[result.way].dirty
    # the rest of the line came from memory
    assert model.load(addr(6), size=3).data == b'\x01\xff\x03'
    assert store.peek(addr(6), 3) == b'\x01\xff\x03'


def test_write_back_miss_allocate_marks_dirty(make_cache):
    model, store = make_cache(write_policy='write_back', allocate_policy='allocate')
    result = model.store(addr(7, index=3), b'\x55')
    assert not result.hit and not result.write_through
    assert model.sets[3].lines[result.way].dirty
    assert store.writes_logged() == []
    assert store.reads == 1
    assert model.load(addr(7, index=3)).data == b'\x55'


def test_write_back_miss_no_allocate_goes_to_memory(make_cache):
    model, store = make_cache(write_policy='write_back', allocate_policy='no_allocate')
    result = model.store(addr(8), b'\x99')
    assert not result.hit and result.way is None
    assert not model.is_hit(addr(8))
    assert store.peek(addr(8)) == b'\x99'


def test_handle_eviction_depends_on_policy(make_cache):
    wb_model, _ = make_cache(write_policy='write_back')
    wt_model, _ = make_cache(write_policy='write_through')
    for model in (wb_model, wt_model):
        model.load(addr(1))
    wb_line = wb_model.sets[0].lines[0]
    wt_line = wt_model.sets[0].lines[0]
    assert not wb_model.write_engine.handle_eviction(wb_line)
    wb_line.dirty = True
    wt_line.dirty = True
    assert wb_model.write_engine.handle_eviction(wb_line)
    assert not wt_model.write_engine.handle_eviction(wt_line)
