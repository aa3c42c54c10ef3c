import pytest

from lume.arena import Arena
from lume.errors import ArenaExhausted, InternalError


def test_store_and_read():
    arena = Arena(8)
    first = arena.store(b'abc')
    second = arena.store(b'defg')
    assert (first, second) == (0, 3)
    assert arena.read(first, 3) == b'abc'
    assert arena.read(second, 4) == b'defg'
    assert arena.offset == 7


def test_offsets_survive_growth():
    arena = Arena(4)
    start = arena.store(b'xy')
    big = arena.store(b'z' * 100)
    assert arena.capacity >= 102
    assert arena.read(start, 2) == b'xy'
    assert arena.read(big, 100) == b'z' * 100


def test_growth_doubles_when_enough():
    arena = Arena(16)
    arena.alloc(10)
    arena.alloc(10)
    assert arena.capacity == 32


def test_limit_raises_arena_exhausted():
    arena = Arena(8, limit=16)
    arena.store(b'a' * 12)
    assert arena.capacity == 16
    with pytest.raises(ArenaExhausted):
        arena.store(b'b' * 8)
    assert issubclass(ArenaExhausted, InternalError)


def test_read_outside_allocation():
    arena = Arena(16)
    arena.store(b'abc')
    with pytest.raises(IndexError):
        arena.read(2, 5)


def test_box_and_unbox():
    arena = Arena()
    handle = arena.box('value')
    assert arena.unbox(handle) == 'value'
    assert arena.box('other') == handle + 1


def test_reset_reclaims_everything():
    arena = Arena(8)
    arena.store(b'abcdef')
    arena.box(1)
    arena.reset()
    assert arena.offset == 0
    assert arena.boxes == []
    assert arena.store(b'z') == 0


def test_invalid_sizes():
    with pytest.raises(ValueError):
        Arena(0)
    with pytest.raises(ValueError):
        Arena().alloc(-1)
