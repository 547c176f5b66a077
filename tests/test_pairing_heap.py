import operator
import random

import pytest

from koalagraph.pairing_heap import PairingHeap


def _drain(heap):
    out = []
    while len(heap):
        out.append(heap.pop())
    return out


def test_pops_in_descending_order():
    rng = random.Random(1)
    values = [rng.randrange(100) for _ in range(60)]
    heap = PairingHeap()
    for value in values:
        heap.push(value)
    heap.check()
    assert len(heap) == len(values)
    assert _drain(heap) == sorted(values, reverse=True)
    assert len(heap) == 0


def test_custom_less_gives_min_heap():
    rng = random.Random(2)
    values = [rng.randrange(1000) for _ in range(50)]
    heap = PairingHeap(operator.gt)
    for value in values:
        heap.push(value)
    assert heap.top() == min(values)
    assert _drain(heap) == sorted(values)


def test_top_tracks_maximum_while_pushing():
    rng = random.Random(3)
    heap = PairingHeap()
    seen = []
    for _ in range(40):
        value = rng.randrange(500)
        heap.push(value)
        seen.append(value)
        heap.check()
        assert heap.top() == max(seen)


def test_pop_returns_removed_key():
    heap = PairingHeap()
    for value in (5, 1, 9, 3):
        heap.push(value)
    top = heap.top()
    assert heap.pop() == top
    assert heap.top() == 5
    assert len(heap) == 3


def test_update_moves_entry_to_top():
    heap = PairingHeap()
    handles = {value: heap.push(value) for value in range(20)}
    heap.update(handles[3], 100)
    heap.check()
    assert heap.top() == 100
    remaining = [100] + [v for v in range(20) if v != 3]
    assert _drain(heap) == sorted(remaining, reverse=True)


def test_update_rejects_smaller_key():
    heap = PairingHeap()
    handle = heap.push(10)
    heap.push(4)
    with pytest.raises(ValueError):
        heap.update(handle, 2)
    assert heap.top() == 10


def test_erase_removes_entries():
    heap = PairingHeap()
    handles = {value: heap.push(value) for value in range(30)}
    erased = {0, 7, 29, 15, 16}
    for value in erased:
        heap.erase(handles[value])
        heap.check()
    remaining = [v for v in range(30) if v not in erased]
    assert len(heap) == len(remaining)
    assert _drain(heap) == sorted(remaining, reverse=True)


def test_erased_handle_is_rejected():
    heap = PairingHeap()
    handle = heap.push(1)
    heap.push(2)
    heap.erase(handle)
    with pytest.raises(ValueError):
        heap.erase(handle)
    assert len(heap) == 1


def test_empty_heap_raises():
    heap = PairingHeap()
    with pytest.raises(IndexError):
        heap.top()
    with pytest.raises(IndexError):
        heap.pop()


def test_clear_invalidates_handles():
    heap = PairingHeap()
    handle = heap.push(3)
    heap.push(8)
    heap.clear()
    assert len(heap) == 0
    with pytest.raises(ValueError):
        heap.update(handle, 50)
    heap.push(6)
    assert heap.top() == 6


_ACTIONS = ["push"] * 9 + ["pop"] * 5 + ["update"] * 3 + ["erase"] * 3


def test_random_operations_match_reference():
    rng = random.Random(7)
    heap = PairingHeap()
    live = {}
    pops = 0
    for step in range(500):
        action = rng.choice(_ACTIONS) if live else "push"
        if action == "push":
            key = (rng.randrange(100), step)
            live[key] = heap.push(key)
        if action == "pop":
            expected = max(live)
            assert heap.top() == expected
            assert heap.pop() == expected
            del live[expected]
            pops += 1
        if action == "update":
            old = rng.choice(sorted(live))
            new = (old[0] + rng.randrange(50), step)
            handle = live.pop(old)
            heap.update(handle, new)
            live[new] = handle
        if action == "erase":
            key = rng.choice(sorted(live))
            heap.erase(live.pop(key))
        heap.check()
        assert len(heap) == len(live)
    assert pops > 0
    assert _drain(heap) == sorted(live, reverse=True)