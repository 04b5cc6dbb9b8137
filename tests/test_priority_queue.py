"""Tests for the keyed min-priority queue."""

import pytest

from utilities.priority_queue import MinPriorityQueue


def test_pops_in_key_order():
    queue = MinPriorityQueue(key=lambda item: item[0])
    for item in [(3.0, "c"), (1.0, "a"), (2.0, "b"), (0.5, "z")]:
        queue.push(item)
    assert queue.size() == 4
    assert [queue.pop()[1] for _ in range(4)] == ["z", "a", "b", "c"]
    assert len(queue) == 0


def test_equal_keys_pop_in_insertion_order():
    queue = MinPriorityQueue(key=lambda item: item["d"])
    first, second = {"d": 1.0, "v": 7}, {"d": 1.0, "v": 2}
    queue.push(first)
    queue.push(second)
    assert queue.pop() is first
    assert queue.pop() is second


def test_interleaved_push_and_pop():
    queue = MinPriorityQueue(key=lambda x: x)
    queue.push(5)
    queue.push(1)
    assert queue.pop() == 1
    queue.push(0)
    queue.push(9)
    assert [queue.pop(), queue.pop(), queue.pop()] == [0, 5, 9]


def test_pop_empty_raises():
    queue = MinPriorityQueue(key=lambda x: x)
    with pytest.raises(IndexError):
        queue.pop()
