"""Tests for the bucket queue of uncollapsed cells."""

from __future__ import annotations

import random

import pytest

from model.cell import Coordinate
from model.cell_queue import CellQueue


class TestLowest:
    def test_returns_coordinates_with_smallest_priority(self) -> None:
        queue = CellQueue(5)
        queue.push(Coordinate(0, 0), 3)
        queue.push(Coordinate(0, 1), 1)
        queue.push(Coordinate(0, 2), 1)
        assert set(queue.lowest()) == {(0, 1), (0, 2)}

    def test_empty_queue(self) -> None:
        assert list(CellQueue(3).lowest()) == []

    def test_iteration_is_ascending_by_priority(self) -> None:
        queue = CellQueue(5)
        queue.push(Coordinate(0, 0), 4)
        queue.push(Coordinate(0, 1), 0)
        queue.push(Coordinate(0, 2), 2)
        assert list(queue) == [(0, 1), (0, 2), (0, 0)]


class TestUpdate:
    def test_lowering_priority_moves_item_forward(self) -> None:
        queue = CellQueue(5)
        for col in range(4):
            queue.push(Coordinate(0, col), 5)
        queue.update(Coordinate(0, 3), 1)
        assert list(queue.lowest()) == [(0, 3)]

    def test_raising_priority_moves_item_back(self) -> None:
        queue = CellQueue(10)
        for col in range(4):
            queue.push(Coordinate(0, col), col)
        queue.update(Coordinate(0, 0), 10)
        assert list(queue)[-1] == (0, 0)
        assert list(queue.lowest()) == [(0, 1)]

    def test_update_unknown_raises(self) -> None:
        with pytest.raises(KeyError):
            CellQueue(3).update(Coordinate(0, 0), 1)

    def test_priority_out_of_range_raises(self) -> None:
        queue = CellQueue(3)
        with pytest.raises(ValueError):
            queue.push(Coordinate(0, 0), 4)
        queue.push(Coordinate(0, 0), 3)
        with pytest.raises(ValueError):
            queue.update(Coordinate(0, 0), -1)
        assert Coordinate(0, 0) in queue


class TestMembership:
    def test_contains_and_remove(self) -> None:
        queue = CellQueue(3)
        queue.push(Coordinate(0, 0), 1)
        queue.push(Coordinate(0, 1), 1)
        assert Coordinate(0, 0) in queue
        queue.remove(Coordinate(0, 0))
        assert Coordinate(0, 0) not in queue
        assert len(queue) == 1
        assert list(queue) == [(0, 1)]

    def test_push_duplicate_raises(self) -> None:
        queue = CellQueue(3)
        queue.push(Coordinate(0, 0), 1)
        with pytest.raises(KeyError):
            queue.push(Coordinate(0, 0), 2)

    def test_remove_unknown_raises(self) -> None:
        with pytest.raises(KeyError):
            CellQueue(3).remove(Coordinate(0, 0))

    def test_clear(self) -> None:
        queue = CellQueue(3)
        queue.push(Coordinate(0, 0), 1)
        queue.clear()
        assert len(queue) == 0
        assert Coordinate(0, 0) not in queue
        assert list(queue.lowest()) == []

    def test_negative_max_priority_raises(self) -> None:
        with pytest.raises(ValueError):
            CellQueue(-1)


class TestConsistency:
    @pytest.mark.parametrize("seed", range(5))
    def test_random_operations_match_a_recount(self, seed: int) -> None:
        rng = random.Random(seed)
        queue = CellQueue(9)
        priorities: dict[Coordinate, int] = {}
        for col in range(40):
            coordinate = Coordinate(0, col)
            priorities[coordinate] = rng.randint(0, 9)
            queue.push(coordinate, priorities[coordinate])

        for _ in range(60):
            coordinate = rng.choice(sorted(priorities))
            if rng.random() < 0.3:
                queue.remove(coordinate)
                del priorities[coordinate]
            else:
                priorities[coordinate] = rng.randint(0, 9)
                queue.update(coordinate, priorities[coordinate])

            assert len(queue) == len(priorities)
            assert sorted(queue) == sorted(priorities)
            lowest_priority = min(priorities.values())
            assert sorted(queue.lowest()) == sorted(
                coordinate for coordinate, priority in priorities.items() if priority == lowest_priority
            )
