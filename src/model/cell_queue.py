"""Contains the priority queue of uncollapsed cells used by the WFC solver."""

from __future__ import annotations

from typing import Iterator, Sequence

from model.cell import Coordinate


class CellQueue:
    """Bucket queue of cell coordinates keyed by their remaining option count.

    Priorities are small non-negative integers bounded by the number of tile types, so every priority gets its own
    bucket. Pushing, changing the priority of, removing and testing the membership of a coordinate take constant time,
    and all coordinates sharing the lowest priority are available at once, which lets the solver break ties uniformly
    at random.
    """

    # One list of coordinates per priority, indexed by priority.
    _buckets: list[list[Coordinate]]
    # Maps each queued coordinate to its priority.
    _priorities: dict[Coordinate, int]
    # Maps each queued coordinate to its index in its bucket.
    _slots: dict[Coordinate, int]

    def __init__(self, max_priority: int) -> None:
        """Creates an empty queue accepting the priorities 0 to max_priority."""
        if max_priority < 0:
            raise ValueError(f"max_priority must not be negative, got {max_priority}")

        self._buckets = [[] for _ in range(max_priority + 1)]
        self._priorities = {}
        self._slots = {}

    def __len__(self) -> int:
        return len(self._priorities)

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._priorities

    def __iter__(self) -> Iterator[Coordinate]:
        """Iterates over a snapshot of the queued coordinates in ascending priority."""
        return iter([coordinate for bucket in self._buckets for coordinate in bucket])

    @property
    def max_priority(self) -> int:
        return len(self._buckets) - 1

    def clear(self) -> None:
        for bucket in self._buckets:
            bucket.clear()
        self._priorities.clear()
        self._slots.clear()

    def push(self, coordinate: Coordinate, priority: int) -> None:
        """Adds a coordinate with the given priority.

        Raises:
            KeyError: If the coordinate is already queued.
            ValueError: If the priority lies outside of [0, max_priority].
        """
        if coordinate in self._priorities:
            raise KeyError(f"{coordinate} is already queued")
        self._insert(coordinate, priority)

    def lowest(self) -> Sequence[Coordinate]:
        """Returns all coordinates sharing the smallest priority, or an empty sequence if the queue is empty.

        The returned sequence is the queue's own bucket. It is only valid until the next mutation and must not be
        modified.
        """
        for bucket in self._buckets:
            if bucket:
                return bucket
        return ()

    def update(self, coordinate: Coordinate, priority: int) -> None:
        """Changes the priority of a queued coordinate.

        Raises:
            KeyError: If the coordinate is not queued.
            ValueError: If the priority lies outside of [0, max_priority].
        """
        if self._priorities[coordinate] == priority:
            return
        self._check_priority(priority)
        self.remove(coordinate)
        self._insert(coordinate, priority)

    def remove(self, coordinate: Coordinate) -> None:
        """Removes a queued coordinate.

        Raises:
            KeyError: If the coordinate is not queued.
        """
        priority = self._priorities.pop(coordinate)
        slot = self._slots.pop(coordinate)
        bucket = self._buckets[priority]

        # Move the last coordinate of the bucket into the freed slot.
        last_coordinate = bucket.pop()
        if slot < len(bucket):
            bucket[slot] = last_coordinate
            self._slots[last_coordinate] = slot

    def _insert(self, coordinate: Coordinate, priority: int) -> None:
        self._check_priority(priority)
        bucket = self._buckets[priority]
        self._priorities[coordinate] = priority
        self._slots[coordinate] = len(bucket)
        bucket.append(coordinate)

    def _check_priority(self, priority: int) -> None:
        if not 0 <= priority < len(self._buckets):
            raise ValueError(f"Priority must lie within [0, {self.max_priority}], got {priority}")
