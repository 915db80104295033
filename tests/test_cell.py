"""Tests for the per-cell domain state."""

from __future__ import annotations

import numpy as np
import pytest

from model.cell import Cell, Coordinate
from model.tile_catalog import TileCatalog


@pytest.fixture
def cell(gradient_catalog: TileCatalog) -> Cell:
    cell = Cell(Coordinate(2, 3))
    cell.initialize(gradient_catalog.tiles)
    return cell


class TestCoordinate:
    def test_value_semantics(self) -> None:
        assert Coordinate(1, 2) == Coordinate(1, 2)
        assert Coordinate(1, 2) == (1, 2)
        assert hash(Coordinate(1, 2)) == hash((1, 2))
        assert Coordinate(1, 2).row == 1 and Coordinate(1, 2).col == 2


class TestInitialize:
    def test_full_domain(self, cell: Cell, gradient_catalog: TileCatalog) -> None:
        assert cell.domain == gradient_catalog.tiles
        assert cell.remaining_option_count == 3
        assert not cell.collapsed
        assert cell.collapsed_tile is None

    def test_initialize_resets_collapsed_cell(self, cell: Cell, gradient_catalog: TileCatalog) -> None:
        cell.force_collapse(gradient_catalog.get_tile("mid"))
        cell.initialize(gradient_catalog.tiles)
        assert not cell.collapsed
        assert cell.collapsed_tile is None
        assert cell.remaining_option_count == 3

    def test_uninitialized_cell_is_empty(self) -> None:
        cell = Cell(Coordinate(0, 0))
        assert cell.domain == ()
        assert cell.remaining_option_count == 0


class TestForceCollapse:
    def test_domain_becomes_single_tile(self, cell: Cell, gradient_catalog: TileCatalog) -> None:
        high = gradient_catalog.get_tile("high")
        cell.force_collapse(high)
        assert cell.collapsed
        assert cell.collapsed_tile == high
        assert cell.domain == (high,)
        assert cell.remaining_option_count == 1


class TestReduceDomain:
    def test_removes_disallowed_tiles(self, cell: Cell, gradient_catalog: TileCatalog) -> None:
        reduced = cell.reduce_domain(np.array([True, True, False]))
        assert reduced
        assert cell.domain == (gradient_catalog.get_tile("low"), gradient_catalog.get_tile("mid"))
        assert cell.remaining_option_count == 2

    def test_returns_false_without_change(self, cell: Cell) -> None:
        assert not cell.reduce_domain(np.array([True, True, True]))
        assert cell.remaining_option_count == 3

    def test_never_grows(self, cell: Cell) -> None:
        cell.reduce_domain(np.array([True, False, False]))
        assert not cell.reduce_domain(np.array([True, True, True]))
        assert cell.remaining_option_count == 1

    def test_can_empty_the_domain(self, cell: Cell) -> None:
        assert cell.reduce_domain(np.array([False, False, False]))
        assert cell.domain == ()
        assert cell.remaining_option_count == 0

    def test_collapsed_cell_is_not_reduced(self, cell: Cell, gradient_catalog: TileCatalog) -> None:
        mid = gradient_catalog.get_tile("mid")
        cell.force_collapse(mid)
        assert not cell.reduce_domain(np.array([False, False, False]))
        assert cell.domain == (mid,)


class TestQueries:
    def test_contains(self, cell: Cell, gradient_catalog: TileCatalog) -> None:
        cell.reduce_domain(np.array([False, True, True]))
        assert not cell.contains(gradient_catalog.get_tile("low"))
        assert cell.contains(gradient_catalog.get_tile("mid"))

    def test_coefficients_are_read_only(self, cell: Cell) -> None:
        with pytest.raises(ValueError):
            cell.coefficients[0] = False
        assert cell.remaining_option_count == 3
