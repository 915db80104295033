"""Contains the per-position solving state of the WFC grid."""

from __future__ import annotations

from typing import NamedTuple, Sequence, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from model.tile_catalog import TileType


class Coordinate(NamedTuple):
    """The (row, col) address of a cell on the offset hex grid."""

    row: int
    col: int


class Cell:
    """The mutable WFC state of a single grid position.

    A cell only holds data. Anything visual is addressed by its coordinate from outside the solver.

    Attributes:
        coordinate: The grid position of the cell.
        collapsed: True once the cell has been fixed to a single tile. Never reverts.
        collapsed_tile: The tile the cell was fixed to, or None while uncollapsed.
    """

    coordinate: Coordinate
    collapsed: bool
    collapsed_tile: TileType | None

    # All tile types of the catalog, indexed like the coefficients.
    _tiles: tuple[TileType, ...]
    # Boolean array which contains True for each index of a tile that is still admissible, False otherwise.
    _coefficients: NDArray[np.bool_]
    # Cached number of True entries in '_coefficients'.
    _remaining_option_count: int

    def __init__(self, coordinate: Coordinate) -> None:
        """Creates an uninitialized cell with an empty domain."""
        self.coordinate = coordinate
        self.collapsed = False
        self.collapsed_tile = None
        self._tiles = ()
        self._coefficients = np.full(0, False, dtype=bool)
        self._remaining_option_count = 0

    def __repr__(self) -> str:
        state = self.collapsed_tile.name if self.collapsed_tile is not None else self._remaining_option_count
        return f"Cell({self.coordinate.row}, {self.coordinate.col}, {state})"

    @property
    def remaining_option_count(self) -> int:
        """The number of tiles still admissible for this cell (its entropy)."""
        return self._remaining_option_count

    @property
    def domain(self) -> tuple[TileType, ...]:
        """The tiles still admissible for this cell, in catalog order."""
        return tuple(tile for tile, admissible in zip(self._tiles, self._coefficients) if admissible)

    @property
    def coefficients(self) -> NDArray[np.bool_]:
        """A read-only view of the boolean domain mask, indexed by tile index."""
        view = self._coefficients.view()
        view.setflags(write=False)
        return view

    def initialize(self, all_tiles: Sequence[TileType]) -> None:
        """Resets the cell to the full domain of the given tiles."""
        self._tiles = tuple(all_tiles)
        self._coefficients = np.full(len(self._tiles), True, dtype=bool)
        self._remaining_option_count = len(self._tiles)
        self.collapsed = False
        self.collapsed_tile = None

    def contains(self, tile: TileType) -> bool:
        """Returns True if the tile is still admissible for this cell."""
        return 0 <= tile.index < len(self._coefficients) and bool(self._coefficients[tile.index])

    def force_collapse(self, tile: TileType) -> None:
        """Fixes the cell to the given tile, regardless of its current domain."""
        self._coefficients = np.full(len(self._tiles), False, dtype=bool)
        self._coefficients[tile.index] = True
        self._remaining_option_count = 1
        self.collapsed_tile = tile
        self.collapsed = True

    def reduce_domain(self, allowed_tiles: NDArray[np.bool_]) -> bool:
        """Removes every tile that is not allowed by the given mask.

        Args:
            allowed_tiles: Boolean mask over all tile indices.

        Returns:
            True if at least one tile was removed, False otherwise (always False for collapsed cells).
        """
        if self.collapsed:
            return False

        reduced_coefficients = self._coefficients & allowed_tiles
        reduced_count = int(np.count_nonzero(reduced_coefficients))
        if reduced_count == self._remaining_option_count:
            return False

        self._coefficients = reduced_coefficients
        self._remaining_option_count = reduced_count
        return True
