"""Contains the hex grid that owns all cells and defines their adjacency."""

from __future__ import annotations

from typing import Iterator, TYPE_CHECKING

from enums import HexParity
from model.cell import Cell, Coordinate

if TYPE_CHECKING:
    from model.tile_catalog import TileType


class HexGrid:
    """Owns one cell per coordinate of a rectangular (rows x cols) offset hex grid.

    Rows with an odd index are shifted by half a cell, so the neighbor deltas of a cell depend on the parity of its row.
    See 'enums.HexParity' for the two offset tables.

    Attributes:
        rows: Number of rows (in cells).
        cols: Number of columns (in cells).
    """

    rows: int
    cols: int

    # Maps each coordinate to its cell. Insertion order is row-major.
    _cells: dict[Coordinate, Cell]

    def __init__(self, rows: int, cols: int) -> None:
        """Creates all cells of the grid. Cells still need to be initialized with a tile set."""
        if rows < 0 or cols < 0:
            raise ValueError(f"Grid size must not be negative, got {rows}x{cols}")

        self.rows = rows
        self.cols = cols
        self._cells = {}
        for row in range(rows):
            for col in range(cols):
                coordinate = Coordinate(row, col)
                self._cells[coordinate] = Cell(coordinate)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells.values())

    def __len__(self) -> int:
        return len(self._cells)

    @property
    def size(self) -> tuple[int, int]:
        """The (rows, cols) dimensions of the grid."""
        return self.rows, self.cols

    @property
    def cell_count(self) -> int:
        return len(self._cells)

    def initialize_cells(self, all_tiles: tuple[TileType, ...]) -> None:
        """Resets every cell to the full domain."""
        for cell in self._cells.values():
            cell.initialize(all_tiles)

    def cell_at(self, coordinate: tuple[int, int]) -> Cell | None:
        """Returns the cell at the given coordinate, or None if it lies outside the grid."""
        return self._cells.get(Coordinate(*coordinate))

    @staticmethod
    def neighbors_of(coordinate: tuple[int, int]) -> list[Coordinate]:
        """Returns the six adjacent coordinates, including those outside of any grid bounds."""
        row, col = coordinate
        return [Coordinate(row + d_row, col + d_col) for d_row, d_col in HexParity.of_row(row).to_offsets()]

    def existing_neighbors(self, coordinate: tuple[int, int]) -> Iterator[Cell]:
        """Yields the neighbor cells of a coordinate that exist on this grid."""
        for neighbor_coordinate in self.neighbors_of(coordinate):
            neighbor = self._cells.get(neighbor_coordinate)
            if neighbor is not None:
                yield neighbor
