"""Implements the WFC solver for a hex grid whose collapse decisions come from an external policy."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging
import random
from typing import TYPE_CHECKING

import numpy as np

import constants
from enums import PropagationMode, SolverStatus
from model.cell_queue import CellQueue
from model.hex_grid import HexGrid
from model.solver_stats import SolverStats

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from model.cell import Cell, Coordinate
    from model.tile_catalog import TileCatalog, TileType


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Wipeout:
    """Diagnostic record of the contradiction that ended a run.

    Attributes:
        coordinate: The cell whose domain became empty.
        source_coordinate: The cell whose constraints emptied it.
        source_tile: The tile the source cell was collapsed to, or None if the source was uncollapsed.
    """

    coordinate: Coordinate
    source_coordinate: Coordinate
    source_tile: TileType | None


class WaveFunction:
    """Owns the grid, the queue of uncollapsed cells and the run statistics of one WFC run.

    The solver never picks tiles itself. A selection policy queries it (lowest entropy cell for a tile, number of cells
    still admitting a tile, usage and entropy statistics) and then calls 'collapse_cell()'. Every collapse is followed
    by breadth-first constraint propagation to the neighboring cells. The run ends when every cell is collapsed
    (SolverStatus.COMPLETED) or when propagation empties the domain of a cell (SolverStatus.WIPED). There is no
    backtracking; a caller that wants to recover from a wipeout re-initializes the solver.

    Attributes:
        catalog: The tile types and their adjacency rules.
        propagation_mode: Which cells emit constraints during propagation.
    """

    catalog: TileCatalog
    propagation_mode: PropagationMode

    # Number of rows and columns of the grid built by initialize().
    _grid_size: tuple[int, int]
    # Source of randomness for tie-breaking. Injected so that runs are reproducible.
    _rng: random.Random

    # === RUNTIME STATE (initialized in initialize()) ===

    # The grid of the current run, None before the first initialize().
    _grid: HexGrid | None
    # Coordinates of all uncollapsed cells, keyed by their remaining option count.
    _cell_queue: CellQueue
    # Per tile index, the coordinates of the uncollapsed cells still admitting the tile, keyed like '_cell_queue'.
    _tile_queues: list[CellQueue]
    # Current state of the run.
    _status: SolverStatus
    # The contradiction that ended the run, if any.
    _wipeout: Wipeout | None
    _collapsed_count: int
    _uncollapsed_count: int
    # Sum of the remaining option counts of all uncollapsed cells.
    _total_entropy: int
    # Number of cells collapsed to each tile, indexed by tile index.
    _tile_usage: NDArray[np.int_]

    def __init__(
        self,
        catalog: TileCatalog,
        rows: int = constants.GRID_SIZE_DEFAULT,
        cols: int = constants.GRID_SIZE_DEFAULT,
        rng: random.Random | None = None,
        propagation_mode: PropagationMode = constants.PROPAGATION_MODE_DEFAULT,
    ) -> None:
        """Configures the solver. No grid exists until initialize() is called.

        Args:
            catalog: The tile types and their adjacency rules.
            rows: Number of grid rows (in cells).
            cols: Number of grid columns (in cells).
            rng: Random number generator used for tie-breaking. Defaults to a new unseeded generator.
            propagation_mode: Which cells emit constraints during propagation.
        """
        if rows < 0 or cols < 0:
            raise ValueError(f"Grid size must not be negative, got {rows}x{cols}")

        self.catalog = catalog
        self.propagation_mode = propagation_mode
        self._grid_size = (rows, cols)
        self._rng = rng if rng is not None else random.Random()

        self._grid = None
        self._reset_queues()
        self._reset_statistics()
        self._status = SolverStatus.UNINITIALIZED

    # === STATISTICS ===

    @property
    def status(self) -> SolverStatus:
        return self._status

    @property
    def wipeout(self) -> Wipeout | None:
        return self._wipeout

    @property
    def collapsed_count(self) -> int:
        return self._collapsed_count

    @property
    def uncollapsed_count(self) -> int:
        return self._uncollapsed_count

    @property
    def total_entropy(self) -> int:
        return self._total_entropy

    @property
    def tile_usage(self) -> NDArray[np.int_]:
        """A copy of the per-tile collapse counts, indexed by tile index."""
        return self._tile_usage.copy()

    @property
    def tiles(self) -> tuple[TileType, ...]:
        return self.catalog.tiles

    @property
    def grid_size(self) -> tuple[int, int]:
        """The (rows, cols) dimensions of the grid."""
        return self._grid_size

    @property
    def total_cells(self) -> int:
        """Number of cells of the current run (0 before initialize())."""
        return len(self._grid) if self._grid is not None else 0

    @property
    def grid(self) -> HexGrid | None:
        return self._grid

    def get_tile_usage(self, tile: TileType) -> int:
        """Returns how many cells have been collapsed to the given tile."""
        return int(self._tile_usage[tile.index])

    def get_stats(self) -> SolverStats:
        """Returns a snapshot of the run statistics."""
        return SolverStats.from_wave_function(self)

    # === LIFECYCLE ===

    def initialize(self) -> SolverStatus:
        """Discards all previous state and starts a new run with every cell at its full domain.

        Returns:
            SolverStatus.RUNNING, or SolverStatus.COMPLETED for a grid without cells.
        """
        self._reset_queues()
        self._grid = HexGrid(*self._grid_size)
        self._grid.initialize_cells(self.catalog.tiles)

        self._reset_statistics()
        for cell in self._grid:
            self._cell_queue.push(cell.coordinate, cell.remaining_option_count)
            for tile_queue in self._tile_queues:
                tile_queue.push(cell.coordinate, cell.remaining_option_count)
            self._total_entropy += cell.remaining_option_count
        self._uncollapsed_count = len(self._grid)

        self._status = SolverStatus.RUNNING if len(self._cell_queue) > 0 else SolverStatus.COMPLETED
        logger.info(
            "Initialized %dx%d grid with %d tile types (total entropy %d)",
            self._grid_size[0],
            self._grid_size[1],
            self.catalog.tile_count,
            self._total_entropy,
        )
        return self._status

    def _reset_queues(self) -> None:
        """Replaces the queue of uncollapsed cells and the per-tile queues with empty ones."""
        self._cell_queue = CellQueue(self.catalog.tile_count)
        self._tile_queues = [CellQueue(self.catalog.tile_count) for _ in self.catalog.tiles]

    def _reset_statistics(self) -> None:
        """Resets all counters and the wipeout record."""
        self._wipeout = None
        self._collapsed_count = 0
        self._uncollapsed_count = 0
        self._total_entropy = 0
        self._tile_usage = np.full(self.catalog.tile_count, 0, dtype=np.int_)

    # === QUERIES ===

    def is_complete(self) -> bool:
        """Returns True if the run has started and no uncollapsed cell is left."""
        return self._status is not SolverStatus.UNINITIALIZED and len(self._cell_queue) == 0

    def cell_at(self, coordinate: tuple[int, int]) -> Cell | None:
        """Returns the cell at the given coordinate, or None if there is none."""
        if self._grid is None:
            return None
        return self._grid.cell_at(coordinate)

    def neighbors_of(self, coordinate: tuple[int, int]) -> list[Coordinate]:
        """Returns the six adjacent coordinates, including those outside of the grid."""
        return HexGrid.neighbors_of(coordinate)

    def lowest_entropy_cell(self, tile: TileType) -> Cell | None:
        """Returns an uncollapsed cell that admits the tile and has the fewest remaining options.

        Ties are broken by a uniform random choice among all minimal candidates.

        Args:
            tile: The tile that the returned cell must still admit.

        Returns:
            The chosen cell, or None if no uncollapsed cell admits the tile.
        """
        tile_queue = self._get_tile_queue(tile)
        if self._grid is None or tile_queue is None:
            return None

        candidates = tile_queue.lowest()
        if not candidates:
            return None
        return self._grid.cell_at(self._rng.choice(candidates))

    def available_cell_count(self, tile: TileType) -> int:
        """Returns the number of uncollapsed cells where the tile remains admissible."""
        tile_queue = self._get_tile_queue(tile)
        return len(tile_queue) if tile_queue is not None else 0

    def admissible_tiles(self) -> tuple[TileType, ...]:
        """Returns the tiles that at least one uncollapsed cell still admits, in catalog order."""
        return tuple(tile for tile in self.catalog.tiles if len(self._tile_queues[tile.index]) > 0)

    def similar_neighbor_count(self, coordinate: tuple[int, int]) -> int:
        """Returns how many collapsed neighbors share the tile of the collapsed cell at the coordinate."""
        cell = self.cell_at(coordinate)
        if self._grid is None or cell is None or not cell.collapsed:
            return 0
        return sum(
            1
            for neighbor in self._grid.existing_neighbors(cell.coordinate)
            if neighbor.collapsed and neighbor.collapsed_tile == cell.collapsed_tile
        )

    def get_tilemap(self) -> NDArray[np.int_]:
        """Returns the (rows, cols) array of collapsed tile indices, with -1 for uncollapsed cells."""
        tilemap = np.full(self._grid_size, constants.UNCOLLAPSED_TILE_INDEX, dtype=np.int_)
        if self._grid is not None:
            for cell in self._grid:
                if cell.collapsed_tile is not None:
                    tilemap[cell.coordinate.row, cell.coordinate.col] = cell.collapsed_tile.index
        return tilemap

    def _get_tile_queue(self, tile: TileType) -> CellQueue | None:
        """Returns the queue of cells admitting the tile, or None if the tile index lies outside of the catalog."""
        if not 0 <= tile.index < len(self._tile_queues):
            return None
        return self._tile_queues[tile.index]

    # === MUTATION ===

    def collapse_cell(self, cell: Cell, tile: TileType) -> SolverStatus:
        """Fixes a cell to a tile and propagates the consequences to the rest of the grid.

        Calls that cannot apply to the current run are ignored: the solver is not running, the cell is not one of its
        uncollapsed cells (e.g. a stale reference from a previous run), or the tile is no longer admissible for the
        cell.

        Args:
            cell: An uncollapsed cell of the current run, typically obtained from lowest_entropy_cell().
            tile: The tile to fix the cell to.

        Returns:
            The status after the collapse: RUNNING if the run continues, COMPLETED if every cell is collapsed, WIPED if
                propagation emptied the domain of a cell.
        """
        if self._status is not SolverStatus.RUNNING:
            logger.debug("Ignoring collapse of %s: solver is %s", cell.coordinate, self._status.value)
            return self._status
        if cell.coordinate not in self._cell_queue or self.cell_at(cell.coordinate) is not cell:
            logger.debug("Ignoring collapse of %s: not an uncollapsed cell of this run", cell.coordinate)
            return self._status
        if tile not in self.catalog or not cell.contains(tile):
            logger.warning("Ignoring collapse of %s to '%s': tile is not admissible", cell.coordinate, tile.name)
            return self._status

        self._total_entropy -= cell.remaining_option_count
        self._collapsed_count += 1
        self._uncollapsed_count -= 1
        self._tile_usage[tile.index] += 1

        for tile_index in np.flatnonzero(cell.coefficients):
            self._tile_queues[tile_index].remove(cell.coordinate)
        cell.force_collapse(tile)
        self._cell_queue.remove(cell.coordinate)
        logger.debug("Collapsed %s to '%s'", cell.coordinate, tile.name)

        propagation_successful = self._propagate(cell)

        if not propagation_successful:
            self._status = SolverStatus.WIPED
        elif self.is_complete():
            self._status = SolverStatus.COMPLETED
            logger.info("Run completed after %d collapses", self._collapsed_count)
        return self._status

    def _propagate(self, start_cell: Cell) -> bool:
        """Restricts the domains of the neighbors of a collapsed cell, breadth first.

        Shrunk neighbors are re-queued with their new entropy and pushed onto the agenda. In COLLAPSED_ONLY mode they
        are skipped when popped because only collapsed cells emit constraints. In ARC_CONSISTENT mode they restrict
        their own neighbors to the union of the rules of their remaining tiles. Domains never grow, so each cell is
        pushed a bounded number of times.

        Returns:
            False if the domain of a cell became empty (propagation is aborted immediately), True otherwise.
        """
        assert self._grid is not None
        agenda = deque([start_cell])

        while agenda:
            current = agenda.popleft()

            if current.collapsed and current.collapsed_tile is not None:
                allowed_tiles = self.catalog.get_compatible_mask(current.collapsed_tile)
            elif self.propagation_mode == PropagationMode.ARC_CONSISTENT:
                allowed_tiles = self.catalog.compatibility[current.coefficients].any(axis=0)
            else:
                continue

            for neighbor in self._grid.existing_neighbors(current.coordinate):
                if neighbor.collapsed:
                    continue

                option_count_before = neighbor.remaining_option_count
                coefficients_before = neighbor.coefficients.copy()
                if neighbor.reduce_domain(allowed_tiles):
                    if neighbor.coordinate in self._cell_queue:
                        self._cell_queue.update(neighbor.coordinate, neighbor.remaining_option_count)
                    self._update_tile_queues(neighbor, coefficients_before)
                    self._total_entropy -= option_count_before - neighbor.remaining_option_count
                    agenda.append(neighbor)

                if neighbor.remaining_option_count == 0:
                    self._wipeout = Wipeout(neighbor.coordinate, current.coordinate, current.collapsed_tile)
                    logger.warning(
                        "Wipeout at %s due to %s with '%s'",
                        tuple(neighbor.coordinate),
                        tuple(current.coordinate),
                        current.collapsed_tile.name if current.collapsed_tile is not None else "uncollapsed",
                    )
                    return False

        return True

    def _update_tile_queues(self, cell: Cell, coefficients_before: NDArray[np.bool_]) -> None:
        """Drops a shrunk cell from the queues of the tiles it lost and re-keys it in the queues of the rest."""
        for tile_index in np.flatnonzero(coefficients_before & ~cell.coefficients):
            self._tile_queues[tile_index].remove(cell.coordinate)
        for tile_index in np.flatnonzero(cell.coefficients):
            self._tile_queues[tile_index].update(cell.coordinate, cell.remaining_option_count)
