"""Contains the statistics snapshot a selection policy observes about a WFC run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from model.wave_function import WaveFunction


@dataclass(frozen=True)
class SolverStats:
    """Immutable snapshot of the state of a WFC run.

    All ratios are 0.0 when their denominator is zero (uninitialized solver, empty grid, nothing collapsed yet or
    nothing left to collapse), so consumers never have to guard against division by zero.

    Attributes:
        total_cells: Number of cells in the grid.
        collapsed_count: Number of collapsed cells.
        uncollapsed_count: Number of uncollapsed cells.
        total_entropy: Sum of the remaining option counts of all uncollapsed cells.
        tile_count: Number of tile types in the catalog.
        collapsed_ratio: collapsed_count / total_cells.
        mean_entropy: total_entropy / uncollapsed_count.
        normalized_mean_entropy: mean_entropy / tile_count, in [0, 1].
        available_ratios: Per tile (in catalog order), the share of uncollapsed cells that still admit the tile.
        usage_ratios: Per tile (in catalog order), the share of collapsed cells that were collapsed to the tile.
    """

    total_cells: int
    collapsed_count: int
    uncollapsed_count: int
    total_entropy: int
    tile_count: int
    collapsed_ratio: float
    mean_entropy: float
    normalized_mean_entropy: float
    available_ratios: tuple[float, ...]
    usage_ratios: tuple[float, ...]

    @classmethod
    def from_wave_function(cls, wave_function: WaveFunction) -> SolverStats:
        """Collects the statistics of the current run of a solver."""
        total_cells = wave_function.total_cells
        collapsed_count = wave_function.collapsed_count
        uncollapsed_count = wave_function.uncollapsed_count
        total_entropy = wave_function.total_entropy
        tile_count = wave_function.catalog.tile_count

        mean_entropy = _ratio(total_entropy, uncollapsed_count)

        return cls(
            total_cells=total_cells,
            collapsed_count=collapsed_count,
            uncollapsed_count=uncollapsed_count,
            total_entropy=total_entropy,
            tile_count=tile_count,
            collapsed_ratio=_ratio(collapsed_count, total_cells),
            mean_entropy=mean_entropy,
            normalized_mean_entropy=_ratio(mean_entropy, tile_count),
            available_ratios=tuple(
                _ratio(wave_function.available_cell_count(tile), uncollapsed_count) for tile in wave_function.tiles
            ),
            usage_ratios=tuple(
                _ratio(wave_function.get_tile_usage(tile), collapsed_count) for tile in wave_function.tiles
            ),
        )


def _ratio(numerator: float, denominator: float) -> float:
    """Returns numerator / denominator, or 0.0 if the denominator is zero."""
    if denominator == 0:
        return 0.0
    return float(numerator) / float(denominator)
