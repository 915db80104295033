"""Tests for the statistics snapshot observed by selection policies."""

from __future__ import annotations

import random

import pytest

from model.solver_stats import SolverStats
from model.tile_catalog import TileCatalog
from model.wave_function import WaveFunction


class TestSolverStats:
    def test_uninitialized_solver_has_neutral_stats(self, open_catalog: TileCatalog) -> None:
        stats = WaveFunction(open_catalog, 2, 2).get_stats()
        assert stats.total_cells == 0
        assert stats.collapsed_ratio == 0.0
        assert stats.mean_entropy == 0.0
        assert stats.normalized_mean_entropy == 0.0
        assert stats.available_ratios == (0.0, 0.0)
        assert stats.usage_ratios == (0.0, 0.0)

    def test_fresh_run(self, gradient_catalog: TileCatalog) -> None:
        wave_function = WaveFunction(gradient_catalog, 2, 2, rng=random.Random(0))
        wave_function.initialize()
        stats = wave_function.get_stats()
        assert stats.total_cells == 4
        assert stats.uncollapsed_count == 4
        assert stats.total_entropy == 12
        assert stats.tile_count == 3
        assert stats.mean_entropy == 3.0
        assert stats.normalized_mean_entropy == 1.0
        assert stats.available_ratios == (1.0, 1.0, 1.0)
        # Nothing collapsed yet.
        assert stats.usage_ratios == (0.0, 0.0, 0.0)

    def test_after_one_collapse(self, open_catalog: TileCatalog) -> None:
        wave_function = WaveFunction(open_catalog, 1, 2, rng=random.Random(0))
        wave_function.initialize()
        wave_function.collapse_cell(wave_function.cell_at((0, 0)), open_catalog.get_tile("A"))

        stats = SolverStats.from_wave_function(wave_function)
        assert stats.collapsed_count == 1
        assert stats.collapsed_ratio == 0.5
        assert stats.mean_entropy == 2.0
        assert stats.normalized_mean_entropy == 1.0
        assert stats.available_ratios == (1.0, 1.0)
        assert stats.usage_ratios == (1.0, 0.0)

    def test_partial_availability(self, gradient_catalog: TileCatalog) -> None:
        wave_function = WaveFunction(gradient_catalog, 1, 3, rng=random.Random(0))
        wave_function.initialize()
        wave_function.collapse_cell(wave_function.cell_at((0, 0)), gradient_catalog.get_tile("low"))

        stats = wave_function.get_stats()
        assert stats.mean_entropy == pytest.approx(2.5)
        assert stats.available_ratios == (1.0, 1.0, 0.5)

    def test_completed_run_has_no_mean_entropy(self, open_catalog: TileCatalog) -> None:
        wave_function = WaveFunction(open_catalog, 1, 1, rng=random.Random(0))
        wave_function.initialize()
        wave_function.collapse_cell(wave_function.cell_at((0, 0)), open_catalog.get_tile("B"))

        stats = wave_function.get_stats()
        assert stats.collapsed_ratio == 1.0
        assert stats.mean_entropy == 0.0
        assert stats.available_ratios == (0.0, 0.0)
        assert stats.usage_ratios == (0.0, 1.0)

    def test_snapshot_is_frozen(self, open_catalog: TileCatalog) -> None:
        stats = WaveFunction(open_catalog, 1, 1).get_stats()
        with pytest.raises(AttributeError):
            stats.total_cells = 3
