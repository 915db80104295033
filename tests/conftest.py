"""Shared fixtures for the hex WFC tests."""

from __future__ import annotations

from typing import Callable

import pytest

from model.tile_catalog import TileCatalog

CatalogFactory = Callable[[dict[str, list[str]]], TileCatalog]


@pytest.fixture
def catalog_factory() -> CatalogFactory:
    """Builds catalogs from {tile name: [compatible neighbor names]} mappings."""

    def make_catalog(rules: dict[str, list[str]]) -> TileCatalog:
        return TileCatalog.from_dict(
            {"tiles": [{"name": name, "compatible_neighbors": neighbors} for name, neighbors in rules.items()]}
        )

    return make_catalog


@pytest.fixture
def open_catalog(catalog_factory: CatalogFactory) -> TileCatalog:
    """A and B both tolerate A and B."""
    return catalog_factory({"A": ["A", "B"], "B": ["A", "B"]})


@pytest.fixture
def exclusive_catalog(catalog_factory: CatalogFactory) -> TileCatalog:
    """A only tolerates A, B only tolerates B."""
    return catalog_factory({"A": ["A"], "B": ["B"]})


@pytest.fixture
def gradient_catalog(catalog_factory: CatalogFactory) -> TileCatalog:
    """low <-> mid <-> high, where low and high cannot touch."""
    return catalog_factory({"low": ["low", "mid"], "mid": ["low", "mid", "high"], "high": ["mid", "high"]})


@pytest.fixture
def chain_catalog(catalog_factory: CatalogFactory) -> TileCatalog:
    """A tolerates only B, B tolerates only C, C tolerates only A (asymmetric cycle)."""
    return catalog_factory({"A": ["B"], "B": ["C"], "C": ["A"]})
