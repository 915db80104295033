"""Manages tile types and their neighbor compatibility rules for the WFC algorithm."""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence, TYPE_CHECKING

import numpy as np

import constants
from enums import HexParity

if TYPE_CHECKING:
    from numpy.typing import NDArray


class TileCatalogError(ValueError):
    """Raised when tile definitions are inconsistent or cannot be loaded."""


@dataclass(frozen=True)
class TileType:
    """A single tile type together with the tile types it tolerates as neighbors.

    Compatibility is declared per tile and is not symmetrized: tile A listing tile B does not imply that B lists A.

    Attributes:
        index: Position of the tile in its catalog. Used to index domain masks and usage counters.
        name: Unique name of the tile.
        compatible_neighbors: Names of the tiles admissible next to this tile, duplicate-free, in declaration order.
        color_rgb: The color used when rendering cells collapsed to this tile.
        weight: Relative preference used by weighted selection policies. Ignored by the solver itself.
    """

    index: int
    name: str
    compatible_neighbors: tuple[str, ...]
    color_rgb: tuple[int, int, int] = constants.TILE_COLOR_DEFAULT
    weight: float = constants.TILE_WEIGHT_DEFAULT

    def __str__(self) -> str:
        return self.name


class TileCatalog:
    """Read-only collection of tile types and their adjacency rules.

    Besides direct lookups, the catalog precomputes a boolean compatibility matrix so that a domain can be restricted
    to the neighbors admitted by a tile with a single vectorised mask intersection.

    Attributes:
        tiles: All tile types, ordered by their index.
    """

    tiles: tuple[TileType, ...]

    # Maps tile names to tile types.
    _tiles_by_name: dict[str, TileType]
    # [a, b] is True exactly if tile b is admissible as a neighbor of tile a.
    _compatibility: NDArray[np.bool_]

    def __init__(self, tiles: Sequence[TileType]) -> None:
        """Validates the tile definitions and builds the compatibility matrix.

        Args:
            tiles: The tile types, where each tile's index must equal its position in the sequence.

        Raises:
            TileCatalogError: If the catalog is empty, names or indices are inconsistent, or a tile lists an unknown
                neighbor.
        """
        if not tiles:
            raise TileCatalogError("A tile catalog needs at least one tile type")

        self.tiles = tuple(tiles)
        self._tiles_by_name = {}
        for position, tile in enumerate(self.tiles):
            if tile.index != position:
                raise TileCatalogError(f"Tile '{tile.name}' has index {tile.index} but is at position {position}")
            if tile.name in self._tiles_by_name:
                raise TileCatalogError(f"Duplicate tile name '{tile.name}'")
            self._tiles_by_name[tile.name] = tile

        self._compatibility = np.full((len(self.tiles), len(self.tiles)), False, dtype=bool)
        for tile in self.tiles:
            for neighbor_name in tile.compatible_neighbors:
                if neighbor_name not in self._tiles_by_name:
                    raise TileCatalogError(f"Tile '{tile.name}' lists unknown neighbor '{neighbor_name}'")
                self._compatibility[tile.index, self._tiles_by_name[neighbor_name].index] = True
        self._compatibility.setflags(write=False)

    def __iter__(self) -> Iterator[TileType]:
        return iter(self.tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def __contains__(self, tile: object) -> bool:
        return isinstance(tile, TileType) and self._tiles_by_name.get(tile.name) == tile

    @property
    def tile_count(self) -> int:
        return len(self.tiles)

    @property
    def compatibility(self) -> NDArray[np.bool_]:
        """The read-only [tile, neighbor] compatibility matrix."""
        return self._compatibility

    def get_tile(self, name: str) -> TileType:
        """Returns the tile type with the given name.

        Raises:
            KeyError: If no tile with that name exists.
        """
        return self._tiles_by_name[name]

    def get_compatible_neighbors(self, tile: TileType) -> tuple[TileType, ...]:
        """Returns the tile types admissible next to the given tile, in declaration order."""
        return tuple(self._tiles_by_name[name] for name in tile.compatible_neighbors)

    def get_compatible_mask(self, tile: TileType) -> NDArray[np.bool_]:
        """Returns the boolean mask over all tiles that are admissible next to the given tile."""
        return self._compatibility[tile.index]

    def to_dict(self) -> dict[str, Any]:
        """Converts the catalog into the JSON-compatible structure read by 'from_dict()'."""
        return {
            "tiles": [
                {
                    "name": tile.name,
                    "compatible_neighbors": list(tile.compatible_neighbors),
                    "color": list(tile.color_rgb),
                    "weight": tile.weight,
                }
                for tile in self.tiles
            ]
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TileCatalog:
        """Builds a catalog from a mapping of the form {"tiles": [{"name": ..., "compatible_neighbors": [...]}]}.

        The optional keys "color" (an RGB triple) and "weight" (a positive number) default to
        constants.TILE_COLOR_DEFAULT and constants.TILE_WEIGHT_DEFAULT. Duplicate neighbor names are dropped while
        keeping the order of their first occurrence.

        Args:
            data: The catalog definition.

        Returns:
            The loaded catalog.

        Raises:
            TileCatalogError: If the definition is malformed or inconsistent.
        """
        try:
            tile_definitions = data["tiles"]
        except (KeyError, TypeError) as e:
            raise TileCatalogError("Catalog definition needs a 'tiles' list") from e
        if not isinstance(tile_definitions, list):
            raise TileCatalogError(f"Catalog definition needs a 'tiles' list, got {type(tile_definitions).__name__}")

        tiles = []
        for index, definition in enumerate(tile_definitions):
            if not isinstance(definition, Mapping):
                raise TileCatalogError(f"Malformed definition for tile #{index}: expected an object")
            try:
                name = str(definition["name"])
                neighbors = tuple(dict.fromkeys(str(neighbor) for neighbor in definition["compatible_neighbors"]))
                color_rgb = tuple(int(channel) for channel in definition.get("color", constants.TILE_COLOR_DEFAULT))
                weight = float(definition.get("weight", constants.TILE_WEIGHT_DEFAULT))
            except (KeyError, TypeError, ValueError) as e:
                raise TileCatalogError(f"Malformed definition for tile #{index}: {e}") from e

            if len(color_rgb) != 3:
                raise TileCatalogError(f"Tile '{name}' needs an RGB color with three channels")
            if weight <= 0:
                raise TileCatalogError(f"Tile '{name}' needs a positive weight")

            tiles.append(TileType(index, name, neighbors, (color_rgb[0], color_rgb[1], color_rgb[2]), weight))

        return cls(tiles)

    @classmethod
    def from_json(cls, file_path: str | Path) -> TileCatalog:
        """Loads a catalog from a JSON file in the format described in 'from_dict()'.

        Raises:
            TileCatalogError: If the file cannot be read or parsed, or the definition is inconsistent.
        """
        try:
            with open(file_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise TileCatalogError(f"Cannot load tile catalog from '{file_path}': {e}") from e
        return cls.from_dict(data)

    def save_json(self, file_path: str | Path) -> None:
        """Writes the catalog to a JSON file readable by 'from_json()'."""
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_sample_array(
        cls, sample_array: NDArray[np.int_], tile_names: Mapping[int, str] | None = None
    ) -> TileCatalog:
        """Derives a catalog from a sample tilemap laid out on the hex grid.

        Each distinct tile index in the sample becomes a tile type. Tile b is admissible next to tile a exactly if b
        occurs as a hex neighbor of a at least once in the sample. Tile frequencies become the tile weights. Negative
        indices mark empty sample cells and are skipped.

        Args:
            sample_array: 2D array of tile indices, indexed by (row, col).
            tile_names: Optional names for the tile indices. Defaults to "tile_<index>".

        Returns:
            The derived catalog, with tiles ordered by ascending sample tile index.
        """
        if sample_array.ndim != 2:
            raise TileCatalogError("The sample tilemap must be a 2D array")

        sample_tile_indices = sorted(int(value) for value in np.unique(sample_array) if value >= 0)
        if not sample_tile_indices:
            raise TileCatalogError("The sample tilemap contains no tiles")

        names = {
            tile_index: (tile_names or {}).get(tile_index, f"tile_{tile_index}") for tile_index in sample_tile_indices
        }
        neighbors: dict[int, set[int]] = {tile_index: set() for tile_index in sample_tile_indices}
        frequencies: dict[int, int] = {tile_index: 0 for tile_index in sample_tile_indices}

        rows, cols = sample_array.shape
        for row in range(rows):
            for col in range(cols):
                tile_index = int(sample_array[row, col])
                if tile_index < 0:
                    continue
                frequencies[tile_index] += 1
                for d_row, d_col in HexParity.of_row(row).to_offsets():
                    neighbor_row = row + d_row
                    neighbor_col = col + d_col
                    if not (0 <= neighbor_row < rows and 0 <= neighbor_col < cols):
                        continue
                    neighbor_index = int(sample_array[neighbor_row, neighbor_col])
                    if neighbor_index >= 0:
                        neighbors[tile_index].add(neighbor_index)

        tiles = [
            TileType(
                position,
                names[tile_index],
                tuple(names[neighbor_index] for neighbor_index in sorted(neighbors[tile_index])),
                weight=float(frequencies[tile_index]),
            )
            for position, tile_index in enumerate(sample_tile_indices)
        ]
        return cls(tiles)

    @classmethod
    def from_sample_csv(cls, file_path: str | Path) -> TileCatalog:
        """Loads a sample tilemap from a .csv file of tile indices and derives a catalog from it."""
        try:
            sample_array = np.genfromtxt(file_path, delimiter=",", dtype=np.int_, ndmin=2)
        except (OSError, ValueError) as e:
            raise TileCatalogError(f"Cannot load sample tilemap from '{file_path}': {e}") from e
        return cls.from_sample_array(sample_array)
