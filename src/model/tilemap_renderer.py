"""Manages the visual representation and export of generated hex tilemaps."""

from __future__ import annotations

import math
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image, ImageDraw

import constants

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from model.tile_catalog import TileCatalog


class TilemapRenderer:
    """Renders tilemaps of tile indices as images of pointy-top hexagons.

    Each cell is drawn as a hexagon filled with the color of its tile. Rows with an odd index are shifted right by half
    a hexagon, matching the neighbor tables of the hex grid. Uncollapsed cells (tile index -1) are drawn black.
    """

    # Maps tile indices to their fill colors.
    _tile_colors: dict[int, tuple[int, int, int]]
    # The width of a hexagon (flat side to flat side) in pixels.
    _tile_size: int

    def __init__(self, catalog: TileCatalog, tile_size: int = constants.TILE_SIZE_DEFAULT) -> None:
        """Initializes the renderer.

        Args:
            catalog: The tile catalog providing the tile colors.
            tile_size: The width of a hexagon in pixels.
        """
        if not constants.TILE_SIZE_MIN_LIMIT <= tile_size <= constants.TILE_SIZE_MAX_LIMIT:
            raise ValueError(
                f"Tile size must lie within [{constants.TILE_SIZE_MIN_LIMIT}, {constants.TILE_SIZE_MAX_LIMIT}], "
                f"got {tile_size}"
            )

        self._tile_colors = {tile.index: tile.color_rgb for tile in catalog}
        self._tile_size = tile_size

    @property
    def hex_height(self) -> float:
        """The height of a hexagon (corner to corner) in pixels."""
        return self._tile_size * 2 / math.sqrt(3)

    def get_image_size(self, tilemap_size: tuple[int, int]) -> tuple[int, int]:
        """Returns the (width, height) in pixels of the image for a tilemap of (rows, cols) cells."""
        rows, cols = tilemap_size
        if rows == 0 or cols == 0:
            return 0, 0
        width = cols * self._tile_size + (self._tile_size / 2 if rows > 1 else 0)
        height = (rows - 1) * self._tile_size * constants.HEX_ROW_SPACING + self.hex_height
        return int(math.ceil(width)), int(math.ceil(height))

    def get_cell_center(self, row: int, col: int) -> tuple[float, float]:
        """Returns the pixel (x, y) center of the hexagon of a cell."""
        x = col * self._tile_size + self._tile_size / 2 + (self._tile_size / 2 if row % 2 == 1 else 0)
        y = row * self._tile_size * constants.HEX_ROW_SPACING + self.hex_height / 2
        return x, y

    def get_tilemap_img(self, tilemap_array: NDArray[np.int_]) -> Image.Image:
        """Renders a tilemap array into a complete PIL Image object.

        Args:
            tilemap_array: A 2D array of tile indices, -1 for uncollapsed cells.

        Returns:
            A PIL Image representing the visual hex tilemap.
        """
        rows, cols = tilemap_array.shape
        tilemap_img = Image.new("RGB", self.get_image_size((rows, cols)), constants.UNCOLLAPSED_TILE_COLOR)
        draw = ImageDraw.Draw(tilemap_img)
        radius = self.hex_height / 2

        for row in range(rows):
            for col in range(cols):
                center_x, center_y = self.get_cell_center(row, col)
                corners = [
                    (
                        center_x + radius * math.cos(math.radians(60 * corner - 90)),
                        center_y + radius * math.sin(math.radians(60 * corner - 90)),
                    )
                    for corner in range(6)
                ]
                tile_index = int(tilemap_array[row, col])
                fill = self._tile_colors.get(tile_index, constants.UNCOLLAPSED_TILE_COLOR)
                draw.polygon(corners, fill=fill, outline=constants.HEX_OUTLINE_COLOR)

        return tilemap_img

    def save_tilemap_img(self, tilemap_img: Image.Image, file_path: str | Path) -> None:
        """Saves a rendered tilemap image to the specified file path."""
        tilemap_img.save(file_path)


def save_tilemap_csv(tilemap_array: NDArray[np.int_], file_path: str | Path) -> None:
    """Saves the raw tilemap data (tile indices, -1 for uncollapsed cells) as a .csv file."""
    np.savetxt(file_path, tilemap_array, fmt="%i", delimiter=",")
