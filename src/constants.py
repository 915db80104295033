"""Contains global constants and default values used throughout the project."""

from enums import PropagationMode, SelectionPolicyType


EXAMPLE_CATALOG_PATH: str = "./assets/catalogs/terrain.json"
EXAMPLE_SAMPLE_PATH: str = "./assets/catalogs/terrain_sample.csv"

# === MODEL CONSTANTS ===

GRID_SIZE_DEFAULT: int = 40
GRID_SIZE_MIN_LIMIT: int = 1
GRID_SIZE_MAX_LIMIT: int = 500

# Number of times a run is restarted from scratch after a domain wipeout before giving up.
WFC_MAX_ATTEMPTS: int = 10

PROPAGATION_MODE_DEFAULT: PropagationMode = PropagationMode.COLLAPSED_ONLY
SELECTION_POLICY_DEFAULT: SelectionPolicyType = SelectionPolicyType.RANDOM

RANDOM_SEED_MAX: int = 999999999

# Tile index written to exported tilemaps for cells that were never collapsed.
UNCOLLAPSED_TILE_INDEX: int = -1

TILE_WEIGHT_DEFAULT: float = 1.0
TILE_COLOR_DEFAULT: tuple[int, int, int] = (255, 255, 255)

# === RENDERING CONSTANTS ===

TILE_SIZE_DEFAULT: int = 16
TILE_SIZE_MIN_LIMIT: int = 4
TILE_SIZE_MAX_LIMIT: int = 256

# Vertical distance between hex rows relative to the tile size (sqrt(3) / 2).
HEX_ROW_SPACING: float = 0.866

UNCOLLAPSED_TILE_COLOR: tuple[int, int, int] = (0, 0, 0)
HEX_OUTLINE_COLOR: tuple[int, int, int] = (40, 40, 40)

# === LOGGING CONSTANTS ===

LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-25s | %(message)s"
LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_DEFAULT: str = "WARNING"
