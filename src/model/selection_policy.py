"""Contains the reference policies that decide which tile the WFC solver places next."""

from __future__ import annotations

from abc import ABC, abstractmethod
import random
from typing import TYPE_CHECKING

from enums import SelectionPolicyType

if TYPE_CHECKING:
    from model.tile_catalog import TileType
    from model.wave_function import WaveFunction


class SelectionPolicy(ABC):
    """Abstract base class for the decision maker driving a WFC run.

    A policy only reads the solver through its queries and picks a tile. The run driver then collapses the lowest
    entropy cell admitting that tile. Policies only choose among 'WaveFunction.admissible_tiles()', so the chosen tile
    always has a cell to go to.
    """

    # Source of randomness for the policy's own choices.
    _rng: random.Random

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def choose_tile(self, wave_function: WaveFunction) -> TileType | None:
        """Returns the next tile to place, or None if no tile can be placed anymore."""
        admissible_tiles = wave_function.admissible_tiles()
        if not admissible_tiles:
            return None
        return self._choose_from(wave_function, admissible_tiles)

    @abstractmethod
    def _choose_from(self, wave_function: WaveFunction, admissible_tiles: tuple[TileType, ...]) -> TileType:
        """Defines how a tile is picked from the non-empty set of admissible tiles."""
        pass


class RandomTilePolicy(SelectionPolicy):
    """Picks uniformly among the admissible tiles."""

    def _choose_from(self, wave_function: WaveFunction, admissible_tiles: tuple[TileType, ...]) -> TileType:
        return self._rng.choice(admissible_tiles)


class WeightedTilePolicy(SelectionPolicy):
    """Picks among the admissible tiles proportionally to their catalog weight."""

    def _choose_from(self, wave_function: WaveFunction, admissible_tiles: tuple[TileType, ...]) -> TileType:
        return self._rng.choices(admissible_tiles, weights=[tile.weight for tile in admissible_tiles])[0]


class LeastUsedTilePolicy(SelectionPolicy):
    """Picks the admissible tile with the fewest collapsed cells so far, breaking ties randomly.

    Tends to produce tilemaps where no single tile dominates.
    """

    def _choose_from(self, wave_function: WaveFunction, admissible_tiles: tuple[TileType, ...]) -> TileType:
        min_usage = min(wave_function.get_tile_usage(tile) for tile in admissible_tiles)
        return self._rng.choice(
            [tile for tile in admissible_tiles if wave_function.get_tile_usage(tile) == min_usage]
        )


def create_policy(policy_type: SelectionPolicyType, rng: random.Random | None = None) -> SelectionPolicy:
    """Creates the reference policy of the given type."""
    match policy_type:
        case SelectionPolicyType.RANDOM:
            return RandomTilePolicy(rng)
        case SelectionPolicyType.WEIGHTED:
            return WeightedTilePolicy(rng)
        case SelectionPolicyType.LEAST_USED:
            return LeastUsedTilePolicy(rng)
