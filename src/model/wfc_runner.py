"""Contains the driver that runs a selection policy against the WFC solver."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING

import constants
from enums import SolverStatus

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

    from model.selection_policy import SelectionPolicy
    from model.solver_stats import SolverStats
    from model.wave_function import WaveFunction, Wipeout


logger = logging.getLogger(__name__)


class PolicyStalledError(RuntimeError):
    """Raised when the policy cannot name a placeable tile although the run is still going."""


@dataclass
class RunResult:
    """Outcome of a (possibly restarted) WFC run.

    Attributes:
        status: COMPLETED if some attempt collapsed every cell, WIPED if every attempt ended in a contradiction.
        attempts: Number of attempts made (each attempt starts from a freshly initialized grid).
        steps: Number of collapses made in the final attempt.
        tilemap: The (rows, cols) array of tile indices of the final attempt, -1 for uncollapsed cells.
        stats: Statistics of the final attempt.
        wipeouts: The contradiction that ended each failed attempt, in order.
    """

    status: SolverStatus
    attempts: int
    steps: int
    tilemap: NDArray[np.int_]
    stats: SolverStats
    wipeouts: list[Wipeout] = field(default_factory=list)

    @property
    def successful(self) -> bool:
        return self.status == SolverStatus.COMPLETED


class WFCRunner:
    """Repeatedly lets a policy pick a tile and collapses the lowest entropy cell admitting it.

    The solver itself never backtracks. When an attempt ends in a wipeout, the runner discards the grid and starts over
    until a run completes or the maximum number of attempts is reached. Later attempts differ from earlier ones because
    the random generators of the solver and the policy keep advancing.
    """

    # The solver driven by this runner.
    _wave_function: WaveFunction
    # The policy choosing the tile of each collapse.
    _policy: SelectionPolicy
    # Maximum number of attempts before giving up.
    _max_attempts: int

    def __init__(
        self, wave_function: WaveFunction, policy: SelectionPolicy, max_attempts: int = constants.WFC_MAX_ATTEMPTS
    ) -> None:
        """Initializes the runner.

        Args:
            wave_function: The solver to drive. It is (re-)initialized at the start of every attempt.
            policy: The policy choosing the tile of each collapse.
            max_attempts: Maximum number of attempts before giving up. Must be at least 1.
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

        self._wave_function = wave_function
        self._policy = policy
        self._max_attempts = max_attempts

    def run(self) -> RunResult:
        """Runs attempts until one completes or the attempt limit is reached."""
        wipeouts: list[Wipeout] = []
        status = SolverStatus.UNINITIALIZED
        steps = 0
        attempt = 0

        while attempt < self._max_attempts:
            attempt += 1
            status, steps = self._run_attempt()

            if status == SolverStatus.COMPLETED:
                logger.info("Attempt %d completed after %d collapses", attempt, steps)
                break

            assert self._wave_function.wipeout is not None
            wipeouts.append(self._wave_function.wipeout)
            logger.info("Attempt %d/%d wiped out after %d collapses", attempt, self._max_attempts, steps)

        return RunResult(
            status=status,
            attempts=attempt,
            steps=steps,
            tilemap=self._wave_function.get_tilemap(),
            stats=self._wave_function.get_stats(),
            wipeouts=wipeouts,
        )

    def step(self) -> SolverStatus:
        """Performs a single policy decision and collapse on the running solver.

        Raises:
            PolicyStalledError: If the policy names no tile, or a tile that no uncollapsed cell admits.
        """
        tile = self._policy.choose_tile(self._wave_function)
        if tile is None:
            raise PolicyStalledError("The policy found no placeable tile")

        cell = self._wave_function.lowest_entropy_cell(tile)
        if cell is None:
            raise PolicyStalledError(f"No uncollapsed cell admits tile '{tile.name}'")

        return self._wave_function.collapse_cell(cell, tile)

    def _run_attempt(self) -> tuple[SolverStatus, int]:
        """Initializes the solver and collapses cells until the run ends."""
        status = self._wave_function.initialize()
        steps = 0
        while not status.is_terminal():
            status = self.step()
            steps += 1
        return status, steps
