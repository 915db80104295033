"""Contains all global enumeration classes used throughout the project."""

from __future__ import annotations

from enum import Enum


class SolverStatus(Enum):
    """Defines the lifecycle states of a WFC run, also returned as the result tag of each collapse."""

    UNINITIALIZED = "Uninitialized"
    """No grid has been built yet. Queries return neutral values and collapses are ignored."""
    RUNNING = "Running"
    """Cells are still uncollapsed and no contradiction has occurred. The run continues."""
    COMPLETED = "Completed"
    """Every cell has been collapsed."""
    WIPED = "Wiped"
    """Propagation emptied the domain of some cell. Terminal until the solver is re-initialized."""

    def is_terminal(self) -> bool:
        """Returns True if no further collapses can change the run."""
        return self in (SolverStatus.COMPLETED, SolverStatus.WIPED)


class PropagationMode(Enum):
    """Defines which cells emit constraints while propagating a collapse."""

    COLLAPSED_ONLY = "collapsed-only"
    """Only collapsed cells restrict their neighbors (Default)."""
    ARC_CONSISTENT = "arc-consistent"
    """Shrunk uncollapsed cells also restrict their neighbors by the union of their remaining tiles' rules."""


class SelectionPolicyType(Enum):
    """Defines the available reference policies for choosing the next tile to place."""

    RANDOM = "random"
    """Picks uniformly among all tiles that can still be placed somewhere (Default)."""
    WEIGHTED = "weighted"
    """Picks among all placeable tiles proportionally to their catalog weight."""
    LEAST_USED = "least-used"
    """Picks the placeable tile that has been collapsed the fewest times so far."""


class HexParity(Enum):
    """Defines the two neighbor offset tables of the offset hex layout, selected by row parity."""

    EVEN = 0
    """Rows with an even index."""
    ODD = 1
    """Rows with an odd index (drawn shifted by half a tile)."""

    @staticmethod
    def of_row(row: int) -> HexParity:
        """Returns the parity of a row index."""
        return HexParity.EVEN if row % 2 == 0 else HexParity.ODD

    def to_offsets(self) -> tuple[tuple[int, int], ...]:
        """Returns the six (row, col) neighbor offsets for this parity."""
        match self:
            case HexParity.EVEN:
                return ((0, -1), (1, -1), (1, 0), (0, 1), (-1, 0), (-1, -1))
            case HexParity.ODD:
                return ((0, -1), (1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0))
