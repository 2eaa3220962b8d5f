"""
MAZE PROBLEM
============
The read-only problem model consumed by the search.

This module provides:
1. SANITY CHECKER - Structural checks run before a problem is built
2. MAZE PROBLEM - Start/waypoint/endpoints, transitions and entry costs
"""

import logging
import numpy as np
from typing import Dict, FrozenSet, List, Sequence, Tuple, Union
from pathlib import Path

from keymaze.core.definitions import (
    CellKind,
    ID_TO_NAME,
    ENTRY_COSTS,
    ACTION_DELTAS,
    WALKABLE_KINDS,
)
from keymaze.core.state import MazeState
from keymaze.data.maze_loader import parse_maze, load_maze_file, grid_to_rows

logger = logging.getLogger(__name__)


class MazeConstructionError(ValueError):
    """Raised when a grid violates the maze invariants."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid maze: " + "; ".join(self.errors))


# ==========================================
# MODULE 1: SANITY CHECKER
# ==========================================

class MazeSanityChecker:
    """
    Pre-construction checks for map structural validity.

    Catches every invariant violation at once instead of stopping at the first:
    - Grid shape (2D, non-empty)
    - Unknown cell IDs
    - Missing or duplicate start
    - Missing or duplicate waypoint
    - Missing endpoints
    """

    def __init__(self, grid: np.ndarray):
        self.shape_error = None
        try:
            self.grid = np.asarray(grid)
        except ValueError as e:
            # Ragged nested rows cannot become an array at all
            self.grid = None
            self.shape_error = str(e)

    def check_all(self) -> Tuple[bool, List[str]]:
        """
        Run all sanity checks.

        Returns:
            is_valid: Whether the grid passes all checks
            errors: List of error messages
        """
        errors = []

        if self.grid is None:
            errors.append(f"Grid must be rectangular ({self.shape_error})")
            return False, errors
        if self.grid.dtype == object:
            errors.append("Grid must be rectangular")
            return False, errors
        if self.grid.ndim != 2:
            errors.append(f"Grid must be 2D, got {self.grid.ndim} dimension(s)")
            return False, errors
        if self.grid.size == 0:
            errors.append("Grid is empty")
            return False, errors

        unknown = sorted(set(np.unique(self.grid).tolist()) - set(ID_TO_NAME))
        if unknown:
            errors.append(f"Unknown cell IDs in grid: {unknown}")

        starts = int(np.sum(self.grid == CellKind.START))
        if starts == 0:
            errors.append("No start position (I) found")
        elif starts > 1:
            errors.append(f"Multiple start positions found: {starts}")

        waypoints = int(np.sum(self.grid == CellKind.WAYPOINT))
        if waypoints == 0:
            errors.append("No waypoint (K) found")
        elif waypoints > 1:
            errors.append(f"Multiple waypoints found: {waypoints}")

        if int(np.sum(self.grid == CellKind.ENDPOINT)) == 0:
            errors.append("No endpoint (G) found")

        return len(errors) == 0, errors

    def count_elements(self) -> Dict[str, int]:
        """Count occurrences of each cell kind."""
        counts = {}
        if self.grid is None:
            return counts
        for kind in CellKind:
            count = int(np.sum(self.grid == kind))
            if count > 0:
                counts[kind.name] = count
        return counts


# ==========================================
# MODULE 2: MAZE PROBLEM
# ==========================================

class MazeProblem:
    """
    Immutable maze with one start, one waypoint and one or more endpoints.

    The grid is indexed [row, col]; states are MazeState(col, row).
    """

    def __init__(self, grid: np.ndarray):
        """
        Build a problem from a grid of CellKind IDs.

        Raises:
            MazeConstructionError: if the grid fails MazeSanityChecker
        """
        is_valid, errors = MazeSanityChecker(grid).check_all()
        if not is_valid:
            raise MazeConstructionError(errors)

        self._grid = np.array(grid, dtype=np.int64)
        self._grid.setflags(write=False)
        self.height, self.width = self._grid.shape

        self._start = self._find_all_positions(CellKind.START)[0]
        self._waypoint = self._find_all_positions(CellKind.WAYPOINT)[0]
        self._endpoints = frozenset(self._find_all_positions(CellKind.ENDPOINT))

        logger.debug(
            f"MazeProblem {self.height}x{self.width}: start={self._start}, "
            f"waypoint={self._waypoint}, endpoints={len(self._endpoints)}"
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Maze layout:\n" + "\n".join(grid_to_rows(self._grid)))

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> 'MazeProblem':
        """Build a problem from text rows (see keymaze.data.maze_loader)."""
        return cls(parse_maze(rows))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'MazeProblem':
        return cls(load_maze_file(path))

    def _find_all_positions(self, kind: int) -> List[MazeState]:
        """Find all occurrences of a cell kind, in row-major order."""
        rows, cols = np.where(self._grid == kind)
        return [MazeState(int(c), int(r)) for r, c in zip(rows.tolist(), cols.tolist())]

    # -------------------- read-only accessors --------------------

    @property
    def start(self) -> MazeState:
        return self._start

    @property
    def waypoint(self) -> MazeState:
        return self._waypoint

    @property
    def endpoints(self) -> FrozenSet[MazeState]:
        return self._endpoints

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the underlying grid."""
        return self._grid

    def in_bounds(self, state: MazeState) -> bool:
        return 0 <= state.col < self.width and 0 <= state.row < self.height

    def cell_kind(self, state: MazeState) -> CellKind:
        return CellKind(int(self._grid[state.row, state.col]))

    def is_endpoint(self, state: MazeState) -> bool:
        return state in self._endpoints

    # -------------------- search interface --------------------

    def transitions(self, state: MazeState) -> Dict[str, MazeState]:
        """
        Legal moves out of a state.

        Returns:
            Mapping of action label ("U", "D", "L", "R") to destination,
            containing only in-bounds, non-wall destinations
        """
        moves = {}
        for action, (d_col, d_row) in ACTION_DELTAS.items():
            dest = state.moved(d_col, d_row)
            if self.in_bounds(dest) and int(self._grid[dest.row, dest.col]) in WALKABLE_KINDS:
                moves[action.value] = dest
        return moves

    def cost(self, state: MazeState) -> int:
        """Price of entering a state: 1, or 3 for rough terrain."""
        if not self.in_bounds(state):
            raise ValueError(f"Asked cost of out-of-bounds cell {state}")
        kind = int(self._grid[state.row, state.col])
        if kind == CellKind.WALL:
            raise ValueError(f"Asked cost of a WALL cell {state}")
        return ENTRY_COSTS[kind]

    def __repr__(self) -> str:
        return (f"MazeProblem({self.height}x{self.width}, start={self._start}, "
                f"waypoint={self._waypoint}, endpoints={sorted(e.as_tuple() for e in self._endpoints)})")
