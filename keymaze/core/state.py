"""Grid coordinates used as search states."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class MazeState:
    """An immutable (col, row) position in a maze.

    Equality and hashing are structural, so states can be used directly in
    sets (the search graveyard) and as dictionary keys.
    """
    col: int
    row: int

    def distance(self, other: 'MazeState') -> int:
        """Manhattan distance to another state."""
        return abs(self.col - other.col) + abs(self.row - other.row)

    def moved(self, d_col: int, d_row: int) -> 'MazeState':
        return MazeState(self.col + d_col, self.row + d_row)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.col, self.row)

    def __str__(self) -> str:
        return f"({self.col}, {self.row})"
