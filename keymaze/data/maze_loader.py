"""
Maze Text Loader
================

Converts the one-character-per-cell text format into numpy grids of
CellKind IDs, and back.

Format:
    XXXXXXX
    XI...KX
    X.....X
    X.X.XGX
    XXXXXXX

One row per line, every row the same width. See CHAR_TO_CELL for the
alphabet.
"""

import logging
import numpy as np
from typing import List, Sequence, Union
from pathlib import Path

from keymaze.core.definitions import CHAR_TO_CELL, CELL_TO_CHAR

logger = logging.getLogger(__name__)


class MazeFormatError(ValueError):
    """Raised when maze text cannot be turned into a rectangular grid."""


def parse_maze(rows: Sequence[str]) -> np.ndarray:
    """
    Parse maze rows into a grid of CellKind IDs.

    Args:
        rows: Sequence of strings, one per maze row

    Returns:
        2D int64 numpy array indexed [row, col]

    Raises:
        MazeFormatError: empty input, ragged rows or unknown characters
    """
    if isinstance(rows, str):
        raise MazeFormatError("Expected a sequence of rows, got a single string")
    if len(rows) == 0:
        raise MazeFormatError("Maze has no rows")

    width = len(rows[0])
    if width == 0:
        raise MazeFormatError("Maze rows are empty")

    grid = np.empty((len(rows), width), dtype=np.int64)
    for r, line in enumerate(rows):
        if len(line) != width:
            raise MazeFormatError(
                f"Row {r} has width {len(line)}, expected {width} (grid must be rectangular)"
            )
        for c, ch in enumerate(line):
            try:
                grid[r, c] = CHAR_TO_CELL[ch]
            except KeyError:
                raise MazeFormatError(
                    f"Unknown maze character {ch!r} at row {r}, col {c}"
                ) from None

    logger.debug(f"Parsed maze grid {grid.shape[0]}x{grid.shape[1]}")
    return grid


def load_maze_file(path: Union[str, Path]) -> np.ndarray:
    """
    Load a maze from a text file.

    Line endings and trailing blank lines are ignored.
    """
    path = Path(path)
    text = path.read_text(encoding='utf-8')
    rows = [line.rstrip('\r\n') for line in text.splitlines()]
    while rows and not rows[-1].strip():
        rows.pop()

    grid = parse_maze(rows)
    logger.info(f"Loaded maze {grid.shape[0]}x{grid.shape[1]} from {path}")
    return grid


def grid_to_rows(grid: np.ndarray) -> List[str]:
    """Render a grid of CellKind IDs back into text rows."""
    return [''.join(CELL_TO_CHAR[int(v)] for v in row) for row in grid]
