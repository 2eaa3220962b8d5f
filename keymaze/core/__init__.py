"""Core definitions and state types."""

from .definitions import (
    CellKind,
    Action,
    ACTION_DELTAS,
    ACTION_LABELS,
    CHAR_TO_CELL,
    CELL_TO_CHAR,
    ENTRY_COSTS,
    ROUGH_ENTRY_COST,
    WALKABLE_KINDS,
)
from .state import MazeState

__all__ = [
    'CellKind',
    'Action',
    'ACTION_DELTAS',
    'ACTION_LABELS',
    'CHAR_TO_CELL',
    'CELL_TO_CHAR',
    'ENTRY_COSTS',
    'ROUGH_ENTRY_COST',
    'WALKABLE_KINDS',
    'MazeState',
]
