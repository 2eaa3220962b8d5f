"""
KEYMAZE DEFINITIONS
===================
Central constants and type definitions for the maze solver.

This file is the SINGLE SOURCE OF TRUTH for:
- Cell kinds (grid IDs)
- Character mappings for the text format
- Entry costs per cell kind
- Actions and their movement deltas

Import from here instead of duplicating constants across modules.
"""

from typing import Dict, FrozenSet, Tuple
from enum import Enum, IntEnum


# ==========================================
# CELL KINDS
# ==========================================

class CellKind(IntEnum):
    """Grid IDs for every cell of a maze."""
    WALL = 0            # Impassable
    OPEN = 1            # Plain floor
    START = 2           # Initial agent position (exactly one)
    WAYPOINT = 3        # Mandatory intermediate cell, the "key" (exactly one)
    ENDPOINT = 4        # Acceptable terminal cell, a "goal" (one or more)
    ROUGH = 5           # Traversable, but expensive to enter


# ==========================================
# CHARACTER MAPPINGS (text format)
# ==========================================

CHAR_TO_CELL: Dict[str, int] = {
    'X': CellKind.WALL,
    '.': CellKind.OPEN,
    'I': CellKind.START,
    'K': CellKind.WAYPOINT,
    'G': CellKind.ENDPOINT,
    'M': CellKind.ROUGH,
}

# Reverse lookup for rendering grids back to text
CELL_TO_CHAR: Dict[int, str] = {v: k for k, v in CHAR_TO_CELL.items()}

# Reverse lookup for debugging
ID_TO_NAME: Dict[int, str] = {kind.value: kind.name for kind in CellKind}

# Every kind except WALL can be entered
WALKABLE_KINDS: FrozenSet[int] = frozenset(
    kind for kind in CellKind if kind != CellKind.WALL
)


# ==========================================
# ENTRY COSTS
# ==========================================
# Charged for the cell being moved INTO, never for the origin.
# Every cost is >= 1, which keeps the Manhattan heuristic admissible.

DEFAULT_ENTRY_COST: int = 1
ROUGH_ENTRY_COST: int = 3

ENTRY_COSTS: Dict[int, int] = {
    CellKind.OPEN: DEFAULT_ENTRY_COST,
    CellKind.START: DEFAULT_ENTRY_COST,
    CellKind.WAYPOINT: DEFAULT_ENTRY_COST,
    CellKind.ENDPOINT: DEFAULT_ENTRY_COST,
    CellKind.ROUGH: ROUGH_ENTRY_COST,
}


# ==========================================
# ACTIONS
# ==========================================

class Action(str, Enum):
    """The four axis-aligned moves. Values are the labels used in solutions."""
    UP = 'U'
    DOWN = 'D'
    LEFT = 'L'
    RIGHT = 'R'


# (d_col, d_row); rows grow downwards
ACTION_DELTAS: Dict[Action, Tuple[int, int]] = {
    Action.UP: (0, -1),
    Action.DOWN: (0, 1),
    Action.LEFT: (-1, 0),
    Action.RIGHT: (1, 0),
}

ACTION_LABELS: Tuple[str, ...] = tuple(action.value for action in Action)
