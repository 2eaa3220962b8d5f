"""
KEYMAZE Source Package
======================

Two-phase A* pathfinding through a grid maze: from the start, through one
mandatory waypoint (the key), to the nearest reachable of several endpoints.

Submodules:
- core: Definitions (cell kinds, costs, actions) and the MazeState coordinate
- data: Maze text loader
- simulation: Maze problem model, A* search, two-phase pathfinder, validator
"""

__version__ = "1.0.0"

__all__ = ['core', 'data', 'simulation']
