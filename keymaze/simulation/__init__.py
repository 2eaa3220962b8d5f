"""
KEYMAZE Simulation Module
=========================
Problem model and search components.

This module contains:
- problem: MazeProblem and MazeSanityChecker
- search: SearchTreeNode, NodeArena and the A* find_path procedure
- pathfinder: Two-phase waypoint pathfinder
- validator: Replay validation of proposed solutions
"""

from .problem import MazeProblem, MazeSanityChecker, MazeConstructionError
from .search import SearchTreeNode, NodeArena, find_path
from .pathfinder import Pathfinder, SolverOptions, SolverDiagnostics, solve
from .validator import SolutionValidator, ValidationResult, replay_solution

__all__ = [
    # Problem model
    'MazeProblem',
    'MazeSanityChecker',
    'MazeConstructionError',
    # Search
    'SearchTreeNode',
    'NodeArena',
    'find_path',
    # Pathfinder
    'Pathfinder',
    'SolverOptions',
    'SolverDiagnostics',
    'solve',
    # Validation
    'SolutionValidator',
    'ValidationResult',
    'replay_solution',
]
