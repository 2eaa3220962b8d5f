"""
Two-Phase Waypoint Pathfinder
=============================

Finds the cheapest action sequence Start -> Waypoint -> Endpoint.

Strategy:
1. A* from the start to the waypoint
2. Order endpoints by Manhattan distance to the waypoint (heap, lazily popped)
3. For each endpoint in that order: A* seeded with the phase-1 waypoint node
4. First endpoint reached wins; its parent chain runs all the way to the start

Note:
Endpoints are tried by geometric proximity, not by true cost. When several
endpoints are reachable the nearest reachable one is returned, even if a
farther one would be cheaper to reach through lighter terrain.
"""

import heapq
import logging
import time
from typing import List, Optional, Tuple
from dataclasses import dataclass

from keymaze.core.state import MazeState
from keymaze.simulation.problem import MazeProblem
from keymaze.simulation.search import NodeArena, find_path, TIE_BREAK_MODES

logger = logging.getLogger(__name__)


@dataclass
class SolverOptions:
    """Configuration options for the pathfinder.

    tie_break decides which of several equally cheap paths is returned:
    'fifo' expands the earliest-discovered node first, 'lifo' the latest.
    """
    tie_break: str = 'fifo'

    def __post_init__(self):
        if self.tie_break not in TIE_BREAK_MODES:
            raise ValueError(
                f"Unknown tie_break {self.tie_break!r}, expected one of {TIE_BREAK_MODES}"
            )

    @classmethod
    def for_mode(cls, mode: str = "default") -> 'SolverOptions':
        """Factory method for common configurations."""
        if mode in ("default", "reproducible"):
            return cls(tie_break='fifo')
        elif mode == "depth_first_ties":
            return cls(tie_break='lifo')
        raise ValueError(f"Unknown solver mode {mode!r}")


@dataclass
class SolverDiagnostics:
    """Detailed diagnostics from a solver run."""
    success: bool
    states_explored: int = 0
    nodes_created: int = 0
    endpoints_tried: int = 0
    chosen_endpoint: Optional[MazeState] = None
    waypoint_cost: Optional[int] = None
    total_cost: Optional[int] = None
    time_taken_ms: float = 0.0
    failure_reason: str = ""
    path_length: int = 0

    def summary(self) -> str:
        """Human-readable summary of solver performance."""
        status = "SUCCESS" if self.success else f"FAILED: {self.failure_reason}"
        return f"""
=== Solver Diagnostics ===
Status: {status}
States Explored: {self.states_explored:,}
Nodes Created: {self.nodes_created:,}
Endpoints Tried: {self.endpoints_tried}
Chosen Endpoint: {self.chosen_endpoint}
Waypoint Cost: {self.waypoint_cost}
Total Cost: {self.total_cost}
Time Taken: {self.time_taken_ms:.1f}ms
Path Length: {self.path_length}
=========================="""


class Pathfinder:
    """
    A* graph search through a mandatory waypoint to any endpoint.

    Each call to solve() owns its own node arena, frontiers and graveyards,
    so one Pathfinder (and one MazeProblem) can be reused freely.
    """

    def __init__(self, problem: MazeProblem, options: Optional[SolverOptions] = None):
        self.problem = problem
        self.options = options or SolverOptions()

    def solve(self) -> Optional[List[str]]:
        """
        Returns:
            Action labels leading from the start, through the waypoint, to an
            endpoint, e.g. ["R", "R", "D"]; None if there is no solution
        """
        solution, _ = self.solve_with_diagnostics()
        return solution

    def solve_with_diagnostics(self) -> Tuple[Optional[List[str]], SolverDiagnostics]:
        problem = self.problem
        tie_break = self.options.tie_break
        t0 = time.perf_counter()

        arena = NodeArena()
        diagnostics = SolverDiagnostics(success=False)

        def finish(solution, reason=""):
            diagnostics.nodes_created = len(arena)
            diagnostics.time_taken_ms = (time.perf_counter() - t0) * 1000.0
            diagnostics.failure_reason = reason
            return solution, diagnostics

        # Phase 1: start -> waypoint
        root = arena.root(problem.start)
        key_node, explored = find_path(problem, arena, [root], problem.waypoint, tie_break)
        diagnostics.states_explored += explored
        if key_node is None:
            logger.warning(f"Pathfinder: waypoint {problem.waypoint} unreachable from {problem.start}")
            return finish(None, "waypoint unreachable")

        diagnostics.waypoint_cost = arena[key_node].past_cost
        logger.debug(f"Pathfinder: waypoint reached at cost {diagnostics.waypoint_cost}")

        # Phase 2: waypoint -> nearest reachable endpoint
        # Equal distances fall back to row-major order
        goal_queue = [
            (goal.distance(problem.waypoint), goal.row, goal.col, goal)
            for goal in problem.endpoints
        ]
        heapq.heapify(goal_queue)

        while goal_queue:
            distance, _, _, goal = heapq.heappop(goal_queue)
            diagnostics.endpoints_tried += 1
            logger.debug(f"Pathfinder: trying endpoint {goal} (manhattan {distance})")

            goal_node, explored = find_path(problem, arena, [key_node], goal, tie_break)
            diagnostics.states_explored += explored
            if goal_node is None:
                logger.debug(f"Pathfinder: endpoint {goal} unreachable from waypoint")
                continue

            solution = arena.actions_to(goal_node)
            diagnostics.success = True
            diagnostics.chosen_endpoint = goal
            diagnostics.total_cost = arena[goal_node].past_cost
            diagnostics.path_length = len(solution)
            logger.info(
                f"Pathfinder: solved with {len(solution)} moves, cost {diagnostics.total_cost}, "
                f"endpoint {goal}, {diagnostics.states_explored} states explored"
            )
            return finish(solution)

        logger.warning(f"Pathfinder: no endpoint reachable from waypoint {problem.waypoint}")
        return finish(None, "no endpoint reachable")


def solve(problem: MazeProblem, options: Optional[SolverOptions] = None) -> Optional[List[str]]:
    """Convenience function: solve a problem with a fresh Pathfinder."""
    return Pathfinder(problem, options).solve()


# ==========================================
# MAIN ENTRY POINT
# ==========================================

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    demo_maze = [
        "XXXXXXX",
        "XI....X",
        "X.MMM.X",
        "X.XKXGX",
        "XXXXXXX",
    ]
    print("=== KEYMAZE: waypoint pathfinder demo ===\n")
    print("\n".join(demo_maze))

    prob = MazeProblem.from_rows(demo_maze)
    soln, diag = Pathfinder(prob).solve_with_diagnostics()

    print(f"\nSolution: {soln}")
    print(diag.summary())
