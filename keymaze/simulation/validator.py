"""
Solution Validator
==================
Re-walks a proposed action sequence on a MazeProblem and reports whether it
is a solution and what it costs. Independent of the search; used to check
solver output.
"""

import logging
from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass, field

from keymaze.core.state import MazeState
from keymaze.simulation.problem import MazeProblem

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of replaying one proposed solution.

    cost is -1 when there was nothing to replay or an action was illegal.
    """
    is_solution: bool
    cost: int
    visited_waypoint: bool = False
    path: List[MazeState] = field(default_factory=list)
    error_message: str = ""

    def to_dict(self) -> Dict:
        return {
            'is_solution': self.is_solution,
            'cost': self.cost,
            'visited_waypoint': self.visited_waypoint,
            'path': [s.as_tuple() for s in self.path],
            'error_message': self.error_message,
        }


class SolutionValidator:
    """Replays action sequences on one problem."""

    def __init__(self, problem: MazeProblem):
        self.problem = problem

    def validate(self, actions: Optional[Sequence[str]]) -> ValidationResult:
        """
        Replay actions from the start.

        A solution must pass through the waypoint and stop on an endpoint.
        Cost is the summed entry cost of every cell moved into.
        """
        if actions is None:
            return ValidationResult(False, -1, error_message="No solution proposed")

        problem = self.problem
        current = problem.start
        path = [current]
        visited_waypoint = current == problem.waypoint
        cost = 0

        for step, action in enumerate(actions):
            moves = problem.transitions(current)
            if action not in moves:
                msg = f"Illegal action {action!r} at step {step} from {current}"
                logger.debug(f"Validator: {msg}")
                return ValidationResult(False, -1, visited_waypoint, path, msg)

            current = moves[action]
            cost += problem.cost(current)
            path.append(current)
            if current == problem.waypoint:
                visited_waypoint = True

        is_solution = visited_waypoint and problem.is_endpoint(current)
        msg = ""
        if not visited_waypoint:
            msg = "Waypoint never visited"
        elif not is_solution:
            msg = f"Sequence ends on {current}, which is not an endpoint"

        return ValidationResult(is_solution, cost, visited_waypoint, path, msg)


def replay_solution(problem: MazeProblem, actions: Optional[Sequence[str]]) -> ValidationResult:
    """Convenience function: replay actions on a problem."""
    return SolutionValidator(problem).validate(actions)
