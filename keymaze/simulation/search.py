"""
A* Search over a MazeProblem
============================

Best-first search with f(n) = g(n) + h(n), where g is the accumulated entry
cost and h the Manhattan distance to the current target.

Search tree nodes are stored in a NodeArena and refer to their parent by
index, so a chain built in one search can be extended by a later search
(the waypoint node of phase 1 seeds phase 2) without copying.

Key Concepts:
- Frontier: heapq of (f, tie, node_index), rebuilt for every search
- Graveyard: set of states already expanded in the current search
- Heuristic is consistent (every entry cost >= 1), so the first time the
  target is popped its cost is minimal
"""

import heapq
import logging
from typing import Iterable, List, Optional, Tuple
from dataclasses import dataclass

from keymaze.core.state import MazeState

logger = logging.getLogger(__name__)

TIE_BREAK_MODES = ('fifo', 'lifo')


@dataclass(frozen=True)
class SearchTreeNode:
    """A node of the search tree.

    Attributes:
        state: The MazeState this node represents
        action: The action that *led to* this state (None for the root)
        parent: Arena index of the parent node (None for the root)
        past_cost: Total cost from the root, including entering this state
    """
    state: MazeState
    action: Optional[str]
    parent: Optional[int]
    past_cost: int


class NodeArena:
    """Append-only storage of search tree nodes, addressed by dense index."""

    def __init__(self):
        self._nodes: List[SearchTreeNode] = []

    def add(self, state: MazeState, action: Optional[str] = None,
            parent: Optional[int] = None, past_cost: int = 0) -> int:
        """Store a new node and return its index."""
        if parent is not None and not 0 <= parent < len(self._nodes):
            raise IndexError(f"Parent index {parent} is not in the arena")
        self._nodes.append(SearchTreeNode(state, action, parent, past_cost))
        return len(self._nodes) - 1

    def root(self, state: MazeState) -> int:
        return self.add(state)

    def __getitem__(self, index: int) -> SearchTreeNode:
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def actions_to(self, index: int) -> List[str]:
        """
        Reconstruct the action sequence from the root to a node.

        Walks parent links back until a node without a generating action
        is reached, then reverses.
        """
        sequence = []
        node = self._nodes[index]
        while node.action is not None:
            sequence.append(node.action)
            node = self._nodes[node.parent]
        sequence.reverse()
        return sequence

    def path_to(self, index: int) -> List[MazeState]:
        """States visited from the root to a node, inclusive."""
        path = []
        current: Optional[int] = index
        while current is not None:
            node = self._nodes[current]
            path.append(node.state)
            current = node.parent
        path.reverse()
        return path


def find_path(problem, arena: NodeArena, seeds: Iterable[int], target: MazeState,
              tie_break: str = 'fifo') -> Tuple[Optional[int], int]:
    """
    Run A* from the seed nodes to the target.

    Args:
        problem: MazeProblem providing transitions() and cost()
        arena: NodeArena holding the seeds; new nodes are appended to it
        seeds: Arena indices of the nodes to start from
        target: State to reach
        tie_break: Order among equal f values, 'fifo' or 'lifo'

    Returns:
        node_index: Arena index of the target node, or None if unreachable
        states_explored: Number of states expanded
    """
    if tie_break not in TIE_BREAK_MODES:
        raise ValueError(f"Unknown tie_break {tie_break!r}, expected one of {TIE_BREAK_MODES}")
    sign = 1 if tie_break == 'fifo' else -1

    frontier: List[Tuple[int, int, int]] = []
    graveyard = set()
    counter = 0

    for index in seeds:
        node = arena[index]
        heapq.heappush(frontier, (node.past_cost + node.state.distance(target), sign * counter, index))
        counter += 1

    states_explored = 0
    while frontier:
        _, _, index = heapq.heappop(frontier)
        node = arena[index]

        if node.state == target:
            logger.debug(f"A*: reached {target} at cost {node.past_cost} "
                         f"after {states_explored} expansions")
            return index, states_explored

        # Stale duplicate of a state expanded through a cheaper entry
        if node.state in graveyard:
            continue
        graveyard.add(node.state)
        states_explored += 1

        for action, dest in problem.transitions(node.state).items():
            if dest in graveyard:
                continue
            g = node.past_cost + problem.cost(dest)
            child = arena.add(dest, action, index, g)
            heapq.heappush(frontier, (g + dest.distance(target), sign * counter, child))
            counter += 1

    logger.debug(f"A*: {target} unreachable after {states_explored} expansions")
    return None, states_explored
