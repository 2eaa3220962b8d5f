"""
Tests for the two-phase waypoint Pathfinder.

Run with: pytest tests/test_pathfinder.py -v
"""

import heapq
from pathlib import Path

import pytest

from keymaze.core.definitions import ROUGH_ENTRY_COST, DEFAULT_ENTRY_COST
from keymaze.core.state import MazeState
from keymaze.simulation.problem import MazeProblem
from keymaze.simulation.pathfinder import Pathfinder, SolverOptions, solve
from keymaze.simulation.validator import replay_solution


MAZE_DIR = Path(__file__).parent.parent / "mazes"

LABYRINTH = [
    "XXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXX",
    "XI.X........X....................X",
    "X..X...X....X..XXXXXXXXXXXXXXXXX.X",
    "X..X...XXXXXX..XXXXXX.G..X..MMMX.X",
    "XMMXMMMX..X..........XXXXX.XMMMX.X",
    "X.........X..XXXXXXX.....X.XMMMX.X",
    "X.........XXXX.....XXXXX.X.X.G.X.X",
    "XXXXXXXXMMMMMX.MMM.X...X.X.XXXXX.X",
    "X....X.......X.MKM.X.G.X.X.......X",
    "X.G..X..M..M.X.MMM.X...X.XXXXXXXXX",
    "X.MM.X..M..M.X.....XXXXX.X...X...X",
    "X.MM.X..M..M.XMM..MMMMMX.X.X.X.X.X",
    "X.MM.X...MM..XMM...MMMMX.X.X.X.X.X",
    "X............XMMM..M.......X...X.X",
    "XXXXXXXXXX...XXXXXXXXXXXXXXXXXXX.X",
    "X.G.MM..M....M.X...XM..X...X...X.X",
    "X...MM..X....X...X...X...XMMMX..MX",
    "XXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXX",
]


def uniform_cost(problem, source, target):
    """Reference Dijkstra on entry costs; None if unreachable."""
    dist = {source: 0}
    pq = [(0, source.row, source.col)]
    while pq:
        d, r, c = heapq.heappop(pq)
        u = MazeState(c, r)
        if d != dist.get(u):
            continue
        if u == target:
            return d
        for v in problem.transitions(u).values():
            nd = d + problem.cost(v)
            if nd < dist.get(v, float('inf')):
                dist[v] = nd
                heapq.heappush(pq, (nd, v.row, v.col))
    return None


def assert_optimal(rows, expected_cost):
    prob = MazeProblem.from_rows(rows)
    solution = Pathfinder(prob).solve()
    result = replay_solution(prob, solution)
    assert result.is_solution, result.error_message
    assert result.cost == expected_cost
    return prob, solution


# ==============================================================================
# SCENARIOS
# ==============================================================================

class TestScenarios:
    """Completeness and optimality on hand-built mazes."""

    def test_open_maze_with_interior_wall(self):
        prob, solution = assert_optimal([
            "XXXXXXX",
            "XI...KX",
            "X.....X",
            "X.X.XGX",
            "XXXXXXX",
        ], 6)
        assert len(solution) == 6

    def test_rough_patch_between_start_and_waypoint(self):
        assert_optimal([
            "XXXXXXX",
            "XI....X",
            "X.MMM.X",
            "X.XKXGX",
            "XXXXXXX",
        ], 14)

    def test_nearest_endpoint_is_used(self):
        prob, solution = assert_optimal([
            "XXXXXXX",
            "XI.G..X",
            "X.MMMGX",
            "X.XKX.X",
            "XXXXXXX",
        ], 10)
        assert replay_solution(prob, solution).path[-1] == MazeState(3, 1)

    def test_enclosed_waypoint_has_no_solution(self):
        prob = MazeProblem.from_rows([
            "XXXXXXX",
            "XI.G..X",
            "X.MXMGX",
            "X.XKX.X",
            "XXXXXXX",
        ])
        assert Pathfinder(prob).solve() is None

    def test_unreachable_nearest_endpoint_falls_through(self):
        prob, solution = assert_optimal([
            "XXXXXXXX",
            "XIXGX..X",
            "X..X...X",
            "XK....GX",
            "XXXXXXXX",
        ], 7)
        assert replay_solution(prob, solution).path[-1] == MazeState(6, 3)

    def test_labyrinth_is_solved(self):
        prob = MazeProblem.from_rows(LABYRINTH)
        solution = Pathfinder(prob).solve()
        result = replay_solution(prob, solution)
        assert result.is_solution, result.error_message

    def test_labyrinth_cost_matches_reference(self):
        prob = MazeProblem.from_rows(LABYRINTH)
        solution, diag = Pathfinder(prob).solve_with_diagnostics()

        to_key = uniform_cost(prob, prob.start, prob.waypoint)
        ordered = sorted(prob.endpoints,
                         key=lambda e: (e.distance(prob.waypoint), e.row, e.col))
        first_reachable = next(e for e in ordered
                               if uniform_cost(prob, prob.waypoint, e) is not None)
        to_goal = uniform_cost(prob, prob.waypoint, first_reachable)

        assert diag.waypoint_cost == to_key
        assert diag.chosen_endpoint == first_reachable
        assert replay_solution(prob, solution).cost == to_key + to_goal


# ==============================================================================
# PROPERTIES
# ==============================================================================

class TestProperties:

    def test_rough_cells_cost_two_more_each(self):
        rough = MazeProblem.from_rows(["XXXXXXX", "XIMMKGX", "XXXXXXX"])
        open_ = MazeProblem.from_rows(["XXXXXXX", "XI..KGX", "XXXXXXX"])

        rough_cost = replay_solution(rough, solve(rough)).cost
        open_cost = replay_solution(open_, solve(open_)).cost

        assert open_cost == 4
        assert rough_cost == 8
        assert rough_cost - open_cost == 2 * (ROUGH_ENTRY_COST - DEFAULT_ENTRY_COST)

    def test_waypoint_unreachable_means_no_solution(self):
        # Endpoint is right next to the start, waypoint is walled off
        prob = MazeProblem.from_rows(["XXXXXXX", "XIG.XKX", "XXXXXXX"])
        solution, diag = Pathfinder(prob).solve_with_diagnostics()
        assert solution is None
        assert diag.success is False
        assert diag.failure_reason == "waypoint unreachable"
        assert diag.endpoints_tried == 0

    def test_endpoints_unreachable_means_no_solution(self):
        prob = MazeProblem.from_rows(["XXXXXXX", "XIK.XGX", "XXXXXXX"])
        solution, diag = Pathfinder(prob).solve_with_diagnostics()
        assert solution is None
        assert diag.failure_reason == "no endpoint reachable"
        assert diag.waypoint_cost == 1
        assert diag.endpoints_tried == 1

    def test_nearest_endpoint_wins_even_if_more_expensive(self):
        # Left goal is 3 away through rough terrain (cost 7),
        # right goal is 4 away over open floor (cost 4)
        prob = MazeProblem.from_rows(["XXXXXXXXXX", "XGMMKI..GX", "XXXXXXXXXX"])
        solution, diag = Pathfinder(prob).solve_with_diagnostics()

        assert solution == ["L", "L", "L", "L"]
        assert diag.chosen_endpoint == MazeState(1, 1)
        assert diag.total_cost == 8
        assert replay_solution(prob, solution).cost == 8

    def test_equidistant_endpoints_tried_in_row_major_order(self):
        # Both goals are one step from the waypoint; the upper one comes first
        prob = MazeProblem.from_rows([
            "XXXXX",
            "XIXGX",
            "X..KX",
            "XXXGX",
            "XXXXX",
        ])
        solution, diag = Pathfinder(prob).solve_with_diagnostics()

        assert solution == ["D", "R", "R", "U"]
        assert diag.chosen_endpoint == MazeState(3, 1)
        assert diag.endpoints_tried == 1

    def test_solve_is_idempotent(self):
        prob = MazeProblem.from_rows(LABYRINTH)
        finder = Pathfinder(prob)
        costs = {replay_solution(prob, finder.solve()).cost for _ in range(3)}
        assert len(costs) == 1

    def test_tie_break_changes_path_not_cost(self):
        rows = [
            "XXXXXXX",
            "XI....X",
            "X.....X",
            "X....KX",
            "X.....X",
            "XG....X",
            "XXXXXXX",
        ]
        prob = MazeProblem.from_rows(rows)
        fifo = Pathfinder(prob, SolverOptions(tie_break='fifo')).solve()
        lifo = Pathfinder(prob, SolverOptions(tie_break='lifo')).solve()

        assert replay_solution(prob, fifo).cost == replay_solution(prob, lifo).cost == 6 + 6
        assert replay_solution(prob, lifo).is_solution

    def test_solution_passes_waypoint_before_endpoint(self):
        prob = MazeProblem.from_rows([
            "XXXXXXX",
            "XG.I.KX",
            "XXXXXXX",
        ])
        solution = solve(prob)
        result = replay_solution(prob, solution)
        assert solution == ["R", "R", "L", "L", "L", "L"]
        assert result.path.index(prob.waypoint) < len(result.path) - 1
        assert result.cost == 6


# ==============================================================================
# OPTIONS & DIAGNOSTICS
# ==============================================================================

class TestOptionsAndDiagnostics:

    def test_default_options(self):
        assert SolverOptions().tie_break == 'fifo'
        assert Pathfinder(MazeProblem.from_rows(["XXXX", "XIKG", "XXXX"])).options.tie_break == 'fifo'

    def test_unknown_tie_break_rejected(self):
        with pytest.raises(ValueError):
            SolverOptions(tie_break='random')

    def test_for_mode(self):
        assert SolverOptions.for_mode("reproducible").tie_break == 'fifo'
        assert SolverOptions.for_mode("depth_first_ties").tie_break == 'lifo'
        with pytest.raises(ValueError):
            SolverOptions.for_mode("fastest")

    def test_diagnostics_on_success(self):
        prob = MazeProblem.from_rows([
            "XXXXXXX",
            "XI...KX",
            "X.....X",
            "X.X.XGX",
            "XXXXXXX",
        ])
        solution, diag = Pathfinder(prob).solve_with_diagnostics()

        assert diag.success is True
        assert diag.waypoint_cost == 4
        assert diag.total_cost == 6
        assert diag.path_length == len(solution) == 6
        assert diag.chosen_endpoint == MazeState(5, 3)
        assert diag.endpoints_tried == 1
        assert diag.states_explored > 0
        assert diag.nodes_created > diag.path_length
        assert diag.failure_reason == ""
        assert "SUCCESS" in diag.summary()

    def test_diagnostics_summary_on_failure(self):
        prob = MazeProblem.from_rows(["XXXXXXX", "XIG.XKX", "XXXXXXX"])
        _, diag = Pathfinder(prob).solve_with_diagnostics()
        assert "FAILED: waypoint unreachable" in diag.summary()


# ==============================================================================
# MAZE FILES
# ==============================================================================

@pytest.fixture(scope='module')
def labyrinth_from_file():
    return MazeProblem.from_file(MAZE_DIR / "labyrinth.txt")


def test_labyrinth_file_matches_inline(labyrinth_from_file):
    inline = MazeProblem.from_rows(LABYRINTH)
    assert (labyrinth_from_file.grid == inline.grid).all()
    assert labyrinth_from_file.waypoint == MazeState(16, 8)


def test_labyrinth_file_solved(labyrinth_from_file):
    solution = solve(labyrinth_from_file)
    assert replay_solution(labyrinth_from_file, solution).is_solution
