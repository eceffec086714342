import asyncio
import unittest
from unittest.mock import patch

from ortools.sat.python import cp_model

from kenken.core.constants import Difficulty, Operation
from kenken.core.models import Cage, Cell, Clue, Puzzle
from kenken.engine.cpsat import count_solutions_cpsat, solve_puzzle_cpsat
from kenken.engine.generator import generate_puzzle_sync
from kenken.engine.solver import (
    BacktrackSearch,
    SearchState,
    count_solutions,
    get_hint,
    has_unique_solution,
    has_unique_solution_sync,
    is_cage_satisfied,
    is_valid_placement,
    solve_puzzle,
)


def make_puzzle(size, cages, solution=None) -> Puzzle:
    return Puzzle(
        id="fixture",
        size=size,
        difficulty=Difficulty.EASY,
        cages=tuple(cages),
        solution=solution or [[0] * size for _ in range(size)],
    )


def single_cell_puzzle(solution) -> Puzzle:
    size = len(solution)
    cages = [
        Cage(r * size + c, (Cell(r, c),), Clue(solution[r][c], Operation.NONE))
        for r in range(size)
        for c in range(size)
    ]
    return make_puzzle(size, cages, solution)


def two_row_sums() -> Puzzle:
    return make_puzzle(
        2,
        [
            Cage(0, (Cell(0, 0), Cell(0, 1)), Clue(3, Operation.ADD)),
            Cage(1, (Cell(1, 0), Cell(1, 1)), Clue(3, Operation.ADD)),
        ],
    )


def contradictory() -> Puzzle:
    return make_puzzle(
        2,
        [
            Cage(0, (Cell(0, 0),), Clue(1, Operation.NONE)),
            Cage(1, (Cell(0, 1),), Clue(1, Operation.NONE)),
            Cage(2, (Cell(1, 0), Cell(1, 1)), Clue(3, Operation.ADD)),
        ],
    )


class PlacementTests(unittest.TestCase):
    def test_row_and_column_uniqueness(self) -> None:
        grid = [[1, 0, 0], [0, 0, 2], [0, 0, 0]]
        self.assertFalse(is_valid_placement(grid, 0, 2, 1))
        self.assertFalse(is_valid_placement(grid, 0, 2, 2))
        self.assertTrue(is_valid_placement(grid, 0, 2, 3))
        self.assertTrue(is_valid_placement(grid, 0, 0, 1))

    def test_partial_cage_bounds(self) -> None:
        add = Cage(0, (Cell(0, 0), Cell(0, 1), Cell(0, 2)), Clue(5, Operation.ADD))
        mul = Cage(1, (Cell(0, 0), Cell(0, 1)), Clue(3, Operation.MULTIPLY))
        sub = Cage(2, (Cell(0, 0), Cell(0, 1)), Clue(1, Operation.SUBTRACT))
        div = Cage(3, (Cell(0, 0), Cell(0, 1)), Clue(2, Operation.DIVIDE))
        fixed = Cage(4, (Cell(0, 0),), Clue(2, Operation.NONE))

        self.assertTrue(is_cage_satisfied(add, [[2, 3, 0]], allow_partial=True))
        self.assertFalse(is_cage_satisfied(add, [[3, 3, 0]], allow_partial=True))
        self.assertTrue(is_cage_satisfied(add, [[3, 3, 0]], allow_partial=False))
        self.assertFalse(is_cage_satisfied(mul, [[4, 0]], allow_partial=True))
        self.assertTrue(is_cage_satisfied(sub, [[9, 0]], allow_partial=True))
        self.assertTrue(is_cage_satisfied(div, [[3, 0]], allow_partial=True))
        self.assertFalse(is_cage_satisfied(div, [[3, 1]], allow_partial=True))
        self.assertFalse(is_cage_satisfied(fixed, [[1]], allow_partial=True))


class SolveTests(unittest.TestCase):
    def test_solves_fully_constrained_puzzle(self) -> None:
        expected = [[1, 2], [2, 1]]
        self.assertEqual(solve_puzzle(single_cell_puzzle(expected)), expected)

    def test_unsolvable_returns_none(self) -> None:
        self.assertIsNone(solve_puzzle(contradictory()))
        self.assertEqual(count_solutions(contradictory()), 0)

    def test_solution_satisfies_generated_puzzle(self) -> None:
        puzzle = generate_puzzle_sync(4, "medium", seed="solver-check")
        solved = solve_puzzle(puzzle)
        self.assertIsNotNone(solved)
        for cage in puzzle.cages:
            self.assertTrue(is_cage_satisfied(cage, solved))


class UniquenessTests(unittest.IsolatedAsyncioTestCase):
    async def test_unique_for_fully_constrained(self) -> None:
        self.assertTrue(await has_unique_solution(single_cell_puzzle([[1, 2], [2, 1]])))

    async def test_not_unique_with_two_completions(self) -> None:
        puzzle = two_row_sums()
        self.assertFalse(await has_unique_solution(puzzle))
        self.assertEqual(count_solutions(puzzle), 2)

    async def test_not_unique_when_unsolvable(self) -> None:
        self.assertFalse(await has_unique_solution(contradictory()))

    async def test_yields_to_event_loop_before_counting(self) -> None:
        events = []
        asyncio.get_running_loop().call_soon(events.append, "loop")

        def record(puzzle, limit=2):
            events.append("count")
            return 1

        with patch("kenken.engine.solver.count_solutions", side_effect=record):
            self.assertTrue(await has_unique_solution(two_row_sums()))
        self.assertEqual(events, ["loop", "count"])

    def test_sync_variant(self) -> None:
        self.assertTrue(has_unique_solution_sync(single_cell_puzzle([[1, 2], [2, 1]])))
        self.assertFalse(has_unique_solution_sync(two_row_sums()))


class SearchStateTests(unittest.TestCase):
    def test_stops_at_limit(self) -> None:
        free = make_puzzle(3, [])
        search = BacktrackSearch(free, limit=2).run()
        self.assertEqual(search.solutions, 2)
        self.assertEqual(search.state, SearchState.DONE)
        self.assertEqual(count_solutions(free, limit=100), 12)

    def test_limit_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            BacktrackSearch(make_puzzle(2, []), limit=0)


class CpSatCrossCheckTests(unittest.TestCase):
    def test_agrees_on_fixtures(self) -> None:
        self.assertEqual(count_solutions_cpsat(two_row_sums()), 2)
        self.assertEqual(count_solutions_cpsat(contradictory()), 0)
        self.assertEqual(count_solutions_cpsat(single_cell_puzzle([[1, 2], [2, 1]])), 1)
        self.assertEqual(solve_puzzle_cpsat(single_cell_puzzle([[1, 2], [2, 1]])), [[1, 2], [2, 1]])

    def test_agrees_with_backtracking_on_generated_puzzles(self) -> None:
        for seed in range(6):
            puzzle = generate_puzzle_sync(4, "hard", seed=seed)
            self.assertEqual(
                count_solutions_cpsat(puzzle, limit=2),
                count_solutions(puzzle, limit=2),
            )

    def test_time_limit_after_first_solution_is_inconclusive(self) -> None:
        def cut_short(model, callback):
            callback.count += 1
            return cp_model.FEASIBLE

        with patch("kenken.engine.cpsat.cp_model.CpSolver") as solver_cls:
            solver = solver_cls.return_value
            solver.solve.side_effect = cut_short
            solver.wall_time = 0.0
            self.assertIsNone(count_solutions_cpsat(two_row_sums(), limit=2, timeout=0.01))

    def test_limit_reached_before_time_limit_is_conclusive(self) -> None:
        def two_found(model, callback):
            callback.count += 2
            return cp_model.FEASIBLE

        with patch("kenken.engine.cpsat.cp_model.CpSolver") as solver_cls:
            solver = solver_cls.return_value
            solver.solve.side_effect = two_found
            solver.wall_time = 0.0
            self.assertEqual(count_solutions_cpsat(two_row_sums(), limit=2), 2)

    def test_tiny_timeout_never_reports_unique(self) -> None:
        free = make_puzzle(4, [])
        self.assertIn(count_solutions_cpsat(free, limit=2, timeout=0.0), (None, 2))


class HintCellTests(unittest.TestCase):
    def test_single_candidate_cell(self) -> None:
        puzzle = single_cell_puzzle([[1, 2], [2, 1]])
        self.assertEqual(get_hint(puzzle, [[1, 0], [0, 0]]), Cell(0, 1))

    def test_falls_back_to_first_empty_then_none(self) -> None:
        puzzle = single_cell_puzzle([[1, 2], [2, 1]])
        self.assertEqual(get_hint(puzzle, [[0, 0], [0, 0]]), Cell(0, 0))
        self.assertIsNone(get_hint(puzzle, [[1, 2], [2, 1]]))

    def test_naked_single_beats_earlier_empty_cell(self) -> None:
        puzzle = single_cell_puzzle([[1, 2, 3], [2, 3, 1], [3, 1, 2]])
        grid = [[0, 0, 0], [2, 0, 1], [3, 0, 0]]
        self.assertEqual(get_hint(puzzle, grid), Cell(0, 0))
        grid = [[0, 0, 0], [0, 3, 1], [0, 1, 0]]
        self.assertEqual(get_hint(puzzle, grid), Cell(0, 1))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
