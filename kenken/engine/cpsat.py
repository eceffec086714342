"""CP-SAT model of a KenKen puzzle using OR-Tools.

Independent of the backtracking search: it is used to verify uniqueness on
grids too large for the backtracker and as a cross-check in tests.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ortools.sat.python import cp_model

from ..core.constants import Operation
from ..core.models import Grid
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


class _SolutionCounter(cp_model.CpSolverSolutionCallback):
    """Collects solutions and stops the search at ``limit``."""

    def __init__(self, cell_vars: Dict[Tuple[int, int], cp_model.IntVar], size: int, limit: int) -> None:
        super().__init__()
        self._cell_vars = cell_vars
        self._size = size
        self._limit = limit
        self.count = 0
        self.first: Optional[Grid] = None

    def on_solution_callback(self) -> None:
        self.count += 1
        if self.first is None:
            self.first = [
                [self.value(self._cell_vars[(r, c)]) for c in range(self._size)]
                for r in range(self._size)
            ]
        if self.count >= self._limit:
            self.stop_search()


def build_model(puzzle) -> Tuple[cp_model.CpModel, Dict[Tuple[int, int], cp_model.IntVar]]:
    size = puzzle.size
    model = cp_model.CpModel()
    cell_vars = {
        (r, c): model.new_int_var(1, size, f"v_{r}_{c}")
        for r in range(size)
        for c in range(size)
    }

    for i in range(size):
        model.add_all_different([cell_vars[(i, c)] for c in range(size)])
        model.add_all_different([cell_vars[(r, i)] for r in range(size)])

    for cage in puzzle.cages:
        _add_cage_constraint(model, cell_vars, cage, size)
    return model, cell_vars


def _add_cage_constraint(model: cp_model.CpModel, cell_vars, cage, size: int) -> None:
    target = cage.clue.target
    operation = cage.clue.operation
    cage_vars: List[cp_model.IntVar] = [cell_vars[(cell.row, cell.col)] for cell in cage.cells]

    if operation == Operation.NONE:
        if len(cage_vars) != 1:
            _infeasible(model)
            return
        model.add(cage_vars[0] == target)
    elif operation == Operation.ADD:
        model.add(sum(cage_vars) == target)
    elif operation == Operation.MULTIPLY:
        model.add_multiplication_equality(target, cage_vars)
    elif operation == Operation.SUBTRACT:
        if len(cage_vars) != 2:
            _infeasible(model)
            return
        a, b = cage_vars
        model.add_abs_equality(target, a - b)
    elif operation == Operation.DIVIDE:
        if len(cage_vars) != 2:
            _infeasible(model)
            return
        a, b = cage_vars
        a_is_larger = model.new_bool_var(f"div_{cage.id}")
        model.add(a == target * b).only_enforce_if(a_is_larger)
        model.add(b == target * a).only_enforce_if(~a_is_larger)


def _infeasible(model: cp_model.CpModel) -> None:
    # An empty disjunction can never hold.
    model.add_bool_or([])


def _run(puzzle, limit: int, timeout: float) -> Tuple[_SolutionCounter, int]:
    model, cell_vars = build_model(puzzle)
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_workers = 1
    counter = _SolutionCounter(cell_vars, puzzle.size, limit)
    status = solver.solve(model, counter)
    LOGGER.debug(
        "CP-SAT: %s solution(s) (limit %s), status=%s, %.2fs",
        counter.count,
        limit,
        solver.status_name(status),
        solver.wall_time,
    )
    return counter, status


def count_solutions_cpsat(puzzle, limit: int = 2, timeout: float = 10.0) -> Optional[int]:
    """Count solutions up to ``limit``.

    Returns ``None`` when the time limit cut the enumeration short: the count
    is exact only if the search finished or stopped at ``limit``.
    """

    counter, status = _run(puzzle, limit, timeout)
    if counter.count >= limit or status in (cp_model.OPTIMAL, cp_model.INFEASIBLE):
        return counter.count
    LOGGER.warning(
        "CP-SAT hit the %.1fs time limit after %s solution(s); count is inconclusive",
        timeout,
        counter.count,
    )
    return None


def solve_puzzle_cpsat(puzzle, timeout: float = 10.0) -> Optional[Grid]:
    return _run(puzzle, 1, timeout)[0].first
