"""Backtracking solver used for uniqueness checks and hints.

The search walks cells in row-major order, trying values ``1..N``. A value
is kept only if it is unused in its row and column and the containing cage
stays feasible. Partial feasibility is deliberately weak: ``+`` and ``×``
cages only bound the running total by the target, ``-`` and ``÷`` cages are
not checked until full. Generation timing (and therefore which seeds succeed
within the attempt cap) depends on this pruning strength.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from math import prod
from typing import List, Optional, Sequence

from ..core.constants import Operation
from ..core.models import Cage, Cell, Grid
from ..utils.logger import get_logger
from .clues import validate_clue
from .latin_square import copy_grid, create_empty_grid


LOGGER = get_logger(__name__)


class SearchState(Enum):
    SEARCHING = "searching"
    ONE_FOUND = "one_found"
    DONE = "done"


def is_valid_placement(grid: Sequence[Sequence[int]], row: int, col: int, value: int) -> bool:
    """True if ``value`` appears nowhere else in the cell's row or column."""

    size = len(grid)
    for c in range(size):
        if c != col and grid[row][c] == value:
            return False
    for r in range(size):
        if r != row and grid[r][col] == value:
            return False
    return True


def is_cage_satisfied(cage: Cage, grid: Sequence[Sequence[int]], allow_partial: bool = False) -> bool:
    """Check a cage against the grid.

    A full cage is checked exactly. A cage with empty cells passes unless
    ``allow_partial`` is set, in which case the conservative partial bound
    applies.
    """

    values = [v for v in cage.values(grid) if v != 0]
    if len(values) < cage.size:
        return _partial_feasible(cage, values) if allow_partial else True
    return validate_clue(cage.clue, values)


def _partial_feasible(cage: Cage, values: List[int]) -> bool:
    target = cage.clue.target
    operation = cage.clue.operation
    if operation == Operation.NONE:
        return not values or values[0] == target
    if operation == Operation.ADD:
        return sum(values) <= target
    if operation == Operation.MULTIPLY:
        return prod(values) <= target
    # Subtraction and division need both operands.
    return True


class BacktrackSearch:
    """One search over a puzzle, stopping once ``limit`` solutions are seen."""

    def __init__(self, puzzle, limit: int = 1) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.size: int = puzzle.size
        self.limit = limit
        self.grid: Grid = create_empty_grid(self.size)
        self.cage_at: List[List[Optional[Cage]]] = [[None] * self.size for _ in range(self.size)]
        for cage in puzzle.cages:
            for cell in cage.cells:
                self.cage_at[cell.row][cell.col] = cage
        self.state = SearchState.SEARCHING
        self.solutions = 0
        self.first_solution: Optional[Grid] = None

    def run(self) -> "BacktrackSearch":
        self._search(0)
        if self.state != SearchState.DONE:
            self.state = SearchState.DONE
        return self

    def _record_solution(self) -> bool:
        self.solutions += 1
        if self.first_solution is None:
            self.first_solution = copy_grid(self.grid)
        if self.solutions >= self.limit:
            self.state = SearchState.DONE
            return True
        self.state = SearchState.ONE_FOUND
        return False

    def _search(self, index: int) -> bool:
        """Return True to propagate a stop signal up the recursion."""

        size = self.size
        if index == size * size:
            return self._record_solution()

        row, col = divmod(index, size)
        grid = self.grid
        cage = self.cage_at[row][col]
        for value in range(1, size + 1):
            if not is_valid_placement(grid, row, col, value):
                continue
            grid[row][col] = value
            if cage is None or is_cage_satisfied(cage, grid, allow_partial=True):
                if self._search(index + 1):
                    grid[row][col] = 0
                    return True
            grid[row][col] = 0
        return False


def solve_puzzle(puzzle) -> Optional[Grid]:
    """Return the first solution found, or ``None`` if the puzzle is unsolvable."""

    search = BacktrackSearch(puzzle, limit=1).run()
    if search.first_solution is None:
        LOGGER.debug("No solution for %sx%s puzzle", puzzle.size, puzzle.size)
    return search.first_solution


def count_solutions(puzzle, limit: int = 2) -> int:
    """Count solutions up to ``limit``; the result is ``min(actual, limit)``."""

    return BacktrackSearch(puzzle, limit=limit).run().solutions


def has_unique_solution_sync(puzzle) -> bool:
    return count_solutions(puzzle, limit=2) == 1


async def has_unique_solution(puzzle) -> bool:
    """Uniqueness check for async callers.

    Yields to the event loop once so the host can update before the blocking
    search starts. There is no cancellation once the search runs.
    """

    await asyncio.sleep(0)
    solutions = count_solutions(puzzle, limit=2)
    LOGGER.debug("Uniqueness check: %s solution(s) found (limit 2)", solutions)
    return solutions == 1


def get_hint(puzzle, grid: Sequence[Sequence[int]]) -> Optional[Cell]:
    """Pick a cell to hint at.

    Prefers the first empty cell (row-major) with a single row/column-legal
    value, ignoring cages. Falls back to the first empty cell, or ``None`` on
    a full grid.
    """

    size = puzzle.size
    first_empty: Optional[Cell] = None
    for row in range(size):
        for col in range(size):
            if grid[row][col] != 0:
                continue
            if first_empty is None:
                first_empty = Cell(row, col)
            legal = [v for v in range(1, size + 1) if is_valid_placement(grid, row, col, v)]
            if len(legal) == 1:
                return Cell(row, col)
    return first_empty
