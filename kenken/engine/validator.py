"""Move validation against a puzzle during play."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..core.models import Cage, Cell, Puzzle
from .clues import validate_clue
from .latin_square import copy_grid


@dataclass
class MoveResult:
    valid: bool
    conflicts: List[Cell] = field(default_factory=list)
    cage_errors: List[Cell] = field(default_factory=list)


@dataclass
class Progress:
    filled: int
    total: int
    percentage: float


class Validator:
    """Checks a caller-owned progress grid against a puzzle.

    Neither the puzzle nor the grid passed in is ever modified.
    """

    def __init__(self, puzzle: Puzzle) -> None:
        self.puzzle = puzzle

    def is_valid_move(self, grid: Sequence[Sequence[int]], cell: Cell, value: int) -> MoveResult:
        conflicts = self.find_conflicts(grid, cell, value)
        cage_errors = self.find_cage_errors(grid, cell, value)
        return MoveResult(
            valid=not conflicts and not cage_errors,
            conflicts=conflicts,
            cage_errors=cage_errors,
        )

    def find_conflicts(self, grid: Sequence[Sequence[int]], cell: Cell, value: int) -> List[Cell]:
        """Other cells in the same row, then column, already holding ``value``.

        Clearing a cell (``value`` 0) never conflicts.
        """

        if value == 0:
            return []
        size = self.puzzle.size
        conflicts = [
            Cell(cell.row, col)
            for col in range(size)
            if col != cell.col and grid[cell.row][col] == value
        ]
        conflicts.extend(
            Cell(row, cell.col)
            for row in range(size)
            if row != cell.row and grid[row][cell.col] == value
        )
        return conflicts

    def find_cage_errors(self, grid: Sequence[Sequence[int]], cell: Cell, value: int) -> List[Cell]:
        """All cells of the cage if placing ``value`` completes it incorrectly."""

        cage = self.find_cage(cell)
        if cage is None:
            return []
        trial = copy_grid(grid)
        trial[cell.row][cell.col] = value
        if any(trial[c.row][c.col] == 0 for c in cage.cells):
            return []
        if self.validate_cage(cage, trial):
            return []
        return list(cage.cells)

    def find_cage(self, cell: Cell) -> Optional[Cage]:
        return self.puzzle.cage_for(cell)

    def validate_cage(self, cage: Cage, grid: Sequence[Sequence[int]]) -> bool:
        return validate_clue(cage.clue, cage.values(grid))

    def find_all_errors(self, grid: Sequence[Sequence[int]]) -> List[Cell]:
        """Filled cells that disagree with the solution, in row-major order."""

        solution = self.puzzle.solution
        size = self.puzzle.size
        return [
            Cell(row, col)
            for row in range(size)
            for col in range(size)
            if grid[row][col] != 0 and grid[row][col] != solution[row][col]
        ]

    def is_complete(self, grid: Sequence[Sequence[int]]) -> bool:
        size = self.puzzle.size
        return all(
            grid[row][col] == self.puzzle.solution[row][col]
            for row in range(size)
            for col in range(size)
        )

    def is_full(self, grid: Sequence[Sequence[int]]) -> bool:
        return all(value != 0 for row in grid for value in row)

    def get_progress(self, grid: Sequence[Sequence[int]]) -> Progress:
        total = self.puzzle.size * self.puzzle.size
        filled = sum(1 for row in grid for value in row if value != 0)
        return Progress(filled=filled, total=total, percentage=filled / total * 100)
