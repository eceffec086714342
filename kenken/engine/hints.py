"""Explained hints for players."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from math import prod
from typing import List, Optional, Sequence

from ..core.constants import Operation
from ..core.models import Cage, Cell, Puzzle
from ..utils.logger import get_logger
from .clues import format_clue
from .solver import get_hint, is_valid_placement


LOGGER = get_logger(__name__)


class HintReason(str, Enum):
    ONLY_OPTION = "only-option"
    CAGE_CONSTRAINT = "cage-constraint"
    SOLVER = "solver"


@dataclass(frozen=True)
class Hint:
    cell: Cell
    value: int
    reason: HintReason
    explanation: str


class HintSystem:
    """Finds the next move to suggest, preferring logically forced ones."""

    def __init__(self, puzzle: Puzzle) -> None:
        self.puzzle = puzzle
        self.hints_used = 0

    def get_hint(self, grid: Sequence[Sequence[int]]) -> Optional[Hint]:
        hint = (
            self._only_option_hint(grid)
            or self._cage_constraint_hint(grid)
            or self._solver_hint(grid)
        )
        if hint is not None:
            self.hints_used += 1
            LOGGER.debug("Hint %s at (%s,%s): %s", hint.reason.value, hint.cell.row, hint.cell.col, hint.value)
        return hint

    def reset(self) -> None:
        self.hints_used = 0

    def possible_values(self, grid: Sequence[Sequence[int]], row: int, col: int) -> List[int]:
        return [
            value
            for value in range(1, self.puzzle.size + 1)
            if is_valid_placement(grid, row, col, value)
        ]

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------
    def _only_option_hint(self, grid: Sequence[Sequence[int]]) -> Optional[Hint]:
        size = self.puzzle.size
        for row in range(size):
            for col in range(size):
                if grid[row][col] != 0:
                    continue
                options = self.possible_values(grid, row, col)
                if len(options) == 1:
                    value = options[0]
                    return Hint(
                        cell=Cell(row, col),
                        value=value,
                        reason=HintReason.ONLY_OPTION,
                        explanation=(
                            f"Only {value} can go in this cell. All other numbers are "
                            "already in the row or column."
                        ),
                    )
        return None

    def _cage_constraint_hint(self, grid: Sequence[Sequence[int]]) -> Optional[Hint]:
        for cage in self.puzzle.cages:
            empty = [cell for cell in cage.cells if grid[cell.row][cell.col] == 0]
            if len(empty) != 1:
                continue
            cell = empty[0]
            filled = [grid[c.row][c.col] for c in cage.cells if grid[c.row][c.col] != 0]
            legal = set(self.possible_values(grid, cell.row, cell.col))
            options = [v for v in self._required_values(cage, filled) if v in legal]
            if len(options) == 1:
                return Hint(
                    cell=cell,
                    value=options[0],
                    reason=HintReason.CAGE_CONSTRAINT,
                    explanation=(
                        f"Based on the cage constraint {format_clue(cage.clue)}, "
                        f"this cell must be {options[0]}."
                    ),
                )
        return None

    def _required_values(self, cage: Cage, filled: List[int]) -> List[int]:
        """Values for the last empty cell of ``cage`` that satisfy its clue."""

        target = cage.clue.target
        operation = cage.clue.operation
        candidates: List[int] = []
        if operation == Operation.NONE:
            candidates = [target]
        elif operation == Operation.ADD:
            candidates = [target - sum(filled)]
        elif operation == Operation.MULTIPLY:
            partial = prod(filled)
            if partial and target % partial == 0:
                candidates = [target // partial]
        elif operation == Operation.SUBTRACT and len(filled) == 1:
            candidates = [filled[0] + target, filled[0] - target]
        elif operation == Operation.DIVIDE and len(filled) == 1:
            candidates = [filled[0] * target]
            if filled[0] % target == 0:
                candidates.append(filled[0] // target)
        size = self.puzzle.size
        return sorted({v for v in candidates if 1 <= v <= size})

    def _solver_hint(self, grid: Sequence[Sequence[int]]) -> Optional[Hint]:
        cell = get_hint(self.puzzle, grid)
        if cell is None:
            return None
        value = self.puzzle.solution[cell.row][cell.col]
        return Hint(
            cell=cell,
            value=value,
            reason=HintReason.SOLVER,
            explanation=f"Try looking at this cell. The value {value} works here.",
        )
