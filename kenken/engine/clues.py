"""Clue derivation and clue checks."""

from __future__ import annotations

from dataclasses import replace
from math import prod
from typing import Iterable, List, Sequence

from ..core.constants import Operation
from ..core.models import Cage, Cell, Clue
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

# Highest priority first.
PAIR_PRIORITY = (Operation.DIVIDE, Operation.MULTIPLY, Operation.SUBTRACT, Operation.ADD)


def calculate_clue(
    cells: Sequence[Cell],
    solution: Sequence[Sequence[int]],
    operations: Iterable[Operation],
) -> Clue:
    """Derive the clue for ``cells`` from the solution values."""

    allowed = {Operation.from_symbol(op) for op in operations}
    values = [solution[cell.row][cell.col] for cell in cells]

    if len(values) == 1:
        return Clue(target=values[0], operation=Operation.NONE)
    if len(values) == 2:
        return _pair_clue(values[0], values[1], allowed)
    return _multi_cell_clue(values, allowed)


def _pair_clue(a: int, b: int, allowed: set) -> Clue:
    larger, smaller = max(a, b), min(a, b)
    candidates = {
        Operation.ADD: a + b,
        Operation.MULTIPLY: a * b,
    }
    if a != b:
        candidates[Operation.SUBTRACT] = larger - smaller
    if larger % smaller == 0:
        candidates[Operation.DIVIDE] = larger // smaller

    for operation in PAIR_PRIORITY:
        if operation in allowed and operation in candidates:
            return Clue(target=candidates[operation], operation=operation)
    return Clue(target=a + b, operation=Operation.ADD)


def _multi_cell_clue(values: List[int], allowed: set) -> Clue:
    if Operation.ADD in allowed:
        return Clue(target=sum(values), operation=Operation.ADD)
    if Operation.MULTIPLY in allowed:
        return Clue(target=prod(values), operation=Operation.MULTIPLY)
    return Clue(target=sum(values), operation=Operation.ADD)


def assign_clues(
    cages: Iterable[Cage],
    solution: Sequence[Sequence[int]],
    operations: Iterable[Operation],
) -> List[Cage]:
    """Return copies of ``cages`` carrying clues derived from ``solution``."""

    operations = tuple(operations)
    assigned = []
    for cage in cages:
        clue = calculate_clue(cage.cells, solution, operations)
        LOGGER.debug("Cage %s (%s cells) -> %s", cage.id, cage.size, format_clue(clue))
        assigned.append(replace(cage, clue=clue))
    return assigned


def validate_clue(clue: Clue, values: Sequence[int]) -> bool:
    """Exact check of a fully filled cage's values against its clue."""

    if not values:
        return False
    operation = clue.operation
    if operation == Operation.NONE:
        return len(values) == 1 and values[0] == clue.target
    if operation == Operation.ADD:
        return sum(values) == clue.target
    if operation == Operation.MULTIPLY:
        return prod(values) == clue.target
    if len(values) != 2:
        return False
    larger, smaller = max(values), min(values)
    if operation == Operation.SUBTRACT:
        return larger - smaller == clue.target
    if operation == Operation.DIVIDE:
        return smaller != 0 and larger % smaller == 0 and larger // smaller == clue.target
    return False


def format_clue(clue: Clue) -> str:
    if clue.operation == Operation.NONE:
        return str(clue.target)
    return f"{clue.target}{clue.operation.value}"


def is_clue_possible(clue: Clue, size: int) -> bool:
    """Coarse range check: can values in ``1..size`` plausibly reach the target?"""

    target = clue.target
    operation = clue.operation
    if operation == Operation.NONE:
        return 1 <= target <= size
    if operation == Operation.ADD:
        return 2 <= target <= size * 9
    if operation == Operation.SUBTRACT:
        return 0 <= target < size
    if operation == Operation.MULTIPLY:
        return 1 <= target <= size ** 3
    if operation == Operation.DIVIDE:
        return 1 <= target <= size
    return False
