"""Latin square construction and grid helpers."""

from __future__ import annotations

from typing import Sequence

from ..core.models import Grid
from ..utils.logger import get_logger
from ..utils.rng import SeededRandom


LOGGER = get_logger(__name__)


def generate_latin_square(size: int, rng: SeededRandom) -> Grid:
    """Build a random N×N Latin square.

    Starts from the cyclic pattern ``((row + col) % N) + 1`` and applies, in
    this order: a row shuffle, a column shuffle, then 5-15 value swaps. Each
    step preserves the Latin property. The order is fixed; changing it changes
    what a given seed produces.
    """

    if size < 1:
        raise ValueError(f"Grid size must be positive, got {size}")

    square: Grid = [[((row + col) % size) + 1 for col in range(size)] for row in range(size)]

    for i in range(size - 1, 0, -1):
        j = rng.next_int(0, i)
        square[i], square[j] = square[j], square[i]

    for i in range(size - 1, 0, -1):
        j = rng.next_int(0, i)
        for row in square:
            row[i], row[j] = row[j], row[i]

    swaps = rng.next_int(5, 15)
    for _ in range(swaps):
        a = rng.next_int(1, size)
        b = rng.next_int(1, size)
        if a == b:
            continue
        for row in square:
            for col, value in enumerate(row):
                if value == a:
                    row[col] = b
                elif value == b:
                    row[col] = a

    LOGGER.debug("Latin square %sx%s built with %s relabel swaps", size, size, swaps)
    return square


def is_valid_latin_square(grid: Sequence[Sequence[int]]) -> bool:
    size = len(grid)
    expected = set(range(1, size + 1))
    for row in grid:
        if len(row) != size or set(row) != expected:
            return False
    for col in range(size):
        if {grid[row][col] for row in range(size)} != expected:
            return False
    return True


def create_empty_grid(size: int) -> Grid:
    return [[0] * size for _ in range(size)]


def copy_grid(grid: Sequence[Sequence[int]]) -> Grid:
    return [list(row) for row in grid]
