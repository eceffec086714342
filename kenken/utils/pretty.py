"""Pretty-print helpers for puzzles."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional, Sequence

from ..engine.clues import format_clue

if TYPE_CHECKING:
    from ..core.models import Puzzle


def format_values(grid: Sequence[Sequence[int]]) -> str:
    width = len(grid)
    lines = ["    " + " ".join(f"{c:>2}" for c in range(width))]
    lines.append("    " + "-" * (3 * width - 1))
    for r, row in enumerate(grid):
        rendered = " ".join(f"{(str(v) if v else '.'):>2}" for v in row)
        lines.append(f"{r:>2} | {rendered}")
    return "\n".join(lines)


def format_cage_map(puzzle: Puzzle) -> str:
    ids = [[0] * puzzle.size for _ in range(puzzle.size)]
    for cage in puzzle.cages:
        for cell in cage.cells:
            ids[cell.row][cell.col] = cage.id
    pad = len(str(max((cage.id for cage in puzzle.cages), default=0)))
    return "\n".join(" ".join(f"{cid:>{pad}}" for cid in row) for row in ids)


def print_puzzle(
    puzzle: Puzzle,
    *,
    show_solution: bool = True,
    score: Optional[float] = None,
    stream=None,
) -> None:
    """Print the cage layout, clues and (optionally) the solution."""

    stream = stream or sys.stdout
    print(f"Puzzle {puzzle.id} ({puzzle.difficulty.value}, {puzzle.size}x{puzzle.size})", file=stream)
    if puzzle.seed is not None:
        print(f"Seed: {puzzle.seed}", file=stream)
    print("\nCages:", file=stream)
    print(format_cage_map(puzzle), file=stream)
    print("\nClues:", file=stream)
    for cage in puzzle.cages:
        cells = " ".join(f"({c.row},{c.col})" for c in cage.cells)
        print(f"  {cage.id:>3}: {format_clue(cage.clue):>6}  {cells}", file=stream)
    if show_solution:
        print("\nSolution:", file=stream)
        print(format_values(puzzle.solution), file=stream)
    if score is not None:
        print(f"\nEstimated difficulty: {score:.1f}", file=stream)
