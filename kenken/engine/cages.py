"""Cage partitioning by randomized flood fill."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from ..core.constants import ORTHOGONAL_STEPS, Bounds
from ..core.exceptions import CageCoverageError
from ..core.models import Cage, Cell
from ..utils.logger import get_logger
from ..utils.rng import SeededRandom


LOGGER = get_logger(__name__)


@dataclass
class CageConfig:
    """Size bounds for generated cages."""

    min_size: int = 1
    max_size: int = 4
    # Carried from the difficulty preset; growth itself does not consult it.
    allow_single_cell: bool = True

    def __post_init__(self) -> None:
        if self.min_size < 1 or self.max_size < self.min_size:
            raise ValueError(
                f"Invalid cage size bounds [{self.min_size}, {self.max_size}]"
            )


def generate_cages(
    size: int,
    rng: SeededRandom,
    config: Optional[CageConfig] = None,
    **overrides,
) -> List[Cage]:
    """Partition the grid into connected cages.

    Cells are visited in row-major order and every unclaimed cell seeds a new
    cage. A cage that runs out of unclaimed neighbours before reaching its
    drawn size is kept as is. Clues are placeholders until assigned.
    """

    if config is None:
        config = CageConfig(**overrides)
    elif overrides:
        raise TypeError("Pass either a CageConfig or keyword overrides, not both")

    bounds = Bounds(size)
    claimed: Set[Cell] = set()
    cages: List[Cage] = []
    trapped = 0

    for row in range(size):
        for col in range(size):
            start = Cell(row, col)
            if start in claimed:
                continue
            target = rng.next_int(config.min_size, config.max_size)
            cells = _grow_cage(start, target, bounds, claimed, rng)
            if len(cells) < target:
                trapped += 1
            cages.append(Cage(id=len(cages), cells=tuple(cells)))
            claimed.update(cells)

    LOGGER.debug(
        "Partitioned %sx%s grid into %s cages (%s trapped below target size)",
        size,
        size,
        len(cages),
        trapped,
    )
    return cages


def _grow_cage(
    start: Cell,
    target: int,
    bounds: Bounds,
    claimed: Set[Cell],
    rng: SeededRandom,
) -> List[Cell]:
    cells = [start]
    members = {start}
    while len(cells) < target:
        frontier = _unclaimed_neighbors(cells, bounds, claimed, members)
        if not frontier:
            break
        chosen = rng.pick(frontier)
        cells.append(chosen)
        members.add(chosen)
    return cells


def _unclaimed_neighbors(
    cells: Iterable[Cell],
    bounds: Bounds,
    claimed: Set[Cell],
    members: Set[Cell],
) -> List[Cell]:
    neighbors: List[Cell] = []
    seen: Set[Cell] = set()
    for cell in cells:
        for dr, dc in ORTHOGONAL_STEPS:
            nr, nc = cell.row + dr, cell.col + dc
            if not bounds.contains(nr, nc):
                continue
            candidate = Cell(nr, nc)
            if candidate in claimed or candidate in members or candidate in seen:
                continue
            seen.add(candidate)
            neighbors.append(candidate)
    return neighbors


def get_adjacent_cells(row: int, col: int, size: int) -> List[Cell]:
    bounds = Bounds(size)
    return [
        Cell(row + dr, col + dc)
        for dr, dc in ORTHOGONAL_STEPS
        if bounds.contains(row + dr, col + dc)
    ]


def validate_cage_coverage(cages: Iterable[Cage], size: int) -> bool:
    """True when every cell of the grid is in exactly one cage."""

    try:
        ensure_cage_coverage(cages, size)
    except CageCoverageError:
        return False
    return True


def ensure_cage_coverage(cages: Iterable[Cage], size: int) -> None:
    bounds = Bounds(size)
    covered: Set[Cell] = set()
    for cage in cages:
        for cell in cage.cells:
            if not bounds.contains(cell.row, cell.col):
                raise CageCoverageError(f"Cage {cage.id} has out-of-bounds cell {cell}")
            if cell in covered:
                raise CageCoverageError(f"Cell ({cell.row},{cell.col}) is in multiple cages")
            covered.add(cell)
    if len(covered) != size * size:
        raise CageCoverageError(
            f"Not all cells are covered by cages ({len(covered)}/{size * size})"
        )


def is_cage_connected(cage: Cage) -> bool:
    """Check that the cage forms a single orthogonally connected region."""

    if not cage.cells:
        return False
    members = set(cage.cells)
    stack = [cage.cells[0]]
    reached = {cage.cells[0]}
    while stack:
        cell = stack.pop()
        for dr, dc in ORTHOGONAL_STEPS:
            neighbor = Cell(cell.row + dr, cell.col + dc)
            if neighbor in members and neighbor not in reached:
                reached.add(neighbor)
                stack.append(neighbor)
    return len(reached) == len(members)
