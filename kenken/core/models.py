"""Data models for KenKen puzzles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .constants import Difficulty, Operation
from .exceptions import PuzzleFormatError

Grid = List[List[int]]
Seed = Union[int, str]


@dataclass(frozen=True, order=True)
class Cell:
    """A grid coordinate; ``0 <= row, col < size``."""

    row: int
    col: int

    def to_jsonable(self) -> Dict[str, int]:
        return {"row": self.row, "col": self.col}


@dataclass(frozen=True)
class Clue:
    """Arithmetic target a cage's values must satisfy."""

    target: int
    operation: Operation

    def to_jsonable(self) -> Dict[str, Any]:
        return {"target": self.target, "operation": self.operation.value}


PLACEHOLDER_CLUE = Clue(target=0, operation=Operation.ADD)


@dataclass(frozen=True)
class Cage:
    """A connected region of cells sharing one clue."""

    id: int
    cells: Tuple[Cell, ...]
    clue: Clue = PLACEHOLDER_CLUE

    def __post_init__(self) -> None:
        if not isinstance(self.cells, tuple):
            object.__setattr__(self, "cells", tuple(self.cells))

    @property
    def size(self) -> int:
        return len(self.cells)

    def values(self, grid: Sequence[Sequence[int]]) -> List[int]:
        return [grid[cell.row][cell.col] for cell in self.cells]

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "cells": [cell.to_jsonable() for cell in self.cells],
            "clue": self.clue.to_jsonable(),
        }


@dataclass(frozen=True)
class Puzzle:
    """A generated puzzle. Never mutated once assembled."""

    id: str
    size: int
    difficulty: Difficulty
    cages: Tuple[Cage, ...]
    solution: Tuple[Tuple[int, ...], ...]
    seed: Optional[Seed] = None
    _cage_index: Dict[Cell, Cage] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "cages", tuple(self.cages))
        object.__setattr__(self, "solution", tuple(tuple(row) for row in self.solution))
        index = self._cage_index
        for cage in self.cages:
            for cell in cage.cells:
                index[cell] = cage

    def cage_for(self, cell: Cell) -> Optional[Cage]:
        return self._cage_index.get(cell)

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def solution_grid(self) -> Grid:
        """Return a mutable copy of the solution."""
        return [list(row) for row in self.solution]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_jsonable(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "size": self.size,
            "difficulty": self.difficulty.value,
            "cages": [cage.to_jsonable() for cage in self.cages],
            "solution": [list(row) for row in self.solution],
        }
        if self.seed is not None:
            payload["seed"] = self.seed
        return payload

    @classmethod
    def from_jsonable(cls, data: Mapping[str, Any]) -> "Puzzle":
        try:
            size = int(data["size"])
            cages = tuple(
                Cage(
                    id=raw["id"],
                    cells=tuple(Cell(int(c["row"]), int(c["col"])) for c in raw["cells"]),
                    clue=Clue(
                        target=int(raw["clue"]["target"]),
                        operation=Operation.from_symbol(raw["clue"]["operation"]),
                    ),
                )
                for raw in data["cages"]
            )
            solution = [[int(v) for v in row] for row in data["solution"]]
            difficulty = Difficulty(data["difficulty"])
            puzzle_id = str(data["id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise PuzzleFormatError(f"Malformed puzzle document: {exc}") from exc

        if len(solution) != size or any(len(row) != size for row in solution):
            raise PuzzleFormatError(f"Solution grid is not {size}x{size}")
        return cls(
            id=puzzle_id,
            size=size,
            difficulty=difficulty,
            cages=cages,
            solution=solution,
            seed=data.get("seed"),
        )
