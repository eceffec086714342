"""Shared constants and enumerations for the KenKen engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Operation(str, Enum):
    """Arithmetic operation attached to a cage clue."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"
    NONE = "none"

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operation":
        # ASCII spellings are accepted on input; output always uses the canonical symbols.
        aliases = {"*": cls.MULTIPLY, "x": cls.MULTIPLY, "/": cls.DIVIDE}
        if symbol in aliases:
            return aliases[symbol]
        return cls(symbol)


class Difficulty(str, Enum):
    """Difficulty labels, in increasing order."""

    BEGINNER = "beginner"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


# Up, down, left, right. Cage growth depends on this order for reproducibility.
ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

OPERATION_WEIGHTS = {
    Operation.ADD: 5,
    Operation.SUBTRACT: 10,
    Operation.MULTIPLY: 15,
    Operation.DIVIDE: 20,
}


@dataclass(frozen=True)
class Bounds:
    """Square grid bounds helper."""

    size: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size
