"""Difficulty presets: a fixed, read-only lookup table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from .constants import Difficulty, Operation


@dataclass(frozen=True)
class DifficultyPreset:
    grid_size: int
    operations: Tuple[Operation, ...]
    min_cage_size: int
    max_cage_size: int
    single_cell_rate: float
    description: str


DIFFICULTY_PRESETS: Dict[Difficulty, DifficultyPreset] = {
    Difficulty.BEGINNER: DifficultyPreset(
        grid_size=4,
        operations=(Operation.ADD,),
        min_cage_size=1,
        max_cage_size=2,
        single_cell_rate=0.3,
        description="4x4 grid with addition only. Perfect for learning.",
    ),
    Difficulty.EASY: DifficultyPreset(
        grid_size=5,
        operations=(Operation.ADD, Operation.SUBTRACT),
        min_cage_size=1,
        max_cage_size=3,
        single_cell_rate=0.2,
        description="5x5 grid with addition and subtraction.",
    ),
    Difficulty.MEDIUM: DifficultyPreset(
        grid_size=6,
        operations=(Operation.ADD, Operation.SUBTRACT, Operation.MULTIPLY),
        min_cage_size=1,
        max_cage_size=4,
        single_cell_rate=0.1,
        description="6x6 grid with addition, subtraction, and multiplication.",
    ),
    Difficulty.HARD: DifficultyPreset(
        grid_size=7,
        operations=(Operation.ADD, Operation.SUBTRACT, Operation.MULTIPLY, Operation.DIVIDE),
        min_cage_size=2,
        max_cage_size=5,
        single_cell_rate=0.05,
        description="7x7 grid with all operations.",
    ),
    Difficulty.EXPERT: DifficultyPreset(
        grid_size=9,
        operations=(Operation.ADD, Operation.SUBTRACT, Operation.MULTIPLY, Operation.DIVIDE),
        min_cage_size=2,
        max_cage_size=6,
        single_cell_rate=0.0,
        description="9x9 grid with all operations. No single-cell cages.",
    ),
}


def as_difficulty(value: Union[Difficulty, str]) -> Difficulty:
    """Coerce a label to :class:`Difficulty`, raising ``KeyError`` for unknown labels."""

    if isinstance(value, Difficulty):
        return value
    try:
        return Difficulty(value.lower())
    except ValueError:
        valid = ", ".join(d.value for d in Difficulty)
        raise KeyError(f"Unknown difficulty '{value}' (expected one of: {valid})") from None


def get_difficulty_preset(difficulty: Union[Difficulty, str]) -> DifficultyPreset:
    return DIFFICULTY_PRESETS[as_difficulty(difficulty)]


def get_difficulties() -> List[Difficulty]:
    return list(DIFFICULTY_PRESETS)


def get_grid_size(difficulty: Union[Difficulty, str]) -> int:
    return get_difficulty_preset(difficulty).grid_size


def is_operation_available(difficulty: Union[Difficulty, str], operation: Union[Operation, str]) -> bool:
    return Operation.from_symbol(operation) in get_difficulty_preset(difficulty).operations


def get_difficulty_description(difficulty: Union[Difficulty, str]) -> str:
    return get_difficulty_preset(difficulty).description
