"""Heuristic difficulty scoring.

Scores are a rough sanity check for presets and never gate generation.
"""

from __future__ import annotations

from typing import Union

from ..core.constants import OPERATION_WEIGHTS, Difficulty
from ..core.models import Puzzle
from ..core.presets import DifficultyPreset, get_difficulty_preset
from ..utils.rng import SeededRandom


class DifficultyEngine:
    def __init__(self, difficulty: Union[Difficulty, str]) -> None:
        self.preset: DifficultyPreset = get_difficulty_preset(difficulty)

    def get_preset(self) -> DifficultyPreset:
        return self.preset

    def estimate_difficulty(self, puzzle: Puzzle) -> float:
        """Higher is harder.

        ``size * 10`` plus per-cage operation weights, minus twice the mean
        cage size and 5 per single-cell cage, floored at 0.
        """

        if not puzzle.cages:
            return 0.0
        score = float(puzzle.size * 10)
        score += sum(OPERATION_WEIGHTS.get(cage.clue.operation, 0) for cage in puzzle.cages)
        average_size = sum(cage.size for cage in puzzle.cages) / len(puzzle.cages)
        score -= average_size * 2
        score -= 5 * sum(1 for cage in puzzle.cages if cage.size == 1)
        return max(0.0, score)

    def expected_score(self) -> float:
        preset = self.preset
        average_cage = (preset.min_cage_size + preset.max_cage_size) / 2
        return preset.grid_size * 10 + len(preset.operations) * 10 - average_cage * 2

    def matches_difficulty(self, puzzle: Puzzle, tolerance: float = 20) -> bool:
        return abs(self.estimate_difficulty(puzzle) - self.expected_score()) <= tolerance

    def get_recommended_cage_size(self, rng: SeededRandom) -> int:
        return rng.next_int(self.preset.min_cage_size, self.preset.max_cage_size)

    def should_generate_single_cell(self, rng: SeededRandom) -> bool:
        if not self.preset.single_cell_rate:
            return False
        return rng.next_bool(self.preset.single_cell_rate)
