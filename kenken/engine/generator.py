"""Puzzle assembly and retry orchestration.

Pipeline per attempt: Latin square -> cage partition -> clues -> puzzle id ->
uniqueness check. A rejected attempt is discarded and the next one keeps
drawing from the same random stream, so the outcome is a function of the
seed alone.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..core.constants import Difficulty
from ..core.exceptions import CageCoverageError, GenerationError
from ..core.models import Puzzle, Seed
from ..core.presets import DifficultyPreset, as_difficulty, get_difficulty_preset
from ..utils.logger import get_logger
from ..utils.rng import SeededRandom, time_seed
from .cages import CageConfig, ensure_cage_coverage, generate_cages, is_cage_connected
from .clues import assign_clues, validate_clue
from .cpsat import count_solutions_cpsat
from .latin_square import generate_latin_square
from .solver import has_unique_solution


LOGGER = get_logger(__name__)


@dataclass
class GeneratorConfig:
    size: int
    difficulty: Union[Difficulty, str]
    seed: Optional[Seed] = None
    max_attempts: int = 10
    # Backtracking uniqueness checks are skipped above this size.
    verification_max_size: int = 7
    verify_large_with_cpsat: bool = False
    cpsat_timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"Grid size must be positive, got {self.size}")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.difficulty = as_difficulty(self.difficulty)

    def preset(self) -> DifficultyPreset:
        return get_difficulty_preset(self.difficulty)

    def to_cage_config(self) -> CageConfig:
        preset = self.preset()
        return CageConfig(
            min_size=preset.min_cage_size,
            max_size=preset.max_cage_size,
            allow_single_cell=preset.single_cell_rate > 0,
        )


@dataclass
class ValidationReport:
    valid: bool
    errors: List[str] = field(default_factory=list)


class PuzzleGenerator:
    """Builds puzzles from a config, retrying until one verifies."""

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config
        self.preset = config.preset()
        self.rng = SeededRandom(config.seed if config.seed is not None else time_seed())

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    async def generate(self) -> Puzzle:
        max_attempts = self.config.max_attempts
        for attempt in range(1, max_attempts + 1):
            LOGGER.info(
                "Generation attempt %s/%s (%s, %sx%s)",
                attempt,
                max_attempts,
                self.config.difficulty.value,
                self.config.size,
                self.config.size,
            )
            puzzle = self._build_candidate()
            if await self._verify(puzzle):
                LOGGER.info("Puzzle %s accepted on attempt %s", puzzle.id, attempt)
                return puzzle
            LOGGER.warning("Puzzle attempt %s rejected: solution is not unique", attempt)
        raise GenerationError(f"Failed to generate valid puzzle after {max_attempts} attempts")

    def generate_sync(self) -> Puzzle:
        """Single pipeline pass without any uniqueness check."""
        return self._build_candidate()

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _build_candidate(self) -> Puzzle:
        size = self.config.size
        solution = generate_latin_square(size, self.rng)
        cages = generate_cages(size, self.rng, self.config.to_cage_config())
        cages = assign_clues(cages, solution, self.preset.operations)
        return Puzzle(
            id=self._new_puzzle_id(),
            size=size,
            difficulty=self.config.difficulty,
            cages=tuple(cages),
            solution=solution,
            seed=self.config.seed,
        )

    async def _verify(self, puzzle: Puzzle) -> bool:
        if puzzle.size <= self.config.verification_max_size:
            return await has_unique_solution(puzzle)
        if self.config.verify_large_with_cpsat:
            await asyncio.sleep(0)
            solutions = count_solutions_cpsat(
                puzzle, limit=2, timeout=self.config.cpsat_timeout_seconds
            )
            if solutions is None:
                LOGGER.warning("Uniqueness of %s is unproven after CP-SAT timeout", puzzle.id)
                return False
            return solutions == 1
        LOGGER.debug(
            "Skipping uniqueness check for %sx%s grid (limit %s)",
            puzzle.size,
            puzzle.size,
            self.config.verification_max_size,
        )
        return True

    def _new_puzzle_id(self) -> str:
        timestamp = int(time.time() * 1000)
        suffix = self.rng.next_int(1000, 9999)
        size = self.config.size
        return f"{self.config.difficulty.value}-{size}x{size}-{timestamp}-{suffix}"


async def generate_puzzle(
    size: int,
    difficulty: Union[Difficulty, str],
    seed: Optional[Seed] = None,
    **options,
) -> Puzzle:
    """Generate a uniquely solvable puzzle; raises :class:`GenerationError` on exhaustion."""

    config = GeneratorConfig(size=size, difficulty=difficulty, seed=seed, **options)
    return await PuzzleGenerator(config).generate()


def generate_puzzle_sync(
    size: int,
    difficulty: Union[Difficulty, str],
    seed: Optional[Seed] = None,
) -> Puzzle:
    """Generate a puzzle without verifying uniqueness."""

    config = GeneratorConfig(size=size, difficulty=difficulty, seed=seed)
    return PuzzleGenerator(config).generate_sync()


async def generate_random_puzzle(size: int, difficulty: Union[Difficulty, str]) -> Puzzle:
    seed = f"{time_seed()}-{uuid.uuid4().hex}"
    return await generate_puzzle(size, difficulty, seed)


def validate_puzzle(puzzle: Puzzle) -> ValidationReport:
    """Structural checks: Latin solution, exact cage coverage, consistent clues."""

    errors: List[str] = []
    size = puzzle.size
    expected = set(range(1, size + 1))

    for row in range(size):
        if set(puzzle.solution[row]) != expected:
            errors.append(f"Row {row} is not a permutation of 1..{size}")
    for col in range(size):
        if {puzzle.solution[row][col] for row in range(size)} != expected:
            errors.append(f"Column {col} is not a permutation of 1..{size}")

    try:
        ensure_cage_coverage(puzzle.cages, size)
    except CageCoverageError as exc:
        errors.append(str(exc))

    for cage in puzzle.cages:
        if not is_cage_connected(cage):
            errors.append(f"Cage {cage.id} is not orthogonally connected")
        try:
            values = cage.values(puzzle.solution)
        except IndexError:
            continue
        if not validate_clue(cage.clue, values):
            errors.append(f"Cage {cage.id} clue does not match the solution")

    if errors:
        LOGGER.error("Puzzle %s failed validation: %s", puzzle.id, "; ".join(errors))
    return ValidationReport(valid=not errors, errors=errors)
