"""KenKen puzzle generation and verification engine.

This package exposes the public API surface via:

- ``kenken.engine.generator``: ``generate_puzzle`` (async, verified) and
  ``generate_puzzle_sync`` (unverified), plus ``validate_puzzle``.
- ``kenken.engine.validator.Validator``: move checks during play.
- ``kenken.engine.solver``: ``solve_puzzle``, ``has_unique_solution``,
  ``get_hint``.
"""

from .core.constants import Difficulty, Operation
from .core.exceptions import GenerationError, KenKenError
from .core.models import Cage, Cell, Clue, Puzzle
from .engine.generator import (
    GeneratorConfig,
    PuzzleGenerator,
    generate_puzzle,
    generate_puzzle_sync,
    validate_puzzle,
)
from .engine.solver import get_hint, has_unique_solution, solve_puzzle
from .engine.validator import Validator
from .utils.rng import SeededRandom

__all__ = [
    "Cage",
    "Cell",
    "Clue",
    "Difficulty",
    "GenerationError",
    "GeneratorConfig",
    "KenKenError",
    "Operation",
    "Puzzle",
    "PuzzleGenerator",
    "SeededRandom",
    "Validator",
    "generate_puzzle",
    "generate_puzzle_sync",
    "get_hint",
    "has_unique_solution",
    "solve_puzzle",
    "validate_puzzle",
]

__version__ = "0.1.0"
