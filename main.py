"""CLI entrypoint for generating KenKen puzzles from the command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from kenken.core.constants import Difficulty
from kenken.core.exceptions import GenerationError
from kenken.core.presets import get_grid_size
from kenken.engine.difficulty import DifficultyEngine
from kenken.engine.generator import GeneratorConfig, PuzzleGenerator, validate_puzzle
from kenken.utils.logger import configure_logging
from kenken.utils.pretty import print_puzzle


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate KenKen puzzles")
    parser.add_argument(
        "--difficulty",
        type=str,
        choices=[d.value for d in Difficulty],
        default=Difficulty.BEGINNER.value,
        help="Difficulty preset (operations and cage sizes)",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=None,
        help="Grid size; defaults to the preset's grid size",
    )
    parser.add_argument("--seed", type=str, default=None, help="Seed string for reproducibility")
    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip the uniqueness check (single pass, no retries)",
    )
    parser.add_argument(
        "--cpsat",
        action="store_true",
        help="Verify grids above the backtracking size limit with CP-SAT",
    )
    parser.add_argument("--max-attempts", type=int, default=10, help="Retry cap for verified generation")
    parser.add_argument("--json", action="store_true", help="Print the puzzle as JSON")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    size = get_grid_size(args.difficulty) if args.size is None else args.size
    if size < 1:
        parser.error("--size must be positive")

    config = GeneratorConfig(
        size=size,
        difficulty=args.difficulty,
        seed=args.seed,
        max_attempts=args.max_attempts,
        verify_large_with_cpsat=args.cpsat,
    )
    generator = PuzzleGenerator(config)
    try:
        if args.no_verify:
            puzzle = generator.generate_sync()
        else:
            puzzle = asyncio.run(generator.generate())
    except GenerationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    report = validate_puzzle(puzzle)
    score = DifficultyEngine(puzzle.difficulty).estimate_difficulty(puzzle)

    if args.json or args.output:
        payload = puzzle.to_jsonable()
        payload["validation"] = report.errors
        payload["estimated_difficulty"] = score
        output_text = json.dumps(payload, ensure_ascii=False, indent=2)
        if args.output:
            args.output.write_text(output_text, encoding="utf-8")
        else:
            print(output_text)
    else:
        print_puzzle(puzzle, score=score)
    return 0 if report.valid else 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
