import unittest
from unittest.mock import MagicMock

from kenken.core.constants import Difficulty, Operation
from kenken.core.models import Cage, Cell, Clue, Puzzle
from kenken.core.presets import (
    DIFFICULTY_PRESETS,
    get_difficulties,
    get_difficulty_description,
    get_difficulty_preset,
    get_grid_size,
    is_operation_available,
)
from kenken.engine.difficulty import DifficultyEngine
from kenken.engine.generator import generate_puzzle_sync


def scoring_puzzle() -> Puzzle:
    return Puzzle(
        id="difficulty-fixture",
        size=4,
        difficulty=Difficulty.EASY,
        cages=(
            Cage(1, (Cell(0, 0),), Clue(1, Operation.NONE)),
            Cage(2, (Cell(0, 1), Cell(0, 2)), Clue(5, Operation.ADD)),
            Cage(3, (Cell(1, 0), Cell(1, 1)), Clue(1, Operation.SUBTRACT)),
            Cage(4, (Cell(2, 0), Cell(2, 1), Cell(2, 2)), Clue(24, Operation.MULTIPLY)),
        ),
        solution=[[1, 2, 3, 4], [2, 3, 4, 1], [3, 4, 1, 2], [4, 1, 2, 3]],
    )


class PresetTests(unittest.TestCase):
    def test_lookup_helpers(self) -> None:
        self.assertEqual(get_difficulty_preset("beginner"), DIFFICULTY_PRESETS[Difficulty.BEGINNER])
        self.assertEqual(get_grid_size("expert"), 9)
        self.assertEqual(
            [d.value for d in get_difficulties()],
            ["beginner", "easy", "medium", "hard", "expert"],
        )
        self.assertEqual(
            get_difficulty_description(Difficulty.HARD),
            DIFFICULTY_PRESETS[Difficulty.HARD].description,
        )

    def test_unknown_label_raises_key_error(self) -> None:
        with self.assertRaises(KeyError):
            get_difficulty_preset("impossible")

    def test_operation_availability(self) -> None:
        self.assertTrue(is_operation_available("beginner", "+"))
        self.assertFalse(is_operation_available("beginner", "-"))
        self.assertTrue(is_operation_available("easy", "-"))
        self.assertTrue(is_operation_available("medium", "×"))
        self.assertTrue(is_operation_available("hard", "÷"))
        self.assertFalse(is_operation_available("expert", "none"))

    def test_presets_are_consistent(self) -> None:
        for preset in DIFFICULTY_PRESETS.values():
            self.assertLessEqual(preset.min_cage_size, preset.max_cage_size)
            self.assertNotIn(Operation.NONE, preset.operations)
            self.assertTrue(0.0 <= preset.single_cell_rate < 1.0)


class DifficultyEngineTests(unittest.TestCase):
    def test_estimate_for_known_shape(self) -> None:
        self.assertEqual(DifficultyEngine("easy").estimate_difficulty(scoring_puzzle()), 61)

    def test_matches_difficulty_tolerance(self) -> None:
        engine = DifficultyEngine("easy")
        puzzle = scoring_puzzle()
        self.assertTrue(engine.matches_difficulty(puzzle))
        self.assertFalse(engine.matches_difficulty(puzzle, 3))
        self.assertTrue(engine.matches_difficulty(puzzle, 5))

    def test_get_preset(self) -> None:
        self.assertEqual(
            DifficultyEngine(Difficulty.MEDIUM).get_preset(),
            DIFFICULTY_PRESETS[Difficulty.MEDIUM],
        )

    def test_random_helpers_use_injected_rng(self) -> None:
        engine = DifficultyEngine("hard")
        rng = MagicMock()
        rng.next_int.return_value = 3
        rng.next_bool.return_value = True
        self.assertEqual(engine.get_recommended_cage_size(rng), 3)
        rng.next_int.assert_called_once_with(2, 5)
        self.assertTrue(engine.should_generate_single_cell(rng))
        rng.next_bool.assert_called_once_with(0.05)

        expert_rng = MagicMock()
        self.assertFalse(DifficultyEngine("expert").should_generate_single_cell(expert_rng))
        expert_rng.next_bool.assert_not_called()

    def test_harder_presets_score_higher_on_average(self) -> None:
        def mean_score(difficulty: str) -> float:
            engine = DifficultyEngine(difficulty)
            size = engine.preset.grid_size
            scores = [
                engine.estimate_difficulty(generate_puzzle_sync(size, difficulty, seed=s))
                for s in range(8)
            ]
            return sum(scores) / len(scores)

        self.assertLess(mean_score("beginner"), mean_score("expert"))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
