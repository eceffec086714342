"""Custom exception hierarchy for puzzle generation."""


class KenKenError(Exception):
    """Base exception for engine failures."""


class GenerationError(KenKenError):
    """Raised when no uniquely solvable puzzle is found within the attempt cap."""


class CageCoverageError(KenKenError):
    """Raised when cages do not partition the grid exactly."""


class PuzzleFormatError(KenKenError):
    """Raised when a serialized puzzle cannot be parsed."""
