"""Seeded pseudo-random source with reproducible output across platforms.

The stream is a 32-bit mulberry32 generator. Every helper is expressed in
terms of :meth:`SeededRandom.next` with a fixed call order, so a seed fully
determines everything drawn from it (Latin squares, cage layouts, ids).
"""

from __future__ import annotations

import math
import time
from typing import MutableSequence, Sequence, TypeVar, Union

T = TypeVar("T")

_MASK = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK


def hash_string(text: str) -> int:
    """djb2 over UTF-16 code units, truncated to unsigned 32 bits."""

    units = text.encode("utf-16-le")
    value = 5381
    for i in range(0, len(units), 2):
        code = units[i] | (units[i + 1] << 8)
        value = ((value << 5) + value + code) & _MASK
    return value


class SeededRandom:
    """Deterministic random stream built from an integer or string seed."""

    def __init__(self, seed: Union[int, str]) -> None:
        if isinstance(seed, str):
            self._state = hash_string(seed)
        else:
            self._state = int(seed) & _MASK

    @property
    def seed(self) -> int:
        """Current internal state; restoring it resumes the stream."""
        return self._state

    def next(self) -> float:
        """Return a float in ``[0, 1)``."""

        self._state = (self._state + _INCREMENT) & _MASK
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        return (t ^ (t >> 14)) / _TWO_POW_32

    def next_int(self, low: int, high: int) -> int:
        """Uniform integer in ``[low, high]``."""
        return math.floor(self.next() * (high - low + 1)) + low

    def next_float(self, low: float, high: float) -> float:
        """Uniform float in ``[low, high)``."""
        return self.next() * (high - low) + low

    def next_bool(self, probability: float = 0.5) -> bool:
        return self.next() < probability

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise IndexError("Cannot pick from an empty sequence")
        return items[self.next_int(0, len(items) - 1)]

    def shuffle(self, items: MutableSequence[T]) -> MutableSequence[T]:
        """Fisher-Yates shuffle in place; returns ``items``."""

        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(0, i)
            items[i], items[j] = items[j], items[i]
        return items


def create_rng(seed: Union[int, str]) -> SeededRandom:
    return SeededRandom(seed)


def time_seed() -> str:
    """Current epoch milliseconds as a seed string."""
    return str(int(time.time() * 1000))
