"""
Seeded pseudo-random numbers for reproducible plateau schedules.

Mulberry32 is a 32-bit generator: the whole state is one unsigned integer.
The generator here is an immutable value; next() hands back the drawn value
together with the successor generator, so no scheduler step holds hidden
global state. RandomStream is a per-call cursor over that sequence for code
that draws many values in a loop.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar("T")

MASK_32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply (low 32 bits, unsigned)."""
    return (a * b) & MASK_32


def normalize_seed(seed: int) -> int:
    """Reduce to 32 bits; a zero state would stall the generator, so it becomes 1."""
    return (seed & MASK_32) or 1


def fresh_seed() -> int:
    """Millisecond timestamp reduced to 32 bits, for "regenerate" requests."""
    return normalize_seed(int(time.time() * 1000))


@dataclass(frozen=True)
class Mulberry32:
    state: int

    @classmethod
    def from_seed(cls, seed: int) -> "Mulberry32":
        return cls(state=normalize_seed(seed))

    def next(self) -> Tuple[float, "Mulberry32"]:
        """Return (value in [0, 1), successor generator)."""
        t = (self.state + _INCREMENT) & MASK_32
        r = _imul(t ^ (t >> 15), 1 | t)
        r ^= (r + _imul(r ^ (r >> 7), 61 | r)) & MASK_32
        value = ((r ^ (r >> 14)) & MASK_32) / _TWO_POW_32
        return value, Mulberry32(state=t)


class RandomStream:
    """Consumes a Mulberry32 sequence one draw at a time."""

    def __init__(self, seed: int):
        self._generator = Mulberry32.from_seed(seed)

    def random(self) -> float:
        value, self._generator = self._generator.next()
        return value

    def randbelow(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        return int(self.random() * n)

    def choice(self, items: Sequence[T]) -> T:
        return items[self.randbelow(len(items))]

    def shuffle(self, items: List[T]) -> None:
        """In-place Fisher-Yates, walking from the end."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randbelow(i + 1)
            items[i], items[j] = items[j], items[i]


def seeded_shuffle(items: Sequence[T], seed: int) -> List[T]:
    """Return a shuffled copy of items; the same seed gives the same order."""
    shuffled = list(items)
    RandomStream(seed).shuffle(shuffled)
    return shuffled
