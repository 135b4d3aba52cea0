"""Injectable source of random integers for exercise generation."""

import random
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with ``randint(a, b)`` returning an int in [a, b].

    ``random.Random`` satisfies this, as does the ``random`` module itself.
    """

    def randint(self, a: int, b: int) -> int: ...


def pick(rng: RandomSource, items: Sequence[T]) -> T:
    """Uniform choice built on randint so scripted sources stay in control."""
    return items[rng.randint(0, len(items) - 1)]


def default_random_source() -> RandomSource:
    return random.Random()
