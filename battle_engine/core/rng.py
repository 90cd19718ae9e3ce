"""
Random sources for the battle engine.

Crit rolls are the only nondeterministic element of a battle. Everything
that rolls receives a source implementing `RandomSource`, so that battles
can be replayed from a seed and tests can force the outcome of each roll.
"""

import random
from collections.abc import Iterable
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Anything returning a uniform float in [0, 1), like `random.Random`."""

    def random(self) -> float: ...


class FixedRoll:
    """
    A random source that always returns the same value.

    `FixedRoll(0.99)` never crits a character with crit rate below 0.99,
    while `FixedRoll(0.0)` crits any character with a positive crit rate.
    """

    def __init__(self, value: float) -> None:
        if not 0.0 <= value < 1.0:
            raise ValueError(f"Roll value must be in [0, 1), got {value}")
        self.value = value

    def random(self) -> float:
        return self.value


class SequenceRoll:
    """
    A random source that replays a sequence of values, one per roll.

    Raises:
        IndexError: When more rolls are requested than values provided.
    """

    def __init__(self, values: Iterable[float]) -> None:
        self.values: list[float] = list(values)
        for value in self.values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Roll value must be in [0, 1), got {value}")
        self.position: int = 0

    def random(self) -> float:
        if self.position >= len(self.values):
            raise IndexError(
                f"SequenceRoll exhausted after {len(self.values)} rolls"
            )
        value = self.values[self.position]
        self.position += 1
        return value

    @property
    def remaining(self) -> int:
        return len(self.values) - self.position


def make_rng(seed: int | None = None) -> RandomSource:
    """
    Creates a private random generator.

    Args:
        seed (int | None):
            Optional seed, None draws from system entropy.

    Returns:
        RandomSource:
            A new `random.Random` instance.

    """
    return random.Random(seed)
