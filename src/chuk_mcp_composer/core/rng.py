"""
Random source - the only mutable dependency of the generators.

Every generator takes a RandomSource argument instead of reaching for
module-level randomness, so a fixed seed reproduces a whole song.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1)."""

    def next(self) -> float:
        """Return the next float in [0, 1)."""
        ...


class SeededRandom:
    """
    RandomSource backed by a private random.Random instance.

    Two instances created with the same seed produce the same stream.
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._random = random.Random(seed)

    def next(self) -> float:
        return self._random.random()

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.seed!r})"


class SequenceRandom:
    """
    RandomSource that replays a fixed list of values, cycling at the end.

    Useful for pinning a stochastic branch in tests.
    """

    def __init__(self, values: Sequence[float]):
        if not values:
            raise ValueError("SequenceRandom needs at least one value")
        self._values = list(values)
        self._position = 0

    def next(self) -> float:
        value = self._values[self._position % len(self._values)]
        self._position += 1
        return value


def chance(rng: RandomSource, probability: float) -> bool:
    """Return True with the given probability."""
    return rng.next() < probability


def rand_int(rng: RandomSource, upper: int) -> int:
    """Uniform integer in [0, upper)."""
    return int(rng.next() * upper)


def choose(rng: RandomSource, options: Sequence[T]) -> T:
    """Pick one element uniformly."""
    if not options:
        raise ValueError("Options list cannot be empty")
    return options[rand_int(rng, len(options))]


def weighted_choice(rng: RandomSource, options: Sequence[tuple[T, float]]) -> T:
    """
    Pick one value from (value, weight) pairs.

    Weights are relative. A roll of r * total is walked down the list,
    subtracting each weight until it is exhausted.

    Args:
        rng: Random source
        options: (value, weight) pairs; at least one weight must be positive

    Returns:
        The selected value
    """
    if not options:
        raise ValueError("Options list cannot be empty")

    total = sum(weight for _, weight in options)
    if total <= 0:
        raise ValueError("Total weight must be positive")

    remaining = rng.next() * total
    for value, weight in options:
        remaining -= weight
        if remaining <= 0:
            return value

    return options[-1][0]
