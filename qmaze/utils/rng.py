"""Random number generation utilities for the Q-learning maze."""

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class SeededRNG:
    """Seeded random number generator for reproducible results.

    Each instance owns its own ``random.Random`` so that several sessions
    never disturb one another's sequence.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)
        self._seed = seed

    @property
    def seed(self) -> Optional[int]:
        """Get the current seed."""
        return self._seed

    def set_seed(self, seed: Optional[int]):
        """Restart the sequence from a new seed."""
        self._seed = seed
        self._rng.seed(seed)

    def random(self) -> float:
        """Generate random float in [0, 1)."""
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        """Generate random integer in [a, b]."""
        return self._rng.randint(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        """Choose random element from a non-empty sequence."""
        return self._rng.choice(seq)
