"""Deterministic RNG sources owned by the engine."""
import hashlib
import random
from abc import ABC, abstractmethod

LCG_MODULUS = 2147483647  # 2**31 - 1
LCG_MULTIPLIER = 16807


class RNGBase(ABC):
    """Abstract RNG interface."""

    seed: int

    @abstractmethod
    def random(self) -> float:
        """Return random float in [0, 1)."""
        pass

    def randint(self, a: int, b: int) -> int:
        """Return random int in [a, b] inclusive."""
        return a + int(self.random() * (b - a + 1))

    def choice(self, items):
        """Uniform pick from a non-empty sequence."""
        return items[int(self.random() * len(items))]


class ParkMillerRNG(RNGBase):
    """
    31-bit multiplicative LCG (Park-Miller minimal standard).

    Default engine source. Fully controlled by seed; seed 0 is
    degenerate for this generator and is mapped to 1.
    """

    def __init__(self, seed: int):
        state = int(seed) % LCG_MODULUS
        self.seed = state or 1
        self._state = self.seed

    def random(self) -> float:
        self._state = (self._state * LCG_MULTIPLIER) % LCG_MODULUS
        return (self._state - 1) / (LCG_MODULUS - 1)


class SeededRNG(RNGBase):
    """
    Mersenne Twister source for long simulations.

    Deterministic, fully controlled by seed.
    """

    def __init__(self, seed: int):
        self._rng = random.Random(seed)
        self.seed = seed

    def random(self) -> float:
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)


def seed_to_int(seed_str: str) -> int:
    """Convert string seed to integer deterministically."""
    return int(hashlib.sha256(seed_str.encode()).hexdigest(), 16) % (2**31)
