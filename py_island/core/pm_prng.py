"""
Park-Miller "minimal standard" PRNG.

Island shapes and map details are seeded with small integers and must be
reproducible across runs and implementations, so Python's random module is
not used anywhere in the generator.
"""

import math

from .errors import MapConfigurationError

MODULUS = 2147483647  # 2^31 - 1
MULTIPLIER = 16807


class PMPRNG:
    """
    Lehmer generator: seed = seed * 16807 mod (2^31 - 1).

    With seed 1 the first two next_int() values are 16807 and 282475249,
    and the following next_double() is ~0.755604293083588.
    """

    def __init__(self, seed: int = 1):
        self.call_count = 0
        self.seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, value: int):
        value = int(value) % MODULUS
        if value == 0:
            raise MapConfigurationError("PRNG seed must not be a multiple of 2^31 - 1")
        self._seed = value

    def _gen(self) -> int:
        self.call_count += 1
        self._seed = (self._seed * MULTIPLIER) % MODULUS
        return self._seed

    def next_int(self) -> int:
        """Return the next integer in [1, 2^31 - 2]."""
        return self._gen()

    def next_double(self) -> float:
        """Return the next float in (0, 1)."""
        return self._gen() / MODULUS

    def next_int_range(self, lo: int, hi: int) -> int:
        """Return an integer in [lo, hi], both ends equally likely."""
        lo -= 0.4999
        hi += 0.4999
        return int(math.floor(lo + (hi - lo) * self.next_double() + 0.5))

    def next_double_range(self, lo: float, hi: float) -> float:
        """Return a float in [lo, hi)."""
        return lo + (hi - lo) * self.next_double()

    def choice(self, seq):
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.next_int_range(0, len(seq) - 1)]
