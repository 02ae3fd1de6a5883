import random

from .core import _check_bits

__all__ = ["TestSource"]
__test__ = False


class TestSource:
    """Deterministic algorithmic bit source for tests."""

    __test__ = False

    def __init__(self, seed: int = 42):
        """Initialize RNG with ``seed``.

        Args:
            seed: Seed for deterministic randomness.
        """

        self.random = random.Random(seed)  # nosec B311 - deterministic helper

    def next(self, bits: int) -> int:
        """Return ``bits`` pseudo-random bits.

        Args:
            bits: Number of bits wanted, ``1..32``.

        Returns:
            int: Value in ``[0, 2**bits)``.
        """

        _check_bits(bits)
        return self.random.getrandbits(bits)
