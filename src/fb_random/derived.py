"""Derived random operations layered over a :class:`~fb_random.core.BitSource`.

Both adapters draw everything from the source's ``next(bits)`` primitive, so a
file-backed source and an algorithmic one are interchangeable. Any
:class:`~fb_random.core.GuidanceIOError` raised by the source propagates
unchanged out of every method here.
"""

import random

from .constants import MAX_BITS
from .core import BitSource

_DOUBLE_UNIT = 1.0 / (1 << 53)
_FLOAT_UNIT = 1.0 / (1 << 24)
_INT_MAX = (1 << 31) - 1


def _signed32(value: int) -> int:
    return value - (1 << 32) if value & 0x80000000 else value


def _signed64(value: int) -> int:
    value &= (1 << 64) - 1
    return value - (1 << 64) if value & (1 << 63) else value


def _double(source: BitSource) -> float:
    return ((source.next(26) << 27) + source.next(27)) * _DOUBLE_UNIT


class JavaRandomView:
    """Operations of ``java.util.Random`` over an arbitrary bit source.

    Given the same ``next`` stream, every method returns what the Java
    method of the same name returns.
    """

    def __init__(self, source: BitSource):
        self.source = source

    def next_int(self, bound: int | None = None) -> int:
        """Return a signed 32-bit int, or an int in ``[0, bound)``.

        Raises:
            ValueError: If ``bound`` is given and not positive.
        """

        if bound is None:
            return _signed32(self.source.next(32))
        if bound <= 0:
            raise ValueError("bound must be positive")
        r = self.source.next(31)
        m = bound - 1
        if bound & m == 0:
            return (bound * r) >> 31
        u = r
        r = u % bound
        # Java rejects draws where u - r + m overflows a signed int
        while u - r + m > _INT_MAX:
            u = self.source.next(31)
            r = u % bound
        return r

    def next_long(self) -> int:
        high = _signed32(self.source.next(32))
        low = _signed32(self.source.next(32))
        return _signed64((high << 32) + low)

    def next_boolean(self) -> bool:
        return self.source.next(1) != 0

    def next_float(self) -> float:
        return self.source.next(24) * _FLOAT_UNIT

    def next_double(self) -> float:
        return _double(self.source)

    def next_bytes(self, n: int) -> bytes:
        """Return ``n`` bytes, four per draw, least significant byte first."""

        if n < 0:
            raise ValueError("n must be non-negative")
        out = bytearray()
        while len(out) < n:
            chunk = self.source.next(32).to_bytes(4, "little")
            out.extend(chunk[: n - len(out)])
        return bytes(out)


class StdlibRandom(random.Random):
    """:class:`random.Random` drawing all of its bits from ``source``.

    ``randint``, ``choice``, ``shuffle``, ``randbytes`` and the rest of the
    standard API work unchanged. Seeding is up to the source, so ``seed()``
    only clears cached state and the generator state cannot be saved.
    """

    def __init__(self, source: BitSource):
        self.source = source
        super().__init__()

    def seed(self, *args, **kwargs) -> None:
        self.gauss_next = None

    def random(self) -> float:
        return _double(self.source)

    def getrandbits(self, k: int) -> int:
        """Return ``k`` bits assembled from 32-bit draws, low word first."""

        if k < 0:
            raise ValueError("number of bits must be non-negative")
        result = 0
        shift = 0
        while shift < k:
            take = min(MAX_BITS, k - shift)
            result |= self.source.next(take) << shift
            shift += take
        return result

    def getstate(self):
        raise NotImplementedError("state is held by the bit source")

    def setstate(self, state) -> None:
        raise NotImplementedError("state is held by the bit source")
