"""File-backed bit sources for guided input search.

A :class:`FileBackedRandom` replays the bytes of a backing file as random
bits. A search driver rewrites the file between trials and the program under
test draws its "random" decisions from it, so mutating the file mutates those
decisions. Data is consumed in 4-byte little-endian chunks regardless of how
many bits are requested, and once the file is exhausted every further request
yields zero bits.

Derived operations (booleans, bounded integers, floats) live in
:mod:`fb_random.derived` and work over any :class:`BitSource`.
"""

import contextlib
import logging
import os
import threading
from pathlib import Path
from typing import BinaryIO, Iterator, Protocol

from .constants import (
    CHUNK_BYTES,
    FALLBACK_SEED,
    LCG_ADDEND,
    LCG_MASK,
    LCG_MULTIPLIER,
    MAX_BITS,
    MIN_BITS,
)

logger = logging.getLogger(__name__)


class BitSource(Protocol):
    def next(self, bits: int) -> int:
        """Return ``bits`` random bits as a non-negative integer.

        ``bits`` must lie in ``1..32``.
        """


class GuidanceIOError(RuntimeError):
    """I/O failure on the backing file of a :class:`FileBackedRandom`.

    Always raised from the underlying :class:`OSError`, available as
    ``__cause__``. Running out of bytes is never reported this way.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


def _check_bits(bits: int) -> None:
    """Reject bit widths outside ``MIN_BITS..MAX_BITS``.

    Raises:
        ValueError: If ``bits`` is not an integer in range.
    """

    if not isinstance(bits, int) or isinstance(bits, bool):
        raise ValueError(f"bits must be an integer, got {bits!r}")
    if not MIN_BITS <= bits <= MAX_BITS:
        raise ValueError(f"must read {MIN_BITS}-{MAX_BITS} bits at a time, got {bits}")


class SeededLcg:
    """The 48-bit linear congruential generator of ``java.util.Random``."""

    def __init__(self, seed: int = FALLBACK_SEED):
        """Initialize the generator state from ``seed``.

        Args:
            seed: Seed value, scrambled the way Java scrambles it.
        """

        self.set_seed(seed)

    def set_seed(self, seed: int) -> None:
        self._seed = (seed ^ LCG_MULTIPLIER) & LCG_MASK

    def next(self, bits: int) -> int:
        """Advance the generator and return its top ``bits`` bits.

        Args:
            bits: Number of bits wanted, ``1..32``.

        Returns:
            int: Value in ``[0, 2**bits)``.

        Raises:
            ValueError: If ``bits`` is out of range.
        """

        _check_bits(bits)
        self._seed = (self._seed * LCG_MULTIPLIER + LCG_ADDEND) & LCG_MASK
        return self._seed >> (48 - bits)


class FileBackedRandom:
    """Random bits replayed from a reopenable backing file.

    The instance is bound to one path for its whole life. ``open()`` starts
    a trial with the cursor at the beginning of the file and ``close()`` ends
    it; the pair may be repeated any number of times. A typical driver loop::

        rng = FileBackedRandom(driver.input_file())
        for _ in range(num_trials):
            driver.wait_for_input()
            with rng.trial():
                run_program_under_test(JavaRandomView(rng))
            driver.notify_end_of_run()

    While no file is open, requests fall back to a :class:`SeededLcg` with
    the fixed seed ``0x5DEECE66D``, so results stay deterministic.
    """

    def __init__(self, path: str | os.PathLike[str]):
        """Bind the source to ``path`` without opening it.

        Args:
            path: Location of the backing file. It need not exist yet.
        """

        self._path = Path(path)
        self._stream: BinaryIO | None = None
        self._fallback = SeededLcg(FALLBACK_SEED)
        self._fallback_noted = False
        self._exhausted = False
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"{type(self).__name__}({str(self._path)!r}, {state})"

    def open(self) -> None:
        """Open the backing file with the cursor at offset zero.

        An already open stream is closed first, so calling ``open()`` twice
        restarts the trial.

        Raises:
            GuidanceIOError: If the file cannot be opened or the previous
                stream cannot be released.
        """

        with self._lock:
            self._release()
            try:
                self._stream = open(self._path, "rb")
            except OSError as exc:
                logger.error("Cannot open backing file %s: %s", self._path, exc)
                raise GuidanceIOError(
                    f"cannot open backing file {self._path}", self._path
                ) from exc
            self._exhausted = False
            logger.debug("Opened backing file %s", self._path)

    def close(self) -> None:
        """Release the backing stream. Does nothing when none is open.

        Raises:
            GuidanceIOError: If the stream fails to close. The handle is
                dropped either way.
        """

        with self._lock:
            self._release()

    def _release(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.close()
        except OSError as exc:
            logger.error("Cannot close backing file %s: %s", self._path, exc)
            raise GuidanceIOError(
                f"cannot close backing file {self._path}", self._path
            ) from exc
        logger.debug("Closed backing file %s", self._path)

    def next(self, bits: int) -> int:
        """Return the low ``bits`` bits of the next 4-byte chunk.

        Exactly four bytes are consumed per call regardless of ``bits``.
        Bytes missing past end-of-file read as zero, so an exhausted file
        yields ``0`` forever.

        Args:
            bits: Number of bits to retain, ``1..32``.

        Returns:
            int: Value in ``[0, 2**bits)``.

        Raises:
            ValueError: If ``bits`` is out of range. Nothing is read.
            GuidanceIOError: If reading the backing file fails.
        """

        _check_bits(bits)
        mask = (1 << bits) - 1
        with self._lock:
            if self._stream is None:
                if not self._fallback_noted:
                    logger.debug(
                        "No backing file open for %s; using seeded fallback",
                        self._path,
                    )
                    self._fallback_noted = True
                return self._fallback.next(bits)

            buf = bytearray(CHUNK_BYTES)
            try:
                count = self._stream.readinto(buf)
            except OSError as exc:
                logger.error("Cannot read backing file %s: %s", self._path, exc)
                raise GuidanceIOError(
                    f"cannot read backing file {self._path}", self._path
                ) from exc
            if (count or 0) < CHUNK_BYTES and not self._exhausted:
                logger.debug("Backing file %s exhausted; padding with zeros", self._path)
                self._exhausted = True
            value = int.from_bytes(buf, "little")
        return value & mask

    @contextlib.contextmanager
    def trial(self) -> Iterator["FileBackedRandom"]:
        """Open the backing file for one trial and always close it.

        If the trial body raises, that exception propagates even when the
        close fails as well; the close failure is only logged.

        Yields:
            FileBackedRandom: This instance, opened.
        """

        self.open()
        try:
            yield self
        except BaseException:
            self._close_after_failure()
            raise
        self.close()

    def _close_after_failure(self) -> None:
        try:
            self.close()
        except GuidanceIOError:
            # logged by _release; the in-flight exception takes precedence
            pass

    def __enter__(self) -> "FileBackedRandom":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self._close_after_failure()
