"""Command-line interface for inspecting and seeding backing files."""

import argparse
import logging
import os
import random
import sys

import fb_random

from .constants import (
    CHUNK_BYTES,
    DEFAULT_LOG_LEVEL,
    ENV_FILE,
    ENV_LOG_LEVEL,
    MAX_BITS,
    MIN_BITS,
)
from .core import FileBackedRandom, GuidanceIOError


def _dump(path: str, bits: int, count: int | None) -> int:
    rng = FileBackedRandom(path)
    try:
        with rng.trial():
            if count is None:
                size = rng.path.stat().st_size
                count = -(-size // CHUNK_BYTES)
            for _ in range(count):
                print(rng.next(bits))
    except (GuidanceIOError, OSError) as exc:
        print(f"fb-random: {exc}", file=sys.stderr)
        return 1
    return 0


def _seed(path: str, size: int, seed: int) -> int:
    data = random.Random(seed).randbytes(size)  # nosec B311 - reproducible input
    try:
        with open(path, "wb") as fh:
            fh.write(data)
    except OSError as exc:
        print(f"fb-random: cannot write {path}: {exc}", file=sys.stderr)
        return 1
    logging.getLogger(__name__).info("Wrote %d bytes to %s", size, path)
    return 0


def _log_level() -> str:
    name = os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(name), int):
        return DEFAULT_LOG_LEVEL
    return name


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and dump or seed a backing file.

    Args:
        argv: Optional list of command-line arguments.

    Returns:
        int: ``0`` on success, ``1`` when the backing file cannot be read or written.
    """

    logging.basicConfig(
        level=_log_level(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(prog="fb-random")
    parser.add_argument("--version", action="version", version=fb_random.__version__)
    sub = parser.add_subparsers(dest="cmd", required=True)

    d = sub.add_parser("dump", help="print the values a backing file replays")
    d.add_argument("path", nargs="?")
    d.add_argument("--bits", type=int, default=MAX_BITS)
    d.add_argument("--count", type=int)

    s = sub.add_parser("seed", help="write a reproducible initial backing file")
    s.add_argument("path", nargs="?")
    s.add_argument("--size", type=int, required=True)
    s.add_argument("--seed", type=int, default=0)

    args = parser.parse_args(argv)
    path = args.path or os.getenv(ENV_FILE)
    if not path:
        parser.error(f"path required as argument or via {ENV_FILE}")

    if args.cmd == "dump":
        if not (MIN_BITS <= args.bits <= MAX_BITS):
            parser.error(f"--bits must be between {MIN_BITS} and {MAX_BITS}")
        if args.count is not None and args.count < 0:
            parser.error("--count must not be negative")
        return _dump(path, args.bits, args.count)
    if args.size < 0:
        parser.error("--size must not be negative")
    return _seed(path, args.size, args.seed)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
