"""Random bits replayed from a backing file."""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import re

from .core import BitSource, FileBackedRandom, GuidanceIOError, SeededLcg
from .derived import JavaRandomView, StdlibRandom
from .cli import main as cli
from .testing_source import TestSource

_pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"


def _read_version(path: Path) -> str:
    text = path.read_text(encoding="utf-8")
    match = re.search(r'^version\s*=\s*"([^"]+)"', text, flags=re.MULTILINE)
    if not match:
        raise RuntimeError("version not found in pyproject.toml")
    return match.group(1)


try:
    __version__ = version("file-backed-random")
except PackageNotFoundError:
    __version__ = _read_version(_pyproject)

__all__ = [
    "BitSource",
    "FileBackedRandom",
    "GuidanceIOError",
    "SeededLcg",
    "JavaRandomView",
    "StdlibRandom",
    "TestSource",
    "cli",
    "__version__",
]
