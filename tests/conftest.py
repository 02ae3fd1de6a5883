import pytest


@pytest.fixture
def backing_file(tmp_path):
    """Return a factory writing ``data`` to a fresh backing file."""

    def _write(data: bytes, name: str = "input.bin"):
        path = tmp_path / name
        path.write_bytes(bytes(data))
        return path

    return _write
