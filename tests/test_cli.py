import contextlib
import importlib
import io

import pytest

import fb_random

cli_module = importlib.import_module("fb_random.cli")


def _run_cli(argv: list[str]) -> tuple[int, str]:
    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        code = cli_module.main(argv)
    return code, buf.getvalue().strip()


def test_dump_defaults_to_whole_file(backing_file):
    path = backing_file([0x01, 0, 0, 0, 0xFF])
    code, out = _run_cli(["dump", str(path)])
    assert code == 0
    assert out.split() == ["1", "255"]


def test_dump_bits_and_count(backing_file):
    path = backing_file([0xFF, 0x01, 0, 0])
    code, out = _run_cli(["dump", str(path), "--bits", "8", "--count", "3"])
    assert code == 0
    assert out.split() == ["255", "0", "0"]


def test_dump_path_from_env(backing_file, monkeypatch):
    path = backing_file([0x05, 0, 0, 0])
    monkeypatch.setenv("FB_RANDOM_FILE", str(path))
    code, out = _run_cli(["dump"])
    assert code == 0
    assert out == "5"


def test_dump_missing_file(tmp_path, capsys):
    code, out = _run_cli(["dump", str(tmp_path / "missing.bin")])
    assert code == 1
    assert out == ""
    assert "cannot open backing file" in capsys.readouterr().err


@pytest.mark.parametrize("bits", ["0", "33"])
def test_dump_invalid_bits(backing_file, bits):
    path = backing_file(b"")
    with pytest.raises(SystemExit):
        _run_cli(["dump", str(path), "--bits", bits])


def test_missing_path(monkeypatch):
    monkeypatch.delenv("FB_RANDOM_FILE", raising=False)
    with pytest.raises(SystemExit):
        _run_cli(["dump"])


def test_seed_is_reproducible(tmp_path):
    first = tmp_path / "a.bin"
    second = tmp_path / "b.bin"
    assert _run_cli(["seed", str(first), "--size", "64", "--seed", "9"])[0] == 0
    assert _run_cli(["seed", str(second), "--size", "64", "--seed", "9"])[0] == 0
    assert first.read_bytes() == second.read_bytes()
    assert len(first.read_bytes()) == 64


def test_seed_then_dump_round_trip(tmp_path):
    path = tmp_path / "input.bin"
    _run_cli(["seed", str(path), "--size", "8"])
    data = path.read_bytes()
    _, out = _run_cli(["dump", str(path)])
    expected = [str(int.from_bytes(data[i : i + 4], "little")) for i in (0, 4)]
    assert out.split() == expected


def test_seed_negative_size(tmp_path):
    with pytest.raises(SystemExit):
        _run_cli(["seed", str(tmp_path / "x.bin"), "--size", "-1"])


def test_version(capsys):
    with pytest.raises(SystemExit):
        cli_module.main(["--version"])
    assert fb_random.__version__ in capsys.readouterr().out


def test_seed_unwritable_path(tmp_path, capsys):
    code, out = _run_cli(["seed", str(tmp_path / "missing" / "x.bin"), "--size", "4"])
    assert code == 1
    assert "cannot write" in capsys.readouterr().err


def test_unknown_log_level_falls_back(backing_file, monkeypatch):
    monkeypatch.setenv("FB_RANDOM_LOG_LEVEL", "loud")
    assert cli_module._log_level() == "WARNING"
    path = backing_file([0x03, 0, 0, 0])
    assert _run_cli(["dump", str(path)]) == (0, "3")


def test_log_level_from_env(monkeypatch):
    monkeypatch.setenv("FB_RANDOM_LOG_LEVEL", "debug")
    assert cli_module._log_level() == "DEBUG"
