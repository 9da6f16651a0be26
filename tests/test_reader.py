import subprocess

import pytest

from livebattery.core import reader as reader_mod
from livebattery.core.reader import (
    SystemSysfsReader, first_line, parse_reading, resolve,
)

from conftest import FakeReader


@pytest.mark.parametrize("line, expected", [
    ("-550400", -550400.0),
    ("  4100000 ", 4100000.0),
    ("362", 362.0),
    ("1.5e3", 1500.0),
])
def test_parse_reading_accepts_numbers(line, expected):
    assert parse_reading(line) == expected


@pytest.mark.parametrize("line", [None, "", "   ", "abc", "nan", "inf", "-Infinity", "1_000", "-550_400"])
def test_parse_reading_rejects_garbage(line):
    assert parse_reading(line) is None


def test_first_line_takes_only_the_first_line():
    assert first_line("  123 \n456\n") == "123"
    assert first_line("\n456") is None
    assert first_line("") is None
    assert first_line(None) is None


def test_resolve_returns_second_candidate_when_first_fails():
    reader = FakeReader(plain={"/b": "2500000"})
    assert resolve(["/a", "/b"], 1000.0, reader) == 2500.0


def test_resolve_returns_none_when_all_fail():
    reader = FakeReader(plain={"/a": "garbage"})
    assert resolve(["/a", "/b"], 1000.0, reader) is None


def test_resolve_stops_at_first_success():
    reader = FakeReader(plain={"/a": "1000", "/b": "2000"})
    assert resolve(["/a", "/b"], 1.0, reader) == 1000.0
    assert ("plain", "/b") not in reader.calls


def test_resolve_survives_a_reader_that_raises():
    class Exploding(FakeReader):
        def try_privileged_read(self, path):
            raise RuntimeError("boom")

    reader = Exploding(plain={"/b": "10"})
    assert resolve(["/a", "/b"], 10.0, reader) is None


def test_privileged_value_wins_over_plain():
    reader = FakeReader(plain={"/a": "1"}, privileged={"/a": "2"})
    assert reader.read_value("/a") == 2.0
    assert reader.calls == [("su", "/a")]


def test_plain_read_used_when_privileged_line_is_unusable():
    reader = FakeReader(plain={"/a": "42"}, privileged={"/a": "su: not found"})
    assert reader.read_value("/a") == 42.0
    assert reader.calls == [("su", "/a"), ("plain", "/a")]


def test_plain_first_order_skips_su_when_direct_read_works():
    reader = FakeReader(plain={"/a": "42"}, privileged={"/a": "7"}, privileged_first=False)
    assert reader.read_value("/a") == 42.0
    assert reader.calls == [("plain", "/a")]


def test_system_reader_plain_read(tmp_path):
    node = tmp_path / "current_now"
    node.write_text("-412000\n")
    reader = SystemSysfsReader(privileged=False)
    assert reader.try_plain_read(str(node)) == "-412000"
    assert reader.read_value(str(node)) == -412000.0


def test_system_reader_missing_file(tmp_path):
    reader = SystemSysfsReader(privileged=False)
    assert reader.try_plain_read(str(tmp_path / "missing")) is None
    assert reader.read_value(str(tmp_path / "missing")) is None


def test_system_reader_skips_su_when_disabled(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("subprocess should not run")

    monkeypatch.setattr(reader_mod.subprocess, "run", fail)
    assert SystemSysfsReader(privileged=False).try_privileged_read("/x") is None


def test_system_reader_skips_su_when_not_installed(monkeypatch):
    monkeypatch.setattr(reader_mod.shutil, "which", lambda name: None)
    monkeypatch.setattr(reader_mod.subprocess, "run", lambda *a, **k: pytest.fail("spawned"))
    assert SystemSysfsReader().try_privileged_read("/x") is None


def test_system_reader_privileged_read_uses_timeout_and_quotes_path(monkeypatch):
    seen = {}

    def fake_run(argv, **kwargs):
        seen["argv"] = argv
        seen["kwargs"] = kwargs
        return subprocess.CompletedProcess(argv, 0, stdout="  3000000\nextra\n", stderr="")

    monkeypatch.setattr(reader_mod.shutil, "which", lambda name: "/system/xbin/su")
    monkeypatch.setattr(reader_mod.subprocess, "run", fake_run)

    reader = SystemSysfsReader(timeout=1.5)
    assert reader.try_privileged_read("/sys/odd path/temp") == "3000000"
    assert seen["argv"] == ["su", "-c", "cat '/sys/odd path/temp'"]
    assert seen["kwargs"]["timeout"] == 1.5
    assert seen["kwargs"]["stdin"] is subprocess.DEVNULL


def test_system_reader_privileged_timeout_falls_back_to_plain(monkeypatch, tmp_path):
    node = tmp_path / "temp"
    node.write_text("315\n")

    def hang(argv, **kwargs):
        raise subprocess.TimeoutExpired(argv, kwargs["timeout"])

    monkeypatch.setattr(reader_mod.shutil, "which", lambda name: "/system/xbin/su")
    monkeypatch.setattr(reader_mod.subprocess, "run", hang)

    assert SystemSysfsReader().read_value(str(node)) == 315.0


def test_system_reader_privileged_oserror(monkeypatch):
    def broken(argv, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(reader_mod.shutil, "which", lambda name: "/system/xbin/su")
    monkeypatch.setattr(reader_mod.subprocess, "run", broken)
    assert SystemSysfsReader().try_privileged_read("/x") is None
