import sys
import types
from pathlib import Path

import pytest

from livebattery.core.types import SourceType
from livebattery.sources import upower
from livebattery.sources.sysfs import SysfsSource
from livebattery.sources.upower import UPowerSource


def _supply(root: Path, name: str, **attrs) -> Path:
    entry = root / name
    entry.mkdir(parents=True)
    for key, value in attrs.items():
        (entry / key).write_text(f"{value}\n")
    return entry


def test_sysfs_reads_capacity_and_temp(tmp_path):
    _supply(tmp_path, "BAT0", type="Battery", scope="System", capacity=73, temp=312)
    _supply(tmp_path, "AC", type="Mains", online=1)

    snapshot = SysfsSource(tmp_path).read_snapshot()
    assert snapshot.level == 73
    assert snapshot.scale == 100
    assert snapshot.temperature_tenths_c == 312
    assert snapshot.source is SourceType.SYSFS


def test_sysfs_prefers_android_battery_node(tmp_path):
    _supply(tmp_path, "bms", type="Battery", capacity=10)
    _supply(tmp_path, "battery", type="Battery", capacity=64)
    assert SysfsSource(tmp_path).read_snapshot().level == 64


def test_sysfs_ignores_peripheral_batteries(tmp_path):
    _supply(tmp_path, "hidpp_battery_0", type="Battery", scope="Device", capacity=90)
    assert SysfsSource(tmp_path).read_snapshot() is None


def test_sysfs_missing_temp_is_absent(tmp_path):
    _supply(tmp_path, "BAT1", type="Battery", capacity=40)
    snapshot = SysfsSource(tmp_path).read_snapshot()
    assert snapshot.level == 40
    assert snapshot.temperature_tenths_c == -1


def test_sysfs_unparseable_capacity(tmp_path):
    _supply(tmp_path, "BAT0", type="Battery", capacity="unknown")
    assert SysfsSource(tmp_path).read_snapshot() is None


def test_sysfs_no_power_supply_dir(tmp_path):
    assert SysfsSource(tmp_path / "nope").read_snapshot() is None


class _FakeMonitor:
    def __init__(self, on_poll):
        self._on_poll = on_poll
        self.subsystem = None

    def filter_by(self, subsystem):
        self.subsystem = subsystem

    def poll(self, timeout=None):
        return self._on_poll()


def _fake_pyudev(monkeypatch, on_poll):
    monitor = _FakeMonitor(on_poll)
    fake = types.SimpleNamespace(
        Context=lambda: object(),
        Monitor=types.SimpleNamespace(from_netlink=lambda context: monitor),
    )
    monkeypatch.setitem(sys.modules, "pyudev", fake)
    return monitor


def test_sysfs_watch_calls_back_on_power_supply_events(monkeypatch, tmp_path):
    source = SysfsSource(tmp_path)
    hits = []
    monitor = _fake_pyudev(monkeypatch, lambda: "device")

    def on_change():
        hits.append(True)
        source.stop_watching()

    assert source.supports_hotplug()
    source.start_watching(on_change)
    source._watch_thread.join(timeout=5)

    assert not source._watch_thread.is_alive()
    assert hits == [True]
    assert monitor.subsystem == "power_supply"


def test_sysfs_watch_stopped_while_polling_skips_callback(monkeypatch, tmp_path):
    source = SysfsSource(tmp_path)
    hits = []

    def poll_then_stop():
        source.stop_watching()
        return "device"

    _fake_pyudev(monkeypatch, poll_then_stop)
    source.start_watching(lambda: hits.append(True))
    source._watch_thread.join(timeout=5)

    assert not source._watch_thread.is_alive()
    assert hits == []


class _FakeProps:
    def __init__(self, values):
        self._values = values

    def Get(self, iface, name):
        return self._values[name]


class _FakeBus:
    def __init__(self, values):
        self.values = values

    def get_object(self, bus_name, path):
        return self.values


class _FakeDbus:
    def __init__(self, values):
        self._values = values

    def SystemBus(self):
        return _FakeBus(self._values)

    @staticmethod
    def Interface(obj, iface):
        return _FakeProps(obj)


def _upower_values(**overrides):
    values = {"Type": 2, "IsPresent": True, "Percentage": 85.6, "Temperature": 0.0}
    values.update(overrides)
    return values


def test_upower_snapshot(monkeypatch):
    monkeypatch.setattr(upower, "_try_import_dbus", lambda: _FakeDbus(_upower_values(Temperature=29.74)))
    snapshot = UPowerSource().read_snapshot()
    assert snapshot.level == 856
    assert snapshot.scale == 1000
    assert snapshot.temperature_tenths_c == 297
    assert snapshot.source is SourceType.UPOWER


def test_upower_unknown_temperature(monkeypatch):
    monkeypatch.setattr(upower, "_try_import_dbus", lambda: _FakeDbus(_upower_values()))
    assert UPowerSource().read_snapshot().temperature_tenths_c == -1


@pytest.mark.parametrize("overrides", [{"IsPresent": False}, {"Type": 1}])
def test_upower_without_battery(monkeypatch, overrides):
    monkeypatch.setattr(upower, "_try_import_dbus", lambda: _FakeDbus(_upower_values(**overrides)))
    assert UPowerSource().read_snapshot() is None


def test_upower_without_dbus(monkeypatch):
    monkeypatch.setattr(upower, "_try_import_dbus", lambda: None)
    assert UPowerSource().read_snapshot() is None


def test_upower_property_errors_are_swallowed(monkeypatch):
    monkeypatch.setattr(upower, "_try_import_dbus", lambda: _FakeDbus({}))
    assert UPowerSource().read_snapshot() is None
