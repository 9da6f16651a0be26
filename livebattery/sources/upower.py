"""UPower snapshot source - reads the composite display battery via D-Bus.

Priority: 10 (highest - preferred over raw sysfs).
"""

import logging
from typing import Optional

from livebattery.core.types import BatterySnapshot, SourceType
from livebattery.sources.base import SnapshotSource

log = logging.getLogger(__name__)

# UPower device type constants
_UPOWER_TYPE_BATTERY = 2

# Percentage is a double; keep one decimal by scaling to per-mille.
_LEVEL_SCALE = 1000

_IFACE_DEVICE = "org.freedesktop.UPower.Device"
_IFACE_PROPS = "org.freedesktop.DBus.Properties"
_UPOWER_BUS = "org.freedesktop.UPower"
_DISPLAY_DEVICE_PATH = "/org/freedesktop/UPower/devices/DisplayDevice"


def _try_import_dbus():
    """Import dbus lazily so the module is loadable even without dbus-python."""
    try:
        import dbus
        return dbus
    except ImportError:
        return None


class UPowerSource(SnapshotSource):
    """Snapshot source using the UPower D-Bus daemon."""

    def __init__(self, device_path: str = _DISPLAY_DEVICE_PATH):
        self._device_path = device_path
        self._bus = None

    @property
    def name(self) -> str:
        return "UPower"

    @property
    def priority(self) -> int:
        return 10

    def _get_bus(self):
        if self._bus is None:
            dbus = _try_import_dbus()
            if dbus is None:
                return None
            try:
                self._bus = dbus.SystemBus()
            except Exception:
                log.debug("Could not connect to system D-Bus")
                return None
        return self._bus

    def read_snapshot(self) -> Optional[BatterySnapshot]:
        dbus = _try_import_dbus()
        if dbus is None:
            return None

        bus = self._get_bus()
        if bus is None:
            return None

        try:
            dev_obj = bus.get_object(_UPOWER_BUS, self._device_path)
            props = dbus.Interface(dev_obj, _IFACE_PROPS)

            dev_type = int(props.Get(_IFACE_DEVICE, "Type"))
            is_present = bool(props.Get(_IFACE_DEVICE, "IsPresent"))
            percentage = float(props.Get(_IFACE_DEVICE, "Percentage"))
            temperature = float(props.Get(_IFACE_DEVICE, "Temperature"))
        except Exception:
            log.debug("Failed to read UPower device %s", self._device_path)
            return None

        if dev_type != _UPOWER_TYPE_BATTERY or not is_present:
            return None

        # UPower reports 0.0 when the temperature is unknown
        tenths = int(round(temperature * 10)) if temperature > 0 else -1

        return BatterySnapshot(
            level=int(round(percentage * _LEVEL_SCALE / 100)),
            scale=_LEVEL_SCALE,
            temperature_tenths_c=tenths,
            source=SourceType.UPOWER,
        )

    def close(self) -> None:
        self._bus = None
