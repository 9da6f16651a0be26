"""sysfs snapshot source - reads /sys/class/power_supply/ for the system battery.

Works on Android kernels (``battery``) and laptops (``BAT0``...).
Priority: 20 (after UPower).
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from livebattery.core.types import BatterySnapshot, SourceType
from livebattery.sources.base import SnapshotSource

log = logging.getLogger(__name__)

POWER_SUPPLY_DIR = Path("/sys/class/power_supply")

# Android names its main battery node "battery".
_PREFERRED_NAME = "battery"


def _read_sysfs(path: Path) -> Optional[str]:
    """Read a sysfs attribute file, returning stripped content or None."""
    try:
        return path.read_text().strip()
    except (OSError, UnicodeDecodeError):
        return None


def _read_int(path: Path) -> int:
    """Read an integer attribute; -1 when missing or malformed."""
    raw = _read_sysfs(path)
    if not raw:
        return -1
    try:
        return int(raw)
    except ValueError:
        log.debug("Non-integer value in %s: %r", path, raw)
        return -1


class SysfsSource(SnapshotSource):
    """Snapshot source reading capacity and temp of the system battery."""

    def __init__(self, root: Path = POWER_SUPPLY_DIR):
        self._root = Path(root)
        self._watch_callback: Optional[Callable[[], None]] = None
        self._watch_thread: Optional[threading.Thread] = None
        self._watching = False

    @property
    def name(self) -> str:
        return "sysfs"

    @property
    def priority(self) -> int:
        return 20

    def find_battery(self) -> Optional[Path]:
        """Return the power_supply entry of the system battery, if any."""
        if not self._root.is_dir():
            return None

        candidates = []
        for entry in sorted(self._root.iterdir()):
            if _read_sysfs(entry / "type") != "Battery":
                continue
            # Peripheral batteries (mice, headsets) report scope=Device
            if _read_sysfs(entry / "scope") == "Device":
                continue
            candidates.append(entry)

        for entry in candidates:
            if entry.name == _PREFERRED_NAME:
                return entry
        return candidates[0] if candidates else None

    def read_snapshot(self) -> Optional[BatterySnapshot]:
        battery = self.find_battery()
        if battery is None:
            return None

        level = _read_int(battery / "capacity")
        if level < 0:
            return None

        return BatterySnapshot(
            level=level,
            scale=100,
            temperature_tenths_c=_read_int(battery / "temp"),
            source=SourceType.SYSFS,
        )

    def supports_hotplug(self) -> bool:
        try:
            import pyudev  # noqa: F401
            return True
        except ImportError:
            return False

    def start_watching(self, on_change: Callable[[], None]) -> None:
        try:
            import pyudev
        except ImportError:
            return

        self._watch_callback = on_change
        self._watching = True

        def _watch():
            context = pyudev.Context()
            monitor = pyudev.Monitor.from_netlink(context)
            monitor.filter_by(subsystem="power_supply")
            while self._watching:
                device = monitor.poll(timeout=1.0)
                if device is None:
                    continue
                callback = self._watch_callback
                if callback:
                    callback()

        self._watch_thread = threading.Thread(target=_watch, daemon=True)
        self._watch_thread.start()

    def stop_watching(self) -> None:
        self._watching = False
        self._watch_callback = None

    def close(self) -> None:
        self.stop_watching()
