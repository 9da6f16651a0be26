"""Battery snapshot source implementations."""

from livebattery.sources.base import SnapshotSource
from livebattery.sources.upower import UPowerSource
from livebattery.sources.sysfs import SysfsSource

__all__ = ["SnapshotSource", "UPowerSource", "SysfsSource"]
