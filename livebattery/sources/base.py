"""Abstract base class for battery snapshot sources."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from livebattery.core.types import BatterySnapshot


class SnapshotSource(ABC):
    """Something that can report the platform's battery level and temperature.

    Implementations:
    - UPowerSource: D-Bus UPower display device
    - SysfsSource: /sys/class/power_supply/
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name (e.g., 'UPower')."""
        ...

    @property
    @abstractmethod
    def priority(self) -> int:
        """Lower = preferred. UPower=10, sysfs=20."""
        ...

    @abstractmethod
    def read_snapshot(self) -> Optional[BatterySnapshot]:
        """Return the current battery snapshot, or None if unavailable."""
        ...

    def supports_hotplug(self) -> bool:
        """Whether this source can signal battery changes."""
        return False

    def start_watching(self, on_change: Callable[[], None]) -> None:
        """Start monitoring for battery change events.

        Args:
            on_change: Called (possibly from another thread) on each change.
        """
        pass

    def stop_watching(self) -> None:
        """Stop monitoring for battery change events."""
        pass

    def close(self) -> None:
        """Clean up resources."""
        pass
