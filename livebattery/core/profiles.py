"""Fallback design capacities for devices whose sysfs nodes lie or are missing."""

from typing import Iterable, Mapping, Optional, Tuple

from livebattery.core.types import DeviceIdentity

# Hardware capacities at or below this are placeholders (0, 1, ...).
MIN_PLAUSIBLE_CAPACITY_MAH = 1000.0

GENERIC_CAPACITY_MAH = 4000.0

# (model or codename, design capacity in mAh), checked in order.
BUILTIN_PROFILES: Tuple[Tuple[str, float], ...] = (
    ("SM-G975F", 4100.0),     # Galaxy S10+
    ("beyond2lte", 4100.0),   # Galaxy S10+ codename
    ("oriole", 4614.0),       # Pixel 6
    ("panther", 4355.0),      # Pixel 7
    ("IN2013", 4300.0),       # OnePlus 8
)


class DeviceProfileTable:
    """Ordered model/codename -> capacity lookup with a catch-all value."""

    def __init__(self, entries: Iterable[Tuple[str, float]] = BUILTIN_PROFILES,
                 generic_capacity_mah: float = GENERIC_CAPACITY_MAH):
        self._entries = tuple((str(key), float(cap)) for key, cap in entries)
        self.generic_capacity_mah = float(generic_capacity_mah)

    def match(self, identity: DeviceIdentity) -> Optional[float]:
        """Return the capacity of the first entry matching model or codename."""
        names = {n.lower() for n in (identity.model, identity.codename) if n}
        if not names:
            return None
        for key, capacity in self._entries:
            if key.lower() in names:
                return capacity
        return None

    def lookup(self, identity: DeviceIdentity) -> float:
        capacity = self.match(identity)
        if capacity is None:
            return self.generic_capacity_mah
        return capacity

    def with_overrides(self, overrides: Mapping[str, float],
                       generic_capacity_mah: Optional[float] = None) -> "DeviceProfileTable":
        """Return a table that consults ``overrides`` before the current entries."""
        entries = [(key, float(cap)) for key, cap in overrides.items()]
        entries.extend(self._entries)
        generic = self.generic_capacity_mah if generic_capacity_mah is None else generic_capacity_mah
        return DeviceProfileTable(entries, generic)
