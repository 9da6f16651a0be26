"""Core data types for live battery estimation."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Sequence, Tuple


class SourceType(Enum):
    """Where a battery snapshot came from."""
    SYSFS = auto()
    UPOWER = auto()
    NONE = auto()


@dataclass(frozen=True)
class BatterySnapshot:
    """One point-in-time reading from the platform battery state.

    Absent fields are -1. A snapshot with ``scale <= 0`` or ``level < 0``
    has not been populated yet.
    """
    level: int = -1
    scale: int = -1
    temperature_tenths_c: int = -1
    source: SourceType = SourceType.NONE
    timestamp: float = field(default_factory=time.monotonic, compare=False)


@dataclass(frozen=True)
class DeviceIdentity:
    """Model and codename of the running device (either may be empty)."""
    model: str = ""
    codename: str = ""


@dataclass(frozen=True)
class CandidatePaths:
    """Ordered sysfs locations for each hardware quantity.

    Order encodes vendor priority: vendor-specific nodes come before the
    generic/AOSP ones.
    """
    current_now: Tuple[str, ...] = (
        # Samsung/OneUI
        "/sys/class/power_supply/battery/current_now",
        # AOSP/Pixel
        "/sys/class/power_supply/bms/current_now",
        # Some OnePlus/OPPO
        "/sys/class/power_supply/usb/current_now",
        # Some MIUI/Xiaomi
        "/sys/class/power_supply/charger/current_now",
    )
    charge_full_design: Tuple[str, ...] = (
        "/sys/class/power_supply/battery/charge_full_design",
        "/sys/class/power_supply/bms/charge_full_design",
    )
    temp: Tuple[str, ...] = (
        "/sys/class/power_supply/battery/temp",
        "/sys/class/power_supply/max170xx_battery/temp",
        "/sys/class/power_supply/bms/temp",
    )

    def with_extra(self, current_now: Sequence[str] = (),
                   charge_full_design: Sequence[str] = (),
                   temp: Sequence[str] = ()) -> "CandidatePaths":
        """Return a copy that tries the given paths before the built-in ones."""
        return CandidatePaths(
            current_now=_prepend(current_now, self.current_now),
            charge_full_design=_prepend(charge_full_design, self.charge_full_design),
            temp=_prepend(temp, self.temp),
        )


def _prepend(extra: Sequence[str], base: Tuple[str, ...]) -> Tuple[str, ...]:
    merged = list(extra)
    merged.extend(p for p in base if p not in merged)
    return tuple(merged)


@dataclass
class DerivedMetrics:
    """Quantities derived from one snapshot plus the hardware counters."""
    design_capacity_mah: float
    percent_remaining: float = 0.0
    current_ma: Optional[float] = None
    time_remaining_s: Optional[int] = None
    temperature_c: Optional[float] = None

    @property
    def now_capacity_mah(self) -> float:
        return self.design_capacity_mah * self.percent_remaining


@dataclass(frozen=True)
class StyledText:
    """Display text plus a span that renderers should draw smaller.

    ``shrink_start``/``shrink_end`` are a half-open character range into
    ``text``; an empty range means nothing is shrunk.
    """
    text: str
    shrink_start: int = 0
    shrink_end: int = 0
    relative_size: float = 1.0

    @property
    def shrink_span(self) -> Optional[Tuple[int, int]]:
        if self.shrink_end <= self.shrink_start:
            return None
        return self.shrink_start, self.shrink_end

    def segments(self) -> List[Tuple[str, float]]:
        """Split into (chunk, relative size) runs, dropping empty chunks."""
        span = self.shrink_span
        if span is None:
            return [(self.text, 1.0)] if self.text else []
        start, end = span
        runs = [
            (self.text[:start], 1.0),
            (self.text[start:end], self.relative_size),
            (self.text[end:], 1.0),
        ]
        return [(chunk, size) for chunk, size in runs if chunk]

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class RenderedFields:
    """Formatted strings ready for a notification renderer."""
    current: str
    time: str
    percent: StyledText
    temperature: str

    @property
    def headline(self) -> str:
        return f"{self.time} ({self.current})"

    @property
    def detail(self) -> str:
        return f"{self.percent.text}  |  {self.temperature}"

    def lines(self) -> List[str]:
        return [self.headline, self.detail]


@dataclass
class Sample:
    """Everything computed during one pass: input, metrics, and text."""
    snapshot: BatterySnapshot
    metrics: DerivedMetrics
    fields: RenderedFields

    def to_dict(self) -> Dict[str, Any]:
        span = self.fields.percent.shrink_span
        return {
            "source": self.snapshot.source.name.lower(),
            "level": self.snapshot.level,
            "scale": self.snapshot.scale,
            "percent_remaining": self.metrics.percent_remaining,
            "current_ma": self.metrics.current_ma,
            "design_capacity_mah": self.metrics.design_capacity_mah,
            "now_capacity_mah": self.metrics.now_capacity_mah,
            "time_remaining_s": self.metrics.time_remaining_s,
            "temperature_c": self.metrics.temperature_c,
            "text": {
                "current": self.fields.current,
                "time": self.fields.time,
                "percent": self.fields.percent.text,
                "percent_shrink_span": list(span) if span else None,
                "temperature": self.fields.temperature,
                "lines": self.fields.lines(),
            },
        }
