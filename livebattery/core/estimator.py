"""Derive live battery metrics from a snapshot and the hardware counters."""

import logging
import math
from typing import Optional

from livebattery.core.profiles import DeviceProfileTable, MIN_PLAUSIBLE_CAPACITY_MAH
from livebattery.core.reader import MICRO_TO_MILLI, TENTHS, SysfsReader, resolve
from livebattery.core.types import (
    BatterySnapshot, CandidatePaths, DerivedMetrics, DeviceIdentity,
)

log = logging.getLogger(__name__)

# Below this the current is noise and time-to-empty would blow up.
CURRENT_NOISE_FLOOR_MA = 0.01

SECONDS_PER_HOUR = 3600


def percent_remaining(level: int, scale: int) -> float:
    """Fraction of charge left, in [0, 1]. Unpopulated snapshots give 0."""
    if level < 0 or scale <= 0:
        return 0.0
    return min(1.0, max(0.0, level / scale))


def time_remaining_seconds(now_capacity_mah: float,
                           current_ma: Optional[float]) -> Optional[int]:
    """Seconds until empty at the present draw.

    The sign of the current is ignored, so a charging device still gets a
    "time to empty".
    """
    if current_ma is None or abs(current_ma) < CURRENT_NOISE_FLOOR_MA:
        return None
    seconds = now_capacity_mah / abs(current_ma) * SECONDS_PER_HOUR
    if not math.isfinite(seconds):
        log.debug("Time remaining overflowed (%.1f mAh at %r mA)", now_capacity_mah, current_ma)
        return None
    return int(round(seconds))


class Estimator:
    """Combines resolver reads with a battery snapshot into DerivedMetrics."""

    def __init__(self, reader: SysfsReader,
                 identity: DeviceIdentity = DeviceIdentity(),
                 profiles: Optional[DeviceProfileTable] = None,
                 paths: Optional[CandidatePaths] = None):
        self.reader = reader
        self.identity = identity
        self.profiles = profiles or DeviceProfileTable()
        self.paths = paths or CandidatePaths()

    def current_ma(self) -> Optional[float]:
        """Instantaneous current in mA (sign as reported), or None."""
        return resolve(self.paths.current_now, MICRO_TO_MILLI, self.reader)

    def design_capacity_mah(self) -> float:
        """Design capacity in mAh; always defined thanks to the profile table."""
        capacity = resolve(self.paths.charge_full_design, MICRO_TO_MILLI, self.reader)
        if capacity is not None and capacity > MIN_PLAUSIBLE_CAPACITY_MAH:
            return capacity
        if capacity is not None:
            log.debug("Ignoring implausible design capacity %.1f mAh", capacity)
        return self.profiles.lookup(self.identity)

    def temperature_c(self, snapshot: BatterySnapshot) -> Optional[float]:
        temp = resolve(self.paths.temp, TENTHS, self.reader)
        if temp is not None:
            return temp
        if snapshot.temperature_tenths_c >= 0:
            return snapshot.temperature_tenths_c / TENTHS
        return None

    def estimate(self, snapshot: BatterySnapshot) -> DerivedMetrics:
        percent = percent_remaining(snapshot.level, snapshot.scale)
        current = self.current_ma()
        metrics = DerivedMetrics(
            design_capacity_mah=self.design_capacity_mah(),
            percent_remaining=percent,
            current_ma=current,
            temperature_c=self.temperature_c(snapshot),
        )
        metrics.time_remaining_s = time_remaining_seconds(metrics.now_capacity_mah, current)
        return metrics
