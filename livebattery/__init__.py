"""livebattery - live battery current, capacity, time-to-empty and temperature.

Reads vendor-specific sysfs counters (escalating through ``su`` where
available), combines them with the platform battery level, and renders
stable notification text.
"""

__version__ = "1.0.0"

from livebattery.core import (
    BatterySnapshot,
    DerivedMetrics,
    DeviceIdentity,
    Estimator,
    Presenter,
    RenderedFields,
    StyledText,
)
from livebattery.monitor import BatteryMonitor, create_monitor

__all__ = [
    "BatterySnapshot",
    "DerivedMetrics",
    "DeviceIdentity",
    "Estimator",
    "Presenter",
    "RenderedFields",
    "StyledText",
    "BatteryMonitor",
    "create_monitor",
]
