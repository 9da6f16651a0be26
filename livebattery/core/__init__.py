"""Core estimation engine: source resolver, estimator and presenter."""

from livebattery.core.types import (
    SourceType,
    BatterySnapshot,
    DeviceIdentity,
    CandidatePaths,
    DerivedMetrics,
    StyledText,
    RenderedFields,
    Sample,
)
from livebattery.core.reader import SysfsReader, SystemSysfsReader, resolve
from livebattery.core.profiles import DeviceProfileTable
from livebattery.core.estimator import Estimator, percent_remaining
from livebattery.core.presenter import FormatProfile, Presenter

__all__ = [
    "SourceType",
    "BatterySnapshot",
    "DeviceIdentity",
    "CandidatePaths",
    "DerivedMetrics",
    "StyledText",
    "RenderedFields",
    "Sample",
    "SysfsReader",
    "SystemSysfsReader",
    "resolve",
    "DeviceProfileTable",
    "Estimator",
    "percent_remaining",
    "FormatProfile",
    "Presenter",
]
