"""Turn DerivedMetrics into stable, locale-independent display strings."""

import math
from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Optional

from livebattery.core.types import DerivedMetrics, RenderedFields, StyledText


@dataclass(frozen=True)
class FormatProfile:
    """Fixed units, placeholders and styling used for every rendered field."""
    current_unit: str = "mA"
    temperature_unit: str = "°C"
    current_unavailable: str = "Current unavailable"
    time_unavailable: str = "Time unavailable"
    temperature_unavailable: str = "N/A"
    fraction_relative_size: float = 0.5


DEFAULT_FORMAT = FormatProfile()


def _decimal(value: float) -> Decimal:
    # repr() is the shortest round-tripping form, so 85.6 stays 85.6
    return Decimal(repr(float(value)))


def _fixed(value: Decimal, places: int) -> str:
    """Round half-up to ``places`` decimals, always with '.' and no grouping."""
    quantum = Decimal(1).scaleb(-places)
    # Enough precision for every integer digit, however large the value
    context = Context(prec=max(28, value.adjusted() + places + 2))
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP, context=context)
    if rounded == 0:
        rounded = abs(rounded)
    return format(rounded, "f")


class Presenter:
    """Pure formatting over DerivedMetrics; performs no I/O."""

    def __init__(self, profile: FormatProfile = DEFAULT_FORMAT):
        self.profile = profile

    def format_current(self, current_ma: Optional[float]) -> str:
        """e.g. -550.4 -> "550 mA"."""
        if current_ma is None or not math.isfinite(current_ma):
            return self.profile.current_unavailable
        return f"{_fixed(abs(_decimal(current_ma)), 0)} {self.profile.current_unit}"

    def format_time_hms(self, seconds: Optional[int]) -> str:
        """e.g. 3725 -> "1h 02m 05s"."""
        if seconds is None:
            return self.profile.time_unavailable
        seconds = max(0, int(seconds))
        h, rem = divmod(seconds, 3600)
        m, s = divmod(rem, 60)
        return f"{h}h {m:02d}m {s:02d}s"

    def styled_percent(self, fraction: float) -> StyledText:
        """Percentage with one decimal; the decimal digit is marked for shrinking.

        Only the digit after the point is in the span, not the point and
        not the percent sign.
        """
        if not math.isfinite(fraction):
            fraction = 0.0
        text = _fixed(_decimal(fraction) * 100, 1) + "%"
        dot = text.find(".")
        if dot > 0 and len(text) > dot + 1:
            return StyledText(text, dot + 1, dot + 2, self.profile.fraction_relative_size)
        return StyledText(text)

    def format_temperature(self, celsius: Optional[float]) -> str:
        if celsius is None or not math.isfinite(celsius):
            return self.profile.temperature_unavailable
        return _fixed(_decimal(celsius), 1) + self.profile.temperature_unit

    def render(self, metrics: DerivedMetrics) -> RenderedFields:
        return RenderedFields(
            current=self.format_current(metrics.current_ma),
            time=self.format_time_hms(metrics.time_remaining_s),
            percent=self.styled_percent(metrics.percent_remaining),
            temperature=self.format_temperature(metrics.temperature_c),
        )
