"""Build and post the two-line battery notification."""

import html
import logging
import subprocess
from dataclasses import dataclass
from typing import List

from livebattery.core.types import RenderedFields, StyledText

log = logging.getLogger(__name__)

NOTIFICATION_TITLE = "Battery"
APP_NAME = "livebattery"

# Lets notification daemons replace the previous bubble instead of stacking
_SYNC_HINT = "string:x-canonical-private-synchronous:" + APP_NAME


@dataclass(frozen=True)
class BatteryNotification:
    title: str
    lines: List[str]
    html: str

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def styled_to_html(styled: StyledText, base_point_size: int = 10) -> str:
    """Render StyledText as Qt rich text, shrinking the marked span."""
    parts = []
    for chunk, size in styled.segments():
        escaped = html.escape(chunk)
        if size == 1.0:
            parts.append(escaped)
        else:
            point_size = max(1, int(round(base_point_size * size)))
            parts.append(f'<span style="font-size:{point_size}pt">{escaped}</span>')
    return "".join(parts)


def build_notification(fields: RenderedFields, base_point_size: int = 10) -> BatteryNotification:
    """Compose "time (current)" / "percent  |  temperature"."""
    detail_html = "{}  |  {}".format(
        styled_to_html(fields.percent, base_point_size),
        html.escape(fields.temperature),
    )
    body = (
        f'<div style="font-size:{base_point_size}pt">'
        f"{html.escape(fields.headline)}<br/>{detail_html}</div>"
    )
    return BatteryNotification(title=NOTIFICATION_TITLE, lines=fields.lines(), html=body)


def send_notification(notification: BatteryNotification, urgency: str = "low") -> bool:
    """Post through notify-send, replacing the previous one. Returns success."""
    try:
        result = subprocess.run([
            "notify-send",
            "-a", APP_NAME,
            "-u", urgency,
            "-h", _SYNC_HINT,
            notification.title,
            notification.text,
        ], check=False, capture_output=True, timeout=5)
    except FileNotFoundError:
        log.debug("notify-send not installed")
        return False
    except subprocess.TimeoutExpired:
        log.debug("notify-send timed out")
        return False
    return result.returncode == 0
