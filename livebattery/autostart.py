"""Start-at-login entry for the tray, via the XDG autostart directory."""

import logging
import os
from pathlib import Path

log = logging.getLogger(__name__)

DESKTOP_FILE_NAME = "livebattery.desktop"

DESKTOP_ENTRY = """\
[Desktop Entry]
Type=Application
Name=livebattery
Comment=Live battery time, current and temperature in the system tray
Exec={command}
Icon=battery
Terminal=false
X-GNOME-Autostart-enabled=true
"""


def get_autostart_dir() -> Path:
    """Get ``$XDG_CONFIG_HOME/autostart`` (or ``~/.config/autostart``)."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        return Path(xdg_config) / "autostart"
    return Path.home() / ".config" / "autostart"


def get_autostart_path() -> Path:
    return get_autostart_dir() / DESKTOP_FILE_NAME


def is_autostart_installed() -> bool:
    return get_autostart_path().is_file()


def install_autostart(command: str = "livebattery-tray") -> Path:
    """Write the desktop entry so the tray starts with the session.

    Overwrites an existing entry. Raises OSError if it cannot be written.
    """
    path = get_autostart_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DESKTOP_ENTRY.format(command=command))
    log.info("Installed autostart entry %s", path)
    return path


def remove_autostart() -> bool:
    """Delete the desktop entry. Returns False if there was none."""
    path = get_autostart_path()
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    log.info("Removed autostart entry %s", path)
    return True
