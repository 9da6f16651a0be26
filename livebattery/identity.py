"""Detect the running device's model and codename for capacity fallbacks."""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from livebattery.core.types import DeviceIdentity

log = logging.getLogger(__name__)

DMI_DIR = Path("/sys/class/dmi/id")

_GETPROP_TIMEOUT = 2.0


def _getprop(name: str) -> str:
    """Read an Android system property; empty string when unavailable."""
    if shutil.which("getprop") is None:
        return ""
    try:
        result = subprocess.run(
            ["getprop", name],
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=_GETPROP_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        log.debug("getprop %s failed: %s", name, e)
        return ""
    return result.stdout.strip()


def _read_dmi(name: str, dmi_dir: Path) -> str:
    try:
        return (dmi_dir / name).read_text().strip()
    except (OSError, UnicodeDecodeError):
        return ""


def detect_identity(model: str = "", codename: str = "",
                    dmi_dir: Optional[Path] = None) -> DeviceIdentity:
    """Return the device identity.

    Explicit values win. Otherwise Android build properties are used, then
    the Linux DMI table. Anything still unknown is left empty.
    """
    if not model:
        model = _getprop("ro.product.model")
    if not codename:
        codename = _getprop("ro.product.device")

    dmi_dir = DMI_DIR if dmi_dir is None else dmi_dir
    if not model:
        model = _read_dmi("product_name", dmi_dir)
    if not codename:
        codename = _read_dmi("product_family", dmi_dir)

    identity = DeviceIdentity(model=model, codename=codename)
    log.debug("Device identity: %s", identity)
    return identity
