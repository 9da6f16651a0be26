"""Source resolver - reads hardware counters from candidate sysfs paths.

Each candidate is tried with an elevated read (``su -c cat``) and with a
plain file read. The first candidate that yields a number wins; every
failure along the way is logged at DEBUG and skipped.
"""

import logging
import math
import shlex
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence

log = logging.getLogger(__name__)

# Hardware exposes micro-units (uA, uAh); we want milli-units.
MICRO_TO_MILLI = 1000.0
# Temperature nodes report tenths of a degree.
TENTHS = 10.0

DEFAULT_PRIVILEGED_COMMAND = ("su", "-c")
DEFAULT_PRIVILEGED_TIMEOUT = 2.0


def first_line(text: Optional[str]) -> Optional[str]:
    """Return the stripped first line of ``text``, or None if it is blank."""
    lines = text.splitlines() if text else []
    if not lines:
        return None
    return lines[0].strip() or None


def parse_reading(line: Optional[str]) -> Optional[float]:
    """Parse a counter value; non-numeric and non-finite values are rejected."""
    if line is None:
        return None
    # float() would take digit separators such as "1_000"
    if "_" in line:
        log.debug("Non-numeric counter value: %r", line)
        return None
    try:
        value = float(line.strip())
    except ValueError:
        log.debug("Non-numeric counter value: %r", line)
        return None
    if not math.isfinite(value):
        log.debug("Non-finite counter value: %r", line)
        return None
    return value


class SysfsReader(ABC):
    """Two-tier access to a sysfs node: elevated, then what we already have."""

    privileged_first: bool = True

    @abstractmethod
    def try_privileged_read(self, path: str) -> Optional[str]:
        """Return the first output line of an elevated read, or None."""
        ...

    @abstractmethod
    def try_plain_read(self, path: str) -> Optional[str]:
        """Return the first line of a direct read, or None."""
        ...

    def read_value(self, path: str) -> Optional[float]:
        """Read and parse one candidate path.

        The second access method is only used when the first one did not
        produce a usable number.
        """
        if self.privileged_first:
            attempts = (self.try_privileged_read, self.try_plain_read)
        else:
            attempts = (self.try_plain_read, self.try_privileged_read)

        for attempt in attempts:
            value = parse_reading(attempt(path))
            if value is not None:
                return value
        return None


class SystemSysfsReader(SysfsReader):
    """Reads the real filesystem, escalating through ``su`` when allowed."""

    def __init__(self, privileged: bool = True,
                 command: Sequence[str] = DEFAULT_PRIVILEGED_COMMAND,
                 timeout: float = DEFAULT_PRIVILEGED_TIMEOUT,
                 privileged_first: bool = True):
        self.privileged = privileged
        self.command = tuple(command)
        self.timeout = timeout
        self.privileged_first = privileged_first

    def _can_escalate(self) -> bool:
        if not self.privileged or not self.command:
            return False
        return shutil.which(self.command[0]) is not None

    def try_privileged_read(self, path: str) -> Optional[str]:
        if not self._can_escalate():
            return None

        argv = list(self.command) + ["cat " + shlex.quote(path)]
        try:
            result = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            log.debug("Privileged read of %s timed out after %.1fs", path, self.timeout)
            return None
        except (OSError, subprocess.SubprocessError) as e:
            log.debug("Privileged read of %s failed: %s", path, e)
            return None

        return first_line(result.stdout)

    def try_plain_read(self, path: str) -> Optional[str]:
        try:
            with open(path, "r") as f:
                return first_line(f.readline())
        except (OSError, UnicodeDecodeError) as e:
            log.debug("Plain read of %s failed: %s", path, e)
            return None


def resolve(candidates: Iterable[str], scale: float,
            reader: SysfsReader) -> Optional[float]:
    """Return the first readable candidate's value divided by ``scale``.

    Candidates are tried in the given order. Returns None only if every
    candidate fails.
    """
    for path in candidates:
        try:
            value = reader.read_value(path)
        except Exception:
            log.exception("Reader %r raised for %s", reader, path)
            continue
        if value is not None:
            return value / scale
    return None
