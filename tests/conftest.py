from typing import Dict, List, Optional

import pytest

from livebattery.core.reader import SysfsReader


class FakeReader(SysfsReader):
    """In-memory stand-in for sysfs and su."""

    def __init__(self, plain: Optional[Dict[str, str]] = None,
                 privileged: Optional[Dict[str, str]] = None,
                 privileged_first: bool = True):
        self.plain = plain or {}
        self.privileged = privileged or {}
        self.privileged_first = privileged_first
        self.calls: List[tuple] = []

    def try_privileged_read(self, path):
        self.calls.append(("su", path))
        return self.privileged.get(path)

    def try_plain_read(self, path):
        self.calls.append(("plain", path))
        return self.plain.get(path)


@pytest.fixture
def fake_reader():
    return FakeReader()


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
