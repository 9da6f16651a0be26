"""Battery monitor - wires snapshot sources into the estimation engine."""

import logging
from typing import Iterable, List, Optional

from livebattery import config as cfg
from livebattery.core.estimator import Estimator
from livebattery.core.presenter import Presenter
from livebattery.core.profiles import DeviceProfileTable
from livebattery.core.reader import SystemSysfsReader
from livebattery.core.types import BatterySnapshot, CandidatePaths, Sample
from livebattery.identity import detect_identity
from livebattery.sources.base import SnapshotSource
from livebattery.sources.sysfs import SysfsSource
from livebattery.sources.upower import UPowerSource

log = logging.getLogger(__name__)


class BatteryMonitor:
    """Computes one Sample per call from the best available snapshot.

    Holds no state between calls beyond its configuration, so it can be
    used from a worker thread.
    """

    def __init__(self, estimator: Estimator, presenter: Optional[Presenter] = None,
                 sources: Iterable[SnapshotSource] = ()):
        self.estimator = estimator
        self.presenter = presenter or Presenter()
        self._sources: List[SnapshotSource] = sorted(sources, key=lambda s: s.priority)

    @property
    def sources(self) -> List[SnapshotSource]:
        return list(self._sources)

    def read_snapshot(self) -> BatterySnapshot:
        """Return the first snapshot a source can give, or an empty one."""
        for source in self._sources:
            try:
                snapshot = source.read_snapshot()
            except Exception:
                log.exception("Snapshot read failed for source %s", source.name)
                continue
            if snapshot is not None:
                return snapshot
        log.debug("No snapshot source available")
        return BatterySnapshot()

    def sample(self, snapshot: Optional[BatterySnapshot] = None) -> Sample:
        if snapshot is None:
            snapshot = self.read_snapshot()
        metrics = self.estimator.estimate(snapshot)
        return Sample(snapshot=snapshot, metrics=metrics,
                      fields=self.presenter.render(metrics))

    def close(self) -> None:
        """Stop watching and clean up all sources."""
        for source in self._sources:
            try:
                source.stop_watching()
                source.close()
            except Exception:
                log.debug("Failed to close source %s", source.name)


def create_monitor(config: dict, privileged: Optional[bool] = None) -> BatteryMonitor:
    """Create a BatteryMonitor with everything the config enables.

    ``privileged`` overrides ``privileged_read.enabled`` when given.
    """
    priv_cfg = cfg.get(config, "privileged_read", {})
    if privileged is None:
        privileged = priv_cfg.get("enabled", True)
    reader = SystemSysfsReader(
        privileged=privileged,
        command=priv_cfg.get("command", ["su", "-c"]),
        timeout=float(priv_cfg.get("timeout_seconds", 2.0)),
        privileged_first=priv_cfg.get("first", True),
    )

    identity = detect_identity(
        model=cfg.get(config, "device.model", "") or "",
        codename=cfg.get(config, "device.codename", "") or "",
    )

    profiles = DeviceProfileTable().with_overrides(
        cfg.get(config, "device_profiles", {}) or {},
        generic_capacity_mah=float(cfg.get(config, "generic_capacity_mah", 4000.0)),
    )

    paths = CandidatePaths().with_extra(
        current_now=cfg.get(config, "paths.current_now", []) or [],
        charge_full_design=cfg.get(config, "paths.charge_full_design", []) or [],
        temp=cfg.get(config, "paths.temp", []) or [],
    )

    sources: List[SnapshotSource] = []
    if cfg.get(config, "sources.upower", True):
        sources.append(UPowerSource())
    if cfg.get(config, "sources.sysfs", True):
        sources.append(SysfsSource())

    estimator = Estimator(reader, identity=identity, profiles=profiles, paths=paths)
    return BatteryMonitor(estimator, Presenter(), sources)
