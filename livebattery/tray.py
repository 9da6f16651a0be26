#!/usr/bin/env python3
"""System tray widget showing live battery time, current and temperature."""

import sys
import logging
import argparse
import threading
from typing import Optional

from PyQt5.QtWidgets import QApplication, QSystemTrayIcon, QMenu, QAction
from PyQt5.QtGui import QIcon, QPainter, QColor, QFont, QPixmap, QPen
from PyQt5.QtCore import QTimer, Qt, QRectF, pyqtSignal

from livebattery.autostart import install_autostart, remove_autostart
from livebattery.config import Config
from livebattery.core.types import Sample
from livebattery.monitor import create_monitor
from livebattery.notification import build_notification, send_notification

log = logging.getLogger(__name__)

CHANGE_SETTLE_MS = 2000


class BatteryTrayIcon(QSystemTrayIcon):
    """Tray icon whose tooltip and menu carry the two-line battery summary."""

    # Emitted from the worker thread; Qt queues it onto the GUI thread.
    sampled = pyqtSignal(object)
    # Emitted from source watcher threads.
    battery_changed = pyqtSignal()

    def __init__(self):
        super().__init__()

        self._config = Config()
        self._monitor = create_monitor(self._config.data)
        self._sample: Optional[Sample] = None

        # Only one sample in flight; overlapping ticks are dropped
        self._busy = threading.Lock()

        self.sampled.connect(self._on_sampled)
        self.battery_changed.connect(self._on_battery_changed)

        # --- Context menu (built dynamically) ---
        self._menu = QMenu()
        self.setContextMenu(self._menu)
        self._rebuild_menu()

        # --- Periodic sampling ---
        interval_ms = int(self._config.polling.get("interval_seconds", 15)) * 1000
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._request_sample)
        self._timer.start(interval_ms)

        # udev fires several events per change; sample once they settle
        self._change_timer = QTimer(self)
        self._change_timer.setSingleShot(True)
        self._change_timer.setInterval(CHANGE_SETTLE_MS)
        self._change_timer.timeout.connect(self._request_sample)

        for source in self._monitor.sources:
            if source.supports_hotplug():
                source.start_watching(self.battery_changed.emit)

        self.setIcon(self._create_icon(None))
        self.setToolTip("Battery\nReading...")
        self._request_sample()
        self.show()

    # ---- Sampling ----------------------------------------------------------

    def _request_sample(self):
        if not self._busy.acquire(blocking=False):
            log.debug("Previous sample still running, skipping tick")
            return
        threading.Thread(target=self._sample_in_background, daemon=True).start()

    def _sample_in_background(self):
        try:
            self.sampled.emit(self._monitor.sample())
        except Exception:
            log.exception("Battery sample failed")
        finally:
            self._busy.release()

    def _on_battery_changed(self):
        # Restarting the timer folds a burst of events into one sample
        self._change_timer.start()

    def _on_sampled(self, sample: Sample):
        self._sample = sample
        point_size = int(self._config.tray.get("font_point_size", 10))
        notification = build_notification(sample.fields, point_size)

        percent = int(sample.metrics.percent_remaining * 100)
        self.setIcon(self._create_icon(
            percent, show_text=self._config.tray.get("show_percentage_text", True)))
        self.setToolTip(notification.html)
        self._rebuild_menu()

        notif_cfg = self._config.notifications
        if notif_cfg.get("enabled", False):
            send_notification(notification, urgency=notif_cfg.get("urgency", "low"))

    # ---- Menu building -----------------------------------------------------

    def _rebuild_menu(self):
        self._menu.clear()

        if self._sample is None:
            lines = ["Reading battery..."]
        else:
            lines = self._sample.fields.lines()
        for line in lines:
            action = QAction(line, self._menu)
            action.setEnabled(False)
            self._menu.addAction(action)

        self._menu.addSeparator()

        refresh_action = QAction("Refresh Now", self._menu)
        refresh_action.triggered.connect(self._request_sample)
        self._menu.addAction(refresh_action)

        self._menu.addSeparator()

        quit_action = QAction("Quit", self._menu)
        quit_action.triggered.connect(QApplication.quit)
        self._menu.addAction(quit_action)

    # ---- Icon rendering ----------------------------------------------------

    @staticmethod
    def _create_icon(percent, show_text=True):
        """Battery outline filled to ``percent``, with the number on top."""
        size = 64
        pixmap = QPixmap(size, size)
        pixmap.fill(Qt.transparent)

        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.Antialiasing)

        if percent is None:
            fill_color = QColor(80, 80, 80)
            percent_for_fill = 0
        elif percent <= 10:
            fill_color = QColor(255, 60, 60)
            percent_for_fill = percent
        elif percent <= 25:
            t = (percent - 10) / 15
            fill_color = QColor(255, int(60 + 120 * t), 60)
            percent_for_fill = percent
        elif percent <= 50:
            t = (percent - 25) / 25
            fill_color = QColor(255, int(180 + 75 * t), 60)
            percent_for_fill = percent
        else:
            fill_color = QColor(80, 200, 80)
            percent_for_fill = percent

        body = QRectF(6, 14, 48, 36)

        # Fill bar, left to right
        if percent_for_fill > 0:
            fill_width = (min(percent_for_fill, 100) / 100.0) * (body.width() - 6)
            painter.setPen(Qt.NoPen)
            painter.setBrush(fill_color)
            painter.drawRect(QRectF(body.left() + 3, body.top() + 3, fill_width, body.height() - 6))

        # Outline and terminal
        painter.setPen(QPen(QColor(200, 200, 200), 3))
        painter.setBrush(Qt.NoBrush)
        painter.drawRoundedRect(body, 4, 4)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(200, 200, 200))
        painter.drawRect(QRectF(body.right() + 1, 24, 5, 16))

        # Text
        painter.setPen(QColor(255, 255, 255))
        if percent is None:
            painter.setFont(QFont("Sans", 16, QFont.Bold))
            painter.drawText(body, Qt.AlignCenter, "?")
        elif show_text:
            text = str(percent)
            font_size = 18 if len(text) <= 2 else 14
            painter.setFont(QFont("Sans", font_size, QFont.Bold))
            painter.drawText(body, Qt.AlignCenter, text)

        painter.end()
        return QIcon(pixmap)

    def close(self):
        self._timer.stop()
        self._change_timer.stop()
        self._monitor.close()


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="livebattery-tray",
        description="System tray indicator for live battery time, current and temperature",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--install-autostart", action="store_true",
                       help="Start the tray with the desktop session, then exit")
    group.add_argument("--remove-autostart", action="store_true",
                       help="Stop starting the tray with the desktop session, then exit")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if args.install_autostart:
        try:
            path = install_autostart()
        except OSError as e:
            print(f"Error: could not write autostart entry: {e}", file=sys.stderr)
            return 1
        print(f"Autostart enabled: {path}")
        return 0
    if args.remove_autostart:
        if remove_autostart():
            print("Autostart disabled")
        else:
            print("Autostart was not enabled")
        return 0

    app = QApplication(sys.argv[:1])
    app.setQuitOnLastWindowClosed(False)
    app.setApplicationName("livebattery")

    if not QSystemTrayIcon.isSystemTrayAvailable():
        print("Error: System tray is not available on this desktop environment.")
        return 1

    tray = BatteryTrayIcon()
    app.aboutToQuit.connect(tray.close)
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
