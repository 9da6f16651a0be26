#!/usr/bin/env python3
"""Command-line interface for the live battery estimator."""

import sys
import json
import time
import logging
import argparse

from livebattery.config import load_config
from livebattery.monitor import create_monitor


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="livebattery",
        description="Live battery current, time remaining and temperature",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  %(prog)s              Show time remaining, current, percent and temperature
  %(prog)s --json       Output as JSON (for scripts/waybar)
  %(prog)s --watch      Continuously monitor battery
  %(prog)s --no-root    Never try su for sysfs reads
""",
    )
    parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    parser.add_argument("--watch", "-w", action="store_true", help="Continuously monitor battery")
    parser.add_argument(
        "--interval", "-i", type=int, default=15, help="Watch interval in seconds (default: 15)"
    )
    parser.add_argument("--no-root", action="store_true", help="Disable privileged (su) reads")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log source probing")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    monitor = create_monitor(load_config(), privileged=False if args.no_root else None)

    def print_status():
        sample = monitor.sample()
        if args.json:
            print(json.dumps(sample.to_dict(), ensure_ascii=False))
        else:
            for line in sample.fields.lines():
                print(line)

    try:
        if args.watch:
            print(f"Monitoring battery (every {args.interval}s, Ctrl+C to stop)...\n")
            try:
                while True:
                    print_status()
                    print()
                    time.sleep(args.interval)
            except KeyboardInterrupt:
                print("\nStopped.")
        else:
            print_status()
    finally:
        monitor.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
