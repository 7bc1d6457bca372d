"""Writes simulated sensor readings to the database at a fixed interval."""

from __future__ import annotations

import argparse
import random
import sqlite3
import sys
import time
from contextlib import closing
from datetime import datetime

from sensorview.storage import insert_reading, open_writer

DEFAULT_DATABASE = "sensor_data.db"
DEFAULT_INTERVAL = 10.0


def random_reading(rng=None) -> tuple[float, float, float]:
    """A (temperature, humidity, illuminance) triple around typical indoor values."""
    rng = rng or random.Random()
    temperature = 20.0 + rng.uniform(-5.0, 5.0)
    humidity = 50.0 + rng.uniform(-10.0, 10.0)
    illuminance = 500.0 + rng.uniform(-200.0, 200.0)
    return temperature, humidity, illuminance


def current_timestamp(now=None) -> str:
    """Local time formatted as the database stores it."""
    now = now or datetime.now()
    return now.strftime("%Y-%m-%d %H:%M:%S")


def format_record(timestamp, temperature, humidity, illuminance) -> str:
    """The line printed for each stored reading."""
    return (
        f"Data recorded: {timestamp} - Temp: {temperature:.1f}°C, "
        f"Hum: {humidity:.1f}%, Lux: {illuminance:.0f}"
    )


def run(path=DEFAULT_DATABASE, interval=DEFAULT_INTERVAL, iterations=None, rng=None) -> int:
    """Record readings until ``iterations`` is reached (forever if None).

    Returns the number of readings stored.
    """
    rng = rng or random.Random()
    recorded = 0
    with closing(open_writer(path)) as conn:
        print("Starting sensor data simulation...")
        print("Press Ctrl+C to stop")
        done = 0
        while iterations is None or done < iterations:
            timestamp = current_timestamp()
            temperature, humidity, illuminance = random_reading(rng)
            try:
                insert_reading(conn, timestamp, temperature, humidity, illuminance)
            except sqlite3.Error as exc:
                print(f"SQL error: {exc}", file=sys.stderr)
            else:
                recorded += 1
                print(format_record(timestamp, temperature, humidity, illuminance))
            done += 1
            if iterations is None or done < iterations:
                time.sleep(interval)
    return recorded


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Simulate a sensor writing to SQLite.")
    parser.add_argument("--db", default=DEFAULT_DATABASE, help="database file")
    parser.add_argument(
        "--interval", type=float, default=DEFAULT_INTERVAL, help="seconds between readings"
    )
    parser.add_argument("--count", type=int, default=None, help="stop after this many readings")
    args = parser.parse_args(argv)
    try:
        run(args.db, args.interval, args.count)
    except OSError as exc:
        print(f"Failed to create/open database file: {exc}", file=sys.stderr)
        return 1
    except sqlite3.Error as exc:
        print(f"Can't open database: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())