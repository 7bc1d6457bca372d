"""SQLite storage of sensor readings and a rolling buffer that follows the table."""

from __future__ import annotations

import sqlite3
import sys
import time
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

_FIELDS = ("timestamp", "temperature", "humidity", "illuminance")

_CREATE_TABLE_SQL = (
    "CREATE TABLE IF NOT EXISTS sensor_readings ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT,"
    "timestamp DATETIME NOT NULL,"
    "temperature FLOAT NOT NULL,"
    "humidity FLOAT NOT NULL,"
    "illuminance FLOAT NOT NULL);"
)

_INSERT_SQL = (
    "INSERT INTO sensor_readings (timestamp, temperature, humidity, illuminance) "
    "VALUES (?, ?, ?, ?)"
)

_LATEST_SQL = "SELECT strftime('%s', MAX(timestamp)) FROM sensor_readings"

_INITIAL_SQL = (
    "SELECT strftime('%s', timestamp) AS ts, temperature, humidity, illuminance "
    "FROM sensor_readings ORDER BY timestamp DESC LIMIT ?"
)

_NEWER_SQL = (
    "SELECT strftime('%s', timestamp) AS ts, temperature, humidity, illuminance "
    "FROM sensor_readings WHERE timestamp > datetime(?, 'unixepoch') "
    "ORDER BY timestamp ASC"
)


@dataclass(frozen=True)
class SensorReading:
    """One row of the readings table; the timestamp is in epoch seconds."""

    timestamp: float
    temperature: float
    humidity: float
    illuminance: float


def open_writer(path) -> sqlite3.Connection:
    """Open (creating if needed) a writable database with the readings table."""
    path = Path(path)
    with open(path, "a+b"):
        pass
    conn = sqlite3.connect(path, check_same_thread=False)
    for pragma, label in (
        ("PRAGMA journal_mode=WAL", "WAL mode"),
        ("PRAGMA synchronous=NORMAL", "synchronous mode"),
    ):
        try:
            conn.execute(pragma)
        except sqlite3.Error as exc:
            print(f"Failed to set {label}: {exc}", file=sys.stderr)
    try:
        create_schema(conn)
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def open_reader(path) -> sqlite3.Connection:
    """Open an existing database read-only."""
    uri = Path(path).resolve().as_uri() + "?mode=ro"
    return sqlite3.connect(uri, uri=True, check_same_thread=False)


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the readings table if it does not exist."""
    conn.execute(_CREATE_TABLE_SQL)
    conn.commit()


def insert_reading(conn, timestamp, temperature, humidity, illuminance) -> None:
    """Store one reading, with measurements rounded to two decimals."""
    conn.execute(
        _INSERT_SQL,
        (timestamp, round(temperature, 2), round(humidity, 2), round(illuminance, 2)),
    )
    conn.commit()


def table_exists(conn: sqlite3.Connection) -> bool:
    """Whether the readings table is present."""
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='sensor_readings'"
    ).fetchone()
    return row is not None


def count_rows(conn: sqlite3.Connection) -> int:
    """Number of stored readings."""
    return conn.execute("SELECT COUNT(*) FROM sensor_readings").fetchone()[0]


def latest_timestamp(conn: sqlite3.Connection) -> float:
    """Epoch seconds of the newest reading, or 0.0 if there is none."""
    row = conn.execute(_LATEST_SQL).fetchone()
    if row is None or row[0] is None:
        return 0.0
    return float(row[0])


def _to_reading(row) -> SensorReading:
    ts = float(row[0]) if row[0] is not None else 0.0
    return SensorReading(ts, float(row[1]), float(row[2]), float(row[3]))


class ReadingBuffer:
    """The most recent readings of the table, kept up to date by ``refresh``.

    ``chronological_initial`` puts the first load in ascending time order;
    otherwise it stays newest first, as fetched. ``stop_when_full`` stops
    accepting new readings once the buffer is full instead of dropping the
    oldest. ``log_new`` prints a line for every appended reading.
    """

    def __init__(
        self,
        capacity,
        *,
        chronological_initial=True,
        stop_when_full=False,
        log_new=False,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._chronological = chronological_initial
        self._stop_when_full = stop_when_full
        self._log_new = log_new
        self._readings: deque[SensorReading] = deque(maxlen=capacity)
        self.last_timestamp = 0.0

    def refresh(self, conn: sqlite3.Connection) -> int:
        """Fetch readings newer than the last one seen; return how many were added."""
        try:
            latest = latest_timestamp(conn)
        except sqlite3.Error:
            latest = 0.0
        if latest <= self.last_timestamp:
            return 0
        if self._readings:
            return self._append_newer(conn)
        return self._initial_load(conn)

    def _initial_load(self, conn) -> int:
        try:
            rows = conn.execute(_INITIAL_SQL, (self.capacity,)).fetchall()
        except sqlite3.Error as exc:
            print(f"Failed to prepare statement: {exc}", file=sys.stderr)
            return 0
        loaded = [_to_reading(row) for row in rows]
        if self._chronological:
            loaded.reverse()
            self.last_timestamp = max(
                [self.last_timestamp, *(r.timestamp for r in loaded)]
            )
        elif loaded:
            self.last_timestamp = loaded[-1].timestamp
        self._readings.extend(loaded)
        print(f"Initial load: {len(loaded)} readings.")
        return len(loaded)

    def _append_newer(self, conn) -> int:
        try:
            cursor = conn.execute(_NEWER_SQL, (self.last_timestamp,))
        except sqlite3.Error as exc:
            print(f"Failed to prepare statement: {exc}", file=sys.stderr)
            return 0
        added = 0
        for row in cursor:
            if self._stop_when_full and len(self._readings) >= self.capacity:
                print(
                    "Error during query execution: unread rows remain",
                    file=sys.stderr,
                )
                break
            reading = _to_reading(row)
            if reading.timestamp <= self.last_timestamp:
                continue
            self._readings.append(reading)
            added += 1
            if self._log_new:
                clock = time.strftime("%H:%M:%S", time.localtime(int(reading.timestamp)))
                print(
                    f"[{clock}] New reading: {reading.temperature:.1f}°C, "
                    f"{reading.humidity:.1f}%, {reading.illuminance:.0f} lux"
                )
            if self._stop_when_full:
                self.last_timestamp = reading.timestamp
        cursor.close()
        if added:
            print(f"Added {added} new readings. Total: {len(self._readings)}")
        if not self._stop_when_full and self._readings:
            self.last_timestamp = self._readings[-1].timestamp
        return added

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[SensorReading]:
        return iter(self._readings)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return list(self._readings)[index]
        return self._readings[index]

    def values(self, field: str) -> list[float]:
        """The given field of every buffered reading, in buffer order."""
        if field not in _FIELDS:
            raise ValueError(f"unknown field: {field!r}")
        return [getattr(reading, field) for reading in self._readings]