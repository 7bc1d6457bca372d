"""Live graphs of the most recent readings on fixed axes."""

from __future__ import annotations

import argparse
import sqlite3
import sys
import time
from contextlib import closing
from pathlib import Path
from typing import Sequence

import pygame

from sensorview.analysis import Y_DIVISIONS, format_kst_time, y_axis_labels
from sensorview.storage import ReadingBuffer, SensorReading, count_rows, table_exists

DEFAULT_DATABASE = "sensor_data.db"

MAX_READINGS = 100
WINDOW_WIDTH = 1000
WINDOW_HEIGHT = 800
GRAPH_HEIGHT = 220
GRAPH_MARGIN = 20
GRAPH_LEFT_MARGIN = 30
GRAPH_TOP_MARGIN = 80
GRAPH_BOTTOM_MARGIN = 60
TITLE_OFFSET = 25
Y_LABEL_WIDTH = 20
TARGET_FPS = 60
RELOAD_SECONDS = 1.0

RAYWHITE = (245, 245, 245)
LIGHTGRAY = (200, 200, 200)
GRAY = (130, 130, 130)
DARKGRAY = (80, 80, 80)
RED = (230, 41, 55)
BLUE = (0, 121, 241)
DARKGREEN = (0, 117, 44)
MAROON = (190, 33, 55)
GOLD = (255, 203, 0)
LIME = (0, 158, 47)
PANEL = (240, 240, 240)

_GRAPHS = (
    ("temperature", 15.0, 35.0, RED, "Temperature (°C)"),
    ("humidity", 20.0, 80.0, BLUE, "Humidity (%)"),
    ("illuminance", 0.0, 1000.0, DARKGREEN, "Illuminance (lux)"),
)


def _fade(color, alpha, background=RAYWHITE):
    """The colour seen when ``color`` at ``alpha`` covers ``background``."""
    return tuple(round(b + (c - b) * alpha) for c, b in zip(color, background))


def _blit(surface, font, text, position, color):
    image = font.render(text, True, color)
    surface.blit(image, (round(position[0]), round(position[1])))


def graph_rect(graph_index: int) -> tuple[float, float, float, float]:
    """(x, y, width, height) of the plotting box of the given graph."""
    x = float(GRAPH_LEFT_MARGIN + Y_LABEL_WIDTH)
    y = float(GRAPH_TOP_MARGIN + graph_index * (GRAPH_HEIGHT + GRAPH_MARGIN))
    width = float(WINDOW_WIDTH - GRAPH_LEFT_MARGIN - GRAPH_MARGIN - Y_LABEL_WIDTH)
    height = float(GRAPH_HEIGHT - GRAPH_BOTTOM_MARGIN)
    return x, y, width, height


def point_positions(
    values: Sequence[float], rect, min_val: float, max_val: float
) -> list[tuple[float, float]]:
    """Screen positions of the values, clamped to the inside of the box."""
    if len(values) < 2:
        raise ValueError("at least two values are required")
    if max_val == min_val:
        raise ValueError("the axis range must not be empty")
    gx, gy, gw, gh = rect
    x_scale = (gw - 20) / (len(values) - 1)
    y_scale = (gh - 20) / (max_val - min_val)
    top, bottom = gy + 10, gy + gh - 10
    return [
        (gx + 10 + i * x_scale, min(max(bottom - (value - min_val) * y_scale, top), bottom))
        for i, value in enumerate(values)
    ]


def latest_text(reading: SensorReading) -> str:
    """The line that shows the newest reading."""
    return (
        f"Latest: Temp: {reading.temperature:.1f}°C, "
        f"Hum: {reading.humidity:.1f}%, Lux: {reading.illuminance:.0f}"
    )


def draw_graph(surface, font, values, timestamps, graph_index, min_val, max_val, color, title):
    """Draw one graph with its grid, axis labels and time labels."""
    rect = graph_rect(graph_index)
    gx, gy, gw, gh = rect
    _blit(surface, font, title, (gx + 5, gy - TITLE_OFFSET), color)

    box = pygame.Rect(round(gx), round(gy), round(gw), round(gh))
    pygame.draw.rect(surface, PANEL, box)
    pygame.draw.rect(surface, LIGHTGRAY, box, 1)

    if len(values) < 2:
        _blit(surface, font, "Not enough data points", (gx + 20, gy + 40), GRAY)
        return

    grid = _fade(LIGHTGRAY, 0.5, PANEL)
    for i, label in enumerate(y_axis_labels(min_val, max_val)):
        y = gy + 10 + (gh - 30) * (i / Y_DIVISIONS)
        pygame.draw.line(surface, grid, (gx + 10, y), (gx + gw - 10, y))
        text_width = font.size(label)[0]
        _blit(surface, font, label, (GRAPH_LEFT_MARGIN + Y_LABEL_WIDTH - text_width - 5, y - 8), DARKGRAY)

    count = len(values)
    label_y = gy + gh + 5
    first = format_kst_time(timestamps[0])
    _blit(surface, font, first, (gx + 5, label_y), DARKGRAY)
    last = format_kst_time(timestamps[count - 1])
    _blit(surface, font, last, (gx + gw - font.size(last)[0] - 5, label_y), DARKGRAY)
    if count > 2:
        middle = format_kst_time(timestamps[count // 2])
        _blit(surface, font, middle, (gx + (gw - font.size(middle)[0]) / 2, label_y), DARKGRAY)

    points = point_positions(values, rect, min_val, max_val)
    for start, end in zip(points, points[1:]):
        pygame.draw.line(surface, color, start, end, 2)
        pygame.draw.circle(surface, color, start, 2)
    pygame.draw.circle(surface, color, points[-1], 2)


def _should_close() -> bool:
    close = False
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            close = True
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            close = True
    return close


def _open_read_write(path) -> sqlite3.Connection:
    uri = Path(path).resolve().as_uri() + "?mode=rw"
    return sqlite3.connect(uri, uri=True, check_same_thread=False)


def _run_window(conn: sqlite3.Connection) -> None:
    buffer = ReadingBuffer(MAX_READINGS, chronological_initial=False, log_new=True)
    pygame.init()
    try:
        screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("Sensor Data Visualizer")
        clock = pygame.time.Clock()
        graph_font = pygame.font.Font(None, 16)
        info_font = pygame.font.Font(None, 18)
        fps_font = pygame.font.Font(None, 20)

        buffer.refresh(conn)
        start = time.monotonic()
        last_update = 0.0
        while not _should_close():
            now = time.monotonic() - start
            if now - last_update >= RELOAD_SECONDS:
                buffer.refresh(conn)
                last_update = now

            screen.fill(RAYWHITE)
            if len(buffer):
                timestamps = buffer.values("timestamp")
                for index, (field, low, high, color, title) in enumerate(_GRAPHS):
                    draw_graph(screen, graph_font, buffer.values(field), timestamps,
                               index, low, high, color, title)
            _blit(screen, fps_font, f"{round(clock.get_fps())} FPS", (WINDOW_WIDTH - 100, 10), LIME)
            if len(buffer):
                _blit(screen, info_font, latest_text(buffer[-1]), (10, 10), DARKGRAY)
            pygame.display.flip()
            clock.tick(TARGET_FPS)
    finally:
        pygame.quit()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Show live graphs of recorded sensor readings.")
    parser.add_argument("--db", default=DEFAULT_DATABASE, help="database file")
    args = parser.parse_args(argv)

    print("Attempting to open database...")
    try:
        conn = _open_read_write(args.db)
    except sqlite3.Error as exc:
        print(f"Can't open database: {exc}", file=sys.stderr)
        return 1

    with closing(conn):
        print("Database opened successfully.")
        try:
            exists = table_exists(conn)
        except sqlite3.Error as exc:
            print(f"Failed to prepare table check statement: {exc}", file=sys.stderr)
            return 1
        if not exists:
            print("sensor_readings table not found. Please run the simulator first.", file=sys.stderr)
            return 1
        print("sensor_readings table found.")

        try:
            rows = count_rows(conn)
        except sqlite3.Error as exc:
            print(f"Failed to count rows: {exc}", file=sys.stderr)
            return 1
        print(f"Found {rows} rows in sensor_readings table.")

        try:
            conn.execute("PRAGMA journal_mode=WAL")
        except sqlite3.Error as exc:
            print(f"Failed to set WAL mode: {exc}", file=sys.stderr)

        _run_window(conn)
    return 0


if __name__ == "__main__":
    sys.exit(main())