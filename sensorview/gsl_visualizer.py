"""Live graphs with automatic axes, statistics, a moving average and a mean line."""

from __future__ import annotations

import argparse
import sqlite3
import sys
from contextlib import closing
from typing import Optional, Sequence

import pygame

from sensorview.analysis import (
    Y_DIVISIONS,
    Statistics,
    axis_ranges,
    compute_statistics,
    format_kst_time,
    format_statistics,
    moving_average,
    y_axis_labels,
)
from sensorview.storage import ReadingBuffer, open_reader
from sensorview.visualizer import (
    BLUE,
    DARKGRAY,
    DARKGREEN,
    GOLD,
    GRAY,
    LIGHTGRAY,
    LIME,
    MAROON,
    RAYWHITE,
    RED,
)

DEFAULT_DATABASE = "sensor_data.db"

MAX_READINGS = 500
WINDOW_WIDTH = 1200
WINDOW_HEIGHT = 900
GRAPH_HEIGHT = 250
GRAPH_MARGIN = 30
GRAPH_LEFT_MARGIN = 30
GRAPH_TOP_MARGIN = 80
GRAPH_BOTTOM_MARGIN = 60
TITLE_OFFSET = 25
Y_LABEL_WIDTH = 20
TARGET_FPS = 30
STATS_WIDTH = 200
STATS_HEIGHT = 80
FONT_SIZES = (12, 14, 20, 24)

_TITLE = "SENSOR DATA VISUALIZATION WITH GSL ANALYSIS"


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


def _y_scale(rect, min_val, max_val) -> float:
    if max_val == min_val:
        raise ValueError("the axis range must not be empty")
    return (rect[3] - 20) / (max_val - min_val)


def data_points(
    values: Sequence[Optional[float]], rect, min_val: float, max_val: float
) -> list[Optional[tuple[float, float]]]:
    """Screen positions of the values; a None value has no position."""
    if len(values) < 2:
        raise ValueError("at least two values are required")
    gx, gy, gw, _ = rect
    x_scale = (gw - 20) / (len(values) - 1)
    y_scale = _y_scale(rect, min_val, max_val)
    return [
        None if value is None else (gx + 10 + i * x_scale, gy + 10 + (max_val - value) * y_scale)
        for i, value in enumerate(values)
    ]


def draw_statistics(surface, font, x, y, stats: Statistics, color) -> None:
    """Draw the box with mean, median, standard deviation and extremes."""
    box = pygame.Rect(round(x), round(y), STATS_WIDTH, STATS_HEIGHT)
    pygame.draw.rect(surface, _fade(LIGHTGRAY, 0.7), box)
    pygame.draw.rect(surface, _fade(color, 0.5), box, 1)
    mean, median, sd, extremes = format_statistics(stats)
    _blit(surface, font, mean, (x + 5, y + 5), color)
    _blit(surface, font, median, (x + 5, y + 25), color)
    _blit(surface, font, sd, (x + 5, y + 45), color)
    _blit(surface, font, extremes, (x + 100, y + 5), color)


def draw_graph(surface, fonts, title, values, timestamps, graph_index, min_val, max_val, color) -> None:
    """Draw one graph; ``fonts`` maps the font sizes 12, 14 and 20 to fonts."""
    if len(values) < 2:
        return
    rect = graph_rect(graph_index)
    gx, gy, gw, gh = rect

    _blit(surface, fonts[20], title, (gx + 5, gy - TITLE_OFFSET), color)
    box = pygame.Rect(round(gx), round(gy), round(gw), round(gh))
    pygame.draw.rect(surface, _fade(RAYWHITE, 0.8), box)
    pygame.draw.rect(surface, _fade(color, 0.3), box, 1)

    label_font = fonts[12]
    grid = _fade(LIGHTGRAY, 0.5)
    for i, label in enumerate(y_axis_labels(min_val, max_val)):
        y = gy + 10 + (gh - 30) * (i / Y_DIVISIONS)
        pygame.draw.line(surface, grid, (gx + 10, y), (gx + gw - 10, y))
        _blit(surface, label_font, label, (gx - label_font.size(label)[0] - 5, y - 6), DARKGRAY)

    stats = compute_statistics(values)
    draw_statistics(surface, fonts[14], gx + gw - 210, gy + 10, stats, color)

    if max_val != min_val:
        points = data_points(values, rect, min_val, max_val)
        averages = data_points(moving_average(values), rect, min_val, max_val)
        point_color = _fade(color, 0.7)
        line_color = _fade(color, 0.3)
        average_color = _fade(MAROON, 0.8)
        previous = previous_average = None
        for point, average in zip(points, averages):
            pygame.draw.circle(surface, point_color, point, 2)
            if previous is not None:
                pygame.draw.line(surface, line_color, previous, point)
            if average is not None:
                if previous_average is not None:
                    pygame.draw.line(surface, average_color, previous_average, average)
                previous_average = average
            previous = point

        mean_y = gy + 10 + (max_val - stats.mean) * _y_scale(rect, min_val, max_val)
        pygame.draw.line(surface, _fade(GOLD, 0.7), (gx + 10, mean_y), (gx + gw - 10, mean_y))

    label_y = gy + gh + 5
    _blit(surface, label_font, format_kst_time(timestamps[0]), (gx + 10, label_y), DARKGRAY)
    last = format_kst_time(timestamps[len(values) - 1])
    _blit(surface, label_font, last, (gx + gw - label_font.size(last)[0] - 10, label_y), DARKGRAY)


def _should_close() -> bool:
    close = False
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            close = True
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            close = True
    return close


def _draw_frame(screen, fonts, buffer: ReadingBuffer, clock) -> None:
    screen.fill(RAYWHITE)
    title_font = fonts[24]
    _blit(screen, title_font, _TITLE, (WINDOW_WIDTH / 2 - title_font.size(_TITLE)[0] / 2, 20), DARKGRAY)

    if len(buffer) > 1:
        temperatures = buffer.values("temperature")
        humidities = buffer.values("humidity")
        illuminances = buffer.values("illuminance")
        timestamps = buffer.values("timestamp")
        ranges = axis_ranges(temperatures, humidities, illuminances)
        series = (
            ("Temperature (°C)", temperatures, RED),
            ("Humidity (%)", humidities, BLUE),
            ("Illuminance (lux)", illuminances, DARKGREEN),
        )
        for index, ((title, values, color), (low, high)) in enumerate(zip(series, ranges)):
            draw_graph(screen, fonts, title, values, timestamps, index, low, high, color)
    else:
        _blit(screen, fonts[20], "Waiting for sensor data...",
              (WINDOW_WIDTH / 2 - 100, WINDOW_HEIGHT / 2), GRAY)

    _blit(screen, fonts[20], f"{round(clock.get_fps())} FPS", (10, 10), LIME)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Show live graphs of recorded sensor readings with statistics."
    )
    parser.add_argument("--db", default=DEFAULT_DATABASE, help="database file")
    args = parser.parse_args(argv)

    try:
        conn = open_reader(args.db)
    except sqlite3.Error as exc:
        print(f"Can't open database: {exc}", file=sys.stderr)
        return 1

    with closing(conn):
        buffer = ReadingBuffer(MAX_READINGS, chronological_initial=True, stop_when_full=True)
        pygame.init()
        try:
            screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
            pygame.display.set_caption("Sensor Data Visualizer with GSL Analysis")
            clock = pygame.time.Clock()
            fonts = {size: pygame.font.Font(None, size) for size in FONT_SIZES}
            while not _should_close():
                buffer.refresh(conn)
                _draw_frame(screen, fonts, buffer, clock)
                pygame.display.flip()
                clock.tick(TARGET_FPS)
        finally:
            pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())