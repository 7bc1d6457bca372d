import pygame
import pytest

from sensorview import gsl_visualizer
from sensorview.analysis import compute_statistics
from sensorview.gsl_visualizer import (
    GRAPH_BOTTOM_MARGIN,
    GRAPH_HEIGHT,
    GRAPH_MARGIN,
    WINDOW_WIDTH,
    data_points,
    draw_graph,
    draw_statistics,
    graph_rect,
    main,
)
from sensorview.visualizer import RAYWHITE, RED


@pytest.fixture(scope="module")
def fonts():
    pygame.font.init()
    return {size: pygame.font.Font(None, size) for size in (12, 14, 20, 24)}


@pytest.fixture
def surface():
    canvas = pygame.Surface((gsl_visualizer.WINDOW_WIDTH, gsl_visualizer.WINDOW_HEIGHT))
    canvas.fill(RAYWHITE)
    return canvas


def test_graphs_are_stacked_by_height_and_margin():
    assert graph_rect(1)[1] - graph_rect(0)[1] == GRAPH_HEIGHT + GRAPH_MARGIN
    assert graph_rect(2)[1] - graph_rect(1)[1] == GRAPH_HEIGHT + GRAPH_MARGIN


def test_graph_box_fills_window_width_and_height():
    x, _, width, height = graph_rect(0)
    assert x + width + GRAPH_MARGIN == WINDOW_WIDTH
    assert height == GRAPH_HEIGHT - GRAPH_BOTTOM_MARGIN


def test_extremes_map_to_inner_corners():
    rect = graph_rect(0)
    gx, gy, gw, gh = rect
    points = data_points([35.0, 15.0], rect, 15.0, 35.0)
    assert points[0] == pytest.approx((gx + 10, gy + 10))
    assert points[1] == pytest.approx((gx + gw - 10, gy + gh - 10))


def test_values_outside_range_are_not_clamped():
    rect = graph_rect(1)
    _, gy, _, gh = rect
    points = data_points([100.0, -100.0], rect, 20.0, 80.0)
    assert points[0][1] < gy + 10
    assert points[1][1] > gy + gh - 10


def test_missing_values_have_no_position():
    rect = graph_rect(2)
    points = data_points([None, 400.0, None], rect, 0.0, 1000.0)
    assert points[0] is None and points[2] is None
    assert points[1][0] == pytest.approx(rect[0] + 10 + (rect[2] - 20) / 2)


def test_data_points_are_evenly_spaced():
    rect = graph_rect(0)
    points = data_points([1.0, 2.0, 3.0, 4.0], rect, 0.0, 5.0)
    steps = [b[0] - a[0] for a, b in zip(points, points[1:])]
    assert steps == pytest.approx([steps[0]] * 3)


def test_data_points_rejects_single_value():
    with pytest.raises(ValueError):
        data_points([1.0], graph_rect(0), 0.0, 10.0)


def test_data_points_rejects_empty_range():
    with pytest.raises(ValueError):
        data_points([1.0, 2.0], graph_rect(0), 3.0, 3.0)


def test_draw_statistics_fills_grey_box(surface, fonts):
    stats = compute_statistics([20.0, 22.0, 24.0])
    draw_statistics(surface, fonts[14], 100, 100, stats, RED)
    r, g, b = tuple(surface.get_at((295, 175)))[:3]
    assert r == g == b
    assert r < RAYWHITE[0]


def test_draw_graph_marks_points_in_series_color(surface, fonts):
    values = [30.0, 10.0, 30.0, 10.0]
    timestamps = [1000.0, 1010.0, 1020.0, 1030.0]
    draw_graph(surface, fonts, "Temperature (°C)", values, timestamps, 0, 8.0, 32.0, RED)
    x, y = data_points(values, graph_rect(0), 8.0, 32.0)[0]
    r, g, b = tuple(surface.get_at((round(x), round(y))))[:3]
    assert r > g
    assert r > b


def test_draw_graph_with_one_value_draws_nothing(surface, fonts):
    draw_graph(surface, fonts, "Temperature (°C)", [20.0], [1000.0], 0, 10.0, 30.0, RED)
    gx, gy, gw, gh = graph_rect(0)
    for point in ((gx + 1, gy + 1), (gx + gw / 2, gy + gh / 2), (gx + gw - 2, gy + gh - 2)):
        assert tuple(surface.get_at((round(point[0]), round(point[1]))))[:3] == RAYWHITE


def test_main_fails_for_missing_database(tmp_path, capsys):
    assert main(["--db", str(tmp_path / "missing.db")]) == 1
    assert "Can't open database" in capsys.readouterr().err