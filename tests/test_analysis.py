import pytest

from sensorview.analysis import (
    Statistics,
    axis_ranges,
    compute_statistics,
    format_kst_time,
    format_statistics,
    moving_average,
    y_axis_labels,
)


def test_statistics_of_constant_series():
    stats = compute_statistics([4.5] * 6)
    assert stats.mean == pytest.approx(4.5)
    assert stats.median == pytest.approx(4.5)
    assert stats.sd == pytest.approx(0.0)
    assert stats.minimum == 4.5 and stats.maximum == 4.5


def test_statistics_shift_invariance():
    values = [3.0, 7.5, 1.25, 9.0, 4.0]
    base = compute_statistics(values)
    shifted = compute_statistics([v + 10.0 for v in values])
    assert shifted.sd == pytest.approx(base.sd)
    assert shifted.mean == pytest.approx(base.mean + 10.0)
    assert shifted.median == pytest.approx(base.median + 10.0)


def test_statistics_median_and_extremes_odd():
    values = [9.0, 1.0, 5.0, 3.0, 7.0]
    stats = compute_statistics(values)
    assert stats.median == sorted(values)[2]
    assert stats.minimum == min(values)
    assert stats.maximum == max(values)
    assert stats.minimum <= stats.mean <= stats.maximum


def test_statistics_requires_two_values():
    with pytest.raises(ValueError):
        compute_statistics([1.0])


def test_moving_average_linear_series():
    values = [float(i) for i in range(12)]
    averages = moving_average(values)
    assert len(averages) == len(values)
    assert averages[:3] == [None, None, None]
    assert averages[-3:] == [None, None, None]
    for i in range(3, 9):
        assert averages[i] == pytest.approx(values[i])


def test_moving_average_short_series():
    assert moving_average([1.0, 2.0, 3.0]) == [None, None, None]


def test_moving_average_rejects_even_window():
    with pytest.raises(ValueError):
        moving_average([1.0] * 10, window=4)


def test_axis_ranges_padding():
    temps = [18.0, 22.0, 20.0]
    hums = [0.0, 100.0]
    lums = [400.0, 600.0]
    (t_lo, t_hi), (h_lo, h_hi), (l_lo, l_hi) = axis_ranges(temps, hums, lums)
    assert t_lo < min(temps) and t_hi > max(temps)
    assert t_lo + t_hi == pytest.approx(min(temps) + max(temps))
    assert (h_lo, h_hi) == (0.0, 100.0)
    assert 0.0 <= l_lo < min(lums)
    assert l_hi > max(lums)


def test_axis_ranges_constant_temperature():
    (t_lo, t_hi), _, _ = axis_ranges([21.0, 21.0], [50.0, 50.0], [500.0, 500.0])
    assert t_lo == 21.0 and t_hi == 21.0


def test_y_axis_labels():
    labels = y_axis_labels(0.0, 100.0)
    assert len(labels) == 6
    assert labels[0] == "100.0"
    assert labels[-1] == f"{0.0:.1f}"
    assert [float(x) for x in labels] == sorted((float(x) for x in labels), reverse=True)


def test_format_kst_time_epoch():
    assert format_kst_time(0) == "09:00:00"


def test_format_kst_time_daily_period_and_truncation():
    assert format_kst_time(1234.0 + 86400) == format_kst_time(1234.0)
    assert format_kst_time(0.9) == format_kst_time(0)


def test_format_statistics():
    lines = format_statistics(Statistics(1.234, 2.0, 0.5, -1.0, 3.0))
    assert len(lines) == 4
    assert lines[0] == "Mean: 1.23"
    assert lines[1].startswith("Median: ")
    assert lines[2].startswith("SD: ")
    assert lines[3].startswith("Min/Max: ")