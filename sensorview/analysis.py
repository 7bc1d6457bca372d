"""Statistics, smoothing, axis ranges and labels for the sensor graphs."""

from __future__ import annotations

import statistics
import time
from dataclasses import dataclass
from typing import Optional, Sequence

MOVING_AVG_WINDOW = 7
KST_OFFSET = 9 * 3600
Y_DIVISIONS = 5


@dataclass(frozen=True)
class Statistics:
    """Summary of one series of measurements."""

    mean: float
    median: float
    sd: float
    minimum: float
    maximum: float


def compute_statistics(values: Sequence[float]) -> Statistics:
    """Mean, median, sample standard deviation, minimum and maximum."""
    if len(values) < 2:
        raise ValueError("at least two values are required")
    return Statistics(
        mean=statistics.fmean(values),
        median=statistics.median(values),
        sd=statistics.stdev(values),
        minimum=min(values),
        maximum=max(values),
    )


def moving_average(values: Sequence[float], window: int = MOVING_AVG_WINDOW) -> list[Optional[float]]:
    """Centred moving average; positions without a full window are None."""
    if window < 1 or window % 2 == 0:
        raise ValueError("window must be a positive odd number")
    half = window // 2
    result: list[Optional[float]] = [None] * len(values)
    if len(values) < window:
        return result
    for i in range(half, len(values) - half):
        result[i] = sum(values[i - half:i + half + 1]) / window
    return result


def axis_ranges(temperatures, humidities, illuminances):
    """Padded (low, high) ranges for the temperature, humidity and illuminance graphs."""
    t_lo, t_hi = min([1000.0, *temperatures]), max([-1000.0, *temperatures])
    h_lo, h_hi = min([1000.0, *humidities]), max([-1000.0, *humidities])
    l_lo, l_hi = min([1000000.0, *illuminances]), max([-1.0, *illuminances])

    pad = (t_hi - t_lo) * 0.1
    temperature = (t_lo - pad, t_hi + pad)

    pad = (h_hi - h_lo) * 0.1
    humidity = (max(0.0, h_lo - pad), min(100.0, h_hi + pad))

    pad = (l_hi - l_lo) * 0.1
    illuminance = (max(0.0, l_lo - pad), l_hi * 1.1)

    return temperature, humidity, illuminance


def y_axis_labels(min_val: float, max_val: float) -> list[str]:
    """Six grid labels from the top of the axis to the bottom."""
    return [
        f"{min_val + (max_val - min_val) * (1.0 - i / Y_DIVISIONS):.1f}"
        for i in range(Y_DIVISIONS + 1)
    ]


def format_kst_time(timestamp: float) -> str:
    """Clock time (HH:MM:SS) of an epoch timestamp in Korean Standard Time."""
    return time.strftime("%H:%M:%S", time.gmtime(int(timestamp) + KST_OFFSET))


def format_statistics(stats: Statistics) -> list[str]:
    """The lines of the statistics box."""
    return [
        f"Mean: {stats.mean:.2f}",
        f"Median: {stats.median:.2f}",
        f"SD: {stats.sd:.2f}",
        f"Min/Max: {stats.minimum:.1f}/{stats.maximum:.1f}",
    ]