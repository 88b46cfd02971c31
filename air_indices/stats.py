"""
Window statistics used by the indices engine.

Every function is total: degenerate input (empty series, unequal lengths,
zero variance) yields 0.0, never an exception or NaN.
"""

from __future__ import annotations

import math
from typing import Sequence


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def std(values: Sequence[float]) -> float:
    """
    Population standard deviation (sum of squared deviations divided by N).
    """
    n = len(values)
    if n == 0:
        return 0.0
    mu = mean(values)
    return math.sqrt(sum((v - mu) ** 2 for v in values) / n)


def pearson(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two equal-length series.

    Returns 0.0 when either series is empty, the lengths differ, fewer than
    two points are available or either series has zero variance.
    """
    n = len(a)
    if n < 2 or n != len(b):
        return 0.0
    mean_a = mean(a)
    mean_b = mean(b)
    num = 0.0
    den_a = 0.0
    den_b = 0.0
    for x, y in zip(a, b):
        dx = x - mean_a
        dy = y - mean_b
        num += dx * dy
        den_a += dx * dx
        den_b += dy * dy
    denom = math.sqrt(den_a * den_b)
    if denom == 0:
        return 0.0
    # Float noise can push |r| a hair past 1.
    return max(-1.0, min(1.0, num / denom))
