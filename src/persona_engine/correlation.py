# ABOUTME: Computes Pearson product-moment correlations between attribute series.
# ABOUTME: Builds the fixed cohort correlation matrix used in insight reports.

from __future__ import annotations

from typing import Sequence

import numpy as np

from .schemas import CorrelationMatrix, StudentRecord


def pearson_correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    Pearson correlation of two equal-length series.

    Returns 0.0 for empty series or when either series has zero variance.
    """

    if len(xs) != len(ys):
        raise ValueError(f"Series lengths differ ({len(xs)} vs {len(ys)}); correlation needs paired values.")

    n = len(xs)
    if n == 0:
        return 0.0

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    sum_x = x.sum()
    sum_y = y.sum()

    numerator = n * (x * y).sum() - sum_x * sum_y
    denominator = np.sqrt((n * (x * x).sum() - sum_x * sum_x) * (n * (y * y).sum() - sum_y * sum_y))
    if denominator == 0 or np.isnan(denominator):
        return 0.0
    # Guard against rounding pushing |r| just past 1.
    return float(np.clip(numerator / denominator, -1.0, 1.0))


def calculate_correlations(students: Sequence[StudentRecord]) -> CorrelationMatrix:
    if not students:
        return CorrelationMatrix()

    def series(name: str):
        return [s.value_or_zero(name) for s in students]

    comprehension = series("comprehension")
    focus = series("focus")
    retention = series("retention")

    return CorrelationMatrix(
        attention_performance=pearson_correlation(series("attention"), series("assessment_score")),
        comprehension_focus=pearson_correlation(comprehension, focus),
        comprehension_retention=pearson_correlation(comprehension, retention),
        focus_retention=pearson_correlation(focus, retention),
    )
