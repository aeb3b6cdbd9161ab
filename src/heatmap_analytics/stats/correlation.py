"""Correlation and simple linear regression between paired samples."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np
from scipy import stats as sp_stats

from ..core.validation import validate_paired, validate_sample
from .distributions import t_two_sided


@dataclass(frozen=True)
class CorrelationResult:
    """Correlation coefficient (Pearson r or Spearman rho) with its t-test."""

    method: str
    coefficient: float
    p_value: float
    t: float
    df: float
    n: int


@dataclass(frozen=True)
class RegressionResult:
    """Ordinary least squares fit of y = slope * x + intercept."""

    slope: float
    intercept: float
    r_squared: float
    slope_stderr: float
    intercept_stderr: float
    residual_se: float
    df: int
    n: int
    mean_x: float
    ss_xx: float


def _paired(x: Iterable[float], y: Iterable[float]) -> tuple[np.ndarray, np.ndarray]:
    xa = validate_sample(x, "x")
    ya = validate_sample(y, "y")
    validate_paired(xa, ya, "Correlation")
    return xa, ya


def pearson_correlation(x: Iterable[float], y: Iterable[float]) -> CorrelationResult:
    """Pearson r with t = r * sqrt(df / (1 - r^2)), df = n - 2.

    Fewer than 3 pairs gives NaN statistics. A constant variable gives r = 0.
    """
    xa, ya = _paired(x, y)
    return _pearson(xa, ya, "pearson")


def _pearson(xa: np.ndarray, ya: np.ndarray, method: str) -> CorrelationResult:
    n = xa.size
    if n < 3:
        nan = float("nan")
        return CorrelationResult(method, nan, nan, nan, nan, n)
    dx = xa - xa.mean()
    dy = ya - ya.mean()
    ss_xx = float(dx @ dx)
    ss_yy = float(dy @ dy)
    ss_xy = float(dx @ dy)
    r = ss_xy / math.sqrt(ss_xx * ss_yy) if ss_xx > 0 and ss_yy > 0 else 0.0
    df = n - 2
    # 1e-15 keeps |r| == 1 finite
    t = r * math.sqrt(df / (1 - r * r + 1e-15))
    return CorrelationResult(method, r, t_two_sided(t, df), t, float(df), n)


def spearman_correlation(x: Iterable[float], y: Iterable[float]) -> CorrelationResult:
    """Spearman rho: Pearson r on tie-averaged ranks."""
    xa, ya = _paired(x, y)
    if xa.size < 3:
        return _pearson(xa, ya, "spearman")
    return _pearson(
        sp_stats.rankdata(xa, method="average"),
        sp_stats.rankdata(ya, method="average"),
        "spearman",
    )


def linear_regression(x: Iterable[float], y: Iterable[float]) -> RegressionResult | None:
    """Least-squares line through (x, y).

    Returns None for fewer than 3 points or when x is constant.
    """
    xa, ya = _paired(x, y)
    n = xa.size
    if n < 3:
        return None
    mx = float(xa.mean())
    my = float(ya.mean())
    dx = xa - mx
    ss_xx = float(dx @ dx)
    if ss_xx == 0:
        return None
    slope = float(dx @ (ya - my)) / ss_xx
    intercept = my - slope * mx
    residuals = ya - (slope * xa + intercept)
    ss_res = float(residuals @ residuals)
    ss_tot = float(np.sum((ya - my) ** 2))
    df = n - 2
    residual_se = math.sqrt(ss_res / df)
    return RegressionResult(
        slope=slope,
        intercept=intercept,
        r_squared=1 - ss_res / ss_tot if ss_tot > 0 else 0.0,
        slope_stderr=residual_se / math.sqrt(ss_xx),
        intercept_stderr=residual_se * math.sqrt(1 / n + mx * mx / ss_xx),
        residual_se=residual_se,
        df=df,
        n=n,
        mean_x=mx,
        ss_xx=ss_xx,
    )
