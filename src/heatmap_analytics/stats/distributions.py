"""Tail probabilities from scipy.stats, clipped to [0, 1].

Degrees of freedom that are not positive carry no information, so the
p-value is 1.
"""

from __future__ import annotations

import math

from scipy import stats as sp_stats


def _clip(p: float) -> float:
    if math.isnan(p):
        return 1.0
    return float(min(max(p, 0.0), 1.0))


def t_two_sided(t: float, df: float) -> float:
    """Two-sided p-value of a Student-t statistic."""
    if not df > 0:
        return 1.0
    return _clip(2.0 * sp_stats.t.sf(abs(t), df))


def normal_two_sided(z: float) -> float:
    """Two-sided p-value of a standard-normal z-score."""
    return _clip(2.0 * sp_stats.norm.sf(abs(z)))


def f_upper(f: float, df1: float, df2: float) -> float:
    """Upper-tail p-value of an F statistic."""
    if not (df1 > 0 and df2 > 0):
        return 1.0
    return _clip(sp_stats.f.sf(f, df1, df2))


def chi2_upper(x: float, df: float) -> float:
    """Upper-tail p-value of a chi-squared statistic."""
    if not df > 0:
        return 1.0
    return _clip(sp_stats.chi2.sf(x, df))


def studentized_range_upper(q: float, k: int, df: float) -> float:
    """Upper-tail p-value of Tukey's studentized range statistic."""
    if k < 2 or not df > 0:
        return 1.0
    return _clip(sp_stats.studentized_range.sf(q, k, df))
