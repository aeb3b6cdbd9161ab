"""
Two-sample and k-sample hypothesis tests.

All tests are two-sided. Rank-based tests assign tied values the mean of
their rank positions (``scipy.stats.rankdata(method="average")``) and use
the plain normal approximation, without tie or continuity correction.

Degenerate input (an empty group, all-zero differences, too few
observations for the degrees of freedom) returns a neutral result with
statistic 0 and p = 1. Only mismatched paired lengths (or repeated
measure counts) raise ``InvalidInput``.

A standard deviation or standard error that comes out exactly 0 is
replaced by 1 before dividing.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np
from scipy import stats as sp_stats

from ..core.errors import InvalidInput
from ..core.validation import (
    validate_groups,
    validate_paired,
    validate_sample,
    validate_vectors,
)
from .descriptive import mean, std, variance
from .distributions import chi2_upper, f_upper, normal_two_sided, t_two_sided
from .results import RMAnovaResult, TestResult


def t_test(
    group1: Iterable[float],
    group2: Iterable[float],
    paired: bool = False,
) -> TestResult:
    """Paired t-test, or Welch's unequal-variance t-test.

    Paired: t = mean(d) / (std(d) / sqrt(n)) on d = group1 - group2,
    df = n - 1. Unpaired: t = (mean1 - mean2) / sqrt(var1/n1 + var2/n2)
    with Welch-Satterthwaite degrees of freedom.

    Either group empty returns t=0, p=1, df=0.
    """
    g1 = validate_sample(group1, "group1")
    g2 = validate_sample(group2, "group2")
    if g1.size == 0 or g2.size == 0:
        return TestResult("t", 0.0, 1.0, df=0.0)

    if paired:
        validate_paired(g1, g2, "Paired t-test")
        diff = g1 - g2
        n = diff.size
        sd = std(diff) or 1.0
        t = mean(diff) / (sd / math.sqrt(n))
        df = float(n - 1)
        return TestResult("t", t, t_two_sided(t, df), df=df)

    n1, n2 = g1.size, g2.size
    a = variance(g1) / n1
    b = variance(g2) / n2
    se = math.sqrt(a + b) or 1.0
    t = (mean(g1) - mean(g2)) / se
    df = _welch_df(a, b, n1, n2)
    return TestResult("t", t, t_two_sided(t, df), df=df)


def _welch_df(a: float, b: float, n1: int, n2: int) -> float:
    """Welch-Satterthwaite df from the per-group squared standard errors.

    Falls back to the pooled df (n1 + n2 - 2) when both groups have zero
    variance, where the formula is 0/0.
    """
    denom = 0.0
    if n1 > 1:
        denom += a * a / (n1 - 1)
    if n2 > 1:
        denom += b * b / (n2 - 1)
    if denom == 0:
        return float(n1 + n2 - 2)
    return (a + b) ** 2 / denom


def mann_whitney_u(group1: Iterable[float], group2: Iterable[float]) -> TestResult:
    """Mann-Whitney U (Wilcoxon rank-sum) test.

    U = min(U1, U2) from the pooled tie-averaged ranks; p from the normal
    approximation of U. Either group empty returns U=0, p=1.
    """
    g1 = validate_sample(group1, "group1")
    g2 = validate_sample(group2, "group2")
    if g1.size == 0 or g2.size == 0:
        return TestResult("U", 0.0, 1.0)

    n1, n2 = g1.size, g2.size
    ranks = sp_stats.rankdata(np.concatenate([g1, g2]), method="average")
    r1 = float(ranks[:n1].sum())
    r2 = float(ranks[n1:].sum())
    u1 = n1 * n2 + n1 * (n1 + 1) / 2 - r1
    u2 = n1 * n2 + n2 * (n2 + 1) / 2 - r2
    u = min(u1, u2)

    mean_u = n1 * n2 / 2
    std_u = math.sqrt(n1 * n2 * (n1 + n2 + 1) / 12)
    z = (u - mean_u) / std_u
    return TestResult("U", u, normal_two_sided(z), z=z)


def wilcoxon_signed_rank(
    group1: Iterable[float],
    group2: Iterable[float],
) -> TestResult:
    """Wilcoxon signed-rank test on paired samples.

    Zero differences are dropped, the rest ranked by absolute value;
    W = min(W+, W-) with a normal-approximation p-value. No non-zero
    difference returns W=0, p=1.

    Two empty samples do not raise: they have no non-zero difference and
    get the same neutral W=0, p=1. Only unequal lengths raise.
    """
    g1 = validate_sample(group1, "group1")
    g2 = validate_sample(group2, "group2")
    validate_paired(g1, g2, "Wilcoxon signed-rank test")

    d = g1 - g2
    d = d[d != 0]
    n = d.size
    if n == 0:
        return TestResult("W", 0.0, 1.0, n=0)

    ranks = sp_stats.rankdata(np.abs(d), method="average")
    w_plus = float(ranks[d > 0].sum())
    w_minus = float(ranks[d < 0].sum())
    w = min(w_plus, w_minus)

    mean_w = n * (n + 1) / 4
    std_w = math.sqrt(n * (n + 1) * (2 * n + 1) / 24)
    z = (w - mean_w) / std_w
    return TestResult("W", w, normal_two_sided(z), z=z, n=n)


def one_way_anova(groups: Sequence[Iterable[float]]) -> TestResult:
    """Classic one-way ANOVA: F = MSB / MSW on (k - 1, N - k) df.

    Returns F=0, p=1 when either df is not positive. Zero within-group
    variance gives F=0.
    """
    samples = validate_groups(groups)
    k = len(samples)
    pooled = np.concatenate(samples) if samples else np.empty(0)
    N = pooled.size
    df_between = k - 1
    df_within = N - k
    if df_within <= 0 or df_between <= 0:
        return TestResult("F", 0.0, 1.0, df=float(df_between), df2=float(df_within))

    grand_mean = pooled.mean()
    ssb = 0.0
    ssw = 0.0
    for g in samples:
        if g.size == 0:
            continue
        g_mean = g.mean()
        ssb += g.size * (g_mean - grand_mean) ** 2
        ssw += float(np.sum((g - g_mean) ** 2))

    msb = ssb / df_between
    msw = ssw / df_within
    F = float(msb / msw) if msw > 0 else 0.0
    return TestResult(
        "F", F, f_upper(F, df_between, df_within),
        df=float(df_between), df2=float(df_within),
    )


def kruskal_wallis(groups: Sequence[Iterable[float]]) -> TestResult:
    """Kruskal-Wallis H test on pooled tie-averaged ranks.

    H = 12 / (N(N+1)) * sum(R_i^2 / n_i) - 3(N+1), without tie
    correction; p from chi-squared with k - 1 df. Empty groups add
    nothing to H but still count toward k.
    """
    samples = validate_groups(groups)
    k = len(samples)
    pooled = np.concatenate(samples) if samples else np.empty(0)
    N = pooled.size
    df = float(max(k - 1, 0))
    if N == 0 or k < 2:
        return TestResult("H", 0.0, 1.0, df=df)

    ranks = sp_stats.rankdata(pooled, method="average")
    total = 0.0
    start = 0
    for g in samples:
        stop = start + g.size
        if g.size > 0:
            r = float(ranks[start:stop].sum())
            total += r * r / g.size
        start = stop
    H = 12.0 / (N * (N + 1)) * total - 3.0 * (N + 1)
    return TestResult("H", H, chi2_upper(H, df), df=df)


def friedman_test(groups: Sequence[Iterable[float]]) -> TestResult:
    """Friedman test: k treatments measured on the same n blocks.

    ``groups[j][i]`` is treatment j on block i. Values are ranked within
    each block (ties averaged); Q = 12n / (k(k+1)) * sum((R_j/n - (k+1)/2)^2),
    p from chi-squared with k - 1 df. All groups must have equal length.
    """
    samples = validate_groups(groups)
    k = len(samples)
    if k == 0:
        return TestResult("Q", 0.0, 1.0, df=0.0, n=0)
    n = samples[0].size
    sizes = [g.size for g in samples]
    if any(size != n for size in sizes):
        raise InvalidInput(
            f"Friedman test requires equal sample sizes, got {sizes}."
        )
    df = float(k - 1)
    if n == 0 or k < 2:
        return TestResult("Q", 0.0, 1.0, df=df, n=n)

    blocks = np.column_stack(samples)
    ranks = sp_stats.rankdata(blocks, method="average", axis=1)
    mean_ranks = ranks.sum(axis=0) / n
    Q = 12.0 * n / (k * (k + 1)) * float(np.sum((mean_ranks - (k + 1) / 2) ** 2))
    return TestResult("Q", Q, chi2_upper(Q, df), df=df, n=n)


def two_way_rm_anova(groups: Sequence) -> RMAnovaResult:
    """Two-way ANOVA with one between- and one within-subjects factor.

    ``groups[g]`` is an (n_g, b) matrix: one row per subject, one column
    per level of the repeated factor ("time"). Subjects with a missing
    value at any level are dropped, and groups left without subjects do
    not count toward the number of groups.

    Sums of squares follow the split-plot decomposition::

        SS_total = SS_group + SS_subjects(group)
                 + SS_time + SS_group x time + SS_error

    F(group) = MS_group / MS_subjects on (a - 1, N - a) df;
    F(time) = MS_time / MS_error on (b - 1, (N - a)(b - 1)) df;
    F(interaction) = MS_interaction / MS_error on ((a - 1)(b - 1), (N - a)(b - 1)) df.

    An effect whose df are not positive gets F=0, p=1, as does one whose
    error mean square is 0.
    """
    matrices = [validate_vectors(g) for g in groups]
    widths = {m.shape[1] for m in matrices if m.shape[0] > 0}
    if len(widths) > 1:
        raise InvalidInput(
            f"Every subject needs the same number of repeated measures, got {sorted(widths)}."
        )
    complete = [m[~np.isnan(m).any(axis=1)] for m in matrices]
    n_subjects = tuple(m.shape[0] for m in complete)
    data = [m for m in complete if m.shape[0] > 0]

    a = len(data)
    b = widths.pop() if widths else 0
    N = sum(n_subjects)
    df_group = a - 1
    df_subjects = N - a
    df_time = b - 1
    df_inter = (a - 1) * (b - 1)
    df_error = (N - a) * (b - 1)
    if a == 0 or b == 0:
        neutral = TestResult("F", 0.0, 1.0, df=float(df_group), df2=float(df_subjects))
        return RMAnovaResult(neutral, neutral, neutral, n_subjects)

    pooled = np.vstack(data)
    grand_mean = pooled.mean()
    time_means = pooled.mean(axis=0)
    ss_group = ss_subjects = ss_inter = ss_error = 0.0
    for m in data:
        n = m.shape[0]
        g_mean = m.mean()
        cell = m.mean(axis=0)
        subj = m.mean(axis=1)
        ss_group += n * b * (g_mean - grand_mean) ** 2
        ss_subjects += b * float(np.sum((subj - g_mean) ** 2))
        ss_inter += n * float(np.sum((cell - g_mean - time_means + grand_mean) ** 2))
        ss_error += float(np.sum((m - cell[None, :] - subj[:, None] + g_mean) ** 2))
    ss_time = N * float(np.sum((time_means - grand_mean) ** 2))

    return RMAnovaResult(
        group=_f_effect(ss_group, df_group, ss_subjects, df_subjects),
        time=_f_effect(ss_time, df_time, ss_error, df_error),
        interaction=_f_effect(ss_inter, df_inter, ss_error, df_error),
        n_subjects=n_subjects,
    )


def _f_effect(ss: float, df: int, ss_denom: float, df_denom: int) -> TestResult:
    if df <= 0 or df_denom <= 0:
        return TestResult("F", 0.0, 1.0, df=float(df), df2=float(df_denom))
    ms_denom = ss_denom / df_denom
    F = float((ss / df) / ms_denom) if ms_denom > 0 else 0.0
    return TestResult("F", F, f_upper(F, df, df_denom), df=float(df), df2=float(df_denom))
