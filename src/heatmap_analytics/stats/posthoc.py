"""
Pairwise post-hoc comparisons and multiple-testing correction.

Bonferroni / Holm:
    Welch t-tests for every pair i < j, p-values corrected over the
    k(k-1)/2 comparisons.

Tukey HSD:
    Tukey-Kramer q for every pair, p from the studentized range
    distribution with (k, N - k) parameters.

Dunnett:
    Welch t-tests of each group against a control, Bonferroni over k - 1.

Friedman post-hoc:
    Wilcoxon signed-rank for every pair, Bonferroni corrected.

Results come back in pair order: (0, 1), (0, 2), ..., (1, 2), ...
"""

from __future__ import annotations

import math
from itertools import combinations
from typing import Any, Iterable, Sequence

import numpy as np

from ..config import SIGNIFICANCE_ALPHA, VALID_P_ADJUST_METHODS
from ..core.errors import InvalidInput
from ..core.validation import resolve_labels, validate_choice, validate_groups
from .distributions import studentized_range_upper
from .formatting import significance_level
from .hypothesis import t_test, wilcoxon_signed_rank
from .results import PostHocResult


def p_adjust(
    pvalues: Iterable[float],
    method: str = "bonferroni",
    n: int | None = None,
) -> np.ndarray:
    """Adjust p-values for multiple comparisons.

    Parameters
    ----------
    pvalues : array-like
        Raw p-values.
    method : str
        "bonferroni", "holm" (step-down, monotone), "sidak" or "none".
    n : int or None
        Number of comparisons. Defaults to ``len(pvalues)``.

    Returns
    -------
    ndarray of adjusted p-values in input order, clipped to [0, 1].
    """
    validate_choice(method, VALID_P_ADJUST_METHODS, "p-value adjustment method")
    p = np.asarray(list(pvalues), dtype=np.float64)
    m = len(p) if n is None else n
    if m < len(p):
        raise InvalidInput(f"n ({m}) must be >= the number of p-values ({len(p)}).")
    if p.size == 0 or method == "none":
        return p.copy()

    if method == "bonferroni":
        adjusted = p * m
    elif method == "sidak":
        adjusted = 1.0 - (1.0 - p) ** m
    else:
        order = np.argsort(p, kind="stable")
        scaled = p[order] * np.arange(m, m - len(p), -1, dtype=np.float64)
        scaled = np.maximum.accumulate(np.minimum(scaled, 1.0))
        adjusted = np.empty_like(p)
        adjusted[order] = scaled
    return np.clip(adjusted, 0.0, 1.0)


def _result(
    i: int,
    j: int,
    labels: Sequence[Any],
    raw_p: float,
    corrected_p: float,
    alpha: float,
) -> PostHocResult:
    return PostHocResult(
        group1_index=i,
        group2_index=j,
        group1_label=labels[i],
        group2_label=labels[j],
        raw_p=float(raw_p),
        corrected_p=float(corrected_p),
        significance=significance_level(corrected_p),
        significant=bool(corrected_p < alpha),
    )


def _pairwise_t(samples: list[np.ndarray]) -> list[tuple[int, int, float]]:
    return [
        (i, j, t_test(samples[i], samples[j], paired=False).p_value)
        for i, j in combinations(range(len(samples)), 2)
    ]


def bonferroni_post_hoc(
    groups: Sequence[Iterable[float]],
    labels: Sequence[Any] | None = None,
    alpha: float = SIGNIFICANCE_ALPHA,
) -> list[PostHocResult]:
    """All pairwise Welch t-tests; corrected p = min(raw p * k(k-1)/2, 1)."""
    samples = validate_groups(groups)
    labels = resolve_labels(labels, len(samples))
    raw = _pairwise_t(samples)
    corrected = p_adjust([p for _, _, p in raw], "bonferroni")
    return [
        _result(i, j, labels, p, cp, alpha)
        for (i, j, p), cp in zip(raw, corrected)
    ]


def holm_bonferroni_post_hoc(
    groups: Sequence[Iterable[float]],
    labels: Sequence[Any] | None = None,
    alpha: float = SIGNIFICANCE_ALPHA,
) -> list[PostHocResult]:
    """All pairwise Welch t-tests with Holm's step-down correction."""
    samples = validate_groups(groups)
    labels = resolve_labels(labels, len(samples))
    raw = _pairwise_t(samples)
    corrected = p_adjust([p for _, _, p in raw], "holm")
    return [
        _result(i, j, labels, p, cp, alpha)
        for (i, j, p), cp in zip(raw, corrected)
    ]


def tukey_hsd_post_hoc(
    groups: Sequence[Iterable[float]],
    labels: Sequence[Any] | None = None,
    alpha: float = SIGNIFICANCE_ALPHA,
) -> list[PostHocResult]:
    """Tukey's HSD (Tukey-Kramer for unequal sizes).

    q = |mean_i - mean_j| / sqrt(MSW / 2 * (1/n_i + 1/n_j)). Raw and
    corrected p are the same studentized range p-value. Returns an empty
    list when the within-group df (N - k) is not positive.
    """
    samples = validate_groups(groups)
    labels = resolve_labels(labels, len(samples))
    k = len(samples)
    N = sum(g.size for g in samples)
    df_within = N - k
    if df_within <= 0:
        return []
    ssw = sum(float(np.sum((g - g.mean()) ** 2)) for g in samples if g.size)
    msw = ssw / df_within

    results = []
    for i, j in combinations(range(k), 2):
        gi, gj = samples[i], samples[j]
        if gi.size == 0 or gj.size == 0:
            p = 1.0
        else:
            se = math.sqrt(msw * 0.5 * (1 / gi.size + 1 / gj.size)) or 1.0
            q = abs(gi.mean() - gj.mean()) / se
            p = studentized_range_upper(q, k, df_within)
        results.append(_result(i, j, labels, p, p, alpha))
    return results


def dunnett_post_hoc(
    groups: Sequence[Iterable[float]],
    labels: Sequence[Any] | None = None,
    control: int = 0,
    alpha: float = SIGNIFICANCE_ALPHA,
) -> list[PostHocResult]:
    """Each group against ``groups[control]``; Bonferroni over k - 1 comparisons."""
    samples = validate_groups(groups)
    labels = resolve_labels(labels, len(samples))
    k = len(samples)
    if not 0 <= control < k:
        raise InvalidInput(f"control index {control} is out of range for {k} groups.")

    raw = [
        (control, i, t_test(samples[control], samples[i], paired=False).p_value)
        for i in range(k)
        if i != control
    ]
    corrected = p_adjust([p for _, _, p in raw], "bonferroni")
    return [
        _result(i, j, labels, p, cp, alpha)
        for (i, j, p), cp in zip(raw, corrected)
    ]


def friedman_post_hoc(
    groups: Sequence[Iterable[float]],
    labels: Sequence[Any] | None = None,
    alpha: float = SIGNIFICANCE_ALPHA,
) -> list[PostHocResult]:
    """Pairwise Wilcoxon signed-rank tests, Bonferroni corrected.

    A pair with unequal lengths cannot be tested and gets raw p = 1.
    """
    samples = validate_groups(groups)
    labels = resolve_labels(labels, len(samples))
    raw = []
    for i, j in combinations(range(len(samples)), 2):
        try:
            p = wilcoxon_signed_rank(samples[i], samples[j]).p_value
        except InvalidInput:
            p = 1.0
        raw.append((i, j, p))
    corrected = p_adjust([p for _, _, p in raw], "bonferroni")
    return [
        _result(i, j, labels, p, cp, alpha)
        for (i, j, p), cp in zip(raw, corrected)
    ]
