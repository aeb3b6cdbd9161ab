"""Descriptive statistics for a single sample.

Empty input returns 0 (or all-zero quartiles) rather than raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from ..core.validation import validate_sample


@dataclass(frozen=True)
class Quartiles:
    q1: float
    q2: float
    q3: float


def mean(values: Iterable[float]) -> float:
    arr = validate_sample(values)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def median(values: Iterable[float]) -> float:
    arr = validate_sample(values)
    if arr.size == 0:
        return 0.0
    return float(np.median(arr))


def quartiles(values: Iterable[float]) -> Quartiles:
    """Q1/Q2/Q3 by median of halves.

    For odd n the middle element belongs to neither half.
    """
    arr = np.sort(validate_sample(values))
    n = arr.size
    if n == 0:
        return Quartiles(0.0, 0.0, 0.0)
    mid = n // 2
    lower = arr[:mid]
    upper = arr[mid:] if n % 2 == 0 else arr[mid + 1:]
    return Quartiles(q1=median(lower), q2=median(arr), q3=median(upper))


def variance(values: Iterable[float], sample: bool = True) -> float:
    """Variance; divides by n - 1 when ``sample`` else by n.

    A sample variance of fewer than two values is 0.
    """
    arr = validate_sample(values)
    n = arr.size
    ddof = 1 if sample else 0
    if n - ddof <= 0:
        return 0.0
    return float(np.sum((arr - arr.mean()) ** 2) / (n - ddof))


def std(values: Iterable[float], sample: bool = True) -> float:
    """Standard deviation; sample (n - 1) by default, population (n) otherwise."""
    return math.sqrt(variance(values, sample=sample))


def sem(values: Iterable[float]) -> float:
    """Standard error of the mean: sample std / sqrt(n)."""
    arr = validate_sample(values)
    if arr.size == 0:
        return 0.0
    return std(arr) / math.sqrt(arr.size)
