"""DistanceEngine: NaN-tolerant Euclidean distance and triangular storage."""

from __future__ import annotations

import numpy as np

from ..core.errors import InvalidInput
from ..core.validation import reject_infinite, validate_vectors


def euclidean(a, b) -> float:
    """Euclidean distance over the positions where both vectors are present.

    Missing entries (NaN) are skipped pairwise, never imputed. Returns
    ``inf`` when no position is jointly present, meaning the two vectors
    are incomparable. Infinite entries raise InvalidInput.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise InvalidInput(
            f"Vectors must have the same length, got {a.size} and {b.size}."
        )
    reject_infinite(a)
    reject_infinite(b)
    mask = ~(np.isnan(a) | np.isnan(b))
    if not mask.any():
        return float("inf")
    diff = a[mask] - b[mask]
    return float(np.sqrt(np.dot(diff, diff)))


def pairwise_distances(vectors) -> np.ndarray:
    """Full symmetric (n, n) matrix of ``euclidean`` distances, zero diagonal."""
    data = validate_vectors(vectors)
    n = data.shape[0]
    out = np.zeros((n, n), dtype=np.float64)
    for i in range(1, n):
        for j in range(i):
            out[i, j] = out[j, i] = euclidean(data[i], data[j])
    return out


class DistanceMatrix:
    """Lower-triangular distance storage keyed by unordered id pairs.

    Only one triangle is stored, as a condensed float64 array where the
    pair {i, j} with i > j lives at ``i * (i - 1) // 2 + j``. Capacity is
    fixed at construction: ``capacity`` ids, numbered 0..capacity-1.
    Unset pairs read as ``inf``.
    """

    __slots__ = ("_capacity", "_values")

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        size = capacity * (capacity - 1) // 2 if capacity > 1 else 0
        self._values = np.full(size, np.inf, dtype=np.float64)

    @classmethod
    def from_vectors(cls, vectors, capacity: int | None = None) -> DistanceMatrix:
        """Fill the pairs of the first n ids from n vectors.

        ``capacity`` reserves room for ids created later (clustering uses
        ``2n - 1``). Defaults to n.
        """
        data = validate_vectors(vectors)
        n = data.shape[0]
        dm = cls(n if capacity is None else max(capacity, n))
        for i in range(1, n):
            base = i * (i - 1) // 2
            for j in range(i):
                dm._values[base + j] = euclidean(data[i], data[j])
        return dm

    @property
    def capacity(self) -> int:
        return self._capacity

    @staticmethod
    def _offset(i: int, j: int) -> int:
        if i == j:
            raise KeyError(f"No distance stored for identical ids ({i}, {j}).")
        hi, lo = (i, j) if i > j else (j, i)
        return hi * (hi - 1) // 2 + lo

    def get(self, i: int, j: int) -> float:
        return float(self._values[self._offset(i, j)])

    def set(self, i: int, j: int, value: float) -> None:
        self._values[self._offset(i, j)] = value

    def many(self, i: int, others: np.ndarray) -> np.ndarray:
        """Distances from id ``i`` to each id in ``others`` (none equal to i)."""
        others = np.asarray(others, dtype=np.int64)
        hi = np.maximum(others, i)
        lo = np.minimum(others, i)
        return self._values[hi * (hi - 1) // 2 + lo]

    def set_many(self, i: int, others: np.ndarray, values: np.ndarray) -> None:
        others = np.asarray(others, dtype=np.int64)
        hi = np.maximum(others, i)
        lo = np.minimum(others, i)
        self._values[hi * (hi - 1) // 2 + lo] = values

    def closest_pair(self, ids: np.ndarray) -> tuple[int, int, float]:
        """Closest pair among ``ids`` (ascending, at least two).

        Pairs are scanned lower-id-major, then higher id ascending; the
        first strictly smaller distance wins, so ties go to the earliest
        pair in that order and ``inf`` pairs only win when nothing is finite.
        Returns ``(lo, hi, distance)``.
        """
        ids = np.asarray(ids, dtype=np.int64)
        first, second = np.triu_indices(len(ids), k=1)
        lo = ids[first]
        hi = ids[second]
        d = self._values[hi * (hi - 1) // 2 + lo]
        pos = int(np.argmin(d))
        return int(lo[pos]), int(hi[pos]), float(d[pos])
