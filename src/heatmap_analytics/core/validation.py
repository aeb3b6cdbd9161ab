"""Input validation with clear error messages for analytics callers."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import numpy as np
import pandas as pd

from .errors import InvalidInput


def validate_vectors(vectors: Any) -> np.ndarray:
    """Validate a sequence of equal-length numeric vectors.

    Missing values (NaN or None) are allowed and come back as NaN;
    infinite values raise InvalidInput.
    Returns a float64 array of shape (n, m); an empty input gives
    shape (0, 0). A DataFrame contributes one vector per row.
    """
    if isinstance(vectors, pd.DataFrame):
        vectors = vectors.to_numpy()
    if isinstance(vectors, np.ndarray):
        if vectors.ndim != 2:
            if vectors.size == 0:
                return np.empty((0, 0), dtype=np.float64)
            raise InvalidInput(
                f"Expected a 2-D matrix of vectors, got an array with ndim={vectors.ndim}."
            )
        if vectors.dtype.kind in "biuf":
            return reject_infinite(np.ascontiguousarray(vectors, dtype=np.float64))
    rows = list(vectors)
    if not rows:
        return np.empty((0, 0), dtype=np.float64)

    try:
        lengths = [len(row) for row in rows]
    except TypeError:
        raise InvalidInput("Each vector must be a sequence of numbers.") from None
    width = lengths[0]
    ragged = [i for i, length in enumerate(lengths) if length != width]
    if ragged:
        raise InvalidInput(
            f"All vectors must have the same length. Vector 0 has {width} entries; "
            f"vectors {ragged[:5]} differ"
            + (f" (and {len(ragged) - 5} more)" if len(ragged) > 5 else "")
            + f" with lengths {[lengths[i] for i in ragged[:5]]}."
        )
    try:
        matrix = np.array(
            [[np.nan if v is None else v for v in row] for row in rows],
            dtype=np.float64,
        )
    except (TypeError, ValueError):
        raise InvalidInput("Vectors must contain only numbers or missing values.") from None
    return reject_infinite(matrix.reshape(len(rows), width))


def reject_infinite(values: np.ndarray) -> np.ndarray:
    """Reject +/-inf entries; NaN is the only accepted missing marker."""
    n_inf = int(np.isinf(values).sum())
    if n_inf:
        raise InvalidInput(
            f"Vectors contain {n_inf} infinite value(s); "
            "use NaN to mark a missing entry."
        )
    return values


def validate_sample(values: Iterable[float], name: str = "sample") -> np.ndarray:
    """Validate one experimental group: a flat sequence of real numbers."""
    try:
        arr = np.asarray(list(values), dtype=np.float64)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must contain only real numbers.") from None
    if arr.ndim != 1:
        raise InvalidInput(f"{name} must be one-dimensional, got ndim={arr.ndim}.")
    if np.isnan(arr).any():
        raise InvalidInput(
            f"{name} contains {int(np.isnan(arr).sum())} missing value(s); "
            "drop them before testing."
        )
    return arr


def validate_groups(groups: Iterable[Iterable[float]]) -> list[np.ndarray]:
    """Validate a list of samples, one per group."""
    return [validate_sample(g, name=f"group {i}") for i, g in enumerate(groups)]


def validate_paired(
    group1: np.ndarray,
    group2: np.ndarray,
    test_name: str,
) -> None:
    """Paired tests need one observation per subject in each group."""
    if len(group1) != len(group2):
        raise InvalidInput(
            f"{test_name} requires equal sample sizes, "
            f"got {len(group1)} and {len(group2)}."
        )


def validate_choice(value: str, valid: Sequence[str], what: str) -> str:
    """Validate that ``value`` is one of ``valid``."""
    if value not in valid:
        raise InvalidInput(f"Unknown {what} '{value}'. Valid: {sorted(valid)}")
    return value


def resolve_labels(labels: Sequence[Any] | None, k: int) -> list[Any]:
    """Default group labels to their indices; reject a length mismatch."""
    if labels is None:
        return [str(i) for i in range(k)]
    labels = list(labels)
    if len(labels) != k:
        raise InvalidInput(f"Expected {k} group labels, got {len(labels)}.")
    return labels


def validate_dataframe_matrix(data: Any) -> pd.DataFrame:
    """Validate that data is a numeric DataFrame suitable for clustering.

    NaN entries are allowed. Returns the validated DataFrame (unchanged).
    """
    if not isinstance(data, pd.DataFrame):
        raise InvalidInput(
            f"Expected a pandas DataFrame, got {type(data).__name__}. "
            "Wrap your data with pd.DataFrame(data, index=row_ids, columns=col_ids)."
        )
    if data.index.has_duplicates:
        dupes = data.index[data.index.duplicated()].unique().tolist()
        raise InvalidInput(
            f"Row IDs must be unique. Found duplicates: {dupes[:5]}"
            + (f" (and {len(dupes) - 5} more)" if len(dupes) > 5 else "")
        )
    if data.columns.has_duplicates:
        dupes = data.columns[data.columns.duplicated()].unique().tolist()
        raise InvalidInput(
            f"Column IDs must be unique. Found duplicates: {dupes[:5]}"
            + (f" (and {len(dupes) - 5} more)" if len(dupes) > 5 else "")
        )
    numeric_df = data.select_dtypes(include=[np.number])
    if numeric_df.shape[1] != data.shape[1]:
        non_numeric = [c for c in data.columns if c not in numeric_df.columns]
        raise InvalidInput(
            f"All columns must be numeric. Non-numeric columns: {non_numeric[:5]}"
            + (f" (and {len(non_numeric) - 5} more)" if len(non_numeric) > 5 else "")
        )
    return data
