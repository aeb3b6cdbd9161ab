"""MatrixData: validated, immutable matrix container."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .errors import InvalidInput
from .validation import validate_dataframe_matrix


class MatrixData:
    """Immutable container for a validated numeric matrix.

    Stores the matrix as a contiguous float64 numpy array (row-major)
    alongside the original row and column IDs. NaN marks a missing value.
    """

    __slots__ = ("_values", "_row_ids", "_col_ids")

    def __init__(self, df: pd.DataFrame) -> None:
        df = validate_dataframe_matrix(df)
        self._values: np.ndarray = np.ascontiguousarray(df.values, dtype=np.float64)
        self._row_ids: np.ndarray = np.array(df.index, dtype=object)
        self._col_ids: np.ndarray = np.array(df.columns, dtype=object)

    @property
    def values(self) -> np.ndarray:
        """Float64 matrix (n_rows, n_cols), read-only view."""
        v = self._values.view()
        v.flags.writeable = False
        return v

    @property
    def row_ids(self) -> np.ndarray:
        """Original row IDs as object array."""
        return self._row_ids

    @property
    def col_ids(self) -> np.ndarray:
        """Original column IDs as object array."""
        return self._col_ids

    @property
    def shape(self) -> tuple[int, int]:
        return self._values.shape

    @property
    def n_rows(self) -> int:
        return self._values.shape[0]

    @property
    def n_cols(self) -> int:
        return self._values.shape[1]

    def vectors(self, axis: str) -> np.ndarray:
        """One vector per row (axis="row") or per column (axis="col")."""
        if axis == "row":
            return self.values
        if axis == "col":
            return self.values.T
        raise InvalidInput(f"axis must be 'row' or 'col', got '{axis}'")

    def to_dataframe(
        self,
        row_order: np.ndarray | None = None,
        col_order: np.ndarray | None = None,
    ) -> pd.DataFrame:
        """Rebuild a DataFrame, optionally permuting rows/cols by position."""
        rows = np.arange(self.n_rows) if row_order is None else np.asarray(row_order)
        cols = np.arange(self.n_cols) if col_order is None else np.asarray(col_order)
        return pd.DataFrame(
            self._values[np.ix_(rows, cols)],
            index=pd.Index(self._row_ids[rows]),
            columns=pd.Index(self._col_ids[cols]),
        )
