"""Shared test fixtures for heatmap-analytics."""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def small_matrix_df():
    """4x3 matrix DataFrame for basic tests."""
    data = np.array([
        [1.0, 2.0, 3.0],
        [4.0, 5.0, 6.0],
        [7.0, 8.0, 9.0],
        [10.0, 11.0, 12.0],
    ])
    return pd.DataFrame(
        data,
        index=["gene_A", "gene_B", "gene_C", "gene_D"],
        columns=["sample_1", "sample_2", "sample_3"],
    )


@pytest.fixture
def nan_matrix_df():
    """Matrix with NaN values, including an all-NaN row."""
    data = np.array([
        [1.0, np.nan, 3.0],
        [np.nan, 5.0, 6.0],
        [1.1, 2.0, 3.1],
        [np.nan, np.nan, np.nan],
    ])
    return pd.DataFrame(
        data,
        index=["row_1", "row_2", "row_3", "row_4"],
        columns=["col_1", "col_2", "col_3"],
    )


@pytest.fixture
def two_blocks():
    """Two well-separated pairs of points."""
    return np.array([
        [0.0, 0.0],
        [0.0, 1.0],
        [10.0, 10.0],
        [10.0, 11.0],
    ])


@pytest.fixture
def random_vectors():
    """15 continuous vectors in 5 dimensions (no distance ties)."""
    return np.random.default_rng(42).standard_normal((15, 5))


@pytest.fixture
def three_groups():
    """Three continuous samples with shifted means (no ties)."""
    rng = np.random.default_rng(7)
    return [
        rng.normal(0.0, 1.0, 8),
        rng.normal(0.5, 1.0, 10),
        rng.normal(2.0, 1.5, 9),
    ]


@pytest.fixture
def long_df():
    """Long-format observations with a group column."""
    return pd.DataFrame({
        "treatment": ["control"] * 5 + ["drug_A"] * 5 + ["drug_B"] * 5,
        "response": [
            1.0, 1.2, 0.9, 1.1, 1.05,
            2.0, 2.2, 1.9, 2.1, np.nan,
            1.4, 1.5, 1.3, 1.6, 1.45,
        ],
    })
