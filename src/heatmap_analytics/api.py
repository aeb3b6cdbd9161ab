"""Heatmap, compare_groups and repeated_measures_anova: the DataFrame-facing API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from .config import DEFAULT_LINKAGE, SIGNIFICANCE_ALPHA
from .core.errors import InvalidInput
from .core.matrix import MatrixData
from .core.validation import validate_choice
from .export.serializers import tree_to_dict
from .stats.hypothesis import (
    friedman_test,
    kruskal_wallis,
    mann_whitney_u,
    one_way_anova,
    t_test,
    two_way_rm_anova,
    wilcoxon_signed_rank,
)
from .stats.posthoc import (
    bonferroni_post_hoc,
    dunnett_post_hoc,
    friedman_post_hoc,
    holm_bonferroni_post_hoc,
    tukey_hsd_post_hoc,
)
from .stats.results import PostHocResult, RMAnovaResult, TestResult, post_hoc_frame
from .transform.cluster import ClusterEngine, ClusterResult, flip_root, flip_tree, leaf_order

logger = logging.getLogger(__name__)


class Heatmap:
    """Row/column clustering over a numeric matrix (builder pattern).

    Usage::

        import heatmap_analytics as ha

        hm = ha.Heatmap(matrix_df)
        hm.cluster_rows(linkage="average").cluster_cols(linkage="complete")
        hm.flip_rows(root_only=True)
        ordered = hm.to_dataframe()
        trees = hm.to_dict()
    """

    def __init__(self, data: pd.DataFrame) -> None:
        self._matrix = MatrixData(data)
        self._row_cluster: ClusterResult | None = None
        self._col_cluster: ClusterResult | None = None

    # --- Clustering ---

    def cluster_rows(self, linkage: str = DEFAULT_LINKAGE) -> Heatmap:
        """Cluster rows hierarchically; rows are then displayed in leaf order."""
        self._row_cluster = self._do_cluster("row", linkage)
        return self

    def cluster_cols(self, linkage: str = DEFAULT_LINKAGE) -> Heatmap:
        """Cluster columns hierarchically; columns are then displayed in leaf order."""
        self._col_cluster = self._do_cluster("col", linkage)
        return self

    def flip_rows(self, root_only: bool = False) -> Heatmap:
        """Mirror the row tree (or only its root) to get an alternative order."""
        self._row_cluster = self._flip(self._row_cluster, "row", root_only)
        return self

    def flip_cols(self, root_only: bool = False) -> Heatmap:
        """Mirror the column tree (or only its root) to get an alternative order."""
        self._col_cluster = self._flip(self._col_cluster, "col", root_only)
        return self

    # --- Results ---

    @property
    def row_cluster(self) -> ClusterResult | None:
        return self._row_cluster

    @property
    def col_cluster(self) -> ClusterResult | None:
        return self._col_cluster

    @property
    def row_tree(self):
        return self._row_cluster.tree if self._row_cluster is not None else None

    @property
    def col_tree(self):
        return self._col_cluster.tree if self._col_cluster is not None else None

    @property
    def row_order(self) -> np.ndarray:
        """Row IDs in display order."""
        return self._matrix.row_ids[self._positions(self._row_cluster, self._matrix.n_rows)]

    @property
    def col_order(self) -> np.ndarray:
        """Column IDs in display order."""
        return self._matrix.col_ids[self._positions(self._col_cluster, self._matrix.n_cols)]

    def to_dataframe(self) -> pd.DataFrame:
        """The matrix with rows and columns in display order."""
        return self._matrix.to_dataframe(
            row_order=self._positions(self._row_cluster, self._matrix.n_rows),
            col_order=self._positions(self._col_cluster, self._matrix.n_cols),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize display order and trees (``None`` for an unclustered axis)."""
        return {
            "row": {
                "order": self.row_order.tolist(),
                "tree": tree_to_dict(self.row_tree),
            },
            "col": {
                "order": self.col_order.tolist(),
                "tree": tree_to_dict(self.col_tree),
            },
        }

    # --- Internal ---

    def _do_cluster(self, axis: str, linkage: str) -> ClusterResult:
        ids = self._matrix.row_ids if axis == "row" else self._matrix.col_ids
        tree = ClusterEngine.cluster(self._matrix.vectors(axis), linkage=linkage)
        logger.debug("Clustered %d %ss with %s linkage", len(ids), axis, linkage)
        return ClusterResult(tree=tree, ids=ids.copy())

    @staticmethod
    def _flip(
        result: ClusterResult | None,
        axis: str,
        root_only: bool,
    ) -> ClusterResult:
        if result is None:
            raise InvalidInput(
                f"{axis} axis is not clustered; call cluster_{axis}s() first."
            )
        flip = flip_root if root_only else flip_tree
        return ClusterResult(tree=flip(result.tree), ids=result.ids)

    @staticmethod
    def _positions(result: ClusterResult | None, n: int) -> np.ndarray:
        if result is None or result.tree is None:
            return np.arange(n)
        return np.asarray(leaf_order(result.tree), dtype=np.int64)


# --- Group comparisons ---

_TWO_GROUP_TESTS = ("ttest", "mannwhitney", "wilcoxon")
_K_GROUP_TESTS = ("anova", "kruskal", "friedman")
_PAIRED_TESTS = ("wilcoxon", "friedman")
_POST_HOC = {
    "bonferroni": bonferroni_post_hoc,
    "holm": holm_bonferroni_post_hoc,
    "tukey": tukey_hsd_post_hoc,
    "dunnett": dunnett_post_hoc,
    "friedman": friedman_post_hoc,
}


@dataclass(frozen=True)
class GroupComparison:
    """Omnibus test plus optional pairwise comparisons for grouped samples."""

    labels: tuple
    sizes: tuple[int, ...]
    test: TestResult
    post_hoc: tuple[PostHocResult, ...] = field(default=())

    def to_frame(self) -> pd.DataFrame:
        """Post-hoc comparisons as a DataFrame (empty when none were run)."""
        return post_hoc_frame(list(self.post_hoc))


def compare_groups(
    df: pd.DataFrame,
    value: str,
    by: str,
    test: str = "anova",
    post_hoc: str | None = None,
    paired: bool = False,
    alpha: float = SIGNIFICANCE_ALPHA,
) -> GroupComparison:
    """Split ``df[value]`` by ``df[by]`` and test for a group difference.

    Parameters
    ----------
    df : DataFrame in long format, one observation per row.
    value : numeric column holding the observations.
    by : column holding group labels. Groups keep order of first appearance.
    test : "ttest", "mannwhitney", "wilcoxon" (exactly two groups) or
        "anova", "kruskal", "friedman".
    post_hoc : None, "bonferroni", "holm", "tukey", "dunnett" (first group
        is the control) or "friedman".
    paired : only for "ttest"; pairs observations by row order.

    Paired tests ("wilcoxon", "friedman", "ttest" with ``paired=True``)
    treat the i-th row of each group as subject i. Groups must then have
    equal row counts, and a subject with a NaN in any group is dropped from
    all of them. Other tests drop NaN observations group by group.
    """
    if not isinstance(df, pd.DataFrame):
        raise InvalidInput(f"Expected a pandas DataFrame, got {type(df).__name__}.")
    validate_choice(test, _TWO_GROUP_TESTS + _K_GROUP_TESTS, "test")
    if post_hoc is not None:
        validate_choice(post_hoc, tuple(_POST_HOC), "post-hoc method")
    for col in (value, by):
        if col not in df.columns:
            raise InvalidInput(f"Column '{col}' not found. Available: {list(df.columns)[:10]}")

    subset = df[[by, value]].dropna(subset=[by])
    labels: list[Any] = []
    samples: list[np.ndarray] = []
    for label, series in subset.groupby(by, sort=False)[value]:
        labels.append(label)
        samples.append(series.to_numpy(dtype=np.float64))

    if test in _TWO_GROUP_TESTS and len(samples) != 2:
        raise InvalidInput(f"Test '{test}' compares exactly 2 groups, got {len(samples)}.")

    if test in _PAIRED_TESTS or (test == "ttest" and paired):
        samples = _complete_subjects(samples, test)
    else:
        samples = [s[~np.isnan(s)] for s in samples]

    if test == "ttest":
        result = t_test(samples[0], samples[1], paired=paired)
    elif test == "mannwhitney":
        result = mann_whitney_u(samples[0], samples[1])
    elif test == "wilcoxon":
        result = wilcoxon_signed_rank(samples[0], samples[1])
    elif test == "anova":
        result = one_way_anova(samples)
    elif test == "kruskal":
        result = kruskal_wallis(samples)
    else:
        result = friedman_test(samples)

    pairs: list[PostHocResult] = []
    if post_hoc is not None:
        pairs = _POST_HOC[post_hoc](samples, labels, alpha=alpha)

    logger.debug(
        "compare_groups: %s over %d groups (p=%.4g), %d post-hoc pairs",
        test, len(samples), result.p_value, len(pairs),
    )
    return GroupComparison(
        labels=tuple(labels),
        sizes=tuple(len(s) for s in samples),
        test=result,
        post_hoc=tuple(pairs),
    )


def _complete_subjects(samples: list[np.ndarray], test: str) -> list[np.ndarray]:
    """Keep only the subjects observed in every group.

    Subject i is the i-th row of each group, so every group must have the
    same number of rows. A missing value in any group drops that subject
    everywhere.
    """
    sizes = [s.size for s in samples]
    if len(set(sizes)) > 1:
        raise InvalidInput(
            f"Paired test '{test}' needs one row per subject in every group, "
            f"got group sizes {sizes}."
        )
    if not samples:
        return samples
    complete = ~np.any(np.isnan(np.vstack(samples)), axis=0)
    if not complete.all():
        logger.debug(
            "compare_groups: dropped %d incomplete subject(s) for %s",
            int((~complete).sum()), test,
        )
    return [s[complete] for s in samples]


def repeated_measures_anova(
    df: pd.DataFrame,
    value: str,
    subject: str,
    within: str,
    between: str,
) -> RMAnovaResult:
    """Two-way mixed ANOVA from long-format data.

    Each row is one measurement of ``subject`` at level ``within`` (e.g. a
    timepoint); every subject belongs to exactly one ``between`` group.
    Levels and groups keep their order of first appearance. Subjects
    missing any level are left out (see ``two_way_rm_anova``).
    """
    if not isinstance(df, pd.DataFrame):
        raise InvalidInput(f"Expected a pandas DataFrame, got {type(df).__name__}.")
    for col in (value, subject, within, between):
        if col not in df.columns:
            raise InvalidInput(f"Column '{col}' not found. Available: {list(df.columns)[:10]}")

    subset = df[[subject, within, between, value]].dropna(subset=[subject, within, between])
    memberships = subset.groupby(subject, sort=False)[between].nunique()
    crossed = memberships.index[memberships > 1].tolist()
    if crossed:
        raise InvalidInput(
            f"Each subject must belong to one '{between}' group. "
            f"Subjects in several groups: {crossed[:5]}"
            + (f" (and {len(crossed) - 5} more)" if len(crossed) > 5 else "")
        )
    if subset.duplicated([subject, within]).any():
        raise InvalidInput(
            f"Expected at most one '{value}' per subject and '{within}' level."
        )

    wide = subset.pivot(index=subject, columns=within, values=value).reindex(
        index=subset[subject].unique(), columns=subset[within].unique()
    )
    group_of = subset.groupby(subject, sort=False)[between].first()
    groups = [
        wide.loc[group_of.index[group_of == level]].to_numpy(dtype=np.float64)
        for level in subset[between].unique()
    ]
    result = two_way_rm_anova(groups)
    logger.debug(
        "repeated_measures_anova: %d groups x %d levels, subjects per group %s",
        len(groups), wide.shape[1], result.n_subjects,
    )
    return result
