"""Descriptive statistics, hypothesis tests and post-hoc comparisons."""

from .descriptive import Quartiles, mean, median, quartiles, sem, std, variance
from .hypothesis import (
    t_test,
    mann_whitney_u,
    wilcoxon_signed_rank,
    one_way_anova,
    kruskal_wallis,
    friedman_test,
    two_way_rm_anova,
)
from .posthoc import (
    p_adjust,
    bonferroni_post_hoc,
    holm_bonferroni_post_hoc,
    tukey_hsd_post_hoc,
    dunnett_post_hoc,
    friedman_post_hoc,
)
from .correlation import (
    CorrelationResult,
    RegressionResult,
    pearson_correlation,
    spearman_correlation,
    linear_regression,
)
from .formatting import format_p_value, significance_level
from .results import PostHocResult, RMAnovaResult, TestResult, post_hoc_frame

__all__ = [
    "Quartiles",
    "mean",
    "median",
    "quartiles",
    "sem",
    "std",
    "variance",
    "t_test",
    "mann_whitney_u",
    "wilcoxon_signed_rank",
    "one_way_anova",
    "kruskal_wallis",
    "friedman_test",
    "two_way_rm_anova",
    "p_adjust",
    "bonferroni_post_hoc",
    "holm_bonferroni_post_hoc",
    "tukey_hsd_post_hoc",
    "dunnett_post_hoc",
    "friedman_post_hoc",
    "CorrelationResult",
    "RegressionResult",
    "pearson_correlation",
    "spearman_correlation",
    "linear_regression",
    "format_p_value",
    "significance_level",
    "PostHocResult",
    "RMAnovaResult",
    "TestResult",
    "post_hoc_frame",
]
