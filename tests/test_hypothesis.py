"""Tests for t-tests, rank tests, ANOVA, Kruskal-Wallis and Friedman."""

import math

import numpy as np
import pytest
from scipy import stats as sp_stats

from heatmap_analytics.core.errors import InvalidInput
from heatmap_analytics.stats.hypothesis import (
    friedman_test,
    kruskal_wallis,
    mann_whitney_u,
    one_way_anova,
    t_test,
    two_way_rm_anova,
    wilcoxon_signed_rank,
)
from heatmap_analytics.stats.results import TestResult


class TestTTestPaired:
    def test_identical_samples(self):
        result = t_test([1, 2, 3], [1, 2, 3], paired=True)
        assert result.statistic == 0.0
        assert result.p_value == pytest.approx(1.0)
        assert result.df == 2

    def test_matches_scipy(self):
        rng = np.random.default_rng(11)
        a = rng.normal(0, 1, 12)
        b = a + rng.normal(0.4, 0.5, 12)
        expected = sp_stats.ttest_rel(a, b)
        result = t_test(a, b, paired=True)
        assert result.statistic == pytest.approx(expected.statistic)
        assert result.p_value == pytest.approx(expected.pvalue)
        assert result.df == 11

    def test_zero_std_of_differences_uses_one(self):
        # differences are [1, 1, 1]: std 0 is replaced by 1
        result = t_test([2, 3, 4], [1, 2, 3], paired=True)
        assert result.statistic == pytest.approx(math.sqrt(3))
        assert result.p_value == pytest.approx(2 * sp_stats.t.sf(math.sqrt(3), 2))

    def test_length_mismatch_raises(self):
        with pytest.raises(InvalidInput, match="equal sample sizes"):
            t_test([1, 2, 3], [1, 2], paired=True)


class TestTTestWelch:
    def test_matches_scipy(self):
        rng = np.random.default_rng(5)
        a = rng.normal(0, 1, 10)
        b = rng.normal(1, 2, 14)
        expected = sp_stats.ttest_ind(a, b, equal_var=False)
        result = t_test(a, b)
        assert result.statistic == pytest.approx(expected.statistic)
        assert result.p_value == pytest.approx(expected.pvalue)

    def test_welch_satterthwaite_df(self):
        a = [1.0, 2.0, 3.0, 4.0]
        b = [2.0, 4.0, 6.0, 8.0, 10.0, 12.0]
        va, vb = np.var(a, ddof=1) / 4, np.var(b, ddof=1) / 6
        expected_df = (va + vb) ** 2 / (va ** 2 / 3 + vb ** 2 / 5)
        assert t_test(a, b).df == pytest.approx(expected_df)

    def test_identical_samples(self):
        result = t_test([1, 2, 3], [1, 2, 3])
        assert result.statistic == 0.0
        assert result.p_value == pytest.approx(1.0)

    def test_empty_group(self):
        result = t_test([], [1.0, 2.0])
        assert result == TestResult("t", 0.0, 1.0, df=0.0)
        assert result.to_dict() == {"t": 0.0, "p": 1.0, "df": 0.0}

    def test_empty_group_before_pairing_check(self):
        assert t_test([1.0, 2.0], [], paired=True).p_value == 1.0

    def test_zero_variance_groups(self):
        # Both variances 0: standard error falls back to 1, df to n1 + n2 - 2
        result = t_test([1.0, 1.0, 1.0], [3.0, 3.0, 3.0])
        assert result.statistic == pytest.approx(-2.0)
        assert result.df == 4

    def test_p_value_in_unit_interval(self):
        rng = np.random.default_rng(2)
        for _ in range(10):
            result = t_test(rng.normal(0, 1, 5), rng.normal(3, 1, 5))
            assert 0.0 <= result.p_value <= 1.0


class TestMannWhitneyU:
    def test_complete_separation(self):
        result = mann_whitney_u([1, 2, 3], [4, 5, 6])
        assert result.statistic == 0.0
        z = (0 - 4.5) / math.sqrt(9 * 7 / 12)
        assert result.z == pytest.approx(z)
        assert result.p_value == pytest.approx(2 * sp_stats.norm.sf(abs(z)))

    def test_symmetric_in_groups(self):
        a, b = [1.5, 3.2, 2.2, 8.0], [4.1, 5.0, 0.5]
        assert mann_whitney_u(a, b).statistic == mann_whitney_u(b, a).statistic

    def test_ties_get_average_rank(self):
        # pooled ranks: 1 -> 1, 2s -> 3, 3 -> 5, 4 -> 6; R1 = 12, U1 = 6, U2 = 2
        assert mann_whitney_u([1, 2, 2, 3], [2, 4]).statistic == 2.0

    def test_matches_scipy_asymptotic_without_ties(self):
        rng = np.random.default_rng(8)
        a = rng.normal(0, 1, 15)
        b = rng.normal(0.8, 1, 12)
        expected = sp_stats.mannwhitneyu(
            a, b, use_continuity=False, alternative="two-sided", method="asymptotic"
        )
        assert mann_whitney_u(a, b).p_value == pytest.approx(expected.pvalue)

    def test_empty_group(self):
        result = mann_whitney_u([], [1.0])
        assert result.statistic == 0.0
        assert result.p_value == 1.0
        assert result.statistic_name == "U"


class TestWilcoxonSignedRank:
    def test_all_positive_differences(self):
        result = wilcoxon_signed_rank([1, 2, 3, 4, 5], [0, 0, 0, 0, 0])
        assert result.statistic == 0.0
        z = (0 - 7.5) / math.sqrt(5 * 6 * 11 / 24)
        assert result.p_value == pytest.approx(2 * sp_stats.norm.sf(abs(z)))
        assert result.n == 5

    def test_zero_differences_dropped(self):
        result = wilcoxon_signed_rank([1, 2, 3], [1, 0, 4])
        # differences [0, 2, -1]: ranks 2 (+) and 1 (-)
        assert result.n == 2
        assert result.statistic == 1.0

    def test_all_zero_differences(self):
        result = wilcoxon_signed_rank([1, 2, 3], [1, 2, 3])
        assert result.statistic == 0.0
        assert result.p_value == 1.0

    def test_empty_pair_is_neutral(self):
        result = wilcoxon_signed_rank([], [])
        assert (result.statistic, result.p_value, result.n) == (0.0, 1.0, 0)

    def test_length_mismatch_raises(self):
        with pytest.raises(InvalidInput, match="equal sample sizes"):
            wilcoxon_signed_rank([1, 2, 3], [1, 2])


class TestOneWayAnova:
    def test_identical_groups(self):
        result = one_way_anova([[1, 2, 3], [1, 2, 3], [1, 2, 3]])
        assert result.statistic == 0.0
        assert result.p_value == pytest.approx(1.0)
        assert (result.df, result.df2) == (2, 6)

    def test_matches_scipy(self, three_groups):
        expected = sp_stats.f_oneway(*three_groups)
        result = one_way_anova(three_groups)
        assert result.statistic == pytest.approx(expected.statistic)
        assert result.p_value == pytest.approx(expected.pvalue)

    def test_no_within_df(self):
        result = one_way_anova([[1.0], [2.0]])
        assert result.statistic == 0.0
        assert result.p_value == 1.0
        assert result.df2 == 0

    def test_single_group(self):
        assert one_way_anova([[1.0, 2.0, 3.0]]).p_value == 1.0

    def test_no_groups(self):
        assert one_way_anova([]).p_value == 1.0

    def test_zero_within_variance(self):
        result = one_way_anova([[1.0, 1.0], [2.0, 2.0]])
        assert result.statistic == 0.0


class TestKruskalWallis:
    def test_matches_scipy_without_ties(self, three_groups):
        expected = sp_stats.kruskal(*three_groups)
        result = kruskal_wallis(three_groups)
        assert result.statistic == pytest.approx(expected.statistic)
        assert result.p_value == pytest.approx(expected.pvalue)
        assert result.df == 2

    def test_separated_groups(self):
        result = kruskal_wallis([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
        assert result.statistic == pytest.approx(7.2)

    def test_empty_input(self):
        result = kruskal_wallis([[], []])
        assert result.statistic == 0.0
        assert result.p_value == 1.0

    def test_empty_group_ignored_in_sum(self):
        with_empty = kruskal_wallis([[1, 2, 3], [4, 5, 6], []])
        assert with_empty.statistic == pytest.approx(
            12 / (6 * 7) * (36 / 3 + 225 / 3) - 21
        )
        assert with_empty.df == 2


class TestFriedman:
    def test_matches_scipy_without_ties(self):
        rng = np.random.default_rng(21)
        groups = [rng.normal(mu, 1, 8) for mu in (0.0, 0.3, 1.0)]
        expected = sp_stats.friedmanchisquare(*groups)
        result = friedman_test(groups)
        assert result.statistic == pytest.approx(expected.statistic)
        assert result.p_value == pytest.approx(expected.pvalue)
        assert result.n == 8

    def test_consistent_ranking(self):
        # every block ranks the treatments 1, 2, 3: Q = n(k-1) = 8
        groups = [[1, 2, 3, 4], [5, 6, 7, 8], [9, 10, 11, 12]]
        assert friedman_test(groups).statistic == pytest.approx(8.0)

    def test_unequal_lengths_raise(self):
        with pytest.raises(InvalidInput, match="equal sample sizes"):
            friedman_test([[1, 2, 3], [1, 2]])

    def test_degenerate(self):
        assert friedman_test([]).p_value == 1.0
        assert friedman_test([[1, 2, 3]]).p_value == 1.0


class TestTwoWayRMAnova:
    # SS: group 36.125, subjects 10.25, time 6.125, interaction 0.125,
    # error 0.25; they add up to the total SS of 52.875.
    GROUPS = [
        [[1.0, 2.0], [3.0, 5.0]],
        [[5.0, 7.0], [7.0, 9.0]],
    ]

    def test_f_statistics(self):
        result = two_way_rm_anova(self.GROUPS)
        assert result.group.statistic == pytest.approx(36.125 / 5.125)
        assert result.time.statistic == pytest.approx(49.0)
        assert result.interaction.statistic == pytest.approx(1.0)
        assert result.n_subjects == (2, 2)

    def test_degrees_of_freedom_and_p(self):
        result = two_way_rm_anova(self.GROUPS)
        assert (result.group.df, result.group.df2) == (1.0, 2.0)
        assert (result.time.df, result.time.df2) == (1.0, 2.0)
        assert result.time.p_value == pytest.approx(sp_stats.f.sf(49.0, 1, 2))
        assert result.interaction.p_value == pytest.approx(sp_stats.f.sf(1.0, 1, 2))

    def test_incomplete_subjects_dropped(self):
        groups = [self.GROUPS[0] + [[4.0, np.nan]], self.GROUPS[1]]
        result = two_way_rm_anova(groups)
        assert result.n_subjects == (2, 2)
        assert result.time.statistic == pytest.approx(49.0)

    def test_zero_error_gives_neutral_within_effects(self):
        # additive data: no residual within-subject variation
        result = two_way_rm_anova([[[1, 2], [3, 4]], [[5, 6], [7, 8]]])
        assert result.time.statistic == 0.0
        assert result.time.p_value == 1.0

    def test_too_few_subjects(self):
        result = two_way_rm_anova([[[1.0, 2.0]], [[3.0, 4.0]]])
        assert result.group.p_value == 1.0
        assert result.group.df2 == 0.0

    def test_empty_group_not_counted(self):
        result = two_way_rm_anova([self.GROUPS[0], [], self.GROUPS[1]])
        assert result.n_subjects == (2, 0, 2)
        assert result.group.df == 1.0

    def test_mismatched_time_points(self):
        with pytest.raises(InvalidInput, match="same number of repeated measures"):
            two_way_rm_anova([[[1.0, 2.0]], [[1.0, 2.0, 3.0]]])

    def test_no_data(self):
        assert two_way_rm_anova([]).time.p_value == 1.0

    def test_to_dict(self):
        d = two_way_rm_anova(self.GROUPS).to_dict()
        assert set(d) == {"group", "time", "interaction", "nSubjects"}
        assert d["time"]["F"] == pytest.approx(49.0)
