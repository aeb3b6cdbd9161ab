"""Result records returned by the statistics functions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class TestResult:
    """A test statistic and its p-value.

    ``statistic_name`` is the conventional symbol ("t", "U", "W", "F",
    "H", "Q"). ``df`` is the (numerator) degrees of freedom; ``df2`` the
    denominator degrees of freedom for F tests. ``z`` is set by tests
    that use a normal approximation.
    """

    __test__ = False  # not a pytest test class

    statistic_name: str
    statistic: float
    p_value: float
    df: float | None = None
    df2: float | None = None
    z: float | None = None
    n: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {self.statistic_name: self.statistic, "p": self.p_value}
        for key in ("df", "df2", "z", "n"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


@dataclass(frozen=True)
class PostHocResult:
    """One pairwise comparison from a post-hoc procedure."""

    group1_index: int
    group2_index: int
    group1_label: Any
    group2_label: Any
    raw_p: float
    corrected_p: float
    significance: str
    significant: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "group1Index": self.group1_index,
            "group2Index": self.group2_index,
            "group1Label": self.group1_label,
            "group2Label": self.group2_label,
            "rawP": self.raw_p,
            "correctedP": self.corrected_p,
            "significanceLabel": self.significance,
            "significant": self.significant,
        }


def post_hoc_frame(results: list[PostHocResult]) -> pd.DataFrame:
    """Tabulate post-hoc results, one row per pair."""
    columns = [
        "group1_index", "group2_index", "group1_label", "group2_label",
        "raw_p", "corrected_p", "significance", "significant",
    ]
    return pd.DataFrame(
        [[getattr(r, c) for c in columns] for r in results],
        columns=columns,
    )


@dataclass(frozen=True)
class RMAnovaResult:
    """Mixed-design two-way ANOVA: one F test per effect.

    ``group`` is the between-subjects factor (tested against subjects
    within groups), ``time`` the within-subjects factor and
    ``interaction`` their product, both tested against the residual.
    """

    group: TestResult
    time: TestResult
    interaction: TestResult
    n_subjects: tuple[int, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "group": self.group.to_dict(),
            "time": self.time.to_dict(),
            "interaction": self.interaction.to_dict(),
            "nSubjects": list(self.n_subjects),
        }
