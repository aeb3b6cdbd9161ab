"""
Central configuration for heatmap-analytics.

Module-level defaults; every public function that reads one of these also
accepts a keyword override.
"""

# --- Clustering ---

# Linkage rules understood by ClusterEngine.
VALID_LINKAGES: tuple[str, ...] = ("single", "complete", "average")

# Default linkage rule. Average (UPGMA) is size-weighted.
DEFAULT_LINKAGE: str = "average"

# --- Significance ---

# Default alpha for the ``significant`` flag on post-hoc results.
SIGNIFICANCE_ALPHA: float = 0.05

# (threshold, label) pairs, checked in order; first p < threshold wins.
SIGNIFICANCE_TIERS: tuple[tuple[float, str], ...] = (
    (0.001, "***"),
    (0.01, "**"),
    (0.05, "*"),
)

# Label for p-values that clear no tier.
NOT_SIGNIFICANT_LABEL: str = "ns"

# p-values below this are displayed as "p < <floor>".
P_VALUE_DISPLAY_FLOOR: float = 0.0001

# --- Multiple comparisons ---

VALID_P_ADJUST_METHODS: tuple[str, ...] = ("bonferroni", "holm", "sidak", "none")
