"""Display helpers for p-values."""

from __future__ import annotations

from ..config import NOT_SIGNIFICANT_LABEL, P_VALUE_DISPLAY_FLOOR, SIGNIFICANCE_TIERS


def significance_level(p: float) -> str:
    """Star label: "***" (p<0.001), "**" (p<0.01), "*" (p<0.05), else "ns"."""
    for threshold, label in SIGNIFICANCE_TIERS:
        if p < threshold:
            return label
    return NOT_SIGNIFICANT_LABEL


def format_p_value(p: float) -> str:
    """Format a p-value for a significance bracket.

    Examples::

        format_p_value(0.00001)  # -> "p < 0.0001"
        format_p_value(0.00052)  # -> "p = 0.0005"
        format_p_value(0.0312)   # -> "p = 0.031"
    """
    if p < P_VALUE_DISPLAY_FLOOR:
        return f"p < {P_VALUE_DISPLAY_FLOOR:g}"
    if p < 0.001:
        return f"p = {p:.4f}"
    return f"p = {p:.3f}"
