"""
Exception hierarchy for heatmap-analytics.

Only invalid caller input raises. Degenerate but well-defined inputs
(empty samples, zero variance) return neutral results instead.
"""


class AnalyticsError(Exception):
    """Base exception for all heatmap-analytics errors."""


class InvalidInput(AnalyticsError, ValueError):
    """Caller-supplied input cannot be processed.

    Raised for ragged vector matrices, non-numeric values, unknown method
    names and mismatched paired-sample lengths. Subclasses ``ValueError``
    so generic callers can catch it without importing this module.
    """
