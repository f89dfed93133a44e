from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when series data cannot be plotted."""


class InvalidInputError(PlotDataError):
    """Raised when parallel inputs (x/y, labels/values) disagree in length."""
