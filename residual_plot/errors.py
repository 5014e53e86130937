from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when samples or a time window cannot be plotted as given."""
