from __future__ import annotations


class AnalyticsError(Exception):
    """Base error class for movie analytics."""


class DatasetLoadError(AnalyticsError):
    """Raised when the source file cannot be read or lacks schema columns."""


class ReportNotFoundError(AnalyticsError):
    """Raised when a report name is not in the catalog."""


class InvalidReportParameterError(AnalyticsError):
    """Raised when report parameters are rejected before execution."""


class ReportExecutionError(AnalyticsError):
    """Raised when a report fails while computing its result."""
