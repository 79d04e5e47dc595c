"""Deterministic report engine over the movies table."""
from .errors import (
    AnalyticsError,
    DatasetLoadError,
    ReportNotFoundError,
    InvalidReportParameterError,
    ReportExecutionError,
)
from .models import (
    ColumnMetadata,
    ColumnProfile,
    DatasetProfile,
    MovieRecord,
    MOVIE_COLUMNS,
    ReportInfo,
    ReportResult,
    RowError,
)
from .dataset import MovieDataset
from .reports import REPORT_CATALOG, ReportSpec, list_reports
from .executor import ReportExecutor
from .profiler import profile_dataset
from .validator import validate_request, validate_result

__all__ = [
    "AnalyticsError",
    "DatasetLoadError",
    "ReportNotFoundError",
    "InvalidReportParameterError",
    "ReportExecutionError",
    "ColumnMetadata",
    "ColumnProfile",
    "DatasetProfile",
    "MovieRecord",
    "MOVIE_COLUMNS",
    "ReportInfo",
    "ReportResult",
    "RowError",
    "MovieDataset",
    "REPORT_CATALOG",
    "ReportSpec",
    "list_reports",
    "ReportExecutor",
    "profile_dataset",
    "validate_request",
    "validate_result",
]
