from .types import (
    EASY_VIEW_NAME,
    FIELD_BOUNDS,
    FIELD_TYPES,
    INTEGER_FIELDS,
    MOVIE_FIELDS,
    NUMERIC_FIELDS,
    REQUIRED_FIELDS,
    SOURCE_HEADERS,
    STAR_FIELDS,
    ErrorCode,
    LogicalType,
    ReportCategory,
    ReportKind,
)

__all__ = [
    "EASY_VIEW_NAME",
    "FIELD_BOUNDS",
    "FIELD_TYPES",
    "INTEGER_FIELDS",
    "MOVIE_FIELDS",
    "NUMERIC_FIELDS",
    "REQUIRED_FIELDS",
    "SOURCE_HEADERS",
    "STAR_FIELDS",
    "ErrorCode",
    "LogicalType",
    "ReportCategory",
    "ReportKind",
]
