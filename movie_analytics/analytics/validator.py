"""Validate report parameters and sanity-check results against the dataset profile."""
from __future__ import annotations

import logging

from .errors import InvalidReportParameterError
from .models import DatasetProfile, ReportResult
from .reports import ReportSpec

logger = logging.getLogger(__name__)

_COUNT_COLUMNS = {"count", "movie_count", "genre_count", "title_count", "appearances"}


def validate_request(
    spec: ReportSpec,
    top_n: int | None,
    max_top_n: int | None = None,
) -> int | None:
    """Resolve the effective row limit for a report call.

    Raises InvalidReportParameterError before anything is computed.
    """
    if top_n is None:
        return spec.default_top_n

    if spec.kind != "rows":
        raise InvalidReportParameterError(
            f"Report '{spec.name}' returns a {spec.kind} and does not accept top_n"
        )

    if isinstance(top_n, bool) or not isinstance(top_n, int):
        raise InvalidReportParameterError(
            f"top_n must be an integer, got {type(top_n).__name__}"
        )

    if top_n <= 0:
        raise InvalidReportParameterError(
            f"top_n must be a positive integer, got {top_n}"
        )

    if max_top_n is not None and top_n > max_top_n:
        logger.warning("top_n %s for '%s' clamped to %s", top_n, spec.name, max_top_n)
        return max_top_n

    return top_n


def validate_result(
    result: ReportResult,
    profile: DatasetProfile | None,
) -> None:
    """Sanity-check a report result against the dataset profile.

    Logs warnings rather than raising, since the result is already computed.
    """
    if profile is None:
        return

    if result.kind == "scalar" and result.name == "total_movies":
        if result.value is not None and result.value != profile.row_count:
            logger.warning(
                "Result total_movies (%s) differs from profile row_count (%s)",
                result.value, profile.row_count,
            )

    if result.kind == "record" and isinstance(result.value, dict):
        for key, val in result.value.items():
            if key.startswith("null_") and isinstance(val, int) and val > profile.row_count:
                logger.warning(
                    "Result %s (%s) exceeds profile row_count (%s)",
                    key, val, profile.row_count,
                )

    for row in result.rows:
        for col in _COUNT_COLUMNS.intersection(row):
            count = row[col]
            if isinstance(count, (int, float)) and count > profile.row_count:
                logger.warning(
                    "Result %s (%s) exceeds profile row_count (%s)",
                    col, count, profile.row_count,
                )
