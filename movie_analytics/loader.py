"""
Movies CSV ingestion.

Reads the delimited source file once, coerces typed fields and builds the
immutable dataset. Rows with the wrong field count or an uncoercible value
are skipped one by one and reported; they never abort the load.
"""
from __future__ import annotations

import csv
import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from .analytics.dataset import MovieDataset
from .analytics.errors import DatasetLoadError
from .analytics.models import RowError
from .domain.types import FIELD_BOUNDS, FIELD_TYPES, MOVIE_FIELDS, REQUIRED_FIELDS, SOURCE_HEADERS

logger = logging.getLogger(__name__)

_RUNTIME_SUFFIX = re.compile(r"\s*min(?:utes)?\.?$", re.IGNORECASE)
_NUMERIC_NULL_TOKENS = {"NA", "N/A", "NULL", "NAN"}


class RowValidationError(ValueError):
    """A single cell failed coercion; carries the offending field."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(message)
        self.field_name = field_name


@dataclass
class LoadResult:
    """Outcome of a load: the dataset plus every rejected row."""
    dataset: MovieDataset
    errors: list[RowError] = field(default_factory=list)
    source: str | None = None

    @property
    def loaded_count(self) -> int:
        return len(self.dataset)

    @property
    def rejected_count(self) -> int:
        return len(self.errors)


# ============================================================================
# Header Mapping
# ============================================================================

def _normalize_header(raw: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", str(raw).strip().lower()).strip("_")


def _build_header_mapping(headers: list[str]) -> dict[str, int]:
    """Map canonical field names to header positions.

    A column matches on its canonical name or its source header, ignoring
    case and punctuation. Unknown columns are ignored.
    """
    lookup: dict[str, str] = {}
    for name, source in SOURCE_HEADERS.items():
        lookup[_normalize_header(name)] = name
        lookup[_normalize_header(source)] = name

    positions: dict[str, int] = {}
    for idx, raw in enumerate(headers):
        name = lookup.get(_normalize_header(raw))
        if name is not None and name not in positions:
            positions[name] = idx

    missing = [f for f in MOVIE_FIELDS if f not in positions]
    if missing:
        raise DatasetLoadError(f"Source header is missing columns: {', '.join(missing)}")
    return positions


# ============================================================================
# Cell Normalization
# ============================================================================

def _normalize_cell_value(raw: Any, field_name: str) -> str | int | float | None:
    """Coerce a raw cell to the field's logical type; blanks become None."""
    text = "" if raw is None else str(raw).strip()
    if text == "":
        if field_name in REQUIRED_FIELDS:
            raise RowValidationError(field_name, f"{field_name}: missing value")
        return None

    logical_type = FIELD_TYPES[field_name]
    if logical_type == "string":
        # "NA" or "Null" in a text field is kept as text.
        return text
    if text.upper() in _NUMERIC_NULL_TOKENS:
        return None

    cleaned = text.replace(",", "")
    if field_name == "runtime":
        cleaned = _RUNTIME_SUFFIX.sub("", cleaned)
    if field_name == "gross":
        cleaned = cleaned.lstrip("$")

    try:
        number = float(cleaned)
    except ValueError as exc:
        raise RowValidationError(field_name, f"{field_name}: non-numeric value {text!r}") from exc

    if not math.isfinite(number):
        raise RowValidationError(field_name, f"{field_name}: non-numeric value {text!r}")

    low, high = FIELD_BOUNDS.get(field_name, (None, None))
    if (low is not None and number < low) or (high is not None and number > high):
        raise RowValidationError(field_name, f"{field_name}: value {text!r} out of range")

    if logical_type == "integer":
        if not number.is_integer():
            raise RowValidationError(field_name, f"{field_name}: expected an integer, got {text!r}")
        return int(number)
    return number


def _parse_row(row: list[str], positions: dict[str, int]) -> dict[str, Any]:
    return {name: _normalize_cell_value(row[idx], name) for name, idx in positions.items()}


# ============================================================================
# Loading
# ============================================================================

def load_movies_rows(
    rows: Iterable[list[str]],
    *,
    source: str | None = None,
) -> LoadResult:
    """Build a dataset from already split rows; the first row is the header."""
    iterator = iter(rows)
    try:
        headers = next(iterator)
    except StopIteration as exc:
        raise DatasetLoadError("Source is empty: no header row") from exc

    positions = _build_header_mapping(headers)
    width = len(headers)

    records: list[dict[str, Any]] = []
    errors: list[RowError] = []

    for row_number, row in enumerate(iterator, start=1):
        line_number = getattr(rows, "line_num", row_number + 1)
        if not any(cell.strip() for cell in row):
            continue
        if len(row) != width:
            errors.append(RowError(
                row_number=row_number,
                line_number=line_number,
                reason=f"expected {width} fields, got {len(row)}",
            ))
            continue
        try:
            records.append(_parse_row(row, positions))
        except RowValidationError as exc:
            errors.append(RowError(
                row_number=row_number,
                line_number=line_number,
                reason=str(exc),
                field=exc.field_name,
            ))

    for err in errors:
        logger.warning("Skipped row %d (line %d): %s", err.row_number, err.line_number, err.reason)

    frame = pd.DataFrame(records, columns=list(MOVIE_FIELDS))
    dataset = MovieDataset(frame, source=source)
    logger.info("Loaded %d movie(s) from %s, rejected %d row(s)", len(dataset), source or "<rows>", len(errors))
    return LoadResult(dataset=dataset, errors=errors, source=source)


def load_movies_csv(path: str | Path, *, delimiter: str = ",", encoding: str = "utf-8") -> LoadResult:
    """Load the movies table from a delimited text file."""
    file_path = Path(path)
    if not file_path.is_file():
        raise DatasetLoadError(f"Movies file not found: {file_path}")

    try:
        with file_path.open("r", encoding=encoding, newline="") as handle:
            reader = csv.reader(handle, delimiter=delimiter)
            return load_movies_rows(reader, source=str(file_path))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise DatasetLoadError(f"Could not read {file_path}: {exc}") from exc
