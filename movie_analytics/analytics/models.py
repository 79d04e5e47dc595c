from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from pydantic import BaseModel, Field

from ..domain.types import FIELD_TYPES, REQUIRED_FIELDS, SOURCE_HEADERS, LogicalType, ReportCategory, ReportKind


@dataclass(frozen=True)
class ColumnMetadata:
    """Typed column descriptor for the movies table."""
    column_name: str
    logical_type: LogicalType
    nullable: bool
    source_header: str


MOVIE_COLUMNS: dict[str, ColumnMetadata] = {
    name: ColumnMetadata(
        column_name=name,
        logical_type=FIELD_TYPES[name],
        nullable=name not in REQUIRED_FIELDS,
        source_header=header,
    )
    for name, header in SOURCE_HEADERS.items()
}


@dataclass(frozen=True)
class MovieRecord:
    """One film. Every field except ``title`` may be absent."""
    title: str
    released_year: str | None = None
    certificate: str | None = None
    runtime: float | None = None
    genre: str | None = None
    imdb_rating: float | None = None
    meta_score: int | None = None
    director: str | None = None
    star1: str | None = None
    star2: str | None = None
    star3: str | None = None
    star4: str | None = None
    votes: int | None = None
    gross: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class RowError(BaseModel):
    """A source row skipped during load."""
    row_number: int
    line_number: int
    reason: str
    field: str | None = None


class ReportInfo(BaseModel):
    """Catalog entry as exposed to callers."""
    name: str
    kind: ReportKind
    category: ReportCategory
    description: str
    default_top_n: int | None = None


class ReportResult(BaseModel):
    """Normalized report result.

    ``value`` carries scalar and single-record results (``None`` means no
    data); ``rows`` carries ordered sequences.
    """
    name: str
    kind: ReportKind
    summary: str
    columns: list[str] = Field(default_factory=list)
    value: Any = None
    rows: list[dict[str, Any]] = Field(default_factory=list)
    row_count: int = 0


class ColumnProfile(BaseModel):
    """Per-column statistics."""
    logical_type: str
    null_count: int
    null_ratio: float
    distinct_count: int
    min_value: float | int | str | None = None
    max_value: float | int | str | None = None


class DatasetProfile(BaseModel):
    """Aggregate statistics for the loaded movies table."""
    row_count: int
    columns: dict[str, ColumnProfile] = Field(default_factory=dict)
