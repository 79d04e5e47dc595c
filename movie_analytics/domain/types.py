"""
Core type definitions and constants.
"""
from __future__ import annotations

from typing import Literal

LogicalType = Literal["string", "integer", "float"]
ReportKind = Literal["scalar", "record", "rows"]
ReportCategory = Literal["basic", "intermediate", "advanced"]

# Canonical field name -> source CSV header.
SOURCE_HEADERS: dict[str, str] = {
    "title": "Series_Title",
    "released_year": "Released_Year",
    "certificate": "Certificate",
    "runtime": "Runtime",
    "genre": "Genre",
    "imdb_rating": "IMDB_Rating",
    "meta_score": "Meta_score",
    "director": "Director",
    "star1": "Star1",
    "star2": "Star2",
    "star3": "Star3",
    "star4": "Star4",
    "votes": "No_of_Votes",
    "gross": "Gross",
}

FIELD_TYPES: dict[str, LogicalType] = {
    "title": "string",
    "released_year": "string",
    "certificate": "string",
    "runtime": "float",
    "genre": "string",
    "imdb_rating": "float",
    "meta_score": "integer",
    "director": "string",
    "star1": "string",
    "star2": "string",
    "star3": "string",
    "star4": "string",
    "votes": "integer",
    "gross": "float",
}

MOVIE_FIELDS: tuple[str, ...] = tuple(SOURCE_HEADERS)
NUMERIC_FIELDS: tuple[str, ...] = tuple(f for f, t in FIELD_TYPES.items() if t != "string")
INTEGER_FIELDS: tuple[str, ...] = tuple(f for f, t in FIELD_TYPES.items() if t == "integer")
STAR_FIELDS: tuple[str, ...] = ("star1", "star2", "star3", "star4")
# A row without these is rejected at load time.
REQUIRED_FIELDS: tuple[str, ...] = ("title",)

# Inclusive bounds enforced at load time.
FIELD_BOUNDS: dict[str, tuple[float | None, float | None]] = {
    "runtime": (0, None),
    "imdb_rating": (0, 10),
    "meta_score": (0, 100),
    "votes": (0, None),
    "gross": (0, None),
}

EASY_VIEW_NAME = "movies_easy_view"


class ErrorCode:
    NOT_FOUND = "NOT_FOUND"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    DATASET_UNAVAILABLE = "DATASET_UNAVAILABLE"
    REPORT_FAILED = "REPORT_FAILED"
