"""Immutable in-memory snapshot of the movies table."""
from __future__ import annotations

from typing import Any, Iterable

import pandas as pd

from ..domain.types import EASY_VIEW_NAME, INTEGER_FIELDS, MOVIE_FIELDS, NUMERIC_FIELDS
from .models import MovieRecord


def _conform(frame: pd.DataFrame) -> pd.DataFrame:
    """Project onto the schema columns with float64 numerics and object strings."""
    missing = [c for c in MOVIE_FIELDS if c not in frame.columns]
    if missing:
        raise ValueError(f"Frame is missing movie columns: {', '.join(missing)}")

    out = frame.loc[:, list(MOVIE_FIELDS)].copy()
    for col in MOVIE_FIELDS:
        if col in NUMERIC_FIELDS:
            out[col] = pd.to_numeric(out[col], errors="raise").astype("float64")
        else:
            out[col] = out[col].astype(object).where(out[col].notna(), None)
    return out.reset_index(drop=True)


def cell_to_python(value: Any) -> Any:
    """Convert a pandas/numpy cell into a plain Python value (``None`` for nulls)."""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        return value
    if hasattr(value, "item"):
        return value.item()
    return value


class MovieDataset:
    """Read-only movie record set.

    The backing frame is never handed out: ``frame`` and ``view`` return
    copies so that no report can alter what later reports observe.
    """

    VIEWS = (EASY_VIEW_NAME,)

    def __init__(self, frame: pd.DataFrame, source: str | None = None) -> None:
        self._frame = _conform(frame)
        self._source = source

    @classmethod
    def from_records(cls, records: Iterable[MovieRecord], source: str | None = None) -> MovieDataset:
        rows = [r.to_dict() for r in records]
        return cls(pd.DataFrame(rows, columns=list(MOVIE_FIELDS)), source=source)

    @classmethod
    def empty(cls) -> MovieDataset:
        return cls.from_records([])

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame.copy()

    @property
    def is_empty(self) -> bool:
        return self._frame.empty

    def __len__(self) -> int:
        return len(self._frame)

    def view(self, name: str) -> pd.DataFrame:
        """Return a named view. ``movies_easy_view`` is the unfiltered table."""
        if name not in self.VIEWS:
            raise KeyError(name)
        return self._frame.loc[:, list(MOVIE_FIELDS)].copy()

    def records(self) -> list[MovieRecord]:
        out: list[MovieRecord] = []
        for row in self._frame.to_dict(orient="records"):
            values = {k: cell_to_python(v) for k, v in row.items()}
            for col in INTEGER_FIELDS:
                if values[col] is not None:
                    values[col] = int(values[col])
            out.append(MovieRecord(**values))
        return out
