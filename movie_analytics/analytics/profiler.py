"""Per-column profile of the loaded movies table."""
from __future__ import annotations

import pandas as pd

from ..domain.types import INTEGER_FIELDS, NUMERIC_FIELDS
from .dataset import MovieDataset, cell_to_python
from .models import MOVIE_COLUMNS, ColumnProfile, DatasetProfile


def _bound(series: pd.Series, column: str, use_max: bool) -> int | float | None:
    value = cell_to_python(series.max() if use_max else series.min())
    if value is not None and column in INTEGER_FIELDS:
        return int(value)
    return value


def profile_dataset(dataset: MovieDataset) -> DatasetProfile:
    """Null and distinct counts for every column; min/max for numeric ones."""
    frame = dataset.frame
    row_count = len(frame)
    nulls = frame.isna().sum()
    distinct = frame.nunique(dropna=True)

    columns: dict[str, ColumnProfile] = {}
    for name, meta in MOVIE_COLUMNS.items():
        null_count = int(nulls[name])
        numeric = name in NUMERIC_FIELDS
        columns[name] = ColumnProfile(
            logical_type=meta.logical_type,
            null_count=null_count,
            null_ratio=round(null_count / row_count, 6) if row_count else 0.0,
            distinct_count=int(distinct[name]),
            min_value=_bound(frame[name], name, use_max=False) if numeric else None,
            max_value=_bound(frame[name], name, use_max=True) if numeric else None,
        )
    return DatasetProfile(row_count=row_count, columns=columns)
