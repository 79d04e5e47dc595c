"""Grouping and window primitives over the movies frame.

Every ordering is a stable sort with nulls last, so ties keep the order in
which rows (or groups) were first seen. Window helpers expect a frame that
has already been ordered with :func:`order_rows` and scan it forward once.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Literal, Mapping, Sequence

import numpy as np
import pandas as pd

RankMethod = Literal["dense", "competition"]
RunningHow = Literal["sum", "mean"]
WindowFrame = Literal["rows", "range"]

COUNT_ALL = "*"
_ROW_MARKER = "__row__"

_PANDAS_RANK_METHODS: dict[str, str] = {"dense": "dense", "competition": "min"}


def _sql_sum(series: pd.Series) -> float:
    # SUM over only nulls is null, not zero.
    return series.sum(min_count=1)


_AGGREGATORS: dict[str, object] = {
    "size": "size",
    "count": "count",
    "sum": _sql_sum,
    "mean": "mean",
    "min": "min",
    "max": "max",
}


def _as_list(value: str | Sequence[str]) -> list[str]:
    return [value] if isinstance(value, str) else list(value)


def _codes(series: pd.Series) -> np.ndarray:
    """Integer codes per distinct value, nulls sharing one code."""
    codes, _ = pd.factorize(series, use_na_sentinel=False)
    return np.asarray(codes)


def _partition_codes(ordered: pd.DataFrame, partition_by: str | None) -> np.ndarray:
    if partition_by is None:
        return np.zeros(len(ordered), dtype=np.int64)
    return _codes(ordered[partition_by])


# ------------------------------------------------------------------
# Ordering and selection
# ------------------------------------------------------------------

def order_rows(
    frame: pd.DataFrame,
    by: str | Sequence[str],
    ascending: bool | Sequence[bool] = True,
    *,
    partition_by: str | None = None,
) -> pd.DataFrame:
    """Stable sort by ``by``; partitions (if any) are ordered by key ascending first."""
    columns = _as_list(by)
    directions = [ascending] * len(columns) if isinstance(ascending, bool) else list(ascending)
    if partition_by is not None:
        columns = [partition_by, *columns]
        directions = [True, *directions]
    if len(columns) == 1:
        ordered = frame.sort_values(columns[0], ascending=directions[0], kind="mergesort", na_position="last")
    else:
        ordered = frame.sort_values(columns, ascending=directions, na_position="last")
    return ordered.reset_index(drop=True)


def top_k(
    frame: pd.DataFrame,
    by: str,
    k: int,
    *,
    ascending: bool = False,
    require_non_null: Sequence[str] = (),
) -> pd.DataFrame:
    """First ``k`` rows by ``by`` after dropping rows null in ``require_non_null``."""
    work = frame.dropna(subset=list(require_non_null)) if require_non_null else frame
    return order_rows(work, by, ascending).head(k).reset_index(drop=True)


def unpivot(
    frame: pd.DataFrame,
    columns: Sequence[str],
    value_name: str,
    *,
    keep: Sequence[str] = (),
    slot_name: str = "slot",
) -> pd.DataFrame:
    """Turn several fixed columns into (source_row, slot, value) rows.

    Slots are emitted column by column, like a ``UNION ALL`` of the columns.
    Null slots contribute nothing.
    """
    base = frame.loc[:, [*keep, *columns]].copy()
    base.insert(0, "source_row", range(len(base)))
    long = base.melt(
        id_vars=["source_row", *keep],
        value_vars=list(columns),
        var_name=slot_name,
        value_name=value_name,
    )
    return long[long[value_name].notna()].reset_index(drop=True)


# ------------------------------------------------------------------
# Grouping
# ------------------------------------------------------------------

def group_aggregate(
    frame: pd.DataFrame,
    key: str,
    aggregations: Mapping[str, tuple[str, str]],
    *,
    order_by: str | None = None,
    ascending: bool = False,
) -> pd.DataFrame:
    """GROUP BY ``key`` with named ``(column, func)`` aggregations.

    ``("*", "size")`` counts rows. A null key forms its own group. Groups
    start in first-seen order, then are stably sorted by ``order_by``.
    """
    for out_name, (_, func) in aggregations.items():
        if func not in _AGGREGATORS:
            raise ValueError(f"Unsupported aggregation '{func}' for '{out_name}'")

    if frame.empty:
        return pd.DataFrame(columns=[key, *aggregations])

    work = frame.assign(**{_ROW_MARKER: 1})
    named = {
        out_name: pd.NamedAgg(
            column=_ROW_MARKER if column == COUNT_ALL else column,
            aggfunc=_AGGREGATORS[func],
        )
        for out_name, (column, func) in aggregations.items()
    }
    grouped = work.groupby(key, sort=False, dropna=False).agg(**named).reset_index()

    if order_by is not None:
        grouped = order_rows(grouped, order_by, ascending)
    return grouped.reset_index(drop=True)


def having(grouped: pd.DataFrame, predicate: Callable[[pd.DataFrame], pd.Series]) -> pd.DataFrame:
    """Keep whole groups whose aggregates satisfy ``predicate``."""
    if grouped.empty:
        return grouped
    mask = predicate(grouped).fillna(False).astype(bool)
    return grouped[mask].reset_index(drop=True)


# ------------------------------------------------------------------
# Windows
# ------------------------------------------------------------------

def rank(
    frame: pd.DataFrame,
    by: str,
    *,
    method: RankMethod = "dense",
    ascending: bool = False,
    partition_by: str | None = None,
    rank_name: str = "rank",
) -> pd.DataFrame:
    """Order by ``by`` and attach a dense or competition rank.

    Dense: ties share a rank and the next key gets rank + 1.
    Competition: ties share a rank and the next key skips past them.
    Null keys rank last.
    """
    if method not in _PANDAS_RANK_METHODS:
        raise ValueError(f"Unknown rank method: {method}")

    ordered = order_rows(frame, by, ascending, partition_by=partition_by)
    if ordered.empty:
        ordered[rank_name] = pd.Series(dtype="int64")
        return ordered

    values = ordered[by].groupby(_partition_codes(ordered, partition_by), sort=False)
    ranks = values.rank(method=_PANDAS_RANK_METHODS[method], ascending=ascending, na_option="bottom")
    ordered[rank_name] = ranks.astype("int64")
    return ordered


def running_aggregate(
    ordered: pd.DataFrame,
    column: str,
    *,
    how: RunningHow = "sum",
    frame: WindowFrame = "rows",
    order_key: str | None = None,
    partition_by: str | None = None,
) -> pd.Series:
    """Running SUM/AVG of ``column`` over an already ordered frame.

    ``frame="rows"`` covers first row through current row. ``frame="range"``
    additionally includes later peers sharing the current ``order_key``.
    Nulls are skipped; the value stays null until a non-null is seen.
    """
    if how not in ("sum", "mean"):
        raise ValueError(f"Unknown running aggregate: {how}")
    if frame not in ("rows", "range"):
        raise ValueError(f"Unknown window frame: {frame}")
    if frame == "range" and order_key is None:
        raise ValueError("A range frame needs an order_key")
    if ordered.empty:
        return pd.Series(dtype="float64")

    values = ordered[column].astype("float64")
    partitions = _partition_codes(ordered, partition_by)
    sums = values.fillna(0.0).groupby(partitions, sort=False).cumsum()
    counts = values.notna().astype("int64").groupby(partitions, sort=False).cumsum()
    seen = counts.where(counts > 0)

    result = sums.where(counts > 0) if how == "sum" else sums / seen

    if frame == "range":
        keys = _codes(ordered[order_key])
        change = np.ones(len(ordered), dtype=bool)
        change[1:] = (keys[1:] != keys[:-1]) | (partitions[1:] != partitions[:-1])
        peer_ids = np.cumsum(change)
        result = result.groupby(peer_ids, sort=False).transform("last")

    return result.astype("float64")


def lag_lead(
    ordered: pd.DataFrame,
    column: str,
    *,
    partition_by: str | None = None,
) -> tuple[pd.Series, pd.Series]:
    """Previous and next value of ``column``; null at the sequence edges."""
    if ordered.empty:
        return pd.Series(dtype="float64"), pd.Series(dtype="float64")
    grouped = ordered[column].groupby(_partition_codes(ordered, partition_by), sort=False)
    return grouped.shift(1), grouped.shift(-1)


# ------------------------------------------------------------------
# Scalars
# ------------------------------------------------------------------

def round_half_up(series: pd.Series, digits: int) -> pd.Series:
    """Round exact decimal halves away from zero, as SQL ROUND does.

    Each float goes through its shortest repr, so an average such as
    9 / 8 rounds from 1.125 to 1.13 rather than to the even 1.12.
    """
    quantum = Decimal(1).scaleb(-digits)

    def _round(value: float) -> float:
        if pd.isna(value):
            return np.nan
        return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))

    return series.map(_round).astype("float64")


def pearson(frame: pd.DataFrame, left: str, right: str) -> float | None:
    """Pearson correlation over rows where both columns are present."""
    pairs = frame[[left, right]].dropna()
    if len(pairs) < 2:
        return None
    value = pairs[left].astype("float64").corr(pairs[right].astype("float64"))
    return None if pd.isna(value) else float(value)
