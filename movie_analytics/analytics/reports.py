"""Named report catalog over the movies table.

Each report is a pure function of a :class:`MovieDataset`. Scalar reports
return a number (or ``None``), record reports a dict (or ``None``) and row
reports an ordered DataFrame. Limits are applied by the executor.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import numpy as np
import pandas as pd

from ..domain.types import MOVIE_FIELDS, STAR_FIELDS, ReportCategory, ReportKind
from .dataset import MovieDataset, cell_to_python
from .models import MOVIE_COLUMNS, ReportInfo
from .primitives import (
    COUNT_ALL,
    WindowFrame,
    group_aggregate,
    having,
    lag_lead,
    order_rows,
    pearson,
    rank,
    round_half_up,
    running_aggregate,
    top_k,
    unpivot,
)

ELITE_MIN_MOVIES = 5
ELITE_MIN_RATING = 8.0
LOW_META_THRESHOLD = 50
HIGH_META_THRESHOLD = 70
TOP_RATED_SUBSET = 5


@dataclass(frozen=True)
class ReportSpec:
    name: str
    kind: ReportKind
    category: ReportCategory
    description: str
    func: Callable[[MovieDataset], Any]
    default_top_n: int | None = None

    def info(self) -> ReportInfo:
        return ReportInfo(
            name=self.name,
            kind=self.kind,
            category=self.category,
            description=self.description,
            default_top_n=self.default_top_n,
        )


REPORT_CATALOG: dict[str, ReportSpec] = {}


def report(
    name: str,
    kind: ReportKind,
    category: ReportCategory,
    description: str,
    default_top_n: int | None = None,
):
    def decorator(func: Callable[[MovieDataset], Any]) -> Callable[[MovieDataset], Any]:
        if name in REPORT_CATALOG:
            raise ValueError(f"Duplicate report name: {name}")
        REPORT_CATALOG[name] = ReportSpec(name, kind, category, description, func, default_top_n)
        return func
    return decorator


def list_reports() -> list[ReportInfo]:
    return [spec.info() for spec in REPORT_CATALOG.values()]


# ------------------------------------------------------------------
# Reusable stages
# ------------------------------------------------------------------

def movies_with_certificate(frame: pd.DataFrame, certificate: str) -> pd.DataFrame:
    matches = frame[frame["certificate"] == certificate]
    return matches.loc[:, ["title"]].rename(columns={"title": "movie_name"}).reset_index(drop=True)


def overall_average(frame: pd.DataFrame, column: str) -> float | None:
    return cell_to_python(frame[column].mean())


def rows_above(frame: pd.DataFrame, column: str, threshold: float | None) -> pd.DataFrame:
    if threshold is None:
        return frame.iloc[0:0]
    return frame[frame[column] > threshold].reset_index(drop=True)


def directors_with(frame: pd.DataFrame, min_movies: int, min_avg_rating: float) -> pd.DataFrame:
    grouped = group_aggregate(
        frame,
        "director",
        {"movie_count": (COUNT_ALL, "size"), "avg_rating": ("imdb_rating", "mean")},
    )
    return having(
        grouped,
        lambda g: (g["movie_count"] > min_movies) & (g["avg_rating"] > min_avg_rating),
    )


def _count_by(dataset: MovieDataset, key: str, count_name: str = "count") -> pd.DataFrame:
    return group_aggregate(dataset.frame, key, {count_name: (COUNT_ALL, "size")}, order_by=count_name)


def _extreme_gross(dataset: MovieDataset, ascending: bool) -> dict[str, Any] | None:
    best = top_k(dataset.frame, "gross", 1, ascending=ascending, require_non_null=["gross"])
    if best.empty:
        return None
    row = best.iloc[0]
    return {"title": row["title"], "gross": cell_to_python(row["gross"])}


# ------------------------------------------------------------------
# Basic reports
# ------------------------------------------------------------------

@report("preview", "rows", "basic", "First rows of the movies table in load order.", default_top_n=10)
def preview(dataset: MovieDataset) -> pd.DataFrame:
    return dataset.frame


@report("schema", "rows", "basic", "Column names and data types.")
def schema(dataset: MovieDataset) -> pd.DataFrame:
    rows = [
        {"column_name": m.column_name, "data_type": m.logical_type, "source_header": m.source_header}
        for m in MOVIE_COLUMNS.values()
    ]
    return pd.DataFrame(rows, columns=["column_name", "data_type", "source_header"])


@report("total_movies", "scalar", "basic", "Total number of movies.")
def total_movies(dataset: MovieDataset) -> int:
    return len(dataset)


@report("null_counts", "record", "basic", "Number of missing values per column.")
def null_counts(dataset: MovieDataset) -> dict[str, int]:
    frame = dataset.frame
    return {f"null_{col}": int(frame[col].isna().sum()) for col in MOVIE_FIELDS}


@report("numeric_summary", "record", "basic", "Min, max and average of runtime, rating, meta score and gross.")
def numeric_summary(dataset: MovieDataset) -> dict[str, Any]:
    frame = dataset.frame
    out: dict[str, Any] = {}
    for col, label in (("runtime", "runtime"), ("imdb_rating", "rating"), ("meta_score", "meta"), ("gross", "gross")):
        series = frame[col]
        out[f"min_{label}"] = cell_to_python(series.min())
        out[f"max_{label}"] = cell_to_python(series.max())
        out[f"avg_{label}"] = cell_to_python(series.mean())
    for key in ("min_meta", "max_meta"):
        if out[key] is not None:
            out[key] = int(out[key])
    return out


@report("movies_by_certificate", "rows", "basic", "Movie count per certificate.")
def movies_by_certificate(dataset: MovieDataset) -> pd.DataFrame:
    return _count_by(dataset, "certificate")


@report("movies_by_year", "rows", "basic", "Movie count per release year, chronologically.")
def movies_by_year(dataset: MovieDataset) -> pd.DataFrame:
    return group_aggregate(
        dataset.frame,
        "released_year",
        {"movie_count": (COUNT_ALL, "size")},
        order_by="released_year",
        ascending=True,
    )


@report("top_genres", "rows", "basic", "Most frequent genre labels.", default_top_n=10)
def top_genres(dataset: MovieDataset) -> pd.DataFrame:
    return _count_by(dataset, "genre", "genre_count")


@report("top_directors", "rows", "basic", "Directors with the most movies.", default_top_n=10)
def top_directors(dataset: MovieDataset) -> pd.DataFrame:
    return _count_by(dataset, "director", "movie_count")


@report("top_lead_actors", "rows", "basic", "Most frequent lead actor (Star1).", default_top_n=10)
def top_lead_actors(dataset: MovieDataset) -> pd.DataFrame:
    return _count_by(dataset, "star1")


@report("rating_meta_correlation", "scalar", "basic", "Pearson correlation between IMDB rating and meta score.")
def rating_meta_correlation(dataset: MovieDataset) -> float | None:
    return pearson(dataset.frame, "imdb_rating", "meta_score")


@report("top_grossing", "rows", "basic", "Highest gross revenue.", default_top_n=5)
def top_grossing(dataset: MovieDataset) -> pd.DataFrame:
    return order_rows(dataset.frame.loc[:, ["title", "gross"]], "gross", ascending=False)


@report("lowest_grossing", "rows", "basic", "Lowest gross revenue.", default_top_n=5)
def lowest_grossing(dataset: MovieDataset) -> pd.DataFrame:
    return order_rows(dataset.frame.loc[:, ["title", "gross"]], "gross", ascending=True)


@report("rating_buckets", "rows", "basic", "Movie count per whole-number rating bucket.")
def rating_buckets(dataset: MovieDataset) -> pd.DataFrame:
    frame = dataset.frame
    rated = frame[frame["imdb_rating"].notna()]
    rated = rated.assign(rating_bucket=np.floor(rated["imdb_rating"]).astype("int64"))
    return group_aggregate(
        rated,
        "rating_bucket",
        {"count": (COUNT_ALL, "size")},
        order_by="rating_bucket",
        ascending=True,
    )


@report("top_rated", "rows", "basic", "Movies with the highest IMDB rating.", default_top_n=10)
def top_rated(dataset: MovieDataset) -> pd.DataFrame:
    return order_rows(dataset.frame.loc[:, ["title", "imdb_rating"]], "imdb_rating", ascending=False)


@report("common_runtimes", "rows", "basic", "Most common runtimes in minutes.", default_top_n=10)
def common_runtimes(dataset: MovieDataset) -> pd.DataFrame:
    return _count_by(dataset, "runtime")


@report("duplicate_titles", "rows", "basic", "Titles that appear more than once.")
def duplicate_titles(dataset: MovieDataset) -> pd.DataFrame:
    grouped = group_aggregate(dataset.frame, "title", {"title_count": (COUNT_ALL, "size")})
    return having(grouped, lambda g: g["title_count"] > 1)


@report("highest_grossing_movie", "record", "basic", "The single highest grossing movie.")
def highest_grossing_movie(dataset: MovieDataset) -> dict[str, Any] | None:
    return _extreme_gross(dataset, ascending=False)


@report("lowest_grossing_movie", "record", "basic", "The single lowest grossing movie.")
def lowest_grossing_movie(dataset: MovieDataset) -> dict[str, Any] | None:
    return _extreme_gross(dataset, ascending=True)


@report("low_meta_score", "rows", "basic", "Movies with a meta score below 50.")
def low_meta_score(dataset: MovieDataset) -> pd.DataFrame:
    frame = dataset.frame
    low = frame[frame["meta_score"] < LOW_META_THRESHOLD]
    return order_rows(low.loc[:, ["title", "meta_score"]], "meta_score", ascending=True)


@report("pg13_movies", "rows", "basic", "Movies certified PG-13.")
def pg13_movies(dataset: MovieDataset) -> pd.DataFrame:
    return movies_with_certificate(dataset.frame, "PG-13")


# ------------------------------------------------------------------
# Intermediate reports
# ------------------------------------------------------------------

@report("top_directors_by_rating", "rows", "intermediate", "Directors with the best average rating.", default_top_n=5)
def top_directors_by_rating(dataset: MovieDataset) -> pd.DataFrame:
    return group_aggregate(dataset.frame, "director", {"avg_rating": ("imdb_rating", "mean")}, order_by="avg_rating")


@report("avg_gross_by_year", "rows", "intermediate", "Average gross per release year, chronologically.")
def avg_gross_by_year(dataset: MovieDataset) -> pd.DataFrame:
    return group_aggregate(
        dataset.frame,
        "released_year",
        {"avg_gross": ("gross", "mean")},
        order_by="released_year",
        ascending=True,
    )


@report("meta_score_above_70_pct", "scalar", "intermediate", "Percentage of movies with a meta score above 70.")
def meta_score_above_70_pct(dataset: MovieDataset) -> float | None:
    frame = dataset.frame
    total = len(frame)
    if total == 0:
        return None
    above = int((frame["meta_score"] > HIGH_META_THRESHOLD).sum())
    return above * 100.0 / total


@report("above_average_rating", "rows", "intermediate", "Movies rated above the overall average.")
def above_average_rating(dataset: MovieDataset) -> pd.DataFrame:
    frame = dataset.frame
    average = overall_average(frame, "imdb_rating")
    return rows_above(frame, "imdb_rating", average).loc[:, ["title", "imdb_rating"]]


@report("top_genres_by_rating", "rows", "intermediate", "Genres with the best average rating.", default_top_n=3)
def top_genres_by_rating(dataset: MovieDataset) -> pd.DataFrame:
    return group_aggregate(dataset.frame, "genre", {"avg_rating": ("imdb_rating", "mean")}, order_by="avg_rating")


@report("gross_by_genre", "rows", "intermediate", "Total gross revenue per genre.")
def gross_by_genre(dataset: MovieDataset) -> pd.DataFrame:
    return group_aggregate(dataset.frame, "genre", {"total_gross": ("gross", "sum")}, order_by="total_gross")


@report("elite_directors", "rows", "intermediate", "Directors with more than 5 movies and an average rating above 8.")
def elite_directors(dataset: MovieDataset) -> pd.DataFrame:
    return directors_with(dataset.frame, ELITE_MIN_MOVIES, ELITE_MIN_RATING)


# ------------------------------------------------------------------
# Advanced (window) reports
# ------------------------------------------------------------------

@report("star_leaderboard", "rows", "advanced", "Appearances per actor across all four star slots.")
def star_leaderboard(dataset: MovieDataset) -> pd.DataFrame:
    slots = unpivot(dataset.frame, STAR_FIELDS, "actor")
    return group_aggregate(slots, "actor", {"appearances": (COUNT_ALL, "size")}, order_by="appearances")


@report("rating_rank", "rows", "advanced", "Competition rank of movies by IMDB rating.")
def rating_rank(dataset: MovieDataset) -> pd.DataFrame:
    frame = dataset.frame.loc[:, ["title", "imdb_rating"]]
    return rank(frame, "imdb_rating", method="competition", rank_name="imdb_rank")


@report("rating_dense_rank", "rows", "advanced", "Dense rank of movies by IMDB rating.")
def rating_dense_rank(dataset: MovieDataset) -> pd.DataFrame:
    frame = dataset.frame.loc[:, ["title", "imdb_rating"]]
    return rank(frame, "imdb_rating", method="dense", rank_name="imdb_dense_rank")


@report("genre_gross_rank", "rows", "advanced", "Dense rank by gross within each genre.")
def genre_gross_rank(dataset: MovieDataset) -> pd.DataFrame:
    frame = dataset.frame.loc[:, ["genre", "title", "gross"]]
    return rank(frame, "gross", method="dense", partition_by="genre", rank_name="rank_within_genre")


@report("running_votes_by_year", "rows", "advanced", "Running total of votes within each year, by title.")
def running_votes_by_year(dataset: MovieDataset) -> pd.DataFrame:
    frame = dataset.frame.loc[:, ["released_year", "title", "votes"]]
    ordered = order_rows(frame, "title", ascending=True, partition_by="released_year")
    running = running_aggregate(
        ordered, "votes", how="sum", frame="range", order_key="title", partition_by="released_year"
    )
    ordered["running_votes"] = running.round().astype("Int64")
    return ordered


@report("rating_lag_lead", "rows", "advanced", "Previous and next rating in rating order.")
def rating_lag_lead(dataset: MovieDataset) -> pd.DataFrame:
    ordered = order_rows(dataset.frame.loc[:, ["title", "imdb_rating"]], "imdb_rating", ascending=False)
    previous, following = lag_lead(ordered, "imdb_rating")
    ordered["previous_rating"] = previous
    ordered["next_rating"] = following
    return ordered


def cumulative_gross_frame(dataset: MovieDataset, frame_mode: WindowFrame) -> pd.DataFrame:
    """Running gross and vote figures in rating order over rows with gross and votes."""
    frame = dataset.frame.dropna(subset=["gross", "votes"])
    ordered = order_rows(
        frame.loc[:, ["title", "genre", "imdb_rating", "gross", "votes"]], "imdb_rating", ascending=False
    )
    window = {"frame": frame_mode, "order_key": "imdb_rating"}
    ordered["cumulative_gross"] = running_aggregate(ordered, "gross", how="sum", **window)
    ordered["avg_gross_so_far"] = running_aggregate(ordered, "gross", how="mean", **window)
    ordered["avg_votes_so_far"] = round_half_up(running_aggregate(ordered, "votes", how="mean", **window), 2)
    return ordered


@report("cumulative_gross", "rows", "advanced", "Running gross, average gross and average votes by rating; tied ratings share values.")
def cumulative_gross(dataset: MovieDataset) -> pd.DataFrame:
    return cumulative_gross_frame(dataset, "range")


@report("cumulative_gross_rows", "rows", "advanced", "Running gross, average gross and average votes from the first row through each row.")
def cumulative_gross_rows(dataset: MovieDataset) -> pd.DataFrame:
    return cumulative_gross_frame(dataset, "rows")


@report("top5_cumulative_gross", "rows", "advanced", "Running gross over the five best rated movies with known gross.")
def top5_cumulative_gross(dataset: MovieDataset) -> pd.DataFrame:
    top = top_k(
        dataset.frame.loc[:, ["title", "imdb_rating", "gross"]],
        "imdb_rating",
        TOP_RATED_SUBSET,
        require_non_null=["gross"],
    )
    top["cumulative_gross_top_5"] = running_aggregate(top, "gross", how="sum")
    top["avg_gross_top_5"] = running_aggregate(top, "gross", how="mean")
    return top
