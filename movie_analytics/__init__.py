"""Movie metadata reporting engine."""
from .analytics import MovieDataset, MovieRecord, ReportExecutor, ReportResult
from .loader import LoadResult, load_movies_csv, load_movies_rows

__all__ = [
    "MovieDataset",
    "MovieRecord",
    "ReportExecutor",
    "ReportResult",
    "LoadResult",
    "load_movies_csv",
    "load_movies_rows",
]
