"""
FastAPI application exposing the movie report catalog.

Routes delegate to the report executor; the dataset is loaded once at startup.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from .analytics import (
    DatasetLoadError,
    DatasetProfile,
    InvalidReportParameterError,
    ReportExecutionError,
    ReportExecutor,
    ReportInfo,
    ReportNotFoundError,
    ReportResult,
    RowError,
)
from .analytics.executor import frame_to_rows
from .config import get_settings
from .domain import ErrorCode
from .loader import LoadResult, load_movies_csv

logger = logging.getLogger(__name__)

app = FastAPI(title="Movie Analytics", version="1.0.0", docs_url="/docs", redoc_url="/redoc", openapi_url="/openapi.json")

_load_result: LoadResult | None = None
_executor: ReportExecutor | None = None


# ============================================================================
# Pydantic Models
# ============================================================================

class HealthResponse(BaseModel):
    status: str
    dataset_loaded: bool
    source: str | None = None
    row_count: int = 0
    rejected_rows: int = 0


class ViewResponse(BaseModel):
    name: str
    columns: list[str]
    rows: list[dict]
    row_count: int
    total_rows: int


class ReloadResponse(BaseModel):
    source: str | None
    row_count: int
    rejected_rows: int


# ============================================================================
# Dataset lifecycle
# ============================================================================

def install_dataset(result: LoadResult) -> ReportExecutor:
    """Swap in a freshly loaded snapshot and a matching executor."""
    global _load_result, _executor
    _load_result = result
    _executor = ReportExecutor(result.dataset, max_top_n=get_settings().max_top_n)
    return _executor


def _require_executor() -> ReportExecutor:
    if _executor is None:
        raise HTTPException(503, {"code": ErrorCode.DATASET_UNAVAILABLE, "message": "Movies dataset is not loaded"})
    return _executor


def _load_from_settings() -> LoadResult:
    s = get_settings()
    result = load_movies_csv(s.movies_csv_path)
    install_dataset(result)
    return result


@app.on_event("startup")
async def startup() -> None:
    s = get_settings()
    logging.basicConfig(level=s.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        _load_from_settings()
    except DatasetLoadError as exc:
        logger.warning("Movies dataset not loaded: %s", exc)


# ============================================================================
# Routes
# ============================================================================

@app.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    if _load_result is None:
        return HealthResponse(status="unavailable", dataset_loaded=False)
    return HealthResponse(
        status="ok",
        dataset_loaded=True,
        source=_load_result.source,
        row_count=_load_result.loaded_count,
        rejected_rows=_load_result.rejected_count,
    )


@app.get("/api/reports", response_model=list[ReportInfo])
def list_reports() -> list[ReportInfo]:
    return _require_executor().list_reports()


@app.get("/api/reports/{name}", response_model=ReportResult)
def run_report(name: str, top_n: int | None = Query(None)) -> ReportResult:
    executor = _require_executor()
    try:
        return executor.execute(name, top_n=top_n)
    except ReportNotFoundError as exc:
        raise HTTPException(404, {"code": ErrorCode.NOT_FOUND, "message": str(exc)})
    except InvalidReportParameterError as exc:
        raise HTTPException(400, {"code": ErrorCode.INVALID_PARAMETER, "message": str(exc)})
    except ReportExecutionError as exc:
        logger.warning("Report %s failed: %s", name, exc)
        raise HTTPException(500, {"code": ErrorCode.REPORT_FAILED, "message": str(exc)})


@app.get("/api/views/{view_name}", response_model=ViewResponse)
def read_view(view_name: str, limit: int | None = Query(None, ge=1)) -> ViewResponse:
    executor = _require_executor()
    try:
        frame = executor.dataset.view(view_name)
    except KeyError:
        raise HTTPException(404, {"code": ErrorCode.NOT_FOUND, "message": f"View not found: {view_name}"})
    total = len(frame)
    shown = frame.head(limit or get_settings().view_preview_limit)
    rows = frame_to_rows(shown)
    return ViewResponse(name=view_name, columns=list(shown.columns), rows=rows, row_count=len(rows), total_rows=total)


@app.get("/api/profile", response_model=DatasetProfile)
def profile() -> DatasetProfile:
    return _require_executor().profile


@app.get("/api/load-errors", response_model=list[RowError])
def load_errors() -> list[RowError]:
    _require_executor()
    return list(_load_result.errors) if _load_result else []


@app.post("/api/reload", response_model=ReloadResponse)
def reload_dataset() -> ReloadResponse:
    try:
        result = _load_from_settings()
    except DatasetLoadError as exc:
        raise HTTPException(503, {"code": ErrorCode.DATASET_UNAVAILABLE, "message": str(exc)})
    return ReloadResponse(source=result.source, row_count=result.loaded_count, rejected_rows=result.rejected_count)
