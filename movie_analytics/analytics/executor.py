"""Run catalog reports against a dataset snapshot and format results."""
from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from ..domain.types import INTEGER_FIELDS
from .dataset import MovieDataset, cell_to_python
from .errors import AnalyticsError, ReportExecutionError, ReportNotFoundError
from .models import DatasetProfile, ReportInfo, ReportResult
from .profiler import profile_dataset
from .reports import REPORT_CATALOG, ReportSpec, list_reports
from .validator import validate_request, validate_result

logger = logging.getLogger(__name__)


class ReportExecutor:
    """Resolves, validates, runs and formats named reports over one snapshot."""

    def __init__(self, dataset: MovieDataset, *, max_top_n: int | None = None) -> None:
        self._dataset = dataset
        self._max_top_n = max_top_n
        self._profile: DatasetProfile | None = None

    @property
    def dataset(self) -> MovieDataset:
        return self._dataset

    @property
    def profile(self) -> DatasetProfile:
        if self._profile is None:
            self._profile = profile_dataset(self._dataset)
        return self._profile

    def list_reports(self) -> list[ReportInfo]:
        return list_reports()

    def get_spec(self, name: str) -> ReportSpec:
        spec = REPORT_CATALOG.get(name)
        if spec is None:
            raise ReportNotFoundError(f"Unknown report: {name}")
        return spec

    def execute(self, name: str, top_n: int | None = None) -> ReportResult:
        spec = self.get_spec(name)
        limit = validate_request(spec, top_n, self._max_top_n)

        if self._dataset.is_empty and spec.kind != "rows":
            return ReportResult(name=name, kind=spec.kind, summary="No data.", value=None)

        try:
            raw = spec.func(self._dataset)
        except AnalyticsError:
            raise
        except Exception as exc:
            raise ReportExecutionError(f"Report '{name}' failed: {exc}") from exc

        result = self._format_result(spec, raw, limit)

        try:
            validate_result(result, self.profile)
        except Exception as exc:
            logger.warning("Result validation warning: %s", exc)

        return result

    def _format_result(self, spec: ReportSpec, raw: Any, limit: int | None) -> ReportResult:
        if spec.kind == "scalar":
            value = cell_to_python(raw)
            return ReportResult(
                name=spec.name, kind=spec.kind, summary=self._build_summary(spec, value), value=value,
            )

        if spec.kind == "record":
            value = None if raw is None else {k: cell_to_python(v) for k, v in raw.items()}
            return ReportResult(
                name=spec.name, kind=spec.kind, summary=self._build_summary(spec, value), value=value,
            )

        frame: pd.DataFrame = raw if limit is None else raw.head(limit)
        rows = frame_to_rows(frame)
        return ReportResult(
            name=spec.name,
            kind=spec.kind,
            summary=self._build_summary(spec, rows),
            columns=[str(c) for c in frame.columns],
            rows=rows,
            row_count=len(rows),
        )

    def _build_summary(self, spec: ReportSpec, data: Any) -> str:
        if spec.kind == "scalar":
            if data is None:
                return f"{spec.description} No data."
            shown = round(data, 4) if isinstance(data, float) else data
            return f"{spec.description} {shown}"
        if spec.kind == "record":
            if data is None:
                return f"{spec.description} No data."
            return f"{spec.description} {len(data)} value(s)."
        return f"Retrieved {len(data)} row(s) for '{spec.name}'."


def frame_to_rows(frame: pd.DataFrame) -> list[dict[str, Any]]:
    out = frame.copy()
    for col in out.columns:
        if col in INTEGER_FIELDS:
            out[col] = out[col].astype("Int64")
    out = out.astype(object).where(pd.notnull(out), None)
    return [
        {str(k): cell_to_python(v) for k, v in row.items()}
        for row in out.to_dict(orient="records")
    ]
