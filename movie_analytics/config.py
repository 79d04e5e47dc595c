from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import os

from dotenv import load_dotenv

load_dotenv()


def _getenv_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _normalize_level(raw: str | None) -> str:
    value = (raw or "INFO").strip().upper()
    return value if value in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO"


@dataclass(frozen=True)
class Settings:
    movies_csv_path: str
    max_top_n: int
    view_preview_limit: int
    log_level: str


settings = Settings(
    movies_csv_path=os.getenv("MOVIES_CSV_PATH", "data/imdb_top_1000.csv"),
    max_top_n=_getenv_int("MAX_TOP_N", 1000),
    view_preview_limit=_getenv_int("VIEW_PREVIEW_LIMIT", 100),
    log_level=_normalize_level(os.getenv("LOG_LEVEL")),
)

_RUNTIME_OVERRIDES: dict[str, Any] = {}


def get_settings() -> Settings:
    if not _RUNTIME_OVERRIDES:
        return settings
    base = settings
    return Settings(
        movies_csv_path=_RUNTIME_OVERRIDES.get("movies_csv_path", base.movies_csv_path),
        max_top_n=_RUNTIME_OVERRIDES.get("max_top_n", base.max_top_n),
        view_preview_limit=_RUNTIME_OVERRIDES.get(
            "view_preview_limit", base.view_preview_limit
        ),
        log_level=_RUNTIME_OVERRIDES.get("log_level", base.log_level),
    )


def update_settings(overrides: dict[str, Any]) -> Settings:
    normalized: dict[str, Any] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        if key == "log_level":
            normalized[key] = _normalize_level(str(value))
        elif key in {"max_top_n", "view_preview_limit"}:
            normalized[key] = int(value)
        else:
            normalized[key] = value
    _RUNTIME_OVERRIDES.update(normalized)
    return get_settings()


def reset_settings() -> Settings:
    _RUNTIME_OVERRIDES.clear()
    return get_settings()
