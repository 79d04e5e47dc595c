"""HTTP surface tests; the dataset is installed directly, startup is not run."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from movie_analytics import app as app_module
from movie_analytics.analytics import RowError
from movie_analytics.config import get_settings, reset_settings, update_settings
from movie_analytics.loader import LoadResult


@pytest.fixture
def client(dataset, monkeypatch) -> TestClient:
    monkeypatch.setattr(app_module, "_load_result", None)
    monkeypatch.setattr(app_module, "_executor", None)
    errors = [RowError(row_number=3, line_number=4, reason="expected 16 fields, got 5")]
    app_module.install_dataset(LoadResult(dataset=dataset, errors=errors, source="fixture"))
    return TestClient(app_module.app)


@pytest.fixture
def bare_client(monkeypatch) -> TestClient:
    monkeypatch.setattr(app_module, "_load_result", None)
    monkeypatch.setattr(app_module, "_executor", None)
    return TestClient(app_module.app)


# ============================================================================
# Health and Catalog
# ============================================================================

class TestHealth:
    def test_loaded(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "ok"
        assert body["dataset_loaded"] is True
        assert body["row_count"] == 8
        assert body["rejected_rows"] == 1

    def test_unloaded(self, bare_client):
        body = bare_client.get("/api/health").json()
        assert body["dataset_loaded"] is False

    def test_reports_need_dataset(self, bare_client):
        resp = bare_client.get("/api/reports/total_movies")
        assert resp.status_code == 503
        assert resp.json()["detail"]["code"] == "DATASET_UNAVAILABLE"


class TestCatalog:
    def test_lists_reports(self, client):
        names = {r["name"] for r in client.get("/api/reports").json()}
        assert {"total_movies", "star_leaderboard", "cumulative_gross"} <= names

    def test_scalar_report(self, client):
        body = client.get("/api/reports/total_movies").json()
        assert body["kind"] == "scalar"
        assert body["value"] == 8

    def test_rows_report_with_top_n(self, client):
        body = client.get("/api/reports/top_rated", params={"top_n": 2}).json()
        assert body["row_count"] == 2
        assert body["rows"][0]["title"] == "The Shawshank Redemption"

    def test_unknown_report(self, client):
        resp = client.get("/api/reports/nope")
        assert resp.status_code == 404
        assert resp.json()["detail"]["code"] == "NOT_FOUND"

    def test_invalid_top_n(self, client):
        resp = client.get("/api/reports/top_rated", params={"top_n": 0})
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "INVALID_PARAMETER"


# ============================================================================
# Views, Profile and Load Errors
# ============================================================================

class TestViews:
    def test_easy_view(self, client):
        body = client.get("/api/views/movies_easy_view", params={"limit": 3}).json()
        assert body["row_count"] == 3
        assert body["total_rows"] == 8
        assert "title" in body["columns"]

    def test_unknown_view(self, client):
        assert client.get("/api/views/other_view").status_code == 404

    def test_limit_must_be_positive(self, client):
        assert client.get("/api/views/movies_easy_view", params={"limit": 0}).status_code == 422

    def test_profile(self, client):
        body = client.get("/api/profile").json()
        assert body["row_count"] == 8
        assert body["columns"]["gross"]["null_count"] == 1

    def test_load_errors(self, client):
        body = client.get("/api/load-errors").json()
        assert body == [{"row_number": 3, "line_number": 4, "reason": "expected 16 fields, got 5", "field": None}]


class TestReload:
    def test_reload_missing_file(self, bare_client, tmp_path):
        update_settings({"movies_csv_path": str(tmp_path / "missing.csv")})
        try:
            resp = bare_client.post("/api/reload")
        finally:
            reset_settings()
        assert resp.status_code == 503

    def test_reload_from_file(self, bare_client, tmp_path):
        path = tmp_path / "movies.csv"
        path.write_text(
            "Series_Title,Released_Year,Certificate,Runtime,Genre,IMDB_Rating,Meta_score,Director,"
            "Star1,Star2,Star3,Star4,No_of_Votes,Gross\n"
            "Up,2009,U,96 min,Animation,8.2,88,Pete Docter,Ed Asner,Jordan Nagai,"
            "John Ratzenberger,Christopher Plummer,935507,\"293,004,164\"\n",
            encoding="utf-8",
        )
        update_settings({"movies_csv_path": str(path)})
        try:
            resp = bare_client.post("/api/reload")
        finally:
            reset_settings()
        assert resp.status_code == 200
        assert resp.json()["row_count"] == 1
        assert bare_client.get("/api/reports/total_movies").json()["value"] == 1


# ============================================================================
# Settings
# ============================================================================

class TestSettings:
    def test_overrides_and_reset(self):
        base = get_settings()
        try:
            updated = update_settings({"max_top_n": "25", "log_level": "debug", "view_preview_limit": None})
            assert updated.max_top_n == 25
            assert updated.log_level == "DEBUG"
            assert updated.view_preview_limit == base.view_preview_limit
        finally:
            reset_settings()
        assert get_settings() == base
