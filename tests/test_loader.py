"""Tests for movies CSV ingestion and per-row rejection."""
from __future__ import annotations

from pathlib import Path

import pytest

from movie_analytics.analytics import MOVIE_COLUMNS, DatasetLoadError, ReportExecutor
from movie_analytics.domain.types import MOVIE_FIELDS
from movie_analytics.loader import _normalize_cell_value, load_movies_csv, load_movies_rows

HEADER = (
    "Poster_Link,Series_Title,Released_Year,Certificate,Runtime,Genre,IMDB_Rating,Overview,"
    "Meta_score,Director,Star1,Star2,Star3,Star4,No_of_Votes,Gross"
)

ROWS = [
    'http://img/1.jpg,The Shawshank Redemption,1994,A,142 min,Drama,9.3,"Two imprisoned men bond.",80,'
    'Frank Darabont,Tim Robbins,Morgan Freeman,Bob Gunton,William Sadler,2343110,"28,341,469"',
    'http://img/2.jpg,The Godfather,1972,A,175 min,"Crime, Drama",9.2,"A crime dynasty.",100,'
    'Francis Ford Coppola,Marlon Brando,Al Pacino,James Caan,Diane Keaton,1620367,"134,966,411"',
    # too few fields
    "http://img/3.jpg,Broken Row,2001,A,100 min",
    # non-numeric rating
    'http://img/4.jpg,Bad Rating,2001,U,90 min,Comedy,great,"Overview",60,Someone,A,B,C,D,1000,"1,000"',
    'http://img/5.jpg,Drishyam,2013,,160 min,"Crime, Drama, Thriller",8.3,"A man covers up.",,'
    "Jeethu Joseph,Mohanlal,Meena,Asha Sharath,Ansiba,30722,",
    'http://img/6.jpg,Apollo 13,PG,U,140 min,"Adventure, Drama, History",7.6,"Houston.",77,'
    'Ron Howard,Tom Hanks,Bill Paxton,Kevin Bacon,Gary Sinise,269197,"173,837,933"',
]


@pytest.fixture
def movies_csv(tmp_path: Path) -> Path:
    path = tmp_path / "imdb_top_1000.csv"
    path.write_text("\n".join([HEADER, *ROWS]) + "\n", encoding="utf-8")
    return path


# ============================================================================
# Cell Normalization
# ============================================================================

class TestCellNormalization:
    def test_runtime_suffix(self):
        assert _normalize_cell_value("142 min", "runtime") == 142.0

    def test_thousands_separator(self):
        assert _normalize_cell_value("28,341,469", "gross") == 28341469.0

    def test_integer_votes(self):
        assert _normalize_cell_value("2343110", "votes") == 2343110

    def test_blank_is_none(self):
        assert _normalize_cell_value("  ", "meta_score") is None
        assert _normalize_cell_value("", "certificate") is None

    def test_string_trim(self):
        assert _normalize_cell_value("  Drama ", "genre") == "Drama"

    def test_year_stays_text(self):
        assert _normalize_cell_value("PG", "released_year") == "PG"

    def test_null_tokens_only_for_numbers(self):
        assert _normalize_cell_value("NA", "gross") is None
        assert _normalize_cell_value("nan", "meta_score") is None
        assert _normalize_cell_value("Nan", "star1") == "Nan"
        assert _normalize_cell_value("NA", "title") == "NA"
        assert _normalize_cell_value("Null", "director") == "Null"

    @pytest.mark.parametrize(
        "raw, field",
        [("great", "imdb_rating"), ("11.5", "imdb_rating"), ("-4", "votes"), ("8.5", "meta_score"), ("inf", "gross")],
    )
    def test_rejected_values(self, raw, field):
        with pytest.raises(ValueError):
            _normalize_cell_value(raw, field)


# ============================================================================
# CSV Loading
# ============================================================================

class TestLoadCsv:
    def test_loads_valid_rows(self, movies_csv):
        result = load_movies_csv(movies_csv)
        assert result.loaded_count == 4
        assert result.rejected_count == 2
        titles = [r.title for r in result.dataset.records()]
        assert titles == ["The Shawshank Redemption", "The Godfather", "Drishyam", "Apollo 13"]

    def test_row_errors_report_positions(self, movies_csv):
        errors = load_movies_csv(movies_csv).errors
        assert [e.row_number for e in errors] == [3, 4]
        assert [e.line_number for e in errors] == [4, 5]
        assert "fields" in errors[0].reason
        assert errors[0].field is None
        assert errors[1].field == "imdb_rating"

    def test_typed_values(self, movies_csv):
        records = load_movies_csv(movies_csv).dataset.records()
        shawshank = records[0]
        assert shawshank.runtime == 142.0
        assert shawshank.gross == 28341469.0
        assert shawshank.votes == 2343110
        assert shawshank.meta_score == 80
        assert records[1].genre == "Crime, Drama"

    def test_missing_values_become_null(self, movies_csv):
        drishyam = load_movies_csv(movies_csv).dataset.records()[2]
        assert drishyam.certificate is None
        assert drishyam.meta_score is None
        assert drishyam.gross is None

    def test_loaded_dataset_reports(self, movies_csv):
        executor = ReportExecutor(load_movies_csv(movies_csv).dataset)
        counts = executor.execute("null_counts").value
        assert counts["null_gross"] == 1
        assert counts["null_certificate"] == 1
        assert executor.execute("total_movies").value == 4

    def test_canonical_headers_accepted(self):
        rows = [
            ["title", "released_year", "certificate", "runtime", "genre", "imdb_rating", "meta_score",
             "director", "star1", "star2", "star3", "star4", "votes", "gross"],
            ["Up", "2009", "U", "96", "Animation", "8.2", "88", "Pete Docter", "Ed Asner", "Jordan Nagai",
             "John Ratzenberger", "Christopher Plummer", "935507", "293004164"],
        ]
        result = load_movies_rows(rows)
        assert result.loaded_count == 1
        assert result.errors == []

    def test_null_like_names_kept(self):
        rows = [
            list(MOVIE_FIELDS),
            ["NA", "2009", "NA", "96", "Animation", "8.2", "NA", "Nan", "Null", "Nan", "Meena", "Ansiba",
             "935507", ""],
        ]
        result = load_movies_rows(rows)
        assert result.errors == []
        record = result.dataset.records()[0]
        assert record.title == "NA"
        assert record.certificate == "NA"
        assert record.director == "Nan"
        assert record.star1 == "Null"
        assert record.meta_score is None
        executor = ReportExecutor(result.dataset)
        counts = executor.execute("null_counts").value
        assert counts["null_title"] == 0
        assert counts["null_director"] == 0
        board = executor.execute("star_leaderboard").rows
        assert {"actor": "Nan", "appearances": 1} in board

    def test_blank_title_rejected(self):
        rows = [
            list(MOVIE_FIELDS),
            ["  ", "2009", "U", "96", "Animation", "8.2", "88", "Pete Docter", "Ed Asner", "Jordan Nagai",
             "John Ratzenberger", "Christopher Plummer", "935507", "293004164"],
            ["Up", "2009", "U", "96", "Animation", "8.2", "88", "Pete Docter", "Ed Asner", "Jordan Nagai",
             "John Ratzenberger", "Christopher Plummer", "935507", "293004164"],
        ]
        result = load_movies_rows(rows)
        assert result.loaded_count == 1
        assert [(e.row_number, e.field) for e in result.errors] == [(1, "title")]
        assert MOVIE_COLUMNS["title"].nullable is False

    def test_blank_lines_skipped(self, tmp_path):
        path = tmp_path / "movies.csv"
        path.write_text(HEADER + "\n\n" + ROWS[0] + "\n", encoding="utf-8")
        result = load_movies_csv(path)
        assert result.loaded_count == 1
        assert result.errors == []


# ============================================================================
# Whole-file Errors
# ============================================================================

class TestLoadErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(DatasetLoadError):
            load_movies_csv(tmp_path / "nope.csv")

    def test_missing_schema_column(self, tmp_path):
        path = tmp_path / "movies.csv"
        path.write_text("Series_Title,Released_Year\nUp,2009\n", encoding="utf-8")
        with pytest.raises(DatasetLoadError, match="missing columns"):
            load_movies_csv(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "movies.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(DatasetLoadError):
            load_movies_csv(path)

    def test_header_only_gives_empty_dataset(self, tmp_path):
        path = tmp_path / "movies.csv"
        path.write_text(HEADER + "\n", encoding="utf-8")
        result = load_movies_csv(path)
        assert result.loaded_count == 0
        assert ReportExecutor(result.dataset).execute("total_movies").value is None
