from __future__ import annotations

import pytest

from movie_analytics.analytics import MovieDataset, MovieRecord, ReportExecutor


@pytest.fixture
def movies() -> list[MovieRecord]:
    """Eight films with known values; gross is in millions."""
    return [
        MovieRecord("The Shawshank Redemption", "1994", "A", 142.0, "Drama", 9.3, 80, "Frank Darabont",
                    "Tim Robbins", "Morgan Freeman", "Bob Gunton", "William Sadler", 2343110, 28.0),
        MovieRecord("The Godfather", "1972", "A", 175.0, "Crime, Drama", 9.2, 100, "Francis Ford Coppola",
                    "Marlon Brando", "Al Pacino", "James Caan", "Diane Keaton", 1620367, 135.0),
        MovieRecord("The Dark Knight", "2008", "UA", 152.0, "Action, Crime, Drama", 9.0, 84, "Christopher Nolan",
                    "Christian Bale", "Heath Ledger", "Aaron Eckhart", "Michael Caine", 2303232, 535.0),
        MovieRecord("The Godfather: Part II", "1974", "A", 202.0, "Crime, Drama", 9.0, 90, "Francis Ford Coppola",
                    "Al Pacino", "Robert De Niro", "Robert Duvall", "Diane Keaton", 1129952, 57.0),
        MovieRecord("Inception", "2010", "UA", 148.0, "Action, Adventure, Sci-Fi", 8.8, 74, "Christopher Nolan",
                    "Leonardo DiCaprio", "Joseph Gordon-Levitt", "Elliot Page", "Ken Watanabe", 2067042, 293.0),
        MovieRecord("Pulp Fiction", "1994", "A", 154.0, "Crime, Drama", 8.9, 94, "Quentin Tarantino",
                    "John Travolta", "Uma Thurman", "Samuel L. Jackson", "Bruce Willis", 1826188, 108.0),
        MovieRecord("Drishyam", "2013", None, 160.0, "Crime, Drama, Thriller", 8.3, None, "Jeethu Joseph",
                    "Mohanlal", "Meena", "Asha Sharath", None, 30722, None),
        MovieRecord("Apollo 13", "PG", "U", 140.0, "Adventure, Drama, History", 7.6, 45, "Ron Howard",
                    "Tom Hanks", "Bill Paxton", "Kevin Bacon", "Gary Sinise", 269197, 174.0),
    ]


@pytest.fixture
def dataset(movies) -> MovieDataset:
    return MovieDataset.from_records(movies, source="fixture")


@pytest.fixture
def executor(dataset) -> ReportExecutor:
    return ReportExecutor(dataset, max_top_n=100)
