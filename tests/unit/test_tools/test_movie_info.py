"""Unit tests for the get_movie_info tool."""

import pytest

from src.fetch.errors import TmdbApiError
from src.tools.movie_info import MovieInfoTool
from tests.helpers.tmdb import FakeFetcher


INCEPTION_DETAILS = {
    "id": 27205,
    "title": "Inception",
    "release_date": "2010-07-16",
    "overview": "A mind-bending thriller.",
    "vote_average": 8.8,
    "genres": [{"id": 28, "name": "Action"}, {"id": 878, "name": "Sci-Fi"}],
}


class TestMovieInfoTool:
    """Tests for MovieInfoTool."""

    @pytest.mark.unit
    def test_returns_movie_info_for_valid_title(self) -> None:
        """Test that the first search hit is looked up and formatted."""
        fetcher = FakeFetcher(
            {
                "/search/movie": {"results": [{"id": 27205}, {"id": 1}]},
                "/movie/27205": INCEPTION_DETAILS,
            }
        )

        result = MovieInfoTool(fetcher).run({"title": "Inception"})

        assert result.is_error is False
        assert result.data == {
            "title": "Inception",
            "release": "2010-07-16",
            "overview": "A mind-bending thriller.",
            "rating": 8.8,
            "genres": ["Action", "Sci-Fi"],
        }
        assert result.text == (
            "Title: Inception\n"
            "Release: 2010-07-16\n"
            "Overview: A mind-bending thriller.\n"
            "Rating: 8.8\n"
            "Genres: Action, Sci-Fi"
        )
        assert fetcher.calls == [
            ("/search/movie", {"query": "Inception"}),
            ("/movie/27205", {}),
        ]

    @pytest.mark.unit
    def test_no_movie_found_is_not_an_error(self) -> None:
        """Test that an empty search answers with a friendly message."""
        fetcher = FakeFetcher({"/search/movie": {"results": []}})

        result = MovieInfoTool(fetcher).run({"title": "Nonexistent Movie"})

        assert result.is_error is False
        assert result.text == "No movie found for 'Nonexistent Movie'."
        assert len(fetcher.calls) == 1

    @pytest.mark.unit
    def test_missing_fields_use_defaults(self) -> None:
        """Test that sparse detail payloads still render."""
        fetcher = FakeFetcher(
            {
                "/search/movie": {"results": [{"id": 5}]},
                "/movie/5": {"title": "Obscure", "vote_average": 7.0},
            }
        )

        result = MovieInfoTool(fetcher).run({"title": "Obscure"})

        assert "Release: \n" in result.text
        assert "Rating: 7\n" in result.text
        assert result.text.endswith("Genres: ")

    @pytest.mark.unit
    def test_blank_title_is_rejected(self) -> None:
        """Test that whitespace-only titles fail validation without fetching."""
        fetcher = FakeFetcher({})

        result = MovieInfoTool(fetcher).run({"title": "   "})

        assert result.is_error is True
        assert result.error_code == "VALIDATION_ERROR"
        assert result.text.startswith("Error: Invalid input: title:")
        assert fetcher.calls == []

    @pytest.mark.unit
    def test_api_failure_becomes_error_result(self) -> None:
        """Test that fetch failures are reported, not raised."""
        fetcher = FakeFetcher(
            {
                "/search/movie": TmdbApiError(
                    "TMDb API error: Service Unavailable - busy",
                    status_code=503,
                    endpoint="/search/movie",
                )
            }
        )

        result = MovieInfoTool(fetcher).run({"title": "Inception"})

        assert result.is_error is True
        assert result.error_code == "TMDB_API_ERROR"
        assert result.error_type == "TmdbApiError"
        assert result.text == "Error: TMDb API error: Service Unavailable - busy"
