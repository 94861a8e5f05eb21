"""Unit tests for the get_top_rated_movies tool."""

import pytest

from src.tools.top_rated_movies import TopRatedMoviesTool
from tests.helpers.tmdb import FakeFetcher


def top_rated(count: int) -> dict[str, object]:
    """Top-rated payload with ``count`` movies."""
    return {
        "page": 1,
        "results": [
            {
                "id": i,
                "title": f"Movie {i}",
                "release_date": f"19{50 + i}-05-01",
                "vote_average": 9.0 - i / 10,
            }
            for i in range(count)
        ],
    }


class TestTopRatedMoviesTool:
    """Tests for TopRatedMoviesTool."""

    @pytest.mark.unit
    def test_default_limit_is_ten(self) -> None:
        """Test that ten movies are listed when no limit is given."""
        fetcher = FakeFetcher({"/movie/top_rated": top_rated(20)})

        result = TopRatedMoviesTool(fetcher).run({})

        lines = result.text.split("\n")
        assert lines[0] == "Top Rated Movies (showing up to 10):"
        assert lines[1] == "Movie 0 (1950) - Rating: 9"
        assert lines[2] == "Movie 1 (1951) - Rating: 8.9"
        assert len(lines) == 11
        assert result.data is not None
        assert result.data["total_count"] == 20
        assert fetcher.calls == [("/movie/top_rated", {"page": "1"})]

    @pytest.mark.unit
    def test_custom_limit(self) -> None:
        """Test that the limit argument caps the listing."""
        fetcher = FakeFetcher({"/movie/top_rated": top_rated(20)})

        result = TopRatedMoviesTool(fetcher).run({"limit": 3})

        assert result.text.split("\n")[0] == "Top Rated Movies (showing up to 3):"
        assert len(result.text.split("\n")) == 4

    @pytest.mark.unit
    def test_missing_release_date(self) -> None:
        """Test the placeholder year for movies without a release date."""
        fetcher = FakeFetcher(
            {"/movie/top_rated": {"results": [{"title": "Mystery", "vote_average": 8.5}]}}
        )

        result = TopRatedMoviesTool(fetcher).run({"limit": None})

        assert result.text.endswith("Mystery (N/A) - Rating: 8.5")

    @pytest.mark.unit
    def test_empty_results(self) -> None:
        """Test the message for an empty listing."""
        fetcher = FakeFetcher({"/movie/top_rated": {"results": []}})

        result = TopRatedMoviesTool(fetcher).run({})

        assert result.text == "No top-rated movies found."

    @pytest.mark.unit
    @pytest.mark.parametrize("limit", [0, 51, "ten"])
    def test_invalid_limit(self, limit: object) -> None:
        """Test that out-of-range limits fail validation without fetching."""
        fetcher = FakeFetcher({})

        result = TopRatedMoviesTool(fetcher).run({"limit": limit})

        assert result.is_error is True
        assert result.error_code == "VALIDATION_ERROR"
        assert fetcher.calls == []
