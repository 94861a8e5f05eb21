"""get_movie_info tool."""

from src.tools.base import BaseTool, ToolResult
from src.tools.schemas import MovieInfoInput, MovieInfoOutput
from src.tools.tmdb_models import MovieDetails, MovieSearchResult
from src.tools.text import format_rating


class MovieInfoTool(BaseTool[MovieInfoInput]):
    """Looks up a movie by title and reports its details."""

    name = "get_movie_info"
    title = "Get Movie Information"
    description = "Returns information about a specific movie by title."
    input_model = MovieInfoInput

    def execute(self, params: MovieInfoInput) -> ToolResult:
        search = MovieSearchResult.model_validate(
            self._client.fetch("/search/movie", {"query": params.title})
        )
        if not search.results:
            return self.format_success(f"No movie found for '{params.title}'.")

        movie = search.results[0]
        details = MovieDetails.model_validate(
            self._client.fetch(f"/movie/{movie.id}", {})
        )

        result = MovieInfoOutput(
            title=details.title,
            release=details.release_date or "",
            overview=details.overview or "",
            rating=details.vote_average,
            genres=[genre.name for genre in details.genres],
        )
        text = (
            f"Title: {result.title}\n"
            f"Release: {result.release}\n"
            f"Overview: {result.overview}\n"
            f"Rating: {format_rating(result.rating)}\n"
            f"Genres: {', '.join(result.genres)}"
        )
        return self.format_success(text, result)
