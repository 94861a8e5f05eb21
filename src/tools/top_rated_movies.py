"""get_top_rated_movies tool."""

from src.tools.base import BaseTool, ToolResult
from src.tools.schemas import RatedMovie, TopRatedMoviesInput, TopRatedMoviesOutput
from src.tools.tmdb_models import TopRatedMovies
from src.tools.text import format_rating, release_year


DEFAULT_LIMIT = 10


class TopRatedMoviesTool(BaseTool[TopRatedMoviesInput]):
    """Lists TMDb's top-rated movies."""

    name = "get_top_rated_movies"
    title = "Get Top Rated Movies"
    description = "Returns a list of top-rated movies."
    input_model = TopRatedMoviesInput

    def execute(self, params: TopRatedMoviesInput) -> ToolResult:
        limit = params.limit or DEFAULT_LIMIT
        data = TopRatedMovies.model_validate(
            self._client.fetch("/movie/top_rated", {"page": "1"})
        )
        if not data.results:
            return self.format_success("No top-rated movies found.")

        movies = [
            RatedMovie(
                title=movie.title,
                release_date=movie.release_date,
                rating=movie.vote_average,
            )
            for movie in data.results[:limit]
        ]
        result = TopRatedMoviesOutput(movies=movies, total_count=len(data.results))

        listing = "\n".join(
            f"{movie.title} ({release_year(movie.release_date, 'N/A')})"
            f" - Rating: {format_rating(movie.rating)}"
            for movie in movies
        )
        text = f"Top Rated Movies (showing up to {limit}):\n{listing}"
        return self.format_success(text, result)
