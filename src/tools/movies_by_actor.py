"""list_movies_by_actor tool."""

from src.tools.base import BaseTool, ToolResult
from src.tools.schemas import MovieSummary, MoviesByActorInput, MoviesByActorOutput
from src.tools.tmdb_models import MovieCredit, MovieCredits, PersonSearchResult
from src.tools.text import release_year


MAX_MOVIES = 10


def sort_by_release_desc(credits: list[MovieCredit]) -> list[MovieCredit]:
    """Newest first; credits without a release date keep their order at the end."""
    dated = [credit for credit in credits if credit.release_date]
    undated = [credit for credit in credits if not credit.release_date]
    dated.sort(key=lambda credit: credit.release_date or "", reverse=True)
    return dated + undated


class MoviesByActorTool(BaseTool[MoviesByActorInput]):
    """Lists the most recent movies an actor appeared in."""

    name = "list_movies_by_actor"
    title = "List Movies by Actor"
    description = "Returns a list of movies for a given actor name."
    input_model = MoviesByActorInput

    def execute(self, params: MoviesByActorInput) -> ToolResult:
        search = PersonSearchResult.model_validate(
            self._client.fetch("/search/person", {"query": params.actor_name})
        )
        if not search.results:
            return self.format_success(f"No actor found for '{params.actor_name}'.")

        actor = search.results[0]
        credits = MovieCredits.model_validate(
            self._client.fetch(f"/person/{actor.id}/movie_credits", {})
        )
        if not credits.cast:
            return self.format_success(
                f"No movies found for actor '{params.actor_name}'."
            )

        movies = [
            MovieSummary(title=credit.title, release_date=credit.release_date)
            for credit in sort_by_release_desc(credits.cast)[:MAX_MOVIES]
        ]
        result = MoviesByActorOutput(actor_name=actor.name, movies=movies)

        listing = "\n".join(
            f"{movie.title} ({release_year(movie.release_date, 'Unknown')})"
            for movie in movies
        )
        text = f"Movies for {result.actor_name} (showing up to {MAX_MOVIES}):\n{listing}"
        return self.format_success(text, result)
