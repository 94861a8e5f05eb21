"""get_actor_info tool."""

from src.tools.base import BaseTool, ToolResult
from src.tools.schemas import ActorInfoInput, ActorInfoOutput
from src.tools.tmdb_models import PersonDetails, PersonSearchResult
from src.tools.text import truncate


BIOGRAPHY_PREVIEW_CHARS = 500


class ActorInfoTool(BaseTool[ActorInfoInput]):
    """Looks up an actor by name and reports a short profile."""

    name = "get_actor_info"
    title = "Get Actor Information"
    description = "Returns information about a specific actor by name."
    input_model = ActorInfoInput

    def execute(self, params: ActorInfoInput) -> ToolResult:
        search = PersonSearchResult.model_validate(
            self._client.fetch("/search/person", {"query": params.name})
        )
        if not search.results:
            return self.format_success(f"No actor found for '{params.name}'.")

        actor = search.results[0]
        details = PersonDetails.model_validate(
            self._client.fetch(f"/person/{actor.id}", {})
        )

        result = ActorInfoOutput(
            name=details.name,
            biography=details.biography or "No biography available",
            birth_date=details.birthday,
            death_date=details.deathday or None,
            place_of_birth=details.place_of_birth or None,
            popularity=details.popularity,
            known_for=[details.known_for_department or "Acting"],
        )
        text = (
            f"Name: {result.name}\n"
            f"Birthday: {result.birth_date or 'Unknown'}\n"
            f"Known for: {', '.join(result.known_for)}\n"
            f"Bio: {truncate(result.biography, BIOGRAPHY_PREVIEW_CHARS)}"
        )
        return self.format_success(text, result)
