"""MCP tools answering movie and actor questions from TMDb."""

from src.tools.actor_info import ActorInfoTool
from src.tools.base import BaseTool, TmdbFetcher, ToolResult
from src.tools.movie_info import MovieInfoTool
from src.tools.movies_by_actor import MoviesByActorTool
from src.tools.top_rated_movies import TopRatedMoviesTool


TOOL_CLASSES: tuple[type[BaseTool], ...] = (
    MovieInfoTool,
    ActorInfoTool,
    MoviesByActorTool,
    TopRatedMoviesTool,
)


def build_tools(client: TmdbFetcher) -> list[BaseTool]:
    """Instantiate every registered tool against one TMDb client.

    Args:
        client: Shared TMDb fetcher.

    Returns:
        Tools in registration order.
    """
    return [tool_class(client) for tool_class in TOOL_CLASSES]


__all__ = [
    "ActorInfoTool",
    "BaseTool",
    "MovieInfoTool",
    "MoviesByActorTool",
    "TOOL_CLASSES",
    "TmdbFetcher",
    "ToolResult",
    "TopRatedMoviesTool",
    "build_tools",
]
