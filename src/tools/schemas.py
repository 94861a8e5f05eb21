"""Input and output schemas for the MCP tools."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class _ToolInput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)


class _ToolOutput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# Movie Info
class MovieInfoInput(_ToolInput):
    title: Annotated[
        str, Field(min_length=1, description="The title of the movie to look up.")
    ]


class MovieInfoOutput(_ToolOutput):
    title: str
    release: str
    overview: str
    rating: float
    genres: list[str]


# Actor Info
class ActorInfoInput(_ToolInput):
    name: Annotated[
        str, Field(min_length=1, description="The name of the actor to look up.")
    ]


class ActorInfoOutput(_ToolOutput):
    name: str
    biography: str
    birth_date: str | None = None
    death_date: str | None = None
    place_of_birth: str | None = None
    popularity: float
    known_for: list[str]


# Movies by Actor
class MoviesByActorInput(_ToolInput):
    actor_name: Annotated[
        str,
        Field(min_length=1, description="The name of the actor to find movies for."),
    ]


class MovieSummary(_ToolOutput):
    title: str
    release_date: str | None = None
    rating: float | None = None
    overview: str | None = None


class MoviesByActorOutput(_ToolOutput):
    actor_name: str
    movies: list[MovieSummary]


# Top Rated Movies
class TopRatedMoviesInput(_ToolInput):
    limit: Annotated[
        int | None,
        Field(
            ge=1,
            le=50,
            description="Number of movies to return (default: 10, max: 50).",
        ),
    ] = None


class RatedMovie(_ToolOutput):
    title: str
    release_date: str | None = None
    rating: float
    overview: str | None = None


class TopRatedMoviesOutput(_ToolOutput):
    movies: list[RatedMovie]
    total_count: int
