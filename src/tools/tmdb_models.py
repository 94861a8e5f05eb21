"""TMDb response payload models.

Only the fields the tools read are declared; everything else the API
returns is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field


class _TmdbModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class MovieSearchHit(_TmdbModel):
    """One result of /search/movie."""

    id: int
    title: str = ""
    release_date: str | None = None
    overview: str | None = None
    vote_average: float = 0.0
    genre_ids: list[int] = Field(default_factory=list)


class MovieSearchResult(_TmdbModel):
    """Response of /search/movie."""

    page: int = 1
    results: list[MovieSearchHit] = Field(default_factory=list)


class Genre(_TmdbModel):
    """Movie genre."""

    id: int | None = None
    name: str


class MovieDetails(_TmdbModel):
    """Response of /movie/{id}."""

    id: int | None = None
    title: str = ""
    release_date: str | None = None
    overview: str | None = None
    vote_average: float = 0.0
    genres: list[Genre] = Field(default_factory=list)


class PersonSearchHit(_TmdbModel):
    """One result of /search/person."""

    id: int
    name: str = ""
    known_for_department: str | None = None


class PersonSearchResult(_TmdbModel):
    """Response of /search/person."""

    page: int = 1
    results: list[PersonSearchHit] = Field(default_factory=list)


class PersonDetails(_TmdbModel):
    """Response of /person/{id}."""

    id: int | None = None
    name: str = ""
    birthday: str | None = None
    deathday: str | None = None
    known_for_department: str | None = None
    biography: str | None = None
    place_of_birth: str | None = None
    popularity: float = 0.0


class MovieCredit(_TmdbModel):
    """One cast credit of /person/{id}/movie_credits."""

    id: int | None = None
    title: str = ""
    release_date: str | None = None


class MovieCredits(_TmdbModel):
    """Response of /person/{id}/movie_credits."""

    cast: list[MovieCredit] = Field(default_factory=list)


class TopRatedMovie(_TmdbModel):
    """One result of /movie/top_rated."""

    id: int | None = None
    title: str = ""
    release_date: str | None = None
    vote_average: float = 0.0


class TopRatedMovies(_TmdbModel):
    """Response of /movie/top_rated."""

    page: int = 1
    results: list[TopRatedMovie] = Field(default_factory=list)
