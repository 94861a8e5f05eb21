"""Unit tests for the MCP server wiring."""

import asyncio
import json
from collections.abc import Generator

import httpx
import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from src.server.app import MovieServer
from src.settings.app import AppSettings
from tests.helpers.tmdb import TEST_API_KEY, RecordingTransport


def tmdb_handler(request: httpx.Request) -> httpx.Response:
    """Minimal fake of the TMDb endpoints used by get_movie_info."""
    if request.url.path.endswith("/search/movie"):
        return httpx.Response(200, json={"results": [{"id": 27205}]})
    if request.url.path.endswith("/movie/27205"):
        return httpx.Response(
            200,
            json={
                "title": "Inception",
                "release_date": "2010-07-16",
                "overview": "Dreams within dreams.",
                "vote_average": 8.4,
                "genres": [{"name": "Action"}],
            },
        )
    return httpx.Response(404, text="not found")


def make_settings(**overrides: object) -> AppSettings:
    """Settings for a server talking to the fake transport."""
    values: dict[str, object] = {
        "TMDB_API_KEY": TEST_API_KEY,
        "TMDB_BASE_URL": "https://api.example.test/3",
    }
    values.update(overrides)
    return AppSettings(_env_file=None, **values)  # type: ignore[arg-type]


@pytest.fixture
def transport() -> RecordingTransport:
    """Recording fake TMDb transport."""
    return RecordingTransport(tmdb_handler)


@pytest.fixture
def server(transport: RecordingTransport) -> Generator[MovieServer, None, None]:
    """Server wired to the fake transport, closed after the test."""
    movie_server = MovieServer(make_settings(), http_client=transport.client())
    yield movie_server
    movie_server.close()


class TestMovieServer:
    """Tests for MovieServer."""

    @pytest.mark.unit
    def test_call_tool_returns_text(
        self, server: MovieServer, transport: RecordingTransport
    ) -> None:
        """Test that a tool call runs end to end through the shared client."""
        text = asyncio.run(server.call_tool("get_movie_info", {"title": "Inception"}))

        assert text.startswith("Title: Inception\n")
        assert len(transport.requests) == 2

    @pytest.mark.unit
    def test_repeated_call_served_from_cache(
        self, server: MovieServer, transport: RecordingTransport
    ) -> None:
        """Test that tools share the process-wide cache."""
        asyncio.run(server.call_tool("get_movie_info", {"title": "Inception"}))
        asyncio.run(server.call_tool("get_movie_info", {"title": "Inception"}))

        assert len(transport.requests) == 2
        assert server.cache.stats().hits == 2

    @pytest.mark.unit
    def test_error_result_raises_tool_error(self, server: MovieServer) -> None:
        """Test that error results reach MCP clients as tool errors."""
        with pytest.raises(ToolError, match="Invalid input"):
            asyncio.run(server.call_tool("get_movie_info", {"title": ""}))

    @pytest.mark.unit
    def test_api_failure_raises_tool_error(self, server: MovieServer) -> None:
        """Test that a 404 from TMDb is reported as a tool error."""
        with pytest.raises(ToolError, match="TMDb API error: Not Found"):
            asyncio.run(server.call_tool("get_actor_info", {"name": "Nobody"}))

    @pytest.mark.unit
    def test_tools_registered_with_fastmcp(self, server: MovieServer) -> None:
        """Test that every tool is listed by the MCP server."""

        async def list_names() -> set[str]:
            async with Client(server.mcp) as client:
                tools = await client.list_tools()
            return {tool.name for tool in tools}

        names = asyncio.run(list_names())

        assert names == {
            "get_movie_info",
            "get_actor_info",
            "list_movies_by_actor",
            "get_top_rated_movies",
        }
        assert sorted(server.tool_names) == sorted(names)

    @pytest.mark.unit
    def test_cache_stats_tool_is_optional(self, transport: RecordingTransport) -> None:
        """Test that cache statistics are exposed only when enabled."""
        with MovieServer(
            make_settings(EXPOSE_CACHE_STATS="true"), http_client=transport.client()
        ) as server:
            assert "get_cache_stats" in server.tool_names
            stats = json.loads(server.cache_stats_json())

        assert stats["entries"] == 0
        assert stats["memory_usage"]["max"] == 50 * 1024 * 1024

    @pytest.mark.unit
    def test_close_is_idempotent(self, transport: RecordingTransport) -> None:
        """Test that closing twice is safe and stops cache cleanup."""
        server = MovieServer(make_settings(), http_client=transport.client())
        thread = server.cache._cleanup_thread

        server.close()
        server.close()

        assert thread is not None
        assert not thread.is_alive()

    @pytest.mark.unit
    def test_rate_limiter_enabled_by_setting(
        self, transport: RecordingTransport
    ) -> None:
        """Test that a positive request budget installs the limiter."""
        with MovieServer(
            make_settings(TMDB_RATE_LIMIT_REQUESTS="40"),
            http_client=transport.client(),
        ) as server:
            limiter = server._client._rate_limiter

        assert limiter is not None
        assert limiter.max_requests == 40
