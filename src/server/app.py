"""FastMCP server wiring for the movie tools."""

import asyncio
import json
from typing import Annotated, Any, Literal

import httpx
import structlog
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from src.fetch.cache import ResponseCache
from src.fetch.client import TmdbClient
from src.fetch.rate_limiter import SlidingWindowRateLimiter
from src.settings.app import AppSettings
from src.tools import BaseTool, build_tools
from src.tools.actor_info import ActorInfoTool
from src.tools.movie_info import MovieInfoTool
from src.tools.movies_by_actor import MoviesByActorTool
from src.tools.top_rated_movies import TopRatedMoviesTool


logger = structlog.get_logger()

Transport = Literal["stdio", "sse", "streamable-http"]

CACHE_STATS_TOOL = "get_cache_stats"


class MovieServer:
    """Owns the process-wide cache, the TMDb client and the MCP server.

    One instance is created at startup. Tool calls run on worker threads
    so that network waits and retry backoff never block the event loop.

    Example:
        >>> server = MovieServer(load_settings())
        >>> server.run(transport="stdio")
    """

    def __init__(
        self,
        settings: AppSettings,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Build the cache, client, tools and MCP server.

        Args:
            settings: Validated application settings.
            http_client: Optional HTTP transport (tests inject a mock).
        """
        self._settings = settings
        self._cache: ResponseCache[Any] = ResponseCache(settings.cache_config())
        self._client = TmdbClient(
            settings.fetch_config(),
            self._cache,
            http_client=http_client,
            rate_limiter=self._create_rate_limiter(settings),
        )
        self._tools: dict[str, BaseTool] = {
            tool.name: tool for tool in build_tools(self._client)
        }
        self._closed = False
        self._log = logger.bind(component="server", server=settings.server_name)
        self._mcp = self._create_server()

    @property
    def tool_names(self) -> list[str]:
        """Names of the tools exposed over MCP."""
        names = list(self._tools)
        if self._settings.expose_cache_stats:
            names.append(CACHE_STATS_TOOL)
        return names

    @property
    def cache(self) -> ResponseCache[Any]:
        """The shared response cache."""
        return self._cache

    @property
    def mcp(self) -> FastMCP:
        """Access underlying FastMCP instance."""
        return self._mcp

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> str:
        """Run a tool on a worker thread and return its text.

        Args:
            name: Tool name.
            arguments: Raw tool arguments.

        Returns:
            Text content for the MCP response.

        Raises:
            ToolError: If the tool reported an error result.
        """
        tool = self._tools[name]
        result = await asyncio.to_thread(tool.run, arguments)
        if result.is_error:
            raise ToolError(result.text)
        return result.text

    def cache_stats_json(self) -> str:
        """Cache statistics rendered as JSON."""
        return json.dumps(self._cache.stats().model_dump(), sort_keys=True)

    def run(
        self,
        transport: Transport = "stdio",
        *,
        host: str = "127.0.0.1",
        port: int = 8080,
    ) -> None:
        """Start the MCP server (blocking).

        Args:
            transport: "stdio" (CLI), "sse" (HTTP), "streamable-http"
            host: Host for HTTP transports
            port: Port for HTTP transports
        """
        self._log.info(
            "server_starting",
            transport=transport,
            version=self._settings.server_version,
            tools=self.tool_names,
        )
        if transport == "stdio":
            self._mcp.run()
        else:
            self._mcp.run(transport=transport, host=host, port=port)

    def close(self) -> None:
        """Stop cache cleanup and release the HTTP transport. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._cache.destroy()
        self._client.close()
        self._log.info("server_stopped")

    def __enter__(self) -> "MovieServer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @staticmethod
    def _create_rate_limiter(
        settings: AppSettings,
    ) -> SlidingWindowRateLimiter | None:
        if settings.tmdb_rate_limit_requests <= 0:
            return None
        return SlidingWindowRateLimiter(
            max_requests=settings.tmdb_rate_limit_requests,
            window_ms=settings.tmdb_rate_limit_window_ms,
        )

    def _create_server(self) -> FastMCP:
        """Create FastMCP server and register tools."""
        mcp = FastMCP(self._settings.server_name)
        self._register_tools(mcp)
        return mcp

    def _register_tools(self, mcp: FastMCP) -> None:
        """Register every tool with FastMCP.

        Each tool gets an explicit signature so FastMCP can derive the
        argument schema clients see.
        """

        async def get_movie_info(
            title: Annotated[
                str, Field(min_length=1, description="The title of the movie to look up.")
            ],
        ) -> str:
            return await self.call_tool(MovieInfoTool.name, {"title": title})

        async def get_actor_info(
            name: Annotated[
                str, Field(min_length=1, description="The name of the actor to look up.")
            ],
        ) -> str:
            return await self.call_tool(ActorInfoTool.name, {"name": name})

        async def list_movies_by_actor(
            actor_name: Annotated[
                str,
                Field(
                    min_length=1,
                    description="The name of the actor to find movies for.",
                ),
            ],
        ) -> str:
            return await self.call_tool(
                MoviesByActorTool.name, {"actor_name": actor_name}
            )

        async def get_top_rated_movies(
            limit: Annotated[
                int | None,
                Field(
                    ge=1,
                    le=50,
                    description="Number of movies to return (default: 10, max: 50).",
                ),
            ] = None,
        ) -> str:
            return await self.call_tool(TopRatedMoviesTool.name, {"limit": limit})

        handlers = {
            MovieInfoTool.name: get_movie_info,
            ActorInfoTool.name: get_actor_info,
            MoviesByActorTool.name: list_movies_by_actor,
            TopRatedMoviesTool.name: get_top_rated_movies,
        }
        for name, tool in self._tools.items():
            mcp.tool(name=name, description=tool.description)(handlers[name])

        if self._settings.expose_cache_stats:

            async def get_cache_stats() -> str:
                return self.cache_stats_json()

            mcp.tool(
                name=CACHE_STATS_TOOL,
                description="Returns response cache statistics as JSON.",
            )(get_cache_stats)
