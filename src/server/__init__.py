"""MCP server for the movie tools."""

from src.server.app import MovieServer, Transport


__all__ = ["MovieServer", "Transport"]
