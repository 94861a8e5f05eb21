"""Application settings loading."""

from .app import AppSettings, load_settings


__all__ = ["AppSettings", "load_settings"]
