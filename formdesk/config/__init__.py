"""Configuration: environment settings and the built-in source list."""

from formdesk.config.settings import Settings, get_settings
from formdesk.config.sources import DEFAULT_SOURCES

__all__ = ["DEFAULT_SOURCES", "Settings", "get_settings"]
