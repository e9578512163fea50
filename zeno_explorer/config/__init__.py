"""
Configuration management for the explorer backend.

Loads settings from environment variables and an optional .env file.
"""

from zeno_explorer.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
