"""
Configuration management for SolCard.

Loads settings from environment variables and an optional .env file, and
holds the static ecosystem registry.
"""

from solcard.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
