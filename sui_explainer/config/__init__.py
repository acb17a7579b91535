"""
Configuration management for the Sui Transaction Explainer.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for RPC endpoints and time budgets.
"""

from sui_explainer.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
