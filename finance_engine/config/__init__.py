"""Configuration package."""

from finance_engine.config.settings import (
    EngineSettings,
    get_settings,
)

__all__ = [
    "EngineSettings",
    "get_settings",
]
