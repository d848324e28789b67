"""
Zonk Configuration.

Environment variables, difficulty presets, and logging configuration.
"""

from zonk.config.settings import (
    Difficulty,
    Settings,
    apply_difficulty,
    configure_logging,
    get_settings,
    load_settings,
)

__all__ = [
    "Difficulty",
    "Settings",
    "apply_difficulty",
    "configure_logging",
    "get_settings",
    "load_settings",
]
