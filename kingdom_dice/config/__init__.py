"""
Kingdom Dice Configuration.

Environment variables, settings, and logging configuration.
"""

from kingdom_dice.config.settings import Settings, configure_logging, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]
