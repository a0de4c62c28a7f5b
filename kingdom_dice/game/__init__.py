"""
Kingdom Dice Session Management.

Setup validation and the driver-facing game manager.
"""

from kingdom_dice.game.manager import GameManager, build_players
from kingdom_dice.game.models import GameSettings, ValidationResult, validate_game_settings

__all__ = [
    "GameManager",
    "GameSettings",
    "ValidationResult",
    "build_players",
    "validate_game_settings",
]
