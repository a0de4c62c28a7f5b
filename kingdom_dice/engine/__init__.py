"""
Kingdom Dice Game Engine.

Pure Python game logic with zero UI/persistence dependencies.
Handles dice rolling, scoring, bust detection, and hot dice mechanics.
"""

from kingdom_dice.engine.base import (
    AIDifficulty,
    Die,
    GameMode,
    GameSnapshot,
    Player,
    ScoringCategory,
    ScoringCombination,
    ScoringResult,
    TurnPhase,
    TurnRecord,
)
from kingdom_dice.engine.dice import DiceSource, FixedDiceSource, RandomDiceSource
from kingdom_dice.engine.errors import (
    CorruptedStateError,
    DiceSourceExhaustedError,
    InvalidSettingsError,
    KingdomDiceError,
)
from kingdom_dice.engine.events import EventPayload, GameEvent
from kingdom_dice.engine.scoring import ScoringEngine
from kingdom_dice.engine.turn import TurnEngine

__all__ = [
    # Data Classes
    "Die",
    "GameSnapshot",
    "Player",
    "ScoringCombination",
    "ScoringResult",
    "TurnRecord",
    "EventPayload",
    # Enums
    "AIDifficulty",
    "GameEvent",
    "GameMode",
    "ScoringCategory",
    "TurnPhase",
    # Dice
    "DiceSource",
    "FixedDiceSource",
    "RandomDiceSource",
    # Errors
    "CorruptedStateError",
    "DiceSourceExhaustedError",
    "InvalidSettingsError",
    "KingdomDiceError",
    # Engines
    "ScoringEngine",
    "TurnEngine",
]
