"""
Kingdom Dice - Game Event Definitions

Event types and payloads emitted by the turn engine after each state change.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable


class GameEvent(Enum):
    """Events that can occur during a game."""

    GAME_STARTED = auto()
    DICE_ROLLING = auto()
    DICE_ROLLED = auto()
    DICE_HELD = auto()
    HOT_DICE = auto()
    PLAYER_BUST = auto()
    TURN_BANKED = auto()
    TURN_ADVANCED = auto()
    GAME_WON = auto()


@dataclass
class EventPayload:
    """Wrapper for game event data."""

    event: GameEvent
    session_id: str
    player_id: int | None = None
    data: dict[str, Any] = field(default_factory=dict)


EventListener = Callable[[EventPayload], None]
