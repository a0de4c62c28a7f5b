"""
Kingdom Dice - Game Setup Models

Pydantic model for the configuration record a setup screen hands over when
starting a session, and the validation that turns pydantic errors into
messages a settings form can show.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError
from pydantic.alias_generators import to_camel

from kingdom_dice.engine.base import AIDifficulty, GameMode

MIN_PLAYERS = 2
MAX_PLAYERS = 5
MIN_TARGET_SCORE = 1000
MAX_TARGET_SCORE = 100000
SHORT_GAME_TARGET = 5000
LONG_GAME_TARGET = 50000


class GameSettings(BaseModel):
    """Configuration for a new session."""

    player_count: int = Field(default=2, ge=MIN_PLAYERS, le=MAX_PLAYERS)
    target_score: int = Field(default=10000, ge=MIN_TARGET_SCORE, le=MAX_TARGET_SCORE)
    mode: GameMode = GameMode.PVP
    ai_difficulty: AIDifficulty | None = None

    # Setup screens may send camelCase keys; unknown keys are rejected
    model_config = {
        "frozen": True,
        "extra": "forbid",
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @property
    def effective_difficulty(self) -> AIDifficulty:
        """Difficulty used for the AI seat; easy when none was chosen."""
        return self.ai_difficulty or AIDifficulty.EASY


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a settings record."""

    errors: tuple[str, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)
    settings: GameSettings | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors


_RANGE_MESSAGES = {
    ("player_count", "greater_than_equal"): f"At least {MIN_PLAYERS} players are required",
    ("player_count", "less_than_equal"): f"Maximum {MAX_PLAYERS} players allowed",
    ("target_score", "greater_than_equal"): f"Target score must be at least {MIN_TARGET_SCORE:,} points",
    ("target_score", "less_than_equal"): f"Target score cannot exceed {MAX_TARGET_SCORE:,} points",
}

_FIELD_LABELS = {
    "player_count": "Player count",
    "target_score": "Target score",
}

# Error locations may carry either the field name or its camelCase alias
_FIELD_NAMES = {to_camel(name): name for name in GameSettings.model_fields}


def _describe_error(error: Mapping[str, Any]) -> str:
    loc = error.get("loc") or ("",)
    field_name = _FIELD_NAMES.get(str(loc[0]), str(loc[0]))
    if error.get("type") == "extra_forbidden":
        return f"Unknown setting: {loc[0]}"
    message = _RANGE_MESSAGES.get((field_name, error.get("type")))
    if message:
        return message
    if field_name == "mode":
        return "Invalid game mode selected"
    if field_name == "ai_difficulty":
        return "Invalid AI difficulty selected"
    if field_name in _FIELD_LABELS:
        return f"{_FIELD_LABELS[field_name]} must be a whole number"
    return f"{field_name}: {error.get('msg', 'invalid value')}"


def _collect_warnings(settings: GameSettings) -> list[str]:
    warnings: list[str] = []
    if settings.target_score < SHORT_GAME_TARGET:
        warnings.append(f"Games with target scores below {SHORT_GAME_TARGET:,} may be very short")
    elif settings.target_score > LONG_GAME_TARGET:
        warnings.append(f"Games with target scores above {LONG_GAME_TARGET:,} may take a very long time")
    if settings.mode is GameMode.PVE and settings.player_count != 2:
        warnings.append("Player vs AI mode only supports 2 players")
    return warnings


def validate_game_settings(data: Mapping[str, Any] | GameSettings) -> ValidationResult:
    """
    Validate a settings record without raising.

    Args:
        data: Raw form values or an already-built GameSettings

    Returns:
        ValidationResult with error and warning messages, plus the parsed
        settings when there were no errors
    """
    if isinstance(data, GameSettings):
        settings = data
    else:
        try:
            settings = GameSettings.model_validate(dict(data))
        except ValidationError as exc:
            errors = tuple(dict.fromkeys(_describe_error(err) for err in exc.errors()))
            return ValidationResult(errors=errors)

    return ValidationResult(warnings=tuple(_collect_warnings(settings)), settings=settings)
