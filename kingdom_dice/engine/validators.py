"""
Kingdom Dice - Validation Utilities

Input validation for the scoring engine and end-to-end integrity checks for
session snapshots. Input validators either return normalized data or raise a
descriptive ValueError. Snapshot checks report every violation they find.
"""

from __future__ import annotations

from typing import Sequence

from kingdom_dice.engine.base import GameSnapshot
from kingdom_dice.engine.errors import CorruptedStateError

NUM_DICE = 6


def validate_dice_values(
    values: Sequence[int],
    min_count: int = 0,
    max_count: int | None = None
) -> tuple[int, ...]:
    """
    Validate and normalize D6 face values.

    Args:
        values: Sequence of dice values to validate
        min_count: Minimum number of dice required
        max_count: Maximum number of dice allowed (None = no limit)

    Returns:
        Validated values as a tuple

    Raises:
        ValueError: If validation fails
    """
    if not values:
        if min_count > 0:
            raise ValueError(f"At least {min_count} dice required.")
        return tuple()

    values_tuple = tuple(values)
    count = len(values_tuple)

    if count < min_count:
        raise ValueError(f"At least {min_count} dice required, got {count}.")

    if max_count is not None and count > max_count:
        raise ValueError(f"At most {max_count} dice allowed, got {count}.")

    for i, value in enumerate(values_tuple):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Die value at index {i} must be an integer, got {type(value).__name__}.")
        if not (1 <= value <= 6):
            raise ValueError(f"Die value at index {i} is {value}, must be between 1 and 6.")

    return values_tuple


def check_snapshot(snapshot: GameSnapshot) -> list[str]:
    """
    Run the end-to-end invariant checks on a snapshot.

    Returns:
        Human-readable violations; empty when the snapshot is sound
    """
    errors: list[str] = []

    if len(snapshot.players) < 2:
        errors.append("Game must have at least 2 players")

    if len(snapshot.dice) != NUM_DICE:
        errors.append(f"Game must have exactly {NUM_DICE} dice, found {len(snapshot.dice)}")

    ids = sorted(die.id for die in snapshot.dice)
    if ids != list(range(len(snapshot.dice))):
        errors.append(f"Dice ids must be unique and sequential, got {ids}")

    for position, die in enumerate(snapshot.dice):
        if not (1 <= die.value <= 6):
            errors.append(f"Invalid dice value at position {position + 1}")
        if die.is_held and die.is_locked:
            errors.append(f"Die {die.id} is both held and locked")

    if not (0 <= snapshot.current_player_index < len(snapshot.players)):
        errors.append("Current player index out of bounds")

    if snapshot.target_score <= 0:
        errors.append("Invalid target score")

    for index, player in enumerate(snapshot.players):
        if player.total_score < 0:
            errors.append(f"Invalid total score for player {index + 1}")
        if player.turn_score < 0:
            errors.append(f"Invalid turn score for player {index + 1}")

    leaders = [p for p in snapshot.players if p.total_score >= snapshot.target_score]
    if snapshot.winner is None and leaders:
        errors.append("A player reached the target score but no winner is set")
    if snapshot.winner is not None and snapshot.winner.total_score < snapshot.target_score:
        errors.append("Winner is below the target score")

    return errors


def ensure_valid_snapshot(snapshot: GameSnapshot) -> GameSnapshot:
    """
    Raise if the snapshot breaks any invariant.

    Raises:
        CorruptedStateError: Listing every violation found
    """
    errors = check_snapshot(snapshot)
    if errors:
        raise CorruptedStateError(errors)
    return snapshot
