"""
Kingdom Dice - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

import random
from typing import Callable, Sequence

import pytest

from kingdom_dice.config.settings import Settings
from kingdom_dice.engine.base import Player
from kingdom_dice.engine.dice import FixedDiceSource
from kingdom_dice.engine.events import EventPayload
from kingdom_dice.engine.turn import TurnEngine


# Faces for the dice a new session starts with; never scored directly
OPENING_FACES = (2, 3, 4, 6, 2, 3)


# =============================================================================
# SCORING TEST DATA
# =============================================================================

@pytest.fixture
def d6_scoring_rolls() -> dict[str, tuple[tuple[int, ...], int, str]]:
    """
    Common D6 roll patterns with expected scores.

    Returns:
        Dict mapping name to (dice_values, expected_points, description)
    """
    return {
        # Singles
        "single_one": ((1,), 100, "Single 1"),
        "single_five": ((5,), 50, "Single 5"),
        "two_ones": ((1, 1), 200, "Two 1s"),
        "two_fives": ((5, 5), 100, "Two 5s"),
        "one_and_five": ((1, 5), 150, "One 1 and one 5"),

        # Three of a kind
        "three_ones": ((1, 1, 1), 1000, "Three 1s"),
        "three_twos": ((2, 2, 2), 200, "Three 2s"),
        "three_sixes": ((6, 6, 6), 600, "Three 6s"),

        # Four or more of a kind doubles once
        "four_ones": ((1, 1, 1, 1), 2000, "Four 1s"),
        "five_ones": ((1, 1, 1, 1, 1), 2000, "Five 1s"),
        "six_fours": ((4, 4, 4, 4, 4, 4), 800, "Six 4s"),

        # Straights
        "low_straight": ((1, 2, 3, 4, 5), 500, "Partial straight 1-5"),
        "high_straight": ((2, 3, 4, 5, 6), 750, "Partial straight 2-6"),
        "full_straight": ((1, 2, 3, 4, 5, 6), 1500, "Full straight 1-6"),
        "full_straight_shuffled": ((6, 4, 2, 5, 3, 1), 1500, "Full straight shuffled"),

        # Mixed combinations
        "three_ones_plus_five": ((1, 1, 1, 5), 1050, "Three 1s + single 5"),
        "three_fours_plus_one": ((4, 4, 4, 1), 500, "Three 4s + single 1"),
        "bust_roll": ((2, 3, 4, 6), 0, "Bust roll"),
    }


@pytest.fixture
def d6_bust_rolls() -> list[tuple[int, ...]]:
    """Rolls that should result in a bust."""
    return [
        (2,),
        (3,),
        (4,),
        (6,),
        (2, 3),
        (4, 6),
        (2, 3, 4),
        (2, 2, 3, 3, 4, 6),
        (2, 3, 4, 6),
    ]


# =============================================================================
# SESSION FIXTURES
# =============================================================================

@pytest.fixture
def two_players() -> list[Player]:
    return [Player(id=1, name="Player 1"), Player(id=2, name="Player 2")]


@pytest.fixture
def make_engine(two_players) -> Callable[..., TurnEngine]:
    """
    Build a TurnEngine whose dice come from the given rolls, in order.

    The opening six faces are supplied automatically; pass one sequence per
    subsequent roll (including the fresh dice dealt at end_turn or hot dice).
    """
    def _make(
        *rolls: Sequence[int],
        players: Sequence[Player] | None = None,
        target_score: int = 10000,
        **kwargs,
    ) -> TurnEngine:
        faces = list(OPENING_FACES)
        for roll in rolls:
            faces.extend(roll)
        return TurnEngine(
            list(players) if players is not None else two_players,
            target_score,
            dice_source=FixedDiceSource(faces),
            roll_delay=kwargs.pop("roll_delay", 0),
            **kwargs,
        )

    return _make


@pytest.fixture
def recorded_events() -> list[EventPayload]:
    return []


@pytest.fixture
def recorder(recorded_events) -> Callable[[EventPayload], None]:
    return recorded_events.append


@pytest.fixture
def manual_scheduler() -> tuple[list, Callable]:
    """Scheduler that stores roll completions instead of running them."""
    pending: list[tuple[float, Callable[[], None]]] = []

    def _schedule(delay: float, callback: Callable[[], None]) -> None:
        pending.append((delay, callback))

    return pending, _schedule


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        debug=True,
        log_level="DEBUG",
        roll_delay_seconds=0,
        default_target_score=10000,
        check_invariants=True,
    )


class ScriptedRandom(random.Random):
    """Random whose random() answers come from a list; fails when it runs dry."""

    def __init__(self, values: Sequence[float] = ()) -> None:
        super().__init__(0)
        self.values = list(values)

    def random(self) -> float:
        if not self.values:
            raise AssertionError("Unexpected random draw")
        return self.values.pop(0)


@pytest.fixture
def scripted_random() -> type[ScriptedRandom]:
    return ScriptedRandom
