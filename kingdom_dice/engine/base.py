"""
Kingdom Dice - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. Every record handed out of the engine is a frozen dataclass;
the engine replaces records instead of mutating them, so a snapshot taken by a
renderer or an AI policy can never change underneath its reader.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class GameMode(Enum):
    """Who sits at the table."""
    PVP = "pvp"
    PVE = "pve"


class AIDifficulty(Enum):
    """Difficulty levels for computer-controlled players."""
    EASY = "easy"
    HARD = "hard"


class ScoringCategory(Enum):
    """Categories of scoring combinations."""
    SINGLE_ONE = auto()
    SINGLE_FIVE = auto()
    THREE_OF_A_KIND = auto()
    FOUR_OF_A_KIND = auto()
    FIVE_OF_A_KIND = auto()
    SIX_OF_A_KIND = auto()
    LOW_STRAIGHT = auto()      # 1-2-3-4-5
    HIGH_STRAIGHT = auto()     # 2-3-4-5-6
    FULL_STRAIGHT = auto()     # 1-2-3-4-5-6


class TurnPhase(Enum):
    """Where the current turn stands, derived from the session flags."""
    AWAITING_FIRST_ROLL = auto()
    ROLLING = auto()
    AWAITING_SELECTION = auto()
    BUSTED = auto()
    WON = auto()


@dataclass(frozen=True)
class Die:
    """
    A single die on the table.

    Attributes:
        id: Stable position of the die (0-5)
        value: Current face (1-6)
        is_held: Selected after a roll, still reversible
        is_locked: Committed for the rest of the turn
        is_scoring: Rendering hint, set on dice that would score if held
        lock_group: Which roll of the turn committed this die
    """
    id: int
    value: int
    is_held: bool = False
    is_locked: bool = False
    is_scoring: bool = False
    lock_group: int | None = None

    def __post_init__(self) -> None:
        """Validate the face value."""
        if not (1 <= self.value <= 6):
            raise ValueError(
                f"Invalid die value {self.value}. Must be between 1 and 6."
            )

    @property
    def is_available(self) -> bool:
        """True while the die can still be held or re-rolled."""
        return not self.is_locked and not self.is_held


@dataclass(frozen=True)
class ScoringCombination:
    """
    A single scoring component within a set of dice.

    Attributes:
        dice_ids: Ids of the dice consumed by this combination
        points: Points awarded for this combination
        label: Human-readable description, e.g. "3 1s"
        category: The type of scoring combination
        lock_group: Roll of the turn that completed the combination
            (only set on combinations stored in a TurnRecord)
    """
    dice_ids: tuple[int, ...]
    points: int
    label: str
    category: ScoringCategory
    lock_group: int | None = None


@dataclass(frozen=True)
class ScoringResult:
    """
    Complete scoring result for a set of dice.

    Attributes:
        combinations: Individual scoring components, in rule order
        total: Sum of all combination points
    """
    combinations: tuple[ScoringCombination, ...]
    total: int

    @property
    def has_score(self) -> bool:
        """Returns True if anything scored."""
        return self.total > 0

    @property
    def scoring_dice_ids(self) -> frozenset[int]:
        """Ids of every die used by any combination."""
        return frozenset(
            die_id for combo in self.combinations for die_id in combo.dice_ids
        )

    def __str__(self) -> str:
        if not self.combinations:
            return "No scoring dice."
        lines = [f"Total: {self.total} points"]
        for combo in self.combinations:
            lines.append(f"  - {combo.label}: {combo.points}")
        return "\n".join(lines)


@dataclass(frozen=True)
class TurnRecord:
    """
    One settled turn in a player's score history.

    Attributes:
        turn_number: The player's own turn count, starting at 1
        score: Points banked during the turn (0 for a bust)
        total_score_after: Player total once the turn settled
        combinations: What was banked, tagged with lock groups
    """
    turn_number: int
    score: int
    total_score_after: int
    combinations: tuple[ScoringCombination, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Player:
    """
    A competitor and their scores.

    Attributes:
        id: Player id, unique within a session
        name: Display name
        total_score: Banked points
        turn_score: Points riding on the current turn
        is_ai: Whether the AI policy drives this player
        ai_difficulty: Policy difficulty for AI players
        score_history: Settled turns, oldest first
    """
    id: int
    name: str
    total_score: int = 0
    turn_score: int = 0
    is_ai: bool = False
    ai_difficulty: AIDifficulty | None = None
    score_history: tuple[TurnRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class GameSnapshot:
    """
    Read-only view of a game session.

    Attributes:
        session_id: Identifier of the engine that produced the snapshot
        players: Players in seating order
        current_player_index: Whose turn it is
        dice: The six dice, ordered by id
        is_rolling: A roll has started and not yet settled
        can_roll: Whether roll() would be accepted
        has_rolled_this_turn: At least one roll completed this turn
        is_bust: The last roll scored nothing; only end_turn is legal
        target_score: Total needed to win
        winner: The winning player, once the game is over
        round_number: Increments each time play wraps to the first seat
        generation: Counter stamped on each pending roll
    """
    session_id: str
    players: tuple[Player, ...]
    current_player_index: int
    dice: tuple[Die, ...]
    is_rolling: bool
    can_roll: bool
    has_rolled_this_turn: bool
    is_bust: bool
    target_score: int
    winner: Player | None = None
    round_number: int = 1
    generation: int = 0

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def is_ai_turn(self) -> bool:
        return self.winner is None and self.current_player.is_ai

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    @property
    def available_dice(self) -> tuple[Die, ...]:
        """Dice that are neither held nor locked."""
        return tuple(d for d in self.dice if d.is_available)

    @property
    def held_or_locked_dice(self) -> tuple[Die, ...]:
        return tuple(d for d in self.dice if d.is_held or d.is_locked)

    @property
    def phase(self) -> TurnPhase:
        if self.winner is not None:
            return TurnPhase.WON
        if self.is_rolling:
            return TurnPhase.ROLLING
        if not self.has_rolled_this_turn:
            return TurnPhase.AWAITING_FIRST_ROLL
        if self.is_bust:
            return TurnPhase.BUSTED
        return TurnPhase.AWAITING_SELECTION

    def opponent_best_total(self, player_index: int | None = None) -> int:
        """Highest banked total among everyone except the given seat."""
        if player_index is None:
            player_index = self.current_player_index
        return max(
            (p.total_score for i, p in enumerate(self.players) if i != player_index),
            default=0,
        )
