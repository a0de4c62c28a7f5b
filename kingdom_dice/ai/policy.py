"""
Kingdom Dice - AI Decision Policy

Chooses one action at a time for a computer-controlled player. The policy
keeps no game state between calls: every decision is made from the
immutable Player and dice records it is handed.

Easy AI banks early and sometimes under-selects its scoring dice. Hard AI
always takes every scoring die and weighs its turn score against a bust
risk table, pressing harder near the finish or when an opponent is close.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from kingdom_dice.engine.base import AIDifficulty, Die, GameSnapshot, Player
from kingdom_dice.engine.scoring import ScoringEngine


class AIAction(Enum):
    """What the AI wants to do next."""
    ROLL = "roll"
    END_TURN = "end_turn"
    SELECT_DICE = "select_dice"


@dataclass(frozen=True)
class AIDecision:
    """
    A single AI move.

    Attributes:
        action: The action to apply
        dice_ids: Dice to hold (SELECT_DICE only)
        reasoning: Short explanation, useful for logs
    """
    action: AIAction
    dice_ids: tuple[int, ...] = ()
    reasoning: str = ""


class AIPolicy:
    """Difficulty-tuned decision policy for one AI seat."""

    # Easy AI
    EASY_MISTAKE_CHANCE = 0.3
    EASY_BANK_THRESHOLD = 800
    EASY_CAUTION_TIERS = ((400, 0.4), (200, 0.2))

    # Hard AI
    NEAR_WIN_MARGIN = 1000
    PRESS_ON_CHANCE = 0.7
    CATCH_UP_LIMIT = 600
    HARD_BANK_THRESHOLD = 1000
    HARD_RISK_FLOOR = 600
    HARD_CAUTION_FLOOR = 300
    HARD_CAUTION_RISK = 0.6
    BUST_RISK_TABLE = ((200, 0.2), (400, 0.35), (600, 0.5), (800, 0.65))
    BUST_RISK_MAX = 0.8

    ACTION_DELAYS = {
        AIDifficulty.EASY: (1.0, 2.5),
        AIDifficulty.HARD: (1.5, 3.5),
    }

    def __init__(
        self,
        difficulty: AIDifficulty | str = AIDifficulty.EASY,
        rng: random.Random | None = None,
    ) -> None:
        self.difficulty = AIDifficulty(difficulty)
        self._rng = rng or random.Random()

    def decide(
        self,
        player: Player,
        dice: Sequence[Die],
        has_rolled_this_turn: bool,
        target_score: int,
        opponent_best_total: int,
    ) -> AIDecision:
        """
        Pick the next action for `player`.

        Args:
            player: The AI's own player record
            dice: All six dice
            has_rolled_this_turn: Whether the turn has been rolled yet
            target_score: Total needed to win
            opponent_best_total: Highest banked total among opponents

        Returns:
            Exactly one AIDecision
        """
        if not has_rolled_this_turn:
            return AIDecision(AIAction.ROLL, reasoning="Starting turn with a roll")

        available = [die for die in dice if die.is_available]
        if not available:
            return self.decide_roll_or_end(player, target_score, opponent_best_total)

        scoring_ids = ScoringEngine.scorable_dice_ids(available)
        if not scoring_ids:
            return AIDecision(AIAction.END_TURN, reasoning="No scoring dice available")

        if self.difficulty is AIDifficulty.EASY:
            return self._easy_selection(scoring_ids)
        return AIDecision(
            AIAction.SELECT_DICE,
            dice_ids=scoring_ids,
            reasoning="Hard AI selecting all scoring dice",
        )

    def decide_from_snapshot(self, snapshot: GameSnapshot) -> AIDecision:
        """Decide for the snapshot's current player."""
        return self.decide(
            snapshot.current_player,
            snapshot.dice,
            snapshot.has_rolled_this_turn,
            snapshot.target_score,
            snapshot.opponent_best_total(),
        )

    def decide_roll_or_end(
        self,
        player: Player,
        target_score: int,
        opponent_best_total: int,
    ) -> AIDecision:
        """Push on or bank, given the points riding on this turn."""
        current = player.turn_score
        if player.total_score + current >= target_score:
            return AIDecision(AIAction.END_TURN, reasoning="Ending the turn wins the game")

        if self.difficulty is AIDifficulty.EASY:
            return self._easy_roll_or_end(current)

        points_needed = target_score - player.total_score
        return self._hard_roll_or_end(
            current,
            points_needed,
            near_win=points_needed <= self.NEAR_WIN_MARGIN,
            opponent_near_win=target_score - opponent_best_total <= self.NEAR_WIN_MARGIN,
        )

    def action_delay(self) -> float:
        """Seconds the driver should wait before applying a decision."""
        low, high = self.ACTION_DELAYS[self.difficulty]
        return self._rng.uniform(low, high)

    @classmethod
    def bust_risk(cls, turn_score: int) -> float:
        """Step estimate of the chance the next roll busts."""
        for ceiling, risk in cls.BUST_RISK_TABLE:
            if turn_score < ceiling:
                return risk
        return cls.BUST_RISK_MAX

    def _easy_selection(self, scoring_ids: tuple[int, ...]) -> AIDecision:
        if self._rng.random() < self.EASY_MISTAKE_CHANCE:
            count = max(1, math.ceil(len(scoring_ids) * 3 / 5))
            return AIDecision(
                AIAction.SELECT_DICE,
                dice_ids=scoring_ids[:count],
                reasoning="Easy AI making a conservative choice",
            )
        return AIDecision(
            AIAction.SELECT_DICE,
            dice_ids=scoring_ids,
            reasoning="Easy AI selecting available scoring dice",
        )

    def _easy_roll_or_end(self, current: int) -> AIDecision:
        if current >= self.EASY_BANK_THRESHOLD:
            return AIDecision(AIAction.END_TURN, reasoning="Easy AI keeping a good score")

        for floor, chance in self.EASY_CAUTION_TIERS:
            if current >= floor:
                if self._rng.random() < chance:
                    return AIDecision(AIAction.END_TURN, reasoning="Easy AI playing it safe")

        return AIDecision(AIAction.ROLL, reasoning="Easy AI continuing to roll")

    def _hard_roll_or_end(
        self,
        current: int,
        points_needed: int,
        near_win: bool,
        opponent_near_win: bool,
    ) -> AIDecision:
        if near_win and current >= points_needed * 0.5:
            if self._rng.random() < self.PRESS_ON_CHANCE:
                return AIDecision(AIAction.ROLL, reasoning="Hard AI pressing near victory")

        if opponent_near_win and current < self.CATCH_UP_LIMIT:
            return AIDecision(AIAction.ROLL, reasoning="Hard AI chasing a leading opponent")

        risk = self.bust_risk(current)
        should_continue = self._rng.random() < (1 - risk)

        if current >= self.HARD_BANK_THRESHOLD:
            return AIDecision(AIAction.END_TURN, reasoning="Hard AI banking an excellent score")
        if current >= self.HARD_RISK_FLOOR and not should_continue:
            return AIDecision(AIAction.END_TURN, reasoning="Hard AI managing risk")
        if current >= self.HARD_CAUTION_FLOOR and risk > self.HARD_CAUTION_RISK:
            return AIDecision(AIAction.END_TURN, reasoning="Hard AI avoiding a likely bust")

        return AIDecision(AIAction.ROLL, reasoning="Hard AI accepting the risk")
