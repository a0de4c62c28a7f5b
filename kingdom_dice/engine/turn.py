"""
Kingdom Dice - Turn Engine

Owns the authoritative state of one game session and enforces the turn
rules: holding and locking dice, rolling, busting, hot dice and settlement.

Illegal calls (rolling without a held die, touching a locked die, anything
after the game is won) are rejected as no-ops and return False, so a UI
racing its events against state changes cannot corrupt the session.

A roll happens in two phases. `roll()` marks the dice as tumbling and
schedules `complete_roll()` after `roll_delay` seconds. Each pending
completion carries the generation it was scheduled under; a completion whose
generation is no longer current is ignored.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from typing import Any, Callable, Iterable, Sequence

from kingdom_dice.engine.base import Die, GameSnapshot, Player, ScoringCombination, TurnRecord
from kingdom_dice.engine.dice import DiceSource, RandomDiceSource
from kingdom_dice.engine.errors import CorruptedStateError
from kingdom_dice.engine.events import EventListener, EventPayload, GameEvent
from kingdom_dice.engine.scoring import ScoringEngine

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], Any]


def timer_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """Run `callback` on a daemon timer thread after `delay` seconds."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class TurnEngine:
    """
    Turn state machine for a single game session.

    Every public method takes the engine lock, so no operation can observe
    another's half-applied effects. Events are delivered to subscribers
    after the lock is released.
    """

    NUM_DICE = 6
    DEFAULT_ROLL_DELAY = 0.6

    def __init__(
        self,
        players: Sequence[Player],
        target_score: int,
        *,
        dice_source: DiceSource | None = None,
        roll_delay: float = DEFAULT_ROLL_DELAY,
        scheduler: Scheduler | None = None,
        session_id: str | None = None,
    ) -> None:
        if len(players) < 2:
            raise ValueError(f"At least 2 players required, got {len(players)}.")
        if target_score <= 0:
            raise ValueError(f"Target score must be positive, got {target_score}.")

        self.session_id = session_id or uuid.uuid4().hex
        self._dice_source = dice_source or RandomDiceSource()
        self._roll_delay = roll_delay
        self._scheduler = scheduler or timer_scheduler
        self._lock = threading.RLock()
        self._listeners: list[EventListener] = []
        self._pending_events: list[EventPayload] = []
        self._pending_timer: Any = None
        self._closed = False

        self._players: list[Player] = list(players)
        self._target_score = target_score
        self._current_player_index = 0
        self._dice: list[Die] = self._fresh_dice()
        self._is_rolling = False
        self._can_roll = True
        self._has_rolled = False
        self._is_bust = False
        self._winner_index: int | None = None
        self._round_number = 1
        self._generation = 0

        # Per-turn bookkeeping for the score history
        self._lock_group = 0
        self._banked_this_turn = 0
        self._banked_combinations: list[ScoringCombination] = []

    # -- Read model -------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        """The current session state as an immutable record."""
        with self._lock:
            players = tuple(self._players)
            winner = players[self._winner_index] if self._winner_index is not None else None
            return GameSnapshot(
                session_id=self.session_id,
                players=players,
                current_player_index=self._current_player_index,
                dice=tuple(self._dice),
                is_rolling=self._is_rolling,
                can_roll=self._can_roll,
                has_rolled_this_turn=self._has_rolled,
                is_bust=self._is_bust,
                target_score=self._target_score,
                winner=winner,
                round_number=self._round_number,
                generation=self._generation,
            )

    def subscribe(self, listener: EventListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def announce_start(self) -> None:
        """Emit GAME_STARTED to current subscribers."""
        with self._lock:
            self._emit(
                GameEvent.GAME_STARTED,
                players=[p.name for p in self._players],
                target_score=self._target_score,
            )
        self._flush_events()

    def recompute_turn_score(self) -> int:
        """
        Set the current player's turn score from the held and locked dice.

        The score is recomputed from scratch, never accumulated, so calling
        this any number of times gives the same result. A busted turn is
        worth nothing.
        """
        with self._lock:
            index = self._current_player_index
            if self._is_bust:
                score = 0
            else:
                score = ScoringEngine.calculate_score(self._committed_dice()).total
            player = self._players[index]
            if player.turn_score != score:
                self._players[index] = replace(player, turn_score=score)
            return score

    # -- Commands ---------------------------------------------------------

    def roll(self) -> bool:
        """
        Start a roll of every die that is not locked.

        Returns:
            True if the roll was accepted
        """
        with self._lock:
            if self._closed or self._winner_index is not None:
                logger.debug("Roll rejected: session is over")
                return False
            if self._is_rolling or not self._can_roll:
                logger.debug("Roll rejected: rolling=%s can_roll=%s", self._is_rolling, self._can_roll)
                return False

            self._is_rolling = True
            self._generation += 1
            generation = self._generation
            self._emit(GameEvent.DICE_ROLLING, generation=generation)
        self._flush_events()

        if self._roll_delay <= 0:
            self.complete_roll(generation)
        else:
            timer = self._scheduler(self._roll_delay, lambda: self.complete_roll(generation))
            with self._lock:
                if self._generation == generation and self._is_rolling:
                    self._pending_timer = timer
        return True

    def complete_roll(self, generation: int) -> bool:
        """
        Settle the roll scheduled under `generation`.

        Held dice lock with their current face, every other unlocked die
        gets a new face, then the roll resolves as hot dice, a bust or a
        normal continuation.

        Returns:
            False if the completion was stale and ignored
        """
        with self._lock:
            if self._closed or not self._is_rolling or generation != self._generation:
                logger.debug(
                    "Ignoring stale roll completion %d (current %d)", generation, self._generation
                )
                return False

            self._pending_timer = None
            self._is_rolling = False
            self._has_rolled = True
            self._can_roll = False
            self._lock_and_reroll()

            available = [die for die in self._dice if not die.is_locked]
            if not available:
                self._bank_hot_dice()
            elif not ScoringEngine.has_any_score(available):
                self._bust()
            else:
                self._mark_scoring()
                self._emit(GameEvent.DICE_ROLLED, values=[die.value for die in self._dice])

            self.recompute_turn_score()
        self._flush_events()
        return True

    def toggle_hold(self, die_id: int, *, by_ai: bool = False) -> bool:
        """
        Flip the held flag on one die.

        Rolling is allowed afterwards only while at least one die is held.

        Args:
            die_id: Id of the die to toggle
            by_ai: Set when the AI driver acts for an AI player; humans
                cannot touch dice during an AI turn

        Returns:
            True if the die was toggled
        """
        with self._lock:
            if not self._selection_open(by_ai):
                return False
            die = self._find_die(die_id)
            if die is None or die.is_locked:
                logger.debug("Toggle rejected for die %s", die_id)
                return False

            self._dice[die.id] = replace(die, is_held=not die.is_held)
            self._after_selection()
        self._flush_events()
        return True

    def hold_dice(self, die_ids: Iterable[int], *, by_ai: bool = False) -> bool:
        """
        Hold every listed die that is not locked.

        Unlike toggle_hold this never releases a die, so applying the same
        selection twice is harmless.

        Returns:
            True if any die changed
        """
        with self._lock:
            if not self._selection_open(by_ai):
                return False

            changed = False
            for die_id in die_ids:
                die = self._find_die(die_id)
                if die is None or die.is_locked or die.is_held:
                    continue
                self._dice[die.id] = replace(die, is_held=True)
                changed = True

            if changed:
                self._after_selection()
        self._flush_events()
        return changed

    def auto_select_scoring(self, *, by_ai: bool = False) -> bool:
        """Hold every available die that contributes points."""
        with self._lock:
            available = [die for die in self._dice if die.is_available]
            scoring_ids = ScoringEngine.scorable_dice_ids(available)
        return self.hold_dice(scoring_ids, by_ai=by_ai)

    def end_turn(self) -> bool:
        """
        Bank the turn score and pass the dice to the next player.

        Returns:
            True if the turn was settled
        """
        with self._lock:
            if self._closed or self._winner_index is not None or self._is_rolling:
                logger.debug("End turn rejected")
                return False

            index = self._current_player_index
            player = self._players[index]
            gained = player.turn_score
            if gained:
                self._banked_combinations.extend(self._committed_combinations())
            self._banked_this_turn += gained

            self._players[index] = replace(
                player,
                total_score=player.total_score + gained,
                turn_score=0,
            )
            self._record_turn(index)
            self._emit(
                GameEvent.TURN_BANKED,
                points=gained,
                total_score=self._players[index].total_score,
            )
            logger.info(
                "%s banked %d (total %d)",
                player.name, gained, self._players[index].total_score,
            )

            self._dice = self._fresh_dice()
            self._is_bust = False

            if not self._check_winner(index):
                self._current_player_index = (index + 1) % len(self._players)
                if self._current_player_index == 0:
                    self._round_number += 1
                self._has_rolled = False
                self._can_roll = True
                self._emit(
                    GameEvent.TURN_ADVANCED,
                    next_player_id=self._players[self._current_player_index].id,
                )
        self._flush_events()
        return True

    def close(self) -> None:
        """Invalidate any pending roll and reject all further commands."""
        with self._lock:
            self._closed = True
            self._generation += 1
            self._is_rolling = False
            timer, self._pending_timer = self._pending_timer, None
        cancel = getattr(timer, "cancel", None)
        if cancel is not None:
            cancel()

    # -- Internals ----------------------------------------------------------

    def _fresh_dice(self) -> list[Die]:
        faces = self._dice_source.roll(self.NUM_DICE)
        return [Die(id=i, value=face) for i, face in enumerate(faces)]

    def _find_die(self, die_id: int) -> Die | None:
        if isinstance(die_id, int) and 0 <= die_id < len(self._dice):
            return self._dice[die_id]
        return None

    def _committed_dice(self) -> list[Die]:
        return [die for die in self._dice if die.is_held or die.is_locked]

    def _selection_open(self, by_ai: bool) -> bool:
        if self._closed or self._winner_index is not None:
            return False
        if self._is_rolling or not self._has_rolled or self._is_bust:
            return False
        if self._players[self._current_player_index].is_ai and not by_ai:
            logger.debug("Selection rejected: AI turn")
            return False
        return True

    def _after_selection(self) -> None:
        self._can_roll = any(die.is_held for die in self._dice)
        self.recompute_turn_score()
        self._emit(
            GameEvent.DICE_HELD,
            held_ids=[die.id for die in self._dice if die.is_held],
            turn_score=self._players[self._current_player_index].turn_score,
        )

    def _lock_and_reroll(self) -> None:
        """Lock held dice at their face and roll everything else unlocked."""
        free = [die for die in self._dice if not die.is_held and not die.is_locked]
        faces = iter(self._dice_source.roll(len(free)))
        any_held = False

        dice: list[Die] = []
        for die in self._dice:
            if die.is_held:
                any_held = True
                dice.append(replace(
                    die, is_held=False, is_locked=True, is_scoring=False,
                    lock_group=self._lock_group,
                ))
            elif die.is_locked:
                dice.append(replace(die, is_scoring=False))
            else:
                dice.append(replace(die, value=next(faces), is_scoring=False))
        self._dice = dice

        if any_held:
            self._lock_group += 1

    def _mark_scoring(self) -> None:
        available = [die for die in self._dice if die.is_available]
        scoring = set(ScoringEngine.scorable_dice_ids(available))
        self._dice = [replace(die, is_scoring=die.id in scoring) for die in self._dice]

    def _bank_hot_dice(self) -> None:
        """All six dice are locked: bank, then carry on with fresh dice."""
        index = self._current_player_index
        player = self._players[index]
        banked = ScoringEngine.calculate_score(self._committed_dice()).total

        self._banked_combinations.extend(self._committed_combinations())
        self._banked_this_turn += banked
        self._players[index] = replace(
            player,
            total_score=player.total_score + banked,
            turn_score=0,
        )
        self._emit(
            GameEvent.HOT_DICE,
            points=banked,
            total_score=self._players[index].total_score,
        )
        logger.info("%s hit hot dice, banked %d", player.name, banked)

        self._dice = self._fresh_dice()
        if self._check_winner(index):
            self._record_turn(index)
            return

        # The fresh set is never bust-checked; the player re-selects from it
        self._mark_scoring()
        self._emit(GameEvent.DICE_ROLLED, values=[die.value for die in self._dice])

    def _bust(self) -> None:
        index = self._current_player_index
        player = self._players[index]
        self._is_bust = True
        self._players[index] = replace(player, turn_score=0)
        self._emit(GameEvent.PLAYER_BUST, lost=player.turn_score)
        logger.info("%s busted, losing %d", player.name, player.turn_score)

    def _check_winner(self, index: int) -> bool:
        player = self._players[index]
        if player.total_score < self._target_score:
            return False
        self._winner_index = index
        self._can_roll = False
        self._emit(GameEvent.GAME_WON, total_score=player.total_score)
        logger.info("%s won with %d points", player.name, player.total_score)
        return True

    def _committed_combinations(self) -> list[ScoringCombination]:
        """
        Combinations of the held and locked dice, tagged with the roll that
        completed each one. Held dice count toward the upcoming lock group.
        """
        groups = {
            die.id: die.lock_group if die.lock_group is not None else self._lock_group
            for die in self._committed_dice()
        }
        result = ScoringEngine.calculate_score(self._committed_dice())
        return [
            replace(combo, lock_group=max(groups[die_id] for die_id in combo.dice_ids))
            for combo in result.combinations
        ]

    def _record_turn(self, index: int) -> None:
        """Append this turn to the player's history and reset turn bookkeeping."""
        player = self._players[index]
        record = TurnRecord(
            turn_number=len(player.score_history) + 1,
            score=self._banked_this_turn,
            total_score_after=player.total_score,
            combinations=tuple(self._banked_combinations),
        )
        self._players[index] = replace(
            player, score_history=player.score_history + (record,)
        )
        self._lock_group = 0
        self._banked_this_turn = 0
        self._banked_combinations = []

    def _emit(self, event: GameEvent, **data: Any) -> None:
        player = self._players[self._current_player_index]
        self._pending_events.append(EventPayload(
            event=event,
            session_id=self.session_id,
            player_id=player.id,
            data=data,
        ))

    def _flush_events(self) -> None:
        """
        Deliver queued events to every listener.

        A failing listener is logged and skipped. A CorruptedStateError is
        re-raised once the whole batch has been delivered.
        """
        with self._lock:
            pending, self._pending_events = self._pending_events, []
            listeners = list(self._listeners)

        corrupted: CorruptedStateError | None = None
        for payload in pending:
            for listener in listeners:
                try:
                    listener(payload)
                except CorruptedStateError as exc:
                    corrupted = corrupted or exc
                except Exception:
                    logger.exception("Listener %r failed on %s", listener, payload.event.name)
        if corrupted is not None:
            raise corrupted
