"""
Kingdom Dice - Game Manager

High-level glue between a UI driver and the turn engine: validates the setup
record, creates and tears down sessions, applies AI decisions, and runs the
snapshot integrity checks after every engine event.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Mapping

from kingdom_dice.ai.policy import AIAction, AIDecision, AIPolicy
from kingdom_dice.config.settings import Settings, get_settings
from kingdom_dice.engine.base import GameMode, GameSnapshot, Player
from kingdom_dice.engine.dice import DiceSource, RandomDiceSource
from kingdom_dice.engine.errors import CorruptedStateError, InvalidSettingsError
from kingdom_dice.engine.events import EventListener, EventPayload
from kingdom_dice.engine.turn import Scheduler, TurnEngine
from kingdom_dice.engine.validators import check_snapshot
from kingdom_dice.game.models import GameSettings, validate_game_settings

logger = logging.getLogger(__name__)


def build_players(config: GameSettings) -> list[Player]:
    """Seat the players a settings record asks for."""
    if config.mode is GameMode.PVE:
        difficulty = config.effective_difficulty
        return [
            Player(id=1, name="Player 1"),
            Player(
                id=2,
                name=f"AI ({difficulty.value.title()})",
                is_ai=True,
                ai_difficulty=difficulty,
            ),
        ]
    return [
        Player(id=i, name=f"Player {i}")
        for i in range(1, config.player_count + 1)
    ]


class GameManager:
    """Owns the current session on behalf of a UI driver.

    Human commands are passed through to the engine, except that rolling
    and ending the turn are refused while an AI player is up. The driver
    calls `take_ai_action()` (after waiting `ai_delay()`) to move AI seats.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        dice_source: DiceSource | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._rng = rng or random.Random()
        self._dice_source = dice_source or RandomDiceSource(self._rng)
        self._scheduler = scheduler
        self._engine: TurnEngine | None = None
        self._config: GameSettings | None = None
        self._policies: dict[int, AIPolicy] = {}
        self._listeners: list[EventListener] = []

    # -- Session lifecycle ---------------------------------------------------

    @property
    def engine(self) -> TurnEngine | None:
        return self._engine

    @property
    def config(self) -> GameSettings | None:
        return self._config

    @property
    def is_playing(self) -> bool:
        return self._engine is not None

    def snapshot(self) -> GameSnapshot | None:
        """Current session state, or None when no game is running."""
        return self._engine.snapshot() if self._engine else None

    def subscribe(self, listener: EventListener) -> None:
        """Receive engine events from this and every later session."""
        if listener not in self._listeners:
            self._listeners.append(listener)
        if self._engine is not None:
            self._engine.subscribe(listener)

    def start_game(self, config: GameSettings | Mapping[str, Any]) -> GameSnapshot:
        """
        Validate the settings and start a fresh session.

        Raises:
            InvalidSettingsError: Carrying every validation message; no
                session is created
        """
        if not isinstance(config, GameSettings) and not (
            "target_score" in config or "targetScore" in config
        ):
            config = {"target_score": self.settings.default_target_score, **config}
        result = validate_game_settings(config)
        if not result.is_valid or result.settings is None:
            logger.warning("Rejected game settings: %s", "; ".join(result.errors))
            raise InvalidSettingsError(list(result.errors))
        for warning in result.warnings:
            logger.warning("Game settings: %s", warning)

        return self._launch(result.settings)

    def start_new_game(self) -> GameSnapshot | None:
        """Discard the current session and start over with the same settings."""
        if self._config is None:
            return None
        return self._launch(self._config)

    def return_to_menu(self) -> None:
        """Discard the current session."""
        if self._engine is not None:
            logger.info("Closing session %s", self._engine.session_id)
            self._engine.close()
        self._engine = None
        self._policies = {}

    def _launch(self, config: GameSettings) -> GameSnapshot:
        self.return_to_menu()

        players = build_players(config)
        engine = TurnEngine(
            players,
            config.target_score,
            dice_source=self._dice_source,
            roll_delay=self.settings.roll_delay_seconds,
            scheduler=self._scheduler,
        )
        engine.subscribe(self._on_engine_event)
        for listener in self._listeners:
            engine.subscribe(listener)

        self._config = config
        self._engine = engine
        self._policies = {
            p.id: AIPolicy(p.ai_difficulty, rng=self._rng)
            for p in players
            if p.is_ai and p.ai_difficulty is not None
        }
        logger.info(
            "Started %s session %s: %d players, target %d",
            config.mode.value, engine.session_id, len(players), config.target_score,
        )
        engine.announce_start()
        return engine.snapshot()

    # -- Human commands ------------------------------------------------------

    def roll(self) -> bool:
        if not self._human_turn():
            return False
        return self._engine.roll()  # type: ignore[union-attr]

    def toggle_hold(self, die_id: int) -> bool:
        if self._engine is None:
            return False
        return self._engine.toggle_hold(die_id)

    def auto_select_scoring(self) -> bool:
        if self._engine is None:
            return False
        return self._engine.auto_select_scoring()

    def end_turn(self) -> bool:
        if not self._human_turn():
            return False
        return self._engine.end_turn()  # type: ignore[union-attr]

    def _human_turn(self) -> bool:
        snapshot = self.snapshot()
        return snapshot is not None and not snapshot.is_ai_turn

    # -- AI driver -------------------------------------------------------------

    def ai_delay(self) -> float:
        """Advisory pause before the current AI player's next move."""
        snapshot = self.snapshot()
        if snapshot is None or not snapshot.is_ai_turn:
            return 0.0
        return self._policies[snapshot.current_player.id].action_delay()

    def take_ai_action(self) -> AIDecision | None:
        """
        Let the current AI player make one move.

        Once the AI has held dice for this roll it only chooses between
        rolling on and banking.

        Returns:
            The decision applied, or None when it is not an AI's move
        """
        engine = self._engine
        if engine is None:
            return None
        snapshot = engine.snapshot()
        if not snapshot.is_ai_turn or snapshot.is_rolling:
            return None

        player = snapshot.current_player
        policy = self._policies[player.id]
        if any(die.is_held for die in snapshot.dice):
            decision = policy.decide_roll_or_end(
                player, snapshot.target_score, snapshot.opponent_best_total()
            )
        else:
            decision = policy.decide_from_snapshot(snapshot)

        logger.debug("%s: %s (%s)", player.name, decision.action.value, decision.reasoning)
        if decision.action is AIAction.ROLL:
            engine.roll()
        elif decision.action is AIAction.END_TURN:
            engine.end_turn()
        else:
            engine.hold_dice(decision.dice_ids, by_ai=True)
        return decision

    # -- Integrity -------------------------------------------------------------

    def _on_engine_event(self, payload: EventPayload) -> None:
        if not self.settings.check_invariants:
            return
        engine = self._engine
        if engine is None or payload.session_id != engine.session_id:
            return

        violations = check_snapshot(engine.snapshot())
        if not violations:
            return
        if self.settings.debug:
            raise CorruptedStateError(violations)

        logger.error(
            "Session %s corrupted after %s: %s; restarting",
            engine.session_id, payload.event.name, "; ".join(violations),
        )
        self.start_new_game()
