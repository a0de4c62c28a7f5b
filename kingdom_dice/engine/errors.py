"""
Kingdom Dice - Engine Exceptions

Illegal moves are never exceptions: the engine rejects them as no-ops.
These types cover bad configuration, broken invariants and exhausted
test fixtures.
"""


class KingdomDiceError(Exception):
    """Base class for all Kingdom Dice errors."""


class InvalidSettingsError(KingdomDiceError, ValueError):
    """Game settings were rejected before a session was created."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid game settings.")


class CorruptedStateError(KingdomDiceError):
    """A session snapshot broke one of the engine's invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = list(violations)
        super().__init__("Corrupted game state: " + "; ".join(self.violations))


class DiceSourceExhaustedError(KingdomDiceError):
    """A fixed dice source ran out of faces."""
