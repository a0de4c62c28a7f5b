"""
Kingdom Dice - Dice Sources

Rolling is the only source of randomness in the engine. It sits behind a
single `roll(count)` call so the turn engine can be driven with a fixed
sequence of faces in tests.
"""

from __future__ import annotations

import random
from collections import deque
from typing import Iterable, Protocol

from kingdom_dice.engine.errors import DiceSourceExhaustedError


class DiceSource(Protocol):
    """Anything that can produce D6 faces."""

    def roll(self, count: int) -> tuple[int, ...]:
        ...


class RandomDiceSource:
    """Uniform D6 faces from a `random.Random` instance."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def roll(self, count: int) -> tuple[int, ...]:
        """
        Roll the specified number of D6 dice.

        Args:
            count: Number of dice to roll

        Returns:
            Tuple of random faces in 1-6
        """
        return tuple(self._rng.randint(1, 6) for _ in range(count))


class FixedDiceSource:
    """
    Replays a predetermined sequence of faces.

    Faces are consumed left to right across calls, so
    `FixedDiceSource([1, 2, 3, 4, 5, 6, 2, 2])` answers `roll(6)` with
    `(1, 2, 3, 4, 5, 6)` and a following `roll(2)` with `(2, 2)`.
    """

    def __init__(self, faces: Iterable[int] = ()) -> None:
        self._faces: deque[int] = deque()
        self.extend(faces)

    def extend(self, faces: Iterable[int]) -> None:
        """Queue more faces."""
        for face in faces:
            if not (1 <= face <= 6):
                raise ValueError(f"Die face {face} must be between 1 and 6.")
            self._faces.append(face)

    @property
    def remaining(self) -> int:
        return len(self._faces)

    def roll(self, count: int) -> tuple[int, ...]:
        if count > len(self._faces):
            raise DiceSourceExhaustedError(
                f"Asked for {count} dice, only {len(self._faces)} queued."
            )
        return tuple(self._faces.popleft() for _ in range(count))
