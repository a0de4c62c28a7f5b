"""
Kingdom Dice - Scoring Engine

Maps a set of dice to its scoring combinations. All methods are stateless
class methods; the same dice always produce the same result regardless of
the order they are passed in.

Scoring Rules (checked in this order, each consuming its dice):
    - 1-2-3-4-5-6 (Full Straight, exactly six dice): 1,500 points, nothing else
    - 1-2-3-4-5 (exactly five dice): 500 points
    - 2-3-4-5-6 (exactly five dice): 750 points
    - Three 1s: 1,000 points
    - Three of X (2-6): X × 100 points
    - Four or more of a kind: the three-of-a-kind value doubled once
    - Remaining 1s: 100 points each
    - Remaining 5s: 50 points each
"""

from __future__ import annotations

from typing import Sequence

from kingdom_dice.engine.base import (
    Die,
    ScoringCategory,
    ScoringCombination,
    ScoringResult,
)
from kingdom_dice.engine.validators import validate_dice_values


class ScoringEngine:
    """
    Stateless scoring engine for six-sided Kingdom Dice.

    All methods are class methods operating on immutable data.
    """

    # Scoring values
    SINGLE_ONE_POINTS = 100
    SINGLE_FIVE_POINTS = 50
    THREE_ONES_POINTS = 1000
    LOW_STRAIGHT_POINTS = 500
    HIGH_STRAIGHT_POINTS = 750
    FULL_STRAIGHT_POINTS = 1500

    _STRAIGHTS = (
        ((1, 2, 3, 4, 5, 6), FULL_STRAIGHT_POINTS, ScoringCategory.FULL_STRAIGHT, "Full Straight (1-6)"),
        ((1, 2, 3, 4, 5), LOW_STRAIGHT_POINTS, ScoringCategory.LOW_STRAIGHT, "Partial Straight (1-5)"),
        ((2, 3, 4, 5, 6), HIGH_STRAIGHT_POINTS, ScoringCategory.HIGH_STRAIGHT, "Partial Straight (2-6)"),
    )

    _SET_CATEGORIES = {
        3: ScoringCategory.THREE_OF_A_KIND,
        4: ScoringCategory.FOUR_OF_A_KIND,
        5: ScoringCategory.FIVE_OF_A_KIND,
    }

    @classmethod
    def calculate_score(cls, dice: Sequence[Die] | Sequence[int]) -> ScoringResult:
        """
        Calculate the score for a set of dice.

        Straights only match when they are the whole set, so they are
        checked first and short-circuit everything else.

        Args:
            dice: Dice to score, as Die records or plain face values
                (plain values get their position as die id)

        Returns:
            ScoringResult with every combination and the total
        """
        pool = cls._as_dice(dice)
        if not pool:
            return ScoringResult(combinations=tuple(), total=0)

        straight = cls._check_straights(pool)
        if straight is not None:
            return ScoringResult(combinations=(straight,), total=straight.points)

        combinations: list[ScoringCombination] = []
        used: set[int] = set()

        combinations.extend(cls._check_sets(pool, used))
        combinations.extend(cls._check_singles(pool, used))

        return ScoringResult(
            combinations=tuple(combinations),
            total=sum(combo.points for combo in combinations),
        )

    @classmethod
    def has_any_score(cls, dice: Sequence[Die] | Sequence[int]) -> bool:
        """
        Check whether the dice contain any scoring combination.

        A set for which this is False is a bust.
        """
        return cls.calculate_score(dice).total > 0

    @classmethod
    def scorable_dice_ids(cls, dice: Sequence[Die] | Sequence[int]) -> tuple[int, ...]:
        """
        Ids of every die that contributes points.

        This is the union of all combinations, not the highest-value
        subset: a single 1 is included next to a triple. Ids come back in
        combination order, without duplicates.
        """
        ids: list[int] = []
        for combo in cls.calculate_score(dice).combinations:
            for die_id in combo.dice_ids:
                if die_id not in ids:
                    ids.append(die_id)
        return tuple(ids)

    @classmethod
    def _as_dice(cls, dice: Sequence[Die] | Sequence[int]) -> tuple[Die, ...]:
        items = tuple(dice)
        if all(isinstance(item, Die) for item in items):
            return items  # type: ignore[return-value]
        values = validate_dice_values(items)  # type: ignore[arg-type]
        return tuple(Die(id=i, value=v) for i, v in enumerate(values))

    @classmethod
    def _check_straights(cls, pool: tuple[Die, ...]) -> ScoringCombination | None:
        """
        Check whether the whole set is one of the three straights.

        Returns:
            The straight combination, or None
        """
        values = tuple(sorted(die.value for die in pool))

        for faces, points, category, label in cls._STRAIGHTS:
            if values == faces:
                return ScoringCombination(
                    dice_ids=tuple(die.id for die in pool),
                    points=points,
                    label=label,
                    category=category,
                )

        return None

    @classmethod
    def _check_sets(
        cls,
        pool: tuple[Die, ...],
        used: set[int]
    ) -> list[ScoringCombination]:
        """
        Check for three or more of a kind.

        A set consumes every die of its face. Four or more doubles the
        three-of-a-kind value once.
        """
        combinations: list[ScoringCombination] = []

        for face_value in range(1, 7):
            members = [die for die in pool if die.value == face_value]
            count = len(members)
            if count < 3:
                continue

            if face_value == 1:
                points = cls.THREE_ONES_POINTS
            else:
                points = face_value * 100
            if count >= 4:
                points *= 2

            used.update(die.id for die in members)
            combinations.append(ScoringCombination(
                dice_ids=tuple(die.id for die in members),
                points=points,
                label=f"{count} {face_value}s",
                category=cls._SET_CATEGORIES.get(count, ScoringCategory.SIX_OF_A_KIND),
            ))

        return combinations

    @classmethod
    def _check_singles(
        cls,
        pool: tuple[Die, ...],
        used: set[int]
    ) -> list[ScoringCombination]:
        """
        Group leftover 1s and 5s.

        Only 1s and 5s score outside a set; each face becomes one
        combination worth its per-die value times the count.
        """
        combinations: list[ScoringCombination] = []

        singles = (
            (1, cls.SINGLE_ONE_POINTS, ScoringCategory.SINGLE_ONE),
            (5, cls.SINGLE_FIVE_POINTS, ScoringCategory.SINGLE_FIVE),
        )
        for face_value, per_die, category in singles:
            members = [die for die in pool if die.value == face_value and die.id not in used]
            if not members:
                continue

            count = len(members)
            used.update(die.id for die in members)
            combinations.append(ScoringCombination(
                dice_ids=tuple(die.id for die in members),
                points=count * per_die,
                label=f"{count} single {face_value}{'s' if count > 1 else ''}",
                category=category,
            ))

        return combinations
