"""
Kingdom Dice - Scoring Engine Tests

Comprehensive tests for the D6 scoring engine.
"""

import pytest
from kingdom_dice.engine.scoring import ScoringEngine
from kingdom_dice.engine.base import Die, ScoringCategory


class TestSingleDieScoring:
    """Tests for single die scoring (1s and 5s)."""

    def test_single_one_scores_100(self):
        result = ScoringEngine.calculate_score((1,))
        assert result.total == 100
        assert result.combinations[0].label == "1 single 1"

    def test_single_five_scores_50(self):
        result = ScoringEngine.calculate_score((5,))
        assert result.total == 50
        assert result.combinations[0].category == ScoringCategory.SINGLE_FIVE

    def test_ones_group_into_one_combination(self):
        result = ScoringEngine.calculate_score((1, 1))
        assert result.total == 200
        assert len(result.combinations) == 1
        assert result.combinations[0].label == "2 single 1s"

    def test_one_and_five_score_150(self):
        result = ScoringEngine.calculate_score((1, 5))
        assert result.total == 150

    @pytest.mark.parametrize("value", [2, 3, 4, 6])
    def test_non_scoring_single(self, value: int):
        result = ScoringEngine.calculate_score((value,))
        assert result.total == 0
        assert result.combinations == ()


class TestSets:
    """Tests for three or more of a kind."""

    def test_three_ones_scores_1000(self):
        result = ScoringEngine.calculate_score((1, 1, 1))
        assert result.total == 1000
        assert result.combinations[0].category == ScoringCategory.THREE_OF_A_KIND

    @pytest.mark.parametrize("value,expected", [
        (2, 200),
        (3, 300),
        (4, 400),
        (5, 500),
        (6, 600),
    ])
    def test_three_of_kind_scores_value_times_100(self, value: int, expected: int):
        result = ScoringEngine.calculate_score((value, value, value))
        assert result.total == expected

    @pytest.mark.parametrize("value,expected", [
        (1, 2000),
        (2, 400),
        (4, 800),
        (5, 1000),
        (6, 1200),
    ])
    def test_four_of_kind_doubles(self, value: int, expected: int):
        result = ScoringEngine.calculate_score((value,) * 4)
        assert result.total == expected
        assert result.combinations[0].category == ScoringCategory.FOUR_OF_A_KIND

    def test_five_of_kind_is_one_doubled_combination(self):
        result = ScoringEngine.calculate_score((3, 3, 3, 3, 3))
        assert result.total == 600
        assert len(result.combinations) == 1
        assert result.combinations[0].label == "5 3s"
        assert result.combinations[0].category == ScoringCategory.FIVE_OF_A_KIND

    def test_six_of_kind_doubles_only_once(self):
        result = ScoringEngine.calculate_score((5,) * 6)
        assert result.total == 1000
        assert result.combinations[0].category == ScoringCategory.SIX_OF_A_KIND

    def test_set_consumes_all_dice_of_its_face(self):
        result = ScoringEngine.calculate_score((1, 1, 1, 1))
        assert [c.label for c in result.combinations] == ["4 1s"]


class TestStraights:
    """Tests for straight combinations."""

    def test_full_straight_scores_1500(self):
        result = ScoringEngine.calculate_score((1, 2, 3, 4, 5, 6))
        assert result.total == 1500
        assert len(result.combinations) == 1
        assert result.combinations[0].label == "Full Straight (1-6)"
        assert result.combinations[0].dice_ids == (0, 1, 2, 3, 4, 5)

    def test_low_straight_scores_500(self):
        result = ScoringEngine.calculate_score((1, 2, 3, 4, 5))
        assert result.total == 500
        assert len(result.combinations) == 1
        assert result.combinations[0].category == ScoringCategory.LOW_STRAIGHT

    def test_high_straight_scores_750(self):
        result = ScoringEngine.calculate_score((2, 3, 4, 5, 6))
        assert result.total == 750
        assert len(result.combinations) == 1
        assert result.combinations[0].category == ScoringCategory.HIGH_STRAIGHT

    def test_straight_order_doesnt_matter(self):
        result = ScoringEngine.calculate_score((5, 3, 1, 4, 2))
        assert result.total == 500

    def test_partial_straight_inside_six_dice_is_not_a_straight(self):
        """Straights only count when they are the whole set."""
        result = ScoringEngine.calculate_score((1, 2, 3, 4, 5, 5))
        assert result.total == 200
        assert {c.category for c in result.combinations} == {
            ScoringCategory.SINGLE_ONE,
            ScoringCategory.SINGLE_FIVE,
        }

    def test_high_straight_with_extra_one_is_not_a_straight(self):
        result = ScoringEngine.calculate_score((2, 3, 4, 5, 6, 6))
        assert result.total == 50


class TestMixedCombinations:
    """Tests for combinations of different scoring patterns."""

    def test_fixture_rolls(self, d6_scoring_rolls):
        for name, (dice, expected, _) in d6_scoring_rolls.items():
            assert ScoringEngine.calculate_score(dice).total == expected, name

    def test_two_three_of_kinds(self):
        result = ScoringEngine.calculate_score((1, 1, 1, 5, 5, 5))
        assert result.total == 1500
        assert [c.label for c in result.combinations] == ["3 1s", "3 5s"]

    def test_no_die_in_two_combinations(self):
        result = ScoringEngine.calculate_score((1, 1, 1, 1, 5, 5))
        ids = [die_id for combo in result.combinations for die_id in combo.dice_ids]
        assert len(ids) == len(set(ids))

    def test_total_is_sum_of_combinations(self):
        result = ScoringEngine.calculate_score((4, 4, 4, 1, 5, 5))
        assert result.total == sum(c.points for c in result.combinations) == 600


class TestScenarios:
    """Literal end-to-end scoring scenarios."""

    def test_three_ones_with_junk(self):
        result = ScoringEngine.calculate_score((1, 1, 1, 2, 3, 4))
        assert result.total == 1000
        assert len(result.combinations) == 1
        assert result.combinations[0].label == "3 1s"
        assert result.combinations[0].points == 1000

    def test_four_fives_scorable_ids(self):
        dice = (5, 5, 5, 5, 2, 3)
        assert ScoringEngine.calculate_score(dice).total == 1000
        assert set(ScoringEngine.scorable_dice_ids(dice)) == {0, 1, 2, 3}

    def test_held_subset_of_ones_and_five(self):
        result = ScoringEngine.calculate_score((1, 1, 5))
        assert [(c.label, c.points) for c in result.combinations] == [
            ("2 single 1s", 200),
            ("1 single 5", 50),
        ]
        assert result.total == 250

    def test_bust_set(self):
        result = ScoringEngine.calculate_score((2, 3, 4, 6))
        assert result.total == 0
        assert result.combinations == ()
        assert ScoringEngine.has_any_score((2, 3, 4, 6)) is False


class TestHasAnyScore:
    """Tests for bust detection."""

    def test_bust_rolls(self, d6_bust_rolls):
        for dice in d6_bust_rolls:
            assert ScoringEngine.has_any_score(dice) is False

    @pytest.mark.parametrize("dice", [(1, 2, 3, 4), (2, 3, 4, 5), (2, 2, 2), (2, 3, 4, 5, 6)])
    def test_scoring_rolls(self, dice):
        assert ScoringEngine.has_any_score(dice) is True

    @pytest.mark.parametrize("dice", [(2, 3, 4, 6), (1, 5), (6, 6, 6, 1)])
    def test_matches_total(self, dice):
        assert ScoringEngine.has_any_score(dice) == (ScoringEngine.calculate_score(dice).total > 0)

    def test_empty_set_has_no_score(self):
        assert ScoringEngine.has_any_score(()) is False


class TestScorableDiceIds:
    """Tests for the union of scoring dice."""

    def test_union_includes_singles_next_to_sets(self):
        dice = (6, 6, 6, 1, 2, 5)
        assert set(ScoringEngine.scorable_dice_ids(dice)) == {0, 1, 2, 3, 5}

    def test_ids_follow_combination_order(self):
        dice = (1, 1, 5, 5, 5, 2)
        assert ScoringEngine.scorable_dice_ids(dice) == (2, 3, 4, 0, 1)

    def test_uses_die_ids(self):
        dice = [Die(id=4, value=1), Die(id=2, value=3), Die(id=5, value=5)]
        assert ScoringEngine.scorable_dice_ids(dice) == (4, 5)

    def test_nothing_scorable(self):
        assert ScoringEngine.scorable_dice_ids((2, 3, 4, 6)) == ()


class TestProperties:
    """Purity, order independence and monotonic totals."""

    def test_idempotent(self):
        dice = (1, 5, 5, 3, 3, 3)
        assert ScoringEngine.calculate_score(dice) == ScoringEngine.calculate_score(dice)

    def test_order_independent_total(self):
        dice = [Die(id=i, value=v) for i, v in enumerate((5, 1, 3, 3, 1, 3))]
        forward = ScoringEngine.calculate_score(dice)
        backward = ScoringEngine.calculate_score(list(reversed(dice)))
        assert forward.total == backward.total
        assert forward.scoring_dice_ids == backward.scoring_dice_ids

    @pytest.mark.parametrize("ones", [3, 4, 5, 6])
    def test_extra_one_never_lowers_total(self, ones: int):
        base = (1,) * ones + (2, 3)
        more = base + (1,)
        assert ScoringEngine.calculate_score(more).total >= ScoringEngine.calculate_score(base).total


class TestInputHandling:
    """Tests for input types and validation."""

    def test_accepts_die_records(self):
        dice = [Die(id=i, value=v) for i, v in enumerate((1, 2, 3, 4, 5, 6))]
        assert ScoringEngine.calculate_score(dice).total == 1500

    def test_accepts_list(self):
        assert ScoringEngine.calculate_score([1, 5]).total == 150

    def test_empty_dice_scores_nothing(self):
        result = ScoringEngine.calculate_score(())
        assert result.total == 0
        assert result.combinations == ()

    def test_invalid_face_raises(self):
        with pytest.raises(ValueError, match="must be between 1 and 6"):
            ScoringEngine.calculate_score((1, 7))
