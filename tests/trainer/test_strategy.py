"""Tests for basic strategy, index plays and insurance."""

import logging

import pytest

from helpers import c, cards
from trainer.hand import Action
from trainer.rules import RuleConfig
from trainer.strategy import (
    ALL_DEVIATIONS,
    FAB_4,
    ILLUSTRIOUS_18,
    BasicStrategy,
    Comparison,
    RawAction,
    find_applicable_deviation,
    get_basic_strategy_action,
    get_deviation_action,
    is_correct_play,
    recommend_action,
    resolve_action,
    should_take_insurance,
)

H17 = RuleConfig(dealer_hits_soft_17=True)
S17 = RuleConfig(dealer_hits_soft_17=False)
H17_SURRENDER = RuleConfig(dealer_hits_soft_17=True, surrender_allowed=True)
S17_SURRENDER = RuleConfig(dealer_hits_soft_17=False, surrender_allowed=True)
NO_DAS = RuleConfig(double_after_split=False)


class TestResolveAction:
    """Tests for chart code resolution."""

    @pytest.mark.parametrize(
        "raw,can_double,can_surrender,can_split,expected",
        [
            (RawAction.H, True, True, True, Action.HIT),
            (RawAction.S, True, True, True, Action.STAND),
            (RawAction.D, True, False, False, Action.DOUBLE),
            (RawAction.D, False, False, False, Action.HIT),
            (RawAction.DS, False, False, False, Action.STAND),
            (RawAction.P, False, False, False, Action.SPLIT),
            (RawAction.PH, False, False, False, Action.HIT),
            (RawAction.RH, False, True, False, Action.SURRENDER),
            (RawAction.RH, False, False, False, Action.HIT),
            (RawAction.RS, False, False, False, Action.STAND),
            (RawAction.RP, False, False, True, Action.SPLIT),
            (RawAction.RP, False, True, True, Action.SURRENDER),
        ],
    )
    def test_codes(self, raw, can_double, can_surrender, can_split, expected):
        """Test each code against its eligibility flags."""
        assert resolve_action(raw, can_double, can_surrender, can_split) == expected


class TestBasicStrategy:
    """Tests for the basic strategy lookup."""

    def test_hard_totals(self):
        """Test representative hard totals."""
        assert get_basic_strategy_action(cards("10S", "2H"), c("2D"), H17) == Action.HIT
        assert get_basic_strategy_action(cards("10S", "2H"), c("4D"), H17) == Action.STAND
        assert get_basic_strategy_action(cards("6S", "5H"), c("AD"), H17) == Action.DOUBLE
        assert get_basic_strategy_action(cards("10S", "7H"), c("9D"), H17) == Action.STAND
        assert get_basic_strategy_action(cards("10S", "6H"), c("10D"), H17) == Action.HIT

    def test_three_card_double_falls_back(self):
        """Test 'double' becomes hit once the hand has three cards."""
        assert get_basic_strategy_action(cards("5S", "4H", "2D"), c("6D"), H17) == Action.HIT

    def test_soft_totals(self):
        """Test soft doubles and the 'double else stand' code."""
        assert get_basic_strategy_action(cards("AS", "7H"), c("3D"), H17) == Action.DOUBLE
        assert get_basic_strategy_action(cards("AS", "4H", "3D"), c("3D"), H17) == Action.STAND
        assert get_basic_strategy_action(cards("AS", "7H"), c("9D"), H17) == Action.HIT

    def test_h17_and_s17_differ(self):
        """Test the S17 overrides."""
        assert get_basic_strategy_action(cards("AS", "8H"), c("6D"), H17) == Action.DOUBLE
        assert get_basic_strategy_action(cards("AS", "8H"), c("6D"), S17) == Action.STAND
        assert get_basic_strategy_action(cards("10S", "5H"), c("AD"), H17_SURRENDER) == Action.SURRENDER
        assert get_basic_strategy_action(cards("10S", "5H"), c("AD"), S17_SURRENDER) == Action.HIT

    def test_surrender_depends_on_rule(self):
        """Test 16 vs 10 surrenders only when allowed."""
        assert get_basic_strategy_action(cards("10S", "6H"), c("KD"), H17_SURRENDER) == Action.SURRENDER
        assert get_basic_strategy_action(cards("10S", "6H"), c("KD"), H17) == Action.HIT

    def test_pairs(self):
        """Test pair splitting and fall-through."""
        assert get_basic_strategy_action(cards("AS", "AH"), c("10D"), H17) == Action.SPLIT
        assert get_basic_strategy_action(cards("8S", "8H"), c("AD"), H17) == Action.SPLIT
        assert get_basic_strategy_action(cards("KS", "QH"), c("6D"), H17) == Action.STAND
        assert get_basic_strategy_action(cards("5S", "5H"), c("9D"), H17) == Action.DOUBLE
        assert get_basic_strategy_action(cards("9S", "9H"), c("7D"), H17) == Action.STAND

    def test_das_gates_small_pairs(self):
        """Test 2,2 vs 2 splits only with double after split."""
        assert get_basic_strategy_action(cards("2S", "2H"), c("2D"), H17) == Action.SPLIT
        assert get_basic_strategy_action(cards("2S", "2H"), c("2D"), NO_DAS) == Action.HIT

    def test_split_hand_is_not_a_pair(self):
        """Test split hands use the totals tables."""
        action = get_basic_strategy_action(cards("8S", "8H"), c("10D"), H17, is_split_hand=True)
        assert action == Action.HIT

    def test_split_hand_double_needs_das(self):
        """Test doubling a split 11 follows the DAS rule."""
        assert get_basic_strategy_action(cards("8S", "3H"), c("6D"), H17, True) == Action.DOUBLE
        assert get_basic_strategy_action(cards("8S", "3H"), c("6D"), NO_DAS, True) == Action.HIT

    def test_split_aces_read_hard_twelve(self):
        """Test a soft 12 that cannot split again plays like hard 12."""
        aces = cards("AS", "AH")
        assert get_basic_strategy_action(aces, c("4D"), H17, is_split_hand=True) == Action.STAND
        assert get_basic_strategy_action(aces, c("2D"), H17, is_split_hand=True) == Action.HIT
        assert get_basic_strategy_action(
            aces, c("4D"), H17, is_split_hand=True
        ) == get_basic_strategy_action(cards("10S", "2H"), c("4D"), H17)

    def test_tiny_total_falls_back_to_hit(self, caplog):
        """Test totals below the chart fall back to hit with a warning."""
        with caplog.at_level(logging.WARNING):
            action = get_basic_strategy_action(cards("2S", "2H"), c("5D"), H17, is_split_hand=True)
        assert action == Action.HIT
        assert "falling back to hit" in caplog.text

    def test_wrapper(self):
        """Test the rule-bound wrapper."""
        strategy = BasicStrategy(H17)
        assert strategy.get_action(cards("10S", "6H"), c("6D")) == Action.STAND
        assert strategy.is_correct(Action.STAND, cards("10S", "6H"), c("6D"))
        assert not is_correct_play(Action.HIT, cards("10S", "6H"), c("6D"), H17)
        assert strategy.source.id == "bja-h17-2019"


class TestDeviationTable:
    """Tests for the index play table."""

    def test_sizes(self):
        """Test the I18 (less insurance) and Fab 4 row counts."""
        assert len(ILLUSTRIOUS_18) == 17
        assert len(FAB_4) == 4
        assert len(ALL_DEVIATIONS) == 21

    def test_comparisons(self):
        """Test hit-on-negative plays use at-or-below."""
        by_name = {d.name: d for d in ALL_DEVIATIONS}
        assert by_name["12 vs 4: Hit"].comparison == Comparison.LTE
        assert by_name["16 vs 10: Stand"].comparison == Comparison.GTE
        assert by_name["12 vs 4: Hit"].should_deviate(0)
        assert not by_name["12 vs 4: Hit"].should_deviate(1)

    def test_to_dict(self):
        """Test serialization uses plain values."""
        data = ILLUSTRIOUS_18[0].to_dict()
        assert data["deviation_action"] == "stand"
        assert data["comparison"] == "gte"
        assert data["group"] == "I18"


class TestDeviations:
    """Tests for deviation lookup and gating."""

    def test_16_vs_10(self):
        """Test 16 vs 10 stands at zero and above."""
        assert recommend_action(cards("10S", "6H"), c("KD"), 0, H17) == Action.STAND
        assert recommend_action(cards("10S", "6H"), c("KD"), -1, H17) == Action.HIT

    def test_12_vs_4_hits_at_or_below_zero(self):
        """Test a negative-side index."""
        assert recommend_action(cards("10S", "2H"), c("4D"), 0, H17) == Action.HIT
        assert recommend_action(cards("10S", "2H"), c("4D"), 1, H17) == Action.STAND

    def test_tens_split(self):
        """Test 10,10 vs 6 splits at +4."""
        assert recommend_action(cards("KS", "QH"), c("6D"), 4, H17) == Action.SPLIT
        assert recommend_action(cards("KS", "QH"), c("6D"), 3, H17) == Action.STAND

    def test_split_tens_cannot_split_again(self):
        """Test the pair rows skip split hands."""
        action = recommend_action(cards("KS", "QH"), c("6D"), 6, H17, is_split_hand=True)
        assert action == Action.STAND

    def test_surrender_needs_rule(self):
        """Test Fab 4 rows only fire when surrender is allowed."""
        assert recommend_action(cards("10S", "5H"), c("KD"), 2, H17_SURRENDER) == Action.SURRENDER
        assert recommend_action(cards("10S", "5H"), c("KD"), 2, H17) == Action.HIT

    def test_table_order_is_priority(self):
        """Test 15 vs 10 at +4 stands even though surrender also fires."""
        dev = find_applicable_deviation(cards("10S", "5H"), c("KD"), 4, H17_SURRENDER)
        assert dev is not None
        assert dev.name == "15 vs 10: Stand"

    def test_double_needs_two_cards(self):
        """Test 10 vs 10 at +4 only doubles on two cards."""
        assert recommend_action(cards("6S", "4H"), c("KD"), 4, H17) == Action.DOUBLE
        assert recommend_action(cards("2S", "3H", "5D"), c("KD"), 4, H17) == Action.HIT

    def test_soft_hands_have_no_rows(self):
        """Test soft 16 vs 10 ignores the hard 16 row."""
        assert find_applicable_deviation(cards("AS", "5H"), c("KD"), 5, H17) is None

    def test_get_deviation_action(self):
        """Test the action and row are returned together."""
        result = get_deviation_action(cards("6S", "5H"), c("AD"), 1, H17)
        assert result is not None
        action, dev = result
        assert action == Action.DOUBLE
        assert dev.dealer_up_value == 11
        assert get_deviation_action(cards("10S", "9H"), c("AD"), 10, H17) is None


class TestInsurance:
    """Tests for the insurance index."""

    def test_threshold(self):
        """Test insurance at +3 and above."""
        assert should_take_insurance(3)
        assert should_take_insurance(5.5)
        assert not should_take_insurance(2)
        assert not should_take_insurance(-4)
