"""Tests for hand evaluation, eligibility and resolution."""

import pytest
from hypothesis import given

from helpers import card_list_strategy, cards, hand_of
from trainer.errors import IllegalActionError
from trainer.hand import (
    Action,
    DealerHand,
    Hand,
    HandOutcome,
    can_double,
    can_double_after_split,
    can_split,
    can_surrender,
    hand_total,
    is_blackjack,
    is_bust,
    is_pair,
    is_soft,
    resolve_outcome,
    should_dealer_hit,
)
from trainer.rules import RuleConfig


class TestHandTotal:
    """Tests for totals and softness."""

    def test_hard_total(self, hard_16_hand):
        """Test hard hand value calculation."""
        assert hard_16_hand.value == 16
        assert not hard_16_hand.is_soft

    def test_soft_total(self, soft_17_hand):
        """Test soft hand value calculation."""
        assert soft_17_hand.value == 17
        assert soft_17_hand.is_soft

    def test_aces_drop_one_at_a_time(self):
        """Test each ace drops from 11 to 1 only as needed."""
        assert hand_total(cards("AS", "AH")) == 12
        assert hand_total(cards("AS", "AH", "9D")) == 21
        assert hand_total(cards("AS", "AH", "AD", "AC")) == 14
        assert hand_total(cards("AS", "KH", "QD")) == 21

    def test_soft_becomes_hard(self):
        """Test A,6 turns hard after a ten."""
        soft = cards("AS", "6H")
        assert is_soft(soft)
        assert not is_soft(soft + cards("10D"))
        assert hand_total(soft + cards("10D")) == 17

    def test_no_ace_is_hard(self):
        """Test hands without aces are never soft."""
        assert not is_soft(cards("10S", "7H"))

    def test_bust(self):
        """Test bust detection."""
        assert is_bust(cards("10S", "6H", "KC"))
        assert not is_bust(cards("10S", "AH", "KC"))

    def test_blackjack_and_pair(self):
        """Test natural and pair detection."""
        assert is_blackjack(cards("AS", "KH"))
        assert not is_blackjack(cards("7S", "7H", "7D"))
        assert is_pair(cards("KS", "10H"))
        assert not is_pair(cards("KS", "9H"))
        assert not is_pair(cards("8S", "8H", "8D"))

    @given(card_list_strategy(min_cards=1, max_cards=8))
    def test_total_bounds(self, drawn):
        """Test totals stay in range and soft hands never bust."""
        total = hand_total(drawn)
        assert total >= len(drawn)
        if is_soft(drawn):
            assert total <= 21


class TestHandObject:
    """Tests for the Hand dataclass."""

    def test_split_twenty_one_is_not_blackjack(self):
        """Test A,10 after a split is plain 21."""
        hand = hand_of("AS", "KH", is_split=True)
        assert hand.value == 21
        assert not hand.is_blackjack

    def test_resolve_once(self):
        """Test an outcome can only be assigned once."""
        hand = hand_of("10S", "7H")
        hand.resolve(HandOutcome.WIN)
        assert hand.is_resolved
        with pytest.raises(IllegalActionError):
            hand.resolve(HandOutcome.LOSS)

    def test_record_actions(self):
        """Test the decision log."""
        hand = hand_of("5S", "6H")
        hand.record(Action.DOUBLE)
        assert hand.actions == [Action.DOUBLE]

    def test_dict_round_trip(self):
        """Test serialization keeps every field."""
        hand = Hand(
            cards=cards("8S", "3H", "10D"),
            actions=[Action.SPLIT, Action.DOUBLE],
            is_split=True,
            is_doubled=True,
            bet=2,
            outcome=HandOutcome.WIN,
        )
        assert Hand.from_dict(hand.to_dict()) == hand

    def test_str(self, soft_17_hand):
        """Test string representation shows softness."""
        assert "soft 17" in str(soft_17_hand)


class TestDealerHand:
    """Tests for the dealer's hand."""

    def test_hole_card_hidden_until_revealed(self):
        """Test only the upcard is visible before the reveal."""
        dealer = DealerHand(cards=cards("9S", "KH"))
        assert dealer.upcard == cards("9S")[0]
        assert dealer.visible_cards == cards("9S")
        dealer.hole_card_revealed = True
        assert dealer.visible_cards == cards("9S", "KH")
        assert dealer.value == 19

    def test_dealer_hits_below_17(self, rules):
        """Test dealer policy on hard totals."""
        assert should_dealer_hit(cards("10S", "6H"), rules)
        assert not should_dealer_hit(cards("10S", "7H"), rules)

    def test_soft_17_depends_on_rule(self):
        """Test H17 hits soft 17 and S17 stands."""
        soft_17 = cards("AS", "6H")
        assert should_dealer_hit(soft_17, RuleConfig(dealer_hits_soft_17=True))
        assert not should_dealer_hit(soft_17, RuleConfig(dealer_hits_soft_17=False))
        assert not should_dealer_hit(cards("AS", "7H"), RuleConfig(dealer_hits_soft_17=True))


class TestResolveOutcome:
    """Tests for hand resolution."""

    def test_naturals(self):
        """Test blackjack outcomes come first."""
        assert resolve_outcome(cards("AS", "KH"), cards("9S", "8H")) == HandOutcome.BLACKJACK
        assert resolve_outcome(cards("AS", "KH"), cards("AD", "QC")) == HandOutcome.PUSH
        assert resolve_outcome(cards("10S", "KH"), cards("AD", "QC")) == HandOutcome.LOSS

    def test_split_21_against_dealer_21(self):
        """Test a split 21 is not a natural."""
        outcome = resolve_outcome(cards("AS", "KH"), cards("10D", "5C", "6H"), is_split_hand=True)
        assert outcome == HandOutcome.PUSH

    def test_player_bust_loses_before_dealer(self):
        """Test a player bust loses even if the dealer busts."""
        player = cards("10S", "6H", "9C")
        dealer = cards("10D", "6C", "KH")
        assert resolve_outcome(player, dealer) == HandOutcome.LOSS

    def test_dealer_bust_and_totals(self):
        """Test dealer bust and total comparison."""
        assert resolve_outcome(cards("10S", "2H"), cards("10D", "6C", "KH")) == HandOutcome.WIN
        assert resolve_outcome(cards("10S", "9H"), cards("10D", "8C")) == HandOutcome.WIN
        assert resolve_outcome(cards("10S", "7H"), cards("10D", "8C")) == HandOutcome.LOSS
        assert resolve_outcome(cards("10S", "8H"), cards("10D", "8C")) == HandOutcome.PUSH


class TestEligibility:
    """Tests for action eligibility."""

    def test_split(self, pair_8s_hand):
        """Test pairs split once."""
        assert can_split(pair_8s_hand)
        assert can_split(hand_of("KS", "10H"))
        assert not can_split(hand_of("8S", "8H", is_split=True))
        assert not can_split(hand_of("8S", "9H"))

    def test_double(self, hard_16_hand):
        """Test double needs two undoubled cards."""
        assert can_double(hard_16_hand)
        assert not can_double(hand_of("5S", "3H", "2D"))
        doubled = hand_of("5S", "6H")
        doubled.is_doubled = True
        assert not can_double(doubled)

    def test_double_after_split(self):
        """Test DAS gates doubling split hands."""
        split_hand = hand_of("8S", "3H", is_split=True)
        assert can_double_after_split(split_hand, RuleConfig(double_after_split=True))
        assert not can_double_after_split(split_hand, RuleConfig(double_after_split=False))

    def test_surrender(self, hard_16_hand, rules, surrender_rules):
        """Test late surrender on the first two cards only."""
        assert not can_surrender(hard_16_hand, rules)
        assert can_surrender(hard_16_hand, surrender_rules)
        assert not can_surrender(hand_of("10S", "6H", is_split=True), surrender_rules)
        assert not can_surrender(hand_of("10S", "4H", "2D"), surrender_rules)
