"""Tests for Hi-Lo counting and true count conversion."""

import pytest
from hypothesis import given, strategies as st

from helpers import card_list_strategy, cards
from trainer.cards import Rank, build_deck
from trainer.counting import (
    HI_LO_VALUES,
    HiLoCounter,
    clamp_decks_remaining,
    compute_true_count,
    estimate_decks_remaining,
    hi_lo_value,
    update_running_count,
    update_running_count_single,
)


class TestHiLoValues:
    """Tests for the Hi-Lo tag table."""

    def test_tag_table(self):
        """Test every rank's tag."""
        assert hi_lo_value(Rank.TWO) == 1
        assert hi_lo_value(Rank.SIX) == 1
        assert hi_lo_value(Rank.SEVEN) == 0
        assert hi_lo_value(Rank.NINE) == 0
        assert hi_lo_value(Rank.TEN) == -1
        assert hi_lo_value(Rank.QUEEN) == -1
        assert hi_lo_value(Rank.ACE) == -1
        assert len(HI_LO_VALUES) == 13

    def test_balanced(self):
        """Test a full deck sums to zero."""
        assert HiLoCounter().full_deck_sum == 0


class TestRunningCount:
    """Tests for running count updates."""

    def test_batch_update(self):
        """Test adding a batch of cards."""
        assert update_running_count(0, cards("2S", "5H", "KD", "8C")) == 1
        assert update_running_count(3, cards("AS", "10H", "JD")) == 0

    def test_empty_batch(self):
        """Test an empty batch leaves the count alone."""
        assert update_running_count(4, []) == 4

    def test_single_update(self):
        """Test adding one card."""
        assert update_running_count_single(0, cards("3D")[0]) == 1
        assert update_running_count_single(0, cards("AD")[0]) == -1

    @given(card_list_strategy(min_cards=0, max_cards=20), st.integers(-30, 30))
    def test_batch_matches_singles(self, drawn, start):
        """Test a batch update equals the same cards one at a time."""
        running = start
        for card in drawn:
            running = update_running_count_single(running, card)
        assert update_running_count(start, drawn) == running

    def test_whole_shoe_returns_to_zero(self):
        """Test counting every card of six decks ends at zero."""
        shoe_cards = [card for _ in range(6) for card in build_deck()]
        assert update_running_count(0, shoe_cards) == 0


class TestHiLoCounter:
    """Tests for the stateful counter."""

    def test_count_and_reset(self):
        """Test counting cards and resetting."""
        counter = HiLoCounter()
        counter.count_cards(cards("2S", "3S", "KS"))
        assert counter.running_count == 1
        assert counter.cards_seen == 3
        counter.reset()
        assert counter.running_count == 0
        assert counter.cards_seen == 0

    def test_true_count(self):
        """Test the counter's true count conversion."""
        counter = HiLoCounter()
        counter.count_cards(cards("2S", "3S", "4S", "5S", "6S", "2H", "3H"))
        assert counter.true_count(3.0) == 2


class TestTrueCount:
    """Tests for true count conversion."""

    def test_truncates_toward_zero(self):
        """Test positive and negative counts truncate toward zero."""
        assert compute_true_count(7, 3) == 2
        assert compute_true_count(-7, 3) == -2
        assert compute_true_count(5, 2.5) == 2
        assert compute_true_count(-1, 2) == 0

    def test_zero_decks_rejected(self):
        """Test non-positive decks remaining raise."""
        with pytest.raises(ValueError):
            compute_true_count(4, 0)
        with pytest.raises(ValueError):
            compute_true_count(4, -1)

    def test_estimate_and_clamp(self):
        """Test decks-remaining estimate and its floor."""
        assert estimate_decks_remaining(156) == pytest.approx(3.0)
        assert clamp_decks_remaining(0.1) == 0.5
        assert clamp_decks_remaining(2.0) == 2.0

    def test_late_shoe_uses_half_deck_floor(self):
        """Test a nearly empty shoe divides by half a deck."""
        decks = clamp_decks_remaining(estimate_decks_remaining(10))
        assert compute_true_count(3, decks) == 6
