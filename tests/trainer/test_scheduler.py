"""Tests for the adaptive prompt scheduler."""

import pytest

from helpers import FixedRandom
from trainer.prompts import CadenceTier, PromptScheduler


class TestCadenceTier:
    """Tests for tier ranges."""

    def test_ranges(self):
        """Test tight and normal hands-between-prompts ranges."""
        assert CadenceTier.TIGHT.threshold_range == (2, 3)
        assert CadenceTier.NORMAL.threshold_range == (4, 5)


class TestPromptScheduler:
    """Tests for PromptScheduler."""

    def test_low_roll_picks_lower_bound(self):
        """Test rng.random() < 0.5 picks the lower bound."""
        assert PromptScheduler(rng=FixedRandom(0.1)).next_threshold == 4
        assert PromptScheduler(rng=FixedRandom(0.5)).next_threshold == 5

    def test_prompt_opens_at_threshold(self):
        """Test a prompt opens once enough hands resolve."""
        scheduler = PromptScheduler(rng=FixedRandom(0.1))
        results = [scheduler.on_hand_resolved() for _ in range(4)]
        assert results == [False, False, False, True]
        assert scheduler.hands_since_prompt == 4

    def test_submit_resets_and_rerolls(self):
        """Test submitting resets the counter and re-rolls."""
        scheduler = PromptScheduler(rng=FixedRandom(0.1, 0.9))
        assert scheduler.next_threshold == 4
        for _ in range(4):
            scheduler.on_hand_resolved()
        scheduler.on_prompt_submitted()
        assert scheduler.hands_since_prompt == 0
        assert scheduler.next_threshold == 5

    def test_high_miss_rate_tightens(self):
        """Test a miss rate of 0.5 or more switches to tight."""
        scheduler = PromptScheduler(rng=FixedRandom(0.1))
        assert scheduler.adapt_cadence(0.5) == CadenceTier.TIGHT
        assert scheduler.next_threshold == 2
        assert scheduler.adapt_cadence(0.4) == CadenceTier.NORMAL
        assert scheduler.next_threshold == 4

    def test_same_tier_keeps_threshold(self):
        """Test staying in a tier does not re-roll."""
        scheduler = PromptScheduler(rng=FixedRandom(0.9, 0.1))
        assert scheduler.next_threshold == 5
        scheduler.adapt_cadence(0.0)
        assert scheduler.next_threshold == 5

    def test_custom_tight_miss_rate(self):
        """Test the tightening threshold is configurable."""
        scheduler = PromptScheduler(rng=FixedRandom(0.1), tight_miss_rate=0.8)
        assert scheduler.adapt_cadence(0.6) == CadenceTier.NORMAL
        assert scheduler.adapt_cadence(0.8) == CadenceTier.TIGHT

    def test_reset_keeps_tier(self):
        """Test reset clears the counter but not the tier."""
        scheduler = PromptScheduler(rng=FixedRandom(0.1), tier=CadenceTier.TIGHT)
        scheduler.on_hand_resolved()
        scheduler.reset()
        assert scheduler.hands_since_prompt == 0
        assert scheduler.tier == CadenceTier.TIGHT
        assert scheduler.next_threshold in (2, 3)


class TestSchedulerPersistence:
    """Tests for serialize/from_state."""

    def test_round_trip(self):
        """Test state survives a round trip."""
        scheduler = PromptScheduler(rng=FixedRandom(0.9), tier=CadenceTier.TIGHT)
        scheduler.on_hand_resolved()
        state = scheduler.serialize()
        assert state == {"hands_since_prompt": 1, "next_threshold": 3, "cadence_tier": "tight"}

        restored = PromptScheduler.from_state(state)
        assert restored.serialize() == state

    @pytest.mark.parametrize(
        "state,expected",
        [
            (
                {"hands_since_prompt": -3, "next_threshold": 5, "cadence_tier": "normal"},
                {"hands_since_prompt": 0, "next_threshold": 5, "cadence_tier": "normal"},
            ),
            (
                {"hands_since_prompt": 2.7, "next_threshold": 99, "cadence_tier": "normal"},
                {"hands_since_prompt": 2, "next_threshold": 4, "cadence_tier": "normal"},
            ),
            (
                {"hands_since_prompt": 1, "next_threshold": 3, "cadence_tier": "frantic"},
                {"hands_since_prompt": 1, "next_threshold": 4, "cadence_tier": "normal"},
            ),
            (
                {"hands_since_prompt": 1, "next_threshold": 5, "cadence_tier": "tight"},
                {"hands_since_prompt": 1, "next_threshold": 2, "cadence_tier": "tight"},
            ),
            (
                {},
                {"hands_since_prompt": 0, "next_threshold": 4, "cadence_tier": "normal"},
            ),
        ],
    )
    def test_from_state_sanitizes(self, state, expected):
        """Test bad counters, tiers and thresholds are clamped."""
        assert PromptScheduler.from_state(state).serialize() == expected
