"""Adaptive count-prompt scheduler."""

import logging
import math
from enum import Enum
from random import Random
from typing import Any

logger = logging.getLogger(__name__)

TIGHT_MISS_RATE = 0.5


class CadenceTier(Enum):
    """How often count prompts interrupt play."""

    TIGHT = "tight"
    NORMAL = "normal"

    @property
    def threshold_range(self) -> tuple[int, int]:
        """Return the (lower, upper) hands-between-prompts bounds."""
        if self == CadenceTier.TIGHT:
            return (2, 3)
        return (4, 5)


class PromptScheduler:
    """
    Decides after each resolved hand whether to open a count prompt.

    The threshold is re-rolled from the current tier's two-value range with a
    coin flip: ``rng.random() < 0.5`` picks the lower bound.
    """

    def __init__(
        self,
        rng: Random | None = None,
        tier: CadenceTier = CadenceTier.NORMAL,
        hands_since_prompt: int = 0,
        next_threshold: int | None = None,
        tight_miss_rate: float = TIGHT_MISS_RATE,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            rng: Random source for threshold rolls
            tier: Starting cadence tier
            hands_since_prompt: Hands resolved since the last prompt
            next_threshold: Fixed first threshold; rolled when None
            tight_miss_rate: Miss rate at or above which cadence tightens
        """
        self._rng = rng or Random()
        self._tier = tier
        self._hands_since_prompt = hands_since_prompt
        self._tight_miss_rate = tight_miss_rate
        self._next_threshold = (
            next_threshold if next_threshold is not None else self._pick_threshold()
        )

    def _pick_threshold(self) -> int:
        lower, upper = self._tier.threshold_range
        return lower if self._rng.random() < 0.5 else upper

    def on_hand_resolved(self) -> bool:
        """
        Count a resolved hand.

        Returns:
            True if a count prompt should open now
        """
        self._hands_since_prompt += 1
        return self._hands_since_prompt >= self._next_threshold

    def on_prompt_submitted(self) -> None:
        """Reset the counter and re-roll the next threshold."""
        self._hands_since_prompt = 0
        self._next_threshold = self._pick_threshold()

    def adapt_cadence(self, recent_miss_rate: float) -> CadenceTier:
        """
        Pick the tier from the recent miss rate.

        Switching tiers re-rolls the threshold at once; staying in the same
        tier leaves it alone.

        Args:
            recent_miss_rate: Fraction of recent count checks answered wrong

        Returns:
            The tier now in effect
        """
        tier = CadenceTier.TIGHT if recent_miss_rate >= self._tight_miss_rate else CadenceTier.NORMAL
        if tier != self._tier:
            logger.info(
                "Prompt cadence %s -> %s (miss rate %.2f)",
                self._tier.value,
                tier.value,
                recent_miss_rate,
            )
            self._tier = tier
            self._next_threshold = self._pick_threshold()
        return self._tier

    def reset(self) -> None:
        """Reset the counter and re-roll; the tier is kept."""
        self._hands_since_prompt = 0
        self._next_threshold = self._pick_threshold()

    @property
    def hands_since_prompt(self) -> int:
        """Return hands resolved since the last prompt."""
        return self._hands_since_prompt

    @property
    def next_threshold(self) -> int:
        """Return the hand count that opens the next prompt."""
        return self._next_threshold

    @property
    def tier(self) -> CadenceTier:
        """Return the current cadence tier."""
        return self._tier

    def serialize(self) -> dict[str, Any]:
        """Return the scheduler state for persistence."""
        return {
            "hands_since_prompt": self._hands_since_prompt,
            "next_threshold": self._next_threshold,
            "cadence_tier": self._tier.value,
        }

    @classmethod
    def from_state(
        cls,
        state: dict[str, Any],
        rng: Random | None = None,
        tight_miss_rate: float = TIGHT_MISS_RATE,
    ) -> "PromptScheduler":
        """
        Restore a scheduler, sanitizing untrusted input.

        The counter is truncated and floored at 0; an unknown tier becomes
        normal; a threshold outside the tier's range becomes its lower bound.
        """
        try:
            tier = CadenceTier(state.get("cadence_tier", CadenceTier.NORMAL.value))
        except ValueError:
            tier = CadenceTier.NORMAL

        hands = max(0, math.trunc(state.get("hands_since_prompt", 0)))
        lower, upper = tier.threshold_range
        threshold = upper if state.get("next_threshold") == upper else lower

        return cls(
            rng=rng,
            tier=tier,
            hands_since_prompt=hands,
            next_threshold=threshold,
            tight_miss_rate=tight_miss_rate,
        )

    def __repr__(self) -> str:
        return (
            f"PromptScheduler(tier={self._tier.value}, "
            f"hands_since_prompt={self._hands_since_prompt}, "
            f"next_threshold={self._next_threshold})"
        )
