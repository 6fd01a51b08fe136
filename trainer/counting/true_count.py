"""True count conversion."""

import math

from trainer.cards import CARDS_PER_DECK

# Callers clamp their decks-remaining estimate to this before converting.
MIN_DECKS_REMAINING = 0.5


def compute_true_count(running_count: int, decks_remaining: float) -> int:
    """
    Convert a running count to a true count.

    The quotient is truncated toward zero, so +7 over 3 decks is +2 and -7
    over 3 decks is -2.

    Raises:
        ValueError: if decks_remaining is not positive
    """
    if decks_remaining <= 0:
        raise ValueError(f"decks_remaining must be positive, got {decks_remaining}")
    return math.trunc(running_count / decks_remaining)


def estimate_decks_remaining(cards_remaining: int) -> float:
    """Estimate decks remaining from the number of cards left in the shoe."""
    return cards_remaining / CARDS_PER_DECK


def clamp_decks_remaining(decks_remaining: float) -> float:
    """Clamp a decks-remaining estimate to the conversion minimum."""
    return max(MIN_DECKS_REMAINING, decks_remaining)
