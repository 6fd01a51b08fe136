"""Hi-Lo card counting."""

from typing import Iterable, Mapping

from trainer.cards import Card, Rank
from trainer.counting.true_count import compute_true_count


# Tag values:
#     2-6: +1 (low cards)
#     7-9: 0  (neutral)
#     10-A: -1 (high cards)
HI_LO_VALUES: Mapping[Rank, int] = {rank: rank.hi_lo_value for rank in Rank}


def hi_lo_value(rank: Rank) -> int:
    """Return the Hi-Lo tag value for a rank."""
    return HI_LO_VALUES[rank]


def update_running_count(current_count: int, cards: Iterable[Card]) -> int:
    """Add the Hi-Lo values of a batch of cards to a running count."""
    return current_count + sum(card.count_value for card in cards)


def update_running_count_single(current_count: int, card: Card) -> int:
    """Add one card's Hi-Lo value to a running count."""
    return current_count + card.count_value


class HiLoCounter:
    """
    Running Hi-Lo count over the cards seen since the last shuffle.

    Balanced: a full 52-card deck sums to 0, so the running count of a
    completely dealt shoe returns to 0.
    """

    name = "Hi-Lo"

    def __init__(self) -> None:
        """Initialize the counter."""
        self._running_count = 0
        self._cards_seen = 0

    @property
    def full_deck_sum(self) -> int:
        """Sum of tag values over a full deck (0 for a balanced count)."""
        # Each rank appears 4 times in a deck (once per suit)
        return sum(value * 4 for value in HI_LO_VALUES.values())

    def count_card(self, card: Card) -> int:
        """
        Count a single card and update the running count.

        Returns:
            The tag value of the card
        """
        value = card.count_value
        self._running_count += value
        self._cards_seen += 1
        return value

    def count_cards(self, cards: Iterable[Card]) -> int:
        """Count multiple cards and return their total tag value."""
        return sum(self.count_card(card) for card in cards)

    @property
    def running_count(self) -> int:
        """Return the current running count."""
        return self._running_count

    @property
    def cards_seen(self) -> int:
        """Return the number of cards seen."""
        return self._cards_seen

    def true_count(self, decks_remaining: float) -> int:
        """Return the running count converted to a true count."""
        return compute_true_count(self._running_count, decks_remaining)

    def reset(self) -> None:
        """Reset the count to zero."""
        self._running_count = 0
        self._cards_seen = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(running_count={self._running_count})"
