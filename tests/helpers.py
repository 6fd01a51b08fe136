"""Shared builders and stubs for trainer tests."""

from datetime import datetime, timezone
from random import Random

from hypothesis import strategies as st

from trainer.cards import Card, Rank, Shoe, Suit, build_deck
from trainer.hand import Hand


class FixedRandom(Random):
    """Random stub whose ``random()`` cycles through fixed values."""

    def __init__(self, *values: float) -> None:
        super().__init__(0)
        self._values = list(values) or [0.0]
        self._index = 0

    def random(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


def c(label: str) -> Card:
    """Shorthand card constructor: c("AS"), c("10h"), c("K♦")."""
    return Card.from_string(label)


def cards(*labels: str) -> list[Card]:
    """Several cards from labels."""
    return [c(label) for label in labels]


def hand_of(*labels: str, is_split: bool = False) -> Hand:
    """A player hand from labels."""
    return Hand(cards=cards(*labels), is_split=is_split)


def stacked_shoe(draw_order: list[Card], num_decks: int = 6, filler_decks: int = 4) -> Shoe:
    """
    A shoe whose next draws are ``draw_order``, first card first.

    Filler decks sit under the stacked cards so the cut card is far away.
    """
    filler = [card for _ in range(filler_decks) for card in build_deck()]
    return Shoe(num_decks=num_decks, cards=filler + list(reversed(draw_order)))


def fixed_now() -> datetime:
    return datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def card_list_strategy(draw, min_cards=2, max_cards=6):
    """Generate a random list of cards."""
    return draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
