"""Card and Shoe classes - immutable card representations."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Any, Iterator, MutableSequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

CARDS_PER_DECK = 52


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks with blackjack values."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 11
        return 10  # Face cards

    @property
    def hi_lo_value(self) -> int:
        """Return the Hi-Lo tag: 2-6 are +1, 7-9 are 0, tens and aces are -1."""
        if self.value <= 6:
            return 1
        if self.value <= 9:
            return 0
        return -1

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        """Check if this rank has a value of 10."""
        return self.blackjack_value == 10


_RANK_ALIASES = {
    "2": Rank.TWO,
    "3": Rank.THREE,
    "4": Rank.FOUR,
    "5": Rank.FIVE,
    "6": Rank.SIX,
    "7": Rank.SEVEN,
    "8": Rank.EIGHT,
    "9": Rank.NINE,
    "10": Rank.TEN,
    "T": Rank.TEN,
    "J": Rank.JACK,
    "Q": Rank.QUEEN,
    "K": Rank.KING,
    "A": Rank.ACE,
}

_SUIT_ALIASES = {
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


def parse_rank(s: str) -> Rank:
    """Parse a rank label such as 'A', '10', 'T' or 'k'."""
    key = s.strip().upper()
    if key not in _RANK_ALIASES:
        raise ValueError(f"Invalid rank: {s}")
    return _RANK_ALIASES[key]


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def count_value(self) -> int:
        """Return the Hi-Lo count value of this card."""
        return self.rank.hi_lo_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        """Check if this card has a value of 10."""
        return self.rank.is_ten_value

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank = parse_rank(s[:-1])
        suit_str = s[-1]
        if suit_str not in _SUIT_ALIASES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank, _SUIT_ALIASES[suit_str])

    def to_dict(self) -> dict[str, int]:
        """Serialize to a plain dict."""
        return {"rank": self.rank.value, "suit": self.suit.value}

    @classmethod
    def from_dict(cls, data: dict[str, int]) -> "Card":
        """Restore a card serialized with to_dict."""
        return cls(Rank(data["rank"]), Suit(data["suit"]))


def build_deck() -> list[Card]:
    """Return one ordered 52-card deck."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def fisher_yates_shuffle(items: MutableSequence[T], rng: Random) -> MutableSequence[T]:
    """
    Shuffle in place with Fisher-Yates and return the same sequence.

    Only ``rng.random()`` is consumed, so any object exposing it (a seeded
    ``Random`` in tests, a stub returning fixed values) yields a reproducible
    order.
    """
    for i in range(len(items) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items


class Shoe:
    """A multi-deck shoe for blackjack."""

    def __init__(
        self,
        num_decks: int = 6,
        penetration: float = 0.75,
        rng: Random | None = None,
        cards: list[Card] | None = None,
    ) -> None:
        """
        Initialize a shoe with multiple decks.

        A new shoe is built full and shuffled. Passing ``cards`` restores a
        saved shoe with exactly that remaining order and no reshuffle.

        Args:
            num_decks: Number of decks in the shoe
            penetration: Fraction of shoe dealt before reshuffle (0.0-1.0)
            rng: Random number generator for shuffling
            cards: Remaining cards of a saved shoe, last card drawn first
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")
        if not 0.0 < penetration <= 1.0:
            raise ValueError("Penetration must be between 0 and 1")

        self._num_decks = num_decks
        self._penetration = penetration
        self._rng = rng or Random()
        self._cut_card_position = int(self.total_cards * penetration)
        if cards is None:
            self._cards: list[Card] = []
            self.reshuffle()
        else:
            if len(cards) > self.total_cards:
                raise ValueError("Saved shoe holds more cards than its decks allow")
            self._cards = list(cards)

    def reshuffle(self) -> None:
        """Rebuild all decks and shuffle them."""
        self._cards = [card for _ in range(self._num_decks) for card in build_deck()]
        fisher_yates_shuffle(self._cards, self._rng)
        logger.debug("Shoe reshuffled: %d decks, cut at %d", self._num_decks, self._cut_card_position)

    def draw(self) -> Card:
        """
        Draw a card from the shoe.

        An empty shoe is rebuilt and reshuffled before drawing, so play
        never stalls.
        """
        if not self._cards:
            logger.debug("Shoe exhausted, rebuilding before draw")
            self.reshuffle()
        return self._cards.pop()

    @property
    def needs_reshuffle(self) -> bool:
        """Check if the cut card has been reached."""
        return self.cards_dealt >= self._cut_card_position

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def cards_dealt(self) -> int:
        """Return the number of cards dealt."""
        return self.total_cards - len(self._cards)

    @property
    def total_cards(self) -> int:
        """Return the total number of cards in a full shoe."""
        return self._num_decks * CARDS_PER_DECK

    @property
    def num_decks(self) -> int:
        """Return the number of decks in the shoe."""
        return self._num_decks

    @property
    def cut_card_position(self) -> int:
        """Return how many cards are dealt before the cut card comes out."""
        return self._cut_card_position

    @property
    def decks_remaining(self) -> float:
        """Return the number of decks remaining."""
        return len(self._cards) / CARDS_PER_DECK

    @property
    def penetration(self) -> float:
        """Return the configured penetration."""
        return self._penetration

    def serialize(self) -> dict[str, Any]:
        """Return the shoe state for persistence."""
        return {
            "cards": [card.to_dict() for card in self._cards],
            "deck_count": self._num_decks,
            "penetration": self._penetration,
        }

    @classmethod
    def from_state(cls, state: dict[str, Any], rng: Random | None = None) -> "Shoe":
        """Restore a shoe saved with serialize(), keeping its card order."""
        return cls(
            num_decks=state["deck_count"],
            penetration=state["penetration"],
            rng=rng,
            cards=[Card.from_dict(c) for c in state["cards"]],
        )

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
