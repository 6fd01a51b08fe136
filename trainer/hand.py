"""Hand evaluation and resolution rules for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Sequence

from trainer.cards import Card
from trainer.errors import IllegalActionError
from trainer.rules import RuleConfig


class Action(Enum):
    """Player actions."""

    HIT = "hit"
    STAND = "stand"
    DOUBLE = "double"
    SPLIT = "split"
    SURRENDER = "surrender"

    def __str__(self) -> str:
        return self.value


class HandOutcome(Enum):
    """Result of a resolved player hand."""

    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    BLACKJACK = "blackjack"
    SURRENDER = "surrender"


def hand_total(cards: Sequence[Card]) -> int:
    """
    Calculate the best hand value.

    Aces count 11 and drop to 1 one at a time while the hand is over 21.
    Returns the highest value that doesn't bust, or the lowest bust value.
    """
    total = 0
    aces = 0

    for card in cards:
        total += card.value
        if card.is_ace:
            aces += 1

    # Reduce aces from 11 to 1 as needed
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return total


def is_soft(cards: Sequence[Card]) -> bool:
    """
    Check if the hand is soft.

    A hand is soft if it contains an ace that can be counted as 11
    without busting.
    """
    if not any(card.is_ace for card in cards):
        return False

    # Calculate value without any aces as 11
    total_hard = sum(1 if card.is_ace else card.value for card in cards)

    # If we can add 10 (making one ace worth 11) without busting, it's soft
    return total_hard + 10 <= 21


def is_bust(cards: Sequence[Card]) -> bool:
    """Check if the cards total more than 21."""
    return hand_total(cards) > 21


def is_blackjack(cards: Sequence[Card]) -> bool:
    """Check for a natural: exactly two cards totalling 21."""
    return len(cards) == 2 and hand_total(cards) == 21


def is_pair(cards: Sequence[Card]) -> bool:
    """Two cards of equal blackjack value (any two ten-value cards pair)."""
    return len(cards) == 2 and cards[0].value == cards[1].value


def should_dealer_hit(dealer_cards: Sequence[Card], rules: RuleConfig) -> bool:
    """
    Dealer policy: hit below 17, and on soft 17 when the dealer hits soft 17.

    The orchestrator keeps drawing while this returns True.
    """
    total = hand_total(dealer_cards)
    if total < 17:
        return True
    if total == 17 and is_soft(dealer_cards) and rules.dealer_hits_soft_17:
        return True
    return False


def resolve_outcome(
    player_cards: Sequence[Card],
    dealer_cards: Sequence[Card],
    is_split_hand: bool = False,
) -> HandOutcome:
    """
    Compare player and dealer cards.

    Naturals are settled first, then a player bust loses before the dealer's
    cards are considered. Two cards totalling 21 after a split are not a
    natural.
    """
    player_bj = is_blackjack(player_cards) and not is_split_hand
    dealer_bj = is_blackjack(dealer_cards)

    if player_bj and dealer_bj:
        return HandOutcome.PUSH
    if player_bj:
        return HandOutcome.BLACKJACK
    if dealer_bj:
        return HandOutcome.LOSS

    if is_bust(player_cards):
        return HandOutcome.LOSS
    if is_bust(dealer_cards):
        return HandOutcome.WIN

    player_value = hand_total(player_cards)
    dealer_value = hand_total(dealer_cards)
    if player_value > dealer_value:
        return HandOutcome.WIN
    if dealer_value > player_value:
        return HandOutcome.LOSS
    return HandOutcome.PUSH


@dataclass
class Hand:
    """A player hand with its decision log."""

    cards: list[Card] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    is_split: bool = False
    is_doubled: bool = False
    bet: int = 1
    outcome: HandOutcome | None = None

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def record(self, action: Action) -> None:
        """Append an action to the decision log."""
        self.actions.append(action)

    def resolve(self, outcome: HandOutcome) -> None:
        """Assign the outcome; a hand is resolved exactly once."""
        if self.outcome is not None:
            raise IllegalActionError(f"Hand already resolved as {self.outcome.value}")
        self.outcome = outcome

    @property
    def value(self) -> int:
        """Return the best hand total."""
        return hand_total(self.cards)

    @property
    def is_soft(self) -> bool:
        """Check if the hand is soft."""
        return is_soft(self.cards)

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards, not split)."""
        return not self.is_split and is_blackjack(self.cards)

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return is_bust(self.cards)

    @property
    def is_resolved(self) -> bool:
        """Check if an outcome has been assigned."""
        return self.outcome is not None

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return {
            "cards": [c.to_dict() for c in self.cards],
            "actions": [a.value for a in self.actions],
            "is_split": self.is_split,
            "is_doubled": self.is_doubled,
            "bet": self.bet,
            "outcome": self.outcome.value if self.outcome else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Hand":
        """Restore a hand serialized with to_dict."""
        return cls(
            cards=[Card.from_dict(c) for c in data["cards"]],
            actions=[Action(a) for a in data["actions"]],
            is_split=data["is_split"],
            is_doubled=data["is_doubled"],
            bet=data["bet"],
            outcome=HandOutcome(data["outcome"]) if data["outcome"] else None,
        )


@dataclass
class DealerHand:
    """The dealer's cards; the second card is the hole card."""

    cards: list[Card] = field(default_factory=list)
    hole_card_revealed: bool = False

    @property
    def upcard(self) -> Card | None:
        """Return the face-up card."""
        return self.cards[0] if self.cards else None

    @property
    def hole_card(self) -> Card | None:
        """Return the face-down card."""
        return self.cards[1] if len(self.cards) > 1 else None

    @property
    def visible_cards(self) -> list[Card]:
        """Return the cards a player at the table can see."""
        if self.hole_card_revealed:
            return list(self.cards)
        return self.cards[:1]

    @property
    def value(self) -> int:
        """Return the dealer's total."""
        return hand_total(self.cards)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return {
            "cards": [c.to_dict() for c in self.cards],
            "hole_card_revealed": self.hole_card_revealed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DealerHand":
        """Restore a dealer hand serialized with to_dict."""
        return cls(
            cards=[Card.from_dict(c) for c in data["cards"]],
            hole_card_revealed=data["hole_card_revealed"],
        )


def can_split(hand: Hand) -> bool:
    """Two cards of equal value that did not come from a split (no re-splitting)."""
    if hand.is_split:
        return False
    return is_pair(hand.cards)


def can_double(hand: Hand) -> bool:
    """Two cards that have not been doubled."""
    return len(hand.cards) == 2 and not hand.is_doubled


def can_double_after_split(hand: Hand, rules: RuleConfig) -> bool:
    """Doubling a two-card split hand needs the DAS rule."""
    if not rules.double_after_split:
        return False
    return hand.is_split and len(hand.cards) == 2


def can_surrender(hand: Hand, rules: RuleConfig) -> bool:
    """Late surrender on the first two cards of an unsplit hand."""
    return rules.surrender_allowed and len(hand.cards) == 2 and not hand.is_split
