"""Blackjack rule variations for a training session."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

DECK_COUNTS = (1, 2, 6, 8)


class DealSpeed(Enum):
    """Pacing of dealt cards; the UI collaborator animates at this speed."""

    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"
    VERY_FAST = "very_fast"

    @property
    def delay_ms(self) -> int:
        """Return the delay between dealt cards in milliseconds."""
        return {
            DealSpeed.SLOW: 2000,
            DealSpeed.NORMAL: 1200,
            DealSpeed.FAST: 600,
            DealSpeed.VERY_FAST: 300,
        }[self]


@dataclass(frozen=True)
class RuleConfig:
    """
    Blackjack table rules configuration.

    Fixed for the lifetime of a session. Everything that changes a strategy
    decision or the dealer's play lives here.
    """

    # Deck configuration
    decks: int = 6
    penetration: float = 0.75

    # Dealer rules
    dealer_hits_soft_17: bool = True  # H17 vs S17

    # Double down rules
    double_after_split: bool = True  # DAS

    # Late surrender
    surrender_allowed: bool = False

    deal_speed: DealSpeed = DealSpeed.NORMAL

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.decks not in DECK_COUNTS:
            raise ValueError(f"decks must be one of {DECK_COUNTS}")
        if not 0.0 < self.penetration <= 1.0:
            raise ValueError("penetration must be between 0 and 1")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        data = asdict(self)
        data["deal_speed"] = self.deal_speed.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleConfig":
        """Restore rules serialized with to_dict."""
        return cls(
            decks=data["decks"],
            penetration=data["penetration"],
            dealer_hits_soft_17=data["dealer_hits_soft_17"],
            double_after_split=data["double_after_split"],
            surrender_allowed=data["surrender_allowed"],
            deal_speed=DealSpeed(data.get("deal_speed", DealSpeed.NORMAL.value)),
        )

    @classmethod
    def vegas_strip(cls) -> "RuleConfig":
        """Standard Vegas Strip rules."""
        return cls(
            decks=6,
            dealer_hits_soft_17=False,
            double_after_split=True,
            surrender_allowed=True,
        )

    @classmethod
    def downtown_vegas(cls) -> "RuleConfig":
        """Downtown Las Vegas rules (typically H17)."""
        return cls(
            decks=6,
            dealer_hits_soft_17=True,
            double_after_split=True,
            surrender_allowed=True,
        )

    @classmethod
    def single_deck(cls) -> "RuleConfig":
        """Single deck rules."""
        return cls(
            decks=1,
            penetration=0.65,
            dealer_hits_soft_17=True,
            double_after_split=False,
            surrender_allowed=False,
        )

    @classmethod
    def atlantic_city(cls) -> "RuleConfig":
        """Atlantic City rules."""
        return cls(
            decks=8,
            dealer_hits_soft_17=False,
            double_after_split=True,
            surrender_allowed=True,
        )
