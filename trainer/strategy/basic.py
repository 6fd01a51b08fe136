"""Rule-aware basic strategy lookup."""

import logging
from typing import Sequence

from trainer.cards import Card
from trainer.hand import Action, hand_total, is_pair, is_soft
from trainer.rules import RuleConfig
from trainer.strategy.charts import (
    BJA_H17_2019,
    HARD_H17,
    HARD_S17_OVERRIDES,
    PAIRS_H17_DAS,
    PAIRS_NO_DAS_OVERRIDES,
    PAIRS_S17_OVERRIDES,
    SOFT_H17,
    SOFT_S17_OVERRIDES,
    ChartSource,
    RawAction,
)

logger = logging.getLogger(__name__)

BASIC_STRATEGY_SOURCE = BJA_H17_2019


def dealer_index(upcard: Card) -> int:
    """Column of the dealer upcard: 2 -> 0 through ten-value -> 8, ace -> 9."""
    return upcard.value - 2


def pair_index(card: Card) -> int:
    """Row of a pair in the pair table: 2s -> 0 through tens -> 8, aces -> 9."""
    return card.value - 2


def upcard_label(upcard: Card) -> str:
    """Label used in override keys ('2'..'10', 'A')."""
    return "A" if upcard.is_ace else str(upcard.value)


def resolve_action(
    raw: RawAction,
    can_double: bool,
    can_surrender: bool,
    can_split: bool,
) -> Action:
    """
    Resolve a chart code into a concrete action.

    Args:
        raw: Chart code
        can_double: Whether the hand may double
        can_surrender: Whether the hand may surrender
        can_split: Whether the hand may split

    Returns:
        The action the player should take
    """
    if raw == RawAction.H:
        return Action.HIT
    if raw == RawAction.S:
        return Action.STAND
    if raw == RawAction.D:
        return Action.DOUBLE if can_double else Action.HIT
    if raw == RawAction.DS:
        return Action.DOUBLE if can_double else Action.STAND
    if raw == RawAction.P:
        return Action.SPLIT
    if raw == RawAction.PH:
        return Action.SPLIT if can_split else Action.HIT
    if raw == RawAction.RH:
        return Action.SURRENDER if can_surrender else Action.HIT
    if raw == RawAction.RS:
        return Action.SURRENDER if can_surrender else Action.STAND
    if raw == RawAction.RP:
        return Action.SURRENDER if can_surrender else Action.SPLIT
    raise ValueError(f"Unknown chart code: {raw}")


def get_basic_strategy_action(
    player_cards: Sequence[Card],
    dealer_upcard: Card,
    rules: RuleConfig,
    is_split_hand: bool = False,
) -> Action:
    """
    Get the basic strategy action for a hand.

    Pairs are looked up first; a pair entry that does not resolve to a split
    (5,5 or 10,10 for example) falls through to the soft or hard table.

    Args:
        player_cards: The player's current cards
        dealer_upcard: The dealer's face-up card
        rules: Table rules
        is_split_hand: Whether this hand was created by splitting

    Returns:
        The recommended action
    """
    total = hand_total(player_cards)
    soft = is_soft(player_cards)
    d_idx = dealer_index(dealer_upcard)
    label = upcard_label(dealer_upcard)
    is_h17 = rules.dealer_hits_soft_17
    has_two_cards = len(player_cards) == 2

    can_dbl = has_two_cards and (not is_split_hand or rules.double_after_split)
    can_surr = rules.surrender_allowed and has_two_cards and not is_split_hand
    can_spl = not is_split_hand and is_pair(player_cards)

    if can_spl:
        p_idx = pair_index(player_cards[0])
        key = f"{p_idx}-{d_idx}"
        raw = PAIRS_H17_DAS[p_idx][d_idx]
        if not rules.double_after_split and key in PAIRS_NO_DAS_OVERRIDES:
            raw = PAIRS_NO_DAS_OVERRIDES[key]
        if not is_h17 and key in PAIRS_S17_OVERRIDES:
            raw = PAIRS_S17_OVERRIDES[key]

        if resolve_action(raw, can_dbl, can_surr, True) == Action.SPLIT:
            return Action.SPLIT

    # Soft 12 (an A,A that cannot be split again) has no soft row and reads hard 12
    if soft and 13 <= total <= 21:
        key = f"{total}-{label}"
        raw = SOFT_H17[total - 13][d_idx]
        if not is_h17 and key in SOFT_S17_OVERRIDES:
            raw = SOFT_S17_OVERRIDES[key]
        return resolve_action(raw, can_dbl, can_surr, False)

    if 5 <= total <= 21:
        key = f"{total}-{label}"
        raw = HARD_H17[total - 5][d_idx]
        if not is_h17 and key in HARD_S17_OVERRIDES:
            raw = HARD_S17_OVERRIDES[key]
        return resolve_action(raw, can_dbl, can_surr, False)

    logger.warning(
        "No chart entry for total %d vs %s (soft=%s), falling back to hit",
        total,
        label,
        soft,
    )
    return Action.HIT


def is_correct_play(
    action: Action,
    player_cards: Sequence[Card],
    dealer_upcard: Card,
    rules: RuleConfig,
    is_split_hand: bool = False,
) -> bool:
    """Check whether an action matches basic strategy."""
    return action == get_basic_strategy_action(
        player_cards, dealer_upcard, rules, is_split_hand
    )


class BasicStrategy:
    """
    Basic strategy bound to one rule set.

    Convenience wrapper for callers that hold a RuleConfig for a whole
    session, such as the API layer.
    """

    def __init__(self, rules: RuleConfig | None = None) -> None:
        """
        Initialize basic strategy for given rules.

        Args:
            rules: Rule set to generate strategy for. Uses default if None.
        """
        self.rules = rules or RuleConfig()

    def get_action(
        self,
        player_cards: Sequence[Card],
        dealer_upcard: Card,
        is_split_hand: bool = False,
    ) -> Action:
        """Get the basic strategy action."""
        return get_basic_strategy_action(
            player_cards, dealer_upcard, self.rules, is_split_hand
        )

    def is_correct(
        self,
        action: Action,
        player_cards: Sequence[Card],
        dealer_upcard: Card,
        is_split_hand: bool = False,
    ) -> bool:
        """Check whether an action matches basic strategy."""
        return action == self.get_action(player_cards, dealer_upcard, is_split_hand)

    @property
    def source(self) -> ChartSource:
        """Return the chart the tables were transcribed from."""
        return BASIC_STRATEGY_SOURCE
