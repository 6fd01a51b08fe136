"""Strategy deviations based on true count (Illustrious 18, Fab 4)."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from trainer.cards import Card
from trainer.hand import Action, hand_total, is_pair, is_soft
from trainer.rules import RuleConfig
from trainer.strategy.basic import get_basic_strategy_action
from trainer.strategy.charts import BJA_H17_2019

DEVIATION_SOURCE = BJA_H17_2019


class Comparison(Enum):
    """Which side of the index triggers the deviation."""

    GTE = "gte"  # deviate when TC >= index
    LTE = "lte"  # deviate when TC <= index


class DeviationGroup(Enum):
    """Index play family."""

    I18 = "I18"
    FAB4 = "Fab4"


@dataclass(frozen=True)
class Deviation:
    """
    An index play (strategy deviation based on count).

    When the true count reaches the threshold on the side given by
    ``comparison``, play ``deviation_action`` instead of ``basic_action``.
    """

    name: str

    # Hand description
    player_total: int
    is_soft_hand: bool
    is_pair: bool
    dealer_up_value: int  # 2-11 (11 = Ace)

    basic_action: Action
    deviation_action: Action

    tc_threshold: int
    comparison: Comparison
    group: DeviationGroup

    def should_deviate(self, true_count: float) -> bool:
        """
        Check if the deviation should be taken at the given true count.

        Args:
            true_count: The current true count

        Returns:
            True if the deviation should be taken
        """
        if self.comparison == Comparison.GTE:
            return true_count >= self.tc_threshold
        return true_count <= self.tc_threshold

    def get_action(self, true_count: float) -> Action:
        """Get the correct action for the given true count."""
        if self.should_deviate(true_count):
            return self.deviation_action
        return self.basic_action

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return {
            "name": self.name,
            "player_total": self.player_total,
            "is_soft_hand": self.is_soft_hand,
            "is_pair": self.is_pair,
            "dealer_up_value": self.dealer_up_value,
            "basic_action": self.basic_action.value,
            "deviation_action": self.deviation_action.value,
            "tc_threshold": self.tc_threshold,
            "comparison": self.comparison.value,
            "group": self.group.value,
        }


def _row(
    name: str,
    total: int,
    dealer: int,
    basic: Action,
    deviation: Action,
    threshold: int,
    comparison: Comparison = Comparison.GTE,
    pair: bool = False,
    group: DeviationGroup = DeviationGroup.I18,
) -> Deviation:
    return Deviation(
        name=name,
        player_total=total,
        is_soft_hand=False,
        is_pair=pair,
        dealer_up_value=dealer,
        basic_action=basic,
        deviation_action=deviation,
        tc_threshold=threshold,
        comparison=comparison,
        group=group,
    )


_HIT = Action.HIT
_STAND = Action.STAND
_LTE = Comparison.LTE

# Insurance is handled separately (see strategy.insurance).
# Table order is priority order: the first matching row wins.
ILLUSTRIOUS_18: tuple[Deviation, ...] = (
    _row("16 vs 10: Stand", 16, 10, _HIT, _STAND, 0),
    _row("15 vs 10: Stand", 15, 10, _HIT, _STAND, 4),
    _row("20 vs 5: Split", 20, 5, _STAND, Action.SPLIT, 5, pair=True),
    _row("20 vs 6: Split", 20, 6, _STAND, Action.SPLIT, 4, pair=True),
    _row("10 vs 10: Double", 10, 10, _HIT, Action.DOUBLE, 4),
    _row("12 vs 3: Stand", 12, 3, _HIT, _STAND, 2),
    _row("12 vs 2: Stand", 12, 2, _HIT, _STAND, 3),
    _row("11 vs A: Double", 11, 11, _HIT, Action.DOUBLE, 1),
    _row("9 vs 2: Double", 9, 2, _HIT, Action.DOUBLE, 1),
    _row("10 vs A: Double", 10, 11, _HIT, Action.DOUBLE, 4),
    _row("9 vs 7: Double", 9, 7, _HIT, Action.DOUBLE, 3),
    _row("16 vs 9: Stand", 16, 9, _HIT, _STAND, 5),
    _row("13 vs 2: Hit", 13, 2, _STAND, _HIT, -1, _LTE),
    _row("12 vs 4: Hit", 12, 4, _STAND, _HIT, 0, _LTE),
    _row("12 vs 5: Hit", 12, 5, _STAND, _HIT, -2, _LTE),
    _row("12 vs 6: Hit", 12, 6, _STAND, _HIT, -1, _LTE),
    _row("13 vs 3: Hit", 13, 3, _STAND, _HIT, -2, _LTE),
)

FAB_4: tuple[Deviation, ...] = (
    _row("14 vs 10: Surrender", 14, 10, _HIT, Action.SURRENDER, 3, group=DeviationGroup.FAB4),
    _row("15 vs 10: Surrender", 15, 10, _HIT, Action.SURRENDER, 0, group=DeviationGroup.FAB4),
    _row("15 vs 9: Surrender", 15, 9, _HIT, Action.SURRENDER, 2, group=DeviationGroup.FAB4),
    _row("15 vs A: Surrender", 15, 11, _HIT, Action.SURRENDER, 1, group=DeviationGroup.FAB4),
)

ALL_DEVIATIONS: tuple[Deviation, ...] = ILLUSTRIOUS_18 + FAB_4


def find_applicable_deviation(
    player_cards: Sequence[Card],
    dealer_upcard: Card,
    true_count: float,
    rules: RuleConfig,
    is_split_hand: bool = False,
) -> Deviation | None:
    """
    Find the first index play that fires for this hand and count.

    Returns None when basic strategy stands; the caller falls back to it.

    Args:
        player_cards: The player's current cards
        dealer_upcard: The dealer's face-up card
        true_count: The current true count
        rules: Table rules
        is_split_hand: Whether this hand was created by splitting

    Returns:
        The deviation to play, or None
    """
    total = hand_total(player_cards)
    soft = is_soft(player_cards)
    has_two_cards = len(player_cards) == 2
    pair = not is_split_hand and is_pair(player_cards)
    dealer_up = dealer_upcard.value

    for dev in ALL_DEVIATIONS:
        if dev.player_total != total:
            continue
        if dev.is_soft_hand != soft:
            continue
        if dev.dealer_up_value != dealer_up:
            continue

        if dev.is_pair and not pair:
            continue
        # 10,10 is covered by the pair rows
        if not dev.is_pair and pair and dev.player_total == 20:
            continue

        action = dev.deviation_action
        if action == Action.SURRENDER and (
            not rules.surrender_allowed or is_split_hand or not has_two_cards
        ):
            continue
        if action == Action.DOUBLE and (
            not has_two_cards or (is_split_hand and not rules.double_after_split)
        ):
            continue
        if action == Action.SPLIT and not pair:
            continue

        if dev.should_deviate(true_count):
            return dev

    return None


def get_deviation_action(
    player_cards: Sequence[Card],
    dealer_upcard: Card,
    true_count: float,
    rules: RuleConfig,
    is_split_hand: bool = False,
) -> tuple[Action, Deviation] | None:
    """Return the deviation action and its row, or None."""
    dev = find_applicable_deviation(
        player_cards, dealer_upcard, true_count, rules, is_split_hand
    )
    if dev is None:
        return None
    return dev.deviation_action, dev


def recommend_action(
    player_cards: Sequence[Card],
    dealer_upcard: Card,
    true_count: float,
    rules: RuleConfig,
    is_split_hand: bool = False,
) -> Action:
    """Deviation action when one fires, otherwise the basic strategy action."""
    result = get_deviation_action(
        player_cards, dealer_upcard, true_count, rules, is_split_hand
    )
    if result is not None:
        return result[0]
    return get_basic_strategy_action(player_cards, dealer_upcard, rules, is_split_hand)
