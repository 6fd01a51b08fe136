"""Basic strategy, deviations and insurance."""

from trainer.hand import Action
from trainer.strategy.basic import (
    BasicStrategy,
    get_basic_strategy_action,
    is_correct_play,
    resolve_action,
)
from trainer.strategy.charts import BJA_H17_2019, ChartSource, RawAction
from trainer.strategy.deviations import (
    ALL_DEVIATIONS,
    FAB_4,
    ILLUSTRIOUS_18,
    Comparison,
    Deviation,
    DeviationGroup,
    find_applicable_deviation,
    get_deviation_action,
    recommend_action,
)
from trainer.strategy.insurance import should_take_insurance

__all__ = [
    "Action",
    "BasicStrategy",
    "get_basic_strategy_action",
    "is_correct_play",
    "resolve_action",
    "BJA_H17_2019",
    "ChartSource",
    "RawAction",
    "ALL_DEVIATIONS",
    "FAB_4",
    "ILLUSTRIOUS_18",
    "Comparison",
    "Deviation",
    "DeviationGroup",
    "find_applicable_deviation",
    "get_deviation_action",
    "recommend_action",
    "should_take_insurance",
]
