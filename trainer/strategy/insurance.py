"""Insurance index decision."""

from trainer.strategy.charts import BJA_H17_2019
from trainer.strategy.deviations import Comparison

INSURANCE_SOURCE = BJA_H17_2019
INSURANCE_THRESHOLD = 3
INSURANCE_COMPARISON = Comparison.GTE


def should_take_insurance(true_count: float) -> bool:
    """Take insurance at a true count of +3 or higher."""
    if INSURANCE_COMPARISON == Comparison.GTE:
        return true_count >= INSURANCE_THRESHOLD
    return true_count <= INSURANCE_THRESHOLD
