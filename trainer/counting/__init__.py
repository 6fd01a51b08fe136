"""Hi-Lo counting arithmetic."""

from trainer.counting.hilo import (
    HI_LO_VALUES,
    HiLoCounter,
    hi_lo_value,
    update_running_count,
    update_running_count_single,
)
from trainer.counting.true_count import (
    MIN_DECKS_REMAINING,
    clamp_decks_remaining,
    compute_true_count,
    estimate_decks_remaining,
)

__all__ = [
    "HI_LO_VALUES",
    "HiLoCounter",
    "hi_lo_value",
    "update_running_count",
    "update_running_count_single",
    "MIN_DECKS_REMAINING",
    "clamp_decks_remaining",
    "compute_true_count",
    "estimate_decks_remaining",
]
