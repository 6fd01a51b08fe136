"""Session statistics."""

from trainer.stats.summary import (
    DEFAULT_MISS_RATE_WINDOW,
    SessionSummary,
    longest_correct_streak,
    recent_miss_rate,
    summarize_checks,
)
from trainer.stats.weak_spots import (
    InsightType,
    Severity,
    WeakSpotInsight,
    WeakSpotReport,
    analyze_weak_spots,
)

__all__ = [
    "DEFAULT_MISS_RATE_WINDOW",
    "SessionSummary",
    "longest_correct_streak",
    "recent_miss_rate",
    "summarize_checks",
    "InsightType",
    "Severity",
    "WeakSpotInsight",
    "WeakSpotReport",
    "analyze_weak_spots",
]
