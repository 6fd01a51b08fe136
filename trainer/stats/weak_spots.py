"""Error patterns across count checks: bias, fatigue and trouble at big counts."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from trainer.models import CountCheck, PromptType

RECENT_WINDOW = 10
MIN_CHECKS_FOR_ACCURACY = 5
MIN_MISSES_FOR_BIAS = 3
MIN_CHECKS_FOR_FATIGUE = 10
MIN_HIGH_COUNT_CHECKS = 3

STRONG_ACCURACY = 90.0
WEAK_ACCURACY = 50.0
BIAS_THRESHOLD = 1.5
FATIGUE_DROP = 0.2
HIGH_COUNT = 4
HIGH_COUNT_GAP = 0.15


class InsightType(Enum):
    """Kinds of weak spot."""

    OVERSHOOT = "overshoot"
    UNDERSHOOT = "undershoot"
    FATIGUE = "fatigue"
    HIGH_COUNT = "high_count"
    ACCURACY = "accuracy"


class Severity(Enum):
    """How urgent an insight is."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class WeakSpotInsight:
    """One finding about the player's counting."""

    type: InsightType
    label: str
    detail: str
    severity: Severity


@dataclass(frozen=True)
class WeakSpotReport:
    """Everything found in a run of count checks."""

    insights: list[WeakSpotInsight] = field(default_factory=list)
    recent_accuracy: float = 0.0  # percent, last RECENT_WINDOW checks
    overall_bias: float = 0.0  # mean delta of misses; positive means counting too high
    fatigue_dropoff: bool = False


def _accuracy(checks: Sequence[CountCheck]) -> float:
    return sum(1 for c in checks if c.is_correct) / len(checks)


def analyze_weak_spots(checks: Sequence[CountCheck]) -> WeakSpotReport:
    """
    Look for error patterns in count checks from one or more sessions.

    Best-action checks are left out. Accuracy insights need at least 5
    checks, bias needs 3 misses, and the fatigue and high-count insights
    need 10 checks.

    Args:
        checks: Count checks in the order they were answered

    Returns:
        Insights plus recent accuracy, miss bias and the fatigue flag
    """
    counted = [c for c in checks if c.prompt_type != PromptType.BEST_ACTION]
    if not counted:
        return WeakSpotReport()

    insights: list[WeakSpotInsight] = []
    accuracy = _accuracy(counted) * 100
    recent_accuracy = _accuracy(counted[-RECENT_WINDOW:]) * 100

    if len(counted) >= MIN_CHECKS_FOR_ACCURACY:
        if accuracy >= STRONG_ACCURACY:
            insights.append(
                WeakSpotInsight(
                    InsightType.ACCURACY,
                    "Strong accuracy",
                    f"{accuracy:.0f}% overall, you're counting consistently.",
                    Severity.INFO,
                )
            )
        elif accuracy < WEAK_ACCURACY:
            insights.append(
                WeakSpotInsight(
                    InsightType.ACCURACY,
                    "Accuracy needs work",
                    f"{accuracy:.0f}% overall, focus on tracking each card carefully.",
                    Severity.CRITICAL,
                )
            )

    misses = [c for c in counted if not c.is_correct]
    overall_bias = sum(c.delta for c in misses) / len(misses) if misses else 0.0

    if len(misses) >= MIN_MISSES_FOR_BIAS:
        if overall_bias > BIAS_THRESHOLD:
            insights.append(
                WeakSpotInsight(
                    InsightType.OVERSHOOT,
                    "Counting too high",
                    f"You overshoot by {overall_bias:.1f} on average when wrong. "
                    "You may be double-counting low cards or missing high cards.",
                    Severity.WARNING,
                )
            )
        elif overall_bias < -BIAS_THRESHOLD:
            insights.append(
                WeakSpotInsight(
                    InsightType.UNDERSHOOT,
                    "Counting too low",
                    f"You undershoot by {abs(overall_bias):.1f} on average when wrong. "
                    "You may be missing low cards or double-counting high cards.",
                    Severity.WARNING,
                )
            )

    fatigue_dropoff = False
    if len(counted) >= MIN_CHECKS_FOR_FATIGUE:
        mid = len(counted) // 2
        first_half = _accuracy(counted[:mid])
        second_half = _accuracy(counted[mid:])
        fatigue_dropoff = first_half - second_half > FATIGUE_DROP
        if fatigue_dropoff:
            insights.append(
                WeakSpotInsight(
                    InsightType.FATIGUE,
                    "Late-session dropoff",
                    f"Accuracy drops from {first_half * 100:.0f}% to {second_half * 100:.0f}% "
                    "in the second half. Consider shorter sessions or breaks.",
                    Severity.WARNING,
                )
            )

        high_counts = [c for c in counted if abs(c.expected_count) >= HIGH_COUNT]
        if len(high_counts) >= MIN_HIGH_COUNT_CHECKS:
            high_accuracy = _accuracy(high_counts)
            if high_accuracy < accuracy / 100 - HIGH_COUNT_GAP:
                insights.append(
                    WeakSpotInsight(
                        InsightType.HIGH_COUNT,
                        "Struggle at extreme counts",
                        f"{high_accuracy * 100:.0f}% accuracy when the count is ±{HIGH_COUNT} "
                        f"or beyond, vs {accuracy:.0f}% overall. Practice holding larger numbers.",
                        Severity.WARNING,
                    )
                )

    return WeakSpotReport(
        insights=insights,
        recent_accuracy=recent_accuracy,
        overall_bias=overall_bias,
        fatigue_dropoff=fatigue_dropoff,
    )
