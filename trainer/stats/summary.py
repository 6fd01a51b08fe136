"""Session summary and the miss rate that drives prompt cadence."""

from dataclasses import asdict, dataclass
from typing import Any, Sequence

from trainer.models import CountCheck, PromptType

DEFAULT_MISS_RATE_WINDOW = 5


@dataclass(frozen=True)
class SessionSummary:
    """Aggregate prompt performance for one session."""

    total_prompts: int = 0
    correct_prompts: int = 0
    accuracy: float = 0.0  # percent
    avg_response_ms: float = 0.0
    longest_streak: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionSummary":
        """Restore a summary serialized with to_dict."""
        return cls(**data)


def longest_correct_streak(checks: Sequence[CountCheck]) -> int:
    """Return the longest run of consecutive correct answers."""
    longest = 0
    current = 0
    for check in checks:
        if check.is_correct:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def summarize_checks(checks: Sequence[CountCheck]) -> SessionSummary:
    """
    Summarize a session's count checks.

    Args:
        checks: Count checks in the order they were answered

    Returns:
        Totals, accuracy in percent, mean response time and best streak
    """
    total = len(checks)
    if total == 0:
        return SessionSummary()

    correct = sum(1 for c in checks if c.is_correct)
    return SessionSummary(
        total_prompts=total,
        correct_prompts=correct,
        accuracy=correct / total * 100,
        avg_response_ms=sum(c.response_ms for c in checks) / total,
        longest_streak=longest_correct_streak(checks),
    )


def recent_miss_rate(
    checks: Sequence[CountCheck],
    window: int = DEFAULT_MISS_RATE_WINDOW,
) -> float:
    """
    Fraction of wrong answers among the last ``window`` count checks.

    Best-action checks are ignored; they measure strategy, not counting.
    Returns 0.0 when there is nothing to measure.
    """
    counted = [c for c in checks if c.prompt_type != PromptType.BEST_ACTION]
    if not counted or window <= 0:
        return 0.0
    recent = counted[-window:]
    return sum(1 for c in recent if not c.is_correct) / len(recent)
