"""Shared drill result summary."""

from dataclasses import asdict, dataclass
from typing import Any, Protocol, Sequence


class GradedAnswer(Protocol):
    """Anything with a correctness flag and a response time."""

    is_correct: bool
    response_ms: int


@dataclass(frozen=True)
class DrillSummary:
    """Accuracy and speed over a drill's answers."""

    total: int = 0
    correct: int = 0
    accuracy: float = 0.0  # percent
    avg_response_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return asdict(self)


def summarize_answers(answers: Sequence[GradedAnswer]) -> DrillSummary:
    """Summarize graded answers; an empty drill scores zero."""
    total = len(answers)
    if total == 0:
        return DrillSummary()
    correct = sum(1 for a in answers if a.is_correct)
    return DrillSummary(
        total=total,
        correct=correct,
        accuracy=correct / total * 100,
        avg_response_ms=sum(a.response_ms for a in answers) / total,
    )
