"""Training modes, prompt kinds and recorded count checks."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from trainer.hand import Action


class TrainingMode(Enum):
    """How hands are played in a session."""

    COUNTING_DRILL = "counting_drill"  # hands auto-resolve, only counting is trained
    PLAY_AND_COUNT = "play_and_count"  # the player acts on every hand


class PromptType(Enum):
    """What a prompt asks the player for."""

    RUNNING_COUNT = "running_count"
    TRUE_COUNT = "true_count"
    BEST_ACTION = "best_action"


@dataclass(frozen=True)
class CountCheck:
    """One answered prompt. Appended to the session, never mutated."""

    session_id: str
    hand_number: int
    expected_count: int
    entered_count: int
    response_ms: int
    is_correct: bool
    delta: int
    created_at: str
    prompt_type: PromptType = PromptType.RUNNING_COUNT
    expected_action: Action | None = None
    entered_action: Action | None = None
    deviation_name: str | None = None  # index play that applied to a best-action prompt

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return {
            "session_id": self.session_id,
            "hand_number": self.hand_number,
            "prompt_type": self.prompt_type.value,
            "expected_count": self.expected_count,
            "entered_count": self.entered_count,
            "expected_action": self.expected_action.value if self.expected_action else None,
            "entered_action": self.entered_action.value if self.entered_action else None,
            "deviation_name": self.deviation_name,
            "response_ms": self.response_ms,
            "is_correct": self.is_correct,
            "delta": self.delta,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CountCheck":
        """Restore a check serialized with to_dict."""
        expected_action = data.get("expected_action")
        entered_action = data.get("entered_action")
        return cls(
            session_id=data["session_id"],
            hand_number=data["hand_number"],
            prompt_type=PromptType(data.get("prompt_type", PromptType.RUNNING_COUNT.value)),
            expected_count=data["expected_count"],
            entered_count=data["entered_count"],
            expected_action=Action(expected_action) if expected_action else None,
            entered_action=Action(entered_action) if entered_action else None,
            deviation_name=data.get("deviation_name"),
            response_ms=data["response_ms"],
            is_correct=data["is_correct"],
            delta=data["delta"],
            created_at=data["created_at"],
        )
