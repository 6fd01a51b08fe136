"""Persisted shapes: the autosave snapshot and the completed-session record."""

from dataclasses import dataclass, field
from typing import Any

from trainer.hand import DealerHand, Hand
from trainer.models import CountCheck, PromptType, TrainingMode
from trainer.rules import RuleConfig
from trainer.session.machine import SessionPhase
from trainer.stats.summary import SessionSummary

HISTORY_LIMIT = 100


@dataclass(frozen=True)
class SessionSnapshot:
    """
    Everything needed to resume a session exactly where it stopped.

    ``shoe_state`` keeps the remaining card order, so a restored session
    draws the same cards the original would have.
    """

    session_id: str
    phase: SessionPhase
    mode: TrainingMode
    prompt_type: PromptType
    rule_config: RuleConfig
    running_count: int
    hand_number: int
    hands_played: int
    shoe_state: dict[str, Any]
    scheduler_state: dict[str, Any]
    started_at: str
    saved_at: str
    phase_before_pause: SessionPhase | None = None
    player_hands: list[Hand] = field(default_factory=list)
    dealer_hand: DealerHand | None = None
    active_hand_index: int = 0
    count_checks: list[CountCheck] = field(default_factory=list)
    pending_prompt: bool = False
    prompt_started_at: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dict."""
        return {
            "session_id": self.session_id,
            "phase": self.phase.value,
            "phase_before_pause": (
                self.phase_before_pause.value if self.phase_before_pause else None
            ),
            "mode": self.mode.value,
            "prompt_type": self.prompt_type.value,
            "rule_config": self.rule_config.to_dict(),
            "running_count": self.running_count,
            "hand_number": self.hand_number,
            "hands_played": self.hands_played,
            "player_hands": [h.to_dict() for h in self.player_hands],
            "dealer_hand": self.dealer_hand.to_dict() if self.dealer_hand else None,
            "active_hand_index": self.active_hand_index,
            "count_checks": [c.to_dict() for c in self.count_checks],
            "pending_prompt": self.pending_prompt,
            "prompt_started_at": self.prompt_started_at,
            "shoe_state": self.shoe_state,
            "scheduler_state": self.scheduler_state,
            "started_at": self.started_at,
            "saved_at": self.saved_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionSnapshot":
        """Restore a snapshot serialized with to_dict."""
        before_pause = data.get("phase_before_pause")
        dealer = data.get("dealer_hand")
        return cls(
            session_id=data["session_id"],
            phase=SessionPhase(data["phase"]),
            phase_before_pause=SessionPhase(before_pause) if before_pause else None,
            mode=TrainingMode(data["mode"]),
            prompt_type=PromptType(data.get("prompt_type", PromptType.RUNNING_COUNT.value)),
            rule_config=RuleConfig.from_dict(data["rule_config"]),
            running_count=data["running_count"],
            hand_number=data["hand_number"],
            hands_played=data["hands_played"],
            player_hands=[Hand.from_dict(h) for h in data.get("player_hands", [])],
            dealer_hand=DealerHand.from_dict(dealer) if dealer else None,
            active_hand_index=data.get("active_hand_index", 0),
            count_checks=[CountCheck.from_dict(c) for c in data.get("count_checks", [])],
            pending_prompt=data.get("pending_prompt", False),
            prompt_started_at=data.get("prompt_started_at"),
            shoe_state=data["shoe_state"],
            scheduler_state=data["scheduler_state"],
            started_at=data["started_at"],
            saved_at=data["saved_at"],
        )


@dataclass(frozen=True)
class SessionRecord:
    """A completed session as kept in history."""

    session_id: str
    mode: TrainingMode
    rule_config: RuleConfig
    started_at: str
    ended_at: str
    hands_played: int
    count_checks: list[CountCheck]
    summary: SessionSummary

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dict."""
        return {
            "session_id": self.session_id,
            "mode": self.mode.value,
            "rule_config": self.rule_config.to_dict(),
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "hands_played": self.hands_played,
            "count_checks": [c.to_dict() for c in self.count_checks],
            "summary": self.summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionRecord":
        """Restore a record serialized with to_dict."""
        return cls(
            session_id=data["session_id"],
            mode=TrainingMode(data["mode"]),
            rule_config=RuleConfig.from_dict(data["rule_config"]),
            started_at=data["started_at"],
            ended_at=data["ended_at"],
            hands_played=data["hands_played"],
            count_checks=[CountCheck.from_dict(c) for c in data["count_checks"]],
            summary=SessionSummary.from_dict(data["summary"]),
        )


def append_record(
    history: list[SessionRecord],
    record: SessionRecord,
    limit: int = HISTORY_LIMIT,
) -> list[SessionRecord]:
    """Return history with ``record`` appended, keeping only the newest ``limit``."""
    updated = [*history, record]
    if len(updated) > limit:
        updated = updated[len(updated) - limit:]
    return updated
