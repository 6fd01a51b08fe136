"""Session lifecycle: phases, orchestration, events and persistence."""

from trainer.session.controller import SessionController, SessionState
from trainer.session.events import EventEmitter, EventType, SessionEvent
from trainer.session.machine import (
    TRANSITIONS,
    SessionMachine,
    SessionPhase,
    assert_transition,
    can_transition,
)
from trainer.session.snapshot import (
    HISTORY_LIMIT,
    SessionRecord,
    SessionSnapshot,
    append_record,
)

__all__ = [
    "SessionController",
    "SessionState",
    "EventEmitter",
    "EventType",
    "SessionEvent",
    "TRANSITIONS",
    "SessionMachine",
    "SessionPhase",
    "assert_transition",
    "can_transition",
    "HISTORY_LIMIT",
    "SessionRecord",
    "SessionSnapshot",
    "append_record",
]
