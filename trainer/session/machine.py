"""Session phases and the closed transition table."""

import logging
from enum import Enum

from transitions import Machine

from trainer.errors import InvalidTransitionError

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    """
    Session lifecycle phases.

    Flow: IDLE → READY → DEALING → AWAITING_PLAYER_ACTION → DEALER_TURN →
    HAND_RESOLVED → (COUNT_PROMPT_OPEN) → DEALING ... → COMPLETED
    """

    IDLE = "idle"
    READY = "ready"
    DEALING = "dealing"
    AWAITING_PLAYER_ACTION = "awaiting_player_action"
    DEALER_TURN = "dealer_turn"
    HAND_RESOLVED = "hand_resolved"
    COUNT_PROMPT_OPEN = "count_prompt_open"
    PAUSED = "paused"
    COMPLETED = "completed"

    def __str__(self) -> str:
        return self.value


# Valid phase transitions
TRANSITIONS: dict[SessionPhase, tuple[SessionPhase, ...]] = {
    SessionPhase.IDLE: (SessionPhase.READY,),
    SessionPhase.READY: (SessionPhase.DEALING,),
    SessionPhase.DEALING: (
        SessionPhase.AWAITING_PLAYER_ACTION,
        SessionPhase.DEALER_TURN,
        SessionPhase.HAND_RESOLVED,
    ),
    SessionPhase.AWAITING_PLAYER_ACTION: (
        SessionPhase.DEALING,
        SessionPhase.DEALER_TURN,
        SessionPhase.PAUSED,
    ),
    SessionPhase.DEALER_TURN: (SessionPhase.HAND_RESOLVED,),
    SessionPhase.HAND_RESOLVED: (
        SessionPhase.DEALING,
        SessionPhase.COUNT_PROMPT_OPEN,
        SessionPhase.COMPLETED,
        SessionPhase.PAUSED,
    ),
    SessionPhase.COUNT_PROMPT_OPEN: (
        SessionPhase.HAND_RESOLVED,
        SessionPhase.PAUSED,
    ),
    SessionPhase.PAUSED: (
        SessionPhase.READY,
        SessionPhase.DEALING,
        SessionPhase.AWAITING_PLAYER_ACTION,
        SessionPhase.DEALER_TURN,
        SessionPhase.HAND_RESOLVED,
        SessionPhase.COUNT_PROMPT_OPEN,
        SessionPhase.COMPLETED,
    ),
    SessionPhase.COMPLETED: (SessionPhase.IDLE,),
}


def can_transition(from_phase: SessionPhase, to_phase: SessionPhase) -> bool:
    """
    Check if a phase transition is valid.

    Args:
        from_phase: Current phase
        to_phase: Desired phase

    Returns:
        True if the transition is allowed
    """
    return to_phase in TRANSITIONS.get(from_phase, ())


def assert_transition(from_phase: SessionPhase, to_phase: SessionPhase) -> None:
    """Raise InvalidTransitionError unless the transition is allowed."""
    if not can_transition(from_phase, to_phase):
        raise InvalidTransitionError(from_phase, to_phase)


def _trigger_name(phase: SessionPhase) -> str:
    return f"enter_{phase.value}"


def _build_transitions() -> list[dict[str, object]]:
    """One trigger per destination, sourced from every phase that allows it."""
    transitions: list[dict[str, object]] = []
    for dest in SessionPhase:
        sources = [src.value for src, allowed in TRANSITIONS.items() if dest in allowed]
        if sources:
            transitions.append(
                {"trigger": _trigger_name(dest), "source": sources, "dest": dest.value}
            )
    return transitions


class SessionMachine:
    """
    Phase holder driven by a transitions state machine.

    The machine is generated from TRANSITIONS, so the table stays the single
    source of truth. Every move is checked with assert_transition first.
    """

    STATES = [p.value for p in SessionPhase]
    MACHINE_TRANSITIONS = _build_transitions()

    def __init__(self, initial: SessionPhase = SessionPhase.IDLE) -> None:
        """
        Initialize the machine.

        Args:
            initial: Phase to start in (restored sessions start mid-flow)
        """
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.MACHINE_TRANSITIONS,
            initial=initial.value,
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def phase(self) -> SessionPhase:
        """Get current phase as enum."""
        return SessionPhase(self._machine_state)  # type: ignore[attr-defined]

    def can(self, to_phase: SessionPhase) -> bool:
        """Check whether the current phase may move to ``to_phase``."""
        return can_transition(self.phase, to_phase)

    def transition(self, to_phase: SessionPhase) -> SessionPhase:
        """
        Move to ``to_phase``.

        Raises:
            InvalidTransitionError: If the table does not allow the move
        """
        from_phase = self.phase
        assert_transition(from_phase, to_phase)
        self.trigger(_trigger_name(to_phase))  # type: ignore[attr-defined]
        logger.debug("Session phase %s -> %s", from_phase, to_phase)
        return from_phase
