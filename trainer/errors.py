"""Exceptions raised by the training engine.

These signal programming-invariant violations: the caller and the engine
disagree about what the session can do right now. They are raised
immediately and are not meant to be caught and retried.
"""


class TrainerError(Exception):
    """Base class for training engine errors."""


class InvalidTransitionError(TrainerError):
    """A session phase change that the transition table does not allow."""

    def __init__(self, from_phase: object, to_phase: object, reason: str | None = None) -> None:
        self.from_phase = from_phase
        self.to_phase = to_phase
        message = f"Invalid session transition: {from_phase} -> {to_phase}"
        super().__init__(f"{message} ({reason})" if reason else message)


class NoActiveSessionError(TrainerError):
    """An operation that needs a shoe or session was called before start."""


class PromptNotOpenError(TrainerError):
    """A prompt answer was submitted while no prompt is open."""


class IllegalActionError(TrainerError):
    """A player action the active hand is not eligible for."""


class AnalysisCancelledError(TrainerError):
    """An analysis request was cancelled or its worker terminated."""
