"""Hi-Lo count training engine - 100% UI-agnostic."""

from trainer.cards import Card, Rank, Shoe, Suit
from trainer.hand import Action, DealerHand, Hand, HandOutcome
from trainer.models import CountCheck, PromptType, TrainingMode
from trainer.rules import DealSpeed, RuleConfig
from trainer.session import SessionController, SessionPhase

__all__ = [
    "Card",
    "Rank",
    "Shoe",
    "Suit",
    "Action",
    "DealerHand",
    "Hand",
    "HandOutcome",
    "CountCheck",
    "PromptType",
    "TrainingMode",
    "DealSpeed",
    "RuleConfig",
    "SessionController",
    "SessionPhase",
]
