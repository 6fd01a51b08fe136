"""Count-prompt scheduling."""

from trainer.prompts.scheduler import CadenceTier, PromptScheduler

__all__ = [
    "CadenceTier",
    "PromptScheduler",
]
