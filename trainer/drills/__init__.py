"""Side drills: true count conversion, deck countdown, wonging, miss replay and weak spots."""

from trainer.drills.base import DrillSummary, summarize_answers
from trainer.drills.deck_countdown import DeckCountdown, DeckCountdownResult
from trainer.drills.miss_replay import MissReplay, MissReplayAnswer, MissReplayProblem
from trainer.drills.true_count import (
    TrueCountDrill,
    TrueCountProblem,
    TrueCountResult,
    generate_problems,
)
from trainer.drills.weak_spot import (
    CategorizedError,
    CategoryImprovement,
    ErrorCategory,
    ErrorSeverity,
    WeakSpotAnswer,
    WeakSpotDrill,
    WeakSpotProblem,
    WeakSpotSummary,
    categorize_errors,
    generate_weak_spot_problems,
)
from trainer.drills.wonging import (
    WongingAnswer,
    WongingConfig,
    WongingDecision,
    WongingDrill,
    WongingScenario,
    WongingSummary,
    generate_scenarios,
    optimal_decision,
)

__all__ = [
    "DrillSummary",
    "summarize_answers",
    "DeckCountdown",
    "DeckCountdownResult",
    "MissReplay",
    "MissReplayAnswer",
    "MissReplayProblem",
    "CategorizedError",
    "CategoryImprovement",
    "ErrorCategory",
    "ErrorSeverity",
    "WeakSpotAnswer",
    "WeakSpotDrill",
    "WeakSpotProblem",
    "WeakSpotSummary",
    "categorize_errors",
    "generate_weak_spot_problems",
    "TrueCountDrill",
    "TrueCountProblem",
    "TrueCountResult",
    "generate_problems",
    "WongingAnswer",
    "WongingConfig",
    "WongingDecision",
    "WongingDrill",
    "WongingScenario",
    "WongingSummary",
    "generate_scenarios",
    "optimal_decision",
]
