"""
Wonging (back-counting) drill.

Each scenario shows a point in a six-deck shoe; the player decides whether to
enter, stay at, watch, or leave the table based on the true count.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from random import Random

from trainer.counting import MIN_DECKS_REMAINING
from trainer.drills.base import DrillSummary, summarize_answers

SHOE_DECKS = 6


class WongingDecision(Enum):
    """Table decisions."""

    ENTER = "enter"
    STAY = "stay"
    EXIT = "exit"
    WATCH = "watch"


@dataclass(frozen=True)
class WongingConfig:
    """Entry/exit indices and drill length."""

    entry_threshold: int = 2  # enter at or above
    exit_threshold: int = 0  # leave at or below
    scenario_count: int = 20

    def __post_init__(self) -> None:
        if self.exit_threshold >= self.entry_threshold:
            raise ValueError("exit_threshold must be below entry_threshold")
        if self.scenario_count < 1:
            raise ValueError("scenario_count must be at least 1")


@dataclass(frozen=True)
class WongingScenario:
    """A snapshot of the shoe as seen from the rail or the table."""

    shoe_progress: float  # fraction dealt
    running_count: int
    true_count: int
    decks_remaining: float
    is_currently_playing: bool


@dataclass(frozen=True)
class WongingAnswer:
    """One graded decision."""

    scenario_index: int
    decision: WongingDecision
    optimal_decision: WongingDecision
    is_correct: bool
    response_ms: int


@dataclass(frozen=True)
class WongingSummary:
    """Drill summary plus the two costly mistakes."""

    total_scenarios: int
    scores: DrillSummary
    missed_entries: int  # should have entered, did not
    late_exits: int  # should have left, stayed


def optimal_decision(scenario: WongingScenario, config: WongingConfig) -> WongingDecision:
    """
    Seated players leave at or below the exit index; watchers enter at or
    above the entry index.
    """
    if scenario.is_currently_playing:
        if scenario.true_count <= config.exit_threshold:
            return WongingDecision.EXIT
        return WongingDecision.STAY
    if scenario.true_count >= config.entry_threshold:
        return WongingDecision.ENTER
    return WongingDecision.WATCH


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def generate_scenarios(config: WongingConfig, rng: Random | None = None) -> list[WongingScenario]:
    """
    Generate scenarios that follow one player through a shoe.

    Whether the player is seated carries over from the optimal decision of
    the previous scenario.
    """
    rng = rng or Random()
    scenarios: list[WongingScenario] = []
    is_playing = False

    for _ in range(config.scenario_count):
        progress = 0.1 + rng.random() * 0.75
        decks_remaining = max(MIN_DECKS_REMAINING, SHOE_DECKS * (1 - progress))
        running_count = _round_half_up(rng.random() * 20 - 8)
        true_count = math.trunc(running_count / decks_remaining)

        scenario = WongingScenario(
            shoe_progress=round(progress, 2),
            running_count=running_count,
            true_count=true_count,
            decks_remaining=round(decks_remaining, 1),
            is_currently_playing=is_playing,
        )
        scenarios.append(scenario)

        decision = optimal_decision(scenario, config)
        if decision == WongingDecision.ENTER:
            is_playing = True
        elif decision == WongingDecision.EXIT:
            is_playing = False

    return scenarios


@dataclass
class WongingDrill:
    """A run through generated wonging scenarios."""

    config: WongingConfig
    scenarios: list[WongingScenario]
    answers: list[WongingAnswer] = field(default_factory=list)
    current_index: int = 0

    @classmethod
    def create(
        cls,
        config: WongingConfig | None = None,
        rng: Random | None = None,
    ) -> "WongingDrill":
        """Start a drill with generated scenarios."""
        config = config or WongingConfig()
        return cls(config=config, scenarios=generate_scenarios(config, rng))

    @property
    def current_scenario(self) -> WongingScenario | None:
        """Get the scenario awaiting a decision."""
        if self.current_index < len(self.scenarios):
            return self.scenarios[self.current_index]
        return None

    @property
    def is_complete(self) -> bool:
        """Check if every scenario has been answered."""
        return self.current_index >= len(self.scenarios)

    def submit_decision(self, decision: WongingDecision, response_ms: int) -> WongingAnswer:
        """
        Grade a decision for the current scenario and move on.

        Raises:
            IndexError: If the drill is already complete
        """
        scenario = self.current_scenario
        if scenario is None:
            raise IndexError("Wonging drill is complete")
        optimal = optimal_decision(scenario, self.config)
        answer = WongingAnswer(
            scenario_index=self.current_index,
            decision=decision,
            optimal_decision=optimal,
            is_correct=decision == optimal,
            response_ms=response_ms,
        )
        self.answers.append(answer)
        self.current_index += 1
        return answer

    def summary(self) -> WongingSummary:
        """Summarize the decisions so far."""
        missed_entries = sum(
            1
            for a in self.answers
            if a.optimal_decision == WongingDecision.ENTER and a.decision != WongingDecision.ENTER
        )
        late_exits = sum(
            1
            for a in self.answers
            if a.optimal_decision == WongingDecision.EXIT and a.decision != WongingDecision.EXIT
        )
        return WongingSummary(
            total_scenarios=len(self.scenarios),
            scores=summarize_answers(self.answers),
            missed_entries=missed_entries,
            late_exits=late_exits,
        )
