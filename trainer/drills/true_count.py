"""True-count conversion drill."""

import math
from dataclasses import dataclass, field
from random import Random

from trainer.counting import compute_true_count
from trainer.drills.base import DrillSummary, summarize_answers

DECK_OPTIONS = (1.0, 1.5, 2.0, 2.5, 3.0, 4.0, 5.0, 6.0)
RUNNING_COUNT_SPAN = 12


@dataclass(frozen=True)
class TrueCountProblem:
    """Convert ``running_count`` at ``decks_remaining`` into a true count."""

    running_count: int
    decks_remaining: float
    correct_answer: int


@dataclass(frozen=True)
class TrueCountResult:
    """One answered problem."""

    problem: TrueCountProblem
    user_answer: int
    is_correct: bool
    delta: int
    response_ms: int


def generate_problems(count: int, rng: Random | None = None) -> list[TrueCountProblem]:
    """
    Generate conversion problems.

    Running counts span -12..+12; decks remaining come from DECK_OPTIONS.
    """
    rng = rng or Random()
    problems = []
    for _ in range(count):
        running_count = math.floor(rng.random() * (2 * RUNNING_COUNT_SPAN + 1)) - RUNNING_COUNT_SPAN
        decks = DECK_OPTIONS[math.floor(rng.random() * len(DECK_OPTIONS))]
        problems.append(
            TrueCountProblem(
                running_count=running_count,
                decks_remaining=decks,
                correct_answer=compute_true_count(running_count, decks),
            )
        )
    return problems


@dataclass
class TrueCountDrill:
    """A run through a fixed list of problems."""

    problems: list[TrueCountProblem]
    results: list[TrueCountResult] = field(default_factory=list)
    current_index: int = 0

    @classmethod
    def create(cls, problem_count: int = 20, rng: Random | None = None) -> "TrueCountDrill":
        """Start a drill with freshly generated problems."""
        return cls(problems=generate_problems(problem_count, rng))

    @property
    def current_problem(self) -> TrueCountProblem | None:
        """Get the problem awaiting an answer."""
        if self.current_index < len(self.problems):
            return self.problems[self.current_index]
        return None

    @property
    def is_complete(self) -> bool:
        """Check if every problem has been answered."""
        return self.current_index >= len(self.problems)

    def submit_answer(self, user_answer: int, response_ms: int) -> TrueCountResult:
        """
        Grade an answer to the current problem and move on.

        Raises:
            IndexError: If the drill is already complete
        """
        problem = self.current_problem
        if problem is None:
            raise IndexError("True count drill is complete")
        delta = user_answer - problem.correct_answer
        result = TrueCountResult(
            problem=problem,
            user_answer=user_answer,
            is_correct=delta == 0,
            delta=delta,
            response_ms=response_ms,
        )
        self.results.append(result)
        self.current_index += 1
        return result

    def summary(self) -> DrillSummary:
        """Summarize the answers so far."""
        return summarize_answers(self.results)
