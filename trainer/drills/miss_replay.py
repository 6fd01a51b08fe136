"""Replay of count prompts the player got wrong."""

from dataclasses import dataclass, field
from typing import Sequence

from trainer.drills.base import DrillSummary, summarize_answers
from trainer.models import CountCheck, PromptType


@dataclass(frozen=True)
class MissReplayProblem:
    """A missed count check, asked again."""

    hand_number: int
    expected_count: int
    previous_answer: int
    delta: int


@dataclass(frozen=True)
class MissReplayAnswer:
    """A second attempt at a missed check."""

    problem: MissReplayProblem
    user_answer: int
    is_correct: bool
    response_ms: int


@dataclass
class MissReplay:
    """Walks through missed count checks in the order they happened."""

    problems: list[MissReplayProblem]
    answers: list[MissReplayAnswer] = field(default_factory=list)
    current_index: int = 0

    @classmethod
    def from_checks(cls, checks: Sequence[CountCheck]) -> "MissReplay | None":
        """
        Build a replay from a session's checks.

        Best-action checks are left out. Returns None when nothing was missed.
        """
        problems = [
            MissReplayProblem(
                hand_number=c.hand_number,
                expected_count=c.expected_count,
                previous_answer=c.entered_count,
                delta=c.delta,
            )
            for c in checks
            if not c.is_correct and c.prompt_type != PromptType.BEST_ACTION
        ]
        if not problems:
            return None
        return cls(problems=problems)

    @property
    def current_problem(self) -> MissReplayProblem | None:
        """Get the problem awaiting an answer."""
        if self.current_index < len(self.problems):
            return self.problems[self.current_index]
        return None

    @property
    def is_complete(self) -> bool:
        """Check if every problem has been answered."""
        return self.current_index >= len(self.problems)

    def submit_answer(self, user_answer: int, response_ms: int) -> MissReplayAnswer:
        """
        Grade a second attempt and move on.

        Raises:
            IndexError: If the replay is already complete
        """
        problem = self.current_problem
        if problem is None:
            raise IndexError("Miss replay is complete")
        answer = MissReplayAnswer(
            problem=problem,
            user_answer=user_answer,
            is_correct=user_answer == problem.expected_count,
            response_ms=response_ms,
        )
        self.answers.append(answer)
        self.current_index += 1
        return answer

    def summary(self) -> DrillSummary:
        """Summarize the second attempts; every correct answer is an improvement."""
        return summarize_answers(self.answers)
