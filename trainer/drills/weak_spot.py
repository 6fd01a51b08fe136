"""Weak spot drill: practice problems built from the player's own mistakes."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from trainer.drills.base import summarize_answers
from trainer.models import CountCheck, PromptType

SLOW_RESPONSE_MS = 5000
MAX_EXAMPLES = 5
DEFAULT_PROBLEM_COUNT = 10


class ErrorCategory(Enum):
    """What kind of mistake a check shows."""

    COUNT_OVERSHOOT = "count_overshoot"
    COUNT_UNDERSHOOT = "count_undershoot"
    TRUE_COUNT_ERROR = "true_count_error"
    DEVIATION_MISS = "deviation_miss"  # missed an index play
    ACTION_LEAK = "action_leak"  # basic strategy mistake
    SLOW_RESPONSE = "slow_response"  # correct, but over SLOW_RESPONSE_MS


class ErrorSeverity(Enum):
    """How often a category went wrong."""

    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

    @property
    def weight(self) -> int:
        """Share of drill problems relative to other categories."""
        return {ErrorSeverity.MILD: 1, ErrorSeverity.MODERATE: 2, ErrorSeverity.SEVERE: 3}[self]


def severity_for(count: int) -> ErrorSeverity:
    """Severity for a number of mistakes in one category."""
    if count >= 5:
        return ErrorSeverity.SEVERE
    if count >= 3:
        return ErrorSeverity.MODERATE
    return ErrorSeverity.MILD


@dataclass(frozen=True)
class ErrorExample:
    """One past mistake."""

    hand_number: int
    expected: str
    actual: str
    response_ms: int
    delta: int | None = None


@dataclass(frozen=True)
class CategorizedError:
    """Mistakes of one category with the most recent examples."""

    category: ErrorCategory
    count: int
    examples: tuple[ErrorExample, ...]
    severity: ErrorSeverity


def _categorize(check: CountCheck) -> tuple[ErrorCategory, ErrorExample] | None:
    if check.prompt_type == PromptType.BEST_ACTION:
        expected = check.expected_action.value if check.expected_action else ""
        actual = check.entered_action.value if check.entered_action else ""
        example = ErrorExample(check.hand_number, expected, actual, check.response_ms)
        if check.is_correct:
            if check.response_ms > SLOW_RESPONSE_MS:
                return ErrorCategory.SLOW_RESPONSE, example
            return None
        if check.deviation_name is not None:
            return ErrorCategory.DEVIATION_MISS, example
        return ErrorCategory.ACTION_LEAK, example

    example = ErrorExample(
        check.hand_number,
        str(check.expected_count),
        str(check.entered_count),
        check.response_ms,
        check.delta,
    )
    if check.is_correct:
        if check.response_ms > SLOW_RESPONSE_MS:
            return ErrorCategory.SLOW_RESPONSE, example
        return None
    if check.prompt_type == PromptType.TRUE_COUNT:
        return ErrorCategory.TRUE_COUNT_ERROR, example
    if check.delta > 0:
        return ErrorCategory.COUNT_OVERSHOOT, example
    if check.delta < 0:
        return ErrorCategory.COUNT_UNDERSHOOT, example
    return None


def categorize_errors(checks: Sequence[CountCheck]) -> list[CategorizedError]:
    """
    Group mistakes by category.

    Missed best-action checks count as deviation misses when an index play
    applied, otherwise as basic strategy leaks. Correct but slow answers get
    their own category. Categories come back in ErrorCategory order, each
    with its last MAX_EXAMPLES examples.
    """
    grouped: dict[ErrorCategory, list[ErrorExample]] = {}
    for check in checks:
        found = _categorize(check)
        if found is not None:
            category, example = found
            grouped.setdefault(category, []).append(example)

    return [
        CategorizedError(
            category=category,
            count=len(grouped[category]),
            examples=tuple(grouped[category][-MAX_EXAMPLES:]),
            severity=severity_for(len(grouped[category])),
        )
        for category in ErrorCategory
        if category in grouped
    ]


@dataclass(frozen=True)
class WeakSpotProblem:
    """A practice question built from a past mistake."""

    category: ErrorCategory
    prompt: str
    expected_answer: str
    context: str
    source_hand_number: int


def _problem(category: ErrorCategory, example: ErrorExample) -> WeakSpotProblem:
    hand = f"Hand #{example.hand_number}"
    previously = f"(You previously answered {example.actual} instead of {example.expected})"
    chose = f"(You chose {example.actual} instead of {example.expected})"
    seconds = f"{example.response_ms / 1000:.1f}s"

    if category == ErrorCategory.COUNT_OVERSHOOT:
        prompt = f"What is the running count? {previously}"
        context = f"{hand}: You overshot by +{example.delta}"
    elif category == ErrorCategory.COUNT_UNDERSHOOT:
        prompt = f"What is the running count? {previously}"
        context = f"{hand}: You undershot by {example.delta}"
    elif category == ErrorCategory.TRUE_COUNT_ERROR:
        prompt = f"What is the true count? {previously}"
        context = f"{hand}: True count conversion error, delta {example.delta}"
    elif category == ErrorCategory.DEVIATION_MISS:
        prompt = f"What is the correct play? {chose}"
        context = f"{hand}: Missed deviation, correct play was {example.expected}"
    elif category == ErrorCategory.ACTION_LEAK:
        prompt = f"What is the correct basic strategy play? {chose}"
        context = f"{hand}: Basic strategy error, correct play was {example.expected}"
    else:
        prompt = f"What is the count? (You answered correctly but took {seconds})"
        context = f"{hand}: Correct answer but response time was {seconds} (target: <5s)"

    return WeakSpotProblem(
        category=category,
        prompt=prompt,
        expected_answer=example.expected,
        context=context,
        source_hand_number=example.hand_number,
    )


def generate_weak_spot_problems(
    errors: Sequence[CategorizedError],
    categories: Sequence[ErrorCategory],
    problem_count: int,
) -> list[WeakSpotProblem]:
    """
    Share problems between the targeted categories by severity weight.

    Every category but the last gets at least one problem; the last takes
    whatever is left. Each category cycles through its examples.
    """
    targeted = [e for e in errors if e.category in categories]
    if not targeted:
        return []

    total_weight = sum(e.severity.weight for e in targeted)
    problems: list[WeakSpotProblem] = []
    remaining = problem_count

    for i, error in enumerate(targeted):
        if i == len(targeted) - 1:
            share = remaining
        else:
            share = max(1, math.floor(error.severity.weight / total_weight * problem_count + 0.5))
        count = min(share, remaining)
        if count <= 0:
            continue

        for j in range(count):
            problems.append(_problem(error.category, error.examples[j % len(error.examples)]))

        remaining -= count
        if remaining <= 0:
            break

    return problems


@dataclass(frozen=True)
class WeakSpotAnswer:
    """An attempt at a weak spot problem."""

    problem: WeakSpotProblem
    answer: str
    is_correct: bool
    response_ms: int


@dataclass(frozen=True)
class CategoryImprovement:
    """Accuracy in a category before the drill and during it, in percent."""

    before: float
    after: float


@dataclass(frozen=True)
class WeakSpotSummary:
    """Drill results with per-category improvement."""

    total_problems: int
    correct: int
    accuracy: float  # percent
    avg_response_ms: float
    improvement_by_category: dict[ErrorCategory, CategoryImprovement]


@dataclass
class WeakSpotDrill:
    """Works through problems built from categorized mistakes."""

    categories: list[ErrorCategory]
    problems: list[WeakSpotProblem]
    answers: list[WeakSpotAnswer] = field(default_factory=list)
    current_index: int = 0

    @classmethod
    def create(
        cls,
        checks: Sequence[CountCheck],
        categories: Sequence[ErrorCategory] | None = None,
        problem_count: int = DEFAULT_PROBLEM_COUNT,
    ) -> "WeakSpotDrill | None":
        """
        Build a drill from count checks.

        Args:
            checks: Count checks from one or more sessions
            categories: Categories to practice; every category found when None
            problem_count: Number of problems to generate

        Returns:
            The drill, or None when there is nothing to practice
        """
        errors = categorize_errors(checks)
        if not errors:
            return None
        targeted = list(categories) if categories is not None else [e.category for e in errors]
        problems = generate_weak_spot_problems(errors, targeted, problem_count)
        if not problems:
            return None
        return cls(categories=targeted, problems=problems)

    @property
    def current_problem(self) -> WeakSpotProblem | None:
        """Get the problem awaiting an answer."""
        if self.current_index < len(self.problems):
            return self.problems[self.current_index]
        return None

    @property
    def is_complete(self) -> bool:
        """Check if every problem has been answered."""
        return self.current_index >= len(self.problems)

    def submit_answer(self, answer: str | int, response_ms: int) -> WeakSpotAnswer:
        """
        Grade an answer and move on.

        Raises:
            IndexError: If the drill is already complete
        """
        problem = self.current_problem
        if problem is None:
            raise IndexError("Weak spot drill is complete")
        text = str(answer).strip()
        result = WeakSpotAnswer(
            problem=problem,
            answer=text,
            is_correct=text == problem.expected_answer,
            response_ms=response_ms,
        )
        self.answers.append(result)
        self.current_index += 1
        return result

    def summary(self) -> WeakSpotSummary:
        """
        Summarize the drill.

        Every problem came from a mistake, so each category's accuracy
        before the drill is 0.
        """
        overall = summarize_answers(self.answers)
        by_category: dict[ErrorCategory, list[WeakSpotAnswer]] = {}
        for answer in self.answers:
            by_category.setdefault(answer.problem.category, []).append(answer)

        return WeakSpotSummary(
            total_problems=len(self.problems),
            correct=overall.correct,
            accuracy=overall.accuracy,
            avg_response_ms=overall.avg_response_ms,
            improvement_by_category={
                category: CategoryImprovement(
                    before=0.0,
                    after=sum(1 for a in answers if a.is_correct) / len(answers) * 100,
                )
                for category, answers in by_category.items()
            },
        )
