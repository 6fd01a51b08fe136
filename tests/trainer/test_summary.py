"""Tests for session summaries, miss rate and persisted shapes."""

import pytest

from trainer.hand import Action
from trainer.models import CountCheck, PromptType, TrainingMode
from trainer.rules import RuleConfig
from trainer.session import SessionRecord, append_record
from trainer.stats import SessionSummary, longest_correct_streak, recent_miss_rate, summarize_checks


def make_check(
    is_correct: bool,
    response_ms: int = 1000,
    prompt_type: PromptType = PromptType.RUNNING_COUNT,
    hand_number: int = 1,
) -> CountCheck:
    delta = 0 if is_correct else 2
    return CountCheck(
        session_id="s",
        hand_number=hand_number,
        prompt_type=prompt_type,
        expected_count=3,
        entered_count=3 + delta,
        response_ms=response_ms,
        is_correct=is_correct,
        delta=delta,
        created_at="2026-01-15T12:00:00+00:00",
    )


def make_record(session_id: str) -> SessionRecord:
    return SessionRecord(
        session_id=session_id,
        mode=TrainingMode.COUNTING_DRILL,
        rule_config=RuleConfig(),
        started_at="2026-01-15T12:00:00+00:00",
        ended_at="2026-01-15T12:30:00+00:00",
        hands_played=10,
        count_checks=[make_check(True)],
        summary=summarize_checks([make_check(True)]),
    )


class TestSummarizeChecks:
    """Tests for summarize_checks."""

    def test_empty(self):
        """Test an empty session scores zero."""
        assert summarize_checks([]) == SessionSummary()

    def test_accuracy_and_speed(self):
        """Test accuracy is a percentage and response time a mean."""
        checks = [
            make_check(True, 1000),
            make_check(False, 3000),
            make_check(True, 2000),
            make_check(True, 2000),
        ]
        summary = summarize_checks(checks)
        assert summary.total_prompts == 4
        assert summary.correct_prompts == 3
        assert summary.accuracy == pytest.approx(75.0)
        assert summary.avg_response_ms == pytest.approx(2000.0)
        assert summary.longest_streak == 2

    def test_longest_streak(self):
        """Test the best run of consecutive correct answers."""
        pattern = [True, True, False, True, True, True, False]
        assert longest_correct_streak([make_check(p) for p in pattern]) == 3
        assert longest_correct_streak([make_check(False)]) == 0

    def test_summary_round_trip(self):
        """Test serialization."""
        summary = summarize_checks([make_check(True), make_check(False)])
        assert SessionSummary.from_dict(summary.to_dict()) == summary


class TestRecentMissRate:
    """Tests for recent_miss_rate."""

    def test_no_checks(self):
        """Test nothing to measure gives zero."""
        assert recent_miss_rate([]) == 0.0

    def test_window(self):
        """Test only the last five checks count."""
        checks = [make_check(False)] * 5 + [make_check(True)] * 4 + [make_check(False)]
        assert recent_miss_rate(checks) == pytest.approx(0.2)
        assert recent_miss_rate(checks, window=10) == pytest.approx(0.6)

    def test_short_history(self):
        """Test fewer checks than the window."""
        assert recent_miss_rate([make_check(False), make_check(True)]) == pytest.approx(0.5)

    def test_best_action_checks_ignored(self):
        """Test strategy checks do not count toward the miss rate."""
        checks = [make_check(True)] + [
            make_check(False, prompt_type=PromptType.BEST_ACTION) for _ in range(5)
        ]
        assert recent_miss_rate(checks) == 0.0


class TestCountCheck:
    """Tests for CountCheck serialization."""

    def test_round_trip_with_actions(self):
        """Test best-action fields survive serialization."""
        check = CountCheck(
            session_id="s",
            hand_number=4,
            prompt_type=PromptType.BEST_ACTION,
            expected_count=2,
            entered_count=2,
            expected_action=Action.STAND,
            entered_action=Action.HIT,
            response_ms=900,
            is_correct=False,
            delta=0,
            created_at="2026-01-15T12:00:00+00:00",
        )
        data = check.to_dict()
        assert data["expected_action"] == "stand"
        assert CountCheck.from_dict(data) == check

    def test_old_data_defaults_to_running_count(self):
        """Test checks saved without a prompt type load as running count."""
        data = make_check(True).to_dict()
        del data["prompt_type"]
        assert CountCheck.from_dict(data).prompt_type == PromptType.RUNNING_COUNT


class TestHistory:
    """Tests for the capped session history."""

    def test_append_keeps_newest(self):
        """Test history drops the oldest beyond the limit."""
        history = [make_record(f"s{i}") for i in range(100)]
        updated = append_record(history, make_record("s100"))
        assert len(updated) == 100
        assert updated[0].session_id == "s1"
        assert updated[-1].session_id == "s100"
        assert len(history) == 100

    def test_small_limit(self):
        """Test a custom limit."""
        history: list[SessionRecord] = []
        for i in range(5):
            history = append_record(history, make_record(f"s{i}"), limit=3)
        assert [r.session_id for r in history] == ["s2", "s3", "s4"]

    def test_record_round_trip(self):
        """Test records survive serialization."""
        record = make_record("s1")
        assert SessionRecord.from_dict(record.to_dict()) == record
