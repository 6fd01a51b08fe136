"""Tests for the side drills."""

from random import Random

import pytest

from helpers import FakeClock, FixedRandom
from trainer.drills import (
    DeckCountdown,
    MissReplay,
    TrueCountDrill,
    WongingConfig,
    WongingDecision,
    WongingDrill,
    WongingScenario,
    generate_problems,
    generate_scenarios,
    optimal_decision,
    summarize_answers,
)
from trainer.models import CountCheck, PromptType


def scenario(true_count: int, is_playing: bool) -> WongingScenario:
    return WongingScenario(
        shoe_progress=0.5,
        running_count=true_count * 3,
        true_count=true_count,
        decks_remaining=3.0,
        is_currently_playing=is_playing,
    )


def check(hand_number: int, expected: int, entered: int, prompt_type=PromptType.RUNNING_COUNT):
    return CountCheck(
        session_id="s",
        hand_number=hand_number,
        prompt_type=prompt_type,
        expected_count=expected,
        entered_count=entered,
        response_ms=1000,
        is_correct=expected == entered,
        delta=entered - expected,
        created_at="2026-01-15T12:00:00+00:00",
    )


class TestTrueCountDrill:
    """Tests for the true count conversion drill."""

    def test_generate_extremes(self):
        """Test the running count and deck ranges."""
        low = generate_problems(1, FixedRandom(0.0))[0]
        assert low.running_count == -12
        assert low.decks_remaining == 1.0
        assert low.correct_answer == -12

        high = generate_problems(1, FixedRandom(0.999))[0]
        assert high.running_count == 12
        assert high.decks_remaining == 6.0
        assert high.correct_answer == 2

    def test_answers_are_truncated_true_counts(self):
        """Test every generated answer truncates toward zero."""
        for problem in generate_problems(200, Random(7)):
            assert -12 <= problem.running_count <= 12
            expected = int(problem.running_count / problem.decks_remaining)
            assert problem.correct_answer == expected

    def test_submit_and_summary(self):
        """Test grading walks through the problems."""
        drill = TrueCountDrill.create(problem_count=2, rng=Random(1))
        first = drill.current_problem
        result = drill.submit_answer(first.correct_answer, 1200)
        assert result.is_correct
        assert result.delta == 0

        second = drill.current_problem
        result = drill.submit_answer(second.correct_answer + 1, 800)
        assert not result.is_correct
        assert result.delta == 1
        assert drill.is_complete

        summary = drill.summary()
        assert summary.total == 2
        assert summary.correct == 1
        assert summary.accuracy == pytest.approx(50.0)
        assert summary.avg_response_ms == pytest.approx(1000.0)

    def test_submit_after_complete(self):
        """Test a finished drill takes no more answers."""
        drill = TrueCountDrill.create(problem_count=1, rng=Random(1))
        drill.submit_answer(0, 100)
        with pytest.raises(IndexError):
            drill.submit_answer(0, 100)


class TestDeckCountdown:
    """Tests for the deck countdown drill."""

    def test_full_pass_ends_at_zero(self):
        """Test the count through a whole deck is zero."""
        clock = FakeClock()
        countdown = DeckCountdown(rng=Random(5), clock=clock)
        assert len(countdown.cards) == 52
        assert countdown.running_count == countdown.cards[0].count_value

        while not countdown.is_complete:
            countdown.advance()
        assert countdown.current_index == 51
        assert countdown.running_count == 0

        clock.advance(25_000)
        result = countdown.evaluate(0)
        assert result.is_correct
        assert result.elapsed_ms == 25_000
        assert result.total_cards == 52

    def test_wrong_final_count(self):
        """Test any nonzero answer is wrong."""
        countdown = DeckCountdown(rng=Random(5), clock=FakeClock())
        result = countdown.evaluate(2)
        assert not result.is_correct
        assert result.correct_count == 0

    def test_advance_after_complete(self):
        """Test advancing past the last card stays on it."""
        countdown = DeckCountdown(rng=Random(5), clock=FakeClock())
        for _ in range(60):
            countdown.advance()
        assert countdown.current_index == 51
        assert countdown.is_complete


class TestWonging:
    """Tests for the wonging drill."""

    @pytest.mark.parametrize(
        "true_count,is_playing,expected",
        [
            (2, False, WongingDecision.ENTER),
            (1, False, WongingDecision.WATCH),
            (0, True, WongingDecision.EXIT),
            (-3, True, WongingDecision.EXIT),
            (1, True, WongingDecision.STAY),
        ],
    )
    def test_optimal_decision(self, true_count, is_playing, expected):
        """Test entry at or above +2 and exit at or below 0."""
        assert optimal_decision(scenario(true_count, is_playing), WongingConfig()) == expected

    def test_config_validation(self):
        """Test the exit index must sit below the entry index."""
        with pytest.raises(ValueError):
            WongingConfig(entry_threshold=1, exit_threshold=1)
        with pytest.raises(ValueError):
            WongingConfig(scenario_count=0)

    def test_seat_carries_over(self):
        """Test each scenario's seat follows the previous optimal decision."""
        config = WongingConfig(scenario_count=50)
        scenarios = generate_scenarios(config, Random(11))
        assert len(scenarios) == 50
        assert not scenarios[0].is_currently_playing

        for previous, current in zip(scenarios, scenarios[1:]):
            decision = optimal_decision(previous, config)
            if decision == WongingDecision.ENTER:
                assert current.is_currently_playing
            elif decision == WongingDecision.EXIT:
                assert not current.is_currently_playing
            else:
                assert current.is_currently_playing == previous.is_currently_playing

    def test_scenario_ranges(self):
        """Test shoe progress and deck estimates stay in range."""
        for s in generate_scenarios(WongingConfig(scenario_count=100), Random(3)):
            assert 0.1 <= s.shoe_progress <= 0.85
            assert 0.5 <= s.decks_remaining <= 5.4
            assert -8 <= s.running_count <= 12

    def test_summary_counts_costly_mistakes(self):
        """Test missed entries and late exits are tallied."""
        config = WongingConfig()
        drill = WongingDrill(
            config=config,
            scenarios=[scenario(3, False), scenario(-1, True), scenario(1, False)],
        )
        drill.submit_decision(WongingDecision.WATCH, 500)
        drill.submit_decision(WongingDecision.STAY, 500)
        answer = drill.submit_decision(WongingDecision.WATCH, 500)
        assert answer.is_correct
        assert drill.is_complete

        summary = drill.summary()
        assert summary.total_scenarios == 3
        assert summary.missed_entries == 1
        assert summary.late_exits == 1
        assert summary.scores.correct == 1

        with pytest.raises(IndexError):
            drill.submit_decision(WongingDecision.WATCH, 500)


class TestMissReplay:
    """Tests for replaying missed checks."""

    def test_nothing_missed(self):
        """Test a perfect session has no replay."""
        assert MissReplay.from_checks([check(1, 2, 2)]) is None

    def test_replay_order_and_grading(self):
        """Test misses replay in order and best-action checks are skipped."""
        checks = [
            check(1, 2, 2),
            check(4, -1, 1),
            check(5, 0, 3, prompt_type=PromptType.BEST_ACTION),
            check(8, 5, 4),
        ]
        replay = MissReplay.from_checks(checks)
        assert replay is not None
        assert [p.hand_number for p in replay.problems] == [4, 8]
        assert replay.current_problem.previous_answer == 1

        assert replay.submit_answer(-1, 900).is_correct
        assert not replay.submit_answer(3, 700).is_correct
        assert replay.is_complete
        assert replay.summary().correct == 1

        with pytest.raises(IndexError):
            replay.submit_answer(5, 100)


def test_empty_summary():
    """Test an unanswered drill scores zero."""
    summary = summarize_answers([])
    assert summary.total == 0
    assert summary.accuracy == 0.0
