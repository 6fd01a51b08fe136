"""Deck countdown: count down a single shuffled deck as fast as possible."""

import time
from dataclasses import dataclass
from random import Random
from typing import Callable

from trainer.cards import Card, build_deck, fisher_yates_shuffle
from trainer.counting import HiLoCounter

# A balanced count over a full deck always ends at zero
CORRECT_FINAL_COUNT = 0


@dataclass(frozen=True)
class DeckCountdownResult:
    """Outcome of a countdown."""

    total_cards: int
    elapsed_ms: int
    user_count: int
    correct_count: int
    is_correct: bool


class DeckCountdown:
    """One pass through a shuffled 52-card deck, one card at a time."""

    def __init__(
        self,
        rng: Random | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """
        Shuffle a deck and start the timer.

        Args:
            rng: Random source for the shuffle
            clock: Millisecond clock
        """
        self._clock = clock or (lambda: time.time() * 1000)
        self.cards: list[Card] = list(fisher_yates_shuffle(build_deck(), rng or Random()))
        self.current_index = 0
        self._counter = HiLoCounter()
        self._counter.count_card(self.cards[0])
        self.started_at = self._clock()
        self.is_complete = False

    @property
    def current_card(self) -> Card:
        """Get the card being shown."""
        return self.cards[self.current_index]

    @property
    def running_count(self) -> int:
        """Running count through the card being shown."""
        return self._counter.running_count

    def advance(self) -> None:
        """Show the next card; the last card completes the countdown."""
        if self.is_complete or self.current_index >= len(self.cards) - 1:
            self.is_complete = True
            return
        self.current_index += 1
        self._counter.count_card(self.cards[self.current_index])
        self.is_complete = self.current_index >= len(self.cards) - 1

    def evaluate(self, user_count: int) -> DeckCountdownResult:
        """Grade the player's final count against zero."""
        return DeckCountdownResult(
            total_cards=len(self.cards),
            elapsed_ms=max(0, int(self._clock() - self.started_at)),
            user_count=user_count,
            correct_count=CORRECT_FINAL_COUNT,
            is_correct=user_count == CORRECT_FINAL_COUNT,
        )
