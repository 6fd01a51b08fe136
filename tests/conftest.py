"""Pytest fixtures for Hi-Lo trainer tests."""

from random import Random

import pytest

from helpers import FakeClock, fixed_now, hand_of
from trainer.rules import RuleConfig
from trainer.session import SessionController


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def rules():
    """Default rules (6 decks, H17, DAS, no surrender)."""
    return RuleConfig()


@pytest.fixture
def surrender_rules():
    """Default rules with late surrender."""
    return RuleConfig(surrender_allowed=True)


@pytest.fixture
def clock():
    """Controllable millisecond clock."""
    return FakeClock()


@pytest.fixture
def controller(rng, clock):
    """An idle controller with a seeded RNG and fixed clocks."""
    return SessionController(rng=rng, clock=clock, now=fixed_now, id_factory=lambda: "session-1")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return hand_of("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return hand_of("10S", "6H")


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return hand_of("8S", "8H")
