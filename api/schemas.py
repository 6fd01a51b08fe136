"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Literal

from trainer.cards import Card
from trainer.rules import DealSpeed, RuleConfig

ActionName = Literal["hit", "stand", "double", "split", "surrender"]
ModeName = Literal["counting_drill", "play_and_count"]


class RulesModel(BaseModel):
    """Table rules for a session or a strategy lookup."""

    decks: Literal[1, 2, 6, 8] = 6
    penetration: float = Field(default=0.75, gt=0.0, le=1.0)
    dealer_hits_soft_17: bool = True
    double_after_split: bool = True
    surrender_allowed: bool = False
    deal_speed: Literal["slow", "normal", "fast", "very_fast"] = "normal"

    def to_rules(self) -> RuleConfig:
        """Build the engine's rule config."""
        return RuleConfig(
            decks=self.decks,
            penetration=self.penetration,
            dealer_hits_soft_17=self.dealer_hits_soft_17,
            double_after_split=self.double_after_split,
            surrender_allowed=self.surrender_allowed,
            deal_speed=DealSpeed(self.deal_speed),
        )


# Session schemas
class StartSessionRequest(BaseModel):
    """Request to start a training session."""

    mode: ModeName | None = None
    prompt_type: Literal["running_count", "true_count"] = "running_count"
    rules: RulesModel | None = None


class ActionRequest(BaseModel):
    """Request for player action."""

    action: ActionName


class CountRequest(BaseModel):
    """Answer to an open count prompt."""

    count: int = Field(..., ge=-500, le=500)


class BestActionRequest(BaseModel):
    """Answer to a best-action question about the active hand."""

    action: ActionName
    response_ms: int = Field(default=0, ge=0)


class CardResponse(BaseModel):
    """Card representation."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    value: int

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls(rank=str(card.rank), suit=str(card.suit), value=card.value)


class HandResponse(BaseModel):
    """Player hand representation."""

    cards: list[CardResponse]
    value: int
    is_soft: bool
    is_blackjack: bool
    is_busted: bool
    is_split: bool
    is_doubled: bool
    bet: int
    actions: list[str]
    outcome: str | None = None


class DealerHandResponse(BaseModel):
    """Dealer hand as seen from the table; the hole card stays hidden until revealed."""

    cards: list[CardResponse]
    upcard: CardResponse | None
    hole_card_revealed: bool
    value: int | None


class SessionStateResponse(BaseModel):
    """Current session state."""

    session_id: str
    phase: str
    mode: str
    prompt_type: str
    rules: RulesModel
    hand_number: int
    hands_played: int
    player_hands: list[HandResponse]
    active_hand_index: int
    dealer_hand: DealerHandResponse | None
    pending_prompt: bool
    cards_remaining: int
    insurance_offered: bool
    can_hit: bool
    can_stand: bool
    can_double: bool
    can_split: bool
    can_surrender: bool


class StartSessionResponse(BaseModel):
    """A new session and its signed token."""

    session_id: str
    state: SessionStateResponse


class CountCheckResponse(BaseModel):
    """One graded prompt answer."""

    hand_number: int
    prompt_type: str
    expected_count: int
    entered_count: int
    expected_action: str | None = None
    entered_action: str | None = None
    deviation_name: str | None = None
    response_ms: int
    is_correct: bool
    delta: int
    created_at: str


class SessionSummaryResponse(BaseModel):
    """Prompt accuracy for a session."""

    total_prompts: int
    correct_prompts: int
    accuracy: float
    avg_response_ms: float
    longest_streak: int


class SessionRecordResponse(BaseModel):
    """A completed session."""

    session_id: str
    mode: str
    rules: RulesModel
    started_at: str
    ended_at: str
    hands_played: int
    count_checks: list[CountCheckResponse]
    summary: SessionSummaryResponse


# Strategy schemas
class StrategyRequest(BaseModel):
    """Hand to look up, with cards written like 'AS', '10h' or 'K♦'."""

    player_cards: list[str] = Field(..., min_length=2)
    dealer_upcard: str
    true_count: float = 0.0
    is_split_hand: bool = False
    rules: RulesModel | None = None


class DeviationResponse(BaseModel):
    """An index play."""

    name: str
    player_total: int
    is_soft_hand: bool
    is_pair: bool
    dealer_up_value: int
    basic_action: str
    deviation_action: str
    tc_threshold: float
    comparison: str
    group: str


class StrategyResponse(BaseModel):
    """Recommended play for a hand."""

    player_value: int
    is_soft: bool
    is_pair: bool
    basic_action: str
    recommended_action: str
    deviation: DeviationResponse | None = None
    source: str


class InsuranceRequest(BaseModel):
    """True count when the dealer shows an ace."""

    true_count: float


class InsuranceResponse(BaseModel):
    """Insurance decision."""

    take_insurance: bool
    threshold: int


# Drill schemas
class TrueCountProblemResponse(BaseModel):
    """A running-count to true-count conversion problem."""

    running_count: int
    decks_remaining: float
    correct_answer: int


class TrueCountDrillResponse(BaseModel):
    """A set of conversion problems."""

    problems: list[TrueCountProblemResponse]


class TrueCountCheckRequest(BaseModel):
    """Answer to one conversion problem."""

    running_count: int
    decks_remaining: float = Field(..., gt=0.0, le=8.0)
    answer: int
    response_ms: int = Field(default=0, ge=0)


class TrueCountCheckResponse(BaseModel):
    """Graded conversion answer."""

    correct: bool
    correct_answer: int
    delta: int


class WongingDrillRequest(BaseModel):
    """Entry and exit indices for a wonging drill."""

    entry_threshold: int = 2
    exit_threshold: int = 0
    scenario_count: int = Field(default=20, ge=1, le=100)


class WongingScenarioResponse(BaseModel):
    """A point in the shoe, with the best decision."""

    shoe_progress: float
    running_count: int
    true_count: int
    decks_remaining: float
    is_currently_playing: bool
    optimal_decision: str


class WongingDrillResponse(BaseModel):
    """Generated wonging scenarios."""

    entry_threshold: int
    exit_threshold: int
    scenarios: list[WongingScenarioResponse]


class WongingCheckRequest(BaseModel):
    """A decision for one wonging situation."""

    true_count: int
    is_currently_playing: bool
    decision: Literal["enter", "stay", "exit", "watch"]
    entry_threshold: int = 2
    exit_threshold: int = 0


class WongingCheckResponse(BaseModel):
    """Graded wonging decision."""

    correct: bool
    optimal_decision: str


# History schemas
class HistoryResponse(BaseModel):
    """Stored sessions, oldest first, with an overall summary."""

    sessions: list[SessionRecordResponse]
    overall: SessionSummaryResponse
