"""
Session analysis: expected value, variance, risk of ruin and strategy cost.

``fast`` mode uses closed-form estimates. ``deep`` mode folds counting skill
and error cost into the edge and runs a Monte-Carlo bankroll simulation.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum

import numpy as np

DEFAULT_HAND_SD = 1.1  # per-hand standard deviation for flat betting
DEFAULT_BANKROLL_UNITS = 100.0
FALLBACK_EDGE = 0.005
ERROR_COST_PER_MISS = 0.02
COUNTING_ADVANTAGE = 0.01
SIMULATIONS = 10_000
MIN_SIMULATED_HANDS = 1_000
RUIN_MILESTONES = (100, 500, 1000, 5000)
SIM_CHUNK = 1_000


class AnalysisMode(Enum):
    """How hard to work."""

    FAST = "fast"
    DEEP = "deep"


class AnalysisType(Enum):
    """Which figures to compute."""

    EV = "ev"
    VARIANCE = "variance"
    ROR = "ror"
    STRATEGY = "strategy"
    FULL = "full"

    def includes(self, part: "AnalysisType") -> bool:
        """Check whether this request covers ``part``."""
        return self == AnalysisType.FULL or self == part


@dataclass(frozen=True)
class BetRecord:
    """One settled hand: units wagered, outcome name, units won or lost."""

    units: float
    outcome: str
    payout: float


@dataclass(frozen=True)
class AnalysisParams:
    """Statistics snapshot the analysis runs over. Never shared mutable state."""

    hands_played: int
    total_wagered: float
    net_result: float
    decks: int
    dealer_hits_soft_17: bool
    penetration: float
    bet_history: tuple[BetRecord, ...] = ()
    strategy_accuracy: float | None = None  # 0-1
    deviation_accuracy: float | None = None  # 0-1
    count_accuracy: float | None = None  # 0-1


@dataclass(frozen=True)
class AnalysisRequest:
    """A unit of work for the analysis worker."""

    type: AnalysisType
    mode: AnalysisMode
    params: AnalysisParams
    id: str = ""
    seed: int | None = None
    simulations: int = SIMULATIONS


@dataclass(frozen=True)
class RuinMilestone:
    """Probability of ruin within ``hands`` hands."""

    hands: int
    probability: float


@dataclass(frozen=True)
class AnalysisData:
    """Computed figures; fields outside the requested type stay None."""

    expected_value: float | None = None
    house_edge: float | None = None  # percent
    player_advantage: float | None = None  # percent

    standard_deviation: float | None = None
    variance_per_hand: float | None = None
    n_zero: int | None = None

    risk_of_ruin: float | None = None
    kelly_fraction: float | None = None
    optimal_unit_size: float | None = None

    cost_of_errors: float | None = None
    deviation_value: float | None = None

    simulations: int | None = None
    confidence_interval: tuple[float, float] | None = None
    ruin_prob_by_hands: tuple[RuinMilestone, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AnalysisResult:
    """Answer to one request."""

    id: str
    type: AnalysisType
    mode: AnalysisMode
    data: AnalysisData
    compute_time_ms: float


def base_house_edge(decks: int, dealer_hits_soft_17: bool) -> float:
    """
    House edge in percent, from -0.50 for six-deck H17.

    Each deck fewer than six adds 0.02; S17 adds 0.20.
    """
    edge = -0.50 + (6 - decks) * 0.02
    if not dealer_hits_soft_17:
        edge += 0.20
    return edge


def sample_variance(history: tuple[BetRecord, ...]) -> tuple[float, float]:
    """
    Return (standard deviation, variance) of payouts.

    Uses Bessel's correction; fewer than two records give (0, 0).
    """
    if len(history) < 2:
        return 0.0, 0.0
    payouts = np.array([b.payout for b in history], dtype=float)
    variance = float(np.var(payouts, ddof=1))
    return math.sqrt(variance), variance


def _bankroll_units(params: AnalysisParams) -> float:
    if params.total_wagered > 0:
        return params.net_result + params.total_wagered
    return DEFAULT_BANKROLL_UNITS


def _empirical_ev(params: AnalysisParams) -> float:
    if params.hands_played <= 0:
        return 0.0
    return params.net_result / params.hands_played


def compute_fast(request: AnalysisRequest, edge: float) -> AnalysisData:
    """Closed-form estimates."""
    params = request.params
    kind = request.type
    data = AnalysisData()

    if kind.includes(AnalysisType.EV):
        data = replace(
            data,
            expected_value=_empirical_ev(params),
            house_edge=edge * 100,
            player_advantage=-edge * 100,
        )

    sd, variance = sample_variance(params.bet_history)

    if kind.includes(AnalysisType.VARIANCE):
        effective_edge = abs(edge) or FALLBACK_EDGE
        data = replace(
            data,
            standard_deviation=sd,
            variance_per_hand=variance,
            n_zero=math.ceil(variance / effective_edge**2) if variance > 0 else 0,
        )

    if kind.includes(AnalysisType.ROR):
        effective_sd = sd if sd > 0 else DEFAULT_HAND_SD
        ror_variance = effective_sd**2
        bankroll = _bankroll_units(params)
        exponent = 2 * edge * bankroll / ror_variance
        kelly = edge / ror_variance
        data = replace(
            data,
            risk_of_ruin=min(1.0, max(0.0, math.exp(-exponent))),
            kelly_fraction=kelly,
            optimal_unit_size=max(0.0, kelly * bankroll) if bankroll > 0 else 0.0,
        )

    if kind.includes(AnalysisType.STRATEGY):
        strategy = params.strategy_accuracy if params.strategy_accuracy is not None else 1.0
        deviation = params.deviation_accuracy or 0.0
        count = params.count_accuracy or 0.0
        data = replace(
            data,
            cost_of_errors=(1 - strategy) * ERROR_COST_PER_MISS,
            deviation_value=count * deviation * COUNTING_ADVANTAGE,
        )

    return data


def simulate_bankrolls(
    edge: float,
    sd: float,
    bankroll: float,
    hands: int,
    simulations: int,
    rng: np.random.Generator,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Simulate flat-bet bankroll paths with normally distributed hand results.

    Returns:
        Final bankrolls, and the first hand (1-based) each path hit zero or
        below, with 0 for paths never ruined.
    """
    finals = np.empty(simulations)
    ruined_at = np.zeros(simulations, dtype=np.int64)

    for start in range(0, simulations, SIM_CHUNK):
        n = min(SIM_CHUNK, simulations - start)
        paths = bankroll + np.cumsum(rng.normal(edge, sd, size=(n, hands)), axis=1)

        broke = paths <= 0
        hit = broke.any(axis=1)
        first = np.argmax(broke, axis=1) + 1
        ruined_at[start:start + n] = np.where(hit, first, 0)
        finals[start:start + n] = paths[:, -1]

    return finals, ruined_at


def compute_deep(request: AnalysisRequest, base_edge: float) -> AnalysisData:
    """Skill-adjusted edge plus Monte-Carlo risk of ruin."""
    params = request.params
    kind = request.type
    data = AnalysisData()

    strategy = params.strategy_accuracy if params.strategy_accuracy is not None else 1.0
    counting_advantage = (params.count_accuracy or 0.0) * (params.deviation_accuracy or 0.0) * COUNTING_ADVANTAGE
    error_cost = (1 - strategy) * ERROR_COST_PER_MISS
    edge = base_edge + counting_advantage - error_cost

    if kind.includes(AnalysisType.EV):
        data = replace(
            data,
            expected_value=_empirical_ev(params),
            house_edge=edge * 100,
            player_advantage=-edge * 100,
        )

    if kind.includes(AnalysisType.STRATEGY):
        data = replace(data, cost_of_errors=error_cost, deviation_value=counting_advantage)

    sd, _ = sample_variance(params.bet_history)
    effective_sd = sd if sd > 0 else DEFAULT_HAND_SD
    effective_variance = effective_sd**2

    if kind.includes(AnalysisType.VARIANCE):
        effective_edge = abs(edge) or FALLBACK_EDGE
        data = replace(
            data,
            standard_deviation=effective_sd,
            variance_per_hand=effective_variance,
            n_zero=math.ceil(effective_variance / effective_edge**2),
        )

    if kind.includes(AnalysisType.ROR):
        bankroll = _bankroll_units(params)
        hands = max(params.hands_played, MIN_SIMULATED_HANDS)
        simulations = max(1, request.simulations)
        rng = np.random.default_rng(request.seed)

        finals, ruined_at = simulate_bankrolls(
            edge, effective_sd, bankroll, hands, simulations, rng
        )

        finals.sort()
        ci_low = finals[int(simulations * 0.025)]
        ci_high = finals[min(simulations - 1, int(simulations * 0.975))]
        kelly = edge / effective_variance

        milestones = tuple(
            RuinMilestone(
                hands=m,
                probability=float(np.count_nonzero((ruined_at > 0) & (ruined_at <= m)) / simulations),
            )
            for m in RUIN_MILESTONES
        )
        data = replace(
            data,
            risk_of_ruin=float(np.count_nonzero(ruined_at) / simulations),
            kelly_fraction=kelly,
            optimal_unit_size=max(0.0, kelly * bankroll) if bankroll > 0 else 0.0,
            confidence_interval=(
                float((ci_low - bankroll) / hands),
                float((ci_high - bankroll) / hands),
            ),
            simulations=simulations,
            ruin_prob_by_hands=milestones,
        )

    return data


def compute_analysis(request: AnalysisRequest) -> AnalysisData:
    """
    Run one analysis request synchronously.

    Args:
        request: What to compute and over which statistics

    Returns:
        The computed figures
    """
    edge = base_house_edge(request.params.decks, request.params.dealer_hits_soft_17) / 100
    if request.mode == AnalysisMode.FAST:
        return compute_fast(request, edge)
    return compute_deep(request, edge)
