"""Strategy lookup API endpoints."""

from fastapi import APIRouter, HTTPException

from api.schemas import (
    DeviationResponse,
    InsuranceRequest,
    InsuranceResponse,
    StrategyRequest,
    StrategyResponse,
)
from config import config
from trainer.cards import Card
from trainer.hand import hand_total, is_pair, is_soft
from trainer.strategy import (
    ALL_DEVIATIONS,
    BasicStrategy,
    get_deviation_action,
    should_take_insurance,
)
from trainer.strategy.insurance import INSURANCE_THRESHOLD

router = APIRouter()


def _parse_cards(request: StrategyRequest) -> tuple[list[Card], Card]:
    try:
        player = [Card.from_string(s) for s in request.player_cards]
        upcard = Card.from_string(request.dealer_upcard)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return player, upcard


@router.post("/basic")
async def basic_strategy(request: StrategyRequest) -> StrategyResponse:
    """Look up the basic strategy play, ignoring the count."""
    player, upcard = _parse_cards(request)
    rules = request.rules.to_rules() if request.rules else config.trainer.rules
    strategy = BasicStrategy(rules)
    action = strategy.get_action(player, upcard, request.is_split_hand)

    return StrategyResponse(
        player_value=hand_total(player),
        is_soft=is_soft(player),
        is_pair=is_pair(player),
        basic_action=action.value,
        recommended_action=action.value,
        source=strategy.source.id,
    )


@router.post("/deviation")
async def deviation_strategy(request: StrategyRequest) -> StrategyResponse:
    """Look up the play at a true count; index plays override basic strategy."""
    player, upcard = _parse_cards(request)
    rules = request.rules.to_rules() if request.rules else config.trainer.rules
    strategy = BasicStrategy(rules)
    basic = strategy.get_action(player, upcard, request.is_split_hand)

    deviation = None
    recommended = basic
    result = get_deviation_action(player, upcard, request.true_count, rules, request.is_split_hand)
    if result is not None:
        recommended, dev = result
        deviation = DeviationResponse(**dev.to_dict())

    return StrategyResponse(
        player_value=hand_total(player),
        is_soft=is_soft(player),
        is_pair=is_pair(player),
        basic_action=basic.value,
        recommended_action=recommended.value,
        deviation=deviation,
        source=strategy.source.id,
    )


@router.post("/insurance")
async def insurance(request: InsuranceRequest) -> InsuranceResponse:
    """Whether to take insurance at a true count."""
    return InsuranceResponse(
        take_insurance=should_take_insurance(request.true_count),
        threshold=INSURANCE_THRESHOLD,
    )


@router.get("/deviations")
async def list_deviations() -> list[DeviationResponse]:
    """List every index play (Illustrious 18 and Fab 4)."""
    return [DeviationResponse(**dev.to_dict()) for dev in ALL_DEVIATIONS]
