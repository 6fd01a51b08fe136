"""Side drill API endpoints."""

from random import Random

from fastapi import APIRouter, HTTPException, Query

from api.schemas import (
    TrueCountCheckRequest,
    TrueCountCheckResponse,
    TrueCountDrillResponse,
    TrueCountProblemResponse,
    WongingCheckRequest,
    WongingCheckResponse,
    WongingDrillRequest,
    WongingDrillResponse,
    WongingScenarioResponse,
)
from trainer.counting import compute_true_count
from trainer.drills import (
    WongingConfig,
    WongingDecision,
    WongingScenario,
    generate_problems,
    generate_scenarios,
    optimal_decision,
)

router = APIRouter()


def _wonging_config(entry: int, exit_: int, scenario_count: int = 1) -> WongingConfig:
    try:
        return WongingConfig(
            entry_threshold=entry,
            exit_threshold=exit_,
            scenario_count=scenario_count,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.get("/true-count")
async def true_count_drill(
    count: int = Query(default=20, ge=1, le=100),
    seed: int | None = None,
) -> TrueCountDrillResponse:
    """Generate running count to true count conversion problems."""
    problems = generate_problems(count, Random(seed))
    return TrueCountDrillResponse(
        problems=[
            TrueCountProblemResponse(
                running_count=p.running_count,
                decks_remaining=p.decks_remaining,
                correct_answer=p.correct_answer,
            )
            for p in problems
        ]
    )


@router.post("/true-count/check")
async def check_true_count(request: TrueCountCheckRequest) -> TrueCountCheckResponse:
    """Grade a true count conversion."""
    correct = compute_true_count(request.running_count, request.decks_remaining)
    delta = request.answer - correct
    return TrueCountCheckResponse(correct=delta == 0, correct_answer=correct, delta=delta)


@router.post("/wonging")
async def wonging_drill(
    request: WongingDrillRequest,
    seed: int | None = None,
) -> WongingDrillResponse:
    """Generate wonging scenarios with their best decisions."""
    drill_config = _wonging_config(
        request.entry_threshold, request.exit_threshold, request.scenario_count
    )
    scenarios = generate_scenarios(drill_config, Random(seed))
    return WongingDrillResponse(
        entry_threshold=drill_config.entry_threshold,
        exit_threshold=drill_config.exit_threshold,
        scenarios=[
            WongingScenarioResponse(
                shoe_progress=s.shoe_progress,
                running_count=s.running_count,
                true_count=s.true_count,
                decks_remaining=s.decks_remaining,
                is_currently_playing=s.is_currently_playing,
                optimal_decision=optimal_decision(s, drill_config).value,
            )
            for s in scenarios
        ],
    )


@router.post("/wonging/check")
async def check_wonging(request: WongingCheckRequest) -> WongingCheckResponse:
    """Grade a wonging decision."""
    drill_config = _wonging_config(request.entry_threshold, request.exit_threshold)
    scenario = WongingScenario(
        shoe_progress=0.0,
        running_count=0,
        true_count=request.true_count,
        decks_remaining=0.0,
        is_currently_playing=request.is_currently_playing,
    )
    optimal = optimal_decision(scenario, drill_config)
    return WongingCheckResponse(
        correct=WongingDecision(request.decision) == optimal,
        optimal_decision=optimal.value,
    )
