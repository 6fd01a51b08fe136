"""Training session API endpoints."""

import logging
import time
from typing import Annotated, Any

from fastapi import APIRouter, Header, HTTPException

from api.schemas import (
    ActionRequest,
    BestActionRequest,
    CardResponse,
    CountCheckResponse,
    CountRequest,
    DealerHandResponse,
    HandResponse,
    RulesModel,
    SessionRecordResponse,
    SessionStateResponse,
    SessionSummaryResponse,
    StartSessionRequest,
    StartSessionResponse,
)
from api.session import extract_session_id, get_session_store
from config import config
from trainer.hand import (
    Action,
    DealerHand,
    Hand,
    can_double,
    can_double_after_split,
    can_split,
    can_surrender,
)
from trainer.models import CountCheck, PromptType, TrainingMode
from trainer.rules import RuleConfig
from trainer.session import SessionController, SessionPhase, SessionRecord, SessionSnapshot
from trainer.stats.summary import SessionSummary

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory controller cache (for performance, backed by session store)
_controllers: dict[str, SessionController] = {}

# Session data keys
SESSION_KEY_SNAPSHOT = "snapshot"
SESSION_KEY_CREATED_AT = "created_at"
SESSION_KEY_LAST_ACTIVITY = "last_activity"


def rules_model(rules: RuleConfig) -> RulesModel:
    """Convert engine rules to the API model."""
    return RulesModel(**rules.to_dict())


def check_response(check: CountCheck) -> CountCheckResponse:
    """Convert a count check to its response."""
    data = check.to_dict()
    data.pop("session_id")
    return CountCheckResponse(**data)


def summary_response(summary: SessionSummary) -> SessionSummaryResponse:
    """Convert a session summary to its response."""
    return SessionSummaryResponse(**summary.to_dict())


def record_response(record: SessionRecord) -> SessionRecordResponse:
    """Convert a completed session record to its response."""
    return SessionRecordResponse(
        session_id=record.session_id,
        mode=record.mode.value,
        rules=rules_model(record.rule_config),
        started_at=record.started_at,
        ended_at=record.ended_at,
        hands_played=record.hands_played,
        count_checks=[check_response(c) for c in record.count_checks],
        summary=summary_response(record.summary),
    )


def _hand_to_response(hand: Hand) -> HandResponse:
    """Convert a Hand to HandResponse."""
    return HandResponse(
        cards=[CardResponse.from_card(c) for c in hand.cards],
        value=hand.value,
        is_soft=hand.is_soft,
        is_blackjack=hand.is_blackjack,
        is_busted=hand.is_busted,
        is_split=hand.is_split,
        is_doubled=hand.is_doubled,
        bet=hand.bet,
        actions=[a.value for a in hand.actions],
        outcome=hand.outcome.value if hand.outcome else None,
    )


def _dealer_to_response(dealer: DealerHand) -> DealerHandResponse:
    """Convert the dealer hand, hiding the hole card until it is revealed."""
    upcard = dealer.upcard
    return DealerHandResponse(
        cards=[CardResponse.from_card(c) for c in dealer.visible_cards],
        upcard=CardResponse.from_card(upcard) if upcard else None,
        hole_card_revealed=dealer.hole_card_revealed,
        value=dealer.value if dealer.hole_card_revealed else None,
    )


def _state_response(token: str, controller: SessionController) -> SessionStateResponse:
    """Convert session state to response."""
    state = controller.state
    hand = state.active_hand
    dealer = state.dealer_hand
    acting = (
        state.phase == SessionPhase.AWAITING_PLAYER_ACTION
        and hand is not None
        and not hand.is_resolved
    )

    double_ok = False
    if acting and hand is not None and can_double(hand):
        double_ok = not hand.is_split or can_double_after_split(hand, state.rules)

    return SessionStateResponse(
        session_id=token,
        phase=state.phase.value,
        mode=state.mode.value,
        prompt_type=state.prompt_type.value,
        rules=rules_model(state.rules),
        hand_number=state.hand_number,
        hands_played=state.hands_played,
        player_hands=[_hand_to_response(h) for h in state.player_hands],
        active_hand_index=state.active_hand_index,
        dealer_hand=_dealer_to_response(dealer) if dealer else None,
        pending_prompt=state.pending_prompt,
        cards_remaining=state.shoe.cards_remaining if state.shoe else 0,
        insurance_offered=bool(
            acting and dealer is not None and dealer.upcard is not None and dealer.upcard.is_ace
        ),
        can_hit=acting,
        can_stand=acting,
        can_double=double_ok,
        can_split=bool(acting and hand is not None and can_split(hand)),
        can_surrender=bool(acting and hand is not None and can_surrender(hand, state.rules)),
    )


def _new_controller(session_id: str) -> SessionController:
    return SessionController(
        miss_rate_window=config.trainer.miss_rate_window,
        tight_miss_rate=config.trainer.tight_miss_rate,
        id_factory=lambda: session_id,
    )


async def _load_controller(token: str) -> SessionController | None:
    """Load a controller from the session store."""
    store = await get_session_store()
    session_data = await store.load(token)
    if session_data and SESSION_KEY_SNAPSHOT in session_data:
        snapshot = SessionSnapshot.from_dict(session_data[SESSION_KEY_SNAPSHOT])
        return SessionController.restore(
            snapshot,
            miss_rate_window=config.trainer.miss_rate_window,
            tight_miss_rate=config.trainer.tight_miss_rate,
        )
    return None


async def _save_controller(token: str, controller: SessionController) -> None:
    """Save the controller's snapshot to the session store."""
    store = await get_session_store()
    session_data: dict[str, Any] = await store.load(token) or {}
    session_data[SESSION_KEY_SNAPSHOT] = controller.snapshot().to_dict()
    session_data[SESSION_KEY_LAST_ACTIVITY] = int(time.time())
    if SESSION_KEY_CREATED_AT not in session_data:
        session_data[SESSION_KEY_CREATED_AT] = int(time.time())
    await store.save(token, session_data)


async def get_controller(token: str) -> SessionController:
    """
    Get the controller for a signed session token.

    Raises:
        HTTPException: 401 for a bad token, 404 for an unknown session
    """
    if extract_session_id(token) is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session token")

    # Check memory cache first
    if token in _controllers:
        return _controllers[token]

    controller = await _load_controller(token)
    if controller is None:
        raise HTTPException(status_code=404, detail="Session not found")
    _controllers[token] = controller
    return controller


@router.post("/start")
async def start_session(
    request: StartSessionRequest,
    token: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> StartSessionResponse:
    """Start a new training session, reusing a valid token when one is sent."""
    store = await get_session_store()
    session_id = extract_session_id(token) if token else None
    if token is None or session_id is None:
        token = store.new_token()
        session_id = extract_session_id(token)

    mode = TrainingMode(request.mode) if request.mode else config.trainer.mode
    rules = request.rules.to_rules() if request.rules else config.trainer.rules

    controller = _new_controller(session_id or token)
    controller.start_session(mode=mode, rules=rules, prompt_type=PromptType(request.prompt_type))
    _controllers[token] = controller
    await _save_controller(token, controller)

    return StartSessionResponse(session_id=token, state=_state_response(token, controller))


@router.get("/state")
async def get_state(
    token: Annotated[str, Header(alias="X-Session-ID")],
) -> SessionStateResponse:
    """Get current session state."""
    controller = await get_controller(token)
    return _state_response(token, controller)


@router.post("/deal")
async def deal_hand(
    token: Annotated[str, Header(alias="X-Session-ID")],
) -> SessionStateResponse:
    """Deal the next hand."""
    controller = await get_controller(token)
    controller.deal_hand()
    await _save_controller(token, controller)
    return _state_response(token, controller)


@router.post("/action")
async def player_action(
    request: ActionRequest,
    token: Annotated[str, Header(alias="X-Session-ID")],
) -> SessionStateResponse:
    """Execute a player action."""
    controller = await get_controller(token)

    actions = {
        Action.HIT: controller.player_hit,
        Action.STAND: controller.player_stand,
        Action.DOUBLE: controller.player_double,
        Action.SPLIT: controller.player_split,
        Action.SURRENDER: controller.player_surrender,
    }
    actions[Action(request.action)]()

    await _save_controller(token, controller)
    return _state_response(token, controller)


@router.post("/count")
async def submit_count(
    request: CountRequest,
    token: Annotated[str, Header(alias="X-Session-ID")],
) -> CountCheckResponse:
    """Answer the open count prompt."""
    controller = await get_controller(token)
    check = controller.submit_count(request.count)
    await _save_controller(token, controller)
    return check_response(check)


@router.post("/dismiss")
async def dismiss_prompt(
    token: Annotated[str, Header(alias="X-Session-ID")],
) -> SessionStateResponse:
    """Close the open prompt without answering."""
    controller = await get_controller(token)
    controller.dismiss_prompt()
    await _save_controller(token, controller)
    return _state_response(token, controller)


@router.post("/best-action")
async def submit_best_action(
    request: BestActionRequest,
    token: Annotated[str, Header(alias="X-Session-ID")],
) -> CountCheckResponse:
    """Grade the player's choice of play for the active hand."""
    controller = await get_controller(token)
    check = controller.submit_best_action(Action(request.action), request.response_ms)
    await _save_controller(token, controller)
    return check_response(check)


@router.post("/pause")
async def pause_session(
    token: Annotated[str, Header(alias="X-Session-ID")],
) -> SessionStateResponse:
    """Pause the session."""
    controller = await get_controller(token)
    controller.pause()
    await _save_controller(token, controller)
    return _state_response(token, controller)


@router.post("/resume")
async def resume_session(
    token: Annotated[str, Header(alias="X-Session-ID")],
) -> SessionStateResponse:
    """Resume a paused session."""
    controller = await get_controller(token)
    controller.resume()
    await _save_controller(token, controller)
    return _state_response(token, controller)


@router.post("/end")
async def end_session(
    token: Annotated[str, Header(alias="X-Session-ID")],
) -> SessionRecordResponse:
    """End the session and add it to history."""
    controller = await get_controller(token)
    record = controller.end_session()
    if record is None:
        raise HTTPException(status_code=409, detail="Session has already ended")

    store = await get_session_store()
    await store.append_history(record.to_dict(), config.trainer.history_limit)
    await _save_controller(token, controller)
    logger.info("Session %s saved to history", record.session_id)
    return record_response(record)
