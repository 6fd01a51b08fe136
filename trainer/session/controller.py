"""Training session orchestrator."""

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from random import Random
from typing import Callable

from trainer.cards import Card, Shoe
from trainer.counting import (
    clamp_decks_remaining,
    compute_true_count,
    estimate_decks_remaining,
    update_running_count_single,
)
from trainer.errors import (
    IllegalActionError,
    InvalidTransitionError,
    NoActiveSessionError,
    PromptNotOpenError,
)
from trainer.hand import (
    Action,
    DealerHand,
    Hand,
    HandOutcome,
    can_double,
    can_double_after_split,
    can_split,
    can_surrender,
    resolve_outcome,
    should_dealer_hit,
)
from trainer.models import CountCheck, PromptType, TrainingMode
from trainer.prompts.scheduler import TIGHT_MISS_RATE, PromptScheduler
from trainer.rules import RuleConfig
from trainer.session.events import EventEmitter, EventHandler, EventType
from trainer.session.machine import SessionMachine, SessionPhase
from trainer.session.snapshot import SessionRecord, SessionSnapshot
from trainer.stats.summary import DEFAULT_MISS_RATE_WINDOW, recent_miss_rate, summarize_checks
from trainer.strategy.basic import get_basic_strategy_action
from trainer.strategy.deviations import Deviation, get_deviation_action
from trainer.strategy.insurance import should_take_insurance

logger = logging.getLogger(__name__)

COUNT_PROMPT_TYPES = (PromptType.RUNNING_COUNT, PromptType.TRUE_COUNT)


def _wall_clock_ms() -> float:
    return time.time() * 1000


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionState:
    """Everything the orchestrator owns for one session."""

    session_id: str | None = None
    phase: SessionPhase = SessionPhase.IDLE
    mode: TrainingMode = TrainingMode.COUNTING_DRILL
    rules: RuleConfig = field(default_factory=RuleConfig)
    prompt_type: PromptType = PromptType.RUNNING_COUNT

    shoe: Shoe | None = None
    scheduler: PromptScheduler | None = None

    running_count: int = 0
    hand_number: int = 0
    hands_played: int = 0
    player_hands: list[Hand] = field(default_factory=list)
    dealer_hand: DealerHand | None = None
    active_hand_index: int = 0

    pending_prompt: bool = False
    prompt_started_at: float | None = None
    phase_before_pause: SessionPhase | None = None

    count_checks: list[CountCheck] = field(default_factory=list)
    started_at: str | None = None
    ended_at: str | None = None

    @property
    def active_hand(self) -> Hand | None:
        """Get the hand the player is acting on."""
        if 0 <= self.active_hand_index < len(self.player_hands):
            return self.player_hands[self.active_hand_index]
        return None

    @property
    def decks_remaining_estimate(self) -> float:
        """Decks left in the shoe, never below half a deck."""
        if self.shoe is None:
            return float(self.rules.decks)
        return clamp_decks_remaining(estimate_decks_remaining(self.shoe.cards_remaining))

    @property
    def true_count(self) -> int:
        """Running count per deck remaining, truncated toward zero."""
        return compute_true_count(self.running_count, self.decks_remaining_estimate)


class SessionController:
    """
    Drives one training session at a time.

    Owns the shoe, the running count, the hands in play and the prompt
    scheduler. Every operation validates its phase change against the
    session state machine before touching any state, and runs to completion
    before returning. Communication with a UI happens through return values
    and emitted events only.
    """

    def __init__(
        self,
        rng: Random | None = None,
        clock: Callable[[], float] | None = None,
        now: Callable[[], datetime] | None = None,
        miss_rate_window: int = DEFAULT_MISS_RATE_WINDOW,
        id_factory: Callable[[], str] | None = None,
        tight_miss_rate: float = TIGHT_MISS_RATE,
    ) -> None:
        """
        Initialize an idle controller.

        Args:
            rng: Random source for shuffles and prompt cadence rolls
            clock: Millisecond clock used to time prompt responses
            now: Wall clock for session and check timestamps
            miss_rate_window: Count checks considered when adapting cadence
            id_factory: Generates session ids
            tight_miss_rate: Recent miss rate that tightens prompt cadence
        """
        self._rng = rng or Random()
        self._clock = clock or _wall_clock_ms
        self._now = now or _utc_now
        self._miss_rate_window = miss_rate_window
        self._tight_miss_rate = tight_miss_rate
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

        self.state = SessionState()
        self.machine = SessionMachine()
        self.events = EventEmitter()

    # ------------------------------------------------------------------
    # Queries

    @property
    def phase(self) -> SessionPhase:
        """Get the current session phase."""
        return self.state.phase

    @property
    def running_count(self) -> int:
        """Get the running count of every card revealed so far."""
        return self.state.running_count

    @property
    def true_count(self) -> int:
        """Get the true count at the current shoe depth."""
        return self.state.true_count

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to session events."""
        self.events.subscribe(handler, event_type)

    # ------------------------------------------------------------------
    # Internal helpers

    def _timestamp(self) -> str:
        return self._now().isoformat()

    def _go(self, to_phase: SessionPhase) -> None:
        """Validate and apply a phase change."""
        from_phase = self.machine.transition(to_phase)
        self.state.phase = to_phase
        self.events.emit_new(
            EventType.PHASE_CHANGED,
            from_phase=from_phase.value,
            to_phase=to_phase.value,
        )

    def _require_session(self) -> tuple[Shoe, PromptScheduler]:
        shoe = self.state.shoe
        scheduler = self.state.scheduler
        if self.state.session_id is None or shoe is None or scheduler is None:
            raise NoActiveSessionError("No active session; call start_session first")
        return shoe, scheduler

    def _require_player_turn(self) -> Hand:
        """Return the active hand, or raise if the player cannot act now."""
        self._require_session()
        if self.state.phase != SessionPhase.AWAITING_PLAYER_ACTION:
            raise IllegalActionError(
                f"Player actions need {SessionPhase.AWAITING_PLAYER_ACTION}, "
                f"session is {self.state.phase}"
            )
        hand = self.state.active_hand
        if hand is None or hand.is_resolved:
            raise IllegalActionError("No unresolved hand to act on")
        return hand

    def _count(self, card: Card) -> None:
        self.state.running_count = update_running_count_single(self.state.running_count, card)

    def _draw(self, counted: bool = True) -> Card:
        shoe, _ = self._require_session()
        card = shoe.draw()
        if counted:
            self._count(card)
        logger.debug("Drew %s (counted=%s, rc=%d)", card, counted, self.state.running_count)
        return card

    # ------------------------------------------------------------------
    # Lifecycle

    def start_session(
        self,
        mode: TrainingMode = TrainingMode.COUNTING_DRILL,
        rules: RuleConfig | None = None,
        prompt_type: PromptType = PromptType.RUNNING_COUNT,
    ) -> SessionState:
        """
        Start a new session with a fresh shoe.

        Args:
            mode: Counting drill (auto-resolve) or play-and-count
            rules: Table rules, fixed for the session
            prompt_type: What scheduled prompts ask for (running or true count)

        Returns:
            The new session state
        """
        if prompt_type not in COUNT_PROMPT_TYPES:
            raise ValueError(f"Scheduled prompts ask for a count, not {prompt_type.value}")

        rules = rules or RuleConfig()
        self._go(SessionPhase.READY)

        state = self.state
        state.session_id = self._id_factory()
        state.mode = mode
        state.rules = rules
        state.prompt_type = prompt_type
        state.shoe = Shoe(num_decks=rules.decks, penetration=rules.penetration, rng=self._rng)
        state.scheduler = PromptScheduler(rng=self._rng, tight_miss_rate=self._tight_miss_rate)
        state.running_count = 0
        state.hand_number = 0
        state.hands_played = 0
        state.player_hands = []
        state.dealer_hand = None
        state.active_hand_index = 0
        state.pending_prompt = False
        state.prompt_started_at = None
        state.phase_before_pause = None
        state.count_checks = []
        state.started_at = self._timestamp()
        state.ended_at = None

        logger.info(
            "Session %s started: mode=%s decks=%d h17=%s",
            state.session_id,
            mode.value,
            rules.decks,
            rules.dealer_hits_soft_17,
        )
        self.events.emit_new(
            EventType.SESSION_STARTED,
            session_id=state.session_id,
            mode=mode.value,
            rules=rules.to_dict(),
        )
        return state

    def deal_hand(self) -> SessionState:
        """
        Deal a new hand: player, dealer, player, dealer hole card.

        The hole card stays out of the running count until it is revealed.
        In counting-drill mode, or when the player has blackjack, the hand
        resolves immediately.
        """
        shoe, _ = self._require_session()
        if self.state.phase not in (SessionPhase.READY, SessionPhase.HAND_RESOLVED):
            raise InvalidTransitionError(self.state.phase, SessionPhase.DEALING)
        self._go(SessionPhase.DEALING)

        state = self.state
        if shoe.needs_reshuffle:
            shoe.reshuffle()
            state.running_count = 0
            logger.info("Cut card reached, shoe reshuffled")
            self.events.emit_new(EventType.SHOE_RESHUFFLED)

        state.hand_number += 1
        p1 = self._draw()
        d1 = self._draw()
        p2 = self._draw()
        hole = self._draw(counted=False)

        player = Hand(cards=[p1, p2])
        state.player_hands = [player]
        state.dealer_hand = DealerHand(cards=[d1, hole])
        state.active_hand_index = 0

        self.events.emit_new(
            EventType.HAND_DEALT,
            hand_number=state.hand_number,
            player=[str(p1), str(p2)],
            dealer_upcard=str(d1),
        )

        if player.is_blackjack:
            self.events.emit_new(EventType.PLAYER_BLACKJACK, hand_number=state.hand_number)

        if state.mode == TrainingMode.COUNTING_DRILL or player.is_blackjack:
            self._go(SessionPhase.DEALER_TURN)
            self._finish_round()
        else:
            self._go(SessionPhase.AWAITING_PLAYER_ACTION)
        return state

    def _finish_round(self) -> None:
        """Reveal the hole card, play the dealer out, resolve, maybe prompt."""
        state = self.state
        dealer = state.dealer_hand
        if dealer is None:
            raise NoActiveSessionError("No hand in play")

        dealer.hole_card_revealed = True
        if dealer.hole_card is not None:
            self._count(dealer.hole_card)
        self.events.emit_new(EventType.DEALER_REVEALS, cards=[str(c) for c in dealer.cards])

        live = [h for h in state.player_hands if not h.is_resolved and not h.is_blackjack]
        if live:
            while should_dealer_hit(dealer.cards, state.rules):
                card = self._draw()
                dealer.cards.append(card)
                self.events.emit_new(EventType.DEALER_HITS, card=str(card), value=dealer.value)

        for hand in state.player_hands:
            if not hand.is_resolved:
                hand.resolve(resolve_outcome(hand.cards, dealer.cards, hand.is_split))

        state.hands_played += 1
        self._go(SessionPhase.HAND_RESOLVED)
        self.events.emit_new(
            EventType.HAND_RESOLVED,
            hand_number=state.hand_number,
            outcomes=[h.outcome.value for h in state.player_hands if h.outcome],
            dealer_value=dealer.value,
            running_count=state.running_count,
        )

        _, scheduler = self._require_session()
        if scheduler.on_hand_resolved():
            self._open_prompt()

    def _open_prompt(self) -> None:
        self._go(SessionPhase.COUNT_PROMPT_OPEN)
        self.state.pending_prompt = True
        self.state.prompt_started_at = self._clock()
        logger.info(
            "Count prompt opened after hand %d (%s)",
            self.state.hand_number,
            self.state.prompt_type.value,
        )
        self.events.emit_new(
            EventType.PROMPT_OPENED,
            hand_number=self.state.hand_number,
            prompt_type=self.state.prompt_type.value,
        )

    def _advance_hand(self) -> None:
        """Move to the next split hand, or finish the round."""
        state = self.state
        if state.active_hand_index < len(state.player_hands) - 1:
            state.active_hand_index += 1
            if state.phase != SessionPhase.AWAITING_PLAYER_ACTION:
                self._go(SessionPhase.AWAITING_PLAYER_ACTION)
            return
        self._go(SessionPhase.DEALER_TURN)
        self._finish_round()

    # ------------------------------------------------------------------
    # Player actions

    def player_hit(self) -> SessionState:
        """Player takes another card."""
        hand = self._require_player_turn()
        self._go(SessionPhase.DEALING)

        card = self._draw()
        hand.add_card(card)
        hand.record(Action.HIT)
        self.events.emit_new(EventType.PLAYER_HIT, card=str(card), hand_value=hand.value)

        if hand.is_busted:
            hand.resolve(HandOutcome.LOSS)
            self.events.emit_new(
                EventType.PLAYER_BUSTS, hand_index=self.state.active_hand_index
            )
            self._advance_hand()
        else:
            self._go(SessionPhase.AWAITING_PLAYER_ACTION)
        return self.state

    def player_stand(self) -> SessionState:
        """Player keeps the current hand."""
        hand = self._require_player_turn()
        hand.record(Action.STAND)
        self.events.emit_new(EventType.PLAYER_STAND, hand_value=hand.value)
        self._advance_hand()
        return self.state

    def player_double(self) -> SessionState:
        """Player doubles the bet and takes exactly one card."""
        hand = self._require_player_turn()
        if not can_double(hand):
            raise IllegalActionError("Can only double on the first two cards")
        if hand.is_split and not can_double_after_split(hand, self.state.rules):
            raise IllegalActionError("Double after split is not allowed")
        self._go(SessionPhase.DEALING)

        card = self._draw()
        hand.add_card(card)
        hand.record(Action.DOUBLE)
        hand.is_doubled = True
        hand.bet *= 2
        self.events.emit_new(
            EventType.PLAYER_DOUBLE, card=str(card), hand_value=hand.value, bet=hand.bet
        )

        if hand.is_busted:
            hand.resolve(HandOutcome.LOSS)
            self.events.emit_new(
                EventType.PLAYER_BUSTS, hand_index=self.state.active_hand_index
            )
        self._advance_hand()
        return self.state

    def player_split(self) -> SessionState:
        """
        Player splits a pair into two hands, one new card each.

        The first hand carries the split in its decision log. Split hands
        cannot be split again.
        """
        hand = self._require_player_turn()
        if not can_split(hand):
            raise IllegalActionError("Can only split a two-card pair that was not split")
        self._go(SessionPhase.DEALING)

        first = self._draw()
        second = self._draw()
        hand1 = Hand(cards=[hand.cards[0], first], actions=[Action.SPLIT], is_split=True)
        hand2 = Hand(cards=[hand.cards[1], second], is_split=True)

        index = self.state.active_hand_index
        self.state.player_hands[index:index + 1] = [hand1, hand2]
        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            hand1_value=hand1.value,
            hand2_value=hand2.value,
        )
        self._go(SessionPhase.AWAITING_PLAYER_ACTION)
        return self.state

    def player_surrender(self) -> SessionState:
        """Player gives up the hand (late surrender) and the round ends."""
        hand = self._require_player_turn()
        if not can_surrender(hand, self.state.rules):
            raise IllegalActionError("Surrender is not available for this hand")

        hand.record(Action.SURRENDER)
        hand.resolve(HandOutcome.SURRENDER)
        self.events.emit_new(EventType.PLAYER_SURRENDER)

        self._go(SessionPhase.DEALER_TURN)
        self._finish_round()
        return self.state

    # ------------------------------------------------------------------
    # Strategy prompts

    def best_action(self) -> Action:
        """
        Recommended play for the active hand at the current true count.

        Index plays take priority over basic strategy.
        """
        return self._recommendation()[0]

    def _recommendation(self) -> tuple[Action, Deviation | None]:
        hand = self._require_player_turn()
        dealer = self.state.dealer_hand
        if dealer is None or dealer.upcard is None:
            raise NoActiveSessionError("No hand in play")
        rules = self.state.rules
        deviation = get_deviation_action(
            hand.cards, dealer.upcard, self.state.true_count, rules, hand.is_split
        )
        if deviation is not None:
            return deviation
        return get_basic_strategy_action(hand.cards, dealer.upcard, rules, hand.is_split), None

    def submit_best_action(self, action: Action, response_ms: int = 0) -> CountCheck:
        """
        Record a best-action answer for the active hand.

        The action is only graded, not played. Best-action checks do not
        move prompt cadence.
        """
        expected, deviation = self._recommendation()
        state = self.state
        check = CountCheck(
            session_id=state.session_id or "",
            hand_number=state.hand_number,
            prompt_type=PromptType.BEST_ACTION,
            expected_count=state.running_count,
            entered_count=state.running_count,
            expected_action=expected,
            entered_action=action,
            deviation_name=deviation.name if deviation else None,
            response_ms=max(0, response_ms),
            is_correct=action == expected,
            delta=0,
            created_at=self._timestamp(),
        )
        state.count_checks.append(check)
        self.events.emit_new(
            EventType.PROMPT_SUBMITTED,
            prompt_type=PromptType.BEST_ACTION.value,
            is_correct=check.is_correct,
            expected=expected.value,
            entered=action.value,
        )
        return check

    def insurance_recommended(self) -> bool | None:
        """Whether to insure against the dealer's ace; None when no ace shows."""
        self._require_session()
        dealer = self.state.dealer_hand
        if dealer is None or dealer.upcard is None or not dealer.upcard.is_ace:
            return None
        return should_take_insurance(self.state.true_count)

    # ------------------------------------------------------------------
    # Count prompts

    def submit_count(self, entered_count: int) -> CountCheck:
        """
        Answer the open count prompt.

        Args:
            entered_count: The player's running or true count

        Returns:
            The recorded check

        Raises:
            PromptNotOpenError: If no prompt is open
        """
        _, scheduler = self._require_session()
        state = self.state
        if state.phase != SessionPhase.COUNT_PROMPT_OPEN:
            raise PromptNotOpenError(f"No count prompt is open (phase {state.phase})")

        if state.prompt_type == PromptType.TRUE_COUNT:
            expected = state.true_count
        else:
            expected = state.running_count
        delta = entered_count - expected
        started = state.prompt_started_at
        response_ms = max(0, int(self._clock() - started)) if started is not None else 0

        check = CountCheck(
            session_id=state.session_id or "",
            hand_number=state.hand_number,
            prompt_type=state.prompt_type,
            expected_count=expected,
            entered_count=entered_count,
            response_ms=response_ms,
            is_correct=delta == 0,
            delta=delta,
            created_at=self._timestamp(),
        )
        state.count_checks.append(check)

        scheduler.on_prompt_submitted()
        previous_tier = scheduler.tier
        tier = scheduler.adapt_cadence(
            recent_miss_rate(state.count_checks, self._miss_rate_window)
        )
        if tier != previous_tier:
            self.events.emit_new(EventType.CADENCE_CHANGED, tier=tier.value)

        self._go(SessionPhase.HAND_RESOLVED)
        state.pending_prompt = False
        state.prompt_started_at = None

        logger.info(
            "Count submitted for hand %d: expected %d, entered %d",
            check.hand_number,
            expected,
            entered_count,
        )
        self.events.emit_new(
            EventType.PROMPT_SUBMITTED,
            prompt_type=state.prompt_type.value,
            is_correct=check.is_correct,
            expected=expected,
            entered=entered_count,
            response_ms=response_ms,
        )
        return check

    def dismiss_prompt(self) -> None:
        """Close the open prompt without answering; nothing is recorded."""
        self._require_session()
        if self.state.phase != SessionPhase.COUNT_PROMPT_OPEN:
            raise PromptNotOpenError(f"No count prompt is open (phase {self.state.phase})")
        self._go(SessionPhase.HAND_RESOLVED)
        self.state.pending_prompt = False
        self.state.prompt_started_at = None
        self.events.emit_new(EventType.PROMPT_DISMISSED, hand_number=self.state.hand_number)

    # ------------------------------------------------------------------
    # Pause / end

    def pause(self) -> None:
        """Pause, remembering the phase to return to."""
        self._require_session()
        previous = self.state.phase
        self._go(SessionPhase.PAUSED)
        self.state.phase_before_pause = previous
        self.events.emit_new(EventType.SESSION_PAUSED, phase=previous.value)

    def resume(self) -> None:
        """Return to the phase the session was paused from."""
        self._require_session()
        target = self.state.phase_before_pause
        if self.state.phase != SessionPhase.PAUSED or target is None:
            raise InvalidTransitionError(self.state.phase, target or "previous phase")
        self._go(target)
        self.state.phase_before_pause = None
        self.events.emit_new(EventType.SESSION_RESUMED, phase=target.value)

    def end_session(self) -> SessionRecord | None:
        """
        Complete the session.

        An open prompt is dismissed first. Ending an idle or already
        completed session does nothing and returns None. A session that has
        not dealt a hand yet cannot complete; start a new one instead.

        Returns:
            The record to keep in history

        Raises:
            InvalidTransitionError: If no hand has been dealt yet
        """
        state = self.state
        if state.phase in (SessionPhase.IDLE, SessionPhase.COMPLETED):
            return None
        if state.phase == SessionPhase.READY:
            raise InvalidTransitionError(
                state.phase, SessionPhase.COMPLETED, "deal a hand before ending the session"
            )
        if state.phase == SessionPhase.COUNT_PROMPT_OPEN:
            self.dismiss_prompt()

        self._go(SessionPhase.COMPLETED)
        state.pending_prompt = False
        state.prompt_started_at = None
        state.phase_before_pause = None
        state.ended_at = self._timestamp()

        record = SessionRecord(
            session_id=state.session_id or "",
            mode=state.mode,
            rule_config=state.rules,
            started_at=state.started_at or state.ended_at,
            ended_at=state.ended_at,
            hands_played=state.hands_played,
            count_checks=list(state.count_checks),
            summary=summarize_checks(state.count_checks),
        )
        logger.info(
            "Session %s ended: %d hands, accuracy %.1f%%",
            record.session_id,
            record.hands_played,
            record.summary.accuracy,
        )
        self.events.emit_new(
            EventType.SESSION_ENDED,
            session_id=record.session_id,
            summary=record.summary.to_dict(),
        )
        return record

    def reset_to_idle(self) -> None:
        """Drop the completed session so a new one can start."""
        if self.state.phase == SessionPhase.IDLE:
            return
        self._go(SessionPhase.IDLE)
        self.state = SessionState()
        self.events.clear_history()

    # ------------------------------------------------------------------
    # Persistence

    def snapshot(self) -> SessionSnapshot:
        """Capture the session for autosave."""
        shoe, scheduler = self._require_session()
        state = self.state
        return SessionSnapshot(
            session_id=state.session_id or "",
            phase=state.phase,
            phase_before_pause=state.phase_before_pause,
            mode=state.mode,
            prompt_type=state.prompt_type,
            rule_config=state.rules,
            running_count=state.running_count,
            hand_number=state.hand_number,
            hands_played=state.hands_played,
            player_hands=[Hand.from_dict(h.to_dict()) for h in state.player_hands],
            dealer_hand=(
                DealerHand.from_dict(state.dealer_hand.to_dict()) if state.dealer_hand else None
            ),
            active_hand_index=state.active_hand_index,
            count_checks=list(state.count_checks),
            pending_prompt=state.pending_prompt,
            prompt_started_at=state.prompt_started_at,
            shoe_state=shoe.serialize(),
            scheduler_state=scheduler.serialize(),
            started_at=state.started_at or self._timestamp(),
            saved_at=self._timestamp(),
        )

    @classmethod
    def restore(
        cls,
        snapshot: SessionSnapshot,
        rng: Random | None = None,
        clock: Callable[[], float] | None = None,
        now: Callable[[], datetime] | None = None,
        miss_rate_window: int = DEFAULT_MISS_RATE_WINDOW,
        tight_miss_rate: float = TIGHT_MISS_RATE,
    ) -> "SessionController":
        """
        Rebuild a controller from a snapshot.

        The shoe keeps its saved card order and the scheduler its counter,
        so play continues exactly where it stopped.
        """
        controller = cls(
            rng=rng,
            clock=clock,
            now=now,
            miss_rate_window=miss_rate_window,
            tight_miss_rate=tight_miss_rate,
        )
        controller.machine = SessionMachine(initial=snapshot.phase)
        controller.state = SessionState(
            session_id=snapshot.session_id,
            phase=snapshot.phase,
            mode=snapshot.mode,
            rules=snapshot.rule_config,
            prompt_type=snapshot.prompt_type,
            shoe=Shoe.from_state(snapshot.shoe_state, rng=controller._rng),
            scheduler=PromptScheduler.from_state(
                snapshot.scheduler_state,
                rng=controller._rng,
                tight_miss_rate=tight_miss_rate,
            ),
            running_count=snapshot.running_count,
            hand_number=snapshot.hand_number,
            hands_played=snapshot.hands_played,
            player_hands=[Hand.from_dict(h.to_dict()) for h in snapshot.player_hands],
            dealer_hand=(
                DealerHand.from_dict(snapshot.dealer_hand.to_dict())
                if snapshot.dealer_hand
                else None
            ),
            active_hand_index=snapshot.active_hand_index,
            pending_prompt=snapshot.pending_prompt,
            prompt_started_at=snapshot.prompt_started_at,
            phase_before_pause=snapshot.phase_before_pause,
            count_checks=list(snapshot.count_checks),
            started_at=snapshot.started_at,
        )
        logger.info("Session %s restored in phase %s", snapshot.session_id, snapshot.phase)
        return controller
