"""Hand session state machine that threads one hand through the streets."""

import logging
import threading
import uuid
from enum import Enum
from typing import Any, Mapping

from .action import Decision
from .advisor import Oracle, check_cards, recommend
from .card import Card
from .errors import InputError, SessionStateError
from .history import AuditLog, MemoryAuditLog, SessionRecord, Step
from .inputs import StreetInput, parse_street_input
from .policy import PolicyConfig, RandomSource, Street, StreetContext

logger = logging.getLogger(__name__)

STREETS = list(Street)


class SessionState(Enum):
    """Where the hand is. Moves forward only."""

    NEW = "new"
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    CLOSED = "closed"


class HandSession:
    """Drives one hand: preflop -> flop -> turn -> river -> closed.

    Each call to :meth:`advance_street` supplies the next street's table
    state and produces one decision; :meth:`report_raise` re-decides the
    current postflop street after an opponent raised. Every decision is
    recorded to the audit log. A fold does not end the session; whether to
    keep going is the driver's call.

    Calls on one session are serialized by an internal lock.
    """

    def __init__(
        self,
        config: PolicyConfig | None = None,
        *,
        oracle: Oracle | None = None,
        audit_log: AuditLog | None = None,
        rng: RandomSource | None = None,
        session_id: str | None = None,
    ) -> None:
        self.config = config or PolicyConfig()
        self._oracle = oracle
        self._rng = rng
        self.audit_log = audit_log if audit_log is not None else MemoryAuditLog()
        self.record = SessionRecord(id=session_id or str(uuid.uuid4()))
        self.state = SessionState.NEW

        self.hand: tuple[Card, ...] = ()
        self.community: list[Card] = []
        self.pot = 0
        self.min_bet = 0
        self.num_players = 2
        self.bankroll = 0

        self._raised_on: set[Street] = set()
        self._lock = threading.Lock()

        self.audit_log.open_session(self.record)

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def steps(self) -> list[Step]:
        return list(self.record.steps)

    @property
    def current_street(self) -> Street | None:
        if self.state in (SessionState.NEW, SessionState.CLOSED):
            return None
        return Street(self.state.value)

    @property
    def next_street(self) -> Street | None:
        if self.state is SessionState.NEW:
            return Street.PREFLOP
        current = self.current_street
        if current is None or current is Street.RIVER:
            return None
        return STREETS[STREETS.index(current) + 1]

    # ── Transitions ──────────────────────────────────────────

    def advance_street(self, street: Street, raw: StreetInput | Mapping[str, Any]) -> Step:
        """Move to ``street`` with the table state observed there and decide.

        Raises:
            SessionStateError: if ``street`` is not the next one.
            InputError: if the input is malformed; the session is unchanged.
        """
        with self._lock:
            expected = self.next_street
            if self.state is SessionState.CLOSED:
                raise SessionStateError("Session is closed")
            if street is not expected:
                raise SessionStateError(
                    f"Expected {expected.value if expected else 'no more streets'}, got {street.value}"
                )

            is_preflop = street is Street.PREFLOP
            if isinstance(raw, StreetInput):
                data = raw
            else:
                data = parse_street_input(raw, need_hand=is_preflop)

            hand = self._resolve_hand(data, is_preflop)
            if len(data.community) != street.new_cards:
                raise InputError(
                    f"{street.value} reveals {street.new_cards} card(s), got {len(data.community)}"
                )
            community = [*self.community, *data.community]
            check_cards(hand, community)
            if data.num_players < 2:
                raise InputError(f"Need at least 2 players, got {data.num_players}")

            bankroll = self.bankroll if data.bankroll is None else data.bankroll
            context = StreetContext(street)
            decision = self._decide(hand, community, data.pot, data.min_bet, data.num_players, bankroll, context)

            self.hand = hand
            self.community = community
            self.pot = data.pot
            self.min_bet = data.min_bet
            self.num_players = data.num_players
            self.bankroll = bankroll
            self.state = SessionState(street.value)
            logger.info("session %s: %s -> %s", self.id, street.value, decision)

            return self._record(context, decision)

    def report_raise(self, street: Street, new_min_bet: int, new_num_players: int) -> Step:
        """Re-decide the current postflop street after someone raised.

        Raises:
            SessionStateError: on preflop, for a street other than the current
                one, or when a raise was already reported for this street.
            InputError: on a negative bet or fewer than 2 players.
        """
        with self._lock:
            if self.state is SessionState.CLOSED:
                raise SessionStateError("Session is closed")
            if street is Street.PREFLOP:
                raise SessionStateError("Raises are not tracked preflop")
            if street is not self.current_street:
                raise SessionStateError(f"{street.value} is not the current street")
            if street in self._raised_on:
                raise SessionStateError(f"A raise was already reported on the {street.value}")
            if new_min_bet < 0:
                raise InputError(f"minBet must not be negative, got {new_min_bet}")
            if new_num_players < 2:
                raise InputError(f"Need at least 2 players, got {new_num_players}")

            context = StreetContext(street, is_reraise_sub_step=True)
            decision = self._decide(
                self.hand, self.community, self.pot, new_min_bet, new_num_players, self.bankroll, context
            )

            self.min_bet = new_min_bet
            self.num_players = new_num_players
            self._raised_on.add(street)
            logger.info("session %s: %s -> %s", self.id, context.label, decision)

            return self._record(context, decision)

    def close(self) -> None:
        """End the session. Further calls raise SessionStateError."""
        with self._lock:
            self.state = SessionState.CLOSED
            self.audit_log.close_session(self.id)

    # ── Helpers ──────────────────────────────────────────────

    def _resolve_hand(self, data: StreetInput, is_preflop: bool) -> tuple[Card, ...]:
        if is_preflop:
            if data.hand is None:
                raise InputError("Hand must contain exactly 2 cards, got 0")
            return data.hand
        if data.hand is not None and set(data.hand) != set(self.hand):
            raise InputError("Hand cannot change during a session")
        return self.hand

    def _decide(
        self,
        hand: tuple[Card, ...],
        community: list[Card],
        pot: int,
        min_bet: int,
        num_players: int,
        bankroll: int,
        context: StreetContext,
    ) -> Decision:
        return recommend(
            hand,
            community,
            pot,
            min_bet,
            num_players,
            bankroll,
            self.config,
            street=context,
            oracle=self._oracle,
            rng=self._rng,
        )

    def _record(self, context: StreetContext, decision: Decision) -> Step:
        step = Step(
            street=context.label,
            hand=tuple(c.code for c in self.hand),
            community=tuple(c.code for c in self.community),
            pot=self.pot,
            min_bet=self.min_bet,
            num_players=self.num_players,
            bankroll=self.bankroll,
            decision=decision,
        )
        self.record.steps.append(step)
        self.audit_log.record_step(self.id, step)
        return step
