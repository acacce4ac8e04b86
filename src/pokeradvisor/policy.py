"""Decision policy. Turns a win probability plus table context into an action."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .action import ActionType, Decision
from .errors import InputError

logger = logging.getLogger(__name__)

FOLD_THRESHOLD = 0.18
CALL_THRESHOLD = 0.40


class RandomSource(Protocol):
    """Uniform random numbers in [0, 1) for the bluff draw."""

    def next(self) -> float: ...


class StdlibRandom:
    """RandomSource backed by :class:`random.Random`."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def next(self) -> float:
        return self._rng.random()


@dataclass(frozen=True)
class PolicyConfig:
    """Tunable knobs for the policy.

    Attributes:
        aggressiveness: > 0. 1 is normal; higher lowers the raise bar and
            enlarges postflop raises.
        bluffing_enabled: Whether the postflop bluff branches may fire.
        bluff_frequency: Chance (0-1) of bluffing when a bluff spot arises.
    """

    aggressiveness: float = 1.0
    bluffing_enabled: bool = True
    bluff_frequency: float = 0.5

    def __post_init__(self) -> None:
        if not self.aggressiveness > 0:
            raise ValueError(f"aggressiveness must be > 0, got {self.aggressiveness}")
        if not 0.0 <= self.bluff_frequency <= 1.0:
            raise ValueError(f"bluff_frequency must be in [0, 1], got {self.bluff_frequency}")

    @property
    def raise_threshold(self) -> float:
        return 0.33 - 0.10 * (self.aggressiveness - 1)

    @property
    def style_label(self) -> str:
        if self.aggressiveness <= 0.5:
            style = "Cautious"
        elif self.aggressiveness <= 1:
            style = "Normal"
        else:
            style = "Aggressive"
        bluff = "bluff enabled" if self.bluffing_enabled else "bluff disabled"
        return f"{style} ({bluff})"


class Street(Enum):
    """Betting rounds, in order."""

    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"

    @property
    def new_cards(self) -> int:
        """Community cards revealed when this street starts."""
        return {"preflop": 0, "flop": 3, "turn": 1, "river": 1}[self.value]

    @property
    def board_size(self) -> int:
        """Community cards on the table during this street."""
        return {"preflop": 0, "flop": 3, "turn": 4, "river": 5}[self.value]

    @classmethod
    def for_board(cls, size: int) -> Street:
        for street in cls:
            if street.board_size == size:
                return street
        raise InputError(f"Board must have 0, 3, 4 or 5 cards, got {size}")


@dataclass(frozen=True)
class StreetContext:
    """Which street a decision is for, and whether it answers a raise."""

    street: Street
    is_reraise_sub_step: bool = False

    @property
    def is_preflop(self) -> bool:
        return self.street is Street.PREFLOP

    @property
    def label(self) -> str:
        if self.is_reraise_sub_step:
            return f"{self.street.value}-raise"
        return self.street.value


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def _scaled_raise(win_probability: float, raise_threshold: float, min_bet: int, max_raise: int) -> int:
    """Interpolate between min_bet and max_raise by how far equity clears the raise bar."""
    factor = _clamp01((win_probability - raise_threshold) / (1 - raise_threshold))
    amount = math.floor(min_bet + factor * (max_raise - min_bet))
    return max(amount, min_bet)


def _validate(
    win_probability: float, pot: int, min_bet: int, num_players: int, bankroll: int
) -> None:
    if not 0.0 <= win_probability <= 1.0:
        raise InputError(f"win probability must be in [0, 1], got {win_probability}")
    for name, value in (("pot", pot), ("minBet", min_bet), ("bankroll", bankroll)):
        if value < 0:
            raise InputError(f"{name} must not be negative, got {value}")
    if num_players < 2:
        raise InputError(f"Need at least 2 players, got {num_players}")


def decide(
    win_probability: float,
    street: StreetContext,
    pot: int,
    min_bet: int,
    num_players: int,
    bankroll: int,
    config: PolicyConfig,
    rng: RandomSource | None = None,
) -> Decision:
    """Recommend an action and amount.

    Deterministic except for the bluff draws, which come from ``rng``
    (a fresh :class:`StdlibRandom` when omitted).

    Raises:
        InputError: on out-of-range arguments.
    """
    _validate(win_probability, pot, min_bet, num_players, bankroll)
    rng = rng or StdlibRandom()

    if street.is_preflop:
        decision = _preflop(win_probability, pot, min_bet, bankroll, config)
    else:
        decision = _postflop(win_probability, pot, min_bet, num_players, bankroll, config, rng)

    logger.debug(
        "%s p=%.3f pot=%d minBet=%d players=%d bankroll=%d -> %s (%s)",
        street.label, win_probability, pot, min_bet, num_players, bankroll,
        decision, decision.reason,
    )
    return decision


# ── Preflop ──────────────────────────────────────────────────


def _preflop(p: float, pot: int, min_bet: int, bankroll: int, config: PolicyConfig) -> Decision:
    if p < FOLD_THRESHOLD:
        return Decision(ActionType.FOLD, 0, p, "Preflop equity too low")

    if p < CALL_THRESHOLD:
        if min_bet == 0:
            return Decision(ActionType.CHECK, 0, p, "Marginal preflop hand, free to see the flop")
        return Decision(ActionType.CALL, min_bet, p, "Marginal preflop hand, calling")

    max_raise = min(math.floor(pot * 0.5), math.floor(bankroll * 0.3))
    amount = _scaled_raise(p, config.raise_threshold, min_bet, max_raise)
    return Decision(ActionType.RAISE, amount, p, "Strong preflop hand")


# ── Postflop ─────────────────────────────────────────────────


def _postflop(
    p: float,
    pot: int,
    min_bet: int,
    num_players: int,
    bankroll: int,
    config: PolicyConfig,
    rng: RandomSource,
) -> Decision:
    bluff_frequency = config.bluff_frequency
    if num_players > 2:
        bluff_frequency *= 0.5
    raise_threshold = config.raise_threshold

    if p < FOLD_THRESHOLD and min_bet > 0:
        if config.bluffing_enabled and rng.next() < bluff_frequency:
            amount = max(math.floor(pot * 0.5), min_bet * 2)
            if amount > bankroll * 0.5:
                amount = math.floor(bankroll * 0.5)
            if amount <= 0:
                amount = max(min_bet, 1)
            return Decision(ActionType.RAISE_BLUFF, amount, p, "Weak hand facing a bet, bluff-raising")
        return Decision(ActionType.FOLD, 0, p, "Weak hand facing a bet")

    if p < CALL_THRESHOLD:
        if config.bluffing_enabled and min_bet == 0 and rng.next() < bluff_frequency:
            amount = max(min(math.floor(pot * 0.5), math.floor(bankroll * 0.3)), 1)
            return Decision(ActionType.BET_BLUFF, amount, p, "Unopened pot, bluffing on initiative")
        if min_bet <= pot * 0.15 and min_bet <= bankroll * 0.10:
            if min_bet == 0:
                return Decision(ActionType.CHECK, 0, p, "Marginal hand, checking")
            return Decision(ActionType.CALL, min_bet, p, "Marginal hand, bet is cheap")
        return Decision(ActionType.FOLD, 0, p, "Marginal hand, bet too large")

    min_bet_pct = min_bet / bankroll if bankroll > 0 else 1.0
    if p >= raise_threshold:
        if min_bet_pct > 0.5:
            return Decision(ActionType.FOLD, 0, p, "Bet too large relative to bankroll")
        if min_bet_pct > 0.3:
            return Decision(ActionType.CALL, min_bet, p, "Strong hand, raising too risky for bankroll")
        aggr = config.aggressiveness
        max_raise = min(math.floor(pot * 0.8 * aggr), math.floor(bankroll * 0.5 * aggr))
        amount = _scaled_raise(p, raise_threshold, min_bet, max_raise)
        return Decision(ActionType.RAISE, amount, p, "Strong hand, value raise")

    # Only reachable when the raise bar sits above the call threshold.
    if min_bet <= bankroll * 0.20:
        return Decision(ActionType.CALL, min_bet, p, "Decent hand, affordable call")
    return Decision(ActionType.FOLD, 0, p, "Decent hand, call too expensive")
