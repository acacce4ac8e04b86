"""The structured input record every driver produces, and how raw fields become one."""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .card import Card
from .errors import InputError
from .notation import parse_amount, parse_cards

DEFAULT_NUM_PLAYERS = 2
DEFAULT_POT = 0
DEFAULT_MIN_BET = 0
DEFAULT_BANKROLL = 0


@dataclass(frozen=True)
class StreetInput:
    """What a driver observed at the table for one street.

    ``community`` holds only the cards revealed on this street (3 on the
    flop, 1 on turn and river). ``hand`` and ``bankroll`` may be None after
    preflop, meaning "unchanged".
    """

    hand: tuple[Card, ...] | None = None
    community: tuple[Card, ...] = ()
    pot: int = DEFAULT_POT
    min_bet: int = DEFAULT_MIN_BET
    num_players: int = DEFAULT_NUM_PLAYERS
    bankroll: int | None = None


def parse_hand(tokens: str | Iterable[str]) -> tuple[Card, ...]:
    """Parse exactly two distinct hole cards."""
    cards = parse_cards(tokens)
    if len(cards) != 2:
        raise InputError(f"Hand must contain exactly 2 cards, got {len(cards)}")
    if cards[0] == cards[1]:
        raise InputError(f"Hand has the same card twice: {cards[0]}")
    return tuple(cards)


def parse_num_players(value: Any) -> int | None:
    count = parse_amount(value)
    if count is not None and count < 2:
        raise InputError(f"Need at least 2 players, got {count}")
    return count


def _present(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def parse_street_input(data: Mapping[str, Any], *, need_hand: bool = False) -> StreetInput:
    """Build a StreetInput from raw driver fields.

    Keys follow the wire format: ``hand``, ``community``, ``pot``,
    ``minBet``, ``numPlayers``, ``bankroll``. Missing fields take the
    defaults; fields that are present but unparseable are rejected.

    Raises:
        InputError: with a descriptive reason.
    """
    if need_hand and not _present(data, "hand"):
        raise InputError("Hand must contain exactly 2 cards, got 0")
    hand = parse_hand(data["hand"]) if _present(data, "hand") else None
    community = tuple(parse_cards(data["community"])) if _present(data, "community") else ()

    pot = parse_amount(data.get("pot"))
    min_bet = parse_amount(data.get("minBet"))
    num_players = parse_num_players(data.get("numPlayers"))
    bankroll = parse_amount(data.get("bankroll"))

    return StreetInput(
        hand=hand,
        community=community,
        pot=DEFAULT_POT if pot is None else pot,
        min_bet=DEFAULT_MIN_BET if min_bet is None else min_bet,
        num_players=DEFAULT_NUM_PLAYERS if num_players is None else num_players,
        bankroll=bankroll,
    )
