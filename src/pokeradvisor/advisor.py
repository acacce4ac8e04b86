"""Single-shot pipeline: validate the table state, estimate equity, apply the policy."""

from typing import Callable, Sequence

from .action import Decision
from .calculator import equity_oracle
from .card import Card
from .errors import InputError
from .policy import PolicyConfig, RandomSource, Street, StreetContext, decide

Oracle = Callable[[Sequence[Card], Sequence[Card], int], float]


def check_cards(hand: Sequence[Card], community: Sequence[Card]) -> None:
    """Reject degenerate hands and boards before the oracle sees them."""
    if len(hand) != 2:
        raise InputError(f"Hand must contain exactly 2 cards, got {len(hand)}")
    if len(community) > 5:
        raise InputError(f"Board can have at most 5 cards, got {len(community)}")
    seen: set[Card] = set()
    for c in [*hand, *community]:
        if c in seen:
            raise InputError(f"Card {c} appears twice")
        seen.add(c)


def recommend(
    hand: Sequence[Card],
    community: Sequence[Card],
    pot: int,
    min_bet: int,
    num_players: int,
    bankroll: int,
    config: PolicyConfig,
    *,
    street: StreetContext | None = None,
    oracle: Oracle | None = None,
    rng: RandomSource | None = None,
) -> Decision:
    """Recommend an action for one table state.

    The street is inferred from the board size unless given explicitly.

    Raises:
        InputError: if the hand, board or player count cannot be evaluated.
    """
    check_cards(hand, community)
    if street is None:
        street = StreetContext(Street.for_board(len(community)))
    elif len(community) != street.street.board_size:
        raise InputError(
            f"{street.street.value} needs {street.street.board_size} board cards, got {len(community)}"
        )
    if num_players < 2:
        raise InputError(f"Need at least 2 players, got {num_players}")

    oracle = oracle or equity_oracle()
    win_probability = oracle(hand, community, num_players)
    return decide(win_probability, street, pot, min_bet, num_players, bankroll, config, rng)
