"""Win probability estimation using Monte Carlo simulation."""

import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Sequence

from treys import Card as TreysCard
from treys import Evaluator

from .card import Card
from .deck import Deck
from .errors import InputError

logger = logging.getLogger(__name__)

DEFAULT_SIMULATIONS = 2000
VALID_BOARD_SIZES = (0, 3, 4, 5)

_EVALUATOR = Evaluator()


@dataclass
class EquityResult:
    """Result of an equity calculation."""

    win_rate: float       # Probability of beating every opponent (0-1)
    tie_rate: float       # Probability of splitting the best hand (0-1)
    lose_rate: float      # Probability of losing (0-1)
    simulations: int      # Number of simulations run
    hand_distribution: dict[str, int]  # How often each hand class was made

    @property
    def win_percent(self) -> float:
        """Win rate as percentage."""
        return self.win_rate * 100

    @property
    def equity(self) -> float:
        """Total equity (wins + half of ties) as percentage."""
        return (self.win_rate + self.tie_rate / 2) * 100


def _treys(cards: Sequence[Card]) -> list[int]:
    return [TreysCard.new(c.code) for c in cards]


def _validate(hero_cards: list[Card], community: list[Card], num_players: int) -> None:
    if len(hero_cards) != 2:
        raise InputError("Hand must have exactly 2 hole cards")
    if len(community) not in VALID_BOARD_SIZES:
        raise InputError(f"Board must have 0, 3, 4 or 5 cards, got {len(community)}")
    known = hero_cards + community
    if len(set(known)) != len(known):
        raise InputError("Duplicate cards in hand/board")
    if num_players < 2:
        raise InputError(f"Need at least 2 players, got {num_players}")
    if 2 * num_players + 5 > 52:
        raise InputError(f"Too many players for one deck: {num_players}")


def calculate_equity(
    hero_cards: Sequence[Card],
    community: Sequence[Card] | None = None,
    num_players: int = 2,
    num_simulations: int = DEFAULT_SIMULATIONS,
    rng: random.Random | None = None,
) -> EquityResult:
    """Estimate how often the hero's hand beats every other player.

    Args:
        hero_cards: Your hole cards (2 cards)
        community: Known community cards (0, 3, 4 or 5), or None for none
        num_players: Players contesting the pot, including you
        num_simulations: Number of random completions to run
        rng: Random source; a fresh unseeded one by default

    Returns:
        EquityResult with win/tie/lose rates
    """
    hero_cards = list(hero_cards)
    community = list(community) if community else []
    _validate(hero_cards, community, num_players)
    if num_simulations < 1:
        raise InputError("num_simulations must be positive")

    deck = Deck(excluded=frozenset(hero_cards + community), rng=rng or random.Random())
    hero = _treys(hero_cards)
    board = _treys(community)
    cards_needed = 5 - len(community)

    wins = 0
    ties = 0
    classes: Counter[str] = Counter()

    for _ in range(num_simulations):
        deck.reset()
        deck.shuffle()

        opponents = [_treys(deck.deal(2)) for _ in range(num_players - 1)]
        sim_board = board + _treys(deck.deal(cards_needed))

        # treys scores: lower is stronger
        hero_score = _EVALUATOR.evaluate(hero, sim_board)
        best_opponent = min(_EVALUATOR.evaluate(opp, sim_board) for opp in opponents)

        classes[_EVALUATOR.class_to_string(_EVALUATOR.get_rank_class(hero_score))] += 1

        if hero_score < best_opponent:
            wins += 1
        elif hero_score == best_opponent:
            ties += 1

    result = EquityResult(
        win_rate=wins / num_simulations,
        tie_rate=ties / num_simulations,
        lose_rate=(num_simulations - wins - ties) / num_simulations,
        simulations=num_simulations,
        hand_distribution=dict(classes),
    )
    logger.debug(
        "equity %s | %s vs %d: win=%.3f tie=%.3f (%d sims)",
        " ".join(c.code for c in hero_cards),
        " ".join(c.code for c in community) or "-",
        num_players - 1,
        result.win_rate,
        result.tie_rate,
        num_simulations,
    )
    return result


def evaluate_odds(
    hand: Sequence[Card],
    community: Sequence[Card],
    num_players: int,
    num_simulations: int = DEFAULT_SIMULATIONS,
    rng: random.Random | None = None,
) -> float:
    """Win probability in [0, 1] for the hand against the field."""
    return calculate_equity(hand, community, num_players, num_simulations, rng).win_rate


def equity_oracle(
    num_simulations: int = DEFAULT_SIMULATIONS, seed: int | None = None
) -> Callable[[Sequence[Card], Sequence[Card], int], float]:
    """An ``evaluate_odds`` bound to a trial count and one random stream."""
    rng = random.Random(seed)

    def oracle(hand: Sequence[Card], community: Sequence[Card], num_players: int) -> float:
        return evaluate_odds(hand, community, num_players, num_simulations, rng)

    return oracle
