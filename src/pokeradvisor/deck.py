"""Deck of cards for equity simulation."""

import random
from dataclasses import dataclass, field

from .card import Card, Rank, Suit


@dataclass
class Deck:
    """A standard 52-card deck minus any excluded (known) cards."""

    excluded: frozenset[Card] = frozenset()
    rng: random.Random = field(default_factory=random.Random, repr=False)
    cards: list[Card] = field(init=False)
    _unseen: list[Card] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._unseen = [
            c for c in (Card(rank, suit) for suit in Suit for rank in Rank)
            if c not in self.excluded
        ]
        self.reset()

    def reset(self) -> None:
        """Restore every non-excluded card, in a fixed order."""
        self.cards = list(self._unseen)

    def shuffle(self) -> None:
        """Shuffle the remaining cards."""
        self.rng.shuffle(self.cards)

    def deal(self, n: int = 1) -> list[Card]:
        """Deal n cards from the top of the deck."""
        if n > len(self.cards):
            raise ValueError(f"Cannot deal {n} cards, only {len(self.cards)} remaining")
        return [self.cards.pop() for _ in range(n)]
