"""Card representations for poker."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Self


class Suit(IntEnum):
    """Card suits. Values don't affect hand ranking."""

    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3

    @property
    def letter(self) -> str:
        """Canonical lowercase suit letter."""
        return "cdhs"[self.value]

    @property
    def symbol(self) -> str:
        """Unicode symbol for the suit."""
        return ["♣", "♦", "♥", "♠"][self.value]

    def __str__(self) -> str:
        return self.letter


class Rank(IntEnum):
    """Card ranks. Higher value = higher rank."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def letter(self) -> str:
        """Single-character rank, 'T' for ten."""
        if self.value <= 9:
            return str(self.value)
        return {10: "T", 11: "J", 12: "Q", 13: "K", 14: "A"}[self.value]

    def __str__(self) -> str:
        return self.letter


_RANKS = {rank.letter: rank for rank in Rank}
_SUITS = {suit.letter: suit for suit in Suit}


@dataclass(frozen=True, slots=True)
class Card:
    """A playing card with rank and suit."""

    rank: Rank
    suit: Suit

    @property
    def code(self) -> str:
        """Canonical two-character code, e.g. 'Ah', 'Td'."""
        return f"{self.rank.letter}{self.suit.letter}"

    @property
    def pretty(self) -> str:
        return f"{self.rank.letter}{self.suit.symbol}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Card({self.code})"

    @classmethod
    def from_str(cls, s: str) -> Self:
        """Parse a canonical card code like 'As', 'kh', 'Td'.

        Shorthand notations ('10d', '13pi') go through
        :func:`pokeradvisor.notation.normalize_card` first.
        """
        s = s.strip()
        if len(s) != 2:
            raise ValueError(f"Invalid card string: {s!r}")

        rank = _RANKS.get(s[0].upper())
        if rank is None:
            raise ValueError(f"Invalid rank: {s[0]!r}")
        suit = _SUITS.get(s[1].lower())
        if suit is None:
            raise ValueError(f"Invalid suit: {s[1]!r}")

        return cls(rank=rank, suit=suit)


def card(s: str) -> Card:
    """Shorthand for Card.from_str()."""
    return Card.from_str(s)
