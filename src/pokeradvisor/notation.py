"""Card notation and amount parsing for raw driver input."""

import math
import re
from typing import Iterable

from .card import Card
from .errors import InputError

# Rank 1-13 or letter, then a suit letter or its French abbreviation
# (coeur, carreau, trèfle, pique).
_CARD_RE = re.compile(r"^(?:(1[0-3]|[1-9])|([akqjt]))(co|ca|tr|pi|h|d|c|s)$")

_NUMERIC_RANKS = {"1": "A", "10": "T", "11": "J", "12": "Q", "13": "K"}

_SUITS = {
    "co": "h",
    "h": "h",
    "ca": "d",
    "d": "d",
    "tr": "c",
    "c": "c",
    "pi": "s",
    "s": "s",
}


def normalize_card(token: str) -> str:
    """Canonicalize a card token, e.g. '13pi' -> 'Ks', '10h' -> 'Th'.

    Tokens that match no known rank+suit pattern are returned unchanged;
    callers decide whether to reject them.
    """
    m = _CARD_RE.match(token.strip().lower())
    if not m:
        return token

    numeric, letter, suit = m.groups()
    if numeric:
        rank = _NUMERIC_RANKS.get(numeric, numeric)
    else:
        rank = letter.upper()
    return rank + _SUITS[suit]


def split_tokens(text: str | Iterable[str]) -> list[str]:
    """Split space or comma separated text into tokens."""
    if isinstance(text, str):
        return text.replace(",", " ").split()
    return [t for t in (str(x).strip() for x in text) if t]


def parse_cards(text: str | Iterable[str]) -> list[Card]:
    """Parse card tokens in any supported notation."""
    cards = []
    for token in split_tokens(text):
        try:
            cards.append(Card.from_str(normalize_card(token)))
        except ValueError:
            raise InputError(f"Unrecognized card: {token!r}") from None
    return cards


def parse_amount(value: str | int | float | None) -> int | None:
    """Parse a chip amount. Supports a 'k' suffix (2k = 2000).

    Returns None for a missing (None or blank) value. Fractions are floored.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise InputError(f"Invalid amount: {value!r}")
    if isinstance(value, (int, float)):
        number = float(value)
    elif not isinstance(value, str):
        raise InputError(f"Invalid amount: {value!r}")
    else:
        text = value.strip().lower().replace(",", "")
        if not text:
            return None
        multiplier = 1
        if text.endswith("k"):
            multiplier = 1000
            text = text[:-1]
        try:
            number = float(text) * multiplier
        except ValueError:
            raise InputError(f"Invalid amount: {value!r}") from None

    if not math.isfinite(number):
        raise InputError(f"Invalid amount: {value!r}")
    if number < 0:
        raise InputError(f"Amount must not be negative: {value!r}")
    return int(number)
