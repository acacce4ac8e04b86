"""Pokeradvisor - betting decisions for Texas Hold'em from estimated equity."""

__version__ = "0.1.0"

from .action import ActionType, Decision
from .advisor import recommend
from .calculator import EquityResult, calculate_equity, equity_oracle, evaluate_odds
from .card import Card, Rank, Suit, card
from .config import Config, get_config
from .errors import InputError, SessionStateError
from .history import AuditLog, JsonFileAuditLog, MemoryAuditLog, SessionRecord, Step
from .inputs import StreetInput, parse_street_input
from .notation import normalize_card, parse_amount, parse_cards
from .policy import PolicyConfig, RandomSource, StdlibRandom, Street, StreetContext, decide
from .session import HandSession, SessionState

__all__ = [
    "ActionType",
    "AuditLog",
    "Card",
    "Config",
    "Decision",
    "EquityResult",
    "HandSession",
    "InputError",
    "JsonFileAuditLog",
    "MemoryAuditLog",
    "PolicyConfig",
    "RandomSource",
    "Rank",
    "SessionRecord",
    "SessionState",
    "SessionStateError",
    "StdlibRandom",
    "Step",
    "Street",
    "StreetContext",
    "StreetInput",
    "Suit",
    "calculate_equity",
    "card",
    "decide",
    "equity_oracle",
    "evaluate_odds",
    "get_config",
    "normalize_card",
    "parse_amount",
    "parse_cards",
    "parse_street_input",
    "recommend",
]
