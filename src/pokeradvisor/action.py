"""Action types and the policy's decision output."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Actions the advisor can recommend."""

    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    RAISE = "raise"
    RAISE_BLUFF = "raise_bluff"
    BET_BLUFF = "bet_bluff"

    @property
    def label(self) -> str:
        if self is ActionType.RAISE_BLUFF:
            return "Raise (bluff)"
        if self is ActionType.BET_BLUFF:
            return "Bet (bluff)"
        return self.value.capitalize()

    @property
    def puts_chips_in(self) -> bool:
        return self not in (ActionType.FOLD, ActionType.CHECK)


@dataclass(frozen=True)
class Decision:
    """The recommended action.

    Attributes:
        action: What to do.
        amount: Chips to put in; always 0 for fold and check.
        win_probability: The equity estimate the decision was based on.
        reason: Short explanation of the branch taken.
    """

    action: ActionType
    amount: int
    win_probability: float
    reason: str = ""

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Decision amount must be non-negative, got {self.amount}")
        if not self.action.puts_chips_in and self.amount != 0:
            raise ValueError(f"{self.action.label} cannot carry an amount")

    def __str__(self) -> str:
        if self.action.puts_chips_in:
            return f"{self.action.label} {self.amount}"
        return self.action.label

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "amount": self.amount,
            "winProbability": self.win_probability,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Decision:
        return cls(
            action=ActionType(data["action"]),
            amount=int(data["amount"]),
            win_probability=float(data["winProbability"]),
            reason=data.get("reason", ""),
        )
