"""Validation outcomes — a single failure kind, or a validated signal."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from trading_signals.models.signal import ValidatedSignal

FailureKind = Literal[
    "MalformedPrice",
    "TooManyTakeProfits",
    "EntryEqualsStop",
    "InvalidStopDirection",
    "InvalidTakeProfitDirection",
]


@dataclass(frozen=True)
class ValidationFailure:
    """Why a draft was rejected.

    *field* names the offending input (``entry``, ``stop_loss`` or
    ``take_profits``); *index* is set for take-profit failures.
    """

    kind: FailureKind
    message: str
    field: str | None = None
    index: int | None = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "field": self.field,
            "index": self.index,
            "detail": self.message,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Either ``signal`` or ``failure`` is set, never both."""

    signal: ValidatedSignal | None = None
    failure: ValidationFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None
