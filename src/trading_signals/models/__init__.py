"""Pydantic domain models."""

from trading_signals.models.audit import AuditEntry
from trading_signals.models.signal import (
    LONG_SIDES,
    MAX_TAKE_PROFITS,
    RiskTag,
    Signal,
    SignalDraft,
    SignalRead,
    SignalSide,
    TakeProfitLevel,
    ValidatedSignal,
    is_long,
)
from trading_signals.models.user import AccessLevel, User, UserRole

__all__ = [
    "AccessLevel",
    "AuditEntry",
    "LONG_SIDES",
    "MAX_TAKE_PROFITS",
    "RiskTag",
    "Signal",
    "SignalDraft",
    "SignalRead",
    "SignalSide",
    "TakeProfitLevel",
    "User",
    "UserRole",
    "ValidatedSignal",
    "is_long",
]
