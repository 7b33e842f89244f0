"""Signal validation and risk/reward derivation."""

from trading_signals.validation.errors import FailureKind, ValidationFailure, ValidationResult
from trading_signals.validation.prices import format_price, parse_price, try_parse_price
from trading_signals.validation.risk_reward import (
    RATIO_PLACEHOLDER,
    average_ratio,
    compute_risk_reward,
    format_ratio,
    parse_ratio,
    preview_ratio,
)
from trading_signals.validation.validator import validate_signal

__all__ = [
    "FailureKind",
    "RATIO_PLACEHOLDER",
    "ValidationFailure",
    "ValidationResult",
    "average_ratio",
    "compute_risk_reward",
    "format_price",
    "format_ratio",
    "parse_price",
    "parse_ratio",
    "preview_ratio",
    "try_parse_price",
    "validate_signal",
]
