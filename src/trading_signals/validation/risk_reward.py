"""Risk/reward arithmetic — pure functions, no validation."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Iterable

from trading_signals.models.signal import LONG_SIDES
from trading_signals.validation.prices import try_parse_price

RATIO_PLACEHOLDER = "–"

_ONE_DECIMAL = Decimal("0.1")


def compute_risk_reward(
    entry: Decimal,
    stop_loss: Decimal,
    take_profit: Decimal,
    is_long: bool,
) -> Decimal | None:
    """Reward distance over risk distance for one take-profit.

    risk   = |entry - stop_loss|
    reward = take_profit - entry   (long)
             entry - take_profit   (short)

    The sign is kept: a take-profit on the losing side gives a negative
    ratio. Returns None when risk is zero (ratio undefined).
    """
    risk = abs(entry - stop_loss)
    if risk == 0:
        return None
    if is_long:
        reward = take_profit - entry
    else:
        reward = entry - take_profit
    return reward / risk


def _round_one_decimal(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        rounded = value.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    # -0.0 reads badly
    return abs(rounded) if rounded == 0 else rounded


def format_ratio(ratio: Decimal | None) -> str:
    """Render as ``"2.4R"`` (half-up, one decimal); None renders the placeholder."""
    if ratio is None:
        return RATIO_PLACEHOLDER
    return f"{_round_one_decimal(ratio)}R"


def preview_ratio(entry: str, stop_loss: str, take_profit: str, side: str) -> str:
    """Ratio string for a live preview of text that may still be half-typed."""
    e = try_parse_price(entry)
    s = try_parse_price(stop_loss)
    t = try_parse_price(take_profit)
    if e is None or s is None or t is None:
        return RATIO_PLACEHOLDER
    return format_ratio(compute_risk_reward(e, s, t, side in LONG_SIDES))


def parse_ratio(text: str | None) -> Decimal | None:
    """Inverse of format_ratio: ``"2.4R"`` -> Decimal("2.4"); junk -> None."""
    if not text or not text.endswith("R"):
        return None
    try:
        value = Decimal(text[:-1])
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def average_ratio(ratios: Iterable[str | None]) -> Decimal:
    """Mean of the parseable ratio strings, rounded to one decimal; 0 when none."""
    values = [r for r in (parse_ratio(t) for t in ratios) if r is not None]
    if not values:
        return Decimal("0")
    return _round_one_decimal(sum(values, Decimal("0")) / len(values))
