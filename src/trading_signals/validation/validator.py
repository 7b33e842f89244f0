"""Signal validation — ordered price-level checks, first failure wins.

Check order: take-profit count, price format (entry, stop, then each
take-profit), entry vs stop equality, stop side, take-profit sides.
"""

from __future__ import annotations

from decimal import Decimal

from trading_signals.models.signal import (
    MAX_TAKE_PROFITS,
    SignalDraft,
    TakeProfitLevel,
    ValidatedSignal,
    is_long,
)
from trading_signals.validation.errors import ValidationFailure, ValidationResult
from trading_signals.validation.prices import parse_price
from trading_signals.validation.risk_reward import compute_risk_reward, format_ratio


# ── Pure check functions ──────────────────────────────────────


def check_take_profit_count(take_profits: list[str]) -> ValidationFailure | None:
    """Reject more than MAX_TAKE_PROFITS levels."""
    if len(take_profits) > MAX_TAKE_PROFITS:
        return ValidationFailure(
            kind="TooManyTakeProfits",
            message=f"Maximum {MAX_TAKE_PROFITS} take profit levels ({len(take_profits)} given)",
            field="take_profits",
        )
    return None


def _parse_field(
    text: str,
    field: str,
    index: int | None = None,
) -> tuple[Decimal | None, ValidationFailure | None]:
    try:
        return parse_price(text), None
    except ValueError:
        label = field if index is None else f"{field}[{index}]"
        return None, ValidationFailure(
            kind="MalformedPrice",
            message=f"Invalid price format for {label}: {text!r}",
            field=field,
            index=index,
        )


def check_entry_not_stop(entry: Decimal, stop_loss: Decimal) -> ValidationFailure | None:
    """Zero stop distance leaves risk undefined."""
    if entry == stop_loss:
        return ValidationFailure(
            kind="EntryEqualsStop",
            message="Entry and stop loss must differ",
            field="stop_loss",
        )
    return None


def check_stop_side(entry: Decimal, stop_loss: Decimal, long: bool) -> ValidationFailure | None:
    """Long: stop below entry. Short: stop above entry."""
    if long and stop_loss >= entry:
        return ValidationFailure(
            kind="InvalidStopDirection",
            message="Stop loss must be below entry for a long signal",
            field="stop_loss",
        )
    if not long and stop_loss <= entry:
        return ValidationFailure(
            kind="InvalidStopDirection",
            message="Stop loss must be above entry for a short signal",
            field="stop_loss",
        )
    return None


def check_take_profit_sides(
    entry: Decimal,
    take_profits: list[Decimal],
    long: bool,
) -> ValidationFailure | None:
    """Long: every target above entry. Short: every target below. Reports the first offender."""
    for i, tp in enumerate(take_profits):
        if (long and tp <= entry) or (not long and tp >= entry):
            side = "above" if long else "below"
            return ValidationFailure(
                kind="InvalidTakeProfitDirection",
                message=f"Take profit {i + 1} must be {side} entry",
                field="take_profits",
                index=i,
            )
    return None


# ── Composite ─────────────────────────────────────────────────


def validate_signal(draft: SignalDraft) -> ValidationResult:
    """Validate *draft* and annotate each take-profit with its R multiple.

    Returns a result holding either the validated signal or the first
    failure; the draft is accepted or rejected as a whole.
    """
    failure = check_take_profit_count(draft.take_profits)
    if failure:
        return ValidationResult(failure=failure)

    entry, failure = _parse_field(draft.entry, "entry")
    if failure:
        return ValidationResult(failure=failure)
    stop_loss, failure = _parse_field(draft.stop_loss, "stop_loss")
    if failure:
        return ValidationResult(failure=failure)

    targets: list[Decimal] = []
    for i, text in enumerate(draft.take_profits):
        tp, failure = _parse_field(text, "take_profits", i)
        if failure:
            return ValidationResult(failure=failure)
        targets.append(tp)

    long = is_long(draft.side)
    for failure in (
        check_entry_not_stop(entry, stop_loss),
        check_stop_side(entry, stop_loss, long),
        check_take_profit_sides(entry, targets, long),
    ):
        if failure:
            return ValidationResult(failure=failure)

    levels = tuple(
        TakeProfitLevel(
            price=text,
            ratio=format_ratio(compute_risk_reward(entry, stop_loss, tp, long)),
        )
        for text, tp in zip(draft.take_profits, targets)
    )
    return ValidationResult(
        signal=ValidatedSignal(
            side=draft.side,
            entry=entry,
            stop_loss=stop_loss,
            take_profits=levels,
        )
    )
