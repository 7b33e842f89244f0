"""Subscriber notification text for a newly posted signal.

Delivery itself belongs to the platform; notify_subscribers only resolves
recipients and logs the hand-off.
"""

from __future__ import annotations

import structlog

from trading_signals.models import Signal
from trading_signals.store import SignalStore
from trading_signals.validation import RATIO_PLACEHOLDER, format_price

logger = structlog.get_logger(__name__)


def format_signal_notification(signal: Signal) -> tuple[str, str]:
    """Return (title, body). ``{FirstName}`` is left for the platform to fill."""
    title = f"{signal.side} · {signal.instrument}"
    tps = ", ".join(f"TP{i + 1}: {tp.price}" for i, tp in enumerate(signal.take_profits))
    rrs = "; ".join(f"TP{i + 1}: {tp.ratio}" for i, tp in enumerate(signal.take_profits))

    entry = format_price(signal.entry)
    stop_loss = format_price(signal.stop_loss)
    lines = [
        "Hi {FirstName},",
        "",
        f"Entry: {entry} | SL: {stop_loss} | TP(s): {tps or RATIO_PLACEHOLDER}",
        f"R/R: {rrs or RATIO_PLACEHOLDER}",
    ]
    if signal.risk_tag:
        lines.append(signal.risk_tag)
    return title, "\n".join(lines)


def notify_subscribers(store: SignalStore, signal: Signal) -> int:
    """Hand the notification for *signal* off to every subscriber; returns the count."""
    title, body = format_signal_notification(signal)
    recipients = store.list_user_ids(role="SUBSCRIBER")
    logger.info(
        "Signal notification queued",
        signal_id=signal.id,
        title=title,
        recipients=len(recipients),
        body_chars=len(body),
    )
    return len(recipients)
