"""Price text parsing.

Prices are plain non-negative decimals: digits, an optional point, optional
fraction digits. No sign, exponent, separators or whitespace.
"""

from __future__ import annotations

import re
from decimal import Decimal

_PRICE_RE = re.compile(r"[0-9]+\.?[0-9]*")


def parse_price(text: str) -> Decimal:
    """Parse *text* into a Decimal at full precision.

    Raises ValueError when the text is not a plain decimal.
    """
    if not isinstance(text, str) or _PRICE_RE.fullmatch(text) is None:
        raise ValueError(f"invalid price {text!r}")
    return Decimal(text)


def try_parse_price(text: str | None) -> Decimal | None:
    """Like parse_price, but returns None for empty or malformed input."""
    if not text:
        return None
    try:
        return parse_price(text)
    except ValueError:
        return None


def format_price(value: Decimal) -> str:
    """Render *value* as plain decimal text that parse_price accepts.

    ``str(Decimal)`` switches to exponent form below 1e-6.
    """
    return format(value, "f")
