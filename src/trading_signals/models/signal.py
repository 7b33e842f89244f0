"""Signal models — drafts posted by an admin and the records they become."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SignalSide = Literal["BUY", "SELL", "BUY_LIMIT", "SELL_LIMIT"]
RiskTag = Literal["SAFE", "NORMAL", "RISKY"]

LONG_SIDES: frozenset[str] = frozenset({"BUY", "BUY_LIMIT"})
MAX_TAKE_PROFITS = 5


def is_long(side: str) -> bool:
    """BUY and BUY_LIMIT profit as price rises; everything else is short."""
    return side in LONG_SIDES


class TakeProfitLevel(BaseModel):
    """A take-profit price plus its derived risk/reward string."""

    model_config = ConfigDict(frozen=True)

    price: str
    ratio: str | None = None


class SignalDraft(BaseModel):
    """Raw price structure as typed by the admin, before validation."""

    side: SignalSide
    entry: str
    stop_loss: str
    take_profits: list[str] = Field(default_factory=list)


class ValidatedSignal(BaseModel):
    """A draft whose price levels are consistent, with ratios attached."""

    model_config = ConfigDict(frozen=True)

    side: SignalSide
    entry: Decimal
    stop_loss: Decimal
    take_profits: tuple[TakeProfitLevel, ...] = ()

    @property
    def is_long(self) -> bool:
        return is_long(self.side)


class Signal(BaseModel):
    """A persisted signal as it appears in the feed."""

    model_config = ConfigDict(frozen=True)

    id: int
    side: SignalSide
    instrument: str
    entry: Decimal
    stop_loss: Decimal
    take_profits: tuple[TakeProfitLevel, ...] = ()
    risk_tag: RiskTag | None = None
    trading_view_link: str | None = None
    notes: str | None = None
    created_by: int
    created_at: datetime
    sent_at: datetime | None = None


class SignalRead(BaseModel):
    """A subscriber's read receipt for one signal."""

    id: int
    signal_id: int
    user_id: int
    read_at: datetime
