"""Request bodies for the signals API (camelCase on the wire, snake_case accepted)."""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from trading_signals.models import RiskTag, SignalDraft, SignalSide


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TakeProfitInput(_CamelModel):
    price: str


class CreateSignalRequest(_CamelModel):
    side: SignalSide
    instrument: str = Field(min_length=1, max_length=20)
    entry: str
    stop_loss: str
    # Count is checked by the validator so the failure carries its kind
    take_profits: list[TakeProfitInput] = Field(default_factory=list)
    risk_tag: Optional[RiskTag] = None
    trading_view_link: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("trading_view_link")
    @classmethod
    def _check_link(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Invalid URL")
        return v

    def to_draft(self) -> SignalDraft:
        return SignalDraft(
            side=self.side,
            entry=self.entry,
            stop_loss=self.stop_loss,
            take_profits=[tp.price for tp in self.take_profits],
        )


class PreviewRequest(_CamelModel):
    """Half-typed composer state; any field may be empty or junk."""

    side: SignalSide
    entry: str = ""
    stop_loss: str = ""
    take_profits: list[TakeProfitInput] = Field(default_factory=list)

    def to_draft(self) -> SignalDraft:
        return SignalDraft(
            side=self.side,
            entry=self.entry,
            stop_loss=self.stop_loss,
            take_profits=[tp.price for tp in self.take_profits],
        )


class WebhookEvent(BaseModel):
    type: str
    data: dict[str, Any] = Field(default_factory=dict)
