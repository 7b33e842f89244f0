"""Tests for Pydantic domain models."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from trading_signals.models import (
    AuditEntry,
    Signal,
    SignalDraft,
    TakeProfitLevel,
    User,
    ValidatedSignal,
    is_long,
)

NOW = datetime.now(timezone.utc)


class TestSides:
    @pytest.mark.parametrize("side, expected", [
        ("BUY", True),
        ("BUY_LIMIT", True),
        ("SELL", False),
        ("SELL_LIMIT", False),
    ])
    def test_is_long(self, side, expected):
        assert is_long(side) is expected


class TestSignalDraft:
    def test_defaults(self):
        d = SignalDraft(side="BUY", entry="1.1", stop_loss="1.0")
        assert d.take_profits == []

    def test_invalid_side(self):
        with pytest.raises(ValidationError):
            SignalDraft(side="LONG", entry="1.1", stop_loss="1.0")


class TestValidatedSignal:
    def test_is_long_property(self):
        v = ValidatedSignal(side="SELL_LIMIT", entry=Decimal("1.3"), stop_loss=Decimal("1.35"))
        assert v.is_long is False
        assert v.take_profits == ()

    def test_frozen(self):
        v = ValidatedSignal(side="BUY", entry=Decimal("1.1"), stop_loss=Decimal("1.0"))
        with pytest.raises(ValidationError):
            v.entry = Decimal("2")


class TestSignal:
    def test_take_profits_from_dicts(self):
        s = Signal(
            id=1,
            side="BUY",
            instrument="EURUSD",
            entry=Decimal("1.08450"),
            stop_loss=Decimal("1.08200"),
            take_profits=[{"price": "1.08700", "ratio": "1.0R"}],
            created_by=1,
            created_at=NOW,
        )
        assert s.take_profits == (TakeProfitLevel(price="1.08700", ratio="1.0R"),)
        assert s.risk_tag is None
        assert s.sent_at is None

    def test_invalid_risk_tag(self):
        with pytest.raises(ValidationError):
            Signal(
                id=1,
                side="BUY",
                instrument="EURUSD",
                entry=Decimal("1.1"),
                stop_loss=Decimal("1.0"),
                risk_tag="YOLO",
                created_by=1,
                created_at=NOW,
            )


class TestUser:
    def test_defaults(self):
        u = User(id=1, whop_user_id="user_1", name="Ann", created_at=NOW, updated_at=NOW)
        assert u.role == "SUBSCRIBER"
        assert u.email is None

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            User(id=1, whop_user_id="u", name="n", role="OWNER", created_at=NOW, updated_at=NOW)


class TestAuditEntry:
    def test_metadata_default(self):
        e = AuditEntry(id=1, action="signal_read", created_at=NOW)
        assert e.metadata == {}
