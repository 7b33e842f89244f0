"""Import all table modules so Base.metadata knows about them."""

from trading_signals.db.tables.audit import AuditLogRow
from trading_signals.db.tables.signals import SignalReadRow, SignalRow
from trading_signals.db.tables.users import UserRow

__all__ = [
    "AuditLogRow",
    "SignalReadRow",
    "SignalRow",
    "UserRow",
]
