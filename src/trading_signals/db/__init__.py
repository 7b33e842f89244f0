"""Database layer — engine, session, ORM base."""

from trading_signals.db.base import Base
from trading_signals.db.engine import get_engine, get_session, init_engine

__all__ = ["Base", "get_engine", "get_session", "init_engine"]
