"""Shared test fixtures."""

import pytest
from sqlalchemy import BigInteger, Integer, JSON, create_engine, event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from trading_signals.db.base import Base

# Import all table modules so Base.metadata sees them
import trading_signals.db.tables  # noqa: F401


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with all tables created.

    Patches JSONB→JSON and BigInteger→Integer for SQLite compatibility.
    A single shared connection lets the API's worker threads see the same data.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, _rec):
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    # SQLite doesn't support schemas, JSONB, or BigInteger autoincrement
    for table in Base.metadata.tables.values():
        table.schema = None
        for col in table.columns:
            if isinstance(col.type, JSONB):
                col.type = JSON()
            if isinstance(col.type, BigInteger):
                col.type = Integer()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Session bound to the in-memory engine."""
    session = Session(db_engine)
    yield session
    session.close()
