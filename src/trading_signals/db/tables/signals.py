"""SQLAlchemy ORM models for posted signals and their read receipts."""

from sqlalchemy import BigInteger, ForeignKey, Numeric, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from trading_signals.db.base import Base

SCHEMA = "trading_signals"


class SignalRow(Base):
    __tablename__ = "signals"
    __table_args__ = {"schema": SCHEMA}

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    side: Mapped[str] = mapped_column(Text, nullable=False)
    instrument: Mapped[str] = mapped_column(Text, nullable=False)
    entry: Mapped[float] = mapped_column(Numeric, nullable=False)
    stop_loss: Mapped[float] = mapped_column(Numeric, nullable=False)
    # [{"price": "1.08700", "ratio": "1.0R"}, ...] in input order
    take_profits: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    risk_tag: Mapped[str | None] = mapped_column(Text, nullable=True)
    trading_view_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey(f"{SCHEMA}.users.id"),
        nullable=False,
    )
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False)
    sent_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class SignalReadRow(Base):
    __tablename__ = "signal_reads"
    __table_args__ = (
        UniqueConstraint("signal_id", "user_id"),
        {"schema": SCHEMA},
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    signal_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey(f"{SCHEMA}.signals.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey(f"{SCHEMA}.users.id", ondelete="CASCADE"),
        nullable=False,
    )
    read_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False)
