"""Session-bound data access for users, signals, reads and the audit trail."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from trading_signals.db.tables import AuditLogRow, SignalReadRow, SignalRow, UserRow
from trading_signals.models import AuditEntry, Signal, SignalRead, User, ValidatedSignal
from trading_signals.validation import average_ratio

logger = structlog.get_logger(__name__)

_USER_FIELDS = ("name", "email", "role", "product_id", "membership_id")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _to_user(row: UserRow) -> User:
    return User.model_validate(row, from_attributes=True)


def _to_signal(row: SignalRow) -> Signal:
    return Signal(
        id=row.id,
        side=row.side,
        instrument=row.instrument,
        entry=Decimal(str(row.entry)),
        stop_loss=Decimal(str(row.stop_loss)),
        take_profits=tuple(row.take_profits or ()),
        risk_tag=row.risk_tag,
        trading_view_link=row.trading_view_link,
        notes=row.notes,
        created_by=row.created_by,
        created_at=row.created_at,
        sent_at=row.sent_at,
    )


def _to_read(row: SignalReadRow) -> SignalRead:
    return SignalRead.model_validate(row, from_attributes=True)


def _to_audit(row: AuditLogRow) -> AuditEntry:
    return AuditEntry(
        id=row.id,
        action=row.action,
        user_id=row.user_id,
        resource_type=row.resource_type,
        resource_id=row.resource_id,
        metadata=row.metadata_ or {},
        created_at=row.created_at,
    )


class SignalStore:
    """Thin repository over one SQLAlchemy session. Commits per write."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ── Users ─────────────────────────────────────────────────

    def get_user(self, user_id: int) -> User | None:
        row = self.session.get(UserRow, user_id)
        return _to_user(row) if row else None

    def get_user_by_whop_id(self, whop_user_id: str) -> User | None:
        row = self._user_row_by_whop_id(whop_user_id)
        return _to_user(row) if row else None

    def _user_row_by_whop_id(self, whop_user_id: str) -> UserRow | None:
        return self.session.execute(
            select(UserRow).where(UserRow.whop_user_id == whop_user_id)
        ).scalar_one_or_none()

    def create_user(
        self,
        whop_user_id: str,
        name: str,
        role: str = "SUBSCRIBER",
        email: str | None = None,
        product_id: str | None = None,
        membership_id: str | None = None,
    ) -> User:
        now = _now()
        row = UserRow(
            whop_user_id=whop_user_id,
            name=name,
            email=email,
            role=role,
            product_id=product_id,
            membership_id=membership_id,
            created_at=now,
            updated_at=now,
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return _to_user(row)

    def update_user(self, user_id: int, **changes: Any) -> User | None:
        """Apply *changes* to the known user fields; unknown keys are ignored."""
        row = self.session.get(UserRow, user_id)
        if row is None:
            return None
        for key in _USER_FIELDS:
            if key in changes:
                setattr(row, key, changes[key])
        row.updated_at = _now()
        self.session.commit()
        self.session.refresh(row)
        return _to_user(row)

    def ensure_user(self, whop_user_id: str, name: str | None = None, role: str = "SUBSCRIBER") -> User:
        """Return the user for *whop_user_id*, creating it if missing (idempotent)."""
        row = self._user_row_by_whop_id(whop_user_id)
        if row is not None:
            return _to_user(row)
        try:
            return self.create_user(whop_user_id=whop_user_id, name=name or whop_user_id, role=role)
        except IntegrityError:
            # Lost the insert race to a concurrent request
            self.session.rollback()
            row = self._user_row_by_whop_id(whop_user_id)
            if row is None:
                raise
            logger.info("User created concurrently", whop_user_id=whop_user_id)
            return _to_user(row)

    def list_user_ids(self, role: str) -> list[int]:
        return list(self.session.execute(
            select(UserRow.id).where(UserRow.role == role).order_by(UserRow.id)
        ).scalars().all())

    # ── Signals ───────────────────────────────────────────────

    def create_signal(
        self,
        validated: ValidatedSignal,
        instrument: str,
        created_by: int,
        risk_tag: str | None = None,
        trading_view_link: str | None = None,
        notes: str | None = None,
    ) -> Signal:
        row = SignalRow(
            side=validated.side,
            instrument=instrument,
            entry=validated.entry,
            stop_loss=validated.stop_loss,
            take_profits=[tp.model_dump() for tp in validated.take_profits],
            risk_tag=risk_tag,
            trading_view_link=trading_view_link,
            notes=notes,
            created_by=created_by,
            created_at=_now(),
            sent_at=None,
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return _to_signal(row)

    def mark_sent(self, signal_id: int) -> Signal | None:
        row = self.session.get(SignalRow, signal_id)
        if row is None:
            return None
        row.sent_at = _now()
        self.session.commit()
        self.session.refresh(row)
        return _to_signal(row)

    def get_signal(self, signal_id: int) -> Signal | None:
        row = self.session.get(SignalRow, signal_id)
        return _to_signal(row) if row else None

    def list_signals(self, limit: int = 20, offset: int = 0) -> list[Signal]:
        """Feed order: newest first."""
        rows = self.session.execute(
            select(SignalRow)
            .order_by(SignalRow.created_at.desc(), SignalRow.id.desc())
            .limit(limit)
            .offset(offset)
        ).scalars().all()
        return [_to_signal(r) for r in rows]

    # ── Reads ─────────────────────────────────────────────────

    def mark_read(self, signal_id: int, user_id: int) -> SignalRead:
        """Record a read; a repeated read returns the first receipt."""
        existing = self._read_row(signal_id, user_id)
        if existing is not None:
            return _to_read(existing)

        row = SignalReadRow(signal_id=signal_id, user_id=user_id, read_at=_now())
        self.session.add(row)
        try:
            self.session.commit()
        except IntegrityError:
            # Same user marked it read in a concurrent request
            self.session.rollback()
            existing = self._read_row(signal_id, user_id)
            if existing is None:
                raise
            return _to_read(existing)
        self.session.refresh(row)
        return _to_read(row)

    def _read_row(self, signal_id: int, user_id: int) -> SignalReadRow | None:
        return self.session.execute(
            select(SignalReadRow).where(
                SignalReadRow.signal_id == signal_id,
                SignalReadRow.user_id == user_id,
            )
        ).scalar_one_or_none()

    def list_reads(self, signal_id: int) -> list[SignalRead]:
        rows = self.session.execute(
            select(SignalReadRow)
            .where(SignalReadRow.signal_id == signal_id)
            .order_by(SignalReadRow.read_at.desc())
        ).scalars().all()
        return [_to_read(r) for r in rows]

    def list_user_reads(self, user_id: int) -> list[SignalRead]:
        rows = self.session.execute(
            select(SignalReadRow)
            .where(SignalReadRow.user_id == user_id)
            .order_by(SignalReadRow.read_at.desc())
        ).scalars().all()
        return [_to_read(r) for r in rows]

    # ── Audit ─────────────────────────────────────────────────

    def create_audit_log(
        self,
        action: str,
        user_id: int | None = None,
        resource_type: str | None = None,
        resource_id: str | int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> AuditEntry:
        row = AuditLogRow(
            action=action,
            user_id=user_id,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            metadata_=metadata or {},
            created_at=_now(),
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return _to_audit(row)

    def list_audit_logs(self, limit: int = 50) -> list[AuditEntry]:
        rows = self.session.execute(
            select(AuditLogRow)
            .order_by(AuditLogRow.created_at.desc(), AuditLogRow.id.desc())
            .limit(limit)
        ).scalars().all()
        return [_to_audit(r) for r in rows]

    # ── Stats ─────────────────────────────────────────────────

    def user_stats(self, user_id: int) -> dict[str, Any]:
        """Feed totals for one user.

        avg_rr averages the first take-profit ratio of every signal that has
        one. Trade outcomes are not recorded, so win_rate stays 0.
        """
        total = self.session.execute(select(func.count(SignalRow.id))).scalar() or 0
        read = self.session.execute(
            select(func.count(SignalReadRow.id)).where(SignalReadRow.user_id == user_id)
        ).scalar() or 0

        first_ratios = [
            tps[0].get("ratio")
            for tps in self.session.execute(select(SignalRow.take_profits)).scalars().all()
            if tps
        ]
        return {
            "total_signals": total,
            "read_signals": read,
            "win_rate": 0.0,
            "avg_rr": float(average_ratio(first_ratios)),
        }
