"""FastAPI application for the trading signals feed."""

import os
from datetime import datetime, timezone
from typing import Generator, Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from trading_signals.api.ratelimit import RateLimiter
from trading_signals.api.schemas import CreateSignalRequest, PreviewRequest, WebhookEvent
from trading_signals.auth import AccessVerification, AccessVerifier, WhopClient
from trading_signals.config.loader import load_config
from trading_signals.db.engine import get_session as _get_session, init_engine
from trading_signals.models import Signal, SignalRead, User
from trading_signals.notifications import notify_subscribers
from trading_signals.store import SignalStore
from trading_signals.validation import format_price, preview_ratio, validate_signal

logger = structlog.get_logger()

config = load_config(os.environ.get("TRADING_SIGNALS_CONFIG"))

MAX_AUDIT_LOG_LIMIT = 500

app = FastAPI(
    title="Trading Signals API",
    description="Admin-posted trading signals with a subscriber feed",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.rate_limiter = RateLimiter(
    max_requests=config.api.rate_limit_requests,
    window_seconds=config.api.rate_limit_window_s,
)
app.state.access_verifier = WhopClient(
    api_key=config.whop.api_key,
    company_id=config.whop.company_id,
    base_url=config.whop.base_url,
    timeout_s=config.whop.timeout_s,
)


@app.middleware("http")
async def bind_request_context(request: Request, call_next):
    """Fresh structlog context per request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)
    return await call_next(request)


@app.on_event("startup")
async def startup_event():
    """Initialize database engine on startup."""
    init_engine(config.database.url)
    logger.info("Database engine initialized")


@app.on_event("shutdown")
async def shutdown_event():
    verifier = app.state.access_verifier
    if isinstance(verifier, WhopClient):
        await verifier.close()


# ═══════════════════════════════════════════════════════════════
# Dependencies
# ═══════════════════════════════════════════════════════════════


def get_db() -> Generator[Session, None, None]:
    """Dependency to get DB session."""
    gen = _get_session()
    session = next(gen)
    try:
        yield session
    finally:
        try:
            next(gen)
        except StopIteration:
            pass


def get_store(session: Session = Depends(get_db)) -> SignalStore:
    return SignalStore(session)


def get_access_verifier(request: Request) -> AccessVerifier:
    return request.app.state.access_verifier


async def current_access(
    request: Request,
    verifier: AccessVerifier = Depends(get_access_verifier),
) -> AccessVerification:
    """Verify the caller named by the Whop iframe headers."""
    user_id = request.headers.get("x-whop-user-id") or request.headers.get("whop-user-id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized: No user ID provided")
    experience_id = request.headers.get("x-whop-experience-id") or config.whop.default_experience_id

    access = await verifier.verify(user_id, experience_id)
    if not access.has_access:
        raise HTTPException(status_code=403, detail="Forbidden: User does not have access")
    structlog.contextvars.bind_contextvars(whop_user_id=user_id)
    return access


def require_admin(access: AccessVerification = Depends(current_access)) -> AccessVerification:
    if not access.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return access


def rate_limit(request: Request) -> None:
    limiter: RateLimiter = request.app.state.rate_limiter
    key = request.client.host if request.client else "unknown"
    if not limiter.hit(key):
        logger.warning("Rate limit exceeded", client=key, path=request.url.path)
        raise HTTPException(status_code=429, detail="Too many requests")


def _current_user(store: SignalStore, access: AccessVerification) -> User:
    user = store.get_user_by_whop_id(access.user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# ═══════════════════════════════════════════════════════════════
# Serialisers
# ═══════════════════════════════════════════════════════════════


def _signal_to_dict(s: Signal) -> dict:
    return {
        "id": s.id,
        "side": s.side,
        "instrument": s.instrument,
        "entry": format_price(s.entry),
        "stopLoss": format_price(s.stop_loss),
        "takeProfits": [{"price": tp.price, "ratio": tp.ratio} for tp in s.take_profits],
        "riskTag": s.risk_tag,
        "tradingViewLink": s.trading_view_link,
        "notes": s.notes,
        "createdBy": s.created_by,
        "createdAt": s.created_at.isoformat(),
        "sentAt": s.sent_at.isoformat() if s.sent_at else None,
    }


def _read_to_dict(r: SignalRead) -> dict:
    return {"id": r.id, "signalId": r.signal_id, "userId": r.user_id, "readAt": r.read_at.isoformat()}


def _user_to_dict(u: User) -> dict:
    return {
        "id": u.id,
        "whopUserId": u.whop_user_id,
        "name": u.name,
        "email": u.email,
        "role": u.role,
        "productId": u.product_id,
        "membershipId": u.membership_id,
        "createdAt": u.created_at.isoformat(),
        "updatedAt": u.updated_at.isoformat(),
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


# ═══════════════════════════════════════════════════════════════
# Whop webhook
# ═══════════════════════════════════════════════════════════════


@app.post("/api/whop/webhook")
async def whop_webhook(event: WebhookEvent, store: SignalStore = Depends(get_store)):
    """Record membership events and keep the user table in sync."""
    data = event.data
    store.create_audit_log(
        action=f"whop_webhook_{event.type}",
        resource_type="webhook",
        metadata=data,
    )

    if event.type in ("membership_created", "membership_updated"):
        whop_user_id = data.get("user_id")
        if not whop_user_id or not isinstance(whop_user_id, str):
            raise HTTPException(status_code=400, detail="Webhook data missing user_id")
        user = data.get("user") or {}
        product = data.get("product") or {}
        membership = data.get("membership") or {}
        if not all(isinstance(part, dict) for part in (user, product, membership)):
            raise HTTPException(status_code=400, detail="Malformed webhook data")
        fields = {
            "name": user.get("name") or user.get("username") or whop_user_id,
            "email": user.get("email"),
            "role": "ADMIN" if product.get("role") == "admin" else "SUBSCRIBER",
            "product_id": product.get("id"),
            "membership_id": membership.get("id"),
        }
        existing = store.get_user_by_whop_id(whop_user_id)
        if existing:
            store.update_user(existing.id, **fields)
        else:
            store.create_user(whop_user_id=whop_user_id, **fields)
        logger.info("Membership synced", whop_user_id=whop_user_id, webhook=event.type, role=fields["role"])
    elif event.type == "membership_deleted":
        logger.info("Membership revoked", whop_user_id=data.get("user_id"))

    return {"success": True}


# ═══════════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════════


@app.get("/api/user/profile")
async def get_profile(
    access: AccessVerification = Depends(current_access),
    store: SignalStore = Depends(get_store),
):
    """Current user's profile."""
    return _user_to_dict(_current_user(store, access))


@app.get("/api/user/stats")
async def get_user_stats(
    access: AccessVerification = Depends(current_access),
    store: SignalStore = Depends(get_store),
):
    """Feed totals and average R for the current user."""
    user = _current_user(store, access)
    stats = store.user_stats(user.id)
    return {
        "totalSignals": stats["total_signals"],
        "readSignals": stats["read_signals"],
        "winRate": stats["win_rate"],
        "avgRR": stats["avg_rr"],
    }


# ═══════════════════════════════════════════════════════════════
# Signals
# ═══════════════════════════════════════════════════════════════


@app.get("/api/signals")
async def list_signals(
    limit: Optional[int] = None,
    offset: int = 0,
    access: AccessVerification = Depends(current_access),
    store: SignalStore = Depends(get_store),
):
    """Signal feed, newest first."""
    if limit is None or limit <= 0:
        limit = config.api.feed_page_size
    signals = store.list_signals(limit=limit, offset=max(offset, 0))
    return {
        "signals": [_signal_to_dict(s) for s in signals],
        "limit": limit,
        "offset": offset,
    }


@app.post("/api/signals", dependencies=[Depends(rate_limit)])
async def create_signal(
    req: CreateSignalRequest,
    access: AccessVerification = Depends(require_admin),
    store: SignalStore = Depends(get_store),
):
    """Validate, persist, audit and announce a new signal (admin only)."""
    result = validate_signal(req.to_draft())
    if not result.ok:
        failure = result.failure
        logger.info(
            "Signal rejected",
            kind=failure.kind,
            field=failure.field,
            index=failure.index,
            instrument=req.instrument,
        )
        return JSONResponse(
            status_code=400,
            content={"message": "Validation error", **failure.to_dict()},
        )

    user = store.ensure_user(access.user_id, name=access.name, role="ADMIN")
    signal = store.create_signal(
        result.signal,
        instrument=req.instrument,
        created_by=user.id,
        risk_tag=req.risk_tag,
        trading_view_link=req.trading_view_link,
        notes=req.notes,
    )
    signal = store.mark_sent(signal.id)

    store.create_audit_log(
        action="signal_created",
        user_id=user.id,
        resource_type="signal",
        resource_id=signal.id,
        metadata={"instrument": signal.instrument, "side": signal.side},
    )
    logger.info(
        "Signal created",
        signal_id=signal.id,
        side=signal.side,
        instrument=signal.instrument,
        take_profits=len(signal.take_profits),
    )
    notify_subscribers(store, signal)
    return _signal_to_dict(signal)


@app.post("/api/signals/preview")
async def preview_signal(req: PreviewRequest, access: AccessVerification = Depends(require_admin)):
    """Running R/R preview for the composer; never fails on half-typed prices."""
    result = validate_signal(req.to_draft())
    ratios = [
        preview_ratio(req.entry, req.stop_loss, tp.price, req.side)
        for tp in req.take_profits
    ]
    return {
        "ratios": ratios,
        "valid": result.ok,
        "kind": result.failure.kind if result.failure else None,
    }


@app.get("/api/signals/{signal_id}")
async def get_signal(
    signal_id: int,
    access: AccessVerification = Depends(current_access),
    store: SignalStore = Depends(get_store),
):
    signal = store.get_signal(signal_id)
    if signal is None:
        raise HTTPException(status_code=404, detail="Signal not found")
    return _signal_to_dict(signal)


@app.post("/api/signals/{signal_id}/read")
async def mark_signal_read(
    signal_id: int,
    access: AccessVerification = Depends(current_access),
    store: SignalStore = Depends(get_store),
):
    """Mark a signal as read by the current user."""
    user = _current_user(store, access)
    if store.get_signal(signal_id) is None:
        raise HTTPException(status_code=404, detail="Signal not found")

    read = store.mark_read(signal_id, user.id)
    store.create_audit_log(
        action="signal_read",
        user_id=user.id,
        resource_type="signal",
        resource_id=signal_id,
    )
    return _read_to_dict(read)


@app.get("/api/signals/{signal_id}/reads")
async def get_signal_reads(
    signal_id: int,
    access: AccessVerification = Depends(require_admin),
    store: SignalStore = Depends(get_store),
):
    """Read receipts for one signal (admin only)."""
    reads = store.list_reads(signal_id)
    return {
        "count": len(reads),
        "reads": [{"userId": r.user_id, "readAt": r.read_at.isoformat()} for r in reads],
    }


# ═══════════════════════════════════════════════════════════════
# Audit
# ═══════════════════════════════════════════════════════════════


@app.get("/api/audit-logs")
async def list_audit_logs(
    limit: int = 50,
    access: AccessVerification = Depends(require_admin),
    store: SignalStore = Depends(get_store),
):
    limit = min(max(limit, 1), MAX_AUDIT_LOG_LIMIT)
    entries = store.list_audit_logs(limit=limit)
    return {
        "logs": [
            {
                "id": e.id,
                "action": e.action,
                "userId": e.user_id,
                "resourceType": e.resource_type,
                "resourceId": e.resource_id,
                "metadata": e.metadata,
                "createdAt": e.created_at.isoformat(),
            }
            for e in entries
        ]
    }
