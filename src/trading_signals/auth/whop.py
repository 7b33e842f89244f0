"""Whop access client — decides whether a caller is an admin, a customer, or neither."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx
import structlog

from trading_signals.models.user import AccessLevel

logger = structlog.get_logger(__name__)

ADMIN_ROLES = frozenset({"owner", "admin"})


@dataclass(frozen=True)
class AccessVerification:
    """Outcome of checking one user against one experience."""

    user_id: str
    has_access: bool
    access_level: AccessLevel = "no_access"
    name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.has_access and self.access_level == "admin"


class AccessVerifier(Protocol):
    async def verify(self, user_id: str, experience_id: str) -> AccessVerification: ...


def classify_memberships(user_id: str, memberships: list[dict[str, Any]]) -> AccessVerification:
    """An active membership grants access; an owner/admin role on it grants admin."""
    active = next((m for m in memberships if m.get("status") == "active"), None)
    if active is None:
        return AccessVerification(user_id=user_id, has_access=False)
    level: AccessLevel = "admin" if active.get("role") in ADMIN_ROLES else "customer"
    user = active.get("user") or {}
    return AccessVerification(
        user_id=user_id,
        has_access=True,
        access_level=level,
        name=user.get("name") or user.get("username"),
    )


class WhopClient:
    """Async client for the Whop memberships API."""

    def __init__(
        self,
        api_key: str,
        company_id: str,
        base_url: str = "https://api.whop.com",
        timeout_s: float = 15.0,
        http: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.company_id = company_id
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._http = http

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=self.timeout_s)
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    async def list_memberships(self, user_id: str) -> list[dict[str, Any]]:
        """Memberships of *user_id* in the configured company."""
        http = await self._get_http()
        resp = await http.get(
            f"{self.base_url}/api/v2/memberships",
            params={"user_id": user_id, "company_id": self.company_id},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        resp.raise_for_status()
        return resp.json().get("data", [])

    async def verify(self, user_id: str, experience_id: str) -> AccessVerification:
        """Resolve *user_id*'s access; API failures deny access rather than raise."""
        if not user_id:
            return AccessVerification(user_id="", has_access=False)
        try:
            memberships = await self.list_memberships(user_id)
        except httpx.HTTPError as e:
            logger.warning(
                "Whop verification failed",
                user_id=user_id,
                experience_id=experience_id,
                error=str(e),
            )
            return AccessVerification(user_id=user_id, has_access=False)
        return classify_memberships(user_id, memberships)
