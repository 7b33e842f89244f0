"""User model — a Whop member known to the app."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

UserRole = Literal["ADMIN", "SUBSCRIBER"]
AccessLevel = Literal["admin", "customer", "no_access"]


class User(BaseModel):
    id: int
    whop_user_id: str
    name: str
    email: str | None = None
    role: UserRole = "SUBSCRIBER"
    product_id: str | None = None
    membership_id: str | None = None
    created_at: datetime
    updated_at: datetime
