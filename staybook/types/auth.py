"""Auth-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class AuthEvent(str, Enum):
    """Session transitions reported to auth state listeners."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


@dataclass
class User:
    """An authenticated user."""

    user_id: str
    email: str | None
    username: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class Session:
    """A signed-in session issued by the auth service."""

    access_token: str
    refresh_token: str
    expires_at: datetime
    user: User

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
