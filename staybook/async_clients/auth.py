"""Async auth resource client."""

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from staybook.clients.auth import (
    AUTH_PREFIX,
    DEFAULT_IDENTITY_DOMAIN,
    SESSION_KEY,
    AuthCallback,
    identity_to_email,
    session_from_dict,
    session_from_payload,
    session_to_dict,
)
from staybook.exceptions import AuthExpiredError, RemoteRejection, ValidationError
from staybook.logging import get_logger, log_auth_event
from staybook.realtime import Subscription
from staybook.timeutil import utc_now
from staybook.types.auth import AuthEvent, Session

if TYPE_CHECKING:
    from staybook.async_transport import AsyncHTTPTransport
    from staybook.storage import LocalStore

logger = get_logger("auth")


class AsyncAuthClient:
    """Async client for the hosted auth service. See AuthClient."""

    def __init__(
        self,
        transport: "AsyncHTTPTransport",
        storage: "LocalStore",
        identity_domain: str = DEFAULT_IDENTITY_DOMAIN,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.transport = transport
        self.storage = storage
        self.identity_domain = identity_domain
        self.clock = clock
        self._listeners: list[AuthCallback] = []
        self._session: Session | None = None

        stored = storage.get(SESSION_KEY)
        if stored:
            try:
                self._session = session_from_dict(stored)
            except (KeyError, TypeError, ValueError):
                logger.warning("Discarding unreadable stored session")
                storage.clear()
        self.transport.set_access_token(self._session.access_token if self._session else None)

    @property
    def current_session(self) -> Session | None:
        return self._session

    def on_auth_state_change(self, callback: AuthCallback) -> Subscription:
        self._listeners.append(callback)
        return Subscription(lambda _: self._listeners.remove(callback))

    async def get_session(self) -> Session | None:
        """Get a usable session, refreshing an expired one; None when signed out."""
        if self._session is None:
            return None
        if not self._session.is_expired(self.clock()):
            return self._session
        try:
            return await self.refresh_session()
        except AuthExpiredError:
            return None

    async def require_session(self) -> Session:
        session = await self.get_session()
        if session is None:
            raise AuthExpiredError("NO_SESSION", "Please log in to continue")
        return session

    async def sign_in(self, identity: str, secret: str) -> Session:
        if not secret:
            raise ValidationError("Password is required", code="MISSING_SECRET")
        data = await self.transport.request(
            "POST",
            f"{AUTH_PREFIX}/token",
            params={"grant_type": "password"},
            body={
                "email": identity_to_email(identity, self.identity_domain),
                "password": secret,
            },
        )
        return self._set_session(session_from_payload(data, self.clock()), AuthEvent.SIGNED_IN)

    async def sign_up(
        self,
        identity: str,
        secret: str,
        profile_fields: dict[str, Any] | None = None,
    ) -> Session:
        if not secret:
            raise ValidationError("Password is required", code="MISSING_SECRET")
        email = identity_to_email(identity, self.identity_domain)
        fields = dict(profile_fields or {})
        if "@" not in identity:
            fields.setdefault("username", identity.strip())

        data = await self.transport.request(
            "POST",
            f"{AUTH_PREFIX}/signup",
            body={"email": email, "password": secret, "data": fields},
        )
        if not data or not data.get("access_token"):
            raise RemoteRejection(
                "CONFIRMATION_REQUIRED", "Account created; confirm the email address to sign in"
            )
        return self._set_session(session_from_payload(data, self.clock()), AuthEvent.SIGNED_IN)

    async def refresh_session(self) -> Session:
        """
        Exchange the refresh token for a new session; a rejected refresh
        signs the user out.

        Raises:
            AuthExpiredError: When there is no session or the refresh was rejected
        """
        if self._session is None:
            raise AuthExpiredError("NO_SESSION", "Please log in to continue")
        try:
            data = await self.transport.request(
                "POST",
                f"{AUTH_PREFIX}/token",
                params={"grant_type": "refresh_token"},
                body={"refresh_token": self._session.refresh_token},
            )
        except (AuthExpiredError, RemoteRejection) as e:
            self._clear_session(AuthEvent.TOKEN_REFRESHED)
            raise AuthExpiredError(e.code, "Your session has expired, please log in again") from e

        return self._set_session(session_from_payload(data, self.clock()), AuthEvent.TOKEN_REFRESHED)

    async def sign_out(self) -> None:
        if self._session is None:
            return
        try:
            await self.transport.request("POST", f"{AUTH_PREFIX}/logout")
        except AuthExpiredError:
            logger.debug("Session was already invalid at sign-out")
        finally:
            self._clear_session(AuthEvent.SIGNED_OUT)

    def _set_session(self, session: Session, event: AuthEvent) -> Session:
        self._session = session
        self.storage.set(SESSION_KEY, session_to_dict(session))
        self.transport.set_access_token(session.access_token)
        self._notify(event, session)
        return session

    def _clear_session(self, event: AuthEvent) -> None:
        self._session = None
        self.storage.clear()
        self.transport.set_access_token(None)
        self._notify(event, None)

    def _notify(self, event: AuthEvent, session: Session | None) -> None:
        log_auth_event(event.value, session.user.user_id if session else None)
        for listener in list(self._listeners):
            listener(event, session)
