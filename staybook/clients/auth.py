"""Auth resource client.

Wraps the hosted auth service: password sign-in and sign-up, token refresh,
sign-out and session change notifications. The current session is kept in
LocalStore so it survives restarts, and its access token is handed to the
transport so every data request runs as the signed-in user.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from staybook.exceptions import (
    AuthExpiredError,
    RemoteRejection,
    ValidationError,
)
from staybook.logging import get_logger, log_auth_event
from staybook.realtime import Subscription
from staybook.timeutil import parse_timestamp, utc_now
from staybook.types.auth import AuthEvent, Session, User

if TYPE_CHECKING:
    from staybook.storage import LocalStore
    from staybook.transport import HTTPTransport

logger = get_logger("auth")

AUTH_PREFIX = "/auth/v1"
SESSION_KEY = "session"
DEFAULT_IDENTITY_DOMAIN = "example.com"

AuthCallback = Callable[[AuthEvent, Session | None], None]


def user_from_payload(data: dict[str, Any]) -> User:
    metadata = data.get("user_metadata") or {}
    return User(
        user_id=data["id"],
        email=data.get("email"),
        username=metadata.get("username"),
        metadata=dict(metadata),
    )


def session_from_payload(data: dict[str, Any], now: datetime) -> Session:
    """Build a Session from a token response."""
    if data.get("expires_at"):
        expires_at = datetime.fromtimestamp(int(data["expires_at"]), tz=now.tzinfo)
    else:
        expires_at = now + timedelta(seconds=int(data.get("expires_in", 3600)))
    return Session(
        access_token=data["access_token"],
        refresh_token=data["refresh_token"],
        expires_at=expires_at,
        user=user_from_payload(data["user"]),
    )


def session_to_dict(session: Session) -> dict[str, Any]:
    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "expires_at": session.expires_at.isoformat(),
        "user": {
            "id": session.user.user_id,
            "email": session.user.email,
            "user_metadata": session.user.metadata,
        },
    }


def session_from_dict(data: dict[str, Any]) -> Session:
    return Session(
        access_token=data["access_token"],
        refresh_token=data["refresh_token"],
        expires_at=parse_timestamp(data["expires_at"]),
        user=user_from_payload(data["user"]),
    )


def identity_to_email(identity: str, domain: str = DEFAULT_IDENTITY_DOMAIN) -> str:
    """
    Map a sign-in identity to the email the auth service expects.

    Usernames are registered under a synthetic address on ``domain``.

    Raises:
        ValidationError: If the identity is blank
    """
    identity = identity.strip()
    if not identity:
        raise ValidationError("Username is required", code="MISSING_IDENTITY")
    if "@" in identity:
        return identity
    return f"{identity}@{domain}"


class AuthClient:
    """Client for the hosted auth service."""

    def __init__(
        self,
        transport: "HTTPTransport",
        storage: "LocalStore",
        identity_domain: str = DEFAULT_IDENTITY_DOMAIN,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize the auth client.

        Args:
            transport: HTTP transport for making requests
            storage: Local state holding the persisted session
            identity_domain: Domain of the synthetic emails behind usernames
            clock: Returns the current time; injectable for tests
        """
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
        """The session held locally, without validating or refreshing it."""
        return self._session

    def on_auth_state_change(self, callback: AuthCallback) -> Subscription:
        """
        Register a listener for session transitions.

        ``TOKEN_REFRESHED`` with a None session means the refresh failed and
        the user has been signed out.

        Returns:
            Subscription; call ``unsubscribe()`` on teardown
        """
        self._listeners.append(callback)
        return Subscription(lambda _: self._listeners.remove(callback))

    def get_session(self) -> Session | None:
        """
        Get a usable session, refreshing an expired one.

        Returns:
            The session, or None when signed out or the refresh failed

        Raises:
            TransientNetworkError: If a needed refresh could not reach the backend
        """
        if self._session is None:
            return None
        if not self._session.is_expired(self.clock()):
            return self._session
        try:
            return self.refresh_session()
        except AuthExpiredError:
            return None

    def require_session(self) -> Session:
        """
        Get a usable session or fail.

        Raises:
            AuthExpiredError: When signed out
        """
        session = self.get_session()
        if session is None:
            raise AuthExpiredError("NO_SESSION", "Please log in to continue")
        return session

    def sign_in(self, identity: str, secret: str) -> Session:
        """
        Sign in with a username (or email) and password.

        Raises:
            ValidationError: If identity or password is blank
            RemoteRejection: On wrong credentials
        """
        if not secret:
            raise ValidationError("Password is required", code="MISSING_SECRET")
        data = self.transport.request(
            "POST",
            f"{AUTH_PREFIX}/token",
            params={"grant_type": "password"},
            body={
                "email": identity_to_email(identity, self.identity_domain),
                "password": secret,
            },
        )
        return self._set_session(session_from_payload(data, self.clock()), AuthEvent.SIGNED_IN)

    def sign_up(
        self,
        identity: str,
        secret: str,
        profile_fields: dict[str, Any] | None = None,
    ) -> Session:
        """
        Register a new user and sign them in.

        Args:
            identity: Username or email
            secret: Password
            profile_fields: Extra profile data stored with the user; a plain
                            username identity is stored as ``username``

        Raises:
            ValidationError: If identity or password is blank
            RemoteRejection: If registration is declined or needs confirmation
        """
        if not secret:
            raise ValidationError("Password is required", code="MISSING_SECRET")
        email = identity_to_email(identity, self.identity_domain)
        fields = dict(profile_fields or {})
        if "@" not in identity:
            fields.setdefault("username", identity.strip())

        data = self.transport.request(
            "POST",
            f"{AUTH_PREFIX}/signup",
            body={"email": email, "password": secret, "data": fields},
        )
        if not data or not data.get("access_token"):
            raise RemoteRejection(
                "CONFIRMATION_REQUIRED", "Account created; confirm the email address to sign in"
            )
        return self._set_session(session_from_payload(data, self.clock()), AuthEvent.SIGNED_IN)

    def refresh_session(self) -> Session:
        """
        Exchange the refresh token for a new session.

        A rejected refresh signs the user out, notifies listeners with
        ``TOKEN_REFRESHED`` and no session, and raises.

        Raises:
            AuthExpiredError: When there is no session or the refresh was rejected
            TransientNetworkError: If the backend could not be reached
        """
        if self._session is None:
            raise AuthExpiredError("NO_SESSION", "Please log in to continue")
        try:
            data = self.transport.request(
                "POST",
                f"{AUTH_PREFIX}/token",
                params={"grant_type": "refresh_token"},
                body={"refresh_token": self._session.refresh_token},
            )
        except (AuthExpiredError, RemoteRejection) as e:
            self._clear_session(AuthEvent.TOKEN_REFRESHED)
            raise AuthExpiredError(e.code, "Your session has expired, please log in again") from e

        return self._set_session(session_from_payload(data, self.clock()), AuthEvent.TOKEN_REFRESHED)

    def sign_out(self) -> None:
        """
        Sign out. Local state is cleared even if the backend call fails.

        Raises:
            StayBookError: If the backend could not record the sign-out
        """
        if self._session is None:
            return
        try:
            self.transport.request("POST", f"{AUTH_PREFIX}/logout")
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
        # A forced sign-out forgets all local state, not just the session
        self.storage.clear()
        self.transport.set_access_token(None)
        self._notify(event, None)

    def _notify(self, event: AuthEvent, session: Session | None) -> None:
        log_auth_event(event.value, session.user.user_id if session else None)
        for listener in list(self._listeners):
            listener(event, session)
