"""
HTTP Transport for StayBook SDK.

Handles HTTP communication with the hosted backend: API key and session
headers, error parsing into typed exceptions and opt-in retry.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from staybook.exceptions import (
    AuthExpiredError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    RemoteRejection,
    ServerError,
    StayBookError,
    TransientNetworkError,
)
from staybook.logging import log_http_request, log_http_response

# PostgREST code for ".single()" selects that matched no row
NO_ROWS_CODE = "PGRST116"
# Postgres exclusion-constraint violation, raised by overlapping reservations
EXCLUSION_VIOLATION_CODE = "23P01"


@dataclass
class RetryConfig:
    """
    Configuration for automatic retry behavior.

    Retries are disabled by default: a failed request surfaces immediately
    and is repeated only when the user triggers the action again.
    """

    max_retries: int = 0
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class HTTPTransport:
    """
    HTTP transport layer for the hosted backend.

    Handles:
    - ``apikey`` and ``Authorization`` headers (session token when signed in)
    - Error response parsing into typed exceptions
    - Exponential backoff with jitter when retries are enabled
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        api_key_header: str | None = "apikey",
        auth_scheme: str = "Bearer",
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://xyz.supabase.co")
            api_key: Public (anon) API key of the project
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            api_key_header: Header carrying the raw API key, or None to omit it
            auth_scheme: Scheme of the Authorization header
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self.auth_scheme = auth_scheme
        self.access_token: str | None = None

        headers = {"Content-Type": "application/json"}
        if api_key_header:
            headers[api_key_header] = api_key

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def set_access_token(self, token: str | None) -> None:
        """Use a session access token (or the API key when None) for requests."""
        self.access_token = token

    def auth_headers(self) -> dict[str, str]:
        """Authorization header for the current session."""
        return {"Authorization": f"{self.auth_scheme} {self.access_token or self.api_key}"}

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make a request.

        Args:
            method: HTTP method
            path: API path (e.g., "/rest/v1/listings")
            params: Query parameters
            body: JSON request body
            headers: Extra headers for this request

        Returns:
            Parsed JSON response, or None for empty responses

        Raises:
            StayBookError: On API errors
        """
        request_headers = self.auth_headers()
        if headers:
            request_headers.update(headers)

        def make_request() -> httpx.Response:
            log_http_request(method, path, params, body)
            started = time.monotonic()
            response = self._client.request(
                method, path, params=params, json=body, headers=request_headers
            )
            log_http_response(
                response.status_code, path, (time.monotonic() - started) * 1000
            )
            return response

        return self._execute_with_retry(make_request)

    def _execute_with_retry(
        self, request_fn: Callable[[], httpx.Response]
    ) -> Any:
        """
        Execute a request, retrying retryable errors when configured.

        Args:
            request_fn: Function that makes the HTTP request

        Returns:
            Parsed JSON response

        Raises:
            StayBookError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                response = request_fn()

                if response.status_code < 400:
                    return parse_body(response)

                error = parse_error_response(response)

                if not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                time.sleep(self._get_backoff_time(attempt, retry_after))

            except httpx.RequestError as e:
                if attempt >= self.retry_config.max_retries:
                    raise TransientNetworkError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                time.sleep(self._get_backoff_time(attempt, None))

        if last_error:
            if isinstance(last_error, StayBookError):
                raise last_error
            raise TransientNetworkError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        wait_time = base_wait + random.uniform(-jitter_range, jitter_range)

        return min(wait_time, self.retry_config.max_backoff)


def parse_body(response: httpx.Response) -> Any:
    """Decode a successful response; empty bodies decode to None."""
    if response.status_code == 204 or not response.content:
        return None
    return response.json()


def parse_error_response(response: httpx.Response) -> StayBookError:
    """
    Parse an error response into a typed exception.

    Understands the error bodies of the REST, auth and image-host APIs.

    Args:
        response: HTTP response with error status

    Returns:
        Appropriate StayBookError subclass
    """
    try:
        data = response.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}

    nested = data.get("data") if isinstance(data.get("data"), dict) else {}
    code = str(
        data.get("code")
        or data.get("error_code")
        or (data.get("error") if isinstance(data.get("error"), str) else None)
        or "UNKNOWN_ERROR"
    )
    message = (
        data.get("message")
        or data.get("msg")
        or data.get("error_description")
        or nested.get("error")
        or f"HTTP {response.status_code}"
    )
    if not isinstance(message, str):
        message = str(message)
    request_id = response.headers.get("x-request-id")

    status_code = response.status_code

    if status_code == 401:
        return AuthExpiredError(code, message, request_id)
    elif status_code == 403:
        return AuthorizationError(code, message, request_id)
    elif status_code == 404 or code == NO_ROWS_CODE:
        return NotFoundError(code, message, request_id)
    elif status_code == 429:
        retry_after_str = response.headers.get("Retry-After", "60")
        try:
            retry_after = int(retry_after_str)
        except ValueError:
            retry_after = 60
        return RateLimitedError(code, message, retry_after, request_id)
    elif status_code >= 500:
        return ServerError(code, message, request_id)
    elif (
        status_code == 409
        or code == EXCLUSION_VIOLATION_CODE
        or "overlap" in message.lower()
    ):
        return ConflictError(code, message, request_id)
    else:
        return RemoteRejection(code, message, request_id)
