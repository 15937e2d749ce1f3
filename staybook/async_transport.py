"""
Async HTTP Transport for StayBook SDK.

Handles async HTTP communication with the hosted backend using the httpx
async client. Header handling and error parsing match HTTPTransport.
"""

import asyncio
import random
import time
from collections.abc import Callable, Coroutine
from typing import Any

import httpx

from staybook.exceptions import ServerError, StayBookError, TransientNetworkError
from staybook.logging import log_http_request, log_http_response
from staybook.transport import RetryConfig, parse_body, parse_error_response


class AsyncHTTPTransport:
    """
    Async HTTP transport layer for the hosted backend.

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
        Initialize async HTTP transport.

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

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def set_access_token(self, token: str | None) -> None:
        """Use a session access token (or the API key when None) for requests."""
        self.access_token = token

    def auth_headers(self) -> dict[str, str]:
        """Authorization header for the current session."""
        return {"Authorization": f"{self.auth_scheme} {self.access_token or self.api_key}"}

    async def request(
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
            path: API path
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

        async def make_request() -> httpx.Response:
            log_http_request(method, path, params, body)
            started = time.monotonic()
            response = await self._client.request(
                method, path, params=params, json=body, headers=request_headers
            )
            log_http_response(
                response.status_code, path, (time.monotonic() - started) * 1000
            )
            return response

        return await self._execute_with_retry(make_request)

    async def _execute_with_retry(
        self, request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]]
    ) -> Any:
        """
        Execute a request, retrying retryable errors when configured.

        Args:
            request_fn: Async function that makes the HTTP request

        Returns:
            Parsed JSON response

        Raises:
            StayBookError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                response = await request_fn()

                if response.status_code < 400:
                    return parse_body(response)

                error = parse_error_response(response)

                if not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                await asyncio.sleep(self._get_backoff_time(attempt, retry_after))

            except httpx.RequestError as e:
                if attempt >= self.retry_config.max_retries:
                    raise TransientNetworkError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                await asyncio.sleep(self._get_backoff_time(attempt, None))

        if last_error:
            if isinstance(last_error, StayBookError):
                raise last_error
            raise TransientNetworkError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        wait_time = base_wait + random.uniform(-jitter_range, jitter_range)

        return min(wait_time, self.retry_config.max_backoff)
