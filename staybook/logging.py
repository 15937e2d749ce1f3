"""
StayBook SDK logging utilities.

Provides configurable logging for HTTP requests/responses and auth session
transitions. Access tokens, API keys and passwords are never logged in full.
"""

import logging
import re
from typing import Any

# Create SDK-specific loggers
_sdk_logger = logging.getLogger("staybook")
_http_logger = logging.getLogger("staybook.http")
_auth_logger = logging.getLogger("staybook.auth")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Bearer tokens in Authorization headers
    (re.compile(r"Bearer\s+[A-Za-z0-9\-_=.]+"), "Bearer [TOKEN_REDACTED]"),
    # JSON Web Tokens anywhere in free text
    (re.compile(r"eyJ[A-Za-z0-9\-_=]+\.[A-Za-z0-9\-_=]+\.[A-Za-z0-9\-_.+/=]*"), "[JWT_REDACTED]"),
    # Imgur style client credentials
    (re.compile(r"Client-ID\s+[A-Za-z0-9]+"), "Client-ID [REDACTED]"),
    # Secret/token patterns
    (
        re.compile(
            r"(secret|token|password|api_key|apikey)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]",
            re.IGNORECASE,
        ),
        r"\1: [REDACTED]",
    ),
]

_SENSITIVE_KEYS = {
    "authorization",
    "apikey",
    "api_key",
    "access_token",
    "refresh_token",
    "token",
    "password",
    "secret",
}

# Number of characters of a token kept on each side when previewing it
_TOKEN_PREVIEW_LENGTH = 6


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    auth_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure StayBook SDK logging.

    Args:
        level: Default log level for all SDK loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        auth_level: Log level for session transitions (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from staybook.logging import configure_logging

        # Enable debug logging for HTTP requests
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _auth_logger.setLevel(auth_level if auth_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a StayBook SDK logger.

    Args:
        name: Logger name suffix (e.g., "http", "auth", "trending"). If None,
              returns the main SDK logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"staybook.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Args:
        text: Text that may contain tokens, keys or passwords

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def truncate_token(token: str) -> str:
    """
    Truncate a token for safe logging.

    Args:
        token: Full token string

    Returns:
        Truncated token like "abcdef...uvwxyz"
    """
    if len(token) <= _TOKEN_PREVIEW_LENGTH * 2:
        return "[TOKEN_REDACTED]"

    return f"{token[:_TOKEN_PREVIEW_LENGTH]}...{token[-_TOKEN_PREVIEW_LENGTH:]}"


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of keys to mask (default: auth headers, tokens, passwords)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in sensitive_keys or any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    body: Any = None,
) -> None:
    """
    Log an HTTP request at DEBUG level with sensitive data masked.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request path or URL
        params: Query parameters (optional)
        body: Request body (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if params:
        log_parts.append(f"params={safe_log_dict(params)}")

    if isinstance(body, dict):
        log_parts.append(f"body={safe_log_dict(body)}")
    elif isinstance(body, list):
        log_parts.append(f"rows={len(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log an HTTP response at DEBUG level.

    Args:
        status_code: HTTP status code
        url: Request path or URL
        elapsed_ms: Request duration in milliseconds (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


def log_auth_event(event: str, user_id: str | None = None) -> None:
    """
    Log a session transition at INFO level.

    Args:
        event: Auth event name (e.g., "SIGNED_IN", "TOKEN_REFRESHED")
        user_id: Affected user, if any
    """
    if user_id:
        _auth_logger.info("%s: user_id=%s", event, user_id)
    else:
        _auth_logger.info("%s: no session", event)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "truncate_token",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_auth_event",
]
