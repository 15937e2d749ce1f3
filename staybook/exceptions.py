"""StayBook SDK exception classes."""


class StayBookError(Exception):
    """Base exception for all StayBook SDK errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(StayBookError):
    """Raised when SDK configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class ValidationError(StayBookError):
    """Raised on bad user input, before anything is sent to the backend."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR") -> None:
        super().__init__(code, message)


class RemoteRejection(StayBookError):
    """Raised when the backend declines a request."""

    pass


class AuthorizationError(RemoteRejection):
    """Raised when access is denied."""

    pass


class NotFoundError(RemoteRejection):
    """Raised when a resource is not found."""

    pass


class ConflictError(RemoteRejection):
    """Raised on conflicts (overlapping reservation, duplicate favorite, etc.)."""

    pass


class AuthExpiredError(StayBookError):
    """Raised when there is no valid session; callers must sign the user out."""

    pass


class TransientNetworkError(StayBookError):
    """Raised when the backend could not be reached."""

    pass


class RateLimitedError(TransientNetworkError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ServerError(TransientNetworkError):
    """Raised on server errors (5xx)."""

    pass
