"""Error types raised by the content server."""


class MMServerError(Exception):
    """Base error for all mm_server operations."""


class ConfigError(MMServerError, ValueError):
    """Raised when server configuration or a route declaration is invalid."""


class HandlerFailure(MMServerError):
    """Raised when a dynamic route handler fails or returns an unusable value."""

    def __init__(self, message: str, *, value: object = None) -> None:
        super().__init__(message)
        self.value = value


class ContentReadError(MMServerError):
    """Raised when a backing text file cannot be read under the fatal policy."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Unable to read '{path}': {reason}")
        self.path = path
        self.reason = reason
