class Red2BlueError(Exception):
    """Base class for errors raised by the coaching services."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(Red2BlueError):
    status_code = 400


class NotFoundError(Red2BlueError):
    status_code = 404


class ExternalServiceError(Red2BlueError):
    """A language-model call failed or returned unusable output.

    Raised by providers and always absorbed by the coaching adapter, which
    answers with its deterministic fallback instead.
    """

    status_code = 502

    def __init__(self, message: str, provider: str = "unknown") -> None:
        super().__init__(message)
        self.provider = provider


class PersistenceError(Red2BlueError):
    status_code = 500
