"""Errors raised while handling analysis requests."""


class AnalysisError(Exception):
    """Base error carrying an HTTP status and a user-facing message."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(AnalysisError):
    """The request body is malformed or misses the image list."""

    status_code = 400

    def __init__(self, message: str, details: list[dict[str, object]]) -> None:
        super().__init__(message)
        self.details = details


class RateLimitedError(AnalysisError):
    """The caller's network identifier exceeded the window quota."""

    status_code = 429

    def __init__(self, message: str, retry_after_seconds: int) -> None:
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


class QuotaExceededError(AnalysisError):
    """The device used up its daily analysis quota."""

    status_code = 429


class ExternalModelError(AnalysisError):
    """The external model call failed."""


class ReplyParseError(AnalysisError):
    """The model reply is empty or not a valid analysis result."""
