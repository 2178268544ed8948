"""Custom exception classes for the API."""


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnsupportedMediaTypeError(Exception):
    """Raised when a JSON-only endpoint receives another content type."""

    def __init__(self, content_type: str | None):
        self.content_type = content_type
        self.message = "JSON 形式のリクエストのみ受け付けています。"
        super().__init__(self.message)


class DailyLimitExceededError(Exception):
    """Raised when a once-per-day feature was already used today (JST)."""

    def __init__(self, message: str, last_checked_at: str | None = None):
        self.message = message
        self.last_checked_at = last_checked_at
        super().__init__(message)


class FeatureUnavailableError(Exception):
    """Raised when a feature is disabled by configuration."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidAccessCodeError(Exception):
    """Raised when an unlock code does not match."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
