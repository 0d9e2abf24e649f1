"""
Domain exceptions for StreamGuard.

All library errors inherit from StreamGuardError.
"""


class StreamGuardError(Exception):
    """Base class for all StreamGuard exceptions."""

    def __init__(self, message: str, context: dict = None):
        super().__init__(message)
        self.context = context or {}


class InvalidPipeline(StreamGuardError):
    """Raised when a pipeline is malformed or internally inconsistent."""

    pass


class ConfigurationError(StreamGuardError):
    """Raised when configuration or the rule catalog is invalid or unreadable."""

    pass
