# ogs_client/exceptions.py
"""
Defines custom exceptions for the OGS client library.

Centralizing exceptions in this module prevents circular dependencies between
the core, the wire models and the services. Every error raised on purpose by
the library derives from `OgsClientError`, so callers can catch the whole
family with a single clause or pick out a specific failure.
"""

from typing import Any, Optional, Tuple


class OgsClientError(Exception):
    """Base class for all library-specific, catchable errors."""
    pass


class CoordinateError(OgsClientError):
    """
    Base class for invalid board coordinates.

    Attributes:
        value: The offending input, as given by the caller.
        valid_range: A human-readable description of what would have been accepted.
    """
    def __init__(self, message: str, value: Any = None, valid_range: Optional[str] = None):
        super().__init__(message)
        self.value = value
        self.valid_range = valid_range


class InvalidCoordinateError(CoordinateError):
    """
    Raised when a coordinate cannot be parsed at all.

    Examples are a string shorter than two characters, the skipped column
    letter 'I', or a row number outside 1-25.
    """
    pass


class CoordinateOutOfBoundsError(CoordinateError):
    """Raised when a well-formed coordinate falls outside the given board size."""

    def __init__(self, message: str, value: Any = None, board_size: int = 0):
        super().__init__(message, value=value, valid_range=f"[0-{board_size - 1}]")
        self.board_size = board_size


class DecodeError(OgsClientError):
    """
    Raised when a payload from the service does not match its wire model.

    Attributes:
        model: Name of the model the payload was decoded into.
        errors: The structured validation errors reported by pydantic.
    """
    def __init__(self, message: str, model: str = "", errors: Optional[Tuple[Any, ...]] = None):
        super().__init__(message)
        self.model = model
        self.errors = errors or ()


class BoardValidationError(OgsClientError):
    """Raised when a game or board-state payload decodes but has an unusable board shape."""
    pass


class TransportError(OgsClientError):
    """
    Raised by a transport for failures that are not worth retrying.

    Transient failures are reported with the builtin `ConnectionError` or
    `TimeoutError` instead so the retry decorator can pick them up.
    """
    def __init__(self, message: str, uri: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.uri = uri
        self.status = status
