"""Error types raised by rollover."""

from typing import Optional, Sequence


class RolloverError(RuntimeError):
    """Base class for failures that abort a rollover run."""


class ConfigError(RolloverError):
    """Raised when input parameters are missing or malformed."""


class NotFound(RolloverError):
    """Raised when the target milestone does not exist."""


class RemoteFailure(RolloverError):
    """Raised when a call to the tracker fails or returns an unexpected payload."""

    def __init__(self, message: str, status: Optional[int] = None, codes: Sequence[str] = ()):
        super().__init__(message)
        self.status = status
        self.codes = tuple(codes)


class AlreadyExists(RemoteFailure):
    """Raised when a label with the requested name already exists."""
