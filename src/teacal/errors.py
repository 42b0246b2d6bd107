"""Exceptions raised by the teacal data layer."""


class TeaCalError(Exception):
    """Base class for data layer errors."""


class ConfigurationError(TeaCalError):
    """Required configuration is missing or invalid."""


class CorruptLocalDataError(TeaCalError):
    """A local blob could not be decoded."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Corrupt local data under '{key}': {reason}")
        self.key = key


class RecordNotFoundError(TeaCalError):
    """No store holds the requested record."""


class RemoteError(TeaCalError):
    """Base class for hosted store failures."""


class RemoteUnavailableError(RemoteError):
    """Network failure, timeout or server error. Safe to retry later."""


class RemoteRequestError(RemoteError):
    """The hosted store rejected the request (constraint, type, permissions)."""

    def __init__(self, message: str, code: str | None = None, status: int | None = None):
        super().__init__(message)
        self.code = code
        self.status = status


class DuplicateError(RemoteRequestError):
    """Unique constraint violation, e.g. a taken username."""
