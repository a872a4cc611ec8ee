from __future__ import annotations


class CoreError(Exception):
    """Base error for the airport directory and pricing services."""

    code = "core_error"
    status_code = 500

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class InvalidArgument(CoreError):
    """Caller passed a malformed query, limit, fare or enum value."""

    code = "invalid_argument"
    status_code = 400


class DataUnavailable(CoreError):
    """The airport dataset could not be loaded."""

    code = "data_unavailable"
    status_code = 503


__all__ = ["CoreError", "InvalidArgument", "DataUnavailable"]
