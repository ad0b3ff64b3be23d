from __future__ import annotations


class ReportingError(Exception):
    """Base class for errors raised by this package."""


class ApiError(ReportingError):
    """
    Transport-level failure: network error, timeout, non-2xx status or a
    `{"success": false}` body. `message` is safe to show to the user.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class DomainError(ReportingError):
    """Domain-level error raised for validation issues before a write."""
    pass


class PaymentError(DomainError):
    pass


class PackagingReturnError(DomainError):
    pass
