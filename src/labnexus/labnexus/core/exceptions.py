from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when the target of an update or delete does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class StorageError(Exception):
    """Raised by storage backends when a persistence operation fails.

    Carries the failing operation (``list``, ``insert``, ``bulk_upsert``, ...)
    and table so callers can tell failures apart.
    """

    def __init__(self, message: str, *, operation: str, table: Optional[str] = None, status: int = 500):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.table = table
        self.status = int(status)

    def __str__(self) -> str:
        where = f"{self.operation} {self.table}" if self.table else self.operation
        return f"{where}: {self.message}"


class ApiError(Exception):
    """Raised by the data access client for every failed call."""

    def __init__(self, status: int, message: str):
        super().__init__(f"API Error {status}: {message}")
        self.status = int(status)
        self.message = message
