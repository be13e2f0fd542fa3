"""Custom exceptions for the Luso storefront service."""
from __future__ import annotations


class LusoException(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class ConfigurationException(LusoException):
    """Configuration errors."""

    pass


class PersistenceException(LusoException):
    """Cart storage read/write errors."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Cart storage failed for key {key!r}: {reason}")
        self.key = key
        self.reason = reason


class ValidationException(LusoException, ValueError):
    """Input validation errors."""

    pass


class ApiException(LusoException):
    """Error returned by the catalog backend (or raised reaching it)."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status

    @property
    def is_business_error(self) -> bool:
        """400 responses carry business-rule messages meant for the user."""
        return self.status == 400


class AuthenticationException(ApiException):
    """Missing, invalid or expired admin token."""

    pass
