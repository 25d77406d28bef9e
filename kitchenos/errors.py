"""Exception types shared by the client and the derived-data helpers."""

from __future__ import annotations

from typing import Any


class KitchenOSError(Exception):
    """Base class for all errors raised by this package."""


class InvalidDateError(KitchenOSError, ValueError):
    """A date was malformed or missing where one is required."""


class InvalidTargetError(KitchenOSError, ValueError):
    """A target used as a divisor was zero, negative or not finite."""


class DivisionByZeroError(KitchenOSError, ZeroDivisionError):
    """A ratio was requested against a zero total (height, budget, ...)."""


class InvalidAmountError(KitchenOSError, ValueError):
    """A quantity, price, weight or calorie value was negative or not finite."""


class InvalidUnitError(KitchenOSError, ValueError):
    """A unit-of-measure label could not be mapped to a known unit."""


class ValidationError(KitchenOSError, ValueError):
    """A form field (email, password, name) failed validation."""


class ApiError(KitchenOSError):
    """The backend answered with an error or could not be reached."""

    def __init__(
        self, message: str, status: int | None = None, data: Any = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


class AuthenticationError(ApiError):
    """The backend rejected the access token (HTTP 401)."""
