"""Client library for the KitchenOS household meal-planning backend."""

from .client import KitchenOS
from .errors import (
    ApiError,
    AuthenticationError,
    DivisionByZeroError,
    InvalidAmountError,
    InvalidDateError,
    InvalidTargetError,
    InvalidUnitError,
    KitchenOSError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "KitchenOS",
    "KitchenOSError",
    "ApiError",
    "AuthenticationError",
    "InvalidDateError",
    "InvalidTargetError",
    "DivisionByZeroError",
    "InvalidAmountError",
    "InvalidUnitError",
    "ValidationError",
]
