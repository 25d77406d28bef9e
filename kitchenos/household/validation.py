"""Onboarding form validation."""

from __future__ import annotations

import re
from dataclasses import dataclass

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: str | None = None


def validate_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def validate_password(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH


def validate_name(name: str) -> bool:
    return len(name.strip()) > 1


def _with_message(is_valid: bool, message: str) -> ValidationResult:
    return ValidationResult(is_valid, None if is_valid else message)


def validate_email_with_message(email: str, message: str) -> ValidationResult:
    return _with_message(validate_email(email), message)


def validate_password_with_message(password: str, message: str) -> ValidationResult:
    return _with_message(validate_password(password), message)


def validate_name_with_message(name: str, message: str) -> ValidationResult:
    return _with_message(validate_name(name), message)
