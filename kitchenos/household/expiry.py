"""Inventory freshness classification from expiry dates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Iterable

from ..errors import InvalidDateError
from ..types import InventoryItem
from .units import format_quantity

_SECONDS_PER_DAY = 86400

# Products without a category are grouped here
DEFAULT_CATEGORY = "Other"


class ExpiryStatus(str, Enum):
    FRESH = "FRESH"
    OKAY = "OKAY"
    LOW = "LOW"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class ExpiryResult:
    days_until_expiration: int | None
    status: ExpiryStatus
    freshness_percent: int


@dataclass(frozen=True)
class ItemFreshness:
    """An inventory item annotated with its freshness for display."""

    item: InventoryItem
    expiry: ExpiryResult
    amount: str

    @property
    def name(self) -> str:
        return self.item.name


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)


def parse_timestamp(value: str | date | datetime) -> datetime:
    """Parse an ISO date/datetime into an aware UTC datetime.

    A date-only value means midnight UTC of that day.

    Raises:
        InvalidDateError: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidDateError(f"Invalid date: {value!r}") from None
    else:
        raise InvalidDateError(f"Invalid date: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def classify_expiry(
    expiry_date: str | date | datetime | None,
    now: str | date | datetime,
) -> ExpiryResult:
    """Classify an expiry date relative to ``now``.

    Tiers, first match wins:
        days <= 0 → EXPIRED, 0%
        days <= 1 → LOW, 10%
        days <= 3 → OKAY, 50%
        otherwise → FRESH, min(100, round(days / 7 * 100))%

    An item without an expiry date counts as fresh.
    """
    if expiry_date is None:
        return ExpiryResult(None, ExpiryStatus.FRESH, 100)

    delta = parse_timestamp(expiry_date) - parse_timestamp(now)
    days = math.ceil(delta.total_seconds() / _SECONDS_PER_DAY)

    if days <= 0:
        return ExpiryResult(days, ExpiryStatus.EXPIRED, 0)
    if days <= 1:
        return ExpiryResult(days, ExpiryStatus.LOW, 10)
    if days <= 3:
        return ExpiryResult(days, ExpiryStatus.OKAY, 50)
    return ExpiryResult(days, ExpiryStatus.FRESH, min(100, round_half_up(days / 7 * 100)))


def classify_item(item: InventoryItem, now: str | date | datetime) -> ItemFreshness:
    return ItemFreshness(
        item=item,
        expiry=classify_expiry(item.expiry_date, now),
        amount=format_quantity(item.quantity, item.unit),
    )


def expiring_soon(
    items: Iterable[InventoryItem],
    now: str | date | datetime,
    days_ahead: int = 2,
) -> list[ItemFreshness]:
    """Return items expiring within ``days_ahead`` days, soonest first.

    Already expired items are included; items without a date are not.
    """
    result: list[ItemFreshness] = []
    for item in items:
        if not item.expiry_date:
            continue
        annotated = classify_item(item, now)
        if annotated.expiry.days_until_expiration <= days_ahead:
            result.append(annotated)
    result.sort(key=lambda x: (x.expiry.days_until_expiration, x.name))
    return result


def group_by_category(items: Iterable[InventoryItem]) -> dict[str, list[InventoryItem]]:
    grouped: dict[str, list[InventoryItem]] = {}
    for item in items:
        grouped.setdefault(item.category or DEFAULT_CATEGORY, []).append(item)
    return grouped
