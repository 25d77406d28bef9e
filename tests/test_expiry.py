"""Tests for the inventory expiry classifier."""

from datetime import date, datetime, timedelta, timezone

import pytest

from kitchenos.errors import InvalidDateError
from kitchenos.household.expiry import (
    ExpiryStatus,
    classify_expiry,
    classify_item,
    expiring_soon,
    group_by_category,
    parse_timestamp,
)
from kitchenos.types import InventoryItem, Product, Unit

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _at(days: float) -> str:
    return (NOW + timedelta(days=days)).isoformat()


def _item(item_id, expiry, name="Milk", category="Dairy"):
    return InventoryItem(
        id=item_id,
        quantity=1000,
        unit=Unit.ML,
        expiry_date=expiry,
        product=Product(id=f"p{item_id}", name=name, category=category),
    )


class TestClassifyExpiry:
    def test_no_expiry_is_fresh(self):
        result = classify_expiry(None, NOW)
        assert result.days_until_expiration is None
        assert result.status is ExpiryStatus.FRESH
        assert result.freshness_percent == 100

    def test_expiry_at_now_is_expired(self):
        result = classify_expiry(NOW, NOW)
        assert result.days_until_expiration == 0
        assert result.status is ExpiryStatus.EXPIRED
        assert result.freshness_percent == 0

    def test_past_expiry(self):
        result = classify_expiry(_at(-3), NOW)
        assert result.days_until_expiration == -3
        assert result.status is ExpiryStatus.EXPIRED

    def test_half_day_ago_rounds_to_zero(self):
        result = classify_expiry(_at(-0.5), NOW)
        assert result.days_until_expiration == 0
        assert result.status is ExpiryStatus.EXPIRED

    def test_tomorrow_is_low(self):
        result = classify_expiry(_at(1), NOW)
        assert result.days_until_expiration == 1
        assert result.status is ExpiryStatus.LOW
        assert result.freshness_percent == 10

    def test_partial_day_rounds_up(self):
        result = classify_expiry(_at(0.5), NOW)
        assert result.days_until_expiration == 1
        assert result.status is ExpiryStatus.LOW

    @pytest.mark.parametrize("days", [2, 3])
    def test_two_to_three_days_is_okay(self, days):
        result = classify_expiry(_at(days), NOW)
        assert result.status is ExpiryStatus.OKAY
        assert result.freshness_percent == 50

    @pytest.mark.parametrize(
        "days, percent",
        [(4, 57), (5, 71), (6, 86), (7, 100), (8, 100), (30, 100)],
    )
    def test_fresh_percentage(self, days, percent):
        result = classify_expiry(_at(days), NOW)
        assert result.status is ExpiryStatus.FRESH
        assert result.freshness_percent == percent

    def test_date_only_string_means_midnight(self):
        result = classify_expiry("2026-10-20", "2026-10-19T00:00:00Z")
        assert result.days_until_expiration == 1
        assert result.status is ExpiryStatus.LOW

    def test_date_objects(self):
        result = classify_expiry(date(2026, 10, 22), date(2026, 10, 19))
        assert result.days_until_expiration == 3
        assert result.status is ExpiryStatus.OKAY

    def test_offsets_are_normalized(self):
        result = classify_expiry("2026-10-20T02:00:00+02:00", "2026-10-19T00:00:00Z")
        assert result.days_until_expiration == 1

    def test_milliseconds_and_zulu(self):
        result = classify_expiry("2026-10-27T00:00:00.000Z", "2026-10-19T00:00:00.000Z")
        assert result.days_until_expiration == 8
        assert result.freshness_percent == 100

    def test_malformed_expiry_raises(self):
        with pytest.raises(InvalidDateError):
            classify_expiry("next tuesday", NOW)

    def test_malformed_now_raises(self):
        with pytest.raises(InvalidDateError):
            classify_expiry(_at(1), "")

    def test_invalid_type_raises(self):
        with pytest.raises(InvalidDateError):
            parse_timestamp(12345)

    def test_invalid_date_is_value_error(self):
        with pytest.raises(ValueError):
            classify_expiry("2026-13-40", NOW)


def test_classify_item_formats_amount():
    annotated = classify_item(_item("1", _at(1)), NOW)
    assert annotated.name == "Milk"
    assert annotated.amount == "1 l"
    assert annotated.expiry.status is ExpiryStatus.LOW


def test_expiring_soon_filters_and_sorts():
    items = [
        _item("1", _at(5), name="Cheese"),
        _item("2", _at(1), name="Milk"),
        _item("3", None, name="Salt"),
        _item("4", _at(-2), name="Yogurt"),
        _item("5", _at(2), name="Eggs"),
    ]
    soon = expiring_soon(items, NOW, days_ahead=2)

    assert [f.name for f in soon] == ["Yogurt", "Milk", "Eggs"]
    assert soon[0].expiry.status is ExpiryStatus.EXPIRED


def test_expiring_soon_empty():
    assert expiring_soon([], NOW) == []


def test_group_by_category_uses_fallback():
    items = [
        _item("1", None, category="Dairy"),
        _item("2", None, category=None),
        InventoryItem(id="3", quantity=2),
    ]
    grouped = group_by_category(items)
    assert set(grouped) == {"Dairy", "Other"}
    assert len(grouped["Other"]) == 2
