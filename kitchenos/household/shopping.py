"""Shopping list totals and budget progress."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from ..errors import DivisionByZeroError, InvalidAmountError
from ..types import ShoppingListItem
from .expiry import DEFAULT_CATEGORY, round_half_up

_WARNING_PERCENT = 70
_DANGER_PERCENT = 90


@dataclass(frozen=True)
class ShoppingStats:
    total_items: int = 0
    bought_items: int = 0
    remaining_items: int = 0
    total_price: float = 0.0
    bought_price: float = 0.0
    remaining_price: float = 0.0

    @property
    def progress_percent(self) -> int:
        """Share of bought items, 0 for an empty list."""
        if self.total_items == 0:
            return 0
        return round_half_up(self.bought_items / self.total_items * 100)

    def summary_dict(self) -> dict:
        return {
            "total_items": self.total_items,
            "bought_items": self.bought_items,
            "remaining_items": self.remaining_items,
            "total_price": round(self.total_price, 2),
            "bought_price": round(self.bought_price, 2),
            "remaining_price": round(self.remaining_price, 2),
            "progress_percent": self.progress_percent,
        }


def aggregate_shopping_stats(items: Iterable[ShoppingListItem]) -> ShoppingStats:
    """Partition a shopping list into bought/remaining and sum prices.

    Raises:
        InvalidAmountError: If an item has a negative or non-finite price.
    """
    items = list(items)
    for item in items:
        if not math.isfinite(item.estimated_price) or item.estimated_price < 0:
            raise InvalidAmountError(
                f"Invalid price for {item.name!r}: {item.estimated_price}"
            )

    bought = [item for item in items if item.is_bought]
    total_price = sum(item.estimated_price for item in items)
    bought_price = sum(item.estimated_price for item in bought)

    return ShoppingStats(
        total_items=len(items),
        bought_items=len(bought),
        remaining_items=len(items) - len(bought),
        total_price=total_price,
        bought_price=bought_price,
        remaining_price=total_price - bought_price,
    )


def group_by_category(
    items: Iterable[ShoppingListItem],
) -> dict[str, list[ShoppingListItem]]:
    grouped: dict[str, list[ShoppingListItem]] = {}
    for item in items:
        grouped.setdefault(item.category or DEFAULT_CATEGORY, []).append(item)
    return grouped


class BudgetLevel(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class BudgetProgress:
    percentage: int
    level: BudgetLevel


def budget_progress(spent: float, total_budget: float) -> BudgetProgress:
    """Compute how much of the family budget is spent.

    Raises:
        DivisionByZeroError: If the budget is zero.
        InvalidAmountError: If either value is negative or not finite.
    """
    if not (math.isfinite(spent) and math.isfinite(total_budget)):
        raise InvalidAmountError(
            f"Budget values must be finite: spent={spent}, budget={total_budget}"
        )
    if spent < 0 or total_budget < 0:
        raise InvalidAmountError(
            f"Budget values must not be negative: spent={spent}, budget={total_budget}"
        )
    if total_budget == 0:
        raise DivisionByZeroError("Budget limit is zero")

    percentage = round_half_up(spent / total_budget * 100)
    if percentage >= _DANGER_PERCENT:
        level = BudgetLevel.DANGER
    elif percentage >= _WARNING_PERCENT:
        level = BudgetLevel.WARNING
    else:
        level = BudgetLevel.SUCCESS
    return BudgetProgress(percentage=percentage, level=level)
