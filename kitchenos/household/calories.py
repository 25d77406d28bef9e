"""Calorie and macro aggregation for meal plans."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Mapping

from ..errors import InvalidAmountError, InvalidTargetError
from ..types import MEAL_TYPE_ORDER, DayMealPlan, Meal, MealPlan, MealType

# |actual - target| below this counts as on target
ON_TARGET_TOLERANCE = 50

DayMeals = DayMealPlan | Mapping[MealType, Meal | None]


@dataclass(frozen=True)
class CalorieSummary:
    total_calories: float
    percentage: float  # clamped to [0, 100]
    is_over_target: bool
    difference: float  # absolute

    def summary_dict(self) -> dict:
        return {
            "total_calories": round(self.total_calories, 1),
            "percentage": round(self.percentage, 1),
            "is_over_target": self.is_over_target,
            "difference": round(self.difference, 1),
        }


@dataclass(frozen=True)
class CalorieStatus:
    difference: float  # signed, actual - target
    percentage: float  # unclamped
    is_over: bool
    is_under: bool
    is_on_target: bool


@dataclass(frozen=True)
class DayMacros:
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


@dataclass(frozen=True)
class WeeklyTotals:
    total_calories: float
    average_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    total_meals: int


def _present_meals(meals: DayMeals) -> list[Meal]:
    if isinstance(meals, DayMealPlan):
        present = meals.meals()
    else:
        present = [meals.get(slot) for slot in MEAL_TYPE_ORDER]
        present = [m for m in present if m is not None]
    for meal in present:
        if not math.isfinite(meal.calories) or meal.calories < 0:
            raise InvalidAmountError(
                f"Invalid calories for {meal.name!r}: {meal.calories}"
            )
    return present


def _check_target(target_calories: float) -> None:
    if not math.isfinite(target_calories) or target_calories <= 0:
        raise InvalidTargetError(
            f"Calorie target must be a positive number: {target_calories}"
        )


def aggregate_calories(meals: DayMeals, target_calories: float) -> CalorieSummary:
    """Sum a day's calories across slots and compare against a target.

    Missing slots contribute nothing. The percentage is capped at 100 for
    the progress bar; ``is_over_target`` tells whether the cap was hit.

    Raises:
        InvalidTargetError: If ``target_calories`` is zero, negative or
            not finite.
        InvalidAmountError: If a meal has negative or non-finite calories.
    """
    _check_target(target_calories)
    total = sum(meal.calories for meal in _present_meals(meals))
    return CalorieSummary(
        total_calories=total,
        percentage=min(total / target_calories * 100, 100.0),
        is_over_target=total > target_calories,
        difference=abs(total - target_calories),
    )


def calorie_status(actual: float, target: float) -> CalorieStatus:
    _check_target(target)
    if not math.isfinite(actual):
        raise InvalidAmountError(f"Calories must be finite: {actual}")
    difference = actual - target
    return CalorieStatus(
        difference=difference,
        percentage=actual / target * 100,
        is_over=difference > 0,
        is_under=difference < 0,
        is_on_target=abs(difference) < ON_TARGET_TOLERANCE,
    )


def day_macros(meals: DayMeals) -> DayMacros:
    present = _present_meals(meals)
    return DayMacros(
        calories=sum(m.calories for m in present),
        protein=sum(m.nutrition.protein for m in present if m.nutrition),
        carbs=sum(m.nutrition.carbs for m in present if m.nutrition),
        fat=sum(m.nutrition.fat for m in present if m.nutrition),
    )


def missing_slots(meals: DayMeals) -> list[MealType]:
    """Slots without a meal, in display order."""
    if isinstance(meals, DayMealPlan):
        return [slot for slot, meal in meals.items() if meal is None]
    return [slot for slot in MEAL_TYPE_ORDER if meals.get(slot) is None]


def weekly_totals(plans: Iterable[MealPlan]) -> WeeklyTotals:
    """Aggregate stored per-day totals over several days.

    The average is 0 when there are no plans.

    Raises:
        InvalidAmountError: If a plan has a negative or non-finite total.
    """
    plans = list(plans)
    for plan in plans:
        if not math.isfinite(plan.total_calories) or plan.total_calories < 0:
            raise InvalidAmountError(
                f"Invalid calorie total for {plan.date}: {plan.total_calories}"
            )
    total_calories = sum(p.total_calories for p in plans)
    return WeeklyTotals(
        total_calories=total_calories,
        average_calories=total_calories / len(plans) if plans else 0.0,
        total_protein=sum(p.total_protein or 0 for p in plans),
        total_carbs=sum(p.total_carbs or 0 for p in plans),
        total_fat=sum(p.total_fat or 0 for p in plans),
        total_meals=sum(len(p.meals.meals()) for p in plans),
    )
