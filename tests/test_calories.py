"""Tests for calorie aggregation."""

import pytest

from kitchenos.errors import InvalidAmountError, InvalidTargetError
from kitchenos.household.calories import (
    aggregate_calories,
    calorie_status,
    day_macros,
    missing_slots,
    weekly_totals,
)
from kitchenos.types import DayMealPlan, Meal, MealNutrition, MealPlan, MealType


@pytest.fixture
def full_day():
    return DayMealPlan(
        breakfast=Meal(name="Oatmeal", calories=400),
        lunch=Meal(name="Borscht", calories=700),
        dinner=Meal(name="Varenyky", calories=900),
        snack=Meal(name="Apple", calories=300),
    )


def test_empty_day():
    summary = aggregate_calories(DayMealPlan(), 2000)
    assert summary.total_calories == 0
    assert summary.percentage == 0
    assert summary.is_over_target is False
    assert summary.difference == 2000


def test_exactly_on_target(full_day):
    full_day.snack = None
    summary = aggregate_calories(full_day, 2000)
    assert summary.total_calories == 2000
    assert summary.percentage == 100
    assert summary.is_over_target is False
    assert summary.difference == 0


def test_over_target_is_clamped(full_day):
    summary = aggregate_calories(full_day, 2000)
    assert summary.total_calories == 2300
    assert summary.percentage == 100
    assert summary.is_over_target is True
    assert summary.difference == 300


def test_mapping_input():
    meals = {
        MealType.BREAKFAST: Meal(name="Toast", calories=500),
        MealType.LUNCH: None,
    }
    summary = aggregate_calories(meals, 1000)
    assert summary.total_calories == 500
    assert summary.percentage == pytest.approx(50.0)


@pytest.mark.parametrize("target", [0, -100])
def test_non_positive_target_raises(target):
    with pytest.raises(InvalidTargetError):
        aggregate_calories(DayMealPlan(), target)


def test_negative_calories_raise():
    day = DayMealPlan(lunch=Meal(name="Broken", calories=-5))
    with pytest.raises(InvalidAmountError):
        aggregate_calories(day, 2000)


def test_summary_dict(full_day):
    data = aggregate_calories(full_day, 2000).summary_dict()
    assert data == {
        "total_calories": 2300,
        "percentage": 100,
        "is_over_target": True,
        "difference": 300,
    }


class TestCalorieStatus:
    def test_slightly_over_is_on_target(self):
        status = calorie_status(2030, 2000)
        assert status.difference == 30
        assert status.is_over is True
        assert status.is_under is False
        assert status.is_on_target is True

    def test_under(self):
        status = calorie_status(1900, 2000)
        assert status.is_under is True
        assert status.is_on_target is False
        assert status.percentage == pytest.approx(95.0)

    def test_percentage_not_clamped(self):
        assert calorie_status(3000, 2000).percentage == pytest.approx(150.0)

    def test_zero_target_raises(self):
        with pytest.raises(InvalidTargetError):
            calorie_status(100, 0)


def test_day_macros():
    day = DayMealPlan(
        breakfast=Meal(
            name="Eggs",
            calories=300,
            nutrition=MealNutrition(calories=300, protein=20, carbs=2, fat=22),
        ),
        dinner=Meal(
            name="Pasta",
            calories=650,
            nutrition=MealNutrition(calories=650, protein=25, carbs=90, fat=15),
        ),
        snack=Meal(name="Tea", calories=5),
    )
    macros = day_macros(day)
    assert macros.calories == 955
    assert macros.protein == 45
    assert macros.carbs == 92
    assert macros.fat == 37


def test_missing_slots_in_display_order():
    day = DayMealPlan(lunch=Meal(name="Soup", calories=300))
    assert missing_slots(day) == [MealType.BREAKFAST, MealType.SNACK, MealType.DINNER]
    assert missing_slots({MealType.DINNER: Meal(name="x")}) == [
        MealType.BREAKFAST,
        MealType.LUNCH,
        MealType.SNACK,
    ]


def test_weekly_totals(full_day):
    plans = [
        MealPlan(id="1", date="2026-10-19", meals=full_day, total_calories=2300,
                 total_protein=100),
        MealPlan(id="2", date="2026-10-20", total_calories=1700, total_fat=60),
    ]
    totals = weekly_totals(plans)
    assert totals.total_calories == 4000
    assert totals.average_calories == 2000
    assert totals.total_protein == 100
    assert totals.total_fat == 60
    assert totals.total_meals == 4


def test_weekly_totals_empty():
    totals = weekly_totals([])
    assert totals.average_calories == 0
    assert totals.total_meals == 0


class TestNonFiniteValues:
    @pytest.mark.parametrize("target", [float("nan"), float("inf")])
    def test_target(self, full_day, target):
        with pytest.raises(InvalidTargetError):
            aggregate_calories(full_day, target)

    @pytest.mark.parametrize("calories", [float("nan"), float("inf")])
    def test_meal_calories(self, calories):
        day = DayMealPlan(dinner=Meal(name="Broken", calories=calories))
        with pytest.raises(InvalidAmountError):
            aggregate_calories(day, 2000)
        with pytest.raises(InvalidAmountError):
            day_macros(day)

    def test_calorie_status(self):
        with pytest.raises(InvalidAmountError):
            calorie_status(float("nan"), 2000)
        with pytest.raises(InvalidTargetError):
            calorie_status(1800, float("nan"))

    def test_weekly_totals(self):
        plans = [MealPlan(id="1", date="2026-10-19", total_calories=float("nan"))]
        with pytest.raises(InvalidAmountError):
            weekly_totals(plans)
