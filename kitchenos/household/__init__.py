"""Household views: freshness, shopping totals, calories and BMI."""

from .body import BmiBand, BmiResult, calculate_bmi
from .calories import (
    CalorieStatus,
    CalorieSummary,
    DayMacros,
    WeeklyTotals,
    aggregate_calories,
    calorie_status,
    day_macros,
    missing_slots,
    weekly_totals,
)
from .config import (
    ApiConfig,
    ExpiryConfig,
    HouseholdConfig,
    NutritionConfig,
    SchedulerConfig,
    ShoppingConfig,
    load_config,
)
from .expiry import (
    ExpiryResult,
    ExpiryStatus,
    ItemFreshness,
    classify_expiry,
    classify_item,
    expiring_soon,
)
from .shopping import (
    BudgetLevel,
    BudgetProgress,
    ShoppingStats,
    aggregate_shopping_stats,
    budget_progress,
)
from .state import (
    FamilyState,
    InventoryState,
    MealPlanState,
    RecipeState,
    Result,
    ShoppingState,
)
from .units import format_quantity, normalize_unit, to_base_quantity, unit_label
from .validation import (
    ValidationResult,
    validate_email,
    validate_email_with_message,
    validate_name,
    validate_name_with_message,
    validate_password,
    validate_password_with_message,
)

__all__ = [
    "classify_expiry",
    "classify_item",
    "expiring_soon",
    "ExpiryResult",
    "ExpiryStatus",
    "ItemFreshness",
    "aggregate_shopping_stats",
    "budget_progress",
    "ShoppingStats",
    "BudgetProgress",
    "BudgetLevel",
    "aggregate_calories",
    "calorie_status",
    "day_macros",
    "missing_slots",
    "weekly_totals",
    "CalorieSummary",
    "CalorieStatus",
    "DayMacros",
    "WeeklyTotals",
    "calculate_bmi",
    "BmiResult",
    "BmiBand",
    "normalize_unit",
    "to_base_quantity",
    "unit_label",
    "format_quantity",
    "InventoryState",
    "ShoppingState",
    "MealPlanState",
    "FamilyState",
    "RecipeState",
    "Result",
    "HouseholdConfig",
    "ApiConfig",
    "NutritionConfig",
    "ExpiryConfig",
    "ShoppingConfig",
    "SchedulerConfig",
    "load_config",
    "ValidationResult",
    "validate_email",
    "validate_password",
    "validate_name",
    "validate_email_with_message",
    "validate_password_with_message",
    "validate_name_with_message",
]
