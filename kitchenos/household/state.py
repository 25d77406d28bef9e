"""Application state for the household views.

Each state object is built around an injected :class:`~kitchenos.client.KitchenOS`
client. Async methods never raise for expected failures: they return a
:class:`Result` and record the error message on the state, so a view can
render a fallback. Inventory, shopping and meal-plan mutations re-fetch from
the backend; recipe saves and deletes apply the backend's answer locally.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Generic, TypeVar

from ..errors import KitchenOSError
from ..types import (
    DashboardStats,
    ExpiringProductsRecipe,
    Family,
    InventoryItem,
    MealPlan,
    Recipe,
    ShoppingListItem,
)
from .calories import CalorieSummary, aggregate_calories
from .expiry import ItemFreshness, classify_item, expiring_soon
from .shopping import BudgetProgress, ShoppingStats, aggregate_shopping_stats, budget_progress

if TYPE_CHECKING:
    from ..client import KitchenOS

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a state operation: a value or an error, never both."""

    value: T | None = None
    error: KitchenOSError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: KitchenOSError) -> Result[T]:
        return cls(error=error)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _State:
    def __init__(self, client: KitchenOS) -> None:
        self._client = client
        self.is_loading = False
        self.error: str | None = None

    async def _run(self, action: Callable[[], Awaitable[T]]) -> Result[T]:
        self.is_loading = True
        self.error = None
        try:
            value = await action()
        except KitchenOSError as e:
            logger.warning("%s failed: %s", type(self).__name__, e)
            self.error = str(e)
            return Result.failure(e)
        finally:
            self.is_loading = False
        return Result.success(value)

    def clear_error(self) -> None:
        self.error = None


class InventoryState(_State):
    """Inventory items with freshness views."""

    def __init__(self, client: KitchenOS) -> None:
        super().__init__(client)
        self.items: list[InventoryItem] = []
        self.grouped: dict[str, list[InventoryItem]] = {}
        self.total = 0

    async def _load(self) -> list[InventoryItem]:
        response = await self._client.get_inventory()
        self.items = response.items
        self.grouped = response.grouped
        self.total = response.total
        return self.items

    async def fetch(self) -> Result[list[InventoryItem]]:
        return await self._run(self._load)

    async def add(
        self, product_id: str, quantity: float, expiry_date: str | None = None
    ) -> Result[list[InventoryItem]]:
        async def action() -> list[InventoryItem]:
            await self._client.add_to_inventory(product_id, quantity, expiry_date)
            return await self._load()

        return await self._run(action)

    async def update(
        self,
        item_id: str,
        quantity: float | None = None,
        expiry_date: str | None = None,
    ) -> Result[list[InventoryItem]]:
        async def action() -> list[InventoryItem]:
            await self._client.update_inventory_item(item_id, quantity, expiry_date)
            return await self._load()

        return await self._run(action)

    async def remove(self, item_id: str, quantity: float) -> Result[list[InventoryItem]]:
        async def action() -> list[InventoryItem]:
            await self._client.remove_from_inventory(item_id, quantity)
            return await self._load()

        return await self._run(action)

    async def delete(self, item_id: str) -> Result[list[InventoryItem]]:
        async def action() -> list[InventoryItem]:
            await self._client.delete_inventory_item(item_id)
            return await self._load()

        return await self._run(action)

    def freshness(self, now: datetime | date | str | None = None) -> list[ItemFreshness]:
        now = now or _utcnow()
        return [classify_item(item, now) for item in self.items]

    def expiring(
        self, days_ahead: int = 2, now: datetime | date | str | None = None
    ) -> list[ItemFreshness]:
        return expiring_soon(self.items, now or _utcnow(), days_ahead=days_ahead)

    def reset(self) -> None:
        self.items = []
        self.grouped = {}
        self.total = 0
        self.is_loading = False
        self.error = None


class ShoppingState(_State):
    """Shopping list with optimistic bought toggling."""

    def __init__(self, client: KitchenOS) -> None:
        super().__init__(client)
        self.items: list[ShoppingListItem] = []

    async def fetch(self) -> Result[list[ShoppingListItem]]:
        async def action() -> list[ShoppingListItem]:
            self.items = await self._client.get_shopping_list()
            return self.items

        return await self._run(action)

    async def generate(self) -> Result[list[ShoppingListItem]]:
        async def action() -> list[ShoppingListItem]:
            await self._client.generate_shopping_list()
            self.items = await self._client.get_shopping_list()
            return self.items

        return await self._run(action)

    def _set_bought(self, item_id: str, is_bought: bool) -> None:
        for item in self.items:
            if item.id == item_id:
                item.is_bought = is_bought

    async def toggle_bought(self, item_id: str) -> Result[list[ShoppingListItem]]:
        """Flip an item's bought flag locally, then confirm with the backend.

        The local flip is rolled back if the request fails.
        """
        current = next((i.is_bought for i in self.items if i.id == item_id), None)
        if current is None:
            return Result.failure(KitchenOSError(f"Unknown shopping item: {item_id}"))

        self._set_bought(item_id, not current)
        try:
            await self._client.mark_as_bought(item_id)
        except KitchenOSError as e:
            logger.warning("Toggling %s failed, rolling back: %s", item_id, e)
            self._set_bought(item_id, current)
            self.error = str(e)
            return Result.failure(e)
        return Result.success(self.items)

    def find(self, item_id: str) -> ShoppingListItem | None:
        return next((item for item in self.items if item.id == item_id), None)

    async def mark_bought(self, item_id: str) -> Result[list[ShoppingListItem]]:
        """Mark an item as bought; already bought items are left alone."""
        item = self.find(item_id)
        if item is None:
            return Result.failure(KitchenOSError(f"Unknown shopping item: {item_id}"))
        if item.is_bought:
            return Result.success(self.items)
        return await self.toggle_bought(item_id)

    @property
    def stats(self) -> ShoppingStats:
        return aggregate_shopping_stats(self.items)

    @property
    def remaining(self) -> list[ShoppingListItem]:
        return [item for item in self.items if not item.is_bought]

    @property
    def bought(self) -> list[ShoppingListItem]:
        return [item for item in self.items if item.is_bought]


class MealPlanState(_State):
    """Meal plans keyed by day."""

    def __init__(self, client: KitchenOS) -> None:
        super().__init__(client)
        self.plans: list[MealPlan] = []
        self.is_generating = False

    @property
    def by_day(self) -> dict[str, MealPlan]:
        return {plan.date: plan for plan in self.plans}

    async def fetch(
        self, start_date: str | None = None, end_date: str | None = None
    ) -> Result[list[MealPlan]]:
        async def action() -> list[MealPlan]:
            self.plans = await self._client.get_meal_plan(start_date, end_date)
            return self.plans

        return await self._run(action)

    async def fetch_day(self, day: str) -> Result[MealPlan]:
        async def action() -> MealPlan:
            plan = await self._client.get_meal_plan_for_day(day)
            self.plans = [p for p in self.plans if p.date != day] + [plan]
            return plan

        return await self._run(action)

    async def generate(self, days_count: int = 7) -> Result[list[MealPlan]]:
        async def action() -> list[MealPlan]:
            await self._client.generate_meal_plan(days_count)
            self.plans = await self._client.get_meal_plan()
            return self.plans

        self.is_generating = True
        try:
            return await self._run(action)
        finally:
            self.is_generating = False

    async def regenerate_day(self, day: str) -> Result[list[MealPlan]]:
        async def action() -> list[MealPlan]:
            await self._client.regenerate_day(day)
            self.plans = await self._client.get_meal_plan()
            return self.plans

        return await self._run(action)

    async def regenerate_meal(self, meal_plan_id: str) -> Result[list[MealPlan]]:
        async def action() -> list[MealPlan]:
            await self._client.regenerate_meal(meal_plan_id)
            self.plans = await self._client.get_meal_plan()
            return self.plans

        return await self._run(action)

    async def delete(self) -> Result[Any]:
        async def action() -> str:
            message = await self._client.delete_meal_plan()
            self.plans = []
            return message

        return await self._run(action)

    def calories(self, day: str, target_calories: float) -> CalorieSummary | None:
        """Calorie summary for a loaded day, or None if the day isn't loaded."""
        plan = self.by_day.get(day)
        if plan is None:
            return None
        return aggregate_calories(plan.meals, target_calories)


class FamilyState(_State):
    """Family settings and the budget dashboard."""

    def __init__(self, client: KitchenOS) -> None:
        super().__init__(client)
        self.family: Family | None = None
        self.dashboard: DashboardStats | None = None

    async def fetch(self) -> Result[Family]:
        async def action() -> Family:
            self.family = await self._client.get_family()
            self.dashboard = await self._client.get_dashboard_stats()
            return self.family

        return await self._run(action)

    async def update_budget(
        self, budget_limit: float, currency: str | None = None
    ) -> Result[Family]:
        async def action() -> Family:
            self.family = await self._client.update_family(
                budget_limit=budget_limit, currency=currency
            )
            self.dashboard = await self._client.get_dashboard_stats()
            return self.family

        return await self._run(action)

    @property
    def budget(self) -> BudgetProgress | None:
        if self.dashboard is None:
            return None
        return budget_progress(self.dashboard.spent, self.dashboard.total_budget)


class RecipeState(_State):
    """Saved recipes, the recipe being viewed, and cooking."""

    def __init__(self, client: KitchenOS) -> None:
        super().__init__(client)
        self.saved_recipes: list[Recipe] = []
        self.current_recipe: Recipe | None = None
        self.is_generating = False

    async def fetch_saved(self) -> Result[list[Recipe]]:
        async def action() -> list[Recipe]:
            self.saved_recipes = await self._client.get_saved_recipes()
            return self.saved_recipes

        return await self._run(action)

    async def fetch_by_id(self, recipe_id: str) -> Result[Recipe]:
        async def action() -> Recipe:
            self.current_recipe = await self._client.get_recipe(recipe_id)
            return self.current_recipe

        return await self._run(action)

    async def _generate(self, request: Callable[[], Awaitable[Recipe]]) -> Result[Recipe]:
        async def action() -> Recipe:
            self.current_recipe = await request()
            return self.current_recipe

        self.is_generating = True
        try:
            return await self._run(action)
        finally:
            self.is_generating = False

    async def generate_from_inventory(self, portions: int | None = None) -> Result[Recipe]:
        return await self._generate(
            lambda: self._client.generate_recipe_from_inventory(portions)
        )

    async def generate_from_products(
        self,
        product_ids: list[str],
        portions: int | None = None,
        cuisine: str | None = None,
    ) -> Result[Recipe]:
        return await self._generate(
            lambda: self._client.generate_recipe_from_products(
                product_ids, portions, cuisine
            )
        )

    async def generate_custom(
        self, dish_name: str, portions: int | None = None
    ) -> Result[Recipe]:
        return await self._generate(
            lambda: self._client.generate_custom_recipe(dish_name, portions)
        )

    async def suggest_for_expiring(self) -> Result[ExpiringProductsRecipe]:
        async def action() -> ExpiringProductsRecipe:
            suggestion = await self._client.get_expiring_products_recipe()
            if suggestion.suggested_recipe is not None:
                self.current_recipe = suggestion.suggested_recipe
            return suggestion

        return await self._run(action)

    async def save(self, recipe: Recipe | None = None) -> Result[Recipe]:
        """Save ``recipe`` (default: the current one); newest first in the list."""
        recipe = recipe or self.current_recipe
        if recipe is None:
            return Result.failure(KitchenOSError("No recipe to save"))

        async def action() -> Recipe:
            saved = await self._client.save_recipe(recipe)
            self.saved_recipes = [saved] + self.saved_recipes
            self.current_recipe = saved
            return saved

        return await self._run(action)

    async def cook(self, recipe_id: str) -> Result[Any]:
        """Cook a saved recipe; the backend deducts its ingredients from inventory."""
        return await self._run(lambda: self._client.cook_recipe(recipe_id))

    async def delete(self, recipe_id: str) -> Result[list[Recipe]]:
        async def action() -> list[Recipe]:
            await self._client.delete_recipe(recipe_id)
            self.saved_recipes = [r for r in self.saved_recipes if r.id != recipe_id]
            if self.current_recipe is not None and self.current_recipe.id == recipe_id:
                self.current_recipe = None
            return self.saved_recipes

        return await self._run(action)

    def reset(self) -> None:
        self.saved_recipes = []
        self.current_recipe = None
        self.is_loading = False
        self.is_generating = False
        self.error = None
