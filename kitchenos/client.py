"""Async REST client for the KitchenOS backend."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

import httpx

from .errors import ApiError, AuthenticationError
from .types import (
    AiRecipe,
    Allergy,
    AuthSession,
    DashboardStats,
    DayMealPlan,
    ExpiringProductsRecipe,
    Family,
    FamilyMember,
    InventoryItem,
    InventoryResponse,
    MealPlan,
    Product,
    ProductPage,
    Recipe,
    ShoppingListItem,
    Unit,
    User,
    UserProfile,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://dev.kitchen-os.online"
DEFAULT_TIMEOUT = 30.0


class KitchenOS:
    """Thin wrapper over the backend's REST endpoints.

    Use as an async context manager::

        async with KitchenOS(token="...") as client:
            inventory = await client.get_inventory()

    Every call is an independent request/response; the client keeps no state
    besides the access token.
    """

    def __init__(
        self,
        token: str = "",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token = token
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> KitchenOS:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        logger.debug("%s %s", method, path)
        try:
            response = await self._http.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.HTTPError as e:
            raise ApiError(str(e) or "Something went wrong") from e

        data = _decode(response)

        if response.status_code == 401:
            self.token = ""
            raise AuthenticationError(
                _error_message(data, "Unauthorized"), status=401, data=data
            )
        if response.is_error:
            raise ApiError(
                _error_message(data, response.reason_phrase or "Something went wrong"),
                status=response.status_code,
                data=data,
            )

        # Successful responses are wrapped as {"success": ..., "data": ...}
        if isinstance(data, dict) and data.get("data") is not None:
            return data["data"]
        return data

    # ── auth ────────────────────────────────────────────────────────

    async def login(self, email: str, password: str) -> AuthSession:
        data = await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        return self._store_session(data, email)

    async def register(
        self,
        email: str,
        password: str,
        name: str,
        family_name: str,
        weekly_budget: float,
        height: float | None = None,
        weight: float | None = None,
        goal: str | None = None,
    ) -> AuthSession:
        payload: dict[str, Any] = {
            "email": email,
            "password": password,
            "name": name,
            "familyName": family_name,
            "weeklyBudget": weekly_budget,
        }
        if height is not None:
            payload["height"] = height
        if weight is not None:
            payload["weight"] = weight
        if goal is not None:
            payload["goal"] = goal
        data = await self._request("POST", "/auth/register", json=payload)
        return self._store_session(data, email)

    async def forgot_password(self, email: str) -> str:
        data = await self._request(
            "POST", "/auth/forgot-password", json={"email": email}
        )
        return _message(data)

    async def reset_password(self, token: str, new_password: str) -> str:
        data = await self._request(
            "POST",
            "/auth/reset-password",
            json={"token": token, "newPassword": new_password},
        )
        return _message(data)

    def logout(self) -> None:
        self.token = ""

    def _store_session(self, data: Any, email: str) -> AuthSession:
        token = (data or {}).get("access_token", "")
        if not token:
            raise AuthenticationError("No access token in response", data=data)
        self.token = token
        return AuthSession(access_token=token, email=email)

    # ── inventory ───────────────────────────────────────────────────

    async def get_inventory(self) -> InventoryResponse:
        data = await self._request("GET", "/inventory")
        return InventoryResponse.from_dict(data or {})

    async def get_inventory_item(self, item_id: str) -> InventoryItem:
        data = await self._request("GET", f"/inventory/{item_id}")
        return InventoryItem.from_dict(data)

    async def add_to_inventory(
        self, product_id: str, quantity: float, expiry_date: str | None = None
    ) -> InventoryItem:
        payload: dict[str, Any] = {"productId": product_id, "quantity": quantity}
        if expiry_date:
            payload["expiryDate"] = expiry_date
        data = await self._request("POST", "/inventory", json=payload)
        return InventoryItem.from_dict(data)

    async def update_inventory_item(
        self,
        item_id: str,
        quantity: float | None = None,
        expiry_date: str | None = None,
    ) -> InventoryItem:
        payload: dict[str, Any] = {}
        if quantity is not None:
            payload["quantity"] = quantity
        if expiry_date is not None:
            payload["expiryDate"] = expiry_date
        data = await self._request("PATCH", f"/inventory/{item_id}", json=payload)
        return InventoryItem.from_dict(data)

    async def remove_from_inventory(self, item_id: str, quantity: float) -> Any:
        return await self._request(
            "POST", f"/inventory/{item_id}/remove", json={"quantity": quantity}
        )

    async def delete_inventory_item(self, item_id: str) -> str:
        data = await self._request("DELETE", f"/inventory/{item_id}")
        return _message(data)

    async def get_expiring_products(self, days_ahead: int = 2) -> list[InventoryItem]:
        data = await self._request(
            "GET", "/inventory/expiring", params={"daysAhead": days_ahead}
        )
        return [InventoryItem.from_dict(i) for i in data or []]

    # ── shopping list ───────────────────────────────────────────────

    async def get_shopping_list(self) -> list[ShoppingListItem]:
        data = await self._request("GET", "/shopping-list")
        return [ShoppingListItem.from_dict(i) for i in data or []]

    async def generate_shopping_list(self) -> list[ShoppingListItem]:
        data = await self._request("POST", "/shopping-list/generate")
        return [ShoppingListItem.from_dict(i) for i in data or []]

    async def mark_as_bought(self, item_id: str) -> str:
        data = await self._request("PATCH", f"/shopping-list/{item_id}/buy")
        return _message(data)

    # ── meal plan ───────────────────────────────────────────────────

    async def get_meal_plan(
        self, start_date: str | None = None, end_date: str | None = None
    ) -> list[MealPlan]:
        params = {}
        if start_date:
            params["startDate"] = start_date
        if end_date:
            params["endDate"] = end_date
        data = await self._request("GET", "/meal-plan", params=params or None)
        return _meal_plans(data)

    async def get_meal_plan_for_day(self, date: str) -> MealPlan:
        data = await self._request("GET", f"/meal-plan/day/{date}")
        data = data or {}
        if "meals" not in data:
            # Some deployments return the bare slot mapping for a day
            return MealPlan(id="", date=date, meals=DayMealPlan.from_dict(data))
        return MealPlan.from_dict({"date": date, **data})

    async def generate_meal_plan(self, days_count: int = 7) -> list[MealPlan]:
        data = await self._request(
            "POST", "/meal-plan/generate", json={"daysCount": days_count}
        )
        return _meal_plans(data)

    async def regenerate_day(self, date: str) -> Any:
        return await self._request(
            "POST", "/meal-plan/regenerate-day", json={"date": date}
        )

    async def regenerate_meal(self, meal_plan_id: str) -> Any:
        return await self._request(
            "POST", f"/meal-plan/regenerate-meal/{meal_plan_id}"
        )

    async def delete_meal_plan(self) -> str:
        data = await self._request("DELETE", "/meal-plan")
        return _message(data)

    # ── family / budget ─────────────────────────────────────────────

    async def get_family(self) -> Family:
        data = await self._request("GET", "/family")
        return Family.from_dict(data)

    async def get_dashboard_stats(self) -> DashboardStats:
        data = await self._request("GET", "/family/dashboard")
        return DashboardStats.from_dict(data)

    async def update_family(
        self,
        name: str | None = None,
        budget_limit: float | None = None,
        currency: str | None = None,
    ) -> Family:
        payload = _payload(name=name, budget_limit=budget_limit, currency=currency)
        data = await self._request("PATCH", "/family", json=payload)
        return Family.from_dict(data)

    async def get_family_members(self) -> list[User]:
        data = await self._request("GET", "/family/members")
        return [User.from_dict(u) for u in data or []]

    async def join_family(self, invite_code: str) -> str:
        data = await self._request(
            "POST", "/family/join", json={"inviteCode": invite_code}
        )
        return _message(data)

    async def remove_member(self, member_id: str) -> str:
        data = await self._request("DELETE", f"/family/members/{member_id}")
        return _message(data)

    async def leave_family(self) -> str:
        data = await self._request("POST", "/family/leave")
        return _message(data)

    async def regenerate_invite_code(self) -> str:
        """Issue a new invite code, invalidating the old one."""
        data = await self._request("POST", "/family/regenerate-invite")
        return (data or {}).get("inviteCode", "")

    # ── user profile ────────────────────────────────────────────────

    async def get_profile(self) -> UserProfile:
        data = await self._request("GET", "/users/profile")
        return UserProfile.from_dict(data)

    async def update_profile(
        self, email: str | None = None, name: str | None = None
    ) -> UserProfile:
        data = await self._request(
            "PATCH", "/users/profile", json=_payload(email=email, name=name)
        )
        return UserProfile.from_dict(data or {})

    async def change_password(self, old_password: str, new_password: str) -> str:
        data = await self._request(
            "PATCH",
            "/users/password",
            json={"oldPassword": old_password, "newPassword": new_password},
        )
        return _message(data)

    async def update_preferences(self, **preferences: Any) -> Any:
        """Update the caller's own nutrition preferences.

        Keyword names are snake_case (``allergy_ids``, ``eats_snack``, ...);
        ``None`` values are left unchanged.
        """
        return await self._request(
            "PATCH", "/users/preferences", json=_payload(**preferences)
        )

    async def get_member_profiles(self) -> list[FamilyMember]:
        data = await self._request("GET", "/users/family/members")
        return [FamilyMember.from_dict(m) for m in data or []]

    async def create_member_profile(self, name: str, **settings: Any) -> FamilyMember:
        data = await self._request(
            "POST", "/users/family/members", json=_payload(name=name, **settings)
        )
        return FamilyMember.from_dict(data)

    async def update_member_profile(self, member_id: str, **settings: Any) -> FamilyMember:
        data = await self._request(
            "PATCH", f"/users/family/members/{member_id}", json=_payload(**settings)
        )
        return FamilyMember.from_dict(data)

    async def delete_member_profile(self, member_id: str) -> str:
        data = await self._request("DELETE", f"/users/family/members/{member_id}")
        return _message(data)

    async def get_allergies(self) -> list[Allergy]:
        data = await self._request("GET", "/dictionaries/allergies")
        return [Allergy.from_dict(a) for a in data or []]

    # ── products ────────────────────────────────────────────────────

    async def get_products(
        self,
        search: str | None = None,
        category: str | None = None,
        base_unit: Unit | str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ProductPage:
        params = _payload(
            search=search, category=category, base_unit=base_unit, page=page, limit=limit
        )
        data = await self._request("GET", "/products", params=params or None)
        return ProductPage.from_dict(data or {})

    async def get_product(self, product_id: str) -> Product:
        data = await self._request("GET", f"/products/{product_id}")
        return Product.from_dict(data)

    async def get_product_categories(self) -> list[str]:
        data = await self._request("GET", "/products/categories")
        return list(data or [])

    # ── recipes ─────────────────────────────────────────────────────

    async def get_saved_recipes(self) -> list[Recipe]:
        data = await self._request("GET", "/recipes")
        return [Recipe.from_dict(r) for r in data or []]

    async def get_recipe(self, recipe_id: str) -> Recipe:
        data = await self._request("GET", f"/recipes/{recipe_id}")
        return Recipe.from_dict(data)

    async def generate_recipe_from_inventory(self, portions: int | None = None) -> Recipe:
        data = await self._request(
            "POST", "/recipes/generate/from-inventory", json=_payload(portions=portions)
        )
        return Recipe.from_dict(data)

    async def generate_recipe_from_products(
        self,
        product_ids: list[str],
        portions: int | None = None,
        cuisine: str | None = None,
    ) -> Recipe:
        data = await self._request(
            "POST",
            "/recipes/generate/from-products",
            json=_payload(product_ids=product_ids, portions=portions, cuisine=cuisine),
        )
        return Recipe.from_dict(data)

    async def generate_custom_recipe(
        self, dish_name: str, portions: int | None = None
    ) -> Recipe:
        data = await self._request(
            "POST",
            "/recipes/generate/custom",
            json=_payload(dish_name=dish_name, portions=portions),
        )
        return Recipe.from_dict(data)

    async def save_recipe(self, recipe: Recipe) -> Recipe:
        data = await self._request("POST", "/recipes/save", json=recipe.save_payload())
        return Recipe.from_dict(data)

    async def cook_recipe(self, recipe_id: str) -> Any:
        """Cook a saved recipe; the backend deducts its ingredients from inventory."""
        return await self._request("POST", "/recipes/cook", json={"recipeId": recipe_id})

    async def delete_recipe(self, recipe_id: str) -> str:
        data = await self._request("DELETE", f"/recipes/{recipe_id}")
        return _message(data)

    async def get_expiring_products_recipe(self) -> ExpiringProductsRecipe:
        data = await self._request("GET", "/recipes/expiring")
        return ExpiringProductsRecipe.from_dict(data or {})

    # ── AI chef ─────────────────────────────────────────────────────

    async def generate_ai_recipe(self) -> AiRecipe:
        data = await self._request("POST", "/ai-chef/generate")
        return AiRecipe.from_dict(data)

    async def cook_ai_recipe(self, recipe: AiRecipe) -> Recipe:
        """Cook an AI chef recipe and return the recipe the backend stored."""
        data = await self._request("POST", "/ai-chef/cook", json=recipe.to_dict())
        return Recipe.from_dict((data or {}).get("recipe") or {})

    async def generate_and_cook_ai_recipe(self) -> Recipe:
        return await self.cook_ai_recipe(await self.generate_ai_recipe())


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(data: Any, fallback: str) -> str:
    """Extract the backend's error message; validation errors come as lists."""
    message = data.get("message") if isinstance(data, dict) else None
    if isinstance(message, list):
        message = message[0] if message else None
    return message or fallback


def _message(data: Any) -> str:
    if isinstance(data, dict):
        return data.get("message", "")
    return ""


def _meal_plans(data: Any) -> list[MealPlan]:
    if isinstance(data, dict):
        data = data.get("mealPlans") or data.get("plans") or []
    return [MealPlan.from_dict(p) for p in data or []]


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _payload(**fields: Any) -> dict[str, Any]:
    """camelCase request body from snake_case keywords, skipping ``None``."""
    return {
        _camel(key): value.value if isinstance(value, Enum) else value
        for key, value in fields.items()
        if value is not None
    }
