"""Client-side models of the backend's JSON payloads.

The backend speaks camelCase; these dataclasses use snake_case and are built
with ``from_dict``. They are transient copies refreshed by re-fetching, never
the source of truth.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from .errors import InvalidUnitError


class Unit(str, Enum):
    G = "G"
    ML = "ML"
    PCS = "PCS"


class MealType(str, Enum):
    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    SNACK = "SNACK"


class Goal(str, Enum):
    LOSE_WEIGHT = "LOSE_WEIGHT"
    GAIN_WEIGHT = "GAIN_WEIGHT"
    MAINTAIN = "MAINTAIN"
    SAVE_BUDGET = "SAVE_BUDGET"
    HEALTHY = "HEALTHY"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    UNSPECIFIED = "UNSPECIFIED"


class Role(str, Enum):
    OWNER = "OWNER"
    MEMBER = "MEMBER"


# Display order used by the day view (snack sits between lunch and dinner)
MEAL_TYPE_ORDER: list[MealType] = [
    MealType.BREAKFAST,
    MealType.LUNCH,
    MealType.SNACK,
    MealType.DINNER,
]

UNKNOWN_PRODUCT = "Unknown product"

_NUMBER_RE = re.compile(r"\d+(?:[.,]\d+)?")


def _unit(value: Any, default: Unit = Unit.PCS) -> Unit:
    """Map a wire unit label to ``Unit``; missing or unknown labels get ``default``."""
    from .household.units import normalize_unit

    if value is None or value == "":
        return default
    try:
        return normalize_unit(value)
    except InvalidUnitError:
        return default


def _quantity(amount: Any, raw_unit: Any, default: Unit = Unit.PCS) -> tuple[float, Unit]:
    """Convert a wire amount and unit label to the canonical unit (kg → g)."""
    from .household.units import to_base_quantity

    amount = float(amount or 0)
    if raw_unit is None or raw_unit == "":
        return amount, default
    try:
        return to_base_quantity(amount, raw_unit)
    except InvalidUnitError:
        return amount, default


def _number(value: Any, default: float = 0.0) -> float:
    """Leading number of a value such as ``30``, ``"30"`` or ``"30 min"``."""
    if isinstance(value, (int, float)):
        return float(value)
    match = _NUMBER_RE.match(str(value or "").strip())
    return float(match.group().replace(",", ".")) if match else default


@dataclass
class Product:
    id: str
    name: str
    category: str | None = None
    base_unit: Unit = Unit.PCS
    calories_per_100: float | None = None
    average_price: float | None = None
    standard_amount: float | None = None
    image: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Product:
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            category=data.get("category"),
            base_unit=_unit(data.get("baseUnit") or data.get("unit")),
            calories_per_100=data.get("caloriesPer100"),
            average_price=data.get("averagePrice"),
            standard_amount=data.get("standardAmount"),
            image=data.get("image"),
        )


@dataclass
class InventoryItem:
    id: str
    quantity: float
    unit: Unit = Unit.PCS
    expiry_date: str | None = None
    product: Product | None = None
    product_id: str | None = None
    family_id: str | None = None

    @property
    def name(self) -> str:
        return self.product.name if self.product else UNKNOWN_PRODUCT

    @property
    def category(self) -> str | None:
        return self.product.category if self.product else None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InventoryItem:
        product = data.get("product")
        parsed = Product.from_dict(product) if product else None
        default = parsed.base_unit if parsed else Unit.PCS
        quantity, unit = _quantity(data.get("quantity", 0), data.get("unit"), default)
        return cls(
            id=str(data.get("id", "")),
            quantity=quantity,
            unit=unit,
            # Older endpoints send expirationDate instead of expiryDate
            expiry_date=data.get("expiryDate") or data.get("expirationDate"),
            product=parsed,
            product_id=data.get("productId"),
            family_id=data.get("familyId"),
        )


@dataclass
class InventoryResponse:
    items: list[InventoryItem] = field(default_factory=list)
    grouped: dict[str, list[InventoryItem]] = field(default_factory=dict)
    total: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InventoryResponse:
        items = [InventoryItem.from_dict(i) for i in data.get("items", [])]
        grouped = {
            category: [InventoryItem.from_dict(i) for i in entries]
            for category, entries in (data.get("grouped") or {}).items()
        }
        return cls(items=items, grouped=grouped, total=data.get("total", len(items)))


@dataclass
class ShoppingListItem:
    id: str
    estimated_price: float = 0.0
    is_bought: bool = False
    quantity: float = 1.0
    unit: Unit = Unit.PCS
    product: Product | None = None
    custom_name: str | None = None

    @property
    def name(self) -> str:
        if self.product is not None:
            return self.product.name
        return self.custom_name or UNKNOWN_PRODUCT

    @property
    def category(self) -> str | None:
        return self.product.category if self.product else None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ShoppingListItem:
        product = data.get("product")
        parsed = Product.from_dict(product) if product else None
        default = parsed.base_unit if parsed else Unit.PCS
        quantity, unit = _quantity(data.get("quantity", 1), data.get("unit"), default)
        return cls(
            id=str(data.get("id", "")),
            estimated_price=float(data.get("estimatedPrice") or 0),
            is_bought=bool(data.get("isBought", False)),
            quantity=quantity,
            unit=unit,
            product=parsed,
            custom_name=data.get("customName"),
        )


@dataclass
class MealNutrition:
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MealNutrition:
        return cls(
            calories=float(data.get("calories", 0)),
            protein=float(data.get("protein", 0)),
            carbs=float(data.get("carbs", 0)),
            fat=float(data.get("fat", 0)),
            fiber=data.get("fiber"),
        )


@dataclass
class Ingredient:
    """An ingredient line of a meal or recipe.

    Saved recipes nest the product (``{"amount", "product": {...}}``); generated
    meals and recipes send ``productName`` and ``unit`` flat.
    """

    product_name: str
    amount: float
    unit: Unit = Unit.PCS
    product_id: str | None = None
    available: bool | None = None
    available_quantity: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Ingredient:
        product = data.get("product")
        if product:
            parsed = Product.from_dict(product)
            amount, unit = _quantity(data.get("amount", 0), data.get("unit"), parsed.base_unit)
            return cls(
                product_name=parsed.name,
                amount=amount,
                unit=unit,
                product_id=parsed.id,
                available=data.get("available"),
                available_quantity=data.get("availableQuantity"),
            )
        amount, unit = _quantity(data.get("amount", 0), data.get("unit"))
        return cls(
            product_name=data.get("productName") or data.get("name", ""),
            amount=amount,
            unit=unit,
            product_id=data.get("productId"),
            available=data.get("available"),
            available_quantity=data.get("availableQuantity"),
        )


@dataclass
class Meal:
    name: str
    calories: float = 0.0
    cooking_time: int = 0  # minutes
    servings: int = 1
    id: str = ""
    ingredients: list[Ingredient] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    nutrition: MealNutrition | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Meal:
        nutrition = data.get("nutrition")
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            calories=float(data.get("calories", 0)),
            cooking_time=int(data.get("cookingTime", 0)),
            servings=int(data.get("servings", 1)),
            ingredients=[Ingredient.from_dict(i) for i in data.get("ingredients", [])],
            instructions=list(data.get("instructions", [])),
            nutrition=MealNutrition.from_dict(nutrition) if nutrition else None,
        )


@dataclass
class DayMealPlan:
    """One day of meals, at most one per slot."""

    breakfast: Meal | None = None
    lunch: Meal | None = None
    dinner: Meal | None = None
    snack: Meal | None = None

    def get(self, slot: MealType) -> Meal | None:
        return getattr(self, slot.value.lower())

    def items(self) -> Iterator[tuple[MealType, Meal | None]]:
        """Yield ``(slot, meal)`` pairs in display order."""
        for slot in MEAL_TYPE_ORDER:
            yield slot, self.get(slot)

    def meals(self) -> list[Meal]:
        return [meal for _, meal in self.items() if meal is not None]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DayMealPlan:
        kwargs = {}
        for slot in MealType:
            raw = data.get(slot.value.lower()) or data.get(slot.value)
            kwargs[slot.value.lower()] = Meal.from_dict(raw) if raw else None
        return cls(**kwargs)


@dataclass
class MealPlan:
    id: str
    date: str  # YYYY-MM-DD
    meals: DayMealPlan = field(default_factory=DayMealPlan)
    total_calories: float = 0.0
    total_protein: float | None = None
    total_carbs: float | None = None
    total_fat: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MealPlan:
        return cls(
            id=str(data.get("id", "")),
            date=data.get("date", ""),
            meals=DayMealPlan.from_dict(data.get("meals") or {}),
            total_calories=float(data.get("totalCalories", 0)),
            total_protein=data.get("totalProtein"),
            total_carbs=data.get("totalCarbs"),
            total_fat=data.get("totalFat"),
        )


@dataclass
class Family:
    id: str
    name: str
    budget_limit: float = 0.0
    currency: str = "UAH"
    invite_code: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Family:
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            budget_limit=float(data.get("budgetLimit", 0)),
            currency=data.get("currency", "UAH"),
            invite_code=data.get("inviteCode", ""),
        )


@dataclass
class DashboardStats:
    currency: str
    total_budget: float
    spent: float
    planned: float = 0.0
    remaining: float = 0.0
    projected_remaining: float = 0.0
    status: str = "OK"  # "OK" | "DANGER"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DashboardStats:
        return cls(
            currency=data.get("currency", "UAH"),
            total_budget=float(data.get("totalBudget", 0)),
            spent=float(data.get("spent", 0)),
            planned=float(data.get("planned", 0)),
            remaining=float(data.get("remaining", 0)),
            projected_remaining=float(data.get("projectedRemaining", 0)),
            status=data.get("status", "OK"),
        )


@dataclass
class AuthSession:
    """Holds an authenticated backend session."""

    access_token: str
    email: str = ""


@dataclass
class ProductPage:
    """One page of the product catalogue."""

    products: list[Product] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 0
    total_pages: int = 1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProductPage:
        products = [Product.from_dict(p) for p in data.get("products", [])]
        pagination = data.get("pagination") or {}
        return cls(
            products=products,
            total=int(pagination.get("total", len(products))),
            page=int(pagination.get("page", 1)),
            limit=int(pagination.get("limit", len(products))),
            total_pages=int(pagination.get("totalPages", 1)),
        )


def _instructions(value: Any) -> list[str]:
    # Saved recipes keep instructions as one newline-separated string
    if isinstance(value, str):
        return [line.strip() for line in value.splitlines() if line.strip()]
    return [str(step) for step in value or []]


@dataclass
class Recipe:
    """A saved recipe (has an id) or a freshly generated one (no id yet)."""

    name: str
    id: str = ""
    description: str = ""
    instructions: list[str] = field(default_factory=list)
    cooking_time: int = 0  # minutes
    servings: int = 1
    calories: float = 0.0
    category: str | None = None
    ingredients: list[Ingredient] = field(default_factory=list)
    can_cook: bool | None = None
    missing_products: list[str] = field(default_factory=list)

    @property
    def is_saved(self) -> bool:
        return bool(self.id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Recipe:
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or data.get("title", ""),
            description=data.get("description") or "",
            instructions=_instructions(data.get("instructions") or data.get("steps")),
            cooking_time=int(_number(data.get("cookingTime"))),
            servings=int(data.get("servings") or 1),
            calories=_number(data.get("calories")),
            category=data.get("category"),
            ingredients=[Ingredient.from_dict(i) for i in data.get("ingredients", [])],
            can_cook=data.get("canCook"),
            missing_products=list(data.get("missingProducts") or []),
        )

    def save_payload(self) -> dict[str, Any]:
        """Body for ``POST /recipes/save``; ingredients without a product are dropped."""
        payload: dict[str, Any] = {
            "name": self.name,
            "instructions": "\n".join(self.instructions),
            "cookingTime": self.cooking_time,
            "servings": self.servings,
            "calories": self.calories,
            "ingredients": [
                {"productId": i.product_id, "amount": i.amount}
                for i in self.ingredients
                if i.product_id
            ],
        }
        if self.description:
            payload["description"] = self.description
        if self.category:
            payload["category"] = self.category
        return payload


@dataclass
class ExpiringProduct:
    name: str
    quantity: float = 0.0
    expiry_date: str | None = None


@dataclass
class ExpiringProductsRecipe:
    """A recipe suggested to use up products that are about to expire."""

    expiring_products: list[ExpiringProduct] = field(default_factory=list)
    suggested_recipe: Recipe | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExpiringProductsRecipe:
        recipe = data.get("suggestedRecipe")
        return cls(
            expiring_products=[
                ExpiringProduct(
                    name=p.get("name", ""),
                    quantity=float(p.get("quantity", 0)),
                    expiry_date=p.get("expiryDate"),
                )
                for p in data.get("expiringProducts", [])
            ],
            suggested_recipe=Recipe.from_dict(recipe) if recipe else None,
        )


@dataclass
class AiRecipe:
    """A recipe proposed by the AI chef from the current inventory.

    ``items_to_deduct`` maps inventory item ids to the amount cooking uses;
    the whole object is posted back unchanged to cook it.
    """

    title: str
    description: str = ""
    cooking_time: str = ""
    calories: str = ""
    steps: list[str] = field(default_factory=list)
    ingredients: list[dict[str, str]] = field(default_factory=list)
    items_to_deduct: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AiRecipe:
        return cls(
            title=data.get("title", ""),
            description=data.get("description", ""),
            cooking_time=str(data.get("cookingTime", "")),
            calories=str(data.get("calories", "")),
            steps=list(data.get("steps", [])),
            ingredients=[
                {"name": i.get("name", ""), "amount": str(i.get("amount", ""))}
                for i in data.get("ingredients", [])
            ],
            items_to_deduct={
                str(d["id"]): float(d.get("amountUsed", 0))
                for d in data.get("itemsToDeduct", [])
            },
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "cookingTime": self.cooking_time,
            "calories": self.calories,
            "steps": self.steps,
            "ingredients": self.ingredients,
            "itemsToDeduct": [
                {"id": item_id, "amountUsed": amount}
                for item_id, amount in self.items_to_deduct.items()
            ],
        }


@dataclass
class Allergy:
    id: str
    name: str
    slug: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Allergy:
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            slug=data.get("slug", ""),
        )


def _enum(enum_cls: type[Enum], value: Any, default: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        return default


@dataclass
class FamilyMember:
    """Nutrition profile of one household member (account or not)."""

    id: str
    name: str
    family_id: str = ""
    user_id: str | None = None
    gender: Gender = Gender.UNSPECIFIED
    goal: Goal = Goal.MAINTAIN
    weight: float | None = None
    height: float | None = None
    age: int | None = None
    eats_breakfast: bool = True
    eats_lunch: bool = True
    eats_dinner: bool = True
    eats_snack: bool = True
    allergies: list[Allergy] = field(default_factory=list)

    @property
    def meal_slots(self) -> list[MealType]:
        """Slots this member eats, in display order."""
        eats = {
            MealType.BREAKFAST: self.eats_breakfast,
            MealType.LUNCH: self.eats_lunch,
            MealType.SNACK: self.eats_snack,
            MealType.DINNER: self.eats_dinner,
        }
        return [slot for slot in MEAL_TYPE_ORDER if eats[slot]]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FamilyMember:
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            family_id=str(data.get("familyId") or ""),
            user_id=data.get("userId"),
            gender=_enum(Gender, data.get("gender"), Gender.UNSPECIFIED),
            goal=_enum(Goal, data.get("goal"), Goal.MAINTAIN),
            weight=data.get("weight"),
            height=data.get("height"),
            age=data.get("age"),
            eats_breakfast=data.get("eatsBreakfast", True),
            eats_lunch=data.get("eatsLunch", True),
            eats_dinner=data.get("eatsDinner", True),
            eats_snack=data.get("eatsSnack", True),
            allergies=[Allergy.from_dict(a) for a in data.get("allergies", [])],
        )


@dataclass
class User:
    """An account that belongs to the family."""

    id: str
    email: str
    name: str | None = None
    family_id: str | None = None
    role: Role = Role.MEMBER

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        return cls(
            id=str(data.get("id", "")),
            email=data.get("email", ""),
            name=data.get("name"),
            family_id=data.get("familyId"),
            role=_enum(Role, data.get("roleInFamily"), Role.MEMBER),
        )


@dataclass
class UserProfile:
    id: str
    email: str
    name: str = ""
    family_id: str = ""
    family: Family | None = None
    member_profile: FamilyMember | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserProfile:
        family = data.get("family")
        member = data.get("memberProfile")
        return cls(
            id=str(data.get("id", "")),
            email=data.get("email", ""),
            name=data.get("name") or "",
            family_id=str(data.get("familyId") or ""),
            family=Family.from_dict(family) if family else None,
            member_profile=FamilyMember.from_dict(member) if member else None,
        )
