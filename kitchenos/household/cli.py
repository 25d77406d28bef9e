"""CLI entry point for the household module."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import logging
import sys
from datetime import date

from dotenv import load_dotenv

from ..client import KitchenOS
from ..errors import KitchenOSError, ValidationError
from ..types import Recipe
from .body import calculate_bmi
from .calories import aggregate_calories, day_macros, missing_slots
from .config import HouseholdConfig, load_config
from .expiry import ExpiryStatus, ItemFreshness
from .state import FamilyState, InventoryState, MealPlanState, RecipeState, ShoppingState
from .units import format_quantity
from .validation import MIN_PASSWORD_LENGTH, validate_email, validate_password

_STATUS_MARKS = {
    ExpiryStatus.FRESH: "●",
    ExpiryStatus.OKAY: "◐",
    ExpiryStatus.LOW: "○",
    ExpiryStatus.EXPIRED: "✗",
}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="kitchenos-household",
        description="Household inventory, shopping list and meal plan from the terminal",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the config file (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    fridge_parser = sub.add_parser("fridge", help="Show inventory with freshness")
    fridge_parser.add_argument("--json", action="store_true", help="Output JSON")

    exp_parser = sub.add_parser("expiring", help="Show items expiring soon")
    exp_parser.add_argument(
        "--days", type=int, default=None, help="Look-ahead window in days"
    )
    exp_parser.add_argument("--json", action="store_true", help="Output JSON")

    shop_parser = sub.add_parser("shop", help="Show the shopping list and totals")
    shop_parser.add_argument(
        "--generate", action="store_true", help="Regenerate the list from the meal plan"
    )
    shop_parser.add_argument("--json", action="store_true", help="Output JSON")

    buy_parser = sub.add_parser("buy", help="Mark a shopping list item as bought")
    buy_parser.add_argument("item_id", type=str)

    plan_parser = sub.add_parser("plan", help="Show a day's meals and calories")
    plan_parser.add_argument(
        "--date", type=str, default=None, help="Day (YYYY-MM-DD), default today"
    )
    plan_parser.add_argument(
        "--target", type=float, default=None, help="Daily calorie target"
    )
    plan_parser.add_argument("--json", action="store_true", help="Output JSON")

    budget_parser = sub.add_parser("budget", help="Show budget progress")
    budget_parser.add_argument("--json", action="store_true", help="Output JSON")

    recipes_parser = sub.add_parser("recipes", help="List saved recipes")
    recipes_parser.add_argument(
        "--expiring",
        action="store_true",
        help="Suggest a recipe for products that expire soon",
    )
    recipes_parser.add_argument("--json", action="store_true", help="Output JSON")

    cook_parser = sub.add_parser(
        "cook", help="Cook a saved recipe and deduct its ingredients"
    )
    cook_parser.add_argument("recipe_id", type=str)

    bmi_parser = sub.add_parser("bmi", help="Calculate BMI")
    bmi_parser.add_argument("weight", type=float, help="Weight in kg")
    bmi_parser.add_argument("height", type=float, help="Height in cm")
    bmi_parser.add_argument("--json", action="store_true", help="Output JSON")

    login_parser = sub.add_parser("login", help="Log in and print an access token")
    login_parser.add_argument("--email", type=str, required=True)
    login_parser.add_argument(
        "--password", type=str, default=None, help="Prompted for if omitted"
    )

    sub.add_parser("watch", help="Run scheduled expiry and budget checks")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    load_dotenv()
    config = load_config(args.config)

    try:
        match args.command:
            case "fridge":
                asyncio.run(_cmd_fridge(config, args))
            case "expiring":
                asyncio.run(_cmd_expiring(config, args))
            case "shop":
                asyncio.run(_cmd_shop(config, args))
            case "buy":
                asyncio.run(_cmd_buy(config, args))
            case "plan":
                asyncio.run(_cmd_plan(config, args))
            case "budget":
                asyncio.run(_cmd_budget(config, args))
            case "recipes":
                asyncio.run(_cmd_recipes(config, args))
            case "cook":
                asyncio.run(_cmd_cook(config, args))
            case "bmi":
                _cmd_bmi(args)
            case "login":
                asyncio.run(_cmd_login(config, args))
            case "watch":
                _cmd_watch(config)
    except KitchenOSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _client(config: HouseholdConfig) -> KitchenOS:
    return KitchenOS(
        token=config.api.token,
        base_url=config.api.base_url,
        timeout=config.api.timeout,
    )


def _unwrap(result):
    if not result.ok:
        raise result.error
    return result.value


def _freshness_dict(f: ItemFreshness) -> dict:
    return {
        "id": f.item.id,
        "name": f.name,
        "category": f.item.category,
        "amount": f.amount,
        "expiry_date": f.item.expiry_date,
        "days_until_expiration": f.expiry.days_until_expiration,
        "status": f.expiry.status.value,
        "freshness_percent": f.expiry.freshness_percent,
    }


def _print_freshness(rows: list[ItemFreshness]) -> None:
    print(f"  {'Product':<20} {'Amount':<10} {'Expires':<12} {'Status':<8} Fresh")
    print(f"  {'─' * 60}")
    for f in rows:
        exp = (f.item.expiry_date or "—")[:10]
        mark = _STATUS_MARKS[f.expiry.status]
        print(
            f"  {f.name:<20} {f.amount:<10} {exp:<12} "
            f"{mark} {f.expiry.status.value:<6} {f.expiry.freshness_percent:>3}%"
        )


async def _cmd_fridge(config: HouseholdConfig, args) -> None:
    async with _client(config) as client:
        state = InventoryState(client)
        _unwrap(await state.fetch())

    rows = state.freshness()
    if args.json:
        print(json.dumps([_freshness_dict(f) for f in rows], ensure_ascii=False, indent=2))
        return
    if not rows:
        print("The fridge is empty.")
        return
    print(f"🧊 Inventory ({state.total} items)")
    _print_freshness(rows)


async def _cmd_expiring(config: HouseholdConfig, args) -> None:
    days = args.days if args.days is not None else config.expiry.days_ahead
    async with _client(config) as client:
        state = InventoryState(client)
        _unwrap(await state.fetch())

    rows = state.expiring(days_ahead=days)
    if args.json:
        print(json.dumps([_freshness_dict(f) for f in rows], ensure_ascii=False, indent=2))
        return
    if not rows:
        print(f"Nothing expires in the next {days} day(s).")
        return
    print(f"⏰ Expiring within {days} day(s): {len(rows)}")
    _print_freshness(rows)


async def _cmd_shop(config: HouseholdConfig, args) -> None:
    async with _client(config) as client:
        state = ShoppingState(client)
        if args.generate:
            _unwrap(await state.generate())
        else:
            _unwrap(await state.fetch())

    stats = state.stats
    currency = config.shopping.currency

    if args.json:
        data = {
            "items": [
                {
                    "id": i.id,
                    "name": i.name,
                    "quantity": i.quantity,
                    "unit": i.unit.value,
                    "estimated_price": i.estimated_price,
                    "is_bought": i.is_bought,
                }
                for i in state.items
            ],
            "stats": stats.summary_dict(),
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not state.items:
        print("The shopping list is empty.")
        return

    print(f"🛒 Shopping list: {stats.bought_items} of {stats.total_items} bought "
          f"({stats.progress_percent}%)")
    for item in state.remaining + state.bought:
        box = "[x]" if item.is_bought else "[ ]"
        print(f"  {box} {item.name:<20} {item.estimated_price:>8.2f} {currency}  ({item.id})")
    print(f"  {'─' * 44}")
    print(f"  Total:     {stats.total_price:>10.2f} {currency}")
    print(f"  Bought:    {stats.bought_price:>10.2f} {currency}")
    print(f"  Remaining: {stats.remaining_price:>10.2f} {currency}")


async def _cmd_buy(config: HouseholdConfig, args) -> None:
    async with _client(config) as client:
        state = ShoppingState(client)
        _unwrap(await state.fetch())
        item = state.find(args.item_id)
        if item is not None and item.is_bought:
            print(f"{item.name} is already bought.")
            return
        _unwrap(await state.mark_bought(args.item_id))
    print(f"Marked {item.name} as bought.")


async def _cmd_plan(config: HouseholdConfig, args) -> None:
    day = args.date or date.today().isoformat()
    target = args.target if args.target is not None else config.nutrition.calorie_target

    async with _client(config) as client:
        state = MealPlanState(client)
        plan = _unwrap(await state.fetch_day(day))

    summary = aggregate_calories(plan.meals, target)
    macros = day_macros(plan.meals)

    if args.json:
        data = {
            "date": day,
            "meals": {
                slot.value: (
                    {"name": meal.name, "calories": meal.calories,
                     "cooking_time": meal.cooking_time, "servings": meal.servings}
                    if meal else None
                )
                for slot, meal in plan.meals.items()
            },
            "calories": summary.summary_dict(),
            "macros": {
                "protein": round(macros.protein, 1),
                "carbs": round(macros.carbs, 1),
                "fat": round(macros.fat, 1),
            },
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    print(f"📅 Meal plan for {day}")
    for slot, meal in plan.meals.items():
        if meal is None:
            print(f"  {slot.value:<10} —")
        else:
            print(f"  {slot.value:<10} {meal.name} ({meal.calories:.0f} kcal, {meal.cooking_time} min)")
    sign = "+" if summary.is_over_target else "-"
    print(f"  {'─' * 44}")
    print(f"  {summary.total_calories:.0f} / {target:.0f} kcal "
          f"({summary.percentage:.0f}%, {sign}{summary.difference:.0f})")
    empty = missing_slots(plan.meals)
    if empty:
        print(f"  Empty slots: {', '.join(s.value for s in empty)}")


async def _cmd_budget(config: HouseholdConfig, args) -> None:
    async with _client(config) as client:
        state = FamilyState(client)
        _unwrap(await state.fetch())

    dash = state.dashboard
    progress = state.budget

    if args.json:
        data = {
            "currency": dash.currency,
            "total_budget": dash.total_budget,
            "spent": dash.spent,
            "planned": dash.planned,
            "remaining": dash.remaining,
            "percentage": progress.percentage,
            "level": progress.level.value,
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    print(f"💰 Budget: {dash.spent:.2f} of {dash.total_budget:.2f} {dash.currency} "
          f"({progress.percentage}%, {progress.level.value})")
    print(f"   Planned: {dash.planned:.2f}  Remaining: {dash.remaining:.2f}")


def _recipe_dict(recipe: Recipe) -> dict:
    return {
        "id": recipe.id or None,
        "name": recipe.name,
        "cooking_time": recipe.cooking_time,
        "servings": recipe.servings,
        "calories": recipe.calories,
        "can_cook": recipe.can_cook,
        "missing_products": recipe.missing_products,
        "ingredients": [
            {"name": i.product_name, "amount": format_quantity(i.amount, i.unit)}
            for i in recipe.ingredients
        ],
        "instructions": recipe.instructions,
    }


def _print_recipe(recipe: Recipe) -> None:
    print(f"🍳 {recipe.name} ({recipe.cooking_time} min, {recipe.servings} servings, "
          f"{recipe.calories:.0f} kcal)")
    for i in recipe.ingredients:
        print(f"  - {i.product_name} {format_quantity(i.amount, i.unit)}")
    for n, step in enumerate(recipe.instructions, 1):
        print(f"  {n}. {step}")
    if recipe.missing_products:
        print(f"  Missing: {', '.join(recipe.missing_products)}")


async def _cmd_recipes(config: HouseholdConfig, args) -> None:
    async with _client(config) as client:
        state = RecipeState(client)
        if args.expiring:
            suggestion = _unwrap(await state.suggest_for_expiring())
        else:
            _unwrap(await state.fetch_saved())

    if args.expiring:
        recipe = suggestion.suggested_recipe
        if args.json:
            data = {
                "expiring_products": [
                    {"name": p.name, "quantity": p.quantity, "expiry_date": p.expiry_date}
                    for p in suggestion.expiring_products
                ],
                "suggested_recipe": _recipe_dict(recipe) if recipe else None,
            }
            print(json.dumps(data, ensure_ascii=False, indent=2))
            return
        names = ", ".join(p.name for p in suggestion.expiring_products)
        print(f"⏰ Expiring: {names or 'nothing'}")
        if recipe is not None:
            _print_recipe(recipe)
        return

    if args.json:
        print(json.dumps(
            [_recipe_dict(r) for r in state.saved_recipes], ensure_ascii=False, indent=2
        ))
        return
    if not state.saved_recipes:
        print("No saved recipes.")
        return
    for r in state.saved_recipes:
        print(f"  {r.name:<30} {r.cooking_time:>4} min {r.calories:>6.0f} kcal  ({r.id})")


async def _cmd_cook(config: HouseholdConfig, args) -> None:
    async with _client(config) as client:
        state = RecipeState(client)
        _unwrap(await state.cook(args.recipe_id))
    print(f"Cooked {args.recipe_id}; ingredients deducted from inventory.")


def _cmd_bmi(args) -> None:
    result = calculate_bmi(args.weight, args.height)
    if args.json:
        print(json.dumps({"bmi": result.bmi, "band": result.band.value}))
    else:
        print(f"BMI {result.bmi} ({result.band.value})")


async def _cmd_login(config: HouseholdConfig, args) -> None:
    if not validate_email(args.email):
        raise ValidationError(f"Invalid email: {args.email}")
    password = args.password or getpass.getpass("Password: ")
    if not validate_password(password):
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    async with _client(config) as client:
        session = await client.login(args.email, password)
    print(session.access_token)
    print("Set KITCHENOS_TOKEN to this value to use it.", file=sys.stderr)


def _cmd_watch(config: HouseholdConfig) -> None:
    from .scheduler import ExpiryWatchScheduler

    async def run() -> None:
        scheduler = ExpiryWatchScheduler(config)
        scheduler.start()
        for job in scheduler.get_jobs():
            print(f"  {job['name']}: next run {job['next_run']}")
        try:
            await asyncio.Event().wait()
        finally:
            scheduler.stop()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass
