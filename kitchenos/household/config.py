"""TOML configuration loader for the household module."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from ..client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class ApiConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    token: str = ""


@dataclass
class NutritionConfig:
    calorie_target: float = 2000.0


@dataclass
class ExpiryConfig:
    days_ahead: int = 2


@dataclass
class ShoppingConfig:
    currency: str = "UAH"


@dataclass
class SchedulerConfig:
    expiry_check_schedule: str = "0 8 * * *"
    budget_check_schedule: str = "0 20 * * *"
    budget_check_enabled: bool = True


@dataclass
class HouseholdConfig:
    api: ApiConfig = field(default_factory=ApiConfig)
    nutrition: NutritionConfig = field(default_factory=NutritionConfig)
    expiry: ExpiryConfig = field(default_factory=ExpiryConfig)
    shopping: ShoppingConfig = field(default_factory=ShoppingConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)


def load_config(path: str | Path | None = None) -> HouseholdConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The API URL and token can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    api = raw.get("api", {})
    nut = raw.get("nutrition", {})
    exp = raw.get("expiry", {})
    shp = raw.get("shopping", {})
    sch = raw.get("scheduler", {})

    # Resolve secrets: config file → environment variable
    token = api.get("token", "") or os.environ.get("KITCHENOS_TOKEN", "")
    base_url = (
        api.get("base_url", "")
        or os.environ.get("KITCHENOS_API_URL", "")
        or DEFAULT_BASE_URL
    )

    return HouseholdConfig(
        api=ApiConfig(
            base_url=base_url,
            timeout=float(api.get("timeout", DEFAULT_TIMEOUT)),
            token=token,
        ),
        nutrition=NutritionConfig(
            calorie_target=float(nut.get("calorie_target", 2000.0)),
        ),
        expiry=ExpiryConfig(
            days_ahead=exp.get("days_ahead", 2),
        ),
        shopping=ShoppingConfig(
            currency=shp.get("currency", "UAH"),
        ),
        scheduler=SchedulerConfig(
            expiry_check_schedule=sch.get("expiry_check_schedule", "0 8 * * *"),
            budget_check_schedule=sch.get("budget_check_schedule", "0 20 * * *"),
            budget_check_enabled=sch.get("budget_check_enabled", True),
        ),
    )
