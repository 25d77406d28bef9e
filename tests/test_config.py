"""Tests for household config loading."""

import os
import tempfile

import pytest

from kitchenos.client import DEFAULT_BASE_URL
from kitchenos.household.config import HouseholdConfig, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("KITCHENOS_TOKEN", raising=False)
    monkeypatch.delenv("KITCHENOS_API_URL", raising=False)


def _load_toml(content: bytes) -> HouseholdConfig:
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(content)
        f.flush()
        config = load_config(f.name)
    os.unlink(f.name)
    return config


def test_load_config_defaults():
    """Loading with no path returns all defaults."""
    config = load_config()
    assert isinstance(config, HouseholdConfig)
    assert config.api.base_url == DEFAULT_BASE_URL
    assert config.api.token == ""
    assert config.api.timeout == 30.0
    assert config.nutrition.calorie_target == 2000.0
    assert config.expiry.days_ahead == 2
    assert config.shopping.currency == "UAH"
    assert config.scheduler.expiry_check_schedule == "0 8 * * *"
    assert config.scheduler.budget_check_enabled is True


def test_load_config_nonexistent_file():
    """Loading a nonexistent file returns defaults."""
    config = load_config("/nonexistent/path.toml")
    assert config.expiry.days_ahead == 2


def test_load_config_from_toml():
    config = _load_toml(b"""\
[api]
base_url = "http://localhost:3000"
timeout = 5
token = "file-token"

[nutrition]
calorie_target = 1800

[expiry]
days_ahead = 4

[shopping]
currency = "EUR"

[scheduler]
expiry_check_schedule = "30 7 * * *"
budget_check_enabled = false
""")
    assert config.api.base_url == "http://localhost:3000"
    assert config.api.timeout == 5.0
    assert config.api.token == "file-token"
    assert config.nutrition.calorie_target == 1800.0
    assert config.expiry.days_ahead == 4
    assert config.shopping.currency == "EUR"
    assert config.scheduler.expiry_check_schedule == "30 7 * * *"
    assert config.scheduler.budget_check_schedule == "0 20 * * *"
    assert config.scheduler.budget_check_enabled is False


def test_load_config_env_override(monkeypatch):
    """Environment variables fill in an empty token and URL."""
    monkeypatch.setenv("KITCHENOS_TOKEN", "env-token")
    monkeypatch.setenv("KITCHENOS_API_URL", "http://env.example")

    config = load_config()
    assert config.api.token == "env-token"
    assert config.api.base_url == "http://env.example"


def test_load_config_file_takes_precedence(monkeypatch):
    monkeypatch.setenv("KITCHENOS_TOKEN", "env-token")
    monkeypatch.setenv("KITCHENOS_API_URL", "http://env.example")

    config = _load_toml(b"""\
[api]
token = "file-token"
base_url = "http://file.example"
""")
    assert config.api.token == "file-token"
    assert config.api.base_url == "http://file.example"


def test_load_config_partial_toml():
    """Partial TOML uses defaults for missing sections."""
    config = _load_toml(b"""\
[shopping]
currency = "USD"
""")
    assert config.shopping.currency == "USD"
    assert config.nutrition.calorie_target == 2000.0
    assert config.api.base_url == DEFAULT_BASE_URL
