"""Quantity and unit-of-measure normalization for display."""

from __future__ import annotations

import math

from ..errors import InvalidAmountError, InvalidUnitError
from ..types import Unit

# Raw unit label → (canonical unit, factor to the canonical unit)
_UNIT_ALIASES: dict[str, tuple[Unit, float]] = {
    "g": (Unit.G, 1.0),
    "gr": (Unit.G, 1.0),
    "gram": (Unit.G, 1.0),
    "grams": (Unit.G, 1.0),
    "г": (Unit.G, 1.0),
    "гр": (Unit.G, 1.0),
    "kg": (Unit.G, 1000.0),
    "кг": (Unit.G, 1000.0),
    "ml": (Unit.ML, 1.0),
    "мл": (Unit.ML, 1.0),
    "l": (Unit.ML, 1000.0),
    "liter": (Unit.ML, 1000.0),
    "litre": (Unit.ML, 1000.0),
    "л": (Unit.ML, 1000.0),
    "pcs": (Unit.PCS, 1.0),
    "pc": (Unit.PCS, 1.0),
    "piece": (Unit.PCS, 1.0),
    "pieces": (Unit.PCS, 1.0),
    "шт": (Unit.PCS, 1.0),
    "упак": (Unit.PCS, 1.0),
    "pack": (Unit.PCS, 1.0),
}

_LABELS: dict[Unit, str] = {
    Unit.G: "g",
    Unit.ML: "ml",
    Unit.PCS: "pcs",
}

# Larger display unit for mass/volume once the amount reaches 1000
_LARGE_LABELS: dict[Unit, str] = {
    Unit.G: "kg",
    Unit.ML: "l",
}


def _lookup(raw: str | Unit) -> tuple[Unit, float]:
    if isinstance(raw, Unit):
        return raw, 1.0
    key = str(raw).strip().rstrip(".").lower()
    if key.upper() in Unit.__members__:
        return Unit[key.upper()], 1.0
    try:
        return _UNIT_ALIASES[key]
    except KeyError:
        raise InvalidUnitError(f"Unknown unit: {raw!r}") from None


def normalize_unit(raw: str | Unit) -> Unit:
    """Map a raw unit label to its canonical unit.

    Args:
        raw: e.g. "G", "kg", "мл", "шт", or a ``Unit`` member.

    Raises:
        InvalidUnitError: If the label is not recognised.
    """
    return _lookup(raw)[0]


def to_base_quantity(amount: float, raw_unit: str | Unit) -> tuple[float, Unit]:
    """Convert an amount to the canonical unit (kg → g, l → ml)."""
    if not math.isfinite(amount) or amount < 0:
        raise InvalidAmountError(f"Quantity must be a non-negative number: {amount}")
    unit, factor = _lookup(raw_unit)
    return amount * factor, unit


def unit_label(unit: str | Unit) -> str:
    """Return the short display label for a unit ("g", "ml", "pcs")."""
    return _LABELS[normalize_unit(unit)]


def _format_number(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def format_quantity(quantity: float, unit: str | Unit) -> str:
    """Format a quantity for display.

    Mass and volume of 1000 or more switch to kg / l.

    Examples:
        >>> format_quantity(250, "G")
        '250 g'
        >>> format_quantity(1500, Unit.ML)
        '1.5 l'
    """
    amount, canonical = to_base_quantity(quantity, unit)
    if canonical in _LARGE_LABELS and amount >= 1000:
        return f"{_format_number(amount / 1000)} {_LARGE_LABELS[canonical]}"
    return f"{_format_number(amount)} {_LABELS[canonical]}"
