"""Tests for quantity/unit normalization."""

import pytest

from kitchenos.errors import InvalidAmountError, InvalidUnitError
from kitchenos.household.units import (
    format_quantity,
    normalize_unit,
    to_base_quantity,
    unit_label,
)
from kitchenos.types import Unit


class TestNormalizeUnit:
    def test_canonical_names(self):
        assert normalize_unit("G") is Unit.G
        assert normalize_unit("ML") is Unit.ML
        assert normalize_unit("PCS") is Unit.PCS

    def test_enum_passthrough(self):
        assert normalize_unit(Unit.PCS) is Unit.PCS

    def test_case_and_whitespace(self):
        assert normalize_unit(" Pcs ") is Unit.PCS

    def test_large_units(self):
        assert normalize_unit("kg") is Unit.G
        assert normalize_unit("L") is Unit.ML

    def test_ukrainian_labels(self):
        assert normalize_unit("г") is Unit.G
        assert normalize_unit("мл") is Unit.ML
        assert normalize_unit("шт") is Unit.PCS
        assert normalize_unit("упак") is Unit.PCS

    def test_unknown(self):
        with pytest.raises(InvalidUnitError):
            normalize_unit("bushel")


class TestToBaseQuantity:
    def test_kg(self):
        assert to_base_quantity(1.5, "kg") == (1500.0, Unit.G)

    def test_litre(self):
        assert to_base_quantity(2, "л") == (2000.0, Unit.ML)

    def test_pieces(self):
        assert to_base_quantity(3, "pcs") == (3.0, Unit.PCS)

    def test_negative(self):
        with pytest.raises(InvalidAmountError):
            to_base_quantity(-1, "g")


def test_unit_label():
    assert unit_label(Unit.ML) == "ml"
    assert unit_label("G") == "g"
    assert unit_label("шт") == "pcs"


class TestFormatQuantity:
    def test_grams(self):
        assert format_quantity(250, "G") == "250 g"

    def test_switches_to_litres(self):
        assert format_quantity(1500, Unit.ML) == "1.5 l"

    def test_exact_kilogram(self):
        assert format_quantity(1000, Unit.G) == "1 kg"

    def test_kg_input_small(self):
        assert format_quantity(0.5, "kg") == "500 g"

    def test_pieces_never_scaled(self):
        assert format_quantity(1500, Unit.PCS) == "1500 pcs"

    def test_fractional_pieces(self):
        assert format_quantity(2.25, "pcs") == "2.25 pcs"

    def test_zero(self):
        assert format_quantity(0, Unit.G) == "0 g"

    def test_negative(self):
        with pytest.raises(InvalidAmountError):
            format_quantity(-3, Unit.PCS)


@pytest.mark.parametrize("amount", [float("nan"), float("inf")])
def test_non_finite_quantity_raises(amount):
    with pytest.raises(InvalidAmountError):
        to_base_quantity(amount, "g")
    with pytest.raises(InvalidAmountError):
        format_quantity(amount, Unit.G)
