"""Tests for the BMI calculator."""

import pytest

from kitchenos.errors import DivisionByZeroError, InvalidAmountError
from kitchenos.household.body import BmiBand, bmi_band, calculate_bmi


@pytest.mark.parametrize(
    "weight, height, bmi, band",
    [
        (70, 175, 22.9, BmiBand.NORMAL),
        (50, 160, 19.5, BmiBand.NORMAL),
        (100, 160, 39.1, BmiBand.OBESE),
        (45, 170, 15.6, BmiBand.UNDERWEIGHT),
        (85, 175, 27.8, BmiBand.OVERWEIGHT),
    ],
)
def test_calculate_bmi(weight, height, bmi, band):
    result = calculate_bmi(weight, height)
    assert result.bmi == bmi
    assert result.band is band


@pytest.mark.parametrize(
    "bmi, band",
    [
        (18.4, BmiBand.UNDERWEIGHT),
        (18.5, BmiBand.NORMAL),
        (24.9, BmiBand.NORMAL),
        (25.0, BmiBand.OVERWEIGHT),
        (29.9, BmiBand.OVERWEIGHT),
        (30.0, BmiBand.OBESE),
    ],
)
def test_band_boundaries(bmi, band):
    assert bmi_band(bmi) is band


def test_zero_height_raises():
    with pytest.raises(DivisionByZeroError):
        calculate_bmi(70, 0)


def test_negative_height_raises():
    with pytest.raises(InvalidAmountError):
        calculate_bmi(70, -170)


@pytest.mark.parametrize("weight", [0, -5])
def test_non_positive_weight_raises(weight):
    with pytest.raises(InvalidAmountError):
        calculate_bmi(weight, 175)


@pytest.mark.parametrize(
    "weight, height",
    [
        (float("nan"), 170),
        (70, float("nan")),
        (float("inf"), 170),
        (70, float("inf")),
        (70, float("-inf")),
    ],
)
def test_non_finite_input_raises(weight, height):
    with pytest.raises(InvalidAmountError):
        calculate_bmi(weight, height)
