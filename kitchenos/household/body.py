"""Body-mass index shown during onboarding."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from ..errors import DivisionByZeroError, InvalidAmountError


class BmiBand(str, Enum):
    UNDERWEIGHT = "UNDERWEIGHT"
    NORMAL = "NORMAL"
    OVERWEIGHT = "OVERWEIGHT"
    OBESE = "OBESE"


@dataclass(frozen=True)
class BmiResult:
    bmi: float
    band: BmiBand


def bmi_band(bmi: float) -> BmiBand:
    if bmi < 18.5:
        return BmiBand.UNDERWEIGHT
    if bmi < 25:
        return BmiBand.NORMAL
    if bmi < 30:
        return BmiBand.OVERWEIGHT
    return BmiBand.OBESE


def calculate_bmi(weight_kg: float, height_cm: float) -> BmiResult:
    """BMI rounded to one decimal, banded on the rounded value.

    Raises:
        DivisionByZeroError: If ``height_cm`` is zero.
        InvalidAmountError: If height is negative, weight is not positive,
            or either value is NaN or infinite.
    """
    if not (math.isfinite(weight_kg) and math.isfinite(height_cm)):
        raise InvalidAmountError(
            f"Weight and height must be finite: weight={weight_kg}, height={height_cm}"
        )
    if height_cm == 0:
        raise DivisionByZeroError("Height must not be zero")
    if height_cm < 0:
        raise InvalidAmountError(f"Height must be positive: {height_cm}")
    if weight_kg <= 0:
        raise InvalidAmountError(f"Weight must be positive: {weight_kg}")

    height_m = height_cm / 100
    bmi = round(weight_kg / (height_m * height_m), 1)
    return BmiResult(bmi=bmi, band=bmi_band(bmi))
