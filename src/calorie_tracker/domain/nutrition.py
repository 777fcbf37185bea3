"""Nutrition domain models."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class MacroProfile:
    """Calories and macronutrients for one serving or one total."""

    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float


ZERO_MACROS = MacroProfile(calories=0.0, protein_g=0.0, fat_g=0.0, carbs_g=0.0)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded up."""
    return math.floor(value + 0.5)


def value_or_zero(value: float | None) -> float:
    """Apply the default-to-zero policy for an optional nutrient value."""
    if value is None:
        return 0.0
    return float(value)
