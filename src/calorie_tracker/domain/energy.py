"""Daily energy need estimation (Mifflin-St Jeor)."""

from calorie_tracker.domain.nutrition import round_half_up

ACTIVITY_FACTORS: dict[str, float] = {
    "sedentary": 1.2,
    "lightly_active": 1.375,
    "moderately_active": 1.55,
    "very_active": 1.725,
    "extra_active": 1.9,
}

_GENDER_OFFSETS: dict[str, float] = {
    "male": 5.0,
    "female": -161.0,
}


def basal_metabolic_rate(
    gender: str, age: float, height_cm: float, weight_kg: float
) -> float | None:
    """Return BMR in kcal/day, or None for genders without a formula."""
    offset = _GENDER_OFFSETS.get(str(gender))
    if offset is None:
        return None
    return 10 * weight_kg + 6.25 * height_cm - 5 * age + offset


def estimate_daily_energy_need(
    gender: str | None,
    age: float | None,
    height_cm: float | None,
    weight_kg: float | None,
    activity_level: str | None,
) -> int | None:
    """Estimate total daily energy expenditure in kcal.

    Returns None when any input is missing, the gender is "other", or the
    activity level is not one of the known tiers.
    """
    if None in (gender, age, height_cm, weight_kg, activity_level):
        return None
    factor = ACTIVITY_FACTORS.get(str(activity_level))
    if factor is None:
        return None
    bmr = basal_metabolic_rate(str(gender), age, height_cm, weight_kg)
    if bmr is None:
        return None
    return round_half_up(bmr * factor)
