"""Tests for domain helpers."""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from calorie_tracker.domain.daily_logs import (
    add_food,
    compute_totals,
    new_daily_log,
    normalize_log_date,
    remove_entry,
)
from calorie_tracker.domain.errors import InvalidArgumentError
from calorie_tracker.domain.foods import FoodCatalogEntry, normalize_food_name
from calorie_tracker.domain.nutrition import MacroProfile, round_half_up
from calorie_tracker.domain.open_food_facts import (
    OpenFoodFactsProduct,
    OpenFoodFactsSearchResult,
    select_best_candidate,
)
from tests.conftest import off_product


def _food(name: str, calories: float) -> FoodCatalogEntry:
    return FoodCatalogEntry(
        id=uuid4(),
        name=name,
        macros=MacroProfile(calories=calories, protein_g=1, fat_g=2, carbs_g=3),
        category="Other",
        region=None,
        typical_serving_size=None,
    )


def _products(*payloads: dict[str, object]) -> list[OpenFoodFactsProduct]:
    return OpenFoodFactsSearchResult.model_validate({"products": payloads}).products


def test_normalize_food_name() -> None:
    assert normalize_food_name("  Brown RICE ") == "brown rice"


def test_round_half_up() -> None:
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_totals_follow_entries() -> None:
    rice = _food("rice", 130)
    dal = _food("dal", 116)
    log = new_daily_log("user-1", date(2024, 5, 1))

    entries = add_food(log.entries, rice, 2)
    entries = add_food(tuple(entries), dal, 0.5)
    entries = add_food(tuple(entries), rice, 1)
    log = log.with_entries(entries)

    assert len(log.entries) == 2
    assert log.totals == compute_totals(log.entries)
    assert log.totals.calories == 130 * 3 + 116 * 0.5
    assert log.totals.carbs_g == 3 * 3.5

    remaining = remove_entry(log.entries, log.entries[0].id)
    assert remaining is not None
    assert log.with_entries(remaining).totals.calories == 58
    assert remove_entry(log.entries, uuid4()) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (date(2024, 5, 1), date(2024, 5, 1)),
        (datetime(2024, 5, 1, 23, 59), date(2024, 5, 1)),
        (
            datetime(2024, 5, 1, 1, 0, tzinfo=timezone(timedelta(hours=3))),
            date(2024, 4, 30),
        ),
        ("2024-05-01", date(2024, 5, 1)),
        ("2024-05-01T23:30:00-02:00", date(2024, 5, 2)),
        ("2024-05-01T10:00:00Z", date(2024, 5, 1)),
    ],
)
def test_normalize_log_date(value, expected) -> None:
    assert normalize_log_date(value) == expected


def test_normalize_log_date_defaults_and_errors() -> None:
    today = date(2024, 5, 10)

    assert normalize_log_date(None, today=today) == today
    assert normalize_log_date("  ", today=today) == today
    with pytest.raises(InvalidArgumentError):
        normalize_log_date("05/01/2024")
    with pytest.raises(InvalidArgumentError):
        normalize_log_date(20240501)


def test_nutriments_tolerate_bad_values() -> None:
    product = _products(
        {
            "product_name": "Bread",
            "nutriments": {
                "energy-kcal_value_computed": "n/a",
                "energy-kcal_100g": "265",
                "proteins_100g": None,
            },
        }
    )[0]

    assert product.nutriments.energy_kcal() == 265
    assert product.nutriments.proteins_100g is None


def test_missing_nutriments_default_to_empty() -> None:
    product = _products({"product_name": "Bread", "nutriments": None})[0]

    assert product.nutriments.energy_kcal() is None


def test_select_best_candidate_prefers_relevant_non_water() -> None:
    products = _products(
        off_product("Sparkling water with lemon", per_100g=1),
        off_product("Lemon tart", per_100g=300),
        off_product("Snack bar", categories="Lemon snacks", per_100g=400),
    )

    assert select_best_candidate("lemon", products).product_name == "Lemon tart"


def test_select_best_candidate_falls_back_to_any_non_water() -> None:
    products = _products(
        off_product("Still water", per_100g=0),
        off_product("Granola", per_100g=450),
    )

    assert select_best_candidate("muesli", products).product_name == "Granola"


def test_select_best_candidate_falls_back_to_first_product() -> None:
    products = _products(
        off_product("Still water", per_100g=0),
        off_product("Mineral water", per_100g=0),
    )

    assert select_best_candidate("water", products).product_name == "Still water"
    assert select_best_candidate("water", []) is None


def test_primary_category() -> None:
    product = _products(off_product("Rice", categories=" Cereals , Grains"))[0]

    assert product.primary_category("Uncategorized") == "Cereals"
    assert OpenFoodFactsProduct().primary_category("Uncategorized") == "Uncategorized"
