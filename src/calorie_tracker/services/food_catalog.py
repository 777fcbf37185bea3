"""Food catalog service backed by the local store and Open Food Facts."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

import httpx
from pydantic import ValidationError

from calorie_tracker.adapters.open_food_facts_client import OpenFoodFactsClient
from calorie_tracker.domain.errors import (
    FoodNotFoundError,
    InvalidArgumentError,
    NutritionSourceUnavailableError,
)
from calorie_tracker.domain.foods import (
    DEFAULT_CATEGORY,
    FoodCatalogEntry,
    NewFoodEntry,
    ResolvedFood,
    normalize_food_name,
)
from calorie_tracker.domain.nutrition import MacroProfile, round_half_up, value_or_zero
from calorie_tracker.domain.open_food_facts import (
    OpenFoodFactsProduct,
    OpenFoodFactsSearchResult,
    select_best_candidate,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

SOURCE_CATALOG = "catalog"
SOURCE_OPEN_FOOD_FACTS = "open_food_facts"
OPEN_FOOD_FACTS_REGION = "Open Food Facts Source"
OPEN_FOOD_FACTS_CATEGORY = "Uncategorized"
OPEN_FOOD_FACTS_SERVING = "100g"

_logger = logging.getLogger(__name__)


class FoodCatalogRepository(Protocol):
    """Persistence interface for catalog entries."""

    def get_by_name(self, name: str) -> FoodCatalogEntry | None:
        """Return the entry stored under a normalized name."""

    def get_by_id(self, food_id: UUID) -> FoodCatalogEntry | None:
        """Return the entry with the given id."""

    def insert_if_absent(self, entry: NewFoodEntry) -> FoodCatalogEntry:
        """Insert the entry unless its name exists; return the stored entry."""

    def search(self, term: str | None, limit: int) -> list[FoodCatalogEntry]:
        """Return entries whose name contains the term."""

    def replace_all(self, entries: list[NewFoodEntry]) -> int:
        """Replace the catalog with the given entries and return the count."""


@dataclass
class FoodCatalogService:
    """Resolves food names to nutrition data and manages the catalog."""

    repository: FoodCatalogRepository
    off_client: OpenFoodFactsClient
    page_size: int = 20
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def resolve(self, raw_name: str) -> ResolvedFood:
        """Resolve a free-text food name, caching external finds locally."""
        name = normalize_food_name(raw_name)
        if not name:
            raise InvalidArgumentError("Food name is required.")

        local = self.repository.get_by_name(name)
        if local is not None:
            _logger.info("Food catalog hit: name=%s", name)
            return ResolvedFood(
                name=local.name,
                display_name=local.name,
                macros=local.macros,
                source=SOURCE_CATALOG,
                food_id=local.id,
            )

        _logger.info("Food catalog miss, searching Open Food Facts: name=%s", name)
        products = await self._search_open_food_facts(name)
        product = select_best_candidate(name, products)
        if product is None:
            raise FoodNotFoundError(f"No products found for {name!r}")
        energy = product.nutriments.energy_kcal()
        if energy is None or energy <= 0:
            raise FoodNotFoundError(
                f"No calorie data for {name!r} (product={product.product_name!r})"
            )

        new_entry = _entry_from_product(name, product, energy)
        stored = self._cache_entry(new_entry)
        return ResolvedFood(
            name=name,
            display_name=product.product_name or name,
            macros=stored.macros if stored else new_entry.macros,
            source=SOURCE_OPEN_FOOD_FACTS,
            food_id=stored.id if stored else None,
        )

    def get_food(self, food_id: UUID) -> FoodCatalogEntry:
        """Return a catalog entry by id."""
        food = self.repository.get_by_id(food_id)
        if food is None:
            raise FoodNotFoundError(f"Food item not found: {food_id}")
        return food

    def search(self, term: str | None, limit: int = 50) -> list[FoodCatalogEntry]:
        """Search the local catalog by name."""
        cleaned = normalize_food_name(term) if term else None
        return self.repository.search(cleaned or None, limit)

    def replace_catalog(self, records: list[dict[str, object]]) -> int:
        """Replace the catalog from seed records, normalizing names."""
        entries: dict[str, NewFoodEntry] = {}
        for record in records:
            entry = _entry_from_seed(record)
            entries[entry.name] = entry
        count = self.repository.replace_all(list(entries.values()))
        _logger.info("Food catalog replaced: entries=%s", count)
        return count

    def _cache_entry(self, entry: NewFoodEntry) -> FoodCatalogEntry | None:
        """Store the entry; a concurrent winner's row is returned as is."""
        try:
            stored = self.repository.insert_if_absent(entry)
        except Exception:
            _logger.exception(
                "Failed to cache food from Open Food Facts: name=%s", entry.name
            )
            return None
        _logger.info(
            "Cached food from Open Food Facts: name=%s calories=%s",
            stored.name,
            stored.macros.calories,
        )
        return stored

    async def _search_open_food_facts(self, term: str) -> list[OpenFoodFactsProduct]:
        try:
            payload = await self._call_with_retry(
                lambda: self.off_client.search_products(
                    term, page_size=self.page_size
                ),
                action=f"search:{term}",
            )
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning(
                "Open Food Facts unavailable (status=%s): %s",
                _status_code_from_exception(exc),
                exc,
            )
            raise NutritionSourceUnavailableError(str(exc)) from exc
        try:
            result = OpenFoodFactsSearchResult.model_validate(payload)
        except ValidationError as exc:
            _logger.warning("Open Food Facts returned malformed data: %s", exc)
            raise NutritionSourceUnavailableError("Malformed search response") from exc
        _logger.info(
            "Open Food Facts search: term=%s results=%s", term, len(result.products)
        )
        return result.products

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except httpx.HTTPError as exc:
                attempt += 1
                _logger.warning(
                    "Open Food Facts %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _entry_from_product(
    name: str, product: OpenFoodFactsProduct, energy: float
) -> NewFoodEntry:
    nutriments = product.nutriments
    return NewFoodEntry(
        name=name,
        macros=MacroProfile(
            calories=round_half_up(energy),
            protein_g=round_half_up(value_or_zero(nutriments.proteins_100g)),
            fat_g=round_half_up(value_or_zero(nutriments.fat_100g)),
            carbs_g=round_half_up(value_or_zero(nutriments.carbohydrates_100g)),
        ),
        category=product.primary_category(OPEN_FOOD_FACTS_CATEGORY),
        region=OPEN_FOOD_FACTS_REGION,
        typical_serving_size=OPEN_FOOD_FACTS_SERVING,
    )


def _entry_from_seed(record: dict[str, object]) -> NewFoodEntry:
    raw_name = record.get("name")
    if not isinstance(raw_name, str) or not normalize_food_name(raw_name):
        raise InvalidArgumentError(f"Seed record without a name: {record!r}")
    calories = _seed_number(record, "calories")
    if calories is None:
        raise InvalidArgumentError(f"Seed record without calories: {raw_name!r}")
    category = record.get("category")
    region = record.get("region")
    serving = record.get("typical_serving_size") or record.get("typicalServingSize")
    return NewFoodEntry(
        name=normalize_food_name(raw_name),
        macros=MacroProfile(
            calories=calories,
            protein_g=value_or_zero(_seed_number(record, "protein")),
            fat_g=value_or_zero(_seed_number(record, "fats")),
            carbs_g=value_or_zero(_seed_number(record, "carbohydrates")),
        ),
        category=str(category).strip() if category else DEFAULT_CATEGORY,
        region=str(region).strip() if region else None,
        typical_serving_size=str(serving).strip() if serving else None,
    )


def _seed_number(record: dict[str, object], key: str) -> float | None:
    value = record.get(key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError as exc:
            raise InvalidArgumentError(f"Invalid {key} value: {value!r}") from exc
    else:
        raise InvalidArgumentError(f"Invalid {key} value: {value!r}")
    if number < 0:
        raise InvalidArgumentError(f"Negative {key} value: {value!r}")
    return number
