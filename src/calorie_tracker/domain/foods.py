"""Domain models for the food catalog."""

from dataclasses import dataclass
from uuid import UUID

from calorie_tracker.domain.nutrition import MacroProfile

DEFAULT_CATEGORY = "Other"


def normalize_food_name(raw_name: str) -> str:
    """Return the canonical catalog key for a food name."""
    return raw_name.strip().lower()


@dataclass(frozen=True)
class NewFoodEntry:
    """Catalog entry that has not been stored yet."""

    name: str
    macros: MacroProfile
    category: str = DEFAULT_CATEGORY
    region: str | None = None
    typical_serving_size: str | None = None


@dataclass(frozen=True)
class FoodCatalogEntry:
    """Stored catalog entry with per-serving macros."""

    id: UUID
    name: str
    macros: MacroProfile
    category: str
    region: str | None
    typical_serving_size: str | None


@dataclass(frozen=True)
class ResolvedFood:
    """Result of resolving a free-text food name."""

    name: str
    display_name: str
    macros: MacroProfile
    source: str
    food_id: UUID | None
