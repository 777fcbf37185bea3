"""Supabase implementation for the food catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.foods import (
    DEFAULT_CATEGORY,
    FoodCatalogEntry,
    NewFoodEntry,
)
from calorie_tracker.domain.nutrition import MacroProfile
from calorie_tracker.services.food_catalog import FoodCatalogRepository

_COLUMNS = (
    "id, name, calories, protein_g, fat_g, carbs_g, category, region, "
    "typical_serving_size"
)
_PAGE_SIZE = 500


@dataclass
class SupabaseFoodRepository(FoodCatalogRepository):
    """Supabase-backed food catalog; ``foods.name`` carries a unique index."""

    client: Client

    def get_by_name(self, name: str) -> FoodCatalogEntry | None:
        """Return the entry stored under a normalized name."""
        response = (
            self.client.table("foods")
            .select(_COLUMNS)
            .eq("name", name)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def get_by_id(self, food_id: UUID) -> FoodCatalogEntry | None:
        """Return the entry with the given id."""
        response = (
            self.client.table("foods")
            .select(_COLUMNS)
            .eq("id", str(food_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def insert_if_absent(self, entry: NewFoodEntry) -> FoodCatalogEntry:
        """Insert unless the name exists, then return the stored row."""
        response = (
            self.client.table("foods")
            .upsert(_serialize(entry), on_conflict="name", ignore_duplicates=True)
            .execute()
        )
        if response.data:
            return _parse_food(response.data[0])
        existing = self.get_by_name(entry.name)
        if existing is None:
            raise RuntimeError(f"Failed to store food entry: {entry.name}")
        return existing

    def search(self, term: str | None, limit: int) -> list[FoodCatalogEntry]:
        """Return entries whose name contains the term, case-insensitively."""
        query = self.client.table("foods").select(_COLUMNS)
        if term:
            query = query.ilike("name", f"%{_escape_like(term)}%")
        response = query.order("name", desc=False).limit(limit).execute()
        return [_parse_food(row) for row in response.data or []]

    def replace_all(self, entries: list[NewFoodEntry]) -> int:
        """Upsert the given entries by name and delete every other entry."""
        if entries:
            self.client.table("foods").upsert(
                [_serialize(entry) for entry in entries], on_conflict="name"
            ).execute()
        keep = {entry.name for entry in entries}
        stale = [name for name in self._all_names() if name not in keep]
        for start in range(0, len(stale), _PAGE_SIZE):
            batch = stale[start : start + _PAGE_SIZE]
            self.client.table("foods").delete().in_("name", batch).execute()
        return len(entries)

    def _all_names(self) -> list[str]:
        names: list[str] = []
        start = 0
        while True:
            response = (
                self.client.table("foods")
                .select("name")
                .order("name", desc=False)
                .range(start, start + _PAGE_SIZE - 1)
                .execute()
            )
            rows = response.data or []
            names.extend(str(row["name"]) for row in rows)
            if len(rows) < _PAGE_SIZE:
                return names
            start += _PAGE_SIZE


def _escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _serialize(entry: NewFoodEntry) -> dict[str, object]:
    return {
        "name": entry.name,
        "calories": entry.macros.calories,
        "protein_g": entry.macros.protein_g,
        "fat_g": entry.macros.fat_g,
        "carbs_g": entry.macros.carbs_g,
        "category": entry.category,
        "region": entry.region,
        "typical_serving_size": entry.typical_serving_size,
    }


def _parse_food(row: dict[str, object]) -> FoodCatalogEntry:
    """Parse a food row; missing macro columns count as zero."""
    return FoodCatalogEntry(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        macros=MacroProfile(
            calories=float(row.get("calories") or 0.0),
            protein_g=float(row.get("protein_g") or 0.0),
            fat_g=float(row.get("fat_g") or 0.0),
            carbs_g=float(row.get("carbs_g") or 0.0),
        ),
        category=str(row.get("category") or DEFAULT_CATEGORY),
        region=row.get("region"),
        typical_serving_size=row.get("typical_serving_size"),
    )
