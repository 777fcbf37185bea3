"""Domain models for daily food logs."""

import math
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from calorie_tracker.domain.errors import InvalidArgumentError
from calorie_tracker.domain.foods import FoodCatalogEntry
from calorie_tracker.domain.nutrition import ZERO_MACROS, MacroProfile


@dataclass(frozen=True)
class DailyLogEntry:
    """Food logged on a day, with per-serving macros captured at log time."""

    id: UUID
    food_id: UUID
    name: str
    per_serving: MacroProfile
    quantity: float

    def contribution(self) -> MacroProfile:
        """Return this entry's share of the daily totals."""
        return MacroProfile(
            calories=self.per_serving.calories * self.quantity,
            protein_g=self.per_serving.protein_g * self.quantity,
            fat_g=self.per_serving.fat_g * self.quantity,
            carbs_g=self.per_serving.carbs_g * self.quantity,
        )


@dataclass(frozen=True)
class DailyLog:
    """All food a user logged on one UTC calendar day."""

    id: UUID
    user_id: str
    log_date: date
    entries: tuple[DailyLogEntry, ...] = ()
    totals: MacroProfile = ZERO_MACROS
    version: int = 0

    def with_entries(self, entries: list[DailyLogEntry]) -> "DailyLog":
        """Return a copy holding the given entries and their recomputed totals."""
        return replace(self, entries=tuple(entries), totals=compute_totals(entries))

    def find_entry(self, entry_id: UUID) -> DailyLogEntry | None:
        """Return the entry with the given id, if present."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None


@dataclass(frozen=True)
class DailySummary:
    """Per-day totals for history views."""

    date: str
    total_calories: float
    total_protein_g: int
    total_carbs_g: int
    total_fat_g: int


def new_daily_log(user_id: str, log_date: date) -> DailyLog:
    """Create an empty, not yet stored daily log."""
    return DailyLog(id=uuid4(), user_id=user_id, log_date=log_date)


def compute_totals(
    entries: list[DailyLogEntry] | tuple[DailyLogEntry, ...],
) -> MacroProfile:
    """Sum quantity-weighted macros over all entries."""
    total = ZERO_MACROS
    for entry in entries:
        portion = entry.contribution()
        total = MacroProfile(
            calories=total.calories + portion.calories,
            protein_g=total.protein_g + portion.protein_g,
            fat_g=total.fat_g + portion.fat_g,
            carbs_g=total.carbs_g + portion.carbs_g,
        )
    return total


def add_food(
    entries: tuple[DailyLogEntry, ...], food: FoodCatalogEntry, quantity: float
) -> list[DailyLogEntry]:
    """Merge a logged quantity of a food into a day's entries."""
    updated: list[DailyLogEntry] = []
    merged = False
    for entry in entries:
        if entry.food_id == food.id:
            updated.append(replace(entry, quantity=entry.quantity + quantity))
            merged = True
        else:
            updated.append(entry)
    if not merged:
        updated.append(
            DailyLogEntry(
                id=uuid4(),
                food_id=food.id,
                name=food.name,
                per_serving=food.macros,
                quantity=quantity,
            )
        )
    return updated


def remove_entry(
    entries: tuple[DailyLogEntry, ...], entry_id: UUID
) -> list[DailyLogEntry] | None:
    """Return entries without the given one, or None when it is absent."""
    remaining = [entry for entry in entries if entry.id != entry_id]
    if len(remaining) == len(entries):
        return None
    return remaining


def validate_quantity(quantity: object) -> float:
    """Return the quantity as a float if it is a positive finite number."""
    if isinstance(quantity, bool) or not isinstance(quantity, int | float):
        raise InvalidArgumentError("Quantity must be a number.")
    value = float(quantity)
    if not math.isfinite(value) or value <= 0:
        raise InvalidArgumentError("Quantity must be a positive finite number.")
    return value


def today_utc() -> date:
    """Return the current UTC calendar date."""
    return datetime.now(tz=UTC).date()


def normalize_log_date(
    value: date | datetime | str | None, today: date | None = None
) -> date:
    """Map any incoming date value to its UTC calendar day.

    Naive datetimes are taken as UTC. Strings are parsed as ISO 8601 dates or
    datetimes; a trailing ``Z`` is accepted.
    """
    if value is None:
        return today or today_utc()
    if isinstance(value, datetime):
        return _datetime_to_utc_date(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return today or today_utc()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidArgumentError(f"Invalid date: {value!r}") from exc
        return _datetime_to_utc_date(parsed)
    raise InvalidArgumentError(f"Invalid date: {value!r}")


def _datetime_to_utc_date(value: datetime) -> date:
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(UTC).date()
