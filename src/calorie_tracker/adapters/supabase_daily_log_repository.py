"""Supabase repository for daily logs.

Each log is one ``daily_logs`` row holding its entries as JSON next to the
totals, with a unique index on ``(user_id, log_date)`` and a ``version``
column used for compare-and-swap updates.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from calorie_tracker.domain.daily_logs import DailyLog, DailyLogEntry
from calorie_tracker.domain.errors import ConflictError
from calorie_tracker.domain.nutrition import MacroProfile
from calorie_tracker.services.daily_logs import DailyLogRepository
from calorie_tracker.services.history import HistoryRepository

UNIQUE_VIOLATION = "23505"

_COLUMNS = (
    "id, user_id, log_date, entries, total_calories, total_protein_g, "
    "total_fat_g, total_carbs_g, version"
)


@dataclass
class SupabaseDailyLogRepository(DailyLogRepository, HistoryRepository):
    """Supabase implementation for daily logs and their history."""

    client: Client

    def get_log(self, user_id: str, log_date: date) -> DailyLog | None:
        """Return the log for a user and day, if present."""
        response = (
            self.client.table("daily_logs")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .eq("log_date", log_date.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_log(response.data[0])

    def get_log_for_user(self, user_id: str, log_id: UUID) -> DailyLog | None:
        """Return a log by id only if it belongs to the user."""
        response = (
            self.client.table("daily_logs")
            .select(_COLUMNS)
            .eq("id", str(log_id))
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_log(response.data[0])

    def insert_log(self, log: DailyLog) -> DailyLog:
        """Insert a new log; a duplicate (user_id, log_date) raises ConflictError."""
        payload = {
            "id": str(log.id),
            "user_id": log.user_id,
            "log_date": log.log_date.isoformat(),
            "version": 1,
            **_serialize_contents(log),
        }
        try:
            response = self.client.table("daily_logs").insert(payload).execute()
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise ConflictError(
                    f"Daily log already exists: {log.user_id} {log.log_date}"
                ) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create daily log")
        return _parse_log(response.data[0])

    def replace_log(self, log: DailyLog, expected_version: int) -> DailyLog:
        """Write entries and totals together if the version is unchanged."""
        response = (
            self.client.table("daily_logs")
            .update(
                {
                    **_serialize_contents(log),
                    "version": expected_version + 1,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(log.id))
            .eq("version", expected_version)
            .execute()
        )
        if not response.data:
            raise ConflictError(f"Daily log changed concurrently: {log.id}")
        return _parse_log(response.data[0])

    def list_logs(self, user_id: str, start: date, end: date) -> list[DailyLog]:
        """Return logs within the inclusive date range, oldest first."""
        response = (
            self.client.table("daily_logs")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .gte("log_date", start.isoformat())
            .lte("log_date", end.isoformat())
            .order("log_date", desc=False)
            .execute()
        )
        return [_parse_log(row) for row in response.data or []]


def _serialize_contents(log: DailyLog) -> dict[str, object]:
    return {
        "entries": [
            {
                "id": str(entry.id),
                "food_id": str(entry.food_id),
                "name": entry.name,
                "calories_per_serving": entry.per_serving.calories,
                "protein_g_per_serving": entry.per_serving.protein_g,
                "fat_g_per_serving": entry.per_serving.fat_g,
                "carbs_g_per_serving": entry.per_serving.carbs_g,
                "quantity": entry.quantity,
            }
            for entry in log.entries
        ],
        "total_calories": log.totals.calories,
        "total_protein_g": log.totals.protein_g,
        "total_fat_g": log.totals.fat_g,
        "total_carbs_g": log.totals.carbs_g,
    }


def _parse_entry(row: dict[str, object]) -> DailyLogEntry:
    return DailyLogEntry(
        id=UUID(str(row["id"])),
        food_id=UUID(str(row["food_id"])),
        name=str(row.get("name", "")),
        per_serving=MacroProfile(
            calories=float(row.get("calories_per_serving") or 0.0),
            protein_g=float(row.get("protein_g_per_serving") or 0.0),
            fat_g=float(row.get("fat_g_per_serving") or 0.0),
            carbs_g=float(row.get("carbs_g_per_serving") or 0.0),
        ),
        quantity=float(row.get("quantity") or 0.0),
    )


def _parse_log(row: dict[str, object]) -> DailyLog:
    entries = row.get("entries") or []
    return DailyLog(
        id=UUID(str(row["id"])),
        user_id=str(row["user_id"]),
        log_date=date.fromisoformat(str(row["log_date"])[:10]),
        entries=tuple(_parse_entry(entry) for entry in entries),
        totals=MacroProfile(
            calories=float(row.get("total_calories") or 0.0),
            protein_g=float(row.get("total_protein_g") or 0.0),
            fat_g=float(row.get("total_fat_g") or 0.0),
            carbs_g=float(row.get("total_carbs_g") or 0.0),
        ),
        version=int(row.get("version") or 0),
    )
