"""History service for daily logs."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from calorie_tracker.domain.daily_logs import DailyLog, DailySummary, today_utc
from calorie_tracker.domain.errors import InvalidArgumentError
from calorie_tracker.domain.nutrition import round_half_up

DEFAULT_HISTORY_DAYS = 7


class HistoryRepository(Protocol):
    """Read interface for daily logs over a date range."""

    def list_logs(self, user_id: str, start: date, end: date) -> list[DailyLog]:
        """Return logs with start <= log_date <= end, oldest first."""


@dataclass
class HistoryService:
    """Service for per-day summaries over recent days."""

    repository: HistoryRepository
    default_days: int = DEFAULT_HISTORY_DAYS

    def get_history(
        self, user_id: str, days: int | None = None, today: date | None = None
    ) -> list[DailySummary]:
        """Return summaries for logged days from ``days`` ago through today.

        Days without a log are left out rather than reported as zero.
        """
        span = self.default_days if days is None else days
        if span < 0:
            raise InvalidArgumentError("Days must not be negative.")
        end = today or today_utc()
        start = end - timedelta(days=span)
        logs = self.repository.list_logs(user_id, start, end)
        return [_summarize(log) for log in sorted(logs, key=lambda log: log.log_date)]


def _summarize(log: DailyLog) -> DailySummary:
    return DailySummary(
        date=log.log_date.isoformat(),
        total_calories=log.totals.calories,
        total_protein_g=round_half_up(log.totals.protein_g),
        total_carbs_g=round_half_up(log.totals.carbs_g),
        total_fat_g=round_half_up(log.totals.fat_g),
    )
