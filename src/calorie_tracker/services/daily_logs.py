"""Daily food log service."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.daily_logs import (
    DailyLog,
    add_food,
    new_daily_log,
    normalize_log_date,
    remove_entry,
    validate_quantity,
)
from calorie_tracker.domain.errors import (
    ConflictError,
    DailyLogNotFoundError,
    LogEntryNotFoundError,
)
from calorie_tracker.services.food_catalog import FoodCatalogService

_logger = logging.getLogger(__name__)


class DailyLogRepository(Protocol):
    """Persistence interface for daily logs.

    Writes are conditional: ``insert_log`` raises ConflictError when a log for
    the same user and date already exists, and ``replace_log`` raises
    ConflictError when the stored version no longer matches.
    """

    def get_log(self, user_id: str, log_date: date) -> DailyLog | None:
        """Return the log for a user and day, if present."""

    def get_log_for_user(self, user_id: str, log_id: UUID) -> DailyLog | None:
        """Return a log by id only if it belongs to the user."""

    def insert_log(self, log: DailyLog) -> DailyLog:
        """Store a new log and return it."""

    def replace_log(self, log: DailyLog, expected_version: int) -> DailyLog:
        """Overwrite entries and totals if the version still matches."""


@dataclass
class DailyLogService:
    """Maintains per-user daily logs and their totals."""

    food_catalog: FoodCatalogService
    repository: DailyLogRepository
    conflict_retries: int = 1

    def log_food(
        self,
        user_id: str,
        food_id: UUID,
        quantity: float,
        log_date: date | datetime | str | None = None,
    ) -> DailyLog:
        """Add servings of a catalog food to the user's log for a day."""
        servings = validate_quantity(quantity)
        day = normalize_log_date(log_date)
        food = self.food_catalog.get_food(food_id)

        attempt = 0
        while True:
            current = self.repository.get_log(user_id, day)
            try:
                if current is None:
                    log = new_daily_log(user_id, day)
                    return self.repository.insert_log(
                        log.with_entries(add_food(log.entries, food, servings))
                    )
                merged = add_food(current.entries, food, servings)
                updated = current.with_entries(merged)
                return self.repository.replace_log(
                    updated, expected_version=current.version
                )
            except ConflictError:
                attempt += 1
                _logger.warning(
                    "Daily log write conflict (attempt %s/%s): user=%s date=%s",
                    attempt,
                    self.conflict_retries + 1,
                    user_id,
                    day.isoformat(),
                )
                if attempt > self.conflict_retries:
                    raise

    def delete_entry(self, user_id: str, log_id: UUID, entry_id: UUID) -> DailyLog:
        """Remove one entry from a user's log."""
        attempt = 0
        while True:
            current = self.repository.get_log_for_user(user_id, log_id)
            if current is None:
                raise DailyLogNotFoundError("Daily log not found or not authorized.")
            remaining = remove_entry(current.entries, entry_id)
            if remaining is None:
                raise LogEntryNotFoundError("Food entry not found in this log.")
            try:
                return self.repository.replace_log(
                    current.with_entries(remaining), expected_version=current.version
                )
            except ConflictError:
                attempt += 1
                _logger.warning(
                    "Daily log delete conflict (attempt %s/%s): log=%s",
                    attempt,
                    self.conflict_retries + 1,
                    log_id,
                )
                if attempt > self.conflict_retries:
                    raise

    def get_log(
        self, user_id: str, log_date: date | datetime | str | None = None
    ) -> DailyLog | None:
        """Return the user's log for a day, or None if nothing was logged."""
        return self.repository.get_log(user_id, normalize_log_date(log_date))
