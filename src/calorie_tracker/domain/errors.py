"""Error hierarchy for the calorie tracker.

Services raise these; the API layer maps them to HTTP responses.
"""


class CalorieTrackerError(Exception):
    """Base exception for all calorie tracker errors."""


class InvalidArgumentError(CalorieTrackerError):
    """Raised when a caller supplies a malformed value (quantity, date, days)."""


class NotFoundError(CalorieTrackerError):
    """Raised when a requested record does not exist."""


class FoodNotFoundError(NotFoundError):
    """Raised when a food cannot be found locally or resolved externally."""


class NutritionSourceUnavailableError(FoodNotFoundError):
    """Raised when the external nutrition source fails or returns bad data."""


class DailyLogNotFoundError(NotFoundError):
    """Raised when a daily log is missing or belongs to another user."""


class LogEntryNotFoundError(NotFoundError):
    """Raised when an entry is not part of a daily log."""


class ProfileNotFoundError(NotFoundError):
    """Raised when a user has no stored profile."""


class ConflictError(CalorieTrackerError):
    """Raised when a write loses a race on a unique key or version."""
