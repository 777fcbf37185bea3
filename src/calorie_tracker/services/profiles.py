"""User profile service."""

from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.energy import estimate_daily_energy_need
from calorie_tracker.domain.errors import ProfileNotFoundError
from calorie_tracker.domain.profiles import UserProfile


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the stored profile for a user."""

    def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        """Create or overwrite the profile for a user."""


@dataclass
class ProfileService:
    """Service for profile attributes and the derived energy need."""

    repository: ProfileRepository

    def get_profile(self, user_id: str) -> UserProfile:
        """Return the user's profile."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError("User profile not found.")
        return profile

    def update_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        """Persist the user's profile attributes."""
        return self.repository.save_profile(user_id, profile)

    def estimate_energy_need(self, user_id: str) -> int | None:
        """Return the estimated daily kcal need, or None if it is undefined."""
        profile = self.get_profile(user_id)
        return estimate_daily_energy_need(
            profile.gender,
            profile.age,
            profile.height_cm,
            profile.weight_kg,
            profile.activity_level,
        )
