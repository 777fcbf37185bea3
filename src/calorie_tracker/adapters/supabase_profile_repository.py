"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from calorie_tracker.domain.profiles import UserProfile
from calorie_tracker.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("user_profiles")
            .select("name, gender, age, height_cm, weight_kg, activity_level")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return UserProfile.model_validate(response.data[0])

    def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        """Upsert the profile row for a user."""
        response = (
            self.client.table("user_profiles")
            .upsert(
                {
                    "user_id": user_id,
                    **profile.model_dump(mode="json"),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save user profile")
        return UserProfile.model_validate(response.data[0])
