"""Profile models used for energy estimation."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Gender(StrEnum):
    """Supported gender values."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(StrEnum):
    """Activity tiers, least to most active."""

    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    EXTRA_ACTIVE = "extra_active"


class UserProfile(BaseModel):
    """Profile attributes for a user; every field is optional."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    gender: Gender | None = None
    age: int | None = Field(default=None, ge=0)
    height_cm: float | None = Field(default=None, ge=0)
    weight_kg: float | None = Field(default=None, ge=0)
    activity_level: ActivityLevel | None = None

    @field_validator("gender", "activity_level", mode="before")
    @classmethod
    def _lowercase(cls, value: object) -> object:
        if isinstance(value, str):
            cleaned = value.strip().lower()
            return cleaned or None
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value

    def is_complete(self) -> bool:
        """Return True when every estimator input is present."""
        return None not in (
            self.gender,
            self.age,
            self.height_cm,
            self.weight_kg,
            self.activity_level,
        )
