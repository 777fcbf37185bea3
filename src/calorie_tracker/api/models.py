"""Pydantic models for API request payloads."""

from uuid import UUID

from pydantic import BaseModel, Field, StrictFloat, StrictInt


class FoodLookupRequest(BaseModel):
    """Free-text food lookup payload."""

    food_name: str = Field(min_length=1)


class LogFoodRequest(BaseModel):
    """Payload for logging servings of a catalog food."""

    food_id: UUID
    quantity: StrictFloat | StrictInt
    date: str | None = None


class SeedFood(BaseModel):
    """Single record of a catalog seed file."""

    name: str
    calories: float = Field(ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbohydrates: float | None = Field(default=None, ge=0)
    fats: float | None = Field(default=None, ge=0)
    category: str | None = None
    region: str | None = None
    typical_serving_size: str | None = None


class SeedFoodsRequest(BaseModel):
    """Payload replacing the whole food catalog."""

    foods: list[SeedFood]
