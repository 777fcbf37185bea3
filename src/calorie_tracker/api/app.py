"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.admin import router as admin_router
from calorie_tracker.api.models import FoodLookupRequest, LogFoodRequest
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.daily_logs import DailyLog, DailySummary
from calorie_tracker.domain.errors import (
    CalorieTrackerError,
    ConflictError,
    FoodNotFoundError,
    InvalidArgumentError,
    NotFoundError,
    NutritionSourceUnavailableError,
)
from calorie_tracker.domain.foods import FoodCatalogEntry, ResolvedFood
from calorie_tracker.domain.nutrition import round_half_up
from calorie_tracker.domain.profiles import UserProfile
from calorie_tracker.services.food_catalog import SOURCE_OPEN_FOOD_FACTS


async def require_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Return the caller id set by the upstream identity provider."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return x_user_id.strip()


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(CalorieTrackerError)
    async def handle_domain_error(
        request: Request, exc: CalorieTrackerError
    ) -> JSONResponse:
        status_code = _status_for_error(exc)
        if isinstance(exc, ConflictError):
            logger.warning("Unresolved write conflict: %s", exc)
        return JSONResponse(
            status_code=status_code,
            content={"success": False, "message": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/foods/lookup")
    async def lookup_food(
        payload: FoodLookupRequest, request: Request
    ) -> JSONResponse:
        """Resolve a food name to calories, consulting Open Food Facts on a miss."""
        state_container: AppContainer = request.app.state.container
        try:
            resolved = await state_container.food_catalog_service.resolve(
                payload.food_name
            )
        except NutritionSourceUnavailableError as exc:
            logger.warning(
                "Food lookup degraded, source unavailable: food=%s error=%s",
                payload.food_name,
                exc,
            )
            return _not_found_response(payload.food_name, "source_unavailable")
        except FoodNotFoundError as exc:
            logger.info(
                "Food lookup found nothing: food=%s error=%s", payload.food_name, exc
            )
            return _not_found_response(payload.food_name, "not_found")
        return JSONResponse(
            content={
                "success": True,
                "message": _format_lookup_message(resolved),
                "food": _serialize_resolved(resolved),
            }
        )

    @app.get("/foods")
    async def list_foods(
        request: Request, search: str | None = None
    ) -> dict[str, object]:
        """Browse or search the local food catalog."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.food_catalog_service.search(search, limit=50)
        return {"success": True, "foods": [_serialize_food(food) for food in foods]}

    @app.post("/daily-log/foods")
    async def log_food(
        payload: LogFoodRequest,
        request: Request,
        user_id: str = Depends(require_user_id),
    ) -> dict[str, object]:
        """Log servings of a catalog food for a day."""
        state_container: AppContainer = request.app.state.container
        log = state_container.daily_log_service.log_food(
            user_id=user_id,
            food_id=payload.food_id,
            quantity=payload.quantity,
            log_date=payload.date,
        )
        return {
            "success": True,
            "message": "Food logged successfully!",
            "daily_log": _serialize_log(log),
        }

    @app.get("/daily-log")
    async def get_daily_log(
        request: Request,
        date: str | None = None,
        user_id: str = Depends(require_user_id),
    ) -> dict[str, object]:
        """Return the caller's log for a day."""
        state_container: AppContainer = request.app.state.container
        log = state_container.daily_log_service.get_log(user_id, date)
        if log is None:
            return {
                "success": True,
                "daily_log": None,
                "message": "No food logged for this date.",
            }
        return {
            "success": True,
            "daily_log": _serialize_log(log),
            "message": "Daily log fetched.",
        }

    @app.get("/daily-log/history")
    async def get_history(
        request: Request,
        days: int | None = Query(default=None, ge=0, le=366),
        user_id: str = Depends(require_user_id),
    ) -> dict[str, object]:
        """Return per-day totals for recent days that have a log."""
        state_container: AppContainer = request.app.state.container
        history = state_container.history_service.get_history(user_id, days)
        span = state_container.history_service.default_days if days is None else days
        return {
            "success": True,
            "history": [_serialize_summary(summary) for summary in history],
            "message": f"Daily log history for last {span} days.",
        }

    @app.delete("/daily-log/{log_id}/foods/{entry_id}")
    async def delete_log_entry(
        log_id: UUID,
        entry_id: UUID,
        request: Request,
        user_id: str = Depends(require_user_id),
    ) -> dict[str, object]:
        """Remove one entry from the caller's log."""
        state_container: AppContainer = request.app.state.container
        log = state_container.daily_log_service.delete_entry(user_id, log_id, entry_id)
        return {
            "success": True,
            "message": "Food entry deleted successfully!",
            "daily_log": _serialize_log(log),
        }

    @app.get("/profile")
    async def get_profile(
        request: Request, user_id: str = Depends(require_user_id)
    ) -> dict[str, object]:
        """Return the caller's profile."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.get_profile(user_id)
        return {"success": True, "profile": profile.model_dump(mode="json")}

    @app.put("/profile")
    async def save_profile(
        payload: UserProfile,
        request: Request,
        user_id: str = Depends(require_user_id),
    ) -> dict[str, object]:
        """Store the caller's profile attributes."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.update_profile(user_id, payload)
        return {
            "success": True,
            "message": "Profile saved",
            "profile": profile.model_dump(mode="json"),
        }

    @app.get("/profile/calorie-needs")
    async def calorie_needs(
        request: Request, user_id: str = Depends(require_user_id)
    ) -> dict[str, object]:
        """Return the estimated daily calorie need for the caller."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.get_profile(user_id)
        if not profile.is_complete():
            return {
                "success": False,
                "daily_calorie_needs": None,
                "message": (
                    "Please complete your profile (gender, age, height, weight, "
                    "activity level) to calculate daily calorie needs."
                ),
            }
        needs = state_container.profile_service.estimate_energy_need(user_id)
        if needs is None:
            return {
                "success": False,
                "daily_calorie_needs": None,
                "message": (
                    "Could not calculate calorie needs. "
                    "Ensure all profile fields are valid."
                ),
            }
        return {
            "success": True,
            "daily_calorie_needs": needs,
            "message": "Daily calorie needs calculated.",
        }

    return app


def _status_for_error(exc: CalorieTrackerError) -> int:
    if isinstance(exc, InvalidArgumentError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _not_found_response(food_name: str, reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "success": False,
            "reason": reason,
            "message": f'Sorry, I don\'t have calorie information for "{food_name}".',
        },
    )


def _format_lookup_message(resolved: ResolvedFood) -> str:
    calories = f"{resolved.macros.calories:.0f}"
    if resolved.source == SOURCE_OPEN_FOOD_FACTS:
        return (
            f"{resolved.display_name} has approximately {calories} calories "
            "per 100g (source: Open Food Facts)."
        )
    return f"{resolved.display_name} has approximately {calories} calories."


def _serialize_resolved(resolved: ResolvedFood) -> dict[str, object]:
    return {
        "id": str(resolved.food_id) if resolved.food_id else None,
        "name": resolved.name,
        "display_name": resolved.display_name,
        "source": resolved.source,
        "calories": resolved.macros.calories,
        "protein_g": resolved.macros.protein_g,
        "fat_g": resolved.macros.fat_g,
        "carbs_g": resolved.macros.carbs_g,
    }


def _serialize_food(food: FoodCatalogEntry) -> dict[str, object]:
    return {
        "id": str(food.id),
        "name": food.name,
        "calories": food.macros.calories,
        "protein_g": food.macros.protein_g,
        "fat_g": food.macros.fat_g,
        "carbs_g": food.macros.carbs_g,
        "category": food.category,
        "region": food.region,
        "typical_serving_size": food.typical_serving_size,
    }


def _serialize_log(log: DailyLog) -> dict[str, object]:
    return {
        "id": str(log.id),
        "user_id": log.user_id,
        "date": log.log_date.isoformat(),
        "foods": [
            {
                "id": str(entry.id),
                "food_id": str(entry.food_id),
                "name": entry.name,
                "quantity": entry.quantity,
                "calories_per_serving": entry.per_serving.calories,
                "protein_g_per_serving": entry.per_serving.protein_g,
                "fat_g_per_serving": entry.per_serving.fat_g,
                "carbs_g_per_serving": entry.per_serving.carbs_g,
            }
            for entry in log.entries
        ],
        "total_calories": log.totals.calories,
        "total_protein_g": round_half_up(log.totals.protein_g),
        "total_fat_g": round_half_up(log.totals.fat_g),
        "total_carbs_g": round_half_up(log.totals.carbs_g),
    }


def _serialize_summary(summary: DailySummary) -> dict[str, object]:
    return {
        "date": summary.date,
        "total_calories": summary.total_calories,
        "total_protein_g": summary.total_protein_g,
        "total_carbs_g": summary.total_carbs_g,
        "total_fat_g": summary.total_fat_g,
    }
