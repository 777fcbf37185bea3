"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.open_food_facts_client import HttpxOpenFoodFactsClient
from calorie_tracker.adapters.supabase_daily_log_repository import (
    SupabaseDailyLogRepository,
)
from calorie_tracker.adapters.supabase_food_repository import SupabaseFoodRepository
from calorie_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from calorie_tracker.config import Settings
from calorie_tracker.services.daily_logs import DailyLogService
from calorie_tracker.services.food_catalog import FoodCatalogService
from calorie_tracker.services.history import HistoryService
from calorie_tracker.services.profiles import ProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_catalog_service: FoodCatalogService
    daily_log_service: DailyLogService
    history_service: HistoryService
    profile_service: ProfileService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_repository = SupabaseFoodRepository(supabase_client)
    daily_log_repository = SupabaseDailyLogRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
        timeout_seconds=resolved_settings.off_timeout_seconds,
    )
    food_catalog_service = FoodCatalogService(
        repository=food_repository,
        off_client=off_client,
        page_size=resolved_settings.off_page_size,
        retry_attempts=resolved_settings.off_retry_attempts,
    )
    daily_log_service = DailyLogService(
        food_catalog=food_catalog_service,
        repository=daily_log_repository,
        conflict_retries=resolved_settings.log_conflict_retries,
    )
    history_service = HistoryService(
        repository=daily_log_repository,
        default_days=resolved_settings.history_default_days,
    )
    profile_service = ProfileService(profile_repository)

    async def close_resources() -> None:
        await off_client.close()

    return AppContainer(
        settings=resolved_settings,
        food_catalog_service=food_catalog_service,
        daily_log_service=daily_log_service,
        history_service=history_service,
        profile_service=profile_service,
        close_resources=close_resources,
    )
