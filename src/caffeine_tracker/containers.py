"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from caffeine_tracker.adapters.nutritionix_client import HttpxNutritionixClient
from caffeine_tracker.adapters.openai_insight_client import OpenAIInsightClient
from caffeine_tracker.adapters.supabase_health_repository import (
    SupabaseHealthRepository,
)
from caffeine_tracker.adapters.supabase_intake_repository import (
    SupabaseIntakeRepository,
)
from caffeine_tracker.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
)
from caffeine_tracker.config import Settings
from caffeine_tracker.services.activity import ActivityService
from caffeine_tracker.services.analysis import AnalysisService
from caffeine_tracker.services.beverages import BeverageCatalog
from caffeine_tracker.services.cache import InMemoryCache
from caffeine_tracker.services.insights import InsightService
from caffeine_tracker.services.intake import IntakeService
from caffeine_tracker.services.products import ProductLookupService
from caffeine_tracker.services.sleep import SleepService
from caffeine_tracker.services.user_settings import UserSettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    intake_service: IntakeService
    user_settings_service: UserSettingsService
    sleep_service: SleepService
    insight_service: InsightService
    analysis_service: AnalysisService
    product_service: ProductLookupService
    beverage_catalog: BeverageCatalog
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    intake_service = IntakeService(SupabaseIntakeRepository(supabase_client))
    user_settings_service = UserSettingsService(
        SupabaseUserSettingsRepository(supabase_client),
        default_bedtime=resolved_settings.default_bedtime,
    )
    health_repository = SupabaseHealthRepository(supabase_client)
    sleep_service = SleepService(health_repository)
    activity_service = ActivityService(health_repository)
    insight_service = InsightService(
        client=OpenAIInsightClient.create(resolved_settings.openai_api_key),
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    analysis_service = AnalysisService(
        intake_service=intake_service,
        sleep_service=sleep_service,
        user_settings_service=user_settings_service,
        insight_service=insight_service,
        activity_service=activity_service,
    )
    nutritionix_client = HttpxNutritionixClient.create(
        app_id=resolved_settings.nutritionix_app_id,
        app_key=resolved_settings.nutritionix_app_key,
        base_url=resolved_settings.nutritionix_base_url,
    )
    product_service = ProductLookupService(
        client=nutritionix_client,
        cache=InMemoryCache(),
    )
    beverage_catalog = (
        BeverageCatalog.from_path(resolved_settings.beverage_catalog_path)
        if resolved_settings.beverage_catalog_path
        else BeverageCatalog()
    )

    async def close_resources() -> None:
        await nutritionix_client.close()

    return AppContainer(
        settings=resolved_settings,
        intake_service=intake_service,
        user_settings_service=user_settings_service,
        sleep_service=sleep_service,
        insight_service=insight_service,
        analysis_service=analysis_service,
        product_service=product_service,
        beverage_catalog=beverage_catalog,
        close_resources=close_resources,
    )
