"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from uuid import UUID

import pytest

from caffeine_tracker.config import Settings
from caffeine_tracker.containers import AppContainer
from caffeine_tracker.domain.intake import IntakeEvent
from caffeine_tracker.domain.sleep import SleepSample
from caffeine_tracker.domain.summary import DailyActivity
from caffeine_tracker.services.activity import ActivityProvider, ActivityService
from caffeine_tracker.services.analysis import AnalysisService
from caffeine_tracker.services.beverages import BeverageCatalog
from caffeine_tracker.services.cache import InMemoryCache
from caffeine_tracker.services.insights import InsightClient, InsightService
from caffeine_tracker.services.intake import IntakeRepository, IntakeService
from caffeine_tracker.services.products import (
    NutritionixClient,
    ProductLookupService,
)
from caffeine_tracker.services.sleep import HealthDataProvider, SleepService
from caffeine_tracker.services.user_settings import (
    UserSettingsRepository,
    UserSettingsService,
)

CATALOG_CSV = """name,serving size,caffeine,type
Starbucks Pike Place,16 oz,310,coffee
Earl Grey,1 cup,48,tea
Monster Energy,16 oz,160,energy drink
Coca-Cola Classic,355 ml,34,soda
Yerba Mate Shot,60,150,other
"""


@dataclass
class InMemoryIntakeRepository(IntakeRepository):
    """In-memory intake repository for tests."""

    events: dict[UUID, tuple[UUID, IntakeEvent]] = field(default_factory=dict)

    def create_intake(self, user_id: UUID, event: IntakeEvent) -> IntakeEvent:
        self.events[event.id] = (user_id, event)
        return event

    def delete_intake(self, user_id: UUID, intake_id: UUID) -> bool:
        stored = self.events.get(intake_id)
        if stored is None or stored[0] != user_id:
            return False
        del self.events[intake_id]
        return True

    def list_intakes(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[IntakeEvent]:
        return [
            event
            for owner, event in self.events.values()
            if owner == user_id and start <= event.timestamp < end
        ]


@dataclass
class InMemoryUserSettingsRepository(UserSettingsRepository):
    """In-memory user settings repository for tests."""

    timezones: dict[UUID, str] = field(default_factory=dict)
    bedtimes: dict[UUID, time] = field(default_factory=dict)

    def get_timezone(self, user_id: UUID) -> str | None:
        return self.timezones.get(user_id)

    def set_timezone(self, user_id: UUID, timezone: str) -> None:
        self.timezones[user_id] = timezone

    def get_bedtime(self, user_id: UUID) -> time | None:
        return self.bedtimes.get(user_id)

    def set_bedtime(self, user_id: UUID, bedtime: time) -> None:
        self.bedtimes[user_id] = bedtime


@dataclass
class FakeHealthProvider(HealthDataProvider, ActivityProvider):
    """Health provider serving fixed samples, optionally failing on some days."""

    samples: list[SleepSample] = field(default_factory=list)
    activity: list[DailyActivity] = field(default_factory=list)
    activity_fails: bool = False
    heart_rate: float | None = 58.0
    failing_windows: list[datetime] = field(default_factory=list)
    heart_rate_fails: bool = False
    calls: list[tuple[datetime, datetime]] = field(default_factory=list)

    async def fetch_sleep_samples(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[SleepSample]:
        self.calls.append((start, end))
        if start in self.failing_windows:
            raise RuntimeError("health store unavailable")
        return [s for s in self.samples if start <= s.start < end]

    async def average_heart_rate(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> float | None:
        if self.heart_rate_fails:
            raise RuntimeError("heart rate unavailable")
        return self.heart_rate

    async def fetch_daily_activity(
        self, user_id: UUID, start_day: date, end_day: date
    ) -> list[DailyActivity]:
        if self.activity_fails:
            raise RuntimeError("activity unavailable")
        return list(self.activity)


@dataclass
class FakeInsightClient(InsightClient):
    """Fake insight client returning a fixed output and recording prompts."""

    output: str = (
        '{"summary": "Steady week.", "insights": ["Mornings only"], '
        '"recommendations": ["Stop by 2pm"], "scores": {"sleepQuality": 82, '
        '"caffeineBalance": 70, "physicalActivity": 64, "overall": 75}}'
    )
    requests: list[dict[str, object]] = field(default_factory=list)

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        prompt: str,
        schema: dict[str, object] | None = None,
    ) -> str:
        self.requests.append(
            {
                "model": model,
                "instructions": instructions,
                "prompt": prompt,
                "schema": schema,
            }
        )
        return self.output


@dataclass
class FakeNutritionixClient(NutritionixClient):
    """Fake Nutritionix client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "common": [
                {
                    "food_name": "cold brew",
                    "serving_qty": 1,
                    "serving_unit": "cup",
                    "photo": {"thumb": "https://img.test/cold-brew.jpg"},
                }
            ],
            "branded": [
                {
                    "food_name": "Cold Brew Coffee",
                    "brand_name": "Stumptown",
                    "serving_qty": 10.5,
                    "serving_unit": "fl oz",
                    "nf_caffeine": 279,
                }
            ],
        }
    )
    item_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "food_name": "Energy Drink",
                    "brand_name": "Red Bull",
                    "serving_qty": 1,
                    "serving_unit": "can",
                }
            ]
        }
    )
    nutrients_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "food_name": "Energy Drink",
                    "brand_name": "Red Bull",
                    "serving_qty": 1,
                    "serving_unit": "can",
                    "serving_weight_grams": 260,
                    "nf_caffeine": 80,
                    "photo": {"full": "https://img.test/red-bull.jpg"},
                }
            ]
        }
    )
    search_calls: int = 0
    item_calls: int = 0
    nutrient_queries: list[str] = field(default_factory=list)

    async def search_instant(self, query: str) -> dict[str, object]:
        self.search_calls += 1
        return self.search_payload

    async def search_item(self, upc: str) -> dict[str, object]:
        self.item_calls += 1
        return self.item_payload

    async def natural_nutrients(self, query: str) -> dict[str, object]:
        self.nutrient_queries.append(query)
        return self.nutrients_payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        api_token="api-token",
        openai_api_key="openai-key",
        nutritionix_app_id="app-id",
        nutritionix_app_key="app-key",
    )


@pytest.fixture
def health_provider() -> FakeHealthProvider:
    return FakeHealthProvider()


@pytest.fixture
def insight_client() -> FakeInsightClient:
    return FakeInsightClient()


@pytest.fixture
def container(
    settings: Settings,
    health_provider: FakeHealthProvider,
    insight_client: FakeInsightClient,
) -> AppContainer:
    intake_service = IntakeService(InMemoryIntakeRepository())
    user_settings_service = UserSettingsService(InMemoryUserSettingsRepository())
    sleep_service = SleepService(health_provider)
    insight_service = InsightService(
        client=insight_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )
    analysis_service = AnalysisService(
        intake_service=intake_service,
        sleep_service=sleep_service,
        user_settings_service=user_settings_service,
        insight_service=insight_service,
        activity_service=ActivityService(health_provider),
    )
    product_service = ProductLookupService(
        client=FakeNutritionixClient(),
        cache=InMemoryCache(),
        retry_delay_seconds=0,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        intake_service=intake_service,
        user_settings_service=user_settings_service,
        sleep_service=sleep_service,
        insight_service=insight_service,
        analysis_service=analysis_service,
        product_service=product_service,
        beverage_catalog=BeverageCatalog.from_csv_text(CATALOG_CSV),
        close_resources=close_resources,
    )
