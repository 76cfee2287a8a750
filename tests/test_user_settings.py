"""Tests for user settings and bedtime parsing."""

from datetime import time
from uuid import uuid4

import pytest
from pydantic import ValidationError

from caffeine_tracker.config import DEFAULT_BEDTIME, Settings
from caffeine_tracker.services.user_settings import UserSettingsService
from tests.conftest import InMemoryUserSettingsRepository


def test_defaults_when_unset() -> None:
    service = UserSettingsService(InMemoryUserSettingsRepository())
    user_id = uuid4()

    assert service.get_timezone(user_id) == "UTC"
    assert service.get_bedtime(user_id) == time(23, 0)
    assert service.get_zone(user_id).key == "UTC"


def test_set_timezone_validates_zone() -> None:
    repo = InMemoryUserSettingsRepository()
    service = UserSettingsService(repo)
    user_id = uuid4()

    service.set_timezone(user_id, "Europe/Lisbon")

    assert service.get_zone(user_id).key == "Europe/Lisbon"
    with pytest.raises(ValueError):
        service.set_timezone(user_id, "Mars/Olympus_Mons")
    assert repo.timezones[user_id] == "Europe/Lisbon"


def test_set_bedtime_truncates_seconds() -> None:
    service = UserSettingsService(InMemoryUserSettingsRepository())
    user_id = uuid4()

    service.set_bedtime(user_id, time(22, 45, 30))

    assert service.get_bedtime(user_id) == time(22, 45)


_REQUIRED = {
    "supabase_url": "https://example.supabase.co",
    "supabase_service_key": "header.payload.signature",
    "api_token": "api-token",
    "openai_api_key": "openai-key",
    "nutritionix_app_id": "app-id",
    "nutritionix_app_key": "app-key",
}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("22:30", time(22, 30)),
        ("23:00:00", time(23, 0)),
    ],
)
def test_settings_parse_default_bedtime(raw: str, expected: time) -> None:
    assert Settings(**_REQUIRED, default_bedtime=raw).default_bedtime == expected


def test_settings_default_bedtime_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("DEFAULT_BEDTIME", "21:30")

    assert Settings(**_REQUIRED).default_bedtime == time(21, 30)


def test_settings_default_bedtime_defaults_to_eleven_pm(settings) -> None:
    assert settings.default_bedtime == DEFAULT_BEDTIME


@pytest.mark.parametrize("raw", ["late", "25:00", "10:xx"])
def test_settings_reject_invalid_bedtime(raw: str) -> None:
    with pytest.raises(ValidationError):
        Settings(**_REQUIRED, default_bedtime=raw)


def test_configured_default_bedtime() -> None:
    service = UserSettingsService(
        InMemoryUserSettingsRepository(), default_bedtime=time(21, 30)
    )

    assert service.get_bedtime(uuid4()) == time(21, 30)
