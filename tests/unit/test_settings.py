"""Unit tests for settings, utilities and the configured location provider."""

import asyncio
from datetime import date
import json
from pathlib import Path

import pytest

from core.errors import LocationError
from core.models import Coordinate
from infrastructure.location import FixedLocationProvider
from infrastructure.settings import JsonSettings
from infrastructure.utils import format_date, parse_date, photo_file_name


def test_missing_settings_file_uses_defaults(tmp_path):
    settings = JsonSettings(tmp_path / "nope.json")
    assert settings.get("photos.delete_to_trash") is False
    assert settings.get("places.radius_m") == 5000
    assert settings.get("does.not.exist", "fallback") == "fallback"


def test_settings_file_overrides_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"places": {"radius_m": 1200}, "storage": {"data_dir": "~/journal"}}),
        encoding="utf-8",
    )
    settings = JsonSettings(path)
    assert settings.get("places.radius_m") == 1200
    assert settings.get("places.placeholder_url") == "https://example.com/default.jpg"
    assert settings.get_path("storage.data_dir") == Path.home() / "journal"


def test_settings_must_be_an_object(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        JsonSettings(path)


def test_api_key_environment_override(monkeypatch):
    monkeypatch.setenv("TRAVELER_PLACES_API_KEY", "from-env")
    assert JsonSettings().get("places.api_key") == "from-env"


def test_dates_round_trip():
    assert parse_date(format_date(date(2024, 12, 31))) == date(2024, 12, 31)
    assert parse_date("31/12/2024") is None
    assert parse_date("") is None
    assert format_date(None) == ""


def test_photo_file_name():
    first, second = photo_file_name("PNG"), photo_file_name(".jpg")
    assert first.endswith(".png")
    assert second.endswith(".jpg")
    assert first[:-4] != second[:-4]


def test_fixed_location_provider():
    provider = FixedLocationProvider(35.0, 139.0)
    assert asyncio.run(provider.request_current_location()) == Coordinate(35.0, 139.0)


@pytest.mark.parametrize("lat, lon", [(None, None), ("north", 1.0), (95.0, 0.0)])
def test_fixed_location_provider_unavailable(lat, lon):
    with pytest.raises(LocationError):
        asyncio.run(FixedLocationProvider(lat, lon).request_current_location())


def test_location_from_settings():
    provider = FixedLocationProvider.from_settings(JsonSettings())
    assert asyncio.run(provider.request_current_location()) == Coordinate(37.7749, -122.4194)
