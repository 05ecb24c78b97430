"""Unit tests for application wiring and the entry point."""

import asyncio
import json

import pytest

import main
from app.bootstrap import build_app
from infrastructure.settings import JsonSettings


@pytest.fixture
def settings_path(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "storage": {
                    "data_dir": str(tmp_path / "data"),
                    "images_dir": str(tmp_path / "data" / "images"),
                },
                "logging": {"dir": str(tmp_path / "logs")},
            }
        ),
        encoding="utf-8",
    )
    return path


def test_build_app_wires_album_storage(settings_path, image_bytes):
    ctx = build_app(JsonSettings(settings_path))
    ctx.journal.load()
    album = ctx.journal.trips[0].albums[0]

    vm = ctx.open_album(album)
    asyncio.run(vm.activate())
    asyncio.run(vm.add_images([image_bytes()]))

    assert ctx.album_repo.load(album.id) == vm.photos
    assert ctx.image_store.images_dir == settings_path.parent / "data" / "images"


def test_discover_without_api_key_reports_status(settings_path, monkeypatch):
    monkeypatch.delenv("TRAVELER_PLACES_API_KEY", raising=False)
    ctx = build_app(JsonSettings(settings_path))
    assert asyncio.run(ctx.discover.refresh()) == []
    assert ctx.discover.error_message.startswith("Error searching for nearby places")


def test_main_prints_summary(settings_path, capsys):
    assert main.main(["--settings", str(settings_path), "--search", "local"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Local Area | Home |")
    assert "8 album(s)" in out
