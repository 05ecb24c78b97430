"""Unit tests for the Qt file-dialog image source."""

import asyncio

import pytest

qt_widgets = pytest.importorskip("PySide6.QtWidgets")

from infrastructure import qt_image_source  # noqa: E402
from infrastructure.qt_image_source import QtImageSource  # noqa: E402


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_bytes(data)
    return str(path)


def test_pick_reads_every_selected_file(tmp_path, image_bytes, monkeypatch):
    paths = [
        _write(tmp_path, "a.png", image_bytes()),
        _write(tmp_path, "b.jpg", image_bytes("JPEG")),
    ]
    missing = str(tmp_path / "gone.png")
    monkeypatch.setattr(
        qt_image_source.QFileDialog,
        "getOpenFileNames",
        staticmethod(lambda *args: (paths + [missing], "")),
    )
    images = asyncio.run(QtImageSource().pick())
    assert images == [image_bytes(), image_bytes("JPEG")]


def test_pick_cancel_returns_nothing(monkeypatch):
    monkeypatch.setattr(
        qt_image_source.QFileDialog, "getOpenFileNames", staticmethod(lambda *args: ([], ""))
    )
    assert asyncio.run(QtImageSource().pick()) == []


def test_capture_falls_back_to_single_pick(tmp_path, image_bytes, monkeypatch):
    path = _write(tmp_path, "c.png", image_bytes())
    monkeypatch.setattr(
        qt_image_source.QFileDialog, "getOpenFileName", staticmethod(lambda *args: (path, ""))
    )
    assert asyncio.run(QtImageSource().capture()) == image_bytes()

    monkeypatch.setattr(
        qt_image_source.QFileDialog, "getOpenFileName", staticmethod(lambda *args: ("", ""))
    )
    assert asyncio.run(QtImageSource().capture()) is None
