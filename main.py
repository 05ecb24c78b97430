from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
import sys

from loguru import logger

from app.bootstrap import AppContext, build_app
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings
from infrastructure.utils import format_date

BASE_DIR = Path(__file__).parent


def _print_summary(ctx: AppContext, query: str) -> None:
    for trip in ctx.journal.filtered_trips(query):
        print(
            f"{trip.name} | {trip.location} | "
            f"{format_date(trip.begin_date)} - {format_date(trip.end_date)} | "
            f"{len(trip.albums)} album(s)"
        )


async def _import_photos(ctx: AppContext, trip_name: str, album_name: str) -> int:
    from PySide6.QtWidgets import QApplication

    from infrastructure.qt_image_source import QtImageSource

    trip = next((t for t in ctx.journal.trips if t.name == trip_name), None)
    album = next((a for a in trip.albums if a.name == album_name), None) if trip else None
    if album is None:
        print(f"No album '{album_name}' in trip '{trip_name}'", file=sys.stderr)
        return 1

    _qt_app = QApplication.instance() or QApplication(sys.argv)
    vm = ctx.open_album(album)
    await vm.activate()
    added = await vm.add_from_library(QtImageSource())
    await vm.deactivate()
    print(f"Added {len(added)} photo(s) to {trip_name} / {album_name}")
    return 0 if not vm.save_pending else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Traveler journal")
    parser.add_argument("--settings", default=str(BASE_DIR / "settings.json"))
    parser.add_argument("--search", default="", help="filter trips by name")
    parser.add_argument(
        "--import-photos",
        nargs=2,
        metavar=("TRIP", "ALBUM"),
        help="pick images and add them to an album",
    )
    args = parser.parse_args(argv)

    settings = JsonSettings(args.settings)
    init_logging(str(settings.get_path("logging.dir")), str(settings.get("logging.level", "INFO")))

    ctx = build_app(settings)
    ctx.journal.load()
    logger.info("Started with {} trip(s)", len(ctx.journal.trips))

    if args.import_photos:
        return asyncio.run(_import_photos(ctx, *args.import_photos))

    _print_summary(ctx, args.search)
    for notice in ctx.notices.notices:
        print(f"warning: {notice}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
