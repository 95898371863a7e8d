from __future__ import annotations

import argparse
from pathlib import Path
import sys

from loguru import logger

from app.events import EventChannel
from app.viewmodels.main_vm import MainVM
from app.viewmodels.map_vm import MapVM
from infrastructure.image_service import ImageService
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings
from infrastructure.sqlite_repository import SqlitePhotoRepository

BASE_DIR = Path(__file__).parent


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="photomapper",
        description="Plot photos by the GPS position stored in their EXIF header.",
    )
    parser.add_argument("images", nargs="*", help="images to import (share entry point)")
    parser.add_argument("--settings", default=str(BASE_DIR / "settings.json"))
    parser.add_argument("--headless", action="store_true", help="import and exit without a window")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    settings = JsonSettings(args.settings)
    init_logging(settings.get_path("logging.dir"), console=bool(settings.get("logging.console")))

    repo = SqlitePhotoRepository(settings.get_path("database.path"))
    channel = EventChannel()
    map_vm = MapVM(
        repo,
        channel,
        start_zoom=settings.get_float("map.start_zoom", 13.0),
        fallback_position=(
            settings.get_float("map.fallback_latitude", 0.0),
            settings.get_float("map.fallback_longitude", 0.0),
        ),
    )
    vm = MainVM(repo, map_vm, ImageService(settings))

    results = [vm.import_photo(path) for path in args.images]
    if args.headless:
        for result in results:
            print(f"{result.status.value}\t{result.path}\t{result.message}")
        repo.close()
        return 0 if all(r.stored for r in results) else 1

    # Qt is only needed for the window
    from PySide6.QtWidgets import QApplication  # pylint: disable=import-outside-toplevel

    from app.views.main_window import MainWindow  # pylint: disable=import-outside-toplevel

    app = QApplication(sys.argv[:1])
    map_vm.reload()
    channel.drain()
    win = MainWindow(vm=vm, map_vm=map_vm)
    win.refresh_markers()
    if results and not results[-1].stored:
        win.show_no_location(results[-1])
    else:
        win.centre_on_start()
    win.statusBar().showMessage("Ready", 2000)
    win.show()
    logger.info("Window shown with {} markers", len(map_vm.markers))

    exit_code = app.exec()
    repo.close()
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
