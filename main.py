from __future__ import annotations

from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.map_vm import MapVM
from app.views.main_window import MainWindow
from core.services.clustering_service import DEFAULT_BASE_RADIUS, ClusteringService
from core.services.ingestion_service import (
    DEFAULT_HEADER_BYTES,
    DEFAULT_MAX_WORKERS,
    IngestionService,
)
from infrastructure.exif_decoder import ExifGeoDecoder
from infrastructure.logging import init_logging
from infrastructure.settings import DefaultSettings, JsonSettings

BASE_DIR = Path(__file__).parent


def _load_settings(path: Path) -> JsonSettings:
    try:
        return JsonSettings(path)
    except FileNotFoundError:
        logger.warning("No settings at {}; using defaults", path)
        return DefaultSettings()


def build_ingestion_service(settings: JsonSettings) -> IngestionService:
    """Create the ingestion pipeline configured from `settings`."""
    return IngestionService(
        ExifGeoDecoder(),
        header_bytes=settings.get_int("ingestion.header_bytes", DEFAULT_HEADER_BYTES),
        max_workers=settings.get_int("ingestion.max_workers", DEFAULT_MAX_WORKERS),
    )


def main() -> int:
    settings = _load_settings(BASE_DIR / "settings.json")
    log_dir = init_logging(level=str(settings.get("logging.level", "INFO")))
    logger.info("Photo Map starting; logs in {}", log_dir)

    app = QApplication(sys.argv)

    clusterer = ClusteringService(
        settings.get_float("clustering.base_radius", DEFAULT_BASE_RADIUS)
    )
    vm = MapVM(clusterer)
    win = MainWindow(
        vm=vm,
        ingestion_service=build_ingestion_service(settings),
        settings=settings,
        log_dir=str(log_dir),
    )
    win.statusBar().showMessage("Ready", 2000)
    win.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
