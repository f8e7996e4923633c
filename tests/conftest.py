# tests/conftest.py
# Shared fixtures

from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.models import Location, Photo
from infrastructure.file_source import BytesFile


@pytest.fixture
def photo_factory():
    """Create photos at a position with an optional thumbnail reference."""

    def _make(lat: float, lon: float, thumbnail: str = "", name: str | None = None) -> Photo:
        handle = BytesFile(name=name or f"{lat},{lon}.jpg", data=b"")
        return Photo(location=Location(lat, lon), thumbnail=thumbnail, file=handle)

    return _make


@pytest.fixture(scope="session")
def qapp():
    """Single QApplication shared by every Qt test in the session."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
