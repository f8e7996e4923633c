"""Conversions between photo references and Qt pixmaps."""

from __future__ import annotations

import base64
import binascii

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QImage, QImageReader, QPixmap
from loguru import logger

from core.services.ingestion_service import THUMBNAIL_URI_PREFIX


def pixmap_from_data_uri(uri: str, side: int) -> QPixmap:
    """Decode an inline thumbnail into a pixmap bounded by `side`.

    Returns a null pixmap for empty or malformed references.
    """
    pm = QPixmap()
    if not uri or not uri.startswith(THUMBNAIL_URI_PREFIX):
        return pm
    try:
        data = base64.b64decode(uri[len(THUMBNAIL_URI_PREFIX) :], validate=True)
    except (binascii.Error, ValueError) as ex:
        logger.debug("Bad thumbnail reference: {}", ex)
        return pm
    if not pm.loadFromData(data):
        return QPixmap()
    return pm.scaled(side, side, Qt.KeepAspectRatio, Qt.SmoothTransformation)


def read_preview_image(path: str | None, max_side: int) -> QImage | None:
    """Read the full-resolution file at `path`, downscaled to `max_side`.

    Returns a `QImage` so it can run on a worker thread; convert to a pixmap
    on the GUI thread.
    """
    if not path:
        return None
    reader = QImageReader(path)
    reader.setAutoTransform(True)
    size = reader.size()
    if size.isValid() and max(size.width(), size.height()) > max_side:
        reader.setScaledSize(size.scaled(QSize(max_side, max_side), Qt.KeepAspectRatio))
    img = reader.read()
    if img.isNull():
        logger.info("Preview read failed for {}: {}", path, reader.errorString() or "null image")
        return None
    return img
