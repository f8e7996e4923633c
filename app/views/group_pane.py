from __future__ import annotations

from typing import Any

from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtGui import QIcon, QPixmap
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from app.views.constants import DEFAULT_PREVIEW_SIZE, PANE_THUMB_SIZE
from app.views.image_tasks import PreviewTaskRunner
from app.views.media_utils import pixmap_from_data_uri
from core.models import Photo, PhotoGroup


class PhotoGroupPane(QWidget):
    """Detail pane for one group: a large preview plus a thumbnail strip.

    Full-resolution previews are read by `task_runner`; results come back
    through `on_preview_loaded` and are dropped unless they match the photo
    currently shown.
    """

    closeRequested = Signal()

    def __init__(
        self,
        parent: QWidget | None,
        task_runner: PreviewTaskRunner,
        preview_size: int | None = None,
    ) -> None:
        super().__init__(parent)
        self._runner = task_runner
        self._preview_size = int(preview_size or DEFAULT_PREVIEW_SIZE)
        self._group: PhotoGroup | None = None
        self._selected_index = 0
        self._current_token: str | None = None

        root = QVBoxLayout(self)
        header = QHBoxLayout()
        close_btn = QToolButton()
        close_btn.setText("✕")
        close_btn.clicked.connect(self.closeRequested.emit)
        self._title = QLabel("Photos")
        self._title.setStyleSheet("font-weight: bold;")
        header.addWidget(close_btn)
        header.addWidget(self._title)
        header.addStretch(1)
        root.addLayout(header)

        self._preview = QLabel()
        self._preview.setAlignment(Qt.AlignCenter)
        self._preview.setMinimumSize(200, 200)
        root.addWidget(self._preview, 1)

        self._strip = QListWidget()
        self._strip.setViewMode(QListWidget.IconMode)
        self._strip.setFlow(QListWidget.LeftToRight)
        self._strip.setWrapping(False)
        self._strip.setIconSize(QSize(PANE_THUMB_SIZE, PANE_THUMB_SIZE))
        self._strip.setFixedHeight(PANE_THUMB_SIZE + 32)
        self._strip.currentRowChanged.connect(self._on_row_changed)
        root.addWidget(self._strip)

    # Public API
    def show_group(self, group: PhotoGroup) -> None:
        """Show `group`, selecting its first photo.

        Re-showing a group with the same id and photos keeps the current
        selection and issues no new preview read.
        """
        if self._group is not None and self._same_group(self._group, group):
            self._group = group
            return
        self._group = group
        self._title.setText(f"Photos ({group.photo_count})")
        self._strip.blockSignals(True)
        self._strip.clear()
        for photo in group.photos:
            item = QListWidgetItem(getattr(photo.file, "name", ""))
            pm = pixmap_from_data_uri(photo.thumbnail, PANE_THUMB_SIZE)
            if not pm.isNull():
                item.setIcon(QIcon(pm))
            self._strip.addItem(item)
        self._strip.setCurrentRow(0)
        self._strip.blockSignals(False)
        self._show_photo(0)

    def clear(self) -> None:
        """Forget the shown group; late preview results are ignored."""
        self._group = None
        self._selected_index = 0
        self._current_token = None
        self._strip.blockSignals(True)
        self._strip.clear()
        self._strip.blockSignals(False)
        self._preview.clear()

    @property
    def selected_photo(self) -> Photo | None:
        if self._group is None or not self._group.photos:
            return None
        return self._group.photos[self._selected_index]

    @property
    def selected_index(self) -> int:
        return self._selected_index

    def on_preview_loaded(self, token: str, image: Any) -> None:
        """Apply a background preview result if it is still wanted."""
        if token != self._current_token:
            return
        if image is None:
            return
        pm = QPixmap.fromImage(image)
        if not pm.isNull():
            self._preview.setPixmap(pm)

    # Internal helpers
    @staticmethod
    def _same_group(a: PhotoGroup, b: PhotoGroup) -> bool:
        return a.id == b.id and a.photos == b.photos

    def _on_row_changed(self, row: int) -> None:
        if row >= 0:
            self._show_photo(row)

    def _show_photo(self, index: int) -> None:
        self._selected_index = index
        self._current_token = None
        photo = self.selected_photo
        if photo is None:
            self._preview.clear()
            return
        # embedded thumbnail stands in until the full image arrives
        pm = pixmap_from_data_uri(photo.thumbnail, self._preview_size)
        if pm.isNull():
            self._preview.setText(getattr(photo.file, "name", "(no preview)"))
        else:
            self._preview.setPixmap(pm)
        path = getattr(photo.file, "path", None)
        if path:
            self._current_token = self._runner.request_preview(path, self._preview_size)
