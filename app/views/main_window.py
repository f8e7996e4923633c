"""MainWindow: drop target, zoom control, marker list and group detail pane."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtGui import QDragEnterEvent, QDragMoveEvent, QDropEvent, QIcon
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QSpinBox,
    QSplitter,
    QStackedLayout,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.map_vm import MapVM
from app.views.constants import (
    DEFAULT_PREVIEW_SIZE,
    DEFAULT_THUMB_SIZE,
    GROUP_ID_ROLE,
    MAX_ZOOM,
    MIN_ZOOM,
    OVERLAY_TEXT,
)
from app.views.group_pane import PhotoGroupPane
from app.views.image_tasks import PreviewTaskRunner
from app.views.ingest_tasks import IngestTaskRunner
from app.views.media_utils import pixmap_from_data_uri
from core.models import PhotoGroup
from infrastructure.file_source import local_files
from infrastructure.logging import open_latest_log, open_log_directory


class MainWindow(QMainWindow):
    """Main application window.

    Markers are listed rather than drawn on tiles; the zoom spin box plays the
    role of the map's zoom-end event.
    """

    batchIngested = Signal(int, object)  # batch id, list[Photo]
    previewLoaded = Signal(str, object)  # token, QImage or None

    def __init__(
        self,
        vm: MapVM,
        ingestion_service: Any,
        settings: Any | None = None,
        log_dir: str | None = None,
    ) -> None:
        """Initialize MainWindow.

        Args:
            vm: Map view-model holding photos, zoom and selection.
            ingestion_service: Service with `ingest(files) -> list[Photo]`.
            settings: Settings instance for configuration.
            log_dir: Directory the "Log" menu opens; defaults to the standard one.
        """
        super().__init__()
        self._vm = vm
        self._settings = settings
        self._log_dir = log_dir
        self._thumb_size = DEFAULT_THUMB_SIZE
        self._preview_size = DEFAULT_PREVIEW_SIZE
        if settings is not None:
            self._thumb_size = settings.get_int("ui.thumbnail_size", DEFAULT_THUMB_SIZE)
            self._preview_size = settings.get_int("ui.preview_size", DEFAULT_PREVIEW_SIZE)

        self._runner = IngestTaskRunner(service=ingestion_service, receiver=self)
        self._preview_runner = PreviewTaskRunner(receiver=self)

        self._setup_ui()
        self.batchIngested.connect(self._on_batch_ingested)
        self.previewLoaded.connect(self._pane.on_preview_loaded)
        self.setAcceptDrops(True)
        self.refresh()

    def _setup_ui(self) -> None:
        self.setWindowTitle("Photo Map")

        left = QWidget()
        left_layout = QVBoxLayout(left)
        zoom_row = QHBoxLayout()
        zoom_row.addWidget(QLabel("Zoom"))
        self._zoom = QSpinBox()
        self._zoom.setRange(MIN_ZOOM, MAX_ZOOM)
        self._zoom.setValue(int(self._vm.zoom))
        self._zoom.valueChanged.connect(self._on_zoom_changed)
        zoom_row.addWidget(self._zoom)
        zoom_row.addStretch(1)
        left_layout.addLayout(zoom_row)

        stack_host = QWidget()
        self._stack = QStackedLayout(stack_host)
        self._stack.setStackingMode(QStackedLayout.StackAll)
        self._markers = QListWidget()
        self._markers.setIconSize(QSize(self._thumb_size, self._thumb_size))
        self._markers.itemClicked.connect(self._on_marker_clicked)
        self._overlay = QLabel(OVERLAY_TEXT)
        self._overlay.setAlignment(Qt.AlignCenter)
        self._overlay.setAttribute(Qt.WA_TransparentForMouseEvents)
        self._overlay.setStyleSheet(
            "background: rgba(0, 0, 0, 190); color: white; font-size: 16px;"
        )
        self._stack.addWidget(self._markers)
        self._stack.addWidget(self._overlay)
        self._overlay.raise_()
        left_layout.addWidget(stack_host, 1)

        self._pane = PhotoGroupPane(None, self._preview_runner, preview_size=self._preview_size)
        self._pane.closeRequested.connect(self._on_pane_closed)

        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(left)
        splitter.addWidget(self._pane)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        log_menu = self.menuBar().addMenu("Log")
        log_menu.addAction("Open Latest Log").triggered.connect(self._on_open_latest_log)
        log_menu.addAction("Open Log Directory").triggered.connect(self._on_open_log_directory)
        self.resize(1200, 800)

    # Rendering
    def refresh(self) -> None:
        """Re-render markers, overlay and detail pane from the view-model."""
        self._overlay.setVisible(self._vm.overlay_visible)
        self._markers.clear()
        for group in self._vm.groups:
            self._markers.addItem(self._marker_item(group))
        self._refresh_pane()

    def _refresh_pane(self) -> None:
        selected = self._vm.selected_group
        if selected is None:
            self._pane.clear()
            self._pane.hide()
        else:
            self._pane.show_group(selected)
            self._pane.show()

    def _marker_item(self, group: PhotoGroup) -> QListWidgetItem:
        item = QListWidgetItem(
            f"{group.latitude:.5f}, {group.longitude:.5f} ({group.photo_count} photos)"
        )
        item.setData(GROUP_ID_ROLE, group.id)
        pm = pixmap_from_data_uri(group.representative_thumbnail, self._thumb_size)
        if not pm.isNull():
            item.setIcon(QIcon(pm))
        return item

    # Drag and drop
    def dragEnterEvent(self, event: QDragEnterEvent) -> None:  # noqa: N802
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dragMoveEvent(self, event: QDragMoveEvent) -> None:  # noqa: N802
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event: QDropEvent) -> None:  # noqa: N802
        paths = [u.toLocalFile() for u in event.mimeData().urls() if u.isLocalFile()]
        event.acceptProposedAction()
        files = local_files(paths)
        if not files:
            logger.info("Drop contained no readable files")
            return
        batch_id = self._vm.begin_batch()
        self.statusBar().showMessage(f"Reading {len(files)} files...")
        self._runner.request_batch(batch_id, files)

    # Slots
    def _on_batch_ingested(self, batch_id: int, photos: list) -> None:
        if not self._vm.apply_batch(batch_id, photos):
            return
        self.statusBar().showMessage(
            f"{self._vm.photo_count} geo-tagged photos in {self._vm.group_count} groups", 5000
        )
        self.refresh()

    def _on_zoom_changed(self, value: int) -> None:
        self._vm.set_zoom(value)
        self.refresh()

    def _on_marker_clicked(self, item: QListWidgetItem) -> None:
        self._vm.set_selected_group_id(item.data(GROUP_ID_ROLE))
        self._refresh_pane()

    def _on_pane_closed(self) -> None:
        self._vm.set_selected_group_id(None)
        self._refresh_pane()

    def _on_open_latest_log(self) -> None:
        if not open_latest_log(self._log_dir):
            self.statusBar().showMessage("No log file to open", 5000)

    def _on_open_log_directory(self) -> None:
        if not open_log_directory(self._log_dir):
            self.statusBar().showMessage("Could not open the log directory", 5000)
