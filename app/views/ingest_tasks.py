from __future__ import annotations

from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger


class _IngestTask(QRunnable):
    """QRunnable ingesting one dropped batch in the background.

    Emits `receiver.batchIngested(batch_id, photos)` upon completion. The
    receiver is expected to own a Qt `Signal(int, object)` named
    `batchIngested`.
    """

    def __init__(self, *, batch_id: int, files: list, service: Any, receiver: QObject) -> None:
        super().__init__()
        self._batch_id = batch_id
        self._files = files
        self._service = service
        self._receiver = receiver

    def run(self) -> None:  # type: ignore[override]
        try:
            photos = self._service.ingest(self._files)
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.error("Ingest task for batch {} failed: {}", self._batch_id, ex)
            photos = []
        self._receiver.batchIngested.emit(self._batch_id, photos)  # type: ignore[attr-defined]


class IngestTaskRunner:
    """Dispatches batch ingestion to the global thread pool."""

    def __init__(self, *, service: Any, receiver: QObject) -> None:
        self._service = service
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()

    def request_batch(self, batch_id: int, files: list) -> None:
        """Ingest `files` off the UI thread; the result is tagged with `batch_id`."""
        logger.info("Dispatching batch {} with {} files", batch_id, len(files))
        task = _IngestTask(
            batch_id=batch_id,
            files=list(files),
            service=self._service,
            receiver=self._receiver,
        )
        self._pool.start(task)
