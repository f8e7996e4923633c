from __future__ import annotations

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger

from app.views.media_utils import read_preview_image


class _PreviewTask(QRunnable):
    """QRunnable reading one full-resolution preview in the background.

    Emits `receiver.previewLoaded(token, image)` upon completion, where `image`
    is a `QImage` or None. The receiver is expected to own a Qt
    `Signal(str, object)` named `previewLoaded`.
    """

    def __init__(self, *, path: str, side: int, receiver: QObject, token: str) -> None:
        super().__init__()
        self._path = path
        self._side = side
        self._receiver = receiver
        self._token = token

    def run(self) -> None:  # type: ignore[override]
        try:
            img = read_preview_image(self._path, self._side)
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.error("Preview task for {} failed: {}", self._path, ex)
            img = None
        self._receiver.previewLoaded.emit(self._token, img)  # type: ignore[attr-defined]


class PreviewTaskRunner:
    """Dispatches preview reads to the global thread pool.

    Tokens have the form "preview|{path}|{side}".
    """

    def __init__(self, *, receiver: QObject) -> None:
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()

    def request_preview(self, path: str, side: int) -> str:
        """Request a preview of `path` bounded by `side`. Returns the token."""
        token = f"preview|{path}|{side}"
        task = _PreviewTask(path=path, side=side, receiver=self._receiver, token=token)
        self._pool.start(task)
        return token
