"""Batch ingestion of dropped files into geo-located `Photo` records.

Each file is read and decoded independently on a worker thread. Files that
cannot be read, cannot be decoded, or carry no usable location are skipped;
the batch always completes with the successful subset in input order.
"""

from __future__ import annotations

import base64
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
import math
import time

from loguru import logger

from core.models import Location, Photo
from core.services.interfaces import DecodeError, IFileHandle, IGeoDecoder

DEFAULT_HEADER_BYTES = 128 * 1024
DEFAULT_MAX_WORKERS = 8
THUMBNAIL_URI_PREFIX = "data:image/jpeg;base64,"


def encode_thumbnail(data: bytes | None) -> str:
    """Return an inline data URI for JPEG bytes, or "" when there are none."""
    if not data:
        return ""
    return THUMBNAIL_URI_PREFIX + base64.b64encode(data).decode("ascii")


def _is_usable(location: Location | None) -> bool:
    if location is None:
        return False
    return math.isfinite(location.latitude) and math.isfinite(location.longitude)


class IngestionService:
    """Turns a batch of file handles into validated photos."""

    def __init__(
        self,
        decoder: IGeoDecoder,
        header_bytes: int = DEFAULT_HEADER_BYTES,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """Create an IngestionService.

        Args:
            decoder: Metadata decoder used for every file.
            header_bytes: Size of the leading prefix read from each file.
            max_workers: Upper bound on concurrent extractions.
        """
        self._decoder = decoder
        self._header_bytes = max(1, int(header_bytes))
        self._max_workers = max(1, int(max_workers))

    def ingest(self, files: Sequence[IFileHandle]) -> list[Photo]:
        """Extract photos from `files`, preserving input order.

        Returns once every file has been processed; never raises for a
        per-file failure.
        """
        handles = list(files)
        if not handles:
            return []

        started = time.perf_counter()
        workers = min(self._max_workers, len(handles))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ingest") as pool:
            # map() yields results positionally, not in completion order
            results = list(pool.map(self._extract_safe, handles))

        photos = [p for p in results if p is not None]
        logger.info(
            "Ingested {}/{} files in {:.3f}s",
            len(photos),
            len(handles),
            time.perf_counter() - started,
        )
        return photos

    def extract(self, handle: IFileHandle) -> Photo | None:
        """Build a `Photo` for one file, or None when it has no usable location.

        Raises:
            OSError: If the file cannot be read.
            DecodeError: If the decoder rejects the bytes.
        """
        data = handle.read_header(self._header_bytes)
        if len(data) >= self._header_bytes and self._decoder.needs_full_file(data):
            # container metadata may sit past the prefix
            logger.debug("Reading all of {} for its container metadata", handle.name)
            data = handle.read_all()
        decoded = self._decoder.decode(data)
        if not _is_usable(decoded.location):
            logger.debug("No usable location in {}", handle.name)
            return None

        location = decoded.location
        logger.info(
            "File: {}, Latitude: {}, Longitude: {}",
            handle.name,
            location.latitude,
            location.longitude,
        )
        return Photo(location=location, thumbnail=encode_thumbnail(decoded.thumbnail), file=handle)

    def _extract_safe(self, handle: IFileHandle) -> Photo | None:
        try:
            return self.extract(handle)
        except (OSError, DecodeError) as ex:
            logger.debug("Skipping {}: {}", getattr(handle, "name", handle), ex)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning(
                "Unexpected failure ingesting {}: {}", getattr(handle, "name", handle), ex
            )
        return None
