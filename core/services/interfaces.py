"""Core service interfaces and shared data structures.

The ingestion pipeline depends only on these protocols so that the metadata
decoder and the file sources can live in the infrastructure layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from core.models import Location


class DecodeError(Exception):
    """Raised by a decoder when the bytes are not a readable image."""


@dataclass
class GeoThumbnail:
    """Result of decoding one file's metadata header.

    Attributes:
        location: Resolved GPS position, or None when the file has none.
        thumbnail: Embedded JPEG thumbnail bytes, or None when absent.
    """

    location: Location | None = None
    thumbnail: bytes | None = None


class IFileHandle(Protocol):
    """A dropped file whose leading bytes can be read on demand."""

    name: str

    def read_header(self, limit: int) -> bytes:
        """Return at most `limit` bytes from the start of the file."""
        raise NotImplementedError

    def read_all(self) -> bytes:
        """Return the complete file content."""
        raise NotImplementedError


class IGeoDecoder(Protocol):
    """Turns a metadata header into an optional location and thumbnail."""

    def decode(self, data: bytes) -> GeoThumbnail:
        """Decode `data`; raise `DecodeError` for malformed input."""
        raise NotImplementedError

    def needs_full_file(self, header: bytes) -> bool:
        """True when `header` belongs to a container that only parses whole."""
        raise NotImplementedError
