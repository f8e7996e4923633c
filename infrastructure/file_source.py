"""File handles accepted by the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class LocalFile:
    """A file on disk; only its leading bytes are read for ingestion."""

    path: str

    @property
    def name(self) -> str:
        """Base name of the file path."""
        return Path(self.path).name

    def read_header(self, limit: int) -> bytes:
        with open(self.path, "rb") as f:
            return f.read(limit)

    def read_all(self) -> bytes:
        with open(self.path, "rb") as f:
            return f.read()


@dataclass(frozen=True)
class BytesFile:
    """An in-memory file, e.g. pasted data or test fixtures."""

    name: str
    data: bytes
    path: str | None = None

    def read_header(self, limit: int) -> bytes:
        return self.data[:limit]

    def read_all(self) -> bytes:
        return self.data


def local_files(paths: list[str]) -> list[LocalFile]:
    """Wrap regular-file paths as handles, dropping directories and missing paths."""
    return [LocalFile(p) for p in paths if Path(p).is_file()]
