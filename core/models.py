"""Core domain models for geo-tagged photos and their map clusters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Location:
    """A latitude/longitude pair in degrees."""

    latitude: float
    longitude: float


@dataclass
class Photo:
    """A single ingested file with a resolved location.

    `thumbnail` is an inline data URI, or an empty string when the source
    carried no embedded thumbnail. `file` is the handle the photo was read
    from and is kept for full-resolution display.
    """

    location: Location
    thumbnail: str
    file: Any

    @property
    def latitude(self) -> float:
        return self.location.latitude

    @property
    def longitude(self) -> float:
        return self.location.longitude


@dataclass
class PhotoGroup:
    """A cluster of photos rendered as one marker.

    The anchor (`latitude`, `longitude`) is the first member's position.
    """

    id: int
    latitude: float
    longitude: float
    representative_thumbnail: str = ""
    photos: list[Photo] = field(default_factory=list)

    @property
    def photo_count(self) -> int:
        return len(self.photos)
