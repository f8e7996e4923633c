"""Zoom-dependent consolidation of photos into map markers.

Clustering is a single greedy pass: each photo joins the first existing
cluster (in creation order) whose anchor lies within the threshold, using
planar distance on (latitude, longitude). The result depends on input order
and is recomputed from scratch on every call.
"""

from __future__ import annotations

from collections.abc import Iterable
import math

from core.models import Photo, PhotoGroup

DEFAULT_BASE_RADIUS = 6.0


def threshold_for_zoom(zoom: float, base_radius: float = DEFAULT_BASE_RADIUS) -> float:
    """Return the clustering radius in degrees for a map zoom level.

    The radius halves with every zoom step, so zooming in splits clusters
    and zooming out merges them.
    """
    return base_radius / 2**zoom


def consolidate_markers(photos: Iterable[Photo], threshold: float) -> list[PhotoGroup]:
    """Partition `photos` into groups whose members lie near the group anchor.

    Args:
        photos: Photos in processing order.
        threshold: Exclusive distance limit in degrees. Values <= 0 yield one
            group per photo.

    Returns:
        Groups in creation order; each group's `id` is its list position.
    """
    consolidated: list[PhotoGroup] = []

    for photo in photos:
        existing = None
        for cluster in consolidated:
            distance = math.hypot(
                cluster.latitude - photo.latitude, cluster.longitude - photo.longitude
            )
            if distance < threshold:
                existing = cluster
                break

        if existing is not None:
            existing.photos.append(photo)
            # first non-empty thumbnail wins and is never replaced
            if not existing.representative_thumbnail:
                existing.representative_thumbnail = photo.thumbnail
        else:
            consolidated.append(
                PhotoGroup(
                    id=len(consolidated),
                    latitude=photo.latitude,
                    longitude=photo.longitude,
                    representative_thumbnail=photo.thumbnail,
                    photos=[photo],
                )
            )

    return consolidated


class ClusteringService:
    """Binds the clustering engine to a configured base radius."""

    def __init__(self, base_radius: float = DEFAULT_BASE_RADIUS) -> None:
        self._base_radius = float(base_radius)

    @property
    def base_radius(self) -> float:
        return self._base_radius

    def threshold(self, zoom: float) -> float:
        """Clustering radius for `zoom` using the configured base radius."""
        return threshold_for_zoom(zoom, self._base_radius)

    def groups_for_zoom(self, photos: Iterable[Photo], zoom: float) -> list[PhotoGroup]:
        """Cluster `photos` with the threshold derived from `zoom`."""
        return consolidate_markers(photos, self.threshold(zoom))
