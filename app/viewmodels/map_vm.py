"""ViewModel owning the photo set, zoom level and group selection."""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from core.models import Photo, PhotoGroup
from core.services.clustering_service import ClusteringService


class MapVM:
    """Map view-model.

    The only mutation entry points are `set_photos` (or `apply_batch`),
    `set_zoom` and `set_selected_group_id`. Groups are derived data and are
    recomputed from scratch whenever the photo set or the zoom changed.

    Each drop replaces the photo set; batches are never merged.
    """

    def __init__(self, clusterer: ClusteringService | None = None, zoom: float = 0.0) -> None:
        """Create a MapVM.

        Args:
            clusterer: Clustering service (defaults to `ClusteringService`).
            zoom: Initial map zoom level.
        """
        self._clusterer = clusterer or ClusteringService()
        self._photos: list[Photo] = []
        self._zoom = float(zoom)
        self._selected_group_id: int | None = None
        self._overlay_visible = True
        self._latest_batch = 0
        self._groups: list[PhotoGroup] | None = None

    # Batches
    def begin_batch(self) -> int:
        """Register a new ingestion request and return its sequence number."""
        self._latest_batch += 1
        return self._latest_batch

    def apply_batch(self, batch_id: int, photos: Iterable[Photo]) -> bool:
        """Apply the result of batch `batch_id` unless a newer batch was requested."""
        if batch_id != self._latest_batch:
            logger.info("Discarding stale batch {} (latest is {})", batch_id, self._latest_batch)
            return False
        self.set_photos(photos)
        return True

    @property
    def latest_batch(self) -> int:
        return self._latest_batch

    # Mutations
    def set_photos(self, photos: Iterable[Photo]) -> None:
        """Replace the photo set and clear the selection."""
        self._photos = list(photos)
        self._selected_group_id = None
        self._overlay_visible = False
        self._groups = None
        logger.info("Photo set replaced: {} photos", len(self._photos))

    def set_zoom(self, zoom: float) -> None:
        zoom = float(zoom)
        if zoom == self._zoom:
            return
        self._zoom = zoom
        self._groups = None

    def set_selected_group_id(self, group_id: int | None) -> None:
        """Select the group with `group_id`, or clear the selection with None."""
        if group_id is not None and not 0 <= group_id < len(self.groups):
            logger.warning("Ignoring selection of unknown group {}", group_id)
            group_id = None
        self._selected_group_id = group_id

    # Derived state
    @property
    def photos(self) -> list[Photo]:
        return list(self._photos)

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def threshold(self) -> float:
        """Clustering radius in degrees for the current zoom."""
        return self._clusterer.threshold(self._zoom)

    @property
    def groups(self) -> list[PhotoGroup]:
        """Current clustering, recomputed only after photos or zoom changed."""
        if self._groups is None:
            self._groups = self._clusterer.groups_for_zoom(self._photos, self._zoom)
            if self._selected_group_id is not None and self._selected_group_id >= len(self._groups):
                logger.debug("Selected group {} no longer exists", self._selected_group_id)
                self._selected_group_id = None
        return self._groups

    @property
    def selected_group_id(self) -> int | None:
        """Selected group id, validated against the current clustering."""
        group = self.selected_group
        return group.id if group is not None else None

    @property
    def selected_group(self) -> PhotoGroup | None:
        groups = self.groups
        if self._selected_group_id is None:
            return None
        return groups[self._selected_group_id]

    @property
    def overlay_visible(self) -> bool:
        """True until the first batch has been applied."""
        return self._overlay_visible

    @property
    def photo_count(self) -> int:
        return len(self._photos)

    @property
    def group_count(self) -> int:
        return len(self.groups)
