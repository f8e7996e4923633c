# tests/test_map_vm.py
# Map view-model: batch sequencing, zoom-driven regrouping, selection lifecycle

from app.viewmodels.map_vm import MapVM
from core.services.clustering_service import ClusteringService


class CountingClusterer(ClusteringService):
    def __init__(self):
        super().__init__()
        self.calls = 0

    def groups_for_zoom(self, photos, zoom):
        self.calls += 1
        return super().groups_for_zoom(photos, zoom)


def _photos(photo_factory):
    # 0.5 degrees apart: merged at zoom 0 (radius 6), split at zoom 4 (radius 0.375)
    return [photo_factory(35.0, 139.0, "a"), photo_factory(35.5, 139.0, "b")]


class TestBatches:
    def test_initial_state(self):
        vm = MapVM()
        assert vm.photos == []
        assert vm.groups == []
        assert vm.selected_group is None
        assert vm.overlay_visible is True

    def test_latest_batch_is_applied(self, photo_factory):
        vm = MapVM()
        batch = vm.begin_batch()
        assert vm.apply_batch(batch, _photos(photo_factory)) is True
        assert vm.photo_count == 2
        assert vm.overlay_visible is False

    def test_stale_batch_is_ignored(self, photo_factory):
        vm = MapVM()
        older = vm.begin_batch()
        newer = vm.begin_batch()
        newest_photos = [photo_factory(1, 1)]

        assert vm.apply_batch(newer, newest_photos) is True
        assert vm.apply_batch(older, _photos(photo_factory)) is False
        assert vm.photos == newest_photos

    def test_stale_batch_ignored_even_if_newer_not_finished(self, photo_factory):
        vm = MapVM()
        older = vm.begin_batch()
        vm.begin_batch()
        assert vm.apply_batch(older, _photos(photo_factory)) is False
        assert vm.photos == []

    def test_new_batch_replaces_previous_set(self, photo_factory):
        vm = MapVM()
        vm.apply_batch(vm.begin_batch(), _photos(photo_factory))
        replacement = [photo_factory(-10, -10)]
        vm.apply_batch(vm.begin_batch(), replacement)
        assert vm.photos == replacement

    def test_set_photos_copies_input(self, photo_factory):
        vm = MapVM()
        photos = _photos(photo_factory)
        vm.set_photos(photos)
        photos.clear()
        assert vm.photo_count == 2


class TestGrouping:
    def test_groups_follow_zoom(self, photo_factory):
        vm = MapVM()
        vm.set_photos(_photos(photo_factory))
        assert vm.group_count == 1
        vm.set_zoom(4)
        assert vm.group_count == 2
        vm.set_zoom(0)
        assert vm.group_count == 1

    def test_threshold_tracks_zoom(self):
        vm = MapVM(ClusteringService(base_radius=8))
        vm.set_zoom(2)
        assert vm.threshold == 2.0

    def test_groups_are_memoized_until_inputs_change(self, photo_factory):
        clusterer = CountingClusterer()
        vm = MapVM(clusterer)
        vm.set_photos(_photos(photo_factory))
        vm.groups
        vm.groups
        assert clusterer.calls == 1
        vm.set_zoom(0)  # unchanged zoom
        vm.groups
        assert clusterer.calls == 1
        vm.set_zoom(3)
        vm.groups
        assert clusterer.calls == 2


class TestSelection:
    def test_select_and_clear(self, photo_factory):
        vm = MapVM()
        vm.set_photos(_photos(photo_factory))
        vm.set_selected_group_id(0)
        assert vm.selected_group_id == 0
        assert vm.selected_group.photos == vm.groups[0].photos
        vm.set_selected_group_id(None)
        assert vm.selected_group is None

    def test_unknown_group_id_is_not_selected(self, photo_factory):
        vm = MapVM()
        vm.set_photos(_photos(photo_factory))
        vm.set_selected_group_id(7)
        assert vm.selected_group_id is None

    def test_new_batch_clears_selection(self, photo_factory):
        vm = MapVM()
        vm.set_photos(_photos(photo_factory))
        vm.set_selected_group_id(0)
        vm.apply_batch(vm.begin_batch(), _photos(photo_factory))
        assert vm.selected_group_id is None

    def test_selection_cleared_when_group_disappears(self, photo_factory):
        vm = MapVM(zoom=4)
        vm.set_photos(_photos(photo_factory))
        vm.set_selected_group_id(1)
        vm.set_zoom(0)
        assert vm.group_count == 1
        assert vm.selected_group_id is None

    def test_selection_kept_when_id_still_exists(self, photo_factory):
        vm = MapVM(zoom=4)
        vm.set_photos(_photos(photo_factory))
        vm.set_selected_group_id(0)
        vm.set_zoom(0)
        assert vm.selected_group_id == 0
        assert vm.selected_group.photo_count == 2
