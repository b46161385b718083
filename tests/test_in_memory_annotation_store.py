"""
Tests for the in-memory annotation store and its result files.
"""

import json

from packetlabel.domain.models.region_model import ByteRegion, RangeDescriptor, WindowOffset
from packetlabel.infrastructure.annotation.in_memory_annotation_store import (
    RESULT_TYPE, InMemoryAnnotationStore
)

from conftest import record

DATA = bytes(range(32))


def _create(store, control, start, end):
    descriptor = RangeDescriptor(start=start, end=end, content="", area_id="a",
                                 window_offset=WindowOffset(0, 32))
    return store.create_result(descriptor, descriptor.to_value(), control, store.packet())


class TestControls:

    def test_inactive_control_not_available(self, store):
        assert store.get_available_states() == []

    def test_selected_label_makes_control_available(self, store, control):
        assert store.select_labels("labels", ["HEADER"]).value is True
        assert store.get_available_states() == [control]
        assert control.color == "#3a7ca5"

    def test_control_for_other_packet_not_available(self, store, control):
        control.to_name = "other"
        store.select_labels("labels", ["HEADER"])
        assert store.get_available_states() == []

    def test_unknown_label_rejected(self, store):
        result = store.select_labels("labels", ["NOPE"])
        assert result.is_failure
        assert "NOPE" in result.error.message

    def test_unknown_control_rejected(self, store):
        assert store.select_labels("missing", []).is_failure


class TestRegions:

    def test_create_result_takes_control_color(self, store, control):
        store.select_labels("labels", ["PAYLOAD"])

        region = _create(store, control, 0, 4)

        assert region.color == "#66a182"
        assert region.labels == ["PAYLOAD"]
        assert store.regions() == [region]

    def test_toggle_selection_tracks_current_region(self, store, control):
        region = _create(store, control, 0, 4)

        store.toggle_region_selection(region, True)
        assert store.packet().current_region_id == region.id
        assert region.selected

        store.toggle_region_selection(region, False)
        assert store.packet().current_region_id is None

    def test_delete_destroys_region(self, store, control):
        region = _create(store, control, 0, 4)

        assert store.delete_region(region) is True
        assert region.is_destroyed
        assert store.get_region(region.id) is None
        assert store.delete_region(region) is False


class TestResults:

    def test_export_results(self, store, control):
        store.select_labels("labels", ["HEADER"])
        region = _create(store, control, 0, 4)

        exported = store.export_results()

        assert exported == [{
            "id": region.id,
            "from_name": "labels",
            "to_name": "packet",
            "type": RESULT_TYPE,
            **region.serialize(),
        }]

    def test_write_and_read_results(self, store, control, tmp_path):
        store.select_labels("labels", ["HEADER"])
        _create(store, control, 0, 4)
        _create(store, control, 4, 8)
        path = str(tmp_path / "results.json")

        assert store.write_results(path).value == 2

        read = InMemoryAnnotationStore.read_results(path)
        assert read.is_success
        assert [saved["value"]["start"] for saved in read.value] == [0, 4]

    def test_read_results_accepts_wrapped_list(self, tmp_path):
        path = tmp_path / "results.json"
        path.write_text(json.dumps({"result": [record(0, 2, DATA)]}))

        assert len(InMemoryAnnotationStore.read_results(str(path)).value) == 1

    def test_read_results_rejects_bad_json(self, tmp_path):
        path = tmp_path / "results.json"
        path.write_text("{not json")

        assert InMemoryAnnotationStore.read_results(str(path)).is_failure

    def test_read_results_rejects_scalar(self, tmp_path):
        path = tmp_path / "results.json"
        path.write_text("42")

        assert InMemoryAnnotationStore.read_results(str(path)).is_failure

    def test_write_results_to_missing_directory(self, store, tmp_path):
        result = store.write_results(str(tmp_path / "missing" / "results.json"))
        assert result.is_failure

    def test_restored_region_gets_label_color(self, store):
        region = ByteRegion.from_record(record(0, 2, DATA, labels=["PAYLOAD"], region_id="r9"))

        store.add_restored_region(region)

        assert region.color == "#66a182"
        assert region.packet_name == "packet"
        assert store.export_results()[0]["from_name"] == "labels"
