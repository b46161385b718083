# packetlabel/infrastructure/annotation/in_memory_annotation_store.py
"""
In-memory annotation store for a single packet.

Holds the regions, the labeling controls and the packet's current region, and
converts regions to and from the exported result format:

    {"id": "...", "from_name": "labels", "to_name": "packet",
     "type": "packetlabels", "value": {"start": 0, "end": 8, "content": "..."}}
"""
import json
from typing import Any, Dict, List, Optional

from packetlabel.domain.common.errors import ResourceError, ValidationError
from packetlabel.domain.common.result import Result
from packetlabel.domain.models.labeling_control import LabelingControl
from packetlabel.domain.models.packet_model import PacketDocument
from packetlabel.domain.models.region_model import ByteRegion, RangeDescriptor, new_region_id
from packetlabel.domain.services.i_annotation_store import IAnnotationStore
from packetlabel.domain.services.i_logger_service import ILoggerService

RESULT_TYPE = "packetlabels"


class InMemoryAnnotationStore(IAnnotationStore):
    """Annotation store kept entirely in memory."""

    def __init__(self, packet: PacketDocument, controls: List[LabelingControl],
                 logger: ILoggerService):
        self._packet = packet
        self._controls = list(controls)
        self.logger = logger
        self._regions: Dict[str, ByteRegion] = {}
        self._region_controls: Dict[str, str] = {}

    def packet(self) -> PacketDocument:
        return self._packet

    def controls(self) -> List[LabelingControl]:
        return list(self._controls)

    def get_control(self, name: str) -> Optional[LabelingControl]:
        for control in self._controls:
            if control.name == name:
                return control
        return None

    def select_labels(self, control_name: str, labels: List[str]) -> Result[bool]:
        """Switch the given labels on for a control (an empty list switches all off)."""
        control = self.get_control(control_name)
        if control is None:
            return Result.fail(ValidationError(
                message=f"Unknown labeling control: {control_name}",
                details={"control": control_name}
            ))
        try:
            control.select(labels)
        except ValueError as e:
            return Result.fail(ValidationError(message=str(e), details={"control": control_name}))
        return Result.ok(True)

    def get_available_states(self) -> List[LabelingControl]:
        return [control for control in self._controls
                if control.is_active and control.to_name == self._packet.name]

    def create_result(self, area: RangeDescriptor, result_value: Dict[str, Any],
                      control: LabelingControl, packet: PacketDocument) -> ByteRegion:
        region = ByteRegion(
            id=new_region_id(),
            start=area.start,
            end=area.end,
            content=area.content,
            area_id=area.area_id,
            window_offset=area.window_offset,
            labels=list(result_value.get("labels", control.selected_labels)),
            packet_name=packet.name,
            color=control.color,
        )
        self._regions[region.id] = region
        self._region_controls[region.id] = control.name
        return region

    def add_restored_region(self, region: ByteRegion) -> ByteRegion:
        """
        Adopt a region rebuilt from a saved result.

        Raises:
            ValueError: If a region with the same id is already stored
        """
        if region.id in self._regions:
            raise ValueError(f"Duplicate region id: {region.id}")

        control = self._control_for_labels(region.labels)
        if region.color is None and control is not None:
            region.color = next(
                (control.label_colors[label] for label in region.labels if label in control.label_colors),
                None,
            )
        region.packet_name = self._packet.name
        self._regions[region.id] = region
        if control is not None:
            self._region_controls[region.id] = control.name
        return region

    def _control_for_labels(self, labels: List[str]) -> Optional[LabelingControl]:
        for control in self._controls:
            if any(label in control.label_colors for label in labels):
                return control
        return self._controls[0] if self._controls else None

    def toggle_region_selection(self, region: ByteRegion, selected: bool) -> None:
        if selected:
            self._packet.current_region_id = region.id
        elif self._packet.current_region_id == region.id:
            self._packet.current_region_id = None
        region.set_selected(selected)

    def delete_region(self, region: ByteRegion) -> bool:
        if region.id not in self._regions:
            return False
        if self._packet.current_region_id == region.id:
            self._packet.current_region_id = None
        region.destroy()
        del self._regions[region.id]
        self._region_controls.pop(region.id, None)
        self.logger.info("Region deleted", region_id=region.id)
        return True

    def get_region(self, region_id: str) -> Optional[ByteRegion]:
        return self._regions.get(region_id)

    def regions(self) -> List[ByteRegion]:
        return list(self._regions.values())

    def export_results(self) -> List[Dict[str, Any]]:
        results = []
        for region in self._regions.values():
            record = {
                "id": region.id,
                "from_name": self._region_controls.get(region.id, ""),
                "to_name": self._packet.name,
                "type": RESULT_TYPE,
            }
            record.update(region.serialize())
            results.append(record)
        return results

    def write_results(self, path: str) -> Result[int]:
        """Write the exported results to a JSON file."""
        results = self.export_results()
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(results, f, indent=2)
        except OSError as e:
            error = ResourceError(
                message=f"Failed to write results: {e}",
                details={"path": path},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)
        self.logger.info(f"Wrote {len(results)} results", path=path)
        return Result.ok(len(results))

    @staticmethod
    def read_results(path: str) -> Result[List[Dict[str, Any]]]:
        """
        Read saved results from a JSON file.

        Accepts a list of records or an object with a "result" list.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            return Result.fail(ResourceError(
                message=f"Failed to read results: {e}",
                details={"path": path},
                inner_error=e
            ))
        if isinstance(data, dict):
            data = data.get("result", [])
        if not isinstance(data, list):
            return Result.fail(ValidationError(
                message="Results file must hold a list of records",
                details={"path": path}
            ))
        return Result.ok(data)
