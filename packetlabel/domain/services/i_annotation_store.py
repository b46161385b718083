# packetlabel/domain/services/i_annotation_store.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from packetlabel.domain.common.result import Result
from packetlabel.domain.models.labeling_control import LabelingControl
from packetlabel.domain.models.packet_model import PacketDocument
from packetlabel.domain.models.region_model import ByteRegion, RangeDescriptor


class IAnnotationStore(ABC):
    """Owner of the regions of an annotation and of its labeling controls."""

    @abstractmethod
    def packet(self) -> PacketDocument:
        """The packet being annotated."""
        pass

    @abstractmethod
    def controls(self) -> List[LabelingControl]:
        """All labeling controls, active or not."""
        pass

    @abstractmethod
    def select_labels(self, control_name: str, labels: List[str]) -> Result[bool]:
        """Switch the given labels on for a control; an empty list switches all off."""
        pass

    @abstractmethod
    def get_available_states(self) -> List[LabelingControl]:
        """Controls that can accept a new region right now; empty means none."""
        pass

    @abstractmethod
    def create_result(self, area: RangeDescriptor, result_value: Dict[str, Any],
                      control: LabelingControl, packet: PacketDocument) -> ByteRegion:
        """Persist a new region and return its live handle."""
        pass

    @abstractmethod
    def add_restored_region(self, region: ByteRegion) -> ByteRegion:
        """Adopt a region rebuilt from a persisted record."""
        pass

    @abstractmethod
    def toggle_region_selection(self, region: ByteRegion, selected: bool) -> None:
        """Make region the packet's current region, or release it."""
        pass

    @abstractmethod
    def delete_region(self, region: ByteRegion) -> bool:
        """Destroy and forget a region. Returns False if it was unknown."""
        pass

    @abstractmethod
    def get_region(self, region_id: str) -> Optional[ByteRegion]:
        pass

    @abstractmethod
    def regions(self) -> List[ByteRegion]:
        """All regions in creation order."""
        pass

    @abstractmethod
    def export_results(self) -> List[Dict[str, Any]]:
        """Serialize every region as an exported result record."""
        pass

    @abstractmethod
    def write_results(self, path: str) -> Result[int]:
        """Write the exported results to a JSON file; returns the record count."""
        pass
