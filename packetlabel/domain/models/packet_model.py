# packetlabel/domain/models/packet_model.py
from dataclasses import dataclass
from typing import Optional

from packetlabel.domain.models.region_model import WindowOffset


@dataclass
class PacketDocument:
    """
    The binary blob being labeled, and the container of its regions.

    current_region_id is the one region emphasized by a click; it is changed
    only through the annotation store's toggle_region_selection.
    """
    name: str
    content: bytes
    current_region_id: Optional[str] = None

    @property
    def length(self) -> int:
        return len(self.content)

    @property
    def full_window(self) -> WindowOffset:
        return WindowOffset.full(len(self.content))
