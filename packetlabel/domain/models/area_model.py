# packetlabel/domain/models/area_model.py
import uuid
from dataclasses import dataclass
from typing import Optional

from packetlabel.domain.models.region_model import WindowOffset


@dataclass
class Area:
    """The sub-window of the packet currently being labeled."""
    area_id: Optional[str]  # None only for regions saved before areas existed
    window_offset: WindowOffset
    content: str = ""  # base64 snapshot of the window bytes

    @staticmethod
    def new_id() -> str:
        return f"area-{uuid.uuid4().hex[:8]}"
