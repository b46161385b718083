# packetlabel/domain/services/i_highlight_service.py
from abc import ABC, abstractmethod
from typing import Optional

from packetlabel.domain.models.byte_node import NodeStyle
from packetlabel.domain.models.region_model import ByteRegion


class IHighlightService(ABC):
    """Keeps the painted byte cells of each region in step with its flags."""

    @abstractmethod
    def attach(self, region: ByteRegion) -> None:
        """Hook the region's setters and destroy() up to this service."""
        pass

    @abstractmethod
    def style_for(self, region: ByteRegion, parity: str) -> NodeStyle:
        """The style a cell of the given parity should have for region's flags."""
        pass

    @abstractmethod
    def apply_highlight(self, region: ByteRegion) -> int:
        """
        Repaint the region's cells and sync its listeners with its flags.

        Returns:
            Number of cells painted
        """
        pass

    @abstractmethod
    def register_events(self, region: ByteRegion) -> int:
        """
        Bind a click listener to each of the region's cells.

        Idempotent. Hidden regions get none.

        Returns:
            Number of cells bound
        """
        pass

    @abstractmethod
    def remove_events(self, region: ByteRegion) -> int:
        """
        Detach every listener registered for the region.

        Returns:
            Number of listeners removed
        """
        pass

    @abstractmethod
    def handle_span_click(self, region: ByteRegion) -> bool:
        """
        Make region the current region of its packet.

        Returns:
            False if the click was ignored (hidden or destroyed region)
        """
        pass

    @abstractmethod
    def listener_count(self, region_id: Optional[str] = None) -> int:
        """Listeners in the registration table, for one region or all."""
        pass
