# packetlabel/domain/services/i_region_service.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from packetlabel.domain.common.result import Result
from packetlabel.domain.models.area_model import Area
from packetlabel.domain.models.region_model import ByteRegion, RangeDescriptor


class IRegionService(ABC):
    """Registers regions with the annotation store and the highlighter."""

    @abstractmethod
    def add_region(self, descriptor: RangeDescriptor) -> Result[Optional[ByteRegion]]:
        """
        Create, register and highlight a region.

        Returns:
            Result holding the region, or holding None when no labeling
            control is available (nothing is changed in that case)
        """
        pass

    @abstractmethod
    def restore_region(self, record: Dict[str, Any], area: Area) -> Result[ByteRegion]:
        """Register a region rebuilt from a persisted record."""
        pass

    @abstractmethod
    def delete_region(self, region: ByteRegion) -> Result[bool]:
        """Detach, destroy and forget a region."""
        pass

    @abstractmethod
    def regions_for_area(self, area_id: Optional[str]) -> List[ByteRegion]:
        """Regions grouped under area_id."""
        pass

    @abstractmethod
    def refresh_highlights(self) -> int:
        """
        Repaint every region, e.g. after the grid was re-rendered.

        Returns:
            Number of cells painted
        """
        pass
