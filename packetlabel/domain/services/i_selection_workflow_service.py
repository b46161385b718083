# packetlabel/domain/services/i_selection_workflow_service.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from packetlabel.domain.common.result import Result
from packetlabel.domain.models.area_model import Area
from packetlabel.domain.models.region_model import ByteRegion
from packetlabel.domain.models.workflow_state import WorkflowState


class ISelectionWorkflowService(ABC):
    """Two-step flow: pick a sub-window of the packet, then label inside it."""

    @property
    @abstractmethod
    def state(self) -> WorkflowState:
        """Current step, alert flag and active area."""
        pass

    @property
    @abstractmethod
    def area(self) -> Optional[Area]:
        """The active area, None while selecting."""
        pass

    @abstractmethod
    def mount(self, records: Optional[List[Dict[str, Any]]] = None) -> Result[WorkflowState]:
        """Render the initial view and restore saved regions, if any."""
        pass

    @abstractmethod
    def confirm_area(self) -> Result[Area]:
        """
        Turn the current drag selection into the active area.

        Fails with a ValidationError, and sets the alert flag, when the
        selection markers are missing or empty.
        """
        pass

    @abstractmethod
    def handle_mouse_up(self) -> Result[Optional[ByteRegion]]:
        """Label the current drag selection inside the active area."""
        pass

    @abstractmethod
    def back(self) -> Result[bool]:
        """
        Abandon the active area after confirmation.

        Returns:
            Result holding True if the workflow went back, False if the user
            declined
        """
        pass

    @abstractmethod
    def restore(self, records: List[Dict[str, Any]]) -> Result[WorkflowState]:
        """Regroup saved regions into their area and resume labeling."""
        pass
