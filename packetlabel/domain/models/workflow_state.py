# packetlabel/domain/models/workflow_state.py
"""
Snapshot of the two-step labeling workflow, read by the presentation layer.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from packetlabel.domain.models.region_model import WindowOffset


class WorkflowStep(Enum):
    """Steps of the labeling workflow."""
    SELECTING_AREA = "selecting_area"
    LABELING = "labeling"


@dataclass
class WorkflowState:
    """
    Attributes:
        step: Current workflow step
        alert: True after a rejected area confirmation, until the next success
        area_id: Id of the active area, if any
        window_offset: Absolute bounds of the active area, if any
        session_region_ids: Regions created since the area was confirmed
    """
    step: WorkflowStep = WorkflowStep.SELECTING_AREA
    alert: bool = False
    area_id: Optional[str] = None
    window_offset: Optional[WindowOffset] = None
    session_region_ids: List[str] = field(default_factory=list)

    @property
    def is_labeling(self) -> bool:
        return self.step == WorkflowStep.LABELING
