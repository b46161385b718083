# packetlabel/domain/models/labeling_control.py
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class LabelingControl:
    """
    A set of labels that can be attached to regions of one packet.

    Attributes:
        name: Control name, stored as from_name in exported results
        to_name: Name of the packet the control labels
        label_colors: Label value -> display color
        selected_labels: Labels the user currently has switched on
    """
    name: str
    to_name: str
    label_colors: Dict[str, str] = field(default_factory=dict)
    selected_labels: List[str] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        """A control can label a new region only while a label is selected."""
        return len(self.selected_labels) > 0

    @property
    def color(self) -> Optional[str]:
        for label in self.selected_labels:
            if label in self.label_colors:
                return self.label_colors[label]
        return None

    def select(self, labels: List[str]) -> None:
        unknown = [label for label in labels if label not in self.label_colors]
        if unknown:
            raise ValueError(f"Unknown labels for control {self.name}: {', '.join(unknown)}")
        self.selected_labels = list(labels)
