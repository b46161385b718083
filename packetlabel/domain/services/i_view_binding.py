# packetlabel/domain/services/i_view_binding.py
"""
Contract between the labeling core and the widget that renders byte cells.

The core never keeps widget objects. It asks for the cells on every paint and
refers to them by key afterwards; a key whose cell is gone raises
StaleNodeReferenceError.
"""
from abc import ABC, abstractmethod
from typing import Callable, Hashable, List, Optional

from packetlabel.domain.models.byte_node import ByteNode, NodeStyle, SelectionMarkers
from packetlabel.domain.models.region_model import WindowOffset

ClickCallback = Callable[[Hashable], None]


class IViewBinding(ABC):
    """Rendering collaborator for a byte grid."""

    @abstractmethod
    def query_byte_nodes(self) -> List[ByteNode]:
        """
        Return every byte cell currently rendered.

        Offsets are local to the rendered window. Returns an empty list when
        nothing is mounted.
        """
        pass

    @abstractmethod
    def selection_boundaries(self) -> SelectionMarkers:
        """Return the local start/end markers of the current drag selection."""
        pass

    @abstractmethod
    def render_window(self, content: bytes, window: WindowOffset) -> None:
        """
        Render the bytes of window, re-zeroing local offsets at window.start.

        Args:
            content: The full packet content
            window: Absolute bounds to display
        """
        pass

    @abstractmethod
    def rendered_window(self) -> Optional[WindowOffset]:
        """Absolute bounds of what is rendered now; None before the first render."""
        pass

    @abstractmethod
    def set_node_style(self, node_key: Hashable, style: NodeStyle) -> None:
        """
        Apply a style to one cell.

        Raises:
            StaleNodeReferenceError: If the cell is no longer rendered
        """
        pass

    @abstractmethod
    def add_click_listener(self, node_key: Hashable, callback: ClickCallback) -> None:
        """
        Attach a click callback to one cell.

        Raises:
            StaleNodeReferenceError: If the cell is no longer rendered
        """
        pass

    @abstractmethod
    def remove_click_listener(self, node_key: Hashable, callback: ClickCallback) -> None:
        """
        Detach a click callback from one cell.

        Raises:
            StaleNodeReferenceError: If the cell is no longer rendered
        """
        pass
