# packetlabel/domain/models/byte_node.py
"""
View-side value types shared by the highlight service and view bindings.

A ByteNode is only a reference to an element owned by the rendering
collaborator; it is re-queried for every paint and never cached.
"""
from dataclasses import dataclass
from typing import Hashable, Optional


@dataclass(frozen=True)
class ByteNode:
    """One rendered byte cell."""
    key: Hashable
    offset: int  # local offset within the rendered window
    invalid: bool = False
    parity: str = "even"  # zebra row class, "even" or "odd"


@dataclass(frozen=True)
class NodeStyle:
    """Presentation applied to a byte cell."""
    background: str
    foreground: str
    cursor: str = "default"
    bold: bool = False


@dataclass(frozen=True)
class HighlightPalette:
    """Colors used by the highlight service."""
    canvas_background: str = "#ffffff"
    even_background: str = "#f4f6f8"
    odd_background: str = "#ffffff"
    even_foreground: str = "#1f2933"
    odd_foreground: str = "#1f2933"
    highlight_foreground: str = "#ffffff"
    default_highlight: str = "#3a7ca5"
    inactive_opacity: float = 0.4

    def parity_style(self, parity: str) -> NodeStyle:
        if parity == "odd":
            return NodeStyle(background=self.odd_background, foreground=self.odd_foreground)
        return NodeStyle(background=self.even_background, foreground=self.even_foreground)


@dataclass(frozen=True)
class SelectionMarkers:
    """
    Local offsets of the current drag selection.

    start is the first selected byte, end is one past the last; either is
    None when the view has no such marker.
    """
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def is_valid(self) -> bool:
        return self.is_complete and self.start < self.end
