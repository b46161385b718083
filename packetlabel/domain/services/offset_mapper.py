# packetlabel/domain/services/offset_mapper.py
"""
Conversions between absolute packet offsets and the local offsets of the
rendered window, plus lookup of the byte cells a range covers.

Everything here is side-effect free.
"""
import base64
from dataclasses import dataclass
from typing import List, Optional, Tuple

from packetlabel.domain.models.byte_node import ByteNode
from packetlabel.domain.models.region_model import ByteRegion, WindowOffset
from packetlabel.domain.services.i_view_binding import IViewBinding


@dataclass(frozen=True)
class LocalRange:
    local_start: int
    local_end: int


def effective_window(region: ByteRegion, window: Optional[WindowOffset] = None,
                     content_length: Optional[int] = None) -> WindowOffset:
    """
    Pick the window a region is displayed in.

    An explicit window wins, then the region's own window offset, then the
    full content (starting at 0).
    """
    if window is not None:
        return window
    if region.window_offset is not None:
        return region.window_offset
    return WindowOffset(0, content_length if content_length is not None else region.end)


def local_range(region: ByteRegion, window: Optional[WindowOffset] = None) -> LocalRange:
    base = effective_window(region, window)
    return LocalRange(region.start - base.start, region.end - base.start)


def absolute_range(local_start: int, local_end: int, window: WindowOffset) -> Tuple[int, int]:
    return window.start + local_start, window.start + local_end


def resolve_nodes(binding: IViewBinding, local_start: int, local_end: int) -> List[ByteNode]:
    """
    Cells currently rendered for the local range [local_start, local_end).

    Invalid cells (padding past the loaded bytes) are skipped. An empty list
    means nothing is mounted for this range.
    """
    nodes = [
        node for node in binding.query_byte_nodes()
        if not node.invalid and local_start <= node.offset < local_end
    ]
    return sorted(nodes, key=lambda node: node.offset)


def encode_content(data: bytes, start: int, end: int) -> str:
    return base64.b64encode(data[start:end]).decode("ascii")


def decode_content(text: str) -> bytes:
    return base64.b64decode(text, validate=True)
