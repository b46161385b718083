# packetlabel/infrastructure/annotation/highlight_service.py
"""
Highlight reconciliation for byte regions.

Every flag change on a region ends up in apply_highlight(), which resolves the
region's cells afresh, paints them from the region's current flags and brings
the click listeners in line. Paint written by an earlier pass is never
trusted; the grid may have been re-rendered since. When a region is reset or
destroyed, the visible regions that overlap it are painted again so shared
cells keep their paint.

| hidden | highlighted | selected | cells                                     | listeners |
|--------|-------------|----------|-------------------------------------------|-----------|
| yes    | -           | -        | parity background, default cursor         | removed   |
| no     | no          | -        | parity background, default cursor         | removed   |
| no     | yes         | no       | label color at inactive opacity, pointer  | attached  |
| no     | yes         | yes      | label color, bold, pointer                | attached  |
"""
from typing import Dict, Hashable, List, Optional, Tuple

from packetlabel.domain.common.errors import StaleNodeReferenceError
from packetlabel.domain.models.byte_node import ByteNode, HighlightPalette, NodeStyle
from packetlabel.domain.models.region_model import ByteRegion
from packetlabel.domain.services.i_annotation_store import IAnnotationStore
from packetlabel.domain.services.i_highlight_service import IHighlightService
from packetlabel.domain.services.i_logger_service import ILoggerService
from packetlabel.domain.services.i_view_binding import ClickCallback, IViewBinding
from packetlabel.domain.services import offset_mapper


def blend_color(color: str, opacity: float) -> str:
    """
    Fade a #rrggbb color toward transparency.

    Colors that are not #rrggbb, and full opacity, are returned unchanged.
    """
    if opacity >= 1.0 or len(color) != 7 or not color.startswith("#"):
        return color
    try:
        red, green, blue = (int(color[i:i + 2], 16) for i in (1, 3, 5))
    except ValueError:
        return color
    return f"rgba({red}, {green}, {blue}, {max(opacity, 0.0):.2f})"


class HighlightService(IHighlightService):
    """
    Paints regions into the byte grid and owns their click listeners.

    Listeners live in a table keyed by (region_id, node_key), so registering a
    region twice replaces its listeners instead of stacking them.
    """

    def __init__(self, view_binding: IViewBinding, store: IAnnotationStore,
                 palette: HighlightPalette, logger: ILoggerService):
        self.view_binding = view_binding
        self.store = store
        self.palette = palette
        self.logger = logger
        self._listeners: Dict[Tuple[str, Hashable], ClickCallback] = {}

    def attach(self, region: ByteRegion) -> None:
        region.attach_hooks(self.apply_highlight, self._teardown)

    def style_for(self, region: ByteRegion, parity: str) -> NodeStyle:
        if region.hidden or not region.highlighted:
            return self._color_style(self.palette.canvas_background, parity, 1.0, "default", False)

        color = region.color or self.palette.default_highlight
        opacity = 1.0 if region.selected else self.palette.inactive_opacity
        return self._color_style(color, parity, opacity, "pointer", region.selected)

    def _color_style(self, color: str, parity: str, opacity: float,
                     cursor: str, bold: bool) -> NodeStyle:
        # The canvas color means "unlabeled": keep the zebra striping.
        if color.lower() == self.palette.canvas_background.lower():
            base = self.palette.parity_style(parity)
            return NodeStyle(background=base.background, foreground=base.foreground,
                             cursor=cursor, bold=bold)
        return NodeStyle(
            background=blend_color(color, opacity),
            foreground=self.palette.highlight_foreground,
            cursor=cursor,
            bold=bold,
        )

    def _resolve(self, region: ByteRegion) -> List[ByteNode]:
        window = self.view_binding.rendered_window()
        local = offset_mapper.local_range(region, window)
        return offset_mapper.resolve_nodes(self.view_binding, local.local_start, local.local_end)

    def apply_highlight(self, region: ByteRegion) -> int:
        if region.is_destroyed:
            return 0

        nodes = self._resolve(region)
        painted = self._paint(region, nodes)

        if region.hidden or not region.highlighted:
            self.remove_events(region)
            self._repaint_overlapping(region)
        else:
            self._bind(region, nodes)

        self.logger.debug("Applied highlight", region_id=region.id, nodes=painted,
                          hidden=region.hidden, selected=region.selected)
        return painted

    def _repaint_overlapping(self, region: ByteRegion) -> None:
        """Repaint the visible regions that share cells with a region just reset."""
        for other in self.store.regions():
            if other.id == region.id or other.is_destroyed or other.hidden or not other.highlighted:
                continue
            if other.start < region.end and region.start < other.end:
                self.apply_highlight(other)

    def _paint(self, region: ByteRegion, nodes: List[ByteNode]) -> int:
        painted = 0
        for node in nodes:
            try:
                self.view_binding.set_node_style(node.key, self.style_for(region, node.parity))
                painted += 1
            except StaleNodeReferenceError as e:
                self.logger.debug(f"Skipped stale node: {e}", region_id=region.id)
        return painted

    def register_events(self, region: ByteRegion) -> int:
        if region.hidden or region.is_destroyed:
            self.remove_events(region)
            return 0
        return self._bind(region, self._resolve(region))

    def _bind(self, region: ByteRegion, nodes: List[ByteNode]) -> int:
        current_keys = {node.key for node in nodes}

        # Listeners left on cells the region no longer covers
        for table_key in [k for k in self._listeners if k[0] == region.id and k[1] not in current_keys]:
            self._unbind(table_key)

        bound = 0
        for node in nodes:
            table_key = (region.id, node.key)
            if table_key in self._listeners:
                self._unbind(table_key)
            callback = self._click_callback(region.id)
            try:
                self.view_binding.add_click_listener(node.key, callback)
            except StaleNodeReferenceError as e:
                self.logger.debug(f"Skipped stale node: {e}", region_id=region.id)
                continue
            self._listeners[table_key] = callback
            bound += 1
        return bound

    def remove_events(self, region: ByteRegion) -> int:
        table_keys = [k for k in self._listeners if k[0] == region.id]
        for table_key in table_keys:
            self._unbind(table_key)
        return len(table_keys)

    def _unbind(self, table_key: Tuple[str, Hashable]) -> None:
        callback = self._listeners.pop(table_key)
        try:
            self.view_binding.remove_click_listener(table_key[1], callback)
        except StaleNodeReferenceError:
            # The cell is gone and took its listener with it.
            pass

    def _click_callback(self, region_id: str) -> ClickCallback:
        def on_click(node_key: Hashable) -> None:
            region = self.store.get_region(region_id)
            if region is None:
                self.logger.debug("Click on a deleted region ignored", region_id=region_id)
                return
            self.handle_span_click(region)
        return on_click

    def handle_span_click(self, region: ByteRegion) -> bool:
        if region.hidden or region.is_destroyed:
            return False

        packet = self.store.packet()
        current_id = packet.current_region_id
        if current_id is not None and current_id != region.id:
            previous = self.store.get_region(current_id)
            if previous is not None:
                self.store.toggle_region_selection(previous, False)
        self.store.toggle_region_selection(region, True)
        self.logger.debug("Region selected", region_id=region.id, previous=current_id)
        return True

    def listener_count(self, region_id: Optional[str] = None) -> int:
        if region_id is None:
            return len(self._listeners)
        return sum(1 for key in self._listeners if key[0] == region_id)

    def _teardown(self, region: ByteRegion) -> None:
        removed = self.remove_events(region)
        # Paint the cells back to the unlabeled palette.
        for node in self._resolve(region):
            try:
                self.view_binding.set_node_style(node.key, self.palette.parity_style(node.parity))
            except StaleNodeReferenceError:
                continue
        self._repaint_overlapping(region)
        self.logger.debug("Region destroyed", region_id=region.id, listeners_removed=removed)
