# packetlabel/infrastructure/ui/qt_byte_grid_view.py
"""
Qt byte grid: renders a window of the packet as hex cells and reports the
drag selection.

Cell keys embed a render generation, so a key handed out before a re-render
raises StaleNodeReferenceError afterwards instead of addressing a new cell.
"""
from typing import Dict, Hashable, List, Optional

from PySide6.QtCore import Qt, QPoint, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QGridLayout, QLabel, QWidget

from packetlabel.domain.common.errors import StaleNodeReferenceError
from packetlabel.domain.models.byte_node import ByteNode, HighlightPalette, NodeStyle, SelectionMarkers
from packetlabel.domain.models.region_model import WindowOffset
from packetlabel.domain.services.i_logger_service import ILoggerService
from packetlabel.domain.services.i_view_binding import ClickCallback, IViewBinding

CELL_WIDTH = 26


def style_sheet(style: NodeStyle) -> str:
    weight = "bold" if style.bold else "normal"
    return f"background-color: {style.background}; color: {style.foreground}; font-weight: {weight};"


class ByteGridWidget(QWidget):
    """
    Grid of hex cells with an offset gutter.

    A press and release on the same cell that has click listeners is a click,
    unless clicks are disabled or Shift is held; anything else ends a drag
    selection and emits selection_finished.
    """
    selection_changed = Signal(int, int)  # local start, local end
    selection_finished = Signal()
    region_clicked = Signal(object)  # cell key

    def __init__(self, palette: HighlightPalette, bytes_per_row: int = 16, parent=None):
        super().__init__(parent)
        self.grid_palette = palette
        self.bytes_per_row = bytes_per_row

        font = QFont("Monospace")
        font.setStyleHint(QFont.TypeWriter)
        self.setFont(font)
        self.setMouseTracking(True)

        self._layout = QGridLayout(self)
        self._layout.setSpacing(1)
        self._layout.setContentsMargins(4, 4, 4, 4)

        self._generation = 0
        self._window: Optional[WindowOffset] = None
        self._cells: Dict[str, QLabel] = {}
        self._nodes: Dict[str, ByteNode] = {}
        self._cursors: Dict[str, str] = {}
        self._listeners: Dict[str, List[ClickCallback]] = {}
        self._gutter: List[QLabel] = []

        self._anchor: Optional[str] = None
        self._current: Optional[str] = None
        self._dragging = False
        self._selection = SelectionMarkers()
        self.clicks_enabled = True

    @property
    def window(self) -> Optional[WindowOffset]:
        return self._window

    @property
    def selection(self) -> SelectionMarkers:
        return self._selection

    def render_bytes(self, data: bytes, window: WindowOffset) -> None:
        """Replace every cell with cells for data, which starts at window.start."""
        self._clear()
        self._generation += 1
        self._window = window

        rows = max(1, -(-len(data) // self.bytes_per_row))
        for row in range(rows):
            gutter = QLabel(f"{window.start + row * self.bytes_per_row:08X}", self)
            gutter.setAttribute(Qt.WA_TransparentForMouseEvents)
            gutter.setStyleSheet("color: #7b8794; padding-right: 6px;")
            self._layout.addWidget(gutter, row, 0)
            self._gutter.append(gutter)

            parity = "odd" if row % 2 else "even"
            for column in range(self.bytes_per_row):
                offset = row * self.bytes_per_row + column
                invalid = offset >= len(data)
                key = f"{self._generation}:{offset}"

                cell = QLabel("" if invalid else f"{data[offset]:02X}", self)
                cell.setAlignment(Qt.AlignCenter)
                cell.setFixedWidth(CELL_WIDTH)
                cell.setAttribute(Qt.WA_TransparentForMouseEvents)
                cell.setProperty("data-offset", offset)
                cell.setProperty("invalid", invalid)
                cell.setStyleSheet(style_sheet(self.grid_palette.parity_style(parity)))
                self._layout.addWidget(cell, row, column + 1)

                self._cells[key] = cell
                self._nodes[key] = ByteNode(key=key, offset=offset, invalid=invalid, parity=parity)

    def _clear(self) -> None:
        for widget in list(self._cells.values()) + self._gutter:
            self._layout.removeWidget(widget)
            widget.deleteLater()
        self._cells.clear()
        self._nodes.clear()
        self._cursors.clear()
        self._listeners.clear()
        self._gutter = []
        self._anchor = None
        self._current = None
        self._dragging = False
        self._selection = SelectionMarkers()

    def nodes(self) -> List[ByteNode]:
        return list(self._nodes.values())

    def _cell(self, key: Hashable) -> QLabel:
        cell = self._cells.get(key)
        if cell is None:
            raise StaleNodeReferenceError(key)
        return cell

    def apply_style(self, key: Hashable, style: NodeStyle) -> None:
        self._cell(key).setStyleSheet(style_sheet(style))
        self._cursors[key] = style.cursor

    def add_listener(self, key: Hashable, callback: ClickCallback) -> None:
        self._cell(key)
        callbacks = self._listeners.setdefault(key, [])
        if callback not in callbacks:
            callbacks.append(callback)

    def remove_listener(self, key: Hashable, callback: ClickCallback) -> None:
        self._cell(key)
        callbacks = self._listeners.get(key, [])
        if callback in callbacks:
            callbacks.remove(callback)
        if not callbacks:
            self._listeners.pop(key, None)

    def listener_count(self, key: Optional[Hashable] = None) -> int:
        if key is not None:
            return len(self._listeners.get(key, []))
        return sum(len(callbacks) for callbacks in self._listeners.values())

    def click(self, key: Hashable) -> None:
        """Dispatch a click on a cell to its listeners."""
        callbacks = list(self._listeners.get(key, []))
        for callback in callbacks:
            callback(key)
        if callbacks:
            self.region_clicked.emit(key)

    def is_click(self, key: Optional[str], modifiers) -> bool:
        """Whether a press and release on key dispatches a click instead of selecting it."""
        if not self.clicks_enabled or modifiers & Qt.ShiftModifier:
            return False
        return key is not None and key == self._anchor and bool(self._listeners.get(key))

    def _key_at(self, pos: QPoint) -> Optional[str]:
        for key, cell in self._cells.items():
            if not self._nodes[key].invalid and cell.geometry().contains(pos):
                return key
        return None

    def _update_selection(self) -> None:
        if self._anchor is None or self._current is None:
            self._selection = SelectionMarkers()
            return
        first = self._nodes[self._anchor].offset
        last = self._nodes[self._current].offset
        start, end = min(first, last), max(first, last) + 1
        self._selection = SelectionMarkers(start, end)
        self.selection_changed.emit(start, end)

    def mousePressEvent(self, event):
        """Start a drag selection on the cell under the cursor."""
        if event.button() == Qt.LeftButton:
            key = self._key_at(event.position().toPoint())
            self._anchor = key
            self._current = key
            self._dragging = key is not None
            self._update_selection()

    def mouseMoveEvent(self, event):
        """Extend the selection, or update the cursor when not dragging."""
        key = self._key_at(event.position().toPoint())
        if self._dragging:
            if key is not None and key != self._current:
                self._current = key
                self._update_selection()
        else:
            cursor = self._cursors.get(key, "default") if key is not None else "default"
            self.setCursor(Qt.PointingHandCursor if cursor == "pointer" else Qt.IBeamCursor)

    def mouseReleaseEvent(self, event):
        """Finish the selection, or dispatch a click on a single listening cell."""
        if event.button() != Qt.LeftButton or not self._dragging:
            return
        self._dragging = False
        key = self._key_at(event.position().toPoint()) or self._current

        if self.is_click(key, event.modifiers()):
            self._selection = SelectionMarkers()
            self.click(key)
            return
        self.selection_finished.emit()


class QtByteGridView(IViewBinding):
    """View binding backed by a ByteGridWidget."""

    def __init__(self, palette: HighlightPalette, logger: ILoggerService,
                 bytes_per_row: int = 16, parent=None):
        self.logger = logger
        self.widget = ByteGridWidget(palette, bytes_per_row, parent)

    def query_byte_nodes(self) -> List[ByteNode]:
        return self.widget.nodes()

    def selection_boundaries(self) -> SelectionMarkers:
        return self.widget.selection

    def rendered_window(self) -> Optional[WindowOffset]:
        return self.widget.window

    def render_window(self, content: bytes, window: WindowOffset) -> None:
        self.widget.render_bytes(content[window.start:window.end], window)
        self.logger.debug("Rendered byte grid", start=window.start, end=window.end)

    def set_node_style(self, node_key: Hashable, style: NodeStyle) -> None:
        self.widget.apply_style(node_key, style)

    def add_click_listener(self, node_key: Hashable, callback: ClickCallback) -> None:
        self.widget.add_listener(node_key, callback)

    def remove_click_listener(self, node_key: Hashable, callback: ClickCallback) -> None:
        self.widget.remove_listener(node_key, callback)
