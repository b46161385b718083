"""
Shared test fixtures and test doubles.

FakeViewBinding stands in for the Qt byte grid: it renders a window as a flat
list of ByteNode objects (eight per row, padded with invalid cells), records
the styles and click listeners applied to them, and can mark keys as stale to
simulate a re-render racing a paint.

Qt widget tests run on the offscreen platform so they need no display.
"""

import base64
import os
from typing import Any, Dict, Hashable, List, Optional, Set

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from packetlabel.domain.common.errors import StaleNodeReferenceError
from packetlabel.domain.common.result import Result
from packetlabel.domain.models.byte_node import ByteNode, HighlightPalette, NodeStyle, SelectionMarkers
from packetlabel.domain.models.labeling_control import LabelingControl
from packetlabel.domain.models.packet_model import PacketDocument
from packetlabel.domain.models.region_model import WindowOffset
from packetlabel.domain.services.i_logger_service import ILoggerService
from packetlabel.domain.services.i_ui_service import IUIService
from packetlabel.domain.services.i_view_binding import ClickCallback, IViewBinding
from packetlabel.infrastructure.annotation.highlight_service import HighlightService
from packetlabel.infrastructure.annotation.in_memory_annotation_store import InMemoryAnnotationStore
from packetlabel.infrastructure.annotation.region_service import RegionService
from packetlabel.infrastructure.annotation.selection_workflow_service import SelectionWorkflowService

ROW_WIDTH = 8

LABEL_COLORS = {
    "HEADER": "#3a7ca5",
    "PAYLOAD": "#66a182",
}


class RecordingLogger(ILoggerService):
    """Logger that keeps every record for assertions."""

    def __init__(self):
        self.records: List[tuple] = []

    def debug(self, message: str, **kwargs) -> None:
        self.records.append(("DEBUG", message, kwargs))

    def info(self, message: str, **kwargs) -> None:
        self.records.append(("INFO", message, kwargs))

    def warning(self, message: str, **kwargs) -> None:
        self.records.append(("WARNING", message, kwargs))

    def error(self, message: str, **kwargs) -> None:
        self.records.append(("ERROR", message, kwargs))

    def critical(self, message: str, **kwargs) -> None:
        self.records.append(("CRITICAL", message, kwargs))

    def set_level(self, level: int) -> None:
        pass

    def messages(self, level: str) -> List[str]:
        return [message for record_level, message, _ in self.records if record_level == level]


class FakeViewBinding(IViewBinding):
    """In-memory byte grid."""

    def __init__(self):
        self.generation = 0
        self.window: Optional[WindowOffset] = None
        self.nodes: List[ByteNode] = []
        self.styles: Dict[Hashable, NodeStyle] = {}
        self.listeners: Dict[Hashable, List[ClickCallback]] = {}
        self.markers = SelectionMarkers()
        self.stale_keys: Set[Hashable] = set()
        self.render_calls = 0

    # Test helpers

    def select(self, start: Optional[int], end: Optional[int]) -> None:
        self.markers = SelectionMarkers(start, end)

    def key_for(self, local_offset: int) -> Hashable:
        return f"{self.generation}:{local_offset}"

    def node_at(self, local_offset: int) -> ByteNode:
        return next(node for node in self.nodes if node.offset == local_offset)

    def style_at(self, local_offset: int) -> Optional[NodeStyle]:
        return self.styles.get(self.key_for(local_offset))

    def listener_count(self, key: Optional[Hashable] = None) -> int:
        if key is not None:
            return len(self.listeners.get(key, []))
        return sum(len(callbacks) for callbacks in self.listeners.values())

    def click(self, local_offset: int) -> None:
        key = self.key_for(local_offset)
        for callback in list(self.listeners.get(key, [])):
            callback(key)

    def _check(self, key: Hashable) -> None:
        if key in self.stale_keys or not any(node.key == key for node in self.nodes):
            raise StaleNodeReferenceError(key)

    # IViewBinding

    def query_byte_nodes(self) -> List[ByteNode]:
        return list(self.nodes)

    def selection_boundaries(self) -> SelectionMarkers:
        return self.markers

    def render_window(self, content: bytes, window: WindowOffset) -> None:
        self.generation += 1
        self.render_calls += 1
        self.window = window
        self.styles.clear()
        self.listeners.clear()
        self.markers = SelectionMarkers()

        length = window.length
        padded = max(ROW_WIDTH, -(-length // ROW_WIDTH) * ROW_WIDTH)
        self.nodes = [
            ByteNode(
                key=f"{self.generation}:{offset}",
                offset=offset,
                invalid=offset >= length,
                parity="odd" if (offset // ROW_WIDTH) % 2 else "even",
            )
            for offset in range(padded)
        ]

    def rendered_window(self) -> Optional[WindowOffset]:
        return self.window

    def set_node_style(self, node_key: Hashable, style: NodeStyle) -> None:
        self._check(node_key)
        self.styles[node_key] = style

    def add_click_listener(self, node_key: Hashable, callback: ClickCallback) -> None:
        self._check(node_key)
        callbacks = self.listeners.setdefault(node_key, [])
        callbacks.append(callback)

    def remove_click_listener(self, node_key: Hashable, callback: ClickCallback) -> None:
        self._check(node_key)
        callbacks = self.listeners.get(node_key, [])
        if callback in callbacks:
            callbacks.remove(callback)


class FakeUIService(IUIService):
    """UI service that answers dialogs from preset values."""

    def __init__(self, confirm: bool = True, file_path: str = ""):
        self.confirm = confirm
        self.file_path = file_path
        self.messages: List[tuple] = []
        self.confirmations: List[tuple] = []

    def show_message(self, title: str, message: str, message_type: str = "info") -> Result[bool]:
        self.messages.append((title, message, message_type))
        return Result.ok(True)

    def show_confirmation(self, title: str, message: str) -> Result[bool]:
        self.confirmations.append((title, message))
        return Result.ok(self.confirm)

    def select_file(self, title: str, filter_pattern: str, save: bool = False) -> Result[str]:
        return Result.ok(self.file_path)


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication
    return QApplication.instance() or QApplication([])


@pytest.fixture
def content() -> bytes:
    return bytes(range(32))


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def view() -> FakeViewBinding:
    return FakeViewBinding()


@pytest.fixture
def ui() -> FakeUIService:
    return FakeUIService()


@pytest.fixture
def palette() -> HighlightPalette:
    return HighlightPalette()


@pytest.fixture
def control() -> LabelingControl:
    return LabelingControl(name="labels", to_name="packet", label_colors=dict(LABEL_COLORS))


@pytest.fixture
def store(content, control, logger) -> InMemoryAnnotationStore:
    return InMemoryAnnotationStore(PacketDocument(name="packet", content=content), [control], logger)


@pytest.fixture
def highlight(view, store, palette, logger) -> HighlightService:
    return HighlightService(view, store, palette, logger)


@pytest.fixture
def region_service(store, highlight, logger) -> RegionService:
    return RegionService(store, highlight, logger)


@pytest.fixture
def workflow(view, region_service, store, ui, logger) -> SelectionWorkflowService:
    return SelectionWorkflowService(view, region_service, store, ui, logger)


def record(start: int, end: int, data: bytes, area_id: Optional[str] = None,
           window: Optional[WindowOffset] = None, labels: Optional[List[str]] = None,
           region_id: Optional[str] = None) -> Dict[str, Any]:
    """Build a saved result record for bytes [start, end) of data."""
    value: Dict[str, Any] = {
        "start": start,
        "end": end,
        "content": base64.b64encode(data[start:end]).decode("ascii"),
    }
    if area_id is not None:
        value["areaId"] = area_id
    if window is not None:
        value["windowOffset"] = window.to_dict()
    if labels:
        value["labels"] = labels
    saved: Dict[str, Any] = {"value": value}
    if region_id is not None:
        saved["id"] = region_id
    return saved


def new_session(content: bytes, control: LabelingControl, logger: ILoggerService):
    """A second, independent workflow over the same packet, as after a restart."""
    view = FakeViewBinding()
    store = InMemoryAnnotationStore(PacketDocument(name="packet", content=content),
                                    [LabelingControl(name=control.name, to_name=control.to_name,
                                                     label_colors=dict(control.label_colors))],
                                    logger)
    highlight = HighlightService(view, store, HighlightPalette(), logger)
    region_service = RegionService(store, highlight, logger)
    workflow = SelectionWorkflowService(view, region_service, store, FakeUIService(), logger)
    return workflow, store, view
