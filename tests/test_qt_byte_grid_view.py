"""
Tests for the Qt byte grid, run on the offscreen platform.
"""

import pytest
from PySide6.QtCore import Qt

from packetlabel.domain.common.errors import StaleNodeReferenceError
from packetlabel.domain.models.byte_node import HighlightPalette, NodeStyle
from packetlabel.domain.models.region_model import WindowOffset
from packetlabel.infrastructure.ui.qt_byte_grid_view import QtByteGridView, style_sheet

DATA = bytes(range(40))


@pytest.fixture
def grid(qapp, logger):
    grid_view = QtByteGridView(HighlightPalette(), logger, bytes_per_row=16)
    yield grid_view
    grid_view.widget.deleteLater()


def test_nothing_rendered_initially(grid):
    assert grid.query_byte_nodes() == []
    assert grid.rendered_window() is None
    assert not grid.selection_boundaries().is_complete


def test_render_window_uses_local_offsets(grid):
    grid.render_window(DATA, WindowOffset(4, 24))

    nodes = grid.query_byte_nodes()
    valid = [node for node in nodes if not node.invalid]

    assert grid.rendered_window() == WindowOffset(4, 24)
    assert len(nodes) == 32  # two rows of 16, padded
    assert [node.offset for node in valid] == list(range(20))
    assert {node.parity for node in nodes if node.offset >= 16} == {"odd"}


def test_old_keys_go_stale_after_rerender(grid):
    grid.render_window(DATA, WindowOffset(0, 16))
    old_key = grid.query_byte_nodes()[0].key

    grid.render_window(DATA, WindowOffset(0, 16))

    with pytest.raises(StaleNodeReferenceError):
        grid.set_node_style(old_key, NodeStyle("#000000", "#ffffff"))
    with pytest.raises(StaleNodeReferenceError):
        grid.add_click_listener(old_key, lambda key: None)


def test_listeners_are_not_duplicated(grid):
    grid.render_window(DATA, WindowOffset(0, 16))
    key = grid.query_byte_nodes()[3].key
    clicks = []

    def callback(clicked):
        clicks.append(clicked)

    grid.add_click_listener(key, callback)
    grid.add_click_listener(key, callback)
    grid.widget.click(key)

    assert clicks == [key]
    grid.remove_click_listener(key, callback)
    assert grid.widget.listener_count() == 0


def test_set_node_style(grid):
    grid.render_window(DATA, WindowOffset(0, 16))
    key = grid.query_byte_nodes()[0].key
    style = NodeStyle("#3a7ca5", "#ffffff", cursor="pointer", bold=True)

    grid.set_node_style(key, style)

    assert grid.widget._cells[key].styleSheet() == style_sheet(style)
    assert "font-weight: bold" in style_sheet(style)


def _key(grid, offset):
    return next(node.key for node in grid.query_byte_nodes() if node.offset == offset)


def test_click_emits_region_clicked(grid):
    grid.render_window(DATA, WindowOffset(0, 16))
    key = _key(grid, 2)
    emitted = []
    grid.widget.region_clicked.connect(emitted.append)

    grid.widget.click(_key(grid, 1))
    assert emitted == []

    grid.add_click_listener(key, lambda clicked: None)
    grid.widget.click(key)
    assert emitted == [key]


class TestClickGesture:

    @pytest.fixture
    def listening_key(self, grid):
        grid.render_window(DATA, WindowOffset(0, 16))
        key = _key(grid, 5)
        grid.add_click_listener(key, lambda clicked: None)
        grid.widget._anchor = key
        return key

    def test_plain_release_on_listening_cell_is_click(self, grid, listening_key):
        assert grid.widget.is_click(listening_key, Qt.NoModifier)

    def test_shift_release_selects(self, grid, listening_key):
        assert not grid.widget.is_click(listening_key, Qt.ShiftModifier)

    def test_disabled_clicks_select(self, grid, listening_key):
        grid.widget.clicks_enabled = False
        assert not grid.widget.is_click(listening_key, Qt.NoModifier)

    def test_cell_without_listeners_selects(self, grid, listening_key):
        other = _key(grid, 6)
        grid.widget._anchor = other
        assert not grid.widget.is_click(other, Qt.NoModifier)
