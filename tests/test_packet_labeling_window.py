"""
Tests for the labeling window, driven through its grid on the offscreen platform.

Cell geometry is not laid out offscreen, so gestures set the grid's drag state
directly and finish with a real release event away from any cell.
"""

import pytest
from PySide6.QtCore import QEvent, QPointF, Qt
from PySide6.QtGui import QMouseEvent

from packetlabel.application.app import initialize_app
from packetlabel.domain.models.byte_node import HighlightPalette
from packetlabel.infrastructure.config.json_config_repository import JsonConfigRepository
from packetlabel.infrastructure.ui.qt_byte_grid_view import QtByteGridView
from packetlabel.presentation.components.packet_labeling_window import PacketLabelingWindow

from conftest import FakeUIService


@pytest.fixture
def window(qapp, content, logger, tmp_path):
    grid_view = QtByteGridView(HighlightPalette(), logger, bytes_per_row=16)
    repo = JsonConfigRepository(str(tmp_path / "config.json"), logger)
    container = initialize_app(content, grid_view, FakeUIService(), config_repository=repo, logger=logger)
    window = PacketLabelingWindow(container, grid_view)
    window.workflow.mount()
    window.refresh()
    yield window
    window.deleteLater()


def _key(window, offset):
    return next(node.key for node in window.grid_view.query_byte_nodes() if node.offset == offset)


def _gesture(window, first, last, modifiers=Qt.NoModifier):
    """Press on local offset first, drag to last, release."""
    grid = window.grid_view.widget
    grid._anchor = _key(window, first)
    grid._current = _key(window, last)
    grid._dragging = True
    grid._update_selection()
    away = QPointF(-10, -10)
    grid.mouseReleaseEvent(QMouseEvent(QEvent.MouseButtonRelease, away, away,
                                       Qt.LeftButton, Qt.LeftButton, modifiers))


def _switch_on(window, label):
    toggle = next(t for t in window._toggles["labels"] if t.label == label)
    toggle.setChecked(True)


@pytest.fixture
def labeled(window):
    """Area [0, 8) with one HEADER region over [0, 4)."""
    _switch_on(window, "HEADER")
    _gesture(window, 0, 7)
    window.confirm_button.click()
    _gesture(window, 0, 3)
    return window


def test_starts_in_area_selection(window):
    assert window.confirm_button.isEnabled()
    assert not window.back_button.isEnabled()
    assert not window.delete_button.isEnabled()
    assert not window.grid_view.widget.clicks_enabled


def test_labeling_through_the_grid(labeled):
    regions = labeled.store.regions()

    assert [(r.start, r.end, r.labels) for r in regions] == [(0, 4, ["HEADER"])]
    assert labeled.workflow.state.is_labeling
    assert labeled.grid_view.widget.clicks_enabled
    assert labeled.region_list.count() == 1
    assert not labeled.delete_button.isEnabled()


def test_grid_click_enables_delete(labeled):
    region = labeled.store.regions()[0]

    labeled.grid_view.widget.click(_key(labeled, 1))

    assert labeled.store.packet().current_region_id == region.id
    assert labeled.delete_button.isEnabled()
    assert labeled.region_list.currentItem().data(Qt.UserRole) == region.id


def test_delete_after_grid_click(labeled):
    labeled.grid_view.widget.click(_key(labeled, 1))

    labeled.delete_button.click()

    assert labeled.store.regions() == []
    assert labeled.region_list.count() == 0
    assert not labeled.delete_button.isEnabled()


def test_plain_release_on_region_selects_it(labeled):
    _gesture(labeled, 2, 2)

    assert len(labeled.store.regions()) == 1
    assert labeled.delete_button.isEnabled()


def test_shift_release_on_region_labels_one_byte(labeled):
    _gesture(labeled, 2, 2, Qt.ShiftModifier)

    assert sorted((r.start, r.end) for r in labeled.store.regions()) == [(0, 4), (2, 3)]


def test_single_byte_area(window):
    _gesture(window, 5, 5)
    window.confirm_button.click()

    assert window.workflow.area.window_offset.length == 1
    assert window.workflow.area.window_offset.start == 5


def test_unticking_hides_region(labeled):
    item = labeled.region_list.item(0)

    item.setCheckState(Qt.Unchecked)

    assert labeled.store.regions()[0].hidden


def test_back_returns_to_area_selection(labeled):
    labeled.back_button.click()

    assert not labeled.workflow.state.is_labeling
    assert labeled.store.regions() == []
    assert labeled.confirm_button.isEnabled()
    assert not labeled.grid_view.widget.clicks_enabled
