# packetlabel/presentation/components/packet_labeling_window.py
"""
Main window for labeling a packet.

Step 1: drag across the packet and press "Use selection as area".
Step 2: switch a label on and drag inside the area to add regions. Clicking a
region emphasizes it; unticking it in the list hides it. Shift+click selects a
single byte that already belongs to a region.
"""
from typing import Dict, List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QListWidget, QListWidgetItem, QMainWindow,
    QScrollArea, QVBoxLayout, QWidget
)

from packetlabel.domain.common.di_container import DIContainer
from packetlabel.domain.services.i_annotation_store import IAnnotationStore
from packetlabel.domain.services.i_highlight_service import IHighlightService
from packetlabel.domain.services.i_logger_service import ILoggerService
from packetlabel.domain.services.i_region_service import IRegionService
from packetlabel.domain.services.i_selection_workflow_service import ISelectionWorkflowService
from packetlabel.domain.services.i_ui_service import IUIService
from packetlabel.infrastructure.ui.qt_byte_grid_view import QtByteGridView
from packetlabel.presentation.components.ui_components import (
    AlertLabel, GroupHeader, LabelToggle, StyledButton
)


class PacketLabelingWindow(QMainWindow):
    """Two-step labeling window around a QtByteGridView."""

    def __init__(self, container: DIContainer, grid_view: QtByteGridView, parent=None):
        super().__init__(parent)
        self.store = container.resolve(IAnnotationStore)
        self.workflow = container.resolve(ISelectionWorkflowService)
        self.region_service = container.resolve(IRegionService)
        self.highlight_service = container.resolve(IHighlightService)
        self.ui_service = container.resolve(IUIService)
        self.logger = container.resolve(ILoggerService)
        self.grid_view = grid_view
        self._toggles: Dict[str, List[LabelToggle]] = {}

        self.setWindowTitle(f"Packet labeling - {self.store.packet().name}")
        self.setup_ui()

        grid = self.grid_view.widget
        grid.selection_changed.connect(self.on_selection_changed)
        grid.selection_finished.connect(self.on_selection_finished)
        grid.region_clicked.connect(self.on_region_clicked)

        self.refresh()

    def setup_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)

        self.step_label = QLabel()
        self.step_label.setStyleSheet("font-size: 15px; font-weight: bold;")
        main_layout.addWidget(self.step_label)

        labels_group = GroupHeader("Labels")
        labels_layout = QHBoxLayout(labels_group)
        for control in self.store.controls():
            toggles = []
            for label, color in control.label_colors.items():
                toggle = LabelToggle(label, color)
                toggle.setChecked(label in control.selected_labels)
                toggle.toggled.connect(lambda _checked, name=control.name: self.on_label_toggled(name))
                labels_layout.addWidget(toggle)
                toggles.append(toggle)
            self._toggles[control.name] = toggles
        labels_layout.addStretch()
        main_layout.addWidget(labels_group)

        body_layout = QHBoxLayout()

        scroll = QScrollArea()
        scroll.setWidget(self.grid_view.widget)
        scroll.setWidgetResizable(True)
        body_layout.addWidget(scroll, 3)

        regions_group = GroupHeader("Regions")
        regions_layout = QVBoxLayout(regions_group)
        self.region_list = QListWidget()
        self.region_list.itemChanged.connect(self.on_region_item_changed)
        self.region_list.itemClicked.connect(self.on_region_item_clicked)
        regions_layout.addWidget(self.region_list)
        self.delete_button = StyledButton("Delete region")
        self.delete_button.clicked.connect(self.delete_current_region)
        regions_layout.addWidget(self.delete_button)
        body_layout.addWidget(regions_group, 1)

        main_layout.addLayout(body_layout)

        self.selection_label = QLabel("No selection")
        main_layout.addWidget(self.selection_label)

        self.alert_label = AlertLabel()
        main_layout.addWidget(self.alert_label)

        button_layout = QHBoxLayout()
        self.back_button = StyledButton("Back")
        self.back_button.clicked.connect(self.go_back)
        button_layout.addWidget(self.back_button)
        button_layout.addStretch()
        self.export_button = StyledButton("Export results")
        self.export_button.clicked.connect(self.export_results)
        button_layout.addWidget(self.export_button)
        self.confirm_button = StyledButton("Use selection as area")
        self.confirm_button.setDefault(True)
        self.confirm_button.clicked.connect(self.confirm_area)
        button_layout.addWidget(self.confirm_button)
        main_layout.addLayout(button_layout)

        self.resize(980, 640)

    def refresh(self):
        """Sync the chrome with the workflow state and the region list."""
        state = self.workflow.state
        if state.is_labeling:
            window = state.window_offset
            self.step_label.setText(
                f"Step 2 of 2: label bytes {window.start}-{window.end - 1} "
                f"({window.length} bytes)"
            )
        else:
            self.step_label.setText("Step 1 of 2: drag across the bytes you want to label")

        self.confirm_button.setEnabled(not state.is_labeling)
        # Clicks pick regions only while labeling; before that every gesture selects.
        self.grid_view.widget.clicks_enabled = state.is_labeling
        self.back_button.setEnabled(state.is_labeling)
        if state.alert:
            self.alert_label.setText("Select at least one byte before continuing.")
            self.alert_label.show()
        else:
            self.alert_label.hide()

        current_id = self.store.packet().current_region_id
        self.region_list.blockSignals(True)
        self.region_list.clear()
        for region in self.store.regions():
            item = QListWidgetItem(
                f"[{region.start}, {region.end})  {', '.join(region.labels) or '-'}"
            )
            item.setData(Qt.UserRole, region.id)
            item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
            item.setCheckState(Qt.Unchecked if region.hidden else Qt.Checked)
            self.region_list.addItem(item)
            if region.id == current_id:
                self.region_list.setCurrentItem(item)
        self.region_list.blockSignals(False)
        self.delete_button.setEnabled(current_id is not None)

    def on_label_toggled(self, control_name: str):
        labels = [toggle.label for toggle in self._toggles[control_name] if toggle.isChecked()]
        result = self.store.select_labels(control_name, labels)
        if result.is_failure:
            self.logger.warning(str(result.error))

    def on_selection_changed(self, start: int, end: int):
        window = self.grid_view.rendered_window()
        offset = window.start if window else 0
        self.selection_label.setText(
            f"Selected {offset + start}-{offset + end - 1} ({end - start} bytes)"
        )

    def on_selection_finished(self):
        if not self.workflow.state.is_labeling:
            return
        result = self.workflow.handle_mouse_up()
        if result.is_failure:
            self.logger.warning(str(result.error))
        self.refresh()

    def on_region_clicked(self, _key):
        self.refresh()

    def confirm_area(self):
        self.workflow.confirm_area()
        self.refresh()

    def go_back(self):
        result = self.workflow.back()
        if result.is_failure:
            self.logger.warning(str(result.error))
        self.selection_label.setText("No selection")
        self.refresh()

    def _region_for_item(self, item: QListWidgetItem):
        return self.store.get_region(item.data(Qt.UserRole))

    def on_region_item_changed(self, item: QListWidgetItem):
        region = self._region_for_item(item)
        if region is not None:
            region.set_hidden(item.checkState() != Qt.Checked)

    def on_region_item_clicked(self, item: QListWidgetItem):
        region = self._region_for_item(item)
        if region is not None and self.highlight_service.handle_span_click(region):
            self.refresh()

    def delete_current_region(self):
        current_id = self.store.packet().current_region_id
        region = self.store.get_region(current_id) if current_id else None
        if region is None:
            return
        result = self.region_service.delete_region(region)
        if result.is_failure:
            self.logger.warning(str(result.error))
        self.refresh()

    def export_results(self):
        path_result = self.ui_service.select_file("Export results", "JSON files (*.json)", save=True)
        if path_result.is_failure or not path_result.value:
            return
        write_result = self.store.write_results(path_result.value)
        if write_result.is_failure:
            self.ui_service.show_message("Export failed", str(write_result.error), "error")
        else:
            self.ui_service.show_message("Export complete",
                                         f"Saved {write_result.value} region(s) to {path_result.value}")
