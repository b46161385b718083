# packetlabel/infrastructure/annotation/selection_workflow_service.py
"""
Two-step labeling workflow.

    SELECTING_AREA --confirm_area()--> LABELING --back()--> SELECTING_AREA
                                         |  ^
                                         +--+ handle_mouse_up() adds regions

While selecting, the grid shows the whole packet. Once an area is confirmed
the grid shows only the area's bytes, with local offsets starting at zero,
and every drag inside it becomes a region at window.start + local offset.
"""
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from packetlabel.domain.services.i_selection_workflow_service import ISelectionWorkflowService
from packetlabel.domain.services.i_view_binding import IViewBinding
from packetlabel.domain.services.i_region_service import IRegionService
from packetlabel.domain.services.i_annotation_store import IAnnotationStore
from packetlabel.domain.services.i_ui_service import IUIService
from packetlabel.domain.services.i_logger_service import ILoggerService
from packetlabel.domain.services import offset_mapper
from packetlabel.domain.models.area_model import Area
from packetlabel.domain.models.region_model import ByteRegion, RangeDescriptor, WindowOffset
from packetlabel.domain.models.workflow_state import WorkflowState, WorkflowStep
from packetlabel.domain.common.result import Result
from packetlabel.domain.common.errors import GroupingError, ValidationError


class SelectionWorkflowService(ISelectionWorkflowService):
    """State machine driving area selection and labeling for one packet."""

    def __init__(self, view_binding: IViewBinding, region_service: IRegionService,
                 store: IAnnotationStore, ui_service: IUIService, logger: ILoggerService):
        self.view_binding = view_binding
        self.region_service = region_service
        self.store = store
        self.ui_service = ui_service
        self.logger = logger
        self._state = WorkflowState()
        self._area: Optional[Area] = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def area(self) -> Optional[Area]:
        return self._area

    def mount(self, records: Optional[List[Dict[str, Any]]] = None) -> Result[WorkflowState]:
        self._render()
        if records:
            return self.restore(records)
        return Result.ok(self._state)

    def _render(self) -> None:
        packet = self.store.packet()
        if self._state.is_labeling and self._area is not None:
            window = self._area.window_offset
        else:
            window = packet.full_window
        self.view_binding.render_window(packet.content, window)
        self.region_service.refresh_highlights()

    def confirm_area(self) -> Result[Area]:
        if self._state.step != WorkflowStep.SELECTING_AREA:
            return Result.fail(ValidationError(
                message="An area is already being labeled",
                code="wrong_step",
                details={"step": self._state.step.value}
            ))

        packet = self.store.packet()
        markers = self.view_binding.selection_boundaries()
        view = self.view_binding.rendered_window() or packet.full_window

        window = None
        if markers.is_valid:
            start, end = offset_mapper.absolute_range(markers.start, markers.end, view)
            if 0 <= start and end <= packet.length:
                window = WindowOffset(start, end)

        if window is None:
            self._state.alert = True
            error = ValidationError(
                message="Select a range of bytes by dragging across the packet before continuing.",
                code="invalid_selection",
                details={"start": markers.start, "end": markers.end}
            )
            self.logger.warning("Area selection rejected", start=markers.start, end=markers.end)
            self.ui_service.show_message("Invalid selection", error.message, "warning")
            return Result.fail(error)

        self._area = Area(
            area_id=Area.new_id(),
            window_offset=window,
            content=offset_mapper.encode_content(packet.content, window.start, window.end),
        )
        self._enter_labeling(self._area)
        self.logger.info("Area confirmed", area_id=self._area.area_id,
                         start=window.start, end=window.end)
        return Result.ok(self._area)

    def _enter_labeling(self, area: Area) -> None:
        self._state.step = WorkflowStep.LABELING
        self._state.alert = False
        self._state.area_id = area.area_id
        self._state.window_offset = area.window_offset
        self._state.session_region_ids = []
        self._render()

    def handle_mouse_up(self) -> Result[Optional[ByteRegion]]:
        if not self._state.is_labeling or self._area is None:
            return Result.ok(None)

        markers = self.view_binding.selection_boundaries()
        if not markers.is_valid:
            self.logger.debug("Empty selection ignored", start=markers.start, end=markers.end)
            return Result.ok(None)

        window = self._area.window_offset
        start, end = offset_mapper.absolute_range(markers.start, markers.end, window)
        if start < window.start or end > window.end:
            self.logger.debug("Selection outside the area ignored", start=start, end=end)
            return Result.ok(None)

        packet = self.store.packet()
        descriptor = RangeDescriptor(
            start=start,
            end=end,
            content=offset_mapper.encode_content(packet.content, start, end),
            area_id=self._area.area_id,
            window_offset=window,
        )
        result = self.region_service.add_region(descriptor)
        if result.is_success and result.value is not None:
            self._state.session_region_ids.append(result.value.id)
        return result

    def back(self) -> Result[bool]:
        if not self._state.is_labeling:
            return Result.fail(ValidationError(
                message="No area is being labeled",
                code="wrong_step",
                details={"step": self._state.step.value}
            ))

        # Restored regions go too, so an export never mixes two areas.
        drafts = self.region_service.regions_for_area(self._state.area_id)
        if drafts:
            confirmation = self.ui_service.show_confirmation(
                "Discard regions",
                f"Going back discards the {len(drafts)} region(s) of this area, including saved ones. Continue?"
            )
            if confirmation.is_failure:
                return Result.fail(confirmation.error)
            if not confirmation.value:
                return Result.ok(False)

        for region in drafts:
            delete_result = self.region_service.delete_region(region)
            if delete_result.is_failure:
                self.logger.warning(f"Could not discard region: {delete_result.error}", region_id=region.id)

        self.logger.info("Area abandoned", area_id=self._state.area_id, discarded=len(drafts))
        self._area = None
        self._state = WorkflowState()
        self._render()
        return Result.ok(True)

    def restore(self, records: List[Dict[str, Any]]) -> Result[WorkflowState]:
        if self._state.is_labeling:
            return Result.fail(ValidationError(
                message="Saved regions can only be restored before labeling starts",
                code="wrong_step",
                details={"step": self._state.step.value}
            ))

        usable = []
        for record in records:
            if isinstance(record, dict) and isinstance(record.get("value"), dict):
                usable.append(record)
            else:
                self.logger.warning("Skipping malformed saved region", record=str(record)[:80])
        if not usable:
            return Result.ok(self._state)

        groups: "OrderedDict[Optional[str], List[Dict[str, Any]]]" = OrderedDict()
        for record in usable:
            groups.setdefault(record["value"].get("areaId"), []).append(record)

        if len(groups) > 1:
            error = GroupingError(
                message=f"Saved regions belong to {len(groups)} different areas; only one can be labeled at a time",
                details={"area_ids": list(groups.keys())}
            )
            self.logger.error(str(error), area_ids=",".join(str(k) for k in groups))
            return Result.fail(error)

        area_id, group = next(iter(groups.items()))
        packet = self.store.packet()
        stored_window = group[0]["value"].get("windowOffset")
        try:
            window = WindowOffset.from_dict(stored_window) if stored_window else packet.full_window
        except (KeyError, TypeError, ValueError) as e:
            return Result.fail(ValidationError(
                message=f"Malformed window offset on saved region: {e}",
                details={"area_id": area_id},
                inner_error=e
            ))
        if not (0 <= window.start < window.end <= packet.length):
            return Result.fail(ValidationError(
                message=f"Saved window [{window.start}, {window.end}) does not fit the packet",
                details={"area_id": area_id, "length": packet.length}
            ))

        self._area = Area(
            area_id=area_id,
            window_offset=window,
            content=offset_mapper.encode_content(packet.content, window.start, window.end),
        )
        self._enter_labeling(self._area)

        restored = 0
        for record in group:
            result = self.region_service.restore_region(record, self._area)
            if result.is_failure:
                self.logger.warning(f"Skipping saved region: {result.error}")
                continue
            restored += 1

        self.logger.info("Saved regions restored", area_id=area_id, restored=restored,
                         skipped=len(group) - restored)
        return Result.ok(self._state)
