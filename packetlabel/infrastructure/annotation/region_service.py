# packetlabel/infrastructure/annotation/region_service.py
from typing import Any, Dict, List, Optional

from packetlabel.domain.services.i_region_service import IRegionService
from packetlabel.domain.services.i_annotation_store import IAnnotationStore
from packetlabel.domain.services.i_highlight_service import IHighlightService
from packetlabel.domain.services.i_logger_service import ILoggerService
from packetlabel.domain.models.area_model import Area
from packetlabel.domain.models.region_model import ByteRegion, RangeDescriptor, region_violations
from packetlabel.domain.common.result import Result
from packetlabel.domain.common.errors import ResourceError, ValidationError


class RegionService(IRegionService):
    """Registers regions with the annotation store and the highlight service."""

    def __init__(self, store: IAnnotationStore, highlight_service: IHighlightService,
                 logger: ILoggerService):
        self.store = store
        self.highlight_service = highlight_service
        self.logger = logger

    def add_region(self, descriptor: RangeDescriptor) -> Result[Optional[ByteRegion]]:
        """Create a labeled region from a validated range."""
        controls = self.store.get_available_states()
        if not controls:
            self.logger.debug("No active labeling control, selection ignored",
                              start=descriptor.start, end=descriptor.end)
            return Result.ok(None)

        packet = self.store.packet()
        candidate = ByteRegion(
            id="candidate",
            start=descriptor.start,
            end=descriptor.end,
            content=descriptor.content,
            area_id=descriptor.area_id,
            window_offset=descriptor.window_offset,
        )
        violations = region_violations(candidate, packet.length)
        if violations:
            error = ValidationError(
                message=f"Invalid region range: {'; '.join(violations)}",
                details={"start": descriptor.start, "end": descriptor.end}
            )
            self.logger.warning(str(error))
            return Result.fail(error)

        control = controls[0]
        result_value = descriptor.to_value()
        result_value["labels"] = list(control.selected_labels)

        create_result = Result.from_operation(
            lambda: self.store.create_result(descriptor, result_value, control, packet),
            self.logger,
            ResourceError,
            "Failed to create region",
            start=descriptor.start, end=descriptor.end, control=control.name
        )
        if create_result.is_failure:
            return create_result

        region = create_result.value
        self._register(region)
        self.logger.info("Region added", region_id=region.id, start=region.start,
                         end=region.end, labels=",".join(region.labels))
        return Result.ok(region)

    def restore_region(self, record: Dict[str, Any], area: Area) -> Result[ByteRegion]:
        """Rebuild a saved region and register it under area."""
        packet = self.store.packet()
        try:
            region = ByteRegion.from_record(record, packet_name=packet.name)
        except (KeyError, TypeError, ValueError) as e:
            return Result.fail(ValidationError(
                message=f"Malformed region record: {e}",
                details={"record": str(record)[:200]},
                inner_error=e
            ))

        violations = region_violations(region, packet.length)
        if region.area_id != area.area_id:
            violations.append(f"area {region.area_id} differs from active area {area.area_id}")
        if violations:
            return Result.fail(ValidationError(
                message=f"Invalid saved region {region.id}: {'; '.join(violations)}",
                details={"region_id": region.id}
            ))

        try:
            self.store.add_restored_region(region)
        except ValueError as e:
            return Result.fail(ValidationError(
                message=str(e),
                details={"region_id": region.id},
                inner_error=e
            ))

        self._register(region)
        self.logger.debug("Region restored", region_id=region.id, area_id=area.area_id)
        return Result.ok(region)

    def _register(self, region: ByteRegion) -> None:
        self.highlight_service.attach(region)
        region.set_highlighted(True)

    def delete_region(self, region: ByteRegion) -> Result[bool]:
        """Delete a region; its teardown repaints the regions that shared its bytes."""
        if not self.store.delete_region(region):
            return Result.fail(ValidationError(
                message=f"Region not found: {region.id}",
                details={"region_id": region.id}
            ))

        return Result.ok(True)

    def regions_for_area(self, area_id: Optional[str]) -> List[ByteRegion]:
        return [region for region in self.store.regions() if region.area_id == area_id]

    def refresh_highlights(self) -> int:
        painted = 0
        for region in self.store.regions():
            painted += self.highlight_service.apply_highlight(region)
        return painted
