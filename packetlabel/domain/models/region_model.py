# packetlabel/domain/models/region_model.py
"""
Region model representing one labeled byte range of a packet.

Offsets are always absolute positions in the packet content. The optional
window offset records the sub-window the range was selected in and is only
used to translate back to the local offsets of the rendered grid.
"""
import base64
import binascii
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional


@dataclass(frozen=True)
class WindowOffset:
    """Absolute half-open bounds of a rendered sub-window."""
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def contains(self, start: int, end: int) -> bool:
        return self.start <= start and end <= self.end

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WindowOffset':
        return cls(start=int(data["start"]), end=int(data["end"]))

    @classmethod
    def full(cls, content_length: int) -> 'WindowOffset':
        """The window covering the whole packet."""
        return cls(start=0, end=content_length)


@dataclass
class RangeDescriptor:
    """A validated, not yet registered byte range ready to become a region."""
    start: int
    end: int
    content: str  # base64 of bytes [start, end)
    area_id: Optional[str] = None
    window_offset: Optional[WindowOffset] = None

    def to_value(self) -> Dict[str, Any]:
        value = {"start": self.start, "end": self.end, "content": self.content}
        if self.area_id is not None:
            value["areaId"] = self.area_id
        if self.window_offset is not None:
            value["windowOffset"] = self.window_offset.to_dict()
        return value


RegionHook = Callable[['ByteRegion'], None]


@dataclass
class ByteRegion:
    """
    One annotated byte range.

    The persisted fields come first. hidden, selected and highlighted are view
    state: they never reach serialize() and every setter repaints the region
    through the reconcile hook attached by the highlight service.
    """
    id: str
    start: int
    end: int
    content: str
    area_id: Optional[str] = None
    window_offset: Optional[WindowOffset] = None
    labels: List[str] = field(default_factory=list)
    packet_name: Optional[str] = None
    color: Optional[str] = field(default=None, compare=False)
    hidden: bool = field(default=False, compare=False)
    selected: bool = field(default=False, compare=False)
    highlighted: bool = field(default=False, compare=False)
    _reconcile: Optional[RegionHook] = field(default=None, init=False, repr=False, compare=False)
    _teardown: Optional[RegionHook] = field(default=None, init=False, repr=False, compare=False)
    _destroyed: bool = field(default=False, init=False, repr=False, compare=False)

    @property
    def bold_emphasis(self) -> bool:
        return self.highlighted and self.selected and not self.hidden

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def length(self) -> int:
        return self.end - self.start

    def decoded_content(self) -> bytes:
        return base64.b64decode(self.content, validate=True)

    def attach_hooks(self, reconcile: RegionHook, teardown: RegionHook) -> None:
        """Connect the region to the component that paints it."""
        self._reconcile = reconcile
        self._teardown = teardown

    def set_hidden(self, hidden: bool) -> None:
        self.hidden = bool(hidden)
        self._notify()

    def set_selected(self, selected: bool) -> None:
        self.selected = bool(selected)
        self._notify()

    def set_highlighted(self, highlighted: bool) -> None:
        self.highlighted = bool(highlighted)
        self._notify()

    def toggle_hidden(self) -> None:
        self.set_hidden(not self.hidden)

    def destroy(self) -> None:
        """
        Release the region's listeners.

        Runs the teardown hook at most once; later calls, and calls on a region
        that was never attached, do nothing.
        """
        if self._destroyed:
            return
        self._destroyed = True
        teardown = self._teardown
        self._reconcile = None
        self._teardown = None
        if teardown is not None:
            teardown(self)

    def _notify(self) -> None:
        if self._reconcile is not None and not self._destroyed:
            self._reconcile(self)

    def serialize(self) -> Dict[str, Any]:
        """Project the persisted fields into the stored result shape."""
        value = RangeDescriptor(
            start=self.start,
            end=self.end,
            content=self.content,
            area_id=self.area_id,
            window_offset=self.window_offset,
        ).to_value()
        if self.labels:
            value["labels"] = list(self.labels)
        return {"value": value}

    @classmethod
    def from_record(cls, record: Dict[str, Any], region_id: Optional[str] = None,
                    packet_name: Optional[str] = None) -> 'ByteRegion':
        """
        Build a region from a persisted record.

        Accepts the bare {"value": {...}} shape as well as exported results
        that also carry id, from_name and to_name.

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed
        """
        value = record["value"]
        window = value.get("windowOffset")
        return cls(
            id=region_id or record.get("id") or new_region_id(),
            start=int(value["start"]),
            end=int(value["end"]),
            content=str(value["content"]),
            area_id=value.get("areaId"),
            window_offset=WindowOffset.from_dict(window) if window else None,
            labels=list(value.get("labels", [])),
            packet_name=packet_name or record.get("to_name"),
        )


def new_region_id() -> str:
    return uuid.uuid4().hex[:10]


def region_violations(region: ByteRegion, content_length: Optional[int] = None) -> List[str]:
    """List the offset invariants the region breaks; empty when it is sound."""
    violations = []
    if region.start < 0:
        violations.append(f"start {region.start} is negative")
    if region.start >= region.end:
        violations.append(f"start {region.start} is not before end {region.end}")
    if content_length is not None and region.end > content_length:
        violations.append(f"end {region.end} exceeds content length {content_length}")
    try:
        decoded = region.decoded_content()
    except (binascii.Error, ValueError):
        violations.append("content is not valid base64")
    else:
        if len(decoded) != region.end - region.start:
            violations.append(
                f"content holds {len(decoded)} bytes, range spans {region.end - region.start}"
            )
    window = region.window_offset
    if window is not None and not window.contains(region.start, region.end):
        violations.append(
            f"range [{region.start}, {region.end}) lies outside window [{window.start}, {window.end})"
        )
    return violations
