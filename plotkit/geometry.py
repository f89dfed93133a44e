from __future__ import annotations

from dataclasses import dataclass, field

from plotkit.series import Orientation, validate_orientation


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    def transposed(self) -> "Size":
        return Size(width=self.height, height=self.width)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def transposed(self) -> "Rect":
        return Rect(x=self.y, y=self.x, width=self.height, height=self.width)


@dataclass
class PlotMarkers:
    """Tick positions (plot-local pixels) and labels for both axes.

    Lists are parallel per axis and are rebuilt on every draw; ordering follows
    emission order and is not necessarily ascending.
    """

    x_markers: list[float] = field(default_factory=list)
    x_markers_text: list[str] = field(default_factory=list)
    y_markers: list[float] = field(default_factory=list)
    y_markers_text: list[str] = field(default_factory=list)

    def x_tick_count(self) -> int:
        return len(self.x_markers)

    def y_tick_count(self) -> int:
        return len(self.y_markers)


@dataclass(frozen=True)
class AxisMapping:
    """Maps (category, value) axis coordinates onto plot x/y for one orientation."""

    orientation: Orientation
    category_length: float
    value_length: float

    @classmethod
    def for_orientation(cls, orientation: Orientation, size: Size) -> "AxisMapping":
        validate_orientation(orientation)
        if orientation == "vertical":
            return cls(orientation=orientation, category_length=size.width, value_length=size.height)
        return cls(orientation=orientation, category_length=size.height, value_length=size.width)

    def to_rect(self, category_start: float, thickness: float, value_start: float, value_extent: float) -> Rect:
        lo = min(value_start, value_start + value_extent)
        length = abs(value_extent)
        if self.orientation == "vertical":
            return Rect(x=category_start, y=lo, width=thickness, height=length)
        return Rect(x=lo, y=category_start, width=length, height=thickness)

    def assign_markers(
        self,
        markers: PlotMarkers,
        *,
        category_positions: list[float],
        category_labels: list[str],
        value_positions: list[float],
        value_labels: list[str],
    ) -> PlotMarkers:
        if self.orientation == "vertical":
            markers.x_markers.extend(category_positions)
            markers.x_markers_text.extend(category_labels)
            markers.y_markers.extend(value_positions)
            markers.y_markers_text.extend(value_labels)
        else:
            markers.y_markers.extend(category_positions)
            markers.y_markers_text.extend(category_labels)
            markers.x_markers.extend(value_positions)
            markers.x_markers_text.extend(value_labels)
        return markers

    def category_markers(self, markers: PlotMarkers) -> list[float]:
        return markers.x_markers if self.orientation == "vertical" else markers.y_markers
