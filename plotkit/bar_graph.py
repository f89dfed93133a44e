from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Sequence

from plotkit.bars import DEFAULT_BAR_SPACE, BarRect, build_bar_rects
from plotkit.errors import PlotDataError
from plotkit.geometry import AxisMapping, PlotMarkers, Size
from plotkit.renderer import LegendIcon, Renderer
from plotkit.scales import (
    MAX_DIVISIONS,
    ValueScale,
    build_value_scale,
    category_ticks,
    tick_increment,
    value_extent,
    value_ticks,
)
from plotkit.series import (
    LIGHT_BLUE,
    Hatching,
    Orientation,
    Pair,
    Series,
    coerce_color,
    validate_orientation,
)


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BarLayout:
    mapping: AxisMapping
    value_scale: ValueScale
    bar_width: int
    tick_increment: float


class BarGraph:
    """Bar chart with an optional stack of series layered on the primary one."""

    def __init__(
        self,
        *,
        enable_grid: bool = False,
        orientation: Orientation = "vertical",
        space: float = DEFAULT_BAR_SPACE,
        max_divisions: int = MAX_DIVISIONS,
    ) -> None:
        if space < 0:
            raise ValueError("space must be >= 0")
        if max_divisions < 2:
            raise ValueError("max_divisions must be >= 2")
        self.enable_grid = enable_grid
        self.space = space
        self.max_divisions = max_divisions
        self.series = Series()
        self.stack_series: list[Series] = []
        self._orientation: Orientation = validate_orientation(orientation)
        self._layout: BarLayout | None = None

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @orientation.setter
    def orientation(self, value: Orientation) -> None:
        value = validate_orientation(value)
        if value != self._orientation:
            self._layout = None
        self._orientation = value

    def add_series(
        self,
        x: Any = None,
        y: Any = None,
        *,
        data: Any = None,
        label: str = "",
        color: tuple[int, int, int] | tuple[int, int, int, int] = LIGHT_BLUE,
        alpha: float = 1.0,
        hatch_pattern: Hatching = "none",
        orientation: Orientation = "vertical",
    ) -> "BarGraph":
        series = Series.from_xy(
            x,
            y,
            data=data,
            label=label,
            color=coerce_color(color, alpha),
            hatch_pattern=hatch_pattern,
        )
        self.set_series(series)
        self.orientation = orientation
        return self

    def add_series_values(
        self,
        values: Sequence[Pair],
        *,
        label: str = "",
        color: tuple[int, int, int] | tuple[int, int, int, int] = LIGHT_BLUE,
        alpha: float = 1.0,
        hatch_pattern: Hatching = "none",
        orientation: Orientation = "vertical",
    ) -> "BarGraph":
        series = Series.from_values(values, label=label, color=coerce_color(color, alpha), hatch_pattern=hatch_pattern)
        self.set_series(series)
        self.orientation = orientation
        return self

    def set_series(self, series: Series) -> "BarGraph":
        self.series = series
        self._layout = None
        kept = [s for s in self.stack_series if s.count == series.count and series.count != 0]
        if len(kept) != len(self.stack_series):
            LOGGER.warning(
                "dropping %d stack series that no longer match the series point count (%d)",
                len(self.stack_series) - len(kept),
                series.count,
            )
        self.stack_series = kept
        return self

    def add_stack_series(self, series: Series) -> "BarGraph":
        if self.series.count != 0 and self.series.count == series.count:
            self.stack_series.append(series)
            self._layout = None
        else:
            LOGGER.warning(
                "stack point count does not match the series point count: %r has %d points, series has %d",
                series.label,
                series.count,
                self.series.count,
            )
        return self

    def add_stack_values(
        self,
        y: Any,
        *,
        label: str = "",
        color: tuple[int, int, int] | tuple[int, int, int, int] = LIGHT_BLUE,
        alpha: float = 1.0,
        hatch_pattern: Hatching = "none",
    ) -> "BarGraph":
        labels = self.series.labels()
        try:
            stack = Series.from_xy(labels, y, label=label, color=coerce_color(color, alpha), hatch_pattern=hatch_pattern)
        except PlotDataError as exc:
            LOGGER.warning("discarding stack series %r: %s", label, exc)
            return self
        return self.add_stack_series(stack)

    @property
    def legend_labels(self) -> list[tuple[str, LegendIcon]]:
        entries = [(self.series.label, LegendIcon(kind="square", color=self.series.color))]
        entries.extend((s.label, LegendIcon(kind="square", color=s.color)) for s in self.stack_series)
        return entries

    def last_layout(self) -> BarLayout | None:
        return self._layout

    def calculate_scale_and_marker_locations(self, size: Size) -> PlotMarkers:
        markers = PlotMarkers()
        if self.series.count == 0:
            self._layout = None
            return markers
        if size.width <= 0 or size.height <= 0:
            raise ValueError("plot size must be > 0")

        mapping = AxisMapping.for_orientation(self._orientation, size)
        bar_width, category_positions, category_labels = category_ticks(self.series.labels(), mapping.category_length)

        extent = value_extent(self.series.y_array(), [s.y_array() for s in self.stack_series])
        value_scale = build_value_scale(extent, mapping.value_length)
        increment = tick_increment(value_scale, max_divisions=self.max_divisions)
        value_positions, value_labels = value_ticks(value_scale, increment)

        mapping.assign_markers(
            markers,
            category_positions=category_positions,
            category_labels=category_labels,
            value_positions=value_positions,
            value_labels=value_labels,
        )

        self.series.rescale(value_scale)
        for stack in self.stack_series:
            stack.rescale(value_scale)

        self._layout = BarLayout(mapping=mapping, value_scale=value_scale, bar_width=bar_width, tick_increment=increment)
        LOGGER.debug(
            "bar layout: orientation=%s extent=(%g, %g) scale=%g origin=%g ticks=%d",
            self._orientation,
            value_scale.extent.minimum,
            value_scale.extent.maximum,
            value_scale.scale,
            value_scale.origin,
            len(value_positions),
        )
        return markers

    def bar_rects(self, markers: PlotMarkers) -> list[BarRect]:
        if self.series.count == 0:
            return []
        layout = self._layout
        if layout is None:
            raise PlotDataError("layout has not been computed; call calculate_scale_and_marker_locations first")
        return build_bar_rects(
            self.series,
            self.stack_series,
            category_centers=layout.mapping.category_markers(markers),
            bar_width=layout.bar_width,
            origin=layout.value_scale.origin,
            space=self.space,
            mapping=layout.mapping,
        )

    def draw_data(self, markers: PlotMarkers, size: Size, renderer: Renderer) -> None:
        for bar in self.bar_rects(markers):
            renderer.draw_solid_rect(bar.rect, bar.color, bar.hatch_pattern)

    def draw(self, renderer: Renderer, size: Size) -> PlotMarkers:
        markers = self.calculate_scale_and_marker_locations(size)
        self.draw_data(markers, size, renderer)
        return markers
