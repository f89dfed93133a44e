from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Any, Literal

import numpy as np

from plotkit.adapters import coerce_values
from plotkit.bars import BarRect
from plotkit.errors import PlotDataError
from plotkit.geometry import PlotMarkers, Point, Rect, Size
from plotkit.renderer import LegendIcon, Renderer
from plotkit.scales import (
    MAX_DIVISIONS,
    LinearTransform,
    ValueExtent,
    ValueScale,
    build_axis_transform,
    build_value_scale,
    format_tick,
    format_ticks_for_axis,
    generate_nice_ticks,
)
from plotkit.series import LIGHT_BLUE, RGBA, coerce_color


LOGGER = logging.getLogger(__name__)

HISTOGRAM_X_MARGIN = 5.0
HISTOGRAM_RANGE_SNAP = 10.0

HistogramType = Literal["bar", "step"]


def histogram_range(data: np.ndarray) -> tuple[float, float]:
    lo = math.floor(float(np.min(data)) / HISTOGRAM_RANGE_SNAP) * HISTOGRAM_RANGE_SNAP
    hi = math.ceil(float(np.max(data)) / HISTOGRAM_RANGE_SNAP) * HISTOGRAM_RANGE_SNAP
    if lo == hi:
        lo -= HISTOGRAM_RANGE_SNAP * 0.5
        hi += HISTOGRAM_RANGE_SNAP * 0.5
    return lo, hi


def bin_frequencies(
    data: np.ndarray,
    bins: int,
    minimum_x: float,
    maximum_x: float,
    *,
    is_normalized: bool = False,
) -> np.ndarray:
    counts, _ = np.histogram(data, bins=bins, range=(minimum_x, maximum_x))
    freq = counts.astype(np.float64)
    if is_normalized:
        interval = (maximum_x - minimum_x) / bins
        freq /= float(data.size) * interval
    return freq


@dataclass
class HistogramSeries:
    data: np.ndarray
    bins: int
    label: str = ""
    color: RGBA = LIGHT_BLUE
    histogram_type: HistogramType = "bar"
    is_normalized: bool = False
    bin_frequency: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))
    scaled_bin_frequency: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))
    minimum_x: float = 0.0
    maximum_x: float = 0.0

    def __post_init__(self) -> None:
        if self.bins <= 0:
            raise PlotDataError("bins must be > 0")
        if self.histogram_type not in {"bar", "step"}:
            raise PlotDataError(f"unsupported histogram type: {self.histogram_type}")
        if self.data.size == 0:
            raise PlotDataError("empty series")
        self.data = np.sort(self.data)
        lo, hi = histogram_range(self.data)
        self.rebin(lo, hi)

    @property
    def bin_interval(self) -> float:
        return (self.maximum_x - self.minimum_x) / self.bins

    def rebin(self, minimum_x: float, maximum_x: float) -> None:
        self.minimum_x = float(minimum_x)
        self.maximum_x = float(maximum_x)
        self.bin_frequency = bin_frequencies(
            self.data,
            self.bins,
            self.minimum_x,
            self.maximum_x,
            is_normalized=self.is_normalized,
        )
        self.scaled_bin_frequency = np.zeros(0, dtype=np.float64)


@dataclass(frozen=True)
class HistogramLayout:
    value_scale: ValueScale
    x_transform: LinearTransform
    bin_width: float


class Histogram:
    def __init__(
        self,
        *,
        is_normalized: bool = False,
        enable_grid: bool = False,
        x_margin: float = HISTOGRAM_X_MARGIN,
        max_divisions: int = MAX_DIVISIONS,
    ) -> None:
        if x_margin < 0:
            raise ValueError("x_margin must be >= 0")
        if max_divisions < 2:
            raise ValueError("max_divisions must be >= 2")
        self.is_normalized = is_normalized
        self.enable_grid = enable_grid
        self.x_margin = x_margin
        self.max_divisions = max_divisions
        self.series: HistogramSeries | None = None
        self.stack_series: list[HistogramSeries] = []
        self._layout: HistogramLayout | None = None

    def add_series(
        self,
        data: Any,
        bins: int,
        *,
        label: str = "",
        color: tuple[int, int, int] | tuple[int, int, int, int] = LIGHT_BLUE,
        alpha: float = 1.0,
        histogram_type: HistogramType = "bar",
    ) -> "Histogram":
        self.series = HistogramSeries(
            data=coerce_values(data, label="data"),
            bins=int(bins),
            label=label,
            color=coerce_color(color, alpha),
            histogram_type=histogram_type,
            is_normalized=self.is_normalized,
        )
        if self.stack_series:
            LOGGER.info("rebinning %d stack series to %d bins", len(self.stack_series), self.series.bins)
        for stack in self.stack_series:
            stack.bins = self.series.bins
            stack.histogram_type = self.series.histogram_type
        self._rebin_all()
        return self

    def add_stack_series(
        self,
        data: Any,
        *,
        label: str = "",
        color: tuple[int, int, int] | tuple[int, int, int, int] = LIGHT_BLUE,
        alpha: float = 1.0,
    ) -> "Histogram":
        if self.series is None:
            LOGGER.warning("stack series %r discarded: histogram has no primary series", label)
            return self
        self.stack_series.append(
            HistogramSeries(
                data=coerce_values(data, label="data"),
                bins=self.series.bins,
                label=label,
                color=coerce_color(color, alpha),
                histogram_type=self.series.histogram_type,
                is_normalized=self.is_normalized,
            )
        )
        self._rebin_all()
        return self

    def _all_series(self) -> list[HistogramSeries]:
        if self.series is None:
            return []
        return [self.series, *self.stack_series]

    def _rebin_all(self) -> None:
        layers = self._all_series()
        if not layers:
            return
        lo = min(histogram_range(s.data)[0] for s in layers)
        hi = max(histogram_range(s.data)[1] for s in layers)
        for s in layers:
            s.rebin(lo, hi)
        self._layout = None

    @property
    def legend_labels(self) -> list[tuple[str, LegendIcon]]:
        return [
            (s.label, LegendIcon(kind="square" if s.histogram_type == "bar" else "line", color=s.color))
            for s in self._all_series()
        ]

    def last_layout(self) -> HistogramLayout | None:
        return self._layout

    def stacked_frequencies(self) -> np.ndarray:
        layers = self._all_series()
        if not layers:
            return np.zeros((0, 0), dtype=np.float64)
        return np.cumsum(np.vstack([s.bin_frequency for s in layers]), axis=0)

    def calculate_scale_and_marker_locations(self, size: Size) -> PlotMarkers:
        markers = PlotMarkers()
        if self.series is None:
            self._layout = None
            return markers
        if size.width <= 0 or size.height <= 0:
            raise ValueError("plot size must be > 0")

        cumulative = self.stacked_frequencies()
        top = float(np.max(cumulative[-1]))
        value_scale = build_value_scale(ValueExtent(minimum=0.0, maximum=top), size.height)
        if value_scale.degenerate:
            markers.y_markers.append(value_scale.origin)
            markers.y_markers_text.append(format_tick(0.0))
        else:
            y_target = max(2, min(self.max_divisions, int(size.height // 40)))
            y_ticks = generate_nice_ticks(0.0, top, y_target, max_ticks=self.max_divisions)
            y_pos = value_scale.to_pixels(y_ticks)
            keep = y_pos <= size.height
            markers.y_markers.extend(float(v) for v in y_pos[keep])
            markers.y_markers_text.extend(format_ticks_for_axis(y_ticks[keep]))

        first = self.series
        x_transform = build_axis_transform(first.minimum_x, first.maximum_x, size.width, margin=self.x_margin)
        x_target = max(2, min(self.max_divisions, int(size.width // 80)))
        x_ticks = generate_nice_ticks(first.minimum_x, first.maximum_x, x_target, max_ticks=self.max_divisions)
        markers.x_markers.extend(float(v) for v in x_transform.apply(x_ticks))
        markers.x_markers_text.extend(format_ticks_for_axis(x_ticks))

        for s in self._all_series():
            s.scaled_bin_frequency = value_scale.to_pixels(s.bin_frequency) - value_scale.origin

        bin_width = (size.width - 2.0 * self.x_margin) / first.bins
        self._layout = HistogramLayout(value_scale=value_scale, x_transform=x_transform, bin_width=bin_width)
        LOGGER.debug(
            "histogram layout: bins=%d range=(%g, %g) max_frequency=%g scale=%g",
            first.bins,
            first.minimum_x,
            first.maximum_x,
            top,
            value_scale.scale,
        )
        return markers

    def _require_layout(self) -> HistogramLayout:
        if self._layout is None:
            raise PlotDataError("layout has not been computed; call calculate_scale_and_marker_locations first")
        return self._layout

    def histogram_rects(self) -> list[BarRect]:
        layers = self._all_series()
        if not layers:
            return []
        layout = self._require_layout()
        baseline = np.zeros(layers[0].bins, dtype=np.float64)
        rects: list[BarRect] = []
        for layer, s in enumerate(layers):
            if s.histogram_type == "bar":
                for i, height in enumerate(s.scaled_bin_frequency.tolist()):
                    if height <= 0:
                        continue
                    rects.append(
                        BarRect(
                            index=i,
                            layer=layer,
                            rect=Rect(
                                x=self.x_margin + i * layout.bin_width,
                                y=layout.value_scale.origin + float(baseline[i]),
                                width=layout.bin_width,
                                height=height,
                            ),
                            color=s.color,
                            hatch_pattern="none",
                        )
                    )
            baseline = baseline + s.scaled_bin_frequency
        return rects

    def step_outlines(self) -> list[tuple[HistogramSeries, list[Point]]]:
        layers = self._all_series()
        if not layers:
            return []
        layout = self._require_layout()
        origin = layout.value_scale.origin
        cumulative = np.zeros(layers[0].bins, dtype=np.float64)
        outlines: list[tuple[HistogramSeries, list[Point]]] = []
        for s in layers:
            cumulative = cumulative + s.scaled_bin_frequency
            if s.histogram_type != "step":
                continue
            left = self.x_margin
            points = [Point(left, origin)]
            for i, top in enumerate(cumulative.tolist()):
                x0 = left + i * layout.bin_width
                points.append(Point(x0, origin + top))
                points.append(Point(x0 + layout.bin_width, origin + top))
            points.append(Point(left + s.bins * layout.bin_width, origin))
            outlines.append((s, points))
        return outlines

    def draw_data(self, markers: PlotMarkers, size: Size, renderer: Renderer) -> None:
        if self.series is None:
            return
        for bar in self.histogram_rects():
            renderer.draw_solid_rect(bar.rect, bar.color, bar.hatch_pattern)
        for s, points in self.step_outlines():
            renderer.draw_polyline(points, s.color, thickness=2)

    def draw(self, renderer: Renderer, size: Size) -> PlotMarkers:
        markers = self.calculate_scale_and_marker_locations(size)
        self.draw_data(markers, size, renderer)
        return markers
