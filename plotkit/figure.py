from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from plotkit.errors import PlotDataError
from plotkit.geometry import PlotMarkers, Size
from plotkit.raster import RasterRenderer, blend_region, draw_hline, draw_text, draw_vline, new_canvas, text_size
from plotkit.renderer import Chart, LegendIcon
from plotkit.series import RGBA


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FigureStyle:
    background: RGBA = (12, 16, 23, 255)
    plot_bg_color: RGBA = (20, 26, 36, 255)
    frame_color: RGBA = (60, 67, 78, 255)
    grid_color: RGBA = (44, 53, 66, 255)
    axis_color: RGBA = (124, 138, 156, 255)
    text_color: RGBA = (208, 218, 232, 255)
    hatch_color: RGBA = (12, 16, 23, 255)
    legend_bg_color: RGBA = (10, 14, 20, 170)


@dataclass(frozen=True)
class LegendLayout:
    entries: tuple[tuple[str, LegendIcon], ...]
    font_px: float
    swatch_w: int
    swatch_h: int
    item_gap: int
    pad: int
    item_h: int
    box_w: int
    box_h: int


@dataclass
class Figure:
    chart: Chart
    width: int = 800
    height: int = 600
    title: str = ""
    x_label: str = ""
    y_label: str = ""
    style: FigureStyle = field(default_factory=FigureStyle)

    _last_plot_rect_px: tuple[int, int, int, int] | None = None
    _last_markers: PlotMarkers | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")

    def last_plot_rect(self) -> tuple[int, int, int, int] | None:
        return self._last_plot_rect_px

    def last_markers(self) -> PlotMarkers | None:
        return self._last_markers

    def _font_sizes(self) -> tuple[float, float, float]:
        scale_base = min(self.width, self.height)
        tick_font_px = max(10.0, min(24.0, scale_base * 0.028))
        label_font_px = max(11.0, min(24.0, scale_base * 0.032))
        title_font_px = max(12.0, min(30.0, scale_base * 0.038))
        return tick_font_px, label_font_px, title_font_px

    def _plot_viewport(self, *, max_y_tick_w: int, max_x_tick_h: int) -> tuple[int, int, int, int]:
        tick_font_px, label_font_px, title_font_px = self._font_sizes()
        tick_mark_len = int(max(4.0, tick_font_px * 0.45))
        tick_pad = int(max(3.0, tick_font_px * 0.35))
        y_label_w = text_size(self.y_label, font_size_px=label_font_px, rotate_deg=90)[0] if self.y_label else 0
        x_label_h = text_size(self.x_label, font_size_px=label_font_px)[1] if self.x_label else 0
        title_h = text_size(self.title, font_size_px=title_font_px)[1] if self.title else 0

        left = int(max(12, max_y_tick_w + tick_mark_len + tick_pad + y_label_w + 12))
        right = int(max(12, tick_font_px * 1.5))
        top = int(max(10, title_h + 14))
        bottom = int(max(12, max_x_tick_h + tick_mark_len + tick_pad + x_label_h + 12))

        # Bound gutters so small figures keep a drawable plot area.
        left = min(left, max(6, self.width // 3))
        right = min(right, max(4, self.width // 4))
        top = min(top, max(4, self.height // 3))
        bottom = min(bottom, max(6, self.height // 3))
        plot_w = self.width - left - right
        plot_h = self.height - top - bottom
        if plot_w <= 1 or plot_h <= 1:
            raise PlotDataError("figure too small for plotting viewport")
        return left, top, plot_w, plot_h

    def _layout(self) -> tuple[tuple[int, int, int, int], PlotMarkers]:
        tick_font_px, _, _ = self._font_sizes()
        # First pass with provisional gutters sizes the tick labels.
        provisional = Size(width=max(2, self.width - 80), height=max(2, self.height - 70))
        probe = self.chart.calculate_scale_and_marker_locations(provisional)
        max_y_tick_w = max((text_size(lbl, font_size_px=tick_font_px)[0] for lbl in probe.y_markers_text), default=0)
        max_x_tick_h = max((text_size(lbl, font_size_px=tick_font_px)[1] for lbl in probe.x_markers_text), default=0)
        rect = self._plot_viewport(max_y_tick_w=max_y_tick_w, max_x_tick_h=max_x_tick_h)
        markers = self.chart.calculate_scale_and_marker_locations(Size(width=rect[2], height=rect[3]))
        return rect, markers

    def to_rgba(self) -> np.ndarray:
        style = self.style
        tick_font_px, label_font_px, title_font_px = self._font_sizes()
        canvas = new_canvas(self.width, self.height, color=style.background)
        (plot_x0, plot_y0, plot_w, plot_h), markers = self._layout()
        size = Size(width=plot_w, height=plot_h)
        plot_x1 = plot_x0 + plot_w
        plot_y1 = plot_y0 + plot_h

        blend_region(canvas, plot_x0, plot_y0, plot_x1, plot_y1, style.plot_bg_color)
        if self.chart.enable_grid:
            self._draw_grid(canvas, markers, plot_x0, plot_y0, plot_w, plot_h)

        renderer = RasterRenderer(
            canvas,
            plot_x0=plot_x0,
            plot_y0=plot_y0,
            plot_w=plot_w,
            plot_h=plot_h,
            hatch_color=style.hatch_color,
        )
        self.chart.draw_data(markers, size, renderer)

        draw_hline(canvas, plot_x0, plot_x1 - 1, plot_y0, style.frame_color)
        draw_hline(canvas, plot_x0, plot_x1 - 1, plot_y1 - 1, style.frame_color)
        draw_vline(canvas, plot_x0, plot_y0, plot_y1 - 1, style.frame_color)
        draw_vline(canvas, plot_x1 - 1, plot_y0, plot_y1 - 1, style.frame_color)

        tick_mark_len = int(max(4.0, tick_font_px * 0.45))
        tick_pad = int(max(3.0, tick_font_px * 0.35))
        for pos, label in zip(markers.x_markers, markers.x_markers_text):
            px = plot_x0 + int(round(pos))
            draw_vline(canvas, px, plot_y1, plot_y1 + tick_mark_len, style.axis_color)
            draw_text(
                canvas,
                px,
                plot_y1 + tick_mark_len + tick_pad,
                label,
                style.text_color,
                font_size_px=tick_font_px,
                h_anchor="center",
            )
        for pos, label in zip(markers.y_markers, markers.y_markers_text):
            py = plot_y1 - int(round(pos))
            draw_hline(canvas, plot_x0 - tick_mark_len, plot_x0, py, style.axis_color)
            draw_text(
                canvas,
                plot_x0 - tick_mark_len - tick_pad,
                py,
                label,
                style.text_color,
                font_size_px=tick_font_px,
                h_anchor="right",
                v_anchor="middle",
            )

        if self.title:
            draw_text(canvas, plot_x0 + plot_w // 2, 6, self.title, style.text_color, font_size_px=title_font_px, h_anchor="center")
        if self.x_label:
            draw_text(
                canvas,
                plot_x0 + plot_w // 2,
                self.height - 6,
                self.x_label,
                style.text_color,
                font_size_px=label_font_px,
                h_anchor="center",
                v_anchor="bottom",
            )
        if self.y_label:
            draw_text(
                canvas,
                6,
                plot_y0 + plot_h // 2,
                self.y_label,
                style.text_color,
                font_size_px=label_font_px,
                rotate_deg=90,
                v_anchor="middle",
            )

        legend = self._build_legend_layout(tick_font_px)
        if legend is not None:
            self._draw_legend(canvas, legend, plot_x0, plot_y0, plot_w, plot_h)

        self._last_plot_rect_px = (plot_x0, plot_y0, plot_w, plot_h)
        self._last_markers = markers
        LOGGER.debug("figure rendered: %dx%d plot=%s", self.width, self.height, self._last_plot_rect_px)
        return canvas

    def _draw_grid(self, canvas: np.ndarray, markers: PlotMarkers, x0: int, y0: int, w: int, h: int) -> None:
        if getattr(self.chart, "orientation", "vertical") == "horizontal":
            for pos in markers.x_markers:
                draw_vline(canvas, x0 + int(round(pos)), y0, y0 + h - 1, self.style.grid_color)
            return
        for pos in markers.y_markers:
            draw_hline(canvas, x0, x0 + w - 1, y0 + h - int(round(pos)), self.style.grid_color)

    def _build_legend_layout(self, tick_font_px: float) -> LegendLayout | None:
        entries = tuple(self.chart.legend_labels)
        if len(entries) < 2:
            return None
        entries = tuple((label if label.strip() else f"series {i + 1}", icon) for i, (label, icon) in enumerate(entries))
        font_px = max(10.0, tick_font_px * 0.9)
        swatch_w = int(max(10, font_px * 1.6))
        swatch_h = int(max(6, font_px * 0.9))
        item_gap = int(max(3, font_px * 0.5))
        pad = int(max(5, font_px * 0.55))
        text_w = max(text_size(label, font_size_px=font_px)[0] for label, _ in entries)
        item_h = max(swatch_h, int(round(font_px)))
        return LegendLayout(
            entries=entries,
            font_px=font_px,
            swatch_w=swatch_w,
            swatch_h=swatch_h,
            item_gap=item_gap,
            pad=pad,
            item_h=item_h,
            box_w=pad * 2 + swatch_w + 6 + text_w,
            box_h=pad * 2 + len(entries) * item_h + (len(entries) - 1) * item_gap,
        )

    def _draw_legend(self, canvas: np.ndarray, layout: LegendLayout, x0: int, y0: int, w: int, h: int) -> None:
        box_x = max(x0 + 2, x0 + w - layout.box_w - 6)
        box_y = y0 + 6
        if box_y + layout.box_h > y0 + h:
            return
        blend_region(canvas, box_x, box_y, box_x + layout.box_w, box_y + layout.box_h, self.style.legend_bg_color)
        draw_hline(canvas, box_x, box_x + layout.box_w - 1, box_y, self.style.frame_color)
        draw_hline(canvas, box_x, box_x + layout.box_w - 1, box_y + layout.box_h - 1, self.style.frame_color)
        draw_vline(canvas, box_x, box_y, box_y + layout.box_h - 1, self.style.frame_color)
        draw_vline(canvas, box_x + layout.box_w - 1, box_y, box_y + layout.box_h - 1, self.style.frame_color)

        for i, (label, icon) in enumerate(layout.entries):
            row_y = box_y + layout.pad + i * (layout.item_h + layout.item_gap) + layout.item_h // 2
            sw_x0 = box_x + layout.pad
            sw_x1 = sw_x0 + layout.swatch_w
            if icon.kind == "square":
                half = layout.swatch_h // 2
                blend_region(canvas, sw_x0, row_y - half, sw_x1, row_y - half + layout.swatch_h, icon.color)
            else:
                draw_hline(canvas, sw_x0, sw_x1 - 1, row_y, icon.color)
            draw_text(
                canvas,
                sw_x1 + 6,
                row_y,
                label,
                self.style.text_color,
                font_size_px=layout.font_px,
                v_anchor="middle",
            )

    def save(self, path: str | Path) -> Path:
        out = Path(path)
        Image.fromarray(self.to_rgba()).save(out)
        LOGGER.info("wrote %s", out)
        return out
