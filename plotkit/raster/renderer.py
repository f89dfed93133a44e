from __future__ import annotations

from typing import Sequence

import numpy as np

from plotkit.geometry import Point, Rect
from plotkit.raster.canvas import RGBA, blend_region
from plotkit.raster.draw_lines import draw_polyline
from plotkit.raster.hatching import hatch_mask
from plotkit.renderer import Renderer
from plotkit.series import Hatching, validate_hatch_pattern


DEFAULT_HATCH_COLOR: RGBA = (0, 0, 0, 255)


class RasterRenderer(Renderer):
    """Draws plot-local geometry into a region of an (H, W, 4) uint8 canvas."""

    def __init__(
        self,
        canvas: np.ndarray,
        *,
        plot_x0: int = 0,
        plot_y0: int = 0,
        plot_w: int | None = None,
        plot_h: int | None = None,
        hatch_color: RGBA = DEFAULT_HATCH_COLOR,
    ) -> None:
        if canvas.dtype != np.uint8 or canvas.ndim != 3 or canvas.shape[2] != 4:
            raise ValueError("canvas must be a uint8 array of shape (H, W, 4)")
        self.canvas = canvas
        self.plot_x0 = int(plot_x0)
        self.plot_y0 = int(plot_y0)
        self.plot_w = int(plot_w) if plot_w is not None else canvas.shape[1] - self.plot_x0
        self.plot_h = int(plot_h) if plot_h is not None else canvas.shape[0] - self.plot_y0
        if self.plot_w <= 0 or self.plot_h <= 0:
            raise ValueError("plot region must be non-empty")
        self.hatch_color = hatch_color

    def rect_to_pixels(self, rect: Rect) -> tuple[int, int, int, int]:
        """Half-open canvas box ``(x0, y0, x1, y1)`` for a plot-local rect, clipped to the plot region."""
        left = self.plot_x0 + int(np.rint(rect.x))
        right = self.plot_x0 + int(np.rint(rect.max_x))
        top = self.plot_y0 + self.plot_h - int(np.rint(rect.max_y))
        bottom = self.plot_y0 + self.plot_h - int(np.rint(rect.y))
        x0 = max(self.plot_x0, min(left, right))
        x1 = min(self.plot_x0 + self.plot_w, max(left, right))
        y0 = max(self.plot_y0, min(top, bottom))
        y1 = min(self.plot_y0 + self.plot_h, max(top, bottom))
        return (x0, y0, x1, y1)

    def point_to_pixels(self, point: Point) -> tuple[int, int]:
        return (
            self.plot_x0 + int(np.rint(point.x)),
            self.plot_y0 + self.plot_h - int(np.rint(point.y)),
        )

    def draw_solid_rect(self, rect: Rect, fill_color: RGBA, hatch_pattern: Hatching = "none") -> None:
        validate_hatch_pattern(hatch_pattern)
        x0, y0, x1, y1 = self.rect_to_pixels(rect)
        if x1 <= x0 or y1 <= y0:
            return
        blend_region(self.canvas, x0, y0, x1, y1, fill_color)
        mask = hatch_mask(hatch_pattern, x1 - x0, y1 - y0)
        if mask is not None:
            blend_region(self.canvas, x0, y0, x1, y1, self.hatch_color, mask=mask)

    def draw_polyline(self, points: Sequence[Point], color: RGBA, thickness: int = 1) -> None:
        if len(points) < 2:
            return
        pixels = [self.point_to_pixels(p) for p in points]
        xs = np.asarray([px for px, _ in pixels], dtype=np.int32)
        ys = np.asarray([py for _, py in pixels], dtype=np.int32)
        draw_polyline(self.canvas, xs, ys, color=color, width=max(1, int(thickness)))
