from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

import numpy as np
from PIL import Image

from plotkit import Figure, PlotDataError, RasterRenderer, bar_graph, figure, histogram
from plotkit.geometry import Point, Rect
from plotkit.raster import hatch_mask, new_canvas, text_size


RED = (255, 0, 0, 255)
WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


class RasterRendererTests(unittest.TestCase):
    def test_rect_is_flipped_to_canvas_rows(self) -> None:
        canvas = new_canvas(100, 100, color=BLACK)
        renderer = RasterRenderer(canvas)
        renderer.draw_solid_rect(Rect(10, 0, 20, 30), RED)

        self.assertEqual(renderer.rect_to_pixels(Rect(10, 0, 20, 30)), (10, 70, 30, 100))
        self.assertEqual(tuple(canvas[99, 15]), RED)
        self.assertEqual(tuple(canvas[70, 29]), RED)
        self.assertEqual(tuple(canvas[69, 15]), BLACK)
        self.assertEqual(tuple(canvas[80, 9]), BLACK)

    def test_rect_is_clipped_to_plot_region(self) -> None:
        canvas = new_canvas(100, 100, color=BLACK)
        renderer = RasterRenderer(canvas, plot_x0=10, plot_y0=10, plot_w=50, plot_h=50)
        renderer.draw_solid_rect(Rect(-20, -20, 200, 200), RED)

        self.assertEqual(tuple(canvas[10, 10]), RED)
        self.assertEqual(tuple(canvas[59, 59]), RED)
        self.assertEqual(tuple(canvas[5, 5]), BLACK)
        self.assertEqual(tuple(canvas[60, 60]), BLACK)

    def test_hatch_overlays_fill(self) -> None:
        canvas = new_canvas(100, 100, color=BLACK)
        renderer = RasterRenderer(canvas, hatch_color=WHITE)
        renderer.draw_solid_rect(Rect(10, 0, 20, 30), RED, "horizontal")

        self.assertEqual(tuple(canvas[70, 15]), WHITE)
        self.assertEqual(tuple(canvas[71, 15]), RED)
        self.assertEqual(tuple(canvas[78, 15]), WHITE)

    def test_unknown_hatch_is_rejected(self) -> None:
        renderer = RasterRenderer(new_canvas(10, 10))
        with self.assertRaises(ValueError):
            renderer.draw_solid_rect(Rect(0, 0, 5, 5), RED, "zigzag")  # type: ignore[arg-type]

    def test_canvas_must_be_rgba_uint8(self) -> None:
        with self.assertRaises(ValueError):
            RasterRenderer(np.zeros((10, 10, 3), dtype=np.uint8))
        with self.assertRaises(ValueError):
            RasterRenderer(np.zeros((10, 10, 4), dtype=np.float32))

    def test_polyline_uses_plot_local_coordinates(self) -> None:
        canvas = new_canvas(100, 100, color=BLACK)
        renderer = RasterRenderer(canvas)
        renderer.draw_polyline([Point(0, 50), Point(99, 50)], RED)
        self.assertEqual(tuple(canvas[50, 40]), RED)
        self.assertEqual(tuple(canvas[49, 40]), BLACK)


class HatchMaskTests(unittest.TestCase):
    def test_none_has_no_mask(self) -> None:
        self.assertIsNone(hatch_mask("none", 10, 10))
        self.assertIsNone(hatch_mask("grid", 0, 10))

    def test_masks_match_rect_shape(self) -> None:
        for pattern in ("forward_slash", "backward_slash", "vertical", "horizontal", "grid", "cross", "hollow_circle", "filled_circle"):
            mask = hatch_mask(pattern, 17, 9)
            with self.subTest(pattern=pattern):
                assert mask is not None
                self.assertEqual(mask.shape, (9, 17))
                self.assertEqual(mask.dtype, np.bool_)
                self.assertTrue(mask.any())
                self.assertFalse(mask.all())

    def test_grid_is_union_of_lines(self) -> None:
        grid = hatch_mask("grid", 16, 16)
        vertical = hatch_mask("vertical", 16, 16)
        horizontal = hatch_mask("horizontal", 16, 16)
        assert grid is not None and vertical is not None and horizontal is not None
        self.assertTrue(np.array_equal(grid, vertical | horizontal))

    def test_unknown_pattern_raises(self) -> None:
        with self.assertRaises(ValueError):
            hatch_mask("zigzag", 4, 4)


class FigureTests(unittest.TestCase):
    def _chart(self):
        chart = bar_graph(["a", "b", "c"], [3, -1, 2], label="sales", color=RED, enable_grid=True)
        chart.add_stack_values([1, 1, 1], label="returns", color=(0, 200, 0))
        return chart

    def test_render_is_deterministic(self) -> None:
        fig = figure(self._chart(), 400, 300, title="Sales", x_label="year", y_label="units")
        first = fig.to_rgba()
        second = fig.to_rgba()
        self.assertEqual(first.shape, (300, 400, 4))
        self.assertEqual(first.dtype, np.uint8)
        self.assertTrue(np.array_equal(first, second))

    def test_bars_land_inside_plot_rect(self) -> None:
        fig = figure(self._chart(), 400, 300)
        rgba = fig.to_rgba()
        rect = fig.last_plot_rect()
        assert rect is not None
        x0, y0, w, h = rect
        red = np.all(rgba == np.asarray(RED, dtype=np.uint8), axis=2)
        ys, xs = np.nonzero(red)
        self.assertGreater(ys.size, 0)
        self.assertTrue(np.all((xs >= x0) & (xs < x0 + w)))
        self.assertTrue(np.all((ys >= y0) & (ys < y0 + h)))
        markers = fig.last_markers()
        assert markers is not None
        self.assertEqual(markers.x_markers_text, ["a", "b", "c"])

    def test_horizontal_chart_renders(self) -> None:
        chart = bar_graph(["a", "b"], [5, 10], orientation="horizontal", enable_grid=True)
        rgba = figure(chart, 320, 240).to_rgba()
        self.assertEqual(rgba.shape, (240, 320, 4))

    def test_histogram_renders(self) -> None:
        hist = histogram([1, 2, 2, 3, 11, 12, 19], bins=4, label="a", color=RED)
        hist.add_stack_series([4, 5, 6], label="b")
        rgba = figure(hist, 320, 240).to_rgba()
        self.assertTrue(np.any(np.all(rgba == np.asarray(RED, dtype=np.uint8), axis=2)))

    def test_save_writes_png(self) -> None:
        fig = figure(self._chart(), 320)
        with tempfile.TemporaryDirectory() as tmp:
            out = fig.save(Path(tmp) / "bars.png")
            with Image.open(out) as image:
                self.assertEqual(image.size, (320, 240))

    def test_too_small_figure_raises(self) -> None:
        with self.assertRaises(PlotDataError):
            Figure(chart=self._chart(), width=10, height=10).to_rgba()

    def test_missing_dimensions_follow_the_aspect_ratio(self) -> None:
        fig = figure(self._chart())
        self.assertEqual((fig.width, fig.height), (800, 600))
        fig = figure(self._chart(), height=300)
        self.assertEqual((fig.width, fig.height), (400, 300))
        fig = figure(self._chart(), 500, 200)
        self.assertEqual((fig.width, fig.height), (500, 200))
        with self.assertRaises(ValueError):
            figure(self._chart(), height=0)

    def test_figure_size_validation(self) -> None:
        with self.assertRaises(ValueError):
            figure(self._chart(), 0, 100)
        with self.assertRaises(ValueError):
            figure(self._chart(), 100, 100, aspect_ratio=0)

    def test_rotated_text_swaps_extent(self) -> None:
        w, h = text_size("label", font_size_px=12)
        self.assertEqual(text_size("label", font_size_px=12, rotate_deg=90), (h, w))


if __name__ == "__main__":
    unittest.main()
