from __future__ import annotations

import unittest
from typing import Sequence

from plotkit import BarGraph, InvalidInputError, Pair, PlotDataError, Series, Size, bar_graph
from plotkit.geometry import PlotMarkers, Point, Rect
from plotkit.renderer import Renderer
from plotkit.series import RGBA, Hatching


class RecordingRenderer(Renderer):
    def __init__(self) -> None:
        self.rects: list[tuple[Rect, RGBA, str]] = []
        self.polylines: list[tuple[list[Point], RGBA, int]] = []

    def draw_solid_rect(self, rect: Rect, fill_color: RGBA, hatch_pattern: Hatching = "none") -> None:
        self.rects.append((rect, fill_color, hatch_pattern))

    def draw_polyline(self, points: Sequence[Point], color: RGBA, thickness: int = 1) -> None:
        self.polylines.append((list(points), color, thickness))


def _sales_graph(orientation: str = "vertical") -> BarGraph:
    graph = BarGraph(orientation=orientation)  # type: ignore[arg-type]
    graph.add_series(
        ["2008", "2009", "2010", "2011"],
        [320, -100, 420, 500],
        label="Plot 1",
        orientation=orientation,  # type: ignore[arg-type]
    )
    graph.add_stack_values([50, 50, 50, 50], label="Plot 2", color=(255, 165, 0))
    return graph


class SeriesManagementTests(unittest.TestCase):
    def test_mismatched_x_and_y_fail_fast(self) -> None:
        graph = BarGraph()
        with self.assertRaises(InvalidInputError):
            graph.add_series(["a", "b", "c"], [1.0, 2.0])
        self.assertTrue(issubclass(InvalidInputError, PlotDataError))

    def test_x_defaults_to_indices(self) -> None:
        graph = bar_graph(y=[3.0, 4.0, 5.0])
        self.assertEqual(graph.series.labels(), [0, 1, 2])

    def test_stack_with_wrong_count_is_rejected_with_warning(self) -> None:
        graph = _sales_graph()
        bad = Series.from_xy(["a", "b", "c"], [1, 2, 3], label="short")
        with self.assertLogs("plotkit.bar_graph", level="WARNING") as logs:
            graph.add_stack_series(bad)
        self.assertNotIn(bad, graph.stack_series)
        self.assertEqual(len(graph.stack_series), 1)
        self.assertIn("does not match", logs.output[0])

    def test_stack_is_rejected_when_primary_is_empty(self) -> None:
        graph = BarGraph()
        with self.assertLogs("plotkit.bar_graph", level="WARNING"):
            graph.add_stack_series(Series())
        self.assertEqual(graph.stack_series, [])

    def test_stack_values_reuse_primary_labels(self) -> None:
        graph = _sales_graph()
        self.assertEqual(graph.stack_series[0].labels(), ["2008", "2009", "2010", "2011"])
        self.assertEqual(graph.stack_series[0].color, (255, 165, 0, 255))

    def test_stack_values_with_wrong_length_are_discarded(self) -> None:
        graph = _sales_graph()
        with self.assertLogs("plotkit.bar_graph", level="WARNING"):
            graph.add_stack_values([1, 2], label="bad")
        self.assertEqual(len(graph.stack_series), 1)

    def test_replacing_primary_drops_mismatched_stacks(self) -> None:
        graph = _sales_graph()
        with self.assertLogs("plotkit.bar_graph", level="WARNING"):
            graph.add_series(["x", "y"], [1, 2])
        self.assertEqual(graph.stack_series, [])

    def test_add_series_values_accepts_pairs(self) -> None:
        graph = BarGraph().add_series_values([Pair("a", 1), Pair("b", 2)], label="pairs")
        self.assertEqual(graph.series.count, 2)
        self.assertEqual(graph.series[1], Pair("b", 2.0))
        with self.assertRaises(PlotDataError):
            BarGraph().add_series_values([("a", 1)])  # type: ignore[list-item]

    def test_add_series_values_rejects_non_finite_and_non_numeric(self) -> None:
        for bad in (float("inf"), float("-inf"), float("nan"), "x", None):
            with self.subTest(value=bad):
                with self.assertRaises(PlotDataError):
                    BarGraph().add_series_values([Pair("a", 1), Pair("b", bad)])  # type: ignore[arg-type]

    def test_legend_lists_primary_then_stacks(self) -> None:
        graph = _sales_graph()
        graph.add_stack_values([1, 1, 1, 1], label="Plot 3")
        labels = [label for label, _ in graph.legend_labels]
        self.assertEqual(labels, ["Plot 1", "Plot 2", "Plot 3"])
        self.assertTrue(all(icon.kind == "square" for _, icon in graph.legend_labels))

    def test_invalid_orientation_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            BarGraph(orientation="diagonal")  # type: ignore[arg-type]

    def test_dataframe_columns(self) -> None:
        try:
            import pandas as pd
        except Exception:
            self.skipTest("pandas is not installed")

        df = pd.DataFrame({"year": ["a", "b"], "sales": [1.5, 2.5]})
        graph = bar_graph("year", "sales", data=df)
        self.assertEqual(graph.series.labels(), ["a", "b"])
        self.assertEqual(graph.series.y_array().tolist(), [1.5, 2.5])


class LayoutTests(unittest.TestCase):
    def test_scaled_values_match_raw_count_after_layout(self) -> None:
        graph = _sales_graph()
        graph.calculate_scale_and_marker_locations(Size(400, 400))
        self.assertEqual(len(graph.series.scaled_values), graph.series.count)
        for stack in graph.stack_series:
            self.assertEqual(len(stack.scaled_values), stack.count)

    def test_value_axis_ticks_for_negative_data(self) -> None:
        graph = bar_graph(["a", "b", "c", "d"], [320, -100, 420, 500])
        markers = graph.calculate_scale_and_marker_locations(Size(400, 400))
        self.assertEqual(markers.y_markers_text, ["0", "100", "200", "300", "400", "500", "-100"])
        self.assertEqual(markers.x_markers, [50.0, 150.0, 250.0, 350.0])
        self.assertEqual(markers.x_markers_text, ["a", "b", "c", "d"])

    def test_origin_is_baseline_for_non_negative_data(self) -> None:
        graph = bar_graph(["a", "b"], [3, 7])
        graph.calculate_scale_and_marker_locations(Size(200, 100))
        layout = graph.last_layout()
        assert layout is not None
        self.assertEqual(layout.value_scale.origin, 0.0)

    def test_tick_count_is_bounded(self) -> None:
        for values in ([-99, 1], [-9999, 3], [0.25, 0.5], [1e9, -1e9]):
            for size in (Size(60, 60), Size(500, 2000), Size(3000, 700)):
                graph = bar_graph(["a", "b"], values)
                markers = graph.calculate_scale_and_marker_locations(size)
                with self.subTest(values=values, size=size):
                    self.assertLessEqual(markers.y_tick_count(), 50)

    def test_empty_series_is_a_no_op(self) -> None:
        graph = BarGraph()
        renderer = RecordingRenderer()
        markers = graph.draw(renderer, Size(300, 200))
        self.assertEqual(markers.x_tick_count(), 0)
        self.assertEqual(markers.y_tick_count(), 0)
        self.assertEqual(renderer.rects, [])
        self.assertIsNone(graph.last_layout())

    def test_single_point_takes_full_slot(self) -> None:
        graph = bar_graph(["only"], [5])
        markers = graph.calculate_scale_and_marker_locations(Size(200, 100))
        layout = graph.last_layout()
        assert layout is not None
        self.assertEqual(layout.bar_width, 200)
        (bar,) = graph.bar_rects(markers)
        self.assertAlmostEqual(bar.rect.x, 10.0)
        self.assertAlmostEqual(bar.rect.width, 180.0)

    def test_all_zero_series_uses_unit_scale(self) -> None:
        graph = bar_graph(["a", "b", "c"], [0, 0, 0])
        markers = graph.calculate_scale_and_marker_locations(Size(300, 200))
        layout = graph.last_layout()
        assert layout is not None
        self.assertEqual(layout.value_scale.scale, 1.0)
        self.assertEqual(markers.y_markers_text, ["0"])
        self.assertTrue(all(b.rect.height == 0.0 for b in graph.bar_rects(markers)))

    def test_orientation_change_invalidates_layout(self) -> None:
        graph = _sales_graph()
        graph.calculate_scale_and_marker_locations(Size(400, 400))
        self.assertIsNotNone(graph.last_layout())
        graph.orientation = "horizontal"
        self.assertIsNone(graph.last_layout())

    def test_bar_rects_require_layout(self) -> None:
        graph = _sales_graph()
        with self.assertRaises(PlotDataError):
            graph.bar_rects(PlotMarkers())


class GeometryTests(unittest.TestCase):
    def test_stack_layer_starts_at_top_of_primary_bar(self) -> None:
        graph = _sales_graph()
        markers = graph.calculate_scale_and_marker_locations(Size(400, 400))
        layout = graph.last_layout()
        assert layout is not None
        origin = layout.value_scale.origin
        rects = graph.bar_rects(markers)

        primary = rects[0]
        stacked = rects[1]
        self.assertEqual((primary.index, primary.layer), (0, 0))
        self.assertEqual((stacked.index, stacked.layer), (0, 1))
        self.assertAlmostEqual(primary.rect.y, origin)
        self.assertAlmostEqual(stacked.rect.y, primary.rect.max_y)
        self.assertAlmostEqual(stacked.rect.height, graph.stack_series[0].scaled_values[0].y - origin)

    def test_negative_primary_extends_below_origin(self) -> None:
        graph = _sales_graph()
        markers = graph.calculate_scale_and_marker_locations(Size(400, 400))
        layout = graph.last_layout()
        assert layout is not None
        origin = layout.value_scale.origin
        rects = graph.bar_rects(markers)

        negative = rects[2]
        self.assertEqual((negative.index, negative.layer), (1, 0))
        self.assertAlmostEqual(negative.rect.max_y, origin)
        self.assertAlmostEqual(negative.rect.y, graph.series.scaled_values[1].y)
        # positive stack value on a negative bar starts at the zero line
        self.assertAlmostEqual(rects[3].rect.y, origin)

    def test_negative_stack_layers_hang_below_origin(self) -> None:
        graph = BarGraph().add_series(["a"], [100], label="up")
        graph.add_stack_values([-50], label="down 1")
        graph.add_stack_values([-50], label="down 2")
        markers = graph.calculate_scale_and_marker_locations(Size(100, 400))
        layout = graph.last_layout()
        assert layout is not None
        origin = layout.value_scale.origin
        primary, first, second = graph.bar_rects(markers)

        self.assertAlmostEqual(origin, 200.0)
        self.assertAlmostEqual(primary.rect.y, origin)
        for layer in (first, second):
            self.assertLessEqual(layer.rect.max_y, origin + 1e-9)
            self.assertAlmostEqual(layer.rect.height, 90.0)
        self.assertAlmostEqual(first.rect.max_y, origin)
        self.assertAlmostEqual(second.rect.max_y, first.rect.y)
        self.assertAlmostEqual(second.rect.y, 20.0)

    def test_bars_are_inset_by_half_the_gutter(self) -> None:
        graph = _sales_graph()
        markers = graph.calculate_scale_and_marker_locations(Size(400, 400))
        rects = graph.bar_rects(markers)
        self.assertEqual([b.rect.x for b in rects[::2]], [10.0, 110.0, 210.0, 310.0])
        self.assertTrue(all(b.rect.width == 80.0 for b in rects))

    def test_horizontal_layout_is_transposed_vertical_layout(self) -> None:
        vertical = _sales_graph("vertical")
        horizontal = _sales_graph("horizontal")
        v_markers = vertical.calculate_scale_and_marker_locations(Size(400, 300))
        h_markers = horizontal.calculate_scale_and_marker_locations(Size(300, 400))

        self.assertEqual(h_markers.y_markers, v_markers.x_markers)
        self.assertEqual(h_markers.x_markers_text, v_markers.y_markers_text)
        v_rects = vertical.bar_rects(v_markers)
        h_rects = horizontal.bar_rects(h_markers)
        self.assertEqual(len(v_rects), len(h_rects))
        for v, h in zip(v_rects, h_rects):
            self.assertEqual(h.rect, v.rect.transposed())

    def test_draw_issues_rects_in_layer_order(self) -> None:
        graph = _sales_graph()
        graph.series.hatch_pattern = "grid"
        renderer = RecordingRenderer()
        graph.draw(renderer, Size(400, 400))

        self.assertEqual(len(renderer.rects), 8)
        colors = [color for _, color, _ in renderer.rects]
        self.assertEqual(colors[0::2], [graph.series.color] * 4)
        self.assertEqual(colors[1::2], [(255, 165, 0, 255)] * 4)
        self.assertEqual([h for _, _, h in renderer.rects[0::2]], ["grid"] * 4)


if __name__ == "__main__":
    unittest.main()
