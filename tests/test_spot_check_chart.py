from __future__ import annotations

import datetime as dt
import unittest

import numpy as np

from residual_plot.coords import AxisLayer, Rect
from residual_plot.highlight import TouchTracker, build_index, parse_touch_event
from residual_plot.models import Forecast, Sample, TimeWindow
from residual_plot.points import AxisValue, ChartPoint
from residual_plot.raster import new_canvas
from residual_plot.scales import AxisTick
from residual_plot.settings import LabelSettings
from residual_plot.spot_check import SPOT_CHECK_SUBTITLE, SpotCheckResidualChart
from residual_plot.time_format import TimeLabelFormatter
from residual_plot.units import GlucoseUnit, Quantity


UTC = dt.timezone.utc
FRAME = Rect(0, 0, 320, 200)
TINT = (0, 122, 255, 255)


def _at(hour: int, minute: int = 0) -> dt.datetime:
    return dt.datetime(2026, 10, 18, hour, minute, tzinfo=UTC)


def _residual(hour: int, value: float) -> Sample:
    return Sample(_at(hour), Quantity(value, GlucoseUnit.MG_DL))


def _chart(residuals, *, interaction=None) -> SpotCheckResidualChart:
    return SpotCheckResidualChart(
        TimeWindow(_at(9), _at(15)),
        actual_glucose=[],
        forecast=Forecast(_at(9), tuple(residuals)),
        glucose_unit=GlucoseUnit.MG_DL,
        date_formatter=lambda when: when.strftime("%b %d %H:%M"),
        interaction=interaction,
        time_formatter=TimeLabelFormatter("%H:%M:%S"),
    )


class SpotCheckChartTests(unittest.TestCase):
    def test_x_ticks_built_once_at_construction(self) -> None:
        component = _chart([_residual(12, 0.0)])
        self.assertEqual([t.label for t in component.x_ticks], ["9:00", "12:00", "15:00"])
        self.assertEqual([t.hidden for t in component.x_ticks], [True, False, True])
        chart = component.generate_chart(FRAME)
        assert chart is not None
        self.assertEqual(chart.layer("x_axis").ticks, component.x_ticks)

    def test_layer_order_without_interaction(self) -> None:
        chart = _chart([_residual(10, 1.0), _residual(12, -1.0)]).generate_chart(FRAME)
        assert chart is not None
        self.assertEqual(chart.layer_kinds(), ("grid", "x_axis", "y_axis", "scatter"))

    def test_layer_order_with_interaction(self) -> None:
        chart = _chart([_residual(10, 1.0)], interaction=TouchTracker()).generate_chart(FRAME)
        assert chart is not None
        kinds = chart.layer_kinds()
        self.assertEqual(kinds, ("grid", "x_axis", "y_axis", "highlight", "scatter"))
        self.assertLess(kinds.index("grid"), kinds.index("x_axis"))
        self.assertLess(kinds.index("y_axis"), kinds.index("highlight"))
        self.assertLess(kinds.index("highlight"), kinds.index("scatter"))

    def test_frames_and_grid_values(self) -> None:
        chart = _chart([_residual(12, 0.0)]).generate_chart(FRAME)
        assert chart is not None
        self.assertEqual(chart.frame, FRAME)
        self.assertEqual(chart.inner_frame, Rect(36.0, 12.0, 276.0, 162.0))
        grid = chart.layer("grid")
        self.assertEqual([t.position for t in grid.x_values], [_at(12).timestamp()])
        self.assertEqual([t.position for t in grid.y_values], [-2.0, 0.0, 2.0])

    def test_zero_residuals_produce_symmetric_value_axis(self) -> None:
        chart = _chart([_residual(h, 0.0) for h in (10, 11, 12)]).generate_chart(FRAME)
        assert chart is not None
        self.assertEqual([t.position for t in chart.layer("y_axis").ticks], [-2.0, 0.0, 2.0])

    def test_empty_residuals_yield_no_chart(self) -> None:
        component = _chart([])
        self.assertIsNone(component.generate_chart(FRAME))
        self.assertIsNone(component.last_chart)
        self.assertIsNone(component.render(FRAME))

    def test_absent_chart_clears_previous(self) -> None:
        component = _chart([_residual(12, 0.0)])
        self.assertIsNotNone(component.generate_chart(FRAME))
        self.assertIsNone(component.generate_chart(Rect(0, 0, 20, 20)))
        self.assertIsNone(component.last_chart)

    def test_repeated_renders_are_identical(self) -> None:
        residuals = [_residual(10, 3.0), _residual(12, -5.0), _residual(14, 0.5)]
        for interaction in (None, TouchTracker()):
            with self.subTest(interaction=interaction):
                component = _chart(residuals, interaction=interaction)
                first = component.generate_chart(FRAME)
                second = component.on_render_requested(FRAME)
                self.assertIsNotNone(first)
                self.assertEqual(first, second)
                self.assertIs(component.last_chart, second)
                self.assertTrue(np.array_equal(first.render(), second.render()))

    def test_render_draws_points_above_grid(self) -> None:
        canvas = _chart([_residual(12, 0.0)]).render(FRAME)
        assert canvas is not None
        self.assertEqual(canvas.shape, (200, 320, 4))
        self.assertEqual(canvas.dtype, np.uint8)
        self.assertEqual(tuple(int(c) for c in canvas[93, 174]), TINT)
        self.assertEqual(int(canvas[0, 0, 3]), 0)

    def test_cell_content_binding(self) -> None:
        component = _chart([_residual(12, 0.0)])
        content = component.cell_content()
        self.assertEqual(content.title, "Oct 18 09:00")
        self.assertEqual(content.subtitle, SPOT_CHECK_SUBTITLE)
        pixels = content.chart_generator(FRAME)
        assert pixels is not None
        self.assertEqual(pixels.shape, (200, 320, 4))

    def test_highlight_index_only_with_interaction(self) -> None:
        plain = _chart([_residual(12, 0.0)])
        plain.generate_chart(FRAME)
        self.assertIsNone(plain.highlight_index)

        tracker = TouchTracker()
        interactive = _chart([_residual(10, 1.0), _residual(12, -1.0), _residual(14, 0.5)], interaction=tracker)
        interactive.generate_chart(FRAME)
        index = interactive.highlight_index
        assert index is not None
        self.assertIsNone(index.highlighted_point())
        tracker.handle_event("touch", {"phase": "began", "x": 180.0, "y": 60.0})
        self.assertEqual(index.highlighted_point(), 1)
        tracker.handle_event("touch", {"phase": "moved", "x": 300.0, "y": 60.0})
        self.assertEqual(index.highlighted_point(), 2)
        tracker.handle_event("touch", {"phase": "ended", "x": 300.0, "y": 60.0})
        self.assertIsNone(index.highlighted_point())


def _axis(kind: str) -> AxisLayer:
    ticks = (AxisTick(0.0, "0"), AxisTick(100.0, "100"))
    return AxisLayer(kind, ticks, Rect(0, 0, 100, 100), (0, 0, 0, 255), LabelSettings())  # type: ignore[arg-type]


def _pt(x: float, y: float = 50.0) -> ChartPoint:
    return ChartPoint(x=AxisValue(x, f"x{x:g}"), y=AxisValue(y, f"y{y:g}"))


class HighlightIndexTests(unittest.TestCase):
    def test_nearest_by_horizontal_distance(self) -> None:
        index = build_index(_axis("x_axis"), _axis("y_axis"), LabelSettings(), [_pt(20), _pt(40), _pt(90)], TINT, TouchTracker())
        self.assertEqual(index.nearest(0.0), 0)
        self.assertEqual(index.nearest(36.0), 1)
        self.assertEqual(index.nearest(99.0), 2)

    def test_ties_go_to_earliest_point(self) -> None:
        index = build_index(_axis("x_axis"), _axis("y_axis"), LabelSettings(), [_pt(20), _pt(40)], TINT, TouchTracker())
        self.assertEqual(index.nearest(30.0), 0)
        same_x = build_index(_axis("x_axis"), _axis("y_axis"), LabelSettings(), [_pt(50, 10), _pt(50, 90)], TINT, TouchTracker())
        self.assertEqual(same_x.nearest(70.0), 0)

    def test_no_points_or_outside_touch(self) -> None:
        empty = build_index(_axis("x_axis"), _axis("y_axis"), LabelSettings(), [], TINT, TouchTracker())
        self.assertIsNone(empty.nearest(10.0))
        index = build_index(_axis("x_axis"), _axis("y_axis"), LabelSettings(), [_pt(20)], TINT, TouchTracker())
        self.assertIsNone(index.point_at((150.0, 50.0)))
        self.assertEqual(index.point_at((60.0, 50.0)), 0)

    def test_highlight_layer_draws_only_while_touching(self) -> None:
        tracker = TouchTracker()
        index = build_index(_axis("x_axis"), _axis("y_axis"), LabelSettings(), [_pt(20)], TINT, tracker)
        layer = index.highlight_layer
        self.assertEqual(layer.kind, "highlight")

        idle = new_canvas(100, 100)
        layer.draw(idle, index.inner_frame)
        self.assertFalse(np.any(idle[:, :, 3]))

        tracker.handle_event("touch", {"phase": "began", "x": 25.0, "y": 50.0})
        active = new_canvas(100, 100)
        layer.draw(active, index.inner_frame)
        self.assertEqual(tuple(int(c) for c in active[50, 20]), TINT)


class TouchEventTests(unittest.TestCase):
    def test_parse_rejects_other_events(self) -> None:
        self.assertIsNone(parse_touch_event("press", {"phase": "began", "x": 1, "y": 2}))
        self.assertIsNone(parse_touch_event("touch", {"phase": "hover", "x": 1, "y": 2}))
        self.assertIsNone(parse_touch_event("touch", {"phase": "began", "y": 2}))
        self.assertIsNone(parse_touch_event("touch", "began"))

    def test_tracker_ignores_unparsed_events(self) -> None:
        tracker = TouchTracker()
        self.assertFalse(tracker.handle_event("press", {"phase": "down"}))
        self.assertTrue(tracker.handle_event("touch", {"phase": "began", "x": "3", "y": 4}))
        self.assertEqual(tracker.touch_location(), (3.0, 4.0))
        self.assertTrue(tracker.handle_event("touch", {"phase": "cancelled", "x": 0, "y": 0}))
        self.assertIsNone(tracker.touch_location())


if __name__ == "__main__":
    unittest.main()
