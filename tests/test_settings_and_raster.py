from __future__ import annotations

import datetime as dt
import unittest

import numpy as np

from residual_plot.raster import draw_hline, draw_markers, draw_text, draw_vline, fill_rect, new_canvas, text_size
from residual_plot.settings import (
    DEFAULT_PALETTE,
    DEFAULT_SETTINGS,
    parse_color,
    validate_chart_settings,
    validate_color_palette,
)


class ChartSettingsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = validate_chart_settings()
        self.assertEqual(settings, DEFAULT_SETTINGS)
        self.assertEqual(settings.x_tick_multiple, dt.timedelta(hours=3))
        self.assertEqual((settings.y_min_segments, settings.y_max_segments), (2, 4))
        self.assertEqual(settings.y_label_reservation, 30.0)

    def test_partial_override(self) -> None:
        settings = validate_chart_settings({"y_tick_multiple": 5.0, "x_max_segments": 6})
        self.assertEqual(settings.y_tick_multiple, 5.0)
        self.assertEqual(settings.x_max_segments, 6)
        self.assertEqual(settings.x_min_segments, DEFAULT_SETTINGS.x_min_segments)

    def test_unknown_setting_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "Unknown chart setting"):
            validate_chart_settings({"label_width": 30})

    def test_segment_ordering_enforced(self) -> None:
        with self.assertRaisesRegex(ValueError, "y_max_segments"):
            validate_chart_settings({"y_min_segments": 5, "y_max_segments": 4})

    def test_reservations_must_be_non_negative(self) -> None:
        with self.assertRaisesRegex(ValueError, "non-negative"):
            validate_chart_settings({"y_label_reservation": -1})

    def test_time_multiple_must_be_positive_timedelta(self) -> None:
        with self.assertRaisesRegex(ValueError, "x_tick_multiple"):
            validate_chart_settings({"x_tick_multiple": 3})
        with self.assertRaisesRegex(ValueError, "x_tick_multiple"):
            validate_chart_settings({"x_tick_multiple": dt.timedelta(0)})

    def test_point_size_must_be_positive_integer(self) -> None:
        with self.assertRaisesRegex(ValueError, "positive integer"):
            validate_chart_settings({"point_size": 0})


class PaletteTests(unittest.TestCase):
    def test_parse_hex_and_tuples(self) -> None:
        self.assertEqual(parse_color("#007AFF"), (0, 122, 255, 255))
        self.assertEqual(parse_color("#007AFF80"), (0, 122, 255, 128))
        self.assertEqual(parse_color((1, 2, 3)), (1, 2, 3, 255))

    def test_invalid_colors_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "hex color"):
            parse_color("blue")
        with self.assertRaisesRegex(ValueError, r"\[0, 255\]"):
            parse_color((0, 0, 300))

    def test_palette_override(self) -> None:
        palette = validate_color_palette({"glucose_tint": "#FF0000"})
        self.assertEqual(palette.glucose_tint, (255, 0, 0, 255))
        self.assertEqual(palette.grid, DEFAULT_PALETTE.grid)
        with self.assertRaisesRegex(ValueError, "Unknown palette color"):
            validate_color_palette({"background": "#000000"})


class RasterTests(unittest.TestCase):
    def test_new_canvas_is_transparent(self) -> None:
        canvas = new_canvas(8, 4)
        self.assertEqual(canvas.shape, (4, 8, 4))
        self.assertFalse(np.any(canvas))

    def test_lines_are_clipped_to_canvas(self) -> None:
        canvas = new_canvas(10, 10)
        draw_hline(canvas, -5, 50, 3, (255, 0, 0, 255))
        draw_vline(canvas, 4, -2, 20, (0, 255, 0, 255))
        draw_hline(canvas, 0, 9, 40, (0, 0, 255, 255))
        self.assertEqual(tuple(canvas[3, 0]), (255, 0, 0, 255))
        self.assertEqual(tuple(canvas[9, 4]), (0, 255, 0, 255))
        self.assertEqual(int(canvas[5, 5, 3]), 0)

    def test_half_alpha_blends_over_transparent(self) -> None:
        canvas = new_canvas(4, 4)
        fill_rect(canvas, 0, 0, 3, 3, (200, 100, 50, 128))
        self.assertEqual(tuple(int(c) for c in canvas[1, 1, :3]), (200, 100, 50))
        self.assertEqual(int(canvas[1, 1, 3]), 128)

    def test_markers_centered_on_points(self) -> None:
        canvas = new_canvas(20, 20)
        draw_markers(canvas, [(10.0, 10.0)], (9, 9, 9, 255), size=4)
        covered = np.argwhere(canvas[:, :, 3] > 0)
        self.assertEqual(covered.min(axis=0).tolist(), [8, 8])
        self.assertEqual(covered.max(axis=0).tolist(), [11, 11])

    def test_markers_are_round(self) -> None:
        canvas = new_canvas(20, 20)
        draw_markers(canvas, [(10.0, 10.0)], (9, 9, 9, 255), size=8)
        self.assertEqual(int(canvas[10, 10, 3]), 255)
        self.assertEqual(int(canvas[6, 10, 3]), 255)
        for row, col in ((6, 6), (6, 13), (13, 6), (13, 13)):
            self.assertEqual(int(canvas[row, col, 3]), 0)

    def test_single_pixel_marker_and_clipping(self) -> None:
        canvas = new_canvas(6, 6)
        draw_markers(canvas, [(2.5, 3.5), (-10.0, -10.0)], (9, 9, 9, 255), size=1)
        self.assertEqual(np.argwhere(canvas[:, :, 3] > 0).tolist(), [[3, 2]])
        draw_markers(canvas, [(0.0, 0.0)], (9, 9, 9, 255), size=4)
        self.assertEqual(int(canvas[0, 0, 3]), 255)

    def test_text_draws_coverage(self) -> None:
        canvas = new_canvas(120, 40)
        draw_text(canvas, 4, 4, "12 PM", (255, 255, 255, 255))
        self.assertTrue(np.any(canvas[:, :, 3] > 0))
        w, h = text_size("12 PM")
        self.assertGreater(w, 0)
        self.assertGreater(h, 0)


if __name__ == "__main__":
    unittest.main()
