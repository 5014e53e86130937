from __future__ import annotations

import argparse
import datetime as dt
import logging
import math
from pathlib import Path

from PIL import Image

from residual_plot import (
    Forecast,
    GlucoseUnit,
    Quantity,
    Rect,
    Sample,
    SpotCheckResidualChart,
    TimeWindow,
    TouchTracker,
)


def _synthetic_forecast(window: TimeWindow, step_minutes: int) -> Forecast:
    residuals: list[Sample] = []
    when = window.start
    i = 0
    while when <= window.end:
        value = 6.0 * math.sin(i / 5.0) + 1.5 * math.cos(i / 2.0)
        residuals.append(Sample(when, Quantity(value, GlucoseUnit.MG_DL)))
        when += dt.timedelta(minutes=step_minutes)
        i += 1
    return Forecast(window.start, tuple(residuals))


def main() -> int:
    parser = argparse.ArgumentParser(description="Render a residuals spot-check chart to PNG.")
    parser.add_argument("output", type=Path)
    parser.add_argument("--width", type=int, default=375)
    parser.add_argument("--height", type=int, default=170)
    parser.add_argument("--hours", type=float, default=6.0)
    parser.add_argument("--step-minutes", type=int, default=5)
    parser.add_argument("--touch-x", type=float, default=None, help="simulate a touch at this x pixel")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    start = dt.datetime.now(dt.timezone.utc).replace(minute=0, second=0, microsecond=0)
    window = TimeWindow(start, start + dt.timedelta(hours=args.hours))
    tracker = TouchTracker() if args.touch_x is not None else None
    chart = SpotCheckResidualChart(
        window,
        actual_glucose=[],
        forecast=_synthetic_forecast(window, args.step_minutes),
        glucose_unit=GlucoseUnit.MG_DL,
        date_formatter=lambda when: when.strftime("%b %d, %H:%M"),
        interaction=tracker,
    )
    if tracker is not None:
        tracker.handle_event("touch", {"phase": "began", "x": args.touch_x, "y": args.height / 2.0})

    content = chart.cell_content()
    pixels = content.chart_generator(Rect(0, 0, args.width, args.height))
    if pixels is None:
        logging.getLogger(__name__).error("not enough data to draw %s", content.title)
        return 1
    Image.fromarray(pixels).save(args.output)
    print(f"{content.title} / {content.subtitle} -> {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
