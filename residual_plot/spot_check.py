from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
import logging
from typing import Callable, Protocol, Sequence

import numpy as np

from residual_plot.chart import Chart, compose
from residual_plot.coords import Rect, build_space
from residual_plot.highlight import HighlightIndex, InteractionHandle, build_index
from residual_plot.models import Forecast, Sample, TimeWindow
from residual_plot.points import ChartPoint, map_samples
from residual_plot.scales import AxisTick, generate_time_ticks, generate_value_ticks
from residual_plot.settings import (
    DEFAULT_PALETTE,
    DEFAULT_SETTINGS,
    ChartColorPalette,
    ChartSettings,
    guide_lines_settings_for,
    label_settings_for,
)
from residual_plot.time_format import TimeLabelFormatter
from residual_plot.units import GlucoseUnit


LOGGER = logging.getLogger(__name__)

SPOT_CHECK_SUBTITLE = "Residuals Spot Check"


@dataclass(frozen=True)
class CellContent:
    """What a host list cell shows: a title, a subtitle and a frame-to-pixels callback."""

    title: str
    subtitle: str
    chart_generator: Callable[[Rect], np.ndarray | None]


class ChartCellProvider(Protocol):
    def on_render_requested(self, frame: Rect) -> Chart | None:
        ...

    def cell_content(self) -> CellContent:
        ...


class SpotCheckResidualChart:
    """Scatter of forecast residuals over a fixed time window.

    The x ticks depend only on the window and are built once; the y ticks
    follow the residual values and are rebuilt on every render. When an
    interaction handle is supplied, each chart also carries a highlight layer
    for the point nearest to the current touch.
    """

    def __init__(
        self,
        window: TimeWindow,
        actual_glucose: Sequence[Sample],
        forecast: Forecast,
        glucose_unit: GlucoseUnit,
        date_formatter: Callable[[dt.datetime], str],
        *,
        palette: ChartColorPalette = DEFAULT_PALETTE,
        settings: ChartSettings = DEFAULT_SETTINGS,
        interaction: InteractionHandle | None = None,
        time_formatter: TimeLabelFormatter | None = None,
    ) -> None:
        self.window = window
        self.actual_glucose = tuple(actual_glucose)
        self.forecast = forecast
        self.glucose_unit = glucose_unit
        self.date_formatter = date_formatter
        self.palette = palette
        self.settings = settings
        self.interaction = interaction
        self.time_formatter = time_formatter if time_formatter is not None else TimeLabelFormatter()
        self.axis_label_settings = label_settings_for(palette)
        self.guide_lines_settings = guide_lines_settings_for(palette)
        self._highlight_index: HighlightIndex | None = None
        self._last_chart: Chart | None = None
        self._x_ticks = generate_time_ticks(
            window,
            min_segments=settings.x_min_segments,
            max_segments=settings.x_max_segments,
            multiple=settings.x_tick_multiple,
            formatter=self.time_formatter,
        )

    @property
    def x_ticks(self) -> tuple[AxisTick, ...]:
        return self._x_ticks

    @property
    def last_chart(self) -> Chart | None:
        return self._last_chart

    @property
    def highlight_index(self) -> HighlightIndex | None:
        return self._highlight_index

    def points_from_residuals(self, samples: Sequence[Sample]) -> tuple[ChartPoint, ...]:
        return map_samples(samples, self.glucose_unit, self.time_formatter)

    def y_ticks_for(self, points: Sequence[ChartPoint]) -> tuple[AxisTick, ...]:
        return generate_value_ticks(
            points,
            min_segments=self.settings.y_min_segments,
            max_segments=self.settings.y_max_segments,
            multiple=float(self.settings.y_tick_multiple),
            add_padding_segment_if_edge=self.settings.y_padding_segment_if_edge,
        )

    def generate_chart(self, frame: Rect) -> Chart | None:
        points = self.points_from_residuals(self.forecast.residuals)
        y_ticks = self.y_ticks_for(points)
        space = build_space(
            self._x_ticks,
            y_ticks,
            frame,
            self.settings,
            self.palette,
            self.axis_label_settings,
        )
        if space is None:
            LOGGER.debug("residual chart for %s unavailable (%d residuals)", self.forecast.start_time, len(points))
            self._highlight_index = None
            self._last_chart = None
            return None

        if self.interaction is not None:
            self._highlight_index = build_index(
                space.x_axis,
                space.y_axis,
                self.axis_label_settings,
                points,
                self.palette.glucose_tint,
                self.interaction,
                marker_size=self.settings.highlight_point_size,
            )
        else:
            self._highlight_index = None

        self._last_chart = compose(
            space,
            self.guide_lines_settings,
            points,
            frame=frame,
            settings=self.settings,
            palette=self.palette,
            highlight_index=self._highlight_index,
        )
        return self._last_chart

    def on_render_requested(self, frame: Rect) -> Chart | None:
        return self.generate_chart(frame)

    def render(self, frame: Rect) -> np.ndarray | None:
        chart = self.generate_chart(frame)
        if chart is None:
            return None
        return chart.render()

    def cell_content(self) -> CellContent:
        return CellContent(
            title=self.date_formatter(self.forecast.start_time),
            subtitle=SPOT_CHECK_SUBTITLE,
            chart_generator=self.render,
        )
