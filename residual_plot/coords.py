from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Literal, Sequence

import numpy as np

from residual_plot.raster import RGBA, draw_hline, draw_text, draw_vline, text_size
from residual_plot.scales import AxisTick
from residual_plot.settings import ChartColorPalette, ChartSettings, LabelSettings


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Rect width/height must be >= 0")

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.max_x and self.y <= y <= self.max_y


@dataclass(frozen=True)
class AxisLayer:
    """One axis: maps domain values onto the inner frame and draws its labels."""

    kind: Literal["x_axis", "y_axis"]
    ticks: tuple[AxisTick, ...]
    inner_frame: Rect
    line_color: RGBA
    label_settings: LabelSettings
    label_spacing: float = 6.0
    stroke_width: int = 1

    def __post_init__(self) -> None:
        if len(self.ticks) < 2:
            raise ValueError("an axis needs at least two ticks")
        if self.ticks[-1].position <= self.ticks[0].position:
            raise ValueError("axis ticks must be ascending")

    @property
    def domain(self) -> tuple[float, float]:
        return (self.ticks[0].position, self.ticks[-1].position)

    @property
    def visible_ticks(self) -> tuple[AxisTick, ...]:
        return tuple(tick for tick in self.ticks if not tick.hidden)

    def screen_location_for(self, value: float) -> float:
        return float(self.screen_locations([value])[0])

    def screen_locations(self, values: Sequence[float] | np.ndarray) -> np.ndarray:
        lo, hi = self.domain
        ratio = (np.asarray(values, dtype=np.float64) - lo) / (hi - lo)
        if self.kind == "x_axis":
            return self.inner_frame.x + ratio * self.inner_frame.width
        return self.inner_frame.max_y - ratio * self.inner_frame.height

    def value_for_screen_location(self, location: float) -> float:
        lo, hi = self.domain
        if self.kind == "x_axis":
            ratio = (location - self.inner_frame.x) / self.inner_frame.width
        else:
            ratio = (self.inner_frame.max_y - location) / self.inner_frame.height
        return lo + ratio * (hi - lo)

    def draw(self, canvas: np.ndarray, inner_frame: Rect) -> None:
        x0 = int(round(inner_frame.x))
        x1 = int(round(inner_frame.max_x))
        y0 = int(round(inner_frame.y))
        y1 = int(round(inner_frame.max_y))
        font = dict(font_family=self.label_settings.font_family, font_size_px=self.label_settings.font_size_px)
        if self.kind == "x_axis":
            draw_hline(canvas, x0, x1, y1, self.line_color, width=self.stroke_width)
            for tick in self.visible_ticks:
                tw, _ = text_size(tick.label, **font)
                px = int(round(self.screen_location_for(tick.position)))
                draw_text(canvas, px - tw // 2, int(round(y1 + self.label_spacing)), tick.label, self.label_settings.font_color, **font)
            return
        draw_vline(canvas, x0, y0, y1, self.line_color, width=self.stroke_width)
        for tick in self.visible_ticks:
            tw, th = text_size(tick.label, **font)
            py = int(round(self.screen_location_for(tick.position)))
            draw_text(canvas, int(round(x0 - self.label_spacing - tw)), py - th // 2, tick.label, self.label_settings.font_color, **font)


@dataclass(frozen=True)
class CoordinateSpace:
    x_axis: AxisLayer
    y_axis: AxisLayer
    inner_frame: Rect

    @property
    def x_ticks(self) -> tuple[AxisTick, ...]:
        return self.x_axis.ticks

    @property
    def y_ticks(self) -> tuple[AxisTick, ...]:
        return self.y_axis.ticks


def inner_frame_for(frame: Rect, settings: ChartSettings) -> Rect | None:
    """Frame-local drawing rectangle left after the axis label reservations."""

    x = settings.leading + settings.y_label_reservation + settings.labels_to_axis_spacing_y
    y = settings.top
    width = frame.width - x - settings.trailing
    height = frame.height - settings.top - settings.bottom - settings.x_label_reservation - settings.labels_to_axis_spacing_x
    if width <= 0 or height <= 0:
        return None
    return Rect(x=x, y=y, width=width, height=height)


def build_space(
    x_ticks: Sequence[AxisTick],
    y_ticks: Sequence[AxisTick],
    frame: Rect,
    settings: ChartSettings,
    palette: ChartColorPalette,
    label_settings: LabelSettings,
) -> CoordinateSpace | None:
    if len(x_ticks) <= 1 or len(y_ticks) <= 1:
        LOGGER.debug("no coordinate space: %d x ticks, %d y ticks", len(x_ticks), len(y_ticks))
        return None
    inner = inner_frame_for(frame, settings)
    if inner is None:
        LOGGER.debug("no coordinate space: frame %sx%s leaves no drawing area", frame.width, frame.height)
        return None
    x_axis = AxisLayer(
        kind="x_axis",
        ticks=tuple(x_ticks),
        inner_frame=inner,
        line_color=palette.axis_line,
        label_settings=label_settings,
        label_spacing=settings.labels_to_axis_spacing_x,
        stroke_width=settings.axis_stroke_width,
    )
    y_axis = AxisLayer(
        kind="y_axis",
        ticks=tuple(y_ticks),
        inner_frame=inner,
        line_color=palette.axis_line,
        label_settings=label_settings,
        label_spacing=settings.labels_to_axis_spacing_y,
        stroke_width=settings.axis_stroke_width,
    )
    return CoordinateSpace(x_axis=x_axis, y_axis=y_axis, inner_frame=inner)
