"""Touch-driven highlighting of the chart point nearest to the pointer.

The index is only built when the host supplies an interaction handle; the
handle is queried for its current location each time the highlight layer
draws, so the chart itself never needs to be rebuilt while a touch moves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Literal, Mapping, Protocol, Sequence

import numpy as np

from residual_plot.coords import AxisLayer, Rect
from residual_plot.layers import LayerKind
from residual_plot.points import ChartPoint
from residual_plot.raster import RGBA, draw_markers, draw_text, draw_vline, text_size
from residual_plot.settings import LabelSettings


LOGGER = logging.getLogger(__name__)

TouchPhase = Literal["began", "moved", "ended", "cancelled"]
_TOUCH_PHASES = {"began", "moved", "ended", "cancelled"}


@dataclass(frozen=True)
class TouchEvent:
    phase: TouchPhase
    x: float
    y: float


def parse_touch_event(event_type: str, payload: object) -> TouchEvent | None:
    """Parse normalized ``touch`` events; anything else is ignored."""

    if event_type != "touch" or not isinstance(payload, Mapping):
        return None
    phase = payload.get("phase")
    if phase not in _TOUCH_PHASES:
        return None
    try:
        x = float(payload.get("x"))
        y = float(payload.get("y"))
    except (TypeError, ValueError):
        return None
    return TouchEvent(phase=phase, x=x, y=y)


class InteractionHandle(Protocol):
    def touch_location(self) -> tuple[float, float] | None:
        ...


class TouchTracker:
    """Keeps the location of the active touch, in chart frame coordinates."""

    def __init__(self) -> None:
        self._location: tuple[float, float] | None = None

    def handle_event(self, event_type: str, payload: object) -> bool:
        event = parse_touch_event(event_type, payload)
        if event is None:
            return False
        if event.phase in ("began", "moved"):
            self._location = (event.x, event.y)
        else:
            self._location = None
        return True

    def touch_location(self) -> tuple[float, float] | None:
        return self._location


@dataclass(frozen=True)
class HighlightIndex:
    x_axis: AxisLayer
    y_axis: AxisLayer
    label_settings: LabelSettings
    points: tuple[ChartPoint, ...]
    tint_color: RGBA
    interaction: InteractionHandle = field(compare=False)
    marker_size: int = 8
    screen_xs: tuple[float, ...] = ()
    screen_ys: tuple[float, ...] = ()

    @property
    def inner_frame(self) -> Rect:
        return self.x_axis.inner_frame

    @property
    def highlight_layer(self) -> HighlightLayer:
        return HighlightLayer(index=self)

    def nearest(self, x: float) -> int | None:
        """Index of the point closest to ``x`` horizontally; ties go to the earliest point."""

        if not self.screen_xs:
            return None
        distances = np.abs(np.asarray(self.screen_xs, dtype=np.float64) - float(x))
        return int(np.argmin(distances))

    def point_at(self, location: tuple[float, float]) -> int | None:
        if not self.inner_frame.contains(*location):
            return None
        return self.nearest(location[0])

    def highlighted_point(self) -> int | None:
        location = self.interaction.touch_location()
        if location is None:
            return None
        idx = self.point_at(location)
        if idx is None:
            LOGGER.debug("touch at %s is outside the plot area", location)
        return idx


@dataclass(frozen=True)
class HighlightLayer:
    index: HighlightIndex
    kind: LayerKind = "highlight"

    def draw(self, canvas: np.ndarray, inner_frame: Rect) -> None:
        idx = self.index.highlighted_point()
        if idx is None:
            return
        point = self.index.points[idx]
        px = self.index.screen_xs[idx]
        py = self.index.screen_ys[idx]
        tint = self.index.tint_color
        guide = (tint[0], tint[1], tint[2], max(1, tint[3] // 2))
        draw_vline(canvas, int(round(px)), int(round(inner_frame.y)), int(round(inner_frame.max_y)), guide)
        draw_markers(canvas, [(px, py)], tint, size=self.index.marker_size)

        settings = self.index.label_settings
        font = dict(font_family=settings.font_family, font_size_px=settings.font_size_px)
        y_cursor = inner_frame.y
        for text, color in ((point.y.label, tint), (point.x.label, settings.font_color)):
            tw, th = text_size(text, **font)
            left = min(max(inner_frame.x, px - tw / 2.0), inner_frame.max_x - tw)
            draw_text(canvas, int(round(left)), int(round(y_cursor)), text, color, **font)
            y_cursor += th + 2


def build_index(
    x_axis_layer: AxisLayer,
    y_axis_layer: AxisLayer,
    label_settings: LabelSettings,
    points: Sequence[ChartPoint],
    tint_color: RGBA,
    interaction: InteractionHandle,
    *,
    marker_size: int = 8,
) -> HighlightIndex:
    pts = tuple(points)
    xs = x_axis_layer.screen_locations([p.x.position for p in pts])
    ys = y_axis_layer.screen_locations([p.y.position for p in pts])
    return HighlightIndex(
        x_axis=x_axis_layer,
        y_axis=y_axis_layer,
        label_settings=label_settings,
        points=pts,
        tint_color=tint_color,
        interaction=interaction,
        marker_size=marker_size,
        screen_xs=tuple(float(v) for v in xs.tolist()),
        screen_ys=tuple(float(v) for v in ys.tolist()),
    )
