from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

import numpy as np

from residual_plot.coords import AxisLayer, Rect
from residual_plot.points import ChartPoint
from residual_plot.raster import RGBA, draw_hline, draw_markers, draw_vline
from residual_plot.scales import AxisTick
from residual_plot.settings import GuideLinesSettings


LayerKind = Literal["grid", "x_axis", "y_axis", "highlight", "scatter"]


class RenderLayer(Protocol):
    @property
    def kind(self) -> LayerKind:
        ...

    def draw(self, canvas: np.ndarray, inner_frame: Rect) -> None:
        ...


@dataclass(frozen=True)
class GuideLinesLayer:
    x_axis: AxisLayer
    y_axis: AxisLayer
    settings: GuideLinesSettings
    x_values: tuple[AxisTick, ...]
    y_values: tuple[AxisTick, ...]
    kind: LayerKind = "grid"

    def draw(self, canvas: np.ndarray, inner_frame: Rect) -> None:
        x0 = int(round(inner_frame.x))
        x1 = int(round(inner_frame.max_x))
        y0 = int(round(inner_frame.y))
        y1 = int(round(inner_frame.max_y))
        color = self.settings.lines_color
        width = self.settings.line_width
        for px in self.x_axis.screen_locations([tick.position for tick in self.x_values]).tolist():
            draw_vline(canvas, int(round(px)), y0, y1, color, width=width)
        for py in self.y_axis.screen_locations([tick.position for tick in self.y_values]).tolist():
            draw_hline(canvas, x0, x1, int(round(py)), color, width=width)


@dataclass(frozen=True)
class ScatterLayer:
    x_axis: AxisLayer
    y_axis: AxisLayer
    points: tuple[ChartPoint, ...]
    item_size: int
    fill_color: RGBA
    kind: LayerKind = "scatter"

    def screen_points(self) -> list[tuple[float, float]]:
        xs = self.x_axis.screen_locations([p.x.position for p in self.points])
        ys = self.y_axis.screen_locations([p.y.position for p in self.points])
        return list(zip(xs.tolist(), ys.tolist(), strict=True))

    def draw(self, canvas: np.ndarray, inner_frame: Rect) -> None:
        draw_markers(canvas, self.screen_points(), self.fill_color, size=self.item_size)
