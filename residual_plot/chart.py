from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence

import numpy as np

from residual_plot.coords import CoordinateSpace, Rect
from residual_plot.highlight import HighlightIndex
from residual_plot.layers import GuideLinesLayer, LayerKind, RenderLayer, ScatterLayer
from residual_plot.points import ChartPoint
from residual_plot.raster import new_canvas
from residual_plot.settings import ChartColorPalette, ChartSettings, GuideLinesSettings


@dataclass(frozen=True)
class Chart:
    frame: Rect
    inner_frame: Rect
    settings: ChartSettings
    layers: tuple[RenderLayer, ...]

    def layer_kinds(self) -> tuple[LayerKind, ...]:
        return tuple(layer.kind for layer in self.layers)

    def layer(self, kind: LayerKind) -> RenderLayer | None:
        for layer in self.layers:
            if layer.kind == kind:
                return layer
        return None

    def render(self) -> np.ndarray:
        """Draw every layer in order onto a transparent canvas the size of the frame."""

        canvas = new_canvas(max(1, math.ceil(self.frame.width)), max(1, math.ceil(self.frame.height)))
        for layer in self.layers:
            layer.draw(canvas, self.inner_frame)
        return canvas


def compose(
    space: CoordinateSpace,
    grid_settings: GuideLinesSettings,
    points: Sequence[ChartPoint],
    *,
    frame: Rect,
    settings: ChartSettings,
    palette: ChartColorPalette,
    highlight_index: HighlightIndex | None = None,
) -> Chart:
    x_axis = space.x_axis
    y_axis = space.y_axis
    grid = GuideLinesLayer(
        x_axis=x_axis,
        y_axis=y_axis,
        settings=grid_settings,
        # Hidden time boundaries anchor the domain but get no gridline.
        x_values=x_axis.visible_ticks,
        y_values=y_axis.ticks,
    )
    scatter = ScatterLayer(
        x_axis=x_axis,
        y_axis=y_axis,
        points=tuple(points),
        item_size=settings.point_size,
        fill_color=palette.glucose_tint,
    )
    candidates: list[RenderLayer | None] = [
        grid,
        x_axis,
        y_axis,
        highlight_index.highlight_layer if highlight_index is not None else None,
        scatter,
    ]
    return Chart(
        frame=frame,
        inner_frame=space.inner_frame,
        settings=settings,
        layers=tuple(layer for layer in candidates if layer is not None),
    )
