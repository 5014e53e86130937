from __future__ import annotations

from typing import Iterable

import numpy as np

from residual_plot.raster.canvas import RGBA, _blend


def draw_markers(dst: np.ndarray, points: Iterable[tuple[float, float]], color: RGBA, size: int = 4) -> None:
    """Draw a filled circle of ``size`` pixels diameter centered on each point."""

    diameter = max(1, int(size))
    half = diameter / 2.0
    offsets = np.arange(diameter, dtype=np.float64) + 0.5 - half
    # Pixels of the bounding square whose centers fall inside the circle.
    disc = offsets[None, :] ** 2 + offsets[:, None] ** 2 <= half * half
    for x, y in points:
        _draw_disc(dst, int(round(x - half)), int(round(y - half)), disc, color)


def _draw_disc(dst: np.ndarray, x0: int, y0: int, disc: np.ndarray, color: RGBA) -> None:
    left = max(0, x0)
    top = max(0, y0)
    right = min(dst.shape[1], x0 + disc.shape[1])
    bottom = min(dst.shape[0], y0 + disc.shape[0])
    if right <= left or bottom <= top:
        return
    mask = disc[top - y0 : bottom - y0, left - x0 : right - x0]
    region = dst[top:bottom, left:right]
    covered = region[mask]
    _blend(covered, color)
    region[mask] = covered
