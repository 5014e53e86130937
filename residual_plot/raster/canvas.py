from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]
TRANSPARENT: RGBA = (0, 0, 0, 0)


def new_canvas(width: int, height: int, color: RGBA = TRANSPARENT) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA, width: int = 1) -> None:
    top = y - (max(1, width) - 1) // 2
    for yy in range(top, top + max(1, width)):
        if yy < 0 or yy >= dst.shape[0]:
            continue
        xa = max(0, min(x0, x1))
        xb = min(dst.shape[1] - 1, max(x0, x1))
        if xa > xb:
            continue
        _blend(dst[yy, xa : xb + 1], color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA, width: int = 1) -> None:
    left = x - (max(1, width) - 1) // 2
    for xx in range(left, left + max(1, width)):
        if xx < 0 or xx >= dst.shape[1]:
            continue
        ya = max(0, min(y0, y1))
        yb = min(dst.shape[0] - 1, max(y0, y1))
        if ya > yb:
            continue
        _blend(dst[ya : yb + 1, xx], color)


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    left = max(0, min(x0, x1))
    right = min(dst.shape[1] - 1, max(x0, x1))
    top = max(0, min(y0, y1))
    bottom = min(dst.shape[0] - 1, max(y0, y1))
    if right < left or bottom < top:
        return
    _blend(dst[top : bottom + 1, left : right + 1], color)


def _blend(segment: np.ndarray, color: RGBA) -> None:
    # Source-over compositing that keeps transparent canvases transparent where untouched.
    src_a = color[3] / 255.0
    if src_a <= 0.0:
        return
    dst_rgb = segment[..., :3].astype(np.float32)
    dst_a = segment[..., 3].astype(np.float32) / 255.0
    out_a = src_a + dst_a * (1.0 - src_a)
    src_rgb = np.asarray(color[:3], dtype=np.float32)
    num = src_rgb * src_a + dst_rgb * (dst_a * (1.0 - src_a))[..., None]
    safe_a = np.where(out_a > 1e-6, out_a, 1.0)
    segment[..., :3] = np.clip(np.rint(num / safe_a[..., None]), 0, 255).astype(np.uint8)
    segment[..., 3] = np.clip(np.rint(out_a * 255.0), 0, 255).astype(np.uint8)
