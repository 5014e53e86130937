from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
import datetime as dt
import re
from typing import Any, Mapping

from residual_plot.raster import RGBA
from residual_plot.raster.draw_text import DEFAULT_FONT_FAMILY

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


@dataclass(frozen=True)
class ChartColorPalette:
    axis_line: RGBA = (190, 196, 204, 255)
    axis_label: RGBA = (142, 142, 147, 255)
    grid: RGBA = (229, 229, 234, 255)
    glucose_tint: RGBA = (0, 122, 255, 255)


@dataclass(frozen=True)
class LabelSettings:
    font_color: RGBA = (142, 142, 147, 255)
    font_size_px: float = 14.0
    font_family: str = DEFAULT_FONT_FAMILY


@dataclass(frozen=True)
class GuideLinesSettings:
    lines_color: RGBA = (229, 229, 234, 255)
    line_width: int = 1


@dataclass(frozen=True)
class ChartSettings:
    """Insets, label reservations and tick constraints for the residual chart."""

    top: float = 12.0
    leading: float = 0.0
    trailing: float = 8.0
    bottom: float = 0.0
    labels_to_axis_spacing_x: float = 6.0
    labels_to_axis_spacing_y: float = 6.0
    axis_stroke_width: int = 1
    y_label_reservation: float = 30.0
    x_label_reservation: float = 20.0
    x_min_segments: int = 2
    x_max_segments: int = 12
    x_tick_multiple: dt.timedelta = field(default=dt.timedelta(hours=3))
    y_min_segments: int = 2
    y_max_segments: int = 4
    y_tick_multiple: float = 2.0
    y_padding_segment_if_edge: bool = False
    point_size: int = 4
    highlight_point_size: int = 8


DEFAULT_PALETTE = ChartColorPalette()
DEFAULT_SETTINGS = ChartSettings()


def parse_color(value: Any, *, name: str = "color") -> RGBA:
    """Accept ``#RRGGBB``/``#RRGGBBAA`` strings or RGB/RGBA int tuples."""

    if isinstance(value, str):
        if not _HEX_COLOR.match(value):
            raise ValueError(f"`{name}` must be a hex color (#RRGGBB or #RRGGBBAA)")
        raw = value[1:]
        channels = [int(raw[i : i + 2], 16) for i in range(0, len(raw), 2)]
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        channels = [int(c) for c in value]
        if any(c < 0 or c > 255 for c in channels):
            raise ValueError(f"`{name}` channels must be in [0, 255]")
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    raise ValueError(f"`{name}` must be a hex color (#RRGGBB or #RRGGBBAA) or an RGB(A) tuple")


def validate_color_palette(overrides: Mapping[str, Any] | None = None) -> ChartColorPalette:
    raw: dict[str, Any] = asdict(DEFAULT_PALETTE)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown palette color: {key}")
            raw[key] = value
    return ChartColorPalette(**{key: parse_color(value, name=key) for key, value in raw.items()})


def label_settings_for(palette: ChartColorPalette, *, font_size_px: float = 14.0) -> LabelSettings:
    return LabelSettings(font_color=palette.axis_label, font_size_px=float(font_size_px))


def guide_lines_settings_for(palette: ChartColorPalette) -> GuideLinesSettings:
    return GuideLinesSettings(lines_color=palette.grid)


_NON_NEGATIVE = (
    "top",
    "leading",
    "trailing",
    "bottom",
    "labels_to_axis_spacing_x",
    "labels_to_axis_spacing_y",
    "y_label_reservation",
    "x_label_reservation",
)
_POSITIVE_INT = ("axis_stroke_width", "x_min_segments", "y_min_segments", "point_size", "highlight_point_size")


def validate_chart_settings(overrides: Mapping[str, Any] | None = None) -> ChartSettings:
    """Validate and merge chart setting overrides against the defaults."""

    known = {f.name for f in fields(ChartSettings)}
    updates: dict[str, Any] = {}
    if overrides:
        for key, value in overrides.items():
            if key not in known:
                raise ValueError(f"Unknown chart setting: {key}")
            updates[key] = value
    settings = replace(DEFAULT_SETTINGS, **updates)

    for key in _NON_NEGATIVE:
        value = getattr(settings, key)
        if not isinstance(value, (int, float)) or float(value) < 0:
            raise ValueError(f"Setting `{key}` must be a non-negative number")
    for key in _POSITIVE_INT:
        value = getattr(settings, key)
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise ValueError(f"Setting `{key}` must be a positive integer")
    if settings.x_max_segments < settings.x_min_segments:
        raise ValueError("Setting `x_max_segments` must be >= `x_min_segments`")
    if settings.y_max_segments < settings.y_min_segments:
        raise ValueError("Setting `y_max_segments` must be >= `y_min_segments`")
    if not isinstance(settings.x_tick_multiple, dt.timedelta) or settings.x_tick_multiple <= dt.timedelta(0):
        raise ValueError("Setting `x_tick_multiple` must be a positive timedelta")
    if not isinstance(settings.y_tick_multiple, (int, float)) or float(settings.y_tick_multiple) <= 0:
        raise ValueError("Setting `y_tick_multiple` must be a positive number")
    return settings
