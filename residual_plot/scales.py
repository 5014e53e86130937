from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
import datetime as dt
import math
from typing import TYPE_CHECKING, Callable, Iterable

import numpy as np

from residual_plot.models import TimeWindow

if TYPE_CHECKING:
    from residual_plot.points import ChartPoint
    from residual_plot.time_format import TimeLabelFormatter


_WALL_EPOCH = dt.datetime(1970, 1, 1)

@dataclass(frozen=True)
class AxisTick:
    position: float
    label: str
    hidden: bool = False


def generate_tick_positions(
    data_min: float,
    data_max: float,
    *,
    min_segments: int,
    max_segments: int,
    multiple: float,
    add_padding_segment_if_edge: bool = False,
) -> np.ndarray:
    """Return ascending tick positions covering ``[data_min, data_max]``.

    Bounds are aligned outward onto the ``multiple`` grid. The spacing starts at
    ``multiple`` and doubles until the range fits in ``max_segments``; the
    segment count is then the smallest one covering the range at that spacing,
    but never fewer than ``min_segments``.
    """

    _validate_tick_constraints(data_min, data_max, min_segments, max_segments, multiple)

    first = _align(data_min / multiple, math.floor) * multiple
    last = _align(data_max / multiple, math.ceil) * multiple
    if add_padding_segment_if_edge:
        if math.isclose(first, data_min, rel_tol=0.0, abs_tol=multiple * 1e-9):
            first -= multiple
        if math.isclose(last, data_max, rel_tol=0.0, abs_tol=multiple * 1e-9):
            last += multiple

    distance = last - first
    spacing = float(multiple)
    if distance <= multiple * 1e-9:
        # Flat range: step outward from the value so it sits inside the axis.
        segments = min_segments
        first -= (min_segments // 2) * spacing
    else:
        count = distance / spacing
        while count > max_segments:
            spacing *= 2.0
            count = distance / spacing
        segments = max(min_segments, _align(count, math.ceil))

    ticks = first + np.arange(segments + 1, dtype=np.float64) * spacing
    # Normalize floating-point drift back onto the multiple grid.
    ticks = np.rint(ticks / multiple) * multiple
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=multiple * 1e-9)] = 0.0
    return ticks


def generate_ticks(
    data_min: float,
    data_max: float,
    *,
    min_segments: int,
    max_segments: int,
    multiple: float,
    label_for: Callable[[float], str] | None = None,
    add_padding_segment_if_edge: bool = False,
    hide_boundary_ticks: bool = False,
) -> tuple[AxisTick, ...]:
    positions = generate_tick_positions(
        data_min,
        data_max,
        min_segments=min_segments,
        max_segments=max_segments,
        multiple=multiple,
        add_padding_segment_if_edge=add_padding_segment_if_edge,
    )
    labels = [label_for(float(v)) for v in positions] if label_for is not None else format_ticks_for_axis(positions)
    ticks = [AxisTick(position=float(v), label=label) for v, label in zip(positions.tolist(), labels, strict=True)]
    if hide_boundary_ticks and ticks:
        ticks[0] = replace(ticks[0], hidden=True)
        ticks[-1] = replace(ticks[-1], hidden=True)
    return tuple(ticks)


def generate_time_ticks(
    window: TimeWindow,
    *,
    min_segments: int,
    max_segments: int,
    multiple: dt.timedelta,
    formatter: TimeLabelFormatter,
) -> tuple[AxisTick, ...]:
    """Ticks over a time window in epoch seconds; the two boundary ticks are hidden.

    Alignment happens tick by tick on the wall clock of ``window.start``'s
    zone, so a 3 hour multiple lands on 09:00/12:00/15:00 local time even when
    the window crosses a daylight-saving change. Across such a change the
    positions are no longer evenly spaced in epoch seconds.
    """

    step = multiple.total_seconds()
    if step <= 0:
        raise ValueError("time tick multiple must be > 0")
    tz = window.start.tzinfo
    ticks = generate_ticks(
        _wall_seconds(window.start),
        _wall_seconds(window.end.astimezone(tz)),
        min_segments=min_segments,
        max_segments=max_segments,
        multiple=step,
        label_for=lambda wall: formatter.axis_label_for_scalar(_instant_for_wall(wall, tz), tz),
        hide_boundary_ticks=True,
    )
    return tuple(replace(tick, position=_instant_for_wall(tick.position, tz)) for tick in ticks)


def _wall_seconds(when: dt.datetime) -> float:
    return (when.replace(tzinfo=None) - _WALL_EPOCH).total_seconds()


def _instant_for_wall(seconds: float, tz: dt.tzinfo) -> float:
    # Ambiguous wall times resolve to their first occurrence (fold=0).
    return (_WALL_EPOCH + dt.timedelta(seconds=seconds)).replace(tzinfo=tz).timestamp()


def generate_value_ticks(
    points: Iterable[ChartPoint],
    *,
    min_segments: int,
    max_segments: int,
    multiple: float,
    add_padding_segment_if_edge: bool = False,
) -> tuple[AxisTick, ...]:
    values = [point.y.position for point in points]
    if not values:
        return ()
    return generate_ticks(
        min(values),
        max(values),
        min_segments=min_segments,
        max_segments=max_segments,
        multiple=multiple,
        add_padding_segment_if_edge=add_padding_segment_if_edge,
    )


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Only trim trailing zeros for fractional values (preserve integer zeros like 30, 40).
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _validate_tick_constraints(
    data_min: float,
    data_max: float,
    min_segments: int,
    max_segments: int,
    multiple: float,
) -> None:
    if min_segments < 1:
        raise ValueError("min_segments must be >= 1")
    if max_segments < min_segments:
        raise ValueError("max_segments must be >= min_segments")
    if not math.isfinite(multiple) or multiple <= 0:
        raise ValueError("multiple must be > 0")
    if not (math.isfinite(data_min) and math.isfinite(data_max)):
        raise ValueError("data bounds must be finite")
    if data_min > data_max:
        raise ValueError("data_min must be <= data_max")


def _align(quotient: float, rounding: Callable[[float], int]) -> int:
    nearest = round(quotient)
    if math.isclose(quotient, nearest, rel_tol=0.0, abs_tol=1e-9 * max(1.0, abs(quotient))):
        return int(nearest)
    return int(rounding(quotient))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
