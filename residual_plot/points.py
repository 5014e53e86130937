from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from residual_plot.models import Sample
from residual_plot.time_format import TimeLabelFormatter
from residual_plot.units import GlucoseUnit, QuantityFormatter


@dataclass(frozen=True)
class AxisValue:
    position: float
    label: str


@dataclass(frozen=True)
class ChartPoint:
    x: AxisValue
    y: AxisValue


def map_samples(
    samples: Iterable[Sample],
    unit: GlucoseUnit,
    time_formatter: TimeLabelFormatter,
) -> tuple[ChartPoint, ...]:
    """Turn samples into labeled chart points, one per sample, in input order."""

    quantity_formatter = QuantityFormatter(unit)
    points: list[ChartPoint] = []
    for sample in samples:
        value = sample.value_in(unit)
        points.append(
            ChartPoint(
                x=AxisValue(position=sample.timestamp.timestamp(), label=time_formatter.point_label(sample.timestamp)),
                y=AxisValue(position=value, label=quantity_formatter.string(value)),
            )
        )
    return tuple(points)
