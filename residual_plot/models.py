from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
import math

from residual_plot.errors import PlotDataError
from residual_plot.units import GlucoseUnit, Quantity


def _require_aware(value: dt.datetime, name: str) -> None:
    if value.tzinfo is None or value.utcoffset() is None:
        raise PlotDataError(f"{name} must be a timezone-aware datetime")


@dataclass(frozen=True)
class TimeWindow:
    start: dt.datetime
    end: dt.datetime

    def __post_init__(self) -> None:
        _require_aware(self.start, "start")
        _require_aware(self.end, "end")
        if self.start > self.end:
            raise PlotDataError("time window start must be <= end")

    @property
    def duration(self) -> dt.timedelta:
        return self.end - self.start

    @property
    def start_scalar(self) -> float:
        return self.start.timestamp()

    @property
    def end_scalar(self) -> float:
        return self.end.timestamp()


@dataclass(frozen=True)
class Sample:
    timestamp: dt.datetime
    quantity: Quantity

    def __post_init__(self) -> None:
        _require_aware(self.timestamp, "timestamp")
        if not math.isfinite(self.quantity.value):
            raise PlotDataError(f"sample value must be finite, got {self.quantity.value}")

    @property
    def unit(self) -> GlucoseUnit:
        return self.quantity.unit

    def value_in(self, unit: GlucoseUnit) -> float:
        return self.quantity.value_in(unit)


@dataclass(frozen=True)
class Forecast:
    """Forecast residuals in the order they were produced; never re-sorted here."""

    start_time: dt.datetime
    residuals: tuple[Sample, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "residuals", tuple(self.residuals))
