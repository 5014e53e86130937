"""Glucose units and the short-form quantity formatting used for point labels."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from enum import Enum
import math

from residual_plot.errors import PlotDataError


MG_DL_PER_MMOL_L = 18.01559


class GlucoseUnit(Enum):
    MG_DL = "mg/dL"
    MMOL_L = "mmol/L"

    @property
    def fraction_digits(self) -> int:
        return 0 if self is GlucoseUnit.MG_DL else 1


@dataclass(frozen=True)
class Quantity:
    value: float
    unit: GlucoseUnit

    def value_in(self, unit: GlucoseUnit) -> float:
        if unit is self.unit:
            return float(self.value)
        if self.unit is GlucoseUnit.MG_DL:
            return float(self.value) / MG_DL_PER_MMOL_L
        return float(self.value) * MG_DL_PER_MMOL_L


class QuantityFormatter:
    """Formats glucose values with the digits and short unit string of one unit."""

    def __init__(self, unit: GlucoseUnit) -> None:
        self._unit = unit
        self._quant = Decimal("1").scaleb(-unit.fraction_digits)

    @property
    def unit(self) -> GlucoseUnit:
        return self._unit

    @property
    def unit_string(self) -> str:
        return self._unit.value

    def format_number(self, value: float) -> str:
        if not math.isfinite(value):
            raise PlotDataError(f"cannot format non-finite quantity: {value}")
        q = Decimal(str(value)).quantize(self._quant, rounding=ROUND_HALF_EVEN)
        out = format(q, "f")
        if q == 0:
            # Decimal keeps the sign of negative zero; labels should not.
            out = format(abs(q), "f")
        return out

    def string(self, value: float) -> str:
        return f"{self.format_number(value)} {self.unit_string}"
