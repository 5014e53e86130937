from residual_plot.chart import Chart, compose
from residual_plot.coords import AxisLayer, CoordinateSpace, Rect, build_space
from residual_plot.errors import PlotDataError
from residual_plot.highlight import HighlightIndex, TouchTracker, build_index
from residual_plot.models import Forecast, Sample, TimeWindow
from residual_plot.points import AxisValue, ChartPoint, map_samples
from residual_plot.scales import AxisTick, generate_ticks, generate_time_ticks, generate_value_ticks
from residual_plot.settings import ChartColorPalette, ChartSettings, validate_chart_settings, validate_color_palette
from residual_plot.spot_check import CellContent, SpotCheckResidualChart
from residual_plot.time_format import TimeLabelFormatter
from residual_plot.units import GlucoseUnit, Quantity, QuantityFormatter

__all__ = [
    "AxisLayer",
    "AxisTick",
    "AxisValue",
    "CellContent",
    "Chart",
    "ChartColorPalette",
    "ChartPoint",
    "ChartSettings",
    "CoordinateSpace",
    "Forecast",
    "GlucoseUnit",
    "HighlightIndex",
    "PlotDataError",
    "Quantity",
    "QuantityFormatter",
    "Rect",
    "Sample",
    "SpotCheckResidualChart",
    "TimeLabelFormatter",
    "TimeWindow",
    "TouchTracker",
    "build_index",
    "build_space",
    "compose",
    "generate_ticks",
    "generate_time_ticks",
    "generate_value_ticks",
    "map_samples",
    "validate_chart_settings",
    "validate_color_palette",
]
