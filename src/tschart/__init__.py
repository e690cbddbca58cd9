"""
tschart: multi-axis charts of time-stamped sensor measurements

Turns raw timestamp/value series into styled, chart-ready datasets and lays
them out on one shared plot with an axis, renderer and color per slot.
"""

from tschart.chartplot.plot_surface import MultiAxisPlot, PlotSurface, RangeAxis
from tschart.chartplot.renderers import BarRenderer, LineRenderer, XYDataset
from tschart.timeseries.allocation import (
    ChartConfigurationError,
    ChartIndexAllocator,
    ChartSlot,
)
from tschart.timeseries.bucketing import AggregatedPoint, bucketize
from tschart.timeseries.context import RenderingContext
from tschart.timeseries.data import (
    ReferenceValueOutput,
    TimeseriesData,
    TimeseriesMetadataOutput,
    ValuePoint,
)
from tschart.timeseries.rendering import MultipleChartsRenderer, configure_logging
from tschart.timeseries.series import NamedSeries, build_series
from tschart.timeseries.style import Granularity, StyleProperties

__all__ = [
    # General plotting
    "MultiAxisPlot",
    "PlotSurface",
    "RangeAxis",
    "XYDataset",
    "LineRenderer",
    "BarRenderer",
    # Timeseries charts
    "ValuePoint",
    "TimeseriesData",
    "TimeseriesMetadataOutput",
    "ReferenceValueOutput",
    "StyleProperties",
    "Granularity",
    "AggregatedPoint",
    "bucketize",
    "NamedSeries",
    "build_series",
    "ChartSlot",
    "ChartIndexAllocator",
    "ChartConfigurationError",
    "RenderingContext",
    "MultipleChartsRenderer",
    "configure_logging",
]
