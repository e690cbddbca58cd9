"""
Timeseries-specific components for tschart.

This package contains the style resolution, interval bucketing and chart slot
allocation for sensor timeseries and their reference series.
"""

from tschart.timeseries.allocation import (
    ChartConfigurationError,
    ChartIndexAllocator,
    ChartSlot,
    create_chart_id,
    create_range_label,
)
from tschart.timeseries.bucketing import AggregatedPoint, bucketize, is_value_in_interval
from tschart.timeseries.context import RenderingContext
from tschart.timeseries.periods import Interval, period_for
from tschart.timeseries.rendering import MultipleChartsRenderer, configure_logging
from tschart.timeseries.series import NamedSeries, build_series
from tschart.timeseries.style import (
    BarStyle,
    ChartType,
    Granularity,
    LineStyle,
    StyleProperties,
    classify,
    create_style,
    is_bar_style,
    is_line_style,
    resolve_interval,
)

__all__ = [
    "StyleProperties",
    "BarStyle",
    "LineStyle",
    "ChartType",
    "Granularity",
    "classify",
    "create_style",
    "is_bar_style",
    "is_line_style",
    "resolve_interval",
    "Interval",
    "period_for",
    "AggregatedPoint",
    "bucketize",
    "is_value_in_interval",
    "NamedSeries",
    "build_series",
    "ChartSlot",
    "ChartIndexAllocator",
    "ChartConfigurationError",
    "create_chart_id",
    "create_range_label",
    "RenderingContext",
    "MultipleChartsRenderer",
    "configure_logging",
]
