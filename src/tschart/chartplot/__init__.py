"""
General-purpose multi-axis plotting components for tschart.

This package knows nothing about sensors or styles; it draws time-indexed
datasets registered by index onto a matplotlib figure.
"""

from tschart.chartplot.plot_surface import MultiAxisPlot, PlotSurface, RangeAxis
from tschart.chartplot.renderers import BarRenderer, LineRenderer, Renderer, XYDataset

__all__ = [
    "MultiAxisPlot",
    "PlotSurface",
    "RangeAxis",
    "Renderer",
    "LineRenderer",
    "BarRenderer",
    "XYDataset",
]
