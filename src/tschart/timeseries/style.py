"""
Style resolution for timeseries charts.

A style is declared as loose string properties and resolved into one of two
variants: a bar style that aggregates values per calendar interval, or a line
style that plots every sample.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union

from loguru import logger


class ChartType(str, Enum):
    BAR = "bar"
    LINE = "line"


class Granularity(str, Enum):
    """Calendar granularity used to aggregate bar values."""

    HOUR = "byHour"
    DAY = "byDay"
    WEEK = "byWeek"
    MONTH = "byMonth"


# Only these values are honoured; anything else falls back to WEEK
RECOGNISED_INTERVALS = {
    "byHour": Granularity.HOUR,
    "byDay": Granularity.DAY,
    "byMonth": Granularity.MONTH,
}

LINE_TYPES = ("solid", "dashed", "dotted")

DEFAULT_LINE_WIDTH = 1.5
DEFAULT_BAR_WIDTH = 0.8


@dataclass
class StyleProperties:
    """
    Style options of a single timeseries as supplied by the caller.

    Parameters
    ----------
    chart_type : Optional[str]
        "bar" or "line". Anything else renders as line.
    properties : Dict[str, str]
        Free-form options. Recognised keys are "interval", "color", "width"
        and "lineType".
    reference_value_style_options : Dict[str, StyleProperties]
        Styles of the reference series, keyed by reference value id.
    """

    chart_type: Optional[str] = ChartType.LINE.value
    properties: Dict[str, str] = field(default_factory=dict)
    reference_value_style_options: Dict[str, "StyleProperties"] = field(
        default_factory=dict
    )

    def get_properties(self) -> Dict[str, str]:
        return self.properties

    def get_reference_style(self, reference_value_id: str) -> Optional["StyleProperties"]:
        return self.reference_value_style_options.get(reference_value_id)


@dataclass(frozen=True)
class BarStyle:
    interval: Granularity = Granularity.WEEK
    width: float = DEFAULT_BAR_WIDTH
    color: Optional[str] = None


@dataclass(frozen=True)
class LineStyle:
    line_type: str = "solid"
    width: float = DEFAULT_LINE_WIDTH
    color: Optional[str] = None


SeriesStyle = Union[BarStyle, LineStyle]


def is_bar_style(style: Optional[StyleProperties]) -> bool:
    return style is not None and style.chart_type == ChartType.BAR.value


def is_line_style(style: Optional[StyleProperties]) -> bool:
    return not is_bar_style(style)


def classify(style: Optional[StyleProperties]) -> ChartType:
    """Classify a style as bar or line. Missing styles are line styles."""
    return ChartType.BAR if is_bar_style(style) else ChartType.LINE


def resolve_interval(style: Optional[StyleProperties]) -> Granularity:
    """
    Resolve the aggregation granularity of a style.

    Parameters
    ----------
    style : Optional[StyleProperties]
        Style to inspect.

    Returns
    -------
    Granularity
        The configured granularity if it is one of "byHour", "byDay" or
        "byMonth", otherwise WEEK. Unrecognised values are not an error.
    """
    if style is None or "interval" not in style.properties:
        return Granularity.WEEK

    interval = style.properties["interval"]
    granularity = RECOGNISED_INTERVALS.get(interval)
    if granularity is None:
        logger.debug(f"Unrecognised interval '{interval}', using weekly intervals.")
        return Granularity.WEEK
    return granularity


def _resolve_width(properties: Dict[str, str], default: float) -> float:
    raw_width = properties.get("width")
    if raw_width is None:
        return default
    try:
        width = float(raw_width)
    except (TypeError, ValueError):
        logger.warning(f"Invalid width '{raw_width}'. Using {default}.")
        return default
    if width <= 0:
        logger.warning(f"Width must be positive, got {width}. Using {default}.")
        return default
    return width


def create_style(style: Optional[StyleProperties]) -> SeriesStyle:
    """
    Resolve style properties into a BarStyle or LineStyle.

    Parameters
    ----------
    style : Optional[StyleProperties]
        Caller supplied style options. None yields the default line style.

    Returns
    -------
    SeriesStyle
        The resolved style variant.
    """
    if style is None:
        return LineStyle()

    properties = style.get_properties()
    color = properties.get("color") or None

    if is_bar_style(style):
        return BarStyle(
            interval=resolve_interval(style),
            width=_resolve_width(properties, DEFAULT_BAR_WIDTH),
            color=color,
        )

    line_type = properties.get("lineType", "solid")
    if line_type not in LINE_TYPES:
        logger.warning(
            f"Invalid lineType '{line_type}'. Using 'solid'. Valid options: {list(LINE_TYPES)}"
        )
        line_type = "solid"
    return LineStyle(
        line_type=line_type,
        width=_resolve_width(properties, DEFAULT_LINE_WIDTH),
        color=color,
    )
