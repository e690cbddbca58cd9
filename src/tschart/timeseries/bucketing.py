"""
Interval bucketing of ordered measurements.

Bar styles sum the values that fall into the same calendar interval, line
styles pass every sample through at whole-second resolution.

The scan over bar values emits an interval only when a value outside of it
arrives. Without ``flush_trailing`` the last interval of a series is never
emitted, so a single-interval series yields no bars at all. This matches the
behavior existing chart consumers rely on; pass ``flush_trailing=True`` to
emit the trailing interval as well.
"""

from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Iterable, Iterator, Optional, Union

from loguru import logger

from tschart.timeseries.data import ValuePoint
from tschart.timeseries.periods import Interval, period_for, second_of
from tschart.timeseries.style import BarStyle, LineStyle, SeriesStyle


@dataclass(frozen=True)
class AggregatedPoint:
    """An interval with its value sum (bar) or a second with its value (line)."""

    position: Union[Interval, int]
    value: float

    @property
    def start(self) -> int:
        if isinstance(self.position, Interval):
            return self.position.start
        return self.position


def is_value_in_interval(value: ValuePoint, interval: Optional[Interval]) -> bool:
    """
    Check whether a value lies within an interval.

    Parameters
    ----------
    value : ValuePoint
        The value to check.
    interval : Optional[Interval]
        The interval to check against. None matches every value.

    Returns
    -------
    bool
        True if start <= timestamp < end.

    Raises
    ------
    ValueError
        If value is None.
    """
    if value is None:
        raise ValueError("ValuePoint must not be None.")
    return interval is None or interval.contains(value.timestamp)


def _bucketize_bars(
    points: Iterable[ValuePoint],
    style: BarStyle,
    flush_trailing: bool,
    tz: tzinfo,
) -> Iterator[AggregatedPoint]:
    interval: Optional[Interval] = None
    interval_sum = 0.0

    for point in points:
        if interval is None:
            interval = period_for(point.timestamp, style.interval, tz)

        if is_value_in_interval(point, interval):
            interval_sum += point.value
        else:
            yield AggregatedPoint(interval, interval_sum)
            interval = period_for(point.timestamp, style.interval, tz)
            interval_sum = point.value

    if interval is None:
        return
    if flush_trailing:
        yield AggregatedPoint(interval, interval_sum)
    else:
        logger.debug(
            f"Dropping trailing interval [{interval.start}, {interval.end}) with sum {interval_sum}"
        )


def _bucketize_lines(points: Iterable[ValuePoint]) -> Iterator[AggregatedPoint]:
    for point in points:
        yield AggregatedPoint(second_of(point.timestamp), point.value)


def bucketize(
    points: Iterable[ValuePoint],
    style: SeriesStyle,
    *,
    flush_trailing: bool = False,
    tz: tzinfo = timezone.utc,
) -> Iterator[AggregatedPoint]:
    """
    Lazily aggregate ordered measurements according to a style.

    Parameters
    ----------
    points : Iterable[ValuePoint]
        Measurements in ascending timestamp order.
    style : SeriesStyle
        Resolved bar or line style.
    flush_trailing : bool, default=False
        Emit the last bar interval at end of stream.
    tz : tzinfo, default=UTC
        Timezone calendar intervals are aligned to.

    Returns
    -------
    Iterator[AggregatedPoint]
        Interval sums for bar styles, per-second samples for line styles.
        Line samples falling into the same second are not collapsed here.
    """
    match style:
        case BarStyle():
            return _bucketize_bars(points, style, flush_trailing, tz)
        case LineStyle():
            return _bucketize_lines(points)
        case _:
            raise TypeError(f"Unsupported style type: {type(style).__name__}")
