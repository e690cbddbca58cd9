from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Dict, Iterable, List, Union

import numpy as np
from loguru import logger

from tschart.timeseries.bucketing import AggregatedPoint, bucketize
from tschart.timeseries.data import ValuePoint
from tschart.timeseries.periods import Interval
from tschart.timeseries.style import SeriesStyle, StyleProperties, create_style


@dataclass(frozen=True)
class NamedSeries:
    """
    An identified, time-ordered sequence of chart points.

    An empty series is valid and means there is no data to show.
    """

    id: str
    points: List[AggregatedPoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def is_empty(self) -> bool:
        return not self.points

    def positions(self) -> List[Union[Interval, int]]:
        return [point.position for point in self.points]

    def values(self) -> np.ndarray:
        return np.asarray([point.value for point in self.points], dtype=np.float64)

    def start_times(self) -> np.ndarray:
        """Start of every point as numpy datetime64[ms]."""
        return np.asarray([point.start for point in self.points], dtype="datetime64[ms]")

    def durations(self) -> np.ndarray:
        """Interval lengths in milliseconds, zero for instant positions."""
        return np.asarray(
            [
                point.position.duration if isinstance(point.position, Interval) else 0
                for point in self.points
            ],
            dtype=np.int64,
        )


def build_series(
    series_id: str,
    points: Iterable[ValuePoint],
    style: Union[SeriesStyle, StyleProperties, None],
    *,
    flush_trailing: bool = False,
    tz: tzinfo = timezone.utc,
) -> NamedSeries:
    """
    Build a named series from raw measurements.

    Parameters
    ----------
    series_id : str
        Identifier of the resulting series.
    points : Iterable[ValuePoint]
        Measurements in ascending timestamp order.
    style : Union[SeriesStyle, StyleProperties, None]
        Resolved style, or raw style properties to resolve first.
    flush_trailing : bool, default=False
        Emit the trailing bar interval.
    tz : tzinfo, default=UTC
        Timezone calendar intervals are aligned to.

    Returns
    -------
    NamedSeries
        Points ordered by time. Line points sharing a second keep the last value.

    Raises
    ------
    ValueError
        If a bar interval is emitted twice, which happens when the
        measurements are not in ascending order.
    """
    if style is None or isinstance(style, StyleProperties):
        style = create_style(style)

    by_position: Dict[int, AggregatedPoint] = {}
    collisions = 0
    for point in bucketize(points, style, flush_trailing=flush_trailing, tz=tz):
        if point.start in by_position:
            if isinstance(point.position, Interval):
                raise ValueError(
                    f"Series '{series_id}': interval {point.position} was aggregated twice. "
                    "Measurements must be in ascending timestamp order."
                )
            collisions += 1
        by_position[point.start] = point

    if collisions:
        logger.debug(
            f"Series '{series_id}': {collisions} points share a position with an earlier one; kept the last value."
        )

    ordered = [by_position[start] for start in sorted(by_position)]
    return NamedSeries(series_id, ordered)
