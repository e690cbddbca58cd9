from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from tschart.timeseries.style import Granularity

MILLIS_PER_SECOND = 1000
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Interval:
    """Half-open time interval [start, end) in epoch milliseconds."""

    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(
                f"Interval start ({self.start}) must not be after its end ({self.end})."
            )

    @property
    def duration(self) -> int:
        return self.end - self.start

    def contains(self, timestamp: int) -> bool:
        return self.start <= timestamp < self.end


def _to_millis(dt: datetime) -> int:
    return (dt - EPOCH) // timedelta(milliseconds=1)


def _midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time(), tzinfo=tz)


def second_of(timestamp: int) -> int:
    """Floor an epoch-millisecond timestamp to its whole second."""
    return (timestamp // MILLIS_PER_SECOND) * MILLIS_PER_SECOND


def period_for(
    timestamp: int, granularity: Granularity, tz: tzinfo = timezone.utc
) -> Interval:
    """
    Return the calendar period containing a timestamp.

    Parameters
    ----------
    timestamp : int
        Epoch milliseconds.
    granularity : Granularity
        Hour, day, ISO week (Monday start) or month.
    tz : tzinfo, default=UTC
        Timezone the calendar is aligned to.

    Returns
    -------
    Interval
        The aligned period [start, end).
    """
    local = (EPOCH + timedelta(milliseconds=timestamp)).astimezone(tz)

    if granularity is Granularity.HOUR:
        start = local.replace(minute=0, second=0, microsecond=0)
        # Hours are fixed length in absolute time, also across DST changes
        return Interval(_to_millis(start), _to_millis(start) + 3600 * MILLIS_PER_SECOND)

    if granularity is Granularity.DAY:
        day = local.date()
        start, end = _midnight(day, tz), _midnight(day + timedelta(days=1), tz)
    elif granularity is Granularity.MONTH:
        first = local.date().replace(day=1)
        following = (first + timedelta(days=32)).replace(day=1)
        start, end = _midnight(first, tz), _midnight(following, tz)
    else:
        monday = local.date() - timedelta(days=local.weekday())
        start, end = _midnight(monday, tz), _midnight(monday + timedelta(days=7), tz)

    return Interval(_to_millis(start), _to_millis(end))
