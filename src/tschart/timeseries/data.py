from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from loguru import logger

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class ValuePoint:
    """A single measurement: epoch milliseconds and value."""

    timestamp: int
    value: float

    @classmethod
    def from_datetime(cls, dt: datetime, value: float) -> "ValuePoint":
        """
        Create a value point from a datetime.

        Naive datetimes are interpreted as UTC.
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return cls((dt - EPOCH) // timedelta(milliseconds=1), float(value))


@dataclass(frozen=True)
class ReferenceValueOutput:
    """Descriptive metadata of a reference series attached to a timeseries."""

    reference_value_id: str
    label: str


@dataclass(frozen=True)
class TimeseriesMetadataOutput:
    """
    Descriptive metadata of a primary timeseries.

    The feature label and time span build the chart identifier, phenomenon and
    unit of measure build the label of the range axis.
    """

    id: str
    feature_label: str
    phenomenon_label: str = ""
    uom: Optional[str] = None
    reference_values: List[ReferenceValueOutput] = field(default_factory=list)
    first_timestamp: Optional[int] = None
    last_timestamp: Optional[int] = None

    def get_reference_value(self, reference_value_id: str) -> Optional[ReferenceValueOutput]:
        """Return the reference value output with the given id, if declared."""
        for reference_output in self.reference_values:
            if reference_output.reference_value_id == reference_value_id:
                return reference_output
        return None


class TimeseriesData:
    """
    Ordered measurements of one series plus its reference series.

    Reference series are kept in a plain dict; its insertion order is the
    order in which reference slots are allocated.
    """

    def __init__(
        self,
        values: List[ValuePoint],
        reference_values: Optional[Dict[str, "TimeseriesData"]] = None,
    ):
        """
        Initialise the timeseries data.

        Parameters
        ----------
        values : List[ValuePoint]
            Measurements in ascending timestamp order.
        reference_values : Optional[Dict[str, TimeseriesData]], default=None
            Reference series keyed by reference value id.
        """
        self.values = list(values)
        self.metadata = TimeseriesDataMetadata(dict(reference_values or {}))
        self._validate_values()

    def _validate_values(self) -> None:
        """Warn about timestamps that are not strictly increasing."""
        if len(self.values) < 2:
            return

        problematic = [
            (previous.timestamp, current.timestamp)
            for previous, current in zip(self.values, self.values[1:])
            if current.timestamp <= previous.timestamp
        ]
        if problematic:
            logger.warning(
                f"Timestamps are not strictly increasing ({len(problematic)} occurrences). "
                f"Problematic pairs (first 5): {problematic[:5]}. "
                f"Bucketing assumes ascending order."
            )

    def get_values(self) -> List[ValuePoint]:
        return self.values

    def get_metadata(self) -> "TimeseriesDataMetadata":
        return self.metadata

    def has_values(self) -> bool:
        return len(self.values) > 0

    def has_reference_values(self) -> bool:
        return len(self.metadata.reference_values) > 0

    def get_time_range(self) -> Optional[tuple]:
        """Return (first, last) timestamp, or None when there are no values."""
        if not self.values:
            return None
        return self.values[0].timestamp, self.values[-1].timestamp

    def __len__(self) -> int:
        return len(self.values)


@dataclass
class TimeseriesDataMetadata:
    reference_values: Dict[str, TimeseriesData] = field(default_factory=dict)

    def get_reference_values(self) -> Dict[str, TimeseriesData]:
        return self.reference_values
