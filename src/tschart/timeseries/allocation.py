"""
Chart slot allocation for primary and reference series.

Primary series take the indices [0, n) in input order. Reference series are
appended after all primary series from a single counter that keeps counting
across parents, so each slot index is unique within one plot.
"""

from dataclasses import dataclass
from datetime import timedelta, timezone, tzinfo
from typing import Dict, Iterable, Optional

from loguru import logger

from tschart.chartplot.renderers import color_for_index
from tschart.timeseries.data import EPOCH, TimeseriesMetadataOutput

NO_DATA_LABEL = "no data"
RANGE_LABEL_FORMAT = "%Y-%m-%d %H:%M"


class ChartConfigurationError(ValueError):
    """Raised when a chart slot cannot be configured from its inputs."""


@dataclass(frozen=True)
class ChartSlot:
    """
    Position of one dataset on the shared plot.

    Primary slots own the range axis at their own index; reference slots point
    at the axis of their parent.
    """

    index: int
    axis_index: int
    color: str
    label: str
    series_id: str
    reference_id: Optional[str] = None

    def __post_init__(self):
        if not self.label:
            raise ChartConfigurationError("ChartId must not be empty.")
        if self.index < 0:
            raise ChartConfigurationError(f"Slot index must be >= 0, got {self.index}.")

    @property
    def is_reference(self) -> bool:
        return self.reference_id is not None


def _format_timestamp(timestamp: int, tz: tzinfo) -> str:
    return (EPOCH + timedelta(milliseconds=timestamp)).astimezone(tz).strftime(RANGE_LABEL_FORMAT)


def create_range_label(
    metadata: TimeseriesMetadataOutput, tz: tzinfo = timezone.utc
) -> str:
    """
    Summarise the time span of a timeseries for display.

    Returns
    -------
    str
        "<first> - <last>", a single time if both ends coincide, or "no data"
        when the span is unknown.
    """
    first, last = metadata.first_timestamp, metadata.last_timestamp
    if first is None and last is None:
        return NO_DATA_LABEL
    if first is None or last is None or first == last:
        return _format_timestamp(first if first is not None else last, tz)
    return f"{_format_timestamp(first, tz)} - {_format_timestamp(last, tz)}"


def create_range_axis_label(metadata: TimeseriesMetadataOutput) -> str:
    """Label of a value axis: phenomenon plus unit of measure if known."""
    label = metadata.phenomenon_label or metadata.id
    if metadata.uom:
        label = f"{label} [{metadata.uom}]"
    return label


def create_chart_id(
    metadata: TimeseriesMetadataOutput,
    reference_label: Optional[str] = None,
    tz: tzinfo = timezone.utc,
) -> str:
    """
    Build the chart identifier used as dataset key and legend label.

    "<feature> (<range>)" for primary series and
    "<feature>, <reference> (<range>)" for reference series.
    """
    if not metadata.feature_label:
        raise ChartConfigurationError(
            f"Timeseries '{metadata.id}' has no feature label to build a chart id from."
        )
    chart_id = metadata.feature_label
    if reference_label is not None:
        chart_id += f", {reference_label}"
    return f"{chart_id} ({create_range_label(metadata, tz)})"


class ChartIndexAllocator:
    """
    Hands out chart slots for one plot.

    Parameters
    ----------
    primary_count : int
        Number of primary series on the plot. Reference slots start here.
    tz : tzinfo, default=UTC
        Timezone of the range labels.
    """

    def __init__(self, primary_count: int, tz: tzinfo = timezone.utc):
        if primary_count < 0:
            raise ValueError(f"primary_count must be >= 0, got {primary_count}.")
        self.primary_count = primary_count
        self.tz = tz
        self._next_reference_index = primary_count

    def allocate(
        self,
        primary_series: Iterable[TimeseriesMetadataOutput],
        colors: Optional[Dict[str, Optional[str]]] = None,
    ) -> Dict[str, ChartSlot]:
        """
        Assign consecutive indices to primary series in input order.

        Parameters
        ----------
        primary_series : Iterable[TimeseriesMetadataOutput]
            Metadata of the primary series.
        colors : Optional[Dict[str, Optional[str]]], default=None
            Explicit colors by series id. Missing ids use the palette.

        Returns
        -------
        Dict[str, ChartSlot]
            Slots keyed by series id, in allocation order.

        Raises
        ------
        ChartConfigurationError
            If more series than `primary_count` are given, an id repeats, or a
            chart id is empty.
        """
        colors = colors or {}
        slots: Dict[str, ChartSlot] = {}
        for index, metadata in enumerate(primary_series):
            if index >= self.primary_count:
                raise ChartConfigurationError(
                    f"More primary series than the {self.primary_count} allocated."
                )
            if metadata.id in slots:
                raise ChartConfigurationError(f"Duplicate timeseries id '{metadata.id}'.")
            slots[metadata.id] = ChartSlot(
                index=index,
                axis_index=index,
                color=colors.get(metadata.id) or color_for_index(index),
                label=create_chart_id(metadata, tz=self.tz),
                series_id=metadata.id,
            )

        logger.debug(f"Allocated {len(slots)} primary slots.")
        return slots

    def allocate_reference(
        self,
        parent_slot: ChartSlot,
        reference_id: str,
        label: str,
        color: Optional[str] = None,
    ) -> ChartSlot:
        """
        Append a reference slot after all primary slots.

        Parameters
        ----------
        parent_slot : ChartSlot
            Slot of the primary series owning the reference.
        reference_id : str
            Id of the reference series.
        label : str
            Full chart id of the reference series.
        color : Optional[str], default=None
            Explicit color. Defaults to the palette color of the new index.

        Returns
        -------
        ChartSlot
            Slot mapped onto the parent's range axis.
        """
        if parent_slot.is_reference:
            raise ChartConfigurationError(
                f"Reference '{reference_id}' cannot be attached to reference slot {parent_slot.index}."
            )
        index = self._next_reference_index
        slot = ChartSlot(
            index=index,
            axis_index=parent_slot.axis_index,
            color=color or color_for_index(index),
            label=label,
            series_id=parent_slot.series_id,
            reference_id=reference_id,
        )
        self._next_reference_index += 1
        return slot

    @property
    def slot_count(self) -> int:
        return self._next_reference_index

