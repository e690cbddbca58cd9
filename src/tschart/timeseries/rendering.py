import sys
from dataclasses import dataclass
from typing import Dict, List, Optional

from loguru import logger

from tschart.chartplot.plot_surface import MultiAxisPlot, PlotSurface, RangeAxis
from tschart.chartplot.renderers import BarRenderer, LineRenderer, Renderer, XYDataset
from tschart.timeseries.allocation import (
    ChartConfigurationError,
    ChartIndexAllocator,
    ChartSlot,
    create_chart_id,
    create_range_axis_label,
)
from tschart.timeseries.context import RenderingContext
from tschart.timeseries.data import TimeseriesData, TimeseriesMetadataOutput
from tschart.timeseries.series import NamedSeries, build_series
from tschart.timeseries.style import (
    BarStyle,
    LineStyle,
    SeriesStyle,
    StyleProperties,
    create_style,
)


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure loguru logging with specified level.

    Parameters
    ----------
    log_level : str, default="INFO"
        Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        colorize=True,
    )


def create_renderer(style: SeriesStyle) -> Renderer:
    """Create the matplotlib renderer matching a resolved style."""
    match style:
        case BarStyle():
            return BarRenderer(width_fraction=style.width, color=style.color)
        case LineStyle():
            return LineRenderer(
                line_type=style.line_type, linewidth=style.width, color=style.color
            )
        case _:
            raise TypeError(f"Unsupported style type: {type(style).__name__}")


def to_dataset(series: NamedSeries) -> XYDataset:
    """Convert a named series into a plottable dataset."""
    widths = series.durations()
    return XYDataset(
        key=series.id,
        x=series.start_times(),
        y=series.values(),
        widths_ms=widths if widths.any() else None,
    )


@dataclass(frozen=True)
class SlotAssignment:
    """A planned slot together with the data and style drawn into it."""

    slot: ChartSlot
    data: TimeseriesData
    style: SeriesStyle
    metadata: TimeseriesMetadataOutput


class MultipleChartsRenderer:
    """
    Renders several independently styled timeseries onto one multi-axis plot.

    Slots are planned for all series first, primary series then their
    references, and only then are the series built and registered.
    """

    def __init__(self, context: RenderingContext):
        self.context = context

    def _style_for(
        self, timeseries_id: str, reference_id: Optional[str] = None
    ) -> SeriesStyle:
        properties: Optional[StyleProperties] = self.context.get_timeseries_style_for(
            timeseries_id, reference_id
        )
        return create_style(properties)

    def _reference_label(
        self, reference_id: str, metadata: TimeseriesMetadataOutput
    ) -> str:
        reference_output = metadata.get_reference_value(reference_id)
        if reference_output is None or not reference_output.label:
            logger.warning(
                f"No label for reference value '{reference_id}' of timeseries '{metadata.id}'. Using its id."
            )
            return reference_id
        return reference_output.label

    def plan_slots(self, data: Dict[str, TimeseriesData]) -> List[SlotAssignment]:
        """
        Allocate a slot for every primary and reference series.

        Parameters
        ----------
        data : Dict[str, TimeseriesData]
            Measurements keyed by timeseries id.

        Returns
        -------
        List[SlotAssignment]
            Assignments in slot index order.

        Raises
        ------
        ChartConfigurationError
            If a requested timeseries has no data or a chart id is empty.
        """
        metadatas = self.context.timeseries_metadatas
        missing = [metadata.id for metadata in metadatas if metadata.id not in data]
        if missing:
            raise ChartConfigurationError(f"No data for timeseries: {missing}")

        styles = {metadata.id: self._style_for(metadata.id) for metadata in metadatas}
        allocator = ChartIndexAllocator(len(metadatas), tz=self.context.tz)
        primary_slots = allocator.allocate(
            metadatas, colors={ts_id: style.color for ts_id, style in styles.items()}
        )

        primaries: List[SlotAssignment] = []
        references: List[SlotAssignment] = []
        for metadata in metadatas:
            timeseries_data = data[metadata.id]
            parent_slot = primary_slots[metadata.id]
            primaries.append(
                SlotAssignment(parent_slot, timeseries_data, styles[metadata.id], metadata)
            )
            if not timeseries_data.has_reference_values():
                continue

            reference_values = timeseries_data.get_metadata().get_reference_values()
            for reference_id, reference_data in reference_values.items():
                reference_style = self._style_for(metadata.id, reference_id)
                label = create_chart_id(
                    metadata, self._reference_label(reference_id, metadata), tz=self.context.tz
                )
                slot = allocator.allocate_reference(
                    parent_slot, reference_id, label, color=reference_style.color
                )
                references.append(
                    SlotAssignment(slot, reference_data, reference_style, metadata)
                )

        logger.debug(
            f"Planned {len(primaries)} primary and {len(references)} reference slots."
        )
        return primaries + references

    def _register(self, plot: PlotSurface, assignment: SlotAssignment) -> NamedSeries:
        slot = assignment.slot
        series = build_series(
            slot.label,
            assignment.data.get_values(),
            assignment.style,
            flush_trailing=self.context.flush_trailing_interval,
            tz=self.context.tz,
        )

        plot.set_dataset(slot.index, to_dataset(series))
        if not slot.is_reference:
            plot.set_range_axis(
                slot.index,
                RangeAxis(create_range_axis_label(assignment.metadata), color=slot.color),
            )
        plot.map_dataset_to_range_axis(slot.index, slot.axis_index)

        renderer = create_renderer(assignment.style)
        renderer.set_color_for_series_at(slot.index)
        plot.set_renderer(slot.index, renderer)

        logger.debug(
            f"Registered '{slot.label}' at index {slot.index} on axis {slot.axis_index} ({len(series)} points)"
        )
        return series

    def generate_output(
        self,
        data: Dict[str, TimeseriesData],
        plot: Optional[PlotSurface] = None,
    ) -> PlotSurface:
        """
        Build all series and register them on a plot surface.

        Parameters
        ----------
        data : Dict[str, TimeseriesData]
            Measurements keyed by timeseries id.
        plot : Optional[PlotSurface], default=None
            Surface to register on. A new MultiAxisPlot is created if None.

        Returns
        -------
        PlotSurface
            The populated plot surface. Call `render()` on a MultiAxisPlot
            to draw it.
        """
        logger.info(
            f"Generating chart for {len(self.context.timeseries_metadatas)} timeseries"
        )
        if plot is None:
            plot = MultiAxisPlot(
                title=self.context.title,
                width=self.context.width,
                height=self.context.height,
                dpi=self.context.dpi,
                show_grid=self.context.show_grid,
                show_legend=self.context.show_legend,
            )

        assignments = self.plan_slots(data)
        for assignment in assignments:
            self._register(plot, assignment)

        logger.info(f"Registered {len(assignments)} datasets.")
        return plot
