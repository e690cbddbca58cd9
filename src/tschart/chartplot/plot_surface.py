from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

import matplotlib as mpl
import matplotlib.dates as mdates
import matplotlib.pyplot as plt
from loguru import logger

from .renderers import LineRenderer, Renderer, XYDataset


@dataclass(frozen=True)
class RangeAxis:
    """A value axis, identified on the plot by its index."""

    label: str
    color: Optional[str] = None


class PlotSurface(Protocol):
    """Index-addressed registrations of datasets, renderers and range axes."""

    def set_dataset(self, index: int, dataset: XYDataset) -> None: ...

    def set_renderer(self, index: int, renderer: Renderer) -> None: ...

    def set_range_axis(self, index: int, axis: RangeAxis) -> None: ...

    def map_dataset_to_range_axis(self, dataset_index: int, axis_index: int) -> None: ...


def _check_index(index: int, what: str) -> None:
    if index < 0:
        raise ValueError(f"Invalid {what} index: {index}. Must be >= 0.")


class MultiAxisPlot:
    """
    Shared plot of several time-indexed datasets with independent value axes.

    Datasets, renderers and range axes are registered by index first and only
    drawn when `render()` is called, so registrations may arrive in any order.
    Range axis 0 is the host axes; every further range axis is a twin of it
    with its spine shifted to the right. A dataset without an explicit mapping
    is drawn against range axis 0.
    """

    # Default styling constants
    DEFAULT_WIDTH = 10.0
    DEFAULT_HEIGHT = 5.0
    DEFAULT_DPI = 100
    DEFAULT_AXIS_OFFSET = 0.1  # fraction of axes width between stacked spines
    DEFAULT_DOMAIN_LABEL = "Time"

    def __init__(
        self,
        title: Optional[str] = None,
        width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT,
        dpi: int = DEFAULT_DPI,
        show_grid: bool = True,
        show_legend: bool = True,
        domain_label: str = DEFAULT_DOMAIN_LABEL,
        axis_offset: float = DEFAULT_AXIS_OFFSET,
    ):
        """
        Initialise an empty plot.

        Parameters
        ----------
        title : Optional[str], default=None
            Plot title.
        width : float, default=10.0
            Figure width in inches.
        height : float, default=5.0
            Figure height in inches.
        dpi : int, default=100
            Figure resolution.
        show_grid : bool, default=True
            Draw a grid on the host axes.
        show_legend : bool, default=True
            Draw a legend of all datasets.
        domain_label : str, default="Time"
            Label of the shared time axis.
        axis_offset : float, default=0.1
            Horizontal distance between additional range axis spines, as a
            fraction of the axes width.
        """
        self.title = title
        self.width = width
        self.height = height
        self.dpi = dpi
        self.show_grid = show_grid
        self.show_legend = show_legend
        self.domain_label = domain_label
        self.axis_offset = axis_offset

        self._datasets: Dict[int, XYDataset] = {}
        self._renderers: Dict[int, Renderer] = {}
        self._range_axes: Dict[int, RangeAxis] = {}
        self._dataset_to_axis: Dict[int, int] = {}

        self.fig: Optional[mpl.figure.Figure] = None
        self.ax: Optional[mpl.axes.Axes] = None
        self._axes_by_index: Dict[int, mpl.axes.Axes] = {}

    def set_dataset(self, index: int, dataset: XYDataset) -> None:
        _check_index(index, "dataset")
        if index in self._datasets:
            logger.warning(f"Replacing dataset at index {index}.")
        self._datasets[index] = dataset
        logger.debug(f"Dataset '{dataset.key}' set at index {index} ({len(dataset)} points)")

    def set_renderer(self, index: int, renderer: Renderer) -> None:
        _check_index(index, "renderer")
        self._renderers[index] = renderer

    def set_range_axis(self, index: int, axis: RangeAxis) -> None:
        _check_index(index, "range axis")
        self._range_axes[index] = axis

    def map_dataset_to_range_axis(self, dataset_index: int, axis_index: int) -> None:
        _check_index(dataset_index, "dataset")
        _check_index(axis_index, "range axis")
        self._dataset_to_axis[dataset_index] = axis_index

    def get_dataset(self, index: int) -> Optional[XYDataset]:
        return self._datasets.get(index)

    def get_renderer(self, index: int) -> Optional[Renderer]:
        return self._renderers.get(index)

    def get_range_axis(self, index: int) -> Optional[RangeAxis]:
        return self._range_axes.get(index)

    def get_range_axis_index_for_dataset(self, dataset_index: int) -> int:
        return self._dataset_to_axis.get(dataset_index, 0)

    @property
    def dataset_count(self) -> int:
        return len(self._datasets)

    @property
    def dataset_indices(self) -> List[int]:
        return sorted(self._datasets)

    @property
    def range_axis_indices(self) -> List[int]:
        return sorted(self._range_axes)

    def _create_range_axes(self) -> None:
        """Create the host axes for range axis 0 and twins for all others."""
        self._axes_by_index = {0: self.ax}
        extra = 0
        for axis_index in self.range_axis_indices:
            if axis_index == 0:
                continue
            twin = self.ax.twinx()
            twin.spines["right"].set_position(("axes", 1.0 + extra * self.axis_offset))
            self._axes_by_index[axis_index] = twin
            extra += 1

        for axis_index, axes in self._axes_by_index.items():
            range_axis = self._range_axes.get(axis_index)
            if range_axis is None:
                continue
            axes.set_ylabel(range_axis.label)
            if range_axis.color is not None:
                axes.yaxis.label.set_color(range_axis.color)
                axes.tick_params(axis="y", colors=range_axis.color)

    def _axes_for_dataset(self, dataset_index: int) -> mpl.axes.Axes:
        axis_index = self.get_range_axis_index_for_dataset(dataset_index)
        axes = self._axes_by_index.get(axis_index)
        if axes is None:
            logger.warning(
                f"Dataset {dataset_index} is mapped to unknown range axis {axis_index}. Using axis 0."
            )
            return self.ax
        return axes

    def _configure_domain_axis(self) -> None:
        locator = mdates.AutoDateLocator()
        self.ax.xaxis.set_major_locator(locator)
        self.ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(locator))
        self.ax.set_xlabel(self.domain_label)

    def _update_legend(self) -> None:
        """
        Collect handles from every range axis into one legend on the host axes.

        Datasets may share a key, so handles are deduplicated by identity only.
        """
        handles, labels = [], []
        seen = set()
        for axes in self._axes_by_index.values():
            axes_handles, axes_labels = axes.get_legend_handles_labels()
            for handle, label in zip(axes_handles, axes_labels):
                if id(handle) not in seen:
                    seen.add(id(handle))
                    handles.append(handle)
                    labels.append(label)

        if handles:
            self.ax.legend(handles, labels, loc="upper left")
        else:
            logger.debug("No legend to show.")

    def render(self) -> None:
        """
        Draw all registered datasets. Must be called after all registrations.
        """
        if self.fig is not None:
            logger.warning("Plot already rendered. Create a new instance to re-render.")
            return

        logger.info(
            f"Rendering plot with {self.dataset_count} datasets on {max(len(self._range_axes), 1)} range axes..."
        )
        self.fig, self.ax = plt.subplots(figsize=(self.width, self.height), dpi=self.dpi)
        self._create_range_axes()

        for index in self.dataset_indices:
            dataset = self._datasets[index]
            renderer = self._renderers.get(index)
            if renderer is None:
                logger.debug(f"No renderer at index {index}, using a line renderer.")
                renderer = LineRenderer()
                renderer.set_color_for_series_at(index)
            renderer.draw(self._axes_for_dataset(index), dataset)

        self._configure_domain_axis()
        if self.title:
            self.ax.set_title(self.title)
        if self.show_grid:
            self.ax.grid(True, alpha=0.3)
        if self.show_legend:
            self._update_legend()

        self.fig.autofmt_xdate()
        logger.info("Plot rendering complete.")

    def save(self, filepath: str) -> None:
        """
        Save the rendered plot to a file.

        Parameters
        ----------
        filepath : str
            Path to save the plot image.
        """
        if self.fig is None or self.ax is None:
            raise RuntimeError("Plot has not been rendered yet.")
        self.fig.savefig(filepath, bbox_inches="tight")
        logger.info(f"Plot saved to {filepath}")

    def close(self) -> None:
        if self.fig is not None:
            plt.close(self.fig)

    def show(self) -> None:
        """Display the plot."""
        if self.fig is None:
            self.render()
        plt.show()
