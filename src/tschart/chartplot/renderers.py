from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np
from loguru import logger
from matplotlib.artist import Artist
from matplotlib.axes import Axes

MILLIS_PER_DAY = 86_400_000

# Default colors for series without an explicit color
DEFAULT_COLORS = [
    "black",
    "blue",
    "red",
    "green",
    "purple",
    "orange",
    "brown",
    "pink",
    "gray",
    "olive",
]

LINESTYLES = {"solid": "-", "dashed": "--", "dotted": ":"}


def color_for_index(index: int) -> str:
    """Return the default color for a series index, cycling the palette."""
    if index < 0:
        raise ValueError(f"Invalid series index: {index}. Must be >= 0.")
    return DEFAULT_COLORS[index % len(DEFAULT_COLORS)]


@dataclass
class XYDataset:
    """
    Time-indexed values of a single plotted series.

    Parameters
    ----------
    key : str
        Series key, used as legend label.
    x : np.ndarray
        Start times as datetime64[ms].
    y : np.ndarray
        Values.
    widths_ms : Optional[np.ndarray]
        Interval lengths in milliseconds for interval data, None for instants.
    """

    key: str
    x: np.ndarray
    y: np.ndarray
    widths_ms: Optional[np.ndarray] = None

    def __post_init__(self):
        self.x = np.asarray(self.x, dtype="datetime64[ms]")
        self.y = np.asarray(self.y, dtype=np.float64)
        if len(self.x) != len(self.y):
            raise ValueError(
                f"Dataset '{self.key}': x and y must have the same length. Got x={len(self.x)}, y={len(self.y)}"
            )
        if self.widths_ms is not None:
            self.widths_ms = np.asarray(self.widths_ms, dtype=np.int64)
            if len(self.widths_ms) != len(self.x):
                raise ValueError(
                    f"Dataset '{self.key}': widths must match x length. Got {len(self.widths_ms)}, expected {len(self.x)}"
                )

    def __len__(self) -> int:
        return len(self.x)


class Renderer(ABC):
    """Draws one dataset onto a matplotlib axes in a fixed color."""

    def __init__(self, color: Optional[str] = None):
        self._fixed_color = color
        self.color: Optional[str] = color

    def set_color_for_series_at(self, index: int) -> None:
        """Use the style color if one was given, otherwise the palette color at index."""
        self.color = self._fixed_color or color_for_index(index)

    @abstractmethod
    def draw(self, ax: Axes, dataset: XYDataset) -> Optional[Artist]:
        """Draw the dataset and return the artist to show in the legend."""


class LineRenderer(Renderer):
    def __init__(
        self,
        line_type: str = "solid",
        linewidth: float = 1.5,
        color: Optional[str] = None,
        alpha: float = 0.9,
    ):
        super().__init__(color)
        self.linestyle = LINESTYLES.get(line_type, "-")
        self.linewidth = linewidth
        self.alpha = alpha

    def draw(self, ax: Axes, dataset: XYDataset) -> Optional[Artist]:
        (line,) = ax.plot(
            dataset.x,
            dataset.y,
            label=dataset.key,
            color=self.color,
            linestyle=self.linestyle,
            linewidth=self.linewidth,
            alpha=self.alpha,
        )
        return line


class BarRenderer(Renderer):
    def __init__(
        self,
        width_fraction: float = 0.8,
        color: Optional[str] = None,
        alpha: float = 0.6,
    ):
        super().__init__(color)
        # Fractions above 1 would overlap neighbouring intervals
        self.width_fraction = min(width_fraction, 1.0)
        self.alpha = alpha

    def draw(self, ax: Axes, dataset: XYDataset) -> Optional[Artist]:
        if len(dataset) == 0:
            logger.debug(f"Dataset '{dataset.key}' is empty, no bars drawn.")
            return None
        if dataset.widths_ms is None:
            raise ValueError(f"Dataset '{dataset.key}' has no interval widths for bars.")

        bar_widths_ms = dataset.widths_ms * self.width_fraction
        # Center every bar within its interval
        offsets_ms = ((dataset.widths_ms - bar_widths_ms) / 2).astype(np.int64)
        left = dataset.x + offsets_ms.astype("timedelta64[ms]")

        return ax.bar(
            left,
            dataset.y,
            width=bar_widths_ms / MILLIS_PER_DAY,
            align="edge",
            label=dataset.key,
            color=self.color,
            alpha=self.alpha,
        )
