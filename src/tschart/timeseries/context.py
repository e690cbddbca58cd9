from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Dict, List, Optional

from tschart.timeseries.data import TimeseriesMetadataOutput
from tschart.timeseries.style import StyleProperties


@dataclass
class RenderingContext:
    """
    Everything a chart render needs besides the measurements.

    Parameters
    ----------
    timeseries_metadatas : List[TimeseriesMetadataOutput]
        Primary series in the order their slots are allocated.
    style_options : Dict[str, StyleProperties]
        Style per timeseries id. Missing entries render as default lines.
    title : Optional[str]
        Plot title.
    width, height : float
        Figure size in inches.
    dpi : int
        Figure resolution.
    show_grid : bool
        Draw a grid.
    show_legend : bool
        Draw a legend.
    flush_trailing_interval : bool
        Emit the last bar interval of every series. Off by default, in which
        case the last interval of a bar series is not shown.
    tz : tzinfo
        Timezone of calendar intervals and range labels.
    """

    DEFAULT_WIDTH = 10.0
    DEFAULT_HEIGHT = 5.0
    DEFAULT_DPI = 100

    timeseries_metadatas: List[TimeseriesMetadataOutput] = field(default_factory=list)
    style_options: Dict[str, StyleProperties] = field(default_factory=dict)
    title: Optional[str] = None
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    dpi: int = DEFAULT_DPI
    show_grid: bool = True
    show_legend: bool = True
    flush_trailing_interval: bool = False
    tz: tzinfo = timezone.utc

    def get_timeseries_style_for(
        self, timeseries_id: str, reference_id: Optional[str] = None
    ) -> Optional[StyleProperties]:
        """
        Return the style of a timeseries, or of one of its reference series.

        A reference series without its own style is drawn as a default line,
        not in the style of its parent.
        """
        style = self.style_options.get(timeseries_id)
        if reference_id is None:
            return style
        if style is None:
            return None
        return style.get_reference_style(reference_id)
