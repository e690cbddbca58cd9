from datetime import datetime, timedelta, timezone
from warnings import warn

import matplotlib as mpl
import numpy as np

from tschart import (
    MultipleChartsRenderer,
    ReferenceValueOutput,
    RenderingContext,
    StyleProperties,
    TimeseriesData,
    TimeseriesMetadataOutput,
    ValuePoint,
    configure_logging,
)

# --- User configuration dictionary ---
CONFIG = {
    "LOG_LEVEL": "INFO",  # logging level: DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
    "OUTPUT": "example_chart.png",  # set to None to show the plot interactively
    "START": datetime(2025, 3, 1, tzinfo=timezone.utc),
    "DAYS": 45,
    "SAMPLE_INTERVAL_H": 3,  # hours between generated samples
    "FLUSH_TRAILING_INTERVAL": False,  # emit the last bar of each bar series
    "SEED": 7,
    # ---
    "SERIES": [
        {
            "id": "ts_temperature",
            "feature": "Weather station Muenster",
            "phenomenon": "Air temperature",
            "uom": "degC",
            "style": {"chart_type": "line", "properties": {"lineType": "solid"}},
            "references": [
                {"id": "ref_mean", "label": "Long-term mean", "offset": 0.0},
            ],
        },
        {
            "id": "ts_precipitation",
            "feature": "Weather station Muenster",
            "phenomenon": "Precipitation",
            "uom": "mm",
            "style": {"chart_type": "bar", "properties": {"interval": "byDay"}},
            "references": [],
        },
    ],
}


def _generate_values(
    start: datetime, days: int, step_h: int, rng: np.random.Generator, kind: str
) -> list:
    n_samples = days * 24 // step_h
    times = [start + timedelta(hours=i * step_h) for i in range(n_samples)]
    if kind == "bar":
        values = np.clip(rng.gamma(0.4, 2.0, n_samples) - 0.3, 0.0, None)
    else:
        hours = np.arange(n_samples) * step_h
        values = 8.0 + 6.0 * np.sin(2 * np.pi * hours / 24.0) + rng.normal(0, 1.0, n_samples)
    return [ValuePoint.from_datetime(t, v) for t, v in zip(times, values)]


def main() -> None:
    """
    Build the configured series and render them into one chart.
    """
    configure_logging(CONFIG.get("LOG_LEVEL", "INFO"))
    rng = np.random.default_rng(CONFIG["SEED"])

    metadatas = []
    styles = {}
    data = {}
    for series in CONFIG["SERIES"]:
        style = StyleProperties(**series["style"])
        values = _generate_values(
            CONFIG["START"], CONFIG["DAYS"], CONFIG["SAMPLE_INTERVAL_H"], rng, style.chart_type
        )

        references = {}
        for reference in series["references"]:
            references[reference["id"]] = TimeseriesData(
                [ValuePoint(v.timestamp, 8.0 + reference["offset"]) for v in values]
            )
            style.reference_value_style_options[reference["id"]] = StyleProperties(
                "line", {"lineType": "dashed"}
            )

        metadatas.append(
            TimeseriesMetadataOutput(
                id=series["id"],
                feature_label=series["feature"],
                phenomenon_label=series["phenomenon"],
                uom=series["uom"],
                reference_values=[
                    ReferenceValueOutput(r["id"], r["label"]) for r in series["references"]
                ],
                first_timestamp=values[0].timestamp,
                last_timestamp=values[-1].timestamp,
            )
        )
        styles[series["id"]] = style
        data[series["id"]] = TimeseriesData(values, references)

    context = RenderingContext(
        timeseries_metadatas=metadatas,
        style_options=styles,
        title="Example station",
        flush_trailing_interval=CONFIG.get("FLUSH_TRAILING_INTERVAL", False),
    )
    plot = MultipleChartsRenderer(context).generate_output(data)

    if CONFIG.get("OUTPUT"):
        plot.render()
        plot.save(CONFIG["OUTPUT"])
    else:
        plot.show()


if __name__ == "__main__":
    # Set Matplotlib rcParams directly here
    for optn, val in {
        "figure.constrained_layout.use": False,
        "font.family": ("sans-serif",),
        "font.size": 11,
        "legend.fontsize": "x-small",
        "lines.linewidth": 1.8,
        "xtick.direction": "in",
        "ytick.direction": "in",
        "axes.labelsize": 11,
    }.items():
        if isinstance(val, (list, tuple)):
            val = tuple(val)
        try:
            mpl.rcParams[optn] = val
        except KeyError:
            warn(f"mpl rcparams key '{optn}' not recognised as a valid rc parameter.")
    main()
