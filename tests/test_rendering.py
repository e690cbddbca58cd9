"""Tests for the multi-series orchestration onto a shared plot."""

from __future__ import annotations

import pytest
from conftest import ms

from tschart.chartplot.plot_surface import MultiAxisPlot, RangeAxis
from tschart.chartplot.renderers import DEFAULT_COLORS, BarRenderer, LineRenderer
from tschart.timeseries.allocation import ChartConfigurationError
from tschart.timeseries.context import RenderingContext
from tschart.timeseries.data import (
    ReferenceValueOutput,
    TimeseriesData,
    TimeseriesMetadataOutput,
    ValuePoint,
)
from tschart.timeseries.rendering import MultipleChartsRenderer, create_renderer, to_dataset
from tschart.timeseries.series import build_series
from tschart.timeseries.style import BarStyle, Granularity, LineStyle, StyleProperties

HOUR = 3600 * 1000


class RecordingSurface:
    """Plot surface that records every registration call."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.datasets = {}
        self.renderers = {}
        self.range_axes = {}
        self.mapping = {}

    def set_dataset(self, index, dataset):
        self.calls.append(("dataset", index))
        self.datasets[index] = dataset

    def set_renderer(self, index, renderer):
        self.calls.append(("renderer", index))
        self.renderers[index] = renderer

    def set_range_axis(self, index, axis):
        self.calls.append(("range_axis", index))
        self.range_axes[index] = axis

    def map_dataset_to_range_axis(self, dataset_index, axis_index):
        self.calls.append(("map", dataset_index, axis_index))
        self.mapping[dataset_index] = axis_index


def _values(start: int, n: int, value: float = 1.0, step: int = HOUR) -> list[ValuePoint]:
    return [ValuePoint(start + i * step, value) for i in range(n)]


def _metadata(ts_id: str, references: list[tuple[str, str]] = ()) -> TimeseriesMetadataOutput:
    return TimeseriesMetadataOutput(
        id=ts_id,
        feature_label=f"Feature {ts_id}",
        phenomenon_label=f"Phenomenon {ts_id}",
        uom="m",
        reference_values=[ReferenceValueOutput(ref_id, label) for ref_id, label in references],
        first_timestamp=ms(2025, 3, 3),
        last_timestamp=ms(2025, 3, 4),
    )


@pytest.fixture
def scenario():
    """Three primaries; the first and last carry references."""

    start = ms(2025, 3, 3)
    metadatas = [
        _metadata("p0", [("r0a", "Min"), ("r0b", "Max")]),
        _metadata("p1"),
        _metadata("p2", [("r2a", "Mean")]),
    ]
    data = {
        "p0": TimeseriesData(
            _values(start, 4),
            {"r0a": TimeseriesData(_values(start, 2, 0.0)), "r0b": TimeseriesData(_values(start, 2, 9.0))},
        ),
        "p1": TimeseriesData(_values(start, 30)),
        "p2": TimeseriesData(_values(start, 3), {"r2a": TimeseriesData(_values(start, 3, 5.0))}),
    }
    styles = {
        "p1": StyleProperties("bar", {"interval": "byDay"}),
        "p2": StyleProperties(
            "line",
            {"color": "#00aa00"},
            reference_value_style_options={"r2a": StyleProperties("line", {"lineType": "dashed"})},
        ),
    }
    return RenderingContext(timeseries_metadatas=metadatas, style_options=styles), data


def test_slots_are_planned_primaries_first_then_references(scenario) -> None:
    """References follow all primaries with one global counter."""

    context, data = scenario
    assignments = MultipleChartsRenderer(context).plan_slots(data)

    assert [a.slot.index for a in assignments] == [0, 1, 2, 3, 4, 5]
    assert [a.slot.reference_id for a in assignments] == [None, None, None, "r0a", "r0b", "r2a"]
    assert [a.slot.axis_index for a in assignments] == [0, 1, 2, 0, 0, 2]
    assert assignments[3].slot.label == "Feature p0, Min (2025-03-03 00:00 - 2025-03-04 00:00)"
    assert assignments[0].slot.label == "Feature p0 (2025-03-03 00:00 - 2025-03-04 00:00)"


def test_primary_slots_own_axes_and_references_share_parent_axis(scenario) -> None:
    """Only primaries register range axes; references map to their parent's axis."""

    context, data = scenario
    surface = RecordingSurface()
    result = MultipleChartsRenderer(context).generate_output(data, plot=surface)

    assert result is surface
    assert sorted(surface.datasets) == [0, 1, 2, 3, 4, 5]
    assert sorted(surface.range_axes) == [0, 1, 2]
    assert surface.mapping == {0: 0, 1: 1, 2: 2, 3: 0, 4: 0, 5: 2}
    assert sorted(surface.renderers) == [0, 1, 2, 3, 4, 5]
    assert surface.range_axes[1] == RangeAxis("Phenomenon p1 [m]", color=DEFAULT_COLORS[1])


def test_registration_follows_slot_order(scenario) -> None:
    """Datasets are registered in slot index order."""

    context, data = scenario
    surface = RecordingSurface()
    MultipleChartsRenderer(context).generate_output(data, plot=surface)

    dataset_calls = [call[1] for call in surface.calls if call[0] == "dataset"]
    assert dataset_calls == [0, 1, 2, 3, 4, 5]


def test_renderers_follow_styles_and_colors(scenario) -> None:
    """Each slot gets a renderer for its own style and a color by index."""

    context, data = scenario
    surface = RecordingSurface()
    MultipleChartsRenderer(context).generate_output(data, plot=surface)

    assert isinstance(surface.renderers[0], LineRenderer)
    assert isinstance(surface.renderers[1], BarRenderer)
    assert surface.renderers[0].color == DEFAULT_COLORS[0]
    assert surface.renderers[2].color == "#00aa00"
    assert surface.renderers[5].linestyle == "--"
    assert surface.renderers[4].color == DEFAULT_COLORS[4]


def test_bar_dataset_drops_trailing_interval_by_default(scenario) -> None:
    """30 hourly values over two days give one closed daily bar."""

    context, data = scenario
    surface = RecordingSurface()
    MultipleChartsRenderer(context).generate_output(data, plot=surface)

    assert surface.datasets[1].y.tolist() == [24.0]


def test_flush_trailing_interval_from_context(scenario) -> None:
    """The context switches trailing interval flushing on."""

    context, data = scenario
    context.flush_trailing_interval = True
    surface = RecordingSurface()
    MultipleChartsRenderer(context).generate_output(data, plot=surface)

    assert surface.datasets[1].y.tolist() == [24.0, 6.0]


def test_missing_data_raises_configuration_error(scenario) -> None:
    """Every requested timeseries needs data."""

    context, data = scenario
    del data["p1"]
    with pytest.raises(ChartConfigurationError, match="p1"):
        MultipleChartsRenderer(context).generate_output(data, plot=RecordingSurface())


def test_unknown_reference_label_falls_back_to_id(log_messages: list[str]) -> None:
    """A reference without declared metadata is labelled by its id."""

    context = RenderingContext(timeseries_metadatas=[_metadata("p")])
    data = {"p": TimeseriesData(_values(ms(2025, 3, 3), 2), {"undeclared": TimeseriesData([])})}
    assignments = MultipleChartsRenderer(context).plan_slots(data)

    assert assignments[1].slot.label.startswith("Feature p, undeclared (")
    assert any("undeclared" in message for message in log_messages)


def test_empty_series_registers_empty_dataset() -> None:
    """No values still registers a dataset."""

    context = RenderingContext(
        timeseries_metadatas=[_metadata("p")],
        style_options={"p": StyleProperties("bar")},
    )
    surface = RecordingSurface()
    MultipleChartsRenderer(context).generate_output({"p": TimeseriesData([])}, plot=surface)

    assert len(surface.datasets[0]) == 0
    assert surface.datasets[0].widths_ms is None


def test_reference_without_style_is_a_default_line(scenario) -> None:
    """References do not inherit their parent's bar style."""

    context, _ = scenario
    context.style_options["p1"] = StyleProperties("bar")
    assert context.get_timeseries_style_for("p1", "anything") is None
    assert context.get_timeseries_style_for("unknown") is None


def test_generate_output_renders_on_matplotlib(scenario, tmp_path) -> None:
    """The default surface draws all slots onto one figure."""

    context, data = scenario
    context.title = "Scenario"
    plot = MultipleChartsRenderer(context).generate_output(data)

    assert isinstance(plot, MultiAxisPlot)
    assert plot.dataset_indices == [0, 1, 2, 3, 4, 5]
    plot.render()
    assert len(plot.fig.axes) == 3
    plot.save(str(tmp_path / "scenario.png"))
    assert (tmp_path / "scenario.png").exists()


def test_series_with_equal_chart_ids_get_separate_legend_entries() -> None:
    """Same station and span still gives one legend entry per series."""

    metadatas = [
        TimeseriesMetadataOutput(
            id=ts_id,
            feature_label="Station",
            phenomenon_label=phenomenon,
            first_timestamp=ms(2025, 3, 3),
            last_timestamp=ms(2025, 3, 3, 1),
        )
        for ts_id, phenomenon in (("temp", "Temperature"), ("wind", "Wind speed"))
    ]
    data = {ts_id: TimeseriesData(_values(ms(2025, 3, 3), 2)) for ts_id in ("temp", "wind")}
    plot = MultipleChartsRenderer(RenderingContext(timeseries_metadatas=metadatas)).generate_output(data)
    plot.render()

    legend_labels = [text.get_text() for text in plot.ax.get_legend().get_texts()]
    assert legend_labels == ["Station (2025-03-03 00:00 - 2025-03-03 01:00)"] * 2


def test_create_renderer_dispatches_on_style() -> None:
    """Bar styles get bar renderers, line styles line renderers."""

    bar = create_renderer(BarStyle(interval=Granularity.DAY, width=0.5, color="red"))
    line = create_renderer(LineStyle(line_type="dotted", width=2.0))

    assert isinstance(bar, BarRenderer)
    assert bar.width_fraction == 0.5
    assert isinstance(line, LineRenderer)
    assert line.linestyle == ":"
    assert line.linewidth == 2.0
    with pytest.raises(TypeError):
        create_renderer(StyleProperties("bar"))


def test_to_dataset_keeps_interval_widths() -> None:
    """Bar series keep their interval lengths, line series have none."""

    points = _values(ms(2025, 3, 3), 3, step=24 * HOUR)
    bars = to_dataset(build_series("b", points, BarStyle(interval=Granularity.DAY)))
    lines = to_dataset(build_series("l", points, LineStyle()))

    assert bars.widths_ms.tolist() == [24 * HOUR, 24 * HOUR]
    assert lines.widths_ms is None
    assert bars.key == "b"
