"""Tests for style classification and interval resolution."""

from __future__ import annotations

import pytest

from tschart.timeseries.style import (
    BarStyle,
    ChartType,
    Granularity,
    LineStyle,
    StyleProperties,
    classify,
    create_style,
    is_bar_style,
    is_line_style,
    resolve_interval,
)


@pytest.mark.parametrize(
    "style, expected",
    [
        (StyleProperties("bar"), ChartType.BAR),
        (StyleProperties("line"), ChartType.LINE),
        (StyleProperties(None), ChartType.LINE),
        (StyleProperties("scatter"), ChartType.LINE),
        (None, ChartType.LINE),
    ],
)
def test_classify_is_bar_or_line(style, expected) -> None:
    """Every style is exactly one of bar or line; missing styles are lines."""

    assert classify(style) is expected
    assert is_bar_style(style) != is_line_style(style)
    assert is_bar_style(style) == (expected is ChartType.BAR)


@pytest.mark.parametrize(
    "interval, expected",
    [
        ("byHour", Granularity.HOUR),
        ("byDay", Granularity.DAY),
        ("byMonth", Granularity.MONTH),
        ("byWeek", Granularity.WEEK),
        ("byFortnight", Granularity.WEEK),
        ("", Granularity.WEEK),
    ],
)
def test_resolve_interval(interval: str, expected: Granularity) -> None:
    """Only hour, day and month are honoured; everything else is weekly."""

    style = StyleProperties("bar", {"interval": interval})
    assert resolve_interval(style) is expected


def test_resolve_interval_defaults_to_week_without_property() -> None:
    """A bar style without an interval aggregates by week."""

    assert resolve_interval(StyleProperties("bar")) is Granularity.WEEK
    assert resolve_interval(None) is Granularity.WEEK


def test_unrecognised_interval_is_not_an_error(log_messages: list[str]) -> None:
    """Unknown interval strings fall back silently, logging at most."""

    style = create_style(StyleProperties("bar", {"interval": "byFortnight"}))
    assert style == BarStyle(interval=Granularity.WEEK)
    assert any("byFortnight" in message for message in log_messages)


def test_create_style_bar_carries_its_parameters() -> None:
    """Bar styles carry granularity, width and color."""

    style = create_style(
        StyleProperties("bar", {"interval": "byDay", "width": "0.5", "color": "#336699"})
    )
    assert style == BarStyle(interval=Granularity.DAY, width=0.5, color="#336699")


def test_create_style_line_carries_its_parameters() -> None:
    """Line styles carry line type, width and color and no interval."""

    style = create_style(
        StyleProperties("line", {"lineType": "dashed", "width": "2", "interval": "byDay"})
    )
    assert style == LineStyle(line_type="dashed", width=2.0, color=None)


def test_create_style_defaults_to_line_for_missing_style() -> None:
    """No style at all renders as a default line."""

    assert create_style(None) == LineStyle()


@pytest.mark.parametrize("width", ["wide", "-1", "0"])
def test_create_style_invalid_width_falls_back(width: str) -> None:
    """Invalid widths use the default instead of failing."""

    assert create_style(StyleProperties("line", {"width": width})).width == LineStyle().width
    assert create_style(StyleProperties("bar", {"width": width})).width == BarStyle().width


def test_create_style_invalid_line_type_falls_back() -> None:
    """Unknown line types render solid."""

    assert create_style(StyleProperties("line", {"lineType": "wiggly"})).line_type == "solid"


def test_reference_style_lookup() -> None:
    """Reference styles are looked up on their parent's style options."""

    reference = StyleProperties("bar")
    style = StyleProperties("line", reference_value_style_options={"ref": reference})
    assert style.get_reference_style("ref") is reference
    assert style.get_reference_style("other") is None
