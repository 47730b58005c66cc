from __future__ import annotations

import altair as alt
import pandas as pd
import pytest

from bubblelab.bubble_layout import Node
from bubblelab.chart_generator import (
    BubbleSurface,
    add_commas,
    create_bubble_figure,
    create_crime_category_chart,
    darker,
    format_amount,
    tooltip_html,
)
from bubblelab.config import LayoutConfig, Point


def _nodes() -> list[Node]:
    return [
        Node(id="USA", radius=85.0, value=5600000.0, category="Americas", x=300.0, y=250.0, name="United States", year="2014"),
        Node(id="FJI", radius=2.5, value=60.0, category="Oceania", x=700.0, y=400.0, name="Fiji", year="2014"),
    ]


@pytest.mark.parametrize(
    "value, expected",
    [
        (999, "999"),
        (1234, "1,234"),
        (1234567, "1,234,567"),
        ("1234.5678", "1,234.5678"),
        (-9876543, "-9,876,543"),
    ],
)
def test_add_commas(value, expected) -> None:
    assert add_commas(value) == expected


def test_format_amount_drops_trailing_zero() -> None:
    assert format_amount(5600000.0) == "5,600,000"
    assert format_amount(12.5) == "12.5"


def test_darker_scales_channels() -> None:
    assert darker("#646464") == "#464646"
    assert darker("#000000") == "#000000"


def test_tooltip_lists_country_amount_and_year() -> None:
    html = tooltip_html(_nodes()[0])
    assert "United States" in html
    assert "$5,600,000 million" in html
    assert "2014" in html


def test_surface_keeps_every_nth_frame() -> None:
    surface = BubbleSurface(frame_every=2)
    nodes = _nodes()
    for _ in range(5):
        surface.draw(nodes)
    assert len(surface.frames) == 3

    surface.restart_frames(nodes)
    assert surface.frames == [{"USA": (300.0, 250.0), "FJI": (700.0, 400.0)}]

    surface.show_labels({"Asia": Point(1, 2)})
    surface.clear()
    assert surface.frames == [] and surface.labels == {}


def test_bubble_figure_uses_canvas_units() -> None:
    config = LayoutConfig()
    surface = BubbleSurface()
    nodes = _nodes()
    surface.draw(nodes)
    nodes[0].x = 320.0
    surface.draw(nodes)

    fig = create_bubble_figure(surface, nodes, config=config)

    trace = fig.data[0]
    assert list(trace.x) == [320.0, 700.0]
    assert list(trace.marker.size) == [170.0, 5.0]
    assert list(trace.marker.color) == [config.region_colors["Americas"], config.region_colors["Oceania"]]
    assert tuple(fig.layout.yaxis.range) == (600, 0)
    assert fig.layout.width == 940 and fig.layout.height == 600
    assert len(fig.frames) == 2
    assert list(fig.frames[0].data[0].x) == [300.0, 700.0]
    assert fig.layout.updatemenus[0].buttons[0].method == "animate"
    assert len(fig.layout.annotations) == 0


def test_bubble_figure_shows_visible_labels() -> None:
    config = LayoutConfig()
    surface = BubbleSurface()
    surface.show_labels(config.region_labels)

    fig = create_bubble_figure(surface, _nodes(), config=config)

    texts = sorted(a.text for a in fig.layout.annotations)
    assert texts == sorted(f"<b>{name}</b>" for name in config.region_labels)


def test_bubble_figure_for_empty_chart_has_no_animation() -> None:
    fig = create_bubble_figure(BubbleSurface(), [])
    assert len(fig.data[0].x) == 0
    assert len(fig.frames) == 0
    assert len(fig.layout.updatemenus) == 0


def test_unknown_region_gets_neutral_color() -> None:
    node = Node(id="ATL", radius=3, value=1, category="Atlantis", x=1, y=1, name="Atlantis", year="2014")
    fig = create_bubble_figure(BubbleSurface(), [node])
    assert list(fig.data[0].marker.color) == ["#cccccc"]


def _chart_frame(chart) -> pd.DataFrame:
    # layers sharing one frame get it hoisted onto the layer chart
    if isinstance(chart.data, pd.DataFrame):
        return chart.data
    return chart.layer[0].data


def test_crime_chart_filters_selected_categories() -> None:
    crime_df = pd.DataFrame(
        {
            "year": [2012, 2012, 2013, 2013],
            "category": ["murder", "arson", "murder", "arson"],
            "count": [10, 4, 12, 5],
        }
    )

    chart = create_crime_category_chart(crime_df, ["murder"])

    assert isinstance(chart, alt.LayerChart)
    data = _chart_frame(chart)
    assert list(data["category"].unique()) == ["murder"]
    assert list(data["count"]) == [10, 12]


def test_crime_chart_with_empty_selection() -> None:
    crime_df = pd.DataFrame({"year": [2012], "category": ["murder"], "count": [10]})
    chart = create_crime_category_chart(crime_df, [])
    assert list(_chart_frame(chart)["category"]) == ["No selection"]
