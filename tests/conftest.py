from __future__ import annotations

import pytest

from bubblelab.config import LayoutConfig, Point


class RecordingSurface:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.frames: list[dict] = []
        self.labels: dict = {}

    def clear(self) -> None:
        self.calls.append("clear")
        self.frames = []
        self.labels = {}

    def draw(self, nodes) -> None:
        self.calls.append("draw")
        self.frames.append({n.id: (n.x, n.y) for n in nodes})

    def show_labels(self, labels) -> None:
        self.calls.append("show_labels")
        self.labels = dict(labels)

    def hide_labels(self) -> None:
        self.calls.append("hide_labels")
        self.labels = {}


class RecordingSimulation:
    """Stands in for the force simulation; records calls and never moves nodes."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.nodes: list = []
        self.callback = None

    def set_nodes(self, nodes) -> None:
        self.calls.append("set_nodes")
        self.nodes = list(nodes)

    def on_tick(self, callback) -> None:
        self.calls.append("on_tick")
        self.callback = callback

    def start(self) -> None:
        self.calls.append("start")

    def stop(self) -> None:
        self.calls.append("stop")

    def run(self, max_ticks=None) -> int:
        return 0


@pytest.fixture
def two_region_config() -> LayoutConfig:
    return LayoutConfig(
        width=200,
        height=200,
        seed_width=200,
        seed_height=200,
        damper=0.1,
        region_targets={"A": Point(50, 50), "B": Point(150, 150)},
        region_labels={"A": Point(50, 10), "B": Point(150, 10)},
        region_colors={"A": "#a1dab4", "B": "#2c7fb8"},
    )


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def simulation() -> RecordingSimulation:
    return RecordingSimulation()


@pytest.fixture
def fdi_records() -> list[dict]:
    return [
        {"id": "USA", "country": "United States", "region": "Americas", "group": "High income", "year": 2014, "value": 5600000.0},
        {"id": "DEU", "country": "Germany", "region": "Europe", "group": "High income", "year": 2014, "value": 1580000.0},
        {"id": "CHN", "country": "China", "region": "Asia", "group": "Upper middle income", "year": 2014, "value": 730000.0},
        {"id": "ZAF", "country": "South Africa", "region": "Africa", "group": "Upper middle income", "year": 2014, "value": 150000.0},
        {"id": "AUS", "country": "Australia", "region": "Oceania", "group": "High income", "year": 2014, "value": 440000.0},
        {"id": "FJI", "country": "Fiji", "region": "Oceania", "group": "Upper middle income", "year": 2014, "value": 60.0},
    ]
