# bubblelab/chart_state.py - Chart requests, UI events and the chart handle
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional, Union

from bubblelab.bubble_layout import BubbleChartError, BubbleLayoutEngine
from bubblelab.chart_generator import BubbleSurface
from bubblelab.config import LayoutMode


logger = logging.getLogger(__name__)

DEFAULT_DATASET = "out"
DEFAULT_YEAR = 2014


class UnknownDataset(BubbleChartError, KeyError):
    def __init__(self, dataset_id):
        self.dataset_id = dataset_id
        super().__init__(dataset_id)

    def __str__(self):
        return f"Unknown dataset: {self.dataset_id!r}"


@dataclass(frozen=True)
class ChartRequest:
    dataset: str = DEFAULT_DATASET
    year: int = DEFAULT_YEAR
    mode: LayoutMode = LayoutMode.GROUPED


@dataclass(frozen=True)
class SelectMode:
    mode: Union[LayoutMode, str]


@dataclass(frozen=True)
class SelectDataset:
    dataset_id: str


@dataclass(frozen=True)
class SelectYear:
    year: int


ChartEvent = Union[SelectMode, SelectDataset, SelectYear]


def reduce(request: ChartRequest, event: ChartEvent) -> ChartRequest:
    """Return the request that follows ``event``; the input request is left untouched."""
    if isinstance(event, SelectMode):
        return replace(request, mode=LayoutMode.from_button(event.mode))
    if isinstance(event, SelectDataset):
        return replace(request, dataset=str(event.dataset_id))
    if isinstance(event, SelectYear):
        return replace(request, year=int(event.year))
    raise TypeError(f"Unsupported chart event: {event!r}")


@dataclass
class ChartHandle:
    """
    Owns one bubble chart: its engine, surface, datasets and current request.

    ``datasets`` maps a dataset id ("in" / "out") to ``{year: [records]}``.
    """

    engine: BubbleLayoutEngine
    datasets: Mapping[str, Mapping[int, list]]
    surface: BubbleSurface = field(default_factory=BubbleSurface)
    request: ChartRequest = field(default_factory=ChartRequest)

    @classmethod
    def open(cls, engine, datasets, request: Optional[ChartRequest] = None, surface=None) -> "ChartHandle":
        request = request or ChartRequest(mode=engine.mode)
        surface = surface or BubbleSurface(frame_every=engine.config.frame_every)
        handle = cls(engine=engine, datasets=datasets, surface=surface, request=request)
        handle.engine.mode = request.mode
        handle.render()
        return handle

    def is_stale(self, config) -> bool:
        """True when the engine was built from a different layout config."""
        return self.engine.config != config

    @property
    def mode(self) -> LayoutMode:
        return self.request.mode

    @property
    def nodes(self):
        return self.engine.nodes

    def records(self, request: Optional[ChartRequest] = None) -> list:
        request = request or self.request
        if request.dataset not in self.datasets:
            raise UnknownDataset(request.dataset)
        return list(self.datasets[request.dataset].get(int(request.year), []))

    def render(self):
        nodes = self.engine.render(self.surface, self.records())
        self.engine.settle()
        return nodes

    def dispatch(self, event: ChartEvent) -> ChartRequest:
        """Apply ``event``: re-render on a data change, otherwise just switch layout mode."""
        previous = self.request
        request = reduce(previous, event)
        if request == previous:
            return request

        if (request.dataset, request.year) != (previous.dataset, previous.year):
            # Validate before the engine tears anything down.
            records = self.records(request)
            self.engine.render(self.surface, records)
            if self.engine.mode is not request.mode:
                self.engine.set_mode(request.mode)
            self.engine.settle()
        else:
            self.engine.set_mode(request.mode)
            self.surface.restart_frames(self.engine.nodes)
            self.engine.settle()
        self.request = request

        logger.info("chart request now %s/%s/%s", request.dataset, request.year, request.mode.value)
        return request
