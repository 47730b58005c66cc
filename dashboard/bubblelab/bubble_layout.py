# bubblelab/bubble_layout.py - Bubble node construction and layout modes
"""
Layout engine behind the investment bubble chart.

The engine turns raw records into bubble nodes, hands them to a force
simulation and, on every simulation tick, eases each node toward the target
point of the active layout mode:

- ``GROUPED``: every bubble is pulled toward the canvas center.
- ``SPLIT``: each bubble is pulled toward the point registered for its
  region, and the region labels are shown.

Switching modes only swaps the target function; positions are kept and the
same simulation keeps running, so bubbles glide to their new places.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from bubblelab.config import LayoutConfig, LayoutMode, Point
from bubblelab.force_simulation import ForceSimulation


logger = logging.getLogger(__name__)


class BubbleChartError(Exception):
    """Base class for bubble chart failures."""


class InvalidValue(BubbleChartError, ValueError):
    def __init__(self, record_id, value):
        self.record_id = record_id
        self.value = value
        super().__init__(f"Record {record_id!r} has an invalid value: {value!r}")


class InvalidRecord(BubbleChartError, ValueError):
    pass


class MissingCategoryTarget(BubbleChartError, KeyError):
    def __init__(self, category):
        self.category = category
        super().__init__(category)

    def __str__(self):
        return f"No split target registered for category {self.category!r}"


@dataclass
class Node:
    id: str
    radius: float
    value: float
    category: str
    x: float
    y: float
    name: str = ""
    year: Optional[str] = None
    group: Optional[str] = None


class RadiusScale:
    """Power scale from ``[0, max_value]`` onto ``[min_radius, max_radius]`` (exponent 0.5)."""

    def __init__(self, max_value, min_radius, max_radius, exponent=0.5):
        self.max_value = float(max_value)
        self.min_radius = float(min_radius)
        self.max_radius = float(max_radius)
        self.exponent = exponent

    def __call__(self, value) -> float:
        span = self.max_value ** self.exponent
        if span == 0:
            return self.min_radius
        t = (float(value) ** self.exponent) / span
        return self.min_radius + t * (self.max_radius - self.min_radius)


def parse_value(record_id, raw) -> float:
    """Strict numeric parse: no coercion of missing/garbage values to zero."""
    if raw is None or isinstance(raw, bool):
        raise InvalidValue(record_id, raw)
    if isinstance(raw, str):
        text = raw.strip().replace(",", "")
        if not text:
            raise InvalidValue(record_id, raw)
        try:
            value = float(text)
        except ValueError:
            raise InvalidValue(record_id, raw) from None
    else:
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise InvalidValue(record_id, raw) from None
    if not math.isfinite(value) or value < 0:
        raise InvalidValue(record_id, raw)
    return value


class BubbleLayoutEngine:
    def __init__(self, config: Optional[LayoutConfig] = None, simulation=None, seed=None):
        self.config = config or LayoutConfig()
        self.config.validate()
        self.rng = np.random.default_rng(seed)
        self.simulation = simulation or ForceSimulation.create(
            (self.config.width, self.config.height),
            self.charge,
            self.config.gravity,
            self.config.friction,
        )
        self.mode = LayoutMode(self.config.initial_mode)
        self.nodes: list[Node] = []
        self.labels_visible = False
        self.container = None
        self.radius_scale: Optional[RadiusScale] = None

    # ============ Node construction ============ #

    def charge(self, node) -> float:
        return -(node.radius ** 2.0) / self.config.charge_divisor

    def build_nodes(self, records: Iterable[dict], value_field="value", category_field="region") -> list[Node]:
        """
        Convert raw records into bubble nodes.

        Args:
            records: Iterable of dicts with at least ``id``, the value field,
                the category field and ``year``.
            value_field: Key holding the numeric magnitude.
            category_field: Key holding the grouping key (region).

        Returns:
            Nodes sorted by descending value so larger bubbles are placed first.

        Raises:
            InvalidValue: a value is missing, non-numeric, negative or not finite.
            InvalidRecord: an id or category is missing, or an id repeats.
        """
        records = list(records)
        values = []
        seen = set()
        for record in records:
            record_id = record.get("id")
            if record_id is None or str(record_id) == "":
                raise InvalidRecord(f"Record without id: {record!r}")
            record_id = str(record_id)
            if record_id in seen:
                raise InvalidRecord(f"Duplicate record id: {record_id!r}")
            seen.add(record_id)
            if not record.get(category_field):
                raise InvalidRecord(f"Record {record_id!r} has no {category_field!r}")
            values.append(parse_value(record_id, record.get(value_field)))

        max_value = max(values) if values else 0.0
        self.radius_scale = RadiusScale(max_value, self.config.min_radius, self.config.max_radius)

        xs = self.rng.uniform(0, self.config.seed_width, len(records))
        ys = self.rng.uniform(0, self.config.seed_height, len(records))

        nodes = []
        for record, value, x, y in zip(records, values, xs, ys):
            year = record.get("year")
            nodes.append(
                Node(
                    id=str(record["id"]),
                    radius=self.radius_scale(value),
                    value=value,
                    category=str(record[category_field]),
                    x=float(x),
                    y=float(y),
                    name=str(record.get("country") or record.get("name") or record["id"]),
                    year=None if year is None else str(year),
                    group=record.get("group"),
                )
            )

        nodes.sort(key=lambda n: n.value, reverse=True)
        return nodes

    # ============ Layout modes ============ #

    def target_for(self, node: Node) -> Point:
        if self.mode is LayoutMode.GROUPED:
            return self.config.center
        try:
            return self.config.region_targets[node.category]
        except KeyError:
            raise MissingCategoryTarget(node.category) from None

    def mode_factor(self) -> float:
        return self.config.split_factor if self.mode is LayoutMode.SPLIT else 1.0

    def visible_labels(self) -> dict[str, Point]:
        if not self.labels_visible:
            return {}
        return dict(self.config.region_labels)

    def check_targets(self, nodes, mode=None) -> None:
        """Raise MissingCategoryTarget if any node has no target under ``mode``."""
        mode = LayoutMode(self.mode if mode is None else mode)
        if mode is not LayoutMode.SPLIT:
            return
        for node in nodes:
            if node.category not in self.config.region_targets:
                raise MissingCategoryTarget(node.category)

    def on_tick(self, alpha: float) -> None:
        """Ease every node toward its current target, scaled by the simulation's alpha."""
        step = self.config.damper * alpha * self.mode_factor()
        # resolve all targets first so a failure moves no node
        targets = [self.target_for(node) for node in self.nodes]
        for node, target in zip(self.nodes, targets):
            node.x = node.x + (target.x - node.x) * step
            node.y = node.y + (target.y - node.y) * step

    def _handle_tick(self, alpha: float) -> None:
        self.on_tick(alpha)
        if self.container is not None:
            self.container.draw(self.nodes)

    def set_mode(self, mode) -> None:
        mode = LayoutMode(mode)
        self.check_targets(self.nodes, mode)
        self.mode = mode
        self.labels_visible = mode is LayoutMode.SPLIT
        if self.container is not None:
            if self.labels_visible:
                self.container.show_labels(self.visible_labels())
            else:
                self.container.hide_labels()
        logger.info("layout mode set to %s (%d nodes)", mode.value, len(self.nodes))

        self.simulation.on_tick(self._handle_tick)
        self.simulation.start()

    def toggle_display(self, display_name) -> None:
        self.set_mode(LayoutMode.from_button(display_name))

    # ============ Rendering ============ #

    def render(self, container, records, value_field="value", category_field="region") -> list[Node]:
        """
        Tear down and rebuild the chart for ``records`` inside ``container``.

        The previous simulation run is stopped before anything is rebuilt and
        the active layout mode is re-applied to the new nodes. An empty
        ``records`` renders an empty canvas. Records are validated, and in
        split mode checked against the registered region targets, before
        anything is torn down.
        """
        nodes = self.build_nodes(records, value_field=value_field, category_field=category_field)
        self.check_targets(nodes)

        self.simulation.stop()
        self.simulation.on_tick(None)
        if container is not None:
            container.clear()
        self.container = container
        self.nodes = nodes
        self.simulation.set_nodes(nodes)
        if container is not None:
            container.draw(nodes)
        logger.info("rendered %d bubbles in %s mode", len(nodes), self.mode.value)

        self.set_mode(self.mode)
        return nodes

    def settle(self, max_ticks=None) -> int:
        """Run the simulation until alpha decays (used where no animation loop exists)."""
        return self.simulation.run(max_ticks)
