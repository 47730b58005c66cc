# bubblelab/config.py - Layout constants, TOML overrides and logging setup
from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import NamedTuple


LOG_LEVEL_ENV = "BUBBLELAB_LOG_LEVEL"
DEFAULT_CONFIG_FILENAME = "bubble_config.toml"

WIDTH = 940
HEIGHT = 600


class Point(NamedTuple):
    x: float
    y: float


class LayoutMode(str, Enum):
    GROUPED = "grouped"
    SPLIT = "split"

    @classmethod
    def from_button(cls, name) -> "LayoutMode":
        """Map a toolbar button id to a layout mode ("region" splits, anything else groups)."""
        if isinstance(name, LayoutMode):
            return name
        return cls.SPLIT if name == "region" else cls.GROUPED


def default_region_targets(width: float = WIDTH, height: float = HEIGHT) -> dict[str, Point]:
    return {
        "Americas": Point(width / 3, height / 2.5),
        "Europe": Point(width / 2, height / 2.5),
        "Asia": Point(2 * width / 3, height / 2.5),
        "Africa": Point(width / 3 - 40, height / 1.5),
        "Oceania": Point(2 * width / 3 + 30, height / 1.5),
    }


def default_region_labels(width: float = WIDTH, height: float = HEIGHT) -> dict[str, Point]:
    return {
        "Americas": Point(width / 3 - 100, 40),
        "Europe": Point(width / 2, 40),
        "Asia": Point(2 * width / 3 + 100, 40),
        "Africa": Point(width / 3 - 100, height / 1.4),
        "Oceania": Point(2 * width / 3 + 100, height / 1.4),
    }


DEFAULT_REGION_COLORS: dict[str, str] = {
    "Americas": "#ffffcc",
    "Europe": "#a1dab4",
    "Asia": "#41b6c4",
    "Africa": "#2c7fb8",
    "Oceania": "#253494",
}


@dataclass(frozen=True)
class LayoutConfig:
    width: float = WIDTH
    height: float = HEIGHT
    min_radius: float = 2.0
    max_radius: float = 85.0
    damper: float = 0.102
    split_factor: float = 1.1  # split targets sit farther apart
    charge_divisor: float = 8.0
    gravity: float = -0.01
    friction: float = 0.9
    seed_width: float = 900.0
    seed_height: float = 580.0
    frame_every: int = 3
    initial_mode: LayoutMode = LayoutMode.GROUPED
    region_targets: dict[str, Point] = field(default_factory=default_region_targets)
    region_labels: dict[str, Point] = field(default_factory=default_region_labels)
    region_colors: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_REGION_COLORS))

    @property
    def center(self) -> Point:
        return Point(self.width / 2, self.height / 2)

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive")
        if not (0 <= self.min_radius <= self.max_radius):
            raise ValueError("radius range must satisfy 0 <= min_radius <= max_radius")
        if self.damper <= 0:
            raise ValueError("damper must be positive")
        if self.split_factor <= 0:
            raise ValueError("split_factor must be positive")
        if self.charge_divisor == 0:
            raise ValueError("charge_divisor must be non-zero")
        if not (0 <= self.friction <= 1):
            raise ValueError("friction must be between 0 and 1")
        if not (0 < self.seed_width <= self.width and 0 < self.seed_height <= self.height):
            raise ValueError("seed rectangle must fit inside the canvas")
        if int(self.frame_every) < 1:
            raise ValueError("frame_every must be at least 1")
        missing = sorted(set(self.region_targets) - set(self.region_labels))
        if missing:
            raise ValueError(f"region labels missing for: {', '.join(missing)}")


def _points(raw: dict) -> dict[str, Point]:
    return {str(name): Point(float(xy[0]), float(xy[1])) for name, xy in raw.items()}


def load_layout_config(path: Path) -> LayoutConfig:
    """Read a ``[layout]`` table from a TOML file on top of the defaults.

    Scalar keys match the ``LayoutConfig`` field names. Region tables
    (``[layout.region_targets]``, ``[layout.region_labels]``) map a region
    name to an ``[x, y]`` pair and replace the default geometry entirely;
    ``[layout.region_colors]`` is merged over the default palette.
    """
    raw = tomllib.loads(path.read_bytes().decode("utf-8"))
    layout = dict(raw.get("layout", {}))

    base = LayoutConfig(
        width=float(layout.pop("width", WIDTH)),
        height=float(layout.pop("height", HEIGHT)),
    )
    # Geometry defaults follow the configured canvas size.
    base = replace(
        base,
        region_targets=default_region_targets(base.width, base.height),
        region_labels=default_region_labels(base.width, base.height),
    )

    overrides = {}
    if "region_targets" in layout:
        overrides["region_targets"] = _points(layout.pop("region_targets"))
    if "region_labels" in layout:
        overrides["region_labels"] = _points(layout.pop("region_labels"))
    if "region_colors" in layout:
        colors = {str(k): str(v) for k, v in layout.pop("region_colors").items()}
        overrides["region_colors"] = {**DEFAULT_REGION_COLORS, **colors}
    if "initial_mode" in layout:
        overrides["initial_mode"] = LayoutMode(str(layout.pop("initial_mode")))
    if "frame_every" in layout:
        overrides["frame_every"] = int(layout.pop("frame_every"))

    known = {f.name for f in fields(LayoutConfig)}
    for key, value in layout.items():
        if key not in known:
            raise ValueError(f"Unknown layout setting: {key}")
        overrides[key] = float(value)

    cfg = replace(base, **overrides)
    cfg.validate()
    return cfg


def resolve_layout_config(base_dir: Path) -> LayoutConfig:
    """Use ``bubble_config.toml`` from ``base_dir`` when present, else the defaults."""
    path = base_dir / DEFAULT_CONFIG_FILENAME
    if path.exists():
        return load_layout_config(path)
    return LayoutConfig()


def configure_logging(level=None) -> None:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    root = logging.getLogger("bubblelab")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
