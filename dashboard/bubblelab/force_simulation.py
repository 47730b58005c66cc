# bubblelab/force_simulation.py - Charge/gravity/friction force layout
"""
Small numpy port of the classic force layout used by bubble charts.

Nodes are any objects with mutable ``x`` and ``y`` attributes. The simulation
keeps each node's previous position internally and integrates with
position Verlet, so anything that moves a node between ticks (the bubble
engine's easing) carries over as velocity.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

import numpy as np


logger = logging.getLogger(__name__)

ALPHA_START = 0.1
ALPHA_DECAY = 0.99
ALPHA_MIN = 0.005


class ForceSimulation:
    def __init__(self, size, charge=-30.0, gravity=0.1, friction=0.9):
        self.size = (float(size[0]), float(size[1]))
        self.charge = charge
        self.gravity = float(gravity)
        self.friction = float(friction)
        self.alpha = 0.0
        self.ticks = 0
        self._nodes: list = []
        self._charges = np.zeros(0)
        self._px = np.zeros(0)
        self._py = np.zeros(0)
        self._callback: Optional[Callable[[float], None]] = None

    @classmethod
    def create(cls, size, charge, gravity, friction) -> "ForceSimulation":
        return cls(size, charge=charge, gravity=gravity, friction=friction)

    @property
    def nodes(self) -> list:
        return self._nodes

    @property
    def running(self) -> bool:
        return self.alpha > 0

    def set_nodes(self, nodes: Sequence) -> None:
        """Register a new node set; previous velocities are dropped."""
        self._nodes = list(nodes)
        self._px = np.array([n.x for n in self._nodes], dtype=float)
        self._py = np.array([n.y for n in self._nodes], dtype=float)
        self._charges = self._compute_charges()

    def on_tick(self, callback: Optional[Callable[[float], None]]) -> None:
        """Subscribe ``callback(alpha)``; replaces any previous subscription."""
        self._callback = callback

    def start(self) -> None:
        # Charges are recomputed so a changed node radius takes effect.
        self._charges = self._compute_charges()
        self.alpha = ALPHA_START
        self.ticks = 0
        logger.debug("simulation started with %d nodes", len(self._nodes))

    def stop(self) -> None:
        if self.alpha > 0:
            logger.debug("simulation stopped after %d ticks", self.ticks)
        self.alpha = 0.0

    def tick(self) -> bool:
        """Advance one step. Returns False once alpha has decayed and the run halts."""
        if self.alpha <= 0:
            return False
        self.alpha *= ALPHA_DECAY
        if self.alpha < ALPHA_MIN:
            logger.debug("simulation settled after %d ticks", self.ticks)
            self.alpha = 0.0
            return False

        nodes = self._nodes
        alpha = self.alpha
        x = np.array([n.x for n in nodes], dtype=float)
        y = np.array([n.y for n in nodes], dtype=float)

        k = alpha * self.gravity
        if k:
            x += (self.size[0] / 2 - x) * k
            y += (self.size[1] / 2 - y) * k

        if len(nodes) > 1 and np.any(self._charges):
            dx = x[np.newaxis, :] - x[:, np.newaxis]
            dy = y[np.newaxis, :] - y[:, np.newaxis]
            dn = dx * dx + dy * dy
            strength = np.divide(
                alpha * self._charges[np.newaxis, :],
                dn,
                out=np.zeros_like(dn),
                where=dn > 0,
            )
            self._px -= (dx * strength).sum(axis=1)
            self._py -= (dy * strength).sum(axis=1)

        new_x = x - (self._px - x) * self.friction
        new_y = y - (self._py - y) * self.friction
        self._px = x
        self._py = y

        for node, nx, ny in zip(nodes, new_x, new_y):
            node.x = float(nx)
            node.y = float(ny)

        self.ticks += 1
        if self._callback is not None:
            self._callback(alpha)
        return True

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Drive ticks until the run halts (or ``max_ticks`` is reached); returns the tick count."""
        count = 0
        while max_ticks is None or count < max_ticks:
            if not self.tick():
                break
            count += 1
        return count

    def _compute_charges(self) -> np.ndarray:
        if callable(self.charge):
            return np.array([float(self.charge(n)) for n in self._nodes], dtype=float)
        return np.full(len(self._nodes), float(self.charge))
