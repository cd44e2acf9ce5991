"""Discrete-time force simulation with geometric energy decay."""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence

from cinegraph.config import SimulationConfig
from cinegraph.forces import Force
from cinegraph.hooks import HookManager, HookName
from cinegraph.models import Node

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


class Simulation:
    def __init__(
        self,
        nodes: Sequence[Node],
        config: SimulationConfig | None = None,
        *,
        center: tuple[float, float] = (0.0, 0.0),
        hooks: HookManager | None = None,
    ) -> None:
        cfg = config or SimulationConfig()
        self.nodes = list(nodes)
        self.center = center
        self.hooks = hooks or HookManager()
        self.alpha = 1.0
        self.alpha_min = cfg.alpha_min
        self.alpha_decay = cfg.resolved_alpha_decay()
        self.alpha_target = 0.0
        self.velocity_decay = 1.0 - cfg.velocity_decay
        self.drag_alpha_target = cfg.drag_alpha_target
        self.rng = random.Random(cfg.seed)
        self.tick_count = 0
        self.running = True
        self._forces: dict[str, Force] = {}
        self._active_drags: set[str] = set()
        self._node_by_id = {node.id: node for node in self.nodes}
        self._initialize_nodes()

    def _initialize_nodes(self) -> None:
        cx, cy = self.center
        for i, node in enumerate(self.nodes):
            node.index = i
            if node.fx is not None:
                node.x = node.fx
            if node.fy is not None:
                node.y = node.fy
            if node.x is None or node.y is None or math.isnan(node.x) or math.isnan(node.y):
                # Phyllotaxis spiral gives a deterministic, evenly spread start.
                radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
                angle = i * INITIAL_ANGLE
                node.x = cx + radius * math.cos(angle)
                node.y = cy + radius * math.sin(angle)
            if math.isnan(node.vx) or math.isnan(node.vy):
                node.vx = 0.0
                node.vy = 0.0

    def node(self, node_id: str) -> Node:
        return self._node_by_id[node_id]

    def force(self, name: str) -> Force | None:
        return self._forces.get(name)

    def force_names(self) -> list[str]:
        return list(self._forces)

    def set_force(self, name: str, force: Force) -> None:
        force.initialize(self.nodes, self.rng)
        self._forces[name] = force

    def remove_force(self, name: str) -> Force | None:
        return self._forces.pop(name, None)

    def restart(self, alpha: float | None = None) -> None:
        if alpha is not None:
            self.alpha = max(0.0, min(1.0, alpha))
        self.running = True

    def stop(self) -> None:
        self.running = False

    @property
    def converged(self) -> bool:
        return self.alpha < self.alpha_min

    def tick(self, iterations: int = 1) -> None:
        """Advance the layout without emitting events or checking convergence."""
        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
            for force in self._forces.values():
                force.apply(self.alpha)

            for node in self.nodes:
                if node.fx is None:
                    node.vx *= self.velocity_decay
                    node.x = (node.x or 0.0) + node.vx
                else:
                    node.x = node.fx
                    node.vx = 0.0
                if node.fy is None:
                    node.vy *= self.velocity_decay
                    node.y = (node.y or 0.0) + node.vy
                else:
                    node.y = node.fy
                    node.vy = 0.0
            self.tick_count += 1

    def step(self) -> bool:
        """Advance one animation frame. Returns False once the simulation is stopped."""
        if not self.running:
            return False
        self.tick()
        logger.debug("tick=%s alpha=%.5f", self.tick_count, self.alpha)
        self.hooks.emit(HookName.TICK, {"tick": self.tick_count, "alpha": self.alpha})
        if self.converged:
            self.running = False
            logger.info("Simulation converged after %s ticks", self.tick_count)
            self.hooks.emit(HookName.CONVERGED, {"tick": self.tick_count, "alpha": self.alpha})
        return True

    def run(self, max_ticks: int) -> int:
        steps = 0
        while steps < max_ticks and self.step():
            steps += 1
        return steps

    def drag_start(self, node_id: str) -> Node:
        node = self.node(node_id)
        if not self._active_drags:
            self.alpha_target = self.drag_alpha_target
            self.restart()
        self._active_drags.add(node_id)
        node.fx = node.x
        node.fy = node.y
        return node

    def drag_to(self, node_id: str, x: float, y: float) -> None:
        if node_id not in self._active_drags:
            raise KeyError(f"Node is not being dragged: {node_id}")
        node = self.node(node_id)
        node.fx = x
        node.fy = y

    def drag_end(self, node_id: str) -> None:
        if node_id not in self._active_drags:
            return
        self._active_drags.discard(node_id)
        node = self.node(node_id)
        node.fx = None
        node.fy = None
        if not self._active_drags:
            self.alpha_target = 0.0
