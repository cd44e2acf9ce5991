"""Visualization sessions and the object that owns the current one."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from cinegraph.config import CinegraphConfig
from cinegraph.hooks import HookManager, HookName
from cinegraph.layout import LayoutEngine
from cinegraph.loader import DatasetUnavailableError, InvalidDatasetFileError, load_dataset, load_dataset_file
from cinegraph.models import Graph, LayoutMode, MovieDataset, Node, NodeType
from cinegraph.simulation import Simulation
from cinegraph.view import MOVIE_RADIUS, RenderFrame, ViewBindings, build_frame
from cinegraph.viewport import Transform, Viewport

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data available. Select a JSON file or run the TMDB download."
BAD_FILE_MESSAGE = "Could not load JSON. Please check the file."


def describe_dataset(dataset: MovieDataset) -> str:
    stamp = "local"
    if dataset.fetched_at:
        try:
            stamp = datetime.fromisoformat(dataset.fetched_at).strftime("%Y-%m-%d")
        except ValueError:
            stamp = dataset.fetched_at
    return f"Dataset: {len(dataset.movies)} movies · {stamp}"


@dataclass
class VisualizationSession:
    dataset: MovieDataset
    engine: LayoutEngine
    viewport: Viewport

    @property
    def graph(self) -> Graph:
        return self.engine.graph

    @property
    def simulation(self) -> Simulation:
        return self.engine.simulation


class Visualizer:
    """Owns at most one session; a successful load replaces it wholesale."""

    def __init__(
        self,
        config: CinegraphConfig,
        bindings: ViewBindings,
        *,
        hooks: HookManager | None = None,
        mode: LayoutMode | None = None,
    ) -> None:
        self.config = config
        self.bindings = bindings
        self.hooks = hooks or HookManager()
        self.mode = mode or config.controls.default_mode
        self.link_strength = config.controls.default_link_strength / config.controls.link_strength_scale
        self.type_filter: NodeType | None = None
        self.session: VisualizationSession | None = None
        self.hooks.register(HookName.CONVERGED, self._on_converged)

    def _on_converged(self, context: dict[str, Any], envelope: dict[str, Any]) -> None:
        if self.session is None:
            return None
        transform = self.session.viewport.zoom_to_fit(self.session.graph.nodes, margin=MOVIE_RADIUS)
        if transform is not None:
            logger.info("Converged after %s ticks; zoomed to fit at scale %.3f", context.get("tick"), transform.k)
        return None

    def _report_failure(self, stage: str, exc: Exception, message: str) -> None:
        logger.error("%s failed: %s", stage, exc)
        self.bindings.show_status(message)
        if self.hooks.has_callbacks(HookName.ON_ERROR):
            self.hooks.emit(HookName.ON_ERROR, {"stage": stage, "exception": exc})

    def load_default(self, primary: str | Path | None = None, fallback: str | Path | None = None) -> bool:
        loader_cfg = self.config.loader
        try:
            dataset = load_dataset(
                primary or loader_cfg.primary,
                fallback if fallback is not None else loader_cfg.fallback,
                timeout_seconds=loader_cfg.timeout_seconds,
            )
        except DatasetUnavailableError as exc:
            self._report_failure("load_default", exc, NO_DATA_MESSAGE)
            return False
        self.start(dataset)
        return True

    def load_file(self, path: str | Path) -> bool:
        try:
            dataset = load_dataset_file(path)
        except InvalidDatasetFileError as exc:
            self._report_failure("load_file", exc, BAD_FILE_MESSAGE)
            return False
        self.start(dataset)
        return True

    def start(self, dataset: MovieDataset) -> VisualizationSession:
        engine = LayoutEngine(
            dataset,
            self.config,
            mode=self.mode,
            link_strength=self.link_strength,
            hooks=self.hooks,
        )
        session = VisualizationSession(dataset=dataset, engine=engine, viewport=Viewport(self.config.viewport))
        self.session = session

        self.bindings.show_status(describe_dataset(dataset))
        self.bindings.set_link_strength_enabled(self.mode.uses_links)
        self.hooks.emit(
            HookName.DATASET_LOADED,
            {"movies": len(dataset.movies), "source": dataset.source, "mode": self.mode.value},
            {"nodes": len(session.graph.nodes), "links": len(engine.active_links)},
        )
        self.render()
        return session

    def current_frame(self) -> RenderFrame | None:
        if self.session is None:
            return None
        session = self.session
        return build_frame(
            session.graph,
            session.engine.active_links,
            session.engine.mode or self.mode,
            session.viewport.transform,
            type_filter=self.type_filter,
            tick=session.simulation.tick_count,
            alpha=session.simulation.alpha,
        )

    def render(self) -> RenderFrame | None:
        frame = self.current_frame()
        if frame is not None:
            self.bindings.render(frame)
        return frame

    def frame(self) -> RenderFrame | None:
        """Advance the simulation one step and redraw."""
        if self.session is None:
            return None
        self.session.simulation.step()
        return self.render()

    def run(self, max_ticks: int | None = None) -> int:
        if self.session is None:
            return 0
        limit = max_ticks if max_ticks is not None else self.config.simulation.max_ticks
        simulation = self.session.simulation
        steps = 0
        while steps < limit and simulation.running:
            self.frame()
            steps += 1
        if simulation.running:
            logger.info("Stopped after %s ticks without converging (alpha=%.4f)", steps, simulation.alpha)
        return steps

    def set_mode(self, mode: LayoutMode) -> None:
        self.mode = mode
        self.bindings.set_link_strength_enabled(mode.uses_links)
        if self.session is None:
            return
        self.session.engine.link_strength = self.link_strength
        self.session.engine.set_mode(mode)
        self.render()

    def set_link_strength(self, strength: float) -> None:
        self.link_strength = strength
        if self.session is None or not self.mode.uses_links:
            return
        self.session.engine.set_link_strength(strength)
        self.render()

    def set_type_filter(self, type_filter: NodeType | None) -> None:
        self.type_filter = type_filter
        self.render()

    def zoom_in(self) -> Transform | None:
        return self._zoom(lambda viewport: viewport.zoom_in())

    def zoom_out(self) -> Transform | None:
        return self._zoom(lambda viewport: viewport.zoom_out())

    def reset_zoom(self) -> Transform | None:
        return self._zoom(lambda viewport: viewport.reset())

    def zoom_to_fit(self) -> Transform | None:
        if self.session is None:
            return None
        transform = self.session.viewport.zoom_to_fit(self.session.graph.nodes, margin=MOVIE_RADIUS)
        self.render()
        return transform

    def _zoom(self, action) -> Transform | None:
        if self.session is None:
            return None
        transform = action(self.session.viewport)
        self.render()
        return transform

    def drag_start(self, node_id: str) -> Node | None:
        if self.session is None:
            return None
        return self.session.simulation.drag_start(node_id)

    def drag_to(self, node_id: str, x: float, y: float) -> None:
        if self.session is None:
            return
        self.session.simulation.drag_to(node_id, x, y)

    def drag_end(self, node_id: str) -> None:
        if self.session is None:
            return
        self.session.simulation.drag_end(node_id)
