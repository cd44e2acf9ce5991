"""Layout engine: one simulation reconfigured per layout mode."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from cinegraph.config import CinegraphConfig, SimilarityConfig
from cinegraph.forces import (
    CenterForce,
    CollideForce,
    GenreClusterForce,
    LinkForce,
    ManyBodyForce,
    PositionForce,
    genre_anchor_points,
)
from cinegraph.graph import build_entity_graph, build_movie_graph
from cinegraph.hooks import HookManager, HookName
from cinegraph.indexer import build_feature_index
from cinegraph.models import Graph, LayoutMode, Link, MovieDataset, Node
from cinegraph.similarity import compute_coactor_adjacency, compute_similarity_adjacency
from cinegraph.simulation import Simulation
from cinegraph.topk import build_top_k_links

logger = logging.getLogger(__name__)

MODE_FORCES = ("link", "timeline")


class LinkCache:
    """Lazily computed link lists per layout mode; one cache lives exactly as long as one dataset."""

    def __init__(self) -> None:
        self._links: dict[LayoutMode, list[Link]] = {}

    def get(self, mode: LayoutMode) -> list[Link] | None:
        return self._links.get(mode)

    def put(self, mode: LayoutMode, links: list[Link]) -> None:
        self._links[mode] = links

    def __len__(self) -> int:
        return len(self._links)


def compute_mode_links(mode: LayoutMode, graph: Graph, cfg: SimilarityConfig) -> list[Link]:
    """Compute the pruned link set an analytical mode lays out with."""
    if mode == LayoutMode.TIMELINE:
        return []
    if mode == LayoutMode.ENTITY:
        return list(graph.links)

    movies = graph.movie_nodes()
    index = build_feature_index(movies)
    if mode == LayoutMode.SIMILARITY:
        adjacency = compute_similarity_adjacency(movies, index)
    else:
        adjacency = compute_coactor_adjacency(movies, index, saturation=cfg.coactor_saturation)
    return build_top_k_links(adjacency, cfg.top_k)


@dataclass(frozen=True)
class TimelineScale:
    """Linear year -> x mapping over a span centered on ``center_x``."""

    center_x: float
    span: float
    min_year: int | None
    max_year: int | None

    @classmethod
    def from_nodes(cls, nodes: list[Node], center_x: float, span: float) -> TimelineScale:
        years = [node.year for node in nodes if node.year is not None]
        if not years:
            return cls(center_x=center_x, span=span, min_year=None, max_year=None)
        return cls(center_x=center_x, span=span, min_year=min(years), max_year=max(years))

    def x_for(self, year: int | None) -> float:
        if year is None or self.min_year is None or self.max_year is None or self.max_year == self.min_year:
            return self.center_x
        fraction = (year - self.min_year) / (self.max_year - self.min_year)
        return self.center_x - self.span / 2.0 + fraction * self.span


class LayoutEngine:
    def __init__(
        self,
        dataset: MovieDataset,
        config: CinegraphConfig,
        *,
        mode: LayoutMode = LayoutMode.SIMILARITY,
        link_strength: float = 0.12,
        hooks: HookManager | None = None,
    ) -> None:
        self.dataset = dataset
        self.config = config
        self.hooks = hooks or HookManager()
        self.link_cache = LinkCache()
        self.link_strength = link_strength
        self.center = (config.viewport.width / 2.0, config.viewport.height / 2.0)
        self.mode: LayoutMode | None = None
        self.graph = Graph()
        self.active_links: list[Link] = []
        self.simulation = Simulation([], config.simulation, center=self.center, hooks=self.hooks)
        self.set_mode(mode)

    def links_for(self, mode: LayoutMode) -> list[Link]:
        if not mode.uses_links:
            return []
        if mode == LayoutMode.ENTITY:
            return list(self.graph.links)
        cached = self.link_cache.get(mode)
        if cached is not None:
            return cached
        start = time.perf_counter()
        links = compute_mode_links(mode, self.graph, self.config.similarity)
        self.link_cache.put(mode, links)
        logger.info(
            "Computed %s links for %s mode (%s movies, %.3fs)",
            len(links),
            mode.value,
            len(self.graph.nodes),
            time.perf_counter() - start,
        )
        return links

    def node_radius(self, node: Node) -> float:
        forces = self.config.forces
        return forces.movie_radius if node.is_movie else forces.entity_radius

    def timeline_scale(self) -> TimelineScale:
        span = self.config.viewport.width * self.config.forces.timeline_span_ratio
        return TimelineScale.from_nodes(self.graph.movie_nodes(), self.center[0], span)

    def genre_anchors(self) -> dict[int, tuple[float, float]]:
        genre_ids = [genre_id for node in self.graph.nodes for genre_id in node.genre_ids]
        viewport = self.config.viewport
        radius = min(viewport.width, viewport.height) * self.config.forces.genre_ring_ratio
        return genre_anchor_points(genre_ids, self.center, radius)

    def _build_graph(self, mode: LayoutMode) -> Graph:
        if mode.is_analytical:
            return build_movie_graph(self.dataset)
        return build_entity_graph(self.dataset)

    def _rebuild(self, mode: LayoutMode) -> None:
        previous = self.graph.node_map
        graph = self._build_graph(mode)
        # Movies present in both node sets keep their place so the switch re-settles smoothly.
        for node in graph.nodes:
            carried = previous.get(node.id)
            if carried is not None:
                node.x, node.y = carried.x, carried.y
        self.graph = graph
        self.simulation = Simulation(graph.nodes, self.config.simulation, center=self.center, hooks=self.hooks)
        self._install_base_forces()

    def _install_base_forces(self) -> None:
        forces = self.config.forces
        cx, cy = self.center
        sim = self.simulation
        sim.set_force(
            "charge",
            ManyBodyForce(
                strength=forces.charge_strength,
                distance_min=forces.charge_distance_min,
                distance_max=forces.charge_distance_max,
            ),
        )
        sim.set_force("center", CenterForce(cx, cy, strength=forces.center_strength))
        sim.set_force("x", PositionForce("x", cx, strength=forces.axis_strength))
        sim.set_force("y", PositionForce("y", cy, strength=forces.axis_strength))
        sim.set_force("collide", CollideForce(self.node_radius, strength=forces.collide_strength))
        sim.set_force("genre", GenreClusterForce(self.genre_anchors(), strength=forces.genre_strength))

    def _link_distance(self, mode: LayoutMode) -> float:
        forces = self.config.forces
        if mode == LayoutMode.SIMILARITY:
            return forces.similarity_link_distance
        if mode == LayoutMode.COACTOR:
            return forces.coactor_link_distance
        return forces.entity_link_distance

    def _install_mode_force(self, mode: LayoutMode) -> None:
        if mode == LayoutMode.TIMELINE:
            scale = self.timeline_scale()
            self.simulation.set_force(
                "timeline",
                PositionForce("x", lambda node: scale.x_for(node.year), strength=self.config.forces.timeline_strength),
            )
            return
        self.simulation.set_force(
            "link",
            LinkForce(self.active_links, distance=self._link_distance(mode), strength=self.link_strength),
        )

    def set_mode(self, mode: LayoutMode) -> None:
        previous = self.mode
        if previous is None or previous.is_analytical != mode.is_analytical:
            self._rebuild(mode)
        else:
            for name in MODE_FORCES:
                self.simulation.remove_force(name)

        self.active_links = self.links_for(mode)
        self._install_mode_force(mode)
        self.mode = mode
        self.simulation.restart(self.config.simulation.reheat_alpha)

        logger.info(
            "Layout mode %s -> %s (nodes=%s links=%s)",
            previous.value if previous else "none",
            mode.value,
            len(self.graph.nodes),
            len(self.active_links),
        )
        self.hooks.emit(
            HookName.MODE_CHANGED,
            {"previous": previous.value if previous else None, "mode": mode.value},
            {"nodes": len(self.graph.nodes), "links": len(self.active_links)},
        )

    def set_link_strength(self, strength: float) -> None:
        if strength < 0.0:
            raise ValueError("link strength must not be negative")
        self.link_strength = strength
        if self.mode is not None:
            self.set_mode(self.mode)

