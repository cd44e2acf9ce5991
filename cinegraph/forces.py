"""Layout forces.

Each force receives the node list once through ``initialize`` and then nudges
velocities (or, for centering, positions) on every ``apply(alpha)`` call. The
update rules follow the classic velocity-Verlet style used by d3-force so
layouts look familiar to anyone used to browser graph views.
"""

from __future__ import annotations

import math
import random
from collections import defaultdict
from collections.abc import Callable, Iterator, Sequence
from typing import Protocol

from cinegraph.models import Link, Node

NodeValue = Callable[[Node], float]


class Force(Protocol):
    def initialize(self, nodes: Sequence[Node], rng: random.Random) -> None: ...

    def apply(self, alpha: float) -> None: ...


def jiggle(rng: random.Random) -> float:
    return (rng.random() - 0.5) * 1e-6


def _constant(value: float) -> NodeValue:
    return lambda _node: value


def _grid_pairs(points: Sequence[tuple[float, float]], cell: float) -> Iterator[tuple[int, int]]:
    """Yield index pairs (i < j) whose grid cells touch; pairs further apart than ``cell`` are never produced."""
    grid: dict[tuple[int, int], list[int]] = defaultdict(list)
    cells: list[tuple[int, int]] = []
    for idx, (x, y) in enumerate(points):
        cell_id = (int(math.floor(x / cell)), int(math.floor(y / cell)))
        grid[cell_id].append(idx)
        cells.append(cell_id)

    for idx, (gx, gy) in enumerate(cells):
        for cx in range(gx - 1, gx + 2):
            for cy in range(gy - 1, gy + 2):
                for other in grid.get((cx, cy), ()):
                    if other > idx:
                        yield idx, other


class ManyBodyForce:
    """Mutual repulsion (negative strength) or attraction between node pairs."""

    def __init__(self, strength: float = -30.0, distance_min: float = 1.0, distance_max: float = math.inf) -> None:
        if distance_min <= 0.0 or distance_min >= distance_max:
            raise ValueError("distance bounds must satisfy 0 < distance_min < distance_max")
        self.strength = strength
        self.distance_min = distance_min
        self.distance_max = distance_max
        self._nodes: Sequence[Node] = []
        self._rng = random.Random(0)

    def initialize(self, nodes: Sequence[Node], rng: random.Random) -> None:
        self._nodes = nodes
        self._rng = rng

    def _pairs(self) -> Iterator[tuple[int, int]]:
        count = len(self._nodes)
        if math.isinf(self.distance_max):
            for i in range(count):
                for j in range(i + 1, count):
                    yield i, j
            return
        points = [(node.x or 0.0, node.y or 0.0) for node in self._nodes]
        yield from _grid_pairs(points, self.distance_max)

    def apply(self, alpha: float) -> None:
        min_sq = self.distance_min * self.distance_min
        max_sq = self.distance_max * self.distance_max
        nodes = self._nodes
        for i, j in self._pairs():
            a = nodes[i]
            b = nodes[j]
            dx = (b.x or 0.0) - (a.x or 0.0)
            dy = (b.y or 0.0) - (a.y or 0.0)
            dist_sq = dx * dx + dy * dy
            if dist_sq >= max_sq:
                continue
            if dx == 0.0:
                dx = jiggle(self._rng)
                dist_sq += dx * dx
            if dy == 0.0:
                dy = jiggle(self._rng)
                dist_sq += dy * dy
            if dist_sq < min_sq:
                dist_sq = math.sqrt(min_sq * dist_sq)
            w = self.strength * alpha / dist_sq
            a.vx += dx * w
            a.vy += dy * w
            b.vx -= dx * w
            b.vy -= dy * w


class CenterForce:
    """Translates every node so the mean position sits on (x, y)."""

    def __init__(self, x: float = 0.0, y: float = 0.0, strength: float = 1.0) -> None:
        self.x = x
        self.y = y
        self.strength = strength
        self._nodes: Sequence[Node] = []

    def initialize(self, nodes: Sequence[Node], rng: random.Random) -> None:
        self._nodes = nodes

    def apply(self, alpha: float) -> None:
        if not self._nodes:
            return
        count = len(self._nodes)
        sx = (sum(node.x or 0.0 for node in self._nodes) / count - self.x) * self.strength
        sy = (sum(node.y or 0.0 for node in self._nodes) / count - self.y) * self.strength
        for node in self._nodes:
            node.x = (node.x or 0.0) - sx
            node.y = (node.y or 0.0) - sy


class PositionForce:
    """Pulls each node toward a target coordinate along a single axis."""

    def __init__(self, axis: str, target: float | NodeValue, strength: float | NodeValue = 0.1) -> None:
        if axis not in ("x", "y"):
            raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")
        self.axis = axis
        self._target = target if callable(target) else _constant(float(target))
        self._strength = strength if callable(strength) else _constant(float(strength))
        self._nodes: Sequence[Node] = []
        self.targets: list[float] = []
        self.strengths: list[float] = []

    def initialize(self, nodes: Sequence[Node], rng: random.Random) -> None:
        self._nodes = nodes
        self.targets = [self._target(node) for node in nodes]
        self.strengths = [self._strength(node) for node in nodes]

    def apply(self, alpha: float) -> None:
        velocity = "vx" if self.axis == "x" else "vy"
        for node, target, strength in zip(self._nodes, self.targets, self.strengths):
            position = getattr(node, self.axis) or 0.0
            setattr(node, velocity, getattr(node, velocity) + (target - position) * strength * alpha)


class CollideForce:
    """Keeps node circles from overlapping, using next-tick predicted positions."""

    def __init__(self, radius: float | NodeValue = 1.0, strength: float = 1.0, iterations: int = 1) -> None:
        self._radius = radius if callable(radius) else _constant(float(radius))
        self.strength = strength
        self.iterations = max(1, iterations)
        self._nodes: Sequence[Node] = []
        self._radii: list[float] = []
        self._rng = random.Random(0)

    def initialize(self, nodes: Sequence[Node], rng: random.Random) -> None:
        self._nodes = nodes
        self._radii = [self._radius(node) for node in nodes]
        self._rng = rng

    def apply(self, alpha: float) -> None:
        if len(self._nodes) < 2:
            return
        cell = max(self._radii) * 2.0
        if cell <= 0.0:
            return
        nodes = self._nodes
        for _ in range(self.iterations):
            points = [((node.x or 0.0) + node.vx, (node.y or 0.0) + node.vy) for node in nodes]
            for i, j in _grid_pairs(points, cell):
                a = nodes[i]
                b = nodes[j]
                ra = self._radii[i]
                rb = self._radii[j]
                reach = ra + rb
                dx = (a.x or 0.0) + a.vx - (b.x or 0.0) - b.vx
                dy = (a.y or 0.0) + a.vy - (b.y or 0.0) - b.vy
                dist_sq = dx * dx + dy * dy
                if dist_sq >= reach * reach:
                    continue
                if dx == 0.0:
                    dx = jiggle(self._rng)
                    dist_sq += dx * dx
                if dy == 0.0:
                    dy = jiggle(self._rng)
                    dist_sq += dy * dy
                dist = math.sqrt(dist_sq)
                push = (reach - dist) / dist * self.strength
                dx *= push
                dy *= push
                share = (rb * rb) / (ra * ra + rb * rb)
                a.vx += dx * share
                a.vy += dy * share
                b.vx -= dx * (1.0 - share)
                b.vy -= dy * (1.0 - share)


def genre_anchor_points(genre_ids: Sequence[int], center: tuple[float, float], radius: float) -> dict[int, tuple[float, float]]:
    """Spread genre anchors evenly on a circle, in ascending genre-id order."""
    ordered = sorted(set(genre_ids))
    if not ordered:
        return {}
    cx, cy = center
    step = 2.0 * math.pi / len(ordered)
    return {genre_id: (cx + radius * math.cos(i * step), cy + radius * math.sin(i * step)) for i, genre_id in enumerate(ordered)}


class GenreClusterForce:
    """Pulls every movie toward the centroid of its genres' anchor points."""

    def __init__(self, anchors: dict[int, tuple[float, float]], strength: float = 0.08) -> None:
        self.anchors = anchors
        self.strength = strength
        self._targets: list[tuple[Node, float, float]] = []

    def centroid(self, node: Node) -> tuple[float, float] | None:
        points = [self.anchors[genre_id] for genre_id in node.genre_ids if genre_id in self.anchors]
        if not points:
            return None
        return (sum(x for x, _ in points) / len(points), sum(y for _, y in points) / len(points))

    def initialize(self, nodes: Sequence[Node], rng: random.Random) -> None:
        self._targets = []
        for node in nodes:
            if not node.is_movie:
                continue
            target = self.centroid(node)
            if target is not None:
                self._targets.append((node, target[0], target[1]))

    def apply(self, alpha: float) -> None:
        k = self.strength * alpha
        for node, tx, ty in self._targets:
            node.vx += (tx - (node.x or 0.0)) * k
            node.vy += (ty - (node.y or 0.0)) * k


class LinkForce:
    """Spring attraction along links; link weight scales the per-link strength."""

    def __init__(self, links: Sequence[Link], distance: float = 30.0, strength: float = 0.1) -> None:
        self.links = list(links)
        self.distance = distance
        self.base_strength = strength
        self._resolved: list[tuple[Node, Node, float, float]] = []
        self._rng = random.Random(0)

    def link_strength(self, link: Link) -> float:
        weight = 1.0 if link.weight is None else max(0.0, min(1.0, link.weight))
        return self.base_strength * weight

    def initialize(self, nodes: Sequence[Node], rng: random.Random) -> None:
        self._rng = rng
        by_id = {node.id: node for node in nodes}
        degree: dict[str, int] = defaultdict(int)
        for link in self.links:
            degree[link.source] += 1
            degree[link.target] += 1

        self._resolved = []
        for link in self.links:
            source = by_id.get(link.source)
            target = by_id.get(link.target)
            if source is None or target is None:
                missing = link.source if source is None else link.target
                raise ValueError(f"Link references unknown node: {missing}")
            bias = degree[link.source] / (degree[link.source] + degree[link.target])
            self._resolved.append((source, target, bias, self.link_strength(link)))

    def apply(self, alpha: float) -> None:
        for source, target, bias, strength in self._resolved:
            if strength == 0.0:
                continue
            dx = (target.x or 0.0) + target.vx - (source.x or 0.0) - source.vx
            dy = (target.y or 0.0) + target.vy - (source.y or 0.0) - source.vy
            if dx == 0.0:
                dx = jiggle(self._rng)
            if dy == 0.0:
                dy = jiggle(self._rng)
            dist = math.sqrt(dx * dx + dy * dy)
            pull = (dist - self.distance) / dist * alpha * strength
            dx *= pull
            dy *= pull
            target.vx -= dx * bias
            target.vy -= dy * bias
            source.vx += dx * (1.0 - bias)
            source.vy += dy * (1.0 - bias)
