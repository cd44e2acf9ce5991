"""Zoom/pan transform handling."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from cinegraph.config import ViewportConfig
from cinegraph.models import Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transform:
    k: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def apply(self, px: float, py: float) -> tuple[float, float]:
        return px * self.k + self.x, py * self.k + self.y

    def invert(self, sx: float, sy: float) -> tuple[float, float]:
        return (sx - self.x) / self.k, (sy - self.y) / self.k


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        return (self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0

    def grow(self, margin: float) -> BoundingBox:
        return BoundingBox(self.min_x - margin, self.min_y - margin, self.max_x + margin, self.max_y + margin)


def content_bounds(nodes: Iterable[Node]) -> BoundingBox | None:
    xs: list[float] = []
    ys: list[float] = []
    for node in nodes:
        if node.x is None or node.y is None:
            continue
        xs.append(node.x)
        ys.append(node.y)
    if not xs:
        return None
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


class Viewport:
    def __init__(self, config: ViewportConfig | None = None) -> None:
        self.config = config or ViewportConfig()
        self.transform = Transform()

    @property
    def size(self) -> tuple[float, float]:
        return self.config.width, self.config.height

    def clamp_scale(self, k: float) -> float:
        return max(self.config.min_scale, min(self.config.max_scale, k))

    def zoom_to_fit(self, nodes: Iterable[Node], *, margin: float = 0.0) -> Transform | None:
        """Frame every positioned node; leaves the transform alone when content collapses to a point."""
        bounds = content_bounds(nodes)
        if bounds is None or (bounds.width <= 0.0 and bounds.height <= 0.0):
            logger.debug("Skipping zoom-to-fit: degenerate bounds %s", bounds)
            return None

        box = bounds.grow(margin)
        width, height = self.size
        padding = self.config.fit_padding
        available_w = max(1.0, width - 2.0 * padding)
        available_h = max(1.0, height - 2.0 * padding)
        # A flat box (collinear nodes, no margin) is fitted along its non-zero axis only.
        candidates = [self.config.fit_max_scale]
        if box.width > 0.0:
            candidates.append(available_w / box.width)
        if box.height > 0.0:
            candidates.append(available_h / box.height)
        scale = self.clamp_scale(min(candidates))

        cx, cy = box.center
        self.transform = Transform(k=scale, x=width / 2.0 - scale * cx, y=height / 2.0 - scale * cy)
        return self.transform

    def zoom_by(self, factor: float) -> Transform:
        """Scale around the viewport center."""
        width, height = self.size
        sx, sy = width / 2.0, height / 2.0
        wx, wy = self.transform.invert(sx, sy)
        k = self.clamp_scale(self.transform.k * factor)
        self.transform = Transform(k=k, x=sx - wx * k, y=sy - wy * k)
        return self.transform

    def zoom_in(self) -> Transform:
        return self.zoom_by(self.config.zoom_step)

    def zoom_out(self) -> Transform:
        return self.zoom_by(1.0 / self.config.zoom_step)

    def pan(self, dx: float, dy: float) -> Transform:
        self.transform = Transform(k=self.transform.k, x=self.transform.x + dx, y=self.transform.y + dy)
        return self.transform

    def reset(self) -> Transform:
        self.transform = Transform()
        return self.transform
