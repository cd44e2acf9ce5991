"""Render frames and the bindings a front end implements to display them.

A frame is a pure snapshot of the current layout: screen-independent node
positions, the active transform, and per-element opacity derived from the type
filter. Front ends only draw frames; they never touch the simulation.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from cinegraph.models import Graph, LayoutMode, Link, NodeType
from cinegraph.viewport import Transform

COLOR_MAP: dict[NodeType, str] = {
    NodeType.MOVIE: "#38bdf8",
    NodeType.GENRE: "#a855f7",
    NodeType.PERSON: "#22c55e",
    NodeType.KEYWORD: "#f97316",
}
MOVIE_RADIUS = 10.0
ENTITY_RADIUS = 7.0
LABEL_OFFSET = (10.0, 4.0)

TYPE_FILTER_ALL = "all"


def parse_type_filter(value: str | NodeType | None) -> NodeType | None:
    """Map a filter selection to a node type; ``None`` means every type is shown."""
    if value is None or isinstance(value, NodeType):
        return value
    normalized = value.strip().lower()
    if normalized in ("", TYPE_FILTER_ALL):
        return None
    try:
        return NodeType(normalized)
    except ValueError as exc:
        choices = ", ".join([TYPE_FILTER_ALL, *(t.value for t in NodeType)])
        raise ValueError(f"Unknown type filter {value!r}; expected one of: {choices}") from exc


def render_radius(node_type: NodeType) -> float:
    return MOVIE_RADIUS if node_type == NodeType.MOVIE else ENTITY_RADIUS


def node_opacity(node_type: NodeType, type_filter: NodeType | None) -> float:
    return 1.0 if type_filter is None or node_type == type_filter else 0.15


def label_opacity(node_type: NodeType, type_filter: NodeType | None) -> float:
    return 1.0 if type_filter is None or node_type == type_filter else 0.0


def link_opacity(source_type: NodeType, target_type: NodeType, type_filter: NodeType | None) -> float:
    if type_filter is None:
        return 0.6
    return 0.6 if type_filter in (source_type, target_type) else 0.1


@dataclass(frozen=True)
class NodeGlyph:
    id: str
    label: str
    type: NodeType
    x: float
    y: float
    radius: float
    color: str
    opacity: float


@dataclass(frozen=True)
class LinkSegment:
    source: str
    target: str
    x1: float
    y1: float
    x2: float
    y2: float
    weight: float | None
    opacity: float


@dataclass(frozen=True)
class LabelGlyph:
    text: str
    x: float
    y: float
    opacity: float


@dataclass(frozen=True)
class RenderFrame:
    mode: LayoutMode
    transform: Transform
    tick: int
    alpha: float
    type_filter: NodeType | None = None
    nodes: list[NodeGlyph] = field(default_factory=list)
    links: list[LinkSegment] = field(default_factory=list)
    labels: list[LabelGlyph] = field(default_factory=list)


def build_frame(
    graph: Graph,
    links: Sequence[Link],
    mode: LayoutMode,
    transform: Transform,
    *,
    type_filter: NodeType | None = None,
    tick: int = 0,
    alpha: float = 0.0,
) -> RenderFrame:
    nodes: list[NodeGlyph] = []
    labels: list[LabelGlyph] = []
    for node in graph.nodes:
        x = node.x or 0.0
        y = node.y or 0.0
        nodes.append(
            NodeGlyph(
                id=node.id,
                label=node.label,
                type=node.type,
                x=x,
                y=y,
                radius=render_radius(node.type),
                color=COLOR_MAP[node.type],
                opacity=node_opacity(node.type, type_filter),
            )
        )
        labels.append(
            LabelGlyph(
                text=node.label,
                x=x + LABEL_OFFSET[0],
                y=y + LABEL_OFFSET[1],
                opacity=label_opacity(node.type, type_filter),
            )
        )

    segments: list[LinkSegment] = []
    for link in links:
        source = graph.node_map.get(link.source)
        target = graph.node_map.get(link.target)
        if source is None or target is None:
            continue
        segments.append(
            LinkSegment(
                source=source.id,
                target=target.id,
                x1=source.x or 0.0,
                y1=source.y or 0.0,
                x2=target.x or 0.0,
                y2=target.y or 0.0,
                weight=link.weight,
                opacity=link_opacity(source.type, target.type, type_filter),
            )
        )

    return RenderFrame(
        mode=mode,
        transform=transform,
        tick=tick,
        alpha=alpha,
        type_filter=type_filter,
        nodes=nodes,
        links=segments,
        labels=labels,
    )


class ViewBindings(Protocol):
    def render(self, frame: RenderFrame) -> None: ...

    def show_status(self, message: str) -> None: ...

    def set_link_strength_enabled(self, enabled: bool) -> None: ...


class SnapshotBindings:
    """Headless bindings that remember what a front end would have shown."""

    def __init__(self) -> None:
        self.frame: RenderFrame | None = None
        self.frames_rendered = 0
        self.statuses: list[str] = []
        self.link_strength_enabled = True

    @property
    def status(self) -> str | None:
        return self.statuses[-1] if self.statuses else None

    def render(self, frame: RenderFrame) -> None:
        self.frame = frame
        self.frames_rendered += 1

    def show_status(self, message: str) -> None:
        self.statuses.append(message)

    def set_link_strength_enabled(self, enabled: bool) -> None:
        self.link_strength_enabled = enabled
