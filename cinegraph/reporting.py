"""Snapshot bundle generation for offline layouts."""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape

from cinegraph.models import MovieDataset
from cinegraph.view import COLOR_MAP, LinkSegment, RenderFrame

_env = Environment(
    loader=PackageLoader("cinegraph", "templates"),
    autoescape=select_autoescape(["html", "j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def frame_payload(frame: RenderFrame, dataset: MovieDataset) -> dict[str, Any]:
    transform = frame.transform
    return {
        "source": dataset.source,
        "fetched_at": dataset.fetched_at,
        "mode": frame.mode.value,
        "filter": frame.type_filter.value if frame.type_filter else "all",
        "tick": frame.tick,
        "alpha": frame.alpha,
        "transform": {"k": transform.k, "x": transform.x, "y": transform.y},
        "nodes": [
            {
                "id": node.id,
                "label": node.label,
                "type": node.type.value,
                "x": node.x,
                "y": node.y,
                "opacity": node.opacity,
            }
            for node in frame.nodes
        ],
        "links": [
            {"source": link.source, "target": link.target, "weight": link.weight, "opacity": link.opacity}
            for link in frame.links
        ],
    }


def _strongest_links(links: list[LinkSegment], limit: int) -> list[LinkSegment]:
    weighted = [link for link in links if link.weight is not None]
    return sorted(weighted, key=lambda link: (-(link.weight or 0.0), link.source, link.target))[:limit]


def render_markdown_report(frame: RenderFrame, dataset: MovieDataset, *, converged: bool, top_links: int = 10) -> str:
    labels = {node.id: node.label for node in frame.nodes}
    type_counts = Counter(node.type.value for node in frame.nodes)

    lines: list[str] = []
    lines.append("# cinegraph Layout Report")
    lines.append("")
    lines.append(f"- Source: {dataset.source}")
    lines.append(f"- Fetched at: {dataset.fetched_at or 'local'}")
    lines.append(f"- Movies in dataset: {len(dataset.movies)}")
    lines.append(f"- Layout mode: {frame.mode.value}")
    lines.append(f"- Type filter: {frame.type_filter.value if frame.type_filter else 'all'}")
    lines.append(f"- Ticks: {frame.tick} ({'converged' if converged else 'stopped before convergence'})")
    lines.append(f"- Zoom: k={frame.transform.k:.3f} x={frame.transform.x:.1f} y={frame.transform.y:.1f}")
    lines.append(f"- Edges: {len(frame.links)}")
    lines.append("")

    lines.append("## Nodes by type")
    lines.append("")
    if not type_counts:
        lines.append("- none")
    for node_type, count in sorted(type_counts.items()):
        lines.append(f"- {node_type}: {count}")
    lines.append("")

    strongest = _strongest_links(frame.links, top_links)
    if strongest:
        lines.append("## Strongest links")
        lines.append("")
        for link in strongest:
            source = labels.get(link.source, link.source)
            target = labels.get(link.target, link.target)
            lines.append(f'- {link.weight:.3f} "{source}" ↔ "{target}"')
        lines.append("")

    return "\n".join(lines)


def render_html_snapshot(frame: RenderFrame, *, title: str, width: float, height: float, status: str = "") -> str:
    template = _env.get_template("graph.html.j2")
    node_types = sorted({node.type for node in frame.nodes}, key=lambda node_type: node_type.value)
    return template.render(
        title=title,
        status=status,
        width=width,
        height=height,
        frame=frame,
        legend=[(node_type.value, COLOR_MAP[node_type]) for node_type in node_types],
    )


def write_snapshot_bundle(
    frame: RenderFrame,
    dataset: MovieDataset,
    output_dir: str | Path,
    *,
    converged: bool,
    width: float,
    height: float,
    status: str = "",
) -> Path:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    (out / "graph.json").write_text(json.dumps(frame_payload(frame, dataset), indent=2), encoding="utf-8")
    (out / "layout_report.md").write_text(render_markdown_report(frame, dataset, converged=converged), encoding="utf-8")
    (out / "graph.html").write_text(
        render_html_snapshot(frame, title=f"cinegraph · {frame.mode.value}", width=width, height=height, status=status),
        encoding="utf-8",
    )
    return out
