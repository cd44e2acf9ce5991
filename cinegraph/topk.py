"""Top-K neighbor pruning over a symmetric adjacency map."""

from __future__ import annotations

from cinegraph.models import Link, pair_key
from cinegraph.similarity import Adjacency


def top_k_neighbors(neighbors: dict[str, float], k: int) -> list[tuple[str, float]]:
    if k <= 0:
        return []
    # sorted() is stable, so equal weights keep their enumeration order.
    ranked = sorted(neighbors.items(), key=lambda item: -item[1])
    return ranked[:k]


def build_top_k_links(adjacency: Adjacency, k: int = 6) -> list[Link]:
    best: dict[tuple[str, str], float] = {}
    for node_id, neighbors in adjacency.items():
        for other_id, weight in top_k_neighbors(neighbors, k):
            key = pair_key(node_id, other_id)
            if key not in best or weight > best[key]:
                best[key] = weight
    return [Link(source=a, target=b, weight=weight) for (a, b), weight in best.items()]
